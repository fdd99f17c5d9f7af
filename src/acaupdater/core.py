import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Mapping, Optional

from azure.identity import DefaultAzureCredential
from azure.mgmt.appcontainers import ContainerAppsAPIClient
from azure.mgmt.resource import ResourceManagementClient
from rich.console import Console
from rich.markup import escape

from .constants import AZ_CLI_TIMEOUT, DEFAULT_POLLING_INTERVAL
from .errors import ConfigurationError, UpdaterError
from .errors_catalog import actionable_error
from .models import AzureContext, InvocationParameters, Outcome
from .services.command_runner import CommandRunner
from .services.container_app import ContainerAppService
from .services.existence import ExistenceValidator
from .services.identity import IdentityResolver
from .services.operation import OperationPoller
from .services.reporter import ResultReporter

console = Console(stderr=True)
logger = logging.getLogger("acaupdater")


class ContainerAppImageUpdater:
    """Replaces one container's image in an Azure Container App and waits for it."""

    def __init__(
        self,
        app_name: Optional[str],
        container_name: Optional[str],
        resource_group_name: Optional[str],
        image: Optional[str],
        subscription_id: Optional[str] = None,
        subscription_source: str = "environment",
        polling_interval: float = DEFAULT_POLLING_INTERVAL,
        preserve_containers: bool = False,
        environ: Optional[Mapping[str, str]] = None,
        credential_factory: Callable = DefaultAzureCredential,
        resource_client_factory: Callable = ResourceManagementClient,
        container_apps_client_factory: Callable = ContainerAppsAPIClient,
        reporter: Optional[ResultReporter] = None,
    ):
        self.params = InvocationParameters(
            app_name=app_name,
            container_name=container_name,
            resource_group_name=resource_group_name,
            image=image,
            subscription_id=subscription_id,
        )
        if polling_interval <= 0:
            raise ConfigurationError("--polling-interval must be a positive number of seconds.")

        self.polling_interval = polling_interval
        self.preserve_containers = preserve_containers
        self.environ = os.environ if environ is None else environ
        self.resource_client_factory = resource_client_factory
        self.container_apps_client_factory = container_apps_client_factory

        self.command_runner = CommandRunner(logger=logger, default_timeout=AZ_CLI_TIMEOUT)
        self.identity_resolver = IdentityResolver(
            logger=logger,
            command_runner=self.command_runner,
            subscription_source=subscription_source,
            environ=self.environ,
            credential_factory=credential_factory,
        )
        self.operation_poller = OperationPoller(
            logger=logger,
            console=console,
            status_interval=self.polling_interval,
        )
        self.reporter = reporter or ResultReporter(logger=logger, environ=self.environ)

        self.context: Optional[AzureContext] = None
        self.resource_client = None
        self.container_apps_client = None
        self.existence_validator: Optional[ExistenceValidator] = None
        self.container_app_service: Optional[ContainerAppService] = None
        self.current_step_name: Optional[str] = None

    def _run_step(self, name: str, callback, *args, **kwargs):
        self.current_step_name = name
        logger.debug("Starting step: %s", name)
        started = time.monotonic()

        try:
            result = callback(*args, **kwargs)
        except Exception:
            logger.debug("Step %s failed after %.2fs", name, time.monotonic() - started)
            raise

        logger.debug("Step %s finished in %.2fs", name, time.monotonic() - started)
        self.current_step_name = None
        return result

    def validate_inputs(self):
        missing = self.params.missing_fields()
        if missing:
            raise ConfigurationError(actionable_error("missing_input", names=", ".join(missing)))
        logger.debug("Provided image through input: %s", self.params.image)

    def resolve_identity(self) -> AzureContext:
        self.context = self.identity_resolver.resolve(self.params.subscription_id)
        return self.context

    def build_clients(self, context: AzureContext):
        self.resource_client = self.resource_client_factory(
            context.credential, context.subscription_id
        )
        self.container_apps_client = self.container_apps_client_factory(
            context.credential, context.subscription_id
        )
        self.existence_validator = ExistenceValidator(self.resource_client, logger=logger)
        self.container_app_service = ContainerAppService(self.container_apps_client, logger=logger)

    def validate_and_read(self):
        """Run both existence checks and the snapshot read, then join them.

        The three calls share nothing but the read-only credential, so they run
        side by side. Nothing is mutated until all of them have returned; the
        first failure in the order resource group, app, snapshot is raised.
        """
        console.print("[blue]Validating target resources...[/blue]")
        params = self.params

        with ThreadPoolExecutor(max_workers=3, thread_name_prefix="acaupdater") as executor:
            futures = [
                executor.submit(
                    self.existence_validator.ensure_resource_group,
                    params.resource_group_name,
                ),
                executor.submit(
                    self.existence_validator.ensure_container_app,
                    params.resource_group_name,
                    params.app_name,
                ),
                executor.submit(
                    self.container_app_service.get_snapshot,
                    params.resource_group_name,
                    params.app_name,
                ),
            ]

        for future in futures:
            error = future.exception()
            if error is not None:
                raise error

        console.print("[green]Resource group and container app exist.[/green]")
        return futures[-1].result()

    def build_update_payload(self, snapshot):
        return self.container_app_service.build_update_payload(
            snapshot,
            app_name=self.params.app_name,
            container_name=self.params.container_name,
            image=self.params.image,
            preserve_containers=self.preserve_containers,
        )

    def submit_update(self, payload):
        console.print(
            f"[blue]Updating container {self.params.container_name} of "
            f"{self.params.app_name} to {escape(self.params.image)}...[/blue]",
            highlight=False,
        )
        return self.container_app_service.submit_update(
            self.params.resource_group_name,
            self.params.app_name,
            payload,
            polling_interval=self.polling_interval,
        )

    def wait_for_update(self, poller) -> Outcome:
        return self.operation_poller.wait(self.params.app_name, poller)

    def cleanup(self):
        for client in (self.resource_client, self.container_apps_client):
            if client is None:
                continue
            try:
                client.close()
            except Exception as exc:
                logger.warning("Could not close %s: %s", client.__class__.__name__, exc)

        credential = self.context.credential if self.context else None
        close = getattr(credential, "close", None)
        if callable(close):
            try:
                close()
            except Exception as exc:
                logger.warning("Could not close the Azure credential: %s", exc)

    def run(self) -> int:
        try:
            logger.info("Starting container app image update...")

            self._run_step("validate_inputs", self.validate_inputs)
            context = self._run_step("resolve_identity", self.resolve_identity)
            self._run_step("build_clients", self.build_clients, context)

            snapshot = self._run_step("validate_and_read", self.validate_and_read)
            payload = self._run_step("build_update_payload", self.build_update_payload, snapshot)
            poller = self._run_step("submit_update", self.submit_update, payload)
            outcome = self._run_step("wait_for_update", self.wait_for_update, poller)

            self._run_step("report_outputs", self.reporter.report, outcome)
            console.print(
                f"[green]Container app {self.params.app_name} updated. Status: {outcome.status}[/green]"
            )
            logger.info("Container app %s updated. Status: %s", self.params.app_name, outcome.status)
            return 0

        except KeyboardInterrupt:
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            logger.info("Operation cancelled by user")
            self.reporter.fail("Operation cancelled by user.")
            return 1
        except UpdaterError as exc:
            console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}", highlight=False)
            logger.error("%s failed: %s", self.current_step_name or "run", exc)
            self.reporter.fail(str(exc))
            return 1
        except Exception as exc:
            console.print(f"[bold red]Unexpected error:[/bold red] {escape(str(exc))}", highlight=False)
            logger.exception("Unexpected error")
            self.reporter.fail(str(exc))
            return 1
        finally:
            self.cleanup()
