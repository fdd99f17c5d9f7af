"""Azure identity and subscription resolution for acaupdater."""

import os
from typing import Callable, Mapping, Optional

from azure.identity import DefaultAzureCredential

from acaupdater.constants import AZ_ACCOUNT_SHOW_CMD, SUBSCRIPTION_ENV_VAR, SUBSCRIPTION_SOURCES
from acaupdater.errors import ConfigurationError, UpdaterError
from acaupdater.errors_catalog import actionable_error
from acaupdater.models import AzureContext


class IdentityResolver:
    """Builds the per-invocation credential and subscription context.

    The subscription id is looked up first, so a missing id aborts the run
    before a credential or any management client exists. With the
    ``environment`` source the ``AZURE_SUBSCRIPTION_ID`` variable wins over the
    explicit input; with the ``cli`` source the Azure CLI's current account wins
    and the explicit input is only a fallback for empty output.
    """

    def __init__(
        self,
        logger,
        command_runner=None,
        subscription_source: str = "environment",
        environ: Optional[Mapping[str, str]] = None,
        credential_factory: Callable = DefaultAzureCredential,
    ):
        if subscription_source not in SUBSCRIPTION_SOURCES:
            raise ConfigurationError(
                f"Unsupported subscription source '{subscription_source}'. "
                f"Use one of: {', '.join(SUBSCRIPTION_SOURCES)}."
            )
        self.logger = logger
        self.command_runner = command_runner
        self.subscription_source = subscription_source
        self.environ = os.environ if environ is None else environ
        self.credential_factory = credential_factory

    def resolve(self, explicit_subscription_id: Optional[str] = None) -> AzureContext:
        subscription_id, source = self.resolve_subscription_id(explicit_subscription_id)
        self.logger.debug("Using subscription %s (from %s).", subscription_id, source)

        self.logger.debug("Attempting to retrieve Azure credentials...")
        credential = self.credential_factory()
        return AzureContext(
            credential=credential,
            subscription_id=subscription_id,
            subscription_source=source,
        )

    def resolve_subscription_id(self, explicit_subscription_id: Optional[str] = None):
        explicit = (explicit_subscription_id or "").strip()

        if self.subscription_source == "cli":
            discovered = self._discover_from_cli()
            if discovered:
                return discovered, "cli"
        else:
            from_env = (self.environ.get(SUBSCRIPTION_ENV_VAR) or "").strip()
            if from_env:
                return from_env, "environment"

        if explicit:
            return explicit, "input"

        raise ConfigurationError(actionable_error("subscription_not_set"))

    def _discover_from_cli(self) -> str:
        if self.command_runner is None:
            raise ConfigurationError(
                actionable_error("subscription_cli_failed", detail="no command runner configured")
            )

        try:
            result = self.command_runner.run(AZ_ACCOUNT_SHOW_CMD, check=True)
        except UpdaterError as exc:
            raise ConfigurationError(
                actionable_error("subscription_cli_failed", detail=str(exc))
            ) from exc

        discovered = (result.stdout or "").strip()
        if not discovered:
            self.logger.warning("Azure CLI returned no subscription id; falling back to input.")
        return discovered
