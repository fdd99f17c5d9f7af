"""Long-running operation polling for acaupdater."""

from azure.core.exceptions import AzureError

from acaupdater.constants import DEFAULT_POLLING_INTERVAL, FAILED_STATES
from acaupdater.errors import OperationFailedError, RemoteError
from acaupdater.errors_catalog import actionable_error
from acaupdater.models import Outcome

from .azure_errors import describe


class OperationPoller:
    """Drives an update poller to a terminal state and captures the result."""

    def __init__(self, logger, console, status_interval: float = DEFAULT_POLLING_INTERVAL):
        self.logger = logger
        self.console = console
        self.status_interval = status_interval

    def wait(self, app_name: str, poller) -> Outcome:
        status = poller.status()
        self.logger.debug("Container app %s is being updated. Status: %s", app_name, status)
        self.console.print(f"[yellow]Waiting for container app {app_name} to finish updating...[/yellow]")

        try:
            while not poller.done():
                poller.wait(timeout=self.status_interval)
                current = poller.status()
                if current != status:
                    self.logger.info("Container app %s status: %s", app_name, current)
                    status = current
            result = poller.result()
        except AzureError as exc:
            raise OperationFailedError(
                actionable_error(
                    "update_failed",
                    app_name=app_name,
                    status=self._failed_status(poller),
                    reason=describe(exc),
                )
            ) from exc

        status = poller.status()
        if status in FAILED_STATES:
            raise OperationFailedError(
                actionable_error(
                    "update_failed",
                    app_name=app_name,
                    status=status,
                    reason="the operation reported a non-success terminal state",
                )
            )

        if result is None:
            raise RemoteError(actionable_error("update_result_missing", app_name=app_name))

        self.logger.debug("Container app %s updated successfully.", app_name)
        return Outcome(status=status, container_app=result.as_dict())

    @staticmethod
    def _failed_status(poller) -> str:
        status = poller.status()
        return status if status in FAILED_STATES else "Failed"
