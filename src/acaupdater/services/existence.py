"""Preflight existence checks for acaupdater."""

from azure.core.exceptions import AzureError

from acaupdater.constants import (
    CONTAINER_APP_API_VERSION,
    CONTAINER_APP_PROVIDER,
    CONTAINER_APP_RESOURCE_TYPE,
)
from acaupdater.errors import NotFoundError
from acaupdater.errors_catalog import actionable_error

from .azure_errors import remote_error


class ExistenceValidator:
    """Confirms the target resource group and container app exist."""

    def __init__(self, resource_client, logger):
        self.resource_client = resource_client
        self.logger = logger

    def ensure_resource_group(self, resource_group: str):
        try:
            exists = self.resource_client.resource_groups.check_existence(resource_group)
        except AzureError as exc:
            raise remote_error(f"checking resource group {resource_group}", exc) from exc

        if not exists:
            raise NotFoundError(
                actionable_error("resource_group_not_found", resource_group=resource_group)
            )
        self.logger.debug("Resource group %s exists.", resource_group)

    def ensure_container_app(self, resource_group: str, app_name: str):
        try:
            exists = self.resource_client.resources.check_existence(
                resource_group,
                CONTAINER_APP_PROVIDER,
                "",
                CONTAINER_APP_RESOURCE_TYPE,
                app_name,
                CONTAINER_APP_API_VERSION,
            )
        except AzureError as exc:
            raise remote_error(f"checking container app {app_name}", exc) from exc

        if not exists:
            raise NotFoundError(
                actionable_error(
                    "container_app_not_found",
                    app_name=app_name,
                    resource_group=resource_group,
                )
            )
        self.logger.debug("Container app %s exists in %s.", app_name, resource_group)
