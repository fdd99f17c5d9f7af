"""Container app read and update operations for acaupdater."""

import copy
from typing import List, Optional

from azure.core.exceptions import AzureError, ResourceNotFoundError
from azure.mgmt.appcontainers.models import Container, ContainerApp, Template

from acaupdater.errors import NotFoundError, RemoteError
from acaupdater.errors_catalog import actionable_error

from .azure_errors import remote_error


class ContainerAppService:
    """Reads the current container app and submits partial updates."""

    def __init__(self, container_apps_client, logger):
        self.client = container_apps_client
        self.logger = logger

    def get_snapshot(self, resource_group: str, app_name: str) -> ContainerApp:
        try:
            snapshot = self.client.container_apps.get(resource_group, app_name)
        except ResourceNotFoundError as exc:
            raise NotFoundError(
                actionable_error(
                    "container_app_not_found",
                    app_name=app_name,
                    resource_group=resource_group,
                )
            ) from exc
        except AzureError as exc:
            raise remote_error(f"reading container app {app_name}", exc) from exc

        self.logger.debug(
            "Fetched container app %s in %s with containers: %s",
            app_name,
            snapshot.location,
            ", ".join(self.container_names(snapshot)) or "<none>",
        )
        return snapshot

    @staticmethod
    def container_names(snapshot: ContainerApp) -> List[str]:
        template = snapshot.template
        if template is None or not template.containers:
            return []
        return [container.name for container in template.containers]

    def build_update_payload(
        self,
        snapshot: ContainerApp,
        app_name: str,
        container_name: str,
        image: str,
        preserve_containers: bool = False,
    ) -> ContainerApp:
        """Build the partial envelope sent to ``begin_update``.

        The envelope carries the snapshot's location unchanged. By default the
        template holds only the target container; with ``preserve_containers``
        it repeats every existing container in order and swaps the image on the
        matching entry only.
        """
        if not snapshot.location:
            raise RemoteError(f"Container app {app_name} was returned without a location.")

        existing = self.container_names(snapshot)

        if preserve_containers:
            containers = self._replace_image(snapshot, app_name, container_name, image)
        else:
            siblings = [name for name in existing if name != container_name]
            if siblings:
                self.logger.warning(
                    "Container app %s also runs %s; only %s is sent in the update.",
                    app_name,
                    ", ".join(siblings),
                    container_name,
                )
            containers = [Container(name=container_name, image=image)]

        return ContainerApp(location=snapshot.location, template=Template(containers=containers))

    def _replace_image(
        self,
        snapshot: ContainerApp,
        app_name: str,
        container_name: str,
        image: str,
    ) -> List[Container]:
        existing = self.container_names(snapshot)
        if container_name not in existing:
            raise NotFoundError(
                actionable_error(
                    "container_not_found",
                    container_name=container_name,
                    app_name=app_name,
                    available=", ".join(existing) or "none",
                )
            )

        containers = []
        for container in snapshot.template.containers:
            updated = copy.deepcopy(container)
            if updated.name == container_name:
                updated.image = image
            containers.append(updated)
        return containers

    def submit_update(
        self,
        resource_group: str,
        app_name: str,
        payload: ContainerApp,
        polling_interval: Optional[float] = None,
    ):
        kwargs = {}
        if polling_interval is not None:
            kwargs["polling_interval"] = polling_interval

        try:
            return self.client.container_apps.begin_update(
                resource_group,
                app_name,
                payload,
                **kwargs,
            )
        except AzureError as exc:
            raise remote_error(f"submitting the update for {app_name}", exc) from exc
