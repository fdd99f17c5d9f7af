import pytest
from azure.core.exceptions import HttpResponseError, ResourceNotFoundError
from azure.mgmt.appcontainers.models import Container, ContainerApp, Template

from acaupdater.errors import NotFoundError, RemoteError
from acaupdater.services.container_app import ContainerAppService


class RecordingLogger:
    def __init__(self):
        self.warnings = []

    def debug(self, *_args, **_kwargs):
        return None

    def warning(self, message, *args):
        self.warnings.append(message % args)


class FakeContainerApps:
    def __init__(self, snapshot=None, get_error=None, update_error=None):
        self.snapshot = snapshot
        self.get_error = get_error
        self.update_error = update_error
        self.updates = []

    def get(self, resource_group, app_name):
        if self.get_error is not None:
            raise self.get_error
        return self.snapshot

    def begin_update(self, resource_group, app_name, envelope, **kwargs):
        if self.update_error is not None:
            raise self.update_error
        self.updates.append((resource_group, app_name, envelope, kwargs))
        return "poller"


class FakeClient:
    def __init__(self, container_apps):
        self.container_apps = container_apps


def _snapshot():
    return ContainerApp(
        location="eastus",
        template=Template(
            containers=[
                Container(name="main", image="registry/app:v1", command=["serve"]),
                Container(name="sidecar", image="registry/sidecar:v1"),
            ]
        ),
    )


def test_get_snapshot_returns_current_app():
    snapshot = _snapshot()
    service = ContainerAppService(FakeClient(FakeContainerApps(snapshot)), logger=RecordingLogger())

    assert service.get_snapshot("rg1", "web") is snapshot


def test_get_snapshot_not_found_names_app():
    apps = FakeContainerApps(get_error=ResourceNotFoundError(message="not found"))
    service = ContainerAppService(FakeClient(apps), logger=RecordingLogger())

    with pytest.raises(NotFoundError, match="App web does not exist in resource group rg1"):
        service.get_snapshot("rg1", "web")


def test_get_snapshot_other_failure_is_remote_error():
    apps = FakeContainerApps(get_error=HttpResponseError(message="throttled"))
    service = ContainerAppService(FakeClient(apps), logger=RecordingLogger())

    with pytest.raises(RemoteError, match="throttled"):
        service.get_snapshot("rg1", "web")


def test_single_container_payload_keeps_location_and_only_target():
    logger = RecordingLogger()
    service = ContainerAppService(FakeClient(FakeContainerApps()), logger=logger)

    payload = service.build_update_payload(_snapshot(), "web", "main", "registry/app:v2")

    assert payload.as_dict() == {
        "location": "eastus",
        "template": {"containers": [{"name": "main", "image": "registry/app:v2"}]},
    }
    assert any("sidecar" in warning for warning in logger.warnings)


def test_preserve_containers_replaces_only_matching_entry():
    snapshot = _snapshot()
    service = ContainerAppService(FakeClient(FakeContainerApps()), logger=RecordingLogger())

    payload = service.build_update_payload(
        snapshot,
        "web",
        "main",
        "registry/app:v2",
        preserve_containers=True,
    )

    containers = payload.template.containers
    assert payload.location == "eastus"
    assert [(c.name, c.image) for c in containers] == [
        ("main", "registry/app:v2"),
        ("sidecar", "registry/sidecar:v1"),
    ]
    assert containers[0].command == ["serve"]
    assert snapshot.template.containers[0].image == "registry/app:v1"


def test_preserve_containers_requires_existing_target():
    service = ContainerAppService(FakeClient(FakeContainerApps()), logger=RecordingLogger())

    with pytest.raises(NotFoundError, match="Container worker is not part of app web"):
        service.build_update_payload(
            _snapshot(),
            "web",
            "worker",
            "registry/worker:v2",
            preserve_containers=True,
        )


def test_snapshot_without_location_is_rejected():
    service = ContainerAppService(FakeClient(FakeContainerApps()), logger=RecordingLogger())

    with pytest.raises(RemoteError, match="without a location"):
        service.build_update_payload(ContainerApp(location=None), "web", "main", "registry/app:v2")


def test_submit_update_passes_polling_interval_and_returns_poller():
    apps = FakeContainerApps()
    service = ContainerAppService(FakeClient(apps), logger=RecordingLogger())
    payload = ContainerApp(location="eastus")

    poller = service.submit_update("rg1", "web", payload, polling_interval=5)

    assert poller == "poller"
    assert apps.updates == [("rg1", "web", payload, {"polling_interval": 5})]


def test_submit_update_rejection_is_remote_error():
    apps = FakeContainerApps(update_error=HttpResponseError(message="ScopeLocked"))
    service = ContainerAppService(FakeClient(apps), logger=RecordingLogger())

    with pytest.raises(RemoteError, match="ScopeLocked"):
        service.submit_update("rg1", "web", ContainerApp(location="eastus"))
