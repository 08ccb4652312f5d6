from datetime import datetime

from pageable import OpenEnum
from pageable import ValueObject

from .models import Resource
from .models import ResourceProperties
from .models import SubResource
from .service_client import ServiceClient

__all__ = [
    "DataFactoryClient",
    "DatasetResource",
    "Factory",
    "FactoryIdentityType",
    "IntegrationRuntimeResource",
    "IntegrationRuntimeType",
    "LinkedServiceResource",
    "Operation",
    "PipelineResource",
    "TriggerResource",
    "TriggerRuntimeState",
]


class FactoryIdentityType(OpenEnum):
    SYSTEM_ASSIGNED = "SystemAssigned"


class IntegrationRuntimeType(OpenEnum):
    MANAGED = "Managed"
    SELF_HOSTED = "SelfHosted"


class TriggerRuntimeState(OpenEnum):
    STARTED = "Started"
    STOPPED = "Stopped"
    DISABLED = "Disabled"


class OperationDisplay(ValueObject):
    description: str | None = None
    provider: str | None = None
    resource: str | None = None
    operation: str | None = None


class Operation(ValueObject):
    name: str | None = None
    origin: str | None = None
    display: OperationDisplay | None = None


class FactoryIdentity(ValueObject):
    type: FactoryIdentityType
    principal_id: str | None = None
    tenant_id: str | None = None


class FactoryProperties(ResourceProperties):
    provisioning_state: str | None = None
    create_time: datetime | None = None
    version: str | None = None


class Factory(Resource):
    identity: FactoryIdentity | None = None
    properties: FactoryProperties | None = None


class Pipeline(ResourceProperties):
    description: str | None = None
    concurrency: int | None = None


class PipelineResource(SubResource):
    properties: Pipeline


class Dataset(ResourceProperties):
    type: str
    description: str | None = None


class DatasetResource(SubResource):
    properties: Dataset


class LinkedService(ResourceProperties):
    type: str
    description: str | None = None


class LinkedServiceResource(SubResource):
    properties: LinkedService


class Trigger(ResourceProperties):
    type: str
    description: str | None = None
    runtime_state: TriggerRuntimeState | None = None


class TriggerResource(SubResource):
    properties: Trigger


class IntegrationRuntime(ResourceProperties):
    type: IntegrationRuntimeType
    description: str | None = None


class IntegrationRuntimeResource(SubResource):
    properties: IntegrationRuntime


class DataFactoryClient(ServiceClient, api_version="2017-09-01-preview"):
    """List operations of Azure Data Factory"""

    def list_operations(self):
        return self._list("providers/Microsoft.DataFactory/operations", Operation)

    def list_factories(self, subscription_id: str):
        return self._list(
            f"subscriptions/{subscription_id}"
            "/providers/Microsoft.DataFactory/factories",
            Factory,
        )

    def list_factories_by_resource_group(
        self, subscription_id: str, resource_group_name: str
    ):
        return self._list(
            f"subscriptions/{subscription_id}/resourceGroups/{resource_group_name}"
            "/providers/Microsoft.DataFactory/factories",
            Factory,
        )

    def _factory_path(
        self, subscription_id: str, resource_group_name: str, factory_name: str
    ) -> str:
        return (
            f"subscriptions/{subscription_id}/resourceGroups/{resource_group_name}"
            f"/providers/Microsoft.DataFactory/factories/{factory_name}"
        )

    def get_factory(
        self, subscription_id: str, resource_group_name: str, factory_name: str
    ):
        """Returns the Factory (awaitable if the management client is async)"""
        return self._get(
            self._factory_path(subscription_id, resource_group_name, factory_name),
            Factory,
        )

    def list_pipelines(
        self, subscription_id: str, resource_group_name: str, factory_name: str
    ):
        path = self._factory_path(subscription_id, resource_group_name, factory_name)
        return self._list(f"{path}/pipelines", PipelineResource)

    def list_datasets(
        self, subscription_id: str, resource_group_name: str, factory_name: str
    ):
        path = self._factory_path(subscription_id, resource_group_name, factory_name)
        return self._list(f"{path}/datasets", DatasetResource)

    def list_linked_services(
        self, subscription_id: str, resource_group_name: str, factory_name: str
    ):
        path = self._factory_path(subscription_id, resource_group_name, factory_name)
        return self._list(f"{path}/linkedservices", LinkedServiceResource)

    def list_triggers(
        self, subscription_id: str, resource_group_name: str, factory_name: str
    ):
        path = self._factory_path(subscription_id, resource_group_name, factory_name)
        return self._list(f"{path}/triggers", TriggerResource)

    def list_integration_runtimes(
        self, subscription_id: str, resource_group_name: str, factory_name: str
    ):
        path = self._factory_path(subscription_id, resource_group_name, factory_name)
        return self._list(f"{path}/integrationRuntimes", IntegrationRuntimeResource)
