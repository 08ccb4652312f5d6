from datetime import datetime

from pydantic import Field

from pageable import OpenEnum

from .models import ResourceProperties
from .models import SubResource
from .service_client import ServiceClient

__all__ = [
    "DiscoveryStatus",
    "HyperVMachine",
    "MigrateProjectsClient",
    "OffAzureClient",
    "Project",
    "ProjectProvisioningState",
    "VMwareMachine",
]


class DiscoveryStatus(OpenEnum):
    UNKNOWN = "Unknown"
    NOT_STARTED = "NotStarted"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"


class ProjectProvisioningState(OpenEnum):
    ACCEPTED = "Accepted"
    CREATING = "Creating"
    DELETING = "Deleting"
    FAILED = "Failed"
    MOVING = "Moving"
    SUCCEEDED = "Succeeded"


class ProjectProperties(ResourceProperties):
    created_timestamp: datetime | None = None
    updated_timestamp: datetime | None = None
    discovery_status: DiscoveryStatus | None = None
    customer_workspace_id: str | None = None
    customer_workspace_location: str | None = None
    last_discovery_timestamp: datetime | None = None
    last_discovery_session_id: str | None = None
    number_of_groups: int | None = None
    number_of_machines: int | None = None
    number_of_assessments: int | None = None
    last_assessment_timestamp: datetime | None = None
    provisioning_state: ProjectProvisioningState | None = None


class Project(SubResource):
    # Migrate spells it 'eTag'
    e_tag: str | None = None
    location: str | None = None
    tags: dict[str, str] | None = None
    properties: ProjectProperties | None = None


class HyperVMachineProperties(ResourceProperties):
    display_name: str | None = None
    host_fqdn: str | None = None
    host_id: str | None = None
    cluster_fqdn: str | None = None
    cluster_id: str | None = None
    generation: int | None = None
    version: str | None = None
    max_memory_mb: int | None = Field(default=None, alias="maxMemoryMB")
    allocated_memory_in_mb: float | None = Field(
        default=None, alias="allocatedMemoryInMB"
    )
    number_of_processor_core: int | None = None
    firmware: str | None = None
    is_dynamic_memory_enabled: bool | None = None
    power_status: str | None = None
    bios_guid: str | None = None
    vm_fqdn: str | None = None


class HyperVMachine(SubResource):
    properties: HyperVMachineProperties | None = None


class VMwareMachineProperties(ResourceProperties):
    display_name: str | None = None
    data_center_scope: str | None = None
    firmware: str | None = None
    description: str | None = None
    v_center_fqdn: str | None = Field(default=None, alias="vCenterFQDN")
    v_center_id: str | None = None
    host_name: str | None = None
    host_power_state: str | None = None
    host_version: str | None = None
    max_snapshots: int | None = None
    allocated_memory_in_mb: float | None = Field(
        default=None, alias="allocatedMemoryInMB"
    )
    number_of_processor_core: int | None = None
    power_status: str | None = None
    bios_guid: str | None = None
    vm_fqdn: str | None = None


class VMwareMachine(SubResource):
    properties: VMwareMachineProperties | None = None


class MigrateProjectsClient(ServiceClient, api_version="2018-02-02"):
    """Azure Migrate projects. The service returns all projects in one page."""

    def list_projects(self, subscription_id: str):
        return self._list(
            f"subscriptions/{subscription_id}/providers/Microsoft.Migrate/projects",
            Project,
        )

    def list_projects_by_resource_group(
        self, subscription_id: str, resource_group_name: str
    ):
        return self._list(
            f"subscriptions/{subscription_id}/resourcegroups/{resource_group_name}"
            "/providers/Microsoft.Migrate/projects",
            Project,
        )


class OffAzureClient(ServiceClient, api_version="2020-01-01"):
    """Machines discovered by the Azure Migrate appliances of a site.

    The query options go on the first request only; the service encodes its
    own continuationToken in the next links.
    """

    def _list_machines(
        self,
        subscription_id: str,
        resource_group_name: str,
        site_kind: str,
        site_name: str,
        item_type: type,
        filter: str | None,
        top: int | None,
        continuation_token: str | None,
        total_record_count: int | None,
    ):
        return self._list(
            f"subscriptions/{subscription_id}/resourceGroups/{resource_group_name}"
            f"/providers/Microsoft.OffAzure/{site_kind}/{site_name}/machines",
            item_type,
            params={
                "$filter": filter,
                "$top": top,
                "continuationToken": continuation_token,
                "totalRecordCount": total_record_count,
            },
        )

    def list_hyperv_machines(
        self,
        subscription_id: str,
        resource_group_name: str,
        site_name: str,
        filter: str | None = None,
        top: int | None = None,
        continuation_token: str | None = None,
        total_record_count: int | None = None,
    ):
        return self._list_machines(
            subscription_id,
            resource_group_name,
            "HyperVSites",
            site_name,
            HyperVMachine,
            filter,
            top,
            continuation_token,
            total_record_count,
        )

    def list_vmware_machines(
        self,
        subscription_id: str,
        resource_group_name: str,
        site_name: str,
        filter: str | None = None,
        top: int | None = None,
        continuation_token: str | None = None,
        total_record_count: int | None = None,
    ):
        return self._list_machines(
            subscription_id,
            resource_group_name,
            "VMwareSites",
            site_name,
            VMwareMachine,
            filter,
            top,
            continuation_token,
            total_record_count,
        )
