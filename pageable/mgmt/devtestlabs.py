from datetime import datetime

from pageable import OpenEnum

from .models import Resource
from .models import ResourceProperties
from .service_client import ServiceClient

__all__ = [
    "DevTestLabsClient",
    "EnvironmentPermission",
    "Lab",
    "LabStorageType",
    "LabVirtualMachine",
    "PremiumDataDisk",
    "VirtualMachineCreationSource",
]


class LabStorageType(OpenEnum):
    STANDARD = "Standard"
    PREMIUM = "Premium"
    STANDARD_SSD = "StandardSSD"


class PremiumDataDisk(OpenEnum):
    DISABLED = "Disabled"
    ENABLED = "Enabled"


class EnvironmentPermission(OpenEnum):
    READER = "Reader"
    CONTRIBUTOR = "Contributor"


class VirtualMachineCreationSource(OpenEnum):
    FROM_CUSTOM_IMAGE = "FromCustomImage"
    FROM_GALLERY_IMAGE = "FromGalleryImage"
    FROM_SHARED_GALLERY_IMAGE = "FromSharedGalleryImage"


class LabProperties(ResourceProperties):
    default_storage_account: str | None = None
    default_premium_storage_account: str | None = None
    artifacts_storage_account: str | None = None
    premium_data_disk_storage_account: str | None = None
    vault_name: str | None = None
    lab_storage_type: LabStorageType | None = None
    mandatory_artifacts_resource_ids_linux: list[str] = []
    mandatory_artifacts_resource_ids_windows: list[str] = []
    created_date: datetime | None = None
    premium_data_disks: PremiumDataDisk | None = None
    environment_permission: EnvironmentPermission | None = None
    vm_creation_resource_group: str | None = None
    public_ip_id: str | None = None
    load_balancer_id: str | None = None
    network_security_group_id: str | None = None
    extended_properties: dict[str, str] | None = None
    provisioning_state: str | None = None
    unique_identifier: str | None = None


class Lab(Resource):
    properties: LabProperties | None = None


class LabVirtualMachineProperties(ResourceProperties):
    notes: str | None = None
    owner_object_id: str | None = None
    owner_user_principal_name: str | None = None
    created_by_user: str | None = None
    created_date: datetime | None = None
    compute_id: str | None = None
    custom_image_id: str | None = None
    os_type: str | None = None
    size: str | None = None
    user_name: str | None = None
    fqdn: str | None = None
    lab_subnet_name: str | None = None
    lab_virtual_network_id: str | None = None
    disallow_public_ip_address: bool | None = None
    expiration_date: datetime | None = None
    allow_claim: bool | None = None
    storage_type: str | None = None
    virtual_machine_creation_source: VirtualMachineCreationSource | None = None
    environment_id: str | None = None
    last_known_power_state: str | None = None
    provisioning_state: str | None = None
    unique_identifier: str | None = None


class LabVirtualMachine(Resource):
    properties: LabVirtualMachineProperties | None = None


class DevTestLabsClient(ServiceClient, api_version="2018-09-15"):
    """List operations of Azure DevTest Labs.

    The list operations take the optional OData query options ``expand``,
    ``filter``, ``top`` and ``orderby``.
    """

    def list_labs(
        self,
        subscription_id: str,
        expand: str | None = None,
        filter: str | None = None,
        top: int | None = None,
        orderby: str | None = None,
    ):
        return self._list(
            f"subscriptions/{subscription_id}/providers/Microsoft.DevTestLab/labs",
            Lab,
            params={
                "$expand": expand,
                "$filter": filter,
                "$top": top,
                "$orderby": orderby,
            },
        )

    def list_labs_by_resource_group(
        self,
        subscription_id: str,
        resource_group_name: str,
        expand: str | None = None,
        filter: str | None = None,
        top: int | None = None,
        orderby: str | None = None,
    ):
        return self._list(
            f"subscriptions/{subscription_id}/resourceGroups/{resource_group_name}"
            "/providers/Microsoft.DevTestLab/labs",
            Lab,
            params={
                "$expand": expand,
                "$filter": filter,
                "$top": top,
                "$orderby": orderby,
            },
        )

    def get_lab(
        self,
        subscription_id: str,
        resource_group_name: str,
        name: str,
        expand: str | None = None,
    ):
        """Returns the Lab (awaitable if the management client is async)"""
        return self._get(
            f"subscriptions/{subscription_id}/resourceGroups/{resource_group_name}"
            f"/providers/Microsoft.DevTestLab/labs/{name}",
            Lab,
            params={"$expand": expand},
        )

    def list_virtual_machines(
        self,
        subscription_id: str,
        resource_group_name: str,
        lab_name: str,
        expand: str | None = None,
        filter: str | None = None,
        top: int | None = None,
        orderby: str | None = None,
    ):
        return self._list(
            f"subscriptions/{subscription_id}/resourceGroups/{resource_group_name}"
            f"/providers/Microsoft.DevTestLab/labs/{lab_name}/virtualmachines",
            LabVirtualMachine,
            params={
                "$expand": expand,
                "$filter": filter,
                "$top": top,
                "$orderby": orderby,
            },
        )
