from typing import Any
from typing import ClassVar
from typing import TypeVar

import inject

from pageable import Json

from .client import ManagementClient
from .client import SyncManagementClient

__all__ = ["ServiceClient"]

T = TypeVar("T")


def drop_none(params: Json | None) -> Json | None:
    result = {k: v for (k, v) in (params or {}).items() if v is not None}
    return result or None


class ServiceClient:
    """Base class for the typed operations of one service and api-version.

    Subclasses declare their api-version as class keyword::

        class LabsClient(ServiceClient, api_version="2018-09-15"):
            ...

    The management client is the one given to the constructor or else the
    ``client_type`` instance configured with ``inject``. A subclass that sets
    ``client_type = SyncManagementClient`` gives blocking pagers.
    """

    api_version: ClassVar[str]
    client_type: ClassVar[type] = ManagementClient

    def __init__(
        self, client_override: ManagementClient | SyncManagementClient | None = None
    ):
        self.client_override = client_override

    def __init_subclass__(cls, api_version: str | None = None) -> None:
        if api_version is not None:
            cls.api_version = api_version
        super().__init_subclass__()

    @property
    def client(self) -> Any:
        return self.client_override or inject.instance(self.client_type)

    def _list(self, path: str, item_type: type[T], params: Json | None = None):
        assert not path.startswith("/")
        return self.client.pager(
            path, item_type, self.api_version, params=drop_none(params)
        )

    def _get(self, path: str, model: type[T], params: Json | None = None):
        assert not path.startswith("/")
        return self.client.get(
            path, model, self.api_version, params=drop_none(params)
        )
