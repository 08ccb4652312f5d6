# (c) Nelen & Schuurmans

import logging
from http import HTTPStatus
from typing import TypeVar

from pydantic import BaseModel

from pageable import DoesNotExist
from pageable import Json
from pageable import Pager
from pageable import SyncPager
from pageable.api_client import ApiException
from pageable.api_client import ApiProvider
from pageable.api_client import NextLinkFetcher
from pageable.api_client import parse_model
from pageable.api_client import SyncApiProvider
from pageable.api_client import SyncNextLinkFetcher
from pageable.oauth2 import CCTokenGateway
from pageable.oauth2 import SyncCCTokenGateway

from .settings import ClientSettings

__all__ = ["API_VERSION", "ManagementClient", "SyncManagementClient"]

logger = logging.getLogger(__name__)

API_VERSION = "api-version"

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


class ManagementClient:
    """Entry point for the management plane of one cloud endpoint.

    Args:
        settings: Endpoint, scopes and transport settings.
        credential: Supplies the bearer token. Without one, requests are sent
            without Authorization header.

    The client creates the pagers of the service clients. It holds one
    connection pool; use it as an async context manager or call
    ``connect()`` / ``disconnect()``. Disconnecting also closes the session of
    the credential.
    """

    def __init__(
        self, settings: ClientSettings, credential: CCTokenGateway | None = None
    ):
        self.settings = settings
        self.credential = credential
        self.provider = ApiProvider(
            url=settings.endpoint,
            headers_factory=self._headers if credential is not None else None,
            retries=settings.retries,
            backoff_factor=settings.backoff_factor,
        )

    async def _headers(self) -> dict[str, str]:
        assert self.credential is not None
        return await self.credential.fetch_headers(self.settings.get_scopes())

    async def connect(self) -> None:
        await self.provider.connect()

    async def disconnect(self) -> None:
        await self.provider.disconnect()
        if self.credential is not None:
            await self.credential.disconnect()

    async def __aenter__(self) -> "ManagementClient":
        await self.connect()
        return self

    async def __aexit__(self, *args) -> None:
        await self.disconnect()

    def pager(
        self,
        path: str,
        item_type: type[T],
        api_version: str,
        params: Json | None = None,
    ) -> Pager[T]:
        """Lazily list a collection; nothing is requested until iteration starts."""
        logger.debug(f"listing {path} (api-version {api_version})")
        return Pager(
            NextLinkFetcher(
                self.provider,
                path,
                item_type,
                params=params,
                fixed_params={API_VERSION: api_version},
                timeout=self.settings.timeout,
            )
        )

    async def get(
        self,
        path: str,
        model: type[M],
        api_version: str,
        params: Json | None = None,
    ) -> M:
        try:
            body = await self.provider.request(
                "GET",
                path,
                params={**(params or {}), API_VERSION: api_version},
                timeout=self.settings.timeout,
            )
        except ApiException as e:
            if e.status == HTTPStatus.NOT_FOUND:
                raise DoesNotExist(model.__name__, path)
            raise e
        return parse_model(model, body)


# This is a copy-paste of ManagementClient, with all the async / await removed


class SyncManagementClient:
    def __init__(
        self, settings: ClientSettings, credential: SyncCCTokenGateway | None = None
    ):
        self.settings = settings
        self.credential = credential
        self.provider = SyncApiProvider(
            url=settings.endpoint,
            headers_factory=self._headers if credential is not None else None,
            retries=settings.retries,
            backoff_factor=settings.backoff_factor,
        )

    def _headers(self) -> dict[str, str]:
        assert self.credential is not None
        return self.credential.fetch_headers(self.settings.get_scopes())

    def connect(self) -> None:
        self.provider.connect()

    def disconnect(self) -> None:
        self.provider.disconnect()
        if self.credential is not None:
            self.credential.disconnect()

    def __enter__(self) -> "SyncManagementClient":
        self.connect()
        return self

    def __exit__(self, *args) -> None:
        self.disconnect()

    def pager(
        self,
        path: str,
        item_type: type[T],
        api_version: str,
        params: Json | None = None,
    ) -> SyncPager[T]:
        logger.debug(f"listing {path} (api-version {api_version})")
        return SyncPager(
            SyncNextLinkFetcher(
                self.provider,
                path,
                item_type,
                params=params,
                fixed_params={API_VERSION: api_version},
                timeout=self.settings.timeout,
            )
        )

    def get(
        self,
        path: str,
        model: type[M],
        api_version: str,
        params: Json | None = None,
    ) -> M:
        try:
            body = self.provider.request(
                "GET",
                path,
                params={**(params or {}), API_VERSION: api_version},
                timeout=self.settings.timeout,
            )
        except ApiException as e:
            if e.status == HTTPStatus.NOT_FOUND:
                raise DoesNotExist(model.__name__, path)
            raise e
        return parse_model(model, body)
