import base64
import json
import logging
import time
from collections.abc import Sequence
from functools import lru_cache

from aiohttp import BasicAuth
from async_lru import alru_cache
from pydantic import AnyHttpUrl
from pydantic import BaseModel

from pageable.api_client import ApiProvider
from pageable.api_client import SyncApiProvider

__all__ = ["CCTokenGateway", "SyncCCTokenGateway", "OAuth2CCSettings", "join_scopes"]

logger = logging.getLogger(__name__)

REFRESH_TIME_DELTA = 5 * 60  # in seconds


def decode_jwt(token):
    """Decode a JWT without checking its signature"""
    # JWT consists of {header}.{payload}.{signature}
    _, payload, _ = token.split(".")
    # JWT should be padded with = (base64.b64decode expects this)
    payload += "=" * (-len(payload) % 4)
    return json.loads(base64.urlsafe_b64decode(payload))


def is_token_usable(token: str, leeway: int) -> bool:
    """Determine whether the token has expired"""
    try:
        claims = decode_jwt(token)
    except Exception:
        return False

    exp = claims["exp"]
    refresh_on = exp - leeway
    return refresh_on >= int(time.time())


def get_auth_headers(client_id: str, client_secret: str) -> dict[str, str]:
    return {"Authorization": BasicAuth(client_id, client_secret).encode()}


def join_scopes(scopes: Sequence[str] | str) -> str:
    if isinstance(scopes, str):
        return scopes
    return " ".join(scopes)


class OAuth2CCSettings(BaseModel):
    token_url: AnyHttpUrl
    client_id: str
    client_secret: str
    scope: str
    timeout: float = 1.0  # in seconds
    leeway: int = REFRESH_TIME_DELTA  # in seconds


class CCTokenGateway:
    """Obtains bearer tokens with the OAuth2 Client Credentials grant.

    Tokens are cached per scope and refreshed when they expire within
    ``leeway`` seconds.
    """

    def __init__(self, settings: OAuth2CCSettings):
        self.scope = settings.scope
        self.timeout = settings.timeout
        self.leeway = settings.leeway

        auth_headers = get_auth_headers(settings.client_id, settings.client_secret)

        async def headers_factory():
            return auth_headers

        self.provider = ApiProvider(
            url=settings.token_url, headers_factory=headers_factory
        )
        # This binds the cache to the CCTokenGateway instance (and not the class)
        self.cached_fetch_token = alru_cache(self._fetch_token)

    async def disconnect(self) -> None:
        await self.provider.disconnect()

    async def _fetch_token(self, scope: str) -> str:
        logger.debug(f"requesting a new access token for scope '{scope}'")
        response = await self.provider.request(
            method="POST",
            path="",
            fields={"grant_type": "client_credentials", "scope": scope},
            timeout=self.timeout,
        )
        assert response is not None
        return response["access_token"]

    async def fetch_token(self, scopes: Sequence[str] | str | None = None) -> str:
        scope = self.scope if scopes is None else join_scopes(scopes)
        token_str = await self.cached_fetch_token(scope)
        if not is_token_usable(token_str, self.leeway):
            self.cached_fetch_token.cache_clear()
            token_str = await self.cached_fetch_token(scope)
        return token_str

    async def fetch_headers(
        self, scopes: Sequence[str] | str | None = None
    ) -> dict[str, str]:
        return {"Authorization": f"Bearer {await self.fetch_token(scopes)}"}


# Copy-paste of async version:


class SyncCCTokenGateway:
    def __init__(self, settings: OAuth2CCSettings):
        self.scope = settings.scope
        self.timeout = settings.timeout
        self.leeway = settings.leeway

        auth_headers = get_auth_headers(settings.client_id, settings.client_secret)

        self.provider = SyncApiProvider(
            url=settings.token_url, headers_factory=lambda: auth_headers
        )
        # This binds the cache to the SyncCCTokenGateway instance (and not the class)
        self.cached_fetch_token = lru_cache(self._fetch_token)

    def disconnect(self) -> None:
        self.provider.disconnect()

    def _fetch_token(self, scope: str) -> str:
        logger.debug(f"requesting a new access token for scope '{scope}'")
        response = self.provider.request(
            method="POST",
            path="",
            fields={"grant_type": "client_credentials", "scope": scope},
            timeout=self.timeout,
        )
        assert response is not None
        return response["access_token"]

    def fetch_token(self, scopes: Sequence[str] | str | None = None) -> str:
        scope = self.scope if scopes is None else join_scopes(scopes)
        token_str = self.cached_fetch_token(scope)
        if not is_token_usable(token_str, self.leeway):
            self.cached_fetch_token.cache_clear()
            token_str = self.cached_fetch_token(scope)
        return token_str

    def fetch_headers(
        self, scopes: Sequence[str] | str | None = None
    ) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.fetch_token(scopes)}"}
