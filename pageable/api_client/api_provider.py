import asyncio
import json as json_lib
import logging
import re
from collections.abc import Awaitable
from collections.abc import Callable
from http import HTTPStatus
from urllib.parse import quote
from urllib.parse import urlencode
from urllib.parse import urljoin
from urllib.parse import urlsplit

import aiohttp
from aiohttp import ClientResponse
from aiohttp import ClientSession
from aiohttp import ClientTimeout
from pydantic import AnyHttpUrl

from pageable import Conflict
from pageable import Json
from pageable import Provider

from .exceptions import ApiException
from .exceptions import DeserializationError
from .response import Response

__all__ = ["ApiProvider", "decode_response"]

logger = logging.getLogger(__name__)

# Retry on 429 and all 5xx errors (because they are mostly temporary)
RETRY_STATUSES = frozenset(
    {
        HTTPStatus.TOO_MANY_REQUESTS,
        HTTPStatus.INTERNAL_SERVER_ERROR,
        HTTPStatus.BAD_GATEWAY,
        HTTPStatus.SERVICE_UNAVAILABLE,
        HTTPStatus.GATEWAY_TIMEOUT,
    }
)
# PATCH is strictly not idempotent, because you could do advanced
# JSON operations like 'add an array element'. mostly idempotent.
# However we never do that and we always make PATCH idempotent.
RETRY_METHODS = frozenset(["HEAD", "GET", "PATCH", "PUT", "DELETE", "OPTIONS", "TRACE"])


def is_success(status: HTTPStatus) -> bool:
    """Returns True on 2xx status"""
    return (int(status) // 100) == 2


def get_error_message(body: Json) -> str:
    if not isinstance(body, dict):
        return str(body)
    # management APIs wrap errors as {"error": {"code": ..., "message": ...}}
    error = body.get("error")
    if isinstance(error, dict) and "message" in error:
        return error["message"]
    return body.get("message", str(body))


def check_exception(status: HTTPStatus, body: Json) -> None:
    if status == HTTPStatus.CONFLICT:
        raise Conflict(get_error_message(body))
    elif not is_success(status):
        raise ApiException(body, status=status)


JSON_CONTENT_TYPE_REGEX = re.compile(r"^application\/[^+]*[+]?(json);?.*$")


def is_json_content_type(content_type: str | None) -> bool:
    if not content_type:
        return False
    return bool(JSON_CONTENT_TYPE_REGEX.match(content_type))


def is_absolute(url: str) -> bool:
    return urlsplit(url).scheme in ("http", "https")


def join(url: str, path: str) -> str:
    """Results in a full url without trailing slash"""
    assert url.endswith("/")
    assert not path.startswith("/")
    return urljoin(url, path).rstrip("/")


def add_query_params(url: str, params: Json | None) -> str:
    if params is None:
        return url
    query = urlencode(
        {k: v for (k, v) in params.items() if v is not None}, doseq=True
    )
    if not query:
        return url
    return url + ("&" if urlsplit(url).query else "?") + query


def decode_response(response: Response) -> Json | None:
    """Parse a JSON body, raising on non-JSON content and on error statuses.

    A 204 or an empty body decodes to None.
    """
    if response.status is HTTPStatus.NO_CONTENT:
        return None
    if not response.data:
        check_exception(response.status, {})
        return None
    if not is_json_content_type(response.content_type):
        raise ApiException(
            f"Unexpected content type '{response.content_type}'",
            status=response.status,
        )
    try:
        body = json_lib.loads(response.data.decode())
    except ValueError as e:
        if not is_success(response.status):
            raise ApiException(response.data, status=response.status)
        raise DeserializationError(e, status=response.status)
    check_exception(response.status, body)
    return body


class ApiProvider(Provider):
    """Basic JSON API provider with retry policy and bearer tokens.

    The default retry policy has 3 retries with 1, 2, 4 second intervals.

    Args:
        url: The url of the API (with trailing slash)
        headers_factory: Coroutine that returns headers (for e.g. authorization)
        retries: Total number of retries per request
        backoff_factor: Multiplier for retry delay times (1, 2, 4, ...)

    A request path is either relative to ``url`` or an absolute http(s) url,
    as servers hand out in their next links.
    """

    def __init__(
        self,
        url: AnyHttpUrl,
        headers_factory: Callable[[], Awaitable[dict[str, str]]] | None = None,
        retries: int = 3,
        backoff_factor: float = 1.0,
    ):
        self._url = str(url)
        if not self._url.endswith("/"):
            self._url += "/"
        self._headers_factory = headers_factory
        assert retries >= 0
        self._retries = retries
        self._backoff_factor = backoff_factor
        self._session: ClientSession | None = None

    @property
    def url(self) -> str:
        return self._url

    async def connect(self) -> None:
        # The ClientSession must be instantiated while the event loop runs.
        if self._session is None:
            self._session = ClientSession()

    async def disconnect(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    def _build_url(self, path: str, params: Json | None) -> str:
        if is_absolute(path):
            return add_query_params(path, params)
        return add_query_params(join(self._url, quote(path)), params)

    async def _request_with_retry(
        self,
        method: str,
        path: str,
        params: Json | None,
        fields: Json | None,
        headers: dict[str, str] | None,
        timeout: float,
    ) -> ClientResponse:
        request_kwargs = {
            "method": method,
            "url": self._build_url(path, params),
            "timeout": ClientTimeout(total=timeout),
            "data": fields,
        }
        actual_headers = {}
        if self._headers_factory is not None:
            actual_headers.update(await self._headers_factory())
        if headers:
            actual_headers.update(headers)
        if self._session is None:
            await self.connect()
        assert self._session is not None
        retries = self._retries if method.upper() in RETRY_METHODS else 0
        for attempt in range(retries + 1):
            if attempt > 0:
                backoff = self._backoff_factor * 2 ** (attempt - 1)
                logger.debug(
                    f"retrying {method} {request_kwargs['url']} in {backoff}s "
                    f"(attempt {attempt} of {retries})"
                )
                await asyncio.sleep(backoff)

            try:
                response = await self._session.request(
                    headers=actual_headers, **request_kwargs
                )
                await response.read()
                if response.status in RETRY_STATUSES:
                    continue
                return response
            except (aiohttp.ClientError, asyncio.exceptions.TimeoutError):
                if attempt == retries:
                    raise  # propagate ClientError in case no retries left

        return response  # retries exceeded; return the (possibly error) response

    async def request(
        self,
        method: str,
        path: str,
        params: Json | None = None,
        fields: Json | None = None,
        headers: dict[str, str] | None = None,
        timeout: float = 5.0,
    ) -> Json | None:
        response = await self.request_raw(
            method, path, params, fields, headers, timeout
        )
        return decode_response(response)

    async def request_raw(
        self,
        method: str,
        path: str,
        params: Json | None = None,
        fields: Json | None = None,
        headers: dict[str, str] | None = None,
        timeout: float = 5.0,
    ) -> Response:
        response = await self._request_with_retry(
            method, path, params, fields, headers, timeout
        )
        return Response(
            status=response.status,
            data=await response.read(),
            content_type=response.headers.get("Content-Type"),
            headers={k.lower(): v for (k, v) in response.headers.items()},
        )
