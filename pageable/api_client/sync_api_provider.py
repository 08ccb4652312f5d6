from collections.abc import Callable
from urllib.parse import quote

from pydantic import AnyHttpUrl
from urllib3 import BaseHTTPResponse
from urllib3 import PoolManager
from urllib3 import Retry

from pageable import Json
from pageable import SyncProvider

from .api_provider import add_query_params
from .api_provider import decode_response
from .api_provider import is_absolute
from .api_provider import join
from .api_provider import RETRY_METHODS
from .api_provider import RETRY_STATUSES
from .response import Response

__all__ = ["SyncApiProvider"]


class SyncApiProvider(SyncProvider):
    """Basic JSON API provider with retry policy and bearer tokens.

    The default retry policy has 3 retries with 1, 2, 4 second intervals.

    Args:
        url: The url of the API (with trailing slash)
        headers_factory: Callable that returns headers (for e.g. authorization)
        retries: Total number of retries per request
        backoff_factor: Multiplier for retry delay times (1, 2, 4, ...)
    """

    def __init__(
        self,
        url: AnyHttpUrl,
        headers_factory: Callable[[], dict[str, str]] | None = None,
        retries: int = 3,
        backoff_factor: float = 1.0,
    ):
        self._url = str(url)
        if not self._url.endswith("/"):
            self._url += "/"
        self._headers_factory = headers_factory
        self._pool = PoolManager(
            retries=Retry(
                retries,
                backoff_factor=backoff_factor,
                status_forcelist=RETRY_STATUSES,
                allowed_methods=RETRY_METHODS,
                # hand out the last error response when retries are exhausted
                raise_on_status=False,
            )
        )

    @property
    def url(self) -> str:
        return self._url

    def disconnect(self) -> None:
        self._pool.clear()

    def _build_url(self, path: str, params: Json | None) -> str:
        if is_absolute(path):
            return add_query_params(path, params)
        return add_query_params(join(self._url, quote(path)), params)

    def _request(
        self,
        method: str,
        path: str,
        params: Json | None,
        fields: Json | None,
        headers: dict[str, str] | None,
        timeout: float,
    ) -> BaseHTTPResponse:
        actual_headers = {}
        if self._headers_factory is not None:
            actual_headers.update(self._headers_factory())
        if headers:
            actual_headers.update(headers)
        request_kwargs = {
            "method": method,
            "url": self._build_url(path, params),
            "timeout": timeout,
        }
        if fields is not None:
            request_kwargs["fields"] = fields
            request_kwargs["encode_multipart"] = False

        return self._pool.request(headers=actual_headers, **request_kwargs)

    def request(
        self,
        method: str,
        path: str,
        params: Json | None = None,
        fields: Json | None = None,
        headers: dict[str, str] | None = None,
        timeout: float = 5.0,
    ) -> Json | None:
        response = self.request_raw(method, path, params, fields, headers, timeout)
        return decode_response(response)

    def request_raw(
        self,
        method: str,
        path: str,
        params: Json | None = None,
        fields: Json | None = None,
        headers: dict[str, str] | None = None,
        timeout: float = 5.0,
    ) -> Response:
        response = self._request(method, path, params, fields, headers, timeout)
        return Response(
            status=response.status,
            data=response.data,
            content_type=response.headers.get("Content-Type"),
            headers={k.lower(): v for (k, v) in response.headers.items()},
        )
