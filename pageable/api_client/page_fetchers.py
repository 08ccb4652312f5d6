"""Fetch strategies that turn one list request into one Page.

A fetcher is the ``fetch_page`` argument of a Pager: it is called with
``None`` for the first page and with the continuation of the previous page
after that. The fetcher alone knows what the continuation looks like.
"""
from http import HTTPStatus
from typing import Any
from typing import Generic
from typing import TypeVar
from urllib.parse import parse_qsl
from urllib.parse import urljoin
from urllib.parse import urlsplit

from pydantic import ValidationError

from pageable import ContinuationToken
from pageable import Json
from pageable import ListResult
from pageable import Page

from .api_provider import ApiProvider
from .api_provider import decode_response
from .exceptions import DeserializationError
from .sync_api_provider import SyncApiProvider

__all__ = [
    "HeaderContinuationFetcher",
    "NextLinkFetcher",
    "SyncHeaderContinuationFetcher",
    "SyncNextLinkFetcher",
    "parse_model",
]

T = TypeVar("T")

CONTINUATION_HEADER = "x-ms-continuation"


def resolve_next_link(url: str, next_link: str) -> str:
    """Resolve a next link against the url of the collection that was requested.

    Absolute next links are returned unchanged, links starting with a slash
    are resolved against the origin and query-only links (``?page=2``) keep
    the path of the collection.
    """
    return urljoin(url, next_link)


def missing_params(url: str, params: Json) -> Json:
    """Returns the params whose key does not occur in the query of url"""
    query = urlsplit(url).query
    present = {key for (key, _) in parse_qsl(query, keep_blank_values=True)}
    return {k: v for (k, v) in params.items() if k not in present}


def parse_model(model: Any, body: Json | None) -> Any:
    """Validate a response body (None for an empty body) into a pydantic model"""
    try:
        return model.model_validate({} if body is None else body)
    except ValidationError as e:
        raise DeserializationError(e, status=HTTPStatus.OK)


class NextLinkFetcher(Generic[T]):
    """Fetches pages of ``{"value": [...], "nextLink": "..."}`` responses.

    Args:
        provider: The API to send the GET requests to.
        path: The path of the collection, relative to the provider url.
        item_type: The (pydantic) type of the items in 'value'.
        params: Query parameters of the first request (filters, page size).
        fixed_params: Query parameters of every request, e.g. the api-version.
        timeout: Per request timeout in seconds.

    The continuation is the next link, which is either an absolute url or a
    link that is resolved against the collection url. The next link already
    encodes the filters of the first request; only the ``fixed_params`` are
    added to it, skipping the ones it already contains.
    """

    def __init__(
        self,
        provider: ApiProvider,
        path: str,
        item_type: type[T],
        params: Json | None = None,
        fixed_params: Json | None = None,
        timeout: float = 5.0,
    ):
        self.provider = provider
        self.path = path
        self.fixed_params = dict(fixed_params or {})
        self.params = {**self.fixed_params, **(params or {})}
        self.timeout = timeout
        self.result_type = ListResult[item_type]  # type: ignore

    def _request_args(self, continuation: ContinuationToken | None):
        if continuation is None:
            return self.path, self.params
        collection_url = urljoin(self.provider.url, self.path)
        url = resolve_next_link(collection_url, continuation)
        return url, missing_params(url, self.fixed_params)

    async def __call__(self, continuation: ContinuationToken | None) -> Page[T]:
        path, params = self._request_args(continuation)
        body = await self.provider.request(
            "GET", path, params=params, timeout=self.timeout
        )
        return parse_model(self.result_type, body).to_page()


class HeaderContinuationFetcher(Generic[T]):
    """Fetches pages of APIs that pass the continuation in a header.

    The continuation comes in ``response_header`` and goes back in
    ``request_header``; the page is complete if the response lacks it.
    """

    def __init__(
        self,
        provider: ApiProvider,
        path: str,
        item_type: type[T],
        params: Json | None = None,
        timeout: float = 5.0,
        request_header: str = CONTINUATION_HEADER,
        response_header: str = CONTINUATION_HEADER,
    ):
        self.provider = provider
        self.path = path
        self.params = dict(params or {})
        self.timeout = timeout
        self.request_header = request_header
        self.response_header = response_header
        self.result_type = ListResult[item_type]  # type: ignore

    async def __call__(self, continuation: ContinuationToken | None) -> Page[T]:
        headers = None
        if continuation is not None:
            headers = {self.request_header: continuation}
        response = await self.provider.request_raw(
            "GET", self.path, params=self.params, headers=headers, timeout=self.timeout
        )
        result = parse_model(self.result_type, decode_response(response))
        return Page(
            items=result.value,
            continuation=response.get_header(self.response_header) or None,
        )


# This is a copy-paste of the fetchers above, with all the async / await removed


class SyncNextLinkFetcher(NextLinkFetcher[T]):
    provider: SyncApiProvider  # type: ignore

    def __init__(
        self,
        provider: SyncApiProvider,
        path: str,
        item_type: type[T],
        params: Json | None = None,
        fixed_params: Json | None = None,
        timeout: float = 5.0,
    ):
        super().__init__(
            provider, path, item_type, params, fixed_params, timeout  # type: ignore
        )

    def __call__(self, continuation: ContinuationToken | None) -> Page[T]:  # type: ignore
        path, params = self._request_args(continuation)
        body = self.provider.request("GET", path, params=params, timeout=self.timeout)
        return parse_model(self.result_type, body).to_page()


class SyncHeaderContinuationFetcher(HeaderContinuationFetcher[T]):
    provider: SyncApiProvider  # type: ignore

    def __call__(self, continuation: ContinuationToken | None) -> Page[T]:  # type: ignore
        headers = None
        if continuation is not None:
            headers = {self.request_header: continuation}
        response = self.provider.request_raw(
            "GET", self.path, params=self.params, headers=headers, timeout=self.timeout
        )
        result = parse_model(self.result_type, decode_response(response))
        return Page(
            items=result.value,
            continuation=response.get_header(self.response_header) or None,
        )
