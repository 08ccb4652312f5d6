# (c) Nelen & Schuurmans

from collections.abc import Sequence
from typing import Generic
from typing import TypeVar

from pydantic import field_validator

from .types import ContinuationToken
from .value_object import ValueObject

__all__ = ["Page", "ListResult"]

T = TypeVar("T")


class Page(ValueObject, Generic[T]):
    """One server response of a collection.

    A page without a continuation is the last one. An empty page that does
    carry a continuation is not.
    """

    items: Sequence[T]
    continuation: ContinuationToken | None = None

    @property
    def is_last(self) -> bool:
        return self.continuation is None


class ListResult(ValueObject, Generic[T]):
    """The body of a list response: ``{"value": [...], "nextLink": "..."}``"""

    value: list[T] = []
    next_link: str | None = None

    @field_validator("value", mode="before")
    @classmethod
    def null_value_is_empty(cls, v):
        return [] if v is None else v

    @field_validator("next_link")
    @classmethod
    def empty_next_link_is_absent(cls, v):
        return v or None

    def to_page(self) -> Page[T]:
        return Page(items=self.value, continuation=self.next_link)
