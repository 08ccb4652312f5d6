from pydantic import ConfigDict

from pageable import Json
from pageable import ValueObject

__all__ = ["Resource", "ResourceProperties", "SubResource"]


class Resource(ValueObject):
    """Common fields of a top-level (tracked) resource."""

    id: str | None = None
    name: str | None = None
    type: str | None = None
    location: str | None = None
    tags: dict[str, str] | None = None


class SubResource(ValueObject):
    """Common fields of a resource nested in another resource."""

    id: str | None = None
    name: str | None = None
    type: str | None = None
    etag: str | None = None


class ResourceProperties(ValueObject):
    """Properties of which only a few fields are modelled; the rest is kept."""

    model_config = ConfigDict(extra="allow")

    def extra(self) -> Json:
        return dict(self.model_extra or {})
