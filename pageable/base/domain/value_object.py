# (c) Nelen & Schuurmans

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

from .types import Json

__all__ = ["ValueObject"]


class ValueObject(BaseModel):
    """Immutable model that reads and writes the camelCase keys of the wire format.

    Fields are addressed by their python (snake_case) names in code. Keys the
    model does not declare are ignored, so that new server fields never break
    decoding.
    """

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    def to_json(self) -> Json:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
