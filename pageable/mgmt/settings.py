# (c) Nelen & Schuurmans

from pydantic import AnyHttpUrl
from pydantic import BaseModel
from pydantic import Field

__all__ = ["ClientSettings", "DEFAULT_ENDPOINT"]

DEFAULT_ENDPOINT = "https://management.azure.com"


class ClientSettings(BaseModel):
    endpoint: AnyHttpUrl = Field(default=DEFAULT_ENDPOINT, validate_default=True)
    # defaults to the '.default' scope of the endpoint
    scopes: list[str] | None = None
    retries: int = 3
    backoff_factor: float = 1.0
    timeout: float = 5.0  # in seconds, per request

    def get_scopes(self) -> list[str]:
        if self.scopes is not None:
            return self.scopes
        return [f"{str(self.endpoint).rstrip('/')}/.default"]
