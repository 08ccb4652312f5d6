from http import HTTPStatus

from pageable import ValueObject

__all__ = ["Response"]


class Response(ValueObject):
    status: HTTPStatus
    data: bytes
    content_type: str | None
    # keys are lowercase
    headers: dict[str, str] = {}

    def get_header(self, name: str) -> str | None:
        return self.headers.get(name.lower())
