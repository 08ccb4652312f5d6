from http import HTTPStatus
from typing import Any

from pydantic import ValidationError

__all__ = ["ApiException", "DeserializationError"]


class ApiException(ValueError):
    def __init__(self, obj: Any, status: HTTPStatus):
        self.status = status
        super().__init__(obj)

    def __str__(self):
        return f"{self.status}: {super().__str__()}"


class DeserializationError(ApiException):
    """The response body is not JSON or does not have the expected shape.

    ``error`` is the underlying ``json.JSONDecodeError`` or pydantic
    ``ValidationError``.
    """

    def __init__(self, error: ValueError, status: HTTPStatus):
        self.error = error
        if isinstance(error, ValidationError):
            msg = f"cannot deserialize {error.title}"
        else:
            msg = f"invalid JSON: {error}"
        super().__init__(msg, status=status)
