# (c) Nelen & Schuurmans

__all__ = [
    "Conflict",
    "DoesNotExist",
    "PagingError",
]


class DoesNotExist(Exception):
    def __init__(self, name: str, path: str | None = None):
        super().__init__()
        self.name = name
        self.path = path

    def __str__(self):
        if self.path:
            return f"does not exist: {self.name} at {self.path}"
        else:
            return f"does not exist: {self.name}"


class Conflict(Exception):
    """The server refuses the request in the current state of the resource."""

    def __init__(self, msg: str | None = None):
        super().__init__(msg)


class PagingError(Exception):
    """The pager was used in a way that conflicts with its current position."""
