# (c) Nelen & Schuurmans

__all__ = ["Provider", "SyncProvider"]


class Provider:
    """Something that holds a connection (pool) between connect() and disconnect()."""

    async def connect(self) -> None:
        pass

    async def disconnect(self) -> None:
        pass


class SyncProvider:
    def connect(self) -> None:
        pass

    def disconnect(self) -> None:
        pass
