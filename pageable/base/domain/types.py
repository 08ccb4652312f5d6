# (c) Nelen & Schuurmans

from typing import Any

__all__ = ["Json", "ContinuationToken"]


Json = dict[str, Any]
# Opaque to everything except the fetch strategy that produced it
ContinuationToken = str
