# (c) Nelen & Schuurmans

from enum import Enum

__all__ = ["OpenEnum"]


UNKNOWN = "UNKNOWN_VALUE"


class OpenEnum(str, Enum):
    """A string enum that accepts values it does not know.

    Servers add new values to their enums without notice. Looking up an
    unknown value does not raise but returns a pseudo-member that holds the
    raw string, so that decoding never fails and the value is sent back
    unchanged::

        >>> class Status(OpenEnum):
        ...     ENABLED = "Enabled"
        >>> Status("Paused").is_known
        False
        >>> Status("Paused").value
        'Paused'
    """

    @classmethod
    def _missing_(cls, value):
        if not isinstance(value, str):
            return None
        pseudo_member = str.__new__(cls, value)
        pseudo_member._name_ = UNKNOWN
        pseudo_member._value_ = value
        return pseudo_member

    @property
    def is_known(self) -> bool:
        return self._name_ in type(self).__members__

    def __str__(self) -> str:
        return self.value
