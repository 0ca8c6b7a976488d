from collections.abc import Mapping
from typing import Any, Protocol, Self, runtime_checkable


@runtime_checkable
class Encodable(Protocol):
    """
    Structural interface for records that know how to present themselves
    as a native mapping (attribute name -> native value).

    The encoder never inspects the concrete type of such a record. It only
    calls `to_mapping()` and encodes the result as it would a plain dict.
    """

    def to_mapping(self) -> Mapping[str, Any]:
        """Return the attributes to store, as native Python values."""


@runtime_checkable
class Decodable(Protocol):
    """
    Structural interface for record types that can be rebuilt from a freshly
    decoded native mapping. Implementations are free to rename, restructure
    or default fields.
    """

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> Self:
        """Build an instance from decoded attributes."""
