from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from dynawire.core.models.errors import EncodingError


class TypeTag(StrEnum):
    """
    Closed set of discriminators used by the service's typed attribute
    values. Every tagged value on the wire is a single-entry mapping whose
    key is one of these codes.
    """
    S = "S"
    N = "N"
    B = "B"
    BOOL = "BOOL"
    NULL = "NULL"
    SS = "SS"
    NS = "NS"
    BS = "BS"
    L = "L"
    M = "M"


TaggedValue = dict[str, Any]
"""
Wire form of a single attribute value, e.g. {"S": "foo"} or {"N": "23"}.
"""

Item = dict[str, TaggedValue]
"""
Wire form of a record: attribute name -> tagged value.
"""

TAGS: frozenset[str] = frozenset(tag.value for tag in TypeTag)

SET_TAGS: frozenset[str] = frozenset({TypeTag.SS, TypeTag.NS, TypeTag.BS})

_TYPE_NAMES: dict[str, TypeTag] = {
    "string": TypeTag.S,
    "number": TypeTag.N,
    "blob": TypeTag.B,
    "boolean": TypeTag.BOOL,
    "null": TypeTag.NULL,
    "string_set": TypeTag.SS,
    "number_set": TypeTag.NS,
    "blob_set": TypeTag.BS,
    "list": TypeTag.L,
    "map": TypeTag.M,
}


def is_tagged(value: Any) -> bool:
    """Return True when `value` already has the shape of a tagged value."""
    if not isinstance(value, Mapping) or len(value) != 1:
        return False
    key = next(iter(value))
    return isinstance(key, str) and key in TAGS


def wire_type(name: str) -> str:
    """
    Map a readable type name (as used in attribute definitions) to its
    wire code, e.g. "string" -> "S".
    """
    try:
        return _TYPE_NAMES[str(name).lower()].value
    except KeyError:
        raise EncodingError(f"Unknown attribute type '{name}'") from None
