"""
Native value -> tagged wire value.

    None                      -> {"NULL": true}
    bool                      -> {"BOOL": ...}
    int / float / Decimal     -> {"N": "<decimal text>"}
    str                       -> {"S": ...}
    bytes                     -> {"S": ...} when it reads as text, else {"B": "<base64>"}
    set of numbers/str/bytes  -> {"NS"/"SS"/"BS": [...]}
    list / tuple              -> {"L": [...]}
    mapping                   -> {"M": {...}}, or unchanged when already tagged
    registered record         -> {"M": {...}}

A mapping that already has the shape of a tagged value is passed through
untouched, which lets callers force a wire type, e.g. {"B": "..."} for
content that would otherwise be classified as text.
"""
import base64
from collections.abc import Mapping
from typing import Any

from dynawire.core.codec.numbers import is_number, render_number
from dynawire.core.codec.registry import CapabilityRegistry, default_registry
from dynawire.core.models.errors import EncodingError
from dynawire.core.models.options import CodecOptions
from dynawire.core.models.types import Item, TaggedValue, TypeTag, is_tagged
from dynawire.core.ports.capability import Encodable


def looks_like_text(data: bytes) -> bool:
    """
    Best-effort classification of a byte string as text: it must be valid
    UTF-8 made of printable characters or common whitespace.
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return all(ch.isprintable() or ch in "\t\n\r" for ch in text)


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


class Encoder:
    def __init__(
        self,
        registry: CapabilityRegistry | None = None,
        options: CodecOptions | None = None,
    ) -> None:
        self._registry = registry if registry is not None else default_registry
        self._options = options if options is not None else CodecOptions()

    @property
    def options(self) -> CodecOptions:
        return self._options

    def encode(self, value: Any) -> TaggedValue:
        """Encode any supported native value into a single tagged value."""
        if value is None:
            return {TypeTag.NULL.value: True}

        if isinstance(value, bool):
            return {TypeTag.BOOL.value: value}

        if is_number(value):
            return {TypeTag.N.value: render_number(value)}

        if isinstance(value, str):
            return {TypeTag.S.value: value}

        if isinstance(value, (bytes, bytearray, memoryview)):
            return self._encode_binary(bytes(value))

        if isinstance(value, (set, frozenset)):
            return self._encode_set(value)

        if isinstance(value, Mapping):
            if is_tagged(value):
                return dict(value)
            return {TypeTag.M.value: self._encode_mapping(value)}

        if isinstance(value, (list, tuple)):
            return {TypeTag.L.value: [self.encode(v) for v in value]}

        mapping = self._resolve_capability(value)
        if mapping is None:
            raise EncodingError(
                f"No encoder for type {type(value).__name__}; "
                "register one or implement to_mapping()"
            )
        return {TypeTag.M.value: self._encode_mapping(mapping)}

    def encode_root(self, value: Any) -> Item:
        """
        Encode a top-level record or mapping into an Item, as used by the
        Item and Key fields of requests. The result is never a tagged value
        itself: every entry is attribute name -> tagged value.
        """
        if isinstance(value, Mapping):
            return self._encode_mapping(value)

        mapping = None
        if not isinstance(value, (str, bytes, bytearray, memoryview, list, tuple, set, frozenset)):
            mapping = self._resolve_capability(value)

        if mapping is None:
            raise EncodingError(
                f"Cannot encode {type(value).__name__} as an item; "
                "a mapping or a record with an encoder is required"
            )
        return self._encode_mapping(mapping)

    def _encode_mapping(self, mapping: Mapping[Any, Any]) -> Item:
        result: Item = {}
        for key, value in mapping.items():
            if not isinstance(key, str):
                raise EncodingError(f"Attribute names must be strings, got {key!r}")
            if self._options.strip_empty_strings and isinstance(value, str) and value == "":
                continue
            result[str(key)] = self.encode(value)
        return result

    def _encode_binary(self, data: bytes) -> TaggedValue:
        # Empty bytes stay binary so they decode back to b"".
        if data and looks_like_text(data):
            return {TypeTag.S.value: data.decode("utf-8")}
        return {TypeTag.B.value: _b64(data)}

    def _encode_set(self, values: set[Any] | frozenset[Any]) -> TaggedValue:
        if not values:
            raise EncodingError("Cannot encode an empty set: its wire type is unknown")

        if all(is_number(v) for v in values):
            return {TypeTag.NS.value: [render_number(v) for v in sorted(values)]}

        if all(isinstance(v, str) for v in values):
            return {TypeTag.SS.value: sorted(values)}

        if all(isinstance(v, bytes) for v in values):
            return {TypeTag.BS.value: [_b64(v) for v in sorted(values)]}

        raise EncodingError("Set members must be all numbers, all strings or all bytes")

    def _resolve_capability(self, value: Any) -> Mapping[str, Any] | None:
        fn = self._registry.encoder_for(type(value))
        if fn is not None:
            mapping = fn(value)
        elif isinstance(value, Encodable):
            mapping = value.to_mapping()
        else:
            return None

        if not isinstance(mapping, Mapping):
            raise EncodingError(
                f"Encoder for {type(value).__name__} returned "
                f"{type(mapping).__name__}, expected a mapping"
            )
        return mapping


def encode(value: Any) -> TaggedValue:
    return Encoder().encode(value)


def encode_root(value: Any) -> Item:
    return Encoder().encode_root(value)
