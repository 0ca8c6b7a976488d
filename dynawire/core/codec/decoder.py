"""
Tagged wire value -> native value.

The decoder accepts a single tagged value, an Item, or a service response
envelope ({"Item": ...} or {"Items": [...]}). Unknown tags and malformed
payloads raise DecodingError; nothing is silently dropped.
"""
import base64
import binascii
from collections.abc import Callable, Mapping
from typing import Any

from dynawire.core.codec.numbers import parse_number
from dynawire.core.codec.registry import CapabilityRegistry, default_registry, populate
from dynawire.core.models.errors import DecodingError
from dynawire.core.models.options import CodecOptions
from dynawire.core.models.types import TAGS, TypeTag, is_tagged


def _decode_binary(payload: Any) -> bytes:
    if not isinstance(payload, str):
        raise DecodingError(f"Invalid binary payload: {payload!r}")
    try:
        return base64.b64decode(payload, validate=True)
    except binascii.Error as ex:
        raise DecodingError(f"Invalid base64 payload: {payload!r}") from ex


def _decode_string(payload: Any) -> str:
    if not isinstance(payload, str):
        raise DecodingError(f"Invalid string payload: {payload!r}")
    return payload


def _decode_bool(payload: Any) -> bool:
    if isinstance(payload, bool):
        return payload
    if payload == "true":
        return True
    if payload == "false":
        return False
    raise DecodingError(f"Invalid boolean payload: {payload!r}")


def _decode_null(payload: Any) -> None:
    if payload is True or payload == "true":
        return None
    raise DecodingError(f"Invalid null payload: {payload!r}")


class Decoder:
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

    def decode(self, value: Any, as_: type | None = None, sets: bool | None = None) -> Any:
        """
        Decode a tagged value, an Item or a response envelope.

        `as_` materialises the decoded mapping(s) into instances of the given
        type. `sets` overrides the decoder's set mode for this call only.
        """
        # Resolved once per call, then threaded through the recursion.
        as_sets = self._options.decode_sets_as_sets if sets is None else sets

        if not isinstance(value, Mapping):
            raise DecodingError(f"Cannot decode {type(value).__name__}; expected a mapping")

        items = value.get("Items")
        if isinstance(items, list):
            return [self._decode_root(item, as_sets, as_) for item in items]

        # {"N": {"S": "x"}} is both tag-shaped and a valid Item with one
        # attribute named "N": the reading whose payload decodes wins, the
        # envelope or tagged reading first.
        item = value.get("Item")
        if isinstance(item, Mapping):
            decoded = self._first_valid(
                lambda: self._decode_mapping(item, as_sets),
                lambda: self._decode_mapping(value, as_sets),
            )
        elif is_tagged(value):
            decoded = self._first_valid(
                lambda: self._decode_tagged(value, as_sets),
                lambda: self._decode_mapping(value, as_sets),
            )
        else:
            decoded = self._decode_mapping(value, as_sets)

        return decoded if as_ is None else self._materialize(decoded, as_)

    def decode_item(self, response: Any, as_: type | None = None, sets: bool | None = None) -> Any:
        """Decode an item returned by the service, unwrapping Item/Items envelopes."""
        return self.decode(response, as_=as_, sets=sets)

    def decode_root(self, item: Any, as_: type | None = None, sets: bool | None = None) -> Any:
        """
        Decode a bare Item (attribute name -> tagged value) without looking
        for envelopes or tagged values at the top level. Inverse of
        Encoder.encode_root.
        """
        as_sets = self._options.decode_sets_as_sets if sets is None else sets
        return self._decode_root(item, as_sets, as_)

    def _decode_root(self, item: Any, as_sets: bool, as_: type | None) -> Any:
        if not isinstance(item, Mapping):
            raise DecodingError(f"Expected an item mapping, got {type(item).__name__}")
        decoded = self._decode_mapping(item, as_sets)
        return decoded if as_ is None else self._materialize(decoded, as_)

    def _decode_mapping(self, mapping: Mapping[str, Any], as_sets: bool) -> dict[str, Any]:
        return {str(k): self._decode_value(v, as_sets) for k, v in mapping.items()}

    def _decode_value(self, value: Any, as_sets: bool) -> Any:
        if is_tagged(value):
            return self._decode_tagged(value, as_sets)

        if isinstance(value, Mapping) and len(value) == 1:
            tag = next(iter(value))
            raise DecodingError(f"Unrecognized type tag {tag!r}")

        raise DecodingError(f"Expected a tagged value, got {value!r}")

    def _decode_tagged(self, value: Mapping[str, Any], as_sets: bool) -> Any:
        tag, payload = next(iter(value.items()))

        if tag == TypeTag.S:
            return _decode_string(payload)

        if tag == TypeTag.N:
            return parse_number(payload)

        if tag == TypeTag.B:
            return _decode_binary(payload)

        if tag == TypeTag.BOOL:
            return _decode_bool(payload)

        if tag == TypeTag.NULL:
            return _decode_null(payload)

        if tag == TypeTag.SS:
            return self._collect(tag, payload, _decode_string, as_sets)

        if tag == TypeTag.NS:
            return self._collect(tag, payload, parse_number, as_sets)

        if tag == TypeTag.BS:
            return self._collect(tag, payload, _decode_binary, as_sets)

        if tag == TypeTag.L:
            if not isinstance(payload, list):
                raise DecodingError(f"Invalid list payload: {payload!r}")
            return [self._decode_value(v, as_sets) for v in payload]

        if tag == TypeTag.M:
            if not isinstance(payload, Mapping):
                raise DecodingError(f"Invalid map payload: {payload!r}")
            return self._decode_mapping(payload, as_sets)

        # is_tagged() only lets known tags through; kept for direct callers.
        raise DecodingError(f"Unrecognized type tag {tag!r} (known: {sorted(TAGS)})")

    @staticmethod
    def _first_valid(primary: Callable[[], Any], fallback: Callable[[], Any]) -> Any:
        try:
            return primary()
        except DecodingError as ex:
            try:
                return fallback()
            except DecodingError:
                raise ex from None

    @staticmethod
    def _collect(tag: str, payload: Any, decode_member, as_sets: bool) -> set[Any] | list[Any]:
        if not isinstance(payload, list):
            raise DecodingError(f"Invalid {tag} payload: {payload!r}")
        members = [decode_member(p) for p in payload]
        return set(members) if as_sets else members

    def _materialize(self, decoded: Any, target: type) -> Any:
        if not isinstance(decoded, Mapping):
            raise DecodingError(
                f"Cannot decode {type(decoded).__name__} as {target.__name__}; "
                "a map-shaped value is required"
            )

        fn = self._registry.decoder_for(target)
        if fn is not None:
            return fn(decoded)

        from_mapping = getattr(target, "from_mapping", None)
        if callable(from_mapping):
            return from_mapping(decoded)

        return populate(target, decoded)


def decode(value: Any, as_: type | None = None, sets: bool | None = None) -> Any:
    return Decoder().decode(value, as_=as_, sets=sets)


def decode_item(response: Any, as_: type | None = None, sets: bool | None = None) -> Any:
    return Decoder().decode_item(response, as_=as_, sets=sets)
