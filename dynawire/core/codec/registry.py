"""
Capability registry: per-type encode/decode functions that let arbitrary
record types take part in encoding and decoding without the codec knowing
their concrete shape.

A type gains the Encodable capability by registering a function that turns
an instance into a native mapping, usually derived from the type's declared
fields with the `encodable` decorator. It gains the Decodable capability by
registering a function that builds an instance from a decoded mapping, with
the `decodable` decorator. Types may instead implement the structural
protocols in `dynawire.core.ports.capability`.
"""
import dataclasses
import inspect
from collections.abc import Callable, Iterable, Mapping
from typing import Any

EncodeFn = Callable[[Any], Mapping[str, Any]]
DecodeFn = Callable[[Mapping[str, Any]], Any]


def declared_fields(cls: type) -> list[str] | None:
    """
    Return the field names a record type declares, or None when the type
    declares nothing usable (plain classes without annotations).

    Dataclasses and pydantic models are recognised; other classes fall back
    to their public annotations.
    """
    if dataclasses.is_dataclass(cls):
        return [f.name for f in dataclasses.fields(cls)]

    model_fields = getattr(cls, "model_fields", None)
    if isinstance(model_fields, Mapping):
        return list(model_fields)

    names: list[str] = []
    for klass in reversed(cls.__mro__):
        if klass is object:
            continue
        for name in inspect.get_annotations(klass):
            if not name.startswith("_") and name not in names:
                names.append(name)

    return names or None


def populate(cls: type, mapping: Mapping[str, Any]) -> Any:
    """
    Build a `cls` instance by copying the keys of `mapping` that match its
    declared fields. Declared fields missing from the mapping and without a
    default are set to None. Keys the type cannot accept are the caller's
    problem: nothing is validated exhaustively.
    """
    if dataclasses.is_dataclass(cls):
        kwargs: dict[str, Any] = {}
        for f in dataclasses.fields(cls):
            if not f.init:
                continue
            if f.name in mapping:
                kwargs[f.name] = mapping[f.name]
            elif f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
                kwargs[f.name] = None
        return cls(**kwargs)

    names = declared_fields(cls)

    if hasattr(cls, "model_validate"):
        accepted = set(names or ())
        return cls.model_validate({k: v for k, v in mapping.items() if k in accepted})

    instance = cls.__new__(cls)
    for key, value in mapping.items():
        if names is None or key in names:
            setattr(instance, key, value)
    return instance


class CapabilityRegistry:
    """
    Maps record types to their encode/decode functions.

    Encoders are resolved along the MRO, so a subclass inherits the encoder
    of its parent. Decoders are resolved on the exact type only, since a
    decoder builds instances of one specific class.
    """

    def __init__(self) -> None:
        self._encoders: dict[type, EncodeFn] = {}
        self._decoders: dict[type, DecodeFn] = {}

    def register_encoder(self, cls: type, fn: EncodeFn) -> None:
        self._encoders[cls] = fn

    def register_decoder(self, cls: type, fn: DecodeFn) -> None:
        self._decoders[cls] = fn

    def encoder_for(self, cls: type) -> EncodeFn | None:
        for klass in cls.__mro__:
            fn = self._encoders.get(klass)
            if fn is not None:
                return fn
        return None

    def decoder_for(self, cls: type) -> DecodeFn | None:
        return self._decoders.get(cls)

    def derive_encoder(
        self,
        cls: type,
        only: Iterable[str] | None = None,
        exclude: Iterable[str] | None = None,
    ) -> EncodeFn:
        """
        Build an encoder from the declared field list of `cls`.

        `only` restricts the attributes to the given names, `exclude` drops
        the given names. Without declared fields, the instance's public
        attributes are used.
        """
        if only is not None and exclude is not None:
            raise ValueError("Use either 'only' or 'exclude', not both")

        excluded = frozenset(exclude or ())
        if only is not None:
            names: list[str] | None = list(only)
        else:
            fields = declared_fields(cls)
            names = None if fields is None else [n for n in fields if n not in excluded]

        if names is None:
            def encode_attributes(obj: Any) -> dict[str, Any]:
                return {
                    k: v for k, v in vars(obj).items()
                    if not k.startswith("_") and k not in excluded
                }
            return encode_attributes

        def encode_fields(obj: Any) -> dict[str, Any]:
            return {name: getattr(obj, name) for name in names}

        return encode_fields


default_registry = CapabilityRegistry()
"""
Registry used by the decorators and by Encoder/Decoder instances built
without an explicit registry.
"""


def encodable(
    cls: type | None = None,
    *,
    only: Iterable[str] | None = None,
    exclude: Iterable[str] | None = None,
    registry: CapabilityRegistry | None = None,
):
    """
    Class decorator deriving an encoder from the class's declared fields.

        @encodable
        @dataclass
        class User: ...

        @encodable(only=["items"])
        @dataclass
        class Nested: ...
    """
    def decorator(klass: type) -> type:
        target = registry if registry is not None else default_registry
        target.register_encoder(klass, target.derive_encoder(klass, only=only, exclude=exclude))
        return klass

    if cls is None:
        return decorator
    return decorator(cls)


def decodable(cls: type, *, registry: CapabilityRegistry | None = None):
    """
    Function decorator registering a decoder for `cls`. The function
    receives the decoded mapping and returns the instance.

        @decodable(User)
        def decode_user(mapping): ...
    """
    def decorator(fn: DecodeFn) -> DecodeFn:
        target = registry if registry is not None else default_registry
        target.register_decoder(cls, fn)
        return fn

    return decorator
