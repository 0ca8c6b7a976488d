from typing import Any


class DynawireError(Exception):
    """Base class for every error raised by dynawire."""


class EncodingError(DynawireError):
    """
    A native value has no tagged representation: an unsupported type with
    no registered capability, an empty or mixed set, a non-finite float, or
    a root value that is not map-shaped.
    """


class DecodingError(DynawireError):
    """
    A wire value cannot be decoded: unknown tag code, or a payload whose
    shape the tag does not allow.
    """


class ServiceError(DynawireError):
    """Failure reported by the remote service and surfaced by a transport."""

    def __init__(self, code: str, message: str, item: dict[str, Any] | None = None) -> None:
        self.code = code
        """Service-defined error code, e.g. 'ConditionalCheckFailedException'."""
        self.message = message
        """Human-readable message returned by the service."""
        self.item = item
        """
        Raw wire item attached to some conditional-check failures. It is left
        undecoded so the caller can decide how to run it through a Decoder.
        """
        super().__init__(f"{code}: {message}")
