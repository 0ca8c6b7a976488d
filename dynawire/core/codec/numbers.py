"""
Number rendering for the N/NS wire types.

Numbers travel as decimal strings. Integers keep every digit, floats are
expanded to positional notation and always carry a decimal point so that
the decoder can tell them apart from integers.
"""
import math
import re
from decimal import Decimal
from typing import Any

from dynawire.core.models.errors import EncodingError, DecodingError

Number = int | float | Decimal

_NUMBER_TEXT = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)

# Largest decimal exponent the service stores (9.99...E+125).
MAX_EXPONENT = 125


def is_number(value: Any) -> bool:
    # bool is an int subclass; it belongs to BOOL, never to N.
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def render_number(value: Number) -> str:
    if isinstance(value, bool):
        raise EncodingError("Booleans are not numbers")

    if isinstance(value, int):
        return str(value)

    if isinstance(value, float):
        if not math.isfinite(value):
            raise EncodingError(f"Cannot encode non-finite float {value!r}")
        # repr() is the shortest text that round-trips to the same float.
        text = format(Decimal(repr(value)), "f")
        if "." not in text:
            text += ".0"
        return text

    if isinstance(value, Decimal):
        if not value.is_finite():
            raise EncodingError(f"Cannot encode non-finite decimal {value!r}")
        return format(value, "f")

    raise EncodingError(f"Unsupported number type: {type(value).__name__}")


def parse_number(raw: Any) -> int | float:
    """
    Decode an N payload. Text containing '.' gives a float, text without
    gives an int. Native numbers from lenient servers are accepted as-is.
    Only plain finite decimal text is accepted.
    """
    if isinstance(raw, bool):
        raise DecodingError(f"Invalid number payload: {raw!r}")

    if isinstance(raw, int):
        return raw

    if isinstance(raw, float):
        if not math.isfinite(raw):
            raise DecodingError(f"Invalid number payload: {raw!r}")
        return raw

    if not isinstance(raw, str) or _NUMBER_TEXT.fullmatch(raw) is None:
        raise DecodingError(f"Invalid number payload: {raw!r}")

    if "." in raw:
        number = float(raw)
        if not math.isfinite(number):
            raise DecodingError(f"Number out of range: {raw!r}")
        return number

    if "e" not in raw and "E" not in raw:
        try:
            return int(raw)
        except ValueError:
            # Beyond the interpreter's integer string conversion limit.
            raise DecodingError(f"Number out of range: {raw!r}") from None

    # Exponent forms such as "1E+3" have no '.', but are not plain ints.
    exact = Decimal(raw)
    if exact.adjusted() > MAX_EXPONENT:
        raise DecodingError(f"Number out of range: {raw!r}")

    if exact == exact.to_integral_value():
        return int(exact)
    return float(exact)
