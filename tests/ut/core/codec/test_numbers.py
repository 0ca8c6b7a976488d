from decimal import Decimal

import pytest

from dynawire.core.codec.numbers import is_number, parse_number, render_number
from dynawire.core.models.errors import DecodingError, EncodingError


@pytest.mark.ut
def test_is_number():
    assert is_number(1)
    assert is_number(1.5)
    assert is_number(Decimal("2"))
    assert not is_number(True)
    assert not is_number("1")


@pytest.mark.ut
@pytest.mark.parametrize(
    "value, expected",
    [
        (0, "0"),
        (2**64, "18446744073709551616"),
        (0.1, "0.1"),
        (-3.0, "-3.0"),
        (123456789.125, "123456789.125"),
        (Decimal("-0.50"), "-0.50"),
    ],
)
def test_render_number(value, expected):
    assert render_number(value) == expected


@pytest.mark.ut
def test_render_bool_fails():
    with pytest.raises(EncodingError):
        render_number(True)


@pytest.mark.ut
@pytest.mark.parametrize(
    "raw, expected",
    [
        ("42", 42),
        ("-7", -7),
        ("0.25", 0.25),
        ("1E+3", 1000),
        ("2.5e-1", 0.25),
        ("1e-2", 0.01),
        (5, 5),
        (2.5, 2.5),
        ("+3", 3),
        (".5", 0.5),
        ("1E+125", 10**125),
    ],
)
def test_parse_number(raw, expected):
    assert parse_number(raw) == expected


@pytest.mark.ut
def test_parse_number_keeps_integer_precision():
    assert parse_number("123456789012345678901234567890") == 123456789012345678901234567890


@pytest.mark.ut
@pytest.mark.parametrize("raw", ["", "abc", "NaN", "Infinity", True, None, ["1"], "1_000", " 12", "12\n", "\u0661", "--1"])
def test_parse_invalid_number(raw):
    with pytest.raises(DecodingError):
        parse_number(raw)


@pytest.mark.ut
@pytest.mark.parametrize("raw", ["1.5e999", "-1.0e400", "1e126", float("inf"), float("nan")])
def test_parse_non_finite_or_out_of_range_number(raw):
    with pytest.raises(DecodingError):
        parse_number(raw)
