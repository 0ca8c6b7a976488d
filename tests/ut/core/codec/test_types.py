import pytest

from dynawire.core.models.errors import EncodingError
from dynawire.core.models.types import SET_TAGS, TAGS, TypeTag, is_tagged, wire_type


@pytest.mark.ut
def test_tags_are_closed():
    assert TAGS == {"S", "N", "B", "BOOL", "NULL", "SS", "NS", "BS", "L", "M"}
    assert SET_TAGS == {"SS", "NS", "BS"}
    assert TypeTag.BOOL == "BOOL"


@pytest.mark.ut
def test_is_tagged():
    assert is_tagged({"S": "x"})
    assert is_tagged({"NULL": True})
    assert not is_tagged({"S": "x", "N": "1"})
    assert not is_tagged({"X": "x"})
    assert not is_tagged({})
    assert not is_tagged("S")


@pytest.mark.ut
def test_wire_type():
    assert wire_type("string") == "S"
    assert wire_type("Number") == "N"
    assert wire_type("blob") == "B"
    assert wire_type("number_set") == "NS"


@pytest.mark.ut
def test_unknown_wire_type():
    with pytest.raises(EncodingError):
        wire_type("uuid")
