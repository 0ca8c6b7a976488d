import base64
import zlib

import pytest

from dynawire.core.codec.decoder import Decoder, decode, decode_item
from dynawire.core.codec.encoder import Encoder
from dynawire.core.models.errors import DecodingError
from tests.utils import Name, Point, Profile, User, make_user


@pytest.mark.ut
def test_decode_scalars(decoder):
    assert decoder.decode({"S": "foo"}) == "foo"
    assert decoder.decode({"S": ""}) == ""
    assert decoder.decode({"BOOL": True}) is True
    assert decoder.decode({"BOOL": False}) is False
    assert decoder.decode({"NULL": True}) is None


@pytest.mark.ut
def test_decode_literal_text_forms(decoder):
    assert decoder.decode({"BOOL": "true"}) is True
    assert decoder.decode({"BOOL": "false"}) is False
    assert decoder.decode({"NULL": "true"}) is None


@pytest.mark.ut
@pytest.mark.parametrize("value", [{"BOOL": "yes"}, {"NULL": False}, {"S": 1}, {"B": 12}])
def test_decode_rejects_bad_payloads(decoder, value):
    with pytest.raises(DecodingError):
        decoder.decode(value)


@pytest.mark.ut
def test_decode_numbers(decoder):
    assert decoder.decode({"N": "23"}) == 23
    assert isinstance(decoder.decode({"N": "23"}), int)
    assert decoder.decode({"N": "23.5"}) == 23.5
    assert isinstance(decoder.decode({"N": "2.0"}), float)
    assert decoder.decode({"N": "9007199254740993"}) == 9007199254740993


@pytest.mark.ut
def test_decode_invalid_number(decoder):
    with pytest.raises(DecodingError):
        decoder.decode({"N": "twelve"})


@pytest.mark.ut
def test_decode_binary(decoder):
    payload = zlib.compress(b"a fairly repetitive payload " * 8)
    wire = {"B": base64.b64encode(payload).decode()}

    decoded = decoder.decode(wire)

    assert decoded == payload
    assert zlib.decompress(decoded) == b"a fairly repetitive payload " * 8


@pytest.mark.ut
def test_decode_invalid_base64(decoder):
    with pytest.raises(DecodingError):
        decoder.decode({"B": "not base64!"})


@pytest.mark.ut
def test_decode_sets_as_sets(decoder):
    assert decoder.decode({"SS": ["a", "b", "a"]}) == {"a", "b"}
    assert decoder.decode({"NS": ["1", "2.5"]}) == {1, 2.5}
    assert decoder.decode({"BS": ["AA==", "AQ=="]}) == {b"\x00", b"\x01"}


@pytest.mark.ut
def test_decode_sets_as_lists(list_decoder):
    assert list_decoder.decode({"SS": ["b", "a"]}) == ["b", "a"]
    assert list_decoder.decode({"NS": ["3", "1"]}) == [3, 1]


@pytest.mark.ut
def test_decode_set_mode_per_call(decoder, list_decoder):
    assert decoder.decode({"SS": ["b", "a"]}, sets=False) == ["b", "a"]
    assert list_decoder.decode({"SS": ["b", "a"]}, sets=True) == {"a", "b"}


@pytest.mark.ut
def test_decode_set_mode_applies_to_nested_values(list_decoder):
    wire = {"M": {"tags": {"SS": ["x"]}, "more": {"L": [{"NS": ["1"]}]}}}
    assert list_decoder.decode(wire) == {"tags": ["x"], "more": [[1]]}


@pytest.mark.ut
def test_decode_list_and_map(decoder):
    wire = {
        "L": [
            {"S": "asdf"},
            {"N": "1"},
            {"M": {"inner": {"NULL": True}}},
        ]
    }
    assert decoder.decode(wire) == ["asdf", 1, {"inner": None}]


@pytest.mark.ut
def test_decode_unknown_tag(decoder):
    with pytest.raises(DecodingError, match="Unrecognized type tag"):
        decoder.decode({"M": {"field": {"X": "1"}}})


@pytest.mark.ut
def test_decode_untagged_attribute_value(decoder):
    with pytest.raises(DecodingError):
        decoder.decode({"field": "plain"})


@pytest.mark.ut
def test_decode_non_mapping(decoder):
    with pytest.raises(DecodingError):
        decoder.decode(["S", "foo"])


@pytest.mark.ut
def test_decode_item(decoder):
    item = {"email": {"S": "foo@bar.com"}, "age": {"N": "23"}}
    assert decoder.decode(item) == {"email": "foo@bar.com", "age": 23}


@pytest.mark.ut
def test_decode_item_envelope(decoder):
    response = {"Item": {"email": {"S": "foo@bar.com"}}}
    assert decoder.decode_item(response) == {"email": "foo@bar.com"}


@pytest.mark.ut
def test_decode_items_envelope(decoder):
    response = {
        "Count": 2,
        "Items": [{"id": {"N": "1"}}, {"id": {"N": "2"}}],
    }
    assert decoder.decode(response) == [{"id": 1}, {"id": 2}]


@pytest.mark.ut
def test_attribute_named_item_is_not_an_envelope(decoder):
    # Here "Item" holds a tagged value, so this is a plain item.
    assert decoder.decode({"Item": {"S": "x"}}) == {"Item": "x"}


@pytest.mark.ut
def test_decode_root_never_unwraps(decoder):
    item = {"S": {"S": "value"}}
    assert decoder.decode_root(item) == {"S": "value"}


@pytest.mark.ut
def test_decode_as_dataclass(decoder):
    item = {
        "email": {"S": "foo@bar.com"},
        "name": {"M": {"first": {"S": "bob"}, "last": {"S": "bubba"}}},
        "age": {"N": "23"},
        "admin": {"BOOL": False},
    }
    assert decoder.decode(item, as_=User) == make_user()


@pytest.mark.ut
def test_decode_as_fills_missing_fields_with_none(decoder):
    assert decoder.decode({"email": {"S": "a@b.c"}}, as_=Name) == Name(first=None, last=None)


@pytest.mark.ut
def test_decode_as_uses_registered_decoder(decoder):
    item = {
        "email": {"S": "foo@bar.com"},
        "name": {"M": {"first": {"S": "bob"}, "last": {"S": "bubba"}}},
    }
    assert decoder.decode({"Item": item}, as_=Profile) == Profile(
        email="foo@bar.com", name=Name(first="bob", last="bubba")
    )


@pytest.mark.ut
def test_decode_as_uses_from_mapping(decoder):
    assert decoder.decode({"M": {"x": {"N": "1"}, "y": {"N": "2"}}}, as_=Point) == Point(1, 2)


@pytest.mark.ut
def test_decode_items_as_type(decoder):
    response = {"Items": [{"x": {"N": "1"}, "y": {"N": "2"}}]}
    assert decoder.decode(response, as_=Point) == [Point(1, 2)]


@pytest.mark.ut
def test_decode_as_requires_map(decoder):
    with pytest.raises(DecodingError):
        decoder.decode({"S": "foo"}, as_=User)


@pytest.mark.ut
def test_decode_as_plain_class(decoder):
    class Plain:
        pass

    decoded = decoder.decode({"a": {"N": "1"}}, as_=Plain)

    assert isinstance(decoded, Plain)
    assert decoded.a == 1


@pytest.mark.ut
def test_structured_round_trip(encoder, decoder):
    user = make_user()
    assert decoder.decode(encoder.encode_root(user), as_=User) == user


@pytest.mark.ut
@pytest.mark.parametrize(
    "value",
    [
        "",
        "foo",
        0,
        -12,
        9007199254740993,
        1.5,
        True,
        None,
        ["a", 1, None],
        {"deep": {"deeper": [1, {"x": "y"}]}},
        {"a", "b"},
        {1, 2.5},
        {b"\x00", b"\xff"},
        b"\x00\x01",
    ],
)
def test_round_trip(encoder, decoder, value):
    assert decoder.decode(encoder.encode(value)) == value


@pytest.mark.ut
def test_round_trip_sets_as_lists(list_decoder):
    encoder = Encoder()
    assert list_decoder.decode(encoder.encode({"b", "a"})) == ["a", "b"]


@pytest.mark.ut
def test_module_helpers():
    assert decode({"N": "1"}) == 1
    assert decode_item({"Item": {"a": {"S": "b"}}}) == {"a": "b"}
    assert Decoder().options.decode_sets_as_sets is True


@pytest.mark.ut
@pytest.mark.parametrize(
    "item, expected",
    [
        ({"N": {"S": "x"}}, {"N": "x"}),
        ({"S": {"N": "1"}}, {"S": 1}),
        ({"M": {"M": {}}}, {"M": {}}),
        ({"L": {"BOOL": True}}, {"L": True}),
    ],
)
def test_decode_item_with_attribute_named_like_a_tag(encoder, decoder, item, expected):
    assert decoder.decode(item) == expected
    assert decoder.decode({"Item": item}) == expected
    assert decoder.decode(encoder.encode_root(expected)) == expected


@pytest.mark.ut
def test_decode_item_envelope_always_unwraps_valid_items(decoder):
    assert decoder.decode({"Item": {"N": {"S": "x"}}, "ConsumedCapacity": {}}) == {"N": "x"}
    assert decoder.decode({"Item": {}}) == {}


@pytest.mark.ut
def test_tag_shaped_value_prefers_tagged_reading(decoder):
    # Valid as a tagged map; the Item reading would fail on {"a": ...}.
    assert decoder.decode({"M": {"a": {"S": "x"}}}) == {"a": "x"}


@pytest.mark.ut
def test_tag_shaped_value_invalid_both_ways_reports_tag_error(decoder):
    with pytest.raises(DecodingError, match="Invalid number payload"):
        decoder.decode({"N": {"X": "x"}})
