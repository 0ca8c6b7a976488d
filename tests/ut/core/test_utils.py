import pytest

from dynawire.core.helpers.utils import camelize, camelize_keys, upcase


@pytest.mark.ut
@pytest.mark.parametrize(
    "name, expected",
    [
        ("condition_expression", "ConditionExpression"),
        ("return_values_on_condition_check_failure", "ReturnValuesOnConditionCheckFailure"),
        ("limit", "Limit"),
        ("TableName", "TableName"),
        ("put", "Put"),
    ],
)
def test_camelize(name, expected):
    assert camelize(name) == expected


@pytest.mark.ut
def test_camelize_keys():
    assert camelize_keys({"index_name": "i", "key_schema": [{"attribute_name": "a"}]}) == {
        "IndexName": "i",
        "KeySchema": [{"attribute_name": "a"}],
    }


@pytest.mark.ut
def test_camelize_keys_deep():
    data = {"key_schema": [{"attribute_name": "a"}], "projection": [("projection_type", "ALL")]}
    assert camelize_keys(data, deep=True) == {
        "KeySchema": [{"AttributeName": "a"}],
        "Projection": {"ProjectionType": "ALL"},
    }


@pytest.mark.ut
def test_camelize_keys_leaves_scalars_and_empty_lists():
    assert camelize_keys("text", deep=True) == "text"
    assert camelize_keys([], deep=True) == []


@pytest.mark.ut
def test_upcase():
    assert upcase("all_old") == "ALL_OLD"
    assert upcase(4) == 4
