"""
Request builders for the service's JSON API.

Each method renames snake_case keyword options into the service's CamelCase
fields, encodes every attribute value through the Encoder, and returns an
Operation ready for a Transport. Values that are already tagged pass
through the encoder untouched, so callers can force a wire type:

    builder.scan("Users", expression_attribute_values={"api_key": {"B": "..."}})
"""
from collections.abc import Iterable, Mapping
from typing import Any

from dynawire.core.codec.encoder import Encoder
from dynawire.core.helpers.utils import camelize, camelize_keys, upcase
from dynawire.core.models.operation import Operation
from dynawire.core.models.types import Item, TaggedValue, wire_type

NESTED_OPTS = frozenset({
    "exclusive_start_key",
    "expression_attribute_values",
    "expression_attribute_names",
})

UPCASE_OPTS = frozenset({
    "return_values",
    "return_item_collection_metrics",
    "return_consumed_capacity",
    "return_values_on_condition_check_failure",
    "select",
    "total_segments",
})

BILLING_MODES = {
    "provisioned": "PROVISIONED",
    "pay_per_request": "PAY_PER_REQUEST",
}

TRANSACT_WRITE_METHODS = frozenset({"put", "update", "delete", "condition_check"})


def _pairs_to_dict(value: Any) -> Any:
    """Accept either a mapping or an iterable of (key, value) pairs."""
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, (list, tuple)):
        return dict(value)
    return value


def _billing_mode(mode: str) -> str:
    try:
        return BILLING_MODES[str(mode).lower()]
    except KeyError:
        raise ValueError(
            f"Unknown billing mode '{mode}'; expected one of {sorted(BILLING_MODES)}"
        ) from None


def _stream_specification(enabled: bool | None, view_type: str | None) -> dict[str, Any] | None:
    if enabled is None:
        return None
    spec: dict[str, Any] = {"StreamEnabled": bool(enabled)}
    if enabled and view_type is not None:
        spec["StreamViewType"] = upcase(view_type)
    return spec


class RequestBuilder:
    def __init__(self, encoder: Encoder) -> None:
        self._encoder = encoder

    @property
    def encoder(self) -> Encoder:
        return self._encoder

    # Tables

    def list_tables(self) -> Operation:
        return Operation.build("ListTables", {})

    def create_table(
        self,
        name: str,
        key_schema: str | Iterable[tuple[str, str]] | Mapping[str, str],
        key_definitions: Iterable[tuple[str, str]] | Mapping[str, str],
        read_capacity: int | None = None,
        write_capacity: int | None = None,
        *,
        billing_mode: str = "provisioned",
        global_indexes: list[Mapping[str, Any]] | None = None,
        local_indexes: list[Mapping[str, Any]] | None = None,
        stream_enabled: bool | None = None,
        stream_view_type: str | None = None,
    ) -> Operation:
        """
        Create a table.

        `key_schema` is either a single attribute name (a simple hash key) or
        a sequence of (attribute, "hash" | "range") pairs. `key_definitions`
        maps attribute names to type names such as "string" or "number".
        Capacities are ignored for "pay_per_request" tables.
        """
        if isinstance(key_schema, str):
            key_schema = [(key_schema, "hash")]

        data: dict[str, Any] = {
            "TableName": name,
            "AttributeDefinitions": [
                {"AttributeName": attr, "AttributeType": wire_type(type_name)}
                for attr, type_name in _pairs_to_dict(key_definitions).items()
            ],
            "KeySchema": [
                {"AttributeName": attr, "KeyType": upcase(key_type)}
                for attr, key_type in _pairs_to_dict(key_schema).items()
            ],
        }

        data["BillingMode"] = _billing_mode(billing_mode)
        if data["BillingMode"] == "PROVISIONED":
            data["ProvisionedThroughput"] = {
                "ReadCapacityUnits": read_capacity,
                "WriteCapacityUnits": write_capacity,
            }

        if global_indexes:
            data["GlobalSecondaryIndexes"] = [camelize_keys(i, deep=True) for i in global_indexes]
        if local_indexes:
            data["LocalSecondaryIndexes"] = [camelize_keys(i, deep=True) for i in local_indexes]

        stream = _stream_specification(stream_enabled, stream_view_type)
        if stream is not None:
            data["StreamSpecification"] = stream

        return Operation.build("CreateTable", data)

    def describe_table(self, name: str) -> Operation:
        return Operation.build("DescribeTable", {"TableName": name})

    def update_table(self, name: str, **attributes: Any) -> Operation:
        stream = _stream_specification(
            attributes.pop("stream_enabled", None),
            attributes.pop("stream_view_type", None),
        )
        if attributes.get("billing_mode") is not None:
            attributes["billing_mode"] = _billing_mode(attributes["billing_mode"])

        data = camelize_keys(
            {k: v for k, v in attributes.items() if v is not None},
            deep=True
        )
        if stream is not None:
            data["StreamSpecification"] = stream
        data["TableName"] = name

        return Operation.build("UpdateTable", data)

    def delete_table(self, name: str) -> Operation:
        return Operation.build("DeleteTable", {"TableName": name})

    def update_time_to_live(self, table: str, ttl_attribute: str | None, enabled: bool) -> Operation:
        data: dict[str, Any] = {"TableName": table}
        if ttl_attribute:
            data["TimeToLiveSpecification"] = {
                "AttributeName": ttl_attribute,
                "Enabled": enabled,
            }
        return Operation.build("UpdateTimeToLive", data)

    def describe_time_to_live(self, table: str) -> Operation:
        return Operation.build("DescribeTimeToLive", {"TableName": table})

    # Records

    def scan(self, name: str, **opts: Any) -> Operation:
        data = self.build_opts(opts)
        data["TableName"] = name
        return Operation.build("Scan", data)

    def query(self, name: str, **opts: Any) -> Operation:
        data = self.build_opts(opts)
        data["TableName"] = name
        return Operation.build("Query", data)

    def batch_get_item(self, requests: Mapping[str, Any], **opts: Any) -> Operation:
        """
        Batch-get items from several tables. `requests` maps a table name to
        its per-table options, which must include `keys`.

            builder.batch_get_item({
                "Users": {"keys": [{"api_key": "key1"}], "consistent_read": True},
            })
        """
        request_items: dict[str, Any] = {}
        for table_name, table_query in requests.items():
            table_query = _pairs_to_dict(table_query)
            keys = [self.encode_item(k) for k in table_query.get("keys", [])]

            table_data = {
                camelize(k): v for k, v in table_query.items()
                if k not in NESTED_OPTS and k not in UPCASE_OPTS and k != "keys" and v is not None
            }
            if table_query.get("expression_attribute_names") is not None:
                table_data["ExpressionAttributeNames"] = dict(
                    _pairs_to_dict(table_query["expression_attribute_names"])
                )
            table_data["Keys"] = keys
            request_items[table_name] = table_data

        data = self.build_opts(opts)
        data["RequestItems"] = request_items
        return Operation.build("BatchGetItem", data)

    def put_item(self, name: str, record: Any, **opts: Any) -> Operation:
        data = self.build_opts(opts)
        data["TableName"] = name
        data["Item"] = self.encode_item(record)
        return Operation.build("PutItem", data)

    def batch_write_item(self, requests: Mapping[str, list[Mapping[str, Any]]], **opts: Any) -> Operation:
        """
        Put or delete items in several tables. Each table maps to a list of
        {"put_request": {"item": record}} or {"delete_request": {"key": key}}.
        """
        request_items: dict[str, Any] = {}
        for table_name, writes in requests.items():
            request_items[table_name] = [self._write_request(w) for w in writes]

        data = self.build_opts(opts)
        data["RequestItems"] = request_items
        return Operation.build("BatchWriteItem", data)

    def get_item(self, name: str, primary_key: Any, **opts: Any) -> Operation:
        data = self.build_opts(opts)
        data["TableName"] = name
        data["Key"] = self.encode_item(primary_key)
        return Operation.build("GetItem", data)

    def update_item(self, name: str, primary_key: Any, **opts: Any) -> Operation:
        data = self.build_opts(opts)
        data["TableName"] = name
        data["Key"] = self.encode_item(primary_key)
        return Operation.build("UpdateItem", data)

    def delete_item(self, name: str, primary_key: Any, **opts: Any) -> Operation:
        data = self.build_opts(opts)
        data["TableName"] = name
        data["Key"] = self.encode_item(primary_key)
        return Operation.build("DeleteItem", data)

    # Transactions

    def transact_get_items(self, items: Iterable[tuple], **opts: Any) -> Operation:
        """
        Read several items atomically. Each entry is (table, key) or
        (table, key, options).
        """
        data = self.build_opts(opts)
        data["TransactItems"] = [self._transact_item("get", entry) for entry in items]
        return Operation.build("TransactGetItems", data)

    def transact_write_items(self, items: Iterable[tuple[str, tuple]], **opts: Any) -> Operation:
        """
        Write several items atomically. Each entry is (method, details) where
        method is "put", "update", "delete" or "condition_check" and details
        is (table, item_or_key) or (table, item_or_key, options).
        """
        transact_items = []
        for method, entry in items:
            if method not in TRANSACT_WRITE_METHODS:
                raise ValueError(f"Unknown transaction method '{method}'")
            transact_items.append(self._transact_item(method, entry))

        data = self.build_opts(opts)
        data["TransactItems"] = transact_items
        return Operation.build("TransactWriteItems", data)

    # Option builders

    def build_opts(self, opts: Mapping[str, Any]) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for key, value in opts.items():
            if key in NESTED_OPTS or value is None:
                continue
            data[camelize(key)] = upcase(value) if key in UPCASE_OPTS else value

        if opts.get("exclusive_start_key") is not None:
            data["ExclusiveStartKey"] = self.encode_values(opts["exclusive_start_key"])

        if opts.get("expression_attribute_names") is not None:
            data["ExpressionAttributeNames"] = dict(_pairs_to_dict(opts["expression_attribute_names"]))

        if opts.get("expression_attribute_values") is not None:
            values = self.encode_values(opts["expression_attribute_values"])
            data["ExpressionAttributeValues"] = {
                k if k.startswith(":") else f":{k}": v for k, v in values.items()
            }

        return data

    def encode_values(self, values: Any) -> dict[str, TaggedValue]:
        return {
            str(attr): self._encoder.encode(value)
            for attr, value in _pairs_to_dict(values).items()
        }

    def encode_item(self, record: Any) -> Item:
        return self._encoder.encode_root(_pairs_to_dict(record))

    def _write_request(self, write: Mapping[str, Any]) -> dict[str, Any]:
        write = _pairs_to_dict(write)
        if "delete_request" in write:
            key = _pairs_to_dict(write["delete_request"])["key"]
            return {"DeleteRequest": {"Key": self.encode_item(key)}}
        if "put_request" in write:
            item = _pairs_to_dict(write["put_request"])["item"]
            return {"PutRequest": {"Item": self.encode_item(item)}}
        raise ValueError(f"Unknown write request: {sorted(write)}")

    def _transact_item(self, method: str, entry: tuple) -> dict[str, Any]:
        if len(entry) == 2:
            table_name, record = entry
            opts: Mapping[str, Any] = {}
        elif len(entry) == 3:
            table_name, record, opts = entry
        else:
            raise ValueError(f"Transaction entries are (table, item[, options]), got {entry!r}")

        details = self.build_opts(_pairs_to_dict(opts))
        details["TableName"] = table_name
        details["Item" if method == "put" else "Key"] = self.encode_item(record)
        return {camelize(method): details}
