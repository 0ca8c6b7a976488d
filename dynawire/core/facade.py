import logging
from collections.abc import AsyncIterator
from typing import Any

from dynawire.core.codec.decoder import Decoder
from dynawire.core.models.errors import ServiceError
from dynawire.core.models.operation import Operation
from dynawire.core.ports.transport import Transport
from dynawire.core.requests.builder import RequestBuilder
from dynawire.core.requests.lazy import stream_scan, stream_query

TABLE_NOT_FOUND = "ResourceNotFoundException"


class DynamoClient:
    """
    Ties the request builders, a transport and the decoder together.

    Builders are reachable through `client.requests` for operations without
    a shortcut here; send their result with `request()`.
    """

    def __init__(
        self,
        builder: RequestBuilder,
        transport: Transport,
        decoder: Decoder,
    ) -> None:
        self.requests = builder
        self.decoder = decoder
        self._transport = transport
        self._logger = logging.getLogger("core.facade")

    async def request(self, operation: Operation) -> dict[str, Any]:
        return await self._transport.request(operation)

    async def close(self) -> None:
        await self._transport.close()

    async def put_item(self, table: str, record: Any, **opts: Any) -> dict[str, Any]:
        return await self.request(self.requests.put_item(table, record, **opts))

    async def get_item(self, table: str, key: Any, as_: type | None = None, **opts: Any) -> Any:
        """Fetch and decode one item. Returns None when the item does not exist."""
        body = await self.request(self.requests.get_item(table, key, **opts))
        if "Item" not in body:
            return None
        return self.decoder.decode_root(body["Item"], as_=as_)

    async def update_item(self, table: str, key: Any, **opts: Any) -> dict[str, Any]:
        return await self.request(self.requests.update_item(table, key, **opts))

    async def delete_item(self, table: str, key: Any, **opts: Any) -> dict[str, Any]:
        return await self.request(self.requests.delete_item(table, key, **opts))

    async def scan(self, table: str, as_: type | None = None, **opts: Any) -> list[Any]:
        """Run a single scan request and decode the returned page."""
        body = await self.request(self.requests.scan(table, **opts))
        return [self.decoder.decode_root(item, as_=as_) for item in body.get("Items", [])]

    async def query(self, table: str, as_: type | None = None, **opts: Any) -> list[Any]:
        """Run a single query request and decode the returned page."""
        body = await self.request(self.requests.query(table, **opts))
        return [self.decoder.decode_root(item, as_=as_) for item in body.get("Items", [])]

    async def stream_scan(self, table: str, as_: type | None = None, **opts: Any) -> AsyncIterator[Any]:
        """Scan every page of a table, yielding decoded items."""
        async for item in stream_scan(self._transport, self.requests, table, **opts):
            yield self.decoder.decode_root(item, as_=as_)

    async def stream_query(self, table: str, as_: type | None = None, **opts: Any) -> AsyncIterator[Any]:
        """Query every page, yielding decoded items."""
        async for item in stream_query(self._transport, self.requests, table, **opts):
            yield self.decoder.decode_root(item, as_=as_)

    async def table_exists(self, table: str) -> bool:
        try:
            await self.request(self.requests.describe_table(table))
        except ServiceError as ex:
            if ex.code == TABLE_NOT_FOUND:
                self._logger.debug(f"Table {table} does not exist")
                return False
            raise ex
        return True
