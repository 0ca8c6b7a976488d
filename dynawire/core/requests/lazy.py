import logging
from collections.abc import AsyncIterator, Callable
from typing import Any

from dynawire.core.models.operation import Operation
from dynawire.core.ports.transport import Transport
from dynawire.core.requests.builder import RequestBuilder

logger = logging.getLogger("core.requests.lazy")


async def paginate(
    transport: Transport,
    build: Callable[[dict[str, Any] | None], Operation],
) -> AsyncIterator[dict[str, Any]]:
    """
    Repeatedly send the operation produced by `build`, feeding the previous
    page's LastEvaluatedKey back as the start key, and yield the raw wire
    items of every page until the service stops returning a continuation.
    """
    start_key: dict[str, Any] | None = None
    page = 0

    while True:
        operation = build(start_key)
        body = await transport.request(operation)
        page += 1

        items = body.get("Items", [])
        logger.debug(f"{operation.name} page #{page}: {len(items)} items")
        for item in items:
            yield item

        start_key = body.get("LastEvaluatedKey")
        if not start_key:
            return


def stream_scan(
    transport: Transport,
    builder: RequestBuilder,
    name: str,
    **opts: Any
) -> AsyncIterator[dict[str, Any]]:
    def build(start_key: dict[str, Any] | None) -> Operation:
        if start_key is None:
            return builder.scan(name, **opts)
        # LastEvaluatedKey is already tagged, so the encoder passes it through.
        return builder.scan(name, **{**opts, "exclusive_start_key": start_key})

    return paginate(transport, build)


def stream_query(
    transport: Transport,
    builder: RequestBuilder,
    name: str,
    **opts: Any
) -> AsyncIterator[dict[str, Any]]:
    def build(start_key: dict[str, Any] | None) -> Operation:
        if start_key is None:
            return builder.query(name, **opts)
        return builder.query(name, **{**opts, "exclusive_start_key": start_key})

    return paginate(transport, build)
