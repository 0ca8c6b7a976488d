import json
import logging
from typing import Any

import httpx

from dynawire.core.models.errors import ServiceError
from dynawire.core.models.operation import Operation
from dynawire.core.ports.transport import Signer


def _error_code(raw_type: str) -> str:
    # "com.amazonaws.dynamodb.v20120810#ResourceNotFoundException"
    return raw_type.rsplit("#", 1)[-1]


def _raise_for_error(r: httpx.Response) -> None:
    """Raise ServiceError on any unsuccessful HTTP response."""
    if 200 <= r.status_code <= 299:
        return

    try:
        body = r.json()
    except ValueError:
        raise ServiceError(f"HTTP{r.status_code}", r.text or r.reason_phrase) from None

    if not isinstance(body, dict):
        raise ServiceError(f"HTTP{r.status_code}", str(body))

    code = _error_code(str(body.get("__type", f"HTTP{r.status_code}")))
    message = body.get("message") or body.get("Message") or ""
    raise ServiceError(code, message, item=body.get("Item"))


class HttpxTransport:
    """
    Transport posting operations as JSON over HTTP with httpx.

    Request signing is delegated to an optional Signer; without one, the
    operation headers are sent as-is (enough for local emulators that do not
    verify signatures).
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = 5.0,
        signer: Signer | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._signer = signer
        self._client = client if client is not None else httpx.AsyncClient(
            timeout=httpx.Timeout(timeout)
        )
        self._logger = logging.getLogger("infra.httpx_transport")

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def request(self, operation: Operation) -> dict[str, Any]:
        body = json.dumps(operation.data).encode("utf-8")
        headers = dict(operation.headers)
        if self._signer is not None:
            headers = self._signer.sign(operation, headers, body)

        self._logger.debug(f"POST {self._endpoint} {operation.target}")
        r = await self._client.post(self._endpoint, content=body, headers=headers)

        try:
            _raise_for_error(r)
        except ServiceError as ex:
            self._logger.warning(f"{operation.target} failed: {ex}")
            raise ex

        if not r.content:
            return {}
        try:
            return r.json()
        except ValueError as ex:
            raise ServiceError("InvalidResponse", f"Undecodable response body, size {len(r.content)} bytes") from ex

    async def close(self) -> None:
        await self._client.aclose()
