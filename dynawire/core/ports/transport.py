from typing import Any, Protocol

from dynawire.core.models.operation import Operation


class Transport(Protocol):
    """
    Sends a built Operation to the remote service.

    Implementations own everything below the JSON payload: endpoint
    resolution, signing, connection handling and retries. The contract with
    the rest of dynawire is small:

    - the payload given is JSON-serializable as-is
    - a successful call returns the JSON-decoded response body
    - a failed call raises ServiceError carrying the service error code,
      message, and the raw item when the service attached one
    """

    async def request(self, operation: Operation) -> dict[str, Any]:
        """Send `operation` and return the decoded response body."""

    async def close(self) -> None:
        """Release connections held by the transport."""


class Signer(Protocol):
    """
    Adds authentication headers to an outgoing request. dynawire ships no
    signing algorithm; applications plug their own.
    """

    def sign(
        self,
        operation: Operation,
        headers: dict[str, str],
        body: bytes
    ) -> dict[str, str]:
        """Return the headers to send, including any authentication headers."""
