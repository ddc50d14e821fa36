"""Abstract interface for request transports.

A transport delivers a JSON payload to one of the API endpoints and returns
the decoded response body. The exchange client only ever talks to this
interface, so the HTTP layer is pluggable and easy to replace in tests.
"""

from abc import ABC, abstractmethod
from typing import Any

from hyperliquid_client.cancel import CancelToken


class HttpResponse:
    """Container for HTTP response data.

    Encapsulates the status code, body, and headers from an HTTP response.
    """

    status: int
    body: Any
    headers: dict[str, str] | None

    __slots__ = ("status", "body", "headers")

    def __init__(
        self,
        *,
        status: int,
        body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Initialize an HTTP response object.

        Args:
            status: The HTTP status code of the response.
            body: The decoded JSON body, or the raw bytes of a non-JSON error
                body. Defaults to an empty dict if None.
            headers: Optional HTTP response headers as key-value pairs.

        """
        self.status = status
        self.body = body if body is not None else {}
        self.headers = headers


class Transport(ABC):
    """Abstract base class for request transports.

    Attributes:
        is_testnet: Whether the transport talks to testnet. Signing reads this
            to pick the ``source`` tag and the ``hyperliquidChain`` value.

    """

    is_testnet: bool = False

    @abstractmethod
    async def send(
        self,
        endpoint: str,
        payload: Any,
        cancel_token: CancelToken | None = None,
    ) -> Any:
        """Send a payload to an API endpoint.

        Args:
            endpoint: The endpoint name, such as ``"exchange"``.
            payload: The JSON-serializable request body.
            cancel_token: Aborts the pending request when fired.

        Returns:
            The decoded JSON response body.

        """
        ...

    async def close(self) -> None:
        """Release any resources held by the transport."""
        return None
