"""HTTP transport implementation using httpx.

This module posts JSON payloads to the API with an ``httpx.AsyncClient``.
"""

import logging
from typing import Any

from typing_extensions import override

import httpx

from hyperliquid_client.cancel import CancelToken, run_cancellable
from hyperliquid_client.errors import (
    ApiRequestError,
    BaseError,
    DeserializationError,
    HttpConnectionError,
    TransportError,
    TransportTimeoutError,
)
from hyperliquid_client.helpers import (
    default_api_url,
    deserialize_response,
    get_user_agent,
    raise_response_errors,
    serialize_request,
)
from hyperliquid_client.transports.interface import HttpResponse, Transport

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS: float = 10.0


class HttpxTransport(Transport):
    """Transport implementation using httpx.

    Provides asynchronous request execution using the httpx library.
    """

    def __init__(
        self,
        is_testnet: bool = False,
        api_url: str | None = None,
        timeout: float | None = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the httpx transport.

        Args:
            is_testnet: Whether to talk to testnet. Defaults to mainnet.
            api_url: Base URL override. Defaults to the public URL of the network.
            timeout: Request timeout in seconds, or None to disable it.
            client: An existing client to reuse. The transport only closes
                clients it created itself.

        """
        self.is_testnet = is_testnet
        self.api_url = (api_url or default_api_url(is_testnet)).rstrip("/")
        self.timeout = timeout
        self._owns_client = client is None
        self.client = client if client is not None else httpx.AsyncClient(timeout=timeout)

    def __repr__(self) -> str:
        return f"HttpxTransport(api_url={self.api_url!r}, is_testnet={self.is_testnet})"

    async def _post(self, url: str, body: bytes) -> HttpResponse:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": get_user_agent(),
        }
        try:
            response = await self.client.post(url, headers=headers, content=body)
        except BaseError:
            raise
        except httpx.TimeoutException as e:
            raise TransportTimeoutError(
                f"POST request to {url} timed out", timeout_seconds=self.timeout
            ) from e
        except (httpx.ConnectError, httpx.ConnectTimeout) as e:
            raise HttpConnectionError(f"Failed to connect to {url}", url=url) from e
        except httpx.NetworkError as e:
            raise HttpConnectionError(
                f"Network error during POST request to {url}", url=url
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"POST request to {url} failed: {e}") from e

        if 200 <= response.status_code < 300:
            body = deserialize_response(response.content, url)
        else:
            try:
                body = deserialize_response(response.content, url)
            except DeserializationError:
                body = response.content
        return HttpResponse(
            status=response.status_code,
            body=body,
            headers=dict(response.headers),
        )

    @override
    async def send(
        self,
        endpoint: str,
        payload: Any,
        cancel_token: CancelToken | None = None,
    ) -> Any:
        """Post a payload to ``{api_url}/{endpoint}``.

        Args:
            endpoint: The endpoint name, such as ``"exchange"``.
            payload: The JSON-serializable request body.
            cancel_token: Aborts the pending request when fired.

        Returns:
            The decoded JSON response body.

        Raises:
            SerializationError: If the payload cannot be encoded.
            TransportTimeoutError: If the request times out.
            HttpConnectionError: If there is a connection or network error.
            TransportError: If any other transport-level error occurs.
            DeserializationError: If a successful response is not valid JSON.
            BadHttpStatus: If the server answered with a non-2XX status.
            ApiRequestError: If the body is an ``{"type": "error"}`` object.
            OperationCancelled: If the cancel token fired first.

        """
        url = f"{self.api_url}/{endpoint}"
        body = serialize_request(payload)
        log.debug("POST %s (%d bytes)", url, len(body))

        response = await run_cancellable(self._post(url, body), cancel_token)
        log.debug("POST %s -> %d", url, response.status)
        raise_response_errors(response.status, response.body)

        if isinstance(response.body, dict) and response.body.get("type") == "error":
            raise ApiRequestError(
                str(response.body.get("message", "<no error message>")),
                response.body,
            )
        return response.body

    @override
    async def close(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
