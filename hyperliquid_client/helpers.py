"""Helper utilities for the Hyperliquid client.

This module contains the endpoint constants, client identification and the
JSON serialization used on the wire, plus the mapping of HTTP statuses to
exceptions.
"""

import logging
from decimal import Decimal
from functools import lru_cache
from typing import Any

import orjson

from hyperliquid_client.errors import (
    BadGateway,
    BadHttpStatus,
    BadRequest,
    DeserializationError,
    GatewayTimeout,
    InternalServerError,
    NotFound,
    RateLimited,
    SerializationError,
    ServiceUnavailable,
    UnprocessableEntity,
)

log = logging.getLogger(__name__)


# ============================================================================
# CONSTANTS
# ============================================================================

MAINNET_API_URL: str = "https://api.hyperliquid.xyz"
TESTNET_API_URL: str = "https://api.hyperliquid-testnet.xyz"

EXCHANGE_ENDPOINT: str = "exchange"


def default_api_url(is_testnet: bool) -> str:
    """Return the public API base URL for the network."""
    return TESTNET_API_URL if is_testnet else MAINNET_API_URL


# ============================================================================
# CLIENT IDENTIFICATION
# ============================================================================


@lru_cache(maxsize=1)
def get_user_agent() -> str:
    """Get the client identification string sent with every request."""
    import hyperliquid_client

    return f"HyperliquidPythonClient/{hyperliquid_client.__version__}"


# ============================================================================
# SERIALIZATION
# ============================================================================


def decimal_as_str(obj: object) -> str:
    """Serialize Decimal objects to JSON strings.

    Converts Decimal to string to preserve precision in JSON serialization.
    """
    if isinstance(obj, Decimal):
        return format(obj, "f")

    raise TypeError


def serialize_request(request: Any) -> bytes:
    """Serialize a request body to JSON bytes.

    Args:
        request: Request data to serialize

    Returns:
        JSON bytes

    Raises:
        SerializationError: If serialization fails

    """
    try:
        return orjson.dumps(request, default=decimal_as_str)
    except Exception as e:
        raise SerializationError(f"Failed to serialize request: {e}") from e


def deserialize_response(response_body: bytes, url: str) -> Any:
    """Deserialize a JSON response body.

    Args:
        response_body: Response bytes to deserialize
        url: URL that was requested (for error messages)

    Returns:
        Deserialized JSON value

    Raises:
        DeserializationError: If deserialization fails

    """
    try:
        return orjson.loads(response_body)
    except Exception as e:
        raise DeserializationError(
            f"Failed to parse JSON response from {url}: {e}"
        ) from e


# ============================================================================
# HTTP STATUS HANDLING
# ============================================================================


def _error_message(body: Any) -> str:
    if isinstance(body, dict):
        # some error bodies carry {"status": "err", "response": "..."}
        message = body.get("response") or body.get("error") or body.get("message")
        if isinstance(message, str):
            return message
        return str(body) if body else "<no error message>"
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8", errors="replace")
    return str(body) if body else "<no error message>"


def raise_response_errors(status: int, body: Any) -> None:
    """Check an HTTP status and raise the matching exception for non-2XX codes.

    The body of an error response is not always JSON; plain text bodies are
    reported as they are.

    Args:
        status: The HTTP status code
        body: The decoded JSON body, or the raw bytes when it was not JSON

    Raises:
        BadRequest: For 400 status codes
        NotFound: For 404 status codes
        UnprocessableEntity: For 422 status codes
        RateLimited: For 429 status codes
        BadHttpStatus: For other 4XX and unexpected status codes
        InternalServerError: For 500 status codes
        BadGateway: For 502 status codes
        ServiceUnavailable: For 503 status codes
        GatewayTimeout: For 504 status codes

    """
    if 200 <= status < 300:
        return

    error_message = _error_message(body)
    log.debug("HTTP %d: %s", status, error_message)

    # 4xx Client Errors
    if status == 400:
        raise BadRequest(status, f"Bad request: {error_message}")

    if status == 404:
        raise NotFound(status, f"Not found: {error_message}")

    if status == 422:
        raise UnprocessableEntity(status, f"Unprocessable entity: {error_message}")

    if status == 429:
        raise RateLimited(status, f"Rate limit exceeded: {error_message}")

    if 400 <= status < 500:
        raise BadHttpStatus(status, f"Client error ({status}): {error_message}")

    # 5xx Server Errors
    if status == 500:
        raise InternalServerError(status, f"Internal server error: {error_message}")

    if status == 502:
        raise BadGateway(status, f"Bad gateway: {error_message}")

    if status == 503:
        raise ServiceUnavailable(status, f"Service unavailable: {error_message}")

    if status == 504:
        raise GatewayTimeout(status, f"Gateway timeout: {error_message}")

    raise BadHttpStatus(status, f"Unexpected status ({status}): {error_message}")
