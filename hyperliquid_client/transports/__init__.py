from hyperliquid_client.transports.defaults import DEFAULT_TRANSPORT
from hyperliquid_client.transports.httpx import HttpxTransport
from hyperliquid_client.transports.interface import HttpResponse, Transport

__all__ = [
    "Transport",
    "HttpResponse",
    "HttpxTransport",
    "DEFAULT_TRANSPORT",
]
