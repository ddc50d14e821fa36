"""Default transport configuration.

This module defines the transport implementation used by the exchange client
when no custom transport is provided.
"""

from typing import Type

from hyperliquid_client.transports.httpx import HttpxTransport
from hyperliquid_client.transports.interface import Transport

DEFAULT_TRANSPORT: Type[Transport] = HttpxTransport
