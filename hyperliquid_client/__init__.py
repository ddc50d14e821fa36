"""Hyperliquid exchange client: action signing and request execution."""

from importlib.metadata import PackageNotFoundError, version

from hyperliquid_client.cancel import CancelToken
from hyperliquid_client.env_setup import EnvironmentConfig, setup_environment
from hyperliquid_client.errors import (
    ApiRequestError,
    BaseError,
    DelegatedSignerError,
    ExchangeError,
    InvalidPrivateKeyError,
    MultiSigPartialFailure,
    OperationCancelled,
    SchemaEncodingError,
    SigningError,
    TransportError,
    UnsupportedWalletError,
    ValidationError,
)
from hyperliquid_client.exchange import (
    ExchangeClient,
    assert_success_response,
    limit_order_type,
    order_request,
    trigger_order_type,
)
from hyperliquid_client.nonce import NonceSource, TimestampNonceSource
from hyperliquid_client.signing import (
    PrivateKeyWallet,
    Wallet,
    resolve_wallet,
    sign_action,
    sign_multi_sig_request,
)
from hyperliquid_client.transports import HttpxTransport, Transport
from hyperliquid_client.types import (
    ActionType,
    OrderGrouping,
    Signature,
    SignedRequest,
    TimeInForce,
    TpSl,
    TypedDataDomain,
    TypeField,
)

try:
    __version__ = version("hyperliquid-client")
except PackageNotFoundError:
    __version__ = "unknown"


def get_version() -> str:
    """Return the installed package version."""
    return __version__


__all__ = [
    "__version__",
    "get_version",
    # client
    "ExchangeClient",
    "assert_success_response",
    "order_request",
    "limit_order_type",
    "trigger_order_type",
    # signing
    "Wallet",
    "PrivateKeyWallet",
    "resolve_wallet",
    "sign_action",
    "sign_multi_sig_request",
    "CancelToken",
    "NonceSource",
    "TimestampNonceSource",
    # transports
    "Transport",
    "HttpxTransport",
    # configuration
    "EnvironmentConfig",
    "setup_environment",
    # types
    "ActionType",
    "OrderGrouping",
    "Signature",
    "SignedRequest",
    "TimeInForce",
    "TpSl",
    "TypedDataDomain",
    "TypeField",
    # errors
    "BaseError",
    "ExchangeError",
    "ApiRequestError",
    "TransportError",
    "ValidationError",
    "InvalidPrivateKeyError",
    "SchemaEncodingError",
    "SigningError",
    "UnsupportedWalletError",
    "DelegatedSignerError",
    "MultiSigPartialFailure",
    "OperationCancelled",
]
