"""Wallet adapters.

Signing can run over raw private key material or over an externally supplied
signer object. Supported shapes, checked in this order:

- a hex private key string (or 32 raw bytes), signed locally
- shape A: ``sign_typed_data(domain, types, primary_type, message)``
- shape B: ``sign_typed_data(domain, types, message)``, chain id implicit
- shape C: ``_signTypedData(domain, types, message)``, legacy naming
- shape D: ``sign_typed_data(params)`` with one mapping holding ``domain``,
  ``types`` (``EIP712Domain`` included), ``primaryType`` and ``message``

Camel case method names (``signTypedData``) are accepted for shapes A, B and D.
External methods may be plain functions or coroutines. The shape is resolved
once by resolve_wallet(); everything downstream talks to the Wallet interface.
"""

import asyncio
import inspect
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Mapping

from hyperliquid_client.cancel import CancelToken, run_cancellable
from hyperliquid_client.errors import (
    BaseError,
    DelegatedSignerError,
    InvalidPrivateKeyError,
    UnsupportedWalletError,
)
from hyperliquid_client.signing.primitives import (
    is_valid_private_key,
    parse_private_key,
    private_key_to_address,
    sign_hash,
)
from hyperliquid_client.signing.typed_data import (
    DOMAIN_TYPE,
    hash_typed_data,
    schema_to_json,
)
from hyperliquid_client.types import Address, Hex, Signature, TypedDataDomain, TypeSchema

log = logging.getLogger(__name__)

DEFAULT_CHAIN_ID: Hex = "0x1"

SIGN_TYPED_DATA_NAMES = ("sign_typed_data", "signTypedData")
LEGACY_SIGN_TYPED_DATA_NAMES = ("_signTypedData",)
GET_ADDRESS_NAMES = ("get_address", "getAddress")
GET_CHAIN_ID_NAMES = ("get_chain_id", "getChainId")


# ============================================================================
# SIGNATURE PARSING
# ============================================================================


def split_signature(signature: Any) -> Signature:
    """Split a 65-byte ``r ++ s ++ v`` signature into its components.

    Args:
        signature: ``0x`` prefixed hex string or raw bytes, or an object
            carrying either in its ``signature`` attribute (an eth_account
            ``SignedMessage`` for instance).

    Returns:
        The signature with ``v`` normalised to 27 or 28.

    Raises:
        DelegatedSignerError: If the value is not a 65-byte signature.

    """
    signature = getattr(signature, "signature", signature)
    if isinstance(signature, (bytes, bytearray)):
        raw = bytes(signature)
    elif isinstance(signature, str):
        digits = signature[2:] if signature[:2].lower() == "0x" else signature
        try:
            raw = bytes.fromhex(digits)
        except ValueError as e:
            raise DelegatedSignerError(
                f"Signer returned a malformed signature {signature!r}"
            ) from e
    else:
        raise DelegatedSignerError(
            f"Signer returned {type(signature).__name__} instead of a signature"
        )
    if len(raw) != 65:
        raise DelegatedSignerError(
            f"Signature must be 65 bytes, got {len(raw)}"
        )
    v = raw[64]
    if v < 27:
        v += 27
    return Signature(r="0x" + raw[:32].hex(), s="0x" + raw[32:64].hex(), v=v)


# ============================================================================
# WALLET INTERFACE
# ============================================================================


class Wallet(ABC):
    """Abstract base class for everything that can produce EIP-712 signatures."""

    @abstractmethod
    async def get_address(self, cancel_token: CancelToken | None = None) -> Address:
        """Return the signer address."""
        ...

    async def get_chain_id(self, cancel_token: CancelToken | None = None) -> Hex:
        """Return the chain id the wallet signs for, as ``0x`` hex."""
        return DEFAULT_CHAIN_ID

    @abstractmethod
    async def sign_typed_data(
        self,
        domain: TypedDataDomain,
        types: TypeSchema,
        primary_type: str,
        message: Mapping[str, Any],
        cancel_token: CancelToken | None = None,
    ) -> Signature:
        """Sign an EIP-712 message.

        Args:
            domain: The signing domain.
            types: Struct definitions, without ``EIP712Domain``.
            primary_type: The struct type of ``message``.
            message: The message to sign.
            cancel_token: Aborts a pending delegated call when fired.

        Returns:
            The signature.

        """
        ...


class PrivateKeyWallet(Wallet):
    """Signs locally with a raw secp256k1 private key."""

    __slots__ = ("_private_key", "_address")

    def __init__(self, private_key: str | bytes):
        """Initialize the wallet.

        Args:
            private_key: 64 hex digits (``0x`` prefix optional) or 32 raw bytes.

        Raises:
            InvalidPrivateKeyError: If the key is malformed or out of range.

        """
        if isinstance(private_key, (bytes, bytearray)):
            if len(private_key) != 32:
                raise InvalidPrivateKeyError("Private key must be 32 bytes")
            private_key = bytes(private_key).hex()
        self._private_key = parse_private_key(private_key)
        self._address = private_key_to_address(self._private_key)

    def __repr__(self) -> str:
        return f"PrivateKeyWallet(address={self._address})"

    @property
    def address(self) -> Address:
        """The checksummed address derived from the key."""
        return self._address

    async def get_address(self, cancel_token: CancelToken | None = None) -> Address:
        return self._address

    def sign_typed_data_sync(
        self,
        domain: TypedDataDomain,
        types: TypeSchema,
        primary_type: str,
        message: Mapping[str, Any],
    ) -> Signature:
        """Sign an EIP-712 message without suspending."""
        digest = hash_typed_data(domain, types, primary_type, message)
        return sign_hash(self._private_key, digest)

    async def sign_typed_data(
        self,
        domain: TypedDataDomain,
        types: TypeSchema,
        primary_type: str,
        message: Mapping[str, Any],
        cancel_token: CancelToken | None = None,
    ) -> Signature:
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        return self.sign_typed_data_sync(domain, types, primary_type, message)


# ============================================================================
# DELEGATED SIGNERS
# ============================================================================


async def _call_external(
    method: Callable[..., Any],
    args: tuple[Any, ...],
    cancel_token: CancelToken | None,
    action: str,
) -> Any:
    """Call a method of an external signer, sync or async, racing ``cancel_token``."""
    if inspect.iscoroutinefunction(method):
        pending = method(*args)
    else:
        pending = asyncio.to_thread(method, *args)
    try:
        result = await run_cancellable(pending, cancel_token)
        if inspect.isawaitable(result):
            result = await run_cancellable(result, cancel_token)
    except BaseError:
        raise
    except Exception as e:
        raise DelegatedSignerError(f"External signer failed to {action}: {e}") from e
    return result


def _find_method(obj: object, names: tuple[str, ...]) -> Callable[..., Any] | None:
    for name in names:
        method = getattr(obj, name, None)
        if callable(method):
            return method
    return None


def _positional_arity(method: Callable[..., Any]) -> int | None:
    """Return the number of positional parameters, or None if unbounded/unknown."""
    try:
        signature = inspect.signature(method)
    except (TypeError, ValueError):
        return None
    count = 0
    for parameter in signature.parameters.values():
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            return None
        if parameter.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            count += 1
    return count


class ExternalWallet(Wallet):
    """Base class for wallets that delegate signing to a caller-supplied object."""

    def __init__(self, signer: object, method: Callable[..., Any]):
        self.signer = signer
        self._method = method

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.signer!r})"

    async def get_address(self, cancel_token: CancelToken | None = None) -> Address:
        address = getattr(self.signer, "address", None)
        if isinstance(address, str):
            return address
        method = _find_method(self.signer, GET_ADDRESS_NAMES)
        if method is None:
            raise DelegatedSignerError(
                f"{type(self.signer).__name__} exposes neither an address nor get_address()"
            )
        address = await _call_external(method, (), cancel_token, "return its address")
        if not isinstance(address, str):
            raise DelegatedSignerError(
                f"External signer returned {type(address).__name__} as its address"
            )
        return address

    async def get_chain_id(self, cancel_token: CancelToken | None = None) -> Hex:
        method = _find_method(self.signer, GET_CHAIN_ID_NAMES)
        if method is None:
            return DEFAULT_CHAIN_ID
        chain_id = await _call_external(method, (), cancel_token, "return its chain id")
        if isinstance(chain_id, int):
            return hex(chain_id)
        return chain_id

    @abstractmethod
    def _arguments(
        self,
        domain: TypedDataDomain,
        types: TypeSchema,
        primary_type: str,
        message: Mapping[str, Any],
    ) -> tuple[Any, ...]:
        """Build the positional arguments for the signer's own call."""
        ...

    async def sign_typed_data(
        self,
        domain: TypedDataDomain,
        types: TypeSchema,
        primary_type: str,
        message: Mapping[str, Any],
        cancel_token: CancelToken | None = None,
    ) -> Signature:
        # malformed messages never reach the external signer
        hash_typed_data(domain, types, primary_type, message)
        args = self._arguments(domain, types, primary_type, dict(message))
        log.debug("Delegating %s signature to %s", primary_type, type(self).__name__)
        result = await _call_external(self._method, args, cancel_token, "sign typed data")
        return split_signature(result)


class TypedDataWallet(ExternalWallet):
    """Shape A: ``sign_typed_data(domain, types, primary_type, message)``.

    ``types`` includes the ``EIP712Domain`` entry.
    """

    def _arguments(self, domain, types, primary_type, message):
        all_types = {DOMAIN_TYPE: domain.fields()}
        all_types.update(types)
        return (domain.to_dict(), schema_to_json(all_types), primary_type, message)


class ThreeArgTypedDataWallet(ExternalWallet):
    """Shape B: ``sign_typed_data(domain, types, message)``."""

    def _arguments(self, domain, types, primary_type, message):
        return (domain.to_dict(), schema_to_json(types), message)


class LegacyTypedDataWallet(ExternalWallet):
    """Shape C: ``_signTypedData(domain, types, message)``."""

    def _arguments(self, domain, types, primary_type, message):
        return (domain.to_dict(), schema_to_json(types), message)


class ParamsTypedDataWallet(ExternalWallet):
    """Shape D: ``sign_typed_data(params)`` with a single params mapping."""

    def _arguments(self, domain, types, primary_type, message):
        all_types = {DOMAIN_TYPE: domain.fields()}
        all_types.update(types)
        params = {
            "domain": domain.to_dict(),
            "types": schema_to_json(all_types),
            "primaryType": primary_type,
            "message": message,
        }
        return (params,)


# ============================================================================
# RESOLUTION
# ============================================================================


def resolve_wallet(value: object) -> Wallet:
    """Match a wallet value to exactly one supported shape.

    Args:
        value: A Wallet, a private key, or an external signer object.

    Returns:
        The adapter for ``value``.

    Raises:
        InvalidPrivateKeyError: If ``value`` is a string or bytes but not a
            valid private key.
        UnsupportedWalletError: If ``value`` matches no supported shape.

    """
    match value:
        case Wallet():
            return value
        case str() if is_valid_private_key(value):
            return PrivateKeyWallet(value)
        case str():
            raise InvalidPrivateKeyError(
                "Wallet string is not a valid secp256k1 private key"
            )
        case bytes() | bytearray():
            return PrivateKeyWallet(value)

    method = _find_method(value, SIGN_TYPED_DATA_NAMES)
    if method is not None:
        arity = _positional_arity(method)
        if arity == 1:
            log.debug("Resolved %s as a params object signer", type(value).__name__)
            return ParamsTypedDataWallet(value, method)
        if arity == 3:
            log.debug("Resolved %s as a three-argument signer", type(value).__name__)
            return ThreeArgTypedDataWallet(value, method)
        if arity is None or arity >= 4:
            log.debug("Resolved %s as a typed data signer", type(value).__name__)
            return TypedDataWallet(value, method)

    method = _find_method(value, LEGACY_SIGN_TYPED_DATA_NAMES)
    if method is not None:
        log.debug("Resolved %s as a legacy signer", type(value).__name__)
        return LegacyTypedDataWallet(value, method)

    raise UnsupportedWalletError(value)
