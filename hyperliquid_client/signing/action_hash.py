"""Exchange action hash.

An L1 action is not signed field by field. Instead its canonical form is
packed with MessagePack and framed with the nonce, the optional vault address
and the optional expiry; the keccak256 of that byte string becomes the
``connectionId`` of a small ``Agent`` message signed under the ``Exchange``
domain.

Byte layout::

    msgpack(action) ++ be64(nonce)
        ++ (0x01 ++ vault[20] | 0x00)
        ++ (0x00 ++ be64(expires_after) | <nothing>)

The expiry marker is a zero byte that is present only when an expiry is given,
unlike the vault marker whose value encodes presence.
"""

import logging
from typing import Any

from hyperliquid_client.errors import ValidationError
from hyperliquid_client.signing.encoding import encode_msgpack
from hyperliquid_client.signing.primitives import address_to_bytes, keccak256
from hyperliquid_client.types import Address, Nonce

log = logging.getLogger(__name__)

UINT64_MAX = (1 << 64) - 1


def _be64(value: int, name: str) -> bytes:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer, got {value!r}")
    if not 0 <= value <= UINT64_MAX:
        raise ValidationError(f"{name} must fit in an unsigned 64-bit integer: {value}")
    return value.to_bytes(8, "big")


def l1_action_payload(
    action: Any,
    nonce: Nonce,
    vault_address: Address | None = None,
    expires_after: int | None = None,
) -> bytes:
    """Build the byte string whose keccak256 is the action hash.

    Args:
        action: The canonical action (or any MessagePack-encodable value).
        nonce: The request nonce.
        vault_address: Vault or sub-account the action is performed for.
        expires_after: Millisecond timestamp after which the action is rejected.

    Returns:
        The framed bytes, exposed for diagnostics.

    """
    payload = bytearray(encode_msgpack(action))
    payload += _be64(nonce, "nonce")
    if vault_address is None:
        payload += b"\x00"
    else:
        payload += b"\x01"
        payload += address_to_bytes(vault_address)
    if expires_after is not None:
        payload += b"\x00"
        payload += _be64(expires_after, "expires_after")
    return bytes(payload)


def create_l1_action_hash(
    action: Any,
    nonce: Nonce,
    vault_address: Address | None = None,
    expires_after: int | None = None,
) -> bytes:
    """Return the 32-byte action hash used as the ``connectionId``.

    Args:
        action: The canonical action (or any MessagePack-encodable value).
        nonce: The request nonce.
        vault_address: Vault or sub-account the action is performed for.
        expires_after: Millisecond timestamp after which the action is rejected.

    Returns:
        ``keccak256(l1_action_payload(...))``.

    Raises:
        SerializationError: If the action cannot be packed.
        ValidationError: If the nonce, expiry or vault address is malformed.

    """
    digest = keccak256(l1_action_payload(action, nonce, vault_address, expires_after))
    log.debug(
        "Action hash 0x%s (nonce=%d, vault=%s, expires_after=%s)",
        digest.hex(),
        nonce,
        vault_address,
        expires_after,
    )
    return digest
