"""Hash and ECDSA primitives.

Thin, stateless wrappers over ``eth_utils.keccak`` and ``eth_keys`` used by
the rest of the signing package. Key material passed in is never retained.
"""

import re

from eth_keys import keys
from eth_utils import keccak, to_checksum_address

from hyperliquid_client.errors import InvalidPrivateKeyError, ValidationError
from hyperliquid_client.types import Address, Signature

# ============================================================================
# CONSTANTS
# ============================================================================

SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

PRIVATE_KEY_PATTERN = re.compile(r"^(0x)?[0-9a-fA-F]{64}$")
HEX_PATTERN = re.compile(r"^0x[0-9a-fA-F]*$")

ZERO_ADDRESS: Address = "0x0000000000000000000000000000000000000000"


# ============================================================================
# HASHING
# ============================================================================


def keccak256(data: bytes) -> bytes:
    """Return the 32-byte Keccak-256 digest of ``data``."""
    return keccak(data)


# ============================================================================
# HEX HELPERS
# ============================================================================


def hex_to_bytes(value: str) -> bytes:
    """Decode a ``0x`` prefixed hex string.

    Raises:
        ValidationError: If ``value`` is not ``0x`` prefixed hex of even length.

    """
    if not isinstance(value, str) or not HEX_PATTERN.match(value):
        raise ValidationError(f"Expected 0x-prefixed hex string, got {value!r}")
    digits = value[2:]
    if len(digits) % 2:
        raise ValidationError(f"Hex string has odd length: {value!r}")
    return bytes.fromhex(digits)


def address_to_bytes(address: Address) -> bytes:
    """Decode an address into its 20 raw bytes.

    Raises:
        ValidationError: If the address is not 20 bytes of hex.

    """
    raw = hex_to_bytes(address)
    if len(raw) != 20:
        raise ValidationError(f"Address must be 20 bytes, got {len(raw)}: {address}")
    return raw


# ============================================================================
# PRIVATE KEYS
# ============================================================================


def is_valid_private_key(value: object) -> bool:
    """Check that ``value`` is 32 bytes of hex within the secp256k1 scalar range."""
    if not isinstance(value, str) or not PRIVATE_KEY_PATTERN.match(value):
        return False
    scalar = int(value.removeprefix("0x"), 16)
    return 0 < scalar < SECP256K1_N


def parse_private_key(value: str) -> bytes:
    """Decode a hex private key into its 32 raw bytes.

    Raises:
        InvalidPrivateKeyError: If the key is malformed or out of range.

    """
    if not isinstance(value, str) or not PRIVATE_KEY_PATTERN.match(value):
        raise InvalidPrivateKeyError("Private key must be 64 hex digits")
    if not is_valid_private_key(value):
        raise InvalidPrivateKeyError("Private key is outside the secp256k1 scalar range")
    return bytes.fromhex(value.removeprefix("0x"))


def private_key_to_address(private_key: bytes) -> Address:
    """Derive the checksummed address for a raw private key.

    The address is the last 20 bytes of keccak256 over the 64-byte
    uncompressed public key.
    """
    public_key = keys.PrivateKey(private_key).public_key
    return to_checksum_address(keccak256(public_key.to_bytes())[-20:])


# ============================================================================
# SIGNATURES
# ============================================================================


def sign_hash(private_key: bytes, digest: bytes) -> Signature:
    """Sign a 32-byte digest.

    Args:
        private_key: The 32 raw key bytes.
        digest: The message hash to sign.

    Returns:
        The signature with ``v`` set to the recovery id plus 27.

    """
    if len(digest) != 32:
        raise ValidationError(f"Digest must be 32 bytes, got {len(digest)}")
    signed = keys.PrivateKey(private_key).sign_msg_hash(digest)
    return Signature.from_ints(signed.r, signed.s, signed.v + 27)


def recover_address(digest: bytes, signature: Signature) -> Address:
    """Recover the checksummed signer address from a digest and signature."""
    v = signature.v - 27 if signature.v >= 27 else signature.v
    recoverable = keys.Signature(
        vrs=(v, int(signature.r, 16), int(signature.s, 16))
    )
    public_key = recoverable.recover_public_key_from_msg_hash(digest)
    return public_key.to_checksum_address()
