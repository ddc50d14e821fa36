"""MessagePack encoding of canonical actions.

The encoded bytes feed the action hash, so map keys are packed in insertion
order and never sorted. No decoding is needed by the signing flow.
"""

from typing import Any

import msgpack

from hyperliquid_client.errors import SerializationError


def _normalize(value: Any, path: str) -> Any:
    if value is None or isinstance(value, (bool, str, bytes)):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        # JSON numbers without a fraction pack as integers
        if value.is_integer():
            return int(value)
        return value
    if isinstance(value, dict):
        normalized = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise SerializationError(f"Map key at {path} must be a string, got {key!r}")
            normalized[key] = _normalize(item, f"{path}.{key}")
        return normalized
    if isinstance(value, (list, tuple)):
        return [_normalize(item, f"{path}[{i}]") for i, item in enumerate(value)]
    raise SerializationError(
        f"Cannot encode value of type {type(value).__name__} at {path}"
    )


def encode_msgpack(value: Any) -> bytes:
    """Pack a canonical action with MessagePack.

    Args:
        value: A canonical action: dicts, lists, tuples, strings, ints, floats,
            bools, bytes and None.

    Returns:
        The packed bytes.

    Raises:
        SerializationError: If the value contains a type MessagePack cannot
            represent, or an integer outside the 64-bit range.

    """
    normalized = _normalize(value, "$")
    try:
        return msgpack.packb(normalized, use_bin_type=True)
    except (OverflowError, TypeError, ValueError) as e:
        raise SerializationError(f"Failed to pack action with msgpack: {e}") from e
