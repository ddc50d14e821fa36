"""EIP-712 structured data hashing.

Implements domain separation, type encoding and recursive value encoding from
the hash primitive alone, so the digest that a wallet signs can be computed and
checked locally.

The signing hash of a message is::

    keccak256(0x19 0x01 ++ hashStruct(EIP712Domain, domain) ++ hashStruct(primaryType, message))

where ``hashStruct(T, v) = keccak256(typeHash(T) ++ encodeData(T, v))``.
"""

import logging
import re
from typing import Any, Iterable, Mapping

from hyperliquid_client.errors import SchemaEncodingError
from hyperliquid_client.signing.primitives import keccak256
from hyperliquid_client.types import TypedDataDomain, TypeField, TypeSchema

log = logging.getLogger(__name__)

# ============================================================================
# CONSTANTS
# ============================================================================

DOMAIN_TYPE = "EIP712Domain"

ARRAY_PATTERN = re.compile(r"^(.*)\[(\d*)\]$")
ARRAY_SUFFIX_PATTERN = re.compile(r"\[\d*\]$")
INTEGER_PATTERN = re.compile(r"^(u?)int(\d*)$")
FIXED_BYTES_PATTERN = re.compile(r"^bytes(\d+)$")


# ============================================================================
# SCHEMA NORMALIZATION
# ============================================================================


def normalize_schema(types: Mapping[str, Iterable[Any]]) -> dict[str, tuple[TypeField, ...]]:
    """Return ``types`` with every field as a TypeField.

    Fields may be given as TypeField values, ``(name, type)`` pairs or
    ``{"name": ..., "type": ...}`` dicts.

    Raises:
        SchemaEncodingError: If a field cannot be read.

    """
    normalized = {}
    for type_name, fields in types.items():
        entries = []
        for field in fields:
            if isinstance(field, TypeField):
                entries.append(field)
            elif isinstance(field, Mapping):
                try:
                    entries.append(TypeField(field["name"], field["type"]))
                except KeyError as e:
                    raise SchemaEncodingError(
                        f"Field definition is missing {e}", type_name=type_name
                    ) from e
            else:
                try:
                    name, type_ = field
                except (TypeError, ValueError) as e:
                    raise SchemaEncodingError(
                        f"Malformed field definition {field!r}", type_name=type_name
                    ) from e
                entries.append(TypeField(name, type_))
        normalized[type_name] = tuple(entries)
    return normalized


def schema_to_json(types: TypeSchema) -> dict[str, list[dict[str, str]]]:
    """Return a schema in the ``{type: [{name, type}, ...]}`` JSON form wallets expect."""
    return {
        type_name: [{"name": field.name, "type": field.type} for field in fields]
        for type_name, fields in normalize_schema(types).items()
    }


# ============================================================================
# TYPE ENCODING
# ============================================================================


def find_type_dependencies(
    primary_type: str, types: TypeSchema, found: list[str] | None = None
) -> list[str]:
    """Collect every struct type reachable from ``primary_type``, itself included.

    Array suffixes are stripped before lookup; types not defined in ``types``
    are atomic and ignored.
    """
    if found is None:
        found = []
    if primary_type in found or primary_type not in types:
        return found
    found.append(primary_type)
    for field in types[primary_type]:
        base_type = ARRAY_SUFFIX_PATTERN.sub("", field.type)
        if base_type in types:
            find_type_dependencies(base_type, types, found)
    return found


def encode_type(primary_type: str, types: TypeSchema) -> str:
    """Encode a struct type and its dependencies as an EIP-712 type string.

    The primary type comes first, followed by its dependencies in
    lexicographic order, e.g. ``Mail(Person from,Person to)Person(string name)``.
    """
    types = normalize_schema(types)
    if primary_type not in types:
        raise SchemaEncodingError("Unknown struct type", type_name=primary_type)
    dependencies = find_type_dependencies(primary_type, types)
    ordered = [primary_type] + sorted(d for d in dependencies if d != primary_type)
    return "".join(
        f"{name}({','.join(f'{field.type} {field.name}' for field in types[name])})"
        for name in ordered
    )


def type_hash(primary_type: str, types: TypeSchema) -> bytes:
    """Return ``keccak256(encode_type(primary_type))``."""
    return keccak256(encode_type(primary_type, types).encode())


# ============================================================================
# VALUE ENCODING
# ============================================================================


def _hex_or_bytes(value: Any, type_name: str) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        digits = value[2:] if value.startswith("0x") else value
        try:
            return bytes.fromhex(digits)
        except ValueError as e:
            raise SchemaEncodingError(
                f"Invalid hex value {value!r}", type_name=type_name
            ) from e
    raise SchemaEncodingError(
        f"Expected hex string or bytes, got {type(value).__name__}", type_name=type_name
    )


def _encode_integer(type_name: str, unsigned: bool, bits_text: str, value: Any) -> bytes:
    bits = int(bits_text) if bits_text else 256
    if bits == 0 or bits > 256 or bits % 8:
        raise SchemaEncodingError(f"Unsupported bit size {bits}", type_name=type_name)
    if isinstance(value, bool):
        raise SchemaEncodingError("Expected integer, got bool", type_name=type_name)
    if isinstance(value, int):
        number = value
    elif isinstance(value, str):
        try:
            if value[:2].lower() == "0x":
                number = int(value[2:], 16)
            else:
                number = int(value, 10)
        except ValueError as e:
            raise SchemaEncodingError(
                f"Invalid integer value {value!r}", type_name=type_name
            ) from e
    else:
        raise SchemaEncodingError(
            f"Expected integer, got {type(value).__name__}", type_name=type_name
        )
    # two's complement truncation to the declared width
    mask = (1 << bits) - 1
    number &= mask
    if not unsigned and number >= 1 << (bits - 1):
        number -= 1 << bits
    return (number & ((1 << 256) - 1)).to_bytes(32, "big")


def encode_value(type_name: str, value: Any, types: TypeSchema) -> bytes:
    """Encode one value as a 32-byte EIP-712 word.

    Raises:
        SchemaEncodingError: For unknown types, wrong array lengths, wrong
            fixed-byte lengths, missing struct values and values that do not
            fit their type. Booleans must be real bools.

    """
    array_match = ARRAY_PATTERN.match(type_name)
    if array_match:
        base_type, length = array_match.groups()
        if not isinstance(value, (list, tuple)):
            raise SchemaEncodingError(
                f"Expected array, got {type(value).__name__}", type_name=type_name
            )
        if length and len(value) != int(length):
            raise SchemaEncodingError(
                f"Invalid array length: expected {length}, got {len(value)}",
                type_name=type_name,
            )
        return keccak256(b"".join(encode_value(base_type, item, types) for item in value))

    if type_name in types:
        if value is None:
            raise SchemaEncodingError("Struct value is missing", type_name=type_name)
        return hash_struct(type_name, value, types)

    if type_name == "string":
        if not isinstance(value, str):
            raise SchemaEncodingError(
                f"Expected string, got {type(value).__name__}", type_name=type_name
            )
        return keccak256(value.encode("utf-8"))

    if type_name == "bytes":
        return keccak256(_hex_or_bytes(value, type_name))

    if type_name == "address":
        raw = _hex_or_bytes(value, type_name)
        if len(raw) != 20:
            raise SchemaEncodingError(
                f"Address must be 20 bytes, got {len(raw)}", type_name=type_name
            )
        return raw.rjust(32, b"\x00")

    if type_name == "bool":
        if not isinstance(value, bool):
            raise SchemaEncodingError(
                f"Expected bool, got {type(value).__name__}", type_name=type_name
            )
        return (1 if value else 0).to_bytes(32, "big")

    integer_match = INTEGER_PATTERN.match(type_name)
    if integer_match:
        unsigned, bits = integer_match.groups()
        return _encode_integer(type_name, unsigned == "u", bits, value)

    bytes_match = FIXED_BYTES_PATTERN.match(type_name)
    if bytes_match:
        size = int(bytes_match.group(1))
        if size == 0 or size > 32:
            raise SchemaEncodingError(f"Unsupported bytes size {size}", type_name=type_name)
        raw = _hex_or_bytes(value, type_name)
        if len(raw) != size:
            raise SchemaEncodingError(
                f"Invalid length: expected {size} bytes, got {len(raw)}",
                type_name=type_name,
            )
        return raw.ljust(32, b"\x00")

    raise SchemaEncodingError("Unsupported type", type_name=type_name)


def encode_data(primary_type: str, data: Mapping[str, Any], types: TypeSchema) -> bytes:
    """Concatenate the type hash and the encoded fields of a struct value."""
    types = normalize_schema(types)
    if not isinstance(data, Mapping):
        raise SchemaEncodingError(
            f"Expected a mapping, got {type(data).__name__}", type_name=primary_type
        )
    encoded = [type_hash(primary_type, types)]
    for field in types[primary_type]:
        if field.name not in data:
            raise SchemaEncodingError(
                "Missing field", type_name=field.type, field_name=field.name
            )
        try:
            encoded.append(encode_value(field.type, data[field.name], types))
        except SchemaEncodingError as e:
            if e.field_name is not None:
                raise
            raise SchemaEncodingError(
                e.message, type_name=e.type_name or field.type, field_name=field.name
            ) from e
    return b"".join(encoded)


def hash_struct(primary_type: str, data: Mapping[str, Any], types: TypeSchema) -> bytes:
    """Return ``keccak256(encode_data(primary_type, data))``."""
    return keccak256(encode_data(primary_type, data, types))


def hash_domain(domain: TypedDataDomain) -> bytes:
    """Return the domain separator for ``domain``."""
    types = {DOMAIN_TYPE: tuple(domain.fields())}
    return hash_struct(DOMAIN_TYPE, domain.to_dict(), types)


def hash_typed_data(
    domain: TypedDataDomain,
    types: TypeSchema,
    primary_type: str,
    message: Mapping[str, Any],
) -> bytes:
    """Return the 32-byte EIP-712 signing hash.

    Args:
        domain: The signing domain.
        types: Struct definitions, without ``EIP712Domain``.
        primary_type: The struct type of ``message``.
        message: The message to hash.

    Returns:
        ``keccak256(0x1901 ++ domainSeparator ++ hashStruct(message))``.

    """
    all_types = {DOMAIN_TYPE: tuple(domain.fields())}
    all_types.update(normalize_schema(types))
    parts = [b"\x19\x01", hash_struct(DOMAIN_TYPE, domain.to_dict(), all_types)]
    if primary_type != DOMAIN_TYPE:
        parts.append(hash_struct(primary_type, message, all_types))
    digest = keccak256(b"".join(parts))
    log.debug("EIP-712 hash for %s: 0x%s", primary_type, digest.hex())
    return digest
