import pytest

from hyperliquid_client.errors import SchemaEncodingError
from hyperliquid_client.signing.primitives import (
    keccak256,
    parse_private_key,
    private_key_to_address,
    sign_hash,
)
from hyperliquid_client.signing.typed_data import (
    encode_type,
    encode_value,
    hash_domain,
    hash_struct,
    hash_typed_data,
    normalize_schema,
    type_hash,
)
from hyperliquid_client.types import TypedDataDomain, TypeField
from tests.unit.conftest import load_json


@pytest.fixture
def mail():
    payload = load_json("eip712_mail")
    domain = payload["domain"]
    payload["domain"] = TypedDataDomain(
        name=domain["name"],
        version=domain["version"],
        chain_id=domain["chainId"],
        verifying_contract=domain["verifyingContract"],
    )
    return payload


def test_mail_type_encoding(mail):
    assert encode_type("Mail", mail["types"]) == mail["encodedType"]
    assert "0x" + type_hash("Mail", mail["types"]).hex() == mail["typeHash"]


def test_mail_hashes(mail):
    assert "0x" + hash_domain(mail["domain"]).hex() == mail["domainSeparator"]
    assert (
        "0x" + hash_struct("Mail", mail["message"], mail["types"]).hex()
        == mail["messageHash"]
    )
    digest = hash_typed_data(mail["domain"], mail["types"], "Mail", mail["message"])
    assert "0x" + digest.hex() == mail["digest"]


def test_mail_signature(mail):
    private_key = parse_private_key(mail["signerPrivateKey"])
    digest = hash_typed_data(mail["domain"], mail["types"], "Mail", mail["message"])

    assert private_key_to_address(private_key) == mail["signerAddress"]
    assert sign_hash(private_key, digest).to_dict() == mail["signature"]


def test_dependencies_sorted_after_primary_type():
    types = {
        "T": [("v", "V"), ("u", "U[]"), ("w", "W")],
        "W": [("x", "uint8")],
        "V": [("w", "W")],
        "U": [("name", "string")],
    }

    assert encode_type("T", types) == "T(V v,U[] u,W w)U(string name)V(W w)W(uint8 x)"


def test_unreferenced_types_are_not_encoded():
    types = {"A": [("x", "uint256")], "B": [("a", "A")], "Unused": [("y", "bool")]}

    assert encode_type("B", types) == "B(A a)A(uint256 x)"


def test_field_forms_are_equivalent():
    as_pairs = {"P": [("name", "string")]}
    as_dicts = {"P": [{"name": "name", "type": "string"}]}
    as_fields = {"P": (TypeField("name", "string"),)}

    assert normalize_schema(as_pairs) == normalize_schema(as_dicts) == normalize_schema(as_fields)


def test_domain_without_optional_fields():
    domain = TypedDataDomain(name="Exchange", chain_id=1337)

    assert [field.name for field in domain.fields()] == ["name", "chainId"]
    assert hash_domain(domain) == hash_struct(
        "EIP712Domain",
        {"name": "Exchange", "chainId": 1337},
        {"EIP712Domain": [("name", "string"), ("chainId", "uint256")]},
    )


def test_string_and_dynamic_bytes_are_hashed():
    assert encode_value("string", "abc", {}) == keccak256(b"abc")
    assert encode_value("bytes", "0x0102", {}) == keccak256(b"\x01\x02")


def test_fixed_bytes_are_right_padded():
    assert encode_value("bytes2", "0xabcd", {}) == bytes.fromhex("abcd") + bytes(30)


def test_address_is_left_padded():
    address = "0x1234567890123456789012345678901234567890"

    assert encode_value("address", address, {}) == bytes(12) + bytes.fromhex(address[2:])


@pytest.mark.parametrize(
    "type_name, value, expected",
    [
        ("uint8", 255, (255).to_bytes(32, "big")),
        ("uint256", "0x10", (16).to_bytes(32, "big")),
        ("uint64", "1234567890", (1234567890).to_bytes(32, "big")),
        ("int8", -1, b"\xff" * 32),
        ("int256", -2, (2**256 - 2).to_bytes(32, "big")),
        ("bool", True, (1).to_bytes(32, "big")),
        ("bool", False, bytes(32)),
    ],
)
def test_atomic_values(type_name, value, expected):
    assert encode_value(type_name, value, {}) == expected


def test_arrays_hash_concatenated_words():
    words = (1).to_bytes(32, "big") + (2).to_bytes(32, "big")

    assert encode_value("uint8[]", [1, 2], {}) == keccak256(words)
    assert encode_value("uint8[2]", [1, 2], {}) == keccak256(words)


def test_missing_fields_are_rejected():
    types = {"T": [("flag", "bool"), ("inner", "U")], "U": [("x", "uint8")]}

    with pytest.raises(SchemaEncodingError) as exc_info:
        hash_struct("T", {}, types)

    assert exc_info.value.field_name == "flag"

    with pytest.raises(SchemaEncodingError) as exc_info:
        hash_struct("T", {"flag": True}, types)

    assert exc_info.value.field_name == "inner"


def test_null_struct_value_is_rejected():
    types = {"T": [("inner", "U")], "U": [("x", "uint8")]}

    with pytest.raises(SchemaEncodingError) as exc_info:
        hash_struct("T", {"inner": None}, types)

    assert exc_info.value.field_name == "inner"
    assert exc_info.value.type_name == "U"


@pytest.mark.parametrize("value", ["false", "true", 0, 1, None])
def test_bool_requires_a_real_bool(value):
    with pytest.raises(SchemaEncodingError):
        encode_value("bool", value, {})


def test_integer_rejects_bool():
    with pytest.raises(SchemaEncodingError):
        encode_value("uint64", True, {})


@pytest.mark.parametrize(
    "type_name, value",
    [
        ("uint7", 1),
        ("uint264", 1),
        ("bytes33", "0x00"),
        ("bytes0", "0x"),
        ("bytes2", "0x00"),
        ("uint8[3]", [1, 2]),
        ("address", "0x1234"),
        ("string", 5),
        ("float", 1.5),
    ],
)
def test_invalid_values_raise_schema_error(type_name, value):
    with pytest.raises(SchemaEncodingError):
        encode_value(type_name, value, {})


def test_schema_error_reports_field_and_type():
    types = {"P": [("name", "string"), ("size", "bytes4")]}

    with pytest.raises(SchemaEncodingError) as exc_info:
        hash_struct("P", {"name": "x", "size": "0x01"}, types)

    assert exc_info.value.field_name == "size"
    assert exc_info.value.type_name == "bytes4"


def test_unknown_primary_type():
    with pytest.raises(SchemaEncodingError):
        encode_type("Missing", {"P": [("name", "string")]})
