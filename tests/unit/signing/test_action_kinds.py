import pytest

from hyperliquid_client.signing.action_hash import create_l1_action_hash
from hyperliquid_client.signing.canonical import canonicalize_action
from hyperliquid_client.signing.schemas import primary_type_of, schema_for
from hyperliquid_client.signing.signer import sign_action, signing_flow
from hyperliquid_client.signing.typed_data import encode_type
from hyperliquid_client.types import Signature, SigningFlow
from tests.unit.conftest import load_json

REFERENCE = load_json("action_kinds")
CASES = [
    pytest.param(case, id=f"{case['canonical']['type']}-{i}")
    for i, case in enumerate(REFERENCE["cases"])
]
USER_SIGNED_CASES = [case for case in CASES if "primaryType" in case.values[0]]
L1_CASES = [case for case in CASES if "actionHash" in case.values[0]]


@pytest.mark.parametrize("case", CASES)
def test_canonical_form_matches_reference(case):
    canonical = canonicalize_action(case["action"])

    assert canonical == case["canonical"]
    assert list(canonical) == list(case["canonical"])
    assert canonicalize_action(canonical) == canonical


@pytest.mark.parametrize("case", USER_SIGNED_CASES)
def test_user_signed_schema_matches_reference(case):
    types = schema_for(case["canonical"]["type"])

    assert primary_type_of(types) == case["primaryType"]
    assert encode_type(case["primaryType"], types) == case["encodedType"]
    assert signing_flow(case["canonical"]) is SigningFlow.USER_SIGNED


@pytest.mark.parametrize("case", L1_CASES)
def test_l1_action_hash_matches_reference(case):
    digest = create_l1_action_hash(case["canonical"], REFERENCE["nonce"])

    assert "0x" + digest.hex() == case["actionHash"]
    assert signing_flow(case["canonical"]) is SigningFlow.L1


@pytest.mark.parametrize("case", CASES)
async def test_signature_matches_reference(wallet, case):
    nonce = REFERENCE["nonce"] if "actionHash" in case else None

    request = await sign_action(wallet, case["action"], False, nonce=nonce)

    assert request.action == case["canonical"]
    assert request.signature == Signature(**case["signature"])
    assert request.nonce == REFERENCE["nonce"]
