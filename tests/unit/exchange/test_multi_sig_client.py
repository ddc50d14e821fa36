from hyperliquid_client.signing.action_hash import create_l1_action_hash
from hyperliquid_client.signing.primitives import recover_address
from hyperliquid_client.signing.schemas import primary_type_of, schema_for
from hyperliquid_client.signing.signer import (
    AGENT_TYPES,
    EXCHANGE_DOMAIN,
    user_signed_domain,
)
from hyperliquid_client.signing.typed_data import hash_typed_data
from hyperliquid_client.types import ActionType, Signature
from tests.mock_transports import MockSuccessfulOutput
from tests.unit.conftest import MULTI_SIG_USER, load_json_all_cases

OK_RESPONSE = {"status": "ok", "response": {"type": "default"}}


async def test_multi_sig_cancel(mock_multi_sig_client, wallet, second_wallet):
    client, mock_transport = mock_multi_sig_client
    mock_transport.stage_output(MockSuccessfulOutput(output=OK_RESPONSE))

    await client.cancel(0, 123)

    _, payload = mock_transport.call_log[0].arg_pack
    nonce = payload["nonce"]
    outer = payload["action"]
    inner = {"type": "cancel", "cancels": [{"a": 0, "o": 123}]}
    assert nonce == 1_700_000_000_000
    assert outer["type"] == "multiSig"
    assert outer["signatureChainId"] == "0x66eee"
    assert outer["payload"] == {
        "multiSigUser": MULTI_SIG_USER.lower(),
        "outerSigner": wallet.address.lower(),
        "action": inner,
    }

    connection_id = create_l1_action_hash(
        [MULTI_SIG_USER.lower(), wallet.address.lower(), inner], nonce
    )
    digest = hash_typed_data(
        EXCHANGE_DOMAIN,
        AGENT_TYPES,
        "Agent",
        {"source": "a", "connectionId": "0x" + connection_id.hex()},
    )
    signers = [
        recover_address(digest, Signature(**signature)) for signature in outer["signatures"]
    ]
    assert signers == [wallet.address, second_wallet.address]


async def test_multi_sig_usd_send_uses_shared_time_nonce(mock_multi_sig_client):
    client, mock_transport = mock_multi_sig_client
    mock_transport.stage_output(MockSuccessfulOutput(output=OK_RESPONSE))

    await client.usd_send("0x1234567890123456789012345678901234567890", "5")

    _, payload = mock_transport.call_log[0].arg_pack
    inner = payload["action"]["payload"]["action"]
    assert inner["type"] == "usdSend"
    assert inner["time"] == payload["nonce"] == 1_700_000_000_000
    assert len(payload["action"]["signatures"]) == 2


async def test_preassembled_multi_sig_action(mock_exchange_client):
    client, mock_transport = mock_exchange_client
    for reference, path in load_json_all_cases("multi_sig_action"):
        mock_transport.stage_output(MockSuccessfulOutput(output=OK_RESPONSE))

        await client.execute_multi_sig_action(
            reference["action"],
            reference["nonce"],
            vault_address=reference.get("vaultAddress"),
            expires_after=reference.get("expiresAfter"),
        )

        _, payload = mock_transport.call_log[-1].arg_pack
        assert payload["action"] == {"type": "multiSig", **reference["action"]}, path.name
        assert payload["signature"] == reference["signature"]["mainnet"], path.name
        assert payload["nonce"] == reference["nonce"]
        assert payload.get("vaultAddress") == reference.get("vaultAddress")
        assert payload.get("expiresAfter") == reference.get("expiresAfter")


async def test_outer_signature_recovers_to_lead(mock_multi_sig_client, wallet):
    client, mock_transport = mock_multi_sig_client
    mock_transport.stage_output(MockSuccessfulOutput(output=OK_RESPONSE))

    await client.schedule_cancel()

    _, payload = mock_transport.call_log[0].arg_pack
    outer = {key: value for key, value in payload["action"].items() if key != "type"}
    types = schema_for(ActionType.MULTI_SIG)
    digest = hash_typed_data(
        user_signed_domain("0x66eee"),
        types,
        primary_type_of(types),
        {
            "hyperliquidChain": "Mainnet",
            "multiSigActionHash": "0x"
            + create_l1_action_hash(outer, payload["nonce"]).hex(),
            "nonce": payload["nonce"],
        },
    )
    assert recover_address(digest, Signature(**payload["signature"])) == wallet.address
