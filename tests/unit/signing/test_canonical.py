import pytest

from hyperliquid_client.errors import ValidationError
from hyperliquid_client.signing.canonical import (
    canonical_order,
    canonicalize_action,
    format_decimal,
)
from hyperliquid_client.types import ActionType

ORDER = {
    "a": 4,
    "b": False,
    "p": "1800.50",
    "s": "2.000",
    "r": True,
    "t": {"trigger": {"isMarket": True, "triggerPx": "1790.0", "tpsl": "sl"}},
}


@pytest.mark.parametrize(
    "value,expected",
    [
        ("1.50000", "1.5"),
        ("1.0", "1"),
        ("100", "100"),
        ("0.000", "0"),
        ("-2.10", "-2.1"),
        ("12.", "12"),
    ],
)
def test_format_decimal(value, expected):
    assert format_decimal(value) == expected


def test_format_decimal_requires_string():
    with pytest.raises(ValidationError):
        format_decimal(1.5)


def test_order_fields_are_reordered_and_trimmed():
    shuffled = {key: ORDER[key] for key in reversed(list(ORDER))}

    canonical = canonical_order(shuffled)

    assert list(canonical) == ["a", "b", "p", "s", "r", "t"]
    assert canonical["p"] == "1800.5"
    assert canonical["s"] == "2"
    assert canonical["t"] == {
        "trigger": {"isMarket": True, "triggerPx": "1790", "tpsl": "sl"}
    }


def test_order_keeps_cloid_last():
    canonical = canonical_order({**ORDER, "c": "0x" + "ab" * 16})

    assert list(canonical)[-1] == "c"


def test_order_builder_is_lowercased():
    action = {
        "builder": {"f": 10, "b": "0xABCDEFabcdef0000000000000000000000000000"},
        "grouping": "na",
        "orders": [ORDER],
        "type": "order",
    }

    canonical = canonicalize_action(action)

    assert list(canonical) == ["type", "orders", "grouping", "builder"]
    assert canonical["builder"] == {
        "b": "0xabcdefabcdef0000000000000000000000000000",
        "f": 10,
    }


def test_unknown_fields_are_dropped():
    canonical = canonicalize_action(
        {"type": "cancel", "cancels": [{"o": 1, "a": 2, "extra": 3}], "junk": True}
    )

    assert canonical == {"type": "cancel", "cancels": [{"a": 2, "o": 1}]}


def test_user_signed_action_order_and_addresses():
    action = {
        "time": 1,
        "amount": "10.0",
        "destination": "0xABCDEF0000000000000000000000000000000001",
        "hyperliquidChain": "Testnet",
        "signatureChainId": "0x66eee",
        "type": "usdSend",
    }

    canonical = canonicalize_action(action)

    assert list(canonical) == [
        "type",
        "signatureChainId",
        "hyperliquidChain",
        "destination",
        "amount",
        "time",
    ]
    assert canonical["destination"] == "0xabcdef0000000000000000000000000000000001"
    # user-signed amounts are signed as given
    assert canonical["amount"] == "10.0"


def test_approve_agent_keeps_missing_name_as_none():
    canonical = canonicalize_action(
        {
            "type": "approveAgent",
            "signatureChainId": "0x1",
            "hyperliquidChain": "Mainnet",
            "agentAddress": "0xAB00000000000000000000000000000000000000",
            "nonce": 5,
        }
    )

    assert canonical["agentName"] is None
    assert canonical["agentAddress"] == "0xab00000000000000000000000000000000000000"


def test_schedule_cancel_without_time():
    assert canonicalize_action({"type": "scheduleCancel", "time": None}) == {
        "type": "scheduleCancel"
    }
    assert canonicalize_action({"type": "scheduleCancel", "time": 7}) == {
        "type": "scheduleCancel",
        "time": 7,
    }


def test_send_asset_sub_account_is_lowercased():
    canonical = canonicalize_action(
        {
            "type": "sendAsset",
            "signatureChainId": "0x66eee",
            "hyperliquidChain": "Mainnet",
            "destination": "0x1234567890123456789012345678901234567890",
            "sourceDex": "",
            "destinationDex": "",
            "token": "USDC",
            "amount": "1",
            "fromSubAccount": "0xAB00000000000000000000000000000000000000",
            "nonce": 1,
        }
    )

    assert canonical["fromSubAccount"] == "0xab00000000000000000000000000000000000000"


def test_borrow_lend_requires_amount_key():
    with pytest.raises(ValidationError):
        canonicalize_action({"type": "borrowLend", "operation": "supply", "token": 0})


def test_multi_sig_signatures_are_trimmed():
    action = {
        "type": "multiSig",
        "signatureChainId": "0x66eee",
        "signatures": [{"r": "0x00AB", "s": "0x0Cd", "v": 27}],
        "payload": {
            "multiSigUser": "0xAA00000000000000000000000000000000000000",
            "outerSigner": "0xBB00000000000000000000000000000000000000",
            "action": {"type": "noop", "anything": [1, 2]},
        },
    }

    canonical = canonicalize_action(action)

    assert canonical["signatures"] == [{"r": "0xab", "s": "0xcd", "v": 27}]
    assert canonical["payload"]["multiSigUser"] == "0xaa00000000000000000000000000000000000000"
    assert canonical["payload"]["action"] == {"type": "noop", "anything": [1, 2]}
    assert canonical["payload"]["action"] is not action["payload"]["action"]


def test_enum_type_tag_is_accepted():
    canonical = canonicalize_action({"type": ActionType.NOOP})

    assert canonical == {"type": "noop"}


@pytest.mark.parametrize(
    "action",
    [
        {"type": "order", "orders": [ORDER], "grouping": "na"},
        {"type": "batchModify", "modifies": [{"order": ORDER, "oid": 3}]},
        {"type": "updateLeverage", "leverage": 5, "isCross": False, "asset": 1},
        {"type": "vaultTransfer", "usd": 1, "isDeposit": True, "vaultAddress": "0x1"},
        {"type": "spotUser", "toggleSpotDusting": {"optOut": True}},
        {"type": "twapOrder", "twap": {"t": 5, "m": 10, "r": False, "s": "1.0", "b": True, "a": 0}},
        {
            "type": "spotDeploy",
            "genesis": {"maxSupply": "1000", "token": 3},
        },
    ],
)
def test_canonicalization_is_idempotent(action):
    once = canonicalize_action(action)

    assert canonicalize_action(once) == once
    assert list(canonicalize_action(once)) == list(once)


def test_input_is_not_modified():
    action = {"type": "order", "orders": [dict(ORDER)], "grouping": "na"}
    snapshot = {"type": "order", "orders": [dict(ORDER)], "grouping": "na"}

    canonicalize_action(action)

    assert action == snapshot


@pytest.mark.parametrize(
    "action",
    [
        {"type": "teleport"},
        {"cancels": []},
        "order",
        {"type": "cancel"},
        {"type": "order", "orders": [{**ORDER, "t": {"market": {}}}], "grouping": "na"},
    ],
)
def test_invalid_actions_raise(action):
    with pytest.raises(ValidationError):
        canonicalize_action(action)
