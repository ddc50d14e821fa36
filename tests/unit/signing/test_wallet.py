import asyncio
from dataclasses import dataclass

import pytest

from hyperliquid_client.cancel import CancelToken
from hyperliquid_client.errors import (
    DelegatedSignerError,
    InvalidPrivateKeyError,
    OperationCancelled,
    SchemaEncodingError,
    UnsupportedWalletError,
)
from hyperliquid_client.signing.signer import sign_l1_action, sign_user_signed_action
from hyperliquid_client.signing.typed_data import DOMAIN_TYPE, normalize_schema
from hyperliquid_client.signing.wallet import (
    LegacyTypedDataWallet,
    ParamsTypedDataWallet,
    PrivateKeyWallet,
    ThreeArgTypedDataWallet,
    TypedDataWallet,
    resolve_wallet,
    split_signature,
)
from hyperliquid_client.types import Signature, TypedDataDomain
from tests.unit.conftest import PRIVATE_KEY, load_json


def _domain(data):
    return TypedDataDomain(
        name=data.get("name"),
        version=data.get("version"),
        chain_id=data.get("chainId"),
        verifying_contract=data.get("verifyingContract"),
    )


def _joined(signature: Signature, v_offset: int = 0) -> str:
    return "0x" + signature.r[2:] + signature.s[2:] + bytes([signature.v - v_offset]).hex()


class FourArgSigner:
    """Signs like an ethers v6 signer."""

    def __init__(self):
        self.inner = PrivateKeyWallet(PRIVATE_KEY)
        self.address = self.inner.address
        self.calls = []

    def sign_typed_data(self, domain, types, primary_type, message):
        self.calls.append((domain, types, primary_type, message))
        types = {name: fields for name, fields in types.items() if name != DOMAIN_TYPE}
        signature = self.inner.sign_typed_data_sync(
            _domain(domain), normalize_schema(types), primary_type, message
        )
        return _joined(signature)


class AsyncCamelCaseSigner:
    def __init__(self):
        self.inner = PrivateKeyWallet(PRIVATE_KEY)

    async def getAddress(self):
        return self.inner.address

    async def getChainId(self):
        return 421614

    async def signTypedData(self, domain, types, message):
        primary_type = next(iter(types))
        signature = self.inner.sign_typed_data_sync(
            _domain(domain), normalize_schema(types), primary_type, message
        )
        # some signers report the recovery id as 0/1
        return _joined(signature, v_offset=27)


class LegacySigner:
    def __init__(self):
        self.inner = PrivateKeyWallet(PRIVATE_KEY)
        self.address = self.inner.address

    def _signTypedData(self, domain, types, message):
        primary_type = next(iter(types))
        signature = self.inner.sign_typed_data_sync(
            _domain(domain), normalize_schema(types), primary_type, message
        )
        return bytes.fromhex(_joined(signature)[2:])


@dataclass(frozen=True)
class SignedMessage:
    signature: bytes


class ParamsSigner:
    """Takes one params mapping, the way viem accounts do."""

    def __init__(self):
        self.inner = PrivateKeyWallet(PRIVATE_KEY)
        self.address = self.inner.address
        self.params = []

    async def signTypedData(self, params):
        self.params.append(params)
        types = {
            name: fields for name, fields in params["types"].items() if name != DOMAIN_TYPE
        }
        signature = self.inner.sign_typed_data_sync(
            _domain(params["domain"]),
            normalize_schema(types),
            params["primaryType"],
            params["message"],
        )
        return _joined(signature)


class SignedMessageSigner:
    """Returns an object with a ``signature`` attribute instead of raw bytes."""

    def __init__(self):
        self.inner = PrivateKeyWallet(PRIVATE_KEY)
        self.address = self.inner.address

    def sign_typed_data(self, domain, types, primary_type, message):
        types = {name: fields for name, fields in types.items() if name != DOMAIN_TYPE}
        signature = self.inner.sign_typed_data_sync(
            _domain(domain), normalize_schema(types), primary_type, message
        )
        return SignedMessage(signature=bytes.fromhex(_joined(signature)[2:]))


class FailingSigner:
    address = "0x1234567890123456789012345678901234567890"

    async def sign_typed_data(self, domain, types, primary_type, message):
        raise RuntimeError("user rejected the request")


class MalformedSigner:
    address = "0x1234567890123456789012345678901234567890"

    def sign_typed_data(self, domain, types, primary_type, message):
        return "0x1234"


class HangingSigner:
    address = "0x1234567890123456789012345678901234567890"

    def __init__(self):
        self.started = asyncio.Event()

    async def sign_typed_data(self, domain, types, primary_type, message):
        self.started.set()
        await asyncio.Event().wait()


@pytest.mark.parametrize(
    "signer,wallet_type",
    [
        (FourArgSigner(), TypedDataWallet),
        (AsyncCamelCaseSigner(), ThreeArgTypedDataWallet),
        (LegacySigner(), LegacyTypedDataWallet),
        (ParamsSigner(), ParamsTypedDataWallet),
        (SignedMessageSigner(), TypedDataWallet),
    ],
)
def test_external_shapes_are_resolved(signer, wallet_type):
    assert type(resolve_wallet(signer)) is wallet_type


def test_private_key_values_are_resolved():
    assert isinstance(resolve_wallet(PRIVATE_KEY), PrivateKeyWallet)
    assert isinstance(resolve_wallet(bytes.fromhex(PRIVATE_KEY[2:])), PrivateKeyWallet)
    wallet = PrivateKeyWallet(PRIVATE_KEY)
    assert resolve_wallet(wallet) is wallet


def test_invalid_private_key_string():
    with pytest.raises(InvalidPrivateKeyError):
        resolve_wallet("0xnotakey")


@pytest.mark.parametrize("value", [object(), 42, None, {"sign_typed_data": True}])
def test_unsupported_wallet(value):
    with pytest.raises(UnsupportedWalletError):
        resolve_wallet(value)


@pytest.mark.parametrize(
    "signer_class",
    [FourArgSigner, AsyncCamelCaseSigner, LegacySigner, ParamsSigner, SignedMessageSigner],
)
async def test_external_signers_match_private_key_signature(signer_class):
    payload = load_json("l1_action", 0)

    signature = await sign_l1_action(
        signer_class(), payload["action"], payload["nonce"], False
    )

    assert signature == Signature(**payload["signature"]["mainnet"])


async def test_four_arg_signer_receives_domain_type():
    signer = FourArgSigner()
    payload = load_json("user_signed_action", 0)
    types = {payload["primaryType"]: payload["payloadTypes"]}

    signature = await sign_user_signed_action(signer, payload["action"], types)

    assert signature == Signature(**payload["signature"])
    domain, sent_types, primary_type, message = signer.calls[0]
    assert primary_type == payload["primaryType"]
    assert list(sent_types) == [DOMAIN_TYPE, payload["primaryType"]]
    assert sent_types[payload["primaryType"]] == payload["payloadTypes"]
    assert domain == {
        "name": "HyperliquidSignTransaction",
        "version": "1",
        "chainId": 421614,
        "verifyingContract": "0x0000000000000000000000000000000000000000",
    }
    assert set(message) == {"hyperliquidChain", "destination", "amount", "time"}


async def test_params_signer_receives_one_mapping():
    signer = ParamsSigner()
    payload = load_json("user_signed_action", 0)
    types = {payload["primaryType"]: payload["payloadTypes"]}

    signature = await sign_user_signed_action(signer, payload["action"], types)

    assert signature == Signature(**payload["signature"])
    (params,) = signer.params
    assert set(params) == {"domain", "types", "primaryType", "message"}
    assert params["primaryType"] == payload["primaryType"]
    assert list(params["types"]) == [DOMAIN_TYPE, payload["primaryType"]]
    assert params["domain"]["chainId"] == 421614


async def test_malformed_message_never_reaches_external_signer():
    signer = FourArgSigner()
    action = {
        "signatureChainId": "0x66eee",
        "hyperliquidChain": "Mainnet",
        "amount": "1",
        "toPerp": "false",
        "nonce": 1,
    }
    types = {
        "HyperliquidTransaction:UsdClassTransfer": [
            {"name": "hyperliquidChain", "type": "string"},
            {"name": "amount", "type": "string"},
            {"name": "toPerp", "type": "bool"},
            {"name": "nonce", "type": "uint64"},
        ]
    }

    with pytest.raises(SchemaEncodingError):
        await sign_user_signed_action(signer, action, types)

    assert signer.calls == []


async def test_external_address_and_chain_id():
    sync_wallet = resolve_wallet(FourArgSigner())
    async_wallet = resolve_wallet(AsyncCamelCaseSigner())

    assert await sync_wallet.get_address() == PrivateKeyWallet(PRIVATE_KEY).address
    assert await sync_wallet.get_chain_id() == "0x1"
    assert await async_wallet.get_address() == PrivateKeyWallet(PRIVATE_KEY).address
    assert await async_wallet.get_chain_id() == "0x66eee"


async def test_delegated_failure_keeps_cause():
    payload = load_json("l1_action", 0)

    with pytest.raises(DelegatedSignerError) as exc_info:
        await sign_l1_action(FailingSigner(), payload["action"], payload["nonce"], False)

    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert "user rejected the request" in str(exc_info.value)


async def test_malformed_delegated_signature():
    payload = load_json("l1_action", 0)

    with pytest.raises(DelegatedSignerError):
        await sign_l1_action(MalformedSigner(), payload["action"], payload["nonce"], False)


async def test_cancellation_aborts_pending_signer():
    payload = load_json("l1_action", 0)
    signer = HangingSigner()
    cancel_token = CancelToken()

    async def cancel_when_started():
        await signer.started.wait()
        cancel_token.cancel("user abort")

    canceller = asyncio.create_task(cancel_when_started())
    with pytest.raises(OperationCancelled) as exc_info:
        await sign_l1_action(
            signer, payload["action"], payload["nonce"], False, cancel_token=cancel_token
        )
    await canceller

    assert exc_info.value.reason == "user abort"


async def test_private_key_wallet_honours_fired_token():
    cancel_token = CancelToken()
    cancel_token.cancel()

    with pytest.raises(OperationCancelled):
        await sign_l1_action(
            PRIVATE_KEY, {"type": "noop"}, 1, False, cancel_token=cancel_token
        )


def test_split_signature():
    r = "0x" + "11" * 32
    s = "0x" + "22" * 32

    assert split_signature(r + s[2:] + "1c") == Signature(r=r, s=s, v=28)
    assert split_signature(r + s[2:] + "00") == Signature(r=r, s=s, v=27)
    assert split_signature(bytes.fromhex(r[2:] + s[2:] + "1b")) == Signature(r=r, s=s, v=27)
    assert split_signature(
        SignedMessage(signature=bytes.fromhex(r[2:] + s[2:] + "1c"))
    ) == Signature(r=r, s=s, v=28)


@pytest.mark.parametrize("value", ["0x12", "0x" + "zz" * 65, 12345])
def test_split_signature_rejects_malformed_values(value):
    with pytest.raises(DelegatedSignerError):
        split_signature(value)


def test_private_key_wallet_repr_hides_key():
    wallet = PrivateKeyWallet(PRIVATE_KEY)

    assert PRIVATE_KEY[2:] not in repr(wallet)
    assert wallet.address in repr(wallet)
