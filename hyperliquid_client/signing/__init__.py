from hyperliquid_client.signing.action_hash import create_l1_action_hash, l1_action_payload
from hyperliquid_client.signing.canonical import canonicalize_action
from hyperliquid_client.signing.multisig import (
    build_multi_sig_action,
    collect_signatures,
    sign_multi_sig_request,
)
from hyperliquid_client.signing.primitives import (
    keccak256,
    private_key_to_address,
    recover_address,
)
from hyperliquid_client.signing.schemas import USER_SIGNED_ACTION_TYPES, schema_for
from hyperliquid_client.signing.signer import (
    sign_action,
    sign_l1_action,
    sign_multi_sig_action,
    sign_user_signed_action,
)
from hyperliquid_client.signing.typed_data import hash_typed_data
from hyperliquid_client.signing.wallet import (
    LegacyTypedDataWallet,
    ParamsTypedDataWallet,
    PrivateKeyWallet,
    ThreeArgTypedDataWallet,
    TypedDataWallet,
    Wallet,
    resolve_wallet,
)

__all__ = [
    "canonicalize_action",
    "create_l1_action_hash",
    "l1_action_payload",
    "hash_typed_data",
    "keccak256",
    "private_key_to_address",
    "recover_address",
    "USER_SIGNED_ACTION_TYPES",
    "schema_for",
    "sign_action",
    "sign_l1_action",
    "sign_user_signed_action",
    "sign_multi_sig_action",
    "collect_signatures",
    "build_multi_sig_action",
    "sign_multi_sig_request",
    "Wallet",
    "PrivateKeyWallet",
    "TypedDataWallet",
    "ThreeArgTypedDataWallet",
    "LegacyTypedDataWallet",
    "ParamsTypedDataWallet",
    "resolve_wallet",
]
