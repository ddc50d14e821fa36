"""Action signing flows.

Three flows exist, selected from the canonical action:

- L1 actions (orders, cancels, leverage, ...) are hashed with
  create_l1_action_hash() and the hash is signed as the ``connectionId`` of an
  ``Agent`` message under the fixed ``Exchange`` domain (chain id 1337).
- User-signed actions (transfers, withdrawals, approvals, ...) carry a
  ``signatureChainId`` and are signed field by field under the
  ``HyperliquidSignTransaction`` domain using a per-kind schema.
- The outer ``multiSig`` action is signed as a ``SendMultiSig`` message whose
  ``multiSigActionHash`` is the action hash of the action without its type.
"""

import logging
from typing import Any, Mapping

from hyperliquid_client.cancel import CancelToken
from hyperliquid_client.errors import ValidationError
from hyperliquid_client.signing.action_hash import create_l1_action_hash
from hyperliquid_client.signing.canonical import canonicalize_action
from hyperliquid_client.signing.primitives import ZERO_ADDRESS
from hyperliquid_client.signing.schemas import (
    nonce_field_name,
    primary_type_of,
    schema_for,
    with_multi_sig_fields,
)
from hyperliquid_client.signing.typed_data import normalize_schema
from hyperliquid_client.signing.wallet import resolve_wallet
from hyperliquid_client.types import (
    ActionType,
    Address,
    Hex,
    Nonce,
    Signature,
    SignedRequest,
    SigningFlow,
    TypedDataDomain,
    TypeField,
    TypeSchema,
)

log = logging.getLogger(__name__)

# ============================================================================
# CONSTANTS
# ============================================================================

L1_CHAIN_ID = 1337

EXCHANGE_DOMAIN = TypedDataDomain(
    name="Exchange",
    version="1",
    chain_id=L1_CHAIN_ID,
    verifying_contract=ZERO_ADDRESS,
)

AGENT_PRIMARY_TYPE = "Agent"
AGENT_TYPES: TypeSchema = {
    AGENT_PRIMARY_TYPE: (
        TypeField("source", "string"),
        TypeField("connectionId", "bytes32"),
    )
}


def hyperliquid_chain(is_testnet: bool) -> str:
    """Return the ``hyperliquidChain`` value for the network."""
    return "Testnet" if is_testnet else "Mainnet"


def user_signed_domain(signature_chain_id: Hex) -> TypedDataDomain:
    """Return the ``HyperliquidSignTransaction`` domain for a chain id given as hex."""
    try:
        chain_id = int(signature_chain_id, 16)
    except (TypeError, ValueError):
        raise ValidationError(
            f"signatureChainId must be a hex string, got {signature_chain_id!r}"
        ) from None
    return TypedDataDomain(
        name="HyperliquidSignTransaction",
        version="1",
        chain_id=chain_id,
        verifying_contract=ZERO_ADDRESS,
    )


# ============================================================================
# SIGNING FLOWS
# ============================================================================


async def sign_l1_action(
    wallet: object,
    action: Any,
    nonce: Nonce,
    is_testnet: bool,
    vault_address: Address | None = None,
    expires_after: int | None = None,
    cancel_token: CancelToken | None = None,
) -> Signature:
    """Sign an L1 action.

    Args:
        wallet: Any value accepted by resolve_wallet().
        action: The canonical action. Multi-sig signers pass
            ``[multi_sig_user, outer_signer, action]`` instead.
        nonce: The request nonce.
        is_testnet: Selects the ``source`` tag of the ``Agent`` message.
        vault_address: Vault or sub-account the action is performed for.
        expires_after: Millisecond timestamp after which the action is rejected.
        cancel_token: Aborts a pending delegated call when fired.

    Returns:
        The signature over the ``Agent`` message.

    """
    adapter = resolve_wallet(wallet)
    connection_id = create_l1_action_hash(action, nonce, vault_address, expires_after)
    message = {
        "source": "b" if is_testnet else "a",
        "connectionId": "0x" + connection_id.hex(),
    }
    return await adapter.sign_typed_data(
        EXCHANGE_DOMAIN, AGENT_TYPES, AGENT_PRIMARY_TYPE, message, cancel_token
    )


async def sign_user_signed_action(
    wallet: object,
    action: Mapping[str, Any],
    types: TypeSchema,
    cancel_token: CancelToken | None = None,
) -> Signature:
    """Sign a user-signed action field by field.

    The primary type is the first entry of ``types``. Only the fields declared
    by that type are signed. When the action carries both
    ``payloadMultiSigUser`` and ``outerSigner`` they are signed as the second
    and third fields, on a copy of the schema.

    Args:
        wallet: Any value accepted by resolve_wallet().
        action: The canonical action including ``signatureChainId``.
        types: The EIP-712 schema for the action kind.
        cancel_token: Aborts a pending delegated call when fired.

    Returns:
        The signature.

    """
    adapter = resolve_wallet(wallet)
    types = normalize_schema(types)
    if "signatureChainId" not in action:
        raise ValidationError("User-signed action is missing signatureChainId")
    if action.get("type") == ActionType.APPROVE_AGENT.value and not action.get("agentName"):
        action = {**action, "agentName": ""}
    if "payloadMultiSigUser" in action and "outerSigner" in action:
        types = with_multi_sig_fields(types)

    primary_type = primary_type_of(types)
    field_names = {field.name for field in types[primary_type]}
    message = {key: value for key, value in action.items() if key in field_names}
    domain = user_signed_domain(action["signatureChainId"])
    return await adapter.sign_typed_data(domain, types, primary_type, message, cancel_token)


async def sign_multi_sig_action(
    wallet: object,
    action: Mapping[str, Any],
    nonce: Nonce,
    is_testnet: bool,
    vault_address: Address | None = None,
    expires_after: int | None = None,
    cancel_token: CancelToken | None = None,
) -> Signature:
    """Sign the outer ``multiSig`` action as the lead signer.

    Args:
        wallet: Any value accepted by resolve_wallet().
        action: The outer action; its ``type`` member, if present, is not hashed.
        nonce: The nonce shared with every inner signature.
        is_testnet: Selects the ``hyperliquidChain`` value.
        vault_address: Vault or sub-account the action is performed for.
        expires_after: Millisecond timestamp after which the action is rejected.
        cancel_token: Aborts a pending delegated call when fired.

    Returns:
        The lead signer's signature.

    """
    adapter = resolve_wallet(wallet)
    if "signatureChainId" not in action:
        raise ValidationError("Multi-sig action is missing signatureChainId")
    action_without_type = {key: value for key, value in action.items() if key != "type"}
    action_hash = create_l1_action_hash(
        action_without_type, nonce, vault_address, expires_after
    )
    message = {
        "hyperliquidChain": hyperliquid_chain(is_testnet),
        "multiSigActionHash": "0x" + action_hash.hex(),
        "nonce": nonce,
    }
    types = schema_for(ActionType.MULTI_SIG)
    domain = user_signed_domain(action["signatureChainId"])
    return await adapter.sign_typed_data(
        domain, types, primary_type_of(types), message, cancel_token
    )


# ============================================================================
# DISPATCH
# ============================================================================


def signing_flow(action: Mapping[str, Any]) -> SigningFlow:
    """Select the signing flow for a canonical action."""
    if action.get("type") == ActionType.MULTI_SIG.value:
        return SigningFlow.MULTI_SIG
    if "signatureChainId" in action:
        return SigningFlow.USER_SIGNED
    return SigningFlow.L1


async def sign_action(
    wallet: object,
    action: Mapping[str, Any],
    is_testnet: bool,
    nonce: Nonce | None = None,
    vault_address: Address | None = None,
    expires_after: int | None = None,
    types: TypeSchema | None = None,
    cancel_token: CancelToken | None = None,
) -> SignedRequest:
    """Canonicalize and sign any action, returning the request envelope.

    Args:
        wallet: Any value accepted by resolve_wallet().
        action: The raw action.
        is_testnet: Whether the request targets testnet.
        nonce: Required for L1 and multi-sig actions. User-signed actions
            carry their nonce (``nonce`` or ``time``) inside the action.
        vault_address: Vault or sub-account (L1 and multi-sig only).
        expires_after: Expiry timestamp (L1 and multi-sig only).
        types: Schema override for user-signed actions.
        cancel_token: Aborts a pending delegated call when fired.

    Returns:
        The envelope ready to be posted to the exchange endpoint.

    Raises:
        ValidationError: If the action is malformed or a required nonce is missing.

    """
    canonical = canonicalize_action(action)
    flow = signing_flow(canonical)
    log.debug("Signing %s action with the %s flow", canonical["type"], flow.value)

    match flow:
        case SigningFlow.USER_SIGNED:
            schema = types if types is not None else schema_for(canonical["type"])
            signed_nonce = canonical.get(nonce_field_name(normalize_schema(schema)))
            if nonce is not None and nonce != signed_nonce:
                raise ValidationError(
                    f"nonce {nonce} does not match the action's nonce {signed_nonce}"
                )
            signature = await sign_user_signed_action(
                wallet, canonical, schema, cancel_token
            )
            return SignedRequest(action=canonical, signature=signature, nonce=signed_nonce)
        case SigningFlow.L1 | SigningFlow.MULTI_SIG:
            if nonce is None:
                raise ValidationError(f"A nonce is required to sign {canonical['type']}")
            sign = sign_l1_action if flow is SigningFlow.L1 else sign_multi_sig_action
            signature = await sign(
                wallet,
                canonical,
                nonce,
                is_testnet,
                vault_address,
                expires_after,
                cancel_token,
            )
            return SignedRequest(
                action=canonical,
                signature=signature,
                nonce=nonce,
                vault_address=vault_address,
                expires_after=expires_after,
            )
