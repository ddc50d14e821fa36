"""Multi-signature request assembly.

A multi-sig account acts through one outer ``multiSig`` action. Every
authorised signer signs the same inner action, bound to the multi-sig account
and to the lead signer (the first wallet), all under one shared nonce. The
signatures are collected concurrently, wrapped together with the inner action,
and the wrapper is signed once more by the lead signer.
"""

import asyncio
import logging
from typing import Any, Mapping, Sequence

from hyperliquid_client.cancel import CancelToken
from hyperliquid_client.errors import (
    MultiSigPartialFailure,
    OperationCancelled,
    ValidationError,
)
from hyperliquid_client.nonce import DEFAULT_NONCE_SOURCE, NonceSource
from hyperliquid_client.signing.canonical import canonicalize_action
from hyperliquid_client.signing.schemas import nonce_field_name, schema_for
from hyperliquid_client.signing.signer import (
    sign_l1_action,
    sign_multi_sig_action,
    sign_user_signed_action,
)
from hyperliquid_client.signing.typed_data import normalize_schema
from hyperliquid_client.signing.wallet import Wallet, resolve_wallet
from hyperliquid_client.types import (
    Address,
    Hex,
    MultiSigEnvelope,
    Nonce,
    Signature,
    SignedRequest,
    TypeSchema,
)

log = logging.getLogger(__name__)


async def _sign_branch(
    index: int,
    wallet: Wallet,
    action: Mapping[str, Any],
    multi_sig_user: Address,
    outer_signer: Address,
    nonce: Nonce,
    is_testnet: bool,
    vault_address: Address | None,
    expires_after: int | None,
    types: TypeSchema | None,
    cancel_token: CancelToken | None,
) -> Signature:
    try:
        if types is not None:
            signature = await sign_user_signed_action(
                wallet,
                {"payloadMultiSigUser": multi_sig_user, "outerSigner": outer_signer, **action},
                types,
                cancel_token,
            )
        else:
            signature = await sign_l1_action(
                wallet,
                [multi_sig_user, outer_signer, action],
                nonce,
                is_testnet,
                vault_address,
                expires_after,
                cancel_token,
            )
    except OperationCancelled as e:
        raise OperationCancelled(e.reason, wallet_index=index) from e
    except Exception as e:
        raise MultiSigPartialFailure(index, e) from e
    log.debug("Collected multi-sig signature %d", index)
    return signature.trimmed()


async def collect_signatures(
    wallets: Sequence[object],
    action: Mapping[str, Any],
    multi_sig_user: Address,
    outer_signer: Address,
    nonce: Nonce,
    is_testnet: bool,
    vault_address: Address | None = None,
    expires_after: int | None = None,
    types: TypeSchema | None = None,
    cancel_token: CancelToken | None = None,
) -> tuple[Signature, ...]:
    """Have every wallet sign the same canonical inner action, concurrently.

    Args:
        wallets: The signers, lead signer first.
        action: The canonical inner action.
        multi_sig_user: The multi-sig account address.
        outer_signer: The lead signer's address.
        nonce: The nonce shared by every signature.
        is_testnet: Whether the request targets testnet.
        vault_address: Vault or sub-account (L1 inner actions only).
        expires_after: Expiry timestamp (L1 inner actions only).
        types: Schema of a user-signed inner action; None for L1 actions.
        cancel_token: Aborts every pending branch when fired.

    Returns:
        The trimmed signatures, in wallet order.

    Raises:
        OperationCancelled: If the cancel token fired before every branch finished.
        MultiSigPartialFailure: If any branch failed; the lowest failing index
            is reported.

    """
    adapters = [resolve_wallet(wallet) for wallet in wallets]
    multi_sig_user = multi_sig_user.lower()
    outer_signer = outer_signer.lower()

    tasks: list[asyncio.Task[Signature]] = []
    try:
        async with asyncio.TaskGroup() as group:
            for index, adapter in enumerate(adapters):
                tasks.append(
                    group.create_task(
                        _sign_branch(
                            index,
                            adapter,
                            action,
                            multi_sig_user,
                            outer_signer,
                            nonce,
                            is_testnet,
                            vault_address,
                            expires_after,
                            types,
                            cancel_token,
                        )
                    )
                )
    except ExceptionGroup as group_error:
        failures = list(group_error.exceptions)
        cancelled = [e for e in failures if isinstance(e, OperationCancelled)]
        if cancelled:
            raise cancelled[0] from None
        partial = sorted(
            (e for e in failures if isinstance(e, MultiSigPartialFailure)),
            key=lambda e: e.wallet_index,
        )
        if partial:
            raise partial[0] from None
        raise

    return tuple(task.result() for task in tasks)


def build_multi_sig_action(
    signatures: Sequence[Signature],
    multi_sig_user: Address,
    outer_signer: Address,
    action: Any,
    signature_chain_id: Hex,
) -> dict[str, Any]:
    """Wrap collected signatures and the inner action into the outer ``multiSig`` action."""
    envelope = MultiSigEnvelope(
        signatures=tuple(signatures),
        multi_sig_user=multi_sig_user.lower(),
        outer_signer=outer_signer.lower(),
        action=action,
    )
    return envelope.to_action(signature_chain_id)


async def sign_multi_sig_request(
    wallets: Sequence[object],
    multi_sig_user: Address,
    action: Mapping[str, Any],
    is_testnet: bool,
    nonce: Nonce | None = None,
    nonce_source: NonceSource = DEFAULT_NONCE_SOURCE,
    signature_chain_id: Hex | None = None,
    vault_address: Address | None = None,
    expires_after: int | None = None,
    types: TypeSchema | None = None,
    cancel_token: CancelToken | None = None,
) -> SignedRequest:
    """Produce the complete signed ``multiSig`` request for an inner action.

    Args:
        wallets: The signers; the first one is the lead (outer) signer.
        multi_sig_user: The multi-sig account address.
        action: The raw inner action.
        is_testnet: Whether the request targets testnet.
        nonce: The shared nonce. L1 inner actions draw one from
            ``nonce_source`` when omitted; user-signed inner actions always use
            the nonce embedded in the action.
        nonce_source: Source of the shared nonce for L1 inner actions.
        signature_chain_id: Chain id for the outer action. Defaults to the
            inner action's ``signatureChainId``, then to the lead wallet's chain id.
        vault_address: Vault or sub-account (L1 inner actions only).
        expires_after: Expiry timestamp (L1 inner actions only).
        types: Schema override for a user-signed inner action.
        cancel_token: Aborts every pending signature when fired.

    Returns:
        The envelope carrying the outer action and the lead signature.

    Raises:
        ValidationError: If no wallets are given or the options do not match
            the inner action's flow.
        OperationCancelled: If the cancel token fired.
        MultiSigPartialFailure: If any inner signature failed.

    """
    if not wallets:
        raise ValidationError("A multi-sig request needs at least one signer")
    adapters = [resolve_wallet(wallet) for wallet in wallets]
    lead = adapters[0]
    outer_signer = (await lead.get_address(cancel_token)).lower()

    canonical = canonicalize_action(action)
    if "signatureChainId" in canonical:
        if vault_address is not None or expires_after is not None:
            raise ValidationError(
                "vault_address and expires_after only apply to L1 actions"
            )
        types = normalize_schema(types if types is not None else schema_for(canonical["type"]))
        embedded = canonical.get(nonce_field_name(types))
        if nonce is not None and nonce != embedded:
            raise ValidationError(
                f"nonce {nonce} does not match the action's nonce {embedded}"
            )
        nonce = embedded
    elif nonce is None:
        nonce = nonce_source.next_nonce()

    log.debug(
        "Collecting %d multi-sig signatures for %s (nonce=%d)",
        len(adapters),
        canonical["type"],
        nonce,
    )
    signatures = await collect_signatures(
        adapters,
        canonical,
        multi_sig_user,
        outer_signer,
        nonce,
        is_testnet,
        vault_address,
        expires_after,
        types if "signatureChainId" in canonical else None,
        cancel_token,
    )

    if signature_chain_id is None:
        signature_chain_id = canonical.get("signatureChainId")
    if signature_chain_id is None:
        signature_chain_id = await lead.get_chain_id(cancel_token)

    outer_action = build_multi_sig_action(
        signatures, multi_sig_user, outer_signer, canonical, signature_chain_id
    )
    signature = await sign_multi_sig_action(
        lead,
        outer_action,
        nonce,
        is_testnet,
        vault_address,
        expires_after,
        cancel_token,
    )
    return SignedRequest(
        action=outer_action,
        signature=signature,
        nonce=nonce,
        vault_address=vault_address,
        expires_after=expires_after,
    )
