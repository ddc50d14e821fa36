"""EIP-712 type schemas for user-signed actions.

Each schema maps exactly one primary type to its ordered fields. The mappings
are read-only; variants such as the multi-sig form are built as new values.
"""

from types import MappingProxyType
from typing import Mapping

from hyperliquid_client.errors import ValidationError
from hyperliquid_client.types import ActionType, TypeField, TypeSchema


def _schema(primary_type: str, *fields: tuple[str, str]) -> TypeSchema:
    return MappingProxyType(
        {primary_type: tuple(TypeField(name, type_) for name, type_ in fields)}
    )


USER_SIGNED_ACTION_TYPES: Mapping[ActionType, TypeSchema] = MappingProxyType(
    {
        ActionType.APPROVE_AGENT: _schema(
            "HyperliquidTransaction:ApproveAgent",
            ("hyperliquidChain", "string"),
            ("agentAddress", "address"),
            ("agentName", "string"),
            ("nonce", "uint64"),
        ),
        ActionType.APPROVE_BUILDER_FEE: _schema(
            "HyperliquidTransaction:ApproveBuilderFee",
            ("hyperliquidChain", "string"),
            ("maxFeeRate", "string"),
            ("builder", "address"),
            ("nonce", "uint64"),
        ),
        ActionType.C_DEPOSIT: _schema(
            "HyperliquidTransaction:CDeposit",
            ("hyperliquidChain", "string"),
            ("wei", "uint64"),
            ("nonce", "uint64"),
        ),
        ActionType.CONVERT_TO_MULTI_SIG_USER: _schema(
            "HyperliquidTransaction:ConvertToMultiSigUser",
            ("hyperliquidChain", "string"),
            ("signers", "string"),
            ("nonce", "uint64"),
        ),
        ActionType.C_WITHDRAW: _schema(
            "HyperliquidTransaction:CWithdraw",
            ("hyperliquidChain", "string"),
            ("wei", "uint64"),
            ("nonce", "uint64"),
        ),
        ActionType.PERP_DEX_CLASS_TRANSFER: _schema(
            "HyperliquidTransaction:PerpDexClassTransfer",
            ("hyperliquidChain", "string"),
            ("dex", "string"),
            ("token", "string"),
            ("amount", "string"),
            ("toPerp", "bool"),
            ("nonce", "uint64"),
        ),
        ActionType.PERP_DEX_TRANSFER: _schema(
            "HyperliquidTransaction:PerpDexTransfer",
            ("hyperliquidChain", "string"),
            ("sourceDex", "string"),
            ("destinationDex", "string"),
            ("amount", "string"),
            ("nonce", "uint64"),
        ),
        ActionType.LINK_STAKING_USER: _schema(
            "HyperliquidTransaction:LinkStakingUser",
            ("hyperliquidChain", "string"),
            ("user", "address"),
            ("isFinalize", "bool"),
            ("nonce", "uint64"),
        ),
        ActionType.MULTI_SIG: _schema(
            "HyperliquidTransaction:SendMultiSig",
            ("hyperliquidChain", "string"),
            ("multiSigActionHash", "bytes32"),
            ("nonce", "uint64"),
        ),
        ActionType.SEND_ASSET: _schema(
            "HyperliquidTransaction:SendAsset",
            ("hyperliquidChain", "string"),
            ("destination", "string"),
            ("sourceDex", "string"),
            ("destinationDex", "string"),
            ("token", "string"),
            ("amount", "string"),
            ("fromSubAccount", "string"),
            ("nonce", "uint64"),
        ),
        ActionType.SEND_TO_EVM_WITH_DATA: _schema(
            "HyperliquidTransaction:SendToEvmWithData",
            ("hyperliquidChain", "string"),
            ("token", "string"),
            ("amount", "string"),
            ("sourceDex", "string"),
            ("destinationRecipient", "string"),
            ("addressEncoding", "string"),
            ("destinationChainId", "uint32"),
            ("gasLimit", "uint64"),
            ("data", "bytes"),
            ("nonce", "uint64"),
        ),
        ActionType.SPOT_SEND: _schema(
            "HyperliquidTransaction:SpotSend",
            ("hyperliquidChain", "string"),
            ("destination", "string"),
            ("token", "string"),
            ("amount", "string"),
            ("time", "uint64"),
        ),
        ActionType.TOKEN_DELEGATE: _schema(
            "HyperliquidTransaction:TokenDelegate",
            ("hyperliquidChain", "string"),
            ("validator", "address"),
            ("wei", "uint64"),
            ("isUndelegate", "bool"),
            ("nonce", "uint64"),
        ),
        ActionType.USD_CLASS_TRANSFER: _schema(
            "HyperliquidTransaction:UsdClassTransfer",
            ("hyperliquidChain", "string"),
            ("amount", "string"),
            ("toPerp", "bool"),
            ("nonce", "uint64"),
        ),
        ActionType.USD_SEND: _schema(
            "HyperliquidTransaction:UsdSend",
            ("hyperliquidChain", "string"),
            ("destination", "string"),
            ("amount", "string"),
            ("time", "uint64"),
        ),
        ActionType.USER_DEX_ABSTRACTION: _schema(
            "HyperliquidTransaction:UserDexAbstraction",
            ("hyperliquidChain", "string"),
            ("user", "address"),
            ("enabled", "bool"),
            ("nonce", "uint64"),
        ),
        ActionType.USER_PORTFOLIO_MARGIN: _schema(
            "HyperliquidTransaction:UserPortfolioMargin",
            ("hyperliquidChain", "string"),
            ("user", "address"),
            ("enabled", "bool"),
            ("nonce", "uint64"),
        ),
        ActionType.USER_SET_ABSTRACTION: _schema(
            "HyperliquidTransaction:UserSetAbstraction",
            ("hyperliquidChain", "string"),
            ("user", "address"),
            ("abstraction", "string"),
            ("nonce", "uint64"),
        ),
        ActionType.WITHDRAW3: _schema(
            "HyperliquidTransaction:Withdraw",
            ("hyperliquidChain", "string"),
            ("destination", "string"),
            ("amount", "string"),
            ("time", "uint64"),
        ),
    }
)

MULTI_SIG_FIELDS: tuple[TypeField, ...] = (
    TypeField("payloadMultiSigUser", "address"),
    TypeField("outerSigner", "address"),
)


def primary_type_of(types: TypeSchema) -> str:
    """Return the primary type of a user-signed schema (its first key)."""
    try:
        return next(iter(types))
    except StopIteration:
        raise ValidationError("Type schema is empty") from None


def schema_for(action_type: ActionType | str) -> TypeSchema:
    """Return the EIP-712 schema for a user-signed action kind.

    Raises:
        ValidationError: If the action kind is not user-signed.

    """
    try:
        return USER_SIGNED_ACTION_TYPES[ActionType(action_type)]
    except (KeyError, ValueError):
        raise ValidationError(
            f"Action type {action_type!r} is not a user-signed action"
        ) from None


def with_multi_sig_fields(types: TypeSchema) -> TypeSchema:
    """Return a copy of ``types`` with the multi-sig fields spliced in.

    ``payloadMultiSigUser`` and ``outerSigner`` become the second and third
    fields of the primary type. The input schema is left untouched.
    """
    primary_type = primary_type_of(types)
    fields = tuple(types[primary_type])
    spliced = fields[:1] + MULTI_SIG_FIELDS + fields[1:]
    result = {primary_type: spliced}
    for name, other in types.items():
        if name != primary_type:
            result[name] = tuple(other)
    return MappingProxyType(result)


def nonce_field_name(types: TypeSchema) -> str:
    """Return ``"time"`` if the primary type carries a ``time`` field, else ``"nonce"``."""
    for field in types[primary_type_of(types)]:
        if field.name in ("nonce", "time"):
            return field.name
    return "nonce"
