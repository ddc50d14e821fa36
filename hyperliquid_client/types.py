"""Type definitions for the Hyperliquid client.

This module contains type aliases, enums, and dataclasses used throughout
the library, organized into logical sections for clarity.
"""

import re
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, NamedTuple, Self, Sequence, TypeAlias

from hyperliquid_client.errors import ValidationError

# ============================================================================
# TYPE ALIASES
# ============================================================================

# Core ID types
Nonce: TypeAlias = int
Hex: TypeAlias = str
Address: TypeAlias = str

# JSON type hierarchy
JsonObject: TypeAlias = dict[str, "JsonValue"]
JsonArray: TypeAlias = list["JsonValue"]
JsonValue: TypeAlias = None | bool | int | float | str | JsonObject | JsonArray
Json: TypeAlias = JsonObject

# Numeric input accepted by the convenience methods
NumericInput: TypeAlias = Decimal | str | float | int


# ============================================================================
# NUMERIC CONVERSION UTILITIES
# ============================================================================

DECIMAL_PATTERN = re.compile(r"^-?\d+(\.\d+)?$")


def full_precision_string(n: NumericInput) -> str:
    """Convert a numeric input to a full precision string representation."""
    if isinstance(n, bool):
        raise ValidationError(f"Invalid numeric input type {n} - {type(n)}")
    if isinstance(n, str):
        if not DECIMAL_PATTERN.match(n):
            raise ValidationError(f"Invalid numeric input {n}")
        return n
    if isinstance(n, (int, float)):
        n = Decimal(str(n))
    if not isinstance(n, Decimal):
        raise ValidationError(f"Invalid numeric input type {n} - {type(n)}")
    return format(n, "f")


# ============================================================================
# CORE ENUMS
# ============================================================================


class ActionType(Enum):
    """Every action kind accepted by the exchange endpoint."""

    AGENT_ENABLE_DEX_ABSTRACTION = "agentEnableDexAbstraction"
    AGENT_SET_ABSTRACTION = "agentSetAbstraction"
    APPROVE_AGENT = "approveAgent"
    APPROVE_BUILDER_FEE = "approveBuilderFee"
    BATCH_MODIFY = "batchModify"
    BORROW_LEND = "borrowLend"
    CANCEL = "cancel"
    CANCEL_BY_CLOID = "cancelByCloid"
    C_DEPOSIT = "cDeposit"
    CLAIM_REWARDS = "claimRewards"
    CONVERT_TO_MULTI_SIG_USER = "convertToMultiSigUser"
    CREATE_SUB_ACCOUNT = "createSubAccount"
    CREATE_VAULT = "createVault"
    C_SIGNER_ACTION = "CSignerAction"
    C_VALIDATOR_ACTION = "CValidatorAction"
    C_WITHDRAW = "cWithdraw"
    EVM_USER_MODIFY = "evmUserModify"
    LINK_STAKING_USER = "linkStakingUser"
    MODIFY = "modify"
    MULTI_SIG = "multiSig"
    NOOP = "noop"
    ORDER = "order"
    PERP_DEPLOY = "perpDeploy"
    PERP_DEX_CLASS_TRANSFER = "PerpDexClassTransfer"
    PERP_DEX_TRANSFER = "PerpDexTransfer"
    REGISTER_REFERRER = "registerReferrer"
    RESERVE_REQUEST_WEIGHT = "reserveRequestWeight"
    SCHEDULE_CANCEL = "scheduleCancel"
    SEND_ASSET = "sendAsset"
    SEND_TO_EVM_WITH_DATA = "sendToEvmWithData"
    SET_DISPLAY_NAME = "setDisplayName"
    SET_REFERRER = "setReferrer"
    SPOT_DEPLOY = "spotDeploy"
    SPOT_SEND = "spotSend"
    SPOT_USER = "spotUser"
    SUB_ACCOUNT_MODIFY = "subAccountModify"
    SUB_ACCOUNT_SPOT_TRANSFER = "subAccountSpotTransfer"
    SUB_ACCOUNT_TRANSFER = "subAccountTransfer"
    TOKEN_DELEGATE = "tokenDelegate"
    TOP_UP_ISOLATED_ONLY_MARGIN = "topUpIsolatedOnlyMargin"
    TWAP_CANCEL = "twapCancel"
    TWAP_ORDER = "twapOrder"
    UPDATE_ISOLATED_MARGIN = "updateIsolatedMargin"
    UPDATE_LEVERAGE = "updateLeverage"
    USD_CLASS_TRANSFER = "usdClassTransfer"
    USD_SEND = "usdSend"
    USER_DEX_ABSTRACTION = "userDexAbstraction"
    USER_PORTFOLIO_MARGIN = "userPortfolioMargin"
    USER_SET_ABSTRACTION = "userSetAbstraction"
    VALIDATOR_L1_STREAM = "validatorL1Stream"
    VAULT_DISTRIBUTE = "vaultDistribute"
    VAULT_MODIFY = "vaultModify"
    VAULT_TRANSFER = "vaultTransfer"
    WITHDRAW3 = "withdraw3"


class SigningFlow(Enum):
    """How an action is authenticated."""

    L1 = "l1"
    USER_SIGNED = "userSigned"
    MULTI_SIG = "multiSig"


class TimeInForce(Enum):
    """Limit order time in force."""

    ALO = "Alo"
    IOC = "Ioc"
    GTC = "Gtc"
    FRONTEND_MARKET = "FrontendMarket"
    LIQUIDATION_MARKET = "LiquidationMarket"


class TpSl(Enum):
    """Trigger order kind."""

    TP = "tp"
    SL = "sl"


class OrderGrouping(Enum):
    """Grouping of orders submitted in one request."""

    NA = "na"
    NORMAL_TPSL = "normalTpsl"
    POSITION_TPSL = "positionTpsl"


# ============================================================================
# SIGNING TYPES
# ============================================================================


class TypeField(NamedTuple):
    """One ``{name, type}`` entry of an EIP-712 struct definition."""

    name: str
    type: str


# type name -> ordered fields
TypeSchema: TypeAlias = Mapping[str, Sequence[TypeField]]


@dataclass(frozen=True)
class TypedDataDomain:
    """EIP-712 domain.

    Fields left as ``None`` are omitted from the ``EIP712Domain`` type and
    from the domain separator.
    """

    name: str | None = None
    version: str | None = None
    chain_id: int | None = None
    verifying_contract: Address | None = None
    salt: bytes | None = None

    def fields(self) -> list[TypeField]:
        """Return the ``EIP712Domain`` fields for the members that are set."""
        fields = []
        if self.name is not None:
            fields.append(TypeField("name", "string"))
        if self.version is not None:
            fields.append(TypeField("version", "string"))
        if self.chain_id is not None:
            fields.append(TypeField("chainId", "uint256"))
        if self.verifying_contract is not None:
            fields.append(TypeField("verifyingContract", "address"))
        if self.salt is not None:
            fields.append(TypeField("salt", "bytes32"))
        return fields

    def to_dict(self) -> dict[str, Any]:
        """Return the domain as a message dict keyed by EIP-712 field names."""
        data: dict[str, Any] = {}
        if self.name is not None:
            data["name"] = self.name
        if self.version is not None:
            data["version"] = self.version
        if self.chain_id is not None:
            data["chainId"] = self.chain_id
        if self.verifying_contract is not None:
            data["verifyingContract"] = self.verifying_contract
        if self.salt is not None:
            data["salt"] = "0x" + self.salt.hex()
        return data


@dataclass(frozen=True)
class Signature:
    """A secp256k1 signature split into ``r``, ``s`` and ``v``.

    ``r`` and ``s`` are ``0x`` prefixed hex strings, ``v`` is 27 or 28.
    """

    r: Hex
    s: Hex
    v: int

    @classmethod
    def from_ints(cls, r: int, s: int, v: int) -> Self:
        """Build a signature from integer components, padding ``r`` and ``s`` to 32 bytes."""
        return cls(r=f"0x{r:064x}", s=f"0x{s:064x}", v=v)

    def trimmed(self) -> "Signature":
        """Return a copy with leading zero nibbles stripped from ``r`` and ``s``.

        Multi-sig payloads carry signatures in this form.
        """
        return Signature(r=trim_hex(self.r), s=trim_hex(self.s), v=self.v)

    def to_dict(self) -> dict[str, Any]:
        """Return the ``{r, s, v}`` JSON form."""
        return {"r": self.r, "s": self.s, "v": self.v}


def trim_hex(value: Hex) -> Hex:
    digits = value[2:] if value.lower().startswith("0x") else value
    stripped = digits.lstrip("0")
    return "0x" + stripped


@dataclass(frozen=True)
class MultiSigEnvelope:
    """Signatures collected from every signer of a multi-sig account.

    Assembled once per request and never modified afterwards.
    """

    signatures: tuple[Signature, ...]
    multi_sig_user: Address
    outer_signer: Address
    action: Any

    def to_action(self, signature_chain_id: Hex) -> dict[str, Any]:
        """Wrap the envelope into the outer ``multiSig`` action."""
        return {
            "type": ActionType.MULTI_SIG.value,
            "signatureChainId": signature_chain_id,
            "signatures": [signature.to_dict() for signature in self.signatures],
            "payload": {
                "multiSigUser": self.multi_sig_user,
                "outerSigner": self.outer_signer,
                "action": self.action,
            },
        }


@dataclass
class SignedRequest:
    """The body posted to the exchange endpoint."""

    action: Any
    signature: Signature
    nonce: Nonce
    vault_address: Address | None = None
    expires_after: int | None = None

    def to_payload(self) -> Json:
        """Return the JSON body, omitting the vault address and expiry when absent."""
        payload: Json = {
            "action": self.action,
            "signature": self.signature.to_dict(),
            "nonce": self.nonce,
        }
        if self.vault_address is not None:
            payload["vaultAddress"] = self.vault_address
        if self.expires_after is not None:
            payload["expiresAfter"] = self.expires_after
        return payload
