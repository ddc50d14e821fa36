"""Canonical field order for every exchange action.

The exchange hashes actions exactly as they are packed, so two logically equal
actions must always produce the same bytes. Each function here copies only the
recognised fields of one action kind, in the venue's order, and normalises
their values:

- address fields are lowercased
- decimal strings lose trailing zeros (``"1.50"`` -> ``"1.5"``, ``"1.0"`` -> ``"1"``)
- optional fields that are missing or ``None`` are left out entirely, except
  where the venue expects an explicit null

Inputs are never modified. Applying a canonicalizer to its own output returns
an equal value.
"""

from typing import Any, Callable, Mapping

from hyperliquid_client.errors import ValidationError
from hyperliquid_client.types import ActionType, trim_hex

Action = Mapping[str, Any]
CanonicalAction = dict[str, Any]


# ============================================================================
# FIELD HELPERS
# ============================================================================


def format_decimal(value: str) -> str:
    """Strip trailing zeros from the fraction of a decimal string.

    Strings without a decimal point are returned unchanged, and a point left
    with no digits after it is dropped.

    Examples:
        >>> format_decimal("1.50000")
        '1.5'
        >>> format_decimal("1.0")
        '1'
        >>> format_decimal("100")
        '100'

    """
    if not isinstance(value, str):
        raise ValidationError(f"Expected a decimal string, got {value!r}")
    if "." not in value:
        return value
    integer_part, fraction = value.split(".", 1)
    fraction = fraction.rstrip("0")
    return f"{integer_part}.{fraction}" if fraction else integer_part


def _field(action: Action, name: str) -> Any:
    try:
        return action[name]
    except KeyError:
        raise ValidationError(
            f"{action.get('type', 'action')} is missing required field {name!r}"
        ) from None
    except TypeError as e:
        raise ValidationError(f"Expected a mapping containing {name!r}") from e


def _type(action: Action) -> str:
    kind = _field(action, "type")
    return kind.value if isinstance(kind, ActionType) else kind


def _lower(value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"Expected a hex string, got {value!r}")
    return value.lower()


def _lower_or_none(value: Any) -> str | None:
    return None if value is None else _lower(value)


def _set_optional(target: CanonicalAction, name: str, value: Any) -> None:
    if value is not None:
        target[name] = value


def _pairs(rows: Any) -> list[list[Any]]:
    return [list(row) for row in rows]


def _user_signed_header(action: Action) -> CanonicalAction:
    return {
        "type": _type(action),
        "signatureChainId": _field(action, "signatureChainId"),
        "hyperliquidChain": _field(action, "hyperliquidChain"),
    }


# ============================================================================
# SHARED SUB-STRUCTURES
# ============================================================================


def canonical_order_type(order_type: Mapping[str, Any]) -> CanonicalAction:
    """Canonicalize the ``t`` member of an order (limit or trigger)."""
    if "limit" in order_type:
        return {"limit": {"tif": _field(order_type["limit"], "tif")}}
    if "trigger" in order_type:
        trigger = order_type["trigger"]
        return {
            "trigger": {
                "isMarket": _field(trigger, "isMarket"),
                "triggerPx": format_decimal(_field(trigger, "triggerPx")),
                "tpsl": _field(trigger, "tpsl"),
            }
        }
    raise ValidationError(f"Order type must contain 'limit' or 'trigger': {order_type!r}")


def canonical_order(order: Mapping[str, Any]) -> CanonicalAction:
    """Canonicalize one order of an order, modify or batchModify action."""
    canonical = {
        "a": _field(order, "a"),
        "b": _field(order, "b"),
        "p": format_decimal(_field(order, "p")),
        "s": format_decimal(_field(order, "s")),
        "r": _field(order, "r"),
        "t": canonical_order_type(_field(order, "t")),
    }
    _set_optional(canonical, "c", order.get("c"))
    return canonical


# ============================================================================
# USER-SIGNED ACTIONS
# ============================================================================


def approve_agent(action: Action) -> CanonicalAction:
    """Canonicalize an approveAgent action.

    A missing agent name is kept as ``None`` here; the signer hashes it as
    the empty string.
    """
    canonical = _user_signed_header(action)
    canonical["agentAddress"] = _lower(_field(action, "agentAddress"))
    canonical["agentName"] = action.get("agentName") or None
    canonical["nonce"] = _field(action, "nonce")
    return canonical


def approve_builder_fee(action: Action) -> CanonicalAction:
    canonical = _user_signed_header(action)
    canonical["maxFeeRate"] = _field(action, "maxFeeRate")
    canonical["builder"] = _lower(_field(action, "builder"))
    canonical["nonce"] = _field(action, "nonce")
    return canonical


def c_deposit(action: Action) -> CanonicalAction:
    canonical = _user_signed_header(action)
    canonical["wei"] = _field(action, "wei")
    canonical["nonce"] = _field(action, "nonce")
    return canonical


def c_withdraw(action: Action) -> CanonicalAction:
    canonical = _user_signed_header(action)
    canonical["wei"] = _field(action, "wei")
    canonical["nonce"] = _field(action, "nonce")
    return canonical


def convert_to_multi_sig_user(action: Action) -> CanonicalAction:
    """Canonicalize a convertToMultiSigUser action.

    ``signers`` is a JSON string signed as is.
    """
    canonical = _user_signed_header(action)
    canonical["signers"] = _field(action, "signers")
    canonical["nonce"] = _field(action, "nonce")
    return canonical


def link_staking_user(action: Action) -> CanonicalAction:
    canonical = _user_signed_header(action)
    canonical["user"] = _lower(_field(action, "user"))
    canonical["isFinalize"] = _field(action, "isFinalize")
    canonical["nonce"] = _field(action, "nonce")
    return canonical


def perp_dex_class_transfer(action: Action) -> CanonicalAction:
    canonical = _user_signed_header(action)
    canonical["dex"] = _field(action, "dex")
    canonical["token"] = _field(action, "token")
    canonical["amount"] = _field(action, "amount")
    canonical["toPerp"] = _field(action, "toPerp")
    canonical["nonce"] = _field(action, "nonce")
    return canonical


def perp_dex_transfer(action: Action) -> CanonicalAction:
    canonical = _user_signed_header(action)
    canonical["sourceDex"] = _field(action, "sourceDex")
    canonical["destinationDex"] = _field(action, "destinationDex")
    canonical["amount"] = _field(action, "amount")
    canonical["nonce"] = _field(action, "nonce")
    return canonical


def send_asset(action: Action) -> CanonicalAction:
    """Canonicalize a sendAsset action.

    ``fromSubAccount`` defaults to the empty string, meaning the main account.
    """
    canonical = _user_signed_header(action)
    canonical["destination"] = _lower(_field(action, "destination"))
    canonical["sourceDex"] = _field(action, "sourceDex")
    canonical["destinationDex"] = _field(action, "destinationDex")
    canonical["token"] = _field(action, "token")
    canonical["amount"] = _field(action, "amount")
    canonical["fromSubAccount"] = _lower(action.get("fromSubAccount") or "")
    canonical["nonce"] = _field(action, "nonce")
    return canonical


def send_to_evm_with_data(action: Action) -> CanonicalAction:
    canonical = _user_signed_header(action)
    canonical["token"] = _field(action, "token")
    canonical["amount"] = _field(action, "amount")
    canonical["sourceDex"] = _field(action, "sourceDex")
    canonical["destinationRecipient"] = _field(action, "destinationRecipient")
    canonical["addressEncoding"] = _field(action, "addressEncoding")
    canonical["destinationChainId"] = _field(action, "destinationChainId")
    canonical["gasLimit"] = _field(action, "gasLimit")
    canonical["data"] = _lower(_field(action, "data"))
    canonical["nonce"] = _field(action, "nonce")
    return canonical


def spot_send(action: Action) -> CanonicalAction:
    canonical = _user_signed_header(action)
    canonical["destination"] = _lower(_field(action, "destination"))
    canonical["token"] = _field(action, "token")
    canonical["amount"] = _field(action, "amount")
    canonical["time"] = _field(action, "time")
    return canonical


def token_delegate(action: Action) -> CanonicalAction:
    canonical = _user_signed_header(action)
    canonical["validator"] = _lower(_field(action, "validator"))
    canonical["wei"] = _field(action, "wei")
    canonical["isUndelegate"] = _field(action, "isUndelegate")
    canonical["nonce"] = _field(action, "nonce")
    return canonical


def usd_class_transfer(action: Action) -> CanonicalAction:
    canonical = _user_signed_header(action)
    canonical["amount"] = _field(action, "amount")
    canonical["toPerp"] = _field(action, "toPerp")
    canonical["nonce"] = _field(action, "nonce")
    return canonical


def usd_send(action: Action) -> CanonicalAction:
    canonical = _user_signed_header(action)
    canonical["destination"] = _lower(_field(action, "destination"))
    canonical["amount"] = _field(action, "amount")
    canonical["time"] = _field(action, "time")
    return canonical


def user_dex_abstraction(action: Action) -> CanonicalAction:
    canonical = _user_signed_header(action)
    canonical["user"] = _lower(_field(action, "user"))
    canonical["enabled"] = _field(action, "enabled")
    canonical["nonce"] = _field(action, "nonce")
    return canonical


def user_portfolio_margin(action: Action) -> CanonicalAction:
    canonical = _user_signed_header(action)
    canonical["user"] = _lower(_field(action, "user"))
    canonical["enabled"] = _field(action, "enabled")
    canonical["nonce"] = _field(action, "nonce")
    return canonical


def user_set_abstraction(action: Action) -> CanonicalAction:
    canonical = _user_signed_header(action)
    canonical["user"] = _lower(_field(action, "user"))
    canonical["abstraction"] = _field(action, "abstraction")
    canonical["nonce"] = _field(action, "nonce")
    return canonical


def withdraw3(action: Action) -> CanonicalAction:
    canonical = _user_signed_header(action)
    canonical["destination"] = _lower(_field(action, "destination"))
    canonical["amount"] = _field(action, "amount")
    canonical["time"] = _field(action, "time")
    return canonical


# ============================================================================
# ORDER MANAGEMENT
# ============================================================================


def order(action: Action) -> CanonicalAction:
    """Canonicalize an order action, including the optional builder fee."""
    canonical = {
        "type": _type(action),
        "orders": [canonical_order(o) for o in _field(action, "orders")],
        "grouping": _field(action, "grouping"),
    }
    builder = action.get("builder")
    if builder is not None:
        canonical["builder"] = {
            "b": _lower(_field(builder, "b")),
            "f": _field(builder, "f"),
        }
    return canonical


def modify(action: Action) -> CanonicalAction:
    return {
        "type": _type(action),
        "oid": _field(action, "oid"),
        "order": canonical_order(_field(action, "order")),
    }


def batch_modify(action: Action) -> CanonicalAction:
    return {
        "type": _type(action),
        "modifies": [
            {
                "oid": _field(entry, "oid"),
                "order": canonical_order(_field(entry, "order")),
            }
            for entry in _field(action, "modifies")
        ],
    }


def cancel(action: Action) -> CanonicalAction:
    return {
        "type": _type(action),
        "cancels": [
            {"a": _field(entry, "a"), "o": _field(entry, "o")}
            for entry in _field(action, "cancels")
        ],
    }


def cancel_by_cloid(action: Action) -> CanonicalAction:
    return {
        "type": _type(action),
        "cancels": [
            {"asset": _field(entry, "asset"), "cloid": _field(entry, "cloid")}
            for entry in _field(action, "cancels")
        ],
    }


def schedule_cancel(action: Action) -> CanonicalAction:
    """Canonicalize a scheduleCancel action. Without ``time`` the schedule is cleared."""
    canonical = {"type": _type(action)}
    _set_optional(canonical, "time", action.get("time"))
    return canonical


def twap_order(action: Action) -> CanonicalAction:
    twap = _field(action, "twap")
    return {
        "type": _type(action),
        "twap": {
            "a": _field(twap, "a"),
            "b": _field(twap, "b"),
            "s": format_decimal(_field(twap, "s")),
            "r": _field(twap, "r"),
            "m": _field(twap, "m"),
            "t": _field(twap, "t"),
        },
    }


def twap_cancel(action: Action) -> CanonicalAction:
    return {
        "type": _type(action),
        "a": _field(action, "a"),
        "t": _field(action, "t"),
    }


def update_isolated_margin(action: Action) -> CanonicalAction:
    return {
        "type": _type(action),
        "asset": _field(action, "asset"),
        "isBuy": _field(action, "isBuy"),
        "ntli": _field(action, "ntli"),
    }


def update_leverage(action: Action) -> CanonicalAction:
    return {
        "type": _type(action),
        "asset": _field(action, "asset"),
        "isCross": _field(action, "isCross"),
        "leverage": _field(action, "leverage"),
    }


def top_up_isolated_only_margin(action: Action) -> CanonicalAction:
    return {
        "type": _type(action),
        "asset": _field(action, "asset"),
        "leverage": format_decimal(_field(action, "leverage")),
    }


def borrow_lend(action: Action) -> CanonicalAction:
    """Canonicalize a borrowLend action. A null amount means the full balance."""
    amount = _field(action, "amount")
    return {
        "type": _type(action),
        "operation": _field(action, "operation"),
        "token": _field(action, "token"),
        "amount": None if amount is None else format_decimal(amount),
    }


# ============================================================================
# ACCOUNT, VAULT AND SUB-ACCOUNT
# ============================================================================


def agent_enable_dex_abstraction(action: Action) -> CanonicalAction:
    return {"type": _type(action)}


def agent_set_abstraction(action: Action) -> CanonicalAction:
    return {"type": _type(action), "abstraction": _field(action, "abstraction")}


def claim_rewards(action: Action) -> CanonicalAction:
    return {"type": _type(action)}


def noop(action: Action) -> CanonicalAction:
    return {"type": _type(action)}


def create_sub_account(action: Action) -> CanonicalAction:
    return {"type": _type(action), "name": _field(action, "name")}


def create_vault(action: Action) -> CanonicalAction:
    return {
        "type": _type(action),
        "name": _field(action, "name"),
        "description": _field(action, "description"),
        "initialUsd": _field(action, "initialUsd"),
        "nonce": _field(action, "nonce"),
    }


def evm_user_modify(action: Action) -> CanonicalAction:
    return {
        "type": _type(action),
        "usingBigBlocks": _field(action, "usingBigBlocks"),
    }


def register_referrer(action: Action) -> CanonicalAction:
    return {"type": _type(action), "code": _field(action, "code")}


def reserve_request_weight(action: Action) -> CanonicalAction:
    return {"type": _type(action), "weight": _field(action, "weight")}


def set_display_name(action: Action) -> CanonicalAction:
    return {
        "type": _type(action),
        "displayName": _field(action, "displayName"),
    }


def set_referrer(action: Action) -> CanonicalAction:
    return {"type": _type(action), "code": _field(action, "code")}


def spot_user(action: Action) -> CanonicalAction:
    toggle = _field(action, "toggleSpotDusting")
    return {
        "type": _type(action),
        "toggleSpotDusting": {"optOut": _field(toggle, "optOut")},
    }


def sub_account_modify(action: Action) -> CanonicalAction:
    return {
        "type": _type(action),
        "subAccountUser": _lower(_field(action, "subAccountUser")),
        "name": _field(action, "name"),
    }


def sub_account_spot_transfer(action: Action) -> CanonicalAction:
    return {
        "type": _type(action),
        "subAccountUser": _lower(_field(action, "subAccountUser")),
        "isDeposit": _field(action, "isDeposit"),
        "token": _field(action, "token"),
        "amount": _field(action, "amount"),
    }


def sub_account_transfer(action: Action) -> CanonicalAction:
    return {
        "type": _type(action),
        "subAccountUser": _lower(_field(action, "subAccountUser")),
        "isDeposit": _field(action, "isDeposit"),
        "usd": _field(action, "usd"),
    }


def vault_distribute(action: Action) -> CanonicalAction:
    return {
        "type": _type(action),
        "vaultAddress": _field(action, "vaultAddress"),
        "usd": _field(action, "usd"),
    }


def vault_modify(action: Action) -> CanonicalAction:
    return {
        "type": _type(action),
        "vaultAddress": _field(action, "vaultAddress"),
        "allowDeposits": _field(action, "allowDeposits"),
        "alwaysCloseOnWithdraw": _field(action, "alwaysCloseOnWithdraw"),
    }


def vault_transfer(action: Action) -> CanonicalAction:
    return {
        "type": _type(action),
        "vaultAddress": _field(action, "vaultAddress"),
        "isDeposit": _field(action, "isDeposit"),
        "usd": _field(action, "usd"),
    }


# ============================================================================
# VALIDATOR ACTIONS
# ============================================================================


def c_signer_action(action: Action) -> CanonicalAction:
    """Canonicalize a CSignerAction (jailSelf or unjailSelf)."""
    if "jailSelf" in action:
        return {"type": _type(action), "jailSelf": action["jailSelf"]}
    return {"type": _type(action), "unjailSelf": _field(action, "unjailSelf")}


def c_validator_action(action: Action) -> CanonicalAction:
    """Canonicalize a CValidatorAction (changeProfile, register or unregister).

    ``changeProfile`` always carries every field; unchanged ones are sent as
    explicit nulls.
    """
    if "changeProfile" in action:
        profile = action["changeProfile"]
        return {
            "type": _type(action),
            "changeProfile": {
                "node_ip": profile.get("node_ip"),
                "name": profile.get("name"),
                "description": profile.get("description"),
                "unjailed": _field(profile, "unjailed"),
                "disable_delegations": profile.get("disable_delegations"),
                "commission_bps": profile.get("commission_bps"),
                "signer": _lower_or_none(profile.get("signer")),
            },
        }
    if "register" in action:
        register = action["register"]
        profile = _field(register, "profile")
        return {
            "type": _type(action),
            "register": {
                "profile": {
                    "node_ip": {"Ip": _field(_field(profile, "node_ip"), "Ip")},
                    "name": _field(profile, "name"),
                    "description": _field(profile, "description"),
                    "delegations_disabled": _field(profile, "delegations_disabled"),
                    "commission_bps": _field(profile, "commission_bps"),
                    "signer": _lower(_field(profile, "signer")),
                },
                "unjailed": _field(register, "unjailed"),
                "initial_wei": _field(register, "initial_wei"),
            },
        }
    return {"type": _type(action), "unregister": _field(action, "unregister")}


def validator_l1_stream(action: Action) -> CanonicalAction:
    return {
        "type": _type(action),
        "riskFreeRate": format_decimal(_field(action, "riskFreeRate")),
    }


# ============================================================================
# DEPLOYMENT ACTIONS
# ============================================================================


def perp_deploy(action: Action) -> CanonicalAction:
    """Canonicalize a perpDeploy action (registerAsset or setOracle)."""
    if "registerAsset" in action:
        register = action["registerAsset"]
        asset = _field(register, "assetRequest")
        schema = register.get("schema")
        return {
            "type": _type(action),
            "registerAsset": {
                "maxGas": register.get("maxGas"),
                "assetRequest": {
                    "coin": _field(asset, "coin"),
                    "szDecimals": _field(asset, "szDecimals"),
                    "oraclePx": _field(asset, "oraclePx"),
                    "marginTableId": _field(asset, "marginTableId"),
                    "onlyIsolated": _field(asset, "onlyIsolated"),
                },
                "dex": _field(register, "dex"),
                "schema": (
                    {
                        "fullName": _field(schema, "fullName"),
                        "collateralToken": _field(schema, "collateralToken"),
                        "oracleUpdater": _lower_or_none(schema.get("oracleUpdater")),
                    }
                    if schema
                    else None
                ),
            },
        }
    oracle = _field(action, "setOracle")
    return {
        "type": _type(action),
        "setOracle": {
            "dex": _field(oracle, "dex"),
            "oraclePxs": _pairs(_field(oracle, "oraclePxs")),
            "markPxs": _pairs(_field(oracle, "markPxs")),
        },
    }


def spot_deploy(action: Action) -> CanonicalAction:
    """Canonicalize a spotDeploy action (any of its six sub-actions)."""
    kind = _type(action)
    if "genesis" in action:
        genesis = action["genesis"]
        body = {
            "token": _field(genesis, "token"),
            "maxSupply": _field(genesis, "maxSupply"),
        }
        _set_optional(body, "noHyperliquidity", genesis.get("noHyperliquidity"))
        return {"type": kind, "genesis": body}
    if "registerHyperliquidity" in action:
        register = action["registerHyperliquidity"]
        body = {
            "spot": _field(register, "spot"),
            "startPx": _field(register, "startPx"),
            "orderSz": _field(register, "orderSz"),
            "nOrders": _field(register, "nOrders"),
        }
        _set_optional(body, "nSeededLevels", register.get("nSeededLevels"))
        return {"type": kind, "registerHyperliquidity": body}
    if "registerSpot" in action:
        return {
            "type": kind,
            "registerSpot": {"tokens": list(_field(action["registerSpot"], "tokens"))},
        }
    if "registerToken2" in action:
        register = action["registerToken2"]
        spec = _field(register, "spec")
        body = {
            "spec": {
                "name": _field(spec, "name"),
                "szDecimals": _field(spec, "szDecimals"),
                "weiDecimals": _field(spec, "weiDecimals"),
            },
            "maxGas": _field(register, "maxGas"),
        }
        _set_optional(body, "fullName", register.get("fullName"))
        return {"type": kind, "registerToken2": body}
    if "setDeployerTradingFeeShare" in action:
        share = action["setDeployerTradingFeeShare"]
        return {
            "type": kind,
            "setDeployerTradingFeeShare": {
                "token": _field(share, "token"),
                "share": _field(share, "share"),
            },
        }
    genesis = _field(action, "userGenesis")
    body = {
        "token": _field(genesis, "token"),
        "userAndWei": _pairs(_field(genesis, "userAndWei")),
        "existingTokenAndWei": _pairs(_field(genesis, "existingTokenAndWei")),
    }
    blacklist = genesis.get("blacklistUsers")
    if blacklist is not None:
        body["blacklistUsers"] = _pairs(blacklist)
    return {"type": kind, "userGenesis": body}


# ============================================================================
# MULTI-SIG
# ============================================================================


def multi_sig(action: Action) -> CanonicalAction:
    """Canonicalize the outer multiSig action.

    Signature components are trimmed of leading zeros and lowercased; the
    inner action is copied as given because every signer already signed it.
    """
    payload = _field(action, "payload")
    signatures = []
    for signature in _field(action, "signatures"):
        signatures.append(
            {
                "r": trim_hex(_field(signature, "r")).lower(),
                "s": trim_hex(_field(signature, "s")).lower(),
                "v": _field(signature, "v"),
            }
        )
    return {
        "type": _type(action),
        "signatureChainId": _field(action, "signatureChainId"),
        "signatures": signatures,
        "payload": {
            "multiSigUser": _lower(_field(payload, "multiSigUser")),
            "outerSigner": _lower(_field(payload, "outerSigner")),
            "action": _deep_copy(_field(payload, "action")),
        },
    }


def _deep_copy(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _deep_copy(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_deep_copy(item) for item in value]
    return value


# ============================================================================
# DISPATCH
# ============================================================================


def canonicalize_action(action: Action) -> CanonicalAction:
    """Return the canonical form of any exchange action.

    Args:
        action: The raw action; its ``type`` member selects the canonicalizer.

    Returns:
        A new dict with the recognised fields in canonical order.

    Raises:
        ValidationError: If the type tag is missing or unknown, or a required
            field is missing.

    """
    if not isinstance(action, Mapping):
        raise ValidationError(f"Action must be a mapping, got {type(action).__name__}")
    try:
        kind = ActionType(action.get("type"))
    except ValueError:
        raise ValidationError(f"Unknown action type {action.get('type')!r}") from None

    canonicalizer: Callable[[Action], CanonicalAction]
    match kind:
        case ActionType.AGENT_ENABLE_DEX_ABSTRACTION:
            canonicalizer = agent_enable_dex_abstraction
        case ActionType.AGENT_SET_ABSTRACTION:
            canonicalizer = agent_set_abstraction
        case ActionType.APPROVE_AGENT:
            canonicalizer = approve_agent
        case ActionType.APPROVE_BUILDER_FEE:
            canonicalizer = approve_builder_fee
        case ActionType.BATCH_MODIFY:
            canonicalizer = batch_modify
        case ActionType.BORROW_LEND:
            canonicalizer = borrow_lend
        case ActionType.CANCEL:
            canonicalizer = cancel
        case ActionType.CANCEL_BY_CLOID:
            canonicalizer = cancel_by_cloid
        case ActionType.C_DEPOSIT:
            canonicalizer = c_deposit
        case ActionType.CLAIM_REWARDS:
            canonicalizer = claim_rewards
        case ActionType.CONVERT_TO_MULTI_SIG_USER:
            canonicalizer = convert_to_multi_sig_user
        case ActionType.CREATE_SUB_ACCOUNT:
            canonicalizer = create_sub_account
        case ActionType.CREATE_VAULT:
            canonicalizer = create_vault
        case ActionType.C_SIGNER_ACTION:
            canonicalizer = c_signer_action
        case ActionType.C_VALIDATOR_ACTION:
            canonicalizer = c_validator_action
        case ActionType.C_WITHDRAW:
            canonicalizer = c_withdraw
        case ActionType.EVM_USER_MODIFY:
            canonicalizer = evm_user_modify
        case ActionType.LINK_STAKING_USER:
            canonicalizer = link_staking_user
        case ActionType.MODIFY:
            canonicalizer = modify
        case ActionType.MULTI_SIG:
            canonicalizer = multi_sig
        case ActionType.NOOP:
            canonicalizer = noop
        case ActionType.ORDER:
            canonicalizer = order
        case ActionType.PERP_DEPLOY:
            canonicalizer = perp_deploy
        case ActionType.PERP_DEX_CLASS_TRANSFER:
            canonicalizer = perp_dex_class_transfer
        case ActionType.PERP_DEX_TRANSFER:
            canonicalizer = perp_dex_transfer
        case ActionType.REGISTER_REFERRER:
            canonicalizer = register_referrer
        case ActionType.RESERVE_REQUEST_WEIGHT:
            canonicalizer = reserve_request_weight
        case ActionType.SCHEDULE_CANCEL:
            canonicalizer = schedule_cancel
        case ActionType.SEND_ASSET:
            canonicalizer = send_asset
        case ActionType.SEND_TO_EVM_WITH_DATA:
            canonicalizer = send_to_evm_with_data
        case ActionType.SET_DISPLAY_NAME:
            canonicalizer = set_display_name
        case ActionType.SET_REFERRER:
            canonicalizer = set_referrer
        case ActionType.SPOT_DEPLOY:
            canonicalizer = spot_deploy
        case ActionType.SPOT_SEND:
            canonicalizer = spot_send
        case ActionType.SPOT_USER:
            canonicalizer = spot_user
        case ActionType.SUB_ACCOUNT_MODIFY:
            canonicalizer = sub_account_modify
        case ActionType.SUB_ACCOUNT_SPOT_TRANSFER:
            canonicalizer = sub_account_spot_transfer
        case ActionType.SUB_ACCOUNT_TRANSFER:
            canonicalizer = sub_account_transfer
        case ActionType.TOKEN_DELEGATE:
            canonicalizer = token_delegate
        case ActionType.TOP_UP_ISOLATED_ONLY_MARGIN:
            canonicalizer = top_up_isolated_only_margin
        case ActionType.TWAP_CANCEL:
            canonicalizer = twap_cancel
        case ActionType.TWAP_ORDER:
            canonicalizer = twap_order
        case ActionType.UPDATE_ISOLATED_MARGIN:
            canonicalizer = update_isolated_margin
        case ActionType.UPDATE_LEVERAGE:
            canonicalizer = update_leverage
        case ActionType.USD_CLASS_TRANSFER:
            canonicalizer = usd_class_transfer
        case ActionType.USD_SEND:
            canonicalizer = usd_send
        case ActionType.USER_DEX_ABSTRACTION:
            canonicalizer = user_dex_abstraction
        case ActionType.USER_PORTFOLIO_MARGIN:
            canonicalizer = user_portfolio_margin
        case ActionType.USER_SET_ABSTRACTION:
            canonicalizer = user_set_abstraction
        case ActionType.VALIDATOR_L1_STREAM:
            canonicalizer = validator_l1_stream
        case ActionType.VAULT_DISTRIBUTE:
            canonicalizer = vault_distribute
        case ActionType.VAULT_MODIFY:
            canonicalizer = vault_modify
        case ActionType.VAULT_TRANSFER:
            canonicalizer = vault_transfer
        case ActionType.WITHDRAW3:
            canonicalizer = withdraw3
    return canonicalizer(action)
