"""Exchange endpoint client.

ExchangeClient signs actions with one wallet (or with every signer of a
multi-sig account) and posts them to the ``exchange`` endpoint. Requests of
the same wallet on the same network are serialised, so nonces reach the
server in the order they were drawn.
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Mapping, Sequence

from hyperliquid_client.cancel import CancelToken
from hyperliquid_client.errors import ApiRequestError, ValidationError
from hyperliquid_client.helpers import EXCHANGE_ENDPOINT
from hyperliquid_client.nonce import DEFAULT_NONCE_SOURCE, NonceSource
from hyperliquid_client.signing.multisig import sign_multi_sig_request
from hyperliquid_client.signing.schemas import nonce_field_name, schema_for
from hyperliquid_client.signing.signer import (
    hyperliquid_chain,
    sign_action,
    sign_multi_sig_action,
)
from hyperliquid_client.signing.typed_data import normalize_schema
from hyperliquid_client.signing.wallet import Wallet, resolve_wallet
from hyperliquid_client.transports.defaults import DEFAULT_TRANSPORT
from hyperliquid_client.transports.interface import Transport
from hyperliquid_client.types import (
    ActionType,
    Address,
    Hex,
    Json,
    Nonce,
    NumericInput,
    OrderGrouping,
    SignedRequest,
    TimeInForce,
    TpSl,
    TypeSchema,
    full_precision_string,
)

log = logging.getLogger(__name__)

ChainIdSetting = Hex | Callable[[], Hex | Awaitable[Hex]]
ExpiresAfterSetting = int | Callable[[], int | Awaitable[int]]


# ============================================================================
# RESPONSE VALIDATION
# ============================================================================


def _error_of(value: Any) -> str | None:
    if isinstance(value, dict) and isinstance(value.get("error"), str):
        return value["error"]
    return None


def _response_data(response: Any) -> Any:
    if not isinstance(response, dict):
        return None
    inner = response.get("response")
    if not isinstance(inner, dict):
        return None
    return inner.get("data")


def extract_error_message(response: Any) -> str | None:
    """Return the error reported in an exchange response body, if any.

    Errors come in three forms:

    - ``{"status": "err", "response": "<message>"}``
    - per-order entries ``{"error": "<message>"}`` in ``response.data.statuses``,
      reported as ``"Order <index>: <message>"`` joined by ``", "``
    - a single ``{"error": "<message>"}`` in ``response.data.status``
    """
    if isinstance(response, dict) and response.get("status") == "err":
        message = response.get("response")
        return message if isinstance(message, str) else str(message)

    data = _response_data(response)
    if not isinstance(data, dict):
        return None

    statuses = data.get("statuses")
    if isinstance(statuses, list):
        errors = [
            f"Order {index}: {error}"
            for index, status in enumerate(statuses)
            if (error := _error_of(status)) is not None
        ]
        if errors:
            return ", ".join(errors)

    return _error_of(data.get("status"))


def assert_success_response(response: Any) -> Any:
    """Raise ApiRequestError if an exchange response reports an error.

    Args:
        response: The decoded response body.

    Returns:
        The response, unchanged.

    Raises:
        ApiRequestError: If the response carries an error status or any
            per-order error.

    """
    message = extract_error_message(response)
    if message is not None:
        raise ApiRequestError(message, response)
    return response


# ============================================================================
# ORDER BUILDERS
# ============================================================================


def limit_order_type(tif: TimeInForce | str = TimeInForce.GTC) -> dict[str, Any]:
    """Build the ``t`` member of a limit order."""
    return {"limit": {"tif": tif.value if isinstance(tif, TimeInForce) else tif}}


def trigger_order_type(
    trigger_price: NumericInput, tpsl: TpSl | str, is_market: bool = True
) -> dict[str, Any]:
    """Build the ``t`` member of a take-profit or stop-loss order."""
    return {
        "trigger": {
            "isMarket": is_market,
            "triggerPx": full_precision_string(trigger_price),
            "tpsl": tpsl.value if isinstance(tpsl, TpSl) else tpsl,
        }
    }


def order_request(
    asset: int,
    is_buy: bool,
    price: NumericInput,
    size: NumericInput,
    reduce_only: bool = False,
    order_type: Mapping[str, Any] | None = None,
    cloid: Hex | None = None,
) -> dict[str, Any]:
    """Build one order in its wire form.

    Args:
        asset: Asset index (perpetuals) or ``10000 + index`` (spot).
        is_buy: Side of the order.
        price: Limit price.
        size: Order size in base units.
        reduce_only: Whether the order may only reduce a position.
        order_type: The ``t`` member; defaults to a good-til-cancelled limit order.
        cloid: Optional 16-byte client order id as hex.

    Returns:
        The order, ready to be placed with ExchangeClient.order().

    """
    order: dict[str, Any] = {
        "a": asset,
        "b": is_buy,
        "p": full_precision_string(price),
        "s": full_precision_string(size),
        "r": reduce_only,
        "t": dict(order_type) if order_type is not None else limit_order_type(),
    }
    if cloid is not None:
        order["c"] = cloid
    return order


# ============================================================================
# CLIENT
# ============================================================================


class ExchangeClient:
    """Client for the exchange endpoint.

    Examples:
        .. code-block:: python

            from hyperliquid_client import ExchangeClient, HttpxTransport, order_request

            async with HttpxTransport(is_testnet=True) as transport:
                client = ExchangeClient(transport, wallet="0x...")
                await client.order([order_request(0, True, "30000", "0.1")])

    """

    def __init__(
        self,
        transport: Transport | None = None,
        wallet: object | None = None,
        wallets: Sequence[object] | None = None,
        multi_sig_user: Address | None = None,
        nonce_source: NonceSource = DEFAULT_NONCE_SOURCE,
        signature_chain_id: ChainIdSetting | None = None,
        default_vault_address: Address | None = None,
        default_expires_after: ExpiresAfterSetting | None = None,
    ):
        """Initialize the exchange client.

        Args:
            transport: Transport used to reach the API (optional, uses the
                default mainnet transport if not provided).
            wallet: The signing wallet: a private key, a Wallet or an external
                signer object.
            wallets: The signers of a multi-sig account, lead signer first.
                Requires ``multi_sig_user``; excludes ``wallet``.
            multi_sig_user: The multi-sig account address.
            nonce_source: Source of request nonces.
            signature_chain_id: Chain id for user-signed actions, or a callable
                returning it. Defaults to the lead wallet's chain id.
            default_vault_address: Vault or sub-account used when an L1 action
                does not name one.
            default_expires_after: Expiry timestamp, or a callable returning one,
                used when an L1 action does not set one.

        Raises:
            ValidationError: If the wallet configuration is inconsistent.
            UnsupportedWalletError: If a wallet matches no supported shape.
            InvalidPrivateKeyError: If a private key is malformed.

        """
        if wallets is not None:
            if wallet is not None:
                raise ValidationError("Pass either wallet or wallets, not both")
            if multi_sig_user is None:
                raise ValidationError("wallets requires multi_sig_user")
            if len(wallets) == 0:
                raise ValidationError("wallets must contain at least one signer")
            self._wallets: tuple[Wallet, ...] = tuple(resolve_wallet(w) for w in wallets)
        elif wallet is not None:
            if multi_sig_user is not None:
                raise ValidationError("multi_sig_user requires wallets")
            self._wallets = (resolve_wallet(wallet),)
        else:
            raise ValidationError("A wallet is required to sign exchange requests")

        self.transport = transport if transport is not None else DEFAULT_TRANSPORT()
        self.multi_sig_user = multi_sig_user
        self.nonce_source = nonce_source
        self.signature_chain_id = signature_chain_id
        self.default_vault_address = default_vault_address
        self.default_expires_after = default_expires_after
        self._locks: dict[tuple[str, bool], asyncio.Lock] = {}

    def __repr__(self) -> str:
        return (
            f"ExchangeClient(transport={self.transport!r}, "
            f"signers={len(self._wallets)}, multi_sig_user={self.multi_sig_user!r})"
        )

    @property
    def wallet(self) -> Wallet:
        """The lead wallet, which signs the outer request."""
        return self._wallets[0]

    @property
    def is_multi_sig(self) -> bool:
        return self.multi_sig_user is not None

    @property
    def is_testnet(self) -> bool:
        return self.transport.is_testnet

    # ========================================================================
    # INTERNALS
    # ========================================================================

    def _lock_for(self, address: Address) -> asyncio.Lock:
        key = (address.lower(), self.is_testnet)
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    async def _resolve_signature_chain_id(
        self, cancel_token: CancelToken | None
    ) -> Hex:
        setting = self.signature_chain_id
        if setting is None:
            return await self.wallet.get_chain_id(cancel_token)
        if callable(setting):
            setting = setting()
            if inspect.isawaitable(setting):
                setting = await setting
        return setting

    async def _resolve_expires_after(self, expires_after: int | None) -> int | None:
        if expires_after is not None:
            return expires_after
        setting = self.default_expires_after
        if callable(setting):
            setting = setting()
            if inspect.isawaitable(setting):
                setting = await setting
        return setting

    async def _post(
        self, request: SignedRequest, cancel_token: CancelToken | None
    ) -> Json:
        response = await self.transport.send(
            EXCHANGE_ENDPOINT, request.to_payload(), cancel_token
        )
        return assert_success_response(response)

    # ========================================================================
    # EXECUTION
    # ========================================================================

    async def execute_l1_action(
        self,
        action: Mapping[str, Any],
        vault_address: Address | None = None,
        expires_after: int | None = None,
        cancel_token: CancelToken | None = None,
    ) -> Json:
        """Sign and send an L1 action.

        Args:
            action: The action, including its ``type``.
            vault_address: Vault or sub-account to act for. Defaults to
                ``default_vault_address``.
            expires_after: Expiry timestamp in ms. Defaults to
                ``default_expires_after``.
            cancel_token: Aborts signing or the request when fired.

        Returns:
            The decoded response body.

        Raises:
            ApiRequestError: If the exchange reports an error.
            ValidationError: If the action is malformed.
            SigningError: If a signature could not be produced.
            TransportError: If the request could not be delivered.

        """
        address = await self.wallet.get_address(cancel_token)
        async with self._lock_for(address):
            nonce = self.nonce_source.next_nonce()
            vault_address = (
                vault_address if vault_address is not None else self.default_vault_address
            )
            expires_after = await self._resolve_expires_after(expires_after)
            log.debug("Executing %s (nonce=%d)", action.get("type"), nonce)

            if self.is_multi_sig:
                request = await sign_multi_sig_request(
                    self._wallets,
                    self.multi_sig_user,
                    action,
                    self.is_testnet,
                    nonce=nonce,
                    signature_chain_id=await self._resolve_signature_chain_id(cancel_token),
                    vault_address=vault_address,
                    expires_after=expires_after,
                    cancel_token=cancel_token,
                )
            else:
                request = await sign_action(
                    self.wallet,
                    action,
                    self.is_testnet,
                    nonce=nonce,
                    vault_address=vault_address,
                    expires_after=expires_after,
                    cancel_token=cancel_token,
                )
            return await self._post(request, cancel_token)

    async def execute_user_signed_action(
        self,
        action: Mapping[str, Any],
        types: TypeSchema | None = None,
        cancel_token: CancelToken | None = None,
    ) -> Json:
        """Sign and send a user-signed action.

        ``signatureChainId``, ``hyperliquidChain`` and the nonce field
        (``nonce`` or ``time``, whichever the schema declares) are filled in.

        Args:
            action: The action-specific fields, including ``type``.
            types: Schema override. Defaults to the schema of the action kind.
            cancel_token: Aborts signing or the request when fired.

        Returns:
            The decoded response body.

        """
        kind = action.get("type")
        if kind is None:
            raise ValidationError("action is missing required field 'type'")
        if isinstance(kind, ActionType):
            kind = kind.value
        schema = normalize_schema(types if types is not None else schema_for(kind))
        nonce_field = nonce_field_name(schema)

        address = await self.wallet.get_address(cancel_token)
        async with self._lock_for(address):
            nonce = self.nonce_source.next_nonce()
            full_action = {
                "type": kind,
                "signatureChainId": await self._resolve_signature_chain_id(cancel_token),
                "hyperliquidChain": hyperliquid_chain(self.is_testnet),
                **{key: value for key, value in action.items() if key != "type"},
                nonce_field: nonce,
            }
            log.debug("Executing %s (nonce=%d)", kind, nonce)

            if self.is_multi_sig:
                request = await sign_multi_sig_request(
                    self._wallets,
                    self.multi_sig_user,
                    full_action,
                    self.is_testnet,
                    nonce=nonce,
                    types=schema,
                    cancel_token=cancel_token,
                )
            else:
                request = await sign_action(
                    self.wallet,
                    full_action,
                    self.is_testnet,
                    types=schema,
                    cancel_token=cancel_token,
                )
            return await self._post(request, cancel_token)

    async def execute_multi_sig_action(
        self,
        action: Mapping[str, Any],
        nonce: Nonce,
        vault_address: Address | None = None,
        expires_after: int | None = None,
        cancel_token: CancelToken | None = None,
    ) -> Json:
        """Sign an already assembled outer ``multiSig`` action and send it.

        Use this when the inner signatures were collected elsewhere; ``nonce``
        must be the nonce they were produced with.

        Args:
            action: The outer action with ``signatureChainId``, ``signatures``
                and ``payload``.
            nonce: The nonce shared with the inner signatures.
            vault_address: Vault or sub-account the inner action acts for.
            expires_after: Expiry timestamp in ms.
            cancel_token: Aborts signing or the request when fired.

        Returns:
            The decoded response body.

        """
        outer_action = {"type": ActionType.MULTI_SIG.value, **action}
        address = await self.wallet.get_address(cancel_token)
        async with self._lock_for(address):
            signature = await sign_multi_sig_action(
                self.wallet,
                outer_action,
                nonce,
                self.is_testnet,
                vault_address,
                expires_after,
                cancel_token,
            )
            request = SignedRequest(
                action=outer_action,
                signature=signature,
                nonce=nonce,
                vault_address=vault_address,
                expires_after=expires_after,
            )
            return await self._post(request, cancel_token)

    # ========================================================================
    # TRADING
    # ========================================================================

    async def order(
        self,
        orders: Sequence[Mapping[str, Any]],
        grouping: OrderGrouping | str = OrderGrouping.NA,
        builder: Mapping[str, Any] | None = None,
        vault_address: Address | None = None,
        expires_after: int | None = None,
        cancel_token: CancelToken | None = None,
    ) -> Json:
        """Place one or more orders.

        Args:
            orders: Orders in wire form, see order_request().
            grouping: How the orders relate to each other.
            builder: Optional builder fee ``{"b": address, "f": tenths_of_bps}``.
            vault_address: Vault or sub-account to trade for.
            expires_after: Expiry timestamp in ms.
            cancel_token: Aborts signing or the request when fired.

        Returns:
            The response; ``response.data.statuses`` has one entry per order.

        Example:
            .. code-block:: python

                await client.order([order_request(0, True, 30_000, "0.1")])

        """
        action: dict[str, Any] = {
            "type": ActionType.ORDER.value,
            "orders": list(orders),
            "grouping": grouping.value if isinstance(grouping, OrderGrouping) else grouping,
        }
        if builder is not None:
            action["builder"] = dict(builder)
        return await self.execute_l1_action(action, vault_address, expires_after, cancel_token)

    async def cancel(
        self,
        asset: int,
        oid: int,
        vault_address: Address | None = None,
        expires_after: int | None = None,
        cancel_token: CancelToken | None = None,
    ) -> Json:
        """Cancel an order by its exchange order id."""
        action = {
            "type": ActionType.CANCEL.value,
            "cancels": [{"a": asset, "o": oid}],
        }
        return await self.execute_l1_action(action, vault_address, expires_after, cancel_token)

    async def cancel_by_cloid(
        self,
        asset: int,
        cloid: Hex,
        vault_address: Address | None = None,
        expires_after: int | None = None,
        cancel_token: CancelToken | None = None,
    ) -> Json:
        """Cancel an order by its client order id."""
        action = {
            "type": ActionType.CANCEL_BY_CLOID.value,
            "cancels": [{"asset": asset, "cloid": cloid}],
        }
        return await self.execute_l1_action(action, vault_address, expires_after, cancel_token)

    async def modify(
        self,
        oid: int | Hex,
        order: Mapping[str, Any],
        vault_address: Address | None = None,
        expires_after: int | None = None,
        cancel_token: CancelToken | None = None,
    ) -> Json:
        """Replace an open order, identified by order id or client order id."""
        action = {"type": ActionType.MODIFY.value, "oid": oid, "order": dict(order)}
        return await self.execute_l1_action(action, vault_address, expires_after, cancel_token)

    async def schedule_cancel(
        self,
        time: int | None = None,
        vault_address: Address | None = None,
        expires_after: int | None = None,
        cancel_token: CancelToken | None = None,
    ) -> Json:
        """Schedule a cancel-all at ``time`` (ms), or clear the schedule when omitted."""
        action: dict[str, Any] = {"type": ActionType.SCHEDULE_CANCEL.value}
        if time is not None:
            action["time"] = time
        return await self.execute_l1_action(action, vault_address, expires_after, cancel_token)

    async def update_leverage(
        self,
        asset: int,
        leverage: int,
        is_cross: bool = True,
        vault_address: Address | None = None,
        expires_after: int | None = None,
        cancel_token: CancelToken | None = None,
    ) -> Json:
        action = {
            "type": ActionType.UPDATE_LEVERAGE.value,
            "asset": asset,
            "isCross": is_cross,
            "leverage": leverage,
        }
        return await self.execute_l1_action(action, vault_address, expires_after, cancel_token)

    async def update_isolated_margin(
        self,
        asset: int,
        is_buy: bool,
        ntli: int,
        vault_address: Address | None = None,
        expires_after: int | None = None,
        cancel_token: CancelToken | None = None,
    ) -> Json:
        """Add or remove isolated margin; ``ntli`` is in micro USD and may be negative."""
        action = {
            "type": ActionType.UPDATE_ISOLATED_MARGIN.value,
            "asset": asset,
            "isBuy": is_buy,
            "ntli": ntli,
        }
        return await self.execute_l1_action(action, vault_address, expires_after, cancel_token)

    async def top_up_isolated_only_margin(
        self,
        asset: int,
        leverage: NumericInput,
        vault_address: Address | None = None,
        expires_after: int | None = None,
        cancel_token: CancelToken | None = None,
    ) -> Json:
        """Top up an isolated-only position to reach the target ``leverage``."""
        action = {
            "type": ActionType.TOP_UP_ISOLATED_ONLY_MARGIN.value,
            "asset": asset,
            "leverage": full_precision_string(leverage),
        }
        return await self.execute_l1_action(action, vault_address, expires_after, cancel_token)

    async def borrow_lend(
        self,
        operation: str,
        token: int,
        amount: NumericInput | None = None,
        vault_address: Address | None = None,
        expires_after: int | None = None,
        cancel_token: CancelToken | None = None,
    ) -> Json:
        """Supply a token to, or withdraw it from, the lending pool.

        Args:
            operation: ``"supply"`` or ``"withdraw"``.
            token: The token index.
            amount: Amount to move. None moves the full balance.
            vault_address: Vault or sub-account to act for.
            expires_after: Expiry timestamp in milliseconds.
            cancel_token: Aborts signing or the request when fired.

        """
        action = {
            "type": ActionType.BORROW_LEND.value,
            "operation": operation,
            "token": token,
            "amount": None if amount is None else full_precision_string(amount),
        }
        return await self.execute_l1_action(action, vault_address, expires_after, cancel_token)

    # ========================================================================
    # ACCOUNT SETTINGS
    # ========================================================================

    async def sub_account_modify(
        self,
        sub_account_user: Address,
        name: str,
        expires_after: int | None = None,
        cancel_token: CancelToken | None = None,
    ) -> Json:
        """Rename a sub-account."""
        action = {
            "type": ActionType.SUB_ACCOUNT_MODIFY.value,
            "subAccountUser": sub_account_user,
            "name": name,
        }
        return await self.execute_l1_action(action, None, expires_after, cancel_token)

    async def agent_set_abstraction(
        self,
        abstraction: str,
        expires_after: int | None = None,
        cancel_token: CancelToken | None = None,
    ) -> Json:
        """Set the account abstraction mode from an agent: ``"i"``, ``"u"`` or ``"p"``."""
        action = {
            "type": ActionType.AGENT_SET_ABSTRACTION.value,
            "abstraction": abstraction,
        }
        return await self.execute_l1_action(action, None, expires_after, cancel_token)

    async def agent_enable_dex_abstraction(
        self,
        expires_after: int | None = None,
        cancel_token: CancelToken | None = None,
    ) -> Json:
        action = {"type": ActionType.AGENT_ENABLE_DEX_ABSTRACTION.value}
        return await self.execute_l1_action(action, None, expires_after, cancel_token)

    async def validator_l1_stream(
        self,
        risk_free_rate: NumericInput,
        expires_after: int | None = None,
        cancel_token: CancelToken | None = None,
    ) -> Json:
        """Vote on the risk-free rate as a validator (``"0.05"`` for 5%)."""
        action = {
            "type": ActionType.VALIDATOR_L1_STREAM.value,
            "riskFreeRate": full_precision_string(risk_free_rate),
        }
        return await self.execute_l1_action(action, None, expires_after, cancel_token)

    # ========================================================================
    # TRANSFERS AND APPROVALS
    # ========================================================================

    async def usd_send(
        self,
        destination: Address,
        amount: NumericInput,
        cancel_token: CancelToken | None = None,
    ) -> Json:
        """Send USDC to another account on the perpetuals balance."""
        action = {
            "type": ActionType.USD_SEND.value,
            "destination": destination,
            "amount": full_precision_string(amount),
        }
        return await self.execute_user_signed_action(action, cancel_token=cancel_token)

    async def spot_send(
        self,
        destination: Address,
        token: str,
        amount: NumericInput,
        cancel_token: CancelToken | None = None,
    ) -> Json:
        """Send a spot token, named ``NAME:0x<token id>``, to another account."""
        action = {
            "type": ActionType.SPOT_SEND.value,
            "destination": destination,
            "token": token,
            "amount": full_precision_string(amount),
        }
        return await self.execute_user_signed_action(action, cancel_token=cancel_token)

    async def withdraw(
        self,
        destination: Address,
        amount: NumericInput,
        cancel_token: CancelToken | None = None,
    ) -> Json:
        """Withdraw USDC to an address on the bridge chain."""
        action = {
            "type": ActionType.WITHDRAW3.value,
            "destination": destination,
            "amount": full_precision_string(amount),
        }
        return await self.execute_user_signed_action(action, cancel_token=cancel_token)

    async def usd_class_transfer(
        self,
        amount: NumericInput,
        to_perp: bool,
        cancel_token: CancelToken | None = None,
    ) -> Json:
        """Move USDC between the spot and perpetuals balances."""
        action = {
            "type": ActionType.USD_CLASS_TRANSFER.value,
            "amount": full_precision_string(amount),
            "toPerp": to_perp,
        }
        return await self.execute_user_signed_action(action, cancel_token=cancel_token)

    async def approve_agent(
        self,
        agent_address: Address,
        agent_name: str | None = None,
        cancel_token: CancelToken | None = None,
    ) -> Json:
        """Authorise an API wallet to sign L1 actions for this account."""
        action = {
            "type": ActionType.APPROVE_AGENT.value,
            "agentAddress": agent_address,
            "agentName": agent_name,
        }
        return await self.execute_user_signed_action(action, cancel_token=cancel_token)

    async def approve_builder_fee(
        self,
        builder: Address,
        max_fee_rate: str,
        cancel_token: CancelToken | None = None,
    ) -> Json:
        """Allow a builder to charge up to ``max_fee_rate`` (e.g. ``"0.01%"``)."""
        action = {
            "type": ActionType.APPROVE_BUILDER_FEE.value,
            "maxFeeRate": max_fee_rate,
            "builder": builder,
        }
        return await self.execute_user_signed_action(action, cancel_token=cancel_token)

    async def send_asset(
        self,
        destination: Address,
        source_dex: str,
        destination_dex: str,
        token: str,
        amount: NumericInput,
        from_sub_account: Address | None = None,
        cancel_token: CancelToken | None = None,
    ) -> Json:
        """Move a token between accounts and DEX balances.

        Args:
            destination: The receiving account.
            source_dex: DEX to take the token from, ``""`` for the default
                perpetuals DEX or ``"spot"``.
            destination_dex: DEX to credit, with the same naming.
            token: Token identifier, ``NAME:0x<token id>``.
            amount: Amount to send, not in wei.
            from_sub_account: Sub-account to send from. Defaults to the main account.
            cancel_token: Aborts signing or the request when fired.

        """
        action = {
            "type": ActionType.SEND_ASSET.value,
            "destination": destination,
            "sourceDex": source_dex,
            "destinationDex": destination_dex,
            "token": token,
            "amount": full_precision_string(amount),
            "fromSubAccount": from_sub_account or "",
        }
        return await self.execute_user_signed_action(action, cancel_token=cancel_token)

    async def send_to_evm_with_data(
        self,
        token: str,
        amount: NumericInput,
        destination_recipient: str,
        destination_chain_id: int,
        gas_limit: int,
        source_dex: str = "",
        address_encoding: str = "hex",
        data: Hex = "0x",
        cancel_token: CancelToken | None = None,
    ) -> Json:
        """Bridge a token to another chain and call the recipient with ``data``."""
        action = {
            "type": ActionType.SEND_TO_EVM_WITH_DATA.value,
            "token": token,
            "amount": full_precision_string(amount),
            "sourceDex": source_dex,
            "destinationRecipient": destination_recipient,
            "addressEncoding": address_encoding,
            "destinationChainId": destination_chain_id,
            "gasLimit": gas_limit,
            "data": data,
        }
        return await self.execute_user_signed_action(action, cancel_token=cancel_token)

    async def link_staking_user(
        self,
        user: Address,
        is_finalize: bool,
        cancel_token: CancelToken | None = None,
    ) -> Json:
        """Link a trading account with a staking account.

        The trading account starts the link with ``is_finalize=False`` and the
        staking account makes it permanent with ``is_finalize=True``.
        """
        action = {
            "type": ActionType.LINK_STAKING_USER.value,
            "user": user,
            "isFinalize": is_finalize,
        }
        return await self.execute_user_signed_action(action, cancel_token=cancel_token)

    async def user_dex_abstraction(
        self,
        user: Address,
        enabled: bool,
        cancel_token: CancelToken | None = None,
    ) -> Json:
        action = {
            "type": ActionType.USER_DEX_ABSTRACTION.value,
            "user": user,
            "enabled": enabled,
        }
        return await self.execute_user_signed_action(action, cancel_token=cancel_token)

    async def user_set_abstraction(
        self,
        user: Address,
        abstraction: str,
        cancel_token: CancelToken | None = None,
    ) -> Json:
        """Set the abstraction mode: ``dexAbstraction``, ``unifiedAccount`` or ``disabled``."""
        action = {
            "type": ActionType.USER_SET_ABSTRACTION.value,
            "user": user,
            "abstraction": abstraction,
        }
        return await self.execute_user_signed_action(action, cancel_token=cancel_token)

    async def user_portfolio_margin(
        self,
        user: Address,
        enabled: bool,
        cancel_token: CancelToken | None = None,
    ) -> Json:
        action = {
            "type": ActionType.USER_PORTFOLIO_MARGIN.value,
            "user": user,
            "enabled": enabled,
        }
        return await self.execute_user_signed_action(action, cancel_token=cancel_token)
