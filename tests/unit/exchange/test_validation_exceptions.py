"""Tests for validation exceptions in the exchange client."""

import pytest

from hyperliquid_client.errors import (
    InvalidPrivateKeyError,
    UnsupportedWalletError,
    ValidationError,
)
from hyperliquid_client.exchange import (
    ExchangeClient,
    assert_success_response,
    extract_error_message,
    order_request,
)
from hyperliquid_client.transports.httpx import HttpxTransport
from tests.mock_transports import MockTransport
from tests.unit.conftest import MULTI_SIG_USER, PRIVATE_KEY, SECOND_PRIVATE_KEY


def test_wallet_is_required():
    """Test that a client without any wallet raises ValidationError."""
    with pytest.raises(ValidationError) as exc_info:
        ExchangeClient(transport=MockTransport())

    assert "wallet is required" in str(exc_info.value)


def test_wallet_and_wallets_are_exclusive():
    with pytest.raises(ValidationError):
        ExchangeClient(
            transport=MockTransport(),
            wallet=PRIVATE_KEY,
            wallets=[PRIVATE_KEY, SECOND_PRIVATE_KEY],
            multi_sig_user=MULTI_SIG_USER,
        )


def test_wallets_require_multi_sig_user():
    with pytest.raises(ValidationError) as exc_info:
        ExchangeClient(transport=MockTransport(), wallets=[PRIVATE_KEY])

    assert "multi_sig_user" in str(exc_info.value)


def test_multi_sig_user_requires_wallets():
    with pytest.raises(ValidationError):
        ExchangeClient(
            transport=MockTransport(), wallet=PRIVATE_KEY, multi_sig_user=MULTI_SIG_USER
        )


def test_empty_wallets():
    with pytest.raises(ValidationError):
        ExchangeClient(transport=MockTransport(), wallets=[], multi_sig_user=MULTI_SIG_USER)


def test_invalid_private_key():
    with pytest.raises(InvalidPrivateKeyError):
        ExchangeClient(transport=MockTransport(), wallet="0x1234")


def test_unsupported_wallet():
    with pytest.raises(UnsupportedWalletError):
        ExchangeClient(transport=MockTransport(), wallet=object())


def test_default_transport():
    client = ExchangeClient(wallet=PRIVATE_KEY)

    assert isinstance(client.transport, HttpxTransport)
    assert not client.is_testnet
    assert not client.is_multi_sig


@pytest.mark.parametrize("price", ["abc", "1e5", True, None, [1]])
def test_order_request_invalid_price(price):
    with pytest.raises(ValidationError):
        order_request(0, True, price, "1")


def test_extract_error_message_on_success():
    assert extract_error_message({"status": "ok", "response": {"type": "default"}}) is None
    assert extract_error_message(
        {"status": "ok", "response": {"type": "order", "data": {"statuses": ["success"]}}}
    ) is None
    assert extract_error_message(None) is None


def test_assert_success_response_returns_body():
    body = {"status": "ok", "response": {"type": "default"}}

    assert assert_success_response(body) is body
