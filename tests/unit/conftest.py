import logging
from functools import lru_cache
from pathlib import Path, PurePosixPath
from typing import Any, Generator

import orjson
import pytest

from hyperliquid_client.exchange import ExchangeClient
from hyperliquid_client.nonce import TimestampNonceSource
from hyperliquid_client.signing.wallet import PrivateKeyWallet
from tests.mock_transports import MockOutputNotExhausted, MockTransport

DATA_DIR = Path(__file__).parent.joinpath("data")

log = logging.getLogger(__name__)

PRIVATE_KEY = "0x822e9959e022b78423eb653a62ea0020cd283e71a2a8133a6ff2aeffaf373cff"
SECOND_PRIVATE_KEY = "0x720fdd809048d0104b0b82ae70642b5dcfd5fd6870eeefc9c882004ab35573ae"
MULTI_SIG_USER = "0x1234567890123456789012345678901234567890"


class FixedClock:
    """A controllable millisecond clock for nonce tests."""

    def __init__(self, now: int = 1_700_000_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now


@pytest.fixture
def wallet() -> PrivateKeyWallet:
    return PrivateKeyWallet(PRIVATE_KEY)


@pytest.fixture
def second_wallet() -> PrivateKeyWallet:
    return PrivateKeyWallet(SECOND_PRIVATE_KEY)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def mock_exchange_client(
    wallet: PrivateKeyWallet, clock: FixedClock
) -> Generator[tuple[ExchangeClient, MockTransport], None, None]:
    mock_transport = MockTransport()
    client = ExchangeClient(
        # replace real network requests with our mock
        transport=mock_transport,
        wallet=wallet,
        nonce_source=TimestampNonceSource(clock=clock),
        signature_chain_id="0x66eee",
    )

    yield (client, mock_transport)

    if len(mock_transport.staged_outputs) > 0:
        raise MockOutputNotExhausted(mock_transport.staged_outputs)


@pytest.fixture
def mock_multi_sig_client(
    wallet: PrivateKeyWallet, second_wallet: PrivateKeyWallet, clock: FixedClock
) -> Generator[tuple[ExchangeClient, MockTransport], None, None]:
    mock_transport = MockTransport()
    client = ExchangeClient(
        transport=mock_transport,
        wallets=[wallet, second_wallet],
        multi_sig_user=MULTI_SIG_USER,
        nonce_source=TimestampNonceSource(clock=clock),
        signature_chain_id="0x66eee",
    )

    yield (client, mock_transport)

    if len(mock_transport.staged_outputs) > 0:
        raise MockOutputNotExhausted(mock_transport.staged_outputs)


@lru_cache(maxsize=1)
def data_files() -> list[Path]:
    return list(DATA_DIR.iterdir())


@lru_cache(maxsize=None)
def json_data_files(name: str) -> list[Path]:
    return list(
        sorted(
            path
            for path in data_files()
            if PurePosixPath(path).match(f"*/{name}.*.json")
        )
    )


def load_json(name: str, case: int | None = None) -> dict[str, Any]:
    case_part = f"{case}." if case is not None else ""
    path = DATA_DIR / f"{name}.{case_part}json"
    with open(path, "rb") as fh:
        return orjson.loads(fh.read())


def load_json_all_cases(name: str) -> list[tuple[dict[str, Any], Path]]:
    """Load all json payloads for a given base name (case0, case1, ...)."""
    results = []
    for path in json_data_files(name):
        log.debug("Loading json from %s", path.as_posix())
        with open(path, "rb") as fh:
            payload = orjson.loads(fh.read())
            results.append((payload, path))
    return results
