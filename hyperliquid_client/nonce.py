"""Nonce sources for exchange requests.

Every signed request carries a nonce. The exchange keeps a window of the most
recent nonces per signer and rejects duplicates, so each call must return a
value strictly greater than the previous one even when several requests are
issued within the same millisecond.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Callable

from hyperliquid_client.types import Nonce

log = logging.getLogger(__name__)


def current_time_ms() -> int:
    """Return the current UNIX time in milliseconds."""
    return time.time_ns() // 1_000_000


class NonceSource(ABC):
    """Abstract base class for nonce providers.

    Implementations must be safe to call from several threads.
    """

    @abstractmethod
    def next_nonce(self) -> Nonce:
        """Return the next nonce to sign with."""
        ...


class TimestampNonceSource(NonceSource):
    """Millisecond timestamp nonces that never repeat.

    Each call returns ``max(now, last + 1)`` and remembers the result.
    """

    def __init__(self, clock: Callable[[], int] = current_time_ms) -> None:
        """Initialize the nonce source.

        Args:
            clock: Returns the current time in milliseconds. Replaceable in tests.

        """
        self._clock = clock
        self._last: Nonce = 0
        self._lock = threading.Lock()

    @property
    def last_nonce(self) -> Nonce:
        """The most recently issued nonce, or 0 if none was issued yet."""
        with self._lock:
            return self._last

    def next_nonce(self) -> Nonce:
        """Return ``max(now, last + 1)`` and record it as the last nonce."""
        with self._lock:
            nonce = max(self._clock(), self._last + 1)
            self._last = nonce
        log.debug("Issued nonce %d", nonce)
        return nonce


DEFAULT_NONCE_SOURCE: NonceSource = TimestampNonceSource()
