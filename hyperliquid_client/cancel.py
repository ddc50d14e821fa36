"""Cancellation tokens for signing and request calls.

A CancelToken is created by the caller and threaded through every public
entry point. Firing it aborts any pending delegated signer call or transport
request; no partial signature or envelope is ever returned.
"""

import asyncio
import logging
from typing import Any, Awaitable, TypeVar

from hyperliquid_client.errors import OperationCancelled

log = logging.getLogger(__name__)

T = TypeVar("T")


class CancelToken:
    """A one-shot cancellation signal shared between a caller and the library."""

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self.reason: str | None = None

    @property
    def cancelled(self) -> bool:
        """Whether cancel() has been called."""
        return self._event.is_set()

    def cancel(self, reason: str | None = None) -> None:
        """Fire the token. Subsequent calls are ignored."""
        if self._event.is_set():
            return
        self.reason = reason
        self._event.set()
        log.debug("Cancel token fired: %s", reason)

    def raise_if_cancelled(self, wallet_index: int | None = None) -> None:
        """Raise OperationCancelled if the token has fired.

        Args:
            wallet_index: Multi-sig signer position to report, if any.

        Raises:
            OperationCancelled: If the token has fired.

        """
        if self._event.is_set():
            raise OperationCancelled(self.reason, wallet_index=wallet_index)

    async def wait(self) -> None:
        """Block until the token fires."""
        await self._event.wait()

    async def run(self, awaitable: Awaitable[T], wallet_index: int | None = None) -> T:
        """Await ``awaitable`` unless the token fires first.

        The awaited operation is cancelled when the token wins the race, so it
        can never deliver a result afterwards.

        Args:
            awaitable: The operation to race against the token.
            wallet_index: Multi-sig signer position to report on cancellation.

        Returns:
            The result of ``awaitable``.

        Raises:
            OperationCancelled: If the token fires before ``awaitable`` completes.

        """
        if self._event.is_set():
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise OperationCancelled(self.reason, wallet_index=wallet_index)
        operation: asyncio.Future[Any] = asyncio.ensure_future(awaitable)
        watcher = asyncio.ensure_future(self.wait())
        try:
            await asyncio.wait(
                {operation, watcher}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            watcher.cancel()
            if not operation.done():
                operation.cancel()
        if operation.done() and not operation.cancelled():
            return operation.result()
        # the operation lost the race; let it unwind before reporting
        await asyncio.gather(operation, return_exceptions=True)
        raise OperationCancelled(self.reason, wallet_index=wallet_index)


async def run_cancellable(
    awaitable: Awaitable[T],
    cancel_token: CancelToken | None,
    wallet_index: int | None = None,
) -> T:
    """Await ``awaitable``, racing it against ``cancel_token`` when one is given."""
    if cancel_token is None:
        return await awaitable
    return await cancel_token.run(awaitable, wallet_index=wallet_index)
