"""
Payment watcher: polls an order until its payment settles.

One asyncio task per watched order:

    sleep(interval) → poll → settled? ─no→ sleep(interval) → poll → ...
                               └─yes→ stop, clear cart, callback once

A failed or timed-out poll is inconclusive and the loop goes on.
Each run carries a cancellation token, checked before the fetch and
again before acting on its result. stop() cancels the pending task
as well, so nothing fires after teardown.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from combinators import flow, lift as L
from kungfu import Ok, Error, LazyCoroResult

from storefront._types import Callback
from storefront.cart import CartStore
from storefront.watch._types import PaymentStatus, WatchState, WatchPolicy

logger = logging.getLogger(__name__)

type FetchStatus = Callable[[str], Awaitable[PaymentStatus]]
type OnFailed = Callable[[PaymentStatus], None]


class _Token:
    __slots__ = ("cancelled",)

    def __init__(self) -> None:
        self.cancelled = False


def _current_task() -> asyncio.Task[object] | None:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None


class PaymentWatcher:
    """
    Cancellable polling task for one order at a time.

    Example:
        watcher = PaymentWatcher(gateway.status, policy=WatchPolicy(interval=5), cart=store)
        watcher.start(result.order_id, on_confirmed=show_success)
        ...
        watcher.stop()  # on close; no callback after this

    cart: cleared on confirmation. Clearing is idempotent, the user may
    have emptied it already.
    """

    def __init__(
        self,
        fetch_status: FetchStatus,
        *,
        policy: WatchPolicy = WatchPolicy(),
        cart: CartStore | None = None,
    ) -> None:
        self._fetch_status = fetch_status
        self._policy = policy
        self._cart = cart

        self._state = WatchState.IDLE
        self._order_id: str | None = None
        self._token: _Token | None = None
        self._task: asyncio.Task[WatchState] | None = None
        self._on_confirmed: Callback | None = None
        self._on_failed: OnFailed | None = None

        self.ticks = 0
        self.last_status: PaymentStatus | None = None

    # ─────────────────────────────────────────────────────────────────────────
    # Accessors
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def state(self) -> WatchState:
        return self._state

    @property
    def order_id(self) -> str | None:
        return self._order_id

    @property
    def policy(self) -> WatchPolicy:
        return self._policy

    @property
    def is_running(self) -> bool:
        return self._state is WatchState.PENDING

    # ─────────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────────────

    def start(
        self,
        order_id: str,
        on_confirmed: Callback,
        on_failed: OnFailed | None = None,
    ) -> asyncio.Task[WatchState]:
        """
        Begin watching order_id. Must be called from a running event loop.

        A watcher that is already running is stopped first.
        """
        self.stop()

        token = _Token()
        self._token = token
        self._order_id = order_id
        self._on_confirmed = on_confirmed
        self._on_failed = on_failed
        self._state = WatchState.PENDING
        self.ticks = 0
        self.last_status = None

        self._task = asyncio.get_running_loop().create_task(
            self._run(token),
            name=f"payment-watch:{order_id}",
        )
        logger.info("Watching payment for order %s every %ss", order_id, self._policy.interval)
        return self._task

    def stop(self) -> None:
        """Tear down. PENDING → STOPPED, callbacks are never invoked."""
        if self._token is not None:
            self._token.cancelled = True

        task = self._task
        if task is not None and not task.done() and task is not _current_task():
            task.cancel()

        if self._state is WatchState.PENDING:
            self._state = WatchState.STOPPED
            self._on_confirmed = None
            self._on_failed = None
            logger.info("Stopped watching order %s", self._order_id)

    async def wait(self) -> WatchState:
        """Wait for the current run to end (settled or stopped)."""
        task = self._task
        if task is not None:
            # asyncio.wait does not raise if the task was cancelled
            await asyncio.wait([task])
        return self._state

    # ─────────────────────────────────────────────────────────────────────────
    # Polling
    # ─────────────────────────────────────────────────────────────────────────

    async def _run(self, token: _Token) -> WatchState:
        while not token.cancelled and self._state is WatchState.PENDING:
            await asyncio.sleep(self._policy.interval)
            await self._tick(token)
        return self._state

    async def tick(self) -> WatchState:
        """Poll once now. No-op unless the watcher is PENDING."""
        if self._token is None:
            return self._state
        return await self._tick(self._token)

    def _poll(self, order_id: str) -> LazyCoroResult[PaymentStatus, Exception]:
        fetched = L.catching_async(
            lambda: self._fetch_status(order_id),
            on_error=lambda e: e,
        )
        if self._policy.request_timeout is None:
            return fetched
        return flow(fetched).timeout(seconds=self._policy.request_timeout).compile()

    async def _tick(self, token: _Token) -> WatchState:
        if token.cancelled or self._state is not WatchState.PENDING:
            return self._state

        order_id = self._order_id
        assert order_id is not None
        self.ticks += 1
        logger.debug("Polling payment status for order %s (tick %d)", order_id, self.ticks)

        result = await self._poll(order_id)

        if token.cancelled or self._state is not WatchState.PENDING:
            logger.debug("Discarding late status for order %s", order_id)
            return self._state

        match result:
            case Ok(status):
                self.last_status = status
                if status.is_confirmed:
                    self._confirm(status)
                elif status.is_failed:
                    self._fail(status)
            case Error(e):
                logger.warning("Status poll for order %s inconclusive: %s", order_id, e)

        return self._state

    # ─────────────────────────────────────────────────────────────────────────
    # Terminal transitions
    # ─────────────────────────────────────────────────────────────────────────

    def _settle(self, state: WatchState) -> None:
        self._state = state
        task = self._task
        if task is not None and not task.done() and task is not _current_task():
            task.cancel()

    def _confirm(self, status: PaymentStatus) -> None:
        self._settle(WatchState.CONFIRMED)
        logger.info("Payment for order %s settled (%s)", self._order_id, status.value)

        if self._cart is not None:
            self._cart.clear()

        callback, self._on_confirmed, self._on_failed = self._on_confirmed, None, None
        if callback is not None:
            callback()

    def _fail(self, status: PaymentStatus) -> None:
        self._settle(WatchState.FAILED)
        logger.info("Payment for order %s failed (%s)", self._order_id, status.value)

        callback, self._on_confirmed, self._on_failed = self._on_failed, None, None
        if callback is not None:
            callback(status)


__all__ = ("PaymentWatcher", "FetchStatus", "OnFailed")
