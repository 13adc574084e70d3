"""
Watch: payment confirmation by polling.

    from storefront import watch as W

    watcher = W.PaymentWatcher(
        gateway.status,
        policy=W.WatchPolicy(interval=5.0),
        cart=store,
    )
    watcher.start(order_id, on_confirmed=lambda: print("paid"))

    watcher.stop()  # teardown, no callback afterwards
"""

from storefront.watch._types import PaymentStatus, WatchState, WatchPolicy
from storefront.watch._watcher import PaymentWatcher, FetchStatus, OnFailed

__all__ = (
    "PaymentStatus",
    "WatchState",
    "WatchPolicy",
    "PaymentWatcher",
    "FetchStatus",
    "OnFailed",
)
