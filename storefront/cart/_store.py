"""
Cart store: the single owner of cart state.

Every mutation goes through `reduce`. Item mutations are then written to
storage before `dispatch` returns. Storage failures are logged and
swallowed: the in-memory state stays authoritative for the session.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from kungfu import Ok, Error

from storefront._types import Cents, Unsubscribe
from storefront.storage import Storage
from storefront.cart._types import CartItem, CartState, EMPTY
from storefront.cart._actions import (
    CartAction,
    ITEM_ACTIONS,
    AddItem,
    RemoveItem,
    UpdateQuantity,
    ClearCart,
    LoadCart,
    SetOpen,
    ToggleOpen,
)
from storefront.cart._reducer import reduce
from storefront.cart._codec import dump_items, parse_items

logger = logging.getLogger(__name__)

DEFAULT_CART_KEY = "ln-educacional-cart"

type Listener = Callable[[CartState], None]


class CartStore:
    """
    Persistent cart.

    Constructed once per app, loaded once, lives for the app lifetime.

    Example:
        store = CartStore(MemoryStorage())
        store.load()

        store.add_item(course)
        store.count      # 1
        store.subtotal   # course.price
    """

    def __init__(self, storage: Storage, *, key: str = DEFAULT_CART_KEY) -> None:
        self._storage = storage
        self._key = key
        self._state = EMPTY
        self._listeners: list[Listener] = []

    # ─────────────────────────────────────────────────────────────────────────
    # Hydration
    # ─────────────────────────────────────────────────────────────────────────

    def load(self) -> CartState:
        """
        Rehydrate items from storage. Never raises.

        Absent key, unreadable storage or corrupt payload → empty cart.
        The loaded items are not written back.
        """
        items: tuple[CartItem, ...] = ()

        match self._storage.get(self._key):
            case Ok(None):
                pass
            case Ok(raw):
                match parse_items(raw):
                    case Ok(parsed):
                        items = parsed
                    case Error(e):
                        logger.warning("Discarding corrupt cart under %r: %s", self._key, e.message)
            case Error(e):
                logger.warning("Could not read cart under %r: %s", self._key, e.message)

        self._state = reduce(self._state, LoadCart(items))
        self._notify()
        logger.debug("Cart loaded with %d line(s)", len(items))
        return self._state

    # ─────────────────────────────────────────────────────────────────────────
    # Accessors
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def key(self) -> str:
        return self._key

    @property
    def state(self) -> CartState:
        return self._state

    @property
    def items(self) -> tuple[CartItem, ...]:
        return self._state.items

    @property
    def is_open(self) -> bool:
        return self._state.is_open

    @property
    def count(self) -> int:
        return self._state.count

    @property
    def subtotal(self) -> Cents:
        return self._state.subtotal

    @property
    def total(self) -> Cents:
        return self._state.total

    @property
    def is_empty(self) -> bool:
        return self._state.is_empty

    # ─────────────────────────────────────────────────────────────────────────
    # Dispatch
    # ─────────────────────────────────────────────────────────────────────────

    def dispatch(self, action: CartAction) -> CartState:
        """Apply action, persist items for item actions, notify listeners."""
        self._state = reduce(self._state, action)
        if isinstance(action, ITEM_ACTIONS):
            self._persist()
        self._notify()
        return self._state

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """
        Call listener with the new state after every dispatch.

        A listener that raises is logged and skipped. The state change and
        its persistence stand.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        state = self._state
        for listener in tuple(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Cart listener %r failed", listener)

    def _persist(self) -> None:
        match self._storage.set(self._key, dump_items(self._state.items)):
            case Ok(_):
                pass
            case Error(e):
                logger.warning("Could not persist cart under %r: %s", self._key, e.message)

    # ─────────────────────────────────────────────────────────────────────────
    # Convenience
    # ─────────────────────────────────────────────────────────────────────────

    def add_item(self, item: CartItem, quantity: int = 1) -> CartState:
        return self.dispatch(AddItem(item, quantity))

    def remove_item(self, item_id: str) -> CartState:
        return self.dispatch(RemoveItem(item_id))

    def update_quantity(self, item_id: str, quantity: int) -> CartState:
        return self.dispatch(UpdateQuantity(item_id, quantity))

    def clear(self) -> CartState:
        """Empty the cart. Clearing an empty cart is a no-op."""
        if self._state.is_empty:
            return self._state
        return self.dispatch(ClearCart())

    def set_open(self, is_open: bool) -> CartState:
        return self.dispatch(SetOpen(is_open))

    def toggle_open(self) -> CartState:
        return self.dispatch(ToggleOpen())


__all__ = ("CartStore", "Listener", "DEFAULT_CART_KEY")
