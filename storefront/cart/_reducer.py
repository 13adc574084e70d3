"""
Cart reducer: pure (state, action) -> state.

Invariants kept by construction:
- at most one line per item id
- every line present has quantity >= 1
"""

from __future__ import annotations

from dataclasses import replace
from typing import assert_never

from storefront.cart._types import CartItem, CartState
from storefront.cart._actions import (
    CartAction,
    AddItem,
    RemoveItem,
    UpdateQuantity,
    ClearCart,
    LoadCart,
    SetOpen,
    ToggleOpen,
)


def _add(items: tuple[CartItem, ...], incoming: CartItem, quantity: int) -> tuple[CartItem, ...]:
    for i, existing in enumerate(items):
        if existing.id == incoming.id:
            # existing metadata wins, only the quantity moves
            bumped = replace(existing, quantity=existing.quantity + quantity)
            return (*items[:i], bumped, *items[i + 1:])
    return (*items, replace(incoming, quantity=quantity))


def _remove(items: tuple[CartItem, ...], item_id: str) -> tuple[CartItem, ...]:
    return tuple(item for item in items if item.id != item_id)


def _load(loaded: tuple[CartItem, ...]) -> tuple[CartItem, ...]:
    items: tuple[CartItem, ...] = ()
    for item in loaded:
        if item.quantity >= 1:
            items = _add(items, item, item.quantity)
    return items


def _set_quantity(items: tuple[CartItem, ...], item_id: str, quantity: int) -> tuple[CartItem, ...]:
    if quantity <= 0:
        return _remove(items, item_id)
    return tuple(
        replace(item, quantity=quantity) if item.id == item_id else item
        for item in items
    )


def reduce(state: CartState, action: CartAction) -> CartState:
    """
    Apply one action.

    Example:
        state = reduce(state, AddItem(course))
        state = reduce(state, UpdateQuantity(course.id, 0))  # removed
    """
    match action:
        case AddItem(item=item, quantity=quantity):
            return replace(state, items=_add(state.items, item, quantity))
        case RemoveItem(id=item_id):
            return replace(state, items=_remove(state.items, item_id))
        case UpdateQuantity(id=item_id, quantity=quantity):
            return replace(state, items=_set_quantity(state.items, item_id, quantity))
        case ClearCart():
            return replace(state, items=())
        case LoadCart(items=items):
            return replace(state, items=_load(items))
        case SetOpen(is_open=is_open):
            return replace(state, is_open=is_open)
        case ToggleOpen():
            return replace(state, is_open=not state.is_open)
        case _:
            assert_never(action)


__all__ = ("reduce",)
