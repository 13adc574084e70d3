"""
Cart actions: the closed set of things that can happen to a cart.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.cart._types import CartItem


@dataclass(frozen=True, slots=True)
class AddItem:
    """Add `quantity` units of item. Existing lines are incremented."""

    item: CartItem
    quantity: int = 1

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError(f"AddItem quantity must be >= 1, got {self.quantity}")


@dataclass(frozen=True, slots=True)
class RemoveItem:
    id: str


@dataclass(frozen=True, slots=True)
class UpdateQuantity:
    """Set quantity in place. quantity <= 0 removes the line."""

    id: str
    quantity: int


@dataclass(frozen=True, slots=True)
class ClearCart:
    pass


@dataclass(frozen=True, slots=True)
class LoadCart:
    """
    Replace items wholesale. Used at hydration only.

    Repeated ids merge into one line and lines with quantity < 1 are dropped.
    """

    items: tuple[CartItem, ...]


@dataclass(frozen=True, slots=True)
class SetOpen:
    is_open: bool


@dataclass(frozen=True, slots=True)
class ToggleOpen:
    pass


type CartAction = AddItem | RemoveItem | UpdateQuantity | ClearCart | LoadCart | SetOpen | ToggleOpen

# Actions whose result must be written to storage.
ITEM_ACTIONS: tuple[type, ...] = (AddItem, RemoveItem, UpdateQuantity, ClearCart)


__all__ = (
    "AddItem",
    "RemoveItem",
    "UpdateQuantity",
    "ClearCart",
    "LoadCart",
    "SetOpen",
    "ToggleOpen",
    "CartAction",
    "ITEM_ACTIONS",
)
