"""
Cart types: line items and cart state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from storefront._types import Cents


# ═══════════════════════════════════════════════════════════════════════════════
# Item Type
# ═══════════════════════════════════════════════════════════════════════════════


class ItemType(Enum):
    """What kind of product a line refers to. Values are the wire names."""

    COURSE = "course"
    EBOOK = "ebook"
    PAPER = "paper"


# ═══════════════════════════════════════════════════════════════════════════════
# Cart Item: One Line
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CartItem:
    """
    One purchasable line in the cart, keyed by product id.

    price: unit price in cents.
    quantity: always >= 1 while the item sits in a cart.
    """

    id: str
    title: str
    price: Cents
    type: ItemType
    quantity: int = 1
    description: str | None = None
    thumbnail_url: str | None = None

    @property
    def line_total(self) -> Cents:
        return self.price * self.quantity


# ═══════════════════════════════════════════════════════════════════════════════
# Cart State
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CartState:
    """
    Snapshot of the cart.

    Note: count, subtotal and total are properties over items,
    recomputed on every access. Nothing derived is stored.
    """

    items: tuple[CartItem, ...] = field(default=())
    is_open: bool = False

    @property
    def count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def subtotal(self) -> Cents:
        return sum(item.line_total for item in self.items)

    @property
    def total(self) -> Cents:
        # Fees and discounts would apply here.
        return self.subtotal

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find(self, item_id: str) -> CartItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None


EMPTY = CartState()


__all__ = ("ItemType", "CartItem", "CartState", "EMPTY")
