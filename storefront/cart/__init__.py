"""
Cart: persistent shopping cart driven by a pure reducer.

    from storefront import cart as Ct

    store = Ct.CartStore(storage, key=settings.cart_key)
    store.load()

    store.dispatch(Ct.AddItem(course, quantity=2))
    store.dispatch(Ct.UpdateQuantity(course.id, 0))  # removes the line

    store.count, store.subtotal, store.total

Reducer alone, no storage:

    state = Ct.reduce(Ct.EMPTY, Ct.AddItem(course))
"""

from storefront.cart._types import ItemType, CartItem, CartState, EMPTY
from storefront.cart._actions import (
    AddItem,
    RemoveItem,
    UpdateQuantity,
    ClearCart,
    LoadCart,
    SetOpen,
    ToggleOpen,
    CartAction,
    ITEM_ACTIONS,
)
from storefront.cart._reducer import reduce
from storefront.cart._codec import (
    CodecErrorKind,
    CodecError,
    item_to_json,
    item_from_json,
    dump_items,
    parse_items,
)
from storefront.cart._store import CartStore, Listener, DEFAULT_CART_KEY
from storefront.cart._validate import (
    VALIDATE_PATH,
    CartValidation,
    CartValidationErrorKind,
    CartValidationError,
    validate_cart,
)

__all__ = (
    # Types
    "ItemType",
    "CartItem",
    "CartState",
    "EMPTY",
    # Actions
    "AddItem",
    "RemoveItem",
    "UpdateQuantity",
    "ClearCart",
    "LoadCart",
    "SetOpen",
    "ToggleOpen",
    "CartAction",
    "ITEM_ACTIONS",
    # Reducer
    "reduce",
    # Codec
    "CodecErrorKind",
    "CodecError",
    "item_to_json",
    "item_from_json",
    "dump_items",
    "parse_items",
    # Store
    "CartStore",
    "Listener",
    "DEFAULT_CART_KEY",
    # Availability
    "VALIDATE_PATH",
    "CartValidation",
    "CartValidationErrorKind",
    "CartValidationError",
    "validate_cart",
)
