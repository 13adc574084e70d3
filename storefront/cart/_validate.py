"""
Cart availability check.

Asks the backend which cart products can no longer be bought and drops
them from the cart. Runs before checkout.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

from combinators import lift as L
from kungfu import Result, Ok, Error, LazyCoroResult

from storefront._types import Lazy
from storefront.http import ApiClient, error_message
from storefront.cart._types import CartItem
from storefront.cart._store import CartStore

logger = logging.getLogger(__name__)

VALIDATE_PATH = "/products/validate"


# ═══════════════════════════════════════════════════════════════════════════════
# Result Types
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CartValidation:
    """
    Outcome of a successful availability check.

    removed: lines dropped from the cart because they are unavailable.
    """

    removed: tuple[CartItem, ...] = field(default=())

    @property
    def ok(self) -> bool:
        return not self.removed


class CartValidationErrorKind(Enum):
    TRANSPORT = auto()  # Request failed or backend answered with an error
    MALFORMED_RESPONSE = auto()  # Response without a usable `unavailable` list


@dataclass(frozen=True, slots=True)
class CartValidationError:
    kind: CartValidationErrorKind
    message: str


# ═══════════════════════════════════════════════════════════════════════════════
# validate_cart()
# ═══════════════════════════════════════════════════════════════════════════════


def _unavailable_ids(payload: Any) -> Result[frozenset[str], CartValidationError]:
    if not isinstance(payload, dict):
        return Error(CartValidationError(CartValidationErrorKind.MALFORMED_RESPONSE, "expected an object"))
    unavailable = payload.get("unavailable") or []
    if not isinstance(unavailable, list) or not all(isinstance(i, str) for i in unavailable):
        return Error(CartValidationError(
            CartValidationErrorKind.MALFORMED_RESPONSE,
            "`unavailable` must be a list of ids",
        ))
    return Ok(frozenset(unavailable))


def validate_cart(store: CartStore, client: ApiClient) -> Lazy[CartValidation, CartValidationError]:
    """
    Remove unavailable items from the cart.

    Empty cart → Ok without a request.
    Backend failure → Error; the cart is left untouched.

    Example:
        match await validate_cart(store, client):
            case Ok(v) if not v.ok:
                notify(f"{len(v.removed)} item(s) removed")
            case Error(e):
                show_error(e.message)
    """

    async def execute() -> Result[CartValidation, CartValidationError]:
        if store.is_empty:
            return Ok(CartValidation())

        ids = [item.id for item in store.items]
        fetched = await L.catching_async(
            lambda: client.post(VALIDATE_PATH, {"ids": ids}),
            on_error=lambda e: CartValidationError(CartValidationErrorKind.TRANSPORT, error_message(e)),
        )

        match fetched:
            case Ok(payload):
                parsed = _unavailable_ids(payload)
            case Error(e):
                logger.warning("Cart validation failed: %s", e.message)
                return Error(e)

        match parsed:
            case Ok(unavailable):
                pass
            case Error(e):
                logger.warning("Cart validation returned a malformed response: %s", e.message)
                return Error(e)

        removed = tuple(item for item in store.items if item.id in unavailable)
        for item in removed:
            store.remove_item(item.id)

        if removed:
            logger.info("Removed %d unavailable item(s) from cart", len(removed))
        return Ok(CartValidation(removed))

    return LazyCoroResult(execute)


__all__ = (
    "VALIDATE_PATH",
    "CartValidation",
    "CartValidationErrorKind",
    "CartValidationError",
    "validate_cart",
)
