"""
Checkout errors.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class CheckoutErrorKind(Enum):
    """Kinds of checkout errors."""

    VALIDATION = auto()  # Form input rejected locally
    INVALID_STEP = auto()  # Operation not allowed at the current step
    IN_FLIGHT = auto()  # A submission is already running
    EMPTY_PURCHASE = auto()  # Nothing to buy
    UNAVAILABLE_ITEMS = auto()  # Availability check removed items
    TRANSPORT = auto()  # Gateway call failed
    MALFORMED_RESPONSE = auto()  # Gateway answered with an unknown shape


@dataclass(frozen=True, slots=True)
class CheckoutError:
    """
    Checkout operation error.

    field_errors is filled for VALIDATION only.
    """

    kind: CheckoutErrorKind
    message: str
    field_errors: dict[str, str] = field(default_factory=dict)


class PaymentResponseError(Exception):
    """Gateway response does not match any known payment result shape."""

    def __init__(self, message: str, payload: object = None) -> None:
        super().__init__(message)
        self.payload = payload


__all__ = ("CheckoutErrorKind", "CheckoutError", "PaymentResponseError")
