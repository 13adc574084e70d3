"""
Checkout types: customer data, payment results, session.

CheckoutSession is ephemeral: it lives in memory while checkout is open
and is never serialized. CreditCard keeps number and CCV out of repr so
they cannot leak through logs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum, auto

from storefront._types import Cents
from storefront.cart import CartItem, CartState, ItemType


# ═══════════════════════════════════════════════════════════════════════════════
# Payment Method
# ═══════════════════════════════════════════════════════════════════════════════


class PaymentMethod(Enum):
    """Payment rails. Values are the wire names."""

    CREDIT_CARD = "CREDIT_CARD"
    PIX = "PIX"
    BOLETO = "BOLETO"


# ═══════════════════════════════════════════════════════════════════════════════
# Customer & Card
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Customer:
    """
    Buyer identity. tax_id is the CPF or CNPJ.

    phone is optional, the rest is required to leave step 1.
    """

    name: str = ""
    email: str = ""
    tax_id: str = ""
    phone: str = ""


@dataclass(frozen=True, slots=True)
class CreditCard:
    holder_name: str
    number: str = field(repr=False)
    expiry_month: str
    expiry_year: str
    ccv: str = field(repr=False)

    @property
    def last4(self) -> str:
        digits = "".join(c for c in self.number if c.isdigit())
        return digits[-4:]


# ═══════════════════════════════════════════════════════════════════════════════
# Purchase: what is being bought
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CheckoutItem:
    id: str
    type: ItemType
    title: str
    price: Cents
    quantity: int = 1

    @property
    def line_total(self) -> Cents:
        return self.price * self.quantity

    @classmethod
    def from_cart_item(cls, item: CartItem) -> CheckoutItem:
        return cls(
            id=item.id,
            type=item.type,
            title=item.title,
            price=item.price,
            quantity=item.quantity,
        )


@dataclass(frozen=True, slots=True)
class Purchase:
    """
    Items submitted in one checkout.

    Example:
        Purchase.from_cart(store.state)
        Purchase.single("c1", ItemType.COURSE, "Python", 19900)
    """

    items: tuple[CheckoutItem, ...]

    @classmethod
    def from_cart(cls, state: CartState) -> Purchase:
        return cls(tuple(CheckoutItem.from_cart_item(item) for item in state.items))

    @classmethod
    def single(cls, id: str, type: ItemType, title: str, price: Cents) -> Purchase:
        return cls((CheckoutItem(id=id, type=type, title=title, price=price),))

    @property
    def total(self) -> Cents:
        return sum(item.line_total for item in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def primary(self) -> CheckoutItem:
        """The item whose descriptor heads the request."""
        return self.items[0]


# ═══════════════════════════════════════════════════════════════════════════════
# Payment Results: tagged union keyed by method
# ═══════════════════════════════════════════════════════════════════════════════


class CardStatus(Enum):
    CONFIRMED = auto()
    DECLINED = auto()


@dataclass(frozen=True, slots=True)
class CreditCardResult:
    order_id: str
    status: CardStatus
    raw_status: str | None = None

    @property
    def method(self) -> PaymentMethod:
        return PaymentMethod.CREDIT_CARD

    @property
    def is_confirmed(self) -> bool:
        return self.status is CardStatus.CONFIRMED


@dataclass(frozen=True, slots=True)
class PixResult:
    """qr_code_image is base64 PNG data without the data-URL prefix."""

    order_id: str
    payload: str
    qr_code_image: str
    expiration_date: datetime

    @property
    def method(self) -> PaymentMethod:
        return PaymentMethod.PIX

    @property
    def qr_code_data_url(self) -> str:
        return f"data:image/png;base64,{self.qr_code_image}"


@dataclass(frozen=True, slots=True)
class BoletoResult:
    order_id: str
    url: str
    barcode: str

    @property
    def method(self) -> PaymentMethod:
        return PaymentMethod.BOLETO


type PaymentResult = CreditCardResult | PixResult | BoletoResult


# ═══════════════════════════════════════════════════════════════════════════════
# Installments
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class InstallmentOption:
    """count payments of amount cents each."""

    count: int
    amount: Cents


# ═══════════════════════════════════════════════════════════════════════════════
# Session: wizard state
# ═══════════════════════════════════════════════════════════════════════════════


class Step(IntEnum):
    CUSTOMER = 1
    PAYMENT = 2
    RESULT = 3


class Outcome(Enum):
    """
    Where a submitted payment stands.

    AWAITING_PAYMENT: PIX or boleto issued, watcher (if any) still polling.
    """

    AWAITING_PAYMENT = auto()
    CONFIRMED = auto()
    DECLINED = auto()
    FAILED = auto()


@dataclass(frozen=True, slots=True)
class CheckoutSession:
    """
    Snapshot of an open checkout.

    field_errors: inline validation messages keyed by field name.
    error: last submission error, shown next to the submit button.
    """

    step: Step = Step.CUSTOMER
    customer: Customer = field(default_factory=Customer)
    payment_method: PaymentMethod = PaymentMethod.PIX
    credit_card: CreditCard | None = None
    installments: int = 1
    result: PaymentResult | None = None
    outcome: Outcome | None = None
    field_errors: dict[str, str] = field(default_factory=dict)
    error: str | None = None


__all__ = (
    "PaymentMethod",
    "Customer",
    "CreditCard",
    "CheckoutItem",
    "Purchase",
    "CardStatus",
    "CreditCardResult",
    "PixResult",
    "BoletoResult",
    "PaymentResult",
    "InstallmentOption",
    "Step",
    "Outcome",
    "CheckoutSession",
)
