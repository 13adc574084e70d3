"""
Installment options for card payments.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

from storefront._types import Cents
from storefront.checkout._types import InstallmentOption

MAX_INSTALLMENTS = 12


def installment_amount(total: Cents, count: int) -> Cents:
    """total / count, rounded half-up to the cent."""
    if count < 1:
        raise ValueError(f"installment count must be >= 1, got {count}")
    return int((Decimal(total) / Decimal(count)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def installment_options(total: Cents, max_installments: int = MAX_INSTALLMENTS) -> tuple[InstallmentOption, ...]:
    """
    One option per count in 1..max_installments.

    Example:
        installment_options(10000, 3)
        # (1 x 10000, 2 x 5000, 3 x 3333)
    """
    return tuple(
        InstallmentOption(count=n, amount=installment_amount(total, n))
        for n in range(1, max(1, max_installments) + 1)
    )


def format_brl(amount: Cents) -> str:
    """Render cents as Brazilian currency: 1234567 → 'R$ 12.345,67'."""
    sign = "-" if amount < 0 else ""
    reais, cents = divmod(abs(amount), 100)
    grouped = f"{reais:,}".replace(",", ".")
    return f"{sign}R$ {grouped},{cents:02d}"


__all__ = ("MAX_INSTALLMENTS", "installment_amount", "installment_options", "format_brl")
