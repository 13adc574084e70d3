"""
Form validation: runs locally, never reaches the network.

Each validator returns a dict of field name → message. Empty dict means
the input is valid.
"""

from __future__ import annotations

import re

from storefront.checkout._types import Customer, CreditCard
from storefront.checkout._installments import MAX_INSTALLMENTS

_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

type FieldErrors = dict[str, str]


def _digits(value: str) -> str:
    return "".join(c for c in value if c.isdigit())


def validate_customer(customer: Customer) -> FieldErrors:
    errors: FieldErrors = {}

    if not customer.name.strip():
        errors["name"] = "Nome é obrigatório"

    email = customer.email.strip()
    if not email:
        errors["email"] = "E-mail é obrigatório"
    elif not _EMAIL.match(email):
        errors["email"] = "E-mail inválido"

    tax_id = customer.tax_id.strip()
    if not tax_id:
        errors["tax_id"] = "CPF/CNPJ é obrigatório"
    elif len(_digits(tax_id)) < 11:
        errors["tax_id"] = "CPF/CNPJ inválido"

    return errors


def validate_credit_card(card: CreditCard | None) -> FieldErrors:
    if card is None:
        return {"credit_card": "Dados do cartão são obrigatórios"}

    errors: FieldErrors = {}

    if not card.holder_name.strip():
        errors["holder_name"] = "Nome no cartão é obrigatório"

    number = _digits(card.number)
    if not 13 <= len(number) <= 19:
        errors["number"] = "Número do cartão inválido"

    month = card.expiry_month.strip()
    if not month.isdigit() or not 1 <= int(month) <= 12:
        errors["expiry_month"] = "Mês inválido"

    year = card.expiry_year.strip()
    if not year.isdigit() or len(year) not in (2, 4):
        errors["expiry_year"] = "Ano inválido"

    ccv = card.ccv.strip()
    if not ccv.isdigit() or len(ccv) not in (3, 4):
        errors["ccv"] = "CVV inválido"

    return errors


def validate_installments(installments: int, max_installments: int = MAX_INSTALLMENTS) -> FieldErrors:
    if not 1 <= installments <= max_installments:
        return {"installments": f"Parcelas devem estar entre 1 e {max_installments}"}
    return {}


__all__ = ("FieldErrors", "validate_customer", "validate_credit_card", "validate_installments")
