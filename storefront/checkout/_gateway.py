"""
Payment gateway: the checkout collaborator over HTTP.

    POST /checkout/create          → PaymentResult
    GET  /checkout/status/{order}  → PaymentStatus

Raises ApiError on transport failure, PaymentResponseError when the
response does not match the requested method's result shape.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from storefront.http import ApiClient
from storefront.cart import ItemType
from storefront.watch import PaymentStatus
from storefront.checkout._types import (
    Customer,
    CreditCard,
    PaymentMethod,
    Purchase,
    CardStatus,
    CreditCardResult,
    PixResult,
    BoletoResult,
    PaymentResult,
)
from storefront.checkout._errors import PaymentResponseError

logger = logging.getLogger(__name__)

CREATE_PATH = "/checkout/create"
STATUS_PATH = "/checkout/status/{order_id}"

_ID_FIELD = {
    ItemType.COURSE: "courseId",
    ItemType.EBOOK: "ebookId",
    ItemType.PAPER: "paperId",
}


# ═══════════════════════════════════════════════════════════════════════════════
# Request
# ═══════════════════════════════════════════════════════════════════════════════


def customer_to_json(customer: Customer) -> dict[str, str]:
    return {
        "name": customer.name.strip(),
        "email": customer.email.strip(),
        "cpfCnpj": customer.tax_id.strip(),
        "phone": customer.phone.strip(),
    }


def card_to_json(card: CreditCard) -> dict[str, str]:
    return {
        "holderName": card.holder_name,
        "number": "".join(c for c in card.number if c.isdigit()),
        "expiryMonth": card.expiry_month,
        "expiryYear": card.expiry_year,
        "ccv": card.ccv,
    }


def build_request(
    purchase: Purchase,
    customer: Customer,
    method: PaymentMethod,
    *,
    credit_card: CreditCard | None = None,
    installments: int = 1,
) -> dict[str, Any]:
    """
    Request body for /checkout/create.

    The first item heads the request with its type-specific id field.
    `items` is only sent when more than one line is bought.
    creditCard and installments are only sent for card payments.
    """
    if purchase.is_empty:
        raise ValueError("cannot build a checkout request for an empty purchase")

    primary = purchase.primary
    body: dict[str, Any] = {
        _ID_FIELD[primary.type]: primary.id,
        "title": primary.title,
        "price": purchase.total,
        "paymentMethod": method.value,
        "customer": customer_to_json(customer),
    }

    if len(purchase.items) > 1:
        body["items"] = [
            {
                "id": item.id,
                "type": item.type.value,
                "title": item.title,
                "price": item.price,
                "quantity": item.quantity,
            }
            for item in purchase.items
        ]

    if method is PaymentMethod.CREDIT_CARD:
        if credit_card is not None:
            body["creditCard"] = card_to_json(credit_card)
        body["installments"] = installments

    return body


# ═══════════════════════════════════════════════════════════════════════════════
# Response
# ═══════════════════════════════════════════════════════════════════════════════


def _require_str(data: dict[str, Any], key: str, payload: object) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise PaymentResponseError(f"missing or invalid `{key}`", payload)
    return value


def _parse_timestamp(raw: str, payload: object) -> datetime:
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError as e:
        raise PaymentResponseError(f"invalid expirationDate {raw!r}", payload) from e


def parse_result(payload: Any, method: PaymentMethod) -> PaymentResult:
    """
    Map a /checkout/create response onto the result for `method`.

    The response's own paymentMethod, when present, must agree.
    """
    if not isinstance(payload, dict):
        raise PaymentResponseError("expected an object", payload)

    order_id = _require_str(payload, "orderId", payload)

    reported = payload.get("paymentMethod")
    if reported is not None and reported != method.value:
        raise PaymentResponseError(f"asked for {method.value}, got {reported!r}", payload)

    match method:
        case PaymentMethod.CREDIT_CARD:
            raw_status = payload.get("status")
            status = PaymentStatus.parse(raw_status)
            return CreditCardResult(
                order_id=order_id,
                status=CardStatus.CONFIRMED if status.is_confirmed else CardStatus.DECLINED,
                raw_status=raw_status if isinstance(raw_status, str) else None,
            )

        case PaymentMethod.PIX:
            pix = payload.get("pix")
            if not isinstance(pix, dict):
                raise PaymentResponseError("missing `pix`", payload)
            return PixResult(
                order_id=order_id,
                payload=_require_str(pix, "payload", payload),
                qr_code_image=_require_str(pix, "qrCodeImage", payload),
                expiration_date=_parse_timestamp(_require_str(pix, "expirationDate", payload), payload),
            )

        case PaymentMethod.BOLETO:
            boleto = payload.get("boleto")
            if not isinstance(boleto, dict):
                raise PaymentResponseError("missing `boleto`", payload)
            return BoletoResult(
                order_id=order_id,
                url=_require_str(boleto, "url", payload),
                barcode=str(boleto.get("barcode") or ""),
            )


# ═══════════════════════════════════════════════════════════════════════════════
# Gateway
# ═══════════════════════════════════════════════════════════════════════════════


class PaymentGateway:
    """
    Checkout endpoints of the backend.

    Note: no retries here. A second submission is a second charge attempt
    and only happens when the user clicks again.
    """

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def submit(
        self,
        purchase: Purchase,
        customer: Customer,
        method: PaymentMethod,
        *,
        credit_card: CreditCard | None = None,
        installments: int = 1,
    ) -> PaymentResult:
        body = build_request(
            purchase,
            customer,
            method,
            credit_card=credit_card,
            installments=installments,
        )
        logger.info(
            "Submitting %s checkout for %d item(s), total %d",
            method.value,
            len(purchase.items),
            purchase.total,
        )
        payload = await self._client.post(CREATE_PATH, body)
        result = parse_result(payload, method)
        logger.info("Checkout created order %s (%s)", result.order_id, method.value)
        return result

    async def status(self, order_id: str) -> PaymentStatus:
        payload = await self._client.get(STATUS_PATH.format(order_id=order_id))
        if not isinstance(payload, dict):
            raise PaymentResponseError("expected an object", payload)
        return PaymentStatus.parse(payload.get("paymentStatus"))


__all__ = (
    "CREATE_PATH",
    "STATUS_PATH",
    "customer_to_json",
    "card_to_json",
    "build_request",
    "parse_result",
    "PaymentGateway",
)
