from __future__ import annotations

import pytest

from storefront.cart import ItemType
from storefront.http import ApiError
from storefront.watch import PaymentStatus
from storefront import checkout as Co

from tests.conftest import FakeBackend, boleto_response, card_response, pix_response

CUSTOMER = Co.Customer(name="Ana", email="ana@example.com", tax_id="123.456.789-09", phone="11999990000")
CARD = Co.CreditCard("ANA S", "4111 1111 1111 1111", "12", "2030", "123")


def test_request_for_single_course_pix() -> None:
    purchase = Co.Purchase.single("c1", ItemType.COURSE, "Python", 19900)

    body = Co.build_request(purchase, CUSTOMER, Co.PaymentMethod.PIX)

    assert body == {
        "courseId": "c1",
        "title": "Python",
        "price": 19900,
        "paymentMethod": "PIX",
        "customer": {
            "name": "Ana",
            "email": "ana@example.com",
            "cpfCnpj": "123.456.789-09",
            "phone": "11999990000",
        },
    }


def test_request_for_card_and_many_items() -> None:
    purchase = Co.Purchase((
        Co.CheckoutItem("p1", ItemType.PAPER, "TCC", 30000),
        Co.CheckoutItem("e1", ItemType.EBOOK, "Guia", 500, quantity=2),
    ))

    body = Co.build_request(purchase, CUSTOMER, Co.PaymentMethod.CREDIT_CARD, credit_card=CARD, installments=3)

    assert body["paperId"] == "p1"
    assert body["price"] == 31000
    assert body["installments"] == 3
    assert body["creditCard"]["number"] == "4111111111111111"
    assert [i["id"] for i in body["items"]] == ["p1", "e1"]


def test_card_data_is_not_in_repr() -> None:
    text = repr(CARD)

    assert "4111" not in text
    assert "number" not in text
    assert "ccv" not in text


@pytest.mark.parametrize(
    ("status", "expected"),
    [("CONFIRMED", Co.CardStatus.CONFIRMED), ("RECEIVED", Co.CardStatus.CONFIRMED), ("PENDING", Co.CardStatus.DECLINED)],
)
def test_parse_card_result(status: str, expected: Co.CardStatus) -> None:
    result = Co.parse_result(card_response(status), Co.PaymentMethod.CREDIT_CARD)

    assert isinstance(result, Co.CreditCardResult)
    assert result.status is expected


def test_parse_pix_and_boleto() -> None:
    pix = Co.parse_result(pix_response(), Co.PaymentMethod.PIX)
    boleto = Co.parse_result(boleto_response(), Co.PaymentMethod.BOLETO)

    assert isinstance(pix, Co.PixResult)
    assert pix.expiration_date.year == 2030
    assert pix.qr_code_data_url.startswith("data:image/png;base64,")
    assert isinstance(boleto, Co.BoletoResult)
    assert boleto.barcode == "23790.12345"


@pytest.mark.parametrize(
    ("payload", "method"),
    [
        ([], Co.PaymentMethod.PIX),
        ({"paymentMethod": "PIX"}, Co.PaymentMethod.PIX),
        ({"orderId": "o1", "paymentMethod": "PIX"}, Co.PaymentMethod.PIX),
        (boleto_response(), Co.PaymentMethod.PIX),
        ({"orderId": "o1", "pix": {"payload": "x", "qrCodeImage": "y", "expirationDate": "soon"}}, Co.PaymentMethod.PIX),
    ],
)
def test_malformed_responses_are_rejected(payload: object, method: Co.PaymentMethod) -> None:
    with pytest.raises(Co.PaymentResponseError):
        Co.parse_result(payload, method)


async def test_submit_and_status(gateway: Co.PaymentGateway, backend: FakeBackend) -> None:
    backend.create = pix_response("ord_9")
    backend.statuses = ["RECEIVED"]
    purchase = Co.Purchase.single("c1", ItemType.COURSE, "Python", 19900)

    result = await gateway.submit(purchase, CUSTOMER, Co.PaymentMethod.PIX)
    status = await gateway.status(result.order_id)

    assert result.order_id == "ord_9"
    assert status is PaymentStatus.RECEIVED
    assert backend.count("/checkout/status/ord_9") == 1


async def test_submit_propagates_api_error(gateway: Co.PaymentGateway, backend: FakeBackend) -> None:
    backend.create = 400
    purchase = Co.Purchase.single("c1", ItemType.COURSE, "Python", 19900)

    with pytest.raises(ApiError):
        await gateway.submit(purchase, CUSTOMER, Co.PaymentMethod.BOLETO)
