from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest

from storefront.http import ApiClient
from storefront.storage import MemoryStorage
from storefront.cart import CartItem, CartStore, ItemType
from storefront.checkout import PaymentGateway

BASE_URL = "http://api.test"


# ═══════════════════════════════════════════════════════════════════════════════
# Fake backend
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass
class FakeBackend:
    """
    In-process stand-in for the REST backend.

    statuses: paymentStatus answers per poll, the last one repeats.
    create: JSON answered by /checkout/create, or an int status to fail with.
    unavailable: ids reported by /products/validate.
    """

    statuses: list[str] = field(default_factory=lambda: ["PENDING"])
    create: dict[str, Any] | int = field(default_factory=dict)
    unavailable: list[str] = field(default_factory=list)
    validate_status: int = 200
    requests: list[httpx.Request] = field(default_factory=list)
    polls: int = 0

    def bodies(self, path: str) -> list[Any]:
        return [json.loads(r.content) for r in self.requests if r.url.path == path]

    def count(self, path_prefix: str) -> int:
        return sum(1 for r in self.requests if r.url.path.startswith(path_prefix))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/checkout/create":
            if isinstance(self.create, int):
                return httpx.Response(self.create, json={"error": "Erro ao processar pagamento"})
            return httpx.Response(200, json=self.create)

        if path.startswith("/checkout/status/"):
            index = min(self.polls, len(self.statuses) - 1)
            self.polls += 1
            order_id = path.rsplit("/", 1)[-1]
            return httpx.Response(200, json={"orderId": order_id, "paymentStatus": self.statuses[index]})

        if path == "/products/validate":
            if self.validate_status != 200:
                return httpx.Response(self.validate_status, json={"message": "indisponível"})
            return httpx.Response(200, json={"unavailable": self.unavailable})

        return httpx.Response(404, json={"error": "Not found"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


# ═══════════════════════════════════════════════════════════════════════════════
# Response payloads
# ═══════════════════════════════════════════════════════════════════════════════


def card_response(status: str = "CONFIRMED", order_id: str = "ord_card") -> dict[str, Any]:
    return {"success": True, "orderId": order_id, "status": status, "paymentMethod": "CREDIT_CARD"}


def pix_response(order_id: str = "ord_pix") -> dict[str, Any]:
    return {
        "success": True,
        "orderId": order_id,
        "paymentMethod": "PIX",
        "pix": {
            "payload": "00020126580014br.gov.bcb.pix",
            "qrCodeImage": "iVBORw0KGgo=",
            "expirationDate": "2030-01-01 23:59:59",
        },
    }


def boleto_response(order_id: str = "ord_boleto") -> dict[str, Any]:
    return {
        "success": True,
        "orderId": order_id,
        "paymentMethod": "BOLETO",
        "boleto": {"url": "https://bank.test/b/1", "barcode": "23790.12345"},
    }


# ═══════════════════════════════════════════════════════════════════════════════
# Fixtures
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.fixture
def course() -> CartItem:
    return CartItem(id="c1", title="Python do Zero", price=1000, type=ItemType.COURSE)


@pytest.fixture
def ebook() -> CartItem:
    return CartItem(id="e1", title="Guia ABNT", price=500, type=ItemType.EBOOK, description="PDF")


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
async def client(backend: FakeBackend):
    api = ApiClient(BASE_URL, transport=backend.transport)
    yield api
    await api.aclose()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(storage: MemoryStorage) -> CartStore:
    cart = CartStore(storage, key="cart")
    cart.load()
    return cart


@pytest.fixture
def gateway(client: ApiClient) -> PaymentGateway:
    return PaymentGateway(client)
