"""Shared infrastructure for examples."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field

import httpx

from storefront.cart import CartItem, ItemType


# Catalog
COURSE = CartItem(id="c-python", title="Python do Zero", price=19900, type=ItemType.COURSE)
EBOOK = CartItem(id="e-abnt", title="Guia ABNT", price=2990, type=ItemType.EBOOK)
PAPER = CartItem(id="p-tcc", title="TCC sob encomenda", price=45000, type=ItemType.PAPER)


# Fake backend
@dataclass(slots=True)
class FakeBackend:
    """Answers checkout endpoints; PIX settles after `settle_after` polls."""

    settle_after: int = 2
    unavailable: set[str] = field(default_factory=set)
    polls: dict[str, int] = field(default_factory=dict)
    orders: int = 0

    def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path

        if path == "/products/validate":
            ids = json.loads(request.content)["ids"]
            return httpx.Response(200, json={"unavailable": [i for i in ids if i in self.unavailable]})

        if path == "/checkout/create":
            body = json.loads(request.content)
            self.orders += 1
            order_id = f"ord_{self.orders}"
            match body["paymentMethod"]:
                case "CREDIT_CARD":
                    return httpx.Response(200, json={"orderId": order_id, "status": "CONFIRMED"})
                case "PIX":
                    return httpx.Response(200, json={
                        "orderId": order_id,
                        "pix": {
                            "payload": "00020126580014br.gov.bcb.pix0136demo",
                            "qrCodeImage": "iVBORw0KGgo=",
                            "expirationDate": "2030-01-01 23:59:59",
                        },
                    })
                case _:
                    return httpx.Response(200, json={
                        "orderId": order_id,
                        "boleto": {"url": "https://bank.example/b/1", "barcode": "23790.12345 60000.000000"},
                    })

        if path.startswith("/checkout/status/"):
            order_id = path.rsplit("/", 1)[-1]
            self.polls[order_id] = self.polls.get(order_id, 0) + 1
            status = "CONFIRMED" if self.polls[order_id] > self.settle_after else "PENDING"
            return httpx.Response(200, json={"orderId": order_id, "paymentStatus": status})

        return httpx.Response(404, json={"error": "Not found"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


# Helpers
def banner(title: str) -> None:
    print(f"\n{'─' * 50}\n{title}\n{'─' * 50}")


def run(main: Callable[[], Coroutine[object, object, None]]) -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    asyncio.run(main())
