from __future__ import annotations

import asyncio

from storefront import Settings, Storefront
from storefront import checkout as Co
from storefront.cart import CartItem, ItemType, dump_items
from storefront.storage import MemoryStorage

from tests.conftest import FakeBackend, pix_response


async def test_create_loads_persisted_cart(course: CartItem, backend: FakeBackend) -> None:
    storage = MemoryStorage({"ln-educacional-cart": dump_items((course,))})

    async with Storefront.create(Settings(), transport=backend.transport, storage=storage) as shop:
        assert [i.id for i in shop.cart.items] == ["c1"]
        assert shop.policy.max_installments == 12


async def test_cart_checkout_end_to_end(course: CartItem, ebook: CartItem, backend: FakeBackend) -> None:
    backend.create = pix_response("ord_42")
    backend.statuses = ["PENDING", "CONFIRMED"]
    settings = Settings(api_url="http://api.test", poll_interval=0.01)
    completed: list[str] = []

    async with Storefront.create(settings, transport=backend.transport, storage=MemoryStorage()) as shop:
        shop.cart.add_item(course)
        shop.cart.add_item(ebook)

        checkout = shop.checkout(on_completed=lambda r: completed.append(r.order_id))
        checkout.update_customer(name="Ana", email="ana@example.com", tax_id="12345678909")
        checkout.submit_customer()
        checkout.select_method(Co.PaymentMethod.PIX)

        await checkout.submit_payment()
        outcome = await asyncio.wait_for(checkout.wait_for_payment(), timeout=2)

        assert outcome is Co.Outcome.CONFIRMED
        assert shop.cart.items == ()
        assert completed == ["ord_42"]
        assert backend.bodies("/products/validate") == [{"ids": ["c1", "e1"]}]


async def test_direct_purchase_skips_availability_check(backend: FakeBackend) -> None:
    backend.create = pix_response()

    async with Storefront.create(Settings(api_url="http://api.test"), transport=backend.transport) as shop:
        checkout = shop.checkout(Co.Purchase.single("p1", ItemType.PAPER, "TCC", 30000))
        checkout.update_customer(name="Ana", email="ana@example.com", tax_id="12345678909")
        checkout.submit_customer()

        await checkout.submit_payment()
        checkout.close()

    assert backend.count("/products/validate") == 0
    assert backend.bodies("/checkout/create")[0]["paperId"] == "p1"
