"""
Checkout Example: cart, availability check, card and PIX payments.

Run: uv run python examples/checkout_example.py
"""

from kungfu import Ok, Error

from storefront import Settings, Storefront
from storefront import cart as Ct
from storefront import checkout as Co
from storefront.storage import MemoryStorage
from examples._infra import COURSE, EBOOK, PAPER, FakeBackend, banner, run


# ═══════════════════════════════════════════════════════════════════════════════
# Demo
# ═══════════════════════════════════════════════════════════════════════════════


def fill_customer(checkout: Co.CheckoutOrchestrator) -> None:
    checkout.update_customer(name="", email="ana@example.com", tax_id="123.456.789-09")
    match checkout.submit_customer():
        case Error(e):
            print(f"   step 1 rejected: {e.field_errors}")
        case Ok(step):
            print(f"   unexpected: {step}")

    checkout.update_customer(name="Ana Souza")
    print(f"   step 1 → {checkout.submit_customer().unwrap().name}")


async def main() -> None:
    backend = FakeBackend(settle_after=2, unavailable={PAPER.id})
    storage = MemoryStorage()
    settings = Settings(api_url="http://api.example", poll_interval=0.2)

    async with Storefront.create(settings, transport=backend.transport, storage=storage) as shop:
        # 1. Cart
        banner("Cart")
        shop.cart.dispatch(Ct.AddItem(COURSE))
        shop.cart.dispatch(Ct.AddItem(EBOOK, quantity=2))
        shop.cart.dispatch(Ct.AddItem(COURSE))
        shop.cart.dispatch(Ct.AddItem(PAPER))
        for item in shop.cart.items:
            print(f"   {item.quantity} x {item.title:<20} {Co.format_brl(item.line_total)}")
        print(f"   count={shop.cart.count} total={Co.format_brl(shop.cart.total)}")
        print(f"   persisted: {storage.get(settings.cart_key).unwrap()[:60]}...")

        # 2. Availability check
        banner("Availability")
        match await shop.validate_cart():
            case Ok(v):
                print(f"   removed: {[i.title for i in v.removed]}")
            case Error(e):
                print(f"   check failed: {e.message}")

        # 3. Card payment for a single course
        banner("Credit card")
        card_checkout = shop.checkout(Co.Purchase.single(COURSE.id, COURSE.type, COURSE.title, COURSE.price))
        fill_customer(card_checkout)
        card_checkout.select_method(Co.PaymentMethod.CREDIT_CARD)
        card_checkout.set_credit_card(Co.CreditCard("ANA SOUZA", "4111 1111 1111 1111", "12", "2030", "123"))
        for option in card_checkout.installment_options()[:3]:
            print(f"   {option.count}x {Co.format_brl(option.amount)}")
        card_checkout.set_installments(3)
        match await card_checkout.submit_payment():
            case Ok(result):
                print(f"   {result.method.value} → {card_checkout.outcome}")
            case Error(e):
                print(f"   failed: {e.message}")
        print(f"   cart after card payment: {shop.cart.count} item(s)")

        # 4. PIX for the whole cart, confirmed by polling
        banner("PIX")
        shop.cart.dispatch(Ct.AddItem(EBOOK))
        pix_checkout = shop.checkout(on_completed=lambda r: print(f"   completed order {r.order_id}"))
        fill_customer(pix_checkout)
        pix_checkout.select_method(Co.PaymentMethod.PIX)
        match await pix_checkout.submit_payment():
            case Ok(Co.PixResult() as pix):
                print(f"   copy & paste: {pix.payload}")
                print(f"   expires: {pix.expiration_date:%Y-%m-%d %H:%M}")
            case Ok(other):
                print(f"   unexpected result: {other}")
            case Error(e):
                print(f"   failed: {e.message}")

        outcome = await pix_checkout.wait_for_payment()
        print(f"   outcome={outcome}, cart={shop.cart.count} item(s)")
        pix_checkout.close()


if __name__ == "__main__":
    run(main)
