"""
storefront: cart and multi-method checkout for an education store.

Modules:
    cart    : persistent cart store and its pure reducer
    checkout: three-step checkout wizard over card, PIX and boleto
    watch   : payment confirmation by polling
    storage : key-value storage (memory, SQL)
    http    : async API client

Usage:
    from storefront import Storefront, Settings
    from storefront import cart as Ct, checkout as Co

    async with Storefront.create(Settings.from_env()) as shop:
        shop.cart.dispatch(Ct.AddItem(course))

        checkout = shop.checkout()
        checkout.update_customer(name="Ana", email="ana@example.com", tax_id="12345678909")
        checkout.submit_customer()
        checkout.select_method(Co.PaymentMethod.PIX)
        await checkout.submit_payment()
        await checkout.wait_for_payment()
"""

from storefront import cart, checkout, http, storage, watch
from storefront.settings import Settings, configure_logging
from storefront.app import Storefront, policy_from_settings

__version__ = "0.1.0"

__all__ = (
    # Modules
    "cart",
    "checkout",
    "http",
    "storage",
    "watch",
    # Composition
    "Settings",
    "configure_logging",
    "Storefront",
    "policy_from_settings",
)
