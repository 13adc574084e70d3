"""
Storefront: composition root.

Builds every collaborator once and hands them out by reference:

    settings = Settings.from_env()

    async with Storefront.create(settings) as shop:
        shop.cart.add_item(course)
        checkout = shop.checkout(on_completed=lambda r: print("paid", r.order_id))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from storefront._types import Lazy
from storefront.settings import Settings
from storefront.http import ApiClient
from storefront.storage import Storage, open_storage
from storefront.cart import CartStore, CartValidation, CartValidationError, validate_cart
from storefront.watch import WatchPolicy
from storefront.checkout import (
    CheckoutOrchestrator,
    CheckoutPolicy,
    OnCompleted,
    PaymentGateway,
    Purchase,
)

logger = logging.getLogger(__name__)


def policy_from_settings(settings: Settings) -> CheckoutPolicy:
    """Checkout policy for the configured intervals and installment cap."""
    timeout = settings.request_timeout if settings.request_timeout > 0 else None
    boleto = (
        WatchPolicy(interval=settings.boleto_poll_interval, request_timeout=timeout)
        if settings.boleto_poll_interval > 0
        else None
    )
    return (
        CheckoutPolicy()
        .with_max_installments(settings.max_installments)
        .with_pix_watch(WatchPolicy(interval=settings.poll_interval, request_timeout=timeout))
        .with_boleto_watch(boleto)
    )


@dataclass(slots=True)
class Storefront:
    """
    Application-lifetime services.

    The cart store is loaded on creation and never torn down; aclose()
    only releases the HTTP connection pool.
    """

    settings: Settings
    client: ApiClient
    storage: Storage
    cart: CartStore
    gateway: PaymentGateway
    policy: CheckoutPolicy

    @classmethod
    def create(
        cls,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        storage: Storage | None = None,
    ) -> Storefront:
        client = ApiClient(settings.api_url, timeout=settings.request_timeout, transport=transport)
        storage = storage if storage is not None else open_storage(settings.storage_url)

        cart = CartStore(storage, key=settings.cart_key)
        cart.load()

        logger.info("Storefront ready (api=%s, cart lines=%d)", settings.api_url, len(cart.items))
        return cls(
            settings=settings,
            client=client,
            storage=storage,
            cart=cart,
            gateway=PaymentGateway(client),
            policy=policy_from_settings(settings),
        )

    def validate_cart(self) -> Lazy[CartValidation, CartValidationError]:
        return validate_cart(self.cart, self.client)

    def checkout(
        self,
        purchase: Purchase | None = None,
        on_completed: OnCompleted | None = None,
    ) -> CheckoutOrchestrator:
        """
        Open a checkout.

        Default purchase is the current cart: availability is checked before
        submitting and the cart is cleared on confirmation. A direct purchase
        (e.g. a single paper ordered from its page) leaves the cart alone.
        """
        from_cart = purchase is None
        return CheckoutOrchestrator(
            Purchase.from_cart(self.cart.state) if from_cart else purchase,
            self.gateway,
            cart=self.cart if from_cart else None,
            policy=self.policy,
            validator=self.validate_cart if from_cart else None,
            on_completed=on_completed,
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> Storefront:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


__all__ = ("Storefront", "policy_from_settings")
