"""
Checkout policy: behavior configuration.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.watch import WatchPolicy
from storefront.checkout._installments import MAX_INSTALLMENTS


@dataclass(frozen=True, slots=True)
class CheckoutPolicy:
    """
    Checkout policy configuration.

    Fluent builder pattern, chain methods to configure.

    Example:
        policy = (
            CheckoutPolicy()
            .with_max_installments(6)
            .with_pix_watch(WatchPolicy(interval=5))
            .with_boleto_watch(None)        # no polling for boletos
            .with_cart_validation(enabled=True)
        )

    Note: Immutable, each method returns new CheckoutPolicy.

    pix_watch: how to poll a PIX order until it settles.
    boleto_watch: same for boletos; bank settlement takes days, so the
        interval is long. None disables it.
    validate_cart: run the availability check before submitting.
    proceed_on_validation_error: submit anyway when the availability
        check itself fails (backend down). Off by default: a failed check
        blocks submission instead of letting unavailable items through.
    """

    max_installments: int = MAX_INSTALLMENTS
    pix_watch: WatchPolicy = WatchPolicy(interval=5.0)
    boleto_watch: WatchPolicy | None = WatchPolicy(interval=60.0)
    validate_cart: bool = True
    proceed_on_validation_error: bool = False

    def __post_init__(self) -> None:
        if self.max_installments < 1:
            raise ValueError(f"max_installments must be >= 1, got {self.max_installments}")

    def with_max_installments(self, count: int) -> CheckoutPolicy:
        return CheckoutPolicy(
            max_installments=count,
            pix_watch=self.pix_watch,
            boleto_watch=self.boleto_watch,
            validate_cart=self.validate_cart,
            proceed_on_validation_error=self.proceed_on_validation_error,
        )

    def with_pix_watch(self, policy: WatchPolicy) -> CheckoutPolicy:
        return CheckoutPolicy(
            max_installments=self.max_installments,
            pix_watch=policy,
            boleto_watch=self.boleto_watch,
            validate_cart=self.validate_cart,
            proceed_on_validation_error=self.proceed_on_validation_error,
        )

    def with_boleto_watch(self, policy: WatchPolicy | None) -> CheckoutPolicy:
        """Set boleto polling. None means the user checks back manually."""
        return CheckoutPolicy(
            max_installments=self.max_installments,
            pix_watch=self.pix_watch,
            boleto_watch=policy,
            validate_cart=self.validate_cart,
            proceed_on_validation_error=self.proceed_on_validation_error,
        )

    def with_cart_validation(self, *, enabled: bool = True, proceed_on_error: bool = False) -> CheckoutPolicy:
        return CheckoutPolicy(
            max_installments=self.max_installments,
            pix_watch=self.pix_watch,
            boleto_watch=self.boleto_watch,
            validate_cart=enabled,
            proceed_on_validation_error=proceed_on_error,
        )


__all__ = ("CheckoutPolicy",)
