"""
Checkout orchestrator: the three-step wizard.

    CUSTOMER ──submit_customer (valid)──→ PAYMENT ──submit_payment (ok)──→ RESULT
       ↑                                    │  ↑                             │
       └────────────── back ────────────────┘  └──── back (declined/failed) ─┘

State 3 depends on the result:
- card confirmed → CONFIRMED, cart cleared, on_completed fired
- card declined → DECLINED, back() returns to payment
- PIX → AWAITING_PAYMENT, watcher polls until settled
- boleto → AWAITING_PAYMENT, slow watcher when the policy enables it

close() stops the watcher and discards the whole session, card data
included. Results of a request that finishes after close() are dropped.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import replace

from combinators import lift as L
from kungfu import Result, Ok, Error

from storefront._types import Cents
from storefront.http import error_message
from storefront.cart import CartStore, CartValidation, CartValidationError
from storefront.watch import PaymentStatus, PaymentWatcher, WatchPolicy, WatchState
from storefront.checkout._types import (
    CheckoutSession,
    Customer,
    CreditCard,
    PaymentMethod,
    Purchase,
    CardStatus,
    CreditCardResult,
    PixResult,
    BoletoResult,
    PaymentResult,
    InstallmentOption,
    Step,
    Outcome,
)
from storefront.checkout._errors import CheckoutError, CheckoutErrorKind, PaymentResponseError
from storefront.checkout._policy import CheckoutPolicy
from storefront.checkout._gateway import PaymentGateway
from storefront.checkout._installments import installment_options
from storefront.checkout._validation import (
    validate_customer,
    validate_credit_card,
    validate_installments,
)

logger = logging.getLogger(__name__)

type Validator = Callable[[], Awaitable[Result[CartValidation, CartValidationError]]]
type OnCompleted = Callable[[PaymentResult], None]

DECLINED_MESSAGE = "Pagamento recusado. Verifique os dados do cartão e tente novamente."


def _invalid_step(expected: Step, actual: Step) -> Error[CheckoutError]:
    return Error(CheckoutError(
        CheckoutErrorKind.INVALID_STEP,
        f"expected step {expected.name}, checkout is at {actual.name}",
    ))


def _submission_error(e: Exception) -> CheckoutError:
    if isinstance(e, PaymentResponseError):
        return CheckoutError(CheckoutErrorKind.MALFORMED_RESPONSE, str(e))
    return CheckoutError(CheckoutErrorKind.TRANSPORT, error_message(e))


class CheckoutOrchestrator:
    """
    One open checkout.

    Example:
        checkout = CheckoutOrchestrator(Purchase.from_cart(store.state), gateway, cart=store)

        checkout.update_customer(name="Ana", email="ana@example.com", tax_id="123.456.789-09")
        checkout.submit_customer()                  # Ok(Step.PAYMENT)

        checkout.select_method(PaymentMethod.PIX)
        match await checkout.submit_payment():
            case Ok(PixResult() as pix):
                show_qr(pix.qr_code_data_url)
            case Error(e):
                show_error(e.message)

        checkout.close()

    cart: the cart being bought. Edits made while checkout is open are
    charged, and the cart is cleared once the payment is confirmed.
    """

    def __init__(
        self,
        purchase: Purchase,
        gateway: PaymentGateway,
        *,
        cart: CartStore | None = None,
        policy: CheckoutPolicy = CheckoutPolicy(),
        validator: Validator | None = None,
        on_completed: OnCompleted | None = None,
    ) -> None:
        self._purchase = purchase
        self._gateway = gateway
        self._cart = cart
        self._policy = policy
        self._validator = validator
        self._on_completed = on_completed

        self._session = CheckoutSession()
        self._submitting = False
        self._generation = 0
        self._completed = False
        self._watcher: PaymentWatcher | None = None

    # ─────────────────────────────────────────────────────────────────────────
    # Accessors
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def session(self) -> CheckoutSession:
        return self._session

    @property
    def step(self) -> Step:
        return self._session.step

    @property
    def purchase(self) -> Purchase:
        """
        What a submit would charge.

        With a cart attached this follows the cart until a payment is
        accepted, then stays on what was charged.
        """
        if self._cart is not None and self.step is not Step.RESULT:
            return Purchase.from_cart(self._cart.state)
        return self._purchase

    @property
    def total(self) -> Cents:
        return self.purchase.total

    @property
    def policy(self) -> CheckoutPolicy:
        return self._policy

    @property
    def is_submitting(self) -> bool:
        """True while a payment request is in flight (submit disabled)."""
        return self._submitting

    @property
    def watcher(self) -> PaymentWatcher | None:
        return self._watcher

    @property
    def outcome(self) -> Outcome | None:
        return self._session.outcome

    # ─────────────────────────────────────────────────────────────────────────
    # Step 1: Customer
    # ─────────────────────────────────────────────────────────────────────────

    def update_customer(
        self,
        *,
        name: str | None = None,
        email: str | None = None,
        tax_id: str | None = None,
        phone: str | None = None,
    ) -> Result[Customer, CheckoutError]:
        """Change customer fields. Omitted fields keep their value."""
        if self.step is not Step.CUSTOMER:
            return _invalid_step(Step.CUSTOMER, self.step)

        current = self._session.customer
        customer = Customer(
            name=current.name if name is None else name,
            email=current.email if email is None else email,
            tax_id=current.tax_id if tax_id is None else tax_id,
            phone=current.phone if phone is None else phone,
        )
        self._session = replace(self._session, customer=customer)
        return Ok(customer)

    def submit_customer(self) -> Result[Step, CheckoutError]:
        """Validate step 1 locally. Valid → PAYMENT, invalid → stay with field errors."""
        if self.step is not Step.CUSTOMER:
            return _invalid_step(Step.CUSTOMER, self.step)

        errors = validate_customer(self._session.customer)
        if errors:
            self._session = replace(self._session, field_errors=errors)
            return Error(CheckoutError(CheckoutErrorKind.VALIDATION, "Preencha os dados obrigatórios", errors))

        self._session = replace(self._session, step=Step.PAYMENT, field_errors={}, error=None)
        return Ok(Step.PAYMENT)

    # ─────────────────────────────────────────────────────────────────────────
    # Step 2: Payment
    # ─────────────────────────────────────────────────────────────────────────

    def select_method(self, method: PaymentMethod) -> Result[PaymentMethod, CheckoutError]:
        """Pick a rail. Leaving CREDIT_CARD drops card data and installments."""
        if self.step is not Step.PAYMENT:
            return _invalid_step(Step.PAYMENT, self.step)

        if method is PaymentMethod.CREDIT_CARD:
            self._session = replace(self._session, payment_method=method, field_errors={})
        else:
            self._session = replace(
                self._session,
                payment_method=method,
                credit_card=None,
                installments=1,
                field_errors={},
            )
        return Ok(method)

    def set_credit_card(self, card: CreditCard) -> Result[CreditCard, CheckoutError]:
        if self.step is not Step.PAYMENT:
            return _invalid_step(Step.PAYMENT, self.step)
        if self._session.payment_method is not PaymentMethod.CREDIT_CARD:
            return Error(CheckoutError(CheckoutErrorKind.INVALID_STEP, "card data requires CREDIT_CARD"))

        self._session = replace(self._session, credit_card=card)
        return Ok(card)

    def set_installments(self, count: int) -> Result[int, CheckoutError]:
        if self.step is not Step.PAYMENT:
            return _invalid_step(Step.PAYMENT, self.step)

        errors = validate_installments(count, self._policy.max_installments)
        if errors:
            return Error(CheckoutError(CheckoutErrorKind.VALIDATION, errors["installments"], errors))

        self._session = replace(self._session, installments=count)
        return Ok(count)

    def installment_options(self) -> tuple[InstallmentOption, ...]:
        return installment_options(self.total, self._policy.max_installments)

    def back(self) -> Result[Step, CheckoutError]:
        """
        One step back.

        PAYMENT → CUSTOMER. RESULT → PAYMENT only after a declined or
        failed payment; an issued PIX or boleto cannot be undone here.
        """
        if self._submitting:
            return Error(CheckoutError(CheckoutErrorKind.IN_FLIGHT, "payment is being submitted"))

        match self.step:
            case Step.PAYMENT:
                self._session = replace(self._session, step=Step.CUSTOMER, error=None, field_errors={})
                return Ok(Step.CUSTOMER)
            case Step.RESULT if self.outcome in (Outcome.DECLINED, Outcome.FAILED):
                self._stop_watcher()
                self._session = replace(self._session, step=Step.PAYMENT, result=None, outcome=None)
                return Ok(Step.PAYMENT)
            case _:
                return Error(CheckoutError(CheckoutErrorKind.INVALID_STEP, f"cannot go back from {self.step.name}"))

    def _local_payment_errors(self) -> dict[str, str]:
        if self._session.payment_method is not PaymentMethod.CREDIT_CARD:
            return {}
        return {
            **validate_credit_card(self._session.credit_card),
            **validate_installments(self._session.installments, self._policy.max_installments),
        }

    async def submit_payment(self) -> Result[PaymentResult, CheckoutError]:
        """
        Send the payment. One gateway call per accepted call.

        Rejected with IN_FLIGHT while a previous call is running.
        Failure → stay at PAYMENT with session.error set, no retry.
        Success → RESULT with the payment result.
        """
        if self._submitting:
            return Error(CheckoutError(CheckoutErrorKind.IN_FLIGHT, "payment is being submitted"))
        if self.step is not Step.PAYMENT:
            return _invalid_step(Step.PAYMENT, self.step)
        if self.purchase.is_empty:
            return self._fail_submission(CheckoutError(CheckoutErrorKind.EMPTY_PURCHASE, "Nenhum item para comprar"))

        errors = self._local_payment_errors()
        if errors:
            self._session = replace(self._session, field_errors=errors)
            return Error(CheckoutError(CheckoutErrorKind.VALIDATION, "Verifique os dados do pagamento", errors))

        generation = self._generation
        self._submitting = True
        self._session = replace(self._session, field_errors={}, error=None)
        try:
            match await self._check_availability():
                case Error(e) if generation == self._generation:
                    return self._fail_submission(e)
                case Error(e):
                    return Error(e)

            session = self._session
            purchase = self._purchase = self.purchase
            result = await L.catching_async(
                lambda: self._gateway.submit(
                    purchase,
                    session.customer,
                    session.payment_method,
                    credit_card=session.credit_card,
                    installments=session.installments,
                ),
                on_error=_submission_error,
            )
        finally:
            self._submitting = False

        if generation != self._generation:
            logger.info("Discarding payment result for a closed checkout")
            return Error(CheckoutError(CheckoutErrorKind.INVALID_STEP, "checkout was closed"))

        match result:
            case Ok(payment):
                self._enter_result(payment)
                return Ok(payment)
            case Error(e):
                logger.warning("Payment submission failed: %s", e.message)
                return self._fail_submission(e)

    def _fail_submission(self, error: CheckoutError) -> Error[CheckoutError]:
        self._session = replace(self._session, error=error.message)
        return Error(error)

    async def _check_availability(self) -> Result[None, CheckoutError]:
        if not self._policy.validate_cart or self._validator is None:
            return Ok(None)

        match await self._validator():
            case Ok(validation) if validation.ok:
                return Ok(None)
            case Ok(validation):
                titles = ", ".join(item.title for item in validation.removed)
                return Error(CheckoutError(
                    CheckoutErrorKind.UNAVAILABLE_ITEMS,
                    f"Itens indisponíveis removidos do carrinho: {titles}",
                ))
            case Error(e):
                if self._policy.proceed_on_validation_error:
                    logger.warning("Cart validation failed, submitting anyway: %s", e.message)
                    return Ok(None)
                return Error(CheckoutError(CheckoutErrorKind.TRANSPORT, e.message))

    # ─────────────────────────────────────────────────────────────────────────
    # Step 3: Result
    # ─────────────────────────────────────────────────────────────────────────

    def _enter_result(self, payment: PaymentResult) -> None:
        match payment:
            case CreditCardResult(status=CardStatus.CONFIRMED):
                self._session = replace(
                    self._session,
                    step=Step.RESULT,
                    result=payment,
                    outcome=Outcome.CONFIRMED,
                    credit_card=None,
                )
                self._complete(payment)

            case CreditCardResult():
                self._session = replace(
                    self._session,
                    step=Step.RESULT,
                    result=payment,
                    outcome=Outcome.DECLINED,
                    error=DECLINED_MESSAGE,
                )
                logger.info("Card payment for order %s declined", payment.order_id)

            case PixResult():
                self._session = replace(
                    self._session,
                    step=Step.RESULT,
                    result=payment,
                    outcome=Outcome.AWAITING_PAYMENT,
                )
                self._start_watcher(payment, self._policy.pix_watch)

            case BoletoResult():
                self._session = replace(
                    self._session,
                    step=Step.RESULT,
                    result=payment,
                    outcome=Outcome.AWAITING_PAYMENT,
                )
                if self._policy.boleto_watch is not None:
                    self._start_watcher(payment, self._policy.boleto_watch)

    def _start_watcher(self, payment: PixResult | BoletoResult, policy: WatchPolicy) -> None:
        self._stop_watcher()
        generation = self._generation

        def on_confirmed() -> None:
            if generation == self._generation and self.outcome is Outcome.AWAITING_PAYMENT:
                self._session = replace(self._session, outcome=Outcome.CONFIRMED)
                self._complete(payment)

        def on_failed(status: PaymentStatus) -> None:
            if generation == self._generation and self.outcome is Outcome.AWAITING_PAYMENT:
                self._session = replace(
                    self._session,
                    outcome=Outcome.FAILED,
                    error=f"Pagamento não concluído ({status.value})",
                )

        self._watcher = PaymentWatcher(self._gateway.status, policy=policy, cart=self._cart)
        self._watcher.start(payment.order_id, on_confirmed, on_failed)

    def _stop_watcher(self) -> None:
        if self._watcher is not None:
            self._watcher.stop()
            self._watcher = None

    def _complete(self, payment: PaymentResult) -> None:
        if self._completed:
            return
        self._completed = True
        logger.info("Order %s confirmed (%s)", payment.order_id, payment.method.value)

        if self._cart is not None:
            self._cart.clear()
        if self._on_completed is not None:
            self._on_completed(payment)

    async def wait_for_payment(self) -> Outcome | None:
        """Wait until the watcher (if any) settles or is stopped."""
        if self._watcher is not None and self._watcher.state is WatchState.PENDING:
            await self._watcher.wait()
        return self.outcome

    # ─────────────────────────────────────────────────────────────────────────
    # Close
    # ─────────────────────────────────────────────────────────────────────────

    def close(self) -> None:
        """Stop polling, reset to step 1 and discard the session."""
        self._stop_watcher()
        self._generation += 1
        self._completed = False
        self._session = CheckoutSession()
        logger.debug("Checkout closed")


__all__ = ("CheckoutOrchestrator", "Validator", "OnCompleted", "DECLINED_MESSAGE")
