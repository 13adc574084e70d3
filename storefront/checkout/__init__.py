"""
Checkout: customer data → payment method → result.

    from storefront import checkout as Co

    checkout = Co.CheckoutOrchestrator(
        Co.Purchase.from_cart(store.state),
        Co.PaymentGateway(client),
        cart=store,
        policy=Co.CheckoutPolicy().with_boleto_watch(None),
    )

    checkout.update_customer(name="Ana", email="ana@example.com", tax_id="12345678909")
    checkout.submit_customer()

    checkout.select_method(Co.PaymentMethod.CREDIT_CARD)
    checkout.set_credit_card(Co.CreditCard("ANA", "4111111111111111", "12", "2030", "123"))
    checkout.set_installments(3)

    match await checkout.submit_payment():
        case Ok(Co.CreditCardResult(status=Co.CardStatus.CONFIRMED)):
            ...
        case Ok(Co.PixResult() as pix):
            ...
        case Error(e):
            ...
"""

from storefront.checkout._types import (
    PaymentMethod,
    Customer,
    CreditCard,
    CheckoutItem,
    Purchase,
    CardStatus,
    CreditCardResult,
    PixResult,
    BoletoResult,
    PaymentResult,
    InstallmentOption,
    Step,
    Outcome,
    CheckoutSession,
)
from storefront.checkout._errors import CheckoutErrorKind, CheckoutError, PaymentResponseError
from storefront.checkout._installments import (
    MAX_INSTALLMENTS,
    installment_amount,
    installment_options,
    format_brl,
)
from storefront.checkout._validation import (
    FieldErrors,
    validate_customer,
    validate_credit_card,
    validate_installments,
)
from storefront.checkout._policy import CheckoutPolicy
from storefront.checkout._gateway import (
    CREATE_PATH,
    STATUS_PATH,
    build_request,
    parse_result,
    PaymentGateway,
)
from storefront.checkout._orchestrator import (
    CheckoutOrchestrator,
    Validator,
    OnCompleted,
    DECLINED_MESSAGE,
)

__all__ = (
    # Types
    "PaymentMethod",
    "Customer",
    "CreditCard",
    "CheckoutItem",
    "Purchase",
    "CardStatus",
    "CreditCardResult",
    "PixResult",
    "BoletoResult",
    "PaymentResult",
    "InstallmentOption",
    "Step",
    "Outcome",
    "CheckoutSession",
    # Errors
    "CheckoutErrorKind",
    "CheckoutError",
    "PaymentResponseError",
    # Installments
    "MAX_INSTALLMENTS",
    "installment_amount",
    "installment_options",
    "format_brl",
    # Validation
    "FieldErrors",
    "validate_customer",
    "validate_credit_card",
    "validate_installments",
    # Policy
    "CheckoutPolicy",
    # Gateway
    "CREATE_PATH",
    "STATUS_PATH",
    "build_request",
    "parse_result",
    "PaymentGateway",
    # Orchestrator
    "CheckoutOrchestrator",
    "Validator",
    "OnCompleted",
    "DECLINED_MESSAGE",
)
