"""Checkout session — the three-step checkout flow for one cart.

    collecting_customer -> reviewing_order -> confirming -> payment_presented

``confirming`` holds the session while the Pix charges are being created,
so a second confirmation of the same cart is rejected. Closing after the
payment was presented empties the cart; closing at any earlier step is a
cancel and leaves the cart untouched.
"""

from __future__ import annotations

from enum import Enum

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.cart import Cart
from storefront.domain.model.customer import Customer
from storefront.domain.model.order import Order


class CheckoutStep(Enum):
    COLLECTING_CUSTOMER = "collecting_customer"
    REVIEWING_ORDER = "reviewing_order"
    CONFIRMING = "confirming"
    PAYMENT_PRESENTED = "payment_presented"
    CLOSED = "closed"


class CheckoutSession:

    def __init__(self, cart: Cart) -> None:
        if cart.is_empty:
            raise ValidationError("Cannot check out an empty cart")
        self.cart = cart
        self.step = CheckoutStep.COLLECTING_CUSTOMER
        self.customer: Customer | None = None
        self.order: Order | None = None
        self.last_error: str | None = None

    def submit_customer(self, customer: Customer) -> None:
        self._expect(CheckoutStep.COLLECTING_CUSTOMER)
        customer.validate()
        self.customer = customer
        self.step = CheckoutStep.REVIEWING_ORDER

    def back(self) -> None:
        """Return from the review step to the customer form."""
        self._expect(CheckoutStep.REVIEWING_ORDER)
        self.step = CheckoutStep.COLLECTING_CUSTOMER

    def begin_confirmation(self) -> Customer:
        """Lock the reviewed order for payment; returns the customer under review."""
        self._expect(CheckoutStep.REVIEWING_ORDER)
        if self.cart.is_empty:
            raise ValidationError("Cannot confirm an empty cart")
        if self.customer is None:
            raise ValidationError("Cannot confirm without customer details")
        self.step = CheckoutStep.CONFIRMING
        return self.customer

    def payment_failed(self, message: str) -> None:
        """Back to the review step; the cart is kept so the visitor can retry."""
        self._expect(CheckoutStep.CONFIRMING)
        self.last_error = message
        self.step = CheckoutStep.REVIEWING_ORDER

    def present_payment(self, order: Order) -> None:
        self._expect(CheckoutStep.CONFIRMING)
        self.order = order
        self.last_error = None
        self.step = CheckoutStep.PAYMENT_PRESENTED

    def close(self) -> bool:
        """Close the flow. Returns True if the checkout was completed."""
        if self.step == CheckoutStep.CLOSED:
            return self.order is not None
        if self.step == CheckoutStep.CONFIRMING:
            raise ValidationError("Cannot close checkout while the payment is being created")
        completed = self.step == CheckoutStep.PAYMENT_PRESENTED
        if completed:
            self.cart.clear()
        self.step = CheckoutStep.CLOSED
        return completed

    def _expect(self, step: CheckoutStep) -> None:
        if self.step != step:
            raise ValidationError(
                f"Checkout is at step {self.step.value}, expected {step.value}"
            )
