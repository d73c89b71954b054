"""Application services: checkout use cases.

Drives the CheckoutSession of a cart through its three steps. Confirmation
builds the Order from a snapshot of the cart and asks the Pix gateway for
one charge per line item; the charges are created concurrently and joined
before the payment is presented.
"""

from __future__ import annotations

import asyncio

import structlog

from storefront.application.cart import load_cart
from storefront.application.dto import CheckoutDTO
from storefront.application.external_call import DEFAULT_TIMEOUT, bounded
from storefront.application.mapping import cart_to_dto, order_to_dto
from storefront.domain.exceptions import EntityNotFoundError, PaymentError
from storefront.domain.gateway.payment_gateway import PaymentGateway
from storefront.domain.model.checkout import CheckoutSession
from storefront.domain.model.customer import Customer
from storefront.domain.model.order import Order, PixCharge
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.order_repository import OrderRepository

logger = structlog.get_logger(__name__)

PAYMENT_FAILED = "Could not create the Pix payment. Please try again."


def load_checkout(cart_repo: CartRepository, cart_id: str) -> CheckoutSession:
    session = cart_repo.get_checkout(cart_id)
    if session is None:
        raise EntityNotFoundError(f"No checkout in progress for cart '{cart_id}'")
    return session


def checkout_to_dto(session: CheckoutSession) -> CheckoutDTO:
    return CheckoutDTO(
        cart_id=session.cart.id,
        step=session.step.value,
        cart=cart_to_dto(session.cart),
        order=order_to_dto(session.order) if session.order is not None else None,
        error=session.last_error,
    )


class StartCheckoutHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(self, cart_id: str) -> CheckoutDTO:
        cart = load_cart(self._cart_repo, cart_id)
        session = CheckoutSession(cart)
        self._cart_repo.save_checkout(session)
        return checkout_to_dto(session)


class SubmitCustomerHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(self, cart_id: str, customer: Customer) -> CheckoutDTO:
        session = load_checkout(self._cart_repo, cart_id)
        session.submit_customer(customer)
        return checkout_to_dto(session)


class StepBackHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(self, cart_id: str) -> CheckoutDTO:
        session = load_checkout(self._cart_repo, cart_id)
        session.back()
        return checkout_to_dto(session)


class ConfirmCheckoutHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        order_repo: OrderRepository,
        payment_gateway: PaymentGateway,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._cart_repo = cart_repo
        self._order_repo = order_repo
        self._payment_gateway = payment_gateway
        self._timeout = timeout

    async def handle(self, cart_id: str) -> CheckoutDTO:
        """Confirm the reviewed order and present its Pix payment.

        Steps:
        1. Move the session to ``confirming`` before the first await, so a
           concurrent confirmation of the same cart is rejected.
        2. Snapshot the cart into a pending Order (total locked here).
        3. Create one Pix charge per line, concurrently.
        4. On any failure go back to the review step and keep the cart.
        5. Otherwise attach the charges, advance and only then persist.
        """
        session = load_checkout(self._cart_repo, cart_id)
        customer = session.begin_confirmation()
        order = Order.create(customer, session.cart.snapshot(), cart_id=cart_id)

        try:
            charges = await self._create_charges(order)
        except PaymentError as exc:
            logger.warning("Pix payment creation failed", cart_id=cart_id, error=str(exc))
            session.payment_failed(PAYMENT_FAILED)
            raise PaymentError(PAYMENT_FAILED) from exc
        except Exception:
            session.payment_failed(PAYMENT_FAILED)
            raise

        order.attach_charges(charges)
        session.present_payment(order)
        self._order_repo.save(order)
        logger.info(
            "Order confirmed",
            order_id=order.id,
            total=str(order.total),
            transactions=order.transaction_ids,
        )
        return checkout_to_dto(session)

    async def _create_charges(self, order: Order) -> list[PixCharge]:
        results = await asyncio.gather(
            *(
                bounded(
                    self._payment_gateway.create_charge(order.customer, line),
                    self._timeout,
                    PaymentError,
                    what="Pix charge creation",
                )
                for line in order.items
            ),
            return_exceptions=True,
        )

        charges: list[PixCharge] = []
        errors: list[str] = []
        for line, result in zip(order.items, results):
            if isinstance(result, PaymentError):
                errors.append(f"{line.service_name} ({line.link}): {result}")
            elif isinstance(result, BaseException):
                raise result
            else:
                charges.append(result)

        if errors:
            raise PaymentError("; ".join(errors))
        return charges


class CloseCheckoutHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(self, cart_id: str) -> CheckoutDTO:
        """Close the flow: empties the cart only after payment was presented."""
        session = load_checkout(self._cart_repo, cart_id)
        completed = session.close()
        self._cart_repo.discard_checkout(cart_id)
        if not completed:
            logger.info("Checkout cancelled", cart_id=cart_id)
        return checkout_to_dto(session)
