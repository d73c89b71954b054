"""Integration tests for the cart and checkout use cases."""

import asyncio

import pytest

from storefront.application.cart import (
    AddToCartHandler,
    CreateCartHandler,
    RemoveFromCartHandler,
    ShowCartHandler,
    UpdateCartQuantityHandler,
)
from storefront.application.checkout import (
    PAYMENT_FAILED,
    CloseCheckoutHandler,
    ConfirmCheckoutHandler,
    StartCheckoutHandler,
    SubmitCustomerHandler,
)
from storefront.application.dto import CheckoutDTO
from storefront.domain.exceptions import EntityNotFoundError, PaymentError, ValidationError
from storefront.domain.model.order import OrderStatus
from storefront.domain.model.value_objects import Money
from storefront.infrastructure.persistence.in_memory_cart_repository import InMemoryCartRepository
from storefront.infrastructure.persistence.in_memory_catalog_repository import (
    InMemoryCatalogRepository,
)
from storefront.infrastructure.persistence.in_memory_order_repository import (
    InMemoryOrderRepository,
)
from tests.fakes import FakePaymentGateway, make_customer, make_service

LINK = "https://instagram.com/acme"


def _setup():
    catalog_repo = InMemoryCatalogRepository(
        [make_service("api-1", price="8.00"), make_service("api-2", price="1.00")]
    )
    cart_repo = InMemoryCartRepository()
    order_repo = InMemoryOrderRepository()
    gateway = FakePaymentGateway()
    cart_id = CreateCartHandler(cart_repo).handle().id
    return catalog_repo, cart_repo, order_repo, gateway, cart_id


def _to_review(cart_repo, catalog_repo, cart_id, *items):
    add = AddToCartHandler(cart_repo, catalog_repo)
    for service_id, qty in items or [("api-1", "1,5")]:
        add.handle(cart_id, service_id, qty, LINK)
    StartCheckoutHandler(cart_repo).handle(cart_id)
    SubmitCustomerHandler(cart_repo).handle(cart_id, make_customer())


class TestCartHandlers:

    def test_add_update_remove(self):
        catalog_repo, cart_repo, _, _, cart_id = _setup()
        dto = AddToCartHandler(cart_repo, catalog_repo).handle(cart_id, "api-1", "2", LINK)
        assert dto.total == str(Money.of("16.00"))

        dto = UpdateCartQuantityHandler(cart_repo).handle(cart_id, "api-1", "3")
        assert dto.lines[0].quantity == "3"
        assert dto.lines[0].units == 3000

        dto = RemoveFromCartHandler(cart_repo).handle(cart_id, "api-1")
        assert dto.lines == []

    def test_unknown_service_rejected(self):
        catalog_repo, cart_repo, _, _, cart_id = _setup()
        with pytest.raises(EntityNotFoundError, match="Service not found"):
            AddToCartHandler(cart_repo, catalog_repo).handle(cart_id, "api-404", 1, LINK)

    def test_unknown_cart_rejected(self):
        _, cart_repo, _, _, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="Cart"):
            ShowCartHandler(cart_repo).handle("nope")


class TestConfirmCheckout:

    @pytest.mark.asyncio
    async def test_confirm_builds_pending_order_with_charges(self):
        catalog_repo, cart_repo, order_repo, gateway, cart_id = _setup()
        _to_review(cart_repo, catalog_repo, cart_id)

        handler = ConfirmCheckoutHandler(cart_repo, order_repo, gateway, timeout=1)
        dto = await handler.handle(cart_id)

        assert dto.step == "payment_presented"
        assert dto.order.status == "pending"
        assert dto.order.total == str(Money.of("12.00"))
        assert [c.transaction_id for c in dto.order.charges] == ["tx_1"]

        order = order_repo.get_by_transaction_id("tx_1")
        assert order.total == Money.of("12.00")
        assert order.status == OrderStatus.PENDING

    @pytest.mark.asyncio
    async def test_one_charge_per_line(self):
        catalog_repo, cart_repo, order_repo, gateway, cart_id = _setup()
        _to_review(cart_repo, catalog_repo, cart_id, ("api-1", "1"), ("api-2", "2"))

        dto = await ConfirmCheckoutHandler(cart_repo, order_repo, gateway).handle(cart_id)
        assert len(gateway.calls) == 2
        assert len(dto.order.charges) == 2
        assert dto.order.total == str(Money.of("11.00"))

    @pytest.mark.asyncio
    async def test_order_total_unaffected_by_later_cart_mutation(self):
        catalog_repo, cart_repo, order_repo, gateway, cart_id = _setup()
        _to_review(cart_repo, catalog_repo, cart_id)
        dto = await ConfirmCheckoutHandler(cart_repo, order_repo, gateway).handle(cart_id)

        UpdateCartQuantityHandler(cart_repo).handle(cart_id, "api-1", "9")
        assert order_repo.get_by_id(dto.order.id).total == Money.of("12.00")

    @pytest.mark.asyncio
    async def test_payment_failure_keeps_review_step_and_cart(self):
        catalog_repo, cart_repo, order_repo, gateway, cart_id = _setup()
        _to_review(cart_repo, catalog_repo, cart_id)
        gateway.should_succeed = False

        handler = ConfirmCheckoutHandler(cart_repo, order_repo, gateway)
        with pytest.raises(PaymentError, match="Could not create the Pix payment"):
            await handler.handle(cart_id)

        session = cart_repo.get_checkout(cart_id)
        assert session.step.value == "reviewing_order"
        assert session.last_error == PAYMENT_FAILED
        assert not cart_repo.get(cart_id).is_empty
        assert order_repo.list_all() == []

        # Retry succeeds
        gateway.should_succeed = True
        dto = await handler.handle(cart_id)
        assert dto.step == "payment_presented"

    @pytest.mark.asyncio
    async def test_concurrent_confirmations_create_one_order(self):
        catalog_repo, cart_repo, order_repo, gateway, cart_id = _setup()
        _to_review(cart_repo, catalog_repo, cart_id)
        gateway.delay = 0.05

        handler = ConfirmCheckoutHandler(cart_repo, order_repo, gateway, timeout=1)
        first, second = await asyncio.gather(
            handler.handle(cart_id), handler.handle(cart_id), return_exceptions=True
        )

        assert isinstance(first, CheckoutDTO)
        assert first.step == "payment_presented"
        assert isinstance(second, ValidationError)
        assert len(order_repo.list_all()) == 1
        assert len(gateway.calls) == 1

    @pytest.mark.asyncio
    async def test_order_records_its_cart(self):
        catalog_repo, cart_repo, order_repo, gateway, cart_id = _setup()
        _to_review(cart_repo, catalog_repo, cart_id)

        dto = await ConfirmCheckoutHandler(cart_repo, order_repo, gateway).handle(cart_id)

        assert order_repo.get_by_id(dto.order.id).cart_id == cart_id
        assert [o.id for o in order_repo.list_by_cart(cart_id)] == [dto.order.id]
        assert order_repo.list_by_cart("other-cart") == []

    @pytest.mark.asyncio
    async def test_confirm_requires_review_step(self):
        catalog_repo, cart_repo, order_repo, gateway, cart_id = _setup()
        AddToCartHandler(cart_repo, catalog_repo).handle(cart_id, "api-1", 1, LINK)
        StartCheckoutHandler(cart_repo).handle(cart_id)

        with pytest.raises(ValidationError, match="expected reviewing_order"):
            await ConfirmCheckoutHandler(cart_repo, order_repo, gateway).handle(cart_id)
        assert gateway.calls == []


class TestCloseCheckout:

    @pytest.mark.asyncio
    async def test_close_after_payment_clears_cart(self):
        catalog_repo, cart_repo, order_repo, gateway, cart_id = _setup()
        _to_review(cart_repo, catalog_repo, cart_id)
        await ConfirmCheckoutHandler(cart_repo, order_repo, gateway).handle(cart_id)

        dto = CloseCheckoutHandler(cart_repo).handle(cart_id)
        assert dto.step == "closed"
        assert cart_repo.get(cart_id).is_empty
        assert cart_repo.get_checkout(cart_id) is None

    def test_cancel_keeps_cart(self):
        catalog_repo, cart_repo, _, _, cart_id = _setup()
        _to_review(cart_repo, catalog_repo, cart_id)

        CloseCheckoutHandler(cart_repo).handle(cart_id)
        assert len(cart_repo.get(cart_id).lines) == 1
