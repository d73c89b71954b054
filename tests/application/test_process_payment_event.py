"""Integration tests for the payment status projection."""

import pytest

from storefront.application.process_payment_event import ProcessPaymentEventHandler
from storefront.domain.model.cart import Cart
from storefront.domain.model.order import Order, OrderStatus, PixCharge
from storefront.domain.model.payment_event import PaymentEvent
from storefront.infrastructure.persistence.in_memory_order_repository import (
    InMemoryOrderRepository,
)
from tests.fakes import FakeSupplierGateway, make_customer, make_service

LINKS = ["https://instagram.com/acme", "https://instagram.com/other"]


def _setup(lines: int = 1, external_service_id: int | None = 11):
    cart = Cart("cart-1")
    for n in range(lines):
        cart.add(
            make_service(f"api-{n}", price="8.00", external_service_id=external_service_id),
            "1,5",
            LINKS[n],
        )
    order = Order.create(make_customer(), cart.snapshot())
    order.attach_charges(
        [PixCharge(f"tx_{n}", "qr", "pix") for n in range(lines)]
    )
    order_repo = InMemoryOrderRepository()
    order_repo.save(order)
    supplier = FakeSupplierGateway()
    handler = ProcessPaymentEventHandler(order_repo, supplier, timeout=0.5)
    return order, supplier, handler


def _paid(transaction_id: str = "tx_0") -> PaymentEvent:
    return PaymentEvent("TRANSACTION_PAID", transaction_id, "COMPLETED")


class TestPaidEvent:

    @pytest.mark.asyncio
    async def test_paid_event_places_and_completes(self):
        order, supplier, handler = _setup()
        outcome = await handler.handle(_paid())

        assert outcome.action == "completed"
        assert order.status == OrderStatus.COMPLETED
        assert supplier.placed == [(11, LINKS[0], 1500)]
        assert order.external_order_ids == [5000]

    @pytest.mark.asyncio
    async def test_placement_error_fails_order(self):
        order, supplier, handler = _setup()
        supplier.fail_links.add(LINKS[0])

        outcome = await handler.handle(_paid())
        assert outcome.action == "failed"
        assert order.status == OrderStatus.FAILED
        assert "rejected" in order.placements[0].error

    @pytest.mark.asyncio
    async def test_placement_timeout_fails_order(self):
        order, supplier, handler = _setup()
        supplier.hang_links.add(LINKS[0])

        await handler.handle(_paid())
        assert order.status == OrderStatus.FAILED
        assert "timed out" in order.placements[0].error

    @pytest.mark.asyncio
    async def test_partial_failure_reported_per_line(self):
        order, supplier, handler = _setup(lines=2)
        supplier.fail_links.add(LINKS[1])

        await handler.handle(_paid("tx_0"))
        await handler.handle(_paid("tx_1"))

        assert order.status == OrderStatus.FAILED
        assert order.placements[0].succeeded
        assert not order.placements[1].succeeded
        assert len(order.failed_lines) == 1

    @pytest.mark.asyncio
    async def test_missing_supplier_reference_fails_line(self):
        order, supplier, handler = _setup(external_service_id=None)
        await handler.handle(_paid())
        assert order.status == OrderStatus.FAILED
        assert supplier.placed == []


class TestMultiLineOrders:

    @pytest.mark.asyncio
    async def test_waits_for_every_charge(self):
        order, supplier, handler = _setup(lines=2)

        outcome = await handler.handle(_paid("tx_0"))
        assert outcome.action == "recorded"
        assert order.status == OrderStatus.PENDING
        assert supplier.placed == []

        outcome = await handler.handle(_paid("tx_1"))
        assert outcome.action == "completed"
        assert len(supplier.placed) == 2


class TestIdempotence:

    @pytest.mark.asyncio
    async def test_duplicate_after_completion_is_noop(self):
        order, supplier, handler = _setup()
        await handler.handle(_paid())

        outcome = await handler.handle(_paid())
        assert outcome.action == "duplicate"
        assert order.status == OrderStatus.COMPLETED
        assert len(supplier.placed) == 1

    @pytest.mark.asyncio
    async def test_duplicate_after_failure_does_not_retry(self):
        order, supplier, handler = _setup()
        supplier.fail_links.add(LINKS[0])
        await handler.handle(_paid())

        supplier.fail_links.clear()
        await handler.handle(_paid())
        assert order.status == OrderStatus.FAILED
        assert supplier.placed == []

    @pytest.mark.asyncio
    async def test_duplicate_partial_payment_is_noop(self):
        order, supplier, handler = _setup(lines=2)
        await handler.handle(_paid("tx_0"))
        outcome = await handler.handle(_paid("tx_0"))
        assert outcome.action == "duplicate"
        assert order.status == OrderStatus.PENDING


class TestIgnoredEvents:

    @pytest.mark.asyncio
    async def test_non_paid_event_ignored(self):
        order, _, handler = _setup()
        outcome = await handler.handle(PaymentEvent("TRANSACTION_CREATED", "tx_0", "PENDING"))
        assert outcome.action == "ignored"
        assert order.status == OrderStatus.PENDING

    @pytest.mark.asyncio
    async def test_unknown_transaction_ignored(self):
        order, _, handler = _setup()
        outcome = await handler.handle(_paid("tx_unknown"))
        assert outcome.action == "ignored"
        assert order.status == OrderStatus.PENDING
