"""Unit tests for the Order aggregate and its status transitions."""

from decimal import Decimal

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.cart import Cart
from storefront.domain.model.order import LinePlacement, Order, OrderStatus, PixCharge
from storefront.domain.model.value_objects import Money
from tests.fakes import make_customer, make_service

LINK = "https://instagram.com/acme"


def _cart(*rows: tuple[str, str, str]) -> Cart:
    cart = Cart("cart-1")
    for service_id, price, qty in rows or [("api-1", "8.00", "1.5")]:
        cart.add(make_service(service_id, price=price), qty, LINK)
    return cart


def _charge(n: int) -> PixCharge:
    return PixCharge(transaction_id=f"tx_{n}", qr_code_image="qr", pix_payload="pix")


def _paid_order(lines: int = 1) -> Order:
    cart = _cart(*[(f"api-{n}", "8.00", "1") for n in range(lines)])
    order = Order.create(make_customer(), cart.snapshot())
    order.attach_charges([_charge(n) for n in range(lines)])
    for n in range(lines):
        order.record_payment(f"tx_{n}")
    return order


class TestOrderCreation:

    def test_happy_path(self):
        order = Order.create(make_customer(), _cart().snapshot())
        assert order.status == OrderStatus.PENDING
        assert order.id is None  # assigned by repository
        assert order.total == Money.of("12.00")

    def test_total_matches_cart_and_ignores_later_mutation(self):
        cart = _cart(("api-1", "8.00", "1.5"), ("api-2", "1.00", "2"))
        order = Order.create(make_customer(), cart.snapshot())
        assert order.total == cart.total() == Money.of("15.00")

        cart.set_quantity("api-1", 10)
        cart.clear()
        assert order.total == Money.of("15.00")

    def test_lines_lock_effective_price(self):
        order = Order.create(make_customer(), _cart(("api-1", "1.00", "2")).snapshot())
        assert order.items[0].unit_price == Money.of("1.50")
        assert order.items[0].units == 2000

    def test_empty_cart_rejected(self):
        with pytest.raises(ValidationError, match="at least one item"):
            Order.create(make_customer(), [])

    def test_missing_customer_field_rejected(self):
        with pytest.raises(ValidationError, match="email"):
            Order.create(make_customer(email=" "), _cart().snapshot())


class TestCharges:

    def test_one_charge_per_line(self):
        order = Order.create(make_customer(), _cart().snapshot())
        with pytest.raises(ValidationError, match="Expected 1 Pix charges"):
            order.attach_charges([_charge(1), _charge(2)])

    def test_fully_paid_only_after_every_charge(self):
        cart = _cart(("api-1", "8.00", "1"), ("api-2", "8.00", "1"))
        order = Order.create(make_customer(), cart.snapshot())
        order.attach_charges([_charge(1), _charge(2)])
        assert order.record_payment("tx_1") is False
        assert order.record_payment("tx_2") is True

    def test_foreign_transaction_rejected(self):
        order = Order.create(make_customer(), _cart().snapshot())
        order.attach_charges([_charge(1)])
        with pytest.raises(ValidationError, match="does not belong"):
            order.record_payment("tx_999")


class TestTransitions:

    def test_processing_then_completed(self):
        order = _paid_order()
        order.start_processing()
        assert order.status == OrderStatus.PROCESSING
        order.complete([LinePlacement(external_order_id=77)])
        assert order.status == OrderStatus.COMPLETED
        assert order.external_order_ids == [77]

    def test_processing_then_failed_keeps_per_line_outcome(self):
        order = _paid_order(lines=2)
        order.start_processing()
        order.fail([LinePlacement(external_order_id=77), LinePlacement(error="boom")])
        assert order.status == OrderStatus.FAILED
        assert [p.error for _, p in order.failed_lines] == ["boom"]

    def test_unpaid_order_cannot_process(self):
        order = Order.create(make_customer(), _cart().snapshot())
        order.attach_charges([_charge(1)])
        with pytest.raises(ValidationError, match="not fully paid"):
            order.start_processing()

    def test_complete_requires_processing(self):
        order = _paid_order()
        with pytest.raises(ValidationError, match="pending status"):
            order.complete([LinePlacement(external_order_id=1)])

    def test_complete_rejects_failed_placement(self):
        order = _paid_order()
        order.start_processing()
        with pytest.raises(ValidationError, match="failed placements"):
            order.complete([LinePlacement(error="x")])

    def test_settled_order_cannot_restart(self):
        order = _paid_order()
        order.start_processing()
        order.complete([LinePlacement(external_order_id=1)])
        assert order.is_settled
        with pytest.raises(ValidationError, match="expected pending"):
            order.start_processing()


def test_order_line_total_uses_decimal_quantity():
    order = Order.create(make_customer(), _cart(("api-1", "3.33", "1.5")).snapshot())
    assert order.items[0].line_total.amount == Decimal("5.00")
