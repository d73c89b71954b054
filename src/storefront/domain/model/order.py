"""Order aggregate — an immutable snapshot of a confirmed cart.

The Order is built once, when checkout is confirmed. Its lines and total
never change afterwards; only its status moves, driven by payment and
supplier placement events.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from storefront.domain.exceptions import ValidationError
from storefront.domain.model import pricing
from storefront.domain.model.cart import CartLine
from storefront.domain.model.customer import Customer
from storefront.domain.model.value_objects import Money


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class OrderLine:
    """Captures a cart line at confirmation time.

    ``unit_price`` is the effective price (floor already applied), so the
    line total never depends on later catalog changes.
    """

    service_id: str
    service_name: str
    external_service_id: int | None
    link: str
    quantity: Decimal
    unit_price: Money  # locked at confirmation time

    @staticmethod
    def from_cart_line(line: CartLine) -> OrderLine:
        return OrderLine(
            service_id=line.service.id,
            service_name=line.service.name,
            external_service_id=line.service.external_service_id,
            link=line.link,
            quantity=line.quantity,
            unit_price=pricing.effective_price(line.service.price),
        )

    @property
    def line_total(self) -> Money:
        return pricing.line_total(self.unit_price, self.quantity)

    @property
    def units(self) -> int:
        return pricing.to_units(self.quantity)


@dataclass(frozen=True)
class PixCharge:
    """Payment reference returned by the gateway for one order line."""

    transaction_id: str
    qr_code_image: str  # data URI / base64 PNG
    pix_payload: str  # copy-and-paste "Pix copia e cola" string


@dataclass(frozen=True)
class LinePlacement:
    """Outcome of placing one order line with the supplier."""

    external_order_id: int | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.external_order_id is not None and self.error is None


@dataclass
class Order:
    """Aggregate root for storefront orders.

    Use the ``Order.create()`` factory for new orders — it enforces all
    business rules.
    """

    id: int | None
    customer: Customer
    items: tuple[OrderLine, ...]
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    charges: tuple[PixCharge, ...] = ()
    paid_transactions: set[str] = field(default_factory=set)
    placements: tuple[LinePlacement, ...] = ()
    cart_id: str | None = None  # owning cart

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        customer: Customer, lines: Iterable[CartLine], cart_id: str | None = None
    ) -> Order:
        """Build a pending order from a snapshot of cart lines."""
        customer.validate()
        items = tuple(OrderLine.from_cart_line(line) for line in lines)
        if not items:
            raise ValidationError("Order must contain at least one item")
        return Order(id=None, customer=customer, items=items, cart_id=cart_id)

    # --- Payment --------------------------------------------------------------

    def attach_charges(self, charges: Iterable[PixCharge]) -> None:
        """Store the Pix charges, one per line item, in line order."""
        charges = tuple(charges)
        if self.charges:
            raise ValidationError("Payment charges already attached")
        if len(charges) != len(self.items):
            raise ValidationError(
                f"Expected {len(self.items)} Pix charges, got {len(charges)}"
            )
        self.charges = charges

    def record_payment(self, transaction_id: str) -> bool:
        """Mark *transaction_id* as paid.

        Returns True once every charge of the order has been paid.
        """
        if transaction_id not in self.transaction_ids:
            raise ValidationError(
                f"Transaction '{transaction_id}' does not belong to order #{self.id}"
            )
        self.paid_transactions.add(transaction_id)
        return self.is_fully_paid

    # --- State transitions ----------------------------------------------------

    def start_processing(self) -> None:
        """Transition PENDING -> PROCESSING once payment is confirmed."""
        if self.status != OrderStatus.PENDING:
            raise ValidationError(
                f"Cannot process order — current status is {self.status.value}, "
                f"expected pending"
            )
        if not self.is_fully_paid:
            raise ValidationError("Cannot process an order that is not fully paid")
        self.status = OrderStatus.PROCESSING

    def complete(self, placements: Iterable[LinePlacement]) -> None:
        """Transition PROCESSING -> COMPLETED after every line was placed."""
        placements = self._check_placements(placements)
        if not all(p.succeeded for p in placements):
            raise ValidationError("Cannot complete order with failed placements")
        self.placements = placements
        self.status = OrderStatus.COMPLETED

    def fail(self, placements: Iterable[LinePlacement]) -> None:
        """Transition PROCESSING -> FAILED. Terminal; there is no automatic retry."""
        self.placements = self._check_placements(placements)
        self.status = OrderStatus.FAILED

    # --- Computed properties --------------------------------------------------

    @property
    def total(self) -> Money:
        result = Money.zero()
        for item in self.items:
            result = result + item.line_total
        return result

    @property
    def transaction_ids(self) -> list[str]:
        return [charge.transaction_id for charge in self.charges]

    @property
    def is_fully_paid(self) -> bool:
        return bool(self.charges) and set(self.transaction_ids) <= self.paid_transactions

    @property
    def external_order_ids(self) -> list[int]:
        return [p.external_order_id for p in self.placements if p.external_order_id is not None]

    @property
    def failed_lines(self) -> list[tuple[OrderLine, LinePlacement]]:
        return [
            (item, placement)
            for item, placement in zip(self.items, self.placements)
            if not placement.succeeded
        ]

    @property
    def is_settled(self) -> bool:
        """True once the order reached a terminal status."""
        return self.status in (OrderStatus.COMPLETED, OrderStatus.FAILED)

    # --- Internal helpers -----------------------------------------------------

    def _check_placements(
        self, placements: Iterable[LinePlacement]
    ) -> tuple[LinePlacement, ...]:
        if self.status != OrderStatus.PROCESSING:
            raise ValidationError(
                f"Cannot settle order in {self.status.value} status"
            )
        placements = tuple(placements)
        if len(placements) != len(self.items):
            raise ValidationError(
                f"Expected {len(self.items)} placements, got {len(placements)}"
            )
        return placements
