"""Application service: payment status projection.

Consumes payment confirmations delivered to the webhook endpoint and moves
the matching order forward:

    pending --(all charges paid)--> processing --> completed | failed

Once the order is fully paid every line is placed with the supplier,
concurrently. Duplicate deliveries are no-ops, so the gateway may retry
the webhook freely.
"""

from __future__ import annotations

import asyncio

import structlog

from storefront.application.dto import PaymentEventOutcome
from storefront.application.external_call import DEFAULT_TIMEOUT, bounded
from storefront.domain.exceptions import PlacementError
from storefront.domain.gateway.supplier_gateway import SupplierGateway
from storefront.domain.model.order import LinePlacement, Order, OrderLine, OrderStatus
from storefront.domain.model.payment_event import PaymentEvent
from storefront.domain.repository.order_repository import OrderRepository

logger = structlog.get_logger(__name__)


class ProcessPaymentEventHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        supplier: SupplierGateway,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._order_repo = order_repo
        self._supplier = supplier
        self._timeout = timeout

    async def handle(self, event: PaymentEvent) -> PaymentEventOutcome:
        log = logger.bind(transaction_id=event.transaction_id)

        if not event.is_paid:
            log.info("Ignoring payment event", event_type=event.event_type, status=event.payment_status)
            return PaymentEventOutcome(action="ignored")

        order = self._order_repo.get_by_transaction_id(event.transaction_id)
        if order is None:
            log.warning("Payment event for unknown transaction")
            return PaymentEventOutcome(action="ignored")

        log = log.bind(order_id=order.id)
        if order.status != OrderStatus.PENDING or event.transaction_id in order.paid_transactions:
            log.info("Duplicate payment event", status=order.status.value)
            return self._outcome("duplicate", order)

        fully_paid = order.record_payment(event.transaction_id)
        if not fully_paid:
            self._order_repo.save(order)
            log.info("Payment recorded, waiting for remaining charges")
            return self._outcome("recorded", order)

        order.start_processing()
        self._order_repo.save(order)
        log.info("Order paid, placing with supplier", lines=len(order.items))

        placements = await self._place_all(order)
        if all(p.succeeded for p in placements):
            order.complete(placements)
            log.info("Order completed", external_order_ids=order.external_order_ids)
        else:
            order.fail(placements)
            log.error(
                "Order placement failed",
                failed_lines=[p.error for p in placements if not p.succeeded],
            )
        self._order_repo.save(order)
        return self._outcome(order.status.value, order)

    async def _place_all(self, order: Order) -> list[LinePlacement]:
        return list(await asyncio.gather(*(self._place(line) for line in order.items)))

    async def _place(self, line: OrderLine) -> LinePlacement:
        if line.external_service_id is None:
            return LinePlacement(error=f"Service '{line.service_id}' has no supplier reference")
        try:
            external_order_id = await bounded(
                self._supplier.add_order(line.external_service_id, line.link, line.units),
                self._timeout,
                PlacementError,
                what="Order placement",
            )
        except PlacementError as exc:
            return LinePlacement(error=str(exc))
        return LinePlacement(external_order_id=external_order_id)

    @staticmethod
    def _outcome(action: str, order: Order) -> PaymentEventOutcome:
        return PaymentEventOutcome(action=action, order_id=order.id, status=order.status.value)
