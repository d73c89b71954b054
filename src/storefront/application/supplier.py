"""Application services: supplier account queries and order cancellation.

Thin wrappers over the supplier port used by the CLI and the balance
endpoint. None of these feed business decisions.
"""

from __future__ import annotations

from storefront.application.external_call import DEFAULT_TIMEOUT, bounded
from storefront.domain.exceptions import ValidationError
from storefront.domain.gateway.supplier_gateway import (
    Balance,
    CancelResult,
    SupplierGateway,
    SupplierOrderStatus,
)


class ShowBalanceHandler:

    def __init__(self, supplier: SupplierGateway, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._supplier = supplier
        self._timeout = timeout

    async def handle(self) -> Balance:
        return await bounded(self._supplier.get_balance(), self._timeout, what="Balance query")


class CheckSupplierOrderHandler:

    def __init__(self, supplier: SupplierGateway, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._supplier = supplier
        self._timeout = timeout

    async def handle(self, external_order_id: int) -> SupplierOrderStatus:
        return await bounded(
            self._supplier.get_order_status(external_order_id),
            self._timeout,
            what="Order status query",
        )


class RequestRefillHandler:

    def __init__(self, supplier: SupplierGateway, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._supplier = supplier
        self._timeout = timeout

    async def handle(self, external_order_id: int) -> str:
        return await bounded(
            self._supplier.create_refill(external_order_id),
            self._timeout,
            what="Refill request",
        )


class CancelSupplierOrdersHandler:

    def __init__(self, supplier: SupplierGateway, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._supplier = supplier
        self._timeout = timeout

    async def handle(self, external_order_ids: list[int]) -> list[CancelResult]:
        if not external_order_ids:
            raise ValidationError("At least one supplier order ID is required")
        return await bounded(
            self._supplier.cancel_orders(list(dict.fromkeys(external_order_ids))),
            self._timeout,
            what="Cancel request",
        )
