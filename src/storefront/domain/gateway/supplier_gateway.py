"""Supplier panel port (abstract interface).

The supplier is the wholesale engagement panel that owns the service
catalog and executes the orders. Adapters raise ExternalServiceError on
any failure.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from storefront.domain.service.catalog_mapper import CatalogRecord


@dataclass(frozen=True)
class SupplierOrderStatus:
    external_order_id: int
    status: str
    charge: str = ""
    start_count: str = ""
    remains: str = ""
    currency: str = ""


@dataclass(frozen=True)
class CancelResult:
    """Per-order answer to a cancellation request."""

    external_order_id: int
    error: str | None = None

    @property
    def accepted(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class Balance:
    """Supplier account balance. Advisory display only."""

    balance: str
    currency: str


class SupplierGateway(ABC):

    @abstractmethod
    async def list_services(self) -> list[CatalogRecord]:
        """Fetch the raw service catalog."""

    @abstractmethod
    async def add_order(self, external_service_id: int, link: str, units: int) -> int:
        """Place an order for *units* units; returns the supplier order ID."""

    @abstractmethod
    async def get_order_status(self, external_order_id: int) -> SupplierOrderStatus:
        """Query the supplier-side status of an order."""

    @abstractmethod
    async def create_refill(self, external_order_id: int) -> str:
        """Request a refill for a placed order; returns the refill ID."""

    @abstractmethod
    async def get_balance(self) -> Balance:
        """Query the account balance."""

    @abstractmethod
    async def cancel_orders(self, external_order_ids: list[int]) -> list[CancelResult]:
        """Request cancellation of placed orders, one result per order."""
