"""In-memory fakes and builders for testing.

The fakes implement the same abstract gateway interfaces as the HTTP
clients but answer from memory and record every call. No network, no side
effects.
"""

from __future__ import annotations

import asyncio
from itertools import count

from storefront.domain.exceptions import ExternalServiceError, PaymentError
from storefront.domain.gateway.payment_gateway import PaymentGateway
from storefront.domain.gateway.supplier_gateway import (
    Balance,
    CancelResult,
    SupplierGateway,
    SupplierOrderStatus,
)
from storefront.domain.model.customer import Customer
from storefront.domain.model.order import OrderLine, PixCharge
from storefront.domain.model.service import Service
from storefront.domain.model.value_objects import Money
from storefront.domain.service.catalog_mapper import CatalogRecord


def make_service(
    service_id: str = "api-1",
    name: str = "Instagram Seguidores Brasileiros",
    price: str = "8.00",
    min_quantity: int = 1,
    max_quantity: int = 10,
    external_service_id: int | None = 1,
    category: str = "followers",
    platform: str = "instagram",
) -> Service:
    return Service(
        id=service_id,
        name=name,
        description=f"{name} - Serviço de alta qualidade para {platform}.",
        price=Money.of(price),
        category=category,
        platform=platform,
        min_quantity=min_quantity,
        max_quantity=max_quantity,
        delivery_time="30-50 minutos",
        features=("Entrega rápida",),
        external_service_id=external_service_id,
    )


def make_customer(**overrides: str) -> Customer:
    fields = {
        "name": "Maria Silva",
        "email": "maria@example.com",
        "phone": "(11) 99999-9999",
        "tax_id": "123.456.789-00",
    }
    fields.update(overrides)
    return Customer(**fields)


class FakeSupplierGateway(SupplierGateway):

    def __init__(self, records: list[CatalogRecord] | None = None) -> None:
        self.records = list(records or [])
        self.fail_catalog = False
        self.fail_links: set[str] = set()
        self.hang_links: set[str] = set()
        self.placed: list[tuple[int, str, int]] = []
        self.cancelled: list[int] = []
        self.uncancellable: set[int] = set()
        self._order_ids = count(5000)

    async def list_services(self) -> list[CatalogRecord]:
        if self.fail_catalog:
            raise ExternalServiceError("Supplier unavailable")
        return list(self.records)

    async def add_order(self, external_service_id: int, link: str, units: int) -> int:
        if link in self.hang_links:
            await asyncio.sleep(10)
        if link in self.fail_links:
            raise ExternalServiceError(f"Supplier rejected link {link}")
        self.placed.append((external_service_id, link, units))
        return next(self._order_ids)

    async def get_order_status(self, external_order_id: int) -> SupplierOrderStatus:
        return SupplierOrderStatus(external_order_id=external_order_id, status="In progress")

    async def create_refill(self, external_order_id: int) -> str:
        return f"refill-{external_order_id}"

    async def get_balance(self) -> Balance:
        return Balance(balance="100.84", currency="BRL")

    async def cancel_orders(self, external_order_ids: list[int]) -> list[CancelResult]:
        results = []
        for order_id in external_order_ids:
            if order_id in self.uncancellable:
                results.append(CancelResult(order_id, error="Cancel is not available for this order"))
            else:
                self.cancelled.append(order_id)
                results.append(CancelResult(order_id))
        return results


class FakePaymentGateway(PaymentGateway):

    def __init__(self, token: str = "test-token") -> None:
        self.token = token
        self.should_succeed = True
        self.delay = 0.0
        self.calls: list[tuple[Customer, OrderLine]] = []
        self._ids = count(1)

    async def create_charge(self, customer: Customer, line: OrderLine) -> PixCharge:
        self.calls.append((customer, line))
        if self.delay:
            await asyncio.sleep(self.delay)
        if not self.should_succeed:
            raise PaymentError("Gateway declined")
        n = next(self._ids)
        return PixCharge(
            transaction_id=f"tx_{n}",
            qr_code_image=f"data:image/png;base64,QR{n}",
            pix_payload=f"00020126pix{n}",
        )

    def verify_webhook_token(self, token: str) -> bool:
        return token == self.token
