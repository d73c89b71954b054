"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from storefront.domain.gateway.payment_gateway import PaymentGateway
from storefront.domain.gateway.supplier_gateway import SupplierGateway
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.infrastructure.config import Settings, get_settings
from storefront.infrastructure.http.pix_client import PixGatewayClient
from storefront.infrastructure.http.supplier_client import SupplierApiClient
from storefront.infrastructure.persistence.in_memory_cart_repository import (
    InMemoryCartRepository,
)
from storefront.infrastructure.persistence.in_memory_catalog_repository import (
    InMemoryCatalogRepository,
)
from storefront.infrastructure.persistence.in_memory_order_repository import (
    InMemoryOrderRepository,
)


@dataclass
class Container:
    settings: Settings
    catalog_repo: CatalogRepository
    cart_repo: CartRepository
    order_repo: OrderRepository
    supplier: SupplierGateway
    payment_gateway: PaymentGateway

    @property
    def timeout(self) -> float:
        return self.settings.request_timeout


def build_container(settings: Settings | None = None) -> Container:
    settings = settings or get_settings()
    return Container(
        settings=settings,
        catalog_repo=InMemoryCatalogRepository(),
        cart_repo=InMemoryCartRepository(
            idle_ttl=settings.cart_idle_ttl, max_carts=settings.max_carts
        ),
        order_repo=InMemoryOrderRepository(),
        supplier=SupplierApiClient(
            base_url=settings.supplier_api_url,
            api_key=settings.supplier_api_key,
            timeout=settings.request_timeout,
        ),
        payment_gateway=PixGatewayClient(
            base_url=settings.pix_api_url,
            api_key=settings.pix_api_key,
            webhook_token=settings.webhook_token,
            webhook_url=settings.webhook_url,
            timeout=settings.request_timeout,
        ),
    )


@lru_cache
def container() -> Container:
    """Process-wide container used by the CLI and the ASGI app."""
    return build_container()
