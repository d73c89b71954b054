"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI/HTTP and application layers without
exposing domain internals to the outside world. Money is pre-formatted for
display; decimal quantities are rendered as strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ServiceDTO:
    id: str
    name: str
    description: str
    price: str  # per thousand, e.g. "R$ 10,00"
    category: str
    platform: str
    min_quantity: int
    max_quantity: int
    delivery_time: str
    features: list[str]
    popular: bool


@dataclass(frozen=True)
class CatalogDTO:
    services: list[ServiceDTO]
    error: str | None = None  # retryable banner when the refresh failed


@dataclass(frozen=True)
class CartLineDTO:
    service_id: str
    service_name: str
    platform: str
    link: str
    quantity: str  # thousands
    units: int
    unit_price: str
    line_total: str


@dataclass(frozen=True)
class CartDTO:
    id: str
    lines: list[CartLineDTO]
    item_count: str
    total: str


@dataclass(frozen=True)
class PixChargeDTO:
    transaction_id: str
    qr_code_image: str
    pix_payload: str


@dataclass(frozen=True)
class OrderLineDTO:
    service_name: str
    link: str
    quantity: str
    units: int
    unit_price: str
    line_total: str
    transaction_id: str | None = None
    external_order_id: int | None = None
    error: str | None = None


@dataclass(frozen=True)
class OrderDTO:
    id: int
    customer_name: str
    customer_email: str
    status: str
    items: list[OrderLineDTO]
    total: str
    created_at: str
    charges: list[PixChargeDTO] = field(default_factory=list)


@dataclass(frozen=True)
class CheckoutDTO:
    cart_id: str
    step: str
    cart: CartDTO
    order: OrderDTO | None = None
    error: str | None = None


@dataclass(frozen=True)
class PaymentEventOutcome:
    """What the payment projection did with an incoming event."""

    action: str  # ignored | recorded | completed | failed | duplicate
    order_id: int | None = None
    status: str | None = None
