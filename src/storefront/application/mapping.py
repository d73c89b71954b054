"""Domain -> DTO mapping shared by the use cases."""

from __future__ import annotations

from storefront.application.dto import (
    CartDTO,
    CartLineDTO,
    OrderDTO,
    OrderLineDTO,
    PixChargeDTO,
    ServiceDTO,
)
from storefront.domain.model import pricing
from storefront.domain.model.cart import Cart
from storefront.domain.model.order import Order
from storefront.domain.model.service import Service


def service_to_dto(service: Service) -> ServiceDTO:
    return ServiceDTO(
        id=service.id,
        name=service.name,
        description=service.description,
        price=str(service.price),
        category=service.category,
        platform=service.platform,
        min_quantity=service.min_quantity,
        max_quantity=service.max_quantity,
        delivery_time=service.delivery_time,
        features=list(service.features),
        popular=service.popular,
    )


def cart_to_dto(cart: Cart) -> CartDTO:
    return CartDTO(
        id=cart.id,
        lines=[
            CartLineDTO(
                service_id=line.service.id,
                service_name=line.service.name,
                platform=line.service.platform,
                link=line.link,
                quantity=str(line.quantity),
                units=pricing.to_units(line.quantity),
                unit_price=str(pricing.effective_price(line.service.price)),
                line_total=str(line.line_total),
            )
            for line in cart.lines
        ],
        item_count=str(cart.item_count),
        total=str(cart.total()),
    )


def order_to_dto(order: Order) -> OrderDTO:
    charges = list(order.charges)
    placements = list(order.placements)
    items = []
    for index, item in enumerate(order.items):
        charge = charges[index] if index < len(charges) else None
        placement = placements[index] if index < len(placements) else None
        items.append(
            OrderLineDTO(
                service_name=item.service_name,
                link=item.link,
                quantity=str(item.quantity),
                units=item.units,
                unit_price=str(item.unit_price),
                line_total=str(item.line_total),
                transaction_id=charge.transaction_id if charge else None,
                external_order_id=placement.external_order_id if placement else None,
                error=placement.error if placement else None,
            )
        )

    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        customer_name=order.customer.name,
        customer_email=order.customer.email,
        status=order.status.value,
        items=items,
        total=str(order.total),
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        charges=[
            PixChargeDTO(
                transaction_id=c.transaction_id,
                qr_code_image=c.qr_code_image,
                pix_payload=c.pix_payload,
            )
            for c in charges
        ],
    )
