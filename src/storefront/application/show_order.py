"""Application services: order history queries.

Visitors see only the orders confirmed from their own cart; passing no
``cart_id`` lists across all carts and is reserved for the back office.
"""

from __future__ import annotations

from storefront.application.dto import OrderDTO
from storefront.application.mapping import order_to_dto
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: int, cart_id: str | None = None) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        # Another cart's order is reported as missing.
        if order is None or (cart_id is not None and order.cart_id != cart_id):
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return order_to_dto(order)


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, status: str | None = None, cart_id: str | None = None) -> list[OrderDTO]:
        orders = (
            self._order_repo.list_all()
            if cart_id is None
            else self._order_repo.list_by_cart(cart_id)
        )
        return [
            order_to_dto(order)
            for order in orders
            if status is None or order.status.value == status
        ]
