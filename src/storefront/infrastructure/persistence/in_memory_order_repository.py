"""In-process implementation of OrderRepository."""

from __future__ import annotations

from storefront.domain.model.order import Order
from storefront.domain.repository.order_repository import OrderRepository


class InMemoryOrderRepository(OrderRepository):

    def __init__(self) -> None:
        self._store: dict[int, Order] = {}
        self._by_transaction: dict[str, int] = {}

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> int:
        return max(self._store, default=0) + 1

    def get_by_id(self, order_id: int) -> Order | None:
        return self._store.get(order_id)

    def get_by_transaction_id(self, transaction_id: str) -> Order | None:
        order_id = self._by_transaction.get(transaction_id)
        return self._store.get(order_id) if order_id is not None else None

    def list_all(self) -> list[Order]:
        return sorted(self._store.values(), key=lambda o: o.id or 0)

    def list_by_cart(self, cart_id: str) -> list[Order]:
        return [order for order in self.list_all() if order.cart_id == cart_id]

    def save(self, order: Order) -> None:
        if order.id is None:
            order.id = self.next_id()
        self._store[order.id] = order
        for transaction_id in order.transaction_ids:
            self._by_transaction[transaction_id] = order.id
