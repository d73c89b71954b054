"""Application services: cart use cases.

Each handler loads the visitor's cart, applies one mutation through the
Cart aggregate and returns the refreshed cart DTO.
"""

from __future__ import annotations

from decimal import Decimal

from storefront.application.dto import CartDTO
from storefront.application.mapping import cart_to_dto
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.cart import Cart
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.catalog_repository import CatalogRepository


def load_cart(cart_repo: CartRepository, cart_id: str) -> Cart:
    cart = cart_repo.get(cart_id)
    if cart is None:
        raise EntityNotFoundError(f"Cart '{cart_id}' not found")
    return cart


class CreateCartHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(self) -> CartDTO:
        return cart_to_dto(self._cart_repo.create())


class ShowCartHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(self, cart_id: str) -> CartDTO:
        return cart_to_dto(load_cart(self._cart_repo, cart_id))


class AddToCartHandler:

    def __init__(self, cart_repo: CartRepository, catalog_repo: CatalogRepository) -> None:
        self._cart_repo = cart_repo
        self._catalog_repo = catalog_repo

    def handle(
        self,
        cart_id: str,
        service_id: str,
        quantity: str | int | Decimal,
        link: str,
    ) -> CartDTO:
        cart = load_cart(self._cart_repo, cart_id)
        service = self._catalog_repo.get_by_id(service_id)
        if service is None:
            raise EntityNotFoundError(f"Service not found: '{service_id}'")
        cart.add(service, quantity, link)
        return cart_to_dto(cart)


class UpdateCartQuantityHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(
        self,
        cart_id: str,
        service_id: str,
        quantity: str | int | Decimal,
        link: str | None = None,
    ) -> CartDTO:
        cart = load_cart(self._cart_repo, cart_id)
        cart.set_quantity(service_id, quantity, link)
        return cart_to_dto(cart)


class RemoveFromCartHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(self, cart_id: str, service_id: str, link: str | None = None) -> CartDTO:
        cart = load_cart(self._cart_repo, cart_id)
        cart.remove(service_id, link)
        return cart_to_dto(cart)
