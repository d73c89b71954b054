"""Abstract repository for visitor carts and their checkout sessions."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.cart import Cart
from storefront.domain.model.checkout import CheckoutSession


class CartRepository(ABC):

    @abstractmethod
    def create(self) -> Cart:
        """Create and register an empty cart with a fresh ID."""

    @abstractmethod
    def get(self, cart_id: str) -> Cart | None:
        """Return a cart by its ID, or None if not found."""

    @abstractmethod
    def get_checkout(self, cart_id: str) -> CheckoutSession | None:
        """Return the open checkout session of a cart, or None."""

    @abstractmethod
    def save_checkout(self, session: CheckoutSession) -> None:
        """Attach a checkout session to its cart."""

    @abstractmethod
    def discard_checkout(self, cart_id: str) -> None:
        """Forget the checkout session of a cart (no-op if absent)."""
