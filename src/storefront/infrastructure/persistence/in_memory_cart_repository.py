"""In-process implementation of CartRepository.

Carts live for the lifetime of the server process only. A cart untouched
for ``idle_ttl`` seconds expires together with its checkout session, and at
most ``max_carts`` are kept; past that the least recently used is evicted.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable
from uuid import uuid4

import structlog

from storefront.domain.model.cart import Cart
from storefront.domain.model.checkout import CheckoutSession
from storefront.domain.repository.cart_repository import CartRepository

logger = structlog.get_logger(__name__)


class InMemoryCartRepository(CartRepository):

    def __init__(
        self,
        idle_ttl: float = 24 * 3600,
        max_carts: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._idle_ttl = idle_ttl
        self._max_carts = max_carts
        self._clock = clock
        # cart id -> (cart, last access); least recently used first
        self._carts: OrderedDict[str, tuple[Cart, float]] = OrderedDict()
        self._checkouts: dict[str, CheckoutSession] = {}

    def create(self) -> Cart:
        self._purge_expired()
        while len(self._carts) >= self._max_carts:
            cart_id, _ = self._carts.popitem(last=False)
            self._checkouts.pop(cart_id, None)
            logger.info("Evicted least recently used cart", cart_id=cart_id)
        cart = Cart(uuid4().hex)
        self._carts[cart.id] = (cart, self._clock())
        return cart

    def get(self, cart_id: str) -> Cart | None:
        entry = self._carts.get(cart_id)
        if entry is None:
            return None
        cart, last_access = entry
        now = self._clock()
        if now - last_access > self._idle_ttl:
            self._forget(cart_id)
            return None
        self._carts[cart_id] = (cart, now)
        self._carts.move_to_end(cart_id)
        return cart

    def get_checkout(self, cart_id: str) -> CheckoutSession | None:
        if self.get(cart_id) is None:
            return None
        return self._checkouts.get(cart_id)

    def save_checkout(self, session: CheckoutSession) -> None:
        self._checkouts[session.cart.id] = session

    def discard_checkout(self, cart_id: str) -> None:
        self._checkouts.pop(cart_id, None)

    def __len__(self) -> int:
        return len(self._carts)

    # --- Internal helpers -----------------------------------------------------

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [
            cart_id
            for cart_id, (_, last_access) in self._carts.items()
            if now - last_access > self._idle_ttl
        ]
        for cart_id in expired:
            self._forget(cart_id)
        if expired:
            logger.info("Expired idle carts", count=len(expired))

    def _forget(self, cart_id: str) -> None:
        self._carts.pop(cart_id, None)
        self._checkouts.pop(cart_id, None)
