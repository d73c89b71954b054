"""Cart aggregate — the visitor's basket of engagement services.

Lines are keyed by ``(service id, destination link)``: the same service
sent to two different profiles is two lines, while re-adding the same pair
merges quantities.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal

from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model import pricing
from storefront.domain.model.service import Service
from storefront.domain.model.value_objects import Money, parse_decimal

LineKey = tuple[str, str]


@dataclass(frozen=True)
class CartLine:
    """One (service, link, quantity) tuple. Quantity is in thousands."""

    service: Service
    quantity: Decimal
    link: str

    @property
    def key(self) -> LineKey:
        return (self.service.id, self.link)

    @property
    def line_total(self) -> Money:
        return pricing.line_total(self.service.price, self.quantity)


class Cart:
    """Aggregate root for a visitor's cart.

    Invariant: every line's quantity lies within its service's
    ``[min_quantity, max_quantity]``.
    """

    def __init__(self, cart_id: str) -> None:
        self.id = cart_id
        self._lines: dict[LineKey, CartLine] = {}

    # --- Mutations ------------------------------------------------------------

    def add(self, service: Service, quantity: str | int | Decimal, link: str) -> CartLine:
        """Add *quantity* thousands of *service* for *link*.

        Re-adding an existing (service, link) pair merges the quantities,
        capped at the service maximum.
        """
        link = (link or "").strip()
        if not link:
            raise ValidationError("A destination link is required")
        requested = parse_decimal(quantity)

        existing = self._lines.get((service.id, link))
        if existing is not None:
            merged = min(existing.quantity + requested, Decimal(service.max_quantity))
            line = replace(existing, quantity=max(merged, Decimal(service.min_quantity)))
        else:
            line = CartLine(
                service=service,
                quantity=service.clamp_quantity(requested),
                link=link,
            )

        self._lines[line.key] = line
        return line

    def set_quantity(
        self,
        service_id: str,
        quantity: str | int | Decimal,
        link: str | None = None,
    ) -> None:
        """Set the quantity of a line.

        A quantity below the service minimum removes the line; one above
        the maximum is clamped. Without *link* every line of the service
        is updated.
        """
        keys = self._matching_keys(service_id, link)
        if not keys:
            raise EntityNotFoundError(f"Service '{service_id}' is not in the cart")
        requested = parse_decimal(quantity)

        for key in keys:
            line = self._lines[key]
            if requested < line.service.min_quantity:
                del self._lines[key]
            else:
                self._lines[key] = replace(
                    line, quantity=min(requested, Decimal(line.service.max_quantity))
                )

    def remove(self, service_id: str, link: str | None = None) -> None:
        """Remove matching lines; removing an absent line is a no-op."""
        for key in self._matching_keys(service_id, link):
            del self._lines[key]

    def clear(self) -> None:
        self._lines.clear()

    # --- Queries --------------------------------------------------------------

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines.values())

    def get(self, service_id: str, link: str) -> CartLine | None:
        return self._lines.get((service_id, link.strip()))

    def snapshot(self) -> tuple[CartLine, ...]:
        """Immutable copy of the current lines."""
        return tuple(self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def item_count(self) -> Decimal:
        return sum((line.quantity for line in self._lines.values()), Decimal("0"))

    def total(self) -> Money:
        result = Money.zero()
        for line in self._lines.values():
            result = result + line.line_total
        return result

    # --- Internal helpers -----------------------------------------------------

    def _matching_keys(self, service_id: str, link: str | None) -> list[LineKey]:
        if link is not None:
            key = (service_id, link.strip())
            return [key] if key in self._lines else []
        return [key for key in self._lines if key[0] == service_id]
