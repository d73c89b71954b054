"""Service — an engagement package offered in the storefront catalog.

Services are produced by the catalog mapper on every catalog refresh and
never mutated afterwards; a refresh replaces the whole catalog.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from storefront.domain.model.value_objects import Money, clamp

ALL = "all"


@dataclass(frozen=True)
class Service:
    """A catalog entry.

    Quantities are expressed in thousands of units and ``price`` is the
    price per thousand.
    """

    id: str
    name: str
    description: str
    price: Money
    category: str
    platform: str
    min_quantity: int
    max_quantity: int
    delivery_time: str
    features: tuple[str, ...] = field(default_factory=tuple)
    popular: bool = False
    external_service_id: int | None = None

    def clamp_quantity(self, quantity: Decimal) -> Decimal:
        return clamp(quantity, self.min_quantity, self.max_quantity)

    def matches(
        self,
        search: str = "",
        category: str = ALL,
        platform: str = ALL,
    ) -> bool:
        """Storefront listing filter."""
        term = search.strip().lower()
        if term and term not in self.name.lower() and term not in self.description.lower():
            return False
        if category not in ("", ALL) and self.category != category:
            return False
        if platform not in ("", ALL) and self.platform != platform:
            return False
        return True
