"""Pricing rules shared by the catalog, the cart and orders."""

from __future__ import annotations

from decimal import Decimal

from storefront.domain.model.value_objects import Money

# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MARKUP_MULTIPLIER = Decimal("2.5")
MINIMUM_PRICE = Money(Decimal("1.50"))
UNITS_PER_QUANTITY = 1000


def effective_price(price: Money) -> Money:
    """Price actually charged per thousand units.

    Catalog entries below the floor are still charged the floor.
    """
    return max(price, MINIMUM_PRICE)


def line_total(price: Money, quantity: Decimal) -> Money:
    return (effective_price(price) * quantity).rounded()


def to_units(quantity: Decimal) -> int:
    """Thousands-based cart quantity -> units sent to the supplier."""
    return int(quantity * UNITS_PER_QUANTITY)
