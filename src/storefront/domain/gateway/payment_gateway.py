"""Pix payment gateway port (abstract interface).

Enables swapping the HTTP adapter for a fake in tests without changing
any domain or application code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.customer import Customer
from storefront.domain.model.order import OrderLine, PixCharge


class PaymentGateway(ABC):

    @abstractmethod
    async def create_charge(self, customer: Customer, line: OrderLine) -> PixCharge:
        """Create a Pix charge for one order line. Raises PaymentError."""

    @abstractmethod
    def verify_webhook_token(self, token: str) -> bool:
        """Verify that a webhook call really comes from the gateway."""
