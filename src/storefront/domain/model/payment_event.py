"""Payment confirmation pushed by the Pix gateway."""

from __future__ import annotations

from dataclasses import dataclass

PAID_EVENT_TYPES = frozenset({"PAID", "TRANSACTION_PAID"})
PAID_STATUSES = frozenset({"COMPLETED"})


@dataclass(frozen=True)
class PaymentEvent:
    event_type: str
    transaction_id: str
    payment_status: str

    @property
    def is_paid(self) -> bool:
        return (
            self.event_type.strip().upper() in PAID_EVENT_TYPES
            and self.payment_status.strip().upper() in PAID_STATUSES
        )
