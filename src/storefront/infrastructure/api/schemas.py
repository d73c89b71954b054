"""Pydantic request/response schemas for the storefront API.

These are external contracts (anti-corruption layer) — separate from the
application DTOs.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from storefront.domain.model.customer import Customer


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    service_id: str
    quantity: str | float = Field(description="Thousands of units; '1,5' and '1.5' both accepted")
    link: str

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"service_id": "api-101", "quantity": "1,5", "link": "https://instagram.com/acme"}
            ]
        }
    }


class UpdateQuantityRequest(BaseModel):
    quantity: str | float
    link: str | None = None


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------
class CustomerRequest(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    tax_id: str = Field(default="", description="CPF/CNPJ")

    def to_domain(self) -> Customer:
        return Customer(
            name=self.name.strip(),
            email=self.email.strip(),
            phone=self.phone.strip(),
            tax_id=self.tax_id.strip(),
        )


# ---------------------------------------------------------------------------
# Webhook
# ---------------------------------------------------------------------------
class WebhookTransaction(BaseModel):
    id: str
    status: str


class PixWebhookRequest(BaseModel):
    event: str
    token: str | None = None
    transaction: WebhookTransaction

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "event": "TRANSACTION_PAID",
                    "token": "webhook-secret",
                    "transaction": {"id": "tx_123", "status": "COMPLETED"},
                }
            ]
        }
    }


class WebhookResponse(BaseModel):
    status: str
    order_id: int | None = None
    order_status: str | None = None


# ---------------------------------------------------------------------------
# Misc
# ---------------------------------------------------------------------------
class BalanceResponse(BaseModel):
    balance: str
    currency: str


class FilterOption(BaseModel):
    id: str
    name: str


class FiltersResponse(BaseModel):
    categories: list[FilterOption]
    platforms: list[FilterOption]
