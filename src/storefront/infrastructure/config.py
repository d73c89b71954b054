"""Runtime configuration.

Values come from environment variables prefixed with ``STOREFRONT_`` (or a
local ``.env`` file), e.g. ``STOREFRONT_SUPPLIER_API_KEY``.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Supplier panel (catalog + order placement)
    supplier_api_url: str = "https://baratosociais.com/api/v2"
    supplier_api_key: str = ""

    # Pix payment gateway
    pix_api_url: str = "https://api.pix-gateway.example/v1"
    pix_api_key: str = ""
    webhook_token: str = ""
    public_base_url: str = "http://localhost:8000"

    # Back-office access to the order listing across all carts; empty disables it
    admin_token: str = ""

    # In-memory carts: idle expiry (seconds) and maximum number kept
    cart_idle_ttl: float = Field(default=24 * 3600, gt=0)
    max_carts: int = Field(default=10_000, gt=0)

    # Every external call is bounded by this timeout (seconds)
    request_timeout: float = Field(default=15.0, gt=0)

    log_level: str = "INFO"
    json_logs: bool = False

    @property
    def webhook_url(self) -> str:
        return f"{self.public_base_url.rstrip('/')}/webhooks/pix"


@lru_cache
def get_settings() -> Settings:
    return Settings()
