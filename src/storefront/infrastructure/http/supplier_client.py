"""HTTP adapter for the supplier panel (standard SMM panel API v2).

Every call is a form-encoded POST carrying the API ``key`` and an
``action``. Transport errors, non-2xx responses, ``{"error": ...}`` bodies
and malformed payloads all raise ExternalServiceError.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from storefront.domain.exceptions import ExternalServiceError
from storefront.domain.gateway.supplier_gateway import (
    Balance,
    CancelResult,
    SupplierGateway,
    SupplierOrderStatus,
)
from storefront.domain.service.catalog_mapper import CatalogRecord

logger = structlog.get_logger(__name__)


class SupplierApiClient(SupplierGateway):

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    # --- SupplierGateway interface --------------------------------------------

    async def list_services(self) -> list[CatalogRecord]:
        data = await self._request("services")
        if not isinstance(data, list):
            raise ExternalServiceError("Supplier returned an unexpected catalog payload")
        records = []
        for raw in data:
            try:
                records.append(self._to_record(raw))
            except (KeyError, TypeError) as exc:
                logger.info("Skipping malformed catalog entry", entry=raw, error=str(exc))
        return records

    async def add_order(self, external_service_id: int, link: str, units: int) -> int:
        data = await self._request(
            "add", service=external_service_id, link=link, quantity=units
        )
        return self._int_field(data, "order")

    async def get_order_status(self, external_order_id: int) -> SupplierOrderStatus:
        data = await self._request("status", order=external_order_id)
        if not isinstance(data, dict) or "status" not in data:
            raise ExternalServiceError("Supplier returned an unexpected status payload")
        return SupplierOrderStatus(
            external_order_id=external_order_id,
            status=str(data["status"]),
            charge=str(data.get("charge", "")),
            start_count=str(data.get("start_count", "")),
            remains=str(data.get("remains", "")),
            currency=str(data.get("currency", "")),
        )

    async def create_refill(self, external_order_id: int) -> str:
        data = await self._request("refill", order=external_order_id)
        if not isinstance(data, dict) or "refill" not in data:
            raise ExternalServiceError("Supplier returned an unexpected refill payload")
        return str(data["refill"])

    async def get_balance(self) -> Balance:
        data = await self._request("balance")
        if not isinstance(data, dict) or "balance" not in data:
            raise ExternalServiceError("Supplier returned an unexpected balance payload")
        return Balance(balance=str(data["balance"]), currency=str(data.get("currency", "")))

    async def cancel_orders(self, external_order_ids: list[int]) -> list[CancelResult]:
        data = await self._request(
            "cancel", orders=",".join(str(i) for i in external_order_ids)
        )
        if not isinstance(data, list):
            raise ExternalServiceError("Supplier returned an unexpected cancel payload")
        return [self._to_cancel_result(entry) for entry in data]

    # --- HTTP helpers ---------------------------------------------------------

    async def _request(self, action: str, **params: Any) -> Any:
        form = {"key": self._api_key, "action": action}
        form.update({k: str(v) for k, v in params.items()})

        logger.debug("Supplier request", action=action)
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(self._base_url, data=form)
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as exc:
            raise ExternalServiceError(f"Supplier '{action}' request timed out") from exc
        except httpx.HTTPStatusError as exc:
            raise ExternalServiceError(
                f"Supplier '{action}' request failed with HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ExternalServiceError(f"Supplier '{action}' request failed: {exc}") from exc
        except ValueError as exc:
            raise ExternalServiceError(f"Supplier '{action}' returned invalid JSON") from exc

        if isinstance(data, dict) and data.get("error"):
            raise ExternalServiceError(f"Supplier rejected '{action}': {data['error']}")
        return data

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_record(raw: dict) -> CatalogRecord:
        return CatalogRecord(
            service_id=raw["service"],
            name=str(raw["name"]),
            rate=str(raw.get("rate", "")),
            min=str(raw.get("min", "")),
            max=str(raw.get("max", "")),
            refill=bool(raw.get("refill", False)),
            cancel=bool(raw.get("cancel", False)),
            type=str(raw.get("type", "")),
            category=str(raw.get("category", "")),
            delivery_time=raw.get("deliveryTime") or None,
        )

    @staticmethod
    def _int_field(data: Any, name: str) -> int:
        try:
            return int(data[name])
        except (KeyError, TypeError, ValueError) as exc:
            raise ExternalServiceError(
                f"Supplier response is missing a valid '{name}' field"
            ) from exc

    @classmethod
    def _to_cancel_result(cls, entry: Any) -> CancelResult:
        # {"order": 9, "cancel": 1} or {"order": 9, "cancel": {"error": "..."}}
        order_id = cls._int_field(entry, "order")
        outcome = entry.get("cancel")
        if isinstance(outcome, dict) and outcome.get("error"):
            return CancelResult(external_order_id=order_id, error=str(outcome["error"]))
        return CancelResult(external_order_id=order_id)
