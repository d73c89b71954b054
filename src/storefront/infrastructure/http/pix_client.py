"""HTTP adapter for the Pix payment gateway.

One transaction is created per order line. Payment confirmation arrives
later, server-to-server, at the ``/webhooks/pix`` endpoint; the token the
gateway sends along is checked with ``verify_webhook_token``.
"""

from __future__ import annotations

import hmac
from typing import Any

import httpx
import structlog

from storefront.domain.exceptions import PaymentError
from storefront.domain.gateway.payment_gateway import PaymentGateway
from storefront.domain.model.customer import Customer
from storefront.domain.model.order import OrderLine, PixCharge

logger = structlog.get_logger(__name__)


class PixGatewayClient(PaymentGateway):

    def __init__(
        self,
        base_url: str,
        api_key: str,
        webhook_token: str,
        webhook_url: str,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._webhook_token = webhook_token
        self._webhook_url = webhook_url
        self._timeout = timeout
        self._transport = transport

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    # --- PaymentGateway interface ---------------------------------------------

    async def create_charge(self, customer: Customer, line: OrderLine) -> PixCharge:
        payload = {
            "amount": line.line_total.cents,
            "currency": line.unit_price.currency,
            "paymentMethod": "PIX",
            "description": f"{line.service_name} - {line.quantity} mil",
            "postbackUrl": self._webhook_url,
            "customer": {
                "name": customer.name,
                "email": customer.email,
                "phone": customer.phone,
                "document": customer.tax_id,
            },
            "items": [
                {
                    "title": line.service_name,
                    "unitPrice": line.line_total.cents,
                    "quantity": 1,
                    "externalRef": line.service_id,
                }
            ],
            "metadata": {"link": line.link, "units": line.units},
        }

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    f"{self._base_url}/transactions", json=payload, headers=self.headers
                )
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as exc:
            raise PaymentError("Pix gateway request timed out") from exc
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Pix gateway rejected charge",
                status_code=exc.response.status_code,
                body=exc.response.text[:500],
            )
            raise PaymentError(
                f"Pix gateway request failed with HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise PaymentError(f"Pix gateway request failed: {exc}") from exc
        except ValueError as exc:
            raise PaymentError("Pix gateway returned invalid JSON") from exc

        return self._to_charge(data)

    def verify_webhook_token(self, token: str) -> bool:
        if not self._webhook_token or not token:
            return False
        return hmac.compare_digest(token.encode(), self._webhook_token.encode())

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_charge(data: Any) -> PixCharge:
        if not isinstance(data, dict):
            raise PaymentError("Pix gateway returned an unexpected payload")
        transaction_id = data.get("transactionId") or data.get("id")
        pix = data.get("pix") or {}
        if not isinstance(pix, dict):
            raise PaymentError("Pix gateway returned an unexpected QR code payload")
        qr_code_image = pix.get("base64") or pix.get("qrCodeImage") or ""
        pix_payload = pix.get("payload") or pix.get("qrcode") or ""
        if not transaction_id or not (qr_code_image or pix_payload):
            raise PaymentError("Pix gateway response is missing the transaction or QR code")
        return PixCharge(
            transaction_id=str(transaction_id),
            qr_code_image=qr_code_image,
            pix_payload=pix_payload,
        )
