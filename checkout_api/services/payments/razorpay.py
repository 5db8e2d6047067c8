"""
Razorpay REST client.

Talks to the Orders and Payments APIs with HTTP Basic auth (key id / key secret):
  POST /orders            create an order
  GET  /orders/{id}       fetch an order
  GET  /payments/{id}     fetch a payment

Every failure is turned into a GatewayError subclass so callers never see httpx
exceptions. The key secret is only ever handed to httpx for the auth header.
"""
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from checkout_api.core.config import Settings
from checkout_api.core.errors import GatewayRejected, GatewayUnavailable
from checkout_api.models.gateway import GatewayOrder, GatewayPayment
from .base import PaymentGateway

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


def _error_detail(response: httpx.Response) -> Dict[str, Optional[str]]:
    """pull code/description out of razorpay's ``{"error": {...}}`` body."""
    try:
        body = response.json()
    except ValueError:
        return {"code": None, "description": response.text[:500] or None}
    err = body.get("error") if isinstance(body, dict) else None
    if not isinstance(err, dict):
        return {"code": None, "description": None}
    return {"code": err.get("code"), "description": err.get("description")}


class RazorpayGateway(PaymentGateway):
    name = "razorpay"

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        base_url: str = "https://api.razorpay.com/v1",
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.key_id = key_id
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            auth=httpx.BasicAuth(key_id, key_secret),
            headers=DEFAULT_HEADERS,
            timeout=timeout,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "RazorpayGateway":
        return cls(
            key_id=settings.RAZORPAY_KEY_ID,
            key_secret=settings.RAZORPAY_KEY_SECRET,
            base_url=settings.RAZORPAY_BASE_URL,
            timeout=settings.GATEWAY_TIMEOUT_SECONDS,
        )

    async def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.error(f"Razorpay {method} {path} failed: {e.__class__.__name__}: {e}")
            raise GatewayUnavailable(f"{e.__class__.__name__}: {e}") from e

        if response.status_code in (401, 403):
            detail = _error_detail(response)
            logger.error(f"Razorpay rejected credentials on {method} {path}: HTTP {response.status_code} {detail['description']}")
            raise GatewayUnavailable(detail["description"], http_status=response.status_code, code=detail["code"])

        if response.is_error:
            detail = _error_detail(response)
            logger.warning(f"Razorpay {method} {path} -> HTTP {response.status_code} {detail['code']}: {detail['description']}")
            raise GatewayRejected(detail["description"], http_status=response.status_code, code=detail["code"])

        try:
            data = response.json()
        except ValueError as e:
            raise GatewayRejected("Malformed JSON in gateway response", http_status=response.status_code) from e
        if not isinstance(data, dict):
            raise GatewayRejected("Unexpected gateway response shape", http_status=response.status_code)
        return data

    async def create_order(
        self,
        amount_minor: int,
        currency: str,
        receipt: str,
        auto_capture: bool = True,
        notes: Optional[Dict[str, str]] = None,
    ) -> GatewayOrder:
        payload: Dict[str, Any] = {
            "amount": amount_minor,
            "currency": currency,
            "receipt": receipt,
            "payment_capture": 1 if auto_capture else 0,
        }
        if notes:
            payload["notes"] = notes
        data = await self._request("POST", "/orders", json=payload)
        return GatewayOrder.from_api(data)

    async def fetch_order(self, order_id: str) -> GatewayOrder:
        data = await self._request("GET", f"/orders/{quote(order_id, safe='')}")
        return GatewayOrder.from_api(data)

    async def fetch_payment(self, payment_id: str) -> GatewayPayment:
        data = await self._request("GET", f"/payments/{quote(payment_id, safe='')}")
        return GatewayPayment.from_api(data)

    async def aclose(self) -> None:
        await self._client.aclose()

    def health_check(self) -> Dict[str, Any]:
        """check gateway config status without touching the network."""
        if not self.key_id:
            return {"status": "misconfigured", "provider": self.name, "reason": "missing_key_id"}
        mode = "test" if self.key_id.startswith("rzp_test_") else "live"
        return {"status": "configured", "provider": self.name, "mode": mode, "key_id_prefix": self.key_id[:8] + "..."}
