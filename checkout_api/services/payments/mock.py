"""
In-memory gateway for local runs (PAYMENTS_PROVIDER=mock) and tests.

Orders created here can be "paid" with add_payment(), and sign() returns the
signature the checkout widget would hand back, so the whole create -> pay ->
verify loop can be exercised without the network.
"""
import time
import uuid
from typing import Any, Dict, List, Optional, Tuple

from checkout_api.core.errors import GatewayError, GatewayRejected
from checkout_api.core.signature import generate_payment_signature
from checkout_api.models.gateway import PAYMENT_CAPTURED, GatewayOrder, GatewayPayment
from .base import PaymentGateway


class MockGateway(PaymentGateway):
    name = "mock"

    def __init__(self, key_secret: str = ""):
        self.key_secret = key_secret
        self.orders: Dict[str, GatewayOrder] = {}
        self.payments: Dict[str, GatewayPayment] = {}
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []
        # set to an exception instance to make the next calls fail
        self.fail_with: Optional[GatewayError] = None

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if self.fail_with is not None:
            raise self.fail_with

    async def create_order(
        self,
        amount_minor: int,
        currency: str,
        receipt: str,
        auto_capture: bool = True,
        notes: Optional[Dict[str, str]] = None,
    ) -> GatewayOrder:
        self._record("create_order", amount_minor, currency, receipt, auto_capture, notes)
        order = GatewayOrder(
            id=f"order_{uuid.uuid4().hex[:14]}",
            amount=amount_minor,
            currency=currency,
            receipt=receipt,
            status="created",
            notes=dict(notes or {}),
            created_at=int(time.time()),
        )
        self.orders[order.id] = order
        return order

    async def fetch_order(self, order_id: str) -> GatewayOrder:
        self._record("fetch_order", order_id)
        order = self.orders.get(order_id)
        if order is None:
            raise GatewayRejected("The id provided does not exist", http_status=400, code="BAD_REQUEST_ERROR")
        return order

    async def fetch_payment(self, payment_id: str) -> GatewayPayment:
        self._record("fetch_payment", payment_id)
        payment = self.payments.get(payment_id)
        if payment is None:
            raise GatewayRejected("The id provided does not exist", http_status=400, code="BAD_REQUEST_ERROR")
        return payment

    # scripting helpers, not part of the gateway interface

    def add_order(self, order_id: str, amount: Optional[int], currency: str = "INR", status: str = "created") -> GatewayOrder:
        order = GatewayOrder(id=order_id, amount=amount, currency=currency, receipt=f"rcpt_{order_id}", status=status)
        self.orders[order_id] = order
        return order

    def add_payment(
        self,
        order_id: str,
        amount: Optional[int] = None,
        status: str = PAYMENT_CAPTURED,
        payment_id: Optional[str] = None,
        method: str = "card",
        currency: Optional[str] = None,
    ) -> GatewayPayment:
        order = self.orders.get(order_id)
        payment = GatewayPayment(
            id=payment_id or f"pay_{uuid.uuid4().hex[:14]}",
            order_id=order_id,
            amount=amount if amount is not None else (order.amount if order else None),
            currency=currency or (order.currency if order else "INR"),
            status=status,
            method=method,
            captured=status == PAYMENT_CAPTURED,
            created_at=int(time.time()),
        )
        self.payments[payment.id] = payment
        return payment

    def sign(self, order_id: str, payment_id: str) -> str:
        return generate_payment_signature(order_id, payment_id, self.key_secret)

    def health_check(self) -> Dict[str, Any]:
        return {"status": "ok", "provider": self.name, "orders": len(self.orders)}
