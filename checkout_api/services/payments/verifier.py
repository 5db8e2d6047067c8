"""
Payment verification.

A checkout completion is accepted only when all of these hold, checked in order
with the first failure being final:

  1. order id, payment id and signature are present
  2. signature == HMAC-SHA256(key_secret, "order_id|payment_id"), compared in constant time
  3. the gateway's payment record belongs to the submitted order
  4. the gateway reports the payment as captured
  5. the captured amount is positive and equals the order amount (minor units, exact)

Only records fetched from the gateway are trusted for 3-5; nothing the client
sends besides the three ids is read.
"""
import logging
from typing import Any, List, Optional

from checkout_api.core.errors import (
    AmountMismatch,
    GatewayRejected,
    InvalidSignature,
    MissingField,
    PaymentNotCaptured,
)
from checkout_api.core.signature import verify_payment_signature
from checkout_api.models.gateway import PaymentConfirmation
from .base import PaymentGateway

logger = logging.getLogger(__name__)

FIELD_ORDER_ID = "razorpay_order_id"
FIELD_PAYMENT_ID = "razorpay_payment_id"
FIELD_SIGNATURE = "razorpay_signature"


def _valid_amount(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _present(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


class PaymentVerifier:
    def __init__(self, gateway: PaymentGateway, key_secret: str, reconcile_amount: bool = True):
        if not key_secret:
            raise ValueError("key_secret is required to verify payment signatures")
        self.gateway = gateway
        self._key_secret = key_secret
        self.reconcile_amount = reconcile_amount

    def check_fields(self, order_id: Optional[str], payment_id: Optional[str], signature: Optional[str]) -> None:
        missing: List[str] = []
        if not _present(order_id):
            missing.append(FIELD_ORDER_ID)
        if not _present(payment_id):
            missing.append(FIELD_PAYMENT_ID)
        if not _present(signature):
            missing.append(FIELD_SIGNATURE)
        if missing:
            raise MissingField(missing)

    def check_signature(self, order_id: str, payment_id: str, signature: str) -> None:
        if not verify_payment_signature(order_id, payment_id, signature, self._key_secret):
            logger.warning(f"Signature mismatch for order={order_id} payment={payment_id}")
            raise InvalidSignature()

    async def verify(self, order_id: Optional[str], payment_id: Optional[str], signature: Optional[str]) -> PaymentConfirmation:
        self.check_fields(order_id, payment_id, signature)
        self.check_signature(order_id, payment_id, signature)

        payment = await self.gateway.fetch_payment(payment_id)

        if payment.order_id and payment.order_id != order_id:
            logger.warning(f"Payment {payment_id} belongs to order {payment.order_id}, not {order_id}")
            raise InvalidSignature()

        if not payment.is_captured:
            logger.info(f"Payment {payment_id} for order {order_id} not captured: status={payment.status}")
            raise PaymentNotCaptured(payment.status)

        if not _valid_amount(payment.amount):
            logger.error(f"Payment {payment_id} for order {order_id} has no usable amount: {payment.amount!r}")
            raise GatewayRejected("Payment record has no valid amount")

        if self.reconcile_amount:
            order = await self.gateway.fetch_order(order_id)
            if not _valid_amount(order.amount):
                logger.error(f"Order {order_id} has no usable amount: {order.amount!r}")
                raise GatewayRejected("Order record has no valid amount")
            if payment.amount != order.amount:
                logger.warning(
                    f"Amount mismatch for order={order_id} payment={payment_id}: "
                    f"order={order.amount} payment={payment.amount}"
                )
                raise AmountMismatch(order_amount=order.amount, payment_amount=payment.amount)

        logger.info(f"Payment {payment_id} verified for order {order_id}: {payment.amount} {payment.currency}")
        return PaymentConfirmation.from_payment(order_id, payment)
