"""
Plain records for what the payment gateway returns.
Built from the gateway's JSON entities; never persisted locally.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from dataclasses import dataclass, field

PAYMENT_CAPTURED = "captured"


def _to_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class GatewayOrder:
    """an order as the gateway knows it (amount in minor units)."""
    id: str
    amount: Optional[int]  # minor units; None when the gateway omits it
    currency: str
    receipt: Optional[str] = None
    status: str = "created"
    notes: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[int] = None  # epoch seconds

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "GatewayOrder":
        notes = data.get("notes")
        return cls(
            id=str(data.get("id") or ""),
            amount=_to_int(data.get("amount")),
            currency=str(data.get("currency") or ""),
            receipt=data.get("receipt"),
            status=str(data.get("status") or ""),
            # razorpay sends an empty list when no notes were set
            notes=dict(notes) if isinstance(notes, dict) else {},
            created_at=_to_int(data.get("created_at")),
        )

    def public_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "amount": self.amount,
            "currency": self.currency,
            "receipt": self.receipt,
            "status": self.status,
        }


@dataclass(frozen=True)
class GatewayPayment:
    """a payment attempt against an order, read-only from our side."""
    id: str
    order_id: Optional[str]
    amount: Optional[int]
    currency: str
    status: str
    method: Optional[str] = None
    captured: bool = False
    created_at: Optional[int] = None  # epoch seconds

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "GatewayPayment":
        return cls(
            id=str(data.get("id") or ""),
            order_id=data.get("order_id") or None,
            amount=_to_int(data.get("amount")),
            currency=str(data.get("currency") or ""),
            status=str(data.get("status") or ""),
            method=data.get("method"),
            captured=bool(data.get("captured", False)),
            created_at=_to_int(data.get("created_at")),
        )

    @property
    def is_captured(self) -> bool:
        return self.status == PAYMENT_CAPTURED


@dataclass(frozen=True)
class PaymentConfirmation:
    """normalized result of a successful verification."""
    order_id: str
    payment_id: str
    amount: int
    currency: str
    status: str
    method: Optional[str] = None
    captured_at: Optional[str] = None  # ISO-8601, UTC

    @classmethod
    def from_payment(cls, order_id: str, payment: GatewayPayment) -> "PaymentConfirmation":
        captured_at = None
        if payment.created_at is not None:
            captured_at = datetime.fromtimestamp(payment.created_at, tz=timezone.utc).isoformat()
        return cls(
            order_id=order_id,
            payment_id=payment.id,
            amount=payment.amount,
            currency=payment.currency,
            status=payment.status,
            method=payment.method,
            captured_at=captured_at,
        )
