"""
Order issuing.

Takes an amount in major units (rupees), validates it locally, and asks the
gateway for an auto-capture order worth amount * 100 minor units (paise).
"""
import logging
import math
import re
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from checkout_api.core.errors import GatewayError, InvalidAmount, InvalidCurrency, OrderCreationFailed
from checkout_api.models.gateway import GatewayOrder
from checkout_api.services.payments.base import PaymentGateway
from .receipts import ReceiptGenerator, receipt_generator

logger = logging.getLogger(__name__)

MINOR_UNITS_PER_MAJOR = 100
MIN_AMOUNT = Decimal("1")
CURRENCY_RE = re.compile(r"^[A-Z]{3}$")
# gateway limits: 15 note keys, 256 chars per value
MAX_NOTES = 15
MAX_NOTE_LENGTH = 256


def parse_amount(raw: Any) -> int:
    """validate a major-unit amount and return it in minor units."""
    if raw is None or isinstance(raw, bool):
        raise InvalidAmount()
    if isinstance(raw, float) and not math.isfinite(raw):
        raise InvalidAmount()
    if isinstance(raw, (int, float, Decimal)):
        text = str(raw)
    elif isinstance(raw, str):
        text = raw.strip()
    else:
        raise InvalidAmount()

    try:
        value = Decimal(text)
    except InvalidOperation:
        raise InvalidAmount()
    if not value.is_finite() or value < MIN_AMOUNT:
        raise InvalidAmount()

    minor = value * MINOR_UNITS_PER_MAJOR
    if minor != minor.to_integral_value():
        # sub-paisa precision can't be charged
        raise InvalidAmount()
    return int(minor)


def normalize_currency(raw: Optional[str], default: str = "INR") -> str:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return default
    if not isinstance(raw, str):
        raise InvalidCurrency()
    currency = raw.strip().upper()
    if not CURRENCY_RE.match(currency):
        raise InvalidCurrency()
    return currency


def build_notes(notes: Optional[Dict[str, Any]], now: Optional[datetime] = None) -> Dict[str, str]:
    created_at = (now or datetime.now(tz=timezone.utc)).isoformat()
    out: Dict[str, str] = {}
    for key, value in (notes or {}).items():
        if value is None or key == "created_at":
            continue
        if len(out) >= MAX_NOTES - 1:
            break
        out[str(key)] = str(value)[:MAX_NOTE_LENGTH]
    out["created_at"] = created_at
    return out


def _public_message(error: GatewayError) -> str:
    # only the gateway's own API error text goes back to the caller;
    # transport failures have no HTTP status and carry local exception detail
    if error.http_status is None:
        return error.error
    return error.description or error.error


class OrderIssuer:
    def __init__(
        self,
        gateway: PaymentGateway,
        make_receipt: Optional[ReceiptGenerator] = None,
        default_currency: str = "INR",
    ):
        self.gateway = gateway
        self.make_receipt = make_receipt or receipt_generator()
        self.default_currency = default_currency

    async def create_order(
        self,
        amount: Any,
        currency: Optional[str] = None,
        receipt: Optional[str] = None,
        notes: Optional[Dict[str, Any]] = None,
    ) -> GatewayOrder:
        # all local checks run before the gateway is touched
        try:
            amount_minor = parse_amount(amount)
        except InvalidAmount:
            logger.info(f"Rejected order request with invalid amount: {amount!r}")
            raise
        currency = normalize_currency(currency, self.default_currency)
        receipt = receipt or self.make_receipt()

        try:
            order = await self.gateway.create_order(
                amount_minor=amount_minor,
                currency=currency,
                receipt=receipt,
                auto_capture=True,
                notes=build_notes(notes),
            )
        except GatewayError as e:
            logger.error(f"Order creation failed for receipt {receipt}: {e}")
            raise OrderCreationFailed(_public_message(e)) from e

        if order.amount != amount_minor:
            logger.error(f"Gateway order {order.id} amount {order.amount!r} differs from requested {amount_minor}")
            raise OrderCreationFailed("Payment gateway returned an invalid order")

        logger.info(f"Order created: {order.id} amount={order.amount} {order.currency} receipt={order.receipt}")
        return order
