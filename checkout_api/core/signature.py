import hmac
import hashlib
from typing import Any


def payment_signature_payload(order_id: str, payment_id: str) -> str:
    """canonical string the checkout widget signs: ``order_id|payment_id``."""
    return f"{order_id}|{payment_id}"


def generate_payment_signature(order_id: str, payment_id: str, secret: str) -> str:
    """HMAC-SHA256 of the canonical payload, keyed by the integration secret, lowercase hex."""
    payload = payment_signature_payload(order_id, payment_id)
    return hmac.new(secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).hexdigest()


def signatures_match(expected: str, supplied: Any) -> bool:
    """constant-time comparison; a length mismatch or a non-string is just a mismatch."""
    if not isinstance(expected, str) or not isinstance(supplied, str):
        return False
    # bytes so non-ascii input can't raise inside compare_digest
    return hmac.compare_digest(expected.encode("utf-8"), supplied.encode("utf-8"))


def verify_payment_signature(order_id: str, payment_id: str, signature: Any, secret: str) -> bool:
    expected = generate_payment_signature(order_id, payment_id, secret)
    return signatures_match(expected, signature)
