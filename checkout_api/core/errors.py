from typing import Any, Dict, Iterable, Optional


class ConfigurationError(RuntimeError):
    """raised at startup when required settings are missing or invalid."""


class PaymentError(Exception):
    """base for every error the API turns into a JSON failure response.

    ``error`` is the public message, ``extra`` holds public diagnostic
    fields. Nothing in either may contain credentials or internal detail.
    """

    status_code: int = 500
    error: str = "Internal server error"

    def __init__(self, error: Optional[str] = None, **extra: Any):
        self.error = error or self.error
        self.extra: Dict[str, Any] = extra
        super().__init__(self.error)

    def to_dict(self) -> Dict[str, Any]:
        return {"success": False, "error": self.error, **self.extra}


# validation, detected locally before any gateway call

class InvalidAmount(PaymentError):
    status_code = 400
    error = "Invalid amount. Amount must be greater than 0"


class InvalidCurrency(PaymentError):
    status_code = 400
    error = "Invalid currency. Expected a 3-letter ISO code"


class MissingField(PaymentError):
    status_code = 400
    error = "Missing required fields"

    def __init__(self, fields: Iterable[str]):
        self.fields = list(fields)
        super().__init__(fields=self.fields)


# verification

class InvalidSignature(PaymentError):
    status_code = 400
    error = "Invalid signature"


class PaymentNotCaptured(PaymentError):
    status_code = 400
    error = "Payment not captured"

    def __init__(self, status: Optional[str]):
        self.status = status
        super().__init__(status=status)


class AmountMismatch(PaymentError):
    status_code = 400
    error = "Payment amount mismatch"

    def __init__(self, order_amount: int, payment_amount: int):
        self.order_amount = order_amount
        self.payment_amount = payment_amount
        super().__init__(order_amount=order_amount, payment_amount=payment_amount)


# gateway side

class OrderCreationFailed(PaymentError):
    status_code = 500
    error = "Failed to create order"

    def __init__(self, message: Optional[str] = None):
        self.message = message
        super().__init__(message=message or "Unknown error")


class GatewayError(PaymentError):
    status_code = 500
    error = "Payment gateway error"

    def __init__(self, description: Optional[str] = None, http_status: Optional[int] = None, code: Optional[str] = None):
        # description/code stay server side; to_dict() only exposes the generic message
        self.description = description or ""
        self.http_status = http_status
        self.code = code
        super().__init__()

    def __str__(self) -> str:
        parts = [self.error]
        if self.http_status:
            parts.append(f"HTTP {self.http_status}")
        if self.code:
            parts.append(self.code)
        if self.description:
            parts.append(self.description)
        return ": ".join(parts)


class GatewayUnavailable(GatewayError):
    """network or auth failure talking to the gateway."""

    error = "Payment gateway unavailable"


class GatewayRejected(GatewayError):
    """gateway answered with an API error (bad request, unknown id, ...)."""

    error = "Payment gateway rejected the request"


class InternalError(PaymentError):
    status_code = 500
    error = "Internal server error"
