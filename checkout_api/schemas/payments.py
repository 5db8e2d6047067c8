from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class CreateOrderRequest(BaseModel):
    # validated by the issuer so bad input maps to InvalidAmount
    amount: Any = None
    currency: Optional[str] = None
    receipt: Optional[str] = Field(default=None, max_length=40)
    notes: Optional[Dict[str, Any]] = None


class OrderOut(BaseModel):
    id: str
    amount: int
    currency: str
    receipt: Optional[str] = None
    status: str


class CreateOrderResponse(BaseModel):
    success: bool = True
    order: OrderOut
    key_id: Optional[str] = None  # public key id for the checkout widget


class VerifyPaymentRequest(BaseModel):
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    razorpay_signature: Optional[str] = None


class PaymentOut(BaseModel):
    id: str
    order_id: str
    amount: int
    currency: str
    status: str
    method: Optional[str] = None
    captured_at: Optional[str] = None


class VerifyPaymentResponse(BaseModel):
    success: bool = True
    payment: PaymentOut


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    message: Optional[str] = None
