from typing import Optional

from fastapi import APIRouter, Depends

from checkout_api.api.deps import get_order_issuer, get_settings
from checkout_api.core.config import Settings
from checkout_api.schemas.payments import CreateOrderRequest, CreateOrderResponse, ErrorResponse, OrderOut
from checkout_api.services.orders.issuer import OrderIssuer

router = APIRouter(tags=["orders"])


@router.post(
    "/create-order",
    response_model=CreateOrderResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def create_order(
    payload: Optional[CreateOrderRequest] = None,
    issuer: OrderIssuer = Depends(get_order_issuer),
    settings: Settings = Depends(get_settings),
):
    # InvalidAmount / OrderCreationFailed are rendered by the PaymentError handler
    payload = payload or CreateOrderRequest()
    order = await issuer.create_order(
        amount=payload.amount,
        currency=payload.currency,
        receipt=payload.receipt,
        notes=payload.notes,
    )
    return CreateOrderResponse(
        order=OrderOut(**order.public_dict()),
        key_id=settings.RAZORPAY_KEY_ID or None,
    )
