import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from checkout_api.api.deps import get_payment_verifier
from checkout_api.core.errors import GatewayError, PaymentError
from checkout_api.schemas.payments import ErrorResponse, PaymentOut, VerifyPaymentRequest, VerifyPaymentResponse
from checkout_api.services.payments.verifier import PaymentVerifier

logger = logging.getLogger(__name__)

router = APIRouter(tags=["payments"])

VERIFICATION_FAILED = {"success": False, "error": "Payment verification failed"}


@router.post(
    "/verify-payment",
    response_model=VerifyPaymentResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def verify_payment(
    payload: Optional[VerifyPaymentRequest] = None,
    verifier: PaymentVerifier = Depends(get_payment_verifier),
):
    payload = payload or VerifyPaymentRequest()
    try:
        confirmation = await verifier.verify(
            payload.razorpay_order_id,
            payload.razorpay_payment_id,
            payload.razorpay_signature,
        )
    except GatewayError as e:
        # full detail stays in our logs, the caller gets a generic message
        logger.error(f"Payment verification failed talking to gateway (order={payload.razorpay_order_id}): {e}")
        return JSONResponse(status_code=500, content=VERIFICATION_FAILED)
    except PaymentError:
        raise
    except Exception:
        logger.exception(f"Unexpected error verifying payment (order={payload.razorpay_order_id})")
        return JSONResponse(status_code=500, content=VERIFICATION_FAILED)

    return VerifyPaymentResponse(
        payment=PaymentOut(
            id=confirmation.payment_id,
            order_id=confirmation.order_id,
            amount=confirmation.amount,
            currency=confirmation.currency,
            status=confirmation.status,
            method=confirmation.method,
            captured_at=confirmation.captured_at,
        )
    )
