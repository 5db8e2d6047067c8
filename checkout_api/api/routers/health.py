from fastapi import APIRouter, Depends, Request

from checkout_api.api.deps import get_gateway, get_settings
from checkout_api.core.config import Settings
from checkout_api.services.payments.base import PaymentGateway

router = APIRouter(tags=["health"])


@router.get("/health")
def health(
    request: Request,
    settings: Settings = Depends(get_settings),
    gateway: PaymentGateway = Depends(get_gateway),
):
    """status plus where the two endpoints live. Also served at the api prefix."""
    prefix = settings.API_PREFIX.rstrip("/")
    return {
        "status": "healthy",
        "message": f"{request.app.title} is running",
        "env": settings.APP_ENV,
        "gateway": gateway.health_check(),
        "endpoints": {
            "createOrder": f"{prefix}/create-order",
            "verifyPayment": f"{prefix}/verify-payment",
        },
    }
