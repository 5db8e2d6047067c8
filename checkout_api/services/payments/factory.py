from checkout_api.core.config import Settings
from checkout_api.core.errors import ConfigurationError
from .base import PaymentGateway
from .mock import MockGateway
from .razorpay import RazorpayGateway


def get_payment_gateway(settings: Settings) -> PaymentGateway:
    provider = settings.provider
    if provider == "razorpay":
        return RazorpayGateway.from_settings(settings)
    if provider == "mock":
        # signs with the same secret the verifier checks against
        return MockGateway(key_secret=settings.RAZORPAY_KEY_SECRET)
    raise ConfigurationError(f"Unknown payment provider: {settings.PAYMENTS_PROVIDER}")
