from checkout_api.core.config import Settings

SECRET = "test_key_secret"
KEY_ID = "rzp_test_key123"


def make_settings(**overrides) -> Settings:
    values = dict(
        APP_ENV="test",
        LOG_LEVEL="WARNING",
        API_PREFIX="/api",
        ALLOWED_ORIGINS=["*"],
        PAYMENTS_PROVIDER="mock",
        RAZORPAY_KEY_ID=KEY_ID,
        RAZORPAY_KEY_SECRET=SECRET,
        RAZORPAY_BASE_URL="https://api.razorpay.test/v1",
        GATEWAY_TIMEOUT_SECONDS=5.0,
        DEFAULT_CURRENCY="INR",
        RECEIPT_PREFIX="order_rcpt",
    )
    values.update(overrides)
    return Settings(**values)


def tamper(signature: str) -> str:
    """same length, last character changed."""
    return signature[:-1] + ("0" if signature[-1] != "0" else "1")
