import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

from checkout_api.core.errors import ConfigurationError

# grab env vars from .env file
load_dotenv()

SUPPORTED_PROVIDERS = ("razorpay", "mock")


def _env(name: str, default: str = "") -> str:
    return os.getenv(name, default)


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


def _env_list(name: str, default: str = "*") -> List[str]:
    raw = os.getenv(name, default)
    return [o.strip() for o in raw.split(",") if o.strip()] if raw else ["*"]


@dataclass
class Settings:
    """process config, read from env at construction; kwargs override env."""

    # app settings
    APP_ENV: str = field(default_factory=lambda: _env("APP_ENV", "dev"))
    APP_HOST: str = field(default_factory=lambda: _env("APP_HOST", "0.0.0.0"))
    APP_PORT: int = field(default_factory=lambda: _env_int("APP_PORT", 8000))
    LOG_LEVEL: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))
    API_PREFIX: str = field(default_factory=lambda: _env("API_PREFIX", "/api"))

    # CORS stuff
    ALLOWED_ORIGINS: List[str] = field(default_factory=lambda: _env_list("ALLOWED_ORIGINS"))

    # payment gateway
    PAYMENTS_PROVIDER: str = field(default_factory=lambda: _env("PAYMENTS_PROVIDER", "razorpay"))
    RAZORPAY_KEY_ID: str = field(default_factory=lambda: _env("RAZORPAY_KEY_ID"))
    # kept out of repr
    RAZORPAY_KEY_SECRET: str = field(default_factory=lambda: _env("RAZORPAY_KEY_SECRET"), repr=False)
    RAZORPAY_BASE_URL: str = field(
        default_factory=lambda: _env("RAZORPAY_BASE_URL", "https://api.razorpay.com/v1")
    )
    GATEWAY_TIMEOUT_SECONDS: float = field(default_factory=lambda: _env_float("GATEWAY_TIMEOUT_SECONDS", 10.0))

    # orders
    DEFAULT_CURRENCY: str = field(default_factory=lambda: _env("DEFAULT_CURRENCY", "INR"))
    RECEIPT_PREFIX: str = field(default_factory=lambda: _env("RECEIPT_PREFIX", "order_rcpt"))

    @property
    def is_production(self) -> bool:
        return self.APP_ENV in ("prod", "production")

    @property
    def provider(self) -> str:
        return (self.PAYMENTS_PROVIDER or "").strip().lower()

    def validate(self) -> "Settings":
        """refuse to start without the credentials the verifier depends on."""
        if self.provider not in SUPPORTED_PROVIDERS:
            raise ConfigurationError(
                f"Unknown PAYMENTS_PROVIDER '{self.PAYMENTS_PROVIDER}', expected one of: {', '.join(SUPPORTED_PROVIDERS)}"
            )
        if not self.RAZORPAY_KEY_SECRET:
            raise ConfigurationError("RAZORPAY_KEY_SECRET is not configured")
        if self.provider == "razorpay" and not self.RAZORPAY_KEY_ID:
            raise ConfigurationError("RAZORPAY_KEY_ID is not configured")
        if self.GATEWAY_TIMEOUT_SECONDS <= 0:
            raise ConfigurationError("GATEWAY_TIMEOUT_SECONDS must be positive")
        return self


settings = Settings()
