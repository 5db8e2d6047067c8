"""
Payment gateway services package.

This package contains:
- the gateway interface and its Razorpay / in-memory implementations
- the factory picking one from settings
- the payment verifier
"""

from .base import PaymentGateway
from .factory import get_payment_gateway
from .mock import MockGateway
from .razorpay import RazorpayGateway
from .verifier import PaymentVerifier

__all__ = [
    'PaymentGateway',
    'get_payment_gateway',
    'MockGateway',
    'RazorpayGateway',
    'PaymentVerifier',
]
