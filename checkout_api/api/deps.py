from fastapi import Request

from checkout_api.core.config import Settings
from checkout_api.services.orders.issuer import OrderIssuer
from checkout_api.services.payments.base import PaymentGateway
from checkout_api.services.payments.verifier import PaymentVerifier


# everything below is built once in the app lifespan and lives on app.state

def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_gateway(request: Request) -> PaymentGateway:
    return request.app.state.gateway


def get_order_issuer(request: Request) -> OrderIssuer:
    return request.app.state.order_issuer


def get_payment_verifier(request: Request) -> PaymentVerifier:
    return request.app.state.payment_verifier
