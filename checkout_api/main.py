import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from checkout_api.core.config import Settings, settings as default_settings
from checkout_api.core.errors import InternalError, PaymentError
from checkout_api.api.api import router as api_router
from checkout_api.api.routers import health as health_router
from checkout_api.services.orders.issuer import OrderIssuer
from checkout_api.services.orders.receipts import ReceiptGenerator, receipt_generator
from checkout_api.services.payments.base import PaymentGateway
from checkout_api.services.payments.factory import get_payment_gateway
from checkout_api.services.payments.verifier import PaymentVerifier

logger = logging.getLogger(__name__)

HTTP_ERROR_MESSAGES = {
    404: "Not found",
    405: "Method not allowed",
}


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or "INFO").upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(PaymentError)
    async def payment_error_handler(request: Request, exc: PaymentError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc!s}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info(f"{request.method} {request.url.path} invalid body at {[e.get('loc') for e in exc.errors()]}")
        return JSONResponse(status_code=400, content={"success": False, "error": "Invalid request body"})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # plain OPTIONS (no preflight headers) on a known route gets an empty 200
        if request.method == "OPTIONS" and exc.status_code == 405:
            return Response(status_code=200, headers=getattr(exc, "headers", None))
        message = HTTP_ERROR_MESSAGES.get(exc.status_code) or str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content=InternalError().to_dict())


def create_app(
    settings: Optional[Settings] = None,
    gateway: Optional[PaymentGateway] = None,
    make_receipt: Optional[ReceiptGenerator] = None,
) -> FastAPI:
    """build the API. gateway / make_receipt can be injected (tests, local runs)."""
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # fail fast: an empty secret would make every signature check fail
        settings.validate()
        active_gateway = gateway or get_payment_gateway(settings)
        app.state.gateway = active_gateway
        app.state.order_issuer = OrderIssuer(
            active_gateway,
            make_receipt=make_receipt or receipt_generator(settings.RECEIPT_PREFIX),
            default_currency=settings.DEFAULT_CURRENCY,
        )
        app.state.payment_verifier = PaymentVerifier(active_gateway, settings.RAZORPAY_KEY_SECRET)
        logger.info(f"Checkout API started (env={settings.APP_ENV}, provider={active_gateway.name})")

        yield

        # injected gateways belong to the caller
        if gateway is None:
            await active_gateway.aclose()

    app = FastAPI(title="Checkout API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings

    # set up CORS so the storefront can talk to us
    origins = settings.ALLOWED_ORIGINS or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # browsers refuse credentials together with a wildcard origin
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    api_prefix = "/" + settings.API_PREFIX.strip("/") if settings.API_PREFIX.strip("/") else ""
    app.include_router(api_router, prefix=api_prefix)
    app.include_router(health_router.router)
    # api index mirrors /health
    app.add_api_route(api_prefix or "/", health_router.health, methods=["GET"], include_in_schema=False)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("checkout_api.main:app", host=default_settings.APP_HOST, port=default_settings.APP_PORT)
