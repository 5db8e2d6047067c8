from fastapi import APIRouter

from checkout_api.api.routers import orders as orders_router
from checkout_api.api.routers import payments as payments_router

router = APIRouter()

# checkout routes, mounted under settings.API_PREFIX
router.include_router(orders_router.router)
router.include_router(payments_router.router)
