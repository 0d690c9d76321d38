"""Default router mounted under the API prefix.

Entity routers (homestays, guides, products, bookings, search) are supplied
by the application that embeds this server; pass them to
``create_app(router=...)`` or include them into ``api_router``.
"""

from fastapi import APIRouter

from yatra.api.routes_health import router as health_router

api_router = APIRouter()
api_router.include_router(health_router)
