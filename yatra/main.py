"""JharkhandYatra API: application bootstrap."""

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI
from starlette.middleware import Middleware
from starlette.routing import Route

from yatra.api.router import api_router
from yatra.config import Settings, settings as default_settings
from yatra.errors import NotFoundEndpoint
from yatra.middleware.body_parsers import (
    JSONBodyParserMiddleware,
    URLEncodedBodyParserMiddleware,
)
from yatra.middleware.error_handler import ErrorHandlerMiddleware

# Configure logging
logging.basicConfig(
    level=default_settings.log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("JharkhandYatra API starting up...")
    yield
    logger.info("JharkhandYatra API shutting down...")


def create_app(router: APIRouter | None = None, settings: Settings | None = None) -> FastAPI:
    """Build the application with its request pipeline.

    Requests flow through the JSON parser, then the URL-encoded parser, then
    the router mounted at ``settings.api_prefix``. Anything the router does
    not match lands on the 404 fallback; any exception raised along the way
    is turned into a generic 500 by the error handler wrapping the pipeline.
    """
    settings = settings or default_settings

    # Listed outermost first: errors are caught around both parsers,
    # and JSON parsing runs before form parsing
    middleware = [
        Middleware(ErrorHandlerMiddleware),
        Middleware(
            JSONBodyParserMiddleware,
            limit=settings.body_limit,
            strict=settings.json_strict,
        ),
        Middleware(
            URLEncodedBodyParserMiddleware,
            limit=settings.body_limit,
            extended=settings.urlencoded_extended,
            parameter_limit=settings.parameter_limit,
        ),
    ]

    # No docs routes: only the API prefix is served
    app = FastAPI(
        title="JharkhandYatra API",
        description="REST API for homestays, guides, products, bookings and search.",
        version="1.0.0",
        lifespan=lifespan,
        middleware=middleware,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.include_router(router if router is not None else api_router, prefix=settings.api_prefix)

    # Appended last so every route above takes precedence; matches any method
    app.router.routes.append(
        Route("/{path:path}", endpoint=NotFoundEndpoint(), include_in_schema=False)
    )

    return app


app = create_app()
