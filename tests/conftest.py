# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# Sets up the environment before the app is imported and provides an app
# built around a small test router (echo, failing and status routes).
# =============================================================================

import os

# yatra.config loads settings at import time
os.environ.pop("PORT", None)
os.environ.setdefault("LOG_LEVEL", "INFO")

import pytest
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.testclient import TestClient

from yatra.config import Settings
from yatra.main import create_app
from yatra.middleware.body_parsers import get_body


class BookingLookupError(Exception):
    pass


def build_test_router() -> APIRouter:
    router = APIRouter()

    @router.post("/echo")
    async def echo(body=Depends(get_body)):
        return {"body": body}

    @router.post("/raw")
    async def raw(request: Request):
        data = await request.body()
        return {"raw": data.decode("utf-8"), "body": request.state.body}

    @router.get("/bookings/broken")
    async def broken_booking():
        raise BookingLookupError("db password is hunter2")

    @router.get("/guides/private")
    async def private_guide():
        raise HTTPException(status_code=403, detail="Guide profile is private")

    return router


@pytest.fixture
def test_settings():
    return Settings(_env_file=None)


@pytest.fixture
def app(test_settings):
    return create_app(router=build_test_router(), settings=test_settings)


@pytest.fixture
def client(app):
    # Unhandled errors must come back as responses, not re-raise in the test
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def default_client():
    """Client for the app with its default API router."""
    with TestClient(create_app(settings=Settings(_env_file=None)), raise_server_exceptions=False) as test_client:
        yield test_client
