"""
SEO Engine Backend: Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── test_client: HTTPX AsyncClient bound to the module-level app
    ├── make_client: factory for clients bound to a custom app
    └── openapi_document: the served OpenAPI document as a dict
"""

import os
from typing import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Override settings BEFORE any app imports: the settings singleton reads the
# environment when seo_engine.config is first imported
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("PORT", None)
os.environ.pop("DOCS_URL", None)
os.environ.pop("OPENAPI_URL", None)


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client() -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient configured to talk to the module-level FastAPI app.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from seo_engine.main import app
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def make_client() -> Callable[..., AsyncClient]:
    """
    Factory for clients bound to an app built inside the test.

    raise_app_exceptions=False lets tests observe the 500 response the
    catch-all handler produces instead of the re-raised exception.
    """

    def _make(app: FastAPI, raise_app_exceptions: bool = True) -> AsyncClient:
        transport = ASGITransport(app=app, raise_app_exceptions=raise_app_exceptions)
        return AsyncClient(transport=transport, base_url="http://test")

    return _make


@pytest_asyncio.fixture
async def openapi_document(test_client: AsyncClient) -> dict:
    """The manifest exactly as the documentation mount serves it."""
    response = await test_client.get("/api-docs/openapi.json")
    assert response.status_code == 200
    return response.json()
