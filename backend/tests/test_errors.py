"""
SEO Engine Backend: Error Handling Tests
===========================================

What:  Routing misses and handler failures return structured ErrorResponse
       bodies with the right status code.
Why:   An unregistered path must be a 404, never a 500, and every error body
       must carry the request ID the client can quote.
"""

import pytest

from seo_engine.config import Settings
from seo_engine.exceptions import SeoEngineError
from seo_engine.main import create_app

ERROR_KEYS = {"error", "message", "details", "request_id"}


class TestRoutingMiss:
    """Unregistered paths and methods."""

    @pytest.mark.asyncio
    async def test_unknown_path_is_404(self, test_client):
        response = await test_client.get("/nonexistent")

        assert response.status_code == 404
        body = response.json()
        assert set(body) == ERROR_KEYS
        assert body["error"] == "not_found"
        assert body["message"] == "No route matches GET /nonexistent"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "path",
        ["/", "/healthz", "/health/extra", "/health/", "/api-docs", "/api-docs/openapi.json/", "/docs/", "/docs/missing"],
    )
    async def test_near_miss_paths_are_404(self, test_client, path):
        response = await test_client.get(path)

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_wrong_method_is_405(self, test_client):
        response = await test_client.post("/health")

        assert response.status_code == 405
        assert response.json()["error"] == "method_not_allowed"
        assert "GET" in response.headers["allow"]

    @pytest.mark.asyncio
    async def test_error_body_carries_request_id(self, test_client):
        response = await test_client.get("/nonexistent", headers={"X-Request-ID": "trace-42"})

        assert response.headers["X-Request-ID"] == "trace-42"
        assert response.json()["request_id"] == "trace-42"

    @pytest.mark.asyncio
    async def test_generated_request_id_matches_body(self, test_client):
        response = await test_client.get("/nonexistent")

        assert response.json()["request_id"] == response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_trailing_slash_is_not_redirected(self, test_client):
        response = await test_client.get("/health/")

        assert response.status_code == 404
        assert "location" not in response.headers
        assert response.json()["message"] == "No route matches GET /health/"


class TestHandlerFailures:
    """Exceptions raised inside route handlers."""

    @pytest.mark.asyncio
    async def test_application_error_is_500(self, make_client):
        app = create_app(Settings())

        async def explode():
            raise SeoEngineError("internal detail", context={"secret": "do-not-leak"})

        app.add_api_route("/explode", explode)

        async with make_client(app) as client:
            response = await client.get("/explode")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert "do-not-leak" not in response.text
        assert "internal detail" not in response.text

    @pytest.mark.asyncio
    async def test_unexpected_error_is_generic_500(self, make_client):
        app = create_app(Settings())

        async def crash():
            raise RuntimeError("stack details")

        app.add_api_route("/crash", crash)

        async with make_client(app, raise_app_exceptions=False) as client:
            response = await client.get("/crash", headers={"X-Request-ID": "crash-1"})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "internal_server_error"
        assert body["request_id"] == "crash-1"
        assert response.headers["X-Request-ID"] == "crash-1"
        assert "stack details" not in response.text

    @pytest.mark.asyncio
    async def test_invalid_query_parameter_is_422(self, make_client):
        app = create_app(Settings())

        async def page(limit: int = 20):
            return {"limit": limit}

        app.add_api_route("/page", page)

        async with make_client(app) as client:
            ok = await client.get("/page", params={"limit": "5"})
            bad = await client.get("/page", params={"limit": "many"})

        assert ok.json() == {"limit": 5}
        assert bad.status_code == 422
        body = bad.json()
        assert body["error"] == "validation_error"
        assert body["details"]["errors"][0]["loc"] == ["query", "limit"]
