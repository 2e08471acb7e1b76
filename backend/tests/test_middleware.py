"""
SEO Engine Backend: Middleware Tests
=======================================

What:  Request ID propagation and access logging.
"""

import logging

import pytest

ACCESS_LOGGER = "seo_engine.access"


def _access_records(caplog):
    return [r for r in caplog.records if r.name == ACCESS_LOGGER]


class TestRequestID:
    @pytest.mark.asyncio
    async def test_client_id_echoed(self, test_client):
        response = await test_client.get("/health", headers={"X-Request-ID": "abc-123"})

        assert response.headers["X-Request-ID"] == "abc-123"

    @pytest.mark.asyncio
    async def test_generated_ids_are_unique(self, test_client):
        ids = {(await test_client.get("/health")).headers["X-Request-ID"] for _ in range(10)}

        assert len(ids) == 10


class TestRequestLogging:
    @pytest.mark.asyncio
    async def test_successful_request_logged_at_info(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger=ACCESS_LOGGER)

        await test_client.get("/api-docs/openapi.json", headers={"X-Request-ID": "log-1"})

        records = _access_records(caplog)
        assert len(records) == 1
        record = records[0]
        assert record.levelno == logging.INFO
        assert record.method == "GET"
        assert record.path == "/api-docs/openapi.json"
        assert record.status == 200
        assert record.request_id == "log-1"

    @pytest.mark.asyncio
    async def test_not_found_logged_at_warning(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger=ACCESS_LOGGER)

        await test_client.get("/nonexistent")

        records = _access_records(caplog)
        assert [r.levelno for r in records] == [logging.WARNING]
        assert records[0].status == 404

    @pytest.mark.asyncio
    async def test_health_probe_not_logged(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger=ACCESS_LOGGER)

        await test_client.get("/health")

        assert _access_records(caplog) == []
