"""
Blogsite Backend — Request ID & Access Log Middleware Tests
============================================================

What:  Which client request IDs are trusted, and which requests reach the access log.
How:   Helpers are tested directly; the access log is read through caplog.
"""

import logging

import pytest

from blogsite.middleware.logging import level_for_status
from blogsite.middleware.request_id import new_request_id, resolve_request_id


class TestRequestIds:
    """Tests for resolve_request_id."""

    @pytest.mark.parametrize("value", ["abc123", "req-42.retry_1", "a" * 64])
    def test_plain_token_kept(self, value):
        assert resolve_request_id(value) == value

    @pytest.mark.parametrize("value", [None, "", "a" * 65, "id with spaces", "id\ninjected line", "<script>"])
    def test_untrusted_value_replaced(self, value):
        rid = resolve_request_id(value)

        assert rid != value
        assert len(rid) == 8

    def test_generated_ids_differ(self):
        assert new_request_id() != new_request_id()

    @pytest.mark.asyncio
    async def test_untrusted_header_not_echoed(self, test_client):
        response = await test_client.get("/api/blogposts", headers={"X-Request-ID": "x" * 200})

        assert len(response.headers["x-request-id"]) == 8


class TestAccessLog:
    """Tests for RequestLoggingMiddleware."""

    @pytest.mark.parametrize(
        "status,level",
        [(200, logging.INFO), (201, logging.INFO), (404, logging.WARNING), (405, logging.WARNING), (503, logging.ERROR)],
    )
    def test_level_for_status(self, status, level):
        assert level_for_status(status) == level

    @pytest.mark.asyncio
    async def test_request_is_logged(self, test_client, caplog):
        with caplog.at_level(logging.INFO, logger="blogsite.access"):
            await test_client.get("/api/blogposts", headers={"X-Request-ID": "trace-1"})

        records = [r for r in caplog.records if r.name == "blogsite.access"]
        assert len(records) == 1
        assert "GET /api/blogposts 200" in records[0].getMessage()
        assert records[0].request_id == "trace-1"

    @pytest.mark.asyncio
    async def test_preflight_not_logged(self, test_client, caplog):
        with caplog.at_level(logging.INFO, logger="blogsite.access"):
            response = await test_client.options(
                "/api/blogposts/edit", headers={"Origin": "https://site.dev"}
            )

        assert response.status_code == 200
        assert not [r for r in caplog.records if r.name == "blogsite.access"]

    @pytest.mark.asyncio
    async def test_health_not_logged(self, test_client, caplog):
        with caplog.at_level(logging.INFO, logger="blogsite.access"):
            await test_client.get("/health")

        assert not [r for r in caplog.records if r.name == "blogsite.access"]
