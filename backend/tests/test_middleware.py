"""
AI Productivity Hub Backend — Middleware Unit Tests
====================================================
"""

import logging

import pytest

from prodhub.middleware.logging import level_for_status, route_kind
from prodhub.middleware.request_id import resolve_request_id


class TestRequestId:

    def test_inbound_id_is_reused(self):
        assert resolve_request_id("run-2026.01.15") == "run-2026.01.15"

    @pytest.mark.parametrize("inbound", [None, "", "has spaces", "x" * 65, "line\nbreak"])
    def test_missing_or_malformed_id_is_replaced(self, inbound):
        rid = resolve_request_id(inbound)
        assert rid != inbound
        assert len(rid) == 8

    @pytest.mark.asyncio
    async def test_generated_id_is_echoed(self, test_client):
        response = await test_client.get("/api/cron-weekly")
        assert len(response.headers["X-Request-ID"]) == 8


class TestAccessLogFields:

    @pytest.mark.parametrize(
        "status, level",
        [(200, logging.INFO), (401, logging.WARNING), (500, logging.ERROR)],
    )
    def test_level_follows_status_class(self, status, level):
        assert level_for_status(status) == level

    @pytest.mark.parametrize(
        "path, kind",
        [
            ("/api/cron-weekly", "cron"),
            ("/api/cron/notifications", "cron"),
            ("/api/notifications", "cron"),
            ("/api/admin/feedback", "admin"),
            ("/docs", "api"),
        ],
    )
    def test_route_kind(self, path, kind):
        assert route_kind(path) == kind
