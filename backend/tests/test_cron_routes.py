"""
AI Productivity Hub Backend — Scheduled Job Endpoint Tests
===========================================================

What:  End-to-end tests of the job endpoints through the ASGI app.
How:   create_app(settings) with the DB session dependency overridden by a
       mock session; job bodies are patched where the test is about the shell.

What we test:
    ✅ Correct bearer → job runs → 200 {"ok": true, "processed": n}
    ✅ Wrong or missing bearer → 401, job never invoked
    ✅ Job raises → 500 {"ok": false, "error": <message>}
    ✅ No CRON_SECRET → 500, job never invoked (never fails open)
    ✅ ?secret= accepted only when enabled
"""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from conftest import make_settings
from prodhub.routes import cron

AUTH = {"Authorization": "Bearer s3cr3t"}


class TestCronAuthentication:

    @pytest.mark.asyncio
    async def test_correct_secret_returns_processed_zero(self, test_client):
        """Configured "s3cr3t", empty database → 200 {"ok": true, "processed": 0}."""
        response = await test_client.get("/api/cron-weekly", headers=AUTH)

        assert response.status_code == 200
        assert response.json() == {"ok": True, "processed": 0}

    @pytest.mark.asyncio
    async def test_wrong_secret_returns_401(self, test_client):
        response = await test_client.get(
            "/api/cron-weekly", headers={"Authorization": "Bearer wrong"}
        )

        assert response.status_code == 401
        assert response.json() == {"ok": False, "error": "Unauthorized"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "path",
        ["/api/cron/notifications", "/api/notifications", "/api/cron-weekly", "/api/cron-daily"],
    )
    async def test_every_job_endpoint_is_gated(self, test_client, path):
        response = await test_client.get(path)
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_rejected_request_never_runs_job(self, test_client):
        with patch.object(cron.weekly_report_job, "run", AsyncMock(return_value=5)) as run:
            missing = await test_client.get("/api/cron-weekly")
            wrong = await test_client.get(
                "/api/cron-weekly", headers={"Authorization": "Bearer wrong"}
            )

        assert missing.status_code == 401
        assert wrong.status_code == 401
        run.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_authorized_request_runs_job(self, test_client):
        with patch.object(cron.daily_digest_job, "run", AsyncMock(return_value=3)) as run:
            response = await test_client.get("/api/cron-daily", headers=AUTH)

        assert response.status_code == 200
        assert response.json() == {"ok": True, "processed": 3}
        run.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_response_carries_request_id(self, test_client):
        response = await test_client.get(
            "/api/cron-weekly", headers={**AUTH, "X-Request-ID": "abc12345"}
        )
        assert response.headers["X-Request-ID"] == "abc12345"


class TestMissingSecret:

    @pytest.mark.asyncio
    async def test_missing_secret_refuses_instead_of_allowing(self, make_client, mock_db_session):
        """Without CRON_SECRET the gate answers 500 and the job never runs."""
        app_settings = make_settings(cron_secret=None)

        with patch.object(cron.weekly_report_job, "run", AsyncMock(return_value=1)) as run:
            async with make_client(app_settings, mock_db_session) as client:
                no_header = await client.get("/api/cron-weekly")
                any_bearer = await client.get(
                    "/api/cron-weekly", headers={"Authorization": "Bearer None"}
                )

        assert no_header.status_code == 500
        assert no_header.json() == {"ok": False, "error": "Server misconfigured"}
        assert any_bearer.status_code == 500
        run.assert_not_awaited()


class TestQuerySecret:

    @pytest.mark.asyncio
    async def test_query_secret_rejected_by_default(self, test_client):
        response = await test_client.get("/api/cron-weekly?secret=s3cr3t")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_query_secret_accepted_when_enabled(self, make_client, mock_db_session):
        app_settings = make_settings(cron_allow_query_secret=True)

        async with make_client(app_settings, mock_db_session) as client:
            good = await client.get("/api/cron-weekly?secret=s3cr3t")
            bad = await client.get("/api/cron-weekly?secret=nope")

        assert good.status_code == 200
        assert bad.status_code == 401


class TestJobFailure:

    @pytest.mark.asyncio
    async def test_job_exception_returns_500_with_message(self, test_client):
        failing = AsyncMock(side_effect=RuntimeError("profiles query timed out"))
        with patch.object(cron.weekly_report_job, "run", failing):
            response = await test_client.get("/api/cron-weekly", headers=AUTH)

        assert response.status_code == 500
        assert response.json() == {"ok": False, "error": "profiles query timed out"}

    @pytest.mark.asyncio
    async def test_force_flag_reaches_notifications_job(self, test_client):
        with patch.object(cron.notifications_job, "run", AsyncMock(return_value=0)) as run:
            response = await test_client.get("/api/cron/notifications?force=1", headers=AUTH)

        assert response.status_code == 200
        assert run.await_args.kwargs["force"] is True

    @pytest.mark.asyncio
    async def test_database_error_does_not_leak_sql(self, test_client, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=OperationalError(
                "SELECT profiles.id, profiles.email FROM profiles",
                {},
                Exception("no such table: profiles"),
            )
        )

        response = await test_client.get("/api/cron-weekly", headers=AUTH)

        assert response.status_code == 500
        assert response.json() == {"ok": False, "error": "Failed to load profiles"}
        assert "SQL" not in response.text
