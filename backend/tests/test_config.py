"""
AI Productivity Hub Backend — Configuration & Startup Tests
============================================================

What we test:
    ✅ Missing secrets are named in a ConfigurationError
    ✅ Blank secrets count as missing
    ✅ NEXT_PUBLIC_ADMIN_KEY fallback
    ✅ App startup aborts without CRON_SECRET (no fail-open mode)
"""

import pytest

from conftest import make_settings
from prodhub.config import Settings
from prodhub.exceptions import ConfigurationError
from prodhub.main import create_app


class TestSettingsValidation:

    def test_complete_settings_pass(self):
        make_settings().validate_required_for_production()

    def test_missing_cron_secret_is_named(self):
        with pytest.raises(ConfigurationError) as exc_info:
            make_settings(cron_secret=None).validate_required_for_production()

        assert "CRON_SECRET" in exc_info.value.message
        assert exc_info.value.context["missing"] == ["CRON_SECRET"]

    def test_blank_secret_counts_as_missing(self):
        settings = make_settings(cron_secret="   ", admin_key="")

        assert settings.cron_secret is None
        assert settings.missing_secrets() == ["CRON_SECRET", "ADMIN_KEY"]

    def test_secrets_read_from_environment(self, monkeypatch):
        monkeypatch.setenv("CRON_SECRET", "from-env")
        monkeypatch.setenv("NEXT_PUBLIC_ADMIN_KEY", "public-fallback")

        settings = Settings(_env_file=None)

        assert settings.cron_secret == "from-env"
        assert settings.admin_key == "public-fallback"

    def test_admin_key_wins_over_public_fallback(self, monkeypatch):
        monkeypatch.setenv("ADMIN_KEY", "private")
        monkeypatch.setenv("NEXT_PUBLIC_ADMIN_KEY", "public-fallback")

        assert Settings(_env_file=None).admin_key == "private"

    def test_invalid_log_level_rejected(self):
        with pytest.raises(ValueError):
            make_settings(log_level="LOUD")


class TestStartup:

    @pytest.mark.asyncio
    async def test_startup_fails_without_cron_secret(self):
        app = create_app(make_settings(cron_secret=None))

        with pytest.raises(ConfigurationError):
            async with app.router.lifespan_context(app):
                pass

    @pytest.mark.asyncio
    async def test_startup_succeeds_with_secrets(self):
        app = create_app(make_settings())

        async with app.router.lifespan_context(app):
            assert app.state.settings.cron_secret == "s3cr3t"


class TestHealth:

    @pytest.mark.asyncio
    async def test_health_is_open(self, make_client, settings):
        async with make_client(settings) as client:
            response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
