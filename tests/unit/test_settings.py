"""
Unit tests for configuration and wiring.
"""
from datetime import timedelta

import pytest

from townhall_exporter.cmd.main import Exporter
from townhall_exporter.config.settings import Settings


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch):
        """Test the reference deployment defaults."""
        for name in ("PORT", "HOST", "CACHE_TTL_SECONDS", "READ_TIMEOUT_MS", "LOG_FORMAT"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.source_url == "https://erlangen.de/themenseite/service/buerger/aktuelle-wartezeit"
        assert settings.block_selector == ".fr-view"
        assert settings.value_selector == ".flex>span"
        assert settings.block_marker == "Wartende Personen"
        assert settings.host == "localhost"
        assert settings.port == 12080
        assert settings.cache_ttl == timedelta(seconds=30)
        assert settings.read_timeout == 0.5
        assert settings.json_logs is True

    def test_environment_overrides(self, monkeypatch):
        """Test loading values from the environment."""
        monkeypatch.setenv("PORT", "9100")
        monkeypatch.setenv("CACHE_TTL_SECONDS", "5")
        monkeypatch.setenv("LOG_FORMAT", "text")

        settings = Settings(_env_file=None)

        assert settings.port == 9100
        assert settings.cache_ttl == timedelta(seconds=5)
        assert settings.json_logs is False


class TestExporter:
    """Tests for Exporter wiring."""

    @pytest.mark.asyncio
    async def test_build_and_stop(self):
        """Test that the exporter builds from settings and stops cleanly."""
        settings = Settings(_env_file=None, port=0, host="127.0.0.1", expose_internal_metrics=True)
        exporter = Exporter(settings)

        await exporter.stop()
        await exporter.stop()

        assert exporter._fetcher._client.is_closed

    @pytest.mark.asyncio
    async def test_stop_waits_for_signal_initiated_shutdown(self):
        """Test that stop() after request_stop() returns only once resources are released."""
        settings = Settings(_env_file=None, port=0, host="127.0.0.1")
        exporter = Exporter(settings)
        await exporter._server.start()

        task = exporter.request_stop()
        assert exporter.request_stop() is task
        await exporter.stop()

        assert task.done()
        assert exporter._fetcher._client.is_closed
