"""Unit tests for health checking module."""

import logging
from datetime import UTC, datetime

import pytest

from specmint.llm.orchestrator import ProviderAvailability

from .health import (
    ServerHealth,
    format_startup_banner,
    get_server_health,
    log_startup_status,
)


def _health(**providers) -> ServerHealth:
    return ServerHealth(
        version="1.0.0",
        checked_at=datetime(2024, 5, 1, 12, 30, 0, 123456, tzinfo=UTC),
        providers={"claude": False, "openai": False, **providers},
        priority=["claude", "openai"],
    )


class TestServerHealth:
    """Tests for ServerHealth dataclass."""

    @pytest.mark.unit
    def test_to_dict_wire_shape(self):
        """to_dict matches the /health payload."""
        assert _health(claude=True).to_dict() == {
            "status": "ok",
            "timestamp": "2024-05-01T12:30:00.123Z",
            "providers": {"claude": "configured", "openai": "not configured"},
            "version": "1.0.0",
        }

    @pytest.mark.unit
    def test_can_enhance(self):
        """can_enhance needs at least one provider."""
        assert _health(openai=True).can_enhance is True
        assert _health().can_enhance is False


class TestGetServerHealth:
    """Tests for get_server_health."""

    @pytest.mark.unit
    def test_from_environment(self, monkeypatch):
        """Provider flags follow API keys."""
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant")
        health = get_server_health()

        assert health.providers == {"claude": True, "openai": False}
        assert health.version == "1.0.0"
        assert health.default_provider == "openai"
        assert health.template == "standard"

    @pytest.mark.unit
    def test_explicit_availability(self):
        """An explicit snapshot overrides the environment."""
        health = get_server_health(ProviderAvailability.of("openai"))
        assert health.providers == {"claude": False, "openai": True}

    @pytest.mark.unit
    def test_priority_is_full_fallback_order(self, monkeypatch):
        """Providers missing from SPECMINT_PROVIDER_PRIORITY are reported after it."""
        monkeypatch.setenv("SPECMINT_PROVIDER_PRIORITY", "openai")
        assert get_server_health().priority == ["openai", "claude"]

    @pytest.mark.unit
    def test_unreadable_template_reported(self, monkeypatch, tmp_path):
        """A missing template file does not break the health check."""
        monkeypatch.setenv("SPECMINT_PROMPT_FILE", str(tmp_path / "missing.md"))
        assert get_server_health().template == "unavailable"


class TestStartupBanner:
    """Tests for startup banner formatting and logging."""

    @pytest.mark.unit
    def test_banner_lists_providers(self):
        """Banner shows each provider and the routing settings."""
        banner = format_startup_banner(_health(claude=True))

        assert "SpecMint Server v1.0.0" in banner
        assert "[OK] claude" in banner
        assert "[--] openai" in banner
        assert "fallback order:     claude, openai" in banner
        assert "Action Required" not in banner

    @pytest.mark.unit
    def test_banner_action_when_unconfigured(self):
        """Banner asks for an API key when nothing is configured."""
        banner = format_startup_banner(_health())
        assert "NO PROVIDER" in banner
        assert "ANTHROPIC_API_KEY or OPENAI_API_KEY" in banner

    @pytest.mark.unit
    def test_log_error_when_unconfigured(self, caplog):
        """Missing providers are logged as an error."""
        with caplog.at_level(logging.INFO, logger="specmint.mcp.health"):
            log_startup_status(_health())
        assert any(r.levelno == logging.ERROR for r in caplog.records)

    @pytest.mark.unit
    def test_log_warning_when_partial(self, caplog):
        """A partial configuration is logged as a warning."""
        with caplog.at_level(logging.INFO, logger="specmint.mcp.health"):
            log_startup_status(_health(openai=True))
        levels = {r.levelno for r in caplog.records}
        assert logging.WARNING in levels
        assert logging.ERROR not in levels
