"""Tests for the enhance tool's outcome mapping."""

import pytest

from specmint.llm.backend import ProviderInvocationError
from specmint.llm.orchestrator import ProviderAvailability, ProviderOrchestrator

from .enhance import get_orchestrator, handle_enhance


@pytest.fixture
def body(sample_spec_md, sample_screenshot):
    return {"specMd": sample_spec_md, "screenshot": sample_screenshot}


def _orchestrator(**adapters):
    return ProviderOrchestrator(
        ProviderAvailability.of(*adapters),
        adapters,
        priority=["claude", "openai"],
    )


class TestHandleEnhanceSuccess:
    """Tests for successful enhancement."""

    @pytest.mark.unit
    def test_success_payload(self, recording_adapter, body):
        """Success returns 200 with the wire shape."""
        claude = recording_adapter(
            "claude", model="claude-3-5-sonnet-20241022", enhanced_text="# Better", tokens_used=1500
        )
        status, payload = handle_enhance(body, _orchestrator(claude=claude))

        assert status == 200
        assert payload == {
            "success": True,
            "enhanced": "# Better",
            "model": "claude-3-5-sonnet-20241022",
            "tokensUsed": 1500,
        }

    @pytest.mark.unit
    def test_default_provider_request_falls_back(self, recording_adapter, body):
        """Default provider (openai) unconfigured falls back to claude."""
        claude = recording_adapter("claude", model="claude-3-5-sonnet-20241022")
        status, payload = handle_enhance(body, _orchestrator(claude=claude))

        assert status == 200
        assert payload["model"] == "claude-3-5-sonnet-20241022"
        assert len(claude.calls) == 1


class TestHandleEnhanceErrors:
    """Tests for error-to-status mapping."""

    @pytest.mark.unit
    def test_missing_fields_400(self, recording_adapter):
        """Missing fields map to 400 without invoking a provider."""
        claude = recording_adapter("claude")
        status, payload = handle_enhance({"specMd": "# Spec"}, _orchestrator(claude=claude))

        assert status == 400
        assert payload["error"] == "Missing required fields"
        assert "screenshot" in payload["message"]
        assert claude.calls == []

    @pytest.mark.unit
    def test_screenshot_too_large_400(self, monkeypatch, recording_adapter):
        """Oversize screenshot maps to 400 before any provider call."""
        monkeypatch.setenv("SPECMINT_MAX_SCREENSHOT_LENGTH", "8")
        claude = recording_adapter("claude")
        status, payload = handle_enhance(
            {"specMd": "# Spec", "screenshot": "a" * 9},
            _orchestrator(claude=claude),
        )

        assert status == 400
        assert payload["error"] == "Screenshot too large"
        assert claude.calls == []

    @pytest.mark.unit
    def test_invalid_provider_400(self, recording_adapter, body):
        """Unknown provider maps to 400."""
        body["provider"] = "gemini"
        status, payload = handle_enhance(body, _orchestrator(claude=recording_adapter("claude")))

        assert status == 400
        assert payload["error"] == "Invalid request"

    @pytest.mark.unit
    def test_non_object_body_400(self, recording_adapter):
        """A JSON array body maps to 400."""
        status, _ = handle_enhance(["x"], _orchestrator(claude=recording_adapter("claude")))
        assert status == 400

    @pytest.mark.unit
    def test_no_provider_503(self, body):
        """No configured provider maps to 503."""
        status, payload = handle_enhance(body, _orchestrator())

        assert status == 503
        assert payload["error"] == "No AI provider configured"
        assert "ANTHROPIC_API_KEY" in payload["message"]

    @pytest.mark.unit
    def test_invocation_failure_500(self, recording_adapter, body):
        """Provider failure maps to 500 with the upstream message."""
        failing = recording_adapter(
            "claude",
            error=ProviderInvocationError("Claude API failed: overloaded", provider="claude"),
        )
        status, payload = handle_enhance(body, _orchestrator(claude=failing))

        assert status == 500
        assert payload["error"] == "Enhancement failed"
        assert payload["message"] == "Claude API failed: overloaded"
        assert "details" not in payload

    @pytest.mark.unit
    def test_details_only_in_development(self, monkeypatch, recording_adapter, body):
        """Stack trace is attached in development mode."""
        monkeypatch.setenv("SPECMINT_ENV", "development")
        failing = recording_adapter(
            "claude",
            error=ProviderInvocationError("Claude API failed: timeout", provider="claude"),
        )
        status, payload = handle_enhance(body, _orchestrator(claude=failing))

        assert status == 500
        assert "Traceback" in payload["details"]

    @pytest.mark.unit
    def test_validation_errors_never_carry_details(self, monkeypatch):
        """Client errors do not leak stack traces, even in development."""
        monkeypatch.setenv("SPECMINT_ENV", "development")
        status, payload = handle_enhance({}, _orchestrator())

        assert status == 400
        assert "details" not in payload

    @pytest.mark.unit
    def test_unexpected_error_500(self, monkeypatch, body):
        """Unexpected exceptions become a 500 payload."""

        class Exploding:
            def enhance(self, request):
                raise RuntimeError("boom")

        status, payload = handle_enhance(body, Exploding())

        assert status == 500
        assert payload == {"error": "Enhancement failed", "message": "boom"}


class TestGetOrchestrator:
    """Tests for the process-wide orchestrator."""

    @pytest.mark.unit
    def test_cached(self, monkeypatch):
        """The orchestrator is built once."""
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        get_orchestrator.cache_clear()
        try:
            first = get_orchestrator()
            assert get_orchestrator() is first
            assert first.availability.is_configured("openai")
        finally:
            get_orchestrator.cache_clear()
