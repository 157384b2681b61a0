"""Tests for provider orchestration."""

import pytest

from specmint.llm.backend import (
    GenerationConfig,
    NoProviderConfiguredError,
    ProviderInvocationError,
    ProviderName,
)
from specmint.llm.backend.anthropic import AnthropicAdapter
from specmint.llm.backend.openai import OpenAIAdapter
from specmint.prompt import STANDARD_TEMPLATE, PromptTemplate

from .lib import (
    NO_PROVIDER_MESSAGE,
    ProviderAvailability,
    ProviderOrchestrator,
    build_orchestrator,
)

CLAUDE_MODEL = "claude-3-5-sonnet-20241022"
OPENAI_MODEL = "gpt-4o"


@pytest.fixture
def claude(recording_adapter):
    return recording_adapter("claude", model=CLAUDE_MODEL, enhanced_text="# From Claude")


@pytest.fixture
def openai(recording_adapter):
    return recording_adapter("openai", model=OPENAI_MODEL, enhanced_text="# From GPT")


def _orchestrator(availability, adapters, **kwargs):
    kwargs.setdefault("priority", ["claude", "openai"])
    return ProviderOrchestrator(availability, adapters, **kwargs)


# =============================================================================
# ProviderAvailability
# =============================================================================


class TestProviderAvailability:
    """Tests for the availability snapshot."""

    @pytest.mark.unit
    def test_of(self):
        """Named providers are configured, the rest are not."""
        availability = ProviderAvailability.of("claude")
        assert availability.is_configured("claude")
        assert not availability.is_configured(ProviderName.OPENAI)
        assert availability.configured_providers() == [ProviderName.CLAUDE]

    @pytest.mark.unit
    def test_empty(self):
        """Empty snapshot has no configured provider."""
        availability = ProviderAvailability()
        assert not availability.any_configured
        assert availability.to_dict() == {"claude": False, "openai": False}

    @pytest.mark.unit
    def test_from_environment(self, monkeypatch):
        """Snapshot follows API keys present in the environment."""
        monkeypatch.setenv("OPENAI_API_KEY", "sk-oai")
        availability = ProviderAvailability.from_environment()
        assert availability.to_dict() == {"claude": False, "openai": True}

    @pytest.mark.unit
    def test_is_read_only(self):
        """The configured mapping cannot be mutated."""
        availability = ProviderAvailability.of("claude")
        with pytest.raises(TypeError):
            availability.configured[ProviderName.OPENAI] = True

    @pytest.mark.unit
    def test_rejects_auto(self):
        """AUTO is a request option, not a provider."""
        with pytest.raises(ValueError, match="auto"):
            ProviderAvailability.of("auto")

    @pytest.mark.unit
    def test_rejects_unknown(self):
        """Unknown providers are rejected."""
        with pytest.raises(ValueError, match="Unknown provider"):
            ProviderAvailability.of("gemini")


# =============================================================================
# Resolution
# =============================================================================


class TestResolveProvider:
    """Tests for deterministic provider resolution."""

    @pytest.mark.unit
    def test_explicit_configured_provider(self, claude, openai):
        """A configured explicit choice wins over priority."""
        orchestrator = _orchestrator(
            ProviderAvailability.of("claude", "openai"),
            {"claude": claude, "openai": openai},
        )
        assert orchestrator.resolve_provider("openai") is ProviderName.OPENAI
        assert orchestrator.resolve_provider("claude") is ProviderName.CLAUDE

    @pytest.mark.unit
    def test_auto_uses_priority(self, claude, openai):
        """AUTO picks the first configured provider in priority order."""
        orchestrator = _orchestrator(
            ProviderAvailability.of("claude", "openai"),
            {"claude": claude, "openai": openai},
        )
        assert orchestrator.resolve_provider() is ProviderName.CLAUDE

    @pytest.mark.unit
    def test_custom_priority(self, claude, openai):
        """Priority order is configurable."""
        orchestrator = _orchestrator(
            ProviderAvailability.of("claude", "openai"),
            {"claude": claude, "openai": openai},
            priority=["openai", "claude"],
        )
        assert orchestrator.resolve_provider("auto") is ProviderName.OPENAI

    @pytest.mark.unit
    def test_priority_from_environment(self, monkeypatch, claude, openai):
        """Priority defaults to SPECMINT_PROVIDER_PRIORITY."""
        monkeypatch.setenv("SPECMINT_PROVIDER_PRIORITY", "openai,claude")
        orchestrator = ProviderOrchestrator(
            ProviderAvailability.of("claude", "openai"),
            {"claude": claude, "openai": openai},
        )
        assert orchestrator.priority == (ProviderName.OPENAI, ProviderName.CLAUDE)

    @pytest.mark.unit
    def test_provider_omitted_from_priority_still_serves_auto(self, claude):
        """A configured provider left out of the priority is used for AUTO."""
        orchestrator = _orchestrator(
            ProviderAvailability.of("claude"),
            {"claude": claude},
            priority=["openai"],
        )
        assert orchestrator.priority == (ProviderName.OPENAI, ProviderName.CLAUDE)
        assert orchestrator.resolve_provider("auto") is ProviderName.CLAUDE
        assert orchestrator.resolve_provider("openai") is ProviderName.CLAUDE

    @pytest.mark.unit
    def test_partial_priority_from_environment(self, monkeypatch, claude):
        """A one-entry SPECMINT_PROVIDER_PRIORITY still covers every provider."""
        monkeypatch.setenv("SPECMINT_PROVIDER_PRIORITY", "openai")
        orchestrator = ProviderOrchestrator(ProviderAvailability.of("claude"), {"claude": claude})

        assert orchestrator.resolve_provider() is ProviderName.CLAUDE

    @pytest.mark.unit
    def test_unconfigured_explicit_falls_back(self, claude):
        """Unconfigured explicit choice falls back to a configured provider."""
        orchestrator = _orchestrator(ProviderAvailability.of("claude"), {"claude": claude})
        assert orchestrator.resolve_provider("openai") is ProviderName.CLAUDE

    @pytest.mark.unit
    def test_none_configured(self):
        """No configured provider raises NoProviderConfiguredError."""
        orchestrator = _orchestrator(ProviderAvailability(), {})
        with pytest.raises(NoProviderConfiguredError, match="ANTHROPIC_API_KEY"):
            orchestrator.resolve_provider("claude")

    @pytest.mark.unit
    def test_deterministic(self, claude, openai):
        """Repeated resolution gives the same answer."""
        orchestrator = _orchestrator(
            ProviderAvailability.of("claude", "openai"),
            {"claude": claude, "openai": openai},
        )
        choices = {orchestrator.resolve_provider("auto") for _ in range(20)}
        assert choices == {ProviderName.CLAUDE}


class TestOrchestratorConstruction:
    """Tests for constructor validation."""

    @pytest.mark.unit
    def test_missing_adapter_rejected(self, claude):
        """Every configured provider needs an adapter."""
        with pytest.raises(ValueError, match="openai"):
            _orchestrator(ProviderAvailability.of("claude", "openai"), {"claude": claude})

    @pytest.mark.unit
    def test_auto_in_priority_rejected(self, claude):
        """AUTO cannot be part of the fallback order."""
        with pytest.raises(ValueError, match="auto"):
            _orchestrator(
                ProviderAvailability.of("claude"),
                {"claude": claude},
                priority=["auto", "claude"],
            )

    @pytest.mark.unit
    def test_unknown_in_priority_rejected(self, claude):
        """Unknown names in the fallback order are rejected."""
        with pytest.raises(ValueError, match="Unknown provider"):
            _orchestrator(
                ProviderAvailability.of("claude"),
                {"claude": claude},
                priority=["gemini"],
            )

    @pytest.mark.unit
    def test_default_template(self, claude):
        """Standard template is active by default."""
        orchestrator = _orchestrator(ProviderAvailability.of("claude"), {"claude": claude})
        assert orchestrator.template.name == "standard"
        assert orchestrator.template.text == STANDARD_TEMPLATE


# =============================================================================
# Enhancement
# =============================================================================


class TestEnhance:
    """Tests for single-shot invocation."""

    @pytest.mark.unit
    def test_explicit_provider_only_one_invoked(self, claude, openai, make_request):
        """Only the resolved provider's adapter is invoked, exactly once."""
        orchestrator = _orchestrator(
            ProviderAvailability.of("claude", "openai"),
            {"claude": claude, "openai": openai},
        )
        result = orchestrator.enhance(make_request("openai"))

        assert result.enhanced_text == "# From GPT"
        assert result.model == OPENAI_MODEL
        assert len(openai.calls) == 1
        assert claude.calls == []

    @pytest.mark.unit
    def test_auto_with_single_provider(self, openai, make_request):
        """AUTO with one configured provider uses it."""
        orchestrator = _orchestrator(ProviderAvailability.of("openai"), {"openai": openai})
        result = orchestrator.enhance(make_request("auto"))
        assert result.provider == "openai"
        assert len(openai.calls) == 1

    @pytest.mark.unit
    def test_fallback_reports_fallback_model(self, claude, make_request):
        """Unconfigured openai request falls back to claude and reports its model."""
        orchestrator = _orchestrator(ProviderAvailability.of("claude"), {"claude": claude})
        result = orchestrator.enhance(make_request("openai"))
        assert result.success is True
        assert result.model == CLAUDE_MODEL
        assert result.enhanced_text == "# From Claude"
        assert len(claude.calls) == 1

    @pytest.mark.unit
    def test_both_configured_auto_is_deterministic(self, claude, openai, make_request):
        """Omitted provider with both configured always uses the first in priority."""
        orchestrator = _orchestrator(
            ProviderAvailability.of("claude", "openai"),
            {"claude": claude, "openai": openai},
        )
        for _ in range(3):
            orchestrator.enhance(make_request("auto"))
        assert len(claude.calls) == 3
        assert openai.calls == []

    @pytest.mark.unit
    def test_none_configured_invokes_nothing(self, claude, openai, make_request):
        """No configured provider fails without invoking any adapter."""
        orchestrator = _orchestrator(
            ProviderAvailability(),
            {"claude": claude, "openai": openai},
        )
        with pytest.raises(NoProviderConfiguredError) as exc_info:
            orchestrator.enhance(make_request("claude"))
        assert str(exc_info.value) == NO_PROVIDER_MESSAGE
        assert claude.calls == []
        assert openai.calls == []

    @pytest.mark.unit
    def test_prompt_and_inputs_forwarded(self, claude, make_request, sample_screenshot):
        """Adapter receives the active template, the spec text and the screenshot."""
        template = PromptTemplate(name="terse", text="Rewrite tersely.")
        orchestrator = _orchestrator(
            ProviderAvailability.of("claude"),
            {"claude": claude},
            template=template,
        )
        orchestrator.enhance(make_request("claude", spec_text="# Card"))

        call = claude.calls[0]
        assert call.prompt == "Rewrite tersely."
        assert call.spec_text == "# Card"
        assert call.screenshot == sample_screenshot

    @pytest.mark.unit
    def test_invocation_failure_not_retried(self, recording_adapter, openai, make_request):
        """A failed provider is not followed by another provider."""
        failing = recording_adapter(
            "claude",
            error=ProviderInvocationError("Claude API failed: overloaded", provider="claude"),
        )
        orchestrator = _orchestrator(
            ProviderAvailability.of("claude", "openai"),
            {"claude": failing, "openai": openai},
        )
        with pytest.raises(ProviderInvocationError, match="overloaded") as exc_info:
            orchestrator.enhance(make_request("claude"))

        assert exc_info.value.provider == "claude"
        assert len(failing.calls) == 1
        assert openai.calls == []

    @pytest.mark.unit
    def test_unexpected_adapter_error_wrapped(self, recording_adapter, make_request):
        """Non-provider exceptions from an adapter become ProviderInvocationError."""
        broken = recording_adapter("openai", error=KeyError("choices"))
        orchestrator = _orchestrator(ProviderAvailability.of("openai"), {"openai": broken})

        with pytest.raises(ProviderInvocationError) as exc_info:
            orchestrator.enhance(make_request("openai"))

        assert exc_info.value.provider == "openai"
        assert isinstance(exc_info.value.__cause__, KeyError)
        assert len(broken.calls) == 1


# =============================================================================
# build_orchestrator
# =============================================================================


class TestBuildOrchestrator:
    """Tests for startup construction."""

    @pytest.mark.unit
    def test_adapters_only_for_configured(self, recording_adapter):
        """Adapters are built once, only for configured providers."""
        built = []

        def factory(provider, **kwargs):
            built.append((provider, kwargs))
            return recording_adapter(provider.value)

        orchestrator = build_orchestrator(
            ProviderAvailability.of("openai"),
            adapter_factory=factory,
        )

        assert [provider for provider, _ in built] == [ProviderName.OPENAI]
        assert orchestrator.resolve_provider("claude") is ProviderName.OPENAI

    @pytest.mark.unit
    def test_settings_from_environment(self, monkeypatch, recording_adapter):
        """Max tokens and timeout are read from the environment."""
        monkeypatch.setenv("SPECMINT_MAX_TOKENS", "2048")
        monkeypatch.setenv("SPECMINT_REQUEST_TIMEOUT", "30")
        captured = {}

        def factory(provider, **kwargs):
            captured.update(kwargs)
            return recording_adapter(provider.value)

        build_orchestrator(ProviderAvailability.of("claude"), adapter_factory=factory)

        assert captured["config"] == GenerationConfig(max_tokens=2048)
        assert captured["timeout"] == 30.0

    @pytest.mark.unit
    def test_real_adapters_from_environment(self, monkeypatch):
        """Keys in the environment produce real adapters without network calls."""
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-test")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-oai-test")

        orchestrator = build_orchestrator()

        assert orchestrator.availability.to_dict() == {"claude": True, "openai": True}
        assert orchestrator.priority == (ProviderName.CLAUDE, ProviderName.OPENAI)
        assert isinstance(orchestrator._adapters[ProviderName.CLAUDE], AnthropicAdapter)
        assert isinstance(orchestrator._adapters[ProviderName.OPENAI], OpenAIAdapter)

    @pytest.mark.unit
    def test_invalid_default_provider_fails_at_build(self, monkeypatch, recording_adapter):
        """A bad SPECMINT_DEFAULT_PROVIDER stops startup before any adapter is built."""
        monkeypatch.setenv("SPECMINT_DEFAULT_PROVIDER", "gemini")
        built = []

        def factory(provider, **kwargs):
            built.append(provider)
            return recording_adapter(provider.value)

        with pytest.raises(ValueError, match="SPECMINT_DEFAULT_PROVIDER"):
            build_orchestrator(ProviderAvailability.of("claude"), adapter_factory=factory)
        assert built == []

    @pytest.mark.unit
    def test_no_keys_builds_empty_orchestrator(self):
        """Without keys the orchestrator exists but cannot resolve."""
        orchestrator = build_orchestrator()
        with pytest.raises(NoProviderConfiguredError):
            orchestrator.resolve_provider()
