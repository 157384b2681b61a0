"""Tests for configuration management."""

from pathlib import Path

import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    get_available_llm_providers,
    get_environment,
    get_environment_info,
    get_provider_priority,
    is_development,
    list_environment_variables,
)

# =============================================================================
# Tests for get_environment (main interface)
# =============================================================================


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("MCP_PORT", raising=False)
        result = get_environment(EnvVar.MCP_PORT)
        assert result == 18080

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("MCP_PORT", "9999")
        result = get_environment(EnvVar.MCP_PORT, override=5000)
        assert result == 5000

    @pytest.mark.unit
    def test_env_var_overrides_default(self, monkeypatch):
        """Environment variable overrides default value."""
        monkeypatch.setenv("SPECMINT_MAX_SCREENSHOT_LENGTH", "1024")
        result = get_environment(EnvVar.SPECMINT_MAX_SCREENSHOT_LENGTH)
        assert result == 1024
        assert isinstance(result, int)

    @pytest.mark.unit
    def test_screenshot_limit_default_is_20_mib(self, monkeypatch):
        """Screenshot limit defaults to 20 MiB of base64 text."""
        monkeypatch.delenv("SPECMINT_MAX_SCREENSHOT_LENGTH", raising=False)
        result = get_environment(EnvVar.SPECMINT_MAX_SCREENSHOT_LENGTH)
        assert result == 20 * 1024 * 1024

    @pytest.mark.unit
    def test_path_type_conversion(self, monkeypatch, tmp_path):
        """Path variables are converted to Path."""
        monkeypatch.setenv("SPECMINT_PROMPT_FILE", str(tmp_path / "prompt.md"))
        result = get_environment(EnvVar.SPECMINT_PROMPT_FILE)
        assert isinstance(result, Path)
        assert result.name == "prompt.md"

    @pytest.mark.unit
    def test_string_type(self, monkeypatch):
        """String type returns as-is."""
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test-key")
        result = get_environment(EnvVar.OPENAI_API_KEY)
        assert result == "sk-test-key"

    @pytest.mark.unit
    def test_none_default_for_api_keys(self, monkeypatch):
        """API keys default to None when not set."""
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        assert get_environment(EnvVar.ANTHROPIC_API_KEY) is None

    @pytest.mark.unit
    def test_invalid_int_returns_default(self, monkeypatch):
        """Invalid integer value returns default."""
        monkeypatch.setenv("SPECMINT_MAX_TOKENS", "lots")
        result = get_environment(EnvVar.SPECMINT_MAX_TOKENS)
        assert result == 4096


class TestGetEnvironmentInfo:
    """Tests for environment variable metadata."""

    @pytest.mark.unit
    def test_returns_env_config(self):
        """Returns EnvConfig dataclass."""
        info = get_environment_info(EnvVar.SPECMINT_DEFAULT_PROVIDER)
        assert isinstance(info, EnvConfig)
        assert info.name == "SPECMINT_DEFAULT_PROVIDER"
        assert info.default == "openai"
        assert info.var_type is str
        assert info.category == "enhance"

    @pytest.mark.unit
    def test_description_present(self):
        """Description field is populated."""
        info = get_environment_info(EnvVar.ANTHROPIC_API_KEY)
        assert "Anthropic" in info.description


class TestListEnvironmentVariables:
    """Tests for listing environment variables."""

    @pytest.mark.unit
    def test_returns_all_variables(self):
        """Returns all EnvVar members when no category."""
        result = list_environment_variables()
        assert len(result) == len(EnvVar)

    @pytest.mark.unit
    def test_llm_category(self):
        """LLM category includes API keys."""
        llm_vars = list_environment_variables("llm")
        assert EnvVar.OPENAI_API_KEY in llm_vars
        assert EnvVar.ANTHROPIC_API_KEY in llm_vars
        assert EnvVar.MCP_PORT not in llm_vars


# =============================================================================
# Tests for convenience functions
# =============================================================================


class TestGetAvailableLLMProviders:
    """Tests for provider detection from API keys."""

    @pytest.mark.unit
    def test_none_configured(self, monkeypatch):
        """No keys means no providers."""
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        assert get_available_llm_providers() == []

    @pytest.mark.unit
    def test_both_configured(self, monkeypatch):
        """Both keys are reported in a stable order."""
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-oai")
        assert get_available_llm_providers() == ["claude", "openai"]

    @pytest.mark.unit
    def test_empty_key_not_configured(self, monkeypatch):
        """Empty key does not count as configured."""
        monkeypatch.setenv("ANTHROPIC_API_KEY", "")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-oai")
        assert get_available_llm_providers() == ["openai"]


class TestGetProviderPriority:
    """Tests for fallback order parsing."""

    @pytest.mark.unit
    def test_default_order(self, monkeypatch):
        """Claude is tried before OpenAI by default."""
        monkeypatch.delenv("SPECMINT_PROVIDER_PRIORITY", raising=False)
        assert get_provider_priority() == ["claude", "openai"]

    @pytest.mark.unit
    def test_env_order(self, monkeypatch):
        """Order is read from the environment."""
        monkeypatch.setenv("SPECMINT_PROVIDER_PRIORITY", "openai, claude")
        assert get_provider_priority() == ["openai", "claude"]

    @pytest.mark.unit
    def test_blanks_and_duplicates_dropped(self):
        """Blank entries and repeats are ignored."""
        assert get_provider_priority(override="OpenAI,,openai, claude") == [
            "openai",
            "claude",
        ]


class TestIsDevelopment:
    """Tests for runtime mode detection."""

    @pytest.mark.unit
    def test_default_is_production(self, monkeypatch):
        """Production is the default mode."""
        monkeypatch.delenv("SPECMINT_ENV", raising=False)
        assert is_development() is False

    @pytest.mark.unit
    def test_development(self, monkeypatch):
        """Development mode is case-insensitive."""
        monkeypatch.setenv("SPECMINT_ENV", "Development")
        assert is_development() is True
