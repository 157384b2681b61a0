"""Tests for provider adapter implementations."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from .anthropic import AnthropicAdapter
from .base import (
    AuthenticationError,
    GenerationConfig,
    ProviderInvocationError,
    ProviderResult,
)
from .factory import create_provider_adapter
from .model_spec import (
    LLMCapability,
    LLMModel,
    LLMSpec,
    ProviderName,
    get_llm_spec,
)
from .openai import OpenAIAdapter

SCREENSHOT = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="


def _anthropic_response(text="# Enhanced Design Specification", input_tokens=1200, output_tokens=800):
    return SimpleNamespace(
        content=[SimpleNamespace(type="text", text=text)],
        usage=SimpleNamespace(input_tokens=input_tokens, output_tokens=output_tokens),
        model="claude-3-5-sonnet-20241022",
    )


def _openai_response(content="# Enhanced Design Specification", total_tokens=2500):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(prompt_tokens=2000, completion_tokens=500, total_tokens=total_tokens),
        model="gpt-4o-2024-08-06",
    )


# =============================================================================
# Model Specification
# =============================================================================


class TestLLMModel:
    """Tests for LLMModel registry."""

    @pytest.mark.unit
    def test_all_models_accept_images(self):
        """Every registered model declares vision support."""
        assert all(m.spec.supports(LLMCapability.VISION) for m in LLMModel)

    @pytest.mark.unit
    def test_by_name_lookup(self):
        """Models are found by API name."""
        assert LLMModel.by_name("gpt-4o") == LLMModel.GPT_4O
        assert LLMModel.by_name("claude-3-5-sonnet-20241022") == LLMModel.CLAUDE_3_5_SONNET
        assert LLMModel.by_name("nonexistent") is None

    @pytest.mark.unit
    def test_list_by_provider(self):
        """Listing by provider returns only that provider's models."""
        claude_models = LLMModel.list_by_provider(ProviderName.CLAUDE)
        assert claude_models
        assert all(m.spec.provider == ProviderName.CLAUDE for m in claude_models)

    @pytest.mark.unit
    def test_unknown_model_raises(self):
        """Unknown model names raise ValueError."""
        with pytest.raises(ValueError, match="Unknown model"):
            get_llm_spec("nonexistent-model")


class TestProviderName:
    """Tests for provider identifiers."""

    @pytest.mark.unit
    def test_concrete_excludes_auto(self):
        """AUTO is not a concrete provider."""
        assert ProviderName.concrete() == [ProviderName.CLAUDE, ProviderName.OPENAI]

    @pytest.mark.unit
    def test_string_enum(self):
        """Provider names compare equal to their wire values."""
        assert ProviderName.CLAUDE == "claude"


# =============================================================================
# Result Shape
# =============================================================================


class TestProviderResult:
    """Tests for ProviderResult."""

    @pytest.mark.unit
    def test_to_dict_wire_shape(self):
        """to_dict renders the outbound payload keys."""
        result = ProviderResult(
            success=True,
            enhanced_text="# Spec",
            model="gpt-4o",
            tokens_used=42,
            provider="openai",
        )
        assert result.to_dict() == {
            "success": True,
            "enhanced": "# Spec",
            "model": "gpt-4o",
            "tokensUsed": 42,
        }


# =============================================================================
# Anthropic Adapter
# =============================================================================


class TestAnthropicAdapter:
    """Tests for the Claude-shaped adapter."""

    @pytest.mark.unit
    def test_requires_api_key(self, monkeypatch):
        """Adapter requires an API key."""
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        with pytest.raises(AuthenticationError, match="API key required"):
            AnthropicAdapter()

    @pytest.mark.unit
    def test_creates_with_api_key(self, mock_api_key):
        """Adapter reports provider and default model."""
        adapter = AnthropicAdapter(api_key=mock_api_key)
        assert adapter.provider == "claude"
        assert adapter.model_name == "claude-3-5-sonnet-20241022"
        assert adapter.name == "claude:claude-3-5-sonnet-20241022"

    @pytest.mark.unit
    def test_request_shape(self, mock_api_key):
        """Request carries a text block and a base64 image block."""
        client = MagicMock()
        client.messages.create.return_value = _anthropic_response()
        adapter = AnthropicAdapter(api_key=mock_api_key, client=client)

        adapter.invoke("PROMPT", "Button: 120x40px, #005FF9", SCREENSHOT)

        client.messages.create.assert_called_once()
        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["model"] == "claude-3-5-sonnet-20241022"
        assert kwargs["max_tokens"] == 4096
        (message,) = kwargs["messages"]
        assert message["role"] == "user"
        text_block, image_block = message["content"]
        assert text_block == {"type": "text", "text": "PROMPT\n\nButton: 120x40px, #005FF9"}
        assert image_block == {
            "type": "image",
            "source": {"type": "base64", "media_type": "image/png", "data": SCREENSHOT},
        }

    @pytest.mark.unit
    def test_tokens_are_summed(self, mock_api_key):
        """Token usage is input plus output tokens."""
        client = MagicMock()
        client.messages.create.return_value = _anthropic_response(input_tokens=1200, output_tokens=800)
        adapter = AnthropicAdapter(api_key=mock_api_key, client=client)

        result = adapter.invoke("PROMPT", "spec", SCREENSHOT)

        assert result.success is True
        assert result.tokens_used == 2000
        assert result.enhanced_text == "# Enhanced Design Specification"
        assert result.model == "claude-3-5-sonnet-20241022"
        assert result.provider == "claude"

    @pytest.mark.unit
    def test_skips_non_text_blocks(self, mock_api_key):
        """The first text block is used even if other blocks precede it."""
        client = MagicMock()
        response = _anthropic_response(text="# From text block")
        response.content.insert(0, SimpleNamespace(type="thinking", thinking="..."))
        client.messages.create.return_value = response
        adapter = AnthropicAdapter(api_key=mock_api_key, client=client)

        assert adapter.invoke("P", "s", SCREENSHOT).enhanced_text == "# From text block"

    @pytest.mark.unit
    def test_malformed_body_raises(self, mock_api_key):
        """A response without text content is an invocation error."""
        client = MagicMock()
        client.messages.create.return_value = SimpleNamespace(content=[], usage=None)
        adapter = AnthropicAdapter(api_key=mock_api_key, client=client)

        with pytest.raises(ProviderInvocationError, match="without generated text") as exc_info:
            adapter.invoke("P", "s", SCREENSHOT)
        assert exc_info.value.provider == "claude"

    @pytest.mark.unit
    def test_missing_usage_raises(self, mock_api_key):
        """A text response without a usage block is an invocation error."""
        client = MagicMock()
        response = _anthropic_response(text="hi")
        response.usage = None
        client.messages.create.return_value = response
        adapter = AnthropicAdapter(api_key=mock_api_key, client=client)

        with pytest.raises(ProviderInvocationError, match="without token usage") as exc_info:
            adapter.invoke("P", "s", SCREENSHOT)
        assert exc_info.value.provider == "claude"

    @pytest.mark.unit
    def test_partial_usage_raises(self, mock_api_key):
        """A usage block missing the output counter is an invocation error."""
        client = MagicMock()
        client.messages.create.return_value = _anthropic_response(output_tokens=None)
        adapter = AnthropicAdapter(api_key=mock_api_key, client=client)

        with pytest.raises(ProviderInvocationError, match="without token usage"):
            adapter.invoke("P", "s", SCREENSHOT)

    @pytest.mark.unit
    def test_api_error_wrapped(self, mock_api_key):
        """SDK exceptions become ProviderInvocationError with the upstream message."""
        client = MagicMock()
        client.messages.create.side_effect = RuntimeError("overloaded_error")
        adapter = AnthropicAdapter(api_key=mock_api_key, client=client)

        with pytest.raises(ProviderInvocationError, match="overloaded_error"):
            adapter.invoke("P", "s", SCREENSHOT)
        assert client.messages.create.call_count == 1

    @pytest.mark.unit
    def test_custom_media_type(self, mock_api_key):
        """Configured media type is declared on the image block."""
        client = MagicMock()
        client.messages.create.return_value = _anthropic_response()
        adapter = AnthropicAdapter(
            api_key=mock_api_key,
            client=client,
            config=GenerationConfig(media_type="image/jpeg"),
        )

        adapter.invoke("P", "s", SCREENSHOT)

        message = client.messages.create.call_args.kwargs["messages"][0]
        assert message["content"][1]["source"]["media_type"] == "image/jpeg"


# =============================================================================
# OpenAI Adapter
# =============================================================================


class TestOpenAIAdapter:
    """Tests for the OpenAI-shaped adapter."""

    @pytest.mark.unit
    def test_requires_api_key(self, monkeypatch):
        """Adapter requires an API key."""
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(AuthenticationError, match="API key required"):
            OpenAIAdapter()

    @pytest.mark.unit
    def test_creates_with_api_key(self, mock_api_key):
        """Adapter reports provider and default model."""
        adapter = OpenAIAdapter(api_key=mock_api_key)
        assert adapter.provider == "openai"
        assert adapter.model_name == "gpt-4o"

    @pytest.mark.unit
    def test_request_shape(self, mock_api_key):
        """Request carries a system message, text part and data-URL image."""
        client = MagicMock()
        client.chat.completions.create.return_value = _openai_response()
        adapter = OpenAIAdapter(api_key=mock_api_key, client=client)

        adapter.invoke("PROMPT", "Button: 120x40px", SCREENSHOT)

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["max_tokens"] == 4096
        assert kwargs["temperature"] == 0.7
        system, user = kwargs["messages"]
        assert system["role"] == "system"
        assert "UI/UX analyst" in system["content"]
        text_part, image_part = user["content"]
        assert text_part == {"type": "text", "text": "PROMPT\n\nButton: 120x40px"}
        assert image_part["type"] == "image_url"
        assert image_part["image_url"] == {
            "url": f"data:image/png;base64,{SCREENSHOT}",
            "detail": "high",
        }

    @pytest.mark.unit
    def test_tokens_use_reported_total(self, mock_api_key):
        """Token usage is the single reported total."""
        client = MagicMock()
        client.chat.completions.create.return_value = _openai_response(total_tokens=2500)
        adapter = OpenAIAdapter(api_key=mock_api_key, client=client)

        result = adapter.invoke("P", "s", SCREENSHOT)

        assert result.tokens_used == 2500
        assert result.model == "gpt-4o"
        assert result.provider == "openai"

    @pytest.mark.unit
    def test_missing_content_raises(self, mock_api_key):
        """A choice with null content is an invocation error."""
        client = MagicMock()
        client.chat.completions.create.return_value = _openai_response(content=None)
        adapter = OpenAIAdapter(api_key=mock_api_key, client=client)

        with pytest.raises(ProviderInvocationError, match="without generated text"):
            adapter.invoke("P", "s", SCREENSHOT)

    @pytest.mark.unit
    def test_no_choices_raises(self, mock_api_key):
        """A response with no choices is an invocation error."""
        client = MagicMock()
        client.chat.completions.create.return_value = SimpleNamespace(choices=[], usage=None)
        adapter = OpenAIAdapter(api_key=mock_api_key, client=client)

        with pytest.raises(ProviderInvocationError):
            adapter.invoke("P", "s", SCREENSHOT)

    @pytest.mark.unit
    def test_missing_usage_raises(self, mock_api_key):
        """A text response without a usage block is an invocation error."""
        client = MagicMock()
        response = _openai_response(content="hi")
        response.usage = None
        client.chat.completions.create.return_value = response
        adapter = OpenAIAdapter(api_key=mock_api_key, client=client)

        with pytest.raises(ProviderInvocationError, match="without token usage") as exc_info:
            adapter.invoke("P", "s", SCREENSHOT)
        assert exc_info.value.provider == "openai"

    @pytest.mark.unit
    def test_api_error_wrapped(self, mock_api_key):
        """SDK exceptions carry the upstream message."""
        client = MagicMock()
        client.chat.completions.create.side_effect = ConnectionError("connection reset")
        adapter = OpenAIAdapter(api_key=mock_api_key, client=client)

        with pytest.raises(ProviderInvocationError, match="OpenAI API failed: connection reset"):
            adapter.invoke("P", "s", SCREENSHOT)

    @pytest.mark.unit
    def test_no_system_prompt(self, mock_api_key):
        """An empty system prompt leaves only the user turn."""
        client = MagicMock()
        client.chat.completions.create.return_value = _openai_response()
        adapter = OpenAIAdapter(api_key=mock_api_key, client=client, system_prompt="")

        adapter.invoke("P", "s", SCREENSHOT)

        messages = client.chat.completions.create.call_args.kwargs["messages"]
        assert [m["role"] for m in messages] == ["user"]


# =============================================================================
# Factory
# =============================================================================


class TestCreateProviderAdapter:
    """Tests for create_provider_adapter factory."""

    @pytest.mark.unit
    def test_creates_claude_adapter(self, mock_api_key):
        """Factory creates the Claude adapter."""
        adapter = create_provider_adapter("claude", api_key=mock_api_key)
        assert isinstance(adapter, AnthropicAdapter)

    @pytest.mark.unit
    def test_creates_openai_adapter(self, mock_api_key):
        """Factory accepts enum members."""
        adapter = create_provider_adapter(ProviderName.OPENAI, api_key=mock_api_key)
        assert isinstance(adapter, OpenAIAdapter)

    @pytest.mark.unit
    def test_model_from_environment(self, monkeypatch, mock_api_key):
        """Default model comes from the provider's model variable."""
        monkeypatch.setenv("OPENAI_MODEL", "gpt-4.1")
        adapter = create_provider_adapter("openai", api_key=mock_api_key)
        assert adapter.model_name == "gpt-4.1"

    @pytest.mark.unit
    def test_rejects_auto(self, mock_api_key):
        """AUTO must be resolved before building an adapter."""
        with pytest.raises(ValueError, match="auto"):
            create_provider_adapter("auto", api_key=mock_api_key)

    @pytest.mark.unit
    def test_rejects_unknown_provider(self, mock_api_key):
        """Unknown providers raise ValueError."""
        with pytest.raises(ValueError, match="Unsupported provider"):
            create_provider_adapter("gemini", api_key=mock_api_key)

    @pytest.mark.unit
    def test_rejects_mismatched_model(self, mock_api_key):
        """A model from another provider is rejected."""
        with pytest.raises(ValueError, match="belongs to openai"):
            create_provider_adapter("claude", model="gpt-4o", api_key=mock_api_key)

    @pytest.mark.unit
    def test_rejects_model_without_vision(self, mock_api_key):
        """Models that cannot take images are rejected."""
        text_only = LLMSpec(
            name="text-only",
            provider=ProviderName.OPENAI,
            max_output_tokens=1000,
        )
        with pytest.raises(ValueError, match="image input"):
            create_provider_adapter("openai", model=text_only, api_key=mock_api_key)

    @pytest.mark.unit
    def test_rejects_max_tokens_above_model_limit(self, mock_api_key):
        """max_tokens above the model's output limit fails at construction."""
        with pytest.raises(ValueError, match="exceeds the 8192 output tokens"):
            create_provider_adapter(
                "claude",
                model="claude-3-5-sonnet-20241022",
                api_key=mock_api_key,
                config=GenerationConfig(max_tokens=10000),
            )

    @pytest.mark.unit
    def test_accepts_max_tokens_at_model_limit(self, mock_api_key):
        """max_tokens equal to the output limit is allowed."""
        adapter = create_provider_adapter(
            "claude",
            model="claude-3-5-sonnet-20241022",
            api_key=mock_api_key,
            config=GenerationConfig(max_tokens=8192),
        )
        assert adapter.model_name == "claude-3-5-sonnet-20241022"
