"""Anthropic Claude adapter implementation.

Sends the screenshot as an explicit base64 image block alongside the
prompt-prefixed specification text.
"""

import logging
from typing import Any

from specmint.config import EnvVar, get_environment
from specmint.prompt import compose_user_text

from .base import (
    AuthenticationError,
    GenerationConfig,
    ProviderAdapter,
    ProviderInvocationError,
    ProviderResult,
)
from .model_spec import DEFAULT_ANTHROPIC_MODEL, ProviderName, get_llm_spec

logger = logging.getLogger(__name__)


class AnthropicAdapter(ProviderAdapter):
    """Anthropic Claude adapter.

    Uses the Messages API with a single user turn holding a text block and
    an image block. Token usage is reported separately for input and output
    and summed into the result.

    Environment:
        ANTHROPIC_API_KEY: API key (required if not passed to constructor).

    Example:
        >>> adapter = AnthropicAdapter()
        >>> result = adapter.invoke(prompt, spec_md, screenshot_b64)
        >>> print(result.tokens_used)
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_ANTHROPIC_MODEL.spec.name,
        config: GenerationConfig | None = None,
        timeout: float = 120.0,
        client: Any = None,
    ):
        """Initialize Anthropic adapter.

        Args:
            api_key: Anthropic API key. Falls back to ANTHROPIC_API_KEY env var.
            model: Model name (claude-3-5-sonnet-20241022, claude-sonnet-4-5, etc.).
            config: Request settings.
            timeout: Request timeout in seconds.
            client: Pre-built Anthropic client (tests inject a double here).

        Raises:
            AuthenticationError: If no API key available.
        """
        self._api_key = api_key or get_environment(EnvVar.ANTHROPIC_API_KEY)
        if not self._api_key:
            raise AuthenticationError(
                "Anthropic API key required. Set ANTHROPIC_API_KEY environment "
                "variable or pass api_key parameter."
            )

        self._spec = get_llm_spec(model)
        self._config = config or GenerationConfig()
        self._timeout = timeout
        self._client: Any = client

    def _get_client(self) -> Any:
        """Lazily initialize Anthropic client.

        The SDK's own retry loop is disabled: each invoke is one attempt.

        Raises:
            ImportError: If anthropic package not installed.
        """
        if self._client is None:
            try:
                import anthropic

                self._client = anthropic.Anthropic(
                    api_key=self._api_key,
                    timeout=self._timeout,
                    max_retries=0,
                )
            except ImportError as e:
                raise ImportError(
                    "anthropic package required. Install with: pip install anthropic"
                ) from e
        return self._client

    @property
    def model_name(self) -> str:
        """Get the model identifier."""
        return self._spec.name

    @property
    def provider(self) -> str:
        """Get the provider identifier."""
        return ProviderName.CLAUDE.value

    def build_messages(self, prompt: str, spec_text: str, screenshot: str) -> list[dict[str, Any]]:
        """Build the single-turn Messages API payload."""
        return [
            {
                "role": "user",
                "content": [
                    {
                        "type": "text",
                        "text": compose_user_text(prompt, spec_text),
                    },
                    {
                        "type": "image",
                        "source": {
                            "type": "base64",
                            "media_type": self._config.media_type,
                            "data": screenshot,
                        },
                    },
                ],
            }
        ]

    def invoke(self, prompt: str, spec_text: str, screenshot: str) -> ProviderResult:
        """Enhance a specification with Claude.

        Raises:
            ProviderInvocationError: On API failure or a response without text.
        """
        client = self._get_client()

        try:
            response = client.messages.create(
                model=self._spec.name,
                max_tokens=self._config.max_tokens,
                messages=self.build_messages(prompt, spec_text, screenshot),
            )
        except Exception as e:
            logger.error(f"Claude API error: {e}")
            raise ProviderInvocationError(
                f"Claude API failed: {e}", provider=self.provider
            ) from e

        content = self._extract_text(response)
        tokens_used = self._extract_usage(response)

        return ProviderResult(
            success=True,
            enhanced_text=content,
            model=self.model_name,
            tokens_used=tokens_used,
            provider=self.provider,
        )

    def _extract_text(self, response: Any) -> str:
        """Return the first text block of a Messages API response.

        Raises:
            ProviderInvocationError: If no non-empty text block exists.
        """
        for block in getattr(response, "content", None) or []:
            if getattr(block, "type", None) != "text":
                continue
            text = getattr(block, "text", None)
            if isinstance(text, str) and text.strip():
                return text

        raise ProviderInvocationError(
            "Claude API returned a response without generated text",
            provider=self.provider,
        )

    def _extract_usage(self, response: Any) -> int:
        """Return input plus output tokens from the usage block.

        Raises:
            ProviderInvocationError: If either counter is missing.
        """
        usage = getattr(response, "usage", None)
        input_tokens = getattr(usage, "input_tokens", None)
        output_tokens = getattr(usage, "output_tokens", None)
        if not isinstance(input_tokens, int) or not isinstance(output_tokens, int):
            raise ProviderInvocationError(
                "Claude API returned a response without token usage",
                provider=self.provider,
            )
        return input_tokens + output_tokens


__all__ = ["AnthropicAdapter"]
