"""OpenAI GPT adapter implementation.

Sends the screenshot as a base64 data URL image reference alongside the
prompt-prefixed specification text.
"""

import logging
from typing import Any

from specmint.config import EnvVar, get_environment
from specmint.prompt import SYSTEM_PROMPT, compose_user_text

from .base import (
    AuthenticationError,
    GenerationConfig,
    ProviderAdapter,
    ProviderInvocationError,
    ProviderResult,
)
from .model_spec import DEFAULT_OPENAI_MODEL, ProviderName, get_llm_spec

logger = logging.getLogger(__name__)


class OpenAIAdapter(ProviderAdapter):
    """OpenAI GPT adapter.

    Uses Chat Completions with a system message and one user turn holding a
    text part and an image_url part. Token usage is the reported total.

    Environment:
        OPENAI_API_KEY: API key (required if not passed to constructor).

    Example:
        >>> adapter = OpenAIAdapter()
        >>> result = adapter.invoke(prompt, spec_md, screenshot_b64)
        >>> print(result.enhanced_text)
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_OPENAI_MODEL.spec.name,
        config: GenerationConfig | None = None,
        base_url: str | None = None,
        timeout: float = 120.0,
        system_prompt: str = SYSTEM_PROMPT,
        client: Any = None,
    ):
        """Initialize OpenAI adapter.

        Args:
            api_key: OpenAI API key. Falls back to OPENAI_API_KEY env var.
            model: Model name (gpt-4o, gpt-4.1, etc.).
            config: Request settings.
            base_url: Optional custom API endpoint.
            timeout: Request timeout in seconds.
            system_prompt: System message sent before the user turn.
            client: Pre-built OpenAI client (tests inject a double here).

        Raises:
            AuthenticationError: If no API key available.
        """
        self._api_key = api_key or get_environment(EnvVar.OPENAI_API_KEY)
        if not self._api_key:
            raise AuthenticationError(
                "OpenAI API key required. Set OPENAI_API_KEY environment "
                "variable or pass api_key parameter."
            )

        self._spec = get_llm_spec(model)
        self._config = config or GenerationConfig()
        self._base_url = base_url
        self._timeout = timeout
        self._system_prompt = system_prompt
        self._client: Any = client

    def _get_client(self) -> Any:
        """Lazily initialize OpenAI client.

        The SDK's own retry loop is disabled: each invoke is one attempt.

        Raises:
            ImportError: If openai package not installed.
        """
        if self._client is None:
            try:
                from openai import OpenAI

                self._client = OpenAI(
                    api_key=self._api_key,
                    base_url=self._base_url,
                    timeout=self._timeout,
                    max_retries=0,
                )
            except ImportError as e:
                raise ImportError(
                    "openai package required. Install with: pip install openai"
                ) from e
        return self._client

    @property
    def model_name(self) -> str:
        """Get the model identifier."""
        return self._spec.name

    @property
    def provider(self) -> str:
        """Get the provider identifier."""
        return ProviderName.OPENAI.value

    def build_messages(self, prompt: str, spec_text: str, screenshot: str) -> list[dict[str, Any]]:
        """Build the Chat Completions message list."""
        messages: list[dict[str, Any]] = []
        if self._system_prompt:
            messages.append({"role": "system", "content": self._system_prompt})
        messages.append(
            {
                "role": "user",
                "content": [
                    {
                        "type": "text",
                        "text": compose_user_text(prompt, spec_text),
                    },
                    {
                        "type": "image_url",
                        "image_url": {
                            "url": f"data:{self._config.media_type};base64,{screenshot}",
                            "detail": self._config.image_detail,
                        },
                    },
                ],
            }
        )
        return messages

    def invoke(self, prompt: str, spec_text: str, screenshot: str) -> ProviderResult:
        """Enhance a specification with GPT.

        Raises:
            ProviderInvocationError: On API failure or a response without text.
        """
        client = self._get_client()

        logger.info(f"Calling OpenAI {self.model_name} with vision...")
        try:
            response = client.chat.completions.create(
                model=self._spec.name,
                max_tokens=self._config.max_tokens,
                temperature=self._config.temperature,
                messages=self.build_messages(prompt, spec_text, screenshot),
            )
        except Exception as e:
            logger.error(f"OpenAI API error: {e}")
            raise ProviderInvocationError(
                f"OpenAI API failed: {e}", provider=self.provider
            ) from e

        content = self._extract_text(response)
        tokens_used = self._extract_usage(response)

        logger.info(
            f"OpenAI response received: model={getattr(response, 'model', self.model_name)}, "
            f"tokens={tokens_used}, length={len(content)}"
        )

        return ProviderResult(
            success=True,
            enhanced_text=content,
            model=self.model_name,
            tokens_used=tokens_used,
            provider=self.provider,
        )

    def _extract_text(self, response: Any) -> str:
        """Return the first choice's message content.

        Raises:
            ProviderInvocationError: If there is no choice or no text content.
        """
        choices = getattr(response, "choices", None) or []
        if choices:
            message = getattr(choices[0], "message", None)
            content = getattr(message, "content", None)
            if isinstance(content, str) and content.strip():
                return content

        raise ProviderInvocationError(
            "OpenAI API returned a response without generated text",
            provider=self.provider,
        )

    def _extract_usage(self, response: Any) -> int:
        """Return the reported total token count.

        Raises:
            ProviderInvocationError: If the usage block has no total.
        """
        total = getattr(getattr(response, "usage", None), "total_tokens", None)
        if not isinstance(total, int):
            raise ProviderInvocationError(
                "OpenAI API returned a response without token usage",
                provider=self.provider,
            )
        return total


__all__ = ["OpenAIAdapter"]
