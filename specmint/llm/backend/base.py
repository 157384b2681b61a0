"""Abstract base class for provider adapters.

Defines the single capability every vendor adapter exposes, the uniform
result shape, and the error taxonomy shared by the orchestration layer.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class GenerationConfig:
    """Request settings shared by all adapters.

    Attributes:
        max_tokens: Maximum tokens to generate in response.
        temperature: Sampling temperature. Only sent where the adapter uses it.
        media_type: MIME type declared for the inline screenshot.
        image_detail: Vision detail level for providers that accept one.
    """

    max_tokens: int = 4096
    temperature: float = 0.7
    media_type: str = "image/png"
    image_detail: str = "high"


@dataclass(frozen=True)
class ProviderResult:
    """Uniform result of one enhancement call.

    Attributes:
        success: True for every result an adapter returns.
        enhanced_text: Generated specification text.
        model: Model identifier that produced the text.
        tokens_used: Total tokens billed for the call.
        provider: Provider identifier that served the call.
    """

    success: bool
    enhanced_text: str
    model: str
    tokens_used: int
    provider: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to the outbound wire shape."""
        return {
            "success": self.success,
            "enhanced": self.enhanced_text,
            "model": self.model,
            "tokensUsed": self.tokens_used,
        }


class ProviderAdapter(ABC):
    """Abstract interface for multimodal enhancement providers.

    An adapter builds the vendor-specific single-turn request (prompt,
    specification text, inline screenshot), calls the vendor once and
    unwraps the vendor envelope into a ProviderResult.

    Example:
        >>> adapter = OpenAIAdapter(api_key="sk-...")
        >>> result = adapter.invoke(prompt, "Button: 120x40px", screenshot_b64)
        >>> print(result.enhanced_text)
    """

    @abstractmethod
    def invoke(self, prompt: str, spec_text: str, screenshot: str) -> ProviderResult:
        """Run one enhancement call.

        Args:
            prompt: Active prompt template.
            spec_text: Caller's specification text.
            screenshot: Base64-encoded screenshot.

        Returns:
            ProviderResult with generated text and token usage.

        Raises:
            ProviderInvocationError: If the call fails or the response is malformed.
        """

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the model identifier."""

    @property
    @abstractmethod
    def provider(self) -> str:
        """Get the provider identifier (e.g., 'claude', 'openai')."""

    @property
    def name(self) -> str:
        """Get adapter identifier for logging, as 'provider:model'."""
        return f"{self.provider}:{self.model_name}"


class LLMError(Exception):
    """Base exception for provider orchestration errors."""


class AuthenticationError(LLMError):
    """Raised when an adapter is built without an API key."""


class NoProviderConfiguredError(LLMError):
    """Raised when no provider has credentials configured."""


class ProviderInvocationError(LLMError):
    """Raised when a provider call fails or returns a malformed body.

    Attributes:
        provider: Provider that was invoked.
    """

    def __init__(self, message: str, provider: str | None = None):
        super().__init__(message)
        self.provider = provider


__all__ = [
    "ProviderAdapter",
    "GenerationConfig",
    "ProviderResult",
    "LLMError",
    "AuthenticationError",
    "NoProviderConfiguredError",
    "ProviderInvocationError",
]
