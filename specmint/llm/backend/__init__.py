"""Provider adapter implementations.

Provides the abstract adapter interface and the Claude-shaped and
OpenAI-shaped implementations used by the orchestrator.
"""

from .base import (
    AuthenticationError,
    GenerationConfig,
    LLMError,
    NoProviderConfiguredError,
    ProviderAdapter,
    ProviderInvocationError,
    ProviderResult,
)
from .factory import create_provider_adapter
from .model_spec import (
    DEFAULT_ANTHROPIC_MODEL,
    DEFAULT_OPENAI_MODEL,
    LLMCapability,
    LLMModel,
    LLMSpec,
    ProviderName,
    get_llm_spec,
)

__all__ = [
    # Base classes and types
    "ProviderAdapter",
    "GenerationConfig",
    "ProviderResult",
    # Exceptions
    "LLMError",
    "AuthenticationError",
    "NoProviderConfiguredError",
    "ProviderInvocationError",
    # Model specification
    "LLMCapability",
    "ProviderName",
    "LLMSpec",
    "LLMModel",
    "get_llm_spec",
    # Defaults
    "DEFAULT_ANTHROPIC_MODEL",
    "DEFAULT_OPENAI_MODEL",
    # Factory
    "create_provider_adapter",
]
