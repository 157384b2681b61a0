"""LLM integration layer for specification enhancement.

This module provides multi-provider LLM support for rewriting a design
specification against its rendered screenshot.

Main components:
- ProviderOrchestrator: Resolves a provider and invokes its adapter once
- ProviderAdapter: Abstract interface for LLM providers
- create_provider_adapter: Factory function for creating adapters

Supported providers:
- Anthropic (Claude 3.5 Sonnet, Claude 4.5)
- OpenAI (GPT-4o, GPT-4.1)

Example:
    >>> from specmint.llm import build_orchestrator
    >>> orchestrator = build_orchestrator()
    >>> result = orchestrator.enhance(request)
    >>> print(result.enhanced_text)

    >>> # With specific model
    >>> from specmint.llm import create_provider_adapter, LLMModel
    >>> adapter = create_provider_adapter("claude", model=LLMModel.CLAUDE_SONNET_4_5)
"""

from .backend import (
    DEFAULT_ANTHROPIC_MODEL,
    DEFAULT_OPENAI_MODEL,
    AuthenticationError,
    GenerationConfig,
    LLMCapability,
    LLMError,
    LLMModel,
    LLMSpec,
    NoProviderConfiguredError,
    ProviderAdapter,
    ProviderInvocationError,
    ProviderName,
    ProviderResult,
    create_provider_adapter,
    get_llm_spec,
)
from .orchestrator import (
    NO_PROVIDER_MESSAGE,
    ProviderAvailability,
    ProviderOrchestrator,
    build_orchestrator,
    parse_priority,
)

__all__ = [
    # Orchestrator
    "ProviderOrchestrator",
    "ProviderAvailability",
    "build_orchestrator",
    "parse_priority",
    "NO_PROVIDER_MESSAGE",
    # Backend
    "ProviderAdapter",
    "GenerationConfig",
    "ProviderResult",
    "create_provider_adapter",
    # Model specification
    "LLMCapability",
    "LLMModel",
    "LLMSpec",
    "ProviderName",
    "get_llm_spec",
    "DEFAULT_ANTHROPIC_MODEL",
    "DEFAULT_OPENAI_MODEL",
    # Exceptions
    "LLMError",
    "AuthenticationError",
    "NoProviderConfiguredError",
    "ProviderInvocationError",
]
