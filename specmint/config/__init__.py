"""Centralized configuration management for specmint.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from specmint.config import EnvVar, get_environment
    >>>
    >>> port = get_environment(EnvVar.MCP_PORT)  # Returns int: 18080
    >>> api_key = get_environment(EnvVar.OPENAI_API_KEY)  # Returns str | None
    >>>
    >>> # Override at runtime
    >>> port = get_environment(EnvVar.MCP_PORT, override=9000)

Environment Variable Categories:
    llm: API keys and model names for LLM providers (Anthropic, OpenAI)
    enhance: Enhancement pipeline limits, defaults and prompt selection
    service: Server bind address, port and runtime mode
"""

from .lib import (
    # Core types
    EnvConfig,
    EnvVar,
    # Main interface
    get_available_llm_providers,
    get_environment,
    get_environment_info,
    get_provider_priority,
    is_development,
    # Introspection
    list_environment_variables,
)

__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    # Convenience functions
    "get_available_llm_providers",
    "get_provider_priority",
    "is_development",
    # Introspection
    "list_environment_variables",
]
