"""Environment settings for specmint.

Every setting the server, CLI and adapters read is declared once in the
`EnvVar` registry and read through `get_environment()`, which converts the
raw string to the declared type. An explicit override beats the process
environment, which beats the declared default.

Example:
    >>> from specmint.config import EnvVar, get_environment
    >>> get_environment(EnvVar.SPECMINT_MAX_TOKENS)
    4096
    >>> get_environment(EnvVar.SPECMINT_DEFAULT_PROVIDER, override="claude")
    'claude'
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, overload

# =============================================================================
# Environment Variable Configuration
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Metadata for an environment variable.

    Attributes:
        name: Environment variable name (e.g., "MCP_PORT").
        default: Default value if not set in environment.
        var_type: Python type for value conversion (str, int, bool, Path).
        description: Human-readable description.
        category: Grouping category for documentation.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """All environment variables used by specmint.

    Each member contains an EnvConfig with name, default, type, and description.
    Use with `get_environment()` for type-safe access.

    Categories:
        - llm: Provider API keys and model names
        - enhance: Enhancement pipeline settings
        - service: Server bind address, port and runtime mode
    """

    # -------------------------------------------------------------------------
    # LLM Providers
    # -------------------------------------------------------------------------
    ANTHROPIC_API_KEY = EnvConfig(
        name="ANTHROPIC_API_KEY",
        default=None,
        var_type=str,
        description="Anthropic API key for Claude models",
        category="llm",
    )
    OPENAI_API_KEY = EnvConfig(
        name="OPENAI_API_KEY",
        default=None,
        var_type=str,
        description="OpenAI API key for GPT models",
        category="llm",
    )
    ANTHROPIC_MODEL = EnvConfig(
        name="ANTHROPIC_MODEL",
        default="claude-3-5-sonnet-20241022",
        var_type=str,
        description="Claude model used for enhancement",
        category="llm",
    )
    OPENAI_MODEL = EnvConfig(
        name="OPENAI_MODEL",
        default="gpt-4o",
        var_type=str,
        description="OpenAI model used for enhancement",
        category="llm",
    )

    # -------------------------------------------------------------------------
    # Enhancement Pipeline
    # -------------------------------------------------------------------------
    SPECMINT_DEFAULT_PROVIDER = EnvConfig(
        name="SPECMINT_DEFAULT_PROVIDER",
        default="openai",
        var_type=str,
        description="Provider used when the caller does not name one (auto, claude, openai)",
        category="enhance",
    )
    SPECMINT_PROVIDER_PRIORITY = EnvConfig(
        name="SPECMINT_PROVIDER_PRIORITY",
        default="claude,openai",
        var_type=str,
        description="Comma-separated fallback order used when the requested provider is unavailable",
        category="enhance",
    )
    SPECMINT_MAX_SCREENSHOT_LENGTH = EnvConfig(
        name="SPECMINT_MAX_SCREENSHOT_LENGTH",
        default=20 * 1024 * 1024,
        var_type=int,
        description="Maximum screenshot size in base64 characters (20 MiB)",
        category="enhance",
    )
    SPECMINT_PROMPT_TEMPLATE = EnvConfig(
        name="SPECMINT_PROMPT_TEMPLATE",
        default="standard",
        var_type=str,
        description="Name of the registered prompt template to prefix to specs",
        category="enhance",
    )
    SPECMINT_PROMPT_FILE = EnvConfig(
        name="SPECMINT_PROMPT_FILE",
        default=None,
        var_type=Path,
        description="Path to a custom prompt template file (overrides the named template)",
        category="enhance",
    )
    SPECMINT_MAX_TOKENS = EnvConfig(
        name="SPECMINT_MAX_TOKENS",
        default=4096,
        var_type=int,
        description="Maximum tokens generated per enhancement",
        category="enhance",
    )
    SPECMINT_REQUEST_TIMEOUT = EnvConfig(
        name="SPECMINT_REQUEST_TIMEOUT",
        default=120,
        var_type=int,
        description="Provider request timeout in seconds",
        category="enhance",
    )

    # -------------------------------------------------------------------------
    # Service Configuration
    # -------------------------------------------------------------------------
    SPECMINT_ENV = EnvConfig(
        name="SPECMINT_ENV",
        default="production",
        var_type=str,
        description="Runtime mode; 'development' adds stack traces to error payloads",
        category="service",
    )
    MCP_HOST = EnvConfig(
        name="MCP_HOST",
        default="0.0.0.0",
        var_type=str,
        description="MCP server bind address",
        category="service",
    )
    MCP_PORT = EnvConfig(
        name="MCP_PORT",
        default=18080,
        var_type=int,
        description="MCP server port (avoids 8080)",
        category="service",
    )


# =============================================================================
# Type Conversion Helpers
# =============================================================================


def _parse_bool(value: str) -> bool | None:
    """Read a flag value; None when it is not a recognizable flag."""
    normalized = value.lower().strip()
    if normalized in ("true", "1", "yes"):
        return True
    if normalized in ("false", "0", "no"):
        return False
    return None


def _convert_value(value: str | None, var_type: type, default: Any) -> Any:
    """Convert a raw environment string, falling back to the default when unset or unparsable."""
    if value is None:
        return default

    if var_type is str:
        return value

    if var_type is int:
        try:
            return int(value)
        except ValueError:
            return default

    if var_type is bool:
        result = _parse_bool(value)
        return result if result is not None else default

    if var_type is Path:
        return Path(value)

    return value


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: int) -> int: ...
@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: bool) -> bool: ...
@overload
def get_environment(env_var: EnvVar, override: Path) -> Path: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Read a setting as its declared type.

    An explicit override is returned unchanged. Otherwise the process
    environment is read and converted, and the declared default covers
    unset or unparsable values.

    Args:
        env_var: Environment variable enum member.
        override: Optional override value (bypasses env lookup).

    Returns:
        Value converted to the appropriate type (str, int, bool, or Path).

    Example:
        >>> get_environment(EnvVar.MCP_PORT)
        18080
        >>> get_environment(EnvVar.SPECMINT_ENV, override="development")
        'development'
    """
    config: EnvConfig = env_var.value

    if override is not None:
        return override

    raw_value = os.environ.get(config.name)

    return _convert_value(raw_value, config.var_type, config.default)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Get metadata for an environment variable.

    Args:
        env_var: Environment variable enum member.

    Returns:
        EnvConfig with name, default, type, and description.
    """
    return env_var.value


# =============================================================================
# Convenience Functions
# =============================================================================


def get_available_llm_providers() -> list[str]:
    """Get list of configured LLM providers.

    A provider counts as configured when its API key is set and non-empty.

    Returns:
        Provider names (e.g., ["claude", "openai"]).
    """
    providers = []

    if get_environment(EnvVar.ANTHROPIC_API_KEY):
        providers.append("claude")
    if get_environment(EnvVar.OPENAI_API_KEY):
        providers.append("openai")

    return providers


def get_provider_priority(override: str | None = None) -> list[str]:
    """Get the provider fallback order.

    Resolution: override > SPECMINT_PROVIDER_PRIORITY > "claude,openai".
    Blank entries and duplicates are dropped, keeping first occurrence.

    Returns:
        Ordered provider names.
    """
    raw = get_environment(EnvVar.SPECMINT_PROVIDER_PRIORITY, override=override)
    order: list[str] = []
    for name in raw.split(","):
        name = name.strip().lower()
        if name and name not in order:
            order.append(name)
    return order


def is_development() -> bool:
    """Check whether the service runs in development mode."""
    return get_environment(EnvVar.SPECMINT_ENV).strip().lower() == "development"


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List all environment variables, optionally filtered by category.

    Args:
        category: Filter by category (llm, enhance, service).
                 None returns all variables.

    Returns:
        List of EnvVar enum members.
    """
    if category is None:
        return list(EnvVar)

    return [var for var in EnvVar if var.value.category == category]


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
