"""Adapter factory for creating provider adapters from provider names.

Provides a unified entry point for creating any supported adapter.
"""

from specmint.config import EnvVar, get_environment

from .base import GenerationConfig, ProviderAdapter
from .model_spec import LLMCapability, LLMModel, LLMSpec, ProviderName, get_llm_spec

_MODEL_ENV_VARS = {
    ProviderName.CLAUDE: EnvVar.ANTHROPIC_MODEL,
    ProviderName.OPENAI: EnvVar.OPENAI_MODEL,
}


def create_provider_adapter(
    provider: str | ProviderName,
    *,
    model: str | LLMModel | LLMSpec | None = None,
    api_key: str | None = None,
    config: GenerationConfig | None = None,
    **kwargs,
) -> ProviderAdapter:
    """Create a provider adapter.

    Args:
        provider: Provider identifier ("claude" or "openai").
        model: Model to use. Defaults to ANTHROPIC_MODEL / OPENAI_MODEL.
        api_key: API key. Falls back to the provider's environment variable.
        config: Request settings shared by adapters.
        **kwargs: Additional adapter arguments (e.g., timeout, client).

    Returns:
        Configured ProviderAdapter instance.

    Raises:
        ValueError: If provider is unknown, the model cannot take images, or
            config.max_tokens exceeds the model's output limit.
        AuthenticationError: If API key required but not provided.

    Example:
        >>> adapter = create_provider_adapter("claude")
        >>> adapter = create_provider_adapter("openai", model="gpt-4.1", timeout=60.0)
    """
    try:
        name = ProviderName(str(getattr(provider, "value", provider)).strip().lower())
    except ValueError:
        raise ValueError(f"Unsupported provider: {provider}") from None
    if name is ProviderName.AUTO:
        raise ValueError("Cannot create an adapter for 'auto'; resolve a provider first")

    spec = get_llm_spec(model or get_environment(_MODEL_ENV_VARS[name]))

    if spec.provider != name:
        raise ValueError(
            f"Model '{spec.name}' belongs to {spec.provider.value}, not {name.value}"
        )
    if not spec.supports(LLMCapability.VISION):
        raise ValueError(f"Model '{spec.name}' does not accept image input")
    if config is not None and config.max_tokens > spec.max_output_tokens:
        raise ValueError(
            f"max_tokens {config.max_tokens} exceeds the {spec.max_output_tokens} "
            f"output tokens '{spec.name}' can generate"
        )

    if name is ProviderName.CLAUDE:
        from .anthropic import AnthropicAdapter

        return AnthropicAdapter(api_key=api_key, model=spec.name, config=config, **kwargs)

    from .openai import OpenAIAdapter

    return OpenAIAdapter(api_key=api_key, model=spec.name, config=config, **kwargs)


__all__ = ["create_provider_adapter"]
