"""Model specification system for provider adapters.

Provides a registry of vision-capable models with their output limits
and provider information. Enhancement always sends a screenshot, so every
model used by an adapter must declare VISION.
"""

from dataclasses import dataclass, field
from enum import Enum


class LLMCapability(Enum):
    """Capabilities that an LLM model may support."""

    VISION = "vision"  # Image input support


class ProviderName(str, Enum):
    """Provider identifiers accepted from callers.

    AUTO defers the choice to the configured fallback order.
    """

    AUTO = "auto"
    CLAUDE = "claude"
    OPENAI = "openai"

    @classmethod
    def concrete(cls) -> list["ProviderName"]:
        """All providers except AUTO."""
        return [p for p in cls if p is not cls.AUTO]


@dataclass(frozen=True)
class LLMSpec:
    """Specification for an LLM model.

    Attributes:
        name: Model identifier sent to the provider API.
        provider: Provider serving the model.
        max_output_tokens: Largest max_tokens the model accepts.
        capabilities: Set of supported capabilities.
        description: Human-readable description.
    """

    name: str
    provider: ProviderName
    max_output_tokens: int
    capabilities: frozenset[LLMCapability] = field(default_factory=frozenset)
    description: str = ""

    def supports(self, capability: LLMCapability) -> bool:
        """Check if model supports a capability."""
        return capability in self.capabilities


_VISION = frozenset({LLMCapability.VISION})


class LLMModel(Enum):
    """Registry of models usable for screenshot-based enhancement."""

    # === OpenAI Models ===
    GPT_4O = LLMSpec(
        name="gpt-4o",
        provider=ProviderName.OPENAI,
        max_output_tokens=16384,
        capabilities=_VISION,
        description="OpenAI multimodal flagship with high-detail vision",
    )

    GPT_4O_MINI = LLMSpec(
        name="gpt-4o-mini",
        provider=ProviderName.OPENAI,
        max_output_tokens=16384,
        capabilities=_VISION,
        description="OpenAI fast, low-cost multimodal model",
    )

    GPT_4_1 = LLMSpec(
        name="gpt-4.1",
        provider=ProviderName.OPENAI,
        max_output_tokens=32768,
        capabilities=_VISION,
        description="OpenAI long-context model with vision",
    )

    # === Anthropic Claude Models ===
    CLAUDE_3_5_SONNET = LLMSpec(
        name="claude-3-5-sonnet-20241022",
        provider=ProviderName.CLAUDE,
        max_output_tokens=8192,
        capabilities=_VISION,
        description="Claude 3.5 Sonnet (October 2024)",
    )

    CLAUDE_SONNET_4_5 = LLMSpec(
        name="claude-sonnet-4-5",
        provider=ProviderName.CLAUDE,
        max_output_tokens=64000,
        capabilities=_VISION,
        description="Anthropic best balanced for coding and agents",
    )

    CLAUDE_HAIKU_4_5 = LLMSpec(
        name="claude-haiku-4-5",
        provider=ProviderName.CLAUDE,
        max_output_tokens=64000,
        capabilities=_VISION,
        description="Anthropic fastest model",
    )

    @property
    def spec(self) -> LLMSpec:
        """Get the LLMSpec for this model."""
        return self.value

    @classmethod
    def by_name(cls, name: str) -> "LLMModel | None":
        """Look up model by name string.

        Args:
            name: Model name to find.

        Returns:
            LLMModel if found, None otherwise.
        """
        for model in cls:
            if model.spec.name == name:
                return model
        return None

    @classmethod
    def list_by_provider(cls, provider: ProviderName) -> list["LLMModel"]:
        """Get all models for a specific provider."""
        return [m for m in cls if m.spec.provider == provider]


# Default models for each provider
DEFAULT_ANTHROPIC_MODEL = LLMModel.CLAUDE_3_5_SONNET
DEFAULT_OPENAI_MODEL = LLMModel.GPT_4O


def get_llm_spec(model: str | LLMModel | LLMSpec) -> LLMSpec:
    """Resolve a model reference to its LLMSpec.

    Args:
        model: Can be a model name string, LLMModel enum, or LLMSpec.

    Returns:
        The resolved LLMSpec.

    Raises:
        ValueError: If model name is not found.
    """
    if isinstance(model, LLMSpec):
        return model
    if isinstance(model, LLMModel):
        return model.spec
    found = LLMModel.by_name(model)
    if found:
        return found.spec
    raise ValueError(f"Unknown model: {model}")


__all__ = [
    "LLMCapability",
    "ProviderName",
    "LLMSpec",
    "LLMModel",
    "DEFAULT_ANTHROPIC_MODEL",
    "DEFAULT_OPENAI_MODEL",
    "get_llm_spec",
]
