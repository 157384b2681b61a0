"""ProviderOrchestrator for screenshot-based specification enhancement.

Resolves which provider serves a request, invokes its adapter exactly once,
and returns the adapter's uniform result.

Resolution:
    1. The requested provider, if it is configured.
    2. Otherwise the first configured provider in the priority order.
    3. Otherwise NoProviderConfiguredError, with no adapter invoked.

A provider that has been invoked and failed is never followed by another
provider; its ProviderInvocationError propagates to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from specmint.config import (
    EnvVar,
    get_available_llm_providers,
    get_environment,
    get_provider_priority,
)
from specmint.prompt import PromptTemplate, get_active_template

from ..backend import (
    GenerationConfig,
    LLMError,
    NoProviderConfiguredError,
    ProviderAdapter,
    ProviderInvocationError,
    ProviderName,
    ProviderResult,
    create_provider_adapter,
)

if TYPE_CHECKING:
    from specmint.request import EnhancementRequest

logger = logging.getLogger(__name__)

NO_PROVIDER_MESSAGE = (
    "No AI provider configured. Please set ANTHROPIC_API_KEY or OPENAI_API_KEY"
)

AdapterFactory = Callable[..., ProviderAdapter]


def _as_provider(name: str | ProviderName) -> ProviderName:
    """Coerce a provider identifier, rejecting unknown names."""
    try:
        return ProviderName(str(getattr(name, "value", name)).strip().lower())
    except ValueError:
        raise ValueError(f"Unknown provider: {name}") from None


def parse_priority(
    priority: Iterable[str | ProviderName] | None = None,
) -> tuple[ProviderName, ...]:
    """Build the full fallback order.

    Listed providers come first, duplicates dropped. Providers the list
    omits follow in declaration order, so every configured provider can
    serve AUTO.

    Args:
        priority: Provider names. Defaults to SPECMINT_PROVIDER_PRIORITY.

    Raises:
        ValueError: If the list names AUTO or an unknown provider.
    """
    order: list[ProviderName] = []
    for name in priority if priority is not None else get_provider_priority():
        provider = _as_provider(name)
        if provider is ProviderName.AUTO:
            raise ValueError("'auto' cannot appear in the provider priority")
        if provider not in order:
            order.append(provider)
    order.extend(p for p in ProviderName.concrete() if p not in order)
    return tuple(order)


@dataclass(frozen=True)
class ProviderAvailability:
    """Read-only snapshot of which providers have credentials.

    Built once at startup and passed to the orchestrator. Requests never
    mutate it.

    Attributes:
        configured: Provider to configured flag, for every concrete provider.
    """

    configured: Mapping[ProviderName, bool] = field(default_factory=dict)

    def __post_init__(self) -> None:
        flags = {provider: False for provider in ProviderName.concrete()}
        for name, flag in self.configured.items():
            provider = _as_provider(name)
            if provider is ProviderName.AUTO:
                raise ValueError("'auto' cannot be marked as configured")
            flags[provider] = bool(flag)
        object.__setattr__(self, "configured", MappingProxyType(flags))

    @classmethod
    def of(cls, *providers: str | ProviderName) -> "ProviderAvailability":
        """Snapshot with exactly the given providers configured."""
        return cls({_as_provider(p): True for p in providers})

    @classmethod
    def from_environment(cls) -> "ProviderAvailability":
        """Snapshot derived from provider API keys in the environment."""
        return cls.of(*get_available_llm_providers())

    def is_configured(self, provider: str | ProviderName) -> bool:
        """Check whether a provider has credentials."""
        return self.configured.get(_as_provider(provider), False)

    def configured_providers(self) -> list[ProviderName]:
        """Configured providers in declaration order."""
        return [p for p, flag in self.configured.items() if flag]

    @property
    def any_configured(self) -> bool:
        """True if at least one provider can be invoked."""
        return any(self.configured.values())

    def to_dict(self) -> dict[str, bool]:
        """Convert to a JSON-serializable dict keyed by provider name."""
        return {p.value: flag for p, flag in self.configured.items()}


class ProviderOrchestrator:
    """Orchestrates provider selection and invocation.

    The orchestrator holds only immutable state: the availability snapshot,
    one adapter per configured provider, the priority order and the active
    prompt template. Concurrent calls are independent.

    Example:
        >>> availability = ProviderAvailability.of("claude")
        >>> orchestrator = ProviderOrchestrator(
        ...     availability,
        ...     {ProviderName.CLAUDE: AnthropicAdapter()},
        ... )
        >>> result = orchestrator.enhance(request)
    """

    def __init__(
        self,
        availability: ProviderAvailability,
        adapters: Mapping[str | ProviderName, ProviderAdapter],
        *,
        priority: Sequence[str | ProviderName] | None = None,
        template: PromptTemplate | None = None,
    ):
        """Initialize ProviderOrchestrator.

        Args:
            availability: Which providers have credentials.
            adapters: Adapter per provider. Must cover every configured provider.
            priority: Fallback order. Defaults to SPECMINT_PROVIDER_PRIORITY.
                Providers it omits are appended in declaration order.
            template: Prompt template. Defaults to the configured active template.

        Raises:
            ValueError: If the priority names an unknown provider or a
                configured provider has no adapter.
        """
        self._availability = availability
        self._adapters: Mapping[ProviderName, ProviderAdapter] = MappingProxyType(
            {_as_provider(name): adapter for name, adapter in adapters.items()}
        )
        self._priority = parse_priority(priority)
        self._template = template or get_active_template()

        missing = [
            p.value for p in availability.configured_providers() if p not in self._adapters
        ]
        if missing:
            raise ValueError(f"No adapter supplied for configured provider(s): {missing}")

    @property
    def availability(self) -> ProviderAvailability:
        """Get the availability snapshot."""
        return self._availability

    @property
    def priority(self) -> tuple[ProviderName, ...]:
        """Get the fallback order."""
        return self._priority

    @property
    def template(self) -> PromptTemplate:
        """Get the active prompt template."""
        return self._template

    def resolve_provider(self, requested: str | ProviderName = ProviderName.AUTO) -> ProviderName:
        """Choose the provider that will serve a request.

        Args:
            requested: Caller's provider choice, or AUTO.

        Returns:
            A configured provider.

        Raises:
            NoProviderConfiguredError: If no provider is configured.
        """
        requested = _as_provider(requested)

        if requested is not ProviderName.AUTO and self._availability.is_configured(requested):
            return requested

        for provider in self._priority:
            if self._availability.is_configured(provider):
                if requested is not ProviderName.AUTO:
                    logger.info(
                        f"Requested provider '{requested.value}' is not configured, "
                        f"falling back to '{provider.value}'"
                    )
                return provider

        raise NoProviderConfiguredError(NO_PROVIDER_MESSAGE)

    def enhance(self, request: EnhancementRequest) -> ProviderResult:
        """Enhance a specification with one provider call.

        Args:
            request: Normalized enhancement request.

        Returns:
            ProviderResult from the resolved provider.

        Raises:
            NoProviderConfiguredError: If no provider is configured.
            ProviderInvocationError: If the provider call fails.
        """
        provider = self.resolve_provider(request.requested_provider)
        adapter = self._adapters[provider]
        logger.debug(f"Provider selected: {adapter.name}")

        logger.info(f"Enhancing specification using {adapter.name}...")
        logger.info(f"Spec length: {len(request.spec_text)} chars")
        logger.info(f"Screenshot length: {len(request.screenshot)} chars")

        try:
            result = adapter.invoke(self._template.text, request.spec_text, request.screenshot)
        except ProviderInvocationError:
            raise
        except LLMError as e:
            raise ProviderInvocationError(str(e), provider=provider.value) from e
        except Exception as e:
            logger.exception(f"Unexpected failure in {adapter.name}")
            raise ProviderInvocationError(
                f"{provider.value} adapter failed: {e}", provider=provider.value
            ) from e

        logger.info(f"Enhancement succeeded via {adapter.name} ({result.tokens_used} tokens)")
        return result


def build_orchestrator(
    availability: ProviderAvailability | None = None,
    *,
    adapter_factory: AdapterFactory = create_provider_adapter,
    priority: Sequence[str | ProviderName] | None = None,
    template: PromptTemplate | None = None,
    config: GenerationConfig | None = None,
) -> ProviderOrchestrator:
    """Create an orchestrator with adapters for every configured provider.

    Args:
        availability: Snapshot to use. Read from the environment if None.
        adapter_factory: Builds one adapter per configured provider.
        priority: Fallback order. Defaults to SPECMINT_PROVIDER_PRIORITY.
        template: Prompt template. Defaults to the configured active template.
        config: Request settings. Defaults to SPECMINT_MAX_TOKENS.

    Returns:
        Configured ProviderOrchestrator.

    Raises:
        ValueError: If SPECMINT_DEFAULT_PROVIDER is not a provider name, or a
            configured provider's adapter cannot be built.
    """
    from specmint.request import get_default_provider

    default_provider = get_default_provider()
    availability = availability or ProviderAvailability.from_environment()
    config = config or GenerationConfig(max_tokens=get_environment(EnvVar.SPECMINT_MAX_TOKENS))
    timeout = float(get_environment(EnvVar.SPECMINT_REQUEST_TIMEOUT))

    adapters = {
        provider: adapter_factory(provider, config=config, timeout=timeout)
        for provider in availability.configured_providers()
    }
    orchestrator = ProviderOrchestrator(
        availability,
        adapters,
        priority=priority,
        template=template,
    )

    configured = [p.value for p in availability.configured_providers()] or ["none"]
    logger.info(
        f"Provider orchestrator ready: configured={', '.join(configured)}, "
        f"priority={', '.join(p.value for p in orchestrator.priority)}, "
        f"default={default_provider.value}, "
        f"template={orchestrator.template.name}"
    )
    return orchestrator


__all__ = [
    "NO_PROVIDER_MESSAGE",
    "ProviderAvailability",
    "ProviderOrchestrator",
    "build_orchestrator",
    "parse_priority",
]
