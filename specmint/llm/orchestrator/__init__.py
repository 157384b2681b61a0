"""Provider orchestration for specification enhancement.

Example:
    >>> from specmint.llm.orchestrator import build_orchestrator
    >>> orchestrator = build_orchestrator()
    >>> orchestrator.resolve_provider("auto")
    <ProviderName.CLAUDE: 'claude'>
"""

from .lib import (
    NO_PROVIDER_MESSAGE,
    ProviderAvailability,
    ProviderOrchestrator,
    build_orchestrator,
    parse_priority,
)

__all__ = [
    "NO_PROVIDER_MESSAGE",
    "ProviderAvailability",
    "ProviderOrchestrator",
    "build_orchestrator",
    "parse_priority",
]
