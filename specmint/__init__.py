"""specmint: screenshot-grounded design specification enhancement."""

from specmint.llm import (
    NoProviderConfiguredError,
    ProviderAvailability,
    ProviderInvocationError,
    ProviderName,
    ProviderOrchestrator,
    ProviderResult,
    build_orchestrator,
)
from specmint.request import (
    EnhancementRequest,
    RequestValidationError,
    normalize,
)

__version__ = "1.0.0"

__all__ = [
    # Request
    "EnhancementRequest",
    "RequestValidationError",
    "normalize",
    # Orchestration
    "ProviderName",
    "ProviderAvailability",
    "ProviderOrchestrator",
    "ProviderResult",
    "build_orchestrator",
    # Errors
    "NoProviderConfiguredError",
    "ProviderInvocationError",
]
