"""Health checking for the specmint server.

Reports which enhancement providers are configured, along with the
settings that decide which one serves a request.
"""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from specmint.config import EnvVar, get_environment, get_provider_priority
from specmint.llm.orchestrator import ProviderAvailability, parse_priority

logger = logging.getLogger(__name__)

CONFIGURED = "configured"
NOT_CONFIGURED = "not configured"


@dataclass
class ServerHealth:
    """Server health report.

    Attributes:
        version: Server version.
        checked_at: When the report was produced (UTC).
        providers: Provider name to configured flag.
        priority: Fallback order used when the requested provider is unavailable.
        default_provider: Provider used when a request names none.
        template: Active prompt template name.
    """

    version: str
    checked_at: datetime
    providers: dict[str, bool] = field(default_factory=dict)
    priority: list[str] = field(default_factory=list)
    default_provider: str = "openai"
    template: str = "standard"

    @property
    def can_enhance(self) -> bool:
        """True if at least one provider is configured."""
        return any(self.providers.values())

    @property
    def timestamp(self) -> str:
        """ISO 8601 UTC timestamp with millisecond precision."""
        return self.checked_at.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def to_dict(self) -> dict[str, Any]:
        """Convert to the /health wire shape."""
        return {
            "status": "ok",
            "timestamp": self.timestamp,
            "providers": {
                name: CONFIGURED if flag else NOT_CONFIGURED
                for name, flag in self.providers.items()
            },
            "version": self.version,
        }


def get_server_health(availability: ProviderAvailability | None = None) -> ServerHealth:
    """Get server health status.

    Args:
        availability: Snapshot to report. Read from the environment if None.

    Returns:
        ServerHealth for the current configuration.
    """
    from specmint.prompt import get_active_template

    from .lib import get_server_version

    availability = availability or ProviderAvailability.from_environment()

    try:
        template = get_active_template().name
    except (OSError, ValueError) as e:
        logger.warning(f"Prompt template unavailable: {e}")
        template = "unavailable"

    try:
        priority = [p.value for p in parse_priority()]
    except ValueError as e:
        logger.warning(f"Provider priority invalid: {e}")
        priority = get_provider_priority()

    return ServerHealth(
        version=get_server_version(),
        checked_at=datetime.now(UTC),
        providers=availability.to_dict(),
        priority=priority,
        default_provider=get_environment(EnvVar.SPECMINT_DEFAULT_PROVIDER),
        template=template,
    )


def format_startup_banner(health: ServerHealth) -> str:
    """Format a startup status banner for logging.

    Args:
        health: Server health status.

    Returns:
        Formatted multi-line banner string.
    """

    def svc_icon(available: bool) -> str:
        return "[OK]" if available else "[--]"

    status = "[OK] READY" if health.can_enhance else "[XX] NO PROVIDER"

    lines = [
        "",
        "=" * 60,
        f"  SpecMint Server v{health.version}",
        "=" * 60,
        f"  Status: {status}",
        "",
        "  Providers:",
    ]
    for name, flag in health.providers.items():
        lines.append(f"    {svc_icon(flag)} {name:<8} {CONFIGURED if flag else NOT_CONFIGURED}")

    lines.extend(
        [
            "",
            "  Routing:",
            f"    default provider:   {health.default_provider}",
            f"    fallback order:     {', '.join(health.priority)}",
            f"    prompt template:    {health.template}",
        ]
    )

    if not health.can_enhance:
        lines.append("")
        lines.append("  Action Required:")
        lines.append("    - Set ANTHROPIC_API_KEY or OPENAI_API_KEY in .env")

    lines.extend(["", "=" * 60, ""])

    return "\n".join(lines)


def log_startup_status(health: ServerHealth | None = None) -> None:
    """Log server health status on startup.

    Outputs a formatted banner showing provider status and routing settings.
    """
    health = health or get_server_health()

    banner = format_startup_banner(health)
    for line in banner.split("\n"):
        if line.strip():
            logger.info(line)

    if not health.can_enhance:
        logger.error(
            "No AI provider configured - enhance_spec will fail. "
            "Configure ANTHROPIC_API_KEY or OPENAI_API_KEY to proceed."
        )
    elif not all(health.providers.values()):
        logger.warning(
            "Only some providers are configured - requests for the others "
            "fall back to the first configured provider."
        )
    else:
        logger.info("Server is ready - all providers available.")


__all__ = [
    "CONFIGURED",
    "NOT_CONFIGURED",
    "ServerHealth",
    "get_server_health",
    "format_startup_banner",
    "log_startup_status",
]
