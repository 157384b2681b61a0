"""Core MCP server logic for specmint.

Provides configuration for creating MCP server instances.
"""

from dataclasses import dataclass
from enum import Enum

from specmint.config import EnvVar, get_environment

SERVER_NAME = "specmint"
SERVER_VERSION = "1.0.0"


class TransportType(str, Enum):
    """Supported MCP transport types."""

    STDIO = "stdio"
    HTTP = "http"
    SSE = "sse"


@dataclass
class ServerConfig:
    """Configuration for MCP server.

    Attributes:
        name: Server display name.
        transport: Transport type for communication.
        host: Bind address for HTTP/SSE transports.
        port: Port for HTTP/SSE transports.
        path: URL path for the MCP endpoint on HTTP transport.
    """

    name: str = SERVER_NAME
    transport: TransportType = TransportType.STDIO
    host: str = "0.0.0.0"
    port: int = 18080
    path: str = "/mcp"

    @property
    def serves_http(self) -> bool:
        """True when the /enhance and /health routes are reachable."""
        return self.transport is not TransportType.STDIO

    @classmethod
    def from_env(
        cls,
        transport: TransportType | None = None,
        host: str | None = None,
        port: int | None = None,
    ) -> "ServerConfig":
        """Create config from environment variables.

        Args:
            transport: Override transport type (default: STDIO).
            host: Override MCP_HOST.
            port: Override MCP_PORT.

        Returns:
            ServerConfig with values from environment.
        """
        return cls(
            transport=transport or TransportType.STDIO,
            host=get_environment(EnvVar.MCP_HOST, override=host),
            port=get_environment(EnvVar.MCP_PORT, override=port),
        )


def get_server_version() -> str:
    """Get server version string."""
    return SERVER_VERSION


__all__ = [
    "SERVER_NAME",
    "SERVER_VERSION",
    "TransportType",
    "ServerConfig",
    "get_server_version",
]
