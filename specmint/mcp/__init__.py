"""MCP (Model Context Protocol) server for specmint.

This module provides the MCP server implementation that exposes
specification enhancement to LLM clients like Claude Desktop, and the
plain HTTP routes used by browser and script callers.

Example:
    # Start server in STDIO mode (for Claude Desktop)
    >>> from specmint.mcp import run_server
    >>> run_server()

    # Start server in HTTP mode
    >>> from specmint.mcp import ServerConfig, TransportType, run_server
    >>> run_server(ServerConfig(transport=TransportType.HTTP, port=18080))

    # Create server for testing
    >>> from specmint.mcp import create_server
    >>> server = create_server()

Available Tools:
    - enhance_spec: Enhance a specification against its screenshot
    - status: Provider configuration report
"""

from .lib import (
    SERVER_NAME,
    SERVER_VERSION,
    ServerConfig,
    TransportType,
    get_server_version,
)
from .server import create_server, main, mcp, run_server

__all__ = [
    # Server instance
    "mcp",
    "create_server",
    "run_server",
    "main",
    # Configuration
    "ServerConfig",
    "TransportType",
    "SERVER_NAME",
    "SERVER_VERSION",
    # Utilities
    "get_server_version",
]
