"""Pytest fixtures for MCP server tests.

This module provides:
- Server and client fixtures for protocol testing
- An ASGI client for the HTTP routes
- Orchestrator injection so no test reaches a provider
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable

import httpx
import pytest
from fastmcp import Client, FastMCP

from specmint.llm.orchestrator import ProviderAvailability, ProviderOrchestrator

# =============================================================================
# Server Fixtures
# =============================================================================


@pytest.fixture
def mcp_server() -> FastMCP:
    """Create MCP server instance for testing.

    Returns:
        Configured FastMCP server instance.
    """
    from .server import create_server

    return create_server()


@pytest.fixture
async def mcp_client(mcp_server: FastMCP) -> AsyncGenerator[Client, None]:
    """Create connected MCP client for testing.

    Args:
        mcp_server: The MCP server instance.

    Yields:
        Connected Client instance for testing.
    """
    async with Client(mcp_server) as client:
        yield client


@pytest.fixture
async def http_client(mcp_server: FastMCP) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client wired to the server's ASGI app, without a socket.

    Yields:
        httpx.AsyncClient with base_url http://testserver.
    """
    transport = httpx.ASGITransport(app=mcp_server.http_app())
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


# =============================================================================
# Orchestrator Fixtures
# =============================================================================


@pytest.fixture
def install_orchestrator(monkeypatch: pytest.MonkeyPatch, recording_adapter) -> Callable:
    """Replace the process-wide orchestrator with one over recording adapters.

    Returns:
        Callable taking adapters keyed by provider name and returning
        the installed orchestrator. Providers passed are the configured ones.

    Example:
        >>> claude = recording_adapter("claude")
        >>> install_orchestrator(claude=claude)
    """
    from .tools import enhance as enhance_module

    def _install(**adapters) -> ProviderOrchestrator:
        orchestrator = ProviderOrchestrator(
            ProviderAvailability.of(*adapters),
            adapters,
            priority=["claude", "openai"],
        )
        monkeypatch.setattr(enhance_module, "get_orchestrator", lambda: orchestrator)
        return orchestrator

    return _install
