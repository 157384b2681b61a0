"""Unit tests for MCP server module.

Tests cover:
- Server configuration
- Server instance creation
- Tool registration and functionality
- HTTP routes (/enhance, /health)
"""

import pytest

from specmint.llm.backend import ProviderInvocationError

from .lib import (
    ServerConfig,
    TransportType,
    get_server_version,
)
from .server import CORS_HEADERS, create_server, main, mcp

# =============================================================================
# Configuration Tests
# =============================================================================


class TestServerConfig:
    """Tests for ServerConfig dataclass."""

    @pytest.mark.unit
    def test_default_config(self):
        """Default config has expected values."""
        config = ServerConfig()

        assert config.name == "specmint"
        assert config.transport == TransportType.STDIO
        assert config.host == "0.0.0.0"
        assert config.port == 18080
        assert config.path == "/mcp"
        assert config.serves_http is False

    @pytest.mark.unit
    def test_from_env_default(self):
        """from_env creates config with default transport."""
        config = ServerConfig.from_env()

        assert config.transport == TransportType.STDIO
        assert config.name == "specmint"

    @pytest.mark.unit
    def test_from_env_reads_host_and_port(self, monkeypatch):
        """from_env reads MCP_HOST and MCP_PORT."""
        monkeypatch.setenv("MCP_HOST", "127.0.0.1")
        monkeypatch.setenv("MCP_PORT", "9090")
        config = ServerConfig.from_env(transport=TransportType.HTTP)

        assert config.host == "127.0.0.1"
        assert config.port == 9090
        assert config.serves_http is True

    @pytest.mark.unit
    def test_from_env_overrides(self, monkeypatch):
        """Explicit host and port win over the environment."""
        monkeypatch.setenv("MCP_PORT", "9090")
        config = ServerConfig.from_env(host="localhost", port=7000)

        assert config.host == "localhost"
        assert config.port == 7000


class TestTransportType:
    """Tests for TransportType enum."""

    @pytest.mark.unit
    def test_transport_from_string(self):
        """Transport can be created from string."""
        assert TransportType("stdio") == TransportType.STDIO
        assert TransportType("http") == TransportType.HTTP
        assert TransportType("sse") == TransportType.SSE


class TestServerUtilities:
    """Tests for server utility functions."""

    @pytest.mark.unit
    def test_get_server_version(self):
        """Server version matches the health payload version."""
        assert get_server_version() == "1.0.0"


# =============================================================================
# Server Instance Tests
# =============================================================================


class TestServerInstance:
    """Tests for FastMCP server instance."""

    @pytest.mark.unit
    def test_create_server_returns_mcp(self):
        """create_server returns the mcp instance."""
        assert create_server() is mcp

    @pytest.mark.unit
    def test_server_has_name(self):
        """Server has correct name."""
        assert mcp.name == "specmint"

    @pytest.mark.unit
    def test_main_rejects_unknown_transport(self):
        """argparse rejects transports that do not exist."""
        with pytest.raises(SystemExit):
            main(["--transport", "websocket"])


# =============================================================================
# Tool Functionality Tests (Unit level - no MCP protocol)
# =============================================================================


class TestStatusTool:
    """Tests for status tool logic."""

    @pytest.mark.unit
    def test_status_reports_providers(self, monkeypatch):
        """status reports provider configuration."""
        from .server import status

        monkeypatch.setenv("OPENAI_API_KEY", "sk-oai")
        result = status.fn()

        assert result["status"] == "ok"
        assert result["version"] == "1.0.0"
        assert result["providers"] == {"claude": "not configured", "openai": "configured"}
        assert "action_required" not in result

    @pytest.mark.unit
    def test_status_action_when_unconfigured(self):
        """status tells the caller to configure a key."""
        from .server import status

        result = status.fn()
        assert "action_required" in result


# =============================================================================
# MCP Protocol Tests
# =============================================================================


@pytest.mark.mcp
class TestMCPProtocol:
    """Integration tests using MCP client protocol."""

    @pytest.mark.asyncio
    async def test_client_can_list_tools(self, mcp_client):
        """Client sees exactly the enhancement tools."""
        tools = await mcp_client.list_tools()

        tool_names = {t.name for t in tools}
        assert tool_names == {"enhance_spec", "status"}

    @pytest.mark.asyncio
    async def test_client_can_call_status(self, mcp_client):
        """Client can call status tool."""
        result = await mcp_client.call_tool("status", {})
        assert result.data["status"] == "ok"

    @pytest.mark.asyncio
    async def test_enhance_spec(
        self, mcp_client, install_orchestrator, recording_adapter, sample_spec_md, sample_screenshot
    ):
        """enhance_spec returns the enhanced specification."""
        openai = recording_adapter("openai", model="gpt-4o", enhanced_text="# Better")
        install_orchestrator(openai=openai)

        result = await mcp_client.call_tool(
            "enhance_spec",
            {"spec_md": sample_spec_md, "screenshot": sample_screenshot, "provider": "openai"},
        )

        assert result.data == {
            "success": True,
            "enhanced": "# Better",
            "model": "gpt-4o",
            "tokensUsed": 42,
        }
        assert openai.calls[0].spec_text == sample_spec_md

    @pytest.mark.asyncio
    async def test_enhance_spec_error_payload(self, mcp_client, install_orchestrator):
        """enhance_spec reports failures as an error payload."""
        install_orchestrator()

        result = await mcp_client.call_tool(
            "enhance_spec",
            {"spec_md": "# Spec", "screenshot": "abc"},
        )

        assert result.data["error"] == "No AI provider configured"


# =============================================================================
# HTTP Route Tests
# =============================================================================


@pytest.mark.mcp
class TestEnhanceRoute:
    """Tests for POST /enhance."""

    @pytest.mark.asyncio
    async def test_success(
        self, http_client, install_orchestrator, recording_adapter, sample_spec_md, sample_screenshot
    ):
        """Valid request returns 200 with CORS headers."""
        claude = recording_adapter("claude", model="claude-3-5-sonnet-20241022")
        install_orchestrator(claude=claude)

        response = await http_client.post(
            "/enhance",
            json={"specMd": sample_spec_md, "screenshot": sample_screenshot, "provider": "claude"},
        )

        assert response.status_code == 200
        assert response.json()["model"] == "claude-3-5-sonnet-20241022"
        assert response.headers["access-control-allow-origin"] == "*"

    @pytest.mark.asyncio
    async def test_preflight(self, http_client):
        """OPTIONS returns 200 with CORS headers and no body."""
        response = await http_client.options("/enhance")

        assert response.status_code == 200
        assert response.content == b""
        for name, value in CORS_HEADERS.items():
            assert response.headers[name] == value

    @pytest.mark.asyncio
    async def test_method_not_allowed(self, http_client):
        """GET is rejected with 405."""
        response = await http_client.get("/enhance")

        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed"}

    @pytest.mark.asyncio
    async def test_invalid_json(self, http_client):
        """Non-JSON body is a 400."""
        response = await http_client.post(
            "/enhance",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_missing_fields(self, http_client, install_orchestrator, recording_adapter):
        """Missing screenshot is a 400 and reaches no provider."""
        claude = recording_adapter("claude")
        install_orchestrator(claude=claude)

        response = await http_client.post("/enhance", json={"specMd": "# Spec"})

        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields"
        assert claude.calls == []

    @pytest.mark.asyncio
    async def test_no_provider(self, http_client, install_orchestrator):
        """No configured provider is a 503."""
        install_orchestrator()

        response = await http_client.post("/enhance", json={"specMd": "# Spec", "screenshot": "abc"})

        assert response.status_code == 503

    @pytest.mark.asyncio
    async def test_provider_failure(self, http_client, install_orchestrator, recording_adapter):
        """Provider failure is a 500 carrying the upstream message."""
        install_orchestrator(
            openai=recording_adapter(
                "openai",
                error=ProviderInvocationError("OpenAI API failed: rate limited", provider="openai"),
            )
        )

        response = await http_client.post("/enhance", json={"specMd": "# Spec", "screenshot": "abc"})

        assert response.status_code == 500
        assert response.json()["message"] == "OpenAI API failed: rate limited"


@pytest.mark.mcp
class TestHealthRoute:
    """Tests for GET /health."""

    @pytest.mark.asyncio
    async def test_health(self, http_client, monkeypatch):
        """Health reports provider configuration."""
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant")

        response = await http_client.get("/health")

        assert response.status_code == 200
        payload = response.json()
        assert payload["status"] == "ok"
        assert payload["version"] == "1.0.0"
        assert payload["providers"] == {"claude": "configured", "openai": "not configured"}
        assert payload["timestamp"].endswith("Z")
        assert response.headers["access-control-allow-origin"] == "*"
