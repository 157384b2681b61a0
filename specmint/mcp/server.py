"""FastMCP server instance for specmint.

This module provides the MCP server that exposes specification enhancement
to LLM clients, plus plain HTTP routes for browser and script callers:

    1. enhance_spec: spec markdown + screenshot → enhanced spec markdown
    2. status: provider configuration and server version

HTTP routes (http/sse transports):
    POST    /enhance   JSON body {specMd, specJson?, screenshot, provider?}
    OPTIONS /enhance   CORS preflight
    GET     /health    provider configuration report

Usage:
    # STDIO mode (for Claude Desktop)
    python -m specmint.mcp.server

    # HTTP mode (for web deployment)
    python -m specmint.mcp.server --transport http --port 18080

    # Via CLI
    python . serve --transport http
"""

import argparse
import asyncio
import logging
import sys
from typing import Any

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from .lib import (
    SERVER_NAME,
    ServerConfig,
    TransportType,
    get_server_version,
)

logger = logging.getLogger(__name__)

# =============================================================================
# Server Instructions (LLM Guidance)
# =============================================================================

SERVER_INSTRUCTIONS = """\
## SpecMint Server

Rewrites a design specification into an implementation-ready one, using the
rendered screenshot of the design as visual ground truth.

### Quick Start
1. `status()` → check which providers are configured
2. `enhance_spec(spec_md, screenshot)` → enhanced specification markdown

### Inputs
- `spec_md`: specification markdown (required)
- `screenshot`: base64-encoded PNG of the rendered design (required, max 20MB)
- `spec_json`: structured form of the specification (optional)
- `provider`: "claude", "openai" or "auto" (optional)

If the requested provider is not configured, the first configured provider
in the fallback order is used instead.
"""

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

# =============================================================================
# Server Instance
# =============================================================================

mcp = FastMCP(
    name=SERVER_NAME,
    instructions=SERVER_INSTRUCTIONS,
)


# =============================================================================
# Core Tools
# =============================================================================


@mcp.tool
async def enhance_spec(
    spec_md: str,
    screenshot: str,
    spec_json: Any = None,
    provider: str | None = None,
) -> dict[str, Any]:
    """Enhance a design specification using its rendered screenshot.

    Args:
        spec_md: Specification markdown describing the design.
        screenshot: Base64-encoded PNG of the rendered design.
        spec_json: Structured specification (optional, passed through).
        provider: "claude", "openai" or "auto". Defaults to the server's
            configured default provider.

    Returns:
        On success: {"success": true, "enhanced", "model", "tokensUsed"}.
        On failure: {"error", "message"}.
    """
    from .tools.enhance import handle_enhance

    raw = {
        "specMd": spec_md,
        "specJson": spec_json,
        "screenshot": screenshot,
        "provider": provider,
    }
    _, payload = await asyncio.to_thread(handle_enhance, raw)
    return payload


@mcp.tool
def status() -> dict[str, Any]:
    """Check which providers are configured.

    Use this FIRST to verify the server can serve enhance_spec.

    Returns:
        Dictionary with:
        - status: "ok"
        - timestamp: ISO 8601 UTC time of the check
        - providers: {"claude": "configured" | "not configured", "openai": ...}
        - version: Server version
        - action_required: What to fix if no provider is configured
    """
    from .health import get_server_health

    health = get_server_health()
    result = health.to_dict()

    if not health.can_enhance:
        result["action_required"] = [
            "Configure a provider: Set ANTHROPIC_API_KEY or OPENAI_API_KEY in .env"
        ]

    return result


# =============================================================================
# HTTP Routes
# =============================================================================


def _json(payload: dict[str, Any], status_code: int = 200) -> JSONResponse:
    return JSONResponse(payload, status_code=status_code, headers=CORS_HEADERS)


@mcp.custom_route("/enhance", methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"])
async def enhance_route(request: Request) -> Response:
    """Serve POST /enhance with CORS preflight support."""
    from .tools.enhance import handle_enhance

    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)

    if request.method != "POST":
        return _json({"error": "Method not allowed"}, 405)

    try:
        body = await request.json()
    except ValueError as e:
        return _json({"error": "Invalid request", "message": f"Body is not valid JSON: {e}"}, 400)

    status_code, payload = await asyncio.to_thread(handle_enhance, body)
    return _json(payload, status_code)


@mcp.custom_route("/health", methods=["GET"])
async def health_route(request: Request) -> Response:
    """Serve GET /health."""
    from .health import get_server_health

    return JSONResponse(
        get_server_health().to_dict(),
        headers={"Access-Control-Allow-Origin": "*"},
    )


# =============================================================================
# Server Factory & Runner
# =============================================================================


def create_server() -> FastMCP:
    """Create and configure the MCP server instance.

    Returns:
        Configured FastMCP server instance.
    """
    return mcp


def run_server(config: ServerConfig | None = None) -> None:
    """Run the MCP server with specified transport.

    Args:
        config: Server configuration. Read from the environment if None.
    """
    from .health import log_startup_status
    from .tools.enhance import get_orchestrator

    config = config or ServerConfig.from_env()

    logger.info(f"Starting {config.name} server v{get_server_version()}")
    logger.info(f"Transport: {config.transport.value}")

    # Build adapters up front so a bad template or model fails at startup
    get_orchestrator()
    log_startup_status()

    if config.transport == TransportType.STDIO:
        logger.info("Running in STDIO mode (for Claude Desktop)")
        mcp.run()
    elif config.transport == TransportType.HTTP:
        logger.info(f"Running in HTTP mode at http://{config.host}:{config.port}{config.path}")
        logger.info(f"Enhance route: http://{config.host}:{config.port}/enhance")
        mcp.run(
            transport="http",
            host=config.host,
            port=config.port,
            path=config.path,
        )
    elif config.transport == TransportType.SSE:
        logger.info(f"Running in SSE mode at http://{config.host}:{config.port}")
        mcp.run(
            transport="sse",
            host=config.host,
            port=config.port,
        )
    else:
        raise ValueError(f"Unknown transport: {config.transport}")


# =============================================================================
# CLI Entry Point
# =============================================================================


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for MCP server.

    Args:
        argv: Command line arguments (uses sys.argv if None).

    Returns:
        Exit code (0 for success).
    """
    from dotenv import load_dotenv

    from specmint.core.log import setup_logging

    parser = argparse.ArgumentParser(
        prog="specmint",
        description="MCP server for screenshot-grounded specification enhancement",
    )
    parser.add_argument(
        "--transport",
        "-t",
        type=str,
        choices=[t.value for t in TransportType],
        default="stdio",
        help="Transport type (default: stdio)",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Bind address for HTTP/SSE (default: MCP_HOST or 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=None,
        help="Port for HTTP/SSE (default: MCP_PORT or 18080)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args(argv)

    load_dotenv()
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = ServerConfig.from_env(
            transport=TransportType(args.transport),
            host=args.host,
            port=args.port,
        )
        run_server(config)
        return 0
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        return 0
    except Exception as e:
        logger.error(f"Server error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
