"""Command handlers for the specmint CLI.

Each `handle_*_command(argv)` parses its own arguments and returns an exit
code. The root `__main__.py` dispatches to them.
"""

import argparse
import base64
import json
import sys
from pathlib import Path

from specmint.config import (
    EnvVar,
    get_environment,
    get_environment_info,
    list_environment_variables,
)
from specmint.core import get_logger

logger = get_logger("cli")

# Variables whose values are never printed
_SECRET_VARS = {EnvVar.ANTHROPIC_API_KEY, EnvVar.OPENAI_API_KEY}


# =============================================================================
# Enhance Command
# =============================================================================


def _read_screenshot(path: Path) -> str:
    """Read an image file as base64 text."""
    return base64.b64encode(path.read_bytes()).decode("ascii")


def cmd_enhance(args: argparse.Namespace) -> int:
    """Handle the enhance command."""
    from specmint.mcp.tools.enhance import handle_enhance

    try:
        raw = {
            "specMd": args.spec.read_text(encoding="utf-8"),
            "screenshot": _read_screenshot(args.screenshot),
            "provider": args.provider,
        }
        if args.json:
            raw["specJson"] = json.loads(args.json.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.error(f"Could not read input: {e}")
        return 1

    logger.info(f"Enhancing {args.spec} with screenshot {args.screenshot}")
    status, payload = handle_enhance(raw)

    if status != 200:
        logger.error(f"{payload['error']}: {payload.get('message', '')}")
        if "details" in payload:
            logger.debug(payload["details"])
        return 1

    if args.format == "json":
        output = json.dumps(payload, indent=2)
    else:
        output = payload["enhanced"]

    if args.output:
        args.output.write_text(output, encoding="utf-8")
        logger.info(f"Enhanced specification written to {args.output}")
    else:
        print(output)

    logger.info(f"Model: {payload['model']}, tokens: {payload['tokensUsed']}")
    return 0


def handle_enhance_command(argv: list[str]) -> int:
    """Handle enhance-specific arguments."""
    parser = argparse.ArgumentParser(
        prog="python . enhance",
        description="Enhance a design specification using its screenshot",
    )
    parser.add_argument(
        "spec",
        type=Path,
        help="Specification markdown file",
    )
    parser.add_argument(
        "--screenshot",
        "-s",
        type=Path,
        required=True,
        help="Screenshot image file (PNG)",
    )
    parser.add_argument(
        "--json",
        "-j",
        type=Path,
        default=None,
        help="Structured specification JSON file (optional)",
    )
    parser.add_argument(
        "--provider",
        "-p",
        type=str,
        default=None,
        choices=["auto", "claude", "openai"],
        help="Provider to use (default: SPECMINT_DEFAULT_PROVIDER)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output file path (prints to stdout if not specified)",
    )
    parser.add_argument(
        "--format",
        "-f",
        type=str,
        default="markdown",
        choices=["markdown", "json"],
        help="Output format (default: markdown)",
    )

    args = parser.parse_args(argv)
    return cmd_enhance(args)


# =============================================================================
# Status Command
# =============================================================================


def handle_status_command(argv: list[str]) -> int:
    """Show provider configuration and routing settings."""
    from specmint.mcp.health import format_startup_banner, get_server_health

    parser = argparse.ArgumentParser(
        prog="python . status",
        description="Show provider configuration",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the /health payload instead of the banner",
    )
    args = parser.parse_args(argv)

    health = get_server_health()
    if args.json:
        print(json.dumps(health.to_dict(), indent=2))
    else:
        print(format_startup_banner(health))

    return 0 if health.can_enhance else 1


# =============================================================================
# Templates Command
# =============================================================================


def handle_templates_command(argv: list[str]) -> int:
    """List prompt templates, or print one."""
    from specmint.prompt import get_active_template, get_prompt_template, list_prompt_templates

    parser = argparse.ArgumentParser(
        prog="python . templates",
        description="List prompt templates",
    )
    parser.add_argument(
        "name",
        nargs="?",
        default=None,
        help="Template to print in full",
    )
    args = parser.parse_args(argv)

    if args.name:
        try:
            print(get_prompt_template(args.name).text)
        except ValueError as e:
            logger.error(str(e))
            return 1
        return 0

    try:
        active = get_active_template().name
    except (OSError, ValueError) as e:
        logger.warning(f"Active template unavailable: {e}")
        active = None

    print("Prompt templates:")
    for template in list_prompt_templates():
        marker = "*" if template.name == active else " "
        print(f"  {marker} {template.name:<12} {template.description}")
    if active and active not in {t.name for t in list_prompt_templates()}:
        print(f"  * {active:<12} (from SPECMINT_PROMPT_FILE)")
    return 0


# =============================================================================
# Models Command
# =============================================================================


def handle_models_command(_argv: list[str]) -> int:
    """List supported vision models per provider."""
    from specmint.llm import LLMModel, ProviderName

    print("Supported models:")
    for provider in ProviderName.concrete():
        default = get_environment(
            EnvVar.ANTHROPIC_MODEL if provider is ProviderName.CLAUDE else EnvVar.OPENAI_MODEL
        )
        print(f"\n  {provider.value}:")
        for model in LLMModel.list_by_provider(provider):
            spec = model.spec
            tag = " (default)" if spec.name == default else ""
            print(f"    {spec.name}{tag}")
            print(f"      {spec.description} (max output {spec.max_output_tokens} tokens)")
    return 0


# =============================================================================
# Env Command
# =============================================================================


def handle_env_command(argv: list[str]) -> int:
    """Show environment variables with their current values."""
    parser = argparse.ArgumentParser(
        prog="python . env",
        description="Show specmint environment variables",
    )
    parser.add_argument(
        "--category",
        "-c",
        type=str,
        default=None,
        choices=["llm", "enhance", "service"],
        help="Only show one category",
    )
    args = parser.parse_args(argv)

    for var in list_environment_variables(args.category):
        info = get_environment_info(var)
        value = get_environment(var)
        if var in _SECRET_VARS:
            shown = "set" if value else "not set"
        else:
            shown = value
        print(f"{info.name:<32} {str(shown):<28} {info.description}")
    return 0


# =============================================================================
# Serve Command
# =============================================================================


def handle_serve_command(argv: list[str]) -> int:
    """Run the MCP server (arguments as for `specmint`)."""
    from specmint.mcp.server import main as server_main

    return server_main(argv)


def show_help() -> None:
    """Display CLI help message."""
    print("Usage: python . {command} [args]")
    print("\n=== Server ===")
    print("  serve      Run MCP server (STDIO, HTTP or SSE)")
    print("\n=== Enhancement ===")
    print("  enhance    Enhance a specification file using its screenshot")
    print("\n=== Configuration ===")
    print("  status     Show provider configuration")
    print("  templates  List prompt templates")
    print("  models     List supported models")
    print("  env        Show environment variables")
    print("\nExamples:")
    print("  python . serve                              # STDIO server (Claude Desktop)")
    print("  python . serve -t http -p 18080             # HTTP server with /enhance")
    print("  python . enhance spec.md -s screen.png -o enhanced.md")
    print("  python . enhance spec.md -s screen.png -j spec.json -p claude")
    print("  python . status --json")


COMMANDS = {
    "serve": handle_serve_command,
    "enhance": handle_enhance_command,
    "status": handle_status_command,
    "templates": handle_templates_command,
    "models": handle_models_command,
    "env": handle_env_command,
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    from specmint.core import setup_logging

    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        show_help()
        return 1

    command, rest_args = argv[0], argv[1:]

    if command in ("-h", "--help"):
        show_help()
        return 0

    if command in COMMANDS:
        # serve configures its own logging from --verbose
        if command != "serve":
            setup_logging()
        return COMMANDS[command](rest_args)

    logger.error(f"Unknown command: {command}")
    show_help()
    return 1


__all__ = [
    "COMMANDS",
    "cmd_enhance",
    "handle_enhance_command",
    "handle_env_command",
    "handle_models_command",
    "handle_serve_command",
    "handle_status_command",
    "handle_templates_command",
    "main",
    "show_help",
]
