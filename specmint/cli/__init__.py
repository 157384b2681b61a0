"""Command-line interface for specmint (`python . <command>`)."""

from .lib import (
    COMMANDS,
    cmd_enhance,
    handle_enhance_command,
    handle_env_command,
    handle_models_command,
    handle_serve_command,
    handle_status_command,
    handle_templates_command,
    main,
    show_help,
)

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
