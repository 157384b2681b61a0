"""MCP tools for specmint.

Tools:
    - handle_enhance: Normalize input, enhance via the orchestrator, map errors to status codes
"""

from .enhance import get_orchestrator, handle_enhance

__all__ = [
    "get_orchestrator",
    "handle_enhance",
]
