"""Enhance specification tool for MCP server and HTTP route.

Normalizes the caller's input, runs the provider orchestrator and converts
every outcome into a status code and a JSON payload.
"""

import logging
import traceback
from functools import lru_cache
from typing import Any

from specmint.config import is_development
from specmint.llm.backend import NoProviderConfiguredError, ProviderInvocationError
from specmint.llm.orchestrator import ProviderOrchestrator, build_orchestrator
from specmint.request import (
    InvalidFieldError,
    MissingFieldError,
    PayloadTooLargeError,
    RequestValidationError,
    normalize,
)

logger = logging.getLogger(__name__)

# Stable labels for the payload's "error" field
ERROR_LABELS: dict[type[Exception], str] = {
    MissingFieldError: "Missing required fields",
    PayloadTooLargeError: "Screenshot too large",
    InvalidFieldError: "Invalid request",
    RequestValidationError: "Invalid request",
    NoProviderConfiguredError: "No AI provider configured",
    ProviderInvocationError: "Enhancement failed",
}

UNEXPECTED_ERROR_LABEL = "Enhancement failed"


@lru_cache(maxsize=1)
def get_orchestrator() -> ProviderOrchestrator:
    """Get the process-wide orchestrator, built on first use."""
    return build_orchestrator()


def _error_payload(label: str, error: Exception, include_details: bool) -> dict[str, Any]:
    payload: dict[str, Any] = {"error": label, "message": str(error)}
    if include_details and is_development():
        payload["details"] = "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        )
    return payload


def _label_for(error: Exception) -> str:
    for error_type in type(error).__mro__:
        if error_type in ERROR_LABELS:
            return ERROR_LABELS[error_type]
    return UNEXPECTED_ERROR_LABEL


def handle_enhance(
    raw: Any,
    orchestrator: ProviderOrchestrator | None = None,
) -> tuple[int, dict[str, Any]]:
    """Serve one enhancement request.

    Args:
        raw: Decoded request body (specMd, specJson, screenshot, provider).
        orchestrator: Orchestrator to use. Defaults to get_orchestrator().

    Returns:
        Tuple of (HTTP status code, JSON payload):
        - 200: {"success": true, "enhanced", "model", "tokensUsed"}
        - 400: invalid input, never forwarded to a provider
        - 503: no provider configured
        - 500: provider call failed or unexpected error

    Example:
        >>> status, payload = handle_enhance({"specMd": "# Login", "screenshot": b64})
        >>> print(payload["enhanced"])
    """
    try:
        request = normalize(raw)
    except RequestValidationError as e:
        logger.warning(f"Rejected enhancement request: {e}")
        return 400, _error_payload(_label_for(e), e, include_details=False)

    try:
        result = (orchestrator or get_orchestrator()).enhance(request)
    except NoProviderConfiguredError as e:
        logger.error(str(e))
        return 503, _error_payload(_label_for(e), e, include_details=False)
    except ProviderInvocationError as e:
        logger.error(f"Enhancement error ({e.provider or 'unknown provider'}): {e}")
        return 500, _error_payload(_label_for(e), e, include_details=True)
    except Exception as e:
        logger.exception("Unexpected enhancement error")
        return 500, _error_payload(UNEXPECTED_ERROR_LABEL, e, include_details=True)

    return 200, result.to_dict()


__all__ = [
    "ERROR_LABELS",
    "UNEXPECTED_ERROR_LABEL",
    "get_orchestrator",
    "handle_enhance",
]
