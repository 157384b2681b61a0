"""Request normalization for specification enhancement.

Turns a caller's raw input mapping into an immutable EnhancementRequest,
or raises a RequestValidationError describing why it cannot be served.

Accepted keys:
    specMd / specText: Specification markdown (required).
    specJson / structuredSpec: Structured specification (optional, passed through).
    screenshot: Base64-encoded screenshot text (required).
    provider: "auto", "claude" or "openai" (optional).
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from specmint.config import EnvVar, get_environment
from specmint.llm.backend.model_spec import ProviderName

# =============================================================================
# Exceptions
# =============================================================================


class RequestValidationError(Exception):
    """Base exception for requests that cannot be served.

    Attributes:
        fields: Wire names of the offending fields.
    """

    def __init__(self, message: str, fields: list[str] | None = None):
        super().__init__(message)
        self.fields = fields or []


class MissingFieldError(RequestValidationError):
    """Raised when a required field is absent or empty."""


class PayloadTooLargeError(RequestValidationError):
    """Raised when the screenshot exceeds the configured maximum length.

    Attributes:
        length: Actual screenshot length in characters.
        limit: Maximum accepted length in characters.
    """

    def __init__(self, length: int, limit: int):
        super().__init__(
            f"Screenshot too large ({length} chars, max {limit})",
            fields=["screenshot"],
        )
        self.length = length
        self.limit = limit


class InvalidFieldError(RequestValidationError):
    """Raised when a field has the wrong type or an unsupported value."""


# =============================================================================
# Types
# =============================================================================


@dataclass(frozen=True)
class EnhancementRequest:
    """A validated enhancement request.

    Attributes:
        spec_text: Specification markdown. Never empty.
        screenshot: Base64-encoded screenshot text, forwarded untouched.
        requested_provider: Provider the caller asked for, or AUTO.
        structured_spec: Optional structured form of the specification.
    """

    spec_text: str
    screenshot: str
    requested_provider: ProviderName = ProviderName.AUTO
    structured_spec: Any = None


class EnhanceInput(BaseModel):
    """Raw input shape. Every field is optional so absence is reported by normalize."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    spec_text: str | None = Field(
        None,
        strict=True,
        validation_alias=AliasChoices("specMd", "specText", "spec_md", "spec_text"),
        description="Specification markdown",
    )
    structured_spec: Any = Field(
        None,
        validation_alias=AliasChoices("specJson", "structuredSpec", "spec_json", "structured_spec"),
        description="Structured specification, passed through unchanged",
    )
    screenshot: str | None = Field(
        None,
        strict=True,
        description="Base64-encoded screenshot text",
    )
    provider: str | None = Field(
        None,
        strict=True,
        description="Requested provider: auto, claude or openai",
    )


# Wire names used in error messages
_WIRE_NAMES = {
    "spec_text": "specMd",
    "structured_spec": "specJson",
    "screenshot": "screenshot",
    "provider": "provider",
}


# =============================================================================
# Normalization
# =============================================================================


def get_default_provider(override: str | ProviderName | None = None) -> ProviderName:
    """Get the provider used when a request names none.

    Args:
        override: Default to use instead of SPECMINT_DEFAULT_PROVIDER.

    Raises:
        ValueError: If the configured default is not a provider name.
    """
    value = override if override is not None else get_environment(EnvVar.SPECMINT_DEFAULT_PROVIDER)
    raw = str(getattr(value, "value", value)).strip().lower()
    try:
        return ProviderName(raw)
    except ValueError:
        allowed = ", ".join(p.value for p in ProviderName)
        raise ValueError(
            f"Invalid default provider '{raw}' (SPECMINT_DEFAULT_PROVIDER). Expected one of: {allowed}"
        ) from None


def _parse_provider(value: str | None, default: str | ProviderName | None) -> ProviderName:
    raw = value.strip().lower() if value else ""
    if not raw:
        return get_default_provider(default)
    try:
        return ProviderName(raw)
    except ValueError:
        allowed = ", ".join(p.value for p in ProviderName)
        raise InvalidFieldError(
            f"Unsupported provider '{raw}'. Expected one of: {allowed}",
            fields=["provider"],
        ) from None


def normalize(
    raw: Mapping[str, Any],
    *,
    default_provider: str | ProviderName | None = None,
    max_screenshot_length: int | None = None,
) -> EnhancementRequest:
    """Validate raw input and package it as an EnhancementRequest.

    Args:
        raw: Decoded request body.
        default_provider: Used when provider is omitted or empty.
            Defaults to SPECMINT_DEFAULT_PROVIDER.
        max_screenshot_length: Screenshot limit in characters.
            Defaults to SPECMINT_MAX_SCREENSHOT_LENGTH.

    Returns:
        EnhancementRequest ready for the orchestrator.

    Raises:
        MissingFieldError: If the specification text or screenshot is absent or empty.
        PayloadTooLargeError: If the screenshot exceeds the limit.
        InvalidFieldError: If a field has the wrong type or provider is unknown.
        ValueError: If the provider is omitted and the configured default is invalid.
    """
    if not isinstance(raw, Mapping):
        raise InvalidFieldError("Request body must be a JSON object")

    try:
        data = EnhanceInput.model_validate(dict(raw))
    except ValidationError as e:
        fields = sorted({_WIRE_NAMES.get(str(err["loc"][0]), str(err["loc"][0])) for err in e.errors()})
        raise InvalidFieldError(
            f"Invalid field type: {', '.join(fields)} must be a string",
            fields=fields,
        ) from e

    missing = [
        wire
        for wire, value in (("specMd", data.spec_text), ("screenshot", data.screenshot))
        if not value
    ]
    if missing:
        raise MissingFieldError(
            f"Missing required fields: {' and '.join(missing)} "
            f"{'is' if len(missing) == 1 else 'are'} required",
            fields=missing,
        )

    limit = (
        max_screenshot_length
        if max_screenshot_length is not None
        else get_environment(EnvVar.SPECMINT_MAX_SCREENSHOT_LENGTH)
    )
    if len(data.screenshot) > limit:
        raise PayloadTooLargeError(len(data.screenshot), limit)

    provider = _parse_provider(data.provider, default_provider)

    return EnhancementRequest(
        spec_text=data.spec_text,
        screenshot=data.screenshot,
        requested_provider=provider,
        structured_spec=data.structured_spec,
    )


__all__ = [
    "EnhanceInput",
    "EnhancementRequest",
    "InvalidFieldError",
    "MissingFieldError",
    "PayloadTooLargeError",
    "RequestValidationError",
    "get_default_provider",
    "normalize",
]
