"""Request normalization: raw caller input to EnhancementRequest."""

from .lib import (
    EnhanceInput,
    EnhancementRequest,
    InvalidFieldError,
    MissingFieldError,
    PayloadTooLargeError,
    RequestValidationError,
    get_default_provider,
    normalize,
)

__all__ = [
    # Types
    "EnhancementRequest",
    "EnhanceInput",
    # Exceptions
    "RequestValidationError",
    "MissingFieldError",
    "PayloadTooLargeError",
    "InvalidFieldError",
    # Normalization
    "get_default_provider",
    "normalize",
]
