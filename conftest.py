"""Root pytest configuration and fixtures.

This module provides:
- Environment isolation (provider keys and specmint settings cleared per test)
- A recording provider adapter for tests that must not reach a network
- Sample specification and screenshot payloads
"""

from __future__ import annotations

import base64
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Generator

import pytest

from specmint.config import EnvVar
from specmint.llm.backend import ProviderAdapter, ProviderResult

# =============================================================================
# Configuration Constants
# =============================================================================

# 1x1 transparent PNG
SAMPLE_PNG = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)

SAMPLE_SPEC_MD = """# Login Screen

## Layout
- Centered card, 360px wide
- Email input, password input, primary "Sign in" button
"""


# =============================================================================
# Recording Adapter
# =============================================================================


@dataclass
class InvokeCall:
    """Arguments of one adapter invocation."""

    prompt: str
    spec_text: str
    screenshot: str


@dataclass
class RecordingAdapter(ProviderAdapter):
    """Provider adapter double that records invocations.

    Returns a canned ProviderResult, or raises the configured error.
    """

    provider_id: str = "claude"
    model: str = "recording-model"
    enhanced_text: str = "# Enhanced"
    tokens_used: int = 42
    error: Exception | None = None
    calls: list[InvokeCall] = field(default_factory=list)

    @property
    def model_name(self) -> str:
        """Return recorded model name."""
        return self.model

    @property
    def provider(self) -> str:
        """Return recorded provider name."""
        return self.provider_id

    def invoke(self, prompt: str, spec_text: str, screenshot: str) -> ProviderResult:
        """Record the call, then return the canned result or raise."""
        self.calls.append(InvokeCall(prompt, spec_text, screenshot))
        if self.error is not None:
            raise self.error
        return ProviderResult(
            success=True,
            enhanced_text=self.enhanced_text,
            model=self.model,
            tokens_used=self.tokens_used,
            provider=self.provider_id,
        )


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Remove every specmint variable so tests see defaults unless they set one."""
    for var in EnvVar:
        monkeypatch.delenv(var.value.name, raising=False)
    yield


@pytest.fixture
def recording_adapter() -> Callable[..., RecordingAdapter]:
    """Factory for RecordingAdapter instances.

    Example:
        >>> claude = recording_adapter("claude", model="claude-3-5-sonnet-20241022")
    """

    def _make(provider: str = "claude", **kwargs) -> RecordingAdapter:
        return RecordingAdapter(provider_id=provider, **kwargs)

    return _make


@pytest.fixture
def sample_spec_md() -> str:
    """Sample specification markdown."""
    return SAMPLE_SPEC_MD


@pytest.fixture
def sample_png() -> bytes:
    """Raw bytes of a 1x1 PNG."""
    return SAMPLE_PNG


@pytest.fixture
def sample_screenshot() -> str:
    """Base64 text of a 1x1 PNG."""
    return base64.b64encode(SAMPLE_PNG).decode("ascii")
