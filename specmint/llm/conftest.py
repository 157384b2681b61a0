"""LLM module test fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from specmint.llm.backend import ProviderName
from specmint.request import EnhancementRequest


@pytest.fixture
def mock_api_key() -> str:
    """Provide a mock API key for testing.

    Returns:
        A test API key string.
    """
    return "test-api-key-12345"


@pytest.fixture
def make_request(sample_spec_md: str, sample_screenshot: str):
    """Factory for EnhancementRequest instances.

    Returns:
        Callable taking a provider name ("auto" by default).
    """

    def _make(provider: str = "auto", **kwargs: Any) -> EnhancementRequest:
        fields = {"spec_text": sample_spec_md, "screenshot": sample_screenshot}
        fields.update(kwargs)
        return EnhancementRequest(requested_provider=ProviderName(provider), **fields)

    return _make
