"""Tests for request normalization."""

import dataclasses

import pytest

from specmint.llm.backend import ProviderName

from .lib import (
    EnhancementRequest,
    InvalidFieldError,
    MissingFieldError,
    PayloadTooLargeError,
    RequestValidationError,
    get_default_provider,
    normalize,
)

SCREENSHOT = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="


class TestNormalizeAccepts:
    """Tests for well-formed input."""

    @pytest.mark.unit
    def test_wire_keys(self):
        """Original wire keys are accepted."""
        request = normalize(
            {"specMd": "# Login", "screenshot": SCREENSHOT, "provider": "claude"},
        )
        assert isinstance(request, EnhancementRequest)
        assert request.spec_text == "# Login"
        assert request.screenshot == SCREENSHOT
        assert request.requested_provider is ProviderName.CLAUDE
        assert request.structured_spec is None

    @pytest.mark.unit
    def test_descriptive_aliases(self):
        """specText and structuredSpec are accepted as aliases."""
        request = normalize(
            {
                "specText": "# Login",
                "structuredSpec": {"components": ["button"]},
                "screenshot": SCREENSHOT,
            },
            default_provider="auto",
        )
        assert request.spec_text == "# Login"
        assert request.structured_spec == {"components": ["button"]}
        assert request.requested_provider is ProviderName.AUTO

    @pytest.mark.unit
    def test_spec_json_passed_through(self):
        """specJson is carried without transformation."""
        spec_json = {"screens": [{"id": "home"}], "version": 2}
        request = normalize({"specMd": "x", "specJson": spec_json, "screenshot": "abc"})
        assert request.structured_spec == spec_json

    @pytest.mark.unit
    def test_screenshot_not_transformed(self):
        """Screenshot text is forwarded byte for byte."""
        screenshot = "  not-even-base64==  "
        request = normalize({"specMd": "x", "screenshot": screenshot})
        assert request.screenshot == screenshot

    @pytest.mark.unit
    def test_unknown_keys_ignored(self):
        """Extra keys do not fail normalization."""
        request = normalize({"specMd": "x", "screenshot": "abc", "theme": "dark"})
        assert request.spec_text == "x"

    @pytest.mark.unit
    def test_request_is_frozen(self):
        """EnhancementRequest cannot be mutated."""
        request = normalize({"specMd": "x", "screenshot": "abc"})
        with pytest.raises(dataclasses.FrozenInstanceError):
            request.spec_text = "y"


class TestNormalizeProvider:
    """Tests for provider defaulting and validation."""

    @pytest.mark.unit
    def test_default_provider_from_environment(self, monkeypatch):
        """Omitted provider uses SPECMINT_DEFAULT_PROVIDER."""
        monkeypatch.setenv("SPECMINT_DEFAULT_PROVIDER", "claude")
        request = normalize({"specMd": "x", "screenshot": "abc"})
        assert request.requested_provider is ProviderName.CLAUDE

    @pytest.mark.unit
    def test_default_provider_is_openai(self, monkeypatch):
        """OpenAI is the out-of-the-box default."""
        monkeypatch.delenv("SPECMINT_DEFAULT_PROVIDER", raising=False)
        request = normalize({"specMd": "x", "screenshot": "abc"})
        assert request.requested_provider is ProviderName.OPENAI

    @pytest.mark.unit
    def test_empty_provider_uses_default(self):
        """Empty provider string counts as omitted."""
        request = normalize(
            {"specMd": "x", "screenshot": "abc", "provider": ""},
            default_provider=ProviderName.CLAUDE,
        )
        assert request.requested_provider is ProviderName.CLAUDE

    @pytest.mark.unit
    def test_provider_case_insensitive(self):
        """Provider names are matched case-insensitively."""
        request = normalize({"specMd": "x", "screenshot": "abc", "provider": " OpenAI "})
        assert request.requested_provider is ProviderName.OPENAI

    @pytest.mark.unit
    def test_unknown_provider_rejected(self):
        """Unknown provider raises InvalidFieldError."""
        with pytest.raises(InvalidFieldError) as exc_info:
            normalize({"specMd": "x", "screenshot": "abc", "provider": "gemini"})
        assert exc_info.value.fields == ["provider"]
        assert "gemini" in str(exc_info.value)

    @pytest.mark.unit
    def test_invalid_default_is_not_a_caller_error(self, monkeypatch):
        """A bad SPECMINT_DEFAULT_PROVIDER is a server error, not a 400."""
        monkeypatch.setenv("SPECMINT_DEFAULT_PROVIDER", "gemini")
        with pytest.raises(ValueError, match="SPECMINT_DEFAULT_PROVIDER") as exc_info:
            normalize({"specMd": "x", "screenshot": "abc"})
        assert not isinstance(exc_info.value, RequestValidationError)

    @pytest.mark.unit
    def test_invalid_default_unused_when_provider_given(self, monkeypatch):
        """An explicit provider does not consult the default."""
        monkeypatch.setenv("SPECMINT_DEFAULT_PROVIDER", "gemini")
        request = normalize({"specMd": "x", "screenshot": "abc", "provider": "claude"})
        assert request.requested_provider is ProviderName.CLAUDE


class TestGetDefaultProvider:
    """Tests for get_default_provider."""

    @pytest.mark.unit
    def test_reads_environment(self, monkeypatch):
        """The default comes from SPECMINT_DEFAULT_PROVIDER, case-insensitively."""
        monkeypatch.setenv("SPECMINT_DEFAULT_PROVIDER", " Auto ")
        assert get_default_provider() is ProviderName.AUTO

    @pytest.mark.unit
    def test_override(self):
        """An explicit override wins over the environment."""
        assert get_default_provider(ProviderName.CLAUDE) is ProviderName.CLAUDE


class TestNormalizeRejects:
    """Tests for input that cannot be served."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "raw,missing",
        [
            ({"screenshot": "abc"}, ["specMd"]),
            ({"specMd": "", "screenshot": "abc"}, ["specMd"]),
            ({"specMd": "x"}, ["screenshot"]),
            ({"specMd": "x", "screenshot": ""}, ["screenshot"]),
            ({}, ["specMd", "screenshot"]),
        ],
    )
    def test_missing_fields(self, raw, missing):
        """Absent or empty required fields raise MissingFieldError."""
        with pytest.raises(MissingFieldError) as exc_info:
            normalize(raw)
        assert exc_info.value.fields == missing
        for name in missing:
            assert name in str(exc_info.value)

    @pytest.mark.unit
    def test_missing_message_matches_wire_format(self):
        """Both fields missing reads like the HTTP error message."""
        with pytest.raises(MissingFieldError, match="specMd and screenshot are required"):
            normalize({})

    @pytest.mark.unit
    def test_screenshot_over_limit(self):
        """Screenshot longer than the limit raises PayloadTooLargeError."""
        with pytest.raises(PayloadTooLargeError) as exc_info:
            normalize({"specMd": "x", "screenshot": "a" * 11}, max_screenshot_length=10)
        assert exc_info.value.length == 11
        assert exc_info.value.limit == 10

    @pytest.mark.unit
    def test_screenshot_at_limit_accepted(self):
        """Screenshot exactly at the limit is accepted."""
        request = normalize({"specMd": "x", "screenshot": "a" * 10}, max_screenshot_length=10)
        assert len(request.screenshot) == 10

    @pytest.mark.unit
    def test_limit_from_environment(self, monkeypatch):
        """Limit is read from SPECMINT_MAX_SCREENSHOT_LENGTH."""
        monkeypatch.setenv("SPECMINT_MAX_SCREENSHOT_LENGTH", "5")
        with pytest.raises(PayloadTooLargeError):
            normalize({"specMd": "x", "screenshot": "abcdef"})

    @pytest.mark.unit
    def test_non_string_spec(self):
        """Non-string specification text raises InvalidFieldError."""
        with pytest.raises(InvalidFieldError) as exc_info:
            normalize({"specMd": 42, "screenshot": "abc"})
        assert exc_info.value.fields == ["specMd"]

    @pytest.mark.unit
    def test_non_string_screenshot(self):
        """Non-string screenshot raises InvalidFieldError."""
        with pytest.raises(InvalidFieldError):
            normalize({"specMd": "x", "screenshot": b"abc"})

    @pytest.mark.unit
    def test_non_mapping_body(self):
        """A body that is not an object raises InvalidFieldError."""
        with pytest.raises(InvalidFieldError):
            normalize(["specMd", "screenshot"])

    @pytest.mark.unit
    def test_all_errors_share_base(self):
        """Every validation error is a RequestValidationError."""
        for error_type in (MissingFieldError, PayloadTooLargeError, InvalidFieldError):
            assert issubclass(error_type, RequestValidationError)
