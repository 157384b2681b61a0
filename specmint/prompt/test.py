"""Tests for prompt template selection and composition."""

import pytest

from .lib import (
    STANDARD_TEMPLATE,
    PromptTemplate,
    compose_user_text,
    get_active_template,
    get_prompt_template,
    list_prompt_templates,
    load_prompt_template,
)


class TestComposeUserText:
    """Tests for template + spec concatenation."""

    @pytest.mark.unit
    def test_template_prefixes_spec(self):
        """Spec text follows the template after a blank line."""
        text = compose_user_text("PROMPT", "Button: 120x40px")
        assert text == "PROMPT\n\nButton: 120x40px"

    @pytest.mark.unit
    def test_template_compose(self):
        """PromptTemplate.compose uses the same separator."""
        template = PromptTemplate(name="t", text="Analyze:")
        assert template.compose("spec") == "Analyze:\n\nspec"


class TestGetPromptTemplate:
    """Tests for registry lookup."""

    @pytest.mark.unit
    def test_standard_registered(self):
        """Standard template is the registered default."""
        template = get_prompt_template("standard")
        assert template.text == STANDARD_TEMPLATE
        assert "TECHNICAL SPECIFICATION" in template.text

    @pytest.mark.unit
    def test_lookup_is_case_insensitive(self):
        """Names are normalized before lookup."""
        assert get_prompt_template(" Standard ").name == "standard"

    @pytest.mark.unit
    def test_unknown_raises(self):
        """Unknown names raise ValueError."""
        with pytest.raises(ValueError, match="Unknown prompt template"):
            get_prompt_template("experimental")

    @pytest.mark.unit
    def test_list_templates(self):
        """Listing includes the standard template."""
        assert "standard" in [t.name for t in list_prompt_templates()]


class TestActiveTemplate:
    """Tests for deployment template resolution."""

    @pytest.mark.unit
    def test_default_is_standard(self, monkeypatch):
        """Without configuration the standard template is active."""
        monkeypatch.delenv("SPECMINT_PROMPT_FILE", raising=False)
        monkeypatch.delenv("SPECMINT_PROMPT_TEMPLATE", raising=False)
        assert get_active_template().name == "standard"

    @pytest.mark.unit
    def test_file_overrides_name(self, monkeypatch, tmp_path):
        """A configured template file wins over the named template."""
        prompt_file = tmp_path / "concise.md"
        prompt_file.write_text("Summarize this design.", encoding="utf-8")
        monkeypatch.setenv("SPECMINT_PROMPT_FILE", str(prompt_file))

        template = get_active_template()

        assert template.name == "concise"
        assert template.text == "Summarize this design."

    @pytest.mark.unit
    def test_empty_file_rejected(self, tmp_path):
        """Empty template files raise ValueError."""
        prompt_file = tmp_path / "empty.md"
        prompt_file.write_text("  \n", encoding="utf-8")
        with pytest.raises(ValueError, match="empty"):
            load_prompt_template(prompt_file)
