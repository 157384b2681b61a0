"""Tests for CLI command handlers."""

import json

import pytest

from specmint.llm.orchestrator import ProviderAvailability, ProviderOrchestrator

from .lib import (
    handle_enhance_command,
    handle_env_command,
    handle_models_command,
    handle_status_command,
    handle_templates_command,
    main,
)


@pytest.fixture
def spec_files(tmp_path, sample_spec_md, sample_png):
    spec = tmp_path / "spec.md"
    spec.write_text(sample_spec_md, encoding="utf-8")
    screenshot = tmp_path / "screen.png"
    screenshot.write_bytes(sample_png)
    return spec, screenshot


@pytest.fixture
def claude(monkeypatch, recording_adapter):
    """Install an orchestrator whose only provider is a recording Claude adapter."""
    from specmint.mcp.tools import enhance as enhance_module

    adapter = recording_adapter("claude", model="claude-3-5-sonnet-20241022", enhanced_text="# Better")
    orchestrator = ProviderOrchestrator(
        ProviderAvailability.of("claude"),
        {"claude": adapter},
        priority=["claude", "openai"],
    )
    monkeypatch.setattr(enhance_module, "get_orchestrator", lambda: orchestrator)
    return adapter


class TestEnhanceCommand:
    """Tests for `python . enhance`."""

    @pytest.mark.unit
    def test_prints_enhanced(self, capsys, claude, spec_files, sample_screenshot, sample_spec_md):
        """Enhanced markdown is printed to stdout."""
        spec, screenshot = spec_files

        code = handle_enhance_command([str(spec), "--screenshot", str(screenshot)])

        assert code == 0
        assert capsys.readouterr().out.strip() == "# Better"
        call = claude.calls[0]
        assert call.spec_text == sample_spec_md
        assert call.screenshot == sample_screenshot

    @pytest.mark.unit
    def test_writes_output_file(self, tmp_path, claude, spec_files):
        """--output writes the enhanced markdown to a file."""
        spec, screenshot = spec_files
        output = tmp_path / "enhanced.md"

        code = handle_enhance_command([str(spec), "-s", str(screenshot), "-o", str(output)])

        assert code == 0
        assert output.read_text(encoding="utf-8") == "# Better"

    @pytest.mark.unit
    def test_json_format(self, capsys, claude, spec_files):
        """--format json prints the full payload."""
        spec, screenshot = spec_files

        handle_enhance_command([str(spec), "-s", str(screenshot), "-f", "json"])

        payload = json.loads(capsys.readouterr().out)
        assert payload["model"] == "claude-3-5-sonnet-20241022"
        assert payload["tokensUsed"] == 42

    @pytest.mark.unit
    def test_structured_spec_file(self, tmp_path, claude, spec_files):
        """--json is parsed and accepted."""
        spec, screenshot = spec_files
        spec_json = tmp_path / "spec.json"
        spec_json.write_text('{"screens": ["login"]}', encoding="utf-8")

        code = handle_enhance_command([str(spec), "-s", str(screenshot), "-j", str(spec_json)])
        assert code == 0

    @pytest.mark.unit
    def test_missing_file(self, tmp_path, claude):
        """Unreadable input exits 1 without calling a provider."""
        code = handle_enhance_command(
            [str(tmp_path / "missing.md"), "-s", str(tmp_path / "missing.png")]
        )
        assert code == 1
        assert claude.calls == []

    @pytest.mark.unit
    def test_empty_spec_rejected(self, tmp_path, claude, spec_files):
        """An empty specification file exits 1."""
        _, screenshot = spec_files
        empty = tmp_path / "empty.md"
        empty.write_text("", encoding="utf-8")

        assert handle_enhance_command([str(empty), "-s", str(screenshot)]) == 1
        assert claude.calls == []

    @pytest.mark.unit
    def test_screenshot_required(self, spec_files):
        """--screenshot is mandatory."""
        spec, _ = spec_files
        with pytest.raises(SystemExit):
            handle_enhance_command([str(spec)])


class TestInfoCommands:
    """Tests for status, templates, models and env."""

    @pytest.mark.unit
    def test_status_unconfigured(self, capsys):
        """status exits 1 when no provider is configured."""
        assert handle_status_command([]) == 1
        assert "NO PROVIDER" in capsys.readouterr().out

    @pytest.mark.unit
    def test_status_json(self, monkeypatch, capsys):
        """status --json prints the health payload."""
        monkeypatch.setenv("OPENAI_API_KEY", "sk-oai")

        assert handle_status_command(["--json"]) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["providers"]["openai"] == "configured"

    @pytest.mark.unit
    def test_templates_lists_standard(self, capsys):
        """templates marks the active template."""
        assert handle_templates_command([]) == 0
        assert "* standard" in capsys.readouterr().out

    @pytest.mark.unit
    def test_templates_prints_one(self, capsys):
        """templates NAME prints the template text."""
        assert handle_templates_command(["standard"]) == 0
        assert "UI/UX" in capsys.readouterr().out

    @pytest.mark.unit
    def test_templates_unknown(self):
        """Unknown template name exits 1."""
        assert handle_templates_command(["nope"]) == 1

    @pytest.mark.unit
    def test_models_marks_defaults(self, capsys):
        """models lists both providers with their defaults."""
        assert handle_models_command([]) == 0
        out = capsys.readouterr().out
        assert "claude-3-5-sonnet-20241022 (default)" in out
        assert "gpt-4o (default)" in out
        assert "max output 8192 tokens" in out

    @pytest.mark.unit
    def test_env_masks_keys(self, monkeypatch, capsys):
        """env never prints API key values."""
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-secret")

        assert handle_env_command(["-c", "llm"]) == 0
        out = capsys.readouterr().out
        assert "sk-ant-secret" not in out
        assert "ANTHROPIC_API_KEY" in out


class TestMain:
    """Tests for command dispatch."""

    @pytest.mark.unit
    def test_no_command(self, capsys):
        """No command prints help and exits 1."""
        assert main([]) == 1
        assert "Usage" in capsys.readouterr().out

    @pytest.mark.unit
    def test_unknown_command(self):
        """Unknown command exits 1."""
        assert main(["frobnicate"]) == 1

    @pytest.mark.unit
    def test_dispatch(self, capsys):
        """Known commands are dispatched."""
        assert main(["templates"]) == 0
