"""Tests for the non-interactive CLI commands."""

import json

from click.testing import CliRunner

from narsil_setup import __version__
from narsil_setup.cli import main
from narsil_setup.providers_validate import ValidationResult


class TestCLIBasics:
    def test_main_help(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        for command in ("setup", "editors", "set-key"):
            assert command in result.output

    def test_main_version(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output


class TestEditorsCommand:
    def test_json_lists_all_editors(self, workspace):
        runner = CliRunner()
        result = runner.invoke(main, ["--workspace", str(workspace), "editors", "--json"])

        assert result.exit_code == 0, result.output
        items = json.loads(result.output)
        assert [i["editor"] for i in items] == ["claude-desktop", "claude-code", "zed", "vscode", "jetbrains"]
        vscode = items[3]
        assert vscode["path"] == str(workspace / ".vscode" / "mcp.json")
        assert vscode["exists"] is False

    def test_existing_filter(self, workspace, write_json):
        write_json(workspace / ".idea" / "mcp.json", {})
        runner = CliRunner()
        result = runner.invoke(main, ["--workspace", str(workspace), "editors", "--existing", "--json"])

        assert result.exit_code == 0, result.output
        items = json.loads(result.output)
        assert [i["editor"] for i in items] == ["jetbrains"]
        assert items[0]["exists"] is True

    def test_table_output(self, workspace):
        runner = CliRunner()
        result = runner.invoke(main, ["--workspace", str(workspace), "editors"])

        assert result.exit_code == 0, result.output
        assert "Claude Desktop" in result.output
        assert "JetBrains" in result.output

    def test_existing_filter_with_nothing_found(self, workspace):
        runner = CliRunner()
        result = runner.invoke(main, ["--workspace", str(workspace), "editors", "--existing"])

        assert result.exit_code == 0
        assert "No editor config files found." in result.output


class TestSetKeyCommand:
    def test_by_editor_name(self, workspace, read_json):
        runner = CliRunner()
        result = runner.invoke(main, [
            "--workspace", str(workspace),
            "set-key", "--editor", "jetbrains", "--provider", "voyage", "--key", "pa-abcdef123456",
        ])

        assert result.exit_code == 0, result.output
        assert "Added VOYAGE_API_KEY" in result.output
        assert "pa-abcdef123456" not in result.output
        config = read_json(workspace / ".idea" / "mcp.json")
        assert config["servers"]["narsil-mcp"]["env"] == {"VOYAGE_API_KEY": "pa-abcdef123456"}

    def test_by_config_path_with_stdin_key(self, tmp_path, write_json, read_json):
        config_path = write_json(tmp_path / "zed" / "settings.json", {"theme": "Ayu"})
        runner = CliRunner()
        result = runner.invoke(
            main,
            ["set-key", "--config-path", str(config_path), "--provider", "2", "--key-stdin"],
            input="'sk-abcdef123456'\n",
        )

        assert result.exit_code == 0, result.output
        config = read_json(config_path)
        assert config["theme"] == "Ayu"
        assert config["context_servers"]["narsil-mcp"]["env"] == {"OPENAI_API_KEY": "sk-abcdef123456"}

    def test_second_run_reports_update(self, tmp_path):
        config_path = tmp_path / "claude_desktop_config.json"
        args = ["set-key", "--config-path", str(config_path), "--provider", "custom", "--key", "abc"]
        runner = CliRunner()
        runner.invoke(main, args)
        result = runner.invoke(main, args)

        assert result.exit_code == 0, result.output
        assert "Updated EMBEDDING_API_KEY" in result.output

    def test_invalid_provider(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "set-key", "--config-path", str(tmp_path / "mcp.json"), "--provider", "cohere", "--key", "abc",
        ])

        assert result.exit_code == 1
        assert "Invalid provider selection" in result.output
        assert not (tmp_path / "mcp.json").exists()

    def test_invalid_key_format(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "set-key", "--config-path", str(tmp_path / "mcp.json"), "--provider", "openai", "--key", "sk-short",
        ])

        assert result.exit_code == 1
        assert "Invalid API key format for OpenAI" in result.output

    def test_unknown_dialect(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "set-key", "--config-path", str(tmp_path / "config.json"), "--provider", "custom", "--key", "abc",
        ])

        assert result.exit_code == 1
        assert "Unknown editor config path" in result.output

    def test_unreadable_config(self, tmp_path):
        config_path = tmp_path / "claude_code_config.json"
        config_path.write_text("{ invalid json }")
        runner = CliRunner()
        result = runner.invoke(main, [
            "set-key", "--config-path", str(config_path), "--provider", "custom", "--key", "abc",
        ])

        assert result.exit_code == 1
        assert "failed to parse existing config as JSON" in result.output
        assert config_path.read_text() == "{ invalid json }"

    def test_requires_exactly_one_target(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["set-key", "--provider", "custom", "--key", "abc"])
        assert result.exit_code == 2

        result = runner.invoke(main, [
            "set-key", "--editor", "zed", "--config-path", str(tmp_path / "mcp.json"),
            "--provider", "custom", "--key", "abc",
        ])
        assert result.exit_code == 2

    def test_requires_exactly_one_key_source(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["set-key", "--editor", "zed", "--provider", "custom"])
        assert result.exit_code == 2

    def test_verify_failure_blocks_write(self, monkeypatch, tmp_path):
        monkeypatch.setattr(
            "narsil_setup.cli.validate_api_key",
            lambda key, provider, settings: ValidationResult(False, "auth_failed", "HTTP 401"),
        )
        config_path = tmp_path / "claude_desktop_config.json"
        runner = CliRunner()
        result = runner.invoke(main, [
            "set-key", "--config-path", str(config_path), "--provider", "voyage",
            "--key", "pa-abcdef123456", "--verify",
        ])

        assert result.exit_code == 1
        assert "verification failed for Voyage AI: auth_failed" in result.output
        assert not config_path.exists()
