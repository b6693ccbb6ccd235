"""Tests for session log CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from click.testing import CliRunner

from rtlab.cli.main import cli


class TestSummary:
    """Tests for the stats summary command."""

    def test_table(self, cli_runner: CliRunner, log_file: Path) -> None:
        """Test the table output."""
        result = cli_runner.invoke(cli, ["stats", "summary", str(log_file)])
        assert result.exit_code == 0
        assert "Session Summary" in result.output
        assert "left" in result.output

    def test_json(self, cli_runner: CliRunner, log_file: Path) -> None:
        """Test the JSON output."""
        result = cli_runner.invoke(
            cli, ["stats", "summary", str(log_file), "--format", "json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.output)

        assert data["summary"]["tested_item_count"] == 2
        assert data["summary"]["total_measurements"] == 4
        assert data["summary"]["mean_reaction_time_ms"] == 285
        assert [entry["label"] for entry in data["fastest"]] == ["left", "right"]
        assert [entry["average_reaction_ms"] for entry in data["slowest"]] == [350, 220]

    def test_yaml_top(self, cli_runner: CliRunner, log_file: Path) -> None:
        """Test the YAML output with a shorter ranking."""
        result = cli_runner.invoke(
            cli, ["stats", "summary", str(log_file), "-f", "yaml", "--top", "1"]
        )
        assert result.exit_code == 0
        data = yaml.safe_load(result.output)
        assert len(data["fastest"]) == 1
        assert data["slowest"][0]["label"] == "right"

    def test_empty_log(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        """Test summarizing an empty log."""
        path = tmp_path / "empty.jsonl"
        path.write_text("")
        result = cli_runner.invoke(
            cli, ["stats", "summary", str(path), "--format", "json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["summary"]["total_measurements"] == 0
        assert data["fastest"] == []

    def test_invalid_log(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        """Test a file that is not a session log."""
        path = tmp_path / "bad.jsonl"
        path.write_text('{"hello": "world"}\n')
        result = cli_runner.invoke(cli, ["stats", "summary", str(path)])
        assert result.exit_code == 1
        assert "Invalid session log" in result.output


class TestHistory:
    """Tests for the stats history command."""

    def test_history(self, cli_runner: CliRunner, log_file: Path) -> None:
        """Test listing responses."""
        result = cli_runner.invoke(cli, ["stats", "history", str(log_file)])
        assert result.exit_code == 0
        assert "360" in result.output
        assert "210" in result.output

    def test_history_limit(self, cli_runner: CliRunner, log_file: Path) -> None:
        """Test limiting to the newest responses."""
        result = cli_runner.invoke(
            cli, ["stats", "history", str(log_file), "--limit", "1"]
        )
        assert result.exit_code == 0
        assert "360" in result.output
        assert "210" not in result.output

    def test_history_empty(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        """Test an empty log."""
        path = tmp_path / "empty.jsonl"
        path.write_text("")
        result = cli_runner.invoke(cli, ["stats", "history", str(path)])
        assert result.exit_code == 0
        assert "No responses recorded" in result.output
