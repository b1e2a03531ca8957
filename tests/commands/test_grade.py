"""Tests for the ``grade`` CLI commands."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from gradectl.cli import cli


@pytest.mark.usefixtures("_isolated_root")
class TestGradeLog:
    def test_log(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-u", "alice", "grade", "log", "CS101", "85"])
        assert result.exit_code == 0
        assert "OK" in result.output
        assert "85" in result.output

    def test_log_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "-u", "alice", "grade", "log", "CS101", "85"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["data"] == {"username": "alice", "course": "CS101", "grade": 85}

    def test_log_out_of_range(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "-u", "alice", "grade", "log", "CS101", "150"])
        assert result.exit_code == 1
        assert result.stdout == ""
        data = json.loads(result.stderr)
        assert data["error"]["code"] == "INVALID_ARGUMENT"

    def test_log_not_a_number(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-u", "alice", "grade", "log", "CS101", "A+"])
        assert result.exit_code == 1
        assert "ERROR" in result.stderr

    def test_no_identity(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["grade", "log", "CS101", "85"])
        assert result.exit_code == 2
        assert "No user identity" in result.output

    def test_identity_from_env(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["-q", "whoami"], env={"GRADECTL_USER": "carol"}
        )
        assert result.exit_code == 0
        assert result.output.strip() == "carol"


@pytest.mark.usefixtures("_isolated_root")
class TestGradeGet:
    def test_get_own(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["-u", "alice", "grade", "log", "CS101", "70"])
        cli_runner.invoke(cli, ["-u", "alice", "grade", "log", "CS101", "85"])
        result = cli_runner.invoke(cli, ["-q", "-u", "alice", "grade", "get", "CS101"])
        assert result.exit_code == 0
        assert result.output.strip() == "85"

    def test_get_other(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["-u", "bob", "grade", "log", "CS101", "77"])
        result = cli_runner.invoke(
            cli, ["--json", "-u", "alice", "grade", "get", "CS101", "--username", "bob"]
        )
        assert result.exit_code == 0
        assert json.loads(result.output)["data"]["username"] == "bob"

    def test_get_missing(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "-u", "alice", "grade", "get", "CS101"])
        assert result.exit_code == 1
        assert "ERROR: NOT_FOUND" in result.stderr

    def test_persists_in_store_file(self, cli_runner: CliRunner) -> None:
        from pathlib import Path

        cli_runner.invoke(cli, ["-u", "alice", "grade", "log", "CS101", "85"])
        assert (Path.cwd() / ".gradectl" / "grades.db").is_file()
