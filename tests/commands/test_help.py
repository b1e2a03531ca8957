"""Parametrized help tests for all CLI commands."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from gradectl.cli import cli

# (CLI args, expected keywords in output)
HELP_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["grade", "--help"], ["get", "log"]),
    (["grade", "get", "--help"], ["COURSE", "--username"]),
    (["grade", "log", "--help"], ["COURSE", "SCORE"]),
    (["team", "--help"], ["form", "join", "leave", "show", "average", "top"]),
    (["team", "form", "--help"], ["NAME"]),
    (["team", "join", "--help"], ["NAME"]),
    (["team", "leave", "--help"], ["last member"]),
    (["team", "show", "--help"], []),
    (["team", "average", "--help"], ["COURSE"]),
    (["team", "top", "--help"], ["COURSE"]),
    (["whoami", "--help"], ["identity"]),
]


@pytest.mark.parametrize(
    "args,expected_keywords",
    HELP_COMMANDS,
    ids=["_".join(a for a in args if a != "--help") for args, _ in HELP_COMMANDS],
)
def test_help(cli_runner: CliRunner, args: list[str], expected_keywords: list[str]) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0
    for kw in expected_keywords:
        assert kw in result.output, f"Expected '{kw}' in help for {args}"
