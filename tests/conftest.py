"""Shared pytest fixtures and test helpers for gradectl tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
import structlog
from click.testing import CliRunner

from gradectl.config.models import StoreConfig
from gradectl.config.settings import GradeSettings
from gradectl.infrastructure.store import GradeStore
from gradectl.services.telemetry import disable_telemetry


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep GRADECTL_* variables from the developer's shell out of tests."""
    for key in list(os.environ):
        if key.startswith("GRADECTL_"):
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def _reset_cli_state() -> Generator[None]:
    """Undo the logging and telemetry setup a CLI invocation leaves behind."""
    yield
    disable_telemetry()
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
    logging.getLogger("gradectl").setLevel(logging.NOTSET)
    structlog.reset_defaults()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


def make_settings(root: Path, backend: str = "memory", **kwargs: Any) -> GradeSettings:
    """Settings rooted at *root* using the given store backend."""
    return GradeSettings.from_cli(root=root, store=StoreConfig(backend=backend), **kwargs)


@pytest.fixture
def store(tmp_path: Path) -> Generator[GradeStore]:
    """In-memory store (the reference implementation)."""
    s = GradeStore(make_settings(tmp_path, "memory"))
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def sql_store(tmp_path: Path) -> Generator[GradeStore]:
    """SQLite store on a temp directory."""
    s = GradeStore(make_settings(tmp_path, "sqlite"))
    try:
        yield s
    finally:
        s.close()


@pytest.fixture(params=["memory", "sqlite"])
def any_store(request: pytest.FixtureRequest, tmp_path: Path) -> Generator[GradeStore]:
    """Each test using this fixture runs once per backend."""
    s = GradeStore(make_settings(tmp_path, request.param))
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def _isolated_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp dir so the CLI creates an isolated database.

    Use via ``@pytest.mark.usefixtures("_isolated_root")`` on command test
    classes.
    """
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service test modules)
# ---------------------------------------------------------------------------


def log_grade(store: GradeStore, user: str, course: str, score: int) -> dict[str, Any]:
    """Log a grade via GradeService, asserting success."""
    from gradectl.services.grade import GradeService

    result = GradeService(store).log_grade(user, course, score)
    assert result.ok, result.error
    return result.data


def form_team(store: GradeStore, user: str, name: str) -> dict[str, Any]:
    """Form a team via TeamService, asserting success."""
    from gradectl.services.team import TeamService

    result = TeamService(store).form_team(user, name)
    assert result.ok, result.error
    return result.data


def join_team(store: GradeStore, user: str, name: str) -> dict[str, Any]:
    """Join a team via TeamService, asserting success."""
    from gradectl.services.team import TeamService

    result = TeamService(store).join_team(user, name)
    assert result.ok, result.error
    return result.data


def build_team(store: GradeStore, name: str, members: list[str]) -> None:
    """First member forms *name*, the rest join it."""
    form_team(store, members[0], name)
    for member in members[1:]:
        join_team(store, member, name)
