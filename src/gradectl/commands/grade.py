"""Command group: read and record course grades."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from gradectl.commands._base import GradeGroup

if TYPE_CHECKING:
    from gradectl.commands._context import AppContext


@click.group(
    cls=GradeGroup,
    examples="""\
  gradectl -u alice grade log CS101 85
  gradectl -u alice grade get CS101
  gradectl -u alice grade get CS101 --username bob""",
)
def grade() -> None:
    """Read and record course grades."""


@grade.command(
    examples="""\
  gradectl -u alice grade get CS101
  gradectl -u alice grade get CS101 --username bob
  gradectl --json -u alice grade get CS101""",
)
@click.argument("course")
@click.option(
    "--username",
    default="",
    help="Whose grade to read (default: your own).",
)
@click.pass_obj
def get(app: AppContext, course: str, username: str) -> None:
    """Show a grade for COURSE."""
    from gradectl.services.grade import GradeService

    app.emit(GradeService(app.store).get_grade(app.user, username, course))


@grade.command(
    examples="""\
  gradectl -u alice grade log CS101 85
  gradectl -u alice grade log MAT137 92""",
)
@click.argument("course")
@click.argument("score")
@click.pass_obj
def log(app: AppContext, course: str, score: str) -> None:
    """Record your SCORE for COURSE (overwrites any earlier score)."""
    from gradectl.services.grade import GradeService

    app.emit(GradeService(app.store).log_grade(app.user, course, score))
