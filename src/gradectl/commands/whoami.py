"""Command: show the identity gradectl will act as."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from gradectl.commands._base import GradeCommand

if TYPE_CHECKING:
    from gradectl.commands._context import AppContext


@click.command(
    cls=GradeCommand,
    examples="""\
  gradectl -u alice whoami
  GRADECTL_USER=alice gradectl whoami""",
)
@click.pass_obj
def whoami(app: AppContext) -> None:
    """Print your identity token."""
    from gradectl.services.result import ServiceResult

    app.emit(ServiceResult.success("whoami", {"user": app.user}))
