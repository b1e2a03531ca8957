"""Command group: team membership and team-wide grade statistics."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from gradectl.commands._base import GradeGroup

if TYPE_CHECKING:
    from gradectl.commands._context import AppContext


@click.group(
    cls=GradeGroup,
    examples="""\
  gradectl -u alice team form study-group
  gradectl -u bob team join study-group
  gradectl -u alice team average CS101
  gradectl -u bob team leave""",
)
def team() -> None:
    """Form, join, and leave teams; compare grades within your team."""


@team.command(examples="  gradectl -u alice team form study-group")
@click.argument("name")
@click.pass_obj
def form(app: AppContext, name: str) -> None:
    """Form a new team called NAME (names are case-sensitive and unique)."""
    from gradectl.services.team import TeamService

    app.emit(TeamService(app.store).form_team(app.user, name))


@team.command(examples="  gradectl -u bob team join study-group")
@click.argument("name")
@click.pass_obj
def join(app: AppContext, name: str) -> None:
    """Join the existing team NAME."""
    from gradectl.services.team import TeamService

    app.emit(TeamService(app.store).join_team(app.user, name))


@team.command(examples="  gradectl -u bob team leave")
@click.pass_obj
def leave(app: AppContext) -> None:
    """Leave your current team. The last member out deletes it."""
    from gradectl.services.team import TeamService

    app.emit(TeamService(app.store).leave_team(app.user))


@team.command(examples="  gradectl -u alice team show")
@click.pass_obj
def show(app: AppContext) -> None:
    """Show your team and its members."""
    from gradectl.services.team import TeamService

    app.emit(TeamService(app.store).get_team(app.user))


@team.command(examples="  gradectl -u alice team average CS101")
@click.argument("course")
@click.pass_obj
def average(app: AppContext, course: str) -> None:
    """Average grade for COURSE across your team's scored members."""
    from gradectl.services.aggregate import AggregateService

    app.emit(AggregateService(app.store).get_average_grade(app.user, course))


@team.command(examples="  gradectl -u alice team top CS101")
@click.argument("course")
@click.pass_obj
def top(app: AppContext, course: str) -> None:
    """Top grade for COURSE on your team (ties go to the first username)."""
    from gradectl.services.aggregate import AggregateService

    app.emit(AggregateService(app.store).get_top_grade(app.user, course))
