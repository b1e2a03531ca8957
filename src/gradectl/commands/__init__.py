"""Subcommand modules for gradectl.

Provides register_commands() which uses deferred imports to keep
``gradectl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    from gradectl.commands.grade import grade
    from gradectl.commands.team import team
    from gradectl.commands.whoami import whoami

    cli.add_command(grade)
    cli.add_command(team)
    cli.add_command(whoami)
