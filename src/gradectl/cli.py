"""The ``gradectl`` entry point: global flags, then the command tree."""

from __future__ import annotations

import click

from gradectl import __version__
from gradectl.commands import register_commands
from gradectl.commands._base import GradeGroup
from gradectl.commands._context import AppContext
from gradectl.config.settings import GradeSettings


@click.group(
    cls=GradeGroup,
    invoke_without_command=True,
    examples="""\
  gradectl -u alice grade log CS101 92
  gradectl -u alice team form study-group
  gradectl -u alice --json team average CS101""",
)
@click.version_option(version=__version__, prog_name="gradectl")
@click.option("-u", "--user", default=None, help="Act as this user (identity token).")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with timing spans.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Read this gradectl.toml.")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, **flags: bool | str | None) -> None:
    """gradectl: course grades and team statistics."""
    settings = GradeSettings.from_cli(config_path=config_path, **flags)
    # The store, if any command opens one, closes when the root context exits.
    ctx.obj = ctx.with_resource(AppContext(settings))
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
