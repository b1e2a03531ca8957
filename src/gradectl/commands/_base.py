"""Click classes that add an ``--examples`` flag.

Pass ``examples="..."`` to ``@click.command`` / ``@click.group`` (with
``cls=GradeCommand`` or ``cls=GradeGroup``). The flag is eager: it prints
the examples and exits before any argument is checked, so
``gradectl grade log --examples`` works without COURSE and SCORE.
"""

from __future__ import annotations

from typing import Any

import click


class _ExamplesMixin:
    """Shared ``examples=`` handling for commands and groups."""

    params: list[click.Parameter]

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    is_eager=True,
                    expose_value=False,
                    callback=self._print_examples,
                    help="Show usage examples and exit.",
                )
            )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n\n{self.examples}")
        ctx.exit(0)


class GradeCommand(_ExamplesMixin, click.Command):
    """A command that accepts ``examples=``."""


class GradeGroup(_ExamplesMixin, click.Group):
    """A group whose ``@group.command`` subcommands accept ``examples=`` too."""

    command_class = GradeCommand
