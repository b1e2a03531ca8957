"""Rich Console factory and theme for gradectl output.

Consoles render into a StringIO buffer so renderers keep a
``render -> str`` contract. In non-TTY environments (tests, pipes) Rich
drops color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

GRADE_THEME = Theme(
    {
        "grade.ok": "bold green",
        "grade.error": "bold red",
        "grade.warning": "bold yellow",
        "grade.op": "bold cyan",
        "grade.key": "dim",
        "grade.team": "bold blue",
        "grade.user": "bold",
        "grade.score": "magenta",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=GRADE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 100,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
