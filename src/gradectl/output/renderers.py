"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from rich.table import Table
from rich.text import Text

from gradectl.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from gradectl.services.result import ServiceResult


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console)
        for warning in result.warnings:
            console.print(Text(f"  WARNING  {warning}", style="grade.warning"))
    else:
        _render_error(result, console)
    if verbose and result.meta and "telemetry" in result.meta:
        _render_telemetry(result.meta["telemetry"], console)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        code = result.error.code if result.error else "ERROR"
        return f"ERROR: {code}"
    data = result.data
    for key in ("grade", "average", "score", "team", "user"):
        if key in data:
            return str(data[key])
    return "OK"


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="grade.ok"), Text(f"  {result.op}", style="grade.op"), sep="")


def _render_generic(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        console.print(Text(f"  {key}: ", style="grade.key"), Text(str(value)), sep="")


def _render_grade(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    data = result.data
    console.print(
        Text(f"  {data['username']}", style="grade.user"),
        Text(f"  {data['course']}  "),
        Text(str(data["grade"]), style="grade.score"),
        sep="",
    )


def _render_team(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    data = result.data
    table = Table(title=f"Team {data['team']}", title_style="grade.team", show_header=False)
    table.add_column("member", style="grade.user")
    for member in data["members"]:
        table.add_row(member)
    console.print(table)


def _render_leave(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    data = result.data
    line = f"  {data['username']} left team {data['team']}"
    if data["team_deleted"]:
        line += " (team deleted)"
    console.print(line)


def _render_average(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    data = result.data
    console.print(
        Text("  Average Grade: ", style="grade.key"),
        Text(f"{data['average']:.2f}", style="grade.score"),
        Text(f"  ({data['count']} scored, team {data['team']}, {data['course']})"),
        sep="",
    )


def _render_top(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    data = result.data
    console.print(
        Text("  Top Grade: ", style="grade.key"),
        Text(str(data["score"]), style="grade.score"),
        Text(f"  by {data['username']} (team {data['team']}, {data['course']})"),
        sep="",
    )


def _render_error(result: ServiceResult, console: Console) -> None:
    error = result.error
    message = error.message if error else "Unknown error"
    console.print(
        Text("ERROR", style="grade.error"),
        Text(f"  {result.op}", style="grade.op"),
        Text(f"  {message}"),
        sep="",
    )
    if error is not None and error.retryable:
        console.print(Text("  Temporary failure, try again.", style="grade.warning"))


def _render_telemetry(span: dict[str, object], console: Console, depth: int = 0) -> None:
    indent = "  " * (depth + 1)
    console.print(Text(f"{indent}{span['name']} {span['duration_ms']}ms", style="grade.key"))
    children = span.get("children") or []
    assert isinstance(children, list)
    for child in children:
        _render_telemetry(child, console, depth + 1)


_OP_RENDERERS: dict[str, Callable[[ServiceResult, Console], None]] = {
    "get_grade": _render_grade,
    "log_grade": _render_grade,
    "form_team": _render_team,
    "join_team": _render_team,
    "get_team": _render_team,
    "leave_team": _render_leave,
    "get_average_grade": _render_average,
    "get_top_grade": _render_top,
}
