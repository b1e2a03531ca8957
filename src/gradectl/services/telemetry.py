"""Timing spans for service calls, shown with ``--verbose``.

``@traced`` wraps a service operation in a root span and attaches the
finished tree to ``ServiceResult.meta["telemetry"]``. Inside an operation,
``trace_span`` times a named stage. Both collapse to a single ContextVar
read while telemetry is off, which is the default.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec

import structlog

from gradectl.services.result import ServiceResult

_enabled: ContextVar[bool] = ContextVar("gradectl_telemetry", default=False)
_active: ContextVar[Span | None] = ContextVar("gradectl_active_span", default=None)

logger = structlog.get_logger("gradectl.telemetry")

P = ParamSpec("P")


@dataclass
class Span:
    """One timed stage. ``elapsed_ms`` stays None until the span closes."""

    name: str
    started: float = field(default_factory=time.perf_counter)
    elapsed_ms: float | None = None
    notes: dict[str, Any] = field(default_factory=dict)
    children: list[Span] = field(default_factory=list)

    def annotate(self, key: str, value: Any) -> None:
        self.notes[key] = value

    def close(self) -> None:
        self.elapsed_ms = (time.perf_counter() - self.started) * 1000

    def as_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "duration_ms": round(self.elapsed_ms or 0.0, 2)}
        if self.notes:
            out["annotations"] = dict(self.notes)
        if self.children:
            out["children"] = [child.as_dict() for child in self.children]
        return out


@contextmanager
def _activate(span: Span) -> Iterator[Span]:
    token = _active.set(span)
    try:
        yield span
    finally:
        span.close()
        _active.reset(token)


@contextmanager
def trace_span(name: str) -> Iterator[Span | None]:
    """Time a stage of the running operation.

    Yields None when telemetry is off or no ``@traced`` call is running,
    so callers guard annotations with ``if span:``.
    """
    parent = _active.get() if _enabled.get() else None
    if parent is None:
        yield None
        return
    child = Span(name)
    parent.children.append(child)
    with _activate(child):
        yield child


def traced(func: Callable[P, ServiceResult]) -> Callable[P, ServiceResult]:
    """Record a root span for a service operation and attach it to the result."""

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> ServiceResult:
        if not _enabled.get():
            return func(*args, **kwargs)

        span = Span(func.__qualname__)
        try:
            with _activate(span):
                result = func(*args, **kwargs)
        except Exception:
            logger.debug("span.failed", span_name=span.name, duration_ms=span.elapsed_ms)
            raise

        tree = span.as_dict()
        logger.debug(
            "span.complete",
            span_name=span.name,
            duration_ms=tree["duration_ms"],
            ok=result.ok,
            stages=len(span.children),
        )
        return result.model_copy(update={"meta": {**(result.meta or {}), "telemetry": tree}})

    return wrapper


def enable_telemetry() -> None:
    """Turn span collection on for the current context (``--verbose``)."""
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)
