"""Grade records and the input rules applied before they are stored.

Every grade is keyed by ``(username, course)``; logging again for the
same pair overwrites the previous score.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel

DEFAULT_MIN_SCORE = 0
DEFAULT_MAX_SCORE = 100

_INT_RE = re.compile(r"^[+-]?\d+$")


class Grade(BaseModel):
    """One stored score for a user in a course."""

    model_config = {"frozen": True}

    username: str
    course: str
    score: int


def normalize_key(value: Any, field: str) -> str:
    """Strip *value* and reject blanks.

    Usernames, course codes and team names all pass through here.
    Case is preserved.

    Raises:
        ValueError: If *value* is not a string or is empty after stripping.
    """
    if not isinstance(value, str):
        msg = f"{field} must be a string, got {type(value).__name__}"
        raise ValueError(msg)
    cleaned = value.strip()
    if not cleaned:
        msg = f"{field} must not be empty"
        raise ValueError(msg)
    return cleaned


def parse_score(
    value: Any,
    *,
    min_score: int = DEFAULT_MIN_SCORE,
    max_score: int = DEFAULT_MAX_SCORE,
) -> int:
    """Coerce *value* to an integer score within ``[min_score, max_score]``.

    Accepts ``int`` (but not ``bool``) or a string of decimal digits with
    an optional sign, which is what a form field or CLI argument yields.

    Examples:
        >>> parse_score(85)
        85
        >>> parse_score(" 70 ")
        70

    Raises:
        ValueError: On a malformed or out-of-range score.
    """
    if isinstance(value, bool):
        msg = "Score must be an integer, got a boolean"
        raise ValueError(msg)
    if isinstance(value, int):
        score = value
    elif isinstance(value, str) and _INT_RE.match(value.strip()):
        score = int(value.strip())
    else:
        msg = f"Score must be an integer, got {value!r}"
        raise ValueError(msg)

    if not min_score <= score <= max_score:
        msg = f"Score {score} is outside the accepted range {min_score}-{max_score}"
        raise ValueError(msg)
    return score
