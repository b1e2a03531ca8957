"""Typed payload contracts for the service boundary.

Every success payload is validated here before it leaves a service, so a
renamed key fails fast in tests rather than in a front end.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T", bound=BaseModel)


def dump_validated(model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict."""
    model = model_cls.model_validate(data)
    return model.model_dump(mode="python")


class GradeData(BaseModel):
    """Payload for ``get_grade`` and ``log_grade``."""

    model_config = ConfigDict(extra="forbid")

    username: str
    course: str
    grade: int


class TeamData(BaseModel):
    """Payload for ``form_team``, ``join_team`` and ``get_team``."""

    model_config = ConfigDict(extra="forbid")

    team: str
    members: list[str]
    count: int = Field(ge=1)


class LeaveTeamData(BaseModel):
    """Payload for ``leave_team``."""

    model_config = ConfigDict(extra="forbid")

    team: str
    username: str
    team_deleted: bool


class AverageGradeData(BaseModel):
    """Payload for ``get_average_grade``."""

    model_config = ConfigDict(extra="forbid")

    team: str
    course: str
    average: float
    count: int = Field(ge=1)


class TopGradeData(BaseModel):
    """Payload for ``get_top_grade``."""

    model_config = ConfigDict(extra="forbid")

    team: str
    course: str
    username: str
    score: int
