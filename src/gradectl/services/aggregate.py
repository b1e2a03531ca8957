"""AggregateService — statistics over the caller's team for one course.

Both operations resolve the caller's team, look up each member's grade
for the course, and skip members who never logged one. A team with no
scored members yields ``NO_DATA`` rather than a NaN or a zero.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from gradectl.infrastructure.repositories.base import RepositoryError
from gradectl.services.base import BaseService, InvalidArgument
from gradectl.services.contracts import AverageGradeData, TopGradeData, dump_validated
from gradectl.services.result import ErrorCode, ServiceResult
from gradectl.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from gradectl.domain.grades import Grade
    from gradectl.domain.teams import Team


class AggregateService(BaseService):
    """Handles GetAverageGrade and GetTopGrade."""

    def _team_grades(
        self, op: str, requesting_user: str, course: str
    ) -> tuple[Team, str, list[Grade]] | ServiceResult:
        """Resolve the caller's team and the scored members' grades.

        Returns a failed ServiceResult instead when the arguments are bad,
        the caller is unaffiliated, or nobody on the team has a grade.
        """
        try:
            user = self._require(requesting_user, "requesting user")
            course = self._require(course, "course")
            team = self._store.teams.find_team_of_user(user)
            if team is None:
                return ServiceResult.failure(op, ErrorCode.NOT_ON_TEAM, "Not on a team")
            with trace_span("collect_grades") as span:
                scored = self._store.grades.list_for_users(team.members, course)
                if span:
                    span.annotate("members", team.size)
                    span.annotate("scored", len(scored))
        except InvalidArgument as exc:
            return ServiceResult.failure(op, ErrorCode.INVALID_ARGUMENT, str(exc))
        except RepositoryError as exc:
            return self._from_repository_error(op, exc)

        if not scored:
            return ServiceResult.failure(
                op,
                ErrorCode.NO_DATA,
                f"No member of team '{team.name}' has a grade for '{course}'",
                team=team.name,
                course=course,
            )
        return team, course, scored

    @traced
    def get_average_grade(self, requesting_user: str, course: str) -> ServiceResult:
        """Mean score of the caller's scored teammates (caller included)."""
        op = "get_average_grade"
        resolved = self._team_grades(op, requesting_user, course)
        if isinstance(resolved, ServiceResult):
            return resolved
        team, course, scored = resolved

        average = sum(g.score for g in scored) / len(scored)
        data = {"team": team.name, "course": course, "average": average, "count": len(scored)}
        return ServiceResult.success(op, dump_validated(AverageGradeData, data))

    @traced
    def get_top_grade(self, requesting_user: str, course: str) -> ServiceResult:
        """Highest score on the caller's team; ties go to the smallest username."""
        op = "get_top_grade"
        resolved = self._team_grades(op, requesting_user, course)
        if isinstance(resolved, ServiceResult):
            return resolved
        team, course, scored = resolved

        best = min(scored, key=lambda g: (-g.score, g.username))
        data = {
            "team": team.name,
            "course": course,
            "username": best.username,
            "score": best.score,
        }
        return ServiceResult.success(op, dump_validated(TopGradeData, data))
