"""GradeService — read and write a single user's grade for a course."""

from __future__ import annotations

from typing import Any

from gradectl.domain.grades import parse_score
from gradectl.infrastructure.repositories.base import RepositoryError
from gradectl.services.base import BaseService, InvalidArgument
from gradectl.services.contracts import GradeData, dump_validated
from gradectl.services.result import ErrorCode, ServiceResult
from gradectl.services.telemetry import traced


class GradeService(BaseService):
    """Handles GetGrade and LogGrade."""

    @traced
    def get_grade(
        self,
        requesting_user: str,
        target_username: str | None,
        course: str,
    ) -> ServiceResult:
        """Look up a grade.

        A blank *target_username* means the requesting user's own grade.
        Any user may read anyone's grade.
        """
        op = "get_grade"
        try:
            user = self._require(requesting_user, "requesting user")
            course = self._require(course, "course")
            if target_username is None or not str(target_username).strip():
                target = user
            else:
                target = self._require(target_username, "username")
            grade = self._store.grades.get(target, course)
        except InvalidArgument as exc:
            return ServiceResult.failure(op, ErrorCode.INVALID_ARGUMENT, str(exc))
        except RepositoryError as exc:
            return self._from_repository_error(op, exc)

        if grade is None:
            return ServiceResult.failure(
                op,
                ErrorCode.NOT_FOUND,
                f"No grade for '{target}' in course '{course}'",
                username=target,
                course=course,
            )

        data = {"username": grade.username, "course": grade.course, "grade": grade.score}
        return ServiceResult.success(op, dump_validated(GradeData, data))

    @traced
    def log_grade(self, requesting_user: str, course: str, score: Any) -> ServiceResult:
        """Record (or overwrite) the requesting user's own grade for *course*.

        *score* may be an int or a numeric string; it must fall within the
        configured ``[grades]`` bounds.
        """
        op = "log_grade"
        bounds = self._store.settings.grades
        try:
            user = self._require(requesting_user, "requesting user")
            course = self._require(course, "course")
            try:
                value = parse_score(
                    score, min_score=bounds.min_score, max_score=bounds.max_score
                )
            except ValueError as exc:
                raise InvalidArgument(str(exc)) from exc
            grade = self._store.grades.put(user, course, value)
        except InvalidArgument as exc:
            return ServiceResult.failure(op, ErrorCode.INVALID_ARGUMENT, str(exc))
        except RepositoryError as exc:
            return self._from_repository_error(op, exc)

        data = {"username": grade.username, "course": grade.course, "grade": grade.score}
        return ServiceResult.success(op, dump_validated(GradeData, data))
