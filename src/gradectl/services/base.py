"""BaseService — foundation for all gradectl use cases.

Every service receives a :class:`GradeStore` at construction time and
holds nothing else: no caches, no locks of its own. All shared state
lives in the store's repositories, so any number of service instances
(in any number of processes) can run side by side.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from gradectl.domain.grades import normalize_key
from gradectl.infrastructure.repositories.base import (
    AlreadyMemberError,
    NameTakenError,
    NotMemberError,
    RepositoryError,
    TeamNotFoundError,
    TransientStoreError,
)
from gradectl.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from gradectl.infrastructure.store import GradeStore


class InvalidArgument(ValueError):
    """Raised by argument checks; converted to ``INVALID_ARGUMENT``."""


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class GradeService(BaseService):
            def get_grade(self, user: str, ...) -> ServiceResult:
                grade = self._store.grades.get(user, course)
                ...
    """

    def __init__(self, store: GradeStore) -> None:
        self._store = store

    @staticmethod
    def _require(value: Any, field: str) -> str:
        """Normalize a key argument or raise :class:`InvalidArgument`."""
        try:
            return normalize_key(value, field)
        except ValueError as exc:
            raise InvalidArgument(str(exc)) from exc

    @staticmethod
    def _from_repository_error(op: str, exc: RepositoryError) -> ServiceResult:
        """Classify a repository exception into a failed result."""
        if isinstance(exc, TransientStoreError):
            return ServiceResult.failure(op, ErrorCode.TRANSIENT_FAILURE, str(exc))
        if isinstance(exc, NameTakenError):
            return ServiceResult.failure(op, ErrorCode.NAME_TAKEN, str(exc), team=exc.name)
        if isinstance(exc, TeamNotFoundError):
            return ServiceResult.failure(op, ErrorCode.NOT_FOUND, str(exc), team=exc.name)
        if isinstance(exc, AlreadyMemberError):
            return ServiceResult.failure(
                op, ErrorCode.ALREADY_ON_TEAM, str(exc), team=exc.team_name
            )
        if isinstance(exc, NotMemberError):
            return ServiceResult.failure(op, ErrorCode.NOT_ON_TEAM, str(exc), team=exc.team_name)
        return ServiceResult.failure(op, ErrorCode.TRANSIENT_FAILURE, str(exc))
