"""Dict-backed repositories for tests and single-process use.

Grades are guarded per ``(username, course)`` key. The team tables are
indexed twice (name -> members, username -> name) and both indexes change
together under one table lock so they can never disagree. Per-user
critical sections come from a separate :class:`KeyedLock`; the table lock
is never held while waiting on a user lock.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager

from gradectl.domain.grades import Grade
from gradectl.domain.teams import Team
from gradectl.infrastructure.locks import KeyedLock
from gradectl.infrastructure.repositories.base import (
    AlreadyMemberError,
    GradeRepository,
    NameTakenError,
    NotMemberError,
    TeamNotFoundError,
    TeamRepository,
    TransientStoreError,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


class InMemoryGradeRepository(GradeRepository):
    """Grades held in a dict keyed by ``(username, course)``."""

    def __init__(self, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._scores: dict[tuple[str, str], int] = {}
        self._locks = KeyedLock(timeout)

    def get(self, username: str, course: str) -> Grade | None:
        key = (username, course)
        with self._locks.hold(key):
            score = self._scores.get(key)
        if score is None:
            return None
        return Grade(username=username, course=course, score=score)

    def put(self, username: str, course: str, score: int) -> Grade:
        key = (username, course)
        with self._locks.hold(key):
            self._scores[key] = score
        logger.debug("Stored grade %s/%s = %d", username, course, score)
        return Grade(username=username, course=course, score=score)


class InMemoryTeamRepository(TeamRepository):
    """Teams held in two dicts that are always updated together."""

    def __init__(self, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._timeout = timeout
        self._members: dict[str, set[str]] = {}
        self._team_of: dict[str, str] = {}
        self._table_lock = threading.Lock()
        self._user_locks = KeyedLock(timeout)

    @contextmanager
    def _tables(self) -> Iterator[None]:
        if not self._table_lock.acquire(timeout=self._timeout):
            msg = f"Timed out after {self._timeout}s waiting for the team table"
            raise TransientStoreError(msg)
        try:
            yield
        finally:
            self._table_lock.release()

    def _snapshot(self, name: str) -> Team:
        return Team(name=name, members=tuple(self._members[name]))

    def find_team_by_name(self, name: str) -> Team | None:
        with self._tables():
            if name not in self._members:
                return None
            return self._snapshot(name)

    def find_team_of_user(self, username: str) -> Team | None:
        with self._tables():
            name = self._team_of.get(username)
            if name is None:
                return None
            return self._snapshot(name)

    def create_team(self, name: str, founder: str) -> Team:
        with self._tables():
            if name in self._members:
                raise NameTakenError(name)
            current = self._team_of.get(founder)
            if current is not None:
                raise AlreadyMemberError(founder, current)
            self._members[name] = {founder}
            self._team_of[founder] = name
            team = self._snapshot(name)
        logger.debug("Created team %s for %s", name, founder)
        return team

    def add_member(self, team_name: str, username: str) -> Team:
        with self._tables():
            if team_name not in self._members:
                raise TeamNotFoundError(team_name)
            current = self._team_of.get(username)
            if current is not None and current != team_name:
                raise AlreadyMemberError(username, current)
            self._members[team_name].add(username)
            self._team_of[username] = team_name
            return self._snapshot(team_name)

    def remove_member(self, team_name: str, username: str) -> int:
        with self._tables():
            if self._team_of.get(username) != team_name:
                raise NotMemberError(username, team_name)
            members = self._members[team_name]
            members.discard(username)
            del self._team_of[username]
            remaining = len(members)
            if not remaining:
                self._delete_if_empty(team_name)
        return remaining

    def _delete_if_empty(self, name: str) -> bool:
        # caller holds the table lock
        members = self._members.get(name)
        if members is None or members:
            return False
        del self._members[name]
        logger.debug("Deleted empty team %s", name)
        return True

    def delete_team(self, name: str) -> bool:
        with self._tables():
            return self._delete_if_empty(name)

    def user_lock(self, username: str) -> AbstractContextManager[None]:
        return self._user_locks.hold(("user", username))

    # ------------------------------------------------------------------
    # Inspection helpers (used by tests)
    # ------------------------------------------------------------------

    def all_teams(self) -> list[Team]:
        """Snapshot every team, sorted by name."""
        with self._tables():
            return [self._snapshot(name) for name in sorted(self._members)]
