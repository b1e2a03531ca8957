"""Repository interfaces and the errors they raise.

Atomicity contract shared by every implementation:

- ``GradeRepository.put`` is atomic per ``(username, course)``; readers
  never observe a partial write.
- ``TeamRepository`` mutators re-check their own preconditions inside one
  atomic section, so "at most one team per user" and "unique team names"
  hold even when callers race.
- ``TeamRepository.user_lock`` serializes a membership check and the
  following membership write for the same username.

Anything that exceeds the configured timeout raises
:class:`TransientStoreError`, which is the only retryable failure.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from gradectl.domain.grades import Grade
    from gradectl.domain.teams import Team


class RepositoryError(Exception):
    """Base class for repository failures."""


class NameTakenError(RepositoryError):
    """A team with the requested name already exists."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Team name '{name}' is already taken")
        self.name = name


class TeamNotFoundError(RepositoryError):
    """The named team does not exist."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Team '{name}' does not exist")
        self.name = name


class AlreadyMemberError(RepositoryError):
    """The user already belongs to a team."""

    def __init__(self, username: str, team_name: str) -> None:
        super().__init__(f"User '{username}' is already on team '{team_name}'")
        self.username = username
        self.team_name = team_name


class NotMemberError(RepositoryError):
    """The user is not a member of the named team."""

    def __init__(self, username: str, team_name: str) -> None:
        super().__init__(f"User '{username}' is not on team '{team_name}'")
        self.username = username
        self.team_name = team_name


class TransientStoreError(RepositoryError):
    """The backing store timed out or is unavailable. Safe to retry."""


class GradeRepository(ABC):
    """Grade records keyed by ``(username, course)``."""

    @abstractmethod
    def get(self, username: str, course: str) -> Grade | None:
        """Return the grade for the pair, or None if never logged."""

    @abstractmethod
    def put(self, username: str, course: str, score: int) -> Grade:
        """Insert or overwrite the grade for the pair."""

    def list_for_users(self, usernames: Iterable[str], course: str) -> list[Grade]:
        """Return the grades that exist for *usernames* in *course*.

        The default implementation falls back to one :meth:`get` per user.
        """
        found: list[Grade] = []
        for username in usernames:
            grade = self.get(username, course)
            if grade is not None:
                found.append(grade)
        return found


class TeamRepository(ABC):
    """Team membership keyed by team name and by username."""

    @abstractmethod
    def find_team_by_name(self, name: str) -> Team | None:
        """Return the team called *name*, or None."""

    @abstractmethod
    def find_team_of_user(self, username: str) -> Team | None:
        """Return the team *username* belongs to, or None."""

    @abstractmethod
    def create_team(self, name: str, founder: str) -> Team:
        """Create *name* with *founder* as its sole member.

        Raises:
            NameTakenError: A team called *name* already exists.
            AlreadyMemberError: *founder* already belongs to a team.
        """

    @abstractmethod
    def add_member(self, team_name: str, username: str) -> Team:
        """Add *username* to *team_name*. Idempotent for an existing member.

        Raises:
            TeamNotFoundError: The team does not exist.
            AlreadyMemberError: *username* belongs to a different team.
        """

    @abstractmethod
    def remove_member(self, team_name: str, username: str) -> int:
        """Remove *username* from *team_name* and return the remaining count.

        When the count reaches zero the team is deleted in the same atomic
        section, so no caller ever observes an empty team.

        Raises:
            NotMemberError: *username* is not on that team.
        """

    @abstractmethod
    def delete_team(self, name: str) -> bool:
        """Delete *name* if it has no members. Returns True if deleted.

        Compare-and-set: a team that still has members is left alone.
        """

    @abstractmethod
    def user_lock(self, username: str) -> AbstractContextManager[None]:
        """Critical section for membership changes of *username*."""
