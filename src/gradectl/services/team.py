"""TeamService — form, join, and leave teams.

Per-user state machine (see :mod:`gradectl.domain.teams`)::

    UNAFFILIATED --form/join--> MEMBER(team)
    MEMBER(team) --leave------> UNAFFILIATED   (team deleted when emptied)

Every mutation runs inside ``teams.user_lock(user)`` so the state check and
the membership write for one user are never interleaved with another
writer for that user. The repository re-checks name uniqueness and
single membership inside its own atomic section, which settles races
between different users (two people forming the same name at once).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from gradectl.domain.teams import MembershipState, TeamAction, is_allowed, membership_state
from gradectl.infrastructure.repositories.base import RepositoryError
from gradectl.services.base import BaseService, InvalidArgument
from gradectl.services.contracts import LeaveTeamData, TeamData, dump_validated
from gradectl.services.result import ErrorCode, ServiceResult
from gradectl.services.telemetry import traced

if TYPE_CHECKING:
    from gradectl.domain.teams import Team


def _team_payload(team: Team) -> dict[str, Any]:
    return dump_validated(
        TeamData,
        {"team": team.name, "members": list(team.members), "count": team.size},
    )


class TeamService(BaseService):
    """Handles FormTeam, JoinTeam, LeaveTeam, and the caller's team view."""

    @staticmethod
    def _already_on_team(op: str, team: Team) -> ServiceResult:
        return ServiceResult.failure(
            op,
            ErrorCode.ALREADY_ON_TEAM,
            f"Already on team '{team.name}'; leave it first",
            team=team.name,
        )

    @staticmethod
    def _not_on_team(op: str) -> ServiceResult:
        return ServiceResult.failure(op, ErrorCode.NOT_ON_TEAM, "Not on a team")

    @traced
    def form_team(self, requesting_user: str, name: str) -> ServiceResult:
        """Create a team named *name* with the requesting user as sole member."""
        op = "form_team"
        teams = self._store.teams
        try:
            user = self._require(requesting_user, "requesting user")
            name = self._require(name, "team name")
            with teams.user_lock(user):
                current = teams.find_team_of_user(user)
                if not is_allowed(membership_state(current), TeamAction.FORM):
                    assert current is not None
                    return self._already_on_team(op, current)
                team = teams.create_team(name, user)
        except InvalidArgument as exc:
            return ServiceResult.failure(op, ErrorCode.INVALID_ARGUMENT, str(exc))
        except RepositoryError as exc:
            return self._from_repository_error(op, exc)

        return ServiceResult.success(op, _team_payload(team))

    @traced
    def join_team(self, requesting_user: str, name: str) -> ServiceResult:
        """Add the requesting user to the existing team *name*."""
        op = "join_team"
        teams = self._store.teams
        try:
            user = self._require(requesting_user, "requesting user")
            name = self._require(name, "team name")
            with teams.user_lock(user):
                current = teams.find_team_of_user(user)
                if not is_allowed(membership_state(current), TeamAction.JOIN):
                    assert current is not None
                    return self._already_on_team(op, current)
                team = teams.add_member(name, user)
        except InvalidArgument as exc:
            return ServiceResult.failure(op, ErrorCode.INVALID_ARGUMENT, str(exc))
        except RepositoryError as exc:
            return self._from_repository_error(op, exc)

        return ServiceResult.success(op, _team_payload(team))

    @traced
    def leave_team(self, requesting_user: str) -> ServiceResult:
        """Remove the requesting user from their team.

        The repository deletes the team in the same atomic step that
        removes its last member.
        """
        op = "leave_team"
        teams = self._store.teams
        try:
            user = self._require(requesting_user, "requesting user")
            with teams.user_lock(user):
                current = teams.find_team_of_user(user)
                if not is_allowed(membership_state(current), TeamAction.LEAVE):
                    return self._not_on_team(op)
                assert current is not None
                remaining = teams.remove_member(current.name, user)
        except InvalidArgument as exc:
            return ServiceResult.failure(op, ErrorCode.INVALID_ARGUMENT, str(exc))
        except RepositoryError as exc:
            return self._from_repository_error(op, exc)

        data = {"team": current.name, "username": user, "team_deleted": remaining == 0}
        return ServiceResult.success(op, dump_validated(LeaveTeamData, data))

    @traced
    def get_team(self, requesting_user: str) -> ServiceResult:
        """Show the requesting user's team and its members."""
        op = "get_team"
        try:
            user = self._require(requesting_user, "requesting user")
            current = self._store.teams.find_team_of_user(user)
        except InvalidArgument as exc:
            return ServiceResult.failure(op, ErrorCode.INVALID_ARGUMENT, str(exc))
        except RepositoryError as exc:
            return self._from_repository_error(op, exc)

        if membership_state(current) is MembershipState.UNAFFILIATED:
            return self._not_on_team(op)
        assert current is not None
        return ServiceResult.success(op, _team_payload(current))
