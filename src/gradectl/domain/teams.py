"""Team model and the per-user membership state machine.

With respect to teams a user is either UNAFFILIATED or a MEMBER of exactly
one team. There is no terminal state; users cycle between the two.
A team with zero members ceases to exist.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, field_validator


class Team(BaseModel):
    """A named group of users. Member usernames are kept sorted."""

    model_config = {"frozen": True}

    name: str
    members: tuple[str, ...] = ()

    @field_validator("members")
    @classmethod
    def _sort_members(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(sorted(set(value)))

    @property
    def size(self) -> int:
        return len(self.members)


class MembershipState(StrEnum):
    """Team affiliation of a single user."""

    UNAFFILIATED = "unaffiliated"
    MEMBER = "member"


class TeamAction(StrEnum):
    """Operations that act on a user's membership state."""

    FORM = "form"
    JOIN = "join"
    LEAVE = "leave"


# state -> {allowed action -> resulting state}
TEAM_TRANSITIONS: dict[str, dict[str, str]] = {
    "unaffiliated": {"form": "member", "join": "member"},
    "member": {"leave": "unaffiliated"},
}


def membership_state(team: Team | None) -> MembershipState:
    """Map the caller's current team (or None) to a state."""
    return MembershipState.UNAFFILIATED if team is None else MembershipState.MEMBER


def is_allowed(state: str, action: str) -> bool:
    """Check whether *action* is a valid transition out of *state*."""
    return action in TEAM_TRANSITIONS.get(state, {})
