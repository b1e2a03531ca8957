"""Contract tests shared by the in-memory and SQLite repositories."""

from __future__ import annotations

import pytest

from gradectl.infrastructure.repositories.base import (
    AlreadyMemberError,
    NameTakenError,
    NotMemberError,
    TeamNotFoundError,
)
from gradectl.infrastructure.store import GradeStore


class TestGradeRepository:
    def test_get_missing(self, any_store: GradeStore) -> None:
        assert any_store.grades.get("alice", "CS101") is None

    def test_put_then_get(self, any_store: GradeStore) -> None:
        stored = any_store.grades.put("alice", "CS101", 70)
        assert stored.score == 70
        grade = any_store.grades.get("alice", "CS101")
        assert grade is not None
        assert (grade.username, grade.course, grade.score) == ("alice", "CS101", 70)

    def test_put_overwrites(self, any_store: GradeStore) -> None:
        any_store.grades.put("alice", "CS101", 70)
        any_store.grades.put("alice", "CS101", 85)
        grade = any_store.grades.get("alice", "CS101")
        assert grade is not None
        assert grade.score == 85

    def test_put_is_idempotent(self, any_store: GradeStore) -> None:
        any_store.grades.put("alice", "CS101", 85)
        any_store.grades.put("alice", "CS101", 85)
        grade = any_store.grades.get("alice", "CS101")
        assert grade is not None
        assert grade.score == 85

    def test_keys_are_independent(self, any_store: GradeStore) -> None:
        any_store.grades.put("alice", "CS101", 70)
        any_store.grades.put("alice", "MAT137", 60)
        any_store.grades.put("bob", "CS101", 50)
        assert any_store.grades.get("alice", "MAT137").score == 60  # type: ignore[union-attr]
        assert any_store.grades.get("bob", "CS101").score == 50  # type: ignore[union-attr]

    def test_course_is_case_sensitive(self, any_store: GradeStore) -> None:
        any_store.grades.put("alice", "CS101", 70)
        assert any_store.grades.get("alice", "cs101") is None

    def test_list_for_users_skips_missing(self, any_store: GradeStore) -> None:
        any_store.grades.put("alice", "CS101", 90)
        any_store.grades.put("bob", "CS101", 80)
        any_store.grades.put("carol", "MAT137", 70)
        found = any_store.grades.list_for_users(["alice", "bob", "carol"], "CS101")
        assert sorted((g.username, g.score) for g in found) == [("alice", 90), ("bob", 80)]

    def test_list_for_no_users(self, any_store: GradeStore) -> None:
        assert any_store.grades.list_for_users([], "CS101") == []


class TestTeamRepository:
    def test_create_and_find(self, any_store: GradeStore) -> None:
        teams = any_store.teams
        team = teams.create_team("Alpha", "alice")
        assert team.members == ("alice",)
        assert teams.find_team_by_name("Alpha") == team
        assert teams.find_team_of_user("alice") == team

    def test_find_missing(self, any_store: GradeStore) -> None:
        assert any_store.teams.find_team_by_name("Nope") is None
        assert any_store.teams.find_team_of_user("nobody") is None

    def test_create_duplicate_name(self, any_store: GradeStore) -> None:
        any_store.teams.create_team("Alpha", "alice")
        with pytest.raises(NameTakenError):
            any_store.teams.create_team("Alpha", "bob")

    def test_names_are_case_sensitive(self, any_store: GradeStore) -> None:
        any_store.teams.create_team("Alpha", "alice")
        team = any_store.teams.create_team("alpha", "bob")
        assert team.name == "alpha"

    def test_create_when_founder_on_team(self, any_store: GradeStore) -> None:
        any_store.teams.create_team("Alpha", "alice")
        with pytest.raises(AlreadyMemberError):
            any_store.teams.create_team("Beta", "alice")
        assert any_store.teams.find_team_by_name("Beta") is None

    def test_add_member(self, any_store: GradeStore) -> None:
        any_store.teams.create_team("Alpha", "alice")
        team = any_store.teams.add_member("Alpha", "bob")
        assert team.members == ("alice", "bob")
        assert any_store.teams.find_team_of_user("bob") == team

    def test_add_member_idempotent(self, any_store: GradeStore) -> None:
        any_store.teams.create_team("Alpha", "alice")
        any_store.teams.add_member("Alpha", "bob")
        team = any_store.teams.add_member("Alpha", "bob")
        assert team.members == ("alice", "bob")

    def test_add_member_missing_team(self, any_store: GradeStore) -> None:
        with pytest.raises(TeamNotFoundError):
            any_store.teams.add_member("Ghost", "bob")

    def test_add_member_on_other_team(self, any_store: GradeStore) -> None:
        any_store.teams.create_team("Alpha", "alice")
        any_store.teams.create_team("Beta", "bob")
        with pytest.raises(AlreadyMemberError) as exc_info:
            any_store.teams.add_member("Alpha", "bob")
        assert exc_info.value.team_name == "Beta"

    def test_remove_member_returns_remaining(self, any_store: GradeStore) -> None:
        any_store.teams.create_team("Alpha", "alice")
        any_store.teams.add_member("Alpha", "bob")
        assert any_store.teams.remove_member("Alpha", "bob") == 1
        assert any_store.teams.find_team_of_user("bob") is None
        assert any_store.teams.remove_member("Alpha", "alice") == 0
        assert any_store.teams.find_team_by_name("Alpha") is None

    def test_remove_non_member(self, any_store: GradeStore) -> None:
        any_store.teams.create_team("Alpha", "alice")
        with pytest.raises(NotMemberError):
            any_store.teams.remove_member("Alpha", "bob")

    def test_delete_refuses_team_with_members(self, any_store: GradeStore) -> None:
        any_store.teams.create_team("Alpha", "alice")
        assert any_store.teams.delete_team("Alpha") is False
        team = any_store.teams.find_team_by_name("Alpha")
        assert team is not None
        assert team.members == ("alice",)

    def test_last_removal_deletes_team(self, any_store: GradeStore) -> None:
        any_store.teams.create_team("Alpha", "alice")
        any_store.teams.remove_member("Alpha", "alice")
        assert any_store.teams.find_team_by_name("Alpha") is None
        assert any_store.teams.delete_team("Alpha") is False
        with pytest.raises(TeamNotFoundError):
            any_store.teams.add_member("Alpha", "bob")

    def test_delete_missing(self, any_store: GradeStore) -> None:
        assert any_store.teams.delete_team("Ghost") is False

    def test_name_reusable_after_delete(self, any_store: GradeStore) -> None:
        any_store.teams.create_team("Alpha", "alice")
        any_store.teams.remove_member("Alpha", "alice")
        team = any_store.teams.create_team("Alpha", "bob")
        assert team.members == ("bob",)

    def test_user_lock_is_reentrant(self, any_store: GradeStore) -> None:
        with any_store.teams.user_lock("alice"), any_store.teams.user_lock("alice"):
            any_store.teams.create_team("Alpha", "alice")
        assert any_store.teams.find_team_of_user("alice") is not None

    def test_all_teams_snapshot(self, any_store: GradeStore) -> None:
        any_store.teams.create_team("B", "bob")
        any_store.teams.create_team("A", "alice")
        any_store.teams.add_member("A", "carol")
        snapshot = any_store.teams.all_teams()  # type: ignore[attr-defined]
        assert [(t.name, t.members) for t in snapshot] == [
            ("A", ("alice", "carol")),
            ("B", ("bob",)),
        ]
