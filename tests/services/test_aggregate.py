"""Tests for AggregateService — team average and top grade."""

from __future__ import annotations

import pytest

from gradectl.infrastructure.store import GradeStore
from gradectl.services.aggregate import AggregateService
from tests.conftest import build_team, log_grade


@pytest.fixture
def alpha(any_store: GradeStore) -> GradeStore:
    """Team Alpha of alice, bob, and carol; only alice and bob are graded."""
    build_team(any_store, "Alpha", ["alice", "bob", "carol"])
    log_grade(any_store, "alice", "CS101", 90)
    log_grade(any_store, "bob", "CS101", 80)
    return any_store


class TestAverageGrade:
    def test_skips_ungraded_members(self, alpha: GradeStore) -> None:
        result = AggregateService(alpha).get_average_grade("carol", "CS101")
        assert result.ok
        assert result.op == "get_average_grade"
        assert result.data == {"team": "Alpha", "course": "CS101", "average": 85.0, "count": 2}

    def test_fractional_average(self, alpha: GradeStore) -> None:
        log_grade(alpha, "carol", "CS101", 81)
        result = AggregateService(alpha).get_average_grade("alice", "CS101")
        assert result.data["average"] == pytest.approx(251 / 3)
        assert result.data["count"] == 3

    def test_ignores_other_teams(self, alpha: GradeStore) -> None:
        build_team(alpha, "Beta", ["dave"])
        log_grade(alpha, "dave", "CS101", 10)
        result = AggregateService(alpha).get_average_grade("alice", "CS101")
        assert result.data["average"] == 85.0

    def test_no_data(self, alpha: GradeStore) -> None:
        result = AggregateService(alpha).get_average_grade("alice", "MATH200")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NO_DATA"
        assert result.error.detail["team"] == "Alpha"

    def test_not_on_team(self, alpha: GradeStore) -> None:
        log_grade(alpha, "zed", "CS101", 100)
        result = AggregateService(alpha).get_average_grade("zed", "CS101")
        assert result.error is not None
        assert result.error.code == "NOT_ON_TEAM"

    def test_empty_course(self, alpha: GradeStore) -> None:
        result = AggregateService(alpha).get_average_grade("alice", " ")
        assert result.error is not None
        assert result.error.code == "INVALID_ARGUMENT"

    def test_empty_course_checked_before_team(self, store: GradeStore) -> None:
        result = AggregateService(store).get_average_grade("nobody", "")
        assert result.error is not None
        assert result.error.code == "INVALID_ARGUMENT"


class TestTopGrade:
    def test_top(self, alpha: GradeStore) -> None:
        result = AggregateService(alpha).get_top_grade("carol", "CS101")
        assert result.ok
        assert result.op == "get_top_grade"
        assert result.data == {
            "team": "Alpha",
            "course": "CS101",
            "username": "alice",
            "score": 90,
        }

    def test_tie_goes_to_smallest_username(self, any_store: GradeStore) -> None:
        build_team(any_store, "Alpha", ["bob", "alice"])
        log_grade(any_store, "bob", "CS101", 90)
        log_grade(any_store, "alice", "CS101", 90)
        result = AggregateService(any_store).get_top_grade("bob", "CS101")
        assert (result.data["username"], result.data["score"]) == ("alice", 90)

    def test_no_data(self, alpha: GradeStore) -> None:
        result = AggregateService(alpha).get_top_grade("alice", "MATH200")
        assert result.error is not None
        assert result.error.code == "NO_DATA"

    def test_not_on_team(self, any_store: GradeStore) -> None:
        result = AggregateService(any_store).get_top_grade("alice", "CS101")
        assert result.error is not None
        assert result.error.code == "NOT_ON_TEAM"

    def test_reflects_latest_overwrite(self, alpha: GradeStore) -> None:
        log_grade(alpha, "bob", "CS101", 95)
        result = AggregateService(alpha).get_top_grade("alice", "CS101")
        assert result.data["username"] == "bob"
        assert result.data["score"] == 95
