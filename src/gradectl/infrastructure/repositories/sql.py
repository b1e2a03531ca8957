"""SQLite-backed repositories (SQLAlchemy Core).

Every mutation runs in one ``BEGIN IMMEDIATE`` transaction that re-checks
its preconditions before writing, so two processes sharing the database
file cannot both create the same team or put one user on two teams.
Lock waits beyond the busy timeout surface as
:class:`TransientStoreError`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from contextlib import AbstractContextManager, contextmanager
from datetime import UTC, datetime

from sqlalchemy import delete, func, insert, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import OperationalError

from gradectl.domain.grades import Grade
from gradectl.domain.teams import Team
from gradectl.infrastructure.database.engine import IMMEDIATE
from gradectl.infrastructure.database.schema import grades, team_members, teams
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


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class _SqlRepository:
    """Connection helpers shared by both SQL repositories."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @contextmanager
    def _read(self) -> Iterator[Connection]:
        try:
            with self._engine.connect() as conn:
                yield conn
        except OperationalError as exc:
            raise TransientStoreError(str(exc.orig)) from exc

    @contextmanager
    def _write(self) -> Iterator[Connection]:
        try:
            with self._engine.connect() as conn:
                conn.execution_options(**{IMMEDIATE: True})
                with conn.begin():
                    yield conn
        except OperationalError as exc:
            raise TransientStoreError(str(exc.orig)) from exc


class SqlGradeRepository(_SqlRepository, GradeRepository):
    """Grades stored in the ``grades`` table."""

    def get(self, username: str, course: str) -> Grade | None:
        stmt = select(grades.c.score).where(
            grades.c.username == username, grades.c.course == course
        )
        with self._read() as conn:
            row = conn.execute(stmt).first()
        if row is None:
            return None
        return Grade(username=username, course=course, score=int(row.score))

    def put(self, username: str, course: str, score: int) -> Grade:
        stmt = sqlite_insert(grades).values(
            username=username, course=course, score=score, modified=_now_iso()
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[grades.c.username, grades.c.course],
            set_={"score": stmt.excluded.score, "modified": stmt.excluded.modified},
        )
        with self._write() as conn:
            conn.execute(stmt)
        logger.debug("Stored grade %s/%s = %d", username, course, score)
        return Grade(username=username, course=course, score=score)

    def list_for_users(self, usernames: Iterable[str], course: str) -> list[Grade]:
        names = list(usernames)
        if not names:
            return []
        stmt = (
            select(grades.c.username, grades.c.score)
            .where(grades.c.course == course, grades.c.username.in_(names))
            .order_by(grades.c.username)
        )
        with self._read() as conn:
            rows = conn.execute(stmt).fetchall()
        return [Grade(username=str(r.username), course=course, score=int(r.score)) for r in rows]


class SqlTeamRepository(_SqlRepository, TeamRepository):
    """Teams stored in ``teams`` and ``team_members``.

    :meth:`user_lock` serializes callers within this process; across
    processes the primary key on ``team_members.username`` and the
    immediate write transactions carry the guarantee.
    """

    def __init__(self, engine: Engine, *, timeout: float = 5.0) -> None:
        super().__init__(engine)
        self._user_locks = KeyedLock(timeout)

    @staticmethod
    def _load(conn: Connection, name: str) -> Team | None:
        exists = conn.execute(select(teams.c.name).where(teams.c.name == name)).first()
        if exists is None:
            return None
        rows = conn.execute(
            select(team_members.c.username).where(team_members.c.team_name == name)
        ).fetchall()
        return Team(name=name, members=tuple(str(r.username) for r in rows))

    @staticmethod
    def _count_members(conn: Connection, name: str) -> int:
        stmt = select(func.count()).select_from(team_members)
        return int(conn.execute(stmt.where(team_members.c.team_name == name)).scalar_one())

    @staticmethod
    def _team_name_of(conn: Connection, username: str) -> str | None:
        row = conn.execute(
            select(team_members.c.team_name).where(team_members.c.username == username)
        ).first()
        return None if row is None else str(row.team_name)

    def find_team_by_name(self, name: str) -> Team | None:
        with self._read() as conn:
            return self._load(conn, name)

    def find_team_of_user(self, username: str) -> Team | None:
        with self._read() as conn:
            name = self._team_name_of(conn, username)
            if name is None:
                return None
            return self._load(conn, name)

    def create_team(self, name: str, founder: str) -> Team:
        now = _now_iso()
        with self._write() as conn:
            if conn.execute(select(teams.c.name).where(teams.c.name == name)).first():
                raise NameTakenError(name)
            current = self._team_name_of(conn, founder)
            if current is not None:
                raise AlreadyMemberError(founder, current)
            conn.execute(insert(teams).values(name=name, created=now))
            conn.execute(
                insert(team_members).values(username=founder, team_name=name, joined=now)
            )
        logger.debug("Created team %s for %s", name, founder)
        return Team(name=name, members=(founder,))

    def add_member(self, team_name: str, username: str) -> Team:
        with self._write() as conn:
            if conn.execute(select(teams.c.name).where(teams.c.name == team_name)).first() is None:
                raise TeamNotFoundError(team_name)
            current = self._team_name_of(conn, username)
            if current is not None and current != team_name:
                raise AlreadyMemberError(username, current)
            if current is None:
                conn.execute(
                    insert(team_members).values(
                        username=username, team_name=team_name, joined=_now_iso()
                    )
                )
            team = self._load(conn, team_name)
        assert team is not None
        return team

    def remove_member(self, team_name: str, username: str) -> int:
        with self._write() as conn:
            result = conn.execute(
                delete(team_members).where(
                    team_members.c.username == username,
                    team_members.c.team_name == team_name,
                )
            )
            if result.rowcount == 0:
                raise NotMemberError(username, team_name)
            remaining = self._count_members(conn, team_name)
            if not remaining:
                self._delete_if_empty(conn, team_name)
        return remaining

    @classmethod
    def _delete_if_empty(cls, conn: Connection, name: str) -> bool:
        if cls._count_members(conn, name):
            return False
        result = conn.execute(delete(teams).where(teams.c.name == name))
        if result.rowcount:
            logger.debug("Deleted empty team %s", name)
        return bool(result.rowcount)

    def delete_team(self, name: str) -> bool:
        with self._write() as conn:
            return self._delete_if_empty(conn, name)

    def user_lock(self, username: str) -> AbstractContextManager[None]:
        return self._user_locks.hold(("user", username))

    # ------------------------------------------------------------------
    # Inspection helpers (used by tests)
    # ------------------------------------------------------------------

    def all_teams(self) -> list[Team]:
        """Snapshot every team in one read transaction, sorted by name."""
        with self._read() as conn:
            names = conn.execute(select(teams.c.name).order_by(teams.c.name)).scalars().all()
            loaded = [self._load(conn, str(name)) for name in names]
        return [team for team in loaded if team is not None]
