"""GradeStore — the single dependency injected into every service.

The store hides which backing implementation is in use. It owns the two
repositories and the resolved settings, and is constructed once per CLI
invocation (or per test) from :class:`GradeSettings`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gradectl.infrastructure.database.engine import init_database
from gradectl.infrastructure.repositories.memory import (
    InMemoryGradeRepository,
    InMemoryTeamRepository,
)
from gradectl.infrastructure.repositories.sql import SqlGradeRepository, SqlTeamRepository

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from gradectl.config.settings import GradeSettings
    from gradectl.infrastructure.repositories.base import GradeRepository, TeamRepository

logger = logging.getLogger(__name__)


class GradeStore:
    """Bundle of the grade and team repositories behind one backend.

    Explicit *grades* / *teams* arguments override the configured backend,
    which lets tests substitute their own implementations.
    """

    def __init__(
        self,
        settings: GradeSettings,
        *,
        grades: GradeRepository | None = None,
        teams: TeamRepository | None = None,
    ) -> None:
        self._settings = settings
        self._engine: Engine | None = None

        timeout = settings.store.timeout_seconds
        if settings.store.backend == "sqlite" and (grades is None or teams is None):
            self._engine = init_database(settings.db_path, timeout=timeout)
            logger.debug("Opened SQLite store at %s", settings.db_path)
            grades = grades or SqlGradeRepository(self._engine)
            teams = teams or SqlTeamRepository(self._engine, timeout=timeout)
        else:
            grades = grades or InMemoryGradeRepository(timeout=timeout)
            teams = teams or InMemoryTeamRepository(timeout=timeout)

        self._grades: GradeRepository = grades
        self._teams: TeamRepository = teams

    @property
    def settings(self) -> GradeSettings:
        """The resolved settings for this store."""
        return self._settings

    @property
    def grades(self) -> GradeRepository:
        return self._grades

    @property
    def teams(self) -> TeamRepository:
        return self._teams

    @property
    def engine(self) -> Engine | None:
        """The SQLAlchemy engine, or None for the in-memory backend."""
        return self._engine

    def close(self) -> None:
        """Release database connections. Safe to call more than once."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
