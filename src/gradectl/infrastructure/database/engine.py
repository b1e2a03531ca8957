"""Database engine setup for SQLite.

WAL mode lets readers proceed while a writer holds the lock. Write
transactions open with ``BEGIN IMMEDIATE`` so check-then-write sequences
are serialized across threads and processes; readers use a plain
deferred ``BEGIN``. The busy timeout bounds how long any caller waits.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Engine

from gradectl.infrastructure.database.schema import metadata

IMMEDIATE = "gradectl_immediate"


def create_db_engine(db_path: Path, *, timeout: float = 5.0) -> Engine:
    """Create a SQLite engine with WAL mode, foreign keys, and a busy timeout."""
    engine = create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"timeout": timeout, "check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        # Let SQLAlchemy emit BEGIN itself instead of the driver.
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _begin(conn: Connection) -> None:
        if conn.get_execution_options().get(IMMEDIATE):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")

    return engine


def init_database(db_path: Path, *, timeout: float = 5.0) -> Engine:
    """Create the parent directory and all tables at *db_path*.

    Idempotent — safe to call on an existing database.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_db_engine(db_path, timeout=timeout)
    metadata.create_all(engine)
    return engine
