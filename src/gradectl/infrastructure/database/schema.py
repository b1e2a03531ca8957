"""SQLAlchemy Core table definitions for the gradectl database.

``team_members.username`` is the primary key, so the database itself
refuses a second membership for the same user. Team names are primary
keys of ``teams``.
"""

from __future__ import annotations

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    Table,
    Text,
)

metadata = MetaData()

grades = Table(
    "grades",
    metadata,
    Column("username", Text, nullable=False),
    Column("course", Text, nullable=False),
    Column("score", Integer, nullable=False),
    Column("modified", Text, nullable=False),
    PrimaryKeyConstraint("username", "course"),
)

teams = Table(
    "teams",
    metadata,
    Column("name", Text, primary_key=True),
    Column("created", Text, nullable=False),
)

team_members = Table(
    "team_members",
    metadata,
    Column("username", Text, primary_key=True),
    Column("team_name", Text, ForeignKey("teams.name"), nullable=False),
    Column("joined", Text, nullable=False),
)

Index("ix_grades_course", grades.c.course)
Index("ix_team_members_team", team_members.c.team_name)
