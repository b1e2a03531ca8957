"""Repositories — the only shared mutable state in gradectl.

Two narrow interfaces (:class:`GradeRepository`, :class:`TeamRepository`)
with an in-memory implementation for tests and a SQLite implementation
for real use. Services depend on the interfaces only.
"""

from gradectl.infrastructure.repositories.base import (
    AlreadyMemberError,
    GradeRepository,
    NameTakenError,
    NotMemberError,
    RepositoryError,
    TeamNotFoundError,
    TeamRepository,
    TransientStoreError,
)

__all__ = [
    "AlreadyMemberError",
    "GradeRepository",
    "NameTakenError",
    "NotMemberError",
    "RepositoryError",
    "TeamNotFoundError",
    "TeamRepository",
    "TransientStoreError",
]
