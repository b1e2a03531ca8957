"""Per-key mutual exclusion with bounded waits.

Locks are reentrant so a holder can call back into code that takes the
same key. Entries are reference counted and dropped once nobody holds or
waits on them, so the table does not grow with every key ever seen.
"""

from __future__ import annotations

import threading
from collections.abc import Hashable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from gradectl.infrastructure.repositories.base import TransientStoreError


@dataclass
class _Entry:
    lock: threading.RLock = field(default_factory=threading.RLock)
    refs: int = 0


class KeyedLock:
    """A table of reentrant locks addressed by key."""

    def __init__(self, timeout: float) -> None:
        self._timeout = timeout
        self._guard = threading.Lock()
        self._entries: dict[Hashable, _Entry] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        """Hold the lock for *key*, waiting at most the configured timeout.

        Raises:
            TransientStoreError: The lock could not be acquired in time.
        """
        with self._guard:
            entry = self._entries.setdefault(key, _Entry())
            entry.refs += 1
        try:
            if not entry.lock.acquire(timeout=self._timeout):
                msg = f"Timed out after {self._timeout}s waiting for {key!r}"
                raise TransientStoreError(msg)
            try:
                yield
            finally:
                entry.lock.release()
        finally:
            with self._guard:
                entry.refs -= 1
                if entry.refs == 0:
                    del self._entries[key]
