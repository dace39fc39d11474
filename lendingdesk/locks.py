"""
Concurrency primitives for the lending engine.

- ``KeyedLocks``: one exclusive lock per key (book id), created lazily, so
  checkouts of the same book serialize while different books never contend.
- ``UnitOfWork``: an undo journal. Each mutation registers its inverse; if
  the block raises, the inverses run in reverse order before the error
  propagates, so a failed operation leaves no partial state behind.
"""

from __future__ import annotations
from contextlib import contextmanager
from threading import Lock, RLock
from typing import Callable, Dict, Hashable, Iterator, List
import logging

from .errors import ConflictError

logger = logging.getLogger(__name__)


class KeyedLocks:
    def __init__(self, timeout: float = 5.0) -> None:
        self.timeout = timeout
        self._guard = Lock()
        self._locks: Dict[Hashable, RLock] = {}

    def _lock_for(self, key: Hashable) -> RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = RLock()
            return lock

    def __contains__(self, key: Hashable) -> bool:
        with self._guard:
            return key in self._locks

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        lock = self._lock_for(key)
        if not lock.acquire(timeout=self.timeout):
            logger.warning("lock wait timed out | key=%s timeout=%.1fs", key, self.timeout)
            raise ConflictError(f"Timed out waiting for lock on {key!r}; retry the operation.")
        try:
            yield
        finally:
            lock.release()


class UnitOfWork:
    def __init__(self, name: str) -> None:
        self.name = name
        self._undo: List[Callable[[], None]] = []

    def on_rollback(self, undo: Callable[[], None]) -> None:
        self._undo.append(undo)

    def __enter__(self) -> "UnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is not None:
            logger.warning(
                "rolling back %s (%d step(s)) after %s", self.name, len(self._undo), exc_type.__name__
            )
            while self._undo:
                self._undo.pop()()
        self._undo.clear()
        # never suppress the original error
        return False
