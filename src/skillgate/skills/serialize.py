"""Per-key serialization of file mutations.

At most one mutation runs per key; later callers block until the
current one completes or fails. Different keys do not wait on each
other, and there is no timeout.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Callable, Iterator, TypeVar

_T = TypeVar("_T")


class KeyedLock:
    """Registry of locks keyed by string, released when no longer held or awaited."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, tuple[threading.Lock, int]] = {}

    def _acquire_entry(self, key: str) -> threading.Lock:
        with self._guard:
            lock, waiters = self._locks.get(key, (None, 0))
            if lock is None:
                lock = threading.Lock()
            self._locks[key] = (lock, waiters + 1)
            return lock

    def _release_entry(self, key: str) -> None:
        with self._guard:
            lock, waiters = self._locks[key]
            if waiters <= 1:
                del self._locks[key]
            else:
                self._locks[key] = (lock, waiters - 1)

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        lock = self._acquire_entry(key)
        try:
            with lock:
                yield
        finally:
            self._release_entry(key)

    def active_keys(self) -> frozenset[str]:
        with self._guard:
            return frozenset(self._locks)


_default_lock = KeyedLock()


@contextmanager
def serialize_by_key(key: str) -> Iterator[None]:
    """Hold the process-wide lock for ``key`` for the duration of the block.

    Usage::

        with serialize_by_key(f"learnings:{path}"):
            content = path.read_text()
            path.write_text(content + line)
    """
    with _default_lock.hold(key):
        yield


def run_serialized(key: str, fn: Callable[[], _T]) -> _T:
    """Run ``fn`` while holding the lock for ``key`` and return its result."""
    with serialize_by_key(key):
        return fn()


__all__ = [
    "KeyedLock",
    "run_serialized",
    "serialize_by_key",
]
