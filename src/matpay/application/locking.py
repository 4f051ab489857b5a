"""Per-key mutual exclusion for request handlers.

Webhook deliveries and client verification calls for the same order run
on different request threads.  Every read-modify-write of an order and
its payments happens while holding that order's key, so the
PENDING -> COMPLETED check-and-set is observed by exactly one caller.
No handler holds a key across a gateway call.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager


class KeyedLock:

    def __init__(self) -> None:
        self._mutex = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self._waiters: dict[str, int] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        lock = self._acquire_entry(key)
        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            self._release_entry(key)

    def order(self, order_id: int) -> AbstractContextManager[None]:
        """Shortcut for the order-scoped key used by all payment handlers."""
        return self.hold(f"order:{order_id}")

    # --- Internal helpers -----------------------------------------------------

    def _acquire_entry(self, key: str) -> threading.Lock:
        with self._mutex:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            self._waiters[key] = self._waiters.get(key, 0) + 1
            return lock

    def _release_entry(self, key: str) -> None:
        with self._mutex:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                del self._waiters[key]
                del self._locks[key]
