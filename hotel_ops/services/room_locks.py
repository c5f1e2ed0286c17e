"""
Per-room mutual exclusion for booking creation.

Booking creation reads the room's timeline and then inserts into it; two
requests for the same room must not interleave between those steps. Inside a
process this registry serializes them. Across processes the row lock taken in
the same transaction and the PostgreSQL exclusion constraint do the job.
"""

import threading
from contextlib import contextmanager
from typing import Iterator


class RoomLockRegistry:
    """
    Lazily created lock per room id (thread-safe).

    Example:
        >>> locks = RoomLockRegistry()
        >>> with locks.hold("room-1"):
        ...     pass
    """

    def __init__(self) -> None:
        self._locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, room_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(room_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[room_id] = lock
            return lock

    @contextmanager
    def hold(self, room_id: str) -> Iterator[None]:
        """Block until no other holder owns ``room_id``, then hold it."""
        lock = self._lock_for(room_id)
        with lock:
            yield

    def size(self) -> int:
        with self._registry_lock:
            return len(self._locks)


# Global registry shared by every request handled by this process
room_locks = RoomLockRegistry()
