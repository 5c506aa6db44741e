"""Per-leaderboard critical sections.

Reading a board's records, reconciling, writing and pruning must not
interleave with another mutation of the same board, otherwise two same-name
submissions can both see "no existing record" and both insert.

These are process-local locks. Several worker processes sharing one database
need the database to serialize them as well.
"""
import threading
from contextlib import contextmanager
from typing import Dict, Iterator


class BoardLockRegistry:
    """Lazily created ``threading.Lock`` per board id."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[int, threading.Lock] = {}

    def lock_for(self, board_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(board_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[board_id] = lock
            return lock

    @contextmanager
    def hold(self, board_id: int) -> Iterator[None]:
        with self.lock_for(board_id):
            yield

    def discard(self, board_id: int) -> None:
        """Forget the lock of a deleted board."""
        with self._guard:
            self._locks.pop(board_id, None)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
