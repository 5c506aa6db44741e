"""Use cases: create, resolve, touch, clear and delete leaderboards."""
import logging
from datetime import datetime, timezone
from typing import Callable

from hiscore.application.board_locks import BoardLockRegistry
from hiscore.domain.api_key import DEFAULT_MAX_ATTEMPTS, generate_key, generate_key_pair
from hiscore.domain.errors import KeyCollision, KeyGenerationExhausted, KeyNotFound
from hiscore.domain.leaderboard import Leaderboard

log = logging.getLogger("hiscore.lifecycle")

DEFAULT_PRIVATE_KEY_LENGTH = 31
DEFAULT_PUBLIC_KEY_LENGTH = 20


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LeaderboardLifecycle:
    """Owns the existence of leaderboards and their last-activity stamp."""

    def __init__(
        self,
        store,
        locks: BoardLockRegistry | None = None,
        private_key_length: int = DEFAULT_PRIVATE_KEY_LENGTH,
        public_key_length: int = DEFAULT_PUBLIC_KEY_LENGTH,
        key_max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        clock: Callable[[], datetime] = _utcnow,
        key_generator: Callable[[int], str] = generate_key,
    ):
        self._store = store
        self._locks = locks or BoardLockRegistry()
        self._private_key_length = private_key_length
        self._public_key_length = public_key_length
        self._key_max_attempts = key_max_attempts
        self._clock = clock
        self._key_generator = key_generator

    @property
    def locks(self) -> BoardLockRegistry:
        return self._locks

    def now(self) -> datetime:
        return self._clock()

    def create(self) -> Leaderboard:
        """
        Create a leaderboard with fresh keys.

        Keys are pre-checked against the current boards, but the store's
        uniqueness check decides: a KeyCollision from a concurrent create
        just triggers another round.
        """
        for attempt in range(1, self._key_max_attempts + 1):
            boards = self._store.list_leaderboards()
            private_key, public_key = generate_key_pair(
                (b.private_key for b in boards),
                (b.public_key for b in boards),
                self._private_key_length,
                self._public_key_length,
                self._key_max_attempts,
                self._key_generator,
            )
            candidate = Leaderboard(private_key, public_key, last_activity=self.now())
            try:
                created = self._store.insert_leaderboard(candidate)
            except KeyCollision as exc:
                log.warning("Key collision on create (attempt %d): %s", attempt, exc)
                continue
            log.info("Created leaderboard id=%s", created.board_id)
            return created
        raise KeyGenerationExhausted(
            f"Could not store a leaderboard after {self._key_max_attempts} attempts."
        )

    def resolve_private(self, private_key: str) -> Leaderboard:
        board = self._store.find_leaderboard_by_private_key(private_key)
        if board is None:
            raise KeyNotFound("The key associated with this request could not be found.")
        return board

    def resolve_public(self, public_key: str) -> Leaderboard:
        board = self._store.find_leaderboard_by_public_key(public_key)
        if board is None:
            raise KeyNotFound("The key associated with this request could not be found.")
        return board

    def touch(self, board_id: int) -> datetime:
        timestamp = self.now()
        self._store.touch_leaderboard(board_id, timestamp)
        return timestamp

    def clear(self, private_key: str) -> int:
        """Delete every record of the board; the board itself stays."""
        return self.clear_board(self.resolve_private(private_key))

    def clear_board(self, board: Leaderboard) -> int:
        with self._locks.hold(board.board_id):
            records = self._store.list_records_for_board(board.board_id)
            for record in records:
                self._store.delete_record(record.record_id)
        self.touch(board.board_id)
        log.info("Cleared %d record(s) from leaderboard id=%s", len(records), board.board_id)
        return len(records)

    def delete_leaderboard(self, private_key: str) -> Leaderboard:
        """Remove all records, then the leaderboard row."""
        board = self.resolve_private(private_key)
        with self._locks.hold(board.board_id):
            for record in self._store.list_records_for_board(board.board_id):
                self._store.delete_record(record.record_id)
            self._store.delete_leaderboard(board.board_id)
        self._locks.discard(board.board_id)
        log.info("Deleted leaderboard id=%s", board.board_id)
        return board
