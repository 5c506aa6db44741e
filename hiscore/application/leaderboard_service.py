"""Service facade: one operation per request verb, each returning a tagged result.

Domain and use-case code raise LeaderboardError subclasses; this is the only
place they become OperationResult statuses. The HTTP layer renders those.
"""
import logging
from typing import Callable

from hiscore.application.board_locks import BoardLockRegistry
from hiscore.application.leaderboard_lifecycle import (
    DEFAULT_PRIVATE_KEY_LENGTH,
    DEFAULT_PUBLIC_KEY_LENGTH,
    LeaderboardLifecycle,
)
from hiscore.application.prune_leaderboard import DEFAULT_MAX_LEADERBOARD_SIZE
from hiscore.application.query_records import delete_one, list_ranked
from hiscore.application.submit_record import submit_record
from hiscore.domain.api_key import DEFAULT_MAX_ATTEMPTS, MAX_KEY_LENGTH
from hiscore.domain.enums import ResultStatus
from hiscore.domain.errors import LeaderboardError, StorageError
from hiscore.domain.invariant import (
    normalize_name,
    parse_int,
    validate_limit,
    validate_notes,
    validate_record_id,
)
from hiscore.domain.reconciliation import Decision
from hiscore.domain.record import Record
from hiscore.infrastructure import audit

log = logging.getLogger("hiscore.service")


class OperationResult:
    """Outcome of a service call. ``decision`` is set for submissions only."""

    def __init__(
        self,
        status: ResultStatus,
        payload=None,
        message: str | None = None,
        decision: Decision | None = None,
    ):
        self.status = status
        self.payload = payload
        self.message = message
        self.decision = decision

    @property
    def ok(self) -> bool:
        return self.status.is_ok()

    def to_dict(self) -> dict:
        data = {"status": self.status.value}
        if self.payload is not None:
            data["payload"] = self.payload
        if self.message:
            data["message"] = self.message
        return data

    def __repr__(self) -> str:
        return f"OperationResult({self.status.value}, message={self.message!r})"


class LeaderboardService:
    """Entry point for the request layer."""

    def __init__(
        self,
        store,
        max_size: int = DEFAULT_MAX_LEADERBOARD_SIZE,
        private_key_length: int = DEFAULT_PRIVATE_KEY_LENGTH,
        public_key_length: int = DEFAULT_PUBLIC_KEY_LENGTH,
        key_max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        locks: BoardLockRegistry | None = None,
        lifecycle: LeaderboardLifecycle | None = None,
    ):
        if max_size < 1:
            raise ValueError(f"max_size must be positive, got {max_size}.")
        for label, length in (("private", private_key_length), ("public", public_key_length)):
            if not 1 <= length <= MAX_KEY_LENGTH:
                raise ValueError(
                    f"{label} key length must be between 1 and {MAX_KEY_LENGTH}, got {length}."
                )

        self._store = store
        self._max_size = max_size
        if locks is None:
            locks = lifecycle.locks if lifecycle is not None else BoardLockRegistry()
        self._locks = locks
        self._lifecycle = lifecycle or LeaderboardLifecycle(
            store,
            locks=self._locks,
            private_key_length=private_key_length,
            public_key_length=public_key_length,
            key_max_attempts=key_max_attempts,
        )

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def lifecycle(self) -> LeaderboardLifecycle:
        return self._lifecycle

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def create(self) -> OperationResult:
        def op():
            board = self._lifecycle.create()
            _audit("leaderboard_created", board.board_id)
            return OperationResult(ResultStatus.OK, payload=board.to_public_dict())

        return self._run("create", op)

    def submit(
        self,
        private_key: str,
        name: str | None,
        score,
        time=0,
        notes: str | None = None,
        source_address: str | None = None,
    ) -> OperationResult:
        """Submit a score. A lower score under an existing name still reports OK."""

        def op():
            incoming_fields = {
                "name": normalize_name(name),
                "score": parse_int(score, "score"),
                "time": parse_int(time, "time") if time is not None else 0,
                "notes": validate_notes(notes),
            }
            board = self._lifecycle.resolve_private(private_key)
            incoming = Record(
                board_id=board.board_id,
                source_address=source_address,
                submitted_at=self._lifecycle.now(),
                **incoming_fields,
            )
            outcome = submit_record(self._store, board, incoming, self._locks, self._max_size)
            self._lifecycle.touch(board.board_id)
            return OperationResult(
                ResultStatus.OK,
                payload={"record_id": outcome["record_id"], "evicted": outcome["evicted"]},
                decision=outcome["decision"],
            )

        return self._run("submit", op)

    def list_ranked(self, public_key: str, limit=None) -> OperationResult:
        def op():
            checked_limit = validate_limit(limit)
            board = self._lifecycle.resolve_public(public_key)
            records = list_ranked(self._store, board, checked_limit)
            self._lifecycle.touch(board.board_id)
            log.info(
                "Sent %d record(s) for leaderboard id=%s", len(records), board.board_id
            )
            return OperationResult(ResultStatus.OK, payload=records)

        return self._run("list_ranked", op)

    def delete_one(self, private_key: str, record_id) -> OperationResult:
        def op():
            checked_id = validate_record_id(record_id)
            board = self._lifecycle.resolve_private(private_key)
            record = delete_one(self._store, board, checked_id, self._locks)
            self._lifecycle.touch(board.board_id)
            _audit("record_deleted", board.board_id, {"record_id": checked_id})
            return OperationResult(ResultStatus.OK, payload=record.to_public_dict())

        return self._run("delete_one", op)

    def clear(self, private_key: str) -> OperationResult:
        def op():
            board = self._lifecycle.resolve_private(private_key)
            removed = self._lifecycle.clear_board(board)
            _audit("leaderboard_cleared", board.board_id, {"removed": removed})
            return OperationResult(ResultStatus.OK, payload={"removed": removed})

        return self._run("clear", op)

    def delete_leaderboard(self, private_key: str) -> OperationResult:
        """Administrative: drop a board and all its records."""

        def op():
            board = self._lifecycle.delete_leaderboard(private_key)
            _audit("leaderboard_deleted", board.board_id)
            return OperationResult(ResultStatus.OK)

        return self._run("delete_leaderboard", op)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _run(self, action: str, op: Callable[[], OperationResult]) -> OperationResult:
        try:
            return op()
        except StorageError as exc:
            log.error("Storage error during %s: %s", action, exc)
            return OperationResult(exc.status, message="Internal error while processing request.")
        except LeaderboardError as exc:
            log.info("%s rejected: %s: %s", action, type(exc).__name__, exc)
            return OperationResult(exc.status, message=str(exc))


def _audit(action: str, board_id: int | None, payload: dict | None = None) -> None:
    # The audit trail must never fail the operation it records.
    try:
        audit.log_event(action, board_id, payload)
    except OSError as exc:
        log.warning("Audit write failed for %s: %s", action, exc)
