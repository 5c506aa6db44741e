"""Leaderboard and record persistence (JSON file + in-memory cache)."""
import json
import logging
import os
import threading
from datetime import datetime
from typing import Dict, List

from hiscore.domain.errors import KeyCollision, RecordNotFound, StorageError
from hiscore.domain.leaderboard import Leaderboard
from hiscore.domain.record import Record
from hiscore.infrastructure.repositories.record_store import ranking_key

log = logging.getLogger("hiscore.store")


class JsonRecordStore:
    """File-backed store. With ``data_path=None`` nothing touches the disk."""

    def __init__(self, data_path: str | None = None):
        self._data_path = data_path
        self._lock = threading.RLock()
        self._boards: Dict[int, Leaderboard] = {}
        self._records: Dict[int, Record] = {}
        self._next_board_id = 1
        self._next_record_id = 1
        self._load()

    # ------------------------------------------------------------------
    # Leaderboards
    # ------------------------------------------------------------------

    def list_leaderboards(self) -> List[Leaderboard]:
        with self._lock:
            return list(self._boards.values())

    def find_leaderboard_by_private_key(self, key: str) -> Leaderboard | None:
        with self._lock:
            return next(
                (b for b in self._boards.values() if b.private_key == key), None
            )

    def find_leaderboard_by_public_key(self, key: str) -> Leaderboard | None:
        with self._lock:
            return next(
                (b for b in self._boards.values() if b.public_key == key), None
            )

    def insert_leaderboard(self, leaderboard: Leaderboard) -> Leaderboard:
        """Insert and return the board with its id. Keys must be unused."""
        with self._lock:
            for board in self._boards.values():
                if board.private_key == leaderboard.private_key:
                    raise KeyCollision("private_key already in use")
                if board.public_key == leaderboard.public_key:
                    raise KeyCollision("public_key already in use")
            stored = leaderboard.with_id(self._next_board_id)
            boards = {**self._boards, stored.board_id: stored}
            self._commit(boards=boards, next_board_id=self._next_board_id + 1)
            return stored

    def touch_leaderboard(self, board_id: int, timestamp: datetime) -> None:
        with self._lock:
            board = self._boards.get(board_id)
            if board is None:
                return
            self._commit(boards={**self._boards, board_id: board.touched(timestamp)})

    def delete_leaderboard(self, board_id: int) -> None:
        with self._lock:
            boards = {k: b for k, b in self._boards.items() if k != board_id}
            records = {k: r for k, r in self._records.items() if r.board_id != board_id}
            self._commit(boards=boards, records=records)

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def list_records_for_board(self, board_id: int) -> List[Record]:
        with self._lock:
            records = [r for r in self._records.values() if r.board_id == board_id]
        records.sort(key=ranking_key)
        return records

    def insert_record(self, record: Record) -> int:
        with self._lock:
            if record.board_id not in self._boards:
                raise StorageError(f"Leaderboard {record.board_id} does not exist.")
            record_id = self._next_record_id
            records = {**self._records, record_id: record.with_identity(record.board_id, record_id)}
            self._commit(records=records, next_record_id=record_id + 1)
            return record_id

    def replace_record(self, record_id: int, record: Record) -> None:
        """Overwrite a record in place. Board and record id are kept."""
        with self._lock:
            current = self._records.get(record_id)
            if current is None:
                raise RecordNotFound(f"Record {record_id} not found.")
            replacement = record.with_identity(current.board_id, record_id)
            self._commit(records={**self._records, record_id: replacement})

    def delete_record(self, record_id: int) -> None:
        with self._lock:
            if record_id not in self._records:
                return
            self._commit(records={k: r for k, r in self._records.items() if k != record_id})

    def find_record(self, board_id: int, record_id: int) -> Record | None:
        with self._lock:
            record = self._records.get(record_id)
        if record is None or record.board_id != board_id:
            return None
        return record

    # ------------------------------------------------------------------
    # File I/O
    # ------------------------------------------------------------------

    def _load(self) -> None:
        if not self._data_path or not os.path.exists(self._data_path):
            return
        try:
            with open(self._data_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as exc:
            log.warning("Ignoring unreadable store file %s: %s", self._data_path, exc)
            return

        for raw in data.get("leaderboards", []):
            board = Leaderboard.from_dict(raw)
            self._boards[board.board_id] = board
        for raw in data.get("records", []):
            record = Record.from_dict(raw)
            self._records[record.record_id] = record
        self._next_board_id = data.get("next_board_id", max(self._boards, default=0) + 1)
        self._next_record_id = data.get("next_record_id", max(self._records, default=0) + 1)

    def _commit(
        self,
        boards: Dict[int, Leaderboard] | None = None,
        records: Dict[int, Record] | None = None,
        next_board_id: int | None = None,
        next_record_id: int | None = None,
    ) -> None:
        """Persist the new state, then make it current. Memory is untouched on failure."""
        state = {
            "boards": self._boards if boards is None else boards,
            "records": self._records if records is None else records,
            "next_board_id": self._next_board_id if next_board_id is None else next_board_id,
            "next_record_id": self._next_record_id if next_record_id is None else next_record_id,
        }
        self._persist(**state)
        self._boards = state["boards"]
        self._records = state["records"]
        self._next_board_id = state["next_board_id"]
        self._next_record_id = state["next_record_id"]

    def _persist(self, boards, records, next_board_id, next_record_id) -> None:
        if not self._data_path:
            return
        payload = {
            "next_board_id": next_board_id,
            "next_record_id": next_record_id,
            "leaderboards": [b.to_dict() for b in boards.values()],
            "records": [r.to_dict() for r in records.values()],
        }
        # Readers of data_path only ever see a complete file.
        tmp_path = f"{self._data_path}.tmp"
        try:
            directory = os.path.dirname(self._data_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self._data_path)
        except OSError as exc:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StorageError(f"Could not write {self._data_path}: {exc}") from exc
