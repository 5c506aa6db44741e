"""Storage contract shared by every leaderboard/record backend.

Backends:
  - JsonRecordStore -> in-memory, optionally persisted to a JSON file (dev/tests).
  - PgRecordStore   -> SQLAlchemy (PostgreSQL in production).

Records come back score descending, ties by record id ascending. Any backend
failure is raised as StorageError; duplicate keys as KeyCollision.
"""
from datetime import datetime
from typing import List, Optional, Protocol

from hiscore.domain.leaderboard import Leaderboard
from hiscore.domain.record import Record


class RecordStore(Protocol):
    def list_leaderboards(self) -> List[Leaderboard]: ...

    def find_leaderboard_by_private_key(self, key: str) -> Optional[Leaderboard]: ...

    def find_leaderboard_by_public_key(self, key: str) -> Optional[Leaderboard]: ...

    def insert_leaderboard(self, leaderboard: Leaderboard) -> Leaderboard: ...

    def touch_leaderboard(self, board_id: int, timestamp: datetime) -> None: ...

    def delete_leaderboard(self, board_id: int) -> None: ...

    def list_records_for_board(self, board_id: int) -> List[Record]: ...

    def insert_record(self, record: Record) -> int: ...

    def replace_record(self, record_id: int, record: Record) -> None: ...

    def delete_record(self, record_id: int) -> None: ...

    def find_record(self, board_id: int, record_id: int) -> Optional[Record]: ...


def ranking_key(record: Record) -> tuple:
    """Sort key: highest score first, earliest record id first among ties."""
    return (-record.score, record.record_id)
