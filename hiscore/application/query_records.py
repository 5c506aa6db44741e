"""Use cases: ranked listing and single-record deletion."""
from typing import List

from hiscore.application.board_locks import BoardLockRegistry
from hiscore.domain.errors import RecordNotFound
from hiscore.domain.leaderboard import Leaderboard
from hiscore.domain.record import Record


def list_ranked(store, leaderboard: Leaderboard, limit: int | None = None) -> List[Record]:
    """Records of the board, best first; the top ``limit`` when given."""
    records = store.list_records_for_board(leaderboard.board_id)
    if limit is not None:
        return records[:limit]
    return records


def delete_one(
    store,
    leaderboard: Leaderboard,
    record_id: int,
    locks: BoardLockRegistry,
) -> Record:
    """Delete a record that must belong to ``leaderboard``."""
    with locks.hold(leaderboard.board_id):
        record = store.find_record(leaderboard.board_id, record_id)
        if record is None:
            raise RecordNotFound("The requested record could not be found.")
        store.delete_record(record_id)
    return record
