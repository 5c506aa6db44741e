"""Use case: keep a leaderboard within its maximum size."""
import logging

log = logging.getLogger("hiscore.pruner")

DEFAULT_MAX_LEADERBOARD_SIZE = 1000


def prune(board_id: int, store, ceiling: int = DEFAULT_MAX_LEADERBOARD_SIZE) -> int:
    """
    Delete every record ranked below ``ceiling`` and return how many went.

    Ranking is the store order (score descending, then record id ascending),
    so among equal scores at the boundary the newest record is evicted first.
    Idempotent: a board already within the ceiling is left untouched.
    """
    if ceiling < 1:
        raise ValueError(f"ceiling must be positive, got {ceiling}.")

    records = store.list_records_for_board(board_id)
    overflow = records[ceiling:]
    for record in overflow:
        store.delete_record(record.record_id)

    if overflow:
        log.info(
            "Pruned %d record(s) from leaderboard %s (ceiling %d).",
            len(overflow), board_id, ceiling,
        )
    return len(overflow)
