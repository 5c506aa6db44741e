"""Use case: reconcile an incoming score against a leaderboard and apply it."""
import logging

from hiscore.application.board_locks import BoardLockRegistry
from hiscore.application.prune_leaderboard import DEFAULT_MAX_LEADERBOARD_SIZE, prune
from hiscore.domain.enums import DecisionKind
from hiscore.domain.errors import KeyNotFound
from hiscore.domain.leaderboard import Leaderboard
from hiscore.domain.reconciliation import Decision, reconcile
from hiscore.domain.record import Record

log = logging.getLogger("hiscore.submit")


def apply_decision(store, decision: Decision, incoming: Record) -> int | None:
    """Write ``incoming`` as the decision says. Returns the affected record id."""
    if decision.kind is DecisionKind.INSERT:
        return store.insert_record(incoming)
    if decision.kind is DecisionKind.REPLACE:
        store.replace_record(decision.target_record_id, incoming)
        return decision.target_record_id
    return None


def submit_record(
    store,
    leaderboard: Leaderboard,
    incoming: Record,
    locks: BoardLockRegistry,
    max_size: int = DEFAULT_MAX_LEADERBOARD_SIZE,
) -> dict:
    """
    Snapshot, reconcile, write and prune as one critical section per board.
    Pruning runs even when the submission is rejected.
    Returns decision, affected record id (None when nothing was written or
    the record was pruned right away) and number of evicted records.
    """
    board_id = leaderboard.board_id
    with locks.hold(board_id):
        # The board may have been deleted while this call waited for the lock.
        if store.find_leaderboard_by_private_key(leaderboard.private_key) is None:
            raise KeyNotFound("The key associated with this request could not be found.")
        existing = store.list_records_for_board(board_id)
        decision = reconcile(incoming, existing)
        record_id = apply_decision(store, decision, incoming)
        evicted = prune(board_id, store, max_size)
        if evicted and record_id is not None and store.find_record(board_id, record_id) is None:
            # Written below the ceiling and pruned straight away.
            record_id = None

    if decision.kind is DecisionKind.REJECT:
        log.info(
            "Submission for %r on leaderboard %s ignored: %s",
            incoming.name, board_id, decision.reason,
        )

    return {
        "decision": decision,
        "record_id": record_id,
        "evicted": evicted,
    }
