"""Reconciliation rules: does an incoming score insert, replace or get dropped."""
from typing import Iterable

from hiscore.domain.enums import DecisionKind
from hiscore.domain.record import Record

REJECT_LOWER_SCORE = "incoming score not higher"


class Decision:
    """Outcome of reconciling one submission against a board snapshot."""

    def __init__(
        self,
        kind: DecisionKind,
        target_record_id: int | None = None,
        reason: str | None = None,
    ):
        self.kind = kind
        self.target_record_id = target_record_id
        self.reason = reason

    @staticmethod
    def insert() -> "Decision":
        return Decision(DecisionKind.INSERT)

    @staticmethod
    def replace(target_record_id: int) -> "Decision":
        return Decision(DecisionKind.REPLACE, target_record_id=target_record_id)

    @staticmethod
    def reject(reason: str) -> "Decision":
        return Decision(DecisionKind.REJECT, reason=reason)

    @property
    def is_write(self) -> bool:
        return self.kind is not DecisionKind.REJECT

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "target_record_id": self.target_record_id,
            "reason": self.reason,
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, Decision):
            return NotImplemented
        return (
            self.kind == other.kind
            and self.target_record_id == other.target_record_id
            and self.reason == other.reason
        )

    def __repr__(self) -> str:
        if self.kind is DecisionKind.REPLACE:
            return f"Decision(replace {self.target_record_id})"
        if self.kind is DecisionKind.REJECT:
            return f"Decision(reject: {self.reason})"
        return "Decision(insert)"


def find_same_name(name: str, existing_records: Iterable[Record]) -> Record | None:
    """First record whose name equals ``name`` exactly (case-sensitive)."""
    for record in existing_records:
        if record.name is not None and record.name == name:
            return record
    return None


def reconcile(incoming: Record, existing_records: Iterable[Record]) -> Decision:
    """
    Decide how ``incoming`` lands on a board whose current records are
    ``existing_records`` (score descending).

    Anonymous records always insert. A named record replaces a same-named
    one when its score is at least as high, and is rejected otherwise.
    Pure function: the caller applies the decision.
    """
    if incoming.name is None:
        return Decision.insert()

    match = find_same_name(incoming.name, existing_records)
    if match is None:
        return Decision.insert()

    if match.score <= incoming.score:
        return Decision.replace(match.record_id)
    return Decision.reject(REJECT_LOWER_SCORE)
