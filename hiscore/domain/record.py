"""Record entity -- one scored submission on a leaderboard."""
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_ts(value) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


class Record:
    """High-score record. A ``name`` of None marks an anonymous record."""

    def __init__(
        self,
        board_id: int | None,
        score: int,
        name: str | None = None,
        time: int = 0,
        notes: str | None = None,
        record_id: int | None = None,
        submitted_at: datetime | None = None,
        source_address: str | None = None,
    ):
        self._board_id = board_id
        self._record_id = record_id
        self._name = name
        self._score = score
        self._time = time
        self._notes = notes
        self._submitted_at = submitted_at or _utcnow()
        self._source_address = source_address

    @property
    def board_id(self) -> int | None:
        return self._board_id

    @property
    def record_id(self) -> int | None:
        return self._record_id

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def is_anonymous(self) -> bool:
        return self._name is None

    @property
    def score(self) -> int:
        return self._score

    @property
    def time(self) -> int:
        return self._time

    @property
    def notes(self) -> str | None:
        return self._notes

    @property
    def submitted_at(self) -> datetime:
        return self._submitted_at

    @property
    def source_address(self) -> str | None:
        return self._source_address

    def with_identity(self, board_id: int, record_id: int) -> "Record":
        """Copy of this record placed at the given board and record id."""
        return Record(
            board_id=board_id,
            score=self._score,
            name=self._name,
            time=self._time,
            notes=self._notes,
            record_id=record_id,
            submitted_at=self._submitted_at,
            source_address=self._source_address,
        )

    def to_dict(self) -> dict:
        return {
            "board_id": self._board_id,
            "record_id": self._record_id,
            "name": self._name,
            "score": self._score,
            "time": self._time,
            "notes": self._notes,
            "submitted_at": self._submitted_at.isoformat(),
            "source_address": self._source_address,
        }

    def to_public_dict(self) -> dict:
        """Fields safe to hand to clients (no board id, no source address)."""
        return {
            "record_id": self._record_id,
            "name": self._name,
            "score": self._score,
            "time": self._time,
            "notes": self._notes,
            "submitted_at": self._submitted_at.isoformat(),
        }

    @staticmethod
    def from_dict(data: dict) -> "Record":
        return Record(
            board_id=data.get("board_id"),
            score=data["score"],
            name=data.get("name"),
            time=data.get("time", 0),
            notes=data.get("notes"),
            record_id=data.get("record_id"),
            submitted_at=_parse_ts(data.get("submitted_at")),
            source_address=data.get("source_address"),
        )

    def __repr__(self) -> str:
        return (
            f"Record(id={self._record_id}, board={self._board_id}, "
            f"name={self._name!r}, score={self._score})"
        )
