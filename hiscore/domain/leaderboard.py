"""Leaderboard entity -- a ranking addressed by a private and a public key."""
from datetime import datetime, timezone


class Leaderboard:
    """A leaderboard row. ``board_id`` is None until the store assigns one."""

    def __init__(
        self,
        private_key: str,
        public_key: str,
        board_id: int | None = None,
        last_activity: datetime | None = None,
    ):
        self._board_id = board_id
        self._private_key = private_key
        self._public_key = public_key
        self._last_activity = last_activity or datetime.now(timezone.utc)

    @property
    def board_id(self) -> int | None:
        return self._board_id

    @property
    def private_key(self) -> str:
        return self._private_key

    @property
    def public_key(self) -> str:
        return self._public_key

    @property
    def last_activity(self) -> datetime:
        return self._last_activity

    def with_id(self, board_id: int) -> "Leaderboard":
        return Leaderboard(
            private_key=self._private_key,
            public_key=self._public_key,
            board_id=board_id,
            last_activity=self._last_activity,
        )

    def touched(self, timestamp: datetime) -> "Leaderboard":
        return Leaderboard(
            private_key=self._private_key,
            public_key=self._public_key,
            board_id=self._board_id,
            last_activity=timestamp,
        )

    def to_dict(self) -> dict:
        return {
            "board_id": self._board_id,
            "private_key": self._private_key,
            "public_key": self._public_key,
            "last_activity": self._last_activity.isoformat(),
        }

    def to_public_dict(self) -> dict:
        """Only the two keys are surfaced to the creator."""
        return {
            "private_key": self._private_key,
            "public_key": self._public_key,
        }

    @staticmethod
    def from_dict(data: dict) -> "Leaderboard":
        last = data.get("last_activity")
        return Leaderboard(
            private_key=data["private_key"],
            public_key=data["public_key"],
            board_id=data.get("board_id"),
            last_activity=datetime.fromisoformat(last) if last else None,
        )

    def __repr__(self) -> str:
        return f"Leaderboard(id={self._board_id}, public_key={self._public_key!r})"
