"""Error taxonomy. Each error knows the result status it maps to."""
from hiscore.domain.enums import ResultStatus


class LeaderboardError(Exception):
    status = ResultStatus.STORAGE_ERROR


class InvalidInput(LeaderboardError, ValueError):
    """Malformed or missing submission fields, bad limit or record id."""

    status = ResultStatus.INVALID_INPUT


class KeyNotFound(LeaderboardError, LookupError):
    """A private or public key does not resolve to a leaderboard."""

    status = ResultStatus.KEY_NOT_FOUND


class RecordNotFound(LeaderboardError, LookupError):
    """A record id is not present on the given leaderboard."""

    status = ResultStatus.RECORD_NOT_FOUND


class StorageError(LeaderboardError):
    """Underlying store failure. Never retried by the core."""

    status = ResultStatus.STORAGE_ERROR


class KeyCollision(StorageError):
    """Store rejected a leaderboard whose private or public key already exists."""


class KeyGenerationExhausted(RuntimeError):
    """Raised when key generation keeps colliding. Points at a corrupt key set."""
