"""Validation guards for incoming request values."""
import re

from hiscore.domain.errors import InvalidInput

ANONYMOUS_NAME = "NONAME"
MAX_NAME_LENGTH = 30
MAX_NOTES_LENGTH = 255

_INT_RE = re.compile(r"[+-]?[0-9]+")

# Bounds of the 32-bit integer columns the stores use.
INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1


def parse_int(value, field: str) -> int:
    """Accept a 32-bit int or base-10 integer string. Raises InvalidInput otherwise."""
    if isinstance(value, bool):
        raise InvalidInput(f"{field} must be an integer.")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str) and _INT_RE.fullmatch(value.strip()):
        parsed = int(value.strip())
    else:
        raise InvalidInput(f"{field} must be an integer, got {value!r}.")
    if not INT_MIN <= parsed <= INT_MAX:
        raise InvalidInput(f"{field} must be between {INT_MIN} and {INT_MAX}.")
    return parsed


def normalize_name(raw: str | None) -> str | None:
    """
    Map the raw player name to the stored one.

    Missing, blank and the ``NONAME`` sentinel (any case) mean anonymous.
    Everything else is kept verbatim; names are compared case-sensitively.
    """
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise InvalidInput("name must be a string.")
    if not raw.strip() or raw.lower() == ANONYMOUS_NAME.lower():
        return None
    if len(raw) > MAX_NAME_LENGTH:
        raise InvalidInput(f"name must be at most {MAX_NAME_LENGTH} characters.")
    return raw


def validate_notes(notes: str | None) -> str | None:
    if notes is None:
        return None
    if not isinstance(notes, str):
        raise InvalidInput("notes must be a string.")
    if len(notes) > MAX_NOTES_LENGTH:
        raise InvalidInput(f"notes must be at most {MAX_NOTES_LENGTH} characters.")
    return notes


def validate_limit(limit) -> int | None:
    """None means the whole board. Otherwise an integer >= 1."""
    if limit is None:
        return None
    value = parse_int(limit, "limit")
    if value < 1:
        raise InvalidInput(f"limit must be at least 1, got {value}.")
    return value


def validate_record_id(record_id) -> int:
    value = parse_int(record_id, "record_id")
    if value < 1:
        raise InvalidInput(f"record_id must be positive, got {value}.")
    return value
