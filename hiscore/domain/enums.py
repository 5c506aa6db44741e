"""Enums shared across the domain."""
from enum import Enum


class DecisionKind(str, Enum):
    INSERT = "insert"
    REPLACE = "replace"
    REJECT = "reject"


class ResultStatus(str, Enum):
    OK = "OK"
    KEY_NOT_FOUND = "KEY_NOT_FOUND"
    RECORD_NOT_FOUND = "RECORD_NOT_FOUND"
    INVALID_INPUT = "INVALID_INPUT"
    STORAGE_ERROR = "STORAGE_ERROR"

    def is_ok(self) -> bool:
        return self is ResultStatus.OK
