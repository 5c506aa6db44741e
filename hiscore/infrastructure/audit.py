"""Append-only audit trail for administrative leaderboard events.

One JSON object per line in `<HISCORE_LOG_DIR>/audit.log` (default
`<project>/logs`). A module lock keeps lines whole across threads of one
process.
"""
import json
import os
import threading
from datetime import datetime, timezone
from pathlib import Path

_WRITE_LOCK = threading.Lock()

PROJECT_DIR = Path(__file__).resolve().parents[2]
LOG_DIR = Path(os.environ.get("HISCORE_LOG_DIR") or PROJECT_DIR / "logs")
LOG_FILE = LOG_DIR / "audit.log"


def log_event(action: str, board_id: int | None, payload: dict | None = None) -> None:
    """Record ``action`` against a board. ``payload`` holds event details."""
    line = json.dumps(
        {
            "ts": datetime.now(timezone.utc).isoformat(),
            "action": action,
            "board_id": board_id,
            "payload": dict(payload or {}),
        },
        ensure_ascii=False,
    )
    with _WRITE_LOCK:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        with LOG_FILE.open("a", encoding="utf-8") as f:
            f.write(line + "\n")
