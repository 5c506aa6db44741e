"""Application settings and environment helpers."""
import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

PACKAGE_DIR = Path(__file__).resolve().parent
PROJECT_DIR = PACKAGE_DIR.parent
load_dotenv(PROJECT_DIR / ".env", override=False)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from exc


def _split_csv(raw: str | None) -> List[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


# Persistence ----------------------------------------------------------------
# Empty DATABASE_URL -> JSON file store under DATA_DIR (development only).
DATABASE_URL = os.getenv("DATABASE_URL", "").strip()
DATA_DIR = Path(os.getenv("HISCORE_DATA_DIR") or PROJECT_DIR / "data")


# Leaderboard limits ---------------------------------------------------------
MAX_LEADERBOARD_SIZE = _env_int("MAX_LEADERBOARD_SIZE", 1000)
PRIVATE_KEY_LENGTH = _env_int("PRIVATE_KEY_LENGTH", 31)
PUBLIC_KEY_LENGTH = _env_int("PUBLIC_KEY_LENGTH", 20)
KEY_GENERATION_MAX_ATTEMPTS = _env_int("KEY_GENERATION_MAX_ATTEMPTS", 1000)


# HTTP / runtime ---------------------------------------------------------------
ALLOWED_ORIGINS = _split_csv(os.getenv("ALLOWED_ORIGINS")) or ["*"]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


__all__ = [
    "ALLOWED_ORIGINS",
    "DATABASE_URL",
    "DATA_DIR",
    "KEY_GENERATION_MAX_ATTEMPTS",
    "LOG_LEVEL",
    "MAX_LEADERBOARD_SIZE",
    "PRIVATE_KEY_LENGTH",
    "PROJECT_DIR",
    "PUBLIC_KEY_LENGTH",
]
