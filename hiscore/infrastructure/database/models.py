"""SQLAlchemy ORM models -- leaderboards and their records."""
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, relationship

from hiscore.domain.api_key import MAX_KEY_LENGTH

KEY_COLUMN_LENGTH = MAX_KEY_LENGTH


def _utcnow():
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

class Base(DeclarativeBase):
    pass


# ---------------------------------------------------------------------------
# Leaderboards
# ---------------------------------------------------------------------------

class LeaderboardModel(Base):
    __tablename__ = "leaderboards"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Unique constraints are the authoritative guard against key reuse.
    private_key = Column(String(KEY_COLUMN_LENGTH), unique=True, nullable=False, index=True)
    public_key = Column(String(KEY_COLUMN_LENGTH), unique=True, nullable=False, index=True)
    last_activity = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    records = relationship(
        "RecordModel",
        back_populates="leaderboard",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="select",
    )


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

class RecordModel(Base):
    __tablename__ = "records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    board_id = Column(
        Integer, ForeignKey("leaderboards.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # NULL name = anonymous; no unique constraint, dedupe happens in reconciliation.
    name = Column(String(30), nullable=True)
    score = Column(Integer, nullable=False)
    time = Column(Integer, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    source_address = Column(String(45), nullable=True)
    submitted_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    leaderboard = relationship("LeaderboardModel", back_populates="records")

    __table_args__ = (
        Index("ix_records_board_score", "board_id", "score"),
    )
