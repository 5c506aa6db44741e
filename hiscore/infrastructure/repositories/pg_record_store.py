"""PostgreSQL-backed leaderboard/record store (any SQLAlchemy URL works)."""
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from hiscore.domain.errors import KeyCollision, RecordNotFound, StorageError
from hiscore.domain.leaderboard import Leaderboard
from hiscore.domain.record import Record
from hiscore.infrastructure.database.models import LeaderboardModel, RecordModel

log = logging.getLogger("hiscore.store")


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes even for timezone=True columns.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_leaderboard(row: LeaderboardModel) -> Leaderboard:
    return Leaderboard(
        private_key=row.private_key,
        public_key=row.public_key,
        board_id=row.id,
        last_activity=_as_utc(row.last_activity),
    )


def _to_record(row: RecordModel) -> Record:
    return Record(
        board_id=row.board_id,
        score=row.score,
        name=row.name,
        time=row.time,
        notes=row.notes,
        record_id=row.id,
        submitted_at=_as_utc(row.submitted_at),
        source_address=row.source_address,
    )


@contextmanager
def _storage_errors(action: str):
    try:
        yield
    except IntegrityError as exc:
        log.error("Integrity error while %s: %s", action, exc.orig)
        raise StorageError(f"Integrity error while {action}.") from exc
    except SQLAlchemyError as exc:
        log.error("Database error while %s: %s: %s", action, type(exc).__name__, exc)
        raise StorageError(f"Database error while {action}.") from exc


class PgRecordStore:
    """Leaderboard persistence via PostgreSQL."""

    def __init__(self, session_factory):
        self._sf = session_factory

    # ------------------------------------------------------------------
    # Leaderboards
    # ------------------------------------------------------------------

    def list_leaderboards(self) -> List[Leaderboard]:
        with _storage_errors("listing leaderboards"), self._sf() as session:
            rows = session.query(LeaderboardModel).order_by(LeaderboardModel.id).all()
            return [_to_leaderboard(r) for r in rows]

    def find_leaderboard_by_private_key(self, key: str) -> Leaderboard | None:
        with _storage_errors("resolving a private key"), self._sf() as session:
            row = (
                session.query(LeaderboardModel)
                .filter(LeaderboardModel.private_key == key)
                .first()
            )
            return _to_leaderboard(row) if row else None

    def find_leaderboard_by_public_key(self, key: str) -> Leaderboard | None:
        with _storage_errors("resolving a public key"), self._sf() as session:
            row = (
                session.query(LeaderboardModel)
                .filter(LeaderboardModel.public_key == key)
                .first()
            )
            return _to_leaderboard(row) if row else None

    def insert_leaderboard(self, leaderboard: Leaderboard) -> Leaderboard:
        """Insert a new board. Unique key columns raise KeyCollision."""
        try:
            with self._sf() as session:
                row = LeaderboardModel(
                    private_key=leaderboard.private_key,
                    public_key=leaderboard.public_key,
                    last_activity=leaderboard.last_activity,
                )
                session.add(row)
                session.commit()
                log.info("Inserted new leaderboard id=%s", row.id)
                return leaderboard.with_id(row.id)
        except IntegrityError as exc:
            raise KeyCollision("Leaderboard key already in use.") from exc
        except SQLAlchemyError as exc:
            log.error("Database error while inserting a leaderboard: %s", exc)
            raise StorageError("Database error while inserting a leaderboard.") from exc

    def touch_leaderboard(self, board_id: int, timestamp: datetime) -> None:
        with _storage_errors("touching a leaderboard"), self._sf() as session:
            session.query(LeaderboardModel).filter(
                LeaderboardModel.id == board_id
            ).update({LeaderboardModel.last_activity: timestamp}, synchronize_session=False)
            session.commit()

    def delete_leaderboard(self, board_id: int) -> None:
        with _storage_errors("deleting a leaderboard"), self._sf() as session:
            session.query(RecordModel).filter(RecordModel.board_id == board_id).delete(
                synchronize_session=False
            )
            session.query(LeaderboardModel).filter(LeaderboardModel.id == board_id).delete(
                synchronize_session=False
            )
            session.commit()

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def list_records_for_board(self, board_id: int) -> List[Record]:
        with _storage_errors("listing records"), self._sf() as session:
            rows = (
                session.query(RecordModel)
                .filter(RecordModel.board_id == board_id)
                .order_by(RecordModel.score.desc(), RecordModel.id.asc())
                .all()
            )
            return [_to_record(r) for r in rows]

    def insert_record(self, record: Record) -> int:
        with _storage_errors("inserting a record"), self._sf() as session:
            row = RecordModel(
                board_id=record.board_id,
                name=record.name,
                score=record.score,
                time=record.time,
                notes=record.notes,
                source_address=record.source_address,
                submitted_at=record.submitted_at,
            )
            session.add(row)
            session.commit()
            return row.id

    def replace_record(self, record_id: int, record: Record) -> None:
        """Overwrite every mutable field of an existing record in place."""
        with _storage_errors("replacing a record"), self._sf() as session:
            row = session.get(RecordModel, record_id)
            if row is None:
                raise RecordNotFound(f"Record {record_id} not found.")
            row.name = record.name
            row.score = record.score
            row.time = record.time
            row.notes = record.notes
            row.source_address = record.source_address
            row.submitted_at = record.submitted_at
            session.commit()

    def delete_record(self, record_id: int) -> None:
        with _storage_errors("deleting a record"), self._sf() as session:
            session.query(RecordModel).filter(RecordModel.id == record_id).delete(
                synchronize_session=False
            )
            session.commit()

    def find_record(self, board_id: int, record_id: int) -> Record | None:
        with _storage_errors("looking up a record"), self._sf() as session:
            row = (
                session.query(RecordModel)
                .filter(RecordModel.board_id == board_id, RecordModel.id == record_id)
                .first()
            )
            return _to_record(row) if row else None
