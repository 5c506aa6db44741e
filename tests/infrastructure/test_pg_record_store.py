"""SQLAlchemy store specifics: error translation and session handling."""
from datetime import datetime

import pytest
from sqlalchemy.exc import OperationalError

from hiscore.domain.errors import KeyCollision, StorageError
from hiscore.domain.leaderboard import Leaderboard
from hiscore.infrastructure.database.models import LeaderboardModel
from hiscore.infrastructure.repositories.pg_record_store import PgRecordStore


class FailingSession:
    """Stands in for a session whose connection has gone away."""

    def query(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    def add(self, obj):
        pass

    def commit(self):
        raise OperationalError("INSERT", {}, Exception("connection refused"))


def _failing_factory():
    from contextlib import contextmanager

    @contextmanager
    def session():
        yield FailingSession()

    return session


class TestErrorTranslation:
    def test_unique_key_violation_is_collision(self, sql_store, add_board):
        add_board(sql_store, private_key="priv", public_key="pub")
        with pytest.raises(KeyCollision):
            sql_store.insert_leaderboard(Leaderboard("priv", "other"))

    def test_store_usable_after_collision(self, sql_store, add_board):
        add_board(sql_store, private_key="priv", public_key="pub")
        with pytest.raises(KeyCollision):
            sql_store.insert_leaderboard(Leaderboard("priv", "other"))
        board = add_board(sql_store, private_key="priv2", public_key="pub2")
        assert board.board_id is not None

    def test_read_failure_is_storage_error(self):
        store = PgRecordStore(_failing_factory())
        with pytest.raises(StorageError):
            store.find_leaderboard_by_private_key("priv")

    def test_write_failure_is_storage_error(self):
        store = PgRecordStore(_failing_factory())
        with pytest.raises(StorageError) as excinfo:
            store.insert_leaderboard(Leaderboard("priv", "pub"))
        assert not isinstance(excinfo.value, KeyCollision)


class TestTimestamps:
    def test_datetimes_come_back_timezone_aware(self, sql_store, add_board, make_record):
        board = add_board(sql_store)
        sql_store.insert_record(make_record(board_id=board.board_id, score=1))
        stored = sql_store.find_leaderboard_by_public_key(board.public_key)
        record = sql_store.list_records_for_board(board.board_id)[0]
        assert stored.last_activity.tzinfo is not None
        assert record.submitted_at.tzinfo is not None

    def test_rows_written_to_tables(self, sql_store, sql_engine, add_board):
        from sqlalchemy.orm import Session

        board = add_board(sql_store, private_key="priv", public_key="pub")
        with Session(sql_engine) as session:
            row = session.get(LeaderboardModel, board.board_id)
            assert (row.private_key, row.public_key) == ("priv", "pub")
            assert isinstance(row.last_activity, datetime)
