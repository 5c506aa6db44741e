"""Storage contract, run against the JSON store and the SQLAlchemy store."""
from datetime import datetime, timedelta, timezone

import pytest

from hiscore.domain.errors import KeyCollision, RecordNotFound
from hiscore.domain.leaderboard import Leaderboard


class TestLeaderboards:
    def test_insert_assigns_id(self, any_store, add_board):
        board = add_board(any_store)
        assert board.board_id is not None
        assert any_store.list_leaderboards()[0].board_id == board.board_id

    def test_find_by_each_key(self, any_store, add_board):
        board = add_board(any_store, private_key="priv", public_key="pub")
        assert any_store.find_leaderboard_by_private_key("priv").board_id == board.board_id
        assert any_store.find_leaderboard_by_public_key("pub").board_id == board.board_id

    def test_keys_do_not_cross_resolve(self, any_store, add_board):
        add_board(any_store, private_key="priv", public_key="pub")
        assert any_store.find_leaderboard_by_private_key("pub") is None
        assert any_store.find_leaderboard_by_public_key("priv") is None

    @pytest.mark.parametrize("clash", ["private", "public"])
    def test_duplicate_key_collides(self, any_store, add_board, clash):
        add_board(any_store, private_key="priv", public_key="pub")
        candidate = Leaderboard(
            private_key="priv" if clash == "private" else "other-priv",
            public_key="pub" if clash == "public" else "other-pub",
        )
        with pytest.raises(KeyCollision):
            any_store.insert_leaderboard(candidate)
        assert len(any_store.list_leaderboards()) == 1

    def test_touch_updates_last_activity(self, any_store, add_board):
        board = add_board(any_store)
        later = datetime(2030, 5, 1, 12, 0, tzinfo=timezone.utc)
        any_store.touch_leaderboard(board.board_id, later)
        stored = any_store.find_leaderboard_by_public_key(board.public_key)
        assert stored.last_activity == later

    def test_delete_removes_board_and_records(self, any_store, add_board, make_record):
        board = add_board(any_store)
        any_store.insert_record(make_record(board_id=board.board_id, score=1))
        any_store.delete_leaderboard(board.board_id)
        assert any_store.find_leaderboard_by_private_key(board.private_key) is None
        assert any_store.list_records_for_board(board.board_id) == []


class TestRecords:
    def test_insert_returns_id(self, any_store, add_board, make_record):
        board = add_board(any_store)
        record_id = any_store.insert_record(make_record(board_id=board.board_id, score=3, name="A"))
        record = any_store.find_record(board.board_id, record_id)
        assert (record.record_id, record.name, record.score) == (record_id, "A", 3)

    def test_ranked_order(self, any_store, add_board, make_record):
        board = add_board(any_store)
        ids = [
            any_store.insert_record(make_record(board_id=board.board_id, score=s))
            for s in (5, 9, 5, -1)
        ]
        ranked = [r.record_id for r in any_store.list_records_for_board(board.board_id)]
        assert ranked == [ids[1], ids[0], ids[2], ids[3]]

    def test_replace_keeps_identity(self, any_store, add_board, make_record):
        board = add_board(any_store)
        record_id = any_store.insert_record(make_record(board_id=board.board_id, score=1, name="A"))
        any_store.replace_record(
            record_id,
            make_record(board_id=board.board_id, score=8, name="A", time=12, notes="n"),
        )
        records = any_store.list_records_for_board(board.board_id)
        assert len(records) == 1
        assert (records[0].record_id, records[0].score, records[0].time, records[0].notes) == (
            record_id, 8, 12, "n",
        )

    def test_replace_missing_record(self, any_store, add_board, make_record):
        board = add_board(any_store)
        with pytest.raises(RecordNotFound):
            any_store.replace_record(999, make_record(board_id=board.board_id, score=1))

    def test_find_record_scoped_to_board(self, any_store, add_board, make_record):
        a = add_board(any_store)
        b = add_board(any_store)
        record_id = any_store.insert_record(make_record(board_id=a.board_id, score=1))
        assert any_store.find_record(b.board_id, record_id) is None
        assert any_store.find_record(a.board_id, record_id) is not None

    def test_delete_record(self, any_store, add_board, make_record):
        board = add_board(any_store)
        record_id = any_store.insert_record(make_record(board_id=board.board_id, score=1))
        any_store.delete_record(record_id)
        any_store.delete_record(record_id)
        assert any_store.list_records_for_board(board.board_id) == []

    def test_anonymous_and_fields_round_trip(self, any_store, add_board, make_record):
        board = add_board(any_store)
        submitted = datetime(2024, 3, 1, tzinfo=timezone.utc) + timedelta(seconds=5)
        any_store.insert_record(make_record(
            board_id=board.board_id, score=4, submitted_at=submitted,
            source_address="192.0.2.1", notes="speedrun",
        ))
        record = any_store.list_records_for_board(board.board_id)[0]
        assert record.is_anonymous
        assert record.submitted_at == submitted
        assert record.source_address == "192.0.2.1"
        assert record.notes == "speedrun"
