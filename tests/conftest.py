"""
Shared pytest fixtures for the hiscore test suite.

Strategy:
- Domain tests: pure in-memory, zero I/O.
- Store tests: the same contract runs against the JSON store (in memory) and
  the SQLAlchemy store (SQLite in memory).
- API tests: FastAPI TestClient over an in-memory JSON store.
DATABASE_URL is cleared so nothing reaches a real database.
"""
import os
import pytest

# ---------------------------------------------------------------------------
# Ensure no real database is touched during the test run
# ---------------------------------------------------------------------------
os.environ.pop("DATABASE_URL", None)


from hiscore.application.leaderboard_service import LeaderboardService
from hiscore.domain.leaderboard import Leaderboard
from hiscore.domain.record import Record
from hiscore.infrastructure.database.connection import (
    ManagedSessionFactory, build_engine, create_tables,
)
from hiscore.infrastructure.repositories.json_record_store import JsonRecordStore
from hiscore.infrastructure.repositories.pg_record_store import PgRecordStore


# ---------------------------------------------------------------------------
# Factories (exposed as fixtures so test modules need no imports from here)
# ---------------------------------------------------------------------------

def _make_record(board_id=1, score=0, name=None, record_id=None, **kwargs) -> Record:
    return Record(board_id=board_id, score=score, name=name, record_id=record_id, **kwargs)


@pytest.fixture
def make_record():
    return _make_record


@pytest.fixture
def add_board():
    """Insert a leaderboard with predictable keys into a store."""
    counter = {"n": 0}

    def _add(store, private_key=None, public_key=None) -> Leaderboard:
        counter["n"] += 1
        n = counter["n"]
        return store.insert_leaderboard(Leaderboard(
            private_key=private_key or f"private-{n}",
            public_key=public_key or f"public-{n}",
        ))

    return _add


# ---------------------------------------------------------------------------
# Audit log goes to a tmp directory for every test
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def tmp_audit_log(monkeypatch, tmp_path):
    import hiscore.infrastructure.audit as audit_mod
    log_dir = tmp_path / "logs"
    monkeypatch.setattr(audit_mod, "LOG_DIR", log_dir)
    monkeypatch.setattr(audit_mod, "LOG_FILE", log_dir / "audit.log")
    return log_dir


# ---------------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------------

@pytest.fixture
def json_store():
    return JsonRecordStore()


@pytest.fixture
def sql_engine():
    engine = build_engine("sqlite://")
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sql_store(sql_engine):
    return PgRecordStore(ManagedSessionFactory.for_engine(sql_engine))


@pytest.fixture(params=["json", "sql"])
def any_store(request):
    return request.getfixturevalue(f"{request.param}_store")


# ---------------------------------------------------------------------------
# Service + FastAPI TestClient
# ---------------------------------------------------------------------------

@pytest.fixture
def service(json_store):
    return LeaderboardService(json_store)


@pytest.fixture
def small_service(json_store):
    """Service with a tiny ceiling so pruning is easy to observe."""
    return LeaderboardService(json_store, max_size=3)


@pytest.fixture
def client(service):
    from fastapi import FastAPI
    from fastapi.testclient import TestClient
    from hiscore.api.routes.leaderboard_routes import router, init_routes

    app = FastAPI()
    init_routes(service)
    app.include_router(router)
    return TestClient(app)


@pytest.fixture
def keys(client):
    """Create a leaderboard through the API and return its key pair."""
    resp = client.get("/lb/CREATE")
    assert resp.status_code == 200, resp.text
    return resp.json()["leaderboard"]
