"""Database engine and session factory.

  - init_engine() reads DATABASE_URL (or takes an explicit URL) once at startup.
  - Repositories receive a ManagedSessionFactory and use it as
        with session_factory() as session:
            ...
    The session is rolled back on any exception and always closed.
"""
import logging
import os
import re
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

log = logging.getLogger("hiscore.db")

_engine = None
_session_factory = None

_QUOTES = "'\""
# A PostgreSQL URL embedded in a longer string, e.g. a pasted psql command.
_EMBEDDED_PG_URL = re.compile(r"postgres(?:ql)?://[^\s'\"]+")


def resolve_database_url(env_var: str = "DATABASE_URL") -> str:
    """Normalised database URL from the environment ("" when unset)."""
    return normalize_database_url(os.environ.get(env_var, ""))


def normalize_database_url(raw: str | None) -> str:
    """
    Clean up a URL as it tends to arrive from hosting dashboards: surrounding
    quotes or whitespace, a whole ``psql '...'`` command, or the ``postgres://``
    scheme SQLAlchemy no longer accepts.
    """
    cleaned = (raw or "").strip().strip(_QUOTES).strip()
    found = _EMBEDDED_PG_URL.search(cleaned)
    url = found.group(0) if found else cleaned
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    return url


def _masked_host(url: str) -> str:
    if "@" in url:
        return url.split("@")[-1].split("?")[0]
    return url.split("://")[0] + "://<local>"


def build_engine(url: str):
    """Create a SQLAlchemy engine, logging the masked host."""
    log.info("Initialising engine -> %s", _masked_host(url))
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise every session sees an empty DB.
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(
        url,
        pool_size=3,
        max_overflow=5,
        pool_timeout=15,
        pool_recycle=1800,
        pool_pre_ping=True,
        echo=False,
    )


def init_engine(url: str | None = None):
    """Initialise the module-level engine and session factory."""
    global _engine, _session_factory

    url = normalize_database_url(url) if url else resolve_database_url()
    if not url:
        raise RuntimeError("DATABASE_URL is empty.")

    _engine = build_engine(url)
    _session_factory = ManagedSessionFactory(
        sessionmaker(bind=_engine, expire_on_commit=False)
    )
    return _engine


def get_engine():
    """Return the active SQLAlchemy engine (may be None)."""
    return _engine


def get_session_factory() -> "ManagedSessionFactory":
    if _session_factory is None:
        raise RuntimeError("Database not initialised. Call init_engine() first.")
    return _session_factory


def create_tables(engine=None) -> None:
    """Create all tables (idempotent)."""
    from hiscore.infrastructure.database.models import Base

    engine = engine or _engine
    if engine is None:
        raise RuntimeError("Database not initialised. Call init_engine() first.")
    Base.metadata.create_all(bind=engine)
    log.info("Tables verified.")


def check_health(engine=None) -> bool:
    """Lightweight connectivity probe."""
    engine = engine or _engine
    if engine is None:
        return False
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as exc:
        log.warning("Database health probe failed: %s: %s", type(exc).__name__, exc)
        return False


class ManagedSessionFactory:
    """Callable passed to repositories; yields a session per unit of work."""

    def __init__(self, sessionmaker_):
        self._sessionmaker = sessionmaker_

    @classmethod
    def for_engine(cls, engine) -> "ManagedSessionFactory":
        return cls(sessionmaker(bind=engine, expire_on_commit=False))

    def __call__(self):
        return self._managed_session()

    @contextmanager
    def _managed_session(self):
        session = self._sessionmaker()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
