from __future__ import annotations

import logging
import os
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Generator, TypeVar

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from ventureops.models import Base

log = logging.getLogger(__name__)

T = TypeVar("T")

_lock = threading.Lock()
_engine = None
_SessionLocal = None

DATA_DIR = Path(__file__).parent / "data"


def _enable_sqlite_fks(dbapi_conn, _record) -> None:
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_engine(url: str, **kwargs) -> Engine:
    """Create an engine with the schema in place and FK enforcement on for SQLite."""
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    engine = create_engine(url, **kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_fks)
    Base.metadata.create_all(engine)
    return engine


def _resolve_url(db: str | Path | None) -> str:
    if db is None:
        db = os.environ.get("VENTUREOPS_DB", "").strip() or DATA_DIR / "ventureops.db"
    if isinstance(db, str) and "://" in db:
        return db
    db_path = Path(db)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{db_path}"


def init_db(db: str | Path | None = None) -> None:
    """Bind the module session factory to *db* (a path or SQLAlchemy URL).

    Falls back to ``$VENTUREOPS_DB`` and then ``data/ventureops.db``.
    """
    global _engine, _SessionLocal
    with _lock:
        if _engine is not None:
            _engine.dispose()
        url = _resolve_url(db)
        _engine = make_engine(url)
        _SessionLocal = sessionmaker(bind=_engine, autoflush=False, expire_on_commit=False)
        log.info("Database ready at %s", _engine.url)


def get_session() -> Session:
    with _lock:
        if _SessionLocal is None:
            raise RuntimeError("init_db() has not been called")
        factory = _SessionLocal
    return factory()  # type: ignore[misc]


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """Context manager providing a session that is always closed.

    Usage (scripts, workers, etc.)::

        with session_scope() as session:
            ...
    """
    session = get_session()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@contextmanager
def transaction(session: Session) -> Generator[Session, None, None]:
    """All-or-nothing unit of work on *session*.

    Commits on normal exit; on any exception rolls back every write made
    since the last commit and re-raises the original error. Raises
    ``RuntimeError`` on entry if the session already holds uncommitted
    changes, so they are never folded into this unit of work.
    """
    if session.new or session.dirty or session.deleted:
        raise RuntimeError("transaction() entered with uncommitted changes; commit or roll back first")
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise


def run_in_transaction(session: Session, fn: Callable[[Session], T]) -> T:
    """Run ``fn(session)`` inside :func:`transaction` and return its result."""
    with transaction(session):
        return fn(session)
