from __future__ import annotations

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ventureops.db import make_engine
from ventureops.models import Venture


# ---------------------------------------------------------------------------
# Fixtures: in-memory SQLite database
# ---------------------------------------------------------------------------

@pytest.fixture()
def engine():
    """In-memory engine; StaticPool keeps every connection on the same database."""
    eng = make_engine("sqlite://", poolclass=StaticPool)
    yield eng
    eng.dispose()


@pytest.fixture()
def session(engine):
    SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    sess = SessionLocal()
    try:
        yield sess
    finally:
        sess.close()


@pytest.fixture()
def venture(session: Session) -> Venture:
    v = Venture(
        name="Northwind Studio", industry="Software", owner_name="Sam Lee",
        owner_contact="sam@northwind.dev", status="active",
        registered_capital=100000, description="Test venture",
    )
    session.add(v)
    session.commit()
    return v


@pytest.fixture()
def other_venture(session: Session) -> Venture:
    v = Venture(name="Other Co", industry="Retail", status="active")
    session.add(v)
    session.commit()
    return v


@pytest.fixture()
def count_rows(session: Session):
    """Return a helper counting rows of a model, optionally filtered by column values."""

    def _count(model, **filters) -> int:
        stmt = select(func.count()).select_from(model)
        for key, value in filters.items():
            stmt = stmt.where(getattr(model, key) == value)
        return session.execute(stmt).scalar_one()

    return _count
