"""Venture registration, attribute updates and the status state machine.

Every status write goes through :func:`transition_status`; ``update_venture``
refuses to touch ``status``.
"""
from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from ventureops.db import transaction
from ventureops.errors import IllegalTransitionError, InvalidStatusError
from ventureops.models import Venture, VentureStatus
from ventureops.schemas import VentureCreate, VentureUpdate

log = logging.getLogger(__name__)

S = VentureStatus

VALID_TRANSITIONS: dict[VentureStatus, tuple[VentureStatus, ...]] = {
    S.PENDING: (S.ACTIVE, S.TERMINATED),
    S.ACTIVE: (S.SUSPENDED, S.ACQUIRED, S.PACKAGED, S.TERMINATED),
    S.SUSPENDED: (S.ACTIVE, S.TERMINATED),
    S.ACQUIRED: (S.TERMINATED,),
    S.PACKAGED: (S.TERMINATED,),
    S.TERMINATED: (),
}

UPDATABLE_FIELDS = ("name", "industry", "description", "owner_contact")


def parse_status(value: str) -> VentureStatus:
    try:
        return VentureStatus(value)
    except ValueError:
        legal = ", ".join(s.value for s in VentureStatus)
        raise InvalidStatusError(f'Unknown venture status "{value}". Legal values: {legal}') from None


def allowed_transitions(status: str | VentureStatus) -> tuple[VentureStatus, ...]:
    return VALID_TRANSITIONS[parse_status(status)]


def _utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


def register_venture(session: Session, data: VentureCreate | dict[str, Any]) -> Venture:
    """Create a venture in ``pending`` status and commit it."""
    if not isinstance(data, VentureCreate):
        data = VentureCreate.model_validate(data)
    venture = Venture(**data.model_dump(), status=VentureStatus.PENDING.value)
    with transaction(session):
        session.add(venture)
        session.flush()
    log.info("Registered venture %s (%s)", venture.id, venture.name)
    return venture


def get_venture(session: Session, venture_id: int) -> Venture | None:
    return session.get(Venture, venture_id)


def list_ventures(session: Session, status: str | None = None) -> list[Venture]:
    stmt = select(Venture).order_by(Venture.created_at.desc(), Venture.id.desc())
    if status:
        stmt = stmt.where(Venture.status == parse_status(status).value)
    return list(session.execute(stmt).scalars().all())


def update_venture(
    session: Session, venture_id: int, updates: VentureUpdate | dict[str, Any],
) -> Venture | None:
    """Apply non-None attribute updates. Returns None if the venture is missing."""
    if not isinstance(updates, VentureUpdate):
        updates = VentureUpdate.model_validate(updates)
    venture = session.get(Venture, venture_id)
    if venture is None:
        return None
    values = updates.model_dump()
    with transaction(session):
        for field in UPDATABLE_FIELDS:
            val = values.get(field)
            if val is not None:
                setattr(venture, field, val)
        venture.updated_at = _utcnow()
    return venture


def delete_venture(session: Session, venture_id: int) -> bool:
    """Delete a venture; the store refuses while dependent records exist."""
    venture = session.get(Venture, venture_id)
    if venture is None:
        return False
    with transaction(session):
        session.delete(venture)
    log.info("Deleted venture %s", venture_id)
    return True


def transition_status(
    session: Session, venture_id: int, target: str | VentureStatus,
    *, now: datetime | None = None,
) -> Venture | None:
    """Move a venture to *target* if the transition table allows it.

    Returns None when the venture does not exist. Raises
    :class:`IllegalTransitionError` for moves outside the table.
    """
    target_status = parse_status(target)
    venture = session.get(Venture, venture_id)
    if venture is None:
        return None

    current = parse_status(venture.status)
    allowed = VALID_TRANSITIONS[current]
    if target_status not in allowed:
        log.warning(
            "Rejected status change for venture %s: %s -> %s",
            venture_id, current.value, target_status.value,
        )
        raise IllegalTransitionError(current.value, target_status.value, tuple(s.value for s in allowed))

    with transaction(session):
        venture.status = target_status.value
        venture.updated_at = now or _utcnow()
    log.info("Venture %s status %s -> %s", venture_id, current.value, target_status.value)
    return venture


def activate_venture(session: Session, venture_id: int) -> Venture | None:
    return transition_status(session, venture_id, VentureStatus.ACTIVE)
