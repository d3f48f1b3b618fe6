"""Recording entry points and read helpers shared by ventureops callers.

The ``record_*`` / ``add_staff`` functions persist a primary record, commit
it, and then run its cascade. A cascade failure rolls back only the
cascade's own writes; the committed primary record stays.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from ventureops.contacts import contact_notes, contact_tags
from ventureops.db import run_in_transaction
from ventureops.errors import VentureNotFoundError
from ventureops.models import Contact, Contract, LedgerTransaction, Milestone, StaffRecord, Venture
from ventureops.schemas import AutoCreated, ContractCreate, StaffCreate, TransactionCreate
from ventureops.workflows import (
    on_contract_recorded,
    on_staff_added,
    on_transaction_recorded,
    parse_direction,
    parse_transaction_type,
)

log = logging.getLogger(__name__)


def _require_venture(session: Session, venture_id: int) -> Venture:
    venture = session.get(Venture, venture_id)
    if venture is None:
        raise VentureNotFoundError(venture_id)
    return venture


def _insert(session: Session, obj):
    def _add(sess: Session):
        sess.add(obj)
        sess.flush()
        return obj
    return run_in_transaction(session, _add)


# ---------------------------------------------------------------------------
# Recording
# ---------------------------------------------------------------------------


def record_contract(
    session: Session, data: ContractCreate | dict[str, Any], *, today: date | None = None,
) -> tuple[Contract, list[AutoCreated]]:
    if not isinstance(data, ContractCreate):
        data = ContractCreate.model_validate(data)
    parse_direction(data.direction)
    _require_venture(session, data.venture_id)
    contract = _insert(session, Contract(**data.model_dump()))
    log.info("Recorded contract %s for venture %s", contract.id, contract.venture_id)
    return contract, on_contract_recorded(session, contract, today=today)


def record_transaction(
    session: Session, data: TransactionCreate | dict[str, Any], *, today: date | None = None,
) -> tuple[LedgerTransaction, list[AutoCreated]]:
    if not isinstance(data, TransactionCreate):
        data = TransactionCreate.model_validate(data)
    parse_transaction_type(data.type)
    _require_venture(session, data.venture_id)
    values = data.model_dump()
    values["transaction_date"] = data.transaction_date or today or date.today()
    tx = _insert(session, LedgerTransaction(**values))
    log.info("Recorded %s transaction %s for venture %s", tx.type, tx.id, tx.venture_id)
    return tx, on_transaction_recorded(session, tx, today=today)


def add_staff(
    session: Session, data: StaffCreate | dict[str, Any], *, today: date | None = None,
) -> tuple[StaffRecord, list[AutoCreated]]:
    if not isinstance(data, StaffCreate):
        data = StaffCreate.model_validate(data)
    _require_venture(session, data.venture_id)
    values = data.model_dump()
    values["start_date"] = data.start_date or today or date.today()
    record = _insert(session, StaffRecord(**values, status="active"))
    log.info("Added staff %s for venture %s", record.id, record.venture_id)
    return record, on_staff_added(session, record, today=today)


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


def list_contacts(session: Session, venture_id: int, tag: str | None = None) -> list[Contact]:
    contacts = session.execute(
        select(Contact).where(Contact.venture_id == venture_id).order_by(Contact.id)
    ).scalars().all()
    if tag:
        contacts = [c for c in contacts if tag in contact_tags(c)]
    return list(contacts)


def list_milestones(session: Session, venture_id: int, category: str | None = None) -> list[Milestone]:
    stmt = select(Milestone).where(Milestone.venture_id == venture_id)
    if category:
        stmt = stmt.where(Milestone.category == category)
    return list(session.execute(stmt.order_by(Milestone.target_date, Milestone.id)).scalars().all())


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------


def _iso(value) -> str | None:
    return value.isoformat() if value else None


def venture_dict(v: Venture) -> dict:
    return {
        "id": v.id, "name": v.name, "industry": v.industry,
        "owner_name": v.owner_name, "owner_contact": v.owner_contact,
        "status": v.status, "registered_capital": v.registered_capital,
        "description": v.description,
        "created_at": _iso(v.created_at), "updated_at": _iso(v.updated_at),
    }


def contact_dict(c: Contact) -> dict:
    return {
        "id": c.id, "venture_id": c.venture_id, "name": c.name,
        "phone": c.phone, "email": c.email, "company_name": c.company_name,
        "tags": contact_tags(c), "notes": contact_notes(c),
        "last_contact_date": _iso(c.last_contact_date),
    }


def effects_dicts(effects: list[AutoCreated]) -> list[dict]:
    return [e.model_dump() for e in effects]
