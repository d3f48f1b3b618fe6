"""Counterparty dedup: the single place cascades create or touch contacts."""
from __future__ import annotations

import json
import logging
from datetime import UTC, date, datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from ventureops.models import Contact
from ventureops.schemas import ResolveResult
from ventureops.utils import json_parse

log = logging.getLogger(__name__)


def find_contact(session: Session, venture_id: int, name: str) -> Contact | None:
    return session.execute(
        select(Contact)
        .where(Contact.venture_id == venture_id, Contact.name == name)
        .order_by(Contact.id)
        .limit(1)
    ).scalars().first()


def contact_tags(contact: Contact) -> list[str]:
    return json_parse(contact.tags_json, [])


def contact_notes(contact: Contact) -> list[str]:
    return json_parse(contact.notes_json, [])


def resolve_and_touch(
    session: Session, venture_id: int, name: str, role_tag: str, note_line: str,
    *, today: date, now: datetime | None = None,
) -> ResolveResult:
    """Find the contact named exactly *name* in the venture, or create it.

    An existing contact gets a dated note appended and its last-contact date
    moved to *today*; its tags are left as they are. Runs inside the caller's
    transaction and never commits.
    """
    entry = f"{today.isoformat()} {note_line}"
    existing = find_contact(session, venture_id, name)
    if existing is not None:
        existing.notes_json = json.dumps(contact_notes(existing) + [entry], ensure_ascii=False)
        existing.last_contact_date = today
        existing.updated_at = now or datetime.now(UTC).replace(tzinfo=None)
        session.flush()
        log.debug("Touched contact %s (%s) for venture %s", existing.id, name, venture_id)
        return ResolveResult(action="updated", id=existing.id)

    contact = Contact(
        venture_id=venture_id,
        name=name,
        company_name=name,
        tags_json=json.dumps([role_tag], ensure_ascii=False),
        notes_json=json.dumps([entry], ensure_ascii=False),
        last_contact_date=today,
    )
    if now is not None:
        contact.created_at = contact.updated_at = now
    session.add(contact)
    session.flush()
    log.debug("Created contact %s (%s) tagged %s for venture %s", contact.id, name, role_tag, venture_id)
    return ResolveResult(action="created", id=contact.id)
