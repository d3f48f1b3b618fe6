"""Business cascades triggered by recorded contracts, transactions and staff.

Each entry point validates its categorical input before touching the store,
then performs every secondary write inside one :func:`ventureops.db.transaction`.
Either all records of an invocation are committed or none are.
"""
from __future__ import annotations

import logging
import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable

from sqlalchemy.orm import Session

from ventureops.contacts import resolve_and_touch
from ventureops.db import transaction
from ventureops.delivery import generate_delivery_tasks
from ventureops.errors import InvalidDirectionError, InvalidTransactionTypeError
from ventureops.models import (
    ContractDirection,
    DeliveryProject,
    Invoice,
    Milestone,
    ProcurementOrder,
    StaffRecord,
    TransactionType,
)
from ventureops.schemas import AutoCreated, ContractEvent, StaffEvent, TransactionEvent
from ventureops.utils import fmt_amount

log = logging.getLogger(__name__)

D = ContractDirection

SALES_TAX_RATE = Decimal("0.06")
MILESTONE_THRESHOLD = 5000

ROLE_TAGS: dict[ContractDirection, str] = {
    D.SALES: "client",
    D.PROCUREMENT: "supplier",
    D.OUTSOURCING: "outsourcing-partner",
    D.PARTNERSHIP: "partner",
}

MILESTONE_VERBS: dict[ContractDirection, str] = {
    D.SALES: "Signed client",
    D.PROCUREMENT: "Signed supplier",
    D.OUTSOURCING: "Signed outsourcer",
    D.PARTNERSHIP: "Partnered with",
}

CONTRACT_TYPE_LABELS = {
    "full_time": "full-time",
    "part_time": "part-time",
    "contractor": "contractor",
    "intern": "intern",
}

_CONTRACT_SUFFIX_RE = re.compile(r"\s*(合同|contract)$", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Validation & derivations
# ---------------------------------------------------------------------------


def parse_direction(value: str) -> ContractDirection:
    try:
        return ContractDirection(value)
    except ValueError:
        legal = ", ".join(d.value for d in ContractDirection)
        raise InvalidDirectionError(
            f'Invalid contract direction "{value}". Legal values: {legal}'
        ) from None


def parse_transaction_type(value: str) -> TransactionType:
    try:
        return TransactionType(value)
    except ValueError:
        legal = ", ".join(t.value for t in TransactionType)
        raise InvalidTransactionTypeError(
            f'Invalid transaction type "{value}". Legal values: {legal}'
        ) from None


def delivery_project_name(counterparty: str, title: str) -> str:
    return f"[Delivery] {counterparty}-{_CONTRACT_SUFFIX_RE.sub('', title)}"


def split_tax_inclusive(total: float, rate: Decimal = SALES_TAX_RATE) -> tuple[float, float]:
    """Back out (pretax, tax) from a tax-inclusive *total*, both to 2 decimals."""
    cent = Decimal("0.01")
    gross = Decimal(str(total))
    pretax = (gross / (1 + rate)).quantize(cent, rounding=ROUND_HALF_UP)
    tax = (gross - pretax).quantize(cent, rounding=ROUND_HALF_UP)
    return float(pretax), float(tax)


def _coerce(model, payload: Any):
    if isinstance(payload, model):
        return payload
    if isinstance(payload, dict):
        return model.model_validate(payload)
    return model.model_validate(payload, from_attributes=True)


def _add_milestone(
    session: Session, venture_id: int, title: str, category: str, today: date, description: str = "",
) -> AutoCreated:
    ms = Milestone(
        venture_id=venture_id, title=title, category=category,
        target_date=today, completed_date=today, status="completed",
        description=description,
    )
    session.add(ms)
    session.flush()
    return AutoCreated(module="milestone", action="created", id=ms.id, summary=f"Timeline: {title}")


# ---------------------------------------------------------------------------
# Contract cascade
# ---------------------------------------------------------------------------


def _sales_branch(session: Session, c: ContractEvent, today: date) -> list[AutoCreated]:
    name = delivery_project_name(c.counterparty, c.title)
    start = c.start_date or today
    project = DeliveryProject(
        venture_id=c.venture_id, contract_id=c.id, name=name,
        description=f"Linked contract {c.id}, amount {fmt_amount(c.amount)}",
        status="planning", start_date=start, end_date=c.end_date,
        budget=c.amount, spent=0.0,
    )
    session.add(project)
    session.flush()
    effects = [AutoCreated(module="project", action="created", id=project.id,
                           summary=f"Created delivery project '{name}'")]
    for task in generate_delivery_tasks(session, project.id, c.venture_id, start, c.end_date, today=today):
        effects.append(AutoCreated(module="task", action="created", id=task.id, summary=f"Task: {task.title}"))
    return effects


def _procurement_branch(session: Session, c: ContractEvent, today: date) -> list[AutoCreated]:
    order = ProcurementOrder(
        venture_id=c.venture_id, contract_id=c.id, title=f"Procurement: {c.title}",
        amount=c.amount, status="pending", order_date=today,
        notes=f"Linked contract {c.id}",
    )
    session.add(order)
    session.flush()
    return [AutoCreated(module="procurement", action="created", id=order.id,
                        summary=f"Created procurement order, amount {fmt_amount(c.amount)}")]


def _outsourcing_branch(session: Session, c: ContractEvent, today: date) -> list[AutoCreated]:
    record = StaffRecord(
        venture_id=c.venture_id, employee_name=c.counterparty, position="Outsourced",
        salary=c.amount, start_date=c.start_date or today, end_date=c.end_date,
        contract_type="contractor", status="active",
        notes=f"Linked contract: {c.title}",
    )
    session.add(record)
    session.flush()
    return [AutoCreated(module="hr", action="created", id=record.id,
                        summary=f"Added contractor '{c.counterparty}'")]


def _partnership_branch(session: Session, c: ContractEvent, today: date) -> list[AutoCreated]:
    return []


_BRANCHES: dict[ContractDirection, Callable[[Session, ContractEvent, date], list[AutoCreated]]] = {
    D.SALES: _sales_branch,
    D.PROCUREMENT: _procurement_branch,
    D.OUTSOURCING: _outsourcing_branch,
    D.PARTNERSHIP: _partnership_branch,
}


def on_contract_recorded(
    session: Session, contract: ContractEvent | Any, *, today: date | None = None, now: datetime | None = None,
) -> list[AutoCreated]:
    """Create the records that follow from a signed contract.

    Raises :class:`InvalidDirectionError` before any store access for an
    unknown direction.
    """
    c = _coerce(ContractEvent, contract)
    direction = parse_direction(c.direction)
    today = today or date.today()
    amount = fmt_amount(c.amount)

    try:
        with transaction(session):
            effects: list[AutoCreated] = []
            tag = ROLE_TAGS[direction]
            resolved = resolve_and_touch(
                session, c.venture_id, c.counterparty, tag,
                f"Contract '{c.title}', amount {amount}", today=today, now=now,
            )
            verb = "Added" if resolved.action == "created" else "Updated"
            effects.append(AutoCreated(module="contact", action=resolved.action, id=resolved.id,
                                       summary=f"{verb} {tag} '{c.counterparty}'"))

            effects.extend(_BRANCHES[direction](session, c, today))

            title = f"{MILESTONE_VERBS[direction]} {c.counterparty}, {amount} {c.title}"
            effects.append(_add_milestone(
                session, c.venture_id, title, "business", today,
                f"Contract type: {c.contract_type}, direction: {direction.value}, amount: {amount}",
            ))
    except Exception as exc:
        log.warning("Contract cascade rolled back for venture %s: %s", c.venture_id, exc)
        raise

    log.info("Contract %s (%s) cascade created %d records", c.id, direction.value, len(effects))
    return effects


# ---------------------------------------------------------------------------
# Transaction cascade
# ---------------------------------------------------------------------------


def on_transaction_recorded(
    session: Session, tx: TransactionEvent | Any, *, today: date | None = None, now: datetime | None = None,
) -> list[AutoCreated]:
    """Create the contact, invoice and milestone that follow from a ledger entry."""
    t = _coerce(TransactionEvent, tx)
    tx_type = parse_transaction_type(t.type)
    today = today or date.today()
    amount = fmt_amount(t.amount)
    income = tx_type is TransactionType.INCOME

    try:
        with transaction(session):
            effects: list[AutoCreated] = []

            if t.counterparty:
                tag = "client" if income else "supplier"
                note = f"{'Income' if income else 'Expense'}: {t.description}, {amount}"
                resolved = resolve_and_touch(session, t.venture_id, t.counterparty, tag, note, today=today, now=now)
                verb = "Added" if resolved.action == "created" else "Updated"
                effects.append(AutoCreated(module="contact", action=resolved.action, id=resolved.id,
                                           summary=f"{verb} {tag} '{t.counterparty}'"))

            if income and t.amount > 0:
                pretax, tax = split_tax_inclusive(t.amount)
                invoice = Invoice(
                    venture_id=t.venture_id, transaction_id=t.id, type="sales",
                    counterparty=t.counterparty, amount=pretax, tax_rate=float(SALES_TAX_RATE),
                    tax_amount=tax, total_amount=t.amount, status="draft", issue_date=today,
                    notes=f"Linked transaction: {t.description}",
                )
                session.add(invoice)
                session.flush()
                effects.append(AutoCreated(module="invoice", action="created", id=invoice.id,
                                           summary=f"Drafted sales invoice: total {amount}, tax {tax:.2f}"))

            if abs(t.amount) >= MILESTONE_THRESHOLD:
                label = "Received" if income else "Paid"
                title = " ".join(part for part in (label, t.counterparty, amount) if part)
                effects.append(_add_milestone(session, t.venture_id, title, "finance", today, t.description))
    except Exception as exc:
        log.warning("Transaction cascade rolled back for venture %s: %s", t.venture_id, exc)
        raise

    log.info("Transaction %s (%s) cascade created %d records", t.id, tx_type.value, len(effects))
    return effects


# ---------------------------------------------------------------------------
# Staff cascade
# ---------------------------------------------------------------------------


def on_staff_added(
    session: Session, staff: StaffEvent | Any, *, today: date | None = None,
) -> list[AutoCreated]:
    s = _coerce(StaffEvent, staff)
    today = today or date.today()
    label = CONTRACT_TYPE_LABELS.get(s.contract_type, "full-time")
    title = f"Team +1: {s.employee_name} joined as {s.position} ({label})"

    try:
        with transaction(session):
            effect = _add_milestone(
                session, s.venture_id, title, "team", today,
                f"Monthly salary {fmt_amount(s.salary)}, employment type: {s.contract_type}",
            )
    except Exception as exc:
        log.warning("Staff cascade rolled back for venture %s: %s", s.venture_id, exc)
        raise

    log.info("Staff %s cascade created milestone %s", s.id, effect.id)
    return [effect]
