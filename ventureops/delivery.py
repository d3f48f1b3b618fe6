"""Standard four-step delivery checklist for a sales contract's project."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from sqlalchemy.orm import Session

from ventureops.models import DeliveryTask
from ventureops.utils import to_date


@dataclass(frozen=True)
class TaskTemplate:
    title: str
    priority: str
    days_after_start: int | None = None
    days_before_end: int | None = None


DELIVERY_TEMPLATE: tuple[TaskTemplate, ...] = (
    TaskTemplate("Requirements & design", "high", days_after_start=14),
    TaskTemplate("Core delivery/build", "high"),
    TaskTemplate("Acceptance & handover", "high", days_before_end=14),
    TaskTemplate("Final payment & closeout", "medium", days_before_end=0),
)


def due_date_for(template: TaskTemplate, start: date, end: date | None) -> date | None:
    if template.days_after_start is not None:
        return start + timedelta(days=template.days_after_start)
    if template.days_before_end is not None and end is not None:
        return end - timedelta(days=template.days_before_end)
    return None


def generate_delivery_tasks(
    session: Session, project_id: int, venture_id: int,
    start_date: date | str | None, end_date: date | str | None,
    *, today: date,
) -> list[DeliveryTask]:
    """Insert the delivery checklist for *project_id* (caller commits).

    A missing start date is replaced by *today*; tasks keyed off a missing
    end date are left without a due date.
    """
    start = to_date(start_date) or today
    end = to_date(end_date)
    tasks = [
        DeliveryTask(
            project_id=project_id,
            venture_id=venture_id,
            position=i,
            title=t.title,
            priority=t.priority,
            status="todo",
            due_date=due_date_for(t, start, end),
        )
        for i, t in enumerate(DELIVERY_TEMPLATE, start=1)
    ]
    session.add_all(tasks)
    session.flush()
    return tasks
