"""Tests for the delivery task template generator."""
from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy import select

from ventureops.delivery import DELIVERY_TEMPLATE, due_date_for, generate_delivery_tasks
from ventureops.models import DeliveryProject, DeliveryTask

TODAY = date(2026, 3, 10)


@pytest.fixture()
def project(session, venture) -> DeliveryProject:
    proj = DeliveryProject(venture_id=venture.id, name="[Delivery] Acme-Site", budget=1000)
    session.add(proj)
    session.commit()
    return proj


class TestDueDates:
    def test_offsets(self):
        start, end = date(2026, 1, 1), date(2026, 12, 31)
        dues = [due_date_for(t, start, end) for t in DELIVERY_TEMPLATE]
        assert dues == [date(2026, 1, 15), None, date(2026, 12, 17), date(2026, 12, 31)]

    def test_no_end_date(self):
        dues = [due_date_for(t, date(2026, 1, 1), None) for t in DELIVERY_TEMPLATE]
        assert dues == [date(2026, 1, 15), None, None, None]

    def test_crosses_month_and_leap_day(self):
        dues = [due_date_for(t, date(2028, 2, 20), date(2028, 3, 10)) for t in DELIVERY_TEMPLATE]
        assert dues[0] == date(2028, 3, 5)
        assert dues[2] == date(2028, 2, 25)


class TestGenerate:
    def test_creates_four_ordered_tasks(self, session, venture, project):
        tasks = generate_delivery_tasks(
            session, project.id, venture.id, "2026-01-01", "2026-06-30", today=TODAY,
        )
        session.commit()
        assert [t.position for t in tasks] == [1, 2, 3, 4]
        stored = session.execute(
            select(DeliveryTask).where(DeliveryTask.project_id == project.id).order_by(DeliveryTask.position)
        ).scalars().all()
        assert [t.id for t in stored] == [t.id for t in tasks]
        assert stored[0].due_date == date(2026, 1, 15)
        assert stored[3].priority == "medium"
        assert all(t.venture_id == venture.id for t in stored)

    def test_empty_start_uses_today(self, session, venture, project):
        tasks = generate_delivery_tasks(session, project.id, venture.id, "", None, today=TODAY)
        assert tasks[0].due_date == date(2026, 3, 24)
        assert tasks[2].due_date is None

    def test_project_tasks_relationship(self, session, venture, project):
        generate_delivery_tasks(session, project.id, venture.id, date(2026, 1, 1), None, today=TODAY)
        session.commit()
        session.expire_all()
        assert [t.title for t in session.get(DeliveryProject, project.id).tasks] == [
            t.title for t in DELIVERY_TEMPLATE
        ]
