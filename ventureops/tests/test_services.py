"""Tests for the recording entry points and read helpers."""
from __future__ import annotations

from datetime import date

import pydantic
import pytest

from ventureops.errors import InvalidDirectionError, VentureNotFoundError
from ventureops.models import Contact, Contract, Invoice, LedgerTransaction, Milestone, StaffRecord
from ventureops.services import (
    add_staff,
    contact_dict,
    effects_dicts,
    list_contacts,
    list_milestones,
    record_contract,
    record_transaction,
    venture_dict,
)

TODAY = date(2026, 3, 10)


class TestRecordContract:
    def test_persists_and_cascades(self, session, venture):
        contract, effects = record_contract(session, {
            "venture_id": venture.id, "title": "Annual support contract", "counterparty": "Globex",
            "direction": "sales", "amount": 24000, "start_date": "2026-04-01", "end_date": "2027-03-31",
        }, today=TODAY)
        assert contract.id is not None
        assert contract.status == "active"
        assert session.get(Contract, contract.id).direction == "sales"
        assert [e.module for e in effects][:2] == ["contact", "project"]

    def test_invalid_direction_writes_nothing(self, session, venture, count_rows):
        with pytest.raises(InvalidDirectionError):
            record_contract(session, {
                "venture_id": venture.id, "title": "X", "counterparty": "Y", "direction": "gift",
            }, today=TODAY)
        assert count_rows(Contract) == 0
        assert count_rows(Contact) == 0

    @pytest.mark.parametrize("amount", [float("nan"), float("inf")])
    def test_non_finite_amount_rejected(self, session, venture, count_rows, amount):
        with pytest.raises(pydantic.ValidationError):
            record_contract(session, {
                "venture_id": venture.id, "title": "X", "counterparty": "Y",
                "direction": "sales", "amount": amount,
            }, today=TODAY)
        assert count_rows(Contract) == 0

    def test_unknown_venture(self, session, count_rows):
        with pytest.raises(VentureNotFoundError, match="Venture 77 not found"):
            record_contract(session, {
                "venture_id": 77, "title": "X", "counterparty": "Y", "direction": "sales",
            }, today=TODAY)
        assert count_rows(Contract) == 0


class TestRecordTransaction:
    def test_defaults_transaction_date(self, session, venture):
        tx, effects = record_transaction(session, {
            "venture_id": venture.id, "type": "income", "amount": 5300, "counterparty": "Globex",
            "description": "Deposit",
        }, today=TODAY)
        assert tx.transaction_date == TODAY
        assert [e.module for e in effects] == ["contact", "invoice", "milestone"]
        assert session.get(LedgerTransaction, tx.id).amount == 5300

    def test_amount_must_be_positive(self, session, venture, count_rows):
        with pytest.raises(pydantic.ValidationError, match="greater than 0"):
            record_transaction(session, {"venture_id": venture.id, "type": "expense", "amount": 0})
        assert count_rows(LedgerTransaction) == 0

    @pytest.mark.parametrize("amount", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_amount_rejected(self, session, venture, count_rows, amount):
        with pytest.raises(pydantic.ValidationError):
            record_transaction(session, {"venture_id": venture.id, "type": "income", "amount": amount})
        assert count_rows(LedgerTransaction) == 0
        assert count_rows(Invoice) == 0

    def test_invoice_links_transaction(self, session, venture):
        tx, effects = record_transaction(session, {
            "venture_id": venture.id, "type": "income", "amount": 106,
        }, today=TODAY)
        invoice = session.get(Invoice, effects[0].id)
        assert invoice.transaction_id == tx.id
        assert invoice.counterparty == ""


class TestAddStaff:
    def test_adds_record_and_milestone(self, session, venture):
        record, effects = add_staff(session, {
            "venture_id": venture.id, "employee_name": "Rin", "position": "Engineer",
            "contract_type": "part_time", "salary": 6000,
        }, today=TODAY)
        assert session.get(StaffRecord, record.id).status == "active"
        assert record.start_date == TODAY
        milestone = session.get(Milestone, effects[0].id)
        assert milestone.title == "Team +1: Rin joined as Engineer (part-time)"
        assert "6000" in milestone.description


class TestReads:
    def test_list_contacts_by_tag(self, session, venture):
        record_contract(session, {
            "venture_id": venture.id, "title": "A", "counterparty": "Client Co", "direction": "sales",
        }, today=TODAY)
        record_contract(session, {
            "venture_id": venture.id, "title": "B", "counterparty": "Vendor Co", "direction": "procurement",
        }, today=TODAY)
        assert [c.name for c in list_contacts(session, venture.id)] == ["Client Co", "Vendor Co"]
        assert [c.name for c in list_contacts(session, venture.id, tag="supplier")] == ["Vendor Co"]

    def test_list_milestones(self, session, venture):
        record_transaction(session, {"venture_id": venture.id, "type": "income", "amount": 9000}, today=TODAY)
        add_staff(session, {"venture_id": venture.id, "employee_name": "Q", "position": "PM"}, today=TODAY)
        assert len(list_milestones(session, venture.id)) == 2
        assert [m.category for m in list_milestones(session, venture.id, category="team")] == ["team"]

    def test_dicts(self, session, venture):
        _, effects = record_contract(session, {
            "venture_id": venture.id, "title": "Pact", "counterparty": "Ally", "direction": "partnership",
        }, today=TODAY)
        contact = list_contacts(session, venture.id)[0]
        d = contact_dict(contact)
        assert d["tags"] == ["partner"]
        assert d["last_contact_date"] == "2026-03-10"
        assert venture_dict(venture)["status"] == "active"
        assert effects_dicts(effects)[0] == {
            "module": "contact", "action": "created", "id": contact.id, "summary": "Added partner 'Ally'",
        }
