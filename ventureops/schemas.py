"""Pydantic payloads for ventureops entry points and their results."""
from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ventureops.utils import to_date


class _DatesMixin(BaseModel):
    """Accept ISO strings for date fields and treat ``""`` as missing."""

    @field_validator(
        "start_date", "end_date", "transaction_date", "reminder_date",
        mode="before", check_fields=False,
    )
    @classmethod
    def empty_date_is_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            return to_date(v)
        return v


# ---------------------------------------------------------------------------
# Ventures
# ---------------------------------------------------------------------------


class VentureCreate(BaseModel):
    name: str
    industry: str = ""
    owner_name: str = ""
    owner_contact: str = ""
    registered_capital: float = Field(default=0.0, allow_inf_nan=False)
    description: str = ""

    @field_validator("registered_capital", mode="before")
    @classmethod
    def capital_default(cls, v: Any) -> Any:
        return 0.0 if v is None else v

    @field_validator("registered_capital")
    @classmethod
    def capital_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("registered_capital must be non-negative")
        return v


class VentureUpdate(BaseModel):
    name: str | None = None
    industry: str | None = None
    description: str | None = None
    owner_contact: str | None = None


# ---------------------------------------------------------------------------
# Cascade event payloads
# ---------------------------------------------------------------------------


class ContractEvent(_DatesMixin):
    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    venture_id: int
    title: str
    counterparty: str
    contract_type: str = ""
    direction: str
    amount: float = Field(default=0.0, allow_inf_nan=False)
    start_date: date | None = None
    end_date: date | None = None


class TransactionEvent(_DatesMixin):
    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    venture_id: int
    type: str
    amount: float = Field(allow_inf_nan=False)
    category: str = "other"
    description: str = ""
    counterparty: str = ""
    transaction_date: date | None = None


class StaffEvent(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    venture_id: int
    employee_name: str
    position: str = ""
    contract_type: str = "full_time"
    salary: float = Field(default=0.0, allow_inf_nan=False)


# ---------------------------------------------------------------------------
# Inputs for the recording services
# ---------------------------------------------------------------------------


class ContractCreate(_DatesMixin):
    venture_id: int
    title: str
    counterparty: str
    contract_type: str = ""
    direction: str
    amount: float = Field(default=0.0, allow_inf_nan=False)
    start_date: date | None = None
    end_date: date | None = None
    status: str = "active"
    key_terms: str = ""
    risk_notes: str = ""
    reminder_date: date | None = None


class TransactionCreate(_DatesMixin):
    venture_id: int
    type: str
    amount: float = Field(gt=0, allow_inf_nan=False)
    category: str = "other"
    description: str = ""
    counterparty: str = ""
    transaction_date: date | None = None


class StaffCreate(_DatesMixin):
    venture_id: int
    employee_name: str
    position: str = ""
    salary: float = Field(default=0.0, allow_inf_nan=False)
    contract_type: str = "full_time"
    start_date: date | None = None
    notes: str = ""


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class AutoCreated(BaseModel):
    """One secondary effect of a cascade."""

    module: str  # contact | project | task | procurement | hr | invoice | milestone
    action: str  # created | updated
    id: int
    summary: str


class ResolveResult(BaseModel):
    action: str
    id: int
