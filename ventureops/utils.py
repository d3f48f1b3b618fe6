"""Shared utility functions used across ventureops modules."""
from __future__ import annotations

import json
from datetime import date
from typing import Any

_MISSING = object()


def json_parse(value: str | None, default: Any = _MISSING) -> Any:
    """Safely parse a JSON string, returning *default* on failure.

    If no default is given, returns ``[]`` on parse error.
    """
    try:
        return json.loads(value or "")
    except (json.JSONDecodeError, TypeError):
        return [] if default is _MISSING else default


def to_date(value: date | str | None) -> date | None:
    """Coerce an ISO date string (or ``date``) to ``date``; empty means missing."""
    if value is None or isinstance(value, date):
        return value
    value = value.strip()
    if not value:
        return None
    return date.fromisoformat(value[:10])


def fmt_amount(amount: float) -> str:
    """Render an amount without a trailing ``.0`` for whole numbers."""
    if float(amount).is_integer():
        return str(int(amount))
    return f"{amount:.2f}"
