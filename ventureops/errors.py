"""Exception taxonomy for ventureops.

Validation errors are raised before anything is written. Store errors
(``sqlalchemy.exc.SQLAlchemyError``) are never wrapped; they propagate
unchanged after the enclosing transaction has been rolled back.
"""
from __future__ import annotations


class VentureOpsError(Exception):
    pass


class ValidationError(VentureOpsError, ValueError):
    """Input was rejected before touching the store."""


class InvalidDirectionError(ValidationError):
    pass


class InvalidTransactionTypeError(ValidationError):
    pass


class InvalidStatusError(ValidationError):
    pass


class IllegalTransitionError(ValidationError):
    def __init__(self, current: str, requested: str, allowed: tuple[str, ...]):
        self.current = current
        self.requested = requested
        self.allowed = allowed
        allowed_text = ", ".join(allowed) if allowed else "none, terminal state"
        super().__init__(
            f'Cannot change status from "{current}" to "{requested}". '
            f"Allowed target statuses: {allowed_text}"
        )


class VentureNotFoundError(VentureOpsError, LookupError):
    def __init__(self, venture_id: int):
        self.venture_id = venture_id
        super().__init__(f"Venture {venture_id} not found")
