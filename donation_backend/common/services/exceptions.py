# common/services/exceptions.py

"""
DOMAIN ERRORS

Centralized error taxonomy shared by every engine:
- NotFoundError           referenced entity absent
- InvalidTransitionError  request lifecycle rule violated
- InvalidStateError       precondition on current state not met
- InsufficientStockError  a debit would drive stock below zero
- ConflictError           uniqueness violated (duplicate dispatch, allocation)
- DomainValidationError   malformed input or dangling references

The presentation layer maps these to HTTP statuses (common/api/errors.py).
"""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain failures."""

    code = "DOMAIN_ERROR"

    def __init__(self, message: str = "", *, details: list[str] | None = None):
        super().__init__(message)
        self.message = message
        self.details = list(details or [])


class NotFoundError(DomainError):
    code = "NOT_FOUND"


class InvalidTransitionError(DomainError):
    code = "INVALID_TRANSITION"


class InvalidStateError(DomainError):
    code = "INVALID_STATE"


class InsufficientStockError(InvalidStateError):
    code = "INSUFFICIENT_STOCK"


class ConflictError(DomainError):
    code = "CONFLICT"


class DomainValidationError(DomainError):
    """Raised for malformed input. `details` lists every problem found."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str = "", *, details: list[str] | None = None):
        details = list(details or [])
        if not message and details:
            message = "; ".join(details)
        super().__init__(message, details=details)
