"""
REQUEST LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed lifecycle transitions
for MedicationRequest entities.

DESIGN PRINCIPLES:
- No database writes
- No stock mutation
- No side effects
- Single source of truth
"""

from __future__ import annotations

from common.services.exceptions import InvalidTransitionError
from medication_requests.models import RequestStatus

# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = frozenset({
    RequestStatus.DISPATCHED,
    RequestStatus.CANCELLED,
})

# Total over RequestStatus: every state has an entry, terminal ones map to nothing.
ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    RequestStatus.PENDING: frozenset({
        RequestStatus.IN_REVIEW,
        RequestStatus.CANCELLED,
    }),
    RequestStatus.IN_REVIEW: frozenset({
        RequestStatus.APPROVED,
        RequestStatus.REJECTED,
        RequestStatus.INCOMPLETE,
        RequestStatus.CANCELLED,
    }),
    RequestStatus.INCOMPLETE: frozenset({
        RequestStatus.IN_REVIEW,
        RequestStatus.CANCELLED,
    }),
    RequestStatus.APPROVED: frozenset({
        RequestStatus.DISPATCHED,
        RequestStatus.CANCELLED,
    }),
    RequestStatus.REJECTED: frozenset({
        RequestStatus.IN_REVIEW,
    }),
    RequestStatus.DISPATCHED: frozenset(),
    RequestStatus.CANCELLED: frozenset(),
}

# Reachable in the table, but entered only by the dispatch engine.
ENGINE_ONLY_TARGETS = frozenset({
    RequestStatus.DISPATCHED,
})

# States in which the requester's free-text lines may change.
EDITABLE_STATES = frozenset({
    RequestStatus.PENDING,
    RequestStatus.IN_REVIEW,
    RequestStatus.INCOMPLETE,
})

# States in which reviewers may attach or remove concrete allocations.
ALLOCATION_STATES = frozenset({
    RequestStatus.IN_REVIEW,
    RequestStatus.INCOMPLETE,
    RequestStatus.APPROVED,
})

_missing = set(RequestStatus.values) - set(ALLOWED_TRANSITIONS)
if _missing:
    raise RuntimeError(f"Transition table is missing states: {sorted(_missing)}")


# ============================================================
# DOMAIN RULES
# ============================================================


def allowed_targets(from_status: str) -> frozenset[str]:
    return ALLOWED_TRANSITIONS.get(from_status, frozenset())


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in allowed_targets(from_status)


def reachable_from(start: str) -> set[str]:
    """Transitive closure of the table from one state (start excluded unless revisited)."""
    seen: set[str] = set()
    frontier = [start]
    while frontier:
        current = frontier.pop()
        for target in allowed_targets(current):
            if target not in seen:
                seen.add(target)
                frontier.append(target)
    return seen


def validate_transition(*, request_number, from_status: str, to_status: str, via_engine: bool = False):
    if to_status not in RequestStatus.values:
        raise InvalidTransitionError(f"Unknown request status '{to_status}'")

    if to_status in ENGINE_ONLY_TARGETS and not via_engine:
        raise InvalidTransitionError(
            f"Request {request_number} can only reach '{to_status}' by creating a dispatch"
        )

    if not can_transition(from_status=from_status, to_status=to_status):
        raise InvalidTransitionError(
            f"Request {request_number} cannot transition from "
            f"'{from_status}' to '{to_status}'"
        )
