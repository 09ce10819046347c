# medication_requests/tests/test_request_lifecycle.py

from django.test import SimpleTestCase

from common.services.exceptions import InvalidTransitionError
from medication_requests.models import RequestStatus
from medication_requests.services.request_lifecycle import (
    ALLOWED_TRANSITIONS,
    TERMINAL_STATES,
    can_transition,
    reachable_from,
    validate_transition,
)

S = RequestStatus


class RequestLifecycleRulesTests(SimpleTestCase):
    """
    Pure transition-table tests (no database).

    GUARANTEES:
    - the table covers every status
    - DESPACHADA is reachable from PENDIENTE only through APROBADA
    - nothing leaves DESPACHADA or CANCELADA
    """

    def test_table_is_total(self):
        self.assertEqual(set(ALLOWED_TRANSITIONS), set(S.values))

    def test_expected_edges(self):
        expected = {
            S.PENDING: {S.IN_REVIEW, S.CANCELLED},
            S.IN_REVIEW: {S.APPROVED, S.REJECTED, S.INCOMPLETE, S.CANCELLED},
            S.INCOMPLETE: {S.IN_REVIEW, S.CANCELLED},
            S.APPROVED: {S.DISPATCHED, S.CANCELLED},
            S.REJECTED: {S.IN_REVIEW},
            S.DISPATCHED: set(),
            S.CANCELLED: set(),
        }
        for state, targets in expected.items():
            self.assertEqual(set(ALLOWED_TRANSITIONS[state]), targets, state)

    def test_can_transition_matches_table_for_every_pair(self):
        for source in S.values:
            for target in S.values:
                self.assertEqual(
                    can_transition(from_status=source, to_status=target),
                    target in ALLOWED_TRANSITIONS[source] and source not in TERMINAL_STATES,
                    (source, target),
                )

    def test_terminal_states_reach_nothing(self):
        for state in TERMINAL_STATES:
            self.assertEqual(reachable_from(state), set())

    def test_dispatched_only_via_approved(self):
        self.assertIn(S.DISPATCHED, reachable_from(S.PENDING))

        # Only APROBADA has an edge into DESPACHADA.
        predecessors = {s for s, targets in ALLOWED_TRANSITIONS.items() if S.DISPATCHED in targets}
        self.assertEqual(predecessors, {S.APPROVED})

    def test_rejected_can_be_reconsidered(self):
        self.assertTrue(can_transition(from_status=S.REJECTED, to_status=S.IN_REVIEW))
        self.assertFalse(can_transition(from_status=S.REJECTED, to_status=S.APPROVED))

    def test_direct_dispatch_is_engine_only(self):
        with self.assertRaises(InvalidTransitionError):
            validate_transition(request_number=1, from_status=S.APPROVED, to_status=S.DISPATCHED)

        validate_transition(
            request_number=1,
            from_status=S.APPROVED,
            to_status=S.DISPATCHED,
            via_engine=True,
        )

    def test_unknown_status_is_invalid_transition(self):
        with self.assertRaises(InvalidTransitionError):
            validate_transition(request_number=1, from_status=S.PENDING, to_status="ARCHIVADA")
