# common/tests/test_errors.py

from django.db import OperationalError
from django.db.models import ProtectedError
from django.test import SimpleTestCase
from rest_framework.exceptions import NotAuthenticated, ValidationError

from common.api.errors import exception_handler
from common.services.exceptions import (
    ConflictError,
    DomainValidationError,
    InsufficientStockError,
    InvalidStateError,
    InvalidTransitionError,
    NotFoundError,
)


class ExceptionHandlerTests(SimpleTestCase):
    """
    GUARANTEES:
    - each domain error kind maps to one HTTP status
    - body shape is {"error": {"code", "message", "details"?}}
    - storage failures never leak internals
    """

    context = {"view": None}

    def test_domain_errors_map_to_statuses(self):
        cases = [
            (DomainValidationError("bad"), 400, "VALIDATION_ERROR"),
            (NotFoundError("missing"), 404, "NOT_FOUND"),
            (InvalidTransitionError("nope"), 409, "INVALID_TRANSITION"),
            (InvalidStateError("state"), 409, "INVALID_STATE"),
            (InsufficientStockError("short"), 409, "INSUFFICIENT_STOCK"),
            (ConflictError("dup"), 409, "CONFLICT"),
        ]
        for exc, expected_status, expected_code in cases:
            response = exception_handler(exc, self.context)
            self.assertEqual(response.status_code, expected_status, exc)
            self.assertEqual(response.data["error"]["code"], expected_code)
            self.assertEqual(response.data["error"]["message"], exc.message)

    def test_validation_details_are_listed(self):
        exc = DomainValidationError(details=["batch L-9 does not exist", "warehouse 99 does not exist"])
        response = exception_handler(exc, self.context)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(len(response.data["error"]["details"]), 2)
        self.assertIn("batch L-9 does not exist", response.data["error"]["message"])

    def test_protected_error_is_conflict(self):
        response = exception_handler(ProtectedError("still referenced", set()), self.context)
        self.assertEqual(response.status_code, 409)

    def test_storage_failure_is_generic(self):
        response = exception_handler(OperationalError("password authentication failed"), self.context)

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.data["error"]["code"], "STORAGE_UNAVAILABLE")
        self.assertNotIn("password", response.data["error"]["message"])

    def test_drf_errors_keep_default_handling(self):
        response = exception_handler(NotAuthenticated(), self.context)
        self.assertEqual(response.status_code, 401)
        self.assertIn("detail", response.data)

    def test_unknown_errors_are_not_handled(self):
        self.assertIsNone(exception_handler(KeyError("x"), self.context))

    def test_serializer_errors_use_the_error_envelope(self):
        exc = ValidationError(
            {
                "quantity": ["Ensure this value is greater than or equal to 0."],
                "lines": [{}, {"batch": ["This field is required."]}],
                "non_field_errors": ["Expiry date must follow manufacture date."],
            }
        )
        response = exception_handler(exc, self.context)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["code"], "VALIDATION_ERROR")
        details = response.data["error"]["details"]
        self.assertIn("quantity: Ensure this value is greater than or equal to 0.", details)
        self.assertIn("lines[1].batch: This field is required.", details)
        self.assertIn("Expiry date must follow manufacture date.", details)
