# common/api/errors.py

"""
API ERROR NORMALIZATION

Installed as REST_FRAMEWORK["EXCEPTION_HANDLER"].

Canonical body:
    {"error": {"code": "...", "message": "...", "details": [...]}}

Mapping:
- DomainValidationError                   -> 400
- NotFoundError                           -> 404
- InvalidTransition / InvalidState / Conflict -> 409
- ProtectedError (row still referenced)   -> 409
- DRF ValidationError (serializer input)   -> 400, code VALIDATION_ERROR,
                                             details as "field: message"
- any other DatabaseError                 -> 503, generic message
Other DRF exceptions (auth, 405, throttling) keep DRF's default handling.
"""

from __future__ import annotations

import logging

from django.db import DatabaseError
from django.db.models import ProtectedError
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from common.services.exceptions import (
    ConflictError,
    DomainError,
    DomainValidationError,
    InvalidStateError,
    InvalidTransitionError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (DomainValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidTransitionError, status.HTTP_409_CONFLICT),
    (InvalidStateError, status.HTTP_409_CONFLICT),
    (ConflictError, status.HTTP_409_CONFLICT),
)


def error_response(*, code: str, message: str, http_status: int, details=None):
    body = {"code": code, "message": message}
    if details:
        body["details"] = list(details)
    return Response({"error": body}, status=http_status)


def status_for(exc: DomainError) -> int:
    for error_cls, http_status in _STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            return http_status
    return status.HTTP_400_BAD_REQUEST


def _flatten(detail, prefix=""):
    """DRF ValidationError detail (dict / list / nested) -> ["field: message", ...]."""
    if isinstance(detail, dict):
        out = []
        for key, value in detail.items():
            label = "" if key == "non_field_errors" else str(key)
            out.extend(_flatten(value, ".".join(p for p in (prefix, label) if p)))
        return out
    if isinstance(detail, list):
        out = []
        for index, value in enumerate(detail):
            if isinstance(value, (dict, list)):
                out.extend(_flatten(value, f"{prefix}[{index}]"))
            else:
                out.extend(_flatten(value, prefix))
        return out
    return [f"{prefix}: {detail}" if prefix else str(detail)]


def exception_handler(exc, context):
    view = context.get("view")
    view_name = type(view).__name__ if view is not None else None

    if isinstance(exc, DomainError):
        logger.warning(
            "Domain rule rejected request",
            extra={"view": view_name, "code": exc.code, "reason": exc.message},
        )
        return error_response(
            code=exc.code,
            message=exc.message,
            http_status=status_for(exc),
            details=exc.details,
        )

    if isinstance(exc, ProtectedError):
        return error_response(
            code="CONFLICT",
            message="Record is still referenced by other records and cannot be deleted.",
            http_status=status.HTTP_409_CONFLICT,
        )

    if isinstance(exc, ValidationError):
        return error_response(
            code=DomainValidationError.code,
            message="Request body failed validation.",
            http_status=status.HTTP_400_BAD_REQUEST,
            details=_flatten(exc.detail),
        )

    response = drf_exception_handler(exc, context)
    if response is not None:
        return response

    if isinstance(exc, DatabaseError):
        logger.exception("Storage failure", extra={"view": view_name})
        return error_response(
            code="STORAGE_UNAVAILABLE",
            message="The storage layer failed to complete the operation.",
            http_status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    return None
