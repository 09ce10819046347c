# medication_requests/services/request_state_machine.py

"""
======================================================
PATH: medication_requests/services/request_state_machine.py
======================================================
REQUEST STATE MACHINE

Purpose:
- Execute lifecycle transitions of a MedicationRequest.
- Own every write to MedicationRequest.status.

Rules:
- The current status is read under a row lock INSIDE the transaction, so two
  reviewers racing on the same request are serialized and the loser is
  validated against the winner's state.
- EN_REVISION requires at least one requested medication line.
- APROBADA requires every allocation already attached to be covered by the
  stock of its (warehouse, batch) cell.
- DESPACHADA is entered only by the dispatch engine (mark_dispatched).
- No stock is mutated here.
"""

from __future__ import annotations

import logging

from django.db.models import Prefetch

from common.services.exceptions import (
    DomainValidationError,
    InsufficientStockError,
    InvalidStateError,
    NotFoundError,
)
from common.services.gateway import PersistenceGateway
from inventory.services.stock_ledger import StockLedger
from medication_requests.models import (
    MedicationRequest,
    RequestDetail,
    RequestedMedication,
    RequestStatus,
)
from medication_requests.services.request_lifecycle import validate_transition

logger = logging.getLogger(__name__)


class RequestStateMachine:
    def __init__(self, gateway: PersistenceGateway, ledger: StockLedger | None = None):
        self.gateway = gateway
        self.ledger = ledger or StockLedger(gateway)

    # ============================================================
    # READS
    # ============================================================

    def load(self, request_number) -> MedicationRequest:
        """Request aggregate with its lines, allocations and dispatch loaded."""
        request = (
            self.gateway.objects(MedicationRequest)
            .select_related("user", "beneficiary", "medical_center", "dispatch")
            .prefetch_related(
                Prefetch(
                    "requested_medications",
                    queryset=self.gateway.objects(RequestedMedication).order_by("id"),
                ),
                Prefetch(
                    "details",
                    queryset=self.gateway.objects(RequestDetail)
                    .select_related("warehouse", "batch", "batch__medication")
                    .order_by("id"),
                ),
            )
            .filter(pk=request_number)
            .first()
        )
        if request is None:
            raise NotFoundError(f"Request {request_number} does not exist")
        return request

    def lock(self, request_number) -> MedicationRequest:
        """Row-locked request; callers must already be inside gateway.atomic()."""
        request = self.gateway.locked(MedicationRequest).filter(pk=request_number).first()
        if request is None:
            raise NotFoundError(f"Request {request_number} does not exist")
        return request

    # ============================================================
    # TRANSITIONS
    # ============================================================

    def transition(self, request_number, target_state, observations=None) -> MedicationRequest:
        with self.gateway.atomic():
            request = self.lock(request_number)
            from_status = request.status

            validate_transition(
                request_number=request.number,
                from_status=from_status,
                to_status=target_state,
            )

            if target_state == RequestStatus.IN_REVIEW:
                self._require_requested_medications(request)

            if target_state == RequestStatus.APPROVED:
                self._require_stock_for_details(request)

            self._write_status(request, target_state, observations=observations)

        logger.info(
            "Request transitioned",
            extra={
                "request_number": request.number,
                "from_status": from_status,
                "to_status": target_state,
            },
        )
        return self.load(request.number)

    def confirm(self, request_number) -> MedicationRequest:
        """Requester-side submission for review: PENDIENTE/INCOMPLETA -> EN_REVISION."""
        return self.transition(request_number, RequestStatus.IN_REVIEW)

    # ------------------------------------------------------------
    # Engine-only paths (run inside the dispatch engine's transaction)
    # ------------------------------------------------------------

    def mark_dispatched(self, request: MedicationRequest) -> MedicationRequest:
        self.gateway.require_transaction("mark_dispatched")
        validate_transition(
            request_number=request.number,
            from_status=request.status,
            to_status=RequestStatus.DISPATCHED,
            via_engine=True,
        )
        return self._write_status(request, RequestStatus.DISPATCHED)

    def reopen_approved(self, request: MedicationRequest) -> MedicationRequest:
        """Compensation when a dispatch is deleted: DESPACHADA -> APROBADA."""
        self.gateway.require_transaction("reopen_approved")
        if request.status != RequestStatus.DISPATCHED:
            raise InvalidStateError(
                f"Request {request.number} is '{request.status}', expected '{RequestStatus.DISPATCHED}'"
            )
        return self._write_status(request, RequestStatus.APPROVED)

    # ============================================================
    # GUARDS
    # ============================================================

    def _require_requested_medications(self, request: MedicationRequest) -> None:
        has_lines = (
            self.gateway.objects(RequestedMedication).filter(request_id=request.pk).exists()
        )
        if not has_lines:
            raise DomainValidationError(
                f"Request {request.number} needs at least one requested medication before review"
            )

    def _require_stock_for_details(self, request: MedicationRequest) -> None:
        shortages = []
        details = self.gateway.objects(RequestDetail).filter(request_id=request.pk).order_by("id")

        for detail in details:
            available = self.ledger.available(
                warehouse_id=detail.warehouse_id,
                batch_code=detail.batch_id,
            )
            if detail.quantity > available:
                shortages.append(
                    f"batch {detail.batch_id} in warehouse {detail.warehouse_id}: "
                    f"requested {detail.quantity}, available {available}"
                )

        if shortages:
            raise InsufficientStockError(
                f"Request {request.number} cannot be approved: insufficient stock",
                details=shortages,
            )

    def _write_status(self, request: MedicationRequest, status, *, observations=None) -> MedicationRequest:
        request.status = status
        fields = ["status", "updated_at"]
        if observations is not None:
            request.observations = observations
            fields.append("observations")
        request.save(using=self.gateway.using, update_fields=fields)
        return request
