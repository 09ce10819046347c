# dispatches/services/dispatch_engine.py

"""
======================================================
PATH: dispatches/services/dispatch_engine.py
======================================================
DISPATCH ENGINE

Purpose:
- Fulfil an approved request: record the Dispatch, move the request to
  DESPACHADA and debit every allocated (warehouse, batch) line.
- Undo a dispatch: re-credit exactly what was debited, delete the Dispatch
  and return the request to APROBADA.

Rules (checked in this order, all before the first write):
1) request must exist                         -> NotFoundError
2) request must not already have a dispatch   -> ConflictError
3) request must be APROBADA                   -> InvalidStateError
4) receiver national ID, when given, is 11 digits and a known Person
                                              -> DomainValidationError / NotFoundError
5) every allocation is covered by stock       -> InsufficientStockError

GUARANTEES:
- Dispatch row, status change and stock debits are ONE transaction.
- A second dispatch for the same request fails with ConflictError, whatever
  the request's status (the one-to-one constraint backs this under races).
- Reversal restores the quantities recorded in the DISPATCH movements,
  so it stays exact even if allocations were edited afterwards.
"""

from __future__ import annotations

import logging

from django.db import IntegrityError

from catalog.models import Person
from common.services.exceptions import (
    ConflictError,
    DomainValidationError,
    InsufficientStockError,
    InvalidStateError,
    NotFoundError,
)
from common.services.gateway import PersistenceGateway
from common.validators import normalize_national_id
from dispatches.models import Dispatch
from inventory.models import StockMovement
from inventory.services.stock_ledger import StockKey, StockLedger
from medication_requests.models import RequestDetail, RequestStatus
from medication_requests.services.request_state_machine import RequestStateMachine

logger = logging.getLogger(__name__)


class DispatchEngine:
    def __init__(
        self,
        gateway: PersistenceGateway,
        ledger: StockLedger | None = None,
        state_machine: RequestStateMachine | None = None,
    ):
        self.gateway = gateway
        self.ledger = ledger or StockLedger(gateway)
        self.state_machine = state_machine or RequestStateMachine(gateway, self.ledger)

    # ============================================================
    # CREATE
    # ============================================================

    def create_dispatch(self, request_number, receiver_national_id=None, *, user=None) -> Dispatch:
        with self.gateway.atomic():
            request = self.state_machine.lock(request_number)

            if self.gateway.objects(Dispatch).filter(request_id=request.pk).exists():
                raise ConflictError(f"Request {request.number} already has a dispatch")

            if request.status != RequestStatus.APPROVED:
                raise InvalidStateError(
                    f"Request {request.number} is '{request.status}'; "
                    f"only '{RequestStatus.APPROVED}' requests can be dispatched"
                )

            receiver = self._resolve_receiver(receiver_national_id)

            details = list(
                self.gateway.objects(RequestDetail)
                .filter(request_id=request.pk)
                .order_by("id")
            )
            self._require_stock(request.number, details)

            dispatch = Dispatch(request=request, receiver=receiver, dispatched_by=user)
            try:
                with self.gateway.atomic():
                    dispatch.save(using=self.gateway.using)
            except IntegrityError as exc:
                raise ConflictError(f"Request {request.number} already has a dispatch") from exc

            self.state_machine.mark_dispatched(request)

            for detail in details:
                self.ledger.debit(
                    warehouse_id=detail.warehouse_id,
                    batch_code=detail.batch_id,
                    quantity=detail.quantity,
                    reason=StockMovement.Reason.DISPATCH,
                    reference=dispatch.stock_reference,
                )

        logger.info(
            "Dispatch created",
            extra={
                "dispatch_number": dispatch.number,
                "request_number": request.number,
                "lines": len(details),
                "receiver": getattr(receiver, "pk", None),
            },
        )
        return dispatch

    # ============================================================
    # UPDATE
    # ============================================================

    def update_receiver(self, dispatch_number, receiver_national_id) -> Dispatch:
        receiver = self._resolve_receiver(receiver_national_id)

        with self.gateway.atomic():
            dispatch = self._lock(dispatch_number)
            dispatch.receiver = receiver
            dispatch.save(using=self.gateway.using, update_fields=["receiver"])

        logger.info(
            "Dispatch receiver updated",
            extra={"dispatch_number": dispatch.number, "receiver": getattr(receiver, "pk", None)},
        )
        return dispatch

    # ============================================================
    # DELETE (reversal)
    # ============================================================

    def delete_dispatch(self, dispatch_number) -> None:
        with self.gateway.atomic():
            dispatch = self._lock(dispatch_number)
            request = self.state_machine.lock(dispatch.request_id)
            reference = dispatch.stock_reference

            debited = (
                self.gateway.objects(StockMovement)
                .filter(reference=reference, reason=StockMovement.Reason.DISPATCH)
                .order_by("id")
            )
            restored = 0
            for movement in debited:
                self.ledger.credit(
                    StockKey(
                        warehouse_id=movement.warehouse_id,
                        medication_code=movement.medication_id,
                        batch_code=movement.batch_id,
                    ),
                    movement.quantity,
                    reason=StockMovement.Reason.DISPATCH_REVERSAL,
                    reference=reference,
                )
                restored += 1

            dispatch.delete(using=self.gateway.using)
            self.state_machine.reopen_approved(request)

        logger.info(
            "Dispatch deleted",
            extra={
                "dispatch_number": dispatch_number,
                "request_number": request.number,
                "lines_restored": restored,
            },
        )

    # ============================================================
    # HELPERS
    # ============================================================

    def _lock(self, dispatch_number) -> Dispatch:
        dispatch = self.gateway.locked(Dispatch).filter(pk=dispatch_number).first()
        if dispatch is None:
            raise NotFoundError(f"Dispatch {dispatch_number} does not exist")
        return dispatch

    def _resolve_receiver(self, receiver_national_id) -> Person | None:
        if receiver_national_id in (None, ""):
            return None

        national_id = normalize_national_id(receiver_national_id)
        if national_id is None:
            raise DomainValidationError("Receiver national ID must be exactly 11 digits")

        receiver = self.gateway.objects(Person).filter(pk=national_id).first()
        if receiver is None:
            raise NotFoundError(f"No person registered with national ID {national_id}")
        return receiver

    def _require_stock(self, request_number, details) -> None:
        shortages = []
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
                f"Request {request_number} cannot be dispatched: insufficient stock",
                details=shortages,
            )
