# medication_requests/services/request_editing.py

"""
REQUEST EDITING SERVICE

Purpose:
- Submit a new request with its requested medication lines.
- Maintain the requester's free-text lines (RequestedMedication).
- Maintain reviewer allocations (RequestDetail) that the dispatch engine debits.

Rules:
- Requested medication lines change only in PENDIENTE, EN_REVISION, INCOMPLETA.
- Allocations change only in EN_REVISION, INCOMPLETA, APROBADA.
- All input is validated before the first write; each call is one transaction.
- Status itself is never written here (see request_state_machine).
"""

from __future__ import annotations

import logging

from django.db import IntegrityError

from catalog.models import Batch, MedicalCenter, Person, Warehouse
from common.services.exceptions import (
    ConflictError,
    DomainValidationError,
    InvalidStateError,
    NotFoundError,
)
from common.services.gateway import PersistenceGateway
from common.validators import normalize_national_id, to_positive_int
from medication_requests.models import (
    MedicationRequest,
    RequestDetail,
    RequestedMedication,
    RequestStatus,
)
from medication_requests.services.request_lifecycle import (
    ALLOCATION_STATES,
    EDITABLE_STATES,
)
from medication_requests.services.request_state_machine import RequestStateMachine

logger = logging.getLogger(__name__)


def _clean_medication_line(line, *, index=None) -> dict:
    label = f"medications[{index}]" if index is not None else "medication"
    if not isinstance(line, dict):
        raise DomainValidationError(f"{label} must be an object with a name")

    name = str(line.get("name") or "").strip()
    if not name:
        raise DomainValidationError(f"{label}.name is required")

    return {"name": name, "dosage": str(line.get("dosage") or "").strip()}


class RequestEditor:
    def __init__(self, gateway: PersistenceGateway, state_machine: RequestStateMachine | None = None):
        self.gateway = gateway
        self.state_machine = state_machine or RequestStateMachine(gateway)

    # ============================================================
    # SUBMISSION
    # ============================================================

    def submit_request(
        self,
        *,
        user,
        pathology: str = "",
        medications=None,
        beneficiary_national_id=None,
        medical_center_id=None,
    ) -> MedicationRequest:
        lines = [
            _clean_medication_line(line, index=i)
            for i, line in enumerate(medications or [])
        ]

        beneficiary = None
        if beneficiary_national_id not in (None, ""):
            national_id = normalize_national_id(beneficiary_national_id)
            if national_id is None:
                raise DomainValidationError("Beneficiary national ID must be exactly 11 digits")
            beneficiary = self.gateway.objects(Person).filter(pk=national_id).first()
            if beneficiary is None:
                raise NotFoundError(f"No person registered with national ID {national_id}")

        medical_center = None
        if medical_center_id not in (None, ""):
            medical_center = self.gateway.objects(MedicalCenter).filter(pk=medical_center_id).first()
            if medical_center is None:
                raise NotFoundError(f"Medical center {medical_center_id} does not exist")

        with self.gateway.atomic():
            request = MedicationRequest(
                user=user,
                beneficiary=beneficiary,
                medical_center=medical_center,
                pathology=(pathology or "").strip(),
                status=RequestStatus.PENDING,
            )
            request.save(using=self.gateway.using)

            self.gateway.objects(RequestedMedication).bulk_create(
                [RequestedMedication(request=request, **line) for line in lines]
            )

        logger.info(
            "Request submitted",
            extra={
                "request_number": request.number,
                "user_id": getattr(user, "pk", None),
                "lines": len(lines),
            },
        )
        return self.state_machine.load(request.number)

    # ============================================================
    # REQUESTED MEDICATIONS (requester wish list)
    # ============================================================

    def add_requested_medication(self, request_number, *, name, dosage="") -> RequestedMedication:
        line = _clean_medication_line({"name": name, "dosage": dosage})

        with self.gateway.atomic():
            request = self.state_machine.lock(request_number)
            self._require_status(request, EDITABLE_STATES, "edit requested medications")

            item = RequestedMedication(request=request, **line)
            item.save(using=self.gateway.using)

        return item

    def update_requested_medication(self, request_number, item_id, *, name=None, dosage=None) -> RequestedMedication:
        with self.gateway.atomic():
            request = self.state_machine.lock(request_number)
            item = self._requested_item(request, item_id)
            self._require_status(request, EDITABLE_STATES, "edit requested medications")

            if name is not None:
                cleaned = str(name).strip()
                if not cleaned:
                    raise DomainValidationError("medication.name cannot be blank")
                item.name = cleaned
            if dosage is not None:
                item.dosage = str(dosage).strip()

            item.save(using=self.gateway.using, update_fields=["name", "dosage"])

        return item

    def remove_requested_medication(self, request_number, item_id) -> None:
        with self.gateway.atomic():
            request = self.state_machine.lock(request_number)
            item = self._requested_item(request, item_id)
            self._require_status(request, EDITABLE_STATES, "edit requested medications")
            item.delete(using=self.gateway.using)

    # ============================================================
    # ALLOCATIONS (reviewer detail lines)
    # ============================================================

    def add_detail(
        self,
        request_number,
        *,
        warehouse_id,
        batch_code,
        quantity,
        dosage_instructions="",
        treatment_duration="",
    ) -> RequestDetail:
        problems = []

        try:
            qty = to_positive_int(quantity)
        except ValueError as exc:
            problems.append(str(exc))
            qty = None

        if not self.gateway.objects(Batch).filter(pk=batch_code).exists():
            problems.append(f"batch {batch_code} does not exist")
        if not self.gateway.objects(Warehouse).filter(pk=warehouse_id).exists():
            problems.append(f"warehouse {warehouse_id} does not exist")

        if problems:
            raise DomainValidationError(details=problems)

        with self.gateway.atomic():
            request = self.state_machine.lock(request_number)
            self._require_status(request, ALLOCATION_STATES, "change allocations")

            duplicate = (
                self.gateway.objects(RequestDetail)
                .filter(request_id=request.pk, warehouse_id=warehouse_id, batch_id=batch_code)
                .exists()
            )
            if duplicate:
                raise ConflictError(
                    f"Batch {batch_code} from warehouse {warehouse_id} is already allocated to request {request.number}"
                )

            detail = RequestDetail(
                request=request,
                warehouse_id=warehouse_id,
                batch_id=batch_code,
                quantity=qty,
                dosage_instructions=(dosage_instructions or "").strip(),
                treatment_duration=(treatment_duration or "").strip(),
            )
            try:
                with self.gateway.atomic():
                    detail.save(using=self.gateway.using)
            except IntegrityError as exc:
                raise ConflictError(
                    f"Batch {batch_code} from warehouse {warehouse_id} is already allocated to request {request.number}"
                ) from exc

        logger.info(
            "Allocation added",
            extra={
                "request_number": request.number,
                "warehouse_id": warehouse_id,
                "batch": batch_code,
                "quantity": qty,
            },
        )
        return detail

    def remove_detail(self, request_number, *, warehouse_id, batch_code) -> None:
        with self.gateway.atomic():
            request = self.state_machine.lock(request_number)
            self._require_status(request, ALLOCATION_STATES, "change allocations")

            deleted, _ = (
                self.gateway.objects(RequestDetail)
                .filter(request_id=request.pk, warehouse_id=warehouse_id, batch_id=batch_code)
                .delete()
            )
            if not deleted:
                raise NotFoundError(
                    f"Request {request.number} has no allocation of batch {batch_code} from warehouse {warehouse_id}"
                )

        logger.info(
            "Allocation removed",
            extra={"request_number": request.number, "warehouse_id": warehouse_id, "batch": batch_code},
        )

    # ============================================================
    # HELPERS
    # ============================================================

    @staticmethod
    def _require_status(request: MedicationRequest, allowed, action: str) -> None:
        if request.status not in allowed:
            raise InvalidStateError(
                f"Cannot {action} while request {request.number} is '{request.status}'"
            )

    def _requested_item(self, request: MedicationRequest, item_id) -> RequestedMedication:
        item = (
            self.gateway.objects(RequestedMedication)
            .filter(pk=item_id, request_id=request.pk)
            .first()
        )
        if item is None:
            raise NotFoundError(f"Requested medication {item_id} not found on request {request.number}")
        return item
