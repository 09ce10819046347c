# donations/services/donation_intake.py

"""
======================================================
PATH: donations/services/donation_intake.py
======================================================
DONATION INTAKE ENGINE

Purpose:
- Receive a donation: Donation row + one DonationMedication per line +
  a stock ledger credit per line.
- Append lines to an existing donation (additive, never replaces).
- Delete a donation, reversing every credit it made.

Rules:
- provider id, when given, is a 9-digit RNC or an 11-digit national ID and
  must belong to a registered Provider
- at least one line; every line names an existing warehouse and batch and a
  positive whole quantity
- ALL lines are validated before the first write; every problem is reported
- each operation is one transaction (all-or-nothing)
- deleting a donation whose stock was already consumed fails with
  InsufficientStockError and changes nothing
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from catalog.models import Batch, Provider, Warehouse
from common.services.exceptions import DomainValidationError, NotFoundError
from common.services.gateway import PersistenceGateway
from common.validators import normalize_provider_id, to_positive_int
from donations.models import Donation, DonationMedication
from inventory.models import StockMovement
from inventory.services.stock_ledger import StockKey, StockLedger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DonationLine:
    warehouse_id: int
    batch_code: str
    medication_code: str
    quantity: int

    @property
    def key(self) -> StockKey:
        return StockKey(
            warehouse_id=self.warehouse_id,
            medication_code=self.medication_code,
            batch_code=self.batch_code,
        )


class DonationIntakeEngine:
    def __init__(self, gateway: PersistenceGateway, ledger: StockLedger | None = None):
        self.gateway = gateway
        self.ledger = ledger or StockLedger(gateway)

    # ============================================================
    # CREATE
    # ============================================================

    def create_donation(self, *, provider_id=None, description="", lines=None, user=None) -> Donation:
        provider = self._resolve_provider(provider_id)
        clean_lines = self.validate_lines(lines)

        with self.gateway.atomic():
            donation = Donation(
                provider=provider,
                description=(description or "").strip(),
                received_by=user,
            )
            donation.save(using=self.gateway.using)
            self._apply_lines(donation, clean_lines)

        logger.info(
            "Donation created",
            extra={
                "donation_number": donation.number,
                "provider_id": getattr(provider, "pk", None),
                "lines": len(clean_lines),
                "units": sum(line.quantity for line in clean_lines),
            },
        )
        return donation

    # ============================================================
    # APPEND
    # ============================================================

    def add_lines(self, donation_number, lines) -> Donation:
        if not self.gateway.objects(Donation).filter(pk=donation_number).exists():
            raise NotFoundError(f"Donation {donation_number} does not exist")

        clean_lines = self.validate_lines(lines)

        with self.gateway.atomic():
            donation = self._lock(donation_number)
            self._apply_lines(donation, clean_lines)

        logger.info(
            "Donation lines added",
            extra={"donation_number": donation.number, "lines": len(clean_lines)},
        )
        return donation

    # ============================================================
    # DELETE (reversal)
    # ============================================================

    def delete_donation(self, donation_number) -> None:
        with self.gateway.atomic():
            donation = self._lock(donation_number)
            reference = donation.stock_reference

            lines = list(
                self.gateway.objects(DonationMedication)
                .filter(donation_id=donation.pk)
                .order_by("id")
            )
            for line in lines:
                self.ledger.debit(
                    warehouse_id=line.warehouse_id,
                    batch_code=line.batch_id,
                    quantity=line.quantity,
                    reason=StockMovement.Reason.DONATION_REVERSAL,
                    reference=reference,
                )

            self.gateway.objects(DonationMedication).filter(donation_id=donation.pk).delete()
            donation.delete(using=self.gateway.using)

        logger.info(
            "Donation deleted",
            extra={"donation_number": donation_number, "lines_reversed": len(lines)},
        )

    # ============================================================
    # VALIDATION
    # ============================================================

    def validate_lines(self, lines) -> list[DonationLine]:
        """
        Normalize raw line dicts ({warehouse, batch, quantity}).
        Raises DomainValidationError listing every bad line; never writes.
        """
        lines = list(lines or [])
        if not lines:
            raise DomainValidationError("A donation needs at least one line")

        problems = []
        parsed = []

        warehouse_ids = set()
        batch_codes = set()
        for index, raw in enumerate(lines):
            label = f"lines[{index}]"
            if not isinstance(raw, dict):
                problems.append(f"{label} must be an object")
                continue

            warehouse_id = raw.get("warehouse")
            batch_code = str(raw.get("batch") or "").strip()

            try:
                quantity = to_positive_int(raw.get("quantity"), field_name=f"{label}.quantity")
            except ValueError as exc:
                problems.append(str(exc))
                quantity = None

            if isinstance(warehouse_id, bool) or not isinstance(warehouse_id, int):
                problems.append(f"{label}.warehouse must be a warehouse id")
                warehouse_id = None
            if not batch_code:
                problems.append(f"{label}.batch is required")

            if warehouse_id is not None:
                warehouse_ids.add(warehouse_id)
            if batch_code:
                batch_codes.add(batch_code)
            parsed.append((warehouse_id, batch_code, quantity))

        known_warehouses = set(
            self.gateway.objects(Warehouse).filter(pk__in=warehouse_ids).values_list("pk", flat=True)
        )
        batch_owner = dict(
            self.gateway.objects(Batch).filter(pk__in=batch_codes).values_list("pk", "medication_id")
        )

        clean = []
        for warehouse_id, batch_code, quantity in parsed:
            if batch_code and batch_code not in batch_owner:
                problems.append(f"batch {batch_code} does not exist")
            if warehouse_id is not None and warehouse_id not in known_warehouses:
                problems.append(f"warehouse {warehouse_id} does not exist")

            if batch_code in batch_owner and warehouse_id in known_warehouses and quantity:
                clean.append(
                    DonationLine(
                        warehouse_id=warehouse_id,
                        batch_code=batch_code,
                        medication_code=batch_owner[batch_code],
                        quantity=quantity,
                    )
                )

        if problems:
            raise DomainValidationError(details=problems)

        return clean

    # ============================================================
    # HELPERS
    # ============================================================

    def _resolve_provider(self, provider_id) -> Provider | None:
        if provider_id in (None, ""):
            return None

        cleaned = normalize_provider_id(provider_id)
        if cleaned is None:
            raise DomainValidationError(
                "Provider id must be a 9-digit RNC or an 11-digit national ID"
            )

        provider = self.gateway.objects(Provider).filter(pk=cleaned).first()
        if provider is None:
            raise NotFoundError(f"Provider {cleaned} does not exist")
        return provider

    def _lock(self, donation_number) -> Donation:
        donation = self.gateway.locked(Donation).filter(pk=donation_number).first()
        if donation is None:
            raise NotFoundError(f"Donation {donation_number} does not exist")
        return donation

    def _apply_lines(self, donation: Donation, lines: list[DonationLine]) -> None:
        self.gateway.require_transaction("apply donation lines")

        self.gateway.objects(DonationMedication).bulk_create(
            [
                DonationMedication(
                    donation=donation,
                    warehouse_id=line.warehouse_id,
                    batch_id=line.batch_code,
                    quantity=line.quantity,
                )
                for line in lines
            ]
        )

        for line in lines:
            self.ledger.credit(
                line.key,
                line.quantity,
                reason=StockMovement.Reason.DONATION,
                reference=donation.stock_reference,
            )
