# inventory/services/stock_ledger.py

"""
======================================================
PATH: inventory/services/stock_ledger.py
======================================================
STOCK LEDGER

The ONLY component allowed to change stock numbers:
- WarehouseStock.quantity (per warehouse + batch cell)
- Medication.global_available_quantity (denormalized total)

Operations:
- credit(key, quantity)        add to a cell (created on first use)
- debit(warehouse, batch, qty) remove from a cell, medication derived from batch
- set_absolute(key, quantity)  administrative override of a cell

GUARANTEES:
- Every call must run inside the caller's transaction (the one that records
  the donation / dispatch / adjustment). Outside one it fails loudly.
- Increments and decrements are single conditional UPDATE statements
  (quantity = quantity +/- n), never read-modify-write in Python.
- No cell and no medication total ever goes below zero: a debit that would
  overdraw raises InsufficientStockError and the caller's transaction rolls back.
- Every mutation appends an immutable StockMovement row.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from django.db.models import F

from catalog.models import Batch, Medication, Warehouse
from common.services.exceptions import (
    DomainValidationError,
    InsufficientStockError,
    NotFoundError,
)
from common.services.gateway import PersistenceGateway
from common.validators import to_non_negative_int, to_positive_int
from inventory.models import StockMovement, WarehouseStock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StockKey:
    """Identity of one inventory cell."""

    warehouse_id: int
    medication_code: str
    batch_code: str


class StockLedger:
    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    # ============================================================
    # READS
    # ============================================================

    def available(self, *, warehouse_id: int, batch_code: str) -> int:
        qty = (
            self.gateway.objects(WarehouseStock)
            .filter(warehouse_id=warehouse_id, batch_id=batch_code)
            .values_list("quantity", flat=True)
            .first()
        )
        return int(qty or 0)

    # ============================================================
    # MUTATIONS
    # ============================================================

    def credit(
        self,
        key: StockKey,
        quantity,
        *,
        reason: str = StockMovement.Reason.DONATION,
        reference: str = "",
    ) -> WarehouseStock:
        self.gateway.require_transaction("credit")
        qty = self._positive(quantity)
        self._check_key(key)

        stock = self._cell(key)
        self.gateway.objects(WarehouseStock).filter(pk=stock.pk).update(
            quantity=F("quantity") + qty
        )
        self.gateway.objects(Medication).filter(pk=key.medication_code).update(
            global_available_quantity=F("global_available_quantity") + qty
        )

        self._record(key, StockMovement.Direction.IN, reason, qty, reference)
        stock.refresh_from_db(using=self.gateway.using)
        return stock

    def debit(
        self,
        *,
        warehouse_id: int,
        batch_code: str,
        quantity,
        reason: str = StockMovement.Reason.DISPATCH,
        reference: str = "",
    ) -> WarehouseStock:
        self.gateway.require_transaction("debit")
        qty = self._positive(quantity)

        medication_code = (
            self.gateway.objects(Batch)
            .filter(pk=batch_code)
            .values_list("medication_id", flat=True)
            .first()
        )
        if medication_code is None:
            raise NotFoundError(f"Batch {batch_code} does not exist")

        key = StockKey(
            warehouse_id=warehouse_id,
            medication_code=medication_code,
            batch_code=batch_code,
        )

        stock = (
            self.gateway.locked(WarehouseStock)
            .filter(
                warehouse_id=warehouse_id,
                medication_id=medication_code,
                batch_id=batch_code,
            )
            .first()
        )
        if stock is None:
            raise NotFoundError(
                f"No stock of batch {batch_code} in warehouse {warehouse_id}"
            )

        updated = (
            self.gateway.objects(WarehouseStock)
            .filter(pk=stock.pk, quantity__gte=qty)
            .update(quantity=F("quantity") - qty)
        )
        if not updated:
            raise InsufficientStockError(
                f"Insufficient stock of batch {batch_code} in warehouse "
                f"{warehouse_id}: available {stock.quantity}, requested {qty}"
            )

        self._decrement_global(medication_code, qty)
        self._record(key, StockMovement.Direction.OUT, reason, qty, reference)

        stock.refresh_from_db(using=self.gateway.using)
        return stock

    def set_absolute(self, key: StockKey, quantity, *, reference: str = "") -> WarehouseStock:
        """
        Overwrite a cell with a literal quantity.
        The medication total moves by the difference, so it keeps matching
        the sum of its cells.
        """
        self.gateway.require_transaction("set_absolute")
        try:
            target = to_non_negative_int(quantity)
        except ValueError as exc:
            raise DomainValidationError(str(exc)) from exc
        self._check_key(key)

        stock = self._cell(key)
        delta = target - int(stock.quantity)

        if delta == 0:
            return stock

        self.gateway.objects(WarehouseStock).filter(pk=stock.pk).update(quantity=target)

        if delta > 0:
            self.gateway.objects(Medication).filter(pk=key.medication_code).update(
                global_available_quantity=F("global_available_quantity") + delta
            )
            direction = StockMovement.Direction.IN
        else:
            self._decrement_global(key.medication_code, -delta)
            direction = StockMovement.Direction.OUT

        self._record(key, direction, StockMovement.Reason.ADJUSTMENT, abs(delta), reference)

        stock.refresh_from_db(using=self.gateway.using)
        return stock

    # ============================================================
    # INTERNALS
    # ============================================================

    @staticmethod
    def _positive(quantity) -> int:
        try:
            return to_positive_int(quantity)
        except ValueError as exc:
            raise DomainValidationError(str(exc)) from exc

    def _check_key(self, key: StockKey) -> None:
        if not self.gateway.objects(Warehouse).filter(pk=key.warehouse_id).exists():
            raise NotFoundError(f"Warehouse {key.warehouse_id} does not exist")

        owner = (
            self.gateway.objects(Batch)
            .filter(pk=key.batch_code)
            .values_list("medication_id", flat=True)
            .first()
        )
        if owner is None:
            raise NotFoundError(f"Batch {key.batch_code} does not exist")
        if owner != key.medication_code:
            raise DomainValidationError(
                f"Batch {key.batch_code} does not belong to medication {key.medication_code}"
            )

    def _cell(self, key: StockKey) -> WarehouseStock:
        stock, _ = self.gateway.locked(WarehouseStock).get_or_create(
            warehouse_id=key.warehouse_id,
            medication_id=key.medication_code,
            batch_id=key.batch_code,
            defaults={"quantity": 0},
        )
        return stock

    def _decrement_global(self, medication_code: str, qty: int) -> None:
        updated = (
            self.gateway.objects(Medication)
            .filter(pk=medication_code, global_available_quantity__gte=qty)
            .update(global_available_quantity=F("global_available_quantity") - qty)
        )
        if not updated:
            raise InsufficientStockError(
                f"Global quantity of medication {medication_code} would go negative"
            )

    def _record(self, key: StockKey, direction, reason, qty: int, reference: str) -> StockMovement:
        movement = StockMovement(
            warehouse_id=key.warehouse_id,
            medication_id=key.medication_code,
            batch_id=key.batch_code,
            direction=direction,
            reason=reason,
            quantity=qty,
            reference=reference,
        )
        movement.save(using=self.gateway.using)

        logger.debug(
            "Stock movement recorded",
            extra={
                "warehouse_id": key.warehouse_id,
                "batch": key.batch_code,
                "direction": direction,
                "reason": reason,
                "quantity": qty,
                "reference": reference,
            },
        )
        return movement
