# inventory/services/inventory_adjustments.py

"""
INVENTORY ADJUSTMENT SERVICE

Purpose:
- Administrative override of one inventory cell (physical count, correction).

Rules:
- warehouse, medication and batch must all exist, and the batch must belong
  to the medication; otherwise DomainValidationError listing every problem
- quantity is the literal new level (>= 0), not a delta
- the write goes through StockLedger.set_absolute inside one transaction, so
  the medication total and the audit movement move with it
"""

from __future__ import annotations

import logging

from catalog.models import Batch, Medication, Warehouse
from common.services.exceptions import DomainValidationError
from common.services.gateway import PersistenceGateway
from common.validators import to_non_negative_int
from inventory.models import WarehouseStock
from inventory.services.stock_ledger import StockKey, StockLedger

logger = logging.getLogger(__name__)


def adjust_inventory(
    *,
    gateway: PersistenceGateway,
    warehouse_id,
    medication_code,
    batch_code,
    quantity,
    user=None,
) -> WarehouseStock:
    problems = []

    try:
        target = to_non_negative_int(quantity)
    except ValueError as exc:
        problems.append(str(exc))
        target = None

    if not gateway.objects(Warehouse).filter(pk=warehouse_id).exists():
        problems.append(f"warehouse {warehouse_id} does not exist")

    if not gateway.objects(Medication).filter(pk=medication_code).exists():
        problems.append(f"medication {medication_code} does not exist")

    batch_owner = (
        gateway.objects(Batch)
        .filter(pk=batch_code)
        .values_list("medication_id", flat=True)
        .first()
    )
    if batch_owner is None:
        problems.append(f"batch {batch_code} does not exist")
    elif batch_owner != medication_code:
        problems.append(f"batch {batch_code} does not belong to medication {medication_code}")

    if problems:
        raise DomainValidationError(details=problems)

    key = StockKey(
        warehouse_id=int(warehouse_id),
        medication_code=medication_code,
        batch_code=batch_code,
    )

    with gateway.atomic():
        stock = StockLedger(gateway).set_absolute(
            key,
            target,
            reference=f"adjustment:{getattr(user, 'pk', '') or 'system'}",
        )

    logger.info(
        "Inventory adjusted",
        extra={
            "warehouse_id": key.warehouse_id,
            "batch": key.batch_code,
            "quantity": stock.quantity,
            "user_id": getattr(user, "pk", None),
        },
    )
    return stock
