# inventory/models/warehouse_stock.py

"""
WAREHOUSE STOCK (INVENTORY CELL)

One row per (warehouse, medication, batch).

GUARANTEES:
- quantity >= 0 (database check constraint)
- Created on the first credit or adjustment into a cell, never implicitly deleted
- quantity is mutated ONLY by inventory.services.stock_ledger
"""

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q


class WarehouseStock(models.Model):
    warehouse = models.ForeignKey(
        "catalog.Warehouse",
        on_delete=models.PROTECT,
        related_name="stock",
    )
    medication = models.ForeignKey(
        "catalog.Medication",
        on_delete=models.PROTECT,
        related_name="stock",
    )
    batch = models.ForeignKey(
        "catalog.Batch",
        on_delete=models.PROTECT,
        related_name="stock",
    )

    quantity = models.PositiveIntegerField(default=0)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["warehouse_id", "medication_id", "batch_id"]
        constraints = [
            models.UniqueConstraint(
                fields=["warehouse", "medication", "batch"],
                name="uq_stock_cell",
            ),
            models.CheckConstraint(
                condition=Q(quantity__gte=0),
                name="chk_stock_quantity_gte_zero",
            ),
        ]
        indexes = [
            models.Index(fields=["warehouse", "batch"], name="inv_stock_wh_batch_idx"),
        ]

    def clean(self):
        if self.batch_id and self.medication_id:
            if self.batch.medication_id != self.medication_id:
                raise ValidationError("Batch does not belong to medication")

    def __str__(self):
        return f"{self.warehouse_id} | {self.batch_id} | {self.quantity}"
