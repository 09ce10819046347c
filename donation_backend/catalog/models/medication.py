# catalog/models/medication.py

"""
MEDICATION

STOCK MODEL (IMPORTANT):
- Stock lives in inventory.WarehouseStock, one row per (warehouse, batch).
- global_available_quantity is a denormalized total of those rows.
- It is mutated ONLY by the stock ledger (inventory/services/stock_ledger.py);
  catalog edits never touch it.
"""

from django.db import models
from django.db.models import Q

from .choices import RecordStatus


class Medication(models.Model):
    code = models.CharField(max_length=32, primary_key=True)
    name = models.CharField(max_length=255, db_index=True)
    description = models.TextField(blank=True)
    main_compound = models.CharField(max_length=255, blank=True)

    status = models.CharField(
        max_length=16,
        choices=RecordStatus.choices,
        default=RecordStatus.ACTIVE,
    )

    global_available_quantity = models.PositiveIntegerField(
        default=0,
        help_text="Sum of all warehouse stock for this medication (ledger-managed only)",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=Q(global_available_quantity__gte=0),
                name="chk_medication_global_qty_gte_zero",
            ),
        ]

    @property
    def is_active(self) -> bool:
        return self.status == RecordStatus.ACTIVE

    def __str__(self):
        return f"{self.name} ({self.code})"
