# catalog/models/warehouse.py

from django.db import models

from .choices import RecordStatus


class Warehouse(models.Model):
    """
    A physical location holding donated stock.
    Stock per (warehouse, batch) lives in inventory.WarehouseStock.
    """

    name = models.CharField(max_length=255, db_index=True)
    address = models.CharField(max_length=255, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    email = models.EmailField(blank=True)

    status = models.CharField(
        max_length=16,
        choices=RecordStatus.choices,
        default=RecordStatus.ACTIVE,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name
