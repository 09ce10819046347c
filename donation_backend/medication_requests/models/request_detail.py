# medication_requests/models/request_detail.py

"""
REQUEST DETAIL

Admin-curated allocation of a concrete batch from a concrete warehouse.
The dispatch engine debits exactly these lines.
"""

from django.db import models
from django.db.models import Q


class RequestDetail(models.Model):
    request = models.ForeignKey(
        "medication_requests.MedicationRequest",
        on_delete=models.CASCADE,
        related_name="details",
    )
    warehouse = models.ForeignKey(
        "catalog.Warehouse",
        on_delete=models.PROTECT,
        related_name="request_details",
    )
    batch = models.ForeignKey(
        "catalog.Batch",
        on_delete=models.PROTECT,
        related_name="request_details",
    )

    quantity = models.PositiveIntegerField()
    dosage_instructions = models.CharField(max_length=255, blank=True)
    treatment_duration = models.CharField(max_length=120, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(
                fields=["request", "warehouse", "batch"],
                name="uq_request_detail_allocation",
            ),
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name="chk_request_detail_qty_gt_zero",
            ),
        ]

    def __str__(self):
        return f"#{self.request_id} | {self.batch_id}@{self.warehouse_id} x{self.quantity}"
