# donations/models/donation_medication.py

from django.db import models
from django.db.models import Q


class DonationMedication(models.Model):
    """
    One donated (warehouse, batch, quantity) line.
    Created and removed only by the donation intake engine.
    """

    donation = models.ForeignKey(
        "donations.Donation",
        on_delete=models.CASCADE,
        related_name="lines",
    )
    warehouse = models.ForeignKey(
        "catalog.Warehouse",
        on_delete=models.PROTECT,
        related_name="donation_lines",
    )
    batch = models.ForeignKey(
        "catalog.Batch",
        on_delete=models.PROTECT,
        related_name="donation_lines",
    )
    quantity = models.PositiveIntegerField()

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name="chk_donation_line_qty_gt_zero",
            ),
        ]

    def __str__(self):
        return f"#{self.donation_id} | {self.batch_id}@{self.warehouse_id} x{self.quantity}"
