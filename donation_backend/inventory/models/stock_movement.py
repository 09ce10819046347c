# inventory/models/stock_movement.py

"""
STOCK MOVEMENT (AUDIT LEDGER)

Append-only record of every stock ledger mutation.

GUARANTEES:
- Created ONCE, never edited, never deleted through the model
- Direction is validated against reason
- reference names the cause, e.g. "donation:7" or "dispatch:3"
"""

from django.core.exceptions import ValidationError
from django.db import models


class StockMovement(models.Model):
    class Direction(models.TextChoices):
        IN = "IN", "Stock In"
        OUT = "OUT", "Stock Out"

    class Reason(models.TextChoices):
        DONATION = "DONATION", "Donation received"
        DONATION_REVERSAL = "DONATION_REVERSAL", "Donation deleted"
        DISPATCH = "DISPATCH", "Dispatched to beneficiary"
        DISPATCH_REVERSAL = "DISPATCH_REVERSAL", "Dispatch deleted"
        ADJUSTMENT = "ADJUSTMENT", "Manual adjustment"

    REASON_TO_DIRECTION = {
        Reason.DONATION: Direction.IN,
        Reason.DISPATCH_REVERSAL: Direction.IN,
        Reason.DISPATCH: Direction.OUT,
        Reason.DONATION_REVERSAL: Direction.OUT,
        Reason.ADJUSTMENT: None,
    }

    warehouse = models.ForeignKey(
        "catalog.Warehouse", on_delete=models.PROTECT, related_name="stock_movements"
    )
    medication = models.ForeignKey(
        "catalog.Medication", on_delete=models.PROTECT, related_name="stock_movements"
    )
    batch = models.ForeignKey(
        "catalog.Batch", on_delete=models.PROTECT, related_name="stock_movements"
    )

    direction = models.CharField(max_length=3, choices=Direction.choices)
    reason = models.CharField(max_length=20, choices=Reason.choices)
    quantity = models.PositiveIntegerField()
    reference = models.CharField(max_length=64, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["reason"], name="inv_move_reason_idx"),
            models.Index(fields=["batch", "created_at"], name="inv_move_batch_idx"),
            models.Index(fields=["reference"], name="inv_move_ref_idx"),
        ]

    def clean(self):
        if self.quantity <= 0:
            raise ValidationError("quantity must be greater than zero")

        expected = self.REASON_TO_DIRECTION.get(self.reason)
        if expected and self.direction != expected:
            raise ValidationError(f"{self.reason} requires direction={expected}")

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("StockMovement records are immutable")
        self.full_clean(validate_unique=False, validate_constraints=False)
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("StockMovement records are immutable and cannot be deleted")

    def __str__(self):
        return f"{self.direction} | {self.reason} | {self.batch_id} | {self.quantity}"
