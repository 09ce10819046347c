# catalog/models/batch.py

"""
BATCH (LOT)

- Belongs to exactly one Medication.
- Immutable once created; deletion is the only allowed change.
- A batch with no stock left anywhere is still a valid historical record.
"""

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from .medication import Medication


class Batch(models.Model):
    code = models.CharField(max_length=64, primary_key=True)

    medication = models.ForeignKey(
        Medication,
        on_delete=models.PROTECT,
        related_name="batches",
    )

    manufactured_on = models.DateField(null=True, blank=True)
    expires_on = models.DateField()

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["expires_on", "code"]
        indexes = [
            models.Index(fields=["medication", "expires_on"], name="catalog_batch_med_exp_idx"),
        ]

    def clean(self):
        if not self.expires_on:
            raise ValidationError({"expires_on": "expires_on is required"})

        if self.manufactured_on and self.manufactured_on > self.expires_on:
            raise ValidationError(
                {"manufactured_on": "manufactured_on cannot be after expires_on"}
            )

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Batch is immutable once created")

        self.full_clean()
        super().save(*args, **kwargs)

    @property
    def is_expired(self) -> bool:
        return self.expires_on < timezone.localdate()

    def __str__(self):
        return f"{self.code} ({self.medication_id})"
