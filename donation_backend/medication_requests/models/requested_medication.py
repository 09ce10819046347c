# medication_requests/models/requested_medication.py

from django.db import models


class RequestedMedication(models.Model):
    """
    Free-text "what I need" line written by the requester.
    Editable only while the request is PENDIENTE, EN_REVISION or INCOMPLETA.
    """

    request = models.ForeignKey(
        "medication_requests.MedicationRequest",
        on_delete=models.CASCADE,
        related_name="requested_medications",
    )
    name = models.CharField(max_length=255)
    dosage = models.CharField(max_length=255, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.name} {self.dosage}".strip()
