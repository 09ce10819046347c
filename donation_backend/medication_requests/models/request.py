# medication_requests/models/request.py

"""
MEDICATION REQUEST (SOLICITUD)

A beneficiary's application for donated medication.

RULES:
- status changes ONLY through medication_requests.services.request_state_machine
  (or the dispatch engine, which owns DESPACHADA)
- never physically deleted in normal operation
"""

from django.conf import settings
from django.db import models


class RequestStatus(models.TextChoices):
    PENDING = "PENDIENTE", "Pending"
    IN_REVIEW = "EN_REVISION", "In review"
    APPROVED = "APROBADA", "Approved"
    REJECTED = "RECHAZADA", "Rejected"
    INCOMPLETE = "INCOMPLETA", "Incomplete"
    DISPATCHED = "DESPACHADA", "Dispatched"
    CANCELLED = "CANCELADA", "Cancelled"


class MedicationRequest(models.Model):
    number = models.BigAutoField(primary_key=True)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="medication_requests",
    )

    # The person the medication is for, when it is not the account holder.
    beneficiary = models.ForeignKey(
        "catalog.Person",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="medication_requests",
    )
    medical_center = models.ForeignKey(
        "catalog.MedicalCenter",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="medication_requests",
    )

    pathology = models.CharField(max_length=255, blank=True)

    status = models.CharField(
        max_length=16,
        choices=RequestStatus.choices,
        default=RequestStatus.PENDING,
        db_index=True,
    )
    observations = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-number"]

    def __str__(self):
        return f"Request #{self.number} ({self.status})"
