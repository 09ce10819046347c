# dispatches/models.py

"""
DISPATCH (DESPACHO)

Physical release of the allocated medication of one approved request.

GUARANTEES:
- At most one dispatch per request (one-to-one, enforced by the database)
- Created only by dispatches.services.dispatch_engine, in the same
  transaction that moves the request to DESPACHADA and debits stock
"""

from django.conf import settings
from django.db import models
from django.utils import timezone


class Dispatch(models.Model):
    number = models.BigAutoField(primary_key=True)

    request = models.OneToOneField(
        "medication_requests.MedicationRequest",
        on_delete=models.PROTECT,
        related_name="dispatch",
    )

    # National ID of whoever physically collected the goods.
    receiver = models.ForeignKey(
        "catalog.Person",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="received_dispatches",
    )

    dispatched_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="dispatches",
    )

    dispatched_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-dispatched_at", "-number"]

    @property
    def stock_reference(self) -> str:
        return f"dispatch:{self.number}"

    def __str__(self):
        return f"Dispatch #{self.number} -> request #{self.request_id}"
