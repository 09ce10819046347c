# donations/models/donation.py

"""
DONATION (DONACION)

Inbound delivery of medication from an optional provider.
Its lines credit inventory; deleting it reverses those credits.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone


class Donation(models.Model):
    number = models.BigAutoField(primary_key=True)

    provider = models.ForeignKey(
        "catalog.Provider",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="donations",
    )
    description = models.TextField(blank=True)

    received_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="donations_received",
    )

    received_at = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-received_at", "-number"]

    @property
    def stock_reference(self) -> str:
        return f"donation:{self.number}"

    def __str__(self):
        return f"Donation #{self.number}"
