# catalog/models/medical_center.py

from django.db import models

from .choices import RecordStatus


class MedicalCenter(models.Model):
    name = models.CharField(max_length=255)
    address = models.CharField(max_length=255, blank=True)
    status = models.CharField(
        max_length=16,
        choices=RecordStatus.choices,
        default=RecordStatus.ACTIVE,
    )

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name
