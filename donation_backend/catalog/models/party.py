# catalog/models/party.py

"""
PEOPLE AND PROVIDERS

Person: identified by an 11-digit national ID (cedula). Beneficiaries,
representatives and dispatch receivers are all Persons.

Provider: a donor, identified by a 9-digit RNC or an 11-digit national ID.
"""

from django.db import models


class Person(models.Model):
    class Sex(models.TextChoices):
        MALE = "M", "Male"
        FEMALE = "F", "Female"

    national_id = models.CharField(max_length=11, primary_key=True)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    sex = models.CharField(max_length=1, choices=Sex.choices, blank=True)
    birth_date = models.DateField(null=True, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    address = models.CharField(max_length=255, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["last_name", "first_name"]

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __str__(self):
        return f"{self.full_name} ({self.national_id})"


class Provider(models.Model):
    provider_id = models.CharField(
        max_length=11,
        primary_key=True,
        help_text="RNC (9 digits) or national ID (11 digits)",
    )
    name = models.CharField(max_length=255, db_index=True)
    phone = models.CharField(max_length=32, blank=True)
    email = models.EmailField(blank=True)
    address = models.CharField(max_length=255, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.provider_id})"
