# catalog/tests/test_catalog_api.py

from datetime import date

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from catalog.models import Batch, Medication, Person, Provider
from users.models import User


class CatalogApiTests(TestCase):
    """
    GUARANTEES:
    - identifiers are validated and normalized on the way in
    - batches are immutable (no PUT/PATCH)
    - medication totals cannot be written through the API
    - deleting referenced rows is a 409, not a 500
    """

    def setUp(self):
        self.user = User.objects.create_user(email="admin@example.com", password="pass", role="admin")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

        self.medication = Medication.objects.create(code="PARA500", name="Paracetamol 500mg")

    def test_requires_authentication(self):
        anon = APIClient()
        response = anon.get("/api/catalog/medications/")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    # ======================================================
    # PERSONS
    # ======================================================

    def test_person_national_id_is_normalized(self):
        response = self.client.post(
            "/api/catalog/persons/",
            {"national_id": "001-1234567-8", "first_name": "Ana", "last_name": "Perez"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertTrue(Person.objects.filter(pk="00112345678").exists())

    def test_person_bad_national_id_is_rejected(self):
        response = self.client.post(
            "/api/catalog/persons/",
            {"national_id": "12345", "first_name": "Ana", "last_name": "Perez"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    # ======================================================
    # PROVIDERS
    # ======================================================

    def test_provider_shape_and_duplicate(self):
        payload = {"provider_id": "001234567", "name": "Farmacia Central"}

        first = self.client.post("/api/catalog/providers/", payload, format="json")
        self.assertEqual(first.status_code, status.HTTP_201_CREATED, first.data)

        duplicate = self.client.post("/api/catalog/providers/", payload, format="json")
        self.assertEqual(duplicate.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(duplicate.data["error"]["code"], "CONFLICT")

        bad = self.client.post(
            "/api/catalog/providers/",
            {"provider_id": "12345", "name": "Bad"},
            format="json",
        )
        self.assertEqual(bad.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Provider.objects.count(), 1)

    # ======================================================
    # MEDICATIONS + BATCHES
    # ======================================================

    def test_global_quantity_is_read_only(self):
        response = self.client.patch(
            f"/api/catalog/medications/{self.medication.code}/",
            {"name": "Paracetamol 500 mg", "global_available_quantity": 999},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        self.medication.refresh_from_db()
        self.assertEqual(self.medication.name, "Paracetamol 500 mg")
        self.assertEqual(self.medication.global_available_quantity, 0)

    def test_medication_exposes_active_flag(self):
        url = f"/api/catalog/medications/{self.medication.code}/"
        self.assertTrue(self.client.get(url).data["is_active"])

        response = self.client.patch(url, {"status": "INACTIVE", "is_active": True}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data["is_active"])

    def test_batch_create_and_no_update(self):
        response = self.client.post(
            "/api/catalog/batches/",
            {"code": "L-100", "medication": "PARA500", "manufactured_on": "2025-01-01", "expires_on": "2027-01-01"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

        patch = self.client.patch("/api/catalog/batches/L-100/", {"expires_on": "2030-01-01"}, format="json")
        self.assertEqual(patch.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)

    def test_batch_dates_must_be_ordered(self):
        response = self.client.post(
            "/api/catalog/batches/",
            {"code": "L-101", "medication": "PARA500", "manufactured_on": "2028-01-01", "expires_on": "2027-01-01"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_deleting_referenced_medication_is_conflict(self):
        Batch.objects.create(code="L-102", medication=self.medication, expires_on=date(2030, 1, 1))

        response = self.client.delete(f"/api/catalog/medications/{self.medication.code}/")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertTrue(Medication.objects.filter(pk="PARA500").exists())

    def test_unreferenced_batch_can_be_deleted(self):
        Batch.objects.create(code="L-103", medication=self.medication, expires_on=date(2030, 1, 1))

        response = self.client.delete("/api/catalog/batches/L-103/")
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Batch.objects.filter(pk="L-103").exists())


class BatchModelTests(TestCase):
    def test_batch_is_immutable(self):
        from django.core.exceptions import ValidationError

        medication = Medication.objects.create(code="IBU400", name="Ibuprofeno 400mg")
        batch = Batch.objects.create(code="L-1", medication=medication, expires_on=date(2030, 1, 1))

        batch.expires_on = date(2031, 1, 1)
        with self.assertRaises(ValidationError):
            batch.save()
