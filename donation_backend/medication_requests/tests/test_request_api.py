# medication_requests/tests/test_request_api.py

from datetime import date

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from catalog.models import Batch, Medication, Warehouse
from medication_requests.models import MedicationRequest, RequestStatus
from users.models import User


class MedicationRequestApiTests(TestCase):
    """
    HTTP surface of the request workflow.

    GUARANTEES:
    - domain failures come back as {"error": {...}} with the mapped status
    - status cannot be edited except through /transition/ and /confirm/
    """

    def setUp(self):
        self.user = User.objects.create_user(email="revisor@example.com", password="pass", role="reviewer")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

        self.warehouse = Warehouse.objects.create(name="Central")
        medication = Medication.objects.create(code="MET850", name="Metformina 850mg")
        Batch.objects.create(code="L-9", medication=medication, expires_on=date(2030, 6, 1))

    def _submit(self, medications=None):
        response = self.client.post(
            "/api/requests/",
            {
                "pathology": "Diabetes tipo 2",
                "medications": medications if medications is not None else [{"name": "Metformina", "dosage": "850mg"}],
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return response.data["number"]

    def test_submit_and_retrieve(self):
        number = self._submit()

        response = self.client.get(f"/api/requests/{number}/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], RequestStatus.PENDING)
        self.assertEqual(response.data["user"], "revisor@example.com")
        self.assertEqual(len(response.data["requested_medications"]), 1)
        self.assertIsNone(response.data["dispatch"])

    def test_list_filters_by_status(self):
        first = self._submit()
        self._submit()
        self.client.post(f"/api/requests/{first}/confirm/")

        response = self.client.get("/api/requests/", {"status": RequestStatus.IN_REVIEW})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([r["number"] for r in response.data["results"]], [first])

    def test_transition_endpoint(self):
        number = self._submit()

        ok = self.client.post(f"/api/requests/{number}/confirm/")
        self.assertEqual(ok.status_code, status.HTTP_200_OK)
        self.assertEqual(ok.data["status"], RequestStatus.IN_REVIEW)

        approved = self.client.post(
            f"/api/requests/{number}/transition/",
            {"status": RequestStatus.APPROVED, "observations": "OK"},
            format="json",
        )
        self.assertEqual(approved.status_code, status.HTTP_200_OK, approved.data)
        self.assertEqual(approved.data["observations"], "OK")

    def test_invalid_transition_is_409(self):
        number = self._submit()

        response = self.client.post(
            f"/api/requests/{number}/transition/",
            {"status": RequestStatus.APPROVED},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["error"]["code"], "INVALID_TRANSITION")

    def test_confirm_without_medications_is_400(self):
        number = self._submit(medications=[])

        response = self.client.post(f"/api/requests/{number}/confirm/")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], "VALIDATION_ERROR")

    def test_unknown_request_is_404(self):
        response = self.client.post(
            "/api/requests/424242/transition/",
            {"status": RequestStatus.IN_REVIEW},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"]["code"], "NOT_FOUND")

    def test_requested_medication_endpoints(self):
        number = self._submit()

        created = self.client.post(
            f"/api/requests/{number}/medications/",
            {"name": "Glibenclamida", "dosage": "5mg"},
            format="json",
        )
        self.assertEqual(created.status_code, status.HTTP_201_CREATED, created.data)
        item_id = created.data["id"]

        patched = self.client.patch(
            f"/api/requests/{number}/medications/{item_id}/",
            {"dosage": "10mg"},
            format="json",
        )
        self.assertEqual(patched.status_code, status.HTTP_200_OK)
        self.assertEqual(patched.data["dosage"], "10mg")

        deleted = self.client.delete(f"/api/requests/{number}/medications/{item_id}/")
        self.assertEqual(deleted.status_code, status.HTTP_204_NO_CONTENT)

    def test_detail_endpoints(self):
        number = self._submit()
        self.client.post(f"/api/requests/{number}/confirm/")

        added = self.client.post(
            f"/api/requests/{number}/details/",
            {"warehouse": self.warehouse.id, "batch": "L-9", "quantity": 30, "dosage_instructions": "1 diaria"},
            format="json",
        )
        self.assertEqual(added.status_code, status.HTTP_201_CREATED, added.data)
        self.assertEqual(added.data["medication"], "MET850")

        duplicate = self.client.post(
            f"/api/requests/{number}/details/",
            {"warehouse": self.warehouse.id, "batch": "L-9", "quantity": 1},
            format="json",
        )
        self.assertEqual(duplicate.status_code, status.HTTP_409_CONFLICT)

        missing = self.client.post(
            f"/api/requests/{number}/details/",
            {"warehouse": self.warehouse.id, "batch": "L-404", "quantity": 1},
            format="json",
        )
        self.assertEqual(missing.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("batch L-404 does not exist", missing.data["error"]["details"])

        removed = self.client.delete(
            f"/api/requests/{number}/details/",
            {"warehouse": self.warehouse.id, "batch": "L-9"},
            format="json",
        )
        self.assertEqual(removed.status_code, status.HTTP_204_NO_CONTENT)

    def test_status_is_not_writable(self):
        number = self._submit()

        response = self.client.patch(f"/api/requests/{number}/", {"status": RequestStatus.APPROVED}, format="json")
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        self.assertEqual(MedicationRequest.objects.get(pk=number).status, RequestStatus.PENDING)
