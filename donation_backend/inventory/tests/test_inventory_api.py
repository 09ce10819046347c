# inventory/tests/test_inventory_api.py

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from inventory.models import StockMovement
from inventory.tests.test_stock_ledger import make_catalog
from users.models import User


class InventoryAdjustApiTests(TestCase):
    def setUp(self):
        self.warehouse, self.other, self.medication, self.batch, self.batch2 = make_catalog()
        self.user = User.objects.create_user(email="bodega@example.com", password="pass", role="warehouse")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def adjust(self, quantity, **overrides):
        body = {
            "warehouse": self.warehouse.id,
            "medication": "AMOX500",
            "batch": "L-1",
            "quantity": quantity,
        }
        body.update(overrides)
        return self.client.post("/api/inventory/stock/adjust/", body, format="json")

    def test_adjust_sets_absolute_quantity(self):
        first = self.adjust(12)
        self.assertEqual(first.status_code, status.HTTP_200_OK, first.data)
        self.assertEqual(first.data["quantity"], 12)

        second = self.adjust(7)
        self.assertEqual(second.data["quantity"], 7)

        self.medication.refresh_from_db()
        self.assertEqual(self.medication.global_available_quantity, 7)

        movement = StockMovement.objects.order_by("-id").first()
        self.assertEqual(movement.reason, StockMovement.Reason.ADJUSTMENT)
        self.assertEqual(movement.direction, StockMovement.Direction.OUT)
        self.assertEqual(movement.quantity, 5)

    def test_adjust_unknown_batch_is_400(self):
        response = self.adjust(3, batch="MISSING")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("batch MISSING does not exist", response.data["error"]["details"])

    def test_negative_quantity_is_400(self):
        response = self.adjust(-1)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], "VALIDATION_ERROR")
        self.assertTrue(response.data["error"]["details"][0].startswith("quantity: "))

    def test_stock_listing_filters_in_stock(self):
        self.adjust(4)
        self.adjust(0, batch="L-2")

        all_cells = self.client.get("/api/inventory/stock/")
        in_stock = self.client.get("/api/inventory/stock/", {"in_stock": "true"})

        self.assertEqual(all_cells.data["count"], 2)
        self.assertEqual(in_stock.data["count"], 1)
        self.assertEqual(in_stock.data["results"][0]["batch"], "L-1")
