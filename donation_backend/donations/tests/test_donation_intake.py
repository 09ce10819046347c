# donations/tests/test_donation_intake.py

from datetime import date
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from catalog.models import Batch, Medication, Provider, Warehouse
from common.services.exceptions import (
    DomainValidationError,
    InsufficientStockError,
    NotFoundError,
)
from common.services.gateway import PersistenceGateway
from donations.models import Donation, DonationMedication
from donations.services.donation_intake import DonationIntakeEngine
from inventory.models import StockMovement, WarehouseStock
from inventory.services.stock_ledger import StockLedger
from users.models import User


class DonationFixtureMixin:
    def build_fixture(self):
        self.user = User.objects.create_user(email="recepcion@example.com", password="pass", role="warehouse")
        self.gateway = PersistenceGateway()
        self.ledger = StockLedger(self.gateway)
        self.engine = DonationIntakeEngine(self.gateway, self.ledger)

        self.warehouse = Warehouse.objects.create(name="Almacen Central")
        self.medication = Medication.objects.create(code="METF850", name="Metformina 850mg")
        self.batch = Batch.objects.create(code="LOT-X", medication=self.medication, expires_on=date(2031, 6, 30))
        Provider.objects.create(provider_id="001234567", name="Farmacia Solidaria")

    def line(self, quantity=20, batch="LOT-X", warehouse=None):
        return {"warehouse": warehouse or self.warehouse.id, "batch": batch, "quantity": quantity}

    def cell(self):
        return WarehouseStock.objects.get(warehouse=self.warehouse, batch=self.batch).quantity

    def global_qty(self):
        self.medication.refresh_from_db()
        return self.medication.global_available_quantity


class DonationIntakeTests(DonationFixtureMixin, TestCase):
    """
    GUARANTEES:
    - a donation and its stock credits are one transaction
    - every bad line is reported before anything is written
    - deletion reverses exactly what was credited, or nothing at all
    """

    def setUp(self):
        self.build_fixture()

    def test_create_then_delete_scenario(self):
        donation = self.engine.create_donation(
            provider_id="001234567",
            description="Entrega mensual",
            lines=[self.line(20)],
            user=self.user,
        )

        self.assertEqual(donation.provider_id, "001234567")
        self.assertEqual(donation.lines.count(), 1)
        self.assertEqual(self.cell(), 20)
        self.assertEqual(self.global_qty(), 20)
        self.assertTrue(
            StockMovement.objects.filter(
                reason=StockMovement.Reason.DONATION,
                reference=f"donation:{donation.number}",
                quantity=20,
            ).exists()
        )

        self.engine.delete_donation(donation.number)

        self.assertFalse(Donation.objects.exists())
        self.assertFalse(DonationMedication.objects.exists())
        self.assertEqual(self.cell(), 0)
        self.assertEqual(self.global_qty(), 0)

    def test_anonymous_donation_is_allowed(self):
        donation = self.engine.create_donation(lines=[self.line(3)])
        self.assertIsNone(donation.provider_id)
        self.assertEqual(self.cell(), 3)

    def test_provider_is_validated(self):
        with self.assertRaises(DomainValidationError):
            self.engine.create_donation(provider_id="12", lines=[self.line()])
        with self.assertRaises(NotFoundError):
            self.engine.create_donation(provider_id="999999999", lines=[self.line()])
        self.assertFalse(Donation.objects.exists())

    def test_validation_lists_every_problem_and_writes_nothing(self):
        with self.assertRaises(DomainValidationError) as ctx:
            self.engine.create_donation(
                lines=[
                    self.line(5),
                    self.line(5, batch="NOPE"),
                    self.line(5, warehouse=4242),
                    self.line(0),
                ]
            )

        details = ctx.exception.details
        self.assertIn("batch NOPE does not exist", details)
        self.assertIn("warehouse 4242 does not exist", details)
        self.assertTrue(any("lines[3].quantity" in d for d in details))

        self.assertFalse(Donation.objects.exists())
        self.assertFalse(WarehouseStock.objects.exists())

    def test_empty_donation_is_rejected(self):
        with self.assertRaises(DomainValidationError):
            self.engine.create_donation(lines=[])

    def test_add_lines_is_additive(self):
        donation = self.engine.create_donation(lines=[self.line(10)])

        self.engine.add_lines(donation.number, [self.line(4)])

        self.assertEqual(donation.lines.count(), 2)
        self.assertEqual(self.cell(), 14)
        self.assertEqual(self.global_qty(), 14)

    def test_add_lines_to_unknown_donation_is_not_found(self):
        with self.assertRaises(NotFoundError):
            self.engine.add_lines(777, [self.line(1)])

    def test_delete_after_consumption_rolls_back(self):
        donation = self.engine.create_donation(lines=[self.line(20)])
        with self.gateway.atomic():
            self.ledger.debit(warehouse_id=self.warehouse.id, batch_code="LOT-X", quantity=15)

        with self.assertRaises(InsufficientStockError):
            self.engine.delete_donation(donation.number)

        self.assertTrue(Donation.objects.filter(pk=donation.number).exists())
        self.assertEqual(donation.lines.count(), 1)
        self.assertEqual(self.cell(), 5)
        self.assertFalse(
            StockMovement.objects.filter(reason=StockMovement.Reason.DONATION_REVERSAL).exists()
        )

    def test_partial_reversal_is_undone_when_a_later_line_fails(self):
        Batch.objects.create(code="LOT-Y", medication=self.medication, expires_on=date(2032, 1, 1))
        donation = self.engine.create_donation(lines=[self.line(10), self.line(8, batch="LOT-Y")])
        with self.gateway.atomic():
            self.ledger.debit(warehouse_id=self.warehouse.id, batch_code="LOT-Y", quantity=5)

        with self.assertRaises(InsufficientStockError):
            self.engine.delete_donation(donation.number)

        self.assertEqual(self.cell(), 10)
        self.assertEqual(self.global_qty(), 13)
        self.assertEqual(donation.lines.count(), 2)
        self.assertTrue(Donation.objects.filter(pk=donation.number).exists())
        self.assertFalse(
            StockMovement.objects.filter(reason=StockMovement.Reason.DONATION_REVERSAL).exists()
        )

    def test_failure_after_first_credit_leaves_nothing_behind(self):
        Batch.objects.create(code="LOT-Y", medication=self.medication, expires_on=date(2032, 1, 1))
        real_credit = self.ledger.credit
        credited = []

        def credit_then_fail(key, quantity, **kwargs):
            credited.append(key.batch_code)
            if len(credited) == 2:
                raise DatabaseError("connection lost")
            return real_credit(key, quantity, **kwargs)

        with mock.patch.object(self.ledger, "credit", side_effect=credit_then_fail):
            with self.assertRaises(DatabaseError):
                self.engine.create_donation(lines=[self.line(10), self.line(8, batch="LOT-Y")])

        self.assertEqual(credited, ["LOT-X", "LOT-Y"])
        self.assertFalse(Donation.objects.exists())
        self.assertFalse(DonationMedication.objects.exists())
        self.assertFalse(WarehouseStock.objects.filter(quantity__gt=0).exists())
        self.assertEqual(self.global_qty(), 0)
        self.assertFalse(StockMovement.objects.exists())

    def test_delete_unknown_donation_is_not_found(self):
        with self.assertRaises(NotFoundError):
            self.engine.delete_donation(12345)


class DonationApiTests(DonationFixtureMixin, TestCase):
    def setUp(self):
        self.build_fixture()
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def test_create_add_delete(self):
        created = self.client.post(
            "/api/donations/",
            {"provider": "001234567", "description": "Caja 1", "lines": [self.line(20)]},
            format="json",
        )
        self.assertEqual(created.status_code, status.HTTP_201_CREATED, created.data)
        self.assertEqual(created.data["provider_name"], "Farmacia Solidaria")
        self.assertEqual(created.data["lines"][0]["medication"], "METF850")
        number = created.data["number"]

        added = self.client.post(f"/api/donations/{number}/lines/", {"lines": [self.line(2)]}, format="json")
        self.assertEqual(added.status_code, status.HTTP_200_OK, added.data)
        self.assertEqual(len(added.data["lines"]), 2)
        self.assertEqual(self.cell(), 22)

        deleted = self.client.delete(f"/api/donations/{number}/")
        self.assertEqual(deleted.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(self.cell(), 0)

    def test_invalid_lines_are_400_with_details(self):
        response = self.client.post(
            "/api/donations/",
            {"lines": [self.line(1, batch="NOPE")]},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], "VALIDATION_ERROR")
        self.assertIn("batch NOPE does not exist", response.data["error"]["details"])

    def test_delete_consumed_donation_is_409(self):
        donation = self.engine.create_donation(lines=[self.line(5)])
        with self.gateway.atomic():
            self.ledger.debit(warehouse_id=self.warehouse.id, batch_code="LOT-X", quantity=5)

        response = self.client.delete(f"/api/donations/{donation.number}/")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["error"]["code"], "INSUFFICIENT_STOCK")

    def test_requires_authentication(self):
        response = APIClient().get("/api/donations/")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
