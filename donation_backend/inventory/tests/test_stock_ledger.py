# inventory/tests/test_stock_ledger.py

from datetime import date

from django.core.exceptions import ValidationError
from django.db.models import Sum
from django.test import TestCase, TransactionTestCase

from catalog.models import Batch, Medication, Warehouse
from common.services.exceptions import (
    DomainValidationError,
    InsufficientStockError,
    NotFoundError,
)
from common.services.gateway import PersistenceGateway, TransactionRequiredError
from inventory.models import StockMovement, WarehouseStock
from inventory.services.stock_ledger import StockKey, StockLedger


def make_catalog():
    warehouse = Warehouse.objects.create(name="Central")
    other = Warehouse.objects.create(name="Norte")
    medication = Medication.objects.create(code="AMOX500", name="Amoxicilina 500mg")
    batch = Batch.objects.create(code="L-1", medication=medication, expires_on=date(2030, 1, 1))
    batch2 = Batch.objects.create(code="L-2", medication=medication, expires_on=date(2031, 1, 1))
    return warehouse, other, medication, batch, batch2


class StockLedgerTests(TestCase):
    """
    GUARANTEES:
    - credit upserts the cell and moves the medication total
    - debit never overdraws
    - global total equals the sum of cells after any sequence
    - every mutation is audited
    """

    def setUp(self):
        self.warehouse, self.other, self.medication, self.batch, self.batch2 = make_catalog()
        self.gateway = PersistenceGateway()
        self.ledger = StockLedger(self.gateway)
        self.key = StockKey(
            warehouse_id=self.warehouse.id,
            medication_code="AMOX500",
            batch_code="L-1",
        )

    def _global(self):
        self.medication.refresh_from_db()
        return self.medication.global_available_quantity

    def _sum_of_cells(self):
        total = WarehouseStock.objects.filter(medication=self.medication).aggregate(s=Sum("quantity"))["s"]
        return int(total or 0)

    # ======================================================
    # CREDIT
    # ======================================================

    def test_credit_creates_cell_then_increments(self):
        with self.gateway.atomic():
            stock = self.ledger.credit(self.key, 20, reference="donation:1")
        self.assertEqual(stock.quantity, 20)

        with self.gateway.atomic():
            stock = self.ledger.credit(self.key, 5, reference="donation:2")
        self.assertEqual(stock.quantity, 25)

        self.assertEqual(WarehouseStock.objects.count(), 1)
        self.assertEqual(self._global(), 25)

        movements = StockMovement.objects.filter(batch=self.batch)
        self.assertEqual(movements.count(), 2)
        self.assertTrue(all(m.direction == StockMovement.Direction.IN for m in movements))

    def test_credit_rejects_batch_of_other_medication(self):
        Medication.objects.create(code="IBU400", name="Ibuprofeno 400mg")
        bad_key = StockKey(warehouse_id=self.warehouse.id, medication_code="IBU400", batch_code="L-1")

        with self.assertRaises(DomainValidationError):
            with self.gateway.atomic():
                self.ledger.credit(bad_key, 1)

        self.assertFalse(WarehouseStock.objects.exists())

    def test_credit_rejects_non_positive_quantity(self):
        for bad in (0, -3, "abc", None, True):
            with self.assertRaises(DomainValidationError):
                with self.gateway.atomic():
                    self.ledger.credit(self.key, bad)

    # ======================================================
    # DEBIT
    # ======================================================

    def test_debit_then_credit_restores_exactly(self):
        with self.gateway.atomic():
            self.ledger.credit(self.key, 10)

        with self.gateway.atomic():
            self.ledger.debit(warehouse_id=self.warehouse.id, batch_code="L-1", quantity=4)
        self.assertEqual(self.ledger.available(warehouse_id=self.warehouse.id, batch_code="L-1"), 6)
        self.assertEqual(self._global(), 6)

        with self.gateway.atomic():
            self.ledger.credit(self.key, 4)
        self.assertEqual(self.ledger.available(warehouse_id=self.warehouse.id, batch_code="L-1"), 10)
        self.assertEqual(self._global(), 10)

    def test_debit_cannot_overdraw(self):
        with self.gateway.atomic():
            self.ledger.credit(self.key, 3)

        with self.assertRaises(InsufficientStockError):
            with self.gateway.atomic():
                self.ledger.debit(warehouse_id=self.warehouse.id, batch_code="L-1", quantity=4)

        self.assertEqual(self.ledger.available(warehouse_id=self.warehouse.id, batch_code="L-1"), 3)
        self.assertEqual(self._global(), 3)
        self.assertEqual(StockMovement.objects.filter(direction="OUT").count(), 0)

    def test_debit_unknown_batch_is_not_found(self):
        with self.assertRaises(NotFoundError):
            with self.gateway.atomic():
                self.ledger.debit(warehouse_id=self.warehouse.id, batch_code="NOPE", quantity=1)

    def test_debit_missing_cell_is_not_found(self):
        with self.assertRaises(NotFoundError):
            with self.gateway.atomic():
                self.ledger.debit(warehouse_id=self.other.id, batch_code="L-1", quantity=1)

    def test_global_matches_sum_of_cells_across_sequence(self):
        key_other = StockKey(warehouse_id=self.other.id, medication_code="AMOX500", batch_code="L-1")
        key_b2 = StockKey(warehouse_id=self.warehouse.id, medication_code="AMOX500", batch_code="L-2")

        with self.gateway.atomic():
            self.ledger.credit(self.key, 10)
            self.ledger.credit(key_other, 7)
            self.ledger.credit(key_b2, 2)
            self.ledger.debit(warehouse_id=self.other.id, batch_code="L-1", quantity=5)
            self.ledger.set_absolute(key_b2, 9)
            self.ledger.set_absolute(self.key, 1)

        self.assertEqual(self._global(), self._sum_of_cells())
        self.assertEqual(self._global(), 1 + 2 + 9)

    # ======================================================
    # SET ABSOLUTE
    # ======================================================

    def test_set_absolute_moves_global_by_delta(self):
        with self.gateway.atomic():
            self.ledger.credit(self.key, 10)
            stock = self.ledger.set_absolute(self.key, 4)

        self.assertEqual(stock.quantity, 4)
        self.assertEqual(self._global(), 4)

        adjustment = StockMovement.objects.get(reason=StockMovement.Reason.ADJUSTMENT)
        self.assertEqual(adjustment.direction, StockMovement.Direction.OUT)
        self.assertEqual(adjustment.quantity, 6)

    def test_set_absolute_same_value_records_nothing(self):
        with self.gateway.atomic():
            self.ledger.credit(self.key, 5)
            self.ledger.set_absolute(self.key, 5)

        self.assertFalse(StockMovement.objects.filter(reason=StockMovement.Reason.ADJUSTMENT).exists())

    def test_movements_are_immutable(self):
        with self.gateway.atomic():
            self.ledger.credit(self.key, 5)

        movement = StockMovement.objects.get()
        movement.quantity = 99
        with self.assertRaises(ValidationError):
            movement.save()
        with self.assertRaises(ValidationError):
            movement.delete()


class StockLedgerTransactionGuardTests(TransactionTestCase):
    """The ledger refuses to run outside the caller's transaction."""

    def setUp(self):
        self.warehouse, _, _, _, _ = make_catalog()
        self.ledger = StockLedger(PersistenceGateway())
        self.key = StockKey(warehouse_id=self.warehouse.id, medication_code="AMOX500", batch_code="L-1")

    def test_credit_outside_transaction_fails(self):
        with self.assertRaises(TransactionRequiredError):
            self.ledger.credit(self.key, 1)
        self.assertFalse(WarehouseStock.objects.exists())

    def test_debit_outside_transaction_fails(self):
        with self.assertRaises(TransactionRequiredError):
            self.ledger.debit(warehouse_id=self.warehouse.id, batch_code="L-1", quantity=1)

    def test_set_absolute_outside_transaction_fails(self):
        with self.assertRaises(TransactionRequiredError):
            self.ledger.set_absolute(self.key, 3)
