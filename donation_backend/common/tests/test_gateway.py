# common/tests/test_gateway.py

from django.test import TransactionTestCase

from common.services.gateway import PersistenceGateway, TransactionRequiredError


class PersistenceGatewayTests(TransactionTestCase):
    def setUp(self):
        self.gateway = PersistenceGateway()

    def test_require_transaction_outside_atomic_fails(self):
        self.assertFalse(self.gateway.in_transaction())
        with self.assertRaises(TransactionRequiredError):
            self.gateway.require_transaction("credit")

    def test_require_transaction_inside_atomic_passes(self):
        with self.gateway.atomic():
            self.assertTrue(self.gateway.in_transaction())
            self.gateway.require_transaction("credit")

    def test_repr_names_alias(self):
        self.assertEqual(repr(self.gateway), "PersistenceGateway(using='default')")
