# common/services/gateway.py

"""
PERSISTENCE GATEWAY

The single handle engines use to reach storage. One gateway is built per
inbound call and passed into each engine's constructor; engines never touch
a module-level connection.

Guarantees:
- atomic() opens (or joins) a transaction on the gateway's database alias.
- locked() returns a row-locking queryset; callers must be inside atomic().
- require_transaction() fails loudly when a multi-step write is attempted
  outside an enclosing transaction.
"""

from __future__ import annotations

from django.db import DEFAULT_DB_ALIAS, transaction


class TransactionRequiredError(RuntimeError):
    """Raised when a ledger write is attempted outside a transaction."""


class PersistenceGateway:
    def __init__(self, using: str = DEFAULT_DB_ALIAS):
        self.using = using

    def atomic(self):
        return transaction.atomic(using=self.using)

    def objects(self, model):
        return model._default_manager.db_manager(self.using)

    def locked(self, model):
        return self.objects(model).select_for_update()

    def in_transaction(self) -> bool:
        return transaction.get_connection(self.using).in_atomic_block

    def require_transaction(self, operation: str) -> None:
        if not self.in_transaction():
            raise TransactionRequiredError(
                f"{operation} must run inside the transaction that records its cause"
            )

    def __repr__(self):
        return f"PersistenceGateway(using={self.using!r})"
