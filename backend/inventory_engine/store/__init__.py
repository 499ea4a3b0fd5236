"""Ledger store - generic persistent collections"""

from .collection import Collection, CollectionQuery, LedgerCollection
from .inventory_store import InventoryStore

__all__ = ["Collection", "CollectionQuery", "LedgerCollection", "InventoryStore"]
