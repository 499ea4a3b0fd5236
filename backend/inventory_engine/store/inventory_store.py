"""
Inventory collections bound to one database session
"""
from sqlalchemy.orm import Session

from inventory_engine.models.inventory import (
    InventoryItem, Warehouse, InventoryTransaction, MaterialRequisition,
    RequisitionFill, InventoryCount
)
from inventory_engine.store.collection import Collection, LedgerCollection


class InventoryStore:
    """The collections the engine reads and writes, sharing one session"""

    def __init__(self, db: Session):
        self.db = db
        self.items = Collection(db, InventoryItem, name="Item")
        self.warehouses = Collection(db, Warehouse, name="Warehouse")
        self.transactions = LedgerCollection(db, InventoryTransaction, name="Transaction")
        self.requisitions = Collection(db, MaterialRequisition, name="Requisition")
        self.fills = Collection(db, RequisitionFill, name="RequisitionFill")
        self.counts = Collection(db, InventoryCount, name="Count")

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
