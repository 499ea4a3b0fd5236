"""
Inventory Engine SQLAlchemy Models
"""

# Import all models to ensure they are registered with SQLAlchemy
from .inventory import (
    InventoryItem, Warehouse, InventoryTransaction, MaterialRequisition,
    RequisitionFill, InventoryCount,
    ItemCategory, ItemUnit, WarehouseType, TransactionType,
    RequisitionStatus, CountStatus, ValuationMethod,
)

__all__ = [
    "InventoryItem",
    "Warehouse",
    "InventoryTransaction",
    "MaterialRequisition",
    "RequisitionFill",
    "InventoryCount",
    "ItemCategory",
    "ItemUnit",
    "WarehouseType",
    "TransactionType",
    "RequisitionStatus",
    "CountStatus",
    "ValuationMethod",
]
