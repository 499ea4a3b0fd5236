"""
Inventory services
Transaction ledger, stock levels, costing, requisition and count
workflows, and reporting.
"""

from .inventory_service import InventoryService
from .transaction_ledger import TransactionLedger
from .stock_levels import StockLevelCalculator
from .costing import CostingEngine
from .requisitions import RequisitionWorkflow
from .physical_count import PhysicalCountWorkflow
from .item_master import ItemMasterService
from .reports import InventoryReports
from .helpers import ItemLockRegistry, round2, round_qty

__all__ = [
    "InventoryService",
    "TransactionLedger",
    "StockLevelCalculator",
    "CostingEngine",
    "RequisitionWorkflow",
    "PhysicalCountWorkflow",
    "ItemMasterService",
    "InventoryReports",
    "ItemLockRegistry",
    "round2",
    "round_qty",
]
