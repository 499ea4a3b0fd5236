"""
Inventory Engine Pydantic Schemas
Request/Response models for the inventory ledger API
"""

from .inventory import (
    ItemCreate, ItemUpdate, ItemRead,
    WarehouseCreate, WarehouseUpdate, WarehouseRead,
    ReceiptIntent, IssueIntent, TransferIntent, AdjustmentIntent, WasteIntent, TransactionRead,
    RequisitionCreate, RequisitionApprove, RequisitionFillRequest, RequisitionRead, RequisitionFillRead,
    CountCreate, CountStart, CountLineUpdate, CountRead,
    StockLevelRead, StockLevelRow, ValuationRow, ValuationReport, LowStockAlert,
    JobMaterialLine, JobMaterialSummary, WasteEntry, WasteReport,
)
from .common import ErrorResponse, HealthResponse

__all__ = [
    # Master data
    "ItemCreate",
    "ItemUpdate",
    "ItemRead",
    "WarehouseCreate",
    "WarehouseUpdate",
    "WarehouseRead",

    # Ledger intents
    "ReceiptIntent",
    "IssueIntent",
    "TransferIntent",
    "AdjustmentIntent",
    "WasteIntent",
    "TransactionRead",

    # Workflows
    "RequisitionCreate",
    "RequisitionApprove",
    "RequisitionFillRequest",
    "RequisitionRead",
    "RequisitionFillRead",
    "CountCreate",
    "CountStart",
    "CountLineUpdate",
    "CountRead",

    # Reports
    "StockLevelRead",
    "StockLevelRow",
    "ValuationRow",
    "ValuationReport",
    "LowStockAlert",
    "JobMaterialLine",
    "JobMaterialSummary",
    "WasteEntry",
    "WasteReport",

    # Common
    "ErrorResponse",
    "HealthResponse",
]
