"""Inventory Ledger Schemas"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
import datetime as dt
from datetime import datetime, date
from decimal import Decimal

from inventory_engine.models.inventory import (
    ItemCategory, ItemUnit, WarehouseType, TransactionType,
    RequisitionStatus, CountStatus, ValuationMethod
)


# Item Schemas
class ItemCreate(BaseModel):
    number: str = Field(..., min_length=1, max_length=30)
    description: str = Field(..., min_length=1, max_length=200)
    unit: ItemUnit = ItemUnit.EACH
    category: ItemCategory = ItemCategory.OTHER
    preferred_vendor_id: Optional[str] = None
    preferred_vendor_name: Optional[str] = None
    reorder_point: Decimal = Field(default=Decimal("0"), ge=0)
    reorder_quantity: Decimal = Field(default=Decimal("0"), ge=0)
    unit_cost: Decimal = Field(default=Decimal("0"), ge=0)


class ItemUpdate(BaseModel):
    description: Optional[str] = None
    unit: Optional[ItemUnit] = None
    category: Optional[ItemCategory] = None
    preferred_vendor_id: Optional[str] = None
    preferred_vendor_name: Optional[str] = None
    reorder_point: Optional[Decimal] = Field(None, ge=0)
    reorder_quantity: Optional[Decimal] = Field(None, ge=0)
    unit_cost: Optional[Decimal] = Field(None, ge=0)
    active: Optional[bool] = None


class ItemRead(BaseModel):
    id: int
    number: str
    description: str
    unit: str
    category: str
    preferred_vendor_id: Optional[str] = None
    preferred_vendor_name: Optional[str] = None
    reorder_point: Decimal
    reorder_quantity: Decimal
    unit_cost: Decimal
    last_cost: Decimal
    avg_cost: Decimal
    active: bool

    model_config = ConfigDict(from_attributes=True)


# Warehouse Schemas
class WarehouseCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    type: WarehouseType = WarehouseType.WAREHOUSE
    address: Optional[str] = None
    job_id: Optional[str] = None
    contact_name: Optional[str] = None
    contact_phone: Optional[str] = None


class WarehouseUpdate(BaseModel):
    name: Optional[str] = None
    type: Optional[WarehouseType] = None
    address: Optional[str] = None
    job_id: Optional[str] = None
    contact_name: Optional[str] = None
    contact_phone: Optional[str] = None
    active: Optional[bool] = None


class WarehouseRead(BaseModel):
    id: int
    name: str
    type: str
    address: Optional[str] = None
    job_id: Optional[str] = None
    contact_name: Optional[str] = None
    contact_phone: Optional[str] = None
    active: bool

    model_config = ConfigDict(from_attributes=True)


# Ledger intents
class ReceiptIntent(BaseModel):
    item_id: int
    warehouse_id: int
    quantity: Decimal
    unit_cost: Decimal
    date: Optional[dt.date] = None
    reference: Optional[str] = None
    po_number: Optional[str] = None
    lot_number: Optional[str] = None
    notes: Optional[str] = None


class IssueIntent(BaseModel):
    item_id: int
    warehouse_id: int
    quantity: Decimal
    date: Optional[dt.date] = None
    job_id: Optional[str] = None
    cost_code: Optional[str] = None
    reference: Optional[str] = None
    notes: Optional[str] = None


class TransferIntent(BaseModel):
    item_id: int
    from_warehouse_id: int
    to_warehouse_id: int
    quantity: Decimal
    date: Optional[dt.date] = None
    reference: Optional[str] = None
    notes: Optional[str] = None


class AdjustmentIntent(BaseModel):
    item_id: int
    warehouse_id: int
    quantity: Decimal = Field(..., description="Signed; negative reduces stock")
    unit_cost: Optional[Decimal] = Field(None, description="Overrides the item's average cost")
    date: Optional[dt.date] = None
    reference: Optional[str] = None
    notes: Optional[str] = None


class WasteIntent(BaseModel):
    item_id: int
    warehouse_id: int
    quantity: Decimal
    date: Optional[dt.date] = None
    job_id: Optional[str] = None
    cost_code: Optional[str] = None
    notes: Optional[str] = None


class TransactionRead(BaseModel):
    id: int
    item_id: int
    warehouse_id: int
    to_warehouse_id: Optional[int] = None
    type: TransactionType
    quantity: Decimal
    unit_cost: Decimal
    total_cost: Decimal
    date: dt.date
    reference: Optional[str] = None
    job_id: Optional[str] = None
    cost_code: Optional[str] = None
    notes: Optional[str] = None
    lot_number: Optional[str] = None
    po_number: Optional[str] = None
    count_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


# Requisition Schemas
class RequisitionCreate(BaseModel):
    number: str = Field(..., min_length=1, max_length=30)
    job_id: str
    requested_by: str
    needed_date: Optional[date] = None
    item_id: int
    item_description: Optional[str] = None
    quantity: Decimal
    warehouse_id: Optional[int] = None
    notes: Optional[str] = None


class RequisitionApprove(BaseModel):
    approved_by: str = Field(..., min_length=1)


class RequisitionFillRequest(BaseModel):
    quantity: Decimal
    filled_by: Optional[str] = None
    notes: Optional[str] = None


class RequisitionRead(BaseModel):
    id: int
    number: str
    job_id: str
    requested_by: str
    request_date: date
    needed_date: Optional[date] = None
    status: RequisitionStatus
    item_id: int
    item_description: Optional[str] = None
    quantity: Decimal
    warehouse_id: Optional[int] = None
    approved_by: Optional[str] = None
    approved_date: Optional[date] = None
    filled_quantity: Decimal
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class RequisitionFillRead(BaseModel):
    id: int
    requisition_id: int
    quantity: Decimal
    cumulative_quantity: Decimal
    status_after: RequisitionStatus
    filled_by: Optional[str] = None
    notes: Optional[str] = None
    filled_at: datetime

    model_config = ConfigDict(from_attributes=True)


# Physical Count Schemas
class CountCreate(BaseModel):
    warehouse_id: int
    item_id: int
    counted_by: str
    system_quantity: Decimal
    counted_quantity: Decimal
    count_date: Optional[date] = None
    notes: Optional[str] = None


class CountStart(BaseModel):
    warehouse_id: int
    item_id: int
    counted_by: str
    counted_quantity: Optional[Decimal] = None
    count_date: Optional[date] = None
    notes: Optional[str] = None


class CountLineUpdate(BaseModel):
    counted_quantity: Decimal
    notes: Optional[str] = None


class CountRead(BaseModel):
    id: int
    warehouse_id: int
    item_id: int
    count_date: date
    status: CountStatus
    counted_by: str
    system_quantity: Decimal
    counted_quantity: Decimal
    variance: Decimal
    adjustment_posted: bool
    adjustment_transaction_id: Optional[int] = None
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# Report Schemas
class StockLevelRead(BaseModel):
    item_id: int
    warehouse_id: Optional[int] = None
    quantity: Decimal


class StockLevelRow(BaseModel):
    item_id: int
    item_number: str
    item_description: str
    unit: str
    warehouse_id: int
    warehouse_name: str
    quantity: Decimal
    unit_cost: Decimal
    total_value: Decimal


class ValuationRow(BaseModel):
    item_id: int
    item_number: str
    item_description: str
    unit: str
    total_quantity: Decimal
    unit_cost: Decimal
    total_value: Decimal
    method: ValuationMethod


class ValuationReport(BaseModel):
    method: ValuationMethod
    rows: List[ValuationRow]
    total_value: Decimal


class LowStockAlert(BaseModel):
    item_id: int
    item_number: str
    item_description: str
    current_stock: Decimal
    reorder_point: Decimal
    reorder_quantity: Decimal
    deficit: Decimal


class JobMaterialLine(BaseModel):
    item_id: int
    item_number: str
    item_description: str
    quantity_issued: Decimal
    quantity_wasted: Decimal
    cost: Decimal


class JobMaterialSummary(BaseModel):
    job_id: str
    total_issued: Decimal
    total_waste: Decimal
    total_cost: Decimal
    waste_cost: Decimal
    items: List[JobMaterialLine]


class WasteEntry(BaseModel):
    transaction_id: int
    item_id: int
    item_number: str
    item_description: str
    warehouse_id: int
    warehouse_name: str
    quantity: Decimal
    unit_cost: Decimal
    total_cost: Decimal
    date: dt.date
    job_id: Optional[str] = None
    notes: Optional[str] = None


class WasteReport(BaseModel):
    entries: List[WasteEntry]
    total_waste_cost: Decimal
