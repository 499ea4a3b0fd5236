"""
Inventory Ledger Models
SQLAlchemy models for the item master, locations, the transaction ledger
and the requisition / physical count workflows.

Entities reference each other by id only; there are no ORM relationships.
"""
from enum import Enum

from sqlalchemy import (
    Column, String, Integer, Numeric, Date, DateTime, Text, Boolean,
    ForeignKey, Index, inspect
)
from sqlalchemy.sql import func

from inventory_engine.core.database import Base


class ItemCategory(str, Enum):
    RAW_MATERIAL = "raw_material"
    FINISHED_GOOD = "finished_good"
    CONSUMABLE = "consumable"
    SAFETY = "safety"
    TOOL = "tool"
    EQUIPMENT_PART = "equipment_part"
    OTHER = "other"


class ItemUnit(str, Enum):
    EACH = "each"
    FT = "ft"
    LF = "lf"
    SF = "sf"
    SY = "sy"
    CY = "cy"
    TON = "ton"
    LB = "lb"
    GAL = "gal"
    BAG = "bag"
    BOX = "box"
    ROLL = "roll"
    SHEET = "sheet"
    BUNDLE = "bundle"
    PALLET = "pallet"


class WarehouseType(str, Enum):
    WAREHOUSE = "warehouse"
    YARD = "yard"
    JOB_SITE = "job_site"
    VEHICLE = "vehicle"


class TransactionType(str, Enum):
    RECEIPT = "receipt"
    ISSUE = "issue"
    TRANSFER = "transfer"
    ADJUSTMENT = "adjustment"
    WASTE = "waste"


class RequisitionStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    PARTIALLY_FILLED = "partially_filled"
    FILLED = "filled"
    CANCELLED = "cancelled"


class CountStatus(str, Enum):
    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    POSTED = "posted"


class ValuationMethod(str, Enum):
    FIFO = "fifo"
    LIFO = "lifo"
    AVERAGE = "average"


class RecordMixin:
    """Plain-dict view of a row, used for event payloads"""

    def to_dict(self) -> dict:
        return {
            attr.key: getattr(self, attr.key)
            for attr in inspect(self).mapper.column_attrs
        }


class InventoryItem(RecordMixin, Base):
    """Item master record. Never deleted, only deactivated."""
    __tablename__ = "inventory_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    number = Column(String(30), unique=True, nullable=False, doc="Item number")
    description = Column(String(200), nullable=False, default='', doc="Item description")
    unit = Column(String(10), nullable=False, default=ItemUnit.EACH.value, doc="Unit of measure")
    category = Column(String(20), nullable=False, default=ItemCategory.OTHER.value, doc="Item category")

    preferred_vendor_id = Column(String(50), default='', doc="Preferred vendor id")
    preferred_vendor_name = Column(String(100), default='', doc="Preferred vendor name")

    # Reorder Information
    reorder_point = Column(Numeric(15, 2), nullable=False, default=0, doc="Reorder point")
    reorder_quantity = Column(Numeric(15, 2), nullable=False, default=0, doc="Reorder quantity")

    # Cost Information
    unit_cost = Column(Numeric(15, 2), nullable=False, default=0, doc="Manual baseline cost")
    last_cost = Column(Numeric(15, 2), nullable=False, default=0, doc="Most recent receipt cost")
    avg_cost = Column(Numeric(15, 2), nullable=False, default=0, doc="Weighted average receipt cost")

    active = Column(Boolean, nullable=False, default=True, doc="Active item flag")

    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp())
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp())


class Warehouse(RecordMixin, Base):
    """Warehouse / yard / job site / vehicle location"""
    __tablename__ = "warehouses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, doc="Location name")
    type = Column(String(20), nullable=False, default=WarehouseType.WAREHOUSE.value, doc="Location type")
    address = Column(String(200), default='', doc="Address")
    job_id = Column(String(50), default='', doc="Linked job for job-site locations")
    contact_name = Column(String(100), default='', doc="Contact person")
    contact_phone = Column(String(30), default='', doc="Contact phone")
    active = Column(Boolean, nullable=False, default=True, doc="Active location flag")

    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp())
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp())


class InventoryTransaction(RecordMixin, Base):
    """
    Ledger entry - immutable once inserted.

    quantity is positive for receipt/issue/transfer/waste; the type gives
    its direction. Adjustments carry their sign in quantity.
    total_cost is fixed at insertion as round2(quantity * unit_cost).
    """
    __tablename__ = "inventory_transactions"
    __table_args__ = (
        Index("ix_inventory_transactions_item_date", "item_id", "date"),
        Index("ix_inventory_transactions_to_warehouse", "to_warehouse_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True, doc="Ledger sequence number")
    item_id = Column(Integer, ForeignKey("inventory_items.id"), nullable=False, index=True)
    warehouse_id = Column(Integer, ForeignKey("warehouses.id"), nullable=False, index=True)
    to_warehouse_id = Column(Integer, ForeignKey("warehouses.id"), nullable=True, doc="Transfer destination")

    type = Column(String(20), nullable=False, index=True, doc="Transaction type")
    quantity = Column(Numeric(15, 2), nullable=False)
    unit_cost = Column(Numeric(15, 2), nullable=False)
    total_cost = Column(Numeric(15, 2), nullable=False)
    date = Column(Date, nullable=False, doc="Transaction date")

    reference = Column(String(200), default='')
    job_id = Column(String(50), default='', index=True)
    cost_code = Column(String(50), default='')
    notes = Column(Text, default='')
    lot_number = Column(String(50), default='')
    po_number = Column(String(50), default='')
    count_id = Column(Integer, ForeignKey("inventory_counts.id"), nullable=True, doc="Originating physical count")

    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp())


class MaterialRequisition(RecordMixin, Base):
    """Material request from a job site"""
    __tablename__ = "material_requisitions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    number = Column(String(30), unique=True, nullable=False, doc="Requisition number")
    job_id = Column(String(50), nullable=False, index=True)
    requested_by = Column(String(100), nullable=False)
    request_date = Column(Date, nullable=False)
    needed_date = Column(Date, nullable=True)
    status = Column(String(20), nullable=False, default=RequisitionStatus.DRAFT.value, index=True)

    item_id = Column(Integer, ForeignKey("inventory_items.id"), nullable=False)
    item_description = Column(String(200), default='')
    quantity = Column(Numeric(15, 2), nullable=False)
    warehouse_id = Column(Integer, ForeignKey("warehouses.id"), nullable=True)

    approved_by = Column(String(100), nullable=True)
    approved_date = Column(Date, nullable=True)
    filled_quantity = Column(Numeric(15, 2), nullable=False, default=0)
    notes = Column(Text, default='')

    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp())
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp())


class RequisitionFill(RecordMixin, Base):
    """One fill against a requisition"""
    __tablename__ = "requisition_fills"

    id = Column(Integer, primary_key=True, autoincrement=True)
    requisition_id = Column(Integer, ForeignKey("material_requisitions.id"), nullable=False, index=True)
    quantity = Column(Numeric(15, 2), nullable=False, doc="Quantity filled in this step")
    cumulative_quantity = Column(Numeric(15, 2), nullable=False, doc="Filled quantity after this step")
    status_after = Column(String(20), nullable=False)
    filled_by = Column(String(100), default='')
    notes = Column(Text, default='')
    filled_at = Column(DateTime(timezone=True), nullable=False)


class InventoryCount(RecordMixin, Base):
    """Physical count line for one item at one location. Immutable once posted."""
    __tablename__ = "inventory_counts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    warehouse_id = Column(Integer, ForeignKey("warehouses.id"), nullable=False, index=True)
    item_id = Column(Integer, ForeignKey("inventory_items.id"), nullable=False)
    count_date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, default=CountStatus.DRAFT.value, index=True)
    counted_by = Column(String(100), nullable=False)

    system_quantity = Column(Numeric(15, 2), nullable=False, doc="Snapshot of on-hand at creation")
    counted_quantity = Column(Numeric(15, 2), nullable=False)
    variance = Column(Numeric(15, 2), nullable=False, doc="counted - system")

    adjustment_posted = Column(Boolean, nullable=False, default=False)
    adjustment_transaction_id = Column(Integer, nullable=True, doc="Ledger entry created by posting")
    notes = Column(Text, default='')

    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp())
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp())
