"""
Inventory Service
Single entry point over the ledger, stock levels, costing, workflows and
reports, all sharing one database session and one event bus.
"""
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from inventory_engine.core.events import EventBus
from inventory_engine.models.inventory import (
    InventoryCount, InventoryItem, InventoryTransaction, ItemCategory,
    MaterialRequisition, RequisitionFill, TransactionType, ValuationMethod,
    Warehouse, WarehouseType, CountStatus, RequisitionStatus
)
from inventory_engine.schemas.inventory import (
    AdjustmentIntent, CountCreate, CountStart, IssueIntent, ItemCreate, ItemUpdate,
    JobMaterialSummary, LowStockAlert, ReceiptIntent, RequisitionCreate,
    StockLevelRow, TransferIntent, ValuationReport, WarehouseCreate, WarehouseUpdate,
    WasteIntent, WasteReport
)
from inventory_engine.services.inventory.costing import CostingEngine
from inventory_engine.services.inventory.helpers import ItemLockRegistry
from inventory_engine.services.inventory.item_master import ItemMasterService
from inventory_engine.services.inventory.physical_count import PhysicalCountWorkflow
from inventory_engine.services.inventory.reports import InventoryReports
from inventory_engine.services.inventory.requisitions import RequisitionWorkflow
from inventory_engine.services.inventory.stock_levels import StockLevelCalculator
from inventory_engine.services.inventory.transaction_ledger import TransactionLedger
from inventory_engine.store import InventoryStore


class InventoryService:
    """
    Inventory transaction ledger and costing engine

    Usage::

        service = InventoryService(db, events=bus)
        service.receive(ReceiptIntent(item_id=1, warehouse_id=1, quantity=100, unit_cost=10))
        service.get_stock_level(1)
        service.get_valuation(ValuationMethod.FIFO)
    """

    def __init__(
        self,
        db: Session,
        events: Optional[EventBus] = None,
        locks: Optional[ItemLockRegistry] = None,
    ):
        self.db = db
        self.events = events or EventBus()
        self.store = InventoryStore(db)

        self.stock_levels = StockLevelCalculator(self.store)
        self.costing = CostingEngine(self.store, self.stock_levels)
        self.ledger = TransactionLedger(self.store, self.events, self.costing, locks)
        self.master = ItemMasterService(self.store, self.events)
        self.requisitions = RequisitionWorkflow(self.store, self.events)
        self.counts = PhysicalCountWorkflow(self.store, self.events, self.ledger, self.stock_levels)
        self.reports = InventoryReports(self.store)

    # Items and locations

    def create_item(self, data: ItemCreate) -> InventoryItem:
        return self.master.create_item(data)

    def update_item(self, item_id: int, data: ItemUpdate) -> InventoryItem:
        return self.master.update_item(item_id, data)

    def deactivate_item(self, item_id: int) -> InventoryItem:
        return self.master.deactivate_item(item_id)

    def get_item(self, item_id: int) -> InventoryItem:
        return self.master.get_item(item_id)

    def list_items(self, category: Optional[ItemCategory] = None, active: Optional[bool] = None,
                   search: Optional[str] = None) -> List[InventoryItem]:
        return self.master.list_items(category, active, search)

    def create_warehouse(self, data: WarehouseCreate) -> Warehouse:
        return self.master.create_warehouse(data)

    def update_warehouse(self, warehouse_id: int, data: WarehouseUpdate) -> Warehouse:
        return self.master.update_warehouse(warehouse_id, data)

    def deactivate_warehouse(self, warehouse_id: int) -> Warehouse:
        return self.master.deactivate_warehouse(warehouse_id)

    def get_warehouse(self, warehouse_id: int) -> Warehouse:
        return self.master.get_warehouse(warehouse_id)

    def list_warehouses(self, warehouse_type: Optional[WarehouseType] = None, active: Optional[bool] = None,
                        search: Optional[str] = None) -> List[Warehouse]:
        return self.master.list_warehouses(warehouse_type, active, search)

    # Ledger postings

    def receive(self, intent: ReceiptIntent) -> InventoryTransaction:
        return self.ledger.receive(intent)

    def issue(self, intent: IssueIntent) -> InventoryTransaction:
        return self.ledger.issue(intent)

    def transfer(self, intent: TransferIntent) -> InventoryTransaction:
        return self.ledger.transfer(intent)

    def adjust(self, intent: AdjustmentIntent) -> InventoryTransaction:
        return self.ledger.adjust(intent)

    def record_waste(self, intent: WasteIntent) -> InventoryTransaction:
        return self.ledger.record_waste(intent)

    # Ledger queries

    def get_transaction(self, transaction_id: int) -> InventoryTransaction:
        return self.ledger.get_transaction(transaction_id)

    def get_transactions_by_item(self, item_id: int) -> List[InventoryTransaction]:
        return self.ledger.get_transactions_by_item(item_id)

    def get_transactions_by_warehouse(self, warehouse_id: int) -> List[InventoryTransaction]:
        return self.ledger.get_transactions_by_warehouse(warehouse_id)

    def get_transactions_by_job(self, job_id: str) -> List[InventoryTransaction]:
        return self.ledger.get_transactions_by_job(job_id)

    def list_transactions(self, txn_type: Optional[TransactionType] = None, item_id: Optional[int] = None,
                          warehouse_id: Optional[int] = None, job_id: Optional[str] = None,
                          date_from: Optional[date] = None, date_to: Optional[date] = None
                          ) -> List[InventoryTransaction]:
        return self.ledger.list_transactions(txn_type, item_id, warehouse_id, job_id, date_from, date_to)

    # Stock and valuation

    def get_stock_level(self, item_id: int, warehouse_id: Optional[int] = None) -> Decimal:
        return self.stock_levels.stock_level(item_id, warehouse_id)

    def get_stock_by_warehouse(self, warehouse_id: int) -> List[StockLevelRow]:
        return self.stock_levels.stock_by_warehouse(warehouse_id)

    def get_low_stock_items(self) -> List[LowStockAlert]:
        return self.stock_levels.low_stock_items()

    def get_valuation(self, method: Optional[ValuationMethod] = None) -> ValuationReport:
        return self.costing.valuation(method)

    # Requisitions

    def create_requisition(self, data: RequisitionCreate) -> MaterialRequisition:
        return self.requisitions.create(data)

    def submit_requisition(self, requisition_id: int) -> MaterialRequisition:
        return self.requisitions.submit(requisition_id)

    def approve_requisition(self, requisition_id: int, approved_by: str) -> MaterialRequisition:
        return self.requisitions.approve(requisition_id, approved_by)

    def fill_requisition(self, requisition_id: int, quantity, filled_by: Optional[str] = None,
                         notes: Optional[str] = None) -> MaterialRequisition:
        return self.requisitions.fill(requisition_id, quantity, filled_by, notes)

    def cancel_requisition(self, requisition_id: int) -> MaterialRequisition:
        return self.requisitions.cancel(requisition_id)

    def get_requisition(self, requisition_id: int) -> MaterialRequisition:
        return self.requisitions.require(requisition_id)

    def list_requisitions(self, status: Optional[RequisitionStatus] = None, job_id: Optional[str] = None,
                          search: Optional[str] = None) -> List[MaterialRequisition]:
        return self.requisitions.list(status, job_id, search)

    def get_requisition_fills(self, requisition_id: int) -> List[RequisitionFill]:
        return self.requisitions.fills(requisition_id)

    # Physical counts

    def create_count(self, data: CountCreate) -> InventoryCount:
        return self.counts.create(data)

    def start_count_from_ledger(self, data: CountStart) -> InventoryCount:
        return self.counts.start_from_ledger(data)

    def update_count_line(self, count_id: int, counted_quantity, notes: Optional[str] = None) -> InventoryCount:
        return self.counts.update_line(count_id, counted_quantity, notes)

    def complete_count(self, count_id: int) -> InventoryCount:
        return self.counts.complete(count_id)

    def post_count(self, count_id: int) -> InventoryCount:
        return self.counts.post(count_id)

    def get_count(self, count_id: int) -> InventoryCount:
        return self.counts.require(count_id)

    def list_counts(self, warehouse_id: Optional[int] = None,
                    status: Optional[CountStatus] = None) -> List[InventoryCount]:
        return self.counts.list(warehouse_id, status)

    # Reports

    def get_job_material_summary(self, job_id: str) -> JobMaterialSummary:
        return self.reports.job_material_summary(job_id)

    def get_waste_report(self, job_id: Optional[str] = None, date_from: Optional[date] = None,
                         date_to: Optional[date] = None) -> WasteReport:
        return self.reports.waste_report(job_id, date_from, date_to)
