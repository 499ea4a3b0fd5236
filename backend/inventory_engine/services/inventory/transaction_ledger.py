"""
Transaction Ledger Service
Append-only record of stock movements: receipts, issues, transfers,
adjustments and waste.

All five intents funnel through record(); they differ only in which
fields are populated and in what runs after insertion (the average cost
update for receipts, an event for every posting). Posted entries are
never edited; corrections are new, offsetting entries.
"""
from datetime import date
from decimal import Decimal
from typing import List, Optional

from inventory_engine.core.config import settings
from inventory_engine.core.events import EventBus
from inventory_engine.core.exceptions import ValidationError
from inventory_engine.core.logging import get_logger
from inventory_engine.models.inventory import (
    InventoryItem, InventoryTransaction, TransactionType
)
from inventory_engine.schemas.inventory import (
    ReceiptIntent, IssueIntent, TransferIntent, AdjustmentIntent, WasteIntent
)
from inventory_engine.services.inventory.costing import CostingEngine
from inventory_engine.services.inventory.helpers import (
    ItemLockRegistry, item_locks, round2, round_qty, today
)
from inventory_engine.store import InventoryStore

logger = get_logger("ledger")

EVENT_NAMES = {
    TransactionType.RECEIPT: "inventory.received",
    TransactionType.ISSUE: "inventory.issued",
    TransactionType.TRANSFER: "inventory.transferred",
    TransactionType.ADJUSTMENT: "inventory.adjusted",
    TransactionType.WASTE: "inventory.waste.recorded",
}


class TransactionLedger:
    """
    Transaction ledger

    Every public posting method validates its intent, inserts exactly one
    ledger entry and commits. On any failure the session is rolled back
    and the error re-raised, so a rejected posting leaves no trace.
    """

    def __init__(
        self,
        store: InventoryStore,
        events: EventBus,
        costing: CostingEngine,
        locks: Optional[ItemLockRegistry] = None,
    ):
        self.store = store
        self.events = events
        self.costing = costing
        self.locks = locks or item_locks

    # ------------------------------------------------------------------
    # Insertion contract
    # ------------------------------------------------------------------

    def record(
        self,
        item_id: int,
        warehouse_id: int,
        txn_type: TransactionType,
        quantity,
        unit_cost,
        txn_date: Optional[date] = None,
        to_warehouse_id: Optional[int] = None,
        reference: Optional[str] = None,
        job_id: Optional[str] = None,
        cost_code: Optional[str] = None,
        notes: Optional[str] = None,
        lot_number: Optional[str] = None,
        po_number: Optional[str] = None,
        count_id: Optional[int] = None,
    ) -> InventoryTransaction:
        """
        Insert one ledger entry (flushed, not committed).

        quantity and unit_cost are rounded to two places and total_cost is
        fixed here as round2(quantity * unit_cost); it is never recomputed.
        """
        qty = round_qty(quantity)
        cost = round2(unit_cost)
        return self.store.transactions.insert(
            item_id=item_id,
            warehouse_id=warehouse_id,
            to_warehouse_id=to_warehouse_id,
            type=TransactionType(txn_type).value,
            quantity=qty,
            unit_cost=cost,
            total_cost=round2(qty * cost),
            date=txn_date or today(),
            reference=reference or '',
            job_id=job_id or '',
            cost_code=cost_code or '',
            notes=notes or '',
            lot_number=lot_number or '',
            po_number=po_number or '',
            count_id=count_id,
        )

    def resolve_cost(self, item: InventoryItem, override=None) -> Decimal:
        """Explicit override, else the running average, else the manual baseline"""
        if override is not None:
            return round2(override)
        return round2(item.avg_cost or item.unit_cost or 0)

    # ------------------------------------------------------------------
    # Postings
    # ------------------------------------------------------------------

    def receive(self, intent: ReceiptIntent) -> InventoryTransaction:
        """Receive stock at the caller-supplied purchase cost and refresh item costs"""
        qty = round_qty(intent.quantity)
        cost = round2(intent.unit_cost)
        self._check_quantity(TransactionType.RECEIPT, qty)
        self._check_cost(cost)
        self._require_locations(intent.warehouse_id)

        with self.locks.hold(intent.item_id):
            self.store.items.require(intent.item_id)
            try:
                txn = self.record(
                    intent.item_id, intent.warehouse_id, TransactionType.RECEIPT, qty, cost,
                    txn_date=intent.date,
                    reference=intent.reference,
                    po_number=intent.po_number,
                    lot_number=intent.lot_number,
                    notes=intent.notes,
                )
                self.costing.update_item_costs(intent.item_id, cost)
                self.store.commit()
            except Exception:
                self.store.rollback()
                raise

        self.announce(txn)
        return txn

    def issue(self, intent: IssueIntent) -> InventoryTransaction:
        """Issue stock out of a location, costed at the item's average"""
        qty = round_qty(intent.quantity)
        self._check_quantity(TransactionType.ISSUE, qty)
        item = self.store.items.require(intent.item_id)
        self._require_locations(intent.warehouse_id)

        return self._post(
            item, intent.warehouse_id, TransactionType.ISSUE, qty, self.resolve_cost(item),
            txn_date=intent.date,
            job_id=intent.job_id,
            cost_code=intent.cost_code,
            reference=intent.reference,
            notes=intent.notes,
        )

    def transfer(self, intent: TransferIntent) -> InventoryTransaction:
        """Move stock between two locations as a single two-legged entry"""
        qty = round_qty(intent.quantity)
        self._check_quantity(TransactionType.TRANSFER, qty)
        if settings.VALIDATE_QUANTITIES and intent.from_warehouse_id == intent.to_warehouse_id:
            raise ValidationError("Source and destination locations cannot be the same")
        item = self.store.items.require(intent.item_id)
        self._require_locations(intent.from_warehouse_id, intent.to_warehouse_id)

        return self._post(
            item, intent.from_warehouse_id, TransactionType.TRANSFER, qty, self.resolve_cost(item),
            txn_date=intent.date,
            to_warehouse_id=intent.to_warehouse_id,
            reference=intent.reference,
            notes=intent.notes,
        )

    def adjust(self, intent: AdjustmentIntent, count_id: Optional[int] = None) -> InventoryTransaction:
        """Post a signed correction; a negative quantity reduces stock"""
        qty = round_qty(intent.quantity)
        self._check_quantity(TransactionType.ADJUSTMENT, qty)
        if intent.unit_cost is not None:
            self._check_cost(round2(intent.unit_cost))
        item = self.store.items.require(intent.item_id)
        self._require_locations(intent.warehouse_id)

        return self._post(
            item, intent.warehouse_id, TransactionType.ADJUSTMENT, qty,
            self.resolve_cost(item, intent.unit_cost),
            txn_date=intent.date,
            reference=intent.reference,
            notes=intent.notes,
            count_id=count_id,
        )

    def record_waste(self, intent: WasteIntent) -> InventoryTransaction:
        """Write off spoiled or scrapped material, optionally against a job"""
        qty = round_qty(intent.quantity)
        self._check_quantity(TransactionType.WASTE, qty)
        item = self.store.items.require(intent.item_id)
        self._require_locations(intent.warehouse_id)

        return self._post(
            item, intent.warehouse_id, TransactionType.WASTE, qty, self.resolve_cost(item),
            txn_date=intent.date,
            job_id=intent.job_id,
            cost_code=intent.cost_code,
            notes=intent.notes,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_transaction(self, transaction_id: int) -> InventoryTransaction:
        return self.store.transactions.require(transaction_id)

    def get_transactions_by_item(self, item_id: int) -> List[InventoryTransaction]:
        return (self.store.transactions.query()
                .where_eq("item_id", item_id)
                .order_by("date", "desc")
                .execute())

    def get_transactions_by_warehouse(self, warehouse_id: int) -> List[InventoryTransaction]:
        return (self.store.transactions.query()
                .where_eq("warehouse_id", warehouse_id)
                .order_by("date", "desc")
                .execute())

    def get_transactions_by_job(self, job_id: str) -> List[InventoryTransaction]:
        return (self.store.transactions.query()
                .where_eq("job_id", job_id)
                .order_by("date", "desc")
                .execute())

    def list_transactions(
        self,
        txn_type: Optional[TransactionType] = None,
        item_id: Optional[int] = None,
        warehouse_id: Optional[int] = None,
        job_id: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[InventoryTransaction]:
        query = self.store.transactions.query()
        if txn_type:
            query.where_eq("type", TransactionType(txn_type).value)
        if item_id is not None:
            query.where_eq("item_id", item_id)
        if warehouse_id is not None:
            query.where_eq("warehouse_id", warehouse_id)
        if job_id:
            query.where_eq("job_id", job_id)
        if date_from:
            query.where("date", ">=", date_from)
        if date_to:
            query.where("date", "<=", date_to)
        return query.order_by("date", "desc").execute()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _post(self, item: InventoryItem, warehouse_id: int, txn_type: TransactionType,
              quantity: Decimal, unit_cost: Decimal, **fields) -> InventoryTransaction:
        try:
            txn = self.record(item.id, warehouse_id, txn_type, quantity, unit_cost, **fields)
            self.store.commit()
        except Exception:
            self.store.rollback()
            raise
        self.announce(txn)
        return txn

    def announce(self, txn: InventoryTransaction):
        """Log a committed entry and emit its event"""
        logger.info(
            f"Posted {txn.type} #{txn.id}: item {txn.item_id} qty {txn.quantity} "
            f"@ {txn.unit_cost} (warehouse {txn.warehouse_id}"
            + (f" -> {txn.to_warehouse_id})" if txn.to_warehouse_id else ")")
        )
        self.events.emit(EVENT_NAMES[TransactionType(txn.type)], {"transaction": txn.to_dict()})

    def _require_locations(self, *warehouse_ids: int):
        for warehouse_id in warehouse_ids:
            self.store.warehouses.require(warehouse_id)

    def _check_quantity(self, txn_type: TransactionType, quantity: Decimal):
        if not settings.VALIDATE_QUANTITIES:
            return
        if txn_type == TransactionType.ADJUSTMENT:
            if quantity == 0:
                raise ValidationError("Adjustment quantity must be non-zero")
        elif quantity <= 0:
            raise ValidationError(f"{txn_type.value.capitalize()} quantity must be greater than zero")

    def _check_cost(self, unit_cost: Decimal):
        if settings.VALIDATE_QUANTITIES and unit_cost < 0:
            raise ValidationError("Unit cost cannot be negative")
