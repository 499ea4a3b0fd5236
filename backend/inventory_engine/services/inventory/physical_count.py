"""
Physical Count Workflow
Reconciles counted stock against the system quantity for one item at one
location: draft -> in_progress -> completed -> posted.

Only posting touches the ledger. A posted count carries the id of the
adjustment it created and can never be changed or posted again.
"""
from decimal import Decimal
from typing import List, Optional

from inventory_engine.core.config import settings
from inventory_engine.core.events import EventBus
from inventory_engine.core.exceptions import StateConflictError, ValidationError
from inventory_engine.core.logging import get_logger
from inventory_engine.models.inventory import CountStatus, InventoryCount, TransactionType
from inventory_engine.schemas.inventory import CountCreate, CountStart
from inventory_engine.services.inventory.helpers import round_qty, today
from inventory_engine.services.inventory.stock_levels import StockLevelCalculator
from inventory_engine.services.inventory.transaction_ledger import TransactionLedger
from inventory_engine.store import InventoryStore

logger = get_logger("workflow")


class PhysicalCountWorkflow:
    """Physical count lines and variance posting"""

    def __init__(
        self,
        store: InventoryStore,
        events: EventBus,
        ledger: TransactionLedger,
        stock_levels: StockLevelCalculator,
    ):
        self.store = store
        self.events = events
        self.ledger = ledger
        self.stock_levels = stock_levels

    def create(self, data: CountCreate) -> InventoryCount:
        """Open a count with a caller-supplied system quantity snapshot"""
        system_qty = round_qty(data.system_quantity)
        self._check_quantity(system_qty, "System")
        return self._open(data, system_qty)

    def start_from_ledger(self, data: CountStart) -> InventoryCount:
        """
        Open a count whose system quantity is the current on-hand at the
        location. Without a counted quantity the count starts at the system
        quantity floored at zero, so the variance is zero unless on-hand is
        negative. A negative on-hand is kept as-is so posting brings the
        location back to what was counted.
        """
        self.store.warehouses.require(data.warehouse_id)
        system_qty = self.stock_levels.stock_level(data.item_id, data.warehouse_id)
        counted = data.counted_quantity if data.counted_quantity is not None else max(system_qty, Decimal("0"))
        return self._open(CountCreate(
            warehouse_id=data.warehouse_id,
            item_id=data.item_id,
            counted_by=data.counted_by,
            system_quantity=system_qty,
            counted_quantity=counted,
            count_date=data.count_date,
            notes=data.notes,
        ), system_qty)

    def _open(self, data: CountCreate, system_qty: Decimal) -> InventoryCount:
        counted_qty = round_qty(data.counted_quantity)
        self._check_quantity(counted_qty, "Counted")
        self.store.warehouses.require(data.warehouse_id)
        self.store.items.require(data.item_id)

        try:
            count = self.store.counts.insert(
                warehouse_id=data.warehouse_id,
                item_id=data.item_id,
                count_date=data.count_date or today(),
                status=CountStatus.DRAFT.value,
                counted_by=data.counted_by,
                system_quantity=system_qty,
                counted_quantity=counted_qty,
                variance=round_qty(counted_qty - system_qty),
                adjustment_posted=False,
                notes=data.notes or '',
            )
            self.store.commit()
        except Exception:
            self.store.rollback()
            raise
        return self._announce("created", count)

    def update_line(self, count_id: int, counted_quantity, notes: Optional[str] = None) -> InventoryCount:
        count = self.store.counts.require(count_id)
        if count.status == CountStatus.POSTED.value:
            self._reject(count, "update", "Cannot update a posted count")

        counted_qty = round_qty(counted_quantity)
        self._check_quantity(counted_qty, "Counted")
        changes = {
            "counted_quantity": counted_qty,
            "variance": round_qty(counted_qty - count.system_quantity),
            "status": CountStatus.IN_PROGRESS.value,
        }
        if notes is not None:
            changes["notes"] = notes
        return self._transition(count, "updated", **changes)

    def complete(self, count_id: int) -> InventoryCount:
        count = self.store.counts.require(count_id)
        if count.status == CountStatus.POSTED.value:
            self._reject(count, "complete", "Count already posted")
        return self._transition(count, "completed", status=CountStatus.COMPLETED.value)

    def post(self, count_id: int) -> InventoryCount:
        """
        Post a completed count.

        A non-zero variance becomes one adjustment entry for exactly the
        variance, linked to the count. The adjustment and the count update
        commit together.
        """
        count = self.store.counts.require(count_id)
        if count.status != CountStatus.COMPLETED.value:
            self._reject(count, "post", "Only completed counts can be posted")

        adjustment = None
        try:
            if count.variance != 0:
                item = self.store.items.require(count.item_id)
                adjustment = self.ledger.record(
                    count.item_id, count.warehouse_id, TransactionType.ADJUSTMENT,
                    count.variance, self.ledger.resolve_cost(item),
                    reference=f"Physical count adjustment - Count {count.id}",
                    count_id=count.id,
                )
            self.store.counts.update(
                count.id,
                status=CountStatus.POSTED.value,
                adjustment_posted=True,
                adjustment_transaction_id=adjustment.id if adjustment else None,
            )
            self.store.commit()
        except Exception:
            self.store.rollback()
            raise

        if adjustment is not None:
            self.ledger.announce(adjustment)
        else:
            logger.info(f"Count {count.id} posted with zero variance, no adjustment")
        return self._announce("posted", count)

    def get(self, count_id: int) -> Optional[InventoryCount]:
        return self.store.counts.get(count_id)

    def require(self, count_id: int) -> InventoryCount:
        return self.store.counts.require(count_id)

    def list(
        self,
        warehouse_id: Optional[int] = None,
        status: Optional[CountStatus] = None,
    ) -> List[InventoryCount]:
        query = self.store.counts.query()
        if warehouse_id is not None:
            query.where_eq("warehouse_id", warehouse_id)
        if status:
            query.where_eq("status", CountStatus(status).value)
        return query.order_by("count_date", "desc").execute()

    def _check_quantity(self, quantity: Decimal, label: str):
        if settings.VALIDATE_QUANTITIES and quantity < 0:
            raise ValidationError(f"{label} quantity cannot be negative")

    def _transition(self, count: InventoryCount, event: str, **changes) -> InventoryCount:
        try:
            updated = self.store.counts.update(count.id, **changes)
            self.store.commit()
        except Exception:
            self.store.rollback()
            raise
        return self._announce(event, updated)

    def _reject(self, count: InventoryCount, action: str, message: str):
        logger.warning(f"Count {count.id}: cannot {action} from {count.status}")
        raise StateConflictError(
            message,
            entity="Count",
            entity_id=count.id,
            current_status=count.status,
            action=action,
        )

    def _announce(self, event: str, count: InventoryCount) -> InventoryCount:
        logger.info(
            f"Count {count.id} {event}: item {count.item_id} at warehouse {count.warehouse_id}, "
            f"variance {count.variance}, status {count.status}"
        )
        self.events.emit(f"inventory.count.{event}", {"count": count.to_dict()})
        return count
