"""
Material Requisition Workflow
draft -> submitted -> approved -> partially_filled <-> filled, or cancelled.

Filling is bookkeeping only: it records how much of the request has been
satisfied and never posts an issue to the ledger. Issuing the material
is a separate ledger operation.
"""
from typing import List, Optional

from inventory_engine.core.config import settings
from inventory_engine.core.events import EventBus
from inventory_engine.core.exceptions import StateConflictError, ValidationError
from inventory_engine.core.logging import get_logger
from inventory_engine.models.inventory import (
    MaterialRequisition, RequisitionFill, RequisitionStatus
)
from inventory_engine.schemas.inventory import RequisitionCreate
from inventory_engine.services.inventory.helpers import round_qty, today, utcnow
from inventory_engine.store import InventoryStore

logger = get_logger("workflow")

FILLABLE = (RequisitionStatus.APPROVED.value, RequisitionStatus.PARTIALLY_FILLED.value)
CLOSED = (RequisitionStatus.FILLED.value, RequisitionStatus.CANCELLED.value)


class RequisitionWorkflow:
    """Material requisition state machine"""

    def __init__(self, store: InventoryStore, events: EventBus):
        self.store = store
        self.events = events

    def create(self, data: RequisitionCreate) -> MaterialRequisition:
        quantity = round_qty(data.quantity)
        if settings.VALIDATE_QUANTITIES and quantity <= 0:
            raise ValidationError("Requisition quantity must be greater than zero")
        self.store.items.require(data.item_id)
        if data.warehouse_id is not None:
            self.store.warehouses.require(data.warehouse_id)

        try:
            requisition = self.store.requisitions.insert(
                number=data.number,
                job_id=data.job_id,
                requested_by=data.requested_by,
                request_date=today(),
                needed_date=data.needed_date,
                status=RequisitionStatus.DRAFT.value,
                item_id=data.item_id,
                item_description=data.item_description or '',
                quantity=quantity,
                warehouse_id=data.warehouse_id,
                filled_quantity=round_qty(0),
                notes=data.notes or '',
            )
            self.store.commit()
        except Exception:
            self.store.rollback()
            raise
        return self._announce("created", requisition)

    def submit(self, requisition_id: int) -> MaterialRequisition:
        requisition = self.store.requisitions.require(requisition_id)
        if requisition.status != RequisitionStatus.DRAFT.value:
            self._reject(requisition, "submit", "Only draft requisitions can be submitted")
        return self._transition(requisition, "submitted", status=RequisitionStatus.SUBMITTED.value)

    def approve(self, requisition_id: int, approved_by: str) -> MaterialRequisition:
        requisition = self.store.requisitions.require(requisition_id)
        if requisition.status != RequisitionStatus.SUBMITTED.value:
            self._reject(requisition, "approve", "Only submitted requisitions can be approved")
        return self._transition(
            requisition, "approved",
            status=RequisitionStatus.APPROVED.value,
            approved_by=approved_by,
            approved_date=today(),
        )

    def fill(
        self,
        requisition_id: int,
        quantity,
        filled_by: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> MaterialRequisition:
        """
        Record a fill. filled_quantity accumulates; the requisition becomes
        filled once it reaches the requested quantity, otherwise
        partially_filled. Over-fills are kept as-is unless
        CLAMP_REQUISITION_FILLS is set.
        """
        requisition = self.store.requisitions.require(requisition_id)
        if requisition.status not in FILLABLE:
            self._reject(requisition, "fill", "Only approved or partially filled requisitions can be filled")

        step = round_qty(quantity)
        if settings.VALIDATE_QUANTITIES and step <= 0:
            raise ValidationError("Fill quantity must be greater than zero")

        total = round_qty((requisition.filled_quantity or 0) + step)
        if settings.CLAMP_REQUISITION_FILLS and total > requisition.quantity:
            step = round_qty(requisition.quantity - requisition.filled_quantity)
            total = round_qty(requisition.quantity)

        status = (RequisitionStatus.FILLED if total >= requisition.quantity
                  else RequisitionStatus.PARTIALLY_FILLED).value

        try:
            self.store.fills.insert(
                requisition_id=requisition.id,
                quantity=step,
                cumulative_quantity=total,
                status_after=status,
                filled_by=filled_by or '',
                notes=notes or '',
                filled_at=utcnow(),
            )
        except Exception:
            self.store.rollback()
            raise
        return self._transition(requisition, "filled", filled_quantity=total, status=status)

    def cancel(self, requisition_id: int) -> MaterialRequisition:
        requisition = self.store.requisitions.require(requisition_id)
        if requisition.status in CLOSED:
            self._reject(requisition, "cancel", "Cannot cancel a filled or already cancelled requisition")
        return self._transition(requisition, "cancelled", status=RequisitionStatus.CANCELLED.value)

    def get(self, requisition_id: int) -> Optional[MaterialRequisition]:
        return self.store.requisitions.get(requisition_id)

    def require(self, requisition_id: int) -> MaterialRequisition:
        return self.store.requisitions.require(requisition_id)

    def fills(self, requisition_id: int) -> List[RequisitionFill]:
        """Fill history, oldest first"""
        self.store.requisitions.require(requisition_id)
        return (self.store.fills.query()
                .where_eq("requisition_id", requisition_id)
                .order_by("filled_at")
                .execute())

    def list(
        self,
        status: Optional[RequisitionStatus] = None,
        job_id: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[MaterialRequisition]:
        query = self.store.requisitions.query()
        if status:
            query.where_eq("status", RequisitionStatus(status).value)
        if job_id:
            query.where_eq("job_id", job_id)
        results = query.order_by("request_date", "desc").execute()
        if search:
            s = search.lower()
            results = [
                r for r in results
                if s in r.number.lower()
                or s in (r.item_description or '').lower()
                or s in r.requested_by.lower()
            ]
        return results

    def _transition(self, requisition: MaterialRequisition, event: str, **changes) -> MaterialRequisition:
        try:
            updated = self.store.requisitions.update(requisition.id, **changes)
            self.store.commit()
        except Exception:
            self.store.rollback()
            raise
        return self._announce(event, updated)

    def _reject(self, requisition: MaterialRequisition, action: str, message: str):
        logger.warning(
            f"Requisition {requisition.id} ({requisition.number}): cannot {action} from {requisition.status}"
        )
        raise StateConflictError(
            message,
            entity="Requisition",
            entity_id=requisition.id,
            current_status=requisition.status,
            action=action,
        )

    def _announce(self, event: str, requisition: MaterialRequisition) -> MaterialRequisition:
        logger.info(f"Requisition {requisition.id} ({requisition.number}) {event}: status {requisition.status}")
        self.events.emit(f"inventory.requisition.{event}", {"requisition": requisition.to_dict()})
        return requisition
