"""
Tests for the Material Requisition Workflow
"""

import pytest
from decimal import Decimal

from inventory_engine.core.config import settings
from inventory_engine.core.exceptions import (
    InvalidTransitionError, NotFoundError, StateConflictError, ValidationError
)
from inventory_engine.models.inventory import RequisitionStatus
from inventory_engine.schemas.inventory import RequisitionCreate


@pytest.fixture
def requisition(service, item, job_site):
    return service.create_requisition(RequisitionCreate(
        number="REQ-001",
        job_id="JOB-100",
        requested_by="Site Foreman",
        item_id=item.id,
        item_description="4in PVC pipe",
        quantity=Decimal("100"),
        warehouse_id=job_site.id,
    ))


@pytest.fixture
def approved(service, requisition):
    service.submit_requisition(requisition.id)
    return service.approve_requisition(requisition.id, "Project Manager")


class TestRequisitionLifecycle:
    """Test suite for requisition transitions"""

    def test_create_is_draft(self, service, requisition):
        assert requisition.status == RequisitionStatus.DRAFT.value
        assert requisition.filled_quantity == Decimal("0")
        assert requisition.request_date is not None

    def test_submit_and_approve(self, service, approved):
        assert approved.status == RequisitionStatus.APPROVED.value
        assert approved.approved_by == "Project Manager"
        assert approved.approved_date is not None

    def test_partial_then_full_fill(self, service, approved):
        partial = service.fill_requisition(approved.id, Decimal("40"))
        assert partial.status == RequisitionStatus.PARTIALLY_FILLED.value
        full = service.fill_requisition(approved.id, Decimal("60"))
        assert full.status == RequisitionStatus.FILLED.value
        assert full.filled_quantity == Decimal("100")

    def test_over_fill_accumulates(self, service, approved):
        service.fill_requisition(approved.id, Decimal("40"), filled_by="Yard")
        filled = service.fill_requisition(approved.id, Decimal("70"), filled_by="Yard", notes="extra")
        assert filled.filled_quantity == Decimal("110")
        assert filled.status == RequisitionStatus.FILLED.value

        fills = service.get_requisition_fills(approved.id)
        assert [f.quantity for f in fills] == [Decimal("40"), Decimal("70")]
        assert [f.cumulative_quantity for f in fills] == [Decimal("40"), Decimal("110")]
        assert [f.status_after for f in fills] == ["partially_filled", "filled"]
        assert fills[1].notes == "extra"

    def test_over_fill_clamped_when_configured(self, service, monkeypatch, approved):
        monkeypatch.setattr(settings, "CLAMP_REQUISITION_FILLS", True)
        service.fill_requisition(approved.id, Decimal("40"))
        filled = service.fill_requisition(approved.id, Decimal("70"))
        assert filled.filled_quantity == Decimal("100")
        assert service.get_requisition_fills(approved.id)[-1].quantity == Decimal("60")

    def test_fill_does_not_touch_ledger(self, service, approved, item):
        service.fill_requisition(approved.id, Decimal("100"))
        assert service.get_transactions_by_item(item.id) == []
        assert service.get_stock_level(item.id) == Decimal("0")

    def test_cancel_from_approved(self, service, approved):
        assert service.cancel_requisition(approved.id).status == RequisitionStatus.CANCELLED.value

    def test_events_follow_transitions(self, service, events, approved):
        service.fill_requisition(approved.id, Decimal("100"))
        names = [n for n in events.names() if n.startswith("inventory.requisition.")]
        assert names == [
            "inventory.requisition.created",
            "inventory.requisition.submitted",
            "inventory.requisition.approved",
            "inventory.requisition.filled",
        ]


class TestRequisitionGuards:
    """Rejected transitions leave the requisition unchanged"""

    def test_approve_draft_rejected(self, service, requisition):
        with pytest.raises(StateConflictError, match="Only submitted requisitions can be approved") as exc:
            service.approve_requisition(requisition.id, "PM")
        assert exc.value.current_status == "draft"
        assert exc.value.action == "approve"
        assert service.get_requisition(requisition.id).status == "draft"

    def test_submit_twice_rejected(self, service, requisition):
        service.submit_requisition(requisition.id)
        with pytest.raises(InvalidTransitionError, match="Only draft requisitions can be submitted"):
            service.submit_requisition(requisition.id)

    def test_fill_unapproved_rejected(self, service, requisition):
        with pytest.raises(StateConflictError, match="approved or partially filled"):
            service.fill_requisition(requisition.id, Decimal("1"))
        assert service.get_requisition_fills(requisition.id) == []

    @pytest.mark.parametrize("final", ["fill", "cancel"])
    def test_cancel_closed_rejected(self, service, approved, final):
        if final == "fill":
            service.fill_requisition(approved.id, Decimal("100"))
        else:
            service.cancel_requisition(approved.id)
        with pytest.raises(StateConflictError, match="Cannot cancel"):
            service.cancel_requisition(approved.id)

    def test_fill_quantity_must_be_positive(self, service, approved):
        with pytest.raises(ValidationError):
            service.fill_requisition(approved.id, Decimal("0"))

    def test_requested_quantity_must_be_positive(self, service, item):
        with pytest.raises(ValidationError):
            service.create_requisition(RequisitionCreate(
                number="REQ-0", job_id="J", requested_by="x", item_id=item.id, quantity=Decimal("0"),
            ))

    def test_unknown_requisition(self, service):
        with pytest.raises(NotFoundError, match="Requisition 9 not found"):
            service.submit_requisition(9)

    def test_duplicate_number_rejected(self, service, requisition, item):
        with pytest.raises(ValidationError):
            service.create_requisition(RequisitionCreate(
                number="REQ-001", job_id="J", requested_by="x", item_id=item.id, quantity=Decimal("1"),
            ))


class TestRequisitionQueries:
    """Listing"""

    def test_list_filters(self, service, requisition, item):
        other = service.create_requisition(RequisitionCreate(
            number="REQ-002", job_id="JOB-200", requested_by="Estimator",
            item_id=item.id, item_description="Glue", quantity=Decimal("2"),
        ))
        service.submit_requisition(other.id)

        assert [r.number for r in service.list_requisitions(job_id="JOB-100")] == ["REQ-001"]
        assert [r.number for r in service.list_requisitions(status=RequisitionStatus.SUBMITTED)] == ["REQ-002"]
        assert [r.number for r in service.list_requisitions(search="foreman")] == ["REQ-001"]
        assert len(service.list_requisitions()) == 2
