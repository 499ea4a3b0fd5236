"""
Material Requisition API endpoints
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, status

from inventory_engine.api import deps
from inventory_engine.models.inventory import RequisitionStatus
from inventory_engine.schemas.inventory import (
    RequisitionApprove, RequisitionCreate, RequisitionFillRead, RequisitionFillRequest,
    RequisitionRead
)
from inventory_engine.services.inventory import InventoryService

router = APIRouter()


@router.get("/", response_model=List[RequisitionRead])
def list_requisitions(
    status: Optional[RequisitionStatus] = None,
    job_id: Optional[str] = None,
    search: Optional[str] = None,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    return service.list_requisitions(status=status, job_id=job_id, search=search)


@router.post("/", response_model=RequisitionRead, status_code=status.HTTP_201_CREATED)
def create_requisition(
    requisition_data: RequisitionCreate,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    """
    Create a draft requisition.
    """
    return service.create_requisition(requisition_data)


@router.get("/{requisition_id}", response_model=RequisitionRead)
def get_requisition(
    requisition_id: int,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    return service.get_requisition(requisition_id)


@router.get("/{requisition_id}/fills", response_model=List[RequisitionFillRead])
def get_requisition_fills(
    requisition_id: int,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    return service.get_requisition_fills(requisition_id)


@router.post("/{requisition_id}/submit", response_model=RequisitionRead)
def submit_requisition(
    requisition_id: int,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    return service.submit_requisition(requisition_id)


@router.post("/{requisition_id}/approve", response_model=RequisitionRead)
def approve_requisition(
    requisition_id: int,
    approval: RequisitionApprove,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    return service.approve_requisition(requisition_id, approval.approved_by)


@router.post("/{requisition_id}/fill", response_model=RequisitionRead)
def fill_requisition(
    requisition_id: int,
    fill: RequisitionFillRequest,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    """
    Record a fill. This does not issue stock from the ledger.
    """
    return service.fill_requisition(requisition_id, fill.quantity, fill.filled_by, fill.notes)


@router.post("/{requisition_id}/cancel", response_model=RequisitionRead)
def cancel_requisition(
    requisition_id: int,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    return service.cancel_requisition(requisition_id)
