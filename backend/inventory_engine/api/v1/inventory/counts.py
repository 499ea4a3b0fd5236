"""
Physical Count API endpoints
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, status

from inventory_engine.api import deps
from inventory_engine.models.inventory import CountStatus
from inventory_engine.schemas.inventory import CountCreate, CountLineUpdate, CountRead, CountStart
from inventory_engine.services.inventory import InventoryService

router = APIRouter()


@router.get("/", response_model=List[CountRead])
def list_counts(
    warehouse_id: Optional[int] = None,
    status: Optional[CountStatus] = None,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    return service.list_counts(warehouse_id=warehouse_id, status=status)


@router.post("/", response_model=CountRead, status_code=status.HTTP_201_CREATED)
def create_count(
    count_data: CountCreate,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    """
    Open a count with a supplied system quantity.
    """
    return service.create_count(count_data)


@router.post("/start", response_model=CountRead, status_code=status.HTTP_201_CREATED)
def start_count(
    count_data: CountStart,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    """
    Open a count with the system quantity taken from the ledger.
    """
    return service.start_count_from_ledger(count_data)


@router.get("/{count_id}", response_model=CountRead)
def get_count(
    count_id: int,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    return service.get_count(count_id)


@router.patch("/{count_id}", response_model=CountRead)
def update_count_line(
    count_id: int,
    line: CountLineUpdate,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    return service.update_count_line(count_id, line.counted_quantity, line.notes)


@router.post("/{count_id}/complete", response_model=CountRead)
def complete_count(
    count_id: int,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    return service.complete_count(count_id)


@router.post("/{count_id}/post", response_model=CountRead)
def post_count(
    count_id: int,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    """
    Post a completed count, adjusting stock by its variance.
    """
    return service.post_count(count_id)
