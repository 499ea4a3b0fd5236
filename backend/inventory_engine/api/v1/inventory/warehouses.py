"""
Warehouse / Location API endpoints
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, status

from inventory_engine.api import deps
from inventory_engine.models.inventory import WarehouseType
from inventory_engine.schemas.inventory import (
    StockLevelRow, TransactionRead, WarehouseCreate, WarehouseRead, WarehouseUpdate
)
from inventory_engine.services.inventory import InventoryService

router = APIRouter()


@router.get("/", response_model=List[WarehouseRead])
def list_warehouses(
    type: Optional[WarehouseType] = None,
    active: Optional[bool] = None,
    search: Optional[str] = None,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    return service.list_warehouses(warehouse_type=type, active=active, search=search)


@router.post("/", response_model=WarehouseRead, status_code=status.HTTP_201_CREATED)
def create_warehouse(
    warehouse_data: WarehouseCreate,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    return service.create_warehouse(warehouse_data)


@router.get("/{warehouse_id}", response_model=WarehouseRead)
def get_warehouse(
    warehouse_id: int,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    return service.get_warehouse(warehouse_id)


@router.patch("/{warehouse_id}", response_model=WarehouseRead)
def update_warehouse(
    warehouse_id: int,
    updates: WarehouseUpdate,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    return service.update_warehouse(warehouse_id, updates)


@router.post("/{warehouse_id}/deactivate", response_model=WarehouseRead)
def deactivate_warehouse(
    warehouse_id: int,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    return service.deactivate_warehouse(warehouse_id)


@router.get("/{warehouse_id}/stock", response_model=List[StockLevelRow])
def get_warehouse_stock(
    warehouse_id: int,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    """
    Non-zero stock of every active item held at the location.
    """
    return service.get_stock_by_warehouse(warehouse_id)


@router.get("/{warehouse_id}/transactions", response_model=List[TransactionRead])
def get_warehouse_transactions(
    warehouse_id: int,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    service.get_warehouse(warehouse_id)
    return service.get_transactions_by_warehouse(warehouse_id)
