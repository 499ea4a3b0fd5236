"""
Inventory Items API endpoints
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status

from inventory_engine.api import deps
from inventory_engine.models.inventory import ItemCategory
from inventory_engine.schemas.inventory import (
    ItemCreate, ItemRead, ItemUpdate, StockLevelRead, TransactionRead
)
from inventory_engine.services.inventory import InventoryService

router = APIRouter()


@router.get("/", response_model=List[ItemRead])
def list_items(
    category: Optional[ItemCategory] = None,
    active: Optional[bool] = None,
    search: Optional[str] = Query(None, description="Matches number, description or vendor"),
    service: InventoryService = Depends(deps.get_inventory_service),
):
    """
    Retrieve items ordered by item number.
    """
    return service.list_items(category=category, active=active, search=search)


@router.post("/", response_model=ItemRead, status_code=status.HTTP_201_CREATED)
def create_item(
    item_data: ItemCreate,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    """
    Create a new item. Last and average cost start at the unit cost.
    """
    return service.create_item(item_data)


@router.get("/{item_id}", response_model=ItemRead)
def get_item(
    item_id: int,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    return service.get_item(item_id)


@router.patch("/{item_id}", response_model=ItemRead)
def update_item(
    item_id: int,
    updates: ItemUpdate,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    return service.update_item(item_id, updates)


@router.post("/{item_id}/deactivate", response_model=ItemRead)
def deactivate_item(
    item_id: int,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    """
    Deactivate an item. Items are never deleted.
    """
    return service.deactivate_item(item_id)


@router.get("/{item_id}/stock", response_model=StockLevelRead)
def get_item_stock(
    item_id: int,
    warehouse_id: Optional[int] = Query(None, description="Scope to one location"),
    service: InventoryService = Depends(deps.get_inventory_service),
):
    service.get_item(item_id)
    quantity = service.get_stock_level(item_id, warehouse_id)
    return StockLevelRead(item_id=item_id, warehouse_id=warehouse_id, quantity=quantity)


@router.get("/{item_id}/transactions", response_model=List[TransactionRead])
def get_item_transactions(
    item_id: int,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    """
    Ledger history for an item, newest first.
    """
    service.get_item(item_id)
    return service.get_transactions_by_item(item_id)
