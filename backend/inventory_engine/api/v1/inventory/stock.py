"""
Stock level and valuation API endpoints
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from inventory_engine.api import deps
from inventory_engine.models.inventory import ValuationMethod
from inventory_engine.schemas.inventory import (
    LowStockAlert, StockLevelRead, StockLevelRow, ValuationReport
)
from inventory_engine.services.inventory import InventoryService

router = APIRouter()


@router.get("/stock/level", response_model=StockLevelRead)
def get_stock_level(
    item_id: int,
    warehouse_id: Optional[int] = None,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    """
    On-hand quantity derived from the ledger, optionally scoped to one location.
    """
    service.get_item(item_id)
    if warehouse_id is not None:
        service.get_warehouse(warehouse_id)
    quantity = service.get_stock_level(item_id, warehouse_id)
    return StockLevelRead(item_id=item_id, warehouse_id=warehouse_id, quantity=quantity)


@router.get("/stock/by-warehouse/{warehouse_id}", response_model=List[StockLevelRow])
def get_stock_by_warehouse(
    warehouse_id: int,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    return service.get_stock_by_warehouse(warehouse_id)


@router.get("/stock/low", response_model=List[LowStockAlert])
def get_low_stock_items(
    service: InventoryService = Depends(deps.get_inventory_service),
):
    """
    Active items at or below their reorder point, largest deficit first.
    """
    return service.get_low_stock_items()


@router.get("/valuation", response_model=ValuationReport)
def get_valuation(
    method: Optional[ValuationMethod] = Query(None, description="fifo, lifo or average"),
    service: InventoryService = Depends(deps.get_inventory_service),
):
    """
    Value on-hand stock. Defaults to the configured valuation method.
    """
    return service.get_valuation(method)
