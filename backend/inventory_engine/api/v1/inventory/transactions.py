"""
Inventory Transactions API endpoints
Postings to the ledger and ledger inquiry. Entries are never edited.
"""

from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status

from inventory_engine.api import deps
from inventory_engine.models.inventory import TransactionType
from inventory_engine.schemas.inventory import (
    AdjustmentIntent, IssueIntent, ReceiptIntent, TransactionRead, TransferIntent, WasteIntent
)
from inventory_engine.services.inventory import InventoryService

router = APIRouter()


@router.get("/", response_model=List[TransactionRead])
def list_transactions(
    type: Optional[TransactionType] = None,
    item_id: Optional[int] = None,
    warehouse_id: Optional[int] = None,
    job_id: Optional[str] = None,
    date_from: Optional[date] = Query(None, description="Inclusive start date"),
    date_to: Optional[date] = Query(None, description="Inclusive end date"),
    service: InventoryService = Depends(deps.get_inventory_service),
):
    """
    Ledger entries matching the filters, newest first.
    """
    return service.list_transactions(
        txn_type=type,
        item_id=item_id,
        warehouse_id=warehouse_id,
        job_id=job_id,
        date_from=date_from,
        date_to=date_to,
    )


@router.get("/{transaction_id}", response_model=TransactionRead)
def get_transaction(
    transaction_id: int,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    return service.get_transaction(transaction_id)


@router.post("/receipt", response_model=TransactionRead, status_code=status.HTTP_201_CREATED)
def receive_stock(
    intent: ReceiptIntent,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    """
    Receive stock at its purchase cost. Updates the item's last and average cost.
    """
    return service.receive(intent)


@router.post("/issue", response_model=TransactionRead, status_code=status.HTTP_201_CREATED)
def issue_stock(
    intent: IssueIntent,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    return service.issue(intent)


@router.post("/transfer", response_model=TransactionRead, status_code=status.HTTP_201_CREATED)
def transfer_stock(
    intent: TransferIntent,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    return service.transfer(intent)


@router.post("/adjustment", response_model=TransactionRead, status_code=status.HTTP_201_CREATED)
def adjust_stock(
    intent: AdjustmentIntent,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    """
    Post a signed stock correction.
    """
    return service.adjust(intent)


@router.post("/waste", response_model=TransactionRead, status_code=status.HTTP_201_CREATED)
def record_waste(
    intent: WasteIntent,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    return service.record_waste(intent)
