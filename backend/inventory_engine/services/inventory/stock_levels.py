"""
Stock Level Calculator
Derives on-hand quantity by replaying the ledger on every call.

No running balance is stored anywhere: each read recomputes from the
immutable transaction history, so there is nothing to invalidate.
"""
from decimal import Decimal
from typing import List, Optional

from inventory_engine.models.inventory import TransactionType
from inventory_engine.schemas.inventory import LowStockAlert, StockLevelRow
from inventory_engine.services.inventory.helpers import ZERO, round2, round_qty
from inventory_engine.store import InventoryStore

INBOUND = (TransactionType.RECEIPT.value, TransactionType.ADJUSTMENT.value)
OUTBOUND = (TransactionType.ISSUE.value, TransactionType.WASTE.value)


class StockLevelCalculator:
    """Stock level inquiries over the transaction ledger"""

    def __init__(self, store: InventoryStore):
        self.store = store

    def stock_level(self, item_id: int, warehouse_id: Optional[int] = None) -> Decimal:
        """
        On-hand quantity for an item, across all locations or at one.

        Receipts and adjustments add, issues and waste subtract. Unscoped,
        transfers net to zero. Scoped, a transfer out of the location
        subtracts and one into it adds; inbound transfers live under their
        source location's id, so a second pass picks them up by destination.
        """
        query = self.store.transactions.query().where_eq("item_id", item_id)
        if warehouse_id is not None:
            query.where_eq("warehouse_id", warehouse_id)

        qty = ZERO
        for txn in query.execute():
            if txn.type in INBOUND:
                qty += txn.quantity
            elif txn.type in OUTBOUND:
                qty -= txn.quantity
            elif txn.type == TransactionType.TRANSFER.value and warehouse_id is not None:
                if txn.warehouse_id == warehouse_id:
                    qty -= txn.quantity
                if txn.to_warehouse_id == warehouse_id:
                    qty += txn.quantity

        if warehouse_id is not None:
            # Same-location transfers were already counted in the first pass
            inbound = (self.store.transactions.query()
                       .where_eq("item_id", item_id)
                       .where_eq("type", TransactionType.TRANSFER.value)
                       .where_eq("to_warehouse_id", warehouse_id)
                       .where("warehouse_id", "!=", warehouse_id))
            for txn in inbound.execute():
                qty += txn.quantity

        return round_qty(qty)

    def stock_by_warehouse(self, warehouse_id: int) -> List[StockLevelRow]:
        """Non-zero stock of every active item at one location"""
        warehouse = self.store.warehouses.require(warehouse_id)
        items = self.store.items.query().order_by("number").execute()

        levels = []
        for item in items:
            if not item.active:
                continue
            qty = self.stock_level(item.id, warehouse_id)
            if qty == 0:
                continue
            unit_cost = item.avg_cost or item.unit_cost
            levels.append(StockLevelRow(
                item_id=item.id,
                item_number=item.number,
                item_description=item.description,
                unit=item.unit,
                warehouse_id=warehouse.id,
                warehouse_name=warehouse.name,
                quantity=qty,
                unit_cost=unit_cost,
                total_value=round2(qty * unit_cost),
            ))
        return levels

    def low_stock_items(self) -> List[LowStockAlert]:
        """Active items at or below their reorder point, largest deficit first"""
        alerts = []
        for item in self.store.items.query().order_by("number").execute():
            if not item.active or item.reorder_point <= 0:
                continue
            current = self.stock_level(item.id)
            if current <= item.reorder_point:
                alerts.append(LowStockAlert(
                    item_id=item.id,
                    item_number=item.number,
                    item_description=item.description,
                    current_stock=current,
                    reorder_point=item.reorder_point,
                    reorder_quantity=item.reorder_quantity,
                    deficit=round_qty(item.reorder_point - current),
                ))
        return sorted(alerts, key=lambda alert: alert.deficit, reverse=True)
