"""
Costing Engine
Maintains last/average cost on the item master and values on-hand stock
by FIFO, LIFO or weighted average at report time.

Average cost is a full re-aggregation over every receipt to date, not an
incremental update, so issues and waste never move it.

FIFO/LIFO layers are the item's receipts plus positive adjustments,
ordered by date (ledger sequence breaks ties). Layers are not depleted by
issues; the on-hand quantity is simply priced against them:
- FIFO consumes the oldest layers first, so what remains on hand is
  priced from the newest layers backwards.
- LIFO consumes the newest layers first, so what remains on hand is
  priced from the oldest layers forwards.
On-hand quantity beyond the recorded layers contributes no value.
"""
from decimal import Decimal
from typing import Iterable, List, Optional

from inventory_engine.core.config import settings
from inventory_engine.core.logging import get_logger
from inventory_engine.models.inventory import (
    InventoryItem, InventoryTransaction, TransactionType, ValuationMethod
)
from inventory_engine.schemas.inventory import ValuationReport, ValuationRow
from inventory_engine.services.inventory.helpers import ZERO, round2
from inventory_engine.services.inventory.stock_levels import StockLevelCalculator
from inventory_engine.store import InventoryStore

logger = get_logger("costing")


def cost_layers(transactions: Iterable[InventoryTransaction]) -> List[InventoryTransaction]:
    """Receipts and positive adjustments, oldest first"""
    layers = [
        txn for txn in transactions
        if txn.type == TransactionType.RECEIPT.value
        or (txn.type == TransactionType.ADJUSTMENT.value and txn.quantity > 0)
    ]
    return sorted(layers, key=lambda txn: (txn.date, txn.id))


def value_from_layers(layers: Iterable[InventoryTransaction], on_hand: Decimal) -> Decimal:
    """Price on_hand against layers in the order given"""
    remaining = on_hand
    value = ZERO
    for layer in layers:
        if remaining <= 0:
            break
        take = min(remaining, layer.quantity)
        value += round2(take * layer.unit_cost)
        remaining -= take
    return round2(value)


def fifo_value(transactions: Iterable[InventoryTransaction], on_hand: Decimal) -> Decimal:
    return value_from_layers(reversed(cost_layers(transactions)), on_hand)


def lifo_value(transactions: Iterable[InventoryTransaction], on_hand: Decimal) -> Decimal:
    return value_from_layers(cost_layers(transactions), on_hand)


def average_value(item: InventoryItem, on_hand: Decimal) -> Decimal:
    return round2(on_hand * (item.avg_cost or item.unit_cost))


class CostingEngine:
    """Item cost maintenance and inventory valuation"""

    def __init__(self, store: InventoryStore, stock_levels: StockLevelCalculator):
        self.store = store
        self.stock_levels = stock_levels

    def update_item_costs(self, item_id: int, new_cost) -> Optional[InventoryItem]:
        """
        Refresh last_cost and avg_cost after a receipt.

        avg_cost = sum(receipt total_cost) / sum(receipt quantity) over all
        receipts recorded so far, falling back to last_cost when there are
        none. Runs inside the caller's transaction.
        """
        item = self.store.items.get(item_id)
        if item is None:
            return None

        last_cost = round2(new_cost)
        receipts = (self.store.transactions.query()
                    .where_eq("item_id", item_id)
                    .where_eq("type", TransactionType.RECEIPT.value))
        total_qty = ZERO
        total_value = ZERO
        for receipt in receipts.execute():
            total_qty += receipt.quantity
            total_value += receipt.total_cost

        avg_cost = round2(total_value / total_qty) if total_qty > 0 else last_cost

        logger.debug(
            f"Average cost for item {item_id}: qty={total_qty}, value={total_value}, "
            f"last={last_cost}, avg={avg_cost}"
        )
        return self.store.items.update(item_id, last_cost=last_cost, avg_cost=avg_cost)

    def item_value(self, item: InventoryItem, method: ValuationMethod, on_hand: Decimal) -> Decimal:
        method = ValuationMethod(method)
        if method == ValuationMethod.AVERAGE:
            return average_value(item, on_hand)

        transactions = (self.store.transactions.query()
                        .where_eq("item_id", item.id)
                        .execute())
        if method == ValuationMethod.FIFO:
            return fifo_value(transactions, on_hand)
        return lifo_value(transactions, on_hand)

    def valuation(self, method: Optional[ValuationMethod] = None) -> ValuationReport:
        """
        Value every active item with stock on hand.

        Items with on-hand <= 0 are left out. Row unit cost is value / quantity;
        the report total is the sum of row values.
        """
        method = ValuationMethod(method or settings.DEFAULT_VALUATION_METHOD)
        rows = []
        total_value = ZERO

        for item in self.store.items.query().order_by("number").execute():
            if not item.active:
                continue
            qty = self.stock_levels.stock_level(item.id)
            if qty <= 0:
                continue

            value = self.item_value(item, method, qty)
            rows.append(ValuationRow(
                item_id=item.id,
                item_number=item.number,
                item_description=item.description,
                unit=item.unit,
                total_quantity=qty,
                unit_cost=round2(value / qty),
                total_value=round2(value),
                method=method,
            ))
            total_value += value

        logger.info(f"Valuation ({method.value}): {len(rows)} items, total {round2(total_value)}")
        return ValuationReport(method=method, rows=rows, total_value=round2(total_value))
