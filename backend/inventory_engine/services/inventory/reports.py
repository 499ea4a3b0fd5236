"""
Job material and waste reporting over the ledger
"""
from datetime import date
from typing import Dict, Optional

from inventory_engine.models.inventory import TransactionType
from inventory_engine.schemas.inventory import (
    JobMaterialLine, JobMaterialSummary, WasteEntry, WasteReport
)
from inventory_engine.services.inventory.helpers import ZERO, round2, round_qty
from inventory_engine.store import InventoryStore


class InventoryReports:
    """Job material summary and waste report"""

    def __init__(self, store: InventoryStore):
        self.store = store

    def job_material_summary(self, job_id: str) -> JobMaterialSummary:
        """
        Issued and wasted material for a job, per item.

        Line cost covers both issues and waste; total_cost is issues only and
        waste_cost is waste only.
        """
        txns = (self.store.transactions.query()
                .where_eq("job_id", job_id)
                .where("type", "in", [TransactionType.ISSUE.value, TransactionType.WASTE.value])
                .order_by("date")
                .execute())

        lines: Dict[int, dict] = {}
        total_issued = total_waste = total_cost = waste_cost = ZERO
        for txn in txns:
            line = lines.setdefault(txn.item_id, {"issued": ZERO, "wasted": ZERO, "cost": ZERO})
            line["cost"] += txn.total_cost
            if txn.type == TransactionType.ISSUE.value:
                line["issued"] += txn.quantity
                total_issued += txn.quantity
                total_cost += txn.total_cost
            else:
                line["wasted"] += txn.quantity
                total_waste += txn.quantity
                waste_cost += txn.total_cost

        items = {item.id: item for item in self.store.items.get_many(list(lines))}
        rows = []
        for item_id, line in lines.items():
            item = items.get(item_id)
            rows.append(JobMaterialLine(
                item_id=item_id,
                item_number=item.number if item else str(item_id),
                item_description=item.description if item else '',
                quantity_issued=round_qty(line["issued"]),
                quantity_wasted=round_qty(line["wasted"]),
                cost=round2(line["cost"]),
            ))

        return JobMaterialSummary(
            job_id=job_id,
            total_issued=round_qty(total_issued),
            total_waste=round_qty(total_waste),
            total_cost=round2(total_cost),
            waste_cost=round2(waste_cost),
            items=rows,
        )

    def waste_report(
        self,
        job_id: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> WasteReport:
        """Waste entries newest first, named by item and location"""
        query = self.store.transactions.query().where_eq("type", TransactionType.WASTE.value)
        if job_id:
            query.where_eq("job_id", job_id)
        if date_from:
            query.where("date", ">=", date_from)
        if date_to:
            query.where("date", "<=", date_to)
        txns = query.order_by("date", "desc").execute()

        items = {item.id: item for item in self.store.items.get_many({t.item_id for t in txns})}
        warehouses = {w.id: w for w in self.store.warehouses.get_many({t.warehouse_id for t in txns})}

        entries = []
        total = ZERO
        for txn in txns:
            item = items.get(txn.item_id)
            warehouse = warehouses.get(txn.warehouse_id)
            entries.append(WasteEntry(
                transaction_id=txn.id,
                item_id=txn.item_id,
                item_number=item.number if item else str(txn.item_id),
                item_description=item.description if item else str(txn.item_id),
                warehouse_id=txn.warehouse_id,
                warehouse_name=warehouse.name if warehouse else str(txn.warehouse_id),
                quantity=txn.quantity,
                unit_cost=txn.unit_cost,
                total_cost=txn.total_cost,
                date=txn.date,
                job_id=txn.job_id or None,
                notes=txn.notes or None,
            ))
            total += txn.total_cost

        return WasteReport(entries=entries, total_waste_cost=round2(total))
