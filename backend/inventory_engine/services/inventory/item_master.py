"""
Item and Location Master
Maintains inventory items and the warehouses, yards, job sites and
vehicles stock is held at. Records are deactivated, never deleted, so the
ledger can always resolve the ids it references.
"""
from typing import List, Optional

from inventory_engine.core.events import EventBus
from inventory_engine.core.exceptions import ValidationError
from inventory_engine.core.logging import get_logger
from inventory_engine.models.inventory import (
    InventoryItem, ItemCategory, TransactionType, Warehouse, WarehouseType
)
from inventory_engine.schemas.inventory import (
    ItemCreate, ItemUpdate, WarehouseCreate, WarehouseUpdate
)
from inventory_engine.services.inventory.helpers import round2, round_qty
from inventory_engine.store import InventoryStore

logger = get_logger("ledger")

MONEY_FIELDS = ("unit_cost",)
QUANTITY_FIELDS = ("reorder_point", "reorder_quantity")


def _matches(search: Optional[str], *values: Optional[str]) -> bool:
    if not search:
        return True
    term = search.lower()
    return any(term in (value or '').lower() for value in values)


class ItemMasterService:
    """Item and warehouse maintenance"""

    def __init__(self, store: InventoryStore, events: EventBus):
        self.store = store
        self.events = events

    # Items

    def create_item(self, data: ItemCreate) -> InventoryItem:
        """
        Create an item. last_cost and avg_cost start at the manual unit cost
        so the item can be issued before its first receipt.
        """
        existing = self.store.items.query().where_eq("number", data.number).first()
        if existing is not None:
            raise ValidationError(f"Item number {data.number} already exists")

        unit_cost = round2(data.unit_cost)
        try:
            item = self.store.items.insert(
                number=data.number,
                description=data.description,
                unit=data.unit.value,
                category=data.category.value,
                preferred_vendor_id=data.preferred_vendor_id or '',
                preferred_vendor_name=data.preferred_vendor_name or '',
                reorder_point=round_qty(data.reorder_point),
                reorder_quantity=round_qty(data.reorder_quantity),
                unit_cost=unit_cost,
                last_cost=unit_cost,
                avg_cost=unit_cost,
                active=True,
            )
            self.store.commit()
        except Exception:
            self.store.rollback()
            raise

        logger.info(f"Item {item.id} ({item.number}) created")
        self.events.emit("inventory.item.created", {"item": item.to_dict()})
        return item

    def update_item(self, item_id: int, data: ItemUpdate) -> InventoryItem:
        """
        Apply the fields that were set. last_cost and avg_cost belong to the
        costing engine once the item has a receipt; before that they track
        the manual unit cost.
        """
        changes = data.model_dump(exclude_unset=True)
        for field, value in list(changes.items()):
            if value is None:
                del changes[field]
            elif field in MONEY_FIELDS:
                changes[field] = round2(value)
            elif field in QUANTITY_FIELDS:
                changes[field] = round_qty(value)
            elif hasattr(value, "value"):
                changes[field] = value.value

        baseline = {}
        if "unit_cost" in changes and not self._has_receipts(item_id):
            baseline = {"last_cost": changes["unit_cost"], "avg_cost": changes["unit_cost"]}

        try:
            item = self.store.items.update(item_id, **changes, **baseline)
            self.store.commit()
        except Exception:
            self.store.rollback()
            raise

        logger.info(f"Item {item.id} ({item.number}) updated: {sorted(changes)}")
        self.events.emit("inventory.item.updated", {"item": item.to_dict(), "changes": sorted(changes)})
        return item

    def _has_receipts(self, item_id: int) -> bool:
        return self.store.transactions.query() \
            .where_eq("item_id", item_id) \
            .where_eq("type", TransactionType.RECEIPT.value) \
            .count() > 0

    def deactivate_item(self, item_id: int) -> InventoryItem:
        try:
            item = self.store.items.update(item_id, active=False)
            self.store.commit()
        except Exception:
            self.store.rollback()
            raise

        logger.info(f"Item {item.id} ({item.number}) deactivated")
        self.events.emit("inventory.item.deactivated", {"item": item.to_dict()})
        return item

    def get_item(self, item_id: int) -> InventoryItem:
        return self.store.items.require(item_id)

    def list_items(
        self,
        category: Optional[ItemCategory] = None,
        active: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> List[InventoryItem]:
        query = self.store.items.query()
        if category:
            query.where_eq("category", ItemCategory(category).value)
        if active is not None:
            query.where_eq("active", active)
        items = query.order_by("number").execute()
        return [
            item for item in items
            if _matches(search, item.number, item.description, item.preferred_vendor_name)
        ]

    # Warehouses

    def create_warehouse(self, data: WarehouseCreate) -> Warehouse:
        try:
            warehouse = self.store.warehouses.insert(
                name=data.name,
                type=data.type.value,
                address=data.address or '',
                job_id=data.job_id or '',
                contact_name=data.contact_name or '',
                contact_phone=data.contact_phone or '',
                active=True,
            )
            self.store.commit()
        except Exception:
            self.store.rollback()
            raise

        logger.info(f"Warehouse {warehouse.id} ({warehouse.name}) created")
        self.events.emit("inventory.warehouse.created", {"warehouse": warehouse.to_dict()})
        return warehouse

    def update_warehouse(self, warehouse_id: int, data: WarehouseUpdate) -> Warehouse:
        changes = {
            field: (value.value if hasattr(value, "value") else value)
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None
        }
        try:
            warehouse = self.store.warehouses.update(warehouse_id, **changes)
            self.store.commit()
        except Exception:
            self.store.rollback()
            raise

        logger.info(f"Warehouse {warehouse.id} ({warehouse.name}) updated: {sorted(changes)}")
        self.events.emit(
            "inventory.warehouse.updated",
            {"warehouse": warehouse.to_dict(), "changes": sorted(changes)},
        )
        return warehouse

    def deactivate_warehouse(self, warehouse_id: int) -> Warehouse:
        try:
            warehouse = self.store.warehouses.update(warehouse_id, active=False)
            self.store.commit()
        except Exception:
            self.store.rollback()
            raise

        logger.info(f"Warehouse {warehouse.id} ({warehouse.name}) deactivated")
        self.events.emit("inventory.warehouse.deactivated", {"warehouse": warehouse.to_dict()})
        return warehouse

    def get_warehouse(self, warehouse_id: int) -> Warehouse:
        return self.store.warehouses.require(warehouse_id)

    def list_warehouses(
        self,
        warehouse_type: Optional[WarehouseType] = None,
        active: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> List[Warehouse]:
        query = self.store.warehouses.query()
        if warehouse_type:
            query.where_eq("type", WarehouseType(warehouse_type).value)
        if active is not None:
            query.where_eq("active", active)
        warehouses = query.order_by("name").execute()
        return [
            warehouse for warehouse in warehouses
            if _matches(search, warehouse.name, warehouse.address, warehouse.job_id)
        ]
