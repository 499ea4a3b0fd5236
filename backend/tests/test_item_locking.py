"""
Tests for per-item receipt locking
"""

import pytest
import threading
from contextlib import contextmanager
from decimal import Decimal

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from inventory_engine.core.database import Base
from inventory_engine.core.events import EventBus
from inventory_engine.schemas.inventory import ItemCreate, ReceiptIntent, WarehouseCreate
from inventory_engine.services.inventory import InventoryService, ItemLockRegistry, round2


class RecordingLockRegistry(ItemLockRegistry):
    """Lock registry that remembers which items are currently held"""

    def __init__(self):
        super().__init__()
        self.held = set()
        self.log = []

    @contextmanager
    def hold(self, item_id: int):
        with super().hold(item_id):
            self.held.add(item_id)
            self.log.append(("enter", item_id))
            try:
                yield
            finally:
                self.held.discard(item_id)
                self.log.append(("exit", item_id))


class TestReceiptLocking:
    """Receipt insert and average refresh run under the item's lock"""

    def test_cost_refresh_runs_while_item_is_held(self, db_session, events, item, warehouse, monkeypatch):
        locks = RecordingLockRegistry()
        service = InventoryService(db_session, events=events, locks=locks)
        seen = []
        refresh = service.costing.update_item_costs

        def spy(item_id, new_cost):
            seen.append(item_id in locks.held)
            return refresh(item_id, new_cost)

        monkeypatch.setattr(service.costing, "update_item_costs", spy)
        service.receive(ReceiptIntent(
            item_id=item.id, warehouse_id=warehouse.id, quantity=Decimal("5"), unit_cost=Decimal("8"),
        ))

        assert seen == [True]
        assert locks.log == [("enter", item.id), ("exit", item.id)]
        assert locks.held == set()

    def test_lock_released_when_receipt_fails(self, db_session, events, item, warehouse, monkeypatch):
        locks = RecordingLockRegistry()
        service = InventoryService(db_session, events=events, locks=locks)

        def boom(item_id, new_cost):
            raise RuntimeError("cost refresh failed")

        monkeypatch.setattr(service.costing, "update_item_costs", boom)
        with pytest.raises(RuntimeError):
            service.receive(ReceiptIntent(
                item_id=item.id, warehouse_id=warehouse.id, quantity=Decimal("5"), unit_cost=Decimal("8"),
            ))

        assert locks.held == set()
        assert service.get_stock_level(item.id) == Decimal("0")

    def test_concurrent_receipts_keep_exact_average(self, tmp_path):
        engine = create_engine(
            f"sqlite:///{tmp_path / 'ledger.db'}",
            connect_args={"check_same_thread": False, "timeout": 30},
        )
        Base.metadata.create_all(bind=engine)
        Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        locks = ItemLockRegistry()

        setup = Session()
        try:
            seed = InventoryService(setup, events=EventBus(), locks=locks)
            item_id = seed.create_item(ItemCreate(number="CU-1", description="Copper", unit_cost=Decimal("1"))).id
            warehouse_id = seed.create_warehouse(WarehouseCreate(name="Yard")).id
        finally:
            setup.close()

        batches = {
            "a": [(Decimal("10"), Decimal("3.10")), (Decimal("7"), Decimal("2.95")), (Decimal("4"), Decimal("3.40"))],
            "b": [(Decimal("25"), Decimal("2.80")), (Decimal("3"), Decimal("3.75")), (Decimal("12"), Decimal("3.05"))],
        }
        errors = []

        def post_receipts(batch):
            session = Session()
            try:
                worker = InventoryService(session, events=EventBus(), locks=locks)
                for qty, cost in batch:
                    worker.receive(ReceiptIntent(
                        item_id=item_id, warehouse_id=warehouse_id, quantity=qty, unit_cost=cost,
                    ))
            except Exception as exc:
                errors.append(exc)
            finally:
                session.close()

        threads = [threading.Thread(target=post_receipts, args=(batch,)) for batch in batches.values()]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        all_receipts = batches["a"] + batches["b"]
        total_qty = sum(qty for qty, _ in all_receipts)
        total_value = sum(round2(qty * cost) for qty, cost in all_receipts)

        check = Session()
        try:
            reader = InventoryService(check, events=EventBus(), locks=locks)
            assert reader.get_item(item_id).avg_cost == round2(total_value / total_qty)
            assert reader.get_stock_level(item_id) == total_qty
        finally:
            check.close()
            engine.dispose()
