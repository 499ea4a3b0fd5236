"""
Tests for the Collection store
"""

import pytest
from datetime import date
from decimal import Decimal
from sqlalchemy.orm import Session

from inventory_engine.core.exceptions import LedgerImmutableError, NotFoundError, ValidationError
from inventory_engine.models.inventory import InventoryItem
from inventory_engine.store import Collection, InventoryStore


def _items(db_session: Session) -> Collection:
    items = Collection(db_session, InventoryItem, name="Item")
    for number, description, cost, active in [
        ("B-100", "Rebar #4", "12.50", True),
        ("A-200", "Concrete mix", "7.25", True),
        ("C-300", "Safety vest", "15.00", False),
        ("D-400", "Rebar #5", "18.00", True),
    ]:
        items.insert(number=number, description=description, unit_cost=Decimal(cost), active=active)
    return items


class TestCollection:
    """Test suite for Collection"""

    def test_insert_assigns_id(self, db_session: Session):
        items = Collection(db_session, InventoryItem)
        item = items.insert(number="X-1", description="Widget")
        assert item.id is not None
        assert items.get(item.id) is item

    def test_require_missing_raises_not_found(self, db_session: Session):
        items = Collection(db_session, InventoryItem, name="Item")
        with pytest.raises(NotFoundError, match="Item 999 not found"):
            items.require(999)

    def test_get_none_returns_none(self, db_session: Session):
        assert Collection(db_session, InventoryItem).get(None) is None

    def test_update_changes_fields(self, db_session: Session):
        items = _items(db_session)
        item = items.query().where_eq("number", "A-200").first()
        updated = items.update(item.id, description="Concrete mix 80lb")
        assert updated.description == "Concrete mix 80lb"

    def test_update_unknown_field_rejected(self, db_session: Session):
        items = _items(db_session)
        item = items.all()[0]
        with pytest.raises(ValueError, match="no field"):
            items.update(item.id, colour="red")

    def test_unique_violation_becomes_validation_error(self, db_session: Session):
        items = Collection(db_session, InventoryItem, name="Item")
        items.insert(number="DUP", description="first")
        with pytest.raises(ValidationError):
            items.insert(number="DUP", description="second")


class TestCollectionQuery:
    """Test suite for CollectionQuery"""

    def test_filter_and_order(self, db_session: Session):
        items = _items(db_session)
        result = items.query().where_eq("active", True).order_by("number").execute()
        assert [i.number for i in result] == ["A-200", "B-100", "D-400"]

    def test_order_desc_limit_offset(self, db_session: Session):
        items = _items(db_session)
        result = items.query().order_by("number", "desc").offset(1).limit(2).execute()
        assert [i.number for i in result] == ["C-300", "B-100"]

    def test_comparison_operators(self, db_session: Session):
        items = _items(db_session)
        assert items.query().where("unit_cost", ">", Decimal("12.50")).count() == 2
        assert items.query().where("unit_cost", ">=", Decimal("12.50")).count() == 3
        assert items.query().where("unit_cost", "<", Decimal("10")).count() == 1
        assert items.query().where("number", "!=", "A-200").count() == 3

    def test_in_between_contains(self, db_session: Session):
        items = _items(db_session)
        assert items.query().where("number", "in", ["A-200", "C-300"]).count() == 2
        assert items.query().where("unit_cost", "between", (Decimal("10"), Decimal("16"))).count() == 2
        assert items.query().where("description", "contains", "REBAR").count() == 2

    def test_null_operators(self, db_session: Session):
        items = _items(db_session)
        assert items.query().where("preferred_vendor_id", "isNotNull").count() == 4
        assert items.query().where("preferred_vendor_id", "isNull").count() == 0

    def test_sum(self, db_session: Session):
        items = _items(db_session)
        assert items.query().where_eq("active", True).sum("unit_cost") == Decimal("37.75")
        assert items.query().where_eq("number", "none").sum("unit_cost") == Decimal("0")

    def test_unknown_operator_rejected(self, db_session: Session):
        items = _items(db_session)
        with pytest.raises(ValueError):
            items.query().where("number", "like", "A%")

    def test_unknown_field_rejected(self, db_session: Session):
        items = _items(db_session)
        with pytest.raises(ValueError):
            items.query().order_by("colour")


class TestLedgerCollection:
    """Ledger entries cannot be edited"""

    def test_update_raises(self, service, stocked_item):
        store = InventoryStore(service.db)
        txn = store.transactions.all()[0]
        with pytest.raises(LedgerImmutableError):
            store.transactions.update(txn.id, quantity=Decimal("1"))

    def test_ties_on_date_keep_insertion_order(self, service, stocked_item, warehouse):
        store = InventoryStore(service.db)
        today = date.today()
        ordered = store.transactions.query().where_eq("date", today).order_by("date").execute()
        assert [t.id for t in ordered] == sorted(t.id for t in ordered)
