"""
Test Configuration and Fixtures
Shared testing infrastructure for the inventory engine
"""

import pytest
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from inventory_engine.api import deps
from inventory_engine.core.config import settings
from inventory_engine.core.database import Base
from inventory_engine.core.events import RecordingEventBus
from inventory_engine.main import app
from inventory_engine.models import inventory  # noqa: F401
from inventory_engine.models.inventory import InventoryItem, Warehouse, WarehouseType
from inventory_engine.schemas.inventory import ItemCreate, ReceiptIntent, WarehouseCreate
from inventory_engine.services.inventory import InventoryService, ItemLockRegistry

# Test database URL - in-memory SQLite shared through a static pool
TEST_DATABASE_URL = "sqlite://"


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database for each test"""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def events() -> RecordingEventBus:
    return RecordingEventBus()


@pytest.fixture
def service(db_session: Session, events: RecordingEventBus) -> InventoryService:
    """Inventory service over the test session with its own lock registry"""
    return InventoryService(db_session, events=events, locks=ItemLockRegistry())


@pytest.fixture
def strict_settings(monkeypatch):
    """Default business rules, whatever the environment says"""
    monkeypatch.setattr(settings, "VALIDATE_QUANTITIES", True)
    monkeypatch.setattr(settings, "CLAMP_REQUISITION_FILLS", False)
    monkeypatch.setattr(settings, "DEFAULT_VALUATION_METHOD", "average")
    return settings


@pytest.fixture(autouse=True)
def _default_rules(strict_settings):
    yield


@pytest.fixture
def client(db_session: Session, events: RecordingEventBus) -> Generator[TestClient, None, None]:
    """Create a test client with database and event bus overrides"""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[deps.get_db] = override_get_db
    app.dependency_overrides[deps.get_event_bus] = lambda: events
    test_client = TestClient(app)
    yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def item(service: InventoryService) -> InventoryItem:
    """Sample item with a 10.00 baseline cost and a reorder point of 20"""
    return service.create_item(ItemCreate(
        number="PVC-4",
        description="4in PVC pipe",
        unit="lf",
        category="raw_material",
        preferred_vendor_name="Ferguson Supply",
        reorder_point=Decimal("20"),
        reorder_quantity=Decimal("200"),
        unit_cost=Decimal("10.00"),
    ))


@pytest.fixture
def warehouse(service: InventoryService) -> Warehouse:
    return service.create_warehouse(WarehouseCreate(name="Main Warehouse", address="100 Depot Rd"))


@pytest.fixture
def job_site(service: InventoryService) -> Warehouse:
    return service.create_warehouse(WarehouseCreate(
        name="Riverside Job Site",
        type=WarehouseType.JOB_SITE,
        job_id="JOB-100",
    ))


@pytest.fixture
def stocked_item(service: InventoryService, item: InventoryItem, warehouse: Warehouse) -> InventoryItem:
    """Item with 100 @ 10.00 on hand at the main warehouse"""
    service.receive(ReceiptIntent(
        item_id=item.id,
        warehouse_id=warehouse.id,
        quantity=Decimal("100"),
        unit_cost=Decimal("10.00"),
        reference="PO-1",
    ))
    return item
