"""
API Dependencies
Common dependencies for API endpoints
"""

from typing import Generator
from fastapi import Depends
from sqlalchemy.orm import Session

from inventory_engine.core.database import SessionLocal
from inventory_engine.core.events import EventBus
from inventory_engine.services.inventory import InventoryService

# Process-wide bus; subscribers register against it at startup
event_bus = EventBus()


def get_db() -> Generator:
    """
    Database dependency - creates a new database session for each request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_event_bus() -> EventBus:
    return event_bus


def get_inventory_service(
    db: Session = Depends(get_db),
    events: EventBus = Depends(get_event_bus),
) -> InventoryService:
    """
    Inventory service bound to the request's session.
    """
    return InventoryService(db, events=events)
