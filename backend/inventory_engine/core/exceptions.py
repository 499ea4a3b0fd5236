"""
Inventory Engine Exceptions
"""
from typing import Optional


class InventoryError(Exception):
    """Base exception for the inventory engine"""
    pass


class NotFoundError(InventoryError):
    """Raised when an item, warehouse, requisition or count id does not exist"""

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class StateConflictError(InventoryError):
    """Raised when a workflow transition is not allowed from the current status"""

    def __init__(
        self,
        message: str,
        entity: Optional[str] = None,
        entity_id=None,
        current_status: Optional[str] = None,
        action: Optional[str] = None,
    ):
        self.entity = entity
        self.entity_id = entity_id
        self.current_status = current_status
        self.action = action
        super().__init__(message)


InvalidTransitionError = StateConflictError


class ValidationError(InventoryError):
    """Raised when data validation fails"""
    pass


class LedgerImmutableError(InventoryError):
    """Raised on any attempt to edit a posted ledger entry"""
    pass
