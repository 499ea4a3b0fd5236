"""
Inventory Engine Services
Business logic services for the inventory ledger
"""

from .inventory import InventoryService

__all__ = ["InventoryService"]
