"""Inventory API endpoints"""

from . import items, warehouses, transactions, stock, requisitions, counts, reports

__all__ = ["items", "warehouses", "transactions", "stock", "requisitions", "counts", "reports"]
