"""
Inventory Transaction Ledger & Costing Engine
"""

__version__ = "1.0.0"
