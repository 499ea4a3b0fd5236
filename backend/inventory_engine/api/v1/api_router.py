"""
Main API Router - Consolidates all module routes
"""

from fastapi import APIRouter
from inventory_engine.api.v1.inventory import (
    items,
    warehouses,
    transactions,
    stock,
    requisitions,
    counts,
    reports,
)

api_router = APIRouter()

# Item and location master
api_router.include_router(items.router, prefix="/items", tags=["items"])
api_router.include_router(warehouses.router, prefix="/warehouses", tags=["warehouses"])

# Ledger
api_router.include_router(transactions.router, prefix="/transactions", tags=["transactions"])

# Stock levels and valuation
api_router.include_router(stock.router, tags=["stock"])

# Workflows
api_router.include_router(requisitions.router, prefix="/requisitions", tags=["requisitions"])
api_router.include_router(counts.router, prefix="/counts", tags=["counts"])

# Reports
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
