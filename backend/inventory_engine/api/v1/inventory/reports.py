"""
Inventory Reports API endpoints
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends

from inventory_engine.api import deps
from inventory_engine.schemas.inventory import JobMaterialSummary, WasteReport
from inventory_engine.services.inventory import InventoryService

router = APIRouter()


@router.get("/job-materials/{job_id}", response_model=JobMaterialSummary)
def get_job_material_summary(
    job_id: str,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    """
    Material issued to and wasted on a job, per item.
    """
    return service.get_job_material_summary(job_id)


@router.get("/waste", response_model=WasteReport)
def get_waste_report(
    job_id: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    service: InventoryService = Depends(deps.get_inventory_service),
):
    return service.get_waste_report(job_id=job_id, date_from=date_from, date_to=date_to)
