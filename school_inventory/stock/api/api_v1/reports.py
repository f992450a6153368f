# path: school_inventory/stock/api/api_v1/reports.py
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from school_inventory.stock.api.api_v1.deps import get_report_service
from school_inventory.stock.schemas.report import DashboardStats, ItemHistory
from school_inventory.stock.services.report_service import ReportService


router = APIRouter(tags=["Reports"])


@router.get("/dashboard", response_model=DashboardStats)
async def dashboard(reports: Annotated[ReportService, Depends(get_report_service)]):
    return await reports.dashboard()


@router.get("/items/{item_id}/history", response_model=ItemHistory)
async def item_history(reports: Annotated[ReportService, Depends(get_report_service)], item_id: str):
    return await reports.item_history(item_id)
