# school_inventory/stock/api/api_v1/__init__.py
from __future__ import annotations

from fastapi import APIRouter

from school_inventory.core.config import settings
from .disposals import router as disposals_router
from .items import router as items_router
from .reports import router as reports_router
from .inventory_settings import router as settings_router
from .transactions import router as transactions_router

router = APIRouter()
router.include_router(items_router, prefix=settings.api.v1.items)
router.include_router(transactions_router, prefix=settings.api.v1.transactions)
router.include_router(disposals_router, prefix=settings.api.v1.disposals)
router.include_router(settings_router, prefix=settings.api.v1.settings)
router.include_router(reports_router, prefix=settings.api.v1.reports)
