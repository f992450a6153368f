# school_inventory/core/api/api_v1/__init__.py
from fastapi import APIRouter

from school_inventory.core.config import settings
from school_inventory.stock.api.api_v1 import router as stock_router


router = APIRouter(prefix=settings.api.v1.prefix)

# /api/<v1>/items, /transactions, /disposals, /settings, /reports
router.include_router(stock_router)
