# path: school_inventory/stock/api/api_v1/inventory_settings.py
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from school_inventory.stock.api.api_v1.deps import get_inventory_service, get_reference_list_service
from school_inventory.stock.schemas.settings import (
    InventorySettings,
    ReferenceEntryIn,
    ReferenceEntryRename,
    ReferenceListKind,
)
from school_inventory.stock.services.inventory_service import InventoryService
from school_inventory.stock.services.reference_lists import ReferenceListService


router = APIRouter(tags=["Settings"])

Service = Annotated[InventoryService, Depends(get_inventory_service)]
Lists = Annotated[ReferenceListService, Depends(get_reference_list_service)]


@router.get("", response_model=InventorySettings)
async def get_settings(service: Service):
    """Stored settings, or the built-in defaults if nothing was saved yet."""
    return await service.get_settings()


@router.put("", response_model=InventorySettings)
async def save_settings(service: Service, settings_in: InventorySettings):
    return await service.save_settings(settings_in)


@router.get("/lists/{kind}", response_model=list[str])
async def list_entries(lists: Lists, kind: ReferenceListKind):
    return await lists.entries(kind)


@router.post("/lists/{kind}", response_model=list[str])
async def add_entry(lists: Lists, kind: ReferenceListKind, entry: ReferenceEntryIn):
    return await lists.add_entry(kind, entry.name)


@router.patch("/lists/{kind}", response_model=list[str])
async def rename_entry(lists: Lists, kind: ReferenceListKind, entry: ReferenceEntryRename):
    return await lists.rename_entry(kind, entry.old_name, entry.new_name)


@router.delete("/lists/{kind}/{name}", response_model=list[str])
async def remove_entry(lists: Lists, kind: ReferenceListKind, name: str):
    return await lists.remove_entry(kind, name)
