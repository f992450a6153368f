# path: school_inventory/stock/api/api_v1/items.py
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from school_inventory.stock.api.api_v1.deps import get_inventory_service
from school_inventory.stock.schemas.item import ItemCreate, ItemEditOut, ItemOut, ItemUpdate
from school_inventory.stock.services.inventory_service import InventoryService


router = APIRouter(tags=["Items"])

Service = Annotated[InventoryService, Depends(get_inventory_service)]


@router.get("", response_model=list[ItemOut])
async def list_items(service: Service):
    """All items with their loaned/available quantities."""
    return await service.list_items()


@router.post("", response_model=ItemOut, status_code=status.HTTP_201_CREATED)
async def add_item(service: Service, item_in: ItemCreate):
    return await service.add_item(item_in)


@router.get("/{item_id}", response_model=ItemOut)
async def get_item(service: Service, item_id: str):
    return await service.get_item(item_id)


@router.patch("/{item_id}", response_model=ItemEditOut)
async def edit_item(service: Service, item_id: str, item_in: ItemUpdate):
    """
    Partial edit.

    persisted=false in the body means the store failed and the edit
    was only applied to the in-memory view (warning explains why).
    """
    return await service.edit_item(item_id, item_in)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(service: Service, item_id: str) -> Response:
    await service.delete_item(item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
