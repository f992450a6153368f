# path: school_inventory/stock/api/api_v1/disposals.py
from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Response, status

from school_inventory.stock.api.api_v1.deps import get_inventory_service
from school_inventory.stock.schemas.disposal import DisposalCreate, DisposalRecord, DisposalUpdate
from school_inventory.stock.services.inventory_service import InventoryService


router = APIRouter(tags=["Disposals"])

Service = Annotated[InventoryService, Depends(get_inventory_service)]


@router.get("", response_model=list[DisposalRecord])
async def list_disposals(service: Service, item_id: Optional[str] = None):
    return await service.list_disposals(item_id=item_id)


@router.post("", response_model=DisposalRecord, status_code=status.HTTP_201_CREATED)
async def register_disposal(service: Service, disposal_in: DisposalCreate):
    return await service.register_disposal(disposal_in)


@router.get("/{disposal_id}", response_model=DisposalRecord)
async def get_disposal(service: Service, disposal_id: str):
    return await service.get_disposal(disposal_id)


@router.patch("/{disposal_id}", response_model=DisposalRecord)
async def edit_disposal(service: Service, disposal_id: str, disposal_in: DisposalUpdate):
    return await service.edit_disposal(disposal_id, disposal_in)


@router.post("/{disposal_id}/approve", response_model=DisposalRecord)
async def approve_disposal(service: Service, disposal_id: str):
    return await service.approve_disposal(disposal_id)


@router.post("/{disposal_id}/reject", response_model=DisposalRecord)
async def reject_disposal(service: Service, disposal_id: str):
    return await service.reject_disposal(disposal_id)


@router.delete("/{disposal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_disposal(service: Service, disposal_id: str) -> Response:
    await service.delete_disposal(disposal_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
