# path: school_inventory/stock/api/api_v1/transactions.py
from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Response, status

from school_inventory.stock.api.api_v1.deps import get_inventory_service
from school_inventory.stock.schemas.transaction import (
    LoanBatchCreate,
    ReturnDateUpdate,
    TransactionCreate,
    TransactionOut,
)
from school_inventory.stock.services.inventory_service import InventoryService


router = APIRouter(tags=["Transactions"])

Service = Annotated[InventoryService, Depends(get_inventory_service)]


@router.get("", response_model=list[TransactionOut])
async def list_transactions(service: Service, item_id: Optional[str] = None):
    """Newest first; status is the derived one (overdue recomputed)."""
    return await service.list_transactions(item_id=item_id)


@router.post("", response_model=TransactionOut, status_code=status.HTTP_201_CREATED)
async def register_transaction(service: Service, tx_in: TransactionCreate):
    return await service.register_transaction(tx_in)


@router.post("/batch", response_model=list[TransactionOut], status_code=status.HTTP_201_CREATED)
async def register_loans(service: Service, batch_in: LoanBatchCreate):
    """Several loans for one borrower; all lines are accepted or none."""
    return await service.register_loans(batch_in)


@router.get("/{transaction_id}", response_model=TransactionOut)
async def get_transaction(service: Service, transaction_id: str):
    return await service.get_transaction(transaction_id)


@router.post("/{transaction_id}/return", response_model=TransactionOut)
async def mark_returned(service: Service, transaction_id: str):
    return await service.mark_returned(transaction_id)


@router.post("/{transaction_id}/extend", response_model=TransactionOut)
async def extend_loan(service: Service, transaction_id: str, body: ReturnDateUpdate):
    return await service.extend_loan(transaction_id, body.return_date)


@router.put("/{transaction_id}/return-date", response_model=TransactionOut)
async def update_return_date(service: Service, transaction_id: str, body: ReturnDateUpdate):
    return await service.update_return_date(transaction_id, body.return_date)


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(service: Service, transaction_id: str) -> Response:
    await service.delete_transaction(transaction_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
