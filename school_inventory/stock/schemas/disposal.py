# path: school_inventory/stock/schemas/disposal.py
from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import Field

from school_inventory.stock.models.enums import DisposalReason, DisposalStatus
from school_inventory.stock.schemas.common import ORMBaseSchema


class DisposalCreate(ORMBaseSchema):
    """
    status=approved (default) takes the quantity out of stock right away,
    status=pending waits for approve_disposal.
    """
    item_id: str
    quantity: int = Field(..., gt=0)
    reason: DisposalReason = DisposalReason.DAMAGED
    date: Optional[dt.date] = None
    notes: Optional[str] = None
    status: DisposalStatus = DisposalStatus.APPROVED


class DisposalUpdate(ORMBaseSchema):
    quantity: Optional[int] = Field(default=None, gt=0)
    reason: Optional[DisposalReason] = None
    date: Optional[dt.date] = None
    notes: Optional[str] = None


class DisposalRecord(ORMBaseSchema):
    id: str
    item_id: str
    item_name: Optional[str] = None
    quantity: int
    reason: DisposalReason
    date: dt.date
    notes: Optional[str] = None
    status: DisposalStatus = DisposalStatus.APPROVED
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None
