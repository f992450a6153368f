# path: school_inventory/stock/schemas/item.py
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import Field

from school_inventory.stock.models.enums import ItemCondition, ItemStatus, ItemType
from school_inventory.stock.schemas.common import ORMBaseSchema


class ItemBase(ORMBaseSchema):
    name: str = Field(..., examples=["Taladro Bosch"])
    category: str = Field(..., examples=["HERRAMIENTA"])
    type: ItemType = ItemType.TOOL
    quantity: int = Field(default=0, ge=0)
    cost: Optional[Decimal] = Field(default=None, ge=0)
    condition: ItemCondition = ItemCondition.NEW
    location: str = Field(..., examples=["TALLER"])

    source: Optional[str] = None
    brand: Optional[str] = None
    description: Optional[str] = None
    acquisition_date: Optional[dt.date] = None


class ItemCreate(ItemBase):
    """
    Add-item form payload. status is never accepted from the client.
    """


class ItemUpdate(ORMBaseSchema):
    """
    Partial edit: only the fields that were sent are applied.
    """
    name: Optional[str] = None
    category: Optional[str] = None
    type: Optional[ItemType] = None
    quantity: Optional[int] = Field(default=None, ge=0)
    cost: Optional[Decimal] = Field(default=None, ge=0)
    condition: Optional[ItemCondition] = None
    location: Optional[str] = None

    source: Optional[str] = None
    brand: Optional[str] = None
    description: Optional[str] = None
    acquisition_date: Optional[dt.date] = None


class ItemRecord(ItemBase):
    """Item as stored (status is the cached derived value)."""
    id: str
    status: ItemStatus = ItemStatus.ACTIVE
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class ItemOut(ItemRecord):
    """Item plus its ledger-derived quantities."""
    loaned_quantity: int = 0
    available_quantity: int = 0


class ItemEditOut(ORMBaseSchema):
    """
    Result of an item edit.

    persisted=False: the store failed, the edit lives only in the in-memory view.
    """
    item: ItemOut
    persisted: bool = True
    warning: Optional[str] = None
