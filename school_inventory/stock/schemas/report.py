# path: school_inventory/stock/schemas/report.py
from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

from school_inventory.stock.schemas.disposal import DisposalRecord
from school_inventory.stock.schemas.item import ItemOut
from school_inventory.stock.schemas.transaction import TransactionOut


class DashboardStats(BaseModel):
    total_items: int = 0
    tools: int = 0
    supplies: int = 0
    total_units: int = 0
    total_value: Decimal = Decimal("0")
    active_loans: int = 0
    overdue_loans: int = 0
    low_stock_items: int = 0
    out_of_stock_items: int = 0
    total_available: int = 0
    total_loaned: int = 0
    by_category: dict[str, int] = Field(default_factory=dict)


class ItemHistory(BaseModel):
    """Everything that happened to one item, newest first."""
    item: ItemOut
    transactions: list[TransactionOut] = Field(default_factory=list)
    disposals: list[DisposalRecord] = Field(default_factory=list)
