# path: school_inventory/stock/schemas/transaction.py
from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field

from school_inventory.stock.models.enums import TransactionStatus, TransactionType
from school_inventory.stock.schemas.common import ORMBaseSchema


class TransactionCreate(ORMBaseSchema):
    """
    Register-transaction payload.

    - date defaults to today
    - for loans return_date defaults to date + default_loan_days
    - teacher_name is required for loans
    """
    item_id: str
    type: TransactionType = TransactionType.LOAN
    quantity: int = Field(..., gt=0)
    teacher_id: Optional[str] = None
    teacher_name: Optional[str] = None
    date: Optional[dt.date] = None
    return_date: Optional[dt.date] = None
    notes: Optional[str] = None


class TransactionRecord(ORMBaseSchema):
    id: str
    item_id: str
    item_name: Optional[str] = None
    teacher_id: Optional[str] = None
    teacher_name: Optional[str] = None
    quantity: int
    type: TransactionType
    date: dt.date
    return_date: Optional[dt.date] = None
    status: TransactionStatus = TransactionStatus.ACTIVE
    notes: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class TransactionOut(TransactionRecord):
    is_overdue: bool = False


class LoanLine(BaseModel):
    item_id: str
    quantity: int = Field(default=1, gt=0)


class LoanBatchCreate(BaseModel):
    """
    Multi-item loan: one borrower, one return date, several items.
    """
    teacher_name: str
    teacher_id: Optional[str] = None
    date: Optional[dt.date] = None
    return_date: Optional[dt.date] = None
    notes: Optional[str] = None
    lines: list[LoanLine] = Field(..., min_length=1)


class ReturnDateUpdate(BaseModel):
    return_date: dt.date
