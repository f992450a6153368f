# path: school_inventory/stock/schemas/__init__.py
from __future__ import annotations

from school_inventory.stock.schemas.common import ORMBaseSchema, AlertSchema
from school_inventory.stock.schemas.item import (
    ItemCreate,
    ItemEditOut,
    ItemOut,
    ItemRecord,
    ItemUpdate,
)
from school_inventory.stock.schemas.transaction import (
    LoanBatchCreate,
    LoanLine,
    ReturnDateUpdate,
    TransactionCreate,
    TransactionOut,
    TransactionRecord,
)
from school_inventory.stock.schemas.disposal import DisposalCreate, DisposalRecord, DisposalUpdate
from school_inventory.stock.schemas.settings import (
    InventorySettings,
    ReferenceEntryIn,
    ReferenceEntryRename,
    ReferenceListKind,
)
from school_inventory.stock.schemas.report import DashboardStats, ItemHistory

__all__ = [
    "ORMBaseSchema",
    "AlertSchema",
    "ItemCreate",
    "ItemEditOut",
    "ItemOut",
    "ItemRecord",
    "ItemUpdate",
    "LoanBatchCreate",
    "LoanLine",
    "ReturnDateUpdate",
    "TransactionCreate",
    "TransactionOut",
    "TransactionRecord",
    "DisposalCreate",
    "DisposalRecord",
    "DisposalUpdate",
    "InventorySettings",
    "ReferenceEntryIn",
    "ReferenceEntryRename",
    "ReferenceListKind",
    "DashboardStats",
    "ItemHistory",
]
