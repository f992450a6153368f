# path: school_inventory/stock/models/__init__.py
from __future__ import annotations

from school_inventory.stock.models.enums import (
    DisposalReason,
    DisposalStatus,
    ItemCondition,
    ItemStatus,
    ItemType,
    TransactionStatus,
    TransactionType,
)
from school_inventory.stock.models.item import Item
from school_inventory.stock.models.transaction import Transaction
from school_inventory.stock.models.disposal import Disposal
from school_inventory.stock.models.app_settings import SettingsRow

__all__ = [
    "DisposalReason",
    "DisposalStatus",
    "ItemCondition",
    "ItemStatus",
    "ItemType",
    "TransactionStatus",
    "TransactionType",
    "Item",
    "Transaction",
    "Disposal",
    "SettingsRow",
]
