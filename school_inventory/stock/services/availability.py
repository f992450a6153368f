"""
# path: school_inventory/stock/services/availability.py

Availability & lifecycle engine.

Pure functions over already fetched records: no I/O, no store, no globals.

Notes:
- Ledger model: Item.quantity is the total owned, loans never change it.
  loaned = sum of open loans, available = quantity - loaned (floored at 0).
- An open loan is type=loan with status active OR the cached 'overdue':
  an overdue loan still holds the stock until it is marked returned.
- Missing/malformed dates mean "not overdue"; a bad date on one transaction
  must not break the computation for the others.
"""

from __future__ import annotations

import datetime as dt
from typing import Any, Iterable, Optional, Union

from school_inventory.stock.models.enums import (
    OPEN_LOAN_STATUSES,
    ItemStatus,
    ItemType,
    TransactionStatus,
    TransactionType,
)
from school_inventory.stock.schemas.item import ItemRecord
from school_inventory.stock.schemas.transaction import TransactionRecord

DateLike = Union[dt.date, dt.datetime, str, None]


def coerce_date(value: Any) -> Optional[dt.date]:
    """date/datetime/ISO string -> date; anything unparseable -> None."""
    if value is None:
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        try:
            return dt.date.fromisoformat(raw[:10])
        except ValueError:
            return None
    return None


def _moment(now: DateLike) -> Union[dt.date, dt.datetime]:
    """datetime (or ISO string with a time part) stays a moment, anything else becomes a date."""
    if now is None:
        return dt.datetime.now()
    if isinstance(now, dt.datetime):
        return now
    if isinstance(now, str) and len(now.strip()) > 10:
        try:
            return dt.datetime.fromisoformat(now.strip())
        except ValueError:
            pass
    return coerce_date(now) or dt.datetime.now()


def is_open_loan(transaction: Any) -> bool:
    return transaction.type == TransactionType.LOAN and transaction.status in OPEN_LOAN_STATUSES


def loaned_quantity(item_id: str, transactions: Iterable[Any]) -> int:
    """Sum of quantity over the open loans of item_id (0 if none)."""
    total = 0
    for tx in transactions:
        if tx.item_id != item_id or not is_open_loan(tx):
            continue
        total += int(tx.quantity or 0)
    return total


def available_quantity(item: Any, transactions: Iterable[Any]) -> int:
    """
    Units that can be lent right now.

    out-of-stock (or any other non-orderable status) -> 0 unconditionally,
    even if the arithmetic says otherwise.
    """
    if item.status not in (ItemStatus.ACTIVE, ItemStatus.LOW_STOCK):
        return 0
    quantity = int(item.quantity or 0)
    return max(0, quantity - loaned_quantity(item.id, transactions))


def is_overdue(transaction: Any, now: DateLike = None) -> bool:
    """
    True iff the loan is still open and its return date is strictly before now.

    - now is a datetime: the return date counts from the start of that day,
      so a loan is overdue during its due day (after 00:00);
    - now is a bare date: calendar comparison, due today is overdue tomorrow.
    """
    if not is_open_loan(transaction):
        return False
    due = coerce_date(getattr(transaction, "return_date", None))
    if due is None:
        return False
    moment = _moment(now)
    if isinstance(moment, dt.datetime):
        return moment > dt.datetime.combine(due, dt.time.min, tzinfo=moment.tzinfo)
    return due < moment


def effective_status(transaction: Any, now: DateLike = None) -> TransactionStatus:
    """
    The status to show/cache: overdue is recomputed, never trusted from the store.
    """
    if transaction.status == TransactionStatus.RETURNED:
        return TransactionStatus.RETURNED
    if is_open_loan(transaction):
        return TransactionStatus.OVERDUE if is_overdue(transaction, now) else TransactionStatus.ACTIVE
    return TransactionStatus(transaction.status)


def derive_item_status(item: Any, settings: Any) -> ItemStatus:
    """
    out-of-stock if quantity == 0,
    low-stock    if supply and quantity < threshold,
    active       otherwise (tools never get low-stock).
    """
    quantity = int(item.quantity or 0)
    if quantity <= 0:
        return ItemStatus.OUT_OF_STOCK
    if item.type == ItemType.SUPPLY and quantity < int(settings.low_stock_threshold):
        return ItemStatus.LOW_STOCK
    return ItemStatus.ACTIVE


def with_derived_status(item: ItemRecord, settings: Any) -> ItemRecord:
    status = derive_item_status(item, settings)
    if item.status == status:
        return item
    return item.model_copy(update={"status": status})


def mark_returned(transaction: TransactionRecord) -> TransactionRecord:
    """active/overdue -> returned. Idempotent on an already returned transaction."""
    if transaction.status == TransactionStatus.RETURNED:
        return transaction
    return transaction.model_copy(update={"status": TransactionStatus.RETURNED})


def extend_loan(transaction: TransactionRecord, new_return_date: dt.date) -> TransactionRecord:
    """
    Replaces return_date only.

    status is left untouched: a loan flagged overdue stops being overdue
    through is_overdue(), not through a stored status change.
    """
    return transaction.model_copy(update={"return_date": new_return_date})
