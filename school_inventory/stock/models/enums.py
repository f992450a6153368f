# path: school_inventory/stock/models/enums.py
from __future__ import annotations

from enum import Enum


class ItemType(str, Enum):
    """
    Kind of stock-keeping unit.

    - tool:   lent out and returned (drill, saw...)
    - supply: consumed (glue, screws...). Only supplies get low-stock status.
    """

    TOOL = "tool"
    SUPPLY = "supply"


class ItemCondition(str, Enum):
    NEW = "new"
    USED = "used"
    FAIR = "fair"
    POOR = "poor"


class ItemStatus(str, Enum):
    """Derived from quantity/type/threshold, stored only as a cache."""

    ACTIVE = "active"
    LOW_STOCK = "low-stock"
    OUT_OF_STOCK = "out-of-stock"


class TransactionType(str, Enum):
    """
    Movement of stock.

    - loan:            borrowed by a teacher, has a return date
    - donation/entry:  stock comes in (terminal immediately)
    - return:          bookkeeping record of a return (terminal)
    - exit:            stock leaves for good (terminal)
    """

    LOAN = "loan"
    DONATION = "donation"
    ENTRY = "entry"
    RETURN = "return"
    EXIT = "exit"


class TransactionStatus(str, Enum):
    """
    - active:   open loan
    - returned: terminal
    - overdue:  cache of the derived "active and past its return date" fact
    """

    ACTIVE = "active"
    RETURNED = "returned"
    OVERDUE = "overdue"


class DisposalReason(str, Enum):
    DAMAGED = "damaged"
    EXPIRED = "expired"
    WORN_OUT = "worn-out"
    OBSOLETE = "obsolete"
    OTHER = "other"


class DisposalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# membership is checked with == so raw strings from the store match too
INCOMING_TYPES = (TransactionType.DONATION, TransactionType.ENTRY)
OPEN_LOAN_STATUSES = (TransactionStatus.ACTIVE, TransactionStatus.OVERDUE)
