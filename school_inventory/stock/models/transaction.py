# path: school_inventory/stock/models/transaction.py
from __future__ import annotations

import datetime as dt
from typing import Optional

from sqlalchemy import CheckConstraint, Date, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from school_inventory.core.models.base import Base
from school_inventory.stock.models.item import new_id, utcnow


class Transaction(Base):
    """
    Table transactions: a movement of stock (loan, donation/entry, return, exit).

    Notes:
    - item_id is a plain reference without a FK: history survives item deletion,
      item_name keeps a snapshot of the name for that case.
    - status 'overdue' is only a cache; the engine decides overdue-ness from return_date.
    """

    __tablename__ = "transactions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    item_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    item_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    teacher_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    teacher_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    type: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    return_date: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(Text, nullable=False, default="active", server_default="active")
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    __table_args__ = (
        CheckConstraint("quantity > 0", name="chk_transactions_quantity"),
        CheckConstraint(
            "type IN ('loan','donation','entry','return','exit')",
            name="chk_transactions_type",
        ),
        CheckConstraint(
            "status IN ('active','returned','overdue')",
            name="chk_transactions_status",
        ),
        Index("ix_transactions_item_status", "item_id", "status"),
    )
