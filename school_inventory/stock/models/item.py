# path: school_inventory/stock/models/item.py
from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, Date, DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from school_inventory.core.models.base import Base


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Item(Base):
    """
    Table items: one stock-keeping unit (tool or supply).

    Notes:
    - quantity is the TOTAL owned. Loans never change it, only entries/exits and
      approved disposals do. Availability is computed from the transactions ledger.
    - status is a cache written by the availability engine, never edited by hand.
    """

    __tablename__ = "items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    name: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    category: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(Text, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    cost: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    condition: Mapped[str] = mapped_column(Text, nullable=False, default="new", server_default="new")
    location: Mapped[str] = mapped_column(Text, nullable=False)

    source: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    brand: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    acquisition_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    status: Mapped[str] = mapped_column(Text, nullable=False, default="active", server_default="active")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    __table_args__ = (
        CheckConstraint("type IN ('tool','supply')", name="chk_items_type"),
        CheckConstraint("quantity >= 0", name="chk_items_quantity"),
        CheckConstraint("cost IS NULL OR cost >= 0", name="chk_items_cost"),
        CheckConstraint(
            "condition IN ('new','used','fair','poor')",
            name="chk_items_condition",
        ),
        CheckConstraint(
            "status IN ('active','low-stock','out-of-stock')",
            name="chk_items_status",
        ),
    )
