# path: school_inventory/stock/models/disposal.py
from __future__ import annotations

import datetime as dt
from typing import Optional

from sqlalchemy import CheckConstraint, Date, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from school_inventory.core.models.base import Base
from school_inventory.stock.models.item import new_id, utcnow


class Disposal(Base):
    """
    Table disposals: permanent write-off of item quantity.

    An approved disposal has already been subtracted from items.quantity (exactly once).
    A pending one has not touched the stock yet.
    """

    __tablename__ = "disposals"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    item_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    item_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(Text, nullable=False, default="approved", server_default="approved")

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
        CheckConstraint("quantity > 0", name="chk_disposals_quantity"),
        CheckConstraint(
            "reason IN ('damaged','expired','worn-out','obsolete','other')",
            name="chk_disposals_reason",
        ),
        CheckConstraint(
            "status IN ('pending','approved','rejected')",
            name="chk_disposals_status",
        ),
    )
