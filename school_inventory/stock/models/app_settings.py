# path: school_inventory/stock/models/app_settings.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from school_inventory.core.models.base import Base
from school_inventory.stock.models.item import new_id, utcnow

# JSONB on PostgreSQL, plain JSON elsewhere (sqlite in tests)
JsonList = JSON().with_variant(JSONB(), "postgresql")

SETTINGS_KEY = "main"


class SettingsRow(Base):
    """
    Table settings: singleton row (key='main') with the inventory settings.

    Absent until the first save; readers fall back to built-in defaults.
    """

    __tablename__ = "settings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    key: Mapped[str] = mapped_column(Text, nullable=False, unique=True, default=SETTINGS_KEY)

    low_stock_threshold: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    default_loan_days: Mapped[int] = mapped_column(Integer, nullable=False, default=7)
    currency: Mapped[str] = mapped_column(Text, nullable=False, default="ARS")
    language: Mapped[str] = mapped_column(Text, nullable=False, default="es")
    notifications: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    auto_backup: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    categories: Mapped[list[str]] = mapped_column(JsonList, nullable=False, default=list)
    sources: Mapped[list[str]] = mapped_column(JsonList, nullable=False, default=list)
    teachers: Mapped[list[str]] = mapped_column(JsonList, nullable=False, default=list)
    locations: Mapped[list[str]] = mapped_column(JsonList, nullable=False, default=list)

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
