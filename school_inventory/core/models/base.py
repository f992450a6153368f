# path: school_inventory/core/models/base.py
from __future__ import annotations

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

from school_inventory.core.config import settings


class Base(DeclarativeBase):
    """
    Common declarative base.

    The naming convention comes from the config so that Alembic autogenerate
    produces stable constraint names.
    """
    __abstract__ = True

    metadata = MetaData(naming_convention=settings.db.naming_convention)
