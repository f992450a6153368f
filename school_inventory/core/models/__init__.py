# school_inventory/core/models/__init__.py

__all__ = (
    "db_helper",
    "Base",
)

from .db_helper import db_helper
from .base import Base

# Domain models (school_inventory.stock.models) import Base from here;
# alembic/env.py and manage.py import them explicitly to fill Base.metadata.
