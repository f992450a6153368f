# path: school_inventory/stock/schemas/common.py
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ORMBaseSchema(BaseModel):
    """
    Base schema for records read from the ORM (pydantic v2).
    """
    model_config = ConfigDict(from_attributes=True)


class AlertSchema(BaseModel):
    """
    Uniform user-facing message (toast in the UI).
    """
    kind: str = Field(..., examples=["success", "error", "warning"])
    text: str
    meta: Optional[dict[str, Any]] = None
