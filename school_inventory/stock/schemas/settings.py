# path: school_inventory/stock/schemas/settings.py
from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from school_inventory.core.config import InventoryDefaults
from school_inventory.stock.schemas.common import ORMBaseSchema


class ReferenceListKind(str, Enum):
    """Enumerated lists kept inside the settings singleton."""

    CATEGORIES = "categories"
    SOURCES = "sources"
    TEACHERS = "teachers"
    LOCATIONS = "locations"


class InventorySettings(ORMBaseSchema):
    """
    Persisted inventory settings (singleton).

    Injected explicitly into the availability engine and the orchestration
    service; it is not a module-level global.
    """
    low_stock_threshold: int = Field(default=5, ge=1)
    default_loan_days: int = Field(default=7, ge=1)
    currency: str = "ARS"
    language: str = "es"
    notifications: bool = True
    auto_backup: bool = False

    categories: list[str] = Field(default_factory=list)
    sources: list[str] = Field(default_factory=list)
    teachers: list[str] = Field(default_factory=list)
    locations: list[str] = Field(default_factory=list)

    @classmethod
    def from_defaults(cls, defaults: InventoryDefaults) -> "InventorySettings":
        return cls.model_validate(defaults.model_dump())

    def list_of(self, kind: ReferenceListKind) -> list[str]:
        return list(getattr(self, kind.value))


class ReferenceEntryIn(BaseModel):
    name: str


class ReferenceEntryRename(BaseModel):
    old_name: str
    new_name: str
