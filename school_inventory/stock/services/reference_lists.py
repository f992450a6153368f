# path: school_inventory/stock/services/reference_lists.py
"""
Reference lists kept inside the settings singleton:
categories, sources, teachers, locations.

Rules:
- names are trimmed, blanks dropped, duplicates removed case-insensitively
  (first spelling wins);
- every list keeps at least one entry;
- changes are persisted through InventoryService.save_settings (put_settings).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List, Optional

from school_inventory.app_logging import get_logger
from school_inventory.core.exceptions import NotFoundError, ValidationError
from school_inventory.stock.schemas.settings import InventorySettings, ReferenceListKind

if TYPE_CHECKING:
    from school_inventory.stock.services.inventory_service import InventoryService

log = get_logger("service.reference_lists")


def normalize_entries(names: Iterable[Optional[str]]) -> List[str]:
    seen: set[str] = set()
    out: List[str] = []
    for raw in names:
        name = (raw or "").strip()
        if not name:
            continue
        key = name.casefold()
        if key in seen:
            continue
        seen.add(key)
        out.append(name)
    return out


def validate_settings(new: InventorySettings) -> InventorySettings:
    """
    Settings-panel save rules. Returns the normalized copy.
    """
    if int(new.low_stock_threshold) < 1:
        raise ValidationError("Low stock threshold must be at least 1", field="low_stock_threshold")
    if int(new.default_loan_days) < 1:
        raise ValidationError("Default loan days must be at least 1", field="default_loan_days")

    lists = {}
    for kind in ReferenceListKind:
        entries = normalize_entries(getattr(new, kind.value))
        if not entries:
            raise ValidationError(f"The {kind.value} list needs at least one entry", field=kind.value)
        lists[kind.value] = entries
    return new.model_copy(update=lists)


def _index_of(entries: List[str], name: str) -> int:
    key = name.strip().casefold()
    for idx, entry in enumerate(entries):
        if entry.casefold() == key:
            return idx
    return -1


class ReferenceListService:
    """
    Add / rename / remove one entry of a reference list.
    """

    def __init__(self, inventory: "InventoryService") -> None:
        self.inventory = inventory

    async def entries(self, kind: ReferenceListKind) -> List[str]:
        current = await self.inventory.get_settings()
        return current.list_of(kind)

    async def add_entry(self, kind: ReferenceListKind, name: str) -> List[str]:
        clean = (name or "").strip()
        if not clean:
            raise ValidationError("Name is required", field="name")

        entries = await self.entries(kind)
        if _index_of(entries, clean) >= 0:
            raise ValidationError(f"'{clean}' already exists in {kind.value}", field="name")

        entries.append(clean)
        saved = await self._save(kind, entries)
        log.info({"event": "reference_entry_added", "kind": kind.value, "name": clean})
        return saved

    async def rename_entry(self, kind: ReferenceListKind, old_name: str, new_name: str) -> List[str]:
        clean = (new_name or "").strip()
        if not clean:
            raise ValidationError("New name is required", field="new_name")

        entries = await self.entries(kind)
        idx = _index_of(entries, old_name or "")
        if idx < 0:
            raise NotFoundError(f"'{old_name}' not found in {kind.value}")

        clash = _index_of(entries, clean)
        if clash >= 0 and clash != idx:
            raise ValidationError(f"'{clean}' already exists in {kind.value}", field="new_name")

        entries[idx] = clean
        saved = await self._save(kind, entries)
        log.info({"event": "reference_entry_renamed", "kind": kind.value, "old": old_name, "new": clean})
        return saved

    async def remove_entry(self, kind: ReferenceListKind, name: str) -> List[str]:
        entries = await self.entries(kind)
        idx = _index_of(entries, name or "")
        if idx < 0:
            raise NotFoundError(f"'{name}' not found in {kind.value}")
        if len(entries) == 1:
            raise ValidationError(f"The {kind.value} list needs at least one entry", field=kind.value)

        removed = entries.pop(idx)
        saved = await self._save(kind, entries)
        log.info({"event": "reference_entry_removed", "kind": kind.value, "name": removed})
        return saved

    async def _save(self, kind: ReferenceListKind, entries: List[str]) -> List[str]:
        current = await self.inventory.get_settings()
        saved = await self.inventory.save_settings(current.model_copy(update={kind.value: entries}))
        return saved.list_of(kind)
