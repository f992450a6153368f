# path: school_inventory/crud/settings_repository.py
from __future__ import annotations

from typing import Any, Dict, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from school_inventory.stock.models.app_settings import SETTINGS_KEY, SettingsRow
from school_inventory.stock.models.item import utcnow


class ISettingsRepository(Protocol):
    async def get_row(self, session: AsyncSession) -> Optional[SettingsRow]: ...
    async def upsert(self, session: AsyncSession, fields: Dict[str, Any]) -> SettingsRow: ...


class SettingsRepository(ISettingsRepository):
    """
    The settings singleton (key='main').
    """

    async def get_row(self, session: AsyncSession) -> Optional[SettingsRow]:
        res = await session.execute(select(SettingsRow).where(SettingsRow.key == SETTINGS_KEY).limit(1))
        return res.scalar_one_or_none()

    async def upsert(self, session: AsyncSession, fields: Dict[str, Any]) -> SettingsRow:
        """UPDATE if the row exists, INSERT otherwise (whole-row write)."""
        row = await self.get_row(session)
        if row is None:
            row = SettingsRow(key=SETTINGS_KEY, **fields)
            session.add(row)
        else:
            for key, value in fields.items():
                setattr(row, key, value)
            row.updated_at = utcnow()
        await session.flush()
        return row
