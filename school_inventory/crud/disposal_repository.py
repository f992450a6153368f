# path: school_inventory/crud/disposal_repository.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from school_inventory.stock.models.disposal import Disposal
from school_inventory.stock.models.item import utcnow


class IDisposalRepository(Protocol):
    async def list_disposals(self, session: AsyncSession) -> List[Disposal]: ...
    async def get(self, session: AsyncSession, disposal_id: str) -> Optional[Disposal]: ...
    async def create(self, session: AsyncSession, fields: Dict[str, Any]) -> Disposal: ...
    async def update_fields(
        self,
        session: AsyncSession,
        disposal_id: str,
        fields: Dict[str, Any],
    ) -> Optional[Disposal]: ...
    async def delete(self, session: AsyncSession, disposal_id: str) -> bool: ...


class DisposalRepository(IDisposalRepository):
    async def list_disposals(self, session: AsyncSession) -> List[Disposal]:
        res = await session.execute(
            select(Disposal).order_by(Disposal.date.desc(), Disposal.created_at.desc())
        )
        return list(res.scalars().all())

    async def get(self, session: AsyncSession, disposal_id: str) -> Optional[Disposal]:
        return await session.get(Disposal, str(disposal_id))

    async def create(self, session: AsyncSession, fields: Dict[str, Any]) -> Disposal:
        obj = Disposal(**fields)
        session.add(obj)
        await session.flush()
        return obj

    async def update_fields(
        self,
        session: AsyncSession,
        disposal_id: str,
        fields: Dict[str, Any],
    ) -> Optional[Disposal]:
        obj = await session.get(Disposal, str(disposal_id))
        if obj is None:
            return None
        for key, value in fields.items():
            setattr(obj, key, value)
        obj.updated_at = utcnow()
        await session.flush()
        return obj

    async def delete(self, session: AsyncSession, disposal_id: str) -> bool:
        res = await session.execute(delete(Disposal).where(Disposal.id == str(disposal_id)))
        return bool(res.rowcount)
