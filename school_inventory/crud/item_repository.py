# path: school_inventory/crud/item_repository.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from school_inventory.stock.models.item import Item, utcnow


class IItemRepository(Protocol):
    """
    items repository interface (DI contract).

    Notes:
    - the session is passed in, the repository holds no state;
    - used as the type of the Depends provider in api_v1/deps.py.
    """

    async def list_items(self, session: AsyncSession) -> List[Item]: ...
    async def get(self, session: AsyncSession, item_id: str) -> Optional[Item]: ...
    async def create(self, session: AsyncSession, fields: Dict[str, Any]) -> Item: ...
    async def update_fields(
        self,
        session: AsyncSession,
        item_id: str,
        fields: Dict[str, Any],
    ) -> Optional[Item]: ...
    async def delete(self, session: AsyncSession, item_id: str) -> bool: ...


class ItemRepository(IItemRepository):
    """
    Repository for the items table.

    Rule:
    - SQL lives only here (school_inventory/crud/);
    - no commit here: the caller (gateway) owns the transaction, we only flush.
    """

    async def list_items(self, session: AsyncSession) -> List[Item]:
        """All items, by name."""
        res = await session.execute(select(Item).order_by(Item.name.asc(), Item.id.asc()))
        return list(res.scalars().all())

    async def get(self, session: AsyncSession, item_id: str) -> Optional[Item]:
        return await session.get(Item, str(item_id))

    async def create(self, session: AsyncSession, fields: Dict[str, Any]) -> Item:
        obj = Item(**fields)
        session.add(obj)
        await session.flush()
        return obj

    async def update_fields(
        self,
        session: AsyncSession,
        item_id: str,
        fields: Dict[str, Any],
    ) -> Optional[Item]:
        """Partial update; None if the row does not exist."""
        obj = await session.get(Item, str(item_id))
        if obj is None:
            return None
        for key, value in fields.items():
            setattr(obj, key, value)
        obj.updated_at = utcnow()
        await session.flush()
        return obj

    async def delete(self, session: AsyncSession, item_id: str) -> bool:
        res = await session.execute(delete(Item).where(Item.id == str(item_id)))
        return bool(res.rowcount)
