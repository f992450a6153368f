# path: school_inventory/crud/transaction_repository.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from school_inventory.stock.models.enums import TransactionStatus, TransactionType
from school_inventory.stock.models.item import utcnow
from school_inventory.stock.models.transaction import Transaction


class ITransactionRepository(Protocol):
    async def list_transactions(self, session: AsyncSession) -> List[Transaction]: ...
    async def get(self, session: AsyncSession, transaction_id: str) -> Optional[Transaction]: ...
    async def create(self, session: AsyncSession, fields: Dict[str, Any]) -> Transaction: ...
    async def update_fields(
        self,
        session: AsyncSession,
        transaction_id: str,
        fields: Dict[str, Any],
    ) -> Optional[Transaction]: ...
    async def delete(self, session: AsyncSession, transaction_id: str) -> bool: ...
    async def set_status_for_ids(
        self,
        session: AsyncSession,
        transaction_ids: List[str],
        status: TransactionStatus,
    ) -> int: ...


class TransactionRepository(ITransactionRepository):
    """
    Repository for the transactions table (flush only, no commit).
    """

    async def list_transactions(self, session: AsyncSession) -> List[Transaction]:
        """Newest first."""
        res = await session.execute(
            select(Transaction).order_by(Transaction.created_at.desc(), Transaction.id.asc())
        )
        return list(res.scalars().all())

    async def get(self, session: AsyncSession, transaction_id: str) -> Optional[Transaction]:
        return await session.get(Transaction, str(transaction_id))

    async def create(self, session: AsyncSession, fields: Dict[str, Any]) -> Transaction:
        obj = Transaction(**fields)
        session.add(obj)
        await session.flush()
        return obj

    async def update_fields(
        self,
        session: AsyncSession,
        transaction_id: str,
        fields: Dict[str, Any],
    ) -> Optional[Transaction]:
        obj = await session.get(Transaction, str(transaction_id))
        if obj is None:
            return None
        for key, value in fields.items():
            setattr(obj, key, value)
        obj.updated_at = utcnow()
        await session.flush()
        return obj

    async def delete(self, session: AsyncSession, transaction_id: str) -> bool:
        res = await session.execute(delete(Transaction).where(Transaction.id == str(transaction_id)))
        return bool(res.rowcount)

    async def set_status_for_ids(
        self,
        session: AsyncSession,
        transaction_ids: List[str],
        status: TransactionStatus,
    ) -> int:
        """Bulk status cache rewrite (loans only)."""
        ids = sorted({str(i) for i in transaction_ids if i})
        if not ids:
            return 0
        res = await session.execute(
            update(Transaction)
            .where(Transaction.id.in_(ids), Transaction.type == TransactionType.LOAN.value)
            .values(status=status.value, updated_at=utcnow())
        )
        return int(res.rowcount or 0)
