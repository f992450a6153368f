# path: school_inventory/stock/services/gateway.py
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncContextManager, AsyncIterator, Dict, List, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from school_inventory.app_logging import get_logger
from school_inventory.core.config import InventoryDefaults, settings as app_settings
from school_inventory.core.exceptions import NotFoundError, StoreError
from school_inventory.crud.disposal_repository import DisposalRepository, IDisposalRepository
from school_inventory.crud.item_repository import IItemRepository, ItemRepository
from school_inventory.crud.settings_repository import ISettingsRepository, SettingsRepository
from school_inventory.crud.transaction_repository import ITransactionRepository, TransactionRepository
from school_inventory.stock.models.app_settings import SettingsRow
from school_inventory.stock.models.enums import TransactionStatus
from school_inventory.stock.schemas.disposal import DisposalRecord
from school_inventory.stock.schemas.item import ItemRecord
from school_inventory.stock.schemas.settings import InventorySettings
from school_inventory.stock.schemas.transaction import TransactionRecord

log = get_logger("stock.gateway")


class IInventoryGateway(Protocol):
    """
    Persistence gateway: everything the orchestration layer may ask the store.

    Notes:
    - every method is async and fails only with StoreError (or NotFoundError
      for an update of a missing row), never with a driver exception;
    - records come back as pydantic records, never ORM objects;
    - atomic() groups several calls into ONE store transaction.
    """

    def atomic(self) -> AsyncContextManager[None]: ...

    async def list_items(self) -> List[ItemRecord]: ...
    async def insert_item(self, fields: Dict[str, Any]) -> ItemRecord: ...
    async def update_item(self, item_id: str, fields: Dict[str, Any]) -> ItemRecord: ...
    async def delete_item(self, item_id: str) -> bool: ...

    async def list_transactions(self) -> List[TransactionRecord]: ...
    async def insert_transaction(self, fields: Dict[str, Any]) -> TransactionRecord: ...
    async def update_transaction(self, transaction_id: str, fields: Dict[str, Any]) -> None: ...
    async def delete_transaction(self, transaction_id: str) -> bool: ...
    async def set_transaction_statuses(self, transaction_ids: List[str], status: TransactionStatus) -> int: ...

    async def list_disposals(self) -> List[DisposalRecord]: ...
    async def insert_disposal(self, fields: Dict[str, Any]) -> DisposalRecord: ...
    async def update_disposal(self, disposal_id: str, fields: Dict[str, Any]) -> DisposalRecord: ...
    async def delete_disposal(self, disposal_id: str) -> bool: ...

    async def get_settings(self) -> InventorySettings: ...
    async def put_settings(self, settings: InventorySettings) -> None: ...


def settings_from_row(row: Optional[SettingsRow], defaults: InventoryDefaults) -> InventorySettings:
    """
    Row -> InventorySettings; missing row or empty/zero values fall back to defaults.
    """
    base = InventorySettings.from_defaults(defaults)
    if row is None:
        return base
    return InventorySettings(
        low_stock_threshold=row.low_stock_threshold or base.low_stock_threshold,
        default_loan_days=row.default_loan_days or base.default_loan_days,
        currency=row.currency or base.currency,
        language=row.language or base.language,
        notifications=row.notifications is not False,
        auto_backup=bool(row.auto_backup),
        categories=list(row.categories or base.categories),
        sources=list(row.sources or base.sources),
        teachers=list(row.teachers or base.teachers),
        locations=list(row.locations or base.locations),
    )


class SqlInventoryGateway(IInventoryGateway):
    """
    Gateway over one AsyncSession (one per request / per command).

    Rules:
    - outside atomic(): every write is committed right away;
    - inside atomic(): one commit at the end, full rollback on any error;
    - SQLAlchemyError -> StoreError (raise ... from e).
    """

    def __init__(
        self,
        session: AsyncSession,
        *,
        defaults: InventoryDefaults | None = None,
        item_repo: IItemRepository | None = None,
        transaction_repo: ITransactionRepository | None = None,
        disposal_repo: IDisposalRepository | None = None,
        settings_repo: ISettingsRepository | None = None,
    ) -> None:
        self._session = session
        self._defaults = defaults or app_settings.inventory
        self._items = item_repo or ItemRepository()
        self._transactions = transaction_repo or TransactionRepository()
        self._disposals = disposal_repo or DisposalRepository()
        self._settings = settings_repo or SettingsRepository()
        self._depth = 0

    # --- transactions ---

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        if self._depth:
            # nested block joins the outer one
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        self._depth = 1
        try:
            yield
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            log.warning({"event": "store_error", "op": "atomic_commit", "error": str(e)})
            raise StoreError(f"Store transaction failed: {e}") from e
        except BaseException:
            await self._session.rollback()
            raise
        finally:
            self._depth = 0

    @asynccontextmanager
    async def _op(self, name: str, *, write: bool = True) -> AsyncIterator[None]:
        try:
            yield
            if write and not self._depth:
                await self._session.commit()
        except SQLAlchemyError as e:
            if not self._depth:
                await self._session.rollback()
            log.warning({"event": "store_error", "op": name, "error": str(e)})
            raise StoreError(f"Store operation '{name}' failed: {e}") from e

    # --- items ---

    async def list_items(self) -> List[ItemRecord]:
        async with self._op("list_items", write=False):
            rows = await self._items.list_items(self._session)
        return [ItemRecord.model_validate(r) for r in rows]

    async def insert_item(self, fields: Dict[str, Any]) -> ItemRecord:
        async with self._op("insert_item"):
            obj = await self._items.create(self._session, _plain(fields))
            record = ItemRecord.model_validate(obj)
        return record

    async def update_item(self, item_id: str, fields: Dict[str, Any]) -> ItemRecord:
        async with self._op("update_item"):
            obj = await self._items.update_fields(self._session, item_id, _plain(fields))
            if obj is None:
                raise NotFoundError(f"Item {item_id} not found")
            record = ItemRecord.model_validate(obj)
        return record

    async def delete_item(self, item_id: str) -> bool:
        async with self._op("delete_item"):
            deleted = await self._items.delete(self._session, item_id)
        return deleted

    # --- transactions ---

    async def list_transactions(self) -> List[TransactionRecord]:
        async with self._op("list_transactions", write=False):
            rows = await self._transactions.list_transactions(self._session)
        return [TransactionRecord.model_validate(r) for r in rows]

    async def insert_transaction(self, fields: Dict[str, Any]) -> TransactionRecord:
        async with self._op("insert_transaction"):
            obj = await self._transactions.create(self._session, _plain(fields))
            record = TransactionRecord.model_validate(obj)
        return record

    async def update_transaction(self, transaction_id: str, fields: Dict[str, Any]) -> None:
        async with self._op("update_transaction"):
            obj = await self._transactions.update_fields(self._session, transaction_id, _plain(fields))
            if obj is None:
                raise NotFoundError(f"Transaction {transaction_id} not found")

    async def delete_transaction(self, transaction_id: str) -> bool:
        async with self._op("delete_transaction"):
            deleted = await self._transactions.delete(self._session, transaction_id)
        return deleted

    async def set_transaction_statuses(self, transaction_ids: List[str], status: TransactionStatus) -> int:
        async with self._op("set_transaction_statuses"):
            count = await self._transactions.set_status_for_ids(self._session, transaction_ids, status)
        return count

    # --- disposals ---

    async def list_disposals(self) -> List[DisposalRecord]:
        async with self._op("list_disposals", write=False):
            rows = await self._disposals.list_disposals(self._session)
        return [DisposalRecord.model_validate(r) for r in rows]

    async def insert_disposal(self, fields: Dict[str, Any]) -> DisposalRecord:
        async with self._op("insert_disposal"):
            obj = await self._disposals.create(self._session, _plain(fields))
            record = DisposalRecord.model_validate(obj)
        return record

    async def update_disposal(self, disposal_id: str, fields: Dict[str, Any]) -> DisposalRecord:
        async with self._op("update_disposal"):
            obj = await self._disposals.update_fields(self._session, disposal_id, _plain(fields))
            if obj is None:
                raise NotFoundError(f"Disposal {disposal_id} not found")
            record = DisposalRecord.model_validate(obj)
        return record

    async def delete_disposal(self, disposal_id: str) -> bool:
        async with self._op("delete_disposal"):
            deleted = await self._disposals.delete(self._session, disposal_id)
        return deleted

    # --- settings ---

    async def get_settings(self) -> InventorySettings:
        async with self._op("get_settings", write=False):
            row = await self._settings.get_row(self._session)
        if row is None:
            log.info({"event": "settings_defaults", "reason": "no settings row yet"})
        return settings_from_row(row, self._defaults)

    async def put_settings(self, settings: InventorySettings) -> None:
        async with self._op("put_settings"):
            await self._settings.upsert(self._session, settings.model_dump())


def _plain(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Enum members -> their values (columns are plain text)."""
    out: Dict[str, Any] = {}
    for key, value in fields.items():
        out[key] = getattr(value, "value", value)
    return out
