# path: school_inventory/stock/api/api_v1/deps.py
from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from school_inventory.core.models.db_helper import db_helper
from school_inventory.crud.disposal_repository import DisposalRepository, IDisposalRepository
from school_inventory.crud.item_repository import IItemRepository, ItemRepository
from school_inventory.crud.settings_repository import ISettingsRepository, SettingsRepository
from school_inventory.crud.transaction_repository import ITransactionRepository, TransactionRepository
from school_inventory.stock.services.gateway import IInventoryGateway, SqlInventoryGateway
from school_inventory.stock.services.inventory_service import InventoryService
from school_inventory.stock.services.reference_lists import ReferenceListService
from school_inventory.stock.services.report_service import ReportService


@lru_cache(maxsize=1)
def _item_repo_singleton() -> ItemRepository:
    """
    Repositories are stateless (the session is an argument),
    so one instance per process is enough.
    """
    return ItemRepository()


def get_item_repository() -> IItemRepository:
    return _item_repo_singleton()


@lru_cache(maxsize=1)
def _transaction_repo_singleton() -> TransactionRepository:
    return TransactionRepository()


def get_transaction_repository() -> ITransactionRepository:
    return _transaction_repo_singleton()


@lru_cache(maxsize=1)
def _disposal_repo_singleton() -> DisposalRepository:
    return DisposalRepository()


def get_disposal_repository() -> IDisposalRepository:
    return _disposal_repo_singleton()


@lru_cache(maxsize=1)
def _settings_repo_singleton() -> SettingsRepository:
    return SettingsRepository()


def get_settings_repository() -> ISettingsRepository:
    return _settings_repo_singleton()


def get_inventory_gateway(
    session: Annotated[AsyncSession, Depends(db_helper.session_getter)],
    item_repo: Annotated[IItemRepository, Depends(get_item_repository)],
    transaction_repo: Annotated[ITransactionRepository, Depends(get_transaction_repository)],
    disposal_repo: Annotated[IDisposalRepository, Depends(get_disposal_repository)],
    settings_repo: Annotated[ISettingsRepository, Depends(get_settings_repository)],
) -> IInventoryGateway:
    """
    One gateway per request, bound to the request session.

    Tests override this provider with an in-memory gateway.
    """
    return SqlInventoryGateway(
        session,
        item_repo=item_repo,
        transaction_repo=transaction_repo,
        disposal_repo=disposal_repo,
        settings_repo=settings_repo,
    )


def get_inventory_service(
    gateway: Annotated[IInventoryGateway, Depends(get_inventory_gateway)],
) -> InventoryService:
    # the view is loaded lazily on the first call
    return InventoryService(gateway)


def get_report_service(
    inventory: Annotated[InventoryService, Depends(get_inventory_service)],
) -> ReportService:
    return ReportService(inventory)


def get_reference_list_service(
    inventory: Annotated[InventoryService, Depends(get_inventory_service)],
) -> ReferenceListService:
    return ReferenceListService(inventory)
