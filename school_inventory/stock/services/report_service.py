# path: school_inventory/stock/services/report_service.py
from __future__ import annotations

from collections import Counter
from decimal import Decimal

from school_inventory.stock.models.enums import ItemStatus, ItemType
from school_inventory.stock.schemas.report import DashboardStats, ItemHistory
from school_inventory.stock.services import availability as engine
from school_inventory.stock.services.inventory_service import InventoryService


class ReportService:
    """
    Read-only aggregates over the inventory view.

    - active_loans counts every open loan (overdue ones included);
    - overdue_loans is the derived subset, never the stored cache.
    """

    def __init__(self, inventory: InventoryService) -> None:
        self.inventory = inventory

    async def dashboard(self) -> DashboardStats:
        items = await self.inventory.list_items()
        view = self.inventory.view
        now = self.inventory.now()

        open_loans = [t for t in view.transactions.values() if engine.is_open_loan(t)]
        total_value = sum(
            (Decimal(i.cost) * i.quantity for i in items if i.cost is not None),
            Decimal("0"),
        )

        return DashboardStats(
            total_items=len(items),
            tools=sum(1 for i in items if i.type == ItemType.TOOL),
            supplies=sum(1 for i in items if i.type == ItemType.SUPPLY),
            total_units=sum(i.quantity for i in items),
            total_value=total_value,
            active_loans=len(open_loans),
            overdue_loans=sum(1 for t in open_loans if engine.is_overdue(t, now)),
            low_stock_items=sum(1 for i in items if i.status == ItemStatus.LOW_STOCK),
            out_of_stock_items=sum(1 for i in items if i.status == ItemStatus.OUT_OF_STOCK),
            total_available=sum(i.available_quantity for i in items),
            total_loaned=sum(i.loaned_quantity for i in items),
            by_category=dict(Counter(i.category for i in items)),
        )

    async def item_history(self, item_id: str) -> ItemHistory:
        """Transactions and disposals of one item, newest first."""
        item = await self.inventory.get_item(item_id)
        return ItemHistory(
            item=item,
            transactions=await self.inventory.list_transactions(item_id=item.id),
            disposals=await self.inventory.list_disposals(item_id=item.id),
        )
