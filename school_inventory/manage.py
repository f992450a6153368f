# /school_inventory/manage.py
from __future__ import annotations

import argparse
import asyncio

from school_inventory.app_logging import get_logger
from school_inventory.core.models import Base, db_helper
from school_inventory.stock import models  # noqa: F401  (registers tables in Base.metadata)
from school_inventory.stock.services.gateway import SqlInventoryGateway
from school_inventory.stock.services.inventory_service import InventoryService

log = get_logger("manage")


async def _cmd_create_tables() -> None:
    """Dev shortcut; production schema goes through alembic upgrade head."""
    async with db_helper.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    log.info({"event": "create_tables_ok", "tables": sorted(Base.metadata.tables)})
    print("✔ Tables created")


async def _cmd_seed_settings() -> None:
    async with db_helper.session_factory() as session:
        service = InventoryService(SqlInventoryGateway(session))
        current = await service.get_settings()
        saved = await service.save_settings(current)
    log.info({"event": "seed_settings_ok", "categories": len(saved.categories)})
    print("✔ Settings saved")


async def _cmd_refresh_overdue() -> None:
    async with db_helper.session_factory() as session:
        service = InventoryService(SqlInventoryGateway(session))
        result = await service.refresh_overdue()
    print(f"✔ Status cache refreshed: {result}")


async def _run(args: argparse.Namespace) -> None:
    try:
        if args.create_tables:
            await _cmd_create_tables()
        if args.seed_settings:
            await _cmd_seed_settings()
        if args.refresh_overdue:
            await _cmd_refresh_overdue()
    finally:
        await db_helper.dispose()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="school_inventory.manage", description="Management commands")
    parser.add_argument("--create_tables", action="store_true", help="Create all tables (dev only)")
    parser.add_argument("--seed_settings", action="store_true", help="Persist the settings row (defaults if absent)")
    parser.add_argument(
        "--refresh_overdue",
        action="store_true",
        help="Rewrite stored loan/item statuses from the derived values",
    )
    args = parser.parse_args(argv)

    if not (args.create_tables or args.seed_settings or args.refresh_overdue):
        parser.print_help()
        return
    asyncio.run(_run(args))


if __name__ == "__main__":
    main()
