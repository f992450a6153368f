# path: tests/conftest.py
from __future__ import annotations

import datetime as dt
import os

# must be set before school_inventory.core.config is imported anywhere
os.environ.setdefault("APP_CONFIG__DB__URL", "sqlite+aiosqlite:///:memory:")

import pytest

from school_inventory.core.config import InventoryDefaults
from school_inventory.stock.schemas.settings import InventorySettings
from school_inventory.stock.services.inventory_service import InventoryService
from tests.fakes import InMemoryGateway

TODAY = dt.date(2026, 3, 10)


@pytest.fixture
def today() -> dt.date:
    return TODAY


@pytest.fixture
def inventory_settings() -> InventorySettings:
    return InventorySettings.from_defaults(InventoryDefaults())


@pytest.fixture
def gateway() -> InMemoryGateway:
    return InMemoryGateway()


@pytest.fixture
def service(gateway: InMemoryGateway) -> InventoryService:
    return InventoryService(gateway, today=lambda: TODAY)
