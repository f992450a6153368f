# path: tests/test_inventory_service.py
from __future__ import annotations

import datetime as dt

import pytest

from school_inventory.core.exceptions import NotFoundError, StoreError, ValidationError
from school_inventory.stock.models.enums import (
    DisposalStatus,
    ItemStatus,
    ItemType,
    TransactionStatus,
    TransactionType,
)
from school_inventory.stock.schemas.disposal import DisposalCreate, DisposalUpdate
from school_inventory.stock.schemas.item import ItemCreate, ItemUpdate
from school_inventory.stock.schemas.transaction import LoanBatchCreate, LoanLine, TransactionCreate
from school_inventory.stock.services.inventory_service import InventoryService
from tests.conftest import TODAY


def loan(item_id: str, quantity: int, **kw) -> TransactionCreate:
    return TransactionCreate(item_id=item_id, quantity=quantity, teacher_name="Ana", **kw)


# --- scenario: two loans against one supply item ---

async def test_loan_scenario(service, gateway):
    item = gateway.seed_item(name="Pegamento", type=ItemType.SUPPLY, quantity=10)

    first = await service.register_transaction(loan(item.id, 3))
    out = await service.get_item(item.id)
    assert (out.loaned_quantity, out.available_quantity) == (3, 7)
    # ledger model: a loan never changes the total
    assert out.quantity == 10

    with pytest.raises(ValidationError) as exc:
        await service.register_transaction(loan(item.id, 8))
    assert exc.value.field == "quantity"
    assert len(gateway.transactions) == 1

    await service.mark_returned(first.id)
    out = await service.get_item(item.id)
    assert (out.loaned_quantity, out.available_quantity) == (0, 10)


async def test_loan_defaults(service, gateway):
    item = gateway.seed_item(quantity=2)

    tx = await service.register_transaction(loan(item.id, 1))

    assert tx.date == TODAY
    assert tx.return_date == TODAY + dt.timedelta(days=7)
    assert tx.status == TransactionStatus.ACTIVE
    assert tx.item_name == "Item"


async def test_loan_needs_a_borrower(service, gateway):
    item = gateway.seed_item(quantity=2)

    with pytest.raises(ValidationError) as exc:
        await service.register_transaction(TransactionCreate(item_id=item.id, quantity=1, teacher_name="  "))
    assert exc.value.field == "teacher_name"


async def test_loan_return_date_before_loan_date(service, gateway):
    item = gateway.seed_item(quantity=2)

    with pytest.raises(ValidationError):
        await service.register_transaction(loan(item.id, 1, return_date=TODAY - dt.timedelta(days=1)))


async def test_unknown_item(service):
    with pytest.raises(NotFoundError):
        await service.register_transaction(loan("missing", 1))


# --- entries / exits ---

async def test_entry_adds_stock_atomically(service, gateway):
    item = gateway.seed_item(type=ItemType.SUPPLY, quantity=2, status=ItemStatus.LOW_STOCK)

    tx = await service.register_transaction(
        TransactionCreate(item_id=item.id, type=TransactionType.DONATION, quantity=8)
    )

    assert tx.status == TransactionStatus.RETURNED
    assert tx.is_overdue is False
    assert gateway.items[item.id].quantity == 10
    assert gateway.items[item.id].status == ItemStatus.ACTIVE
    assert (await service.get_item(item.id)).quantity == 10


async def test_exit_is_bound_by_available(service, gateway):
    item = gateway.seed_item(type=ItemType.SUPPLY, quantity=10)
    await service.register_transaction(loan(item.id, 6))

    with pytest.raises(ValidationError):
        await service.register_transaction(TransactionCreate(item_id=item.id, type=TransactionType.EXIT, quantity=5))

    await service.register_transaction(TransactionCreate(item_id=item.id, type=TransactionType.EXIT, quantity=4))
    assert gateway.items[item.id].quantity == 6


async def test_return_record_has_no_stock_effect(service, gateway):
    item = gateway.seed_item(quantity=3)
    await service.register_transaction(loan(item.id, 1))

    await service.register_transaction(TransactionCreate(item_id=item.id, type=TransactionType.RETURN, quantity=1))

    assert gateway.items[item.id].quantity == 3


async def test_return_record_cannot_exceed_owned_units(service, gateway):
    item = gateway.seed_item(quantity=2)
    await service.register_transaction(loan(item.id, 2))

    with pytest.raises(ValidationError) as exc:
        await service.register_transaction(
            TransactionCreate(item_id=item.id, type=TransactionType.RETURN, quantity=50)
        )

    assert exc.value.field == "quantity"
    assert len(gateway.transactions) == 1


async def test_return_record_cannot_exceed_units_on_loan(service, gateway):
    item = gateway.seed_item(quantity=5)
    await service.register_transaction(loan(item.id, 1))

    with pytest.raises(ValidationError) as exc:
        await service.register_transaction(TransactionCreate(item_id=item.id, type=TransactionType.RETURN, quantity=2))

    assert "on loan" in exc.value.message


async def test_incoming_movements_are_unbounded(service, gateway):
    item = gateway.seed_item(quantity=2)

    await service.register_transaction(TransactionCreate(item_id=item.id, type=TransactionType.DONATION, quantity=50))

    assert gateway.items[item.id].quantity == 52


async def test_loan_is_overdue_during_its_due_day(gateway):
    item = gateway.seed_item(quantity=3)
    tx = gateway.seed_transaction(
        item_id=item.id,
        teacher_name="Ana",
        quantity=1,
        type=TransactionType.LOAN,
        date=TODAY - dt.timedelta(days=7),
        return_date=TODAY,
        status=TransactionStatus.ACTIVE,
    )

    afternoon = InventoryService(gateway, today=lambda: dt.datetime(2026, 3, 10, 15, 0))
    out = await afternoon.get_transaction(tx.id)
    assert out.is_overdue is True
    assert out.status == TransactionStatus.OVERDUE

    # a date-only clock keeps the calendar comparison
    calendar = InventoryService(gateway, today=lambda: TODAY)
    assert (await calendar.get_transaction(tx.id)).is_overdue is False


async def test_store_failure_rolls_back_the_whole_movement(service, gateway):
    item = gateway.seed_item(quantity=5)
    await service.load()
    gateway.fail_on.add("update_item")

    with pytest.raises(StoreError):
        await service.register_transaction(TransactionCreate(item_id=item.id, type=TransactionType.ENTRY, quantity=3))

    assert gateway.transactions == {}
    assert gateway.items[item.id].quantity == 5
    assert service.view.transactions == {}
    assert service.view.items[item.id].quantity == 5


# --- deleting movements ---

async def test_delete_entry_reverses_stock(service, gateway):
    item = gateway.seed_item(quantity=5)
    entry = await service.register_transaction(
        TransactionCreate(item_id=item.id, type=TransactionType.ENTRY, quantity=3)
    )
    assert gateway.items[item.id].quantity == 8

    assert await service.delete_transaction(entry.id) is True
    assert gateway.items[item.id].quantity == 5
    assert entry.id not in gateway.transactions


async def test_delete_entry_rejected_when_units_are_on_loan(service, gateway):
    item = gateway.seed_item(quantity=2)
    entry = await service.register_transaction(
        TransactionCreate(item_id=item.id, type=TransactionType.ENTRY, quantity=8)
    )
    await service.register_transaction(loan(item.id, 7))

    with pytest.raises(ValidationError):
        await service.delete_transaction(entry.id)
    assert entry.id in gateway.transactions
    assert gateway.items[item.id].quantity == 10


async def test_delete_loan_frees_availability(service, gateway):
    item = gateway.seed_item(quantity=4)
    tx = await service.register_transaction(loan(item.id, 4))
    assert (await service.get_item(item.id)).available_quantity == 0

    await service.delete_transaction(tx.id)

    out = await service.get_item(item.id)
    assert out.available_quantity == 4
    assert gateway.items[item.id].quantity == 4


# --- return dates ---

async def test_extend_overdue_loan(service, gateway):
    item = gateway.seed_item(quantity=3)
    tx = gateway.seed_transaction(
        item_id=item.id,
        teacher_name="Ana",
        quantity=1,
        type=TransactionType.LOAN,
        date=TODAY - dt.timedelta(days=10),
        return_date=TODAY - dt.timedelta(days=3),
        status=TransactionStatus.OVERDUE,
    )

    before = await service.get_transaction(tx.id)
    assert before.is_overdue is True

    after = await service.extend_loan(tx.id, TODAY + dt.timedelta(days=5))

    assert after.is_overdue is False
    assert after.status == TransactionStatus.ACTIVE
    # only the date was written, the stored cache is untouched
    assert gateway.transactions[tx.id].status == TransactionStatus.OVERDUE
    assert gateway.transactions[tx.id].return_date == TODAY + dt.timedelta(days=5)


async def test_extend_must_move_the_date_forward(service, gateway):
    item = gateway.seed_item(quantity=3)
    tx = await service.register_transaction(loan(item.id, 1))

    with pytest.raises(ValidationError):
        await service.extend_loan(tx.id, tx.return_date)

    moved = await service.update_return_date(tx.id, TODAY + dt.timedelta(days=2))
    assert moved.return_date == TODAY + dt.timedelta(days=2)


async def test_returned_loan_cannot_be_extended(service, gateway):
    item = gateway.seed_item(quantity=3)
    tx = await service.register_transaction(loan(item.id, 1))
    await service.mark_returned(tx.id)

    with pytest.raises(ValidationError):
        await service.extend_loan(tx.id, TODAY + dt.timedelta(days=30))


async def test_mark_returned_twice(service, gateway):
    item = gateway.seed_item(quantity=3)
    tx = await service.register_transaction(loan(item.id, 1))

    await service.mark_returned(tx.id)
    calls = len(gateway.calls)
    again = await service.mark_returned(tx.id)

    assert again.status == TransactionStatus.RETURNED
    assert len(gateway.calls) == calls


# --- batch loans ---

async def test_batch_loans(service, gateway):
    drill = gateway.seed_item(name="Taladro", quantity=2)
    saw = gateway.seed_item(name="Sierra", quantity=1)

    rows = await service.register_loans(
        LoanBatchCreate(
            teacher_name="Marta",
            lines=[LoanLine(item_id=drill.id, quantity=2), LoanLine(item_id=saw.id)],
        )
    )

    assert [r.item_name for r in rows] == ["Taladro", "Sierra"]
    assert {r.teacher_name for r in rows} == {"Marta"}
    assert len(gateway.transactions) == 2


async def test_batch_is_all_or_nothing(service, gateway):
    drill = gateway.seed_item(name="Taladro", quantity=3)

    with pytest.raises(ValidationError):
        await service.register_loans(
            LoanBatchCreate(
                teacher_name="Marta",
                lines=[LoanLine(item_id=drill.id, quantity=2), LoanLine(item_id=drill.id, quantity=2)],
            )
        )
    assert gateway.transactions == {}


# --- items ---

async def test_add_item_derives_status(service, gateway):
    out = await service.add_item(
        ItemCreate(name=" Tornillos ", category="INSUMO", location="ALMACEN", type=ItemType.SUPPLY, quantity=3)
    )

    assert out.name == "Tornillos"
    assert out.status == ItemStatus.LOW_STOCK
    assert out.available_quantity == 3
    assert gateway.items[out.id].status == ItemStatus.LOW_STOCK


async def test_add_item_requires_location(service):
    with pytest.raises(ValidationError) as exc:
        await service.add_item(ItemCreate(name="Mesa", category="MOBILIARIO", location="   "))
    assert exc.value.field == "location"


async def test_edit_item(service, gateway):
    item = gateway.seed_item(type=ItemType.SUPPLY, quantity=10)

    result = await service.edit_item(item.id, ItemUpdate(quantity=0))

    assert result.persisted is True
    assert result.item.status == ItemStatus.OUT_OF_STOCK
    assert gateway.items[item.id].status == ItemStatus.OUT_OF_STOCK


async def test_edit_item_degraded_mode(service, gateway):
    item = gateway.seed_item(name="Martillo", quantity=2)
    await service.load()
    gateway.fail_on.add("update_item")

    result = await service.edit_item(item.id, ItemUpdate(name="Martillo grande"))

    assert result.persisted is False
    assert result.warning
    assert result.item.name == "Martillo grande"
    assert service.view.items[item.id].name == "Martillo grande"
    assert gateway.items[item.id].name == "Martillo"


async def test_edit_quantity_below_loaned(service, gateway):
    item = gateway.seed_item(quantity=5)
    await service.register_transaction(loan(item.id, 4))

    with pytest.raises(ValidationError):
        await service.edit_item(item.id, ItemUpdate(quantity=3))


async def test_edit_item_blank_name(service, gateway):
    item = gateway.seed_item(quantity=5)
    with pytest.raises(ValidationError):
        await service.edit_item(item.id, ItemUpdate(name=""))


async def test_delete_item(service, gateway):
    item = gateway.seed_item(quantity=5)
    tx = await service.register_transaction(loan(item.id, 1))

    with pytest.raises(ValidationError):
        await service.delete_item(item.id)

    await service.mark_returned(tx.id)
    assert await service.delete_item(item.id) is True
    assert item.id not in gateway.items


# --- disposals ---

async def test_disposal_scenario(service, gateway):
    item = gateway.seed_item(type=ItemType.SUPPLY, quantity=10)

    disposal = await service.register_disposal(DisposalCreate(item_id=item.id, quantity=4))
    assert gateway.items[item.id].quantity == 6
    assert gateway.items[item.id].status == ItemStatus.ACTIVE

    await service.edit_disposal(disposal.id, DisposalUpdate(quantity=2))
    assert gateway.items[item.id].quantity == 8

    await service.edit_disposal(disposal.id, DisposalUpdate(quantity=4))
    assert gateway.items[item.id].quantity == 6


async def test_disposal_over_stock(service, gateway):
    item = gateway.seed_item(quantity=3)

    with pytest.raises(ValidationError):
        await service.register_disposal(DisposalCreate(item_id=item.id, quantity=4))
    assert gateway.disposals == {}


async def test_disposal_edit_rolls_back_on_store_failure(service, gateway):
    item = gateway.seed_item(quantity=10)
    disposal = await service.register_disposal(DisposalCreate(item_id=item.id, quantity=4))
    gateway.fail_on.add("update_item")

    with pytest.raises(StoreError):
        await service.edit_disposal(disposal.id, DisposalUpdate(quantity=2))

    assert gateway.items[item.id].quantity == 6
    assert gateway.disposals[disposal.id].quantity == 4


async def test_pending_disposal_applies_once(service, gateway):
    item = gateway.seed_item(quantity=10)
    disposal = await service.register_disposal(
        DisposalCreate(item_id=item.id, quantity=3, status=DisposalStatus.PENDING)
    )
    assert gateway.items[item.id].quantity == 10

    await service.approve_disposal(disposal.id)
    await service.approve_disposal(disposal.id)

    assert gateway.items[item.id].quantity == 7
    assert gateway.disposals[disposal.id].status == DisposalStatus.APPROVED

    with pytest.raises(ValidationError):
        await service.reject_disposal(disposal.id)


async def test_reject_pending_disposal(service, gateway):
    item = gateway.seed_item(quantity=10)
    disposal = await service.register_disposal(
        DisposalCreate(item_id=item.id, quantity=3, status=DisposalStatus.PENDING)
    )

    rejected = await service.reject_disposal(disposal.id)

    assert rejected.status == DisposalStatus.REJECTED
    assert gateway.items[item.id].quantity == 10
    with pytest.raises(ValidationError):
        await service.approve_disposal(disposal.id)


async def test_delete_approved_disposal_restores_stock(service, gateway):
    item = gateway.seed_item(quantity=10)
    disposal = await service.register_disposal(DisposalCreate(item_id=item.id, quantity=4))

    await service.delete_disposal(disposal.id)

    assert gateway.items[item.id].quantity == 10
    assert gateway.disposals == {}


# --- settings / status cache ---

async def test_settings_default_when_nothing_saved(service):
    current = await service.get_settings()
    assert current.low_stock_threshold == 5
    assert current.teachers == ["SIN ASIGNAR"]


async def test_save_settings_rederives_item_status(service, gateway):
    item = gateway.seed_item(type=ItemType.SUPPLY, quantity=6)
    current = await service.get_settings()
    assert (await service.get_item(item.id)).status == ItemStatus.ACTIVE

    await service.save_settings(current.model_copy(update={"low_stock_threshold": 10}))

    assert (await service.get_item(item.id)).status == ItemStatus.LOW_STOCK
    assert gateway.settings_row.low_stock_threshold == 10


async def test_save_settings_rejects_an_empty_list(service):
    current = await service.get_settings()

    with pytest.raises(ValidationError) as exc:
        await service.save_settings(current.model_copy(update={"locations": ["  "]}))
    assert exc.value.field == "locations"


async def test_refresh_overdue(service, gateway):
    item = gateway.seed_item(type=ItemType.SUPPLY, quantity=2, status=ItemStatus.ACTIVE)
    late = gateway.seed_transaction(
        item_id=item.id,
        teacher_name="Ana",
        quantity=1,
        type=TransactionType.LOAN,
        date=TODAY - dt.timedelta(days=9),
        return_date=TODAY - dt.timedelta(days=2),
        status=TransactionStatus.ACTIVE,
    )
    stale = gateway.seed_transaction(
        item_id=item.id,
        teacher_name="Ana",
        quantity=1,
        type=TransactionType.LOAN,
        date=TODAY - dt.timedelta(days=9),
        return_date=TODAY + dt.timedelta(days=2),
        status=TransactionStatus.OVERDUE,
    )

    result = await service.refresh_overdue()

    assert result == {"overdue": 1, "active": 1, "items": 1}
    assert gateway.transactions[late.id].status == TransactionStatus.OVERDUE
    assert gateway.transactions[stale.id].status == TransactionStatus.ACTIVE
    assert gateway.items[item.id].status == ItemStatus.LOW_STOCK
