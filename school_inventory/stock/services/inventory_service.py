# path: school_inventory/stock/services/inventory_service.py
"""
Orchestration of user actions over the inventory.

DI rule:
- the service never opens a session and never issues SQL;
- the gateway comes from outside (Depends, manage.py, a test fake);
- InventorySettings is injected or loaded through the gateway, never read from a global.

In-memory view:
- items / transactions / disposals are loaded once and kept in `self.view`;
- a successful write updates the view with what the store returned;
- a failed write leaves the view untouched. Item edits are the exception
  (degraded mode): the edit stays in the view and a warning is returned.

Multi-step writes (stock-moving transactions, disposal reconciliation,
batch loans) run inside gateway.atomic().
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from school_inventory.app_logging import get_logger
from school_inventory.core.exceptions import NotFoundError, StoreError, ValidationError
from school_inventory.stock.models.enums import (
    DisposalStatus,
    TransactionStatus,
    TransactionType,
)
from school_inventory.stock.schemas.disposal import DisposalCreate, DisposalRecord, DisposalUpdate
from school_inventory.stock.schemas.item import ItemCreate, ItemEditOut, ItemOut, ItemRecord, ItemUpdate
from school_inventory.stock.schemas.settings import InventorySettings
from school_inventory.stock.schemas.transaction import (
    LoanBatchCreate,
    TransactionCreate,
    TransactionOut,
    TransactionRecord,
)
from school_inventory.stock.services import availability as engine
from school_inventory.stock.services.gateway import IInventoryGateway
from school_inventory.stock.services.reference_lists import validate_settings
from school_inventory.stock.services.stock_mutation import (
    apply_disposal,
    check_outgoing,
    check_return,
    reconcile_disposal_edit,
    reverse_transaction_stock,
    transaction_stock_delta,
    validate_quantity_edit,
)

log = get_logger("service.inventory")

REQUIRED_ITEM_FIELDS = ("name", "category", "location")
TEXT_ITEM_FIELDS = ("name", "category", "location", "source", "brand", "description")
NON_NULL_ITEM_FIELDS = ("type", "quantity", "condition")


@dataclass
class InventoryView:
    items: Dict[str, ItemRecord] = field(default_factory=dict)
    transactions: Dict[str, TransactionRecord] = field(default_factory=dict)
    disposals: Dict[str, DisposalRecord] = field(default_factory=dict)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _newest_first(record: Any) -> tuple:
    created = record.created_at.isoformat() if record.created_at else ""
    return (str(record.date), created)


class InventoryService:
    """
    Inventory actions: items, transactions, disposals, settings.

    Important:
    - all validation happens BEFORE the first write, so a ValidationError
      never leaves a partial mutation behind;
    - StoreError propagates to the caller (except for edit_item).
    """

    def __init__(
        self,
        gateway: IInventoryGateway,
        *,
        settings: Optional[InventorySettings] = None,
        today: Optional[Callable[[], Union[dt.date, dt.datetime]]] = None,
    ) -> None:
        self.gateway = gateway
        self._settings = settings
        self._clock = today or dt.datetime.now
        self.view = InventoryView()
        self._loaded = False

    @property
    def settings(self) -> InventorySettings:
        if self._settings is None:
            raise RuntimeError("Inventory settings are not loaded yet, call load() first")
        return self._settings

    def now(self) -> Union[dt.date, dt.datetime]:
        """Clock value used for overdue checks (a bare date means calendar comparison)."""
        return self._clock()

    def today(self) -> dt.date:
        return engine.coerce_date(self._clock())

    # --- loading ---

    async def load(self, *, reload_settings: bool = False) -> InventoryView:
        """Reads everything from the store; item statuses are re-derived on the way in."""
        if self._settings is None or reload_settings:
            self._settings = await self.gateway.get_settings()

        items = await self.gateway.list_items()
        transactions = await self.gateway.list_transactions()
        disposals = await self.gateway.list_disposals()

        self.view = InventoryView(
            items={i.id: engine.with_derived_status(i, self._settings) for i in items},
            transactions={t.id: t for t in transactions},
            disposals={d.id: d for d in disposals},
        )
        self._loaded = True
        log.info(
            {
                "event": "inventory_loaded",
                "items": len(items),
                "transactions": len(transactions),
                "disposals": len(disposals),
            }
        )
        return self.view

    async def _ensure_loaded(self) -> None:
        if not self._loaded:
            await self.load()

    # --- lookups / output shapes ---

    def _item(self, item_id: str) -> ItemRecord:
        item = self.view.items.get(str(item_id))
        if item is None:
            raise NotFoundError(f"Item {item_id} not found")
        return item

    def _transaction(self, transaction_id: str) -> TransactionRecord:
        tx = self.view.transactions.get(str(transaction_id))
        if tx is None:
            raise NotFoundError(f"Transaction {transaction_id} not found")
        return tx

    def _disposal(self, disposal_id: str) -> DisposalRecord:
        disposal = self.view.disposals.get(str(disposal_id))
        if disposal is None:
            raise NotFoundError(f"Disposal {disposal_id} not found")
        return disposal

    def item_out(self, item: ItemRecord) -> ItemOut:
        transactions = list(self.view.transactions.values())
        return ItemOut(
            **item.model_dump(),
            loaned_quantity=engine.loaned_quantity(item.id, transactions),
            available_quantity=engine.available_quantity(item, transactions),
        )

    def transaction_out(self, transaction: TransactionRecord) -> TransactionOut:
        now = self.now()
        data = transaction.model_dump()
        data["status"] = engine.effective_status(transaction, now)
        return TransactionOut(**data, is_overdue=engine.is_overdue(transaction, now))

    async def list_items(self) -> List[ItemOut]:
        await self._ensure_loaded()
        return [self.item_out(i) for i in self.view.items.values()]

    async def get_item(self, item_id: str) -> ItemOut:
        await self._ensure_loaded()
        return self.item_out(self._item(item_id))

    async def list_transactions(self, *, item_id: Optional[str] = None) -> List[TransactionOut]:
        await self._ensure_loaded()
        rows = [t for t in self.view.transactions.values() if item_id is None or t.item_id == item_id]
        rows.sort(key=_newest_first, reverse=True)
        return [self.transaction_out(t) for t in rows]

    async def get_transaction(self, transaction_id: str) -> TransactionOut:
        await self._ensure_loaded()
        return self.transaction_out(self._transaction(transaction_id))

    async def list_disposals(self, *, item_id: Optional[str] = None) -> List[DisposalRecord]:
        await self._ensure_loaded()
        rows = [d for d in self.view.disposals.values() if item_id is None or d.item_id == item_id]
        rows.sort(key=_newest_first, reverse=True)
        return rows

    async def get_disposal(self, disposal_id: str) -> DisposalRecord:
        await self._ensure_loaded()
        return self._disposal(disposal_id)

    # --- items ---

    def _clean_item_fields(self, fields: Dict[str, Any], *, required: bool) -> Dict[str, Any]:
        for key in TEXT_ITEM_FIELDS:
            if key in fields:
                fields[key] = _clean(fields[key])
        for key in REQUIRED_ITEM_FIELDS:
            if (required or key in fields) and not fields.get(key):
                raise ValidationError(f"Item {key} is required", field=key)
        for key in NON_NULL_ITEM_FIELDS:
            if key in fields and fields[key] is None:
                raise ValidationError(f"Item {key} cannot be empty", field=key)
        return fields

    async def add_item(self, data: ItemCreate) -> ItemOut:
        await self._ensure_loaded()
        fields = self._clean_item_fields(data.model_dump(), required=True)
        fields["status"] = engine.derive_item_status(data.model_copy(update=fields), self.settings)

        record = await self.gateway.insert_item(fields)
        record = engine.with_derived_status(record, self.settings)
        self.view.items[record.id] = record

        log.info({"event": "item_added", "item_id": record.id, "name": record.name, "quantity": record.quantity})
        return self.item_out(record)

    async def edit_item(self, item_id: str, data: ItemUpdate) -> ItemEditOut:
        """
        Partial edit.

        Degraded mode: on StoreError the merged item is kept in the view and
        returned with persisted=False plus a warning.
        """
        await self._ensure_loaded()
        current = self._item(item_id)
        changes = self._clean_item_fields(data.model_dump(exclude_unset=True), required=False)
        if "quantity" in changes:
            validate_quantity_edit(current, changes["quantity"], self.view.transactions.values())

        merged = current.model_copy(update=changes)
        status = engine.derive_item_status(merged, self.settings)
        changes["status"] = status

        try:
            record = await self.gateway.update_item(current.id, changes)
        except StoreError as e:
            local = merged.model_copy(update={"status": status})
            self.view.items[current.id] = local
            log.warning(
                {"event": "item_edit_degraded", "item_id": current.id, "persisted": False, "error": e.message}
            )
            return ItemEditOut(
                item=self.item_out(local),
                persisted=False,
                warning=f"Changes are shown but were not saved: {e.message}",
            )

        record = engine.with_derived_status(record, self.settings)
        self.view.items[record.id] = record
        log.info({"event": "item_edited", "item_id": record.id, "fields": sorted(changes)})
        return ItemEditOut(item=self.item_out(record))

    async def delete_item(self, item_id: str) -> bool:
        await self._ensure_loaded()
        item = self._item(item_id)
        loaned = engine.loaned_quantity(item.id, self.view.transactions.values())
        if loaned:
            raise ValidationError(
                f"'{item.name}' has {loaned} units on loan and cannot be deleted",
                field="item_id",
            )

        deleted = await self.gateway.delete_item(item.id)
        self.view.items.pop(item.id, None)
        log.info({"event": "item_deleted", "item_id": item.id, "deleted": deleted})
        return deleted

    async def _write_quantity(self, item: ItemRecord, quantity: int) -> ItemRecord:
        """Quantity + re-derived status in one update. The caller updates the view."""
        status = engine.derive_item_status(item.model_copy(update={"quantity": quantity}), self.settings)
        record = await self.gateway.update_item(item.id, {"quantity": quantity, "status": status})
        return engine.with_derived_status(record, self.settings)

    # --- transactions ---

    def _new_transaction_fields(
        self,
        item: ItemRecord,
        tx_type: TransactionType,
        quantity: int,
        *,
        teacher_name: Optional[str] = None,
        teacher_id: Optional[str] = None,
        date: Optional[dt.date] = None,
        return_date: Optional[dt.date] = None,
        notes: Optional[str] = None,
        pending: Iterable[Any] = (),
    ) -> Dict[str, Any]:
        """
        Validated insert payload.

        - loan: borrower required, due date defaults to date + default_loan_days,
          quantity bound by AVAILABLE units (pending = lines of the same batch);
        - exit: bound by available units;
        - return: bound by owned units and by units on loan;
        - donation / entry: unbounded, they add stock;
        - every non-loan record starts terminal (returned).
        """
        tx_type = TransactionType(tx_type)
        if int(quantity) <= 0:
            raise ValidationError("Quantity must be greater than zero", field="quantity")

        issued = date or self.today()
        fields: Dict[str, Any] = {
            "item_id": item.id,
            "item_name": item.name,
            "type": tx_type,
            "quantity": int(quantity),
            "teacher_id": _clean(teacher_id),
            "teacher_name": _clean(teacher_name),
            "date": issued,
            "return_date": None,
            "status": TransactionStatus.RETURNED,
            "notes": _clean(notes),
        }

        if tx_type == TransactionType.LOAN:
            if not fields["teacher_name"]:
                raise ValidationError("A loan needs a borrower", field="teacher_name")
            due = return_date or issued + dt.timedelta(days=self.settings.default_loan_days)
            if due < issued:
                raise ValidationError("Return date cannot be before the loan date", field="return_date")
            check_outgoing(item, quantity, [*self.view.transactions.values(), *pending])
            fields.update(return_date=due, status=TransactionStatus.ACTIVE)
        elif tx_type == TransactionType.EXIT:
            check_outgoing(item, quantity, self.view.transactions.values())
        elif tx_type == TransactionType.RETURN:
            check_return(item, quantity, self.view.transactions.values())
        return fields

    async def register_transaction(self, data: TransactionCreate) -> TransactionOut:
        await self._ensure_loaded()
        item = self._item(data.item_id)
        fields = self._new_transaction_fields(
            item,
            data.type,
            data.quantity,
            teacher_name=data.teacher_name,
            teacher_id=data.teacher_id,
            date=data.date,
            return_date=data.return_date,
            notes=data.notes,
        )
        delta = transaction_stock_delta(fields["type"], fields["quantity"])

        updated_item: Optional[ItemRecord] = None
        async with self.gateway.atomic():
            record = await self.gateway.insert_transaction(fields)
            if delta:
                updated_item = await self._write_quantity(item, int(item.quantity) + delta)

        self.view.transactions[record.id] = record
        if updated_item is not None:
            self.view.items[updated_item.id] = updated_item

        log.info(
            {
                "event": "transaction_registered",
                "transaction_id": record.id,
                "type": fields["type"].value,
                "item_id": item.id,
                "quantity": record.quantity,
                "stock_delta": delta,
            }
        )
        return self.transaction_out(record)

    async def register_loans(self, batch: LoanBatchCreate) -> List[TransactionOut]:
        """
        One borrower, one due date, several items. All or nothing.
        """
        await self._ensure_loaded()
        pending: List[TransactionRecord] = []
        rows: List[Dict[str, Any]] = []
        for line in batch.lines:
            item = self._item(line.item_id)
            fields = self._new_transaction_fields(
                item,
                TransactionType.LOAN,
                line.quantity,
                teacher_name=batch.teacher_name,
                teacher_id=batch.teacher_id,
                date=batch.date,
                return_date=batch.return_date,
                notes=batch.notes,
                pending=pending,
            )
            pending.append(TransactionRecord.model_construct(id=f"pending-{len(pending)}", **fields))
            rows.append(fields)

        records: List[TransactionRecord] = []
        async with self.gateway.atomic():
            for fields in rows:
                records.append(await self.gateway.insert_transaction(fields))

        for record in records:
            self.view.transactions[record.id] = record
        log.info({"event": "loans_registered", "count": len(records), "teacher": rows[0]["teacher_name"]})
        return [self.transaction_out(r) for r in records]

    async def mark_returned(self, transaction_id: str) -> TransactionOut:
        await self._ensure_loaded()
        tx = self._transaction(transaction_id)
        updated = engine.mark_returned(tx)
        if updated is tx:
            return self.transaction_out(tx)

        await self.gateway.update_transaction(tx.id, {"status": TransactionStatus.RETURNED})
        self.view.transactions[tx.id] = updated
        log.info(
            {
                "event": "loan_returned",
                "transaction_id": tx.id,
                "item_id": tx.item_id,
                "was_overdue": engine.is_overdue(tx, self.now()),
            }
        )
        return self.transaction_out(updated)

    def _open_loan(self, transaction_id: str) -> TransactionRecord:
        tx = self._transaction(transaction_id)
        if not engine.is_open_loan(tx):
            raise ValidationError("Only open loans have a return date to change", field="transaction_id")
        return tx

    async def extend_loan(self, transaction_id: str, new_return_date: dt.date) -> TransactionOut:
        await self._ensure_loaded()
        tx = self._open_loan(transaction_id)
        current = engine.coerce_date(tx.return_date)
        if current is not None and new_return_date <= current:
            raise ValidationError("The new return date must be later than the current one", field="return_date")
        return await self._set_return_date(tx, new_return_date, event="loan_extended")

    async def update_return_date(self, transaction_id: str, return_date: dt.date) -> TransactionOut:
        await self._ensure_loaded()
        tx = self._open_loan(transaction_id)
        return await self._set_return_date(tx, return_date, event="return_date_updated")

    async def _set_return_date(self, tx: TransactionRecord, return_date: dt.date, *, event: str) -> TransactionOut:
        issued = engine.coerce_date(tx.date)
        if issued is not None and return_date < issued:
            raise ValidationError("Return date cannot be before the loan date", field="return_date")

        # status stays as stored; effective_status() decides overdue-ness
        updated = engine.extend_loan(tx, return_date)
        await self.gateway.update_transaction(tx.id, {"return_date": return_date})
        self.view.transactions[tx.id] = updated
        log.info({"event": event, "transaction_id": tx.id, "return_date": return_date})
        return self.transaction_out(updated)

    async def delete_transaction(self, transaction_id: str) -> bool:
        """
        Loans/returns: plain delete. Entries/donations/exits: delete and undo
        the stock change in one atomic block.
        """
        await self._ensure_loaded()
        tx = self._transaction(transaction_id)
        item = self.view.items.get(tx.item_id)

        new_quantity: Optional[int] = None
        if item is not None:
            others = [t for t in self.view.transactions.values() if t.id != tx.id]
            new_quantity = reverse_transaction_stock(item, tx, others)

        updated_item: Optional[ItemRecord] = None
        async with self.gateway.atomic():
            deleted = await self.gateway.delete_transaction(tx.id)
            if item is not None and new_quantity is not None:
                updated_item = await self._write_quantity(item, new_quantity)

        self.view.transactions.pop(tx.id, None)
        if updated_item is not None:
            self.view.items[updated_item.id] = updated_item
        log.info({"event": "transaction_deleted", "transaction_id": tx.id, "stock_reversed": updated_item is not None})
        return deleted

    # --- disposals ---

    async def register_disposal(self, data: DisposalCreate) -> DisposalRecord:
        """
        approved: stock goes down now (atomic with the insert);
        pending:  quantity is only checked against stock.
        """
        await self._ensure_loaded()
        if data.status == DisposalStatus.REJECTED:
            raise ValidationError("A disposal cannot be registered as rejected", field="status")

        item = self._item(data.item_id)
        new_quantity = apply_disposal(item, data.quantity)
        fields = {
            "item_id": item.id,
            "item_name": item.name,
            "quantity": int(data.quantity),
            "reason": data.reason,
            "date": data.date or self.today(),
            "notes": _clean(data.notes),
            "status": data.status,
        }

        updated_item: Optional[ItemRecord] = None
        async with self.gateway.atomic():
            record = await self.gateway.insert_disposal(fields)
            if data.status == DisposalStatus.APPROVED:
                updated_item = await self._write_quantity(item, new_quantity)

        self.view.disposals[record.id] = record
        if updated_item is not None:
            self.view.items[updated_item.id] = updated_item
        log.info(
            {
                "event": "disposal_registered",
                "disposal_id": record.id,
                "item_id": item.id,
                "quantity": record.quantity,
                "status": record.status.value,
            }
        )
        return record

    async def edit_disposal(self, disposal_id: str, data: DisposalUpdate) -> DisposalRecord:
        """
        Approved disposal with a new quantity: restore the old amount, validate,
        apply the new one. Only the final item quantity is written, in the same
        atomic block as the disposal update.
        """
        await self._ensure_loaded()
        disposal = self._disposal(disposal_id)
        if disposal.status == DisposalStatus.REJECTED:
            raise ValidationError("A rejected disposal cannot be edited", field="status")

        changes = data.model_dump(exclude_unset=True)
        for key in ("quantity", "reason", "date"):
            if key in changes and changes[key] is None:
                raise ValidationError(f"Disposal {key} cannot be empty", field=key)
        if "notes" in changes:
            changes["notes"] = _clean(changes["notes"])

        item: Optional[ItemRecord] = None
        final_quantity: Optional[int] = None
        if "quantity" in changes:
            item = self._item(disposal.item_id)
            if disposal.status == DisposalStatus.APPROVED:
                final_quantity = reconcile_disposal_edit(item, disposal.quantity, changes["quantity"])
            else:
                apply_disposal(item, changes["quantity"])

        updated_item: Optional[ItemRecord] = None
        async with self.gateway.atomic():
            record = await self.gateway.update_disposal(disposal.id, changes)
            if item is not None and final_quantity is not None and final_quantity != item.quantity:
                updated_item = await self._write_quantity(item, final_quantity)

        self.view.disposals[record.id] = record
        if updated_item is not None:
            self.view.items[updated_item.id] = updated_item
        log.info({"event": "disposal_edited", "disposal_id": record.id, "fields": sorted(changes)})
        return record

    async def approve_disposal(self, disposal_id: str) -> DisposalRecord:
        """pending -> approved, stock goes down. Approving twice changes nothing."""
        await self._ensure_loaded()
        disposal = self._disposal(disposal_id)
        if disposal.status == DisposalStatus.APPROVED:
            return disposal
        if disposal.status == DisposalStatus.REJECTED:
            raise ValidationError("A rejected disposal cannot be approved", field="status")

        item = self._item(disposal.item_id)
        new_quantity = apply_disposal(item, disposal.quantity)
        async with self.gateway.atomic():
            record = await self.gateway.update_disposal(disposal.id, {"status": DisposalStatus.APPROVED})
            updated_item = await self._write_quantity(item, new_quantity)

        self.view.disposals[record.id] = record
        self.view.items[updated_item.id] = updated_item
        log.info({"event": "disposal_approved", "disposal_id": record.id, "item_id": item.id})
        return record

    async def reject_disposal(self, disposal_id: str) -> DisposalRecord:
        await self._ensure_loaded()
        disposal = self._disposal(disposal_id)
        if disposal.status == DisposalStatus.REJECTED:
            return disposal
        if disposal.status == DisposalStatus.APPROVED:
            raise ValidationError("An approved disposal cannot be rejected", field="status")

        record = await self.gateway.update_disposal(disposal.id, {"status": DisposalStatus.REJECTED})
        self.view.disposals[record.id] = record
        log.info({"event": "disposal_rejected", "disposal_id": record.id})
        return record

    async def delete_disposal(self, disposal_id: str) -> bool:
        """An approved disposal gives its units back, atomically with the delete."""
        await self._ensure_loaded()
        disposal = self._disposal(disposal_id)
        item = self.view.items.get(disposal.item_id)
        restore = disposal.status == DisposalStatus.APPROVED and item is not None

        updated_item: Optional[ItemRecord] = None
        async with self.gateway.atomic():
            deleted = await self.gateway.delete_disposal(disposal.id)
            if restore:
                updated_item = await self._write_quantity(item, int(item.quantity) + int(disposal.quantity))

        self.view.disposals.pop(disposal.id, None)
        if updated_item is not None:
            self.view.items[updated_item.id] = updated_item
        log.info({"event": "disposal_deleted", "disposal_id": disposal.id, "stock_restored": restore})
        return deleted

    # --- settings ---

    async def get_settings(self) -> InventorySettings:
        await self._ensure_loaded()
        return self.settings

    async def save_settings(self, new_settings: InventorySettings) -> InventorySettings:
        """Validates, persists, then re-derives item statuses with the new threshold."""
        await self._ensure_loaded()
        cleaned = validate_settings(new_settings)
        await self.gateway.put_settings(cleaned)

        self._settings = cleaned
        self.view.items = {k: engine.with_derived_status(v, cleaned) for k, v in self.view.items.items()}
        log.info({"event": "settings_saved", "low_stock_threshold": cleaned.low_stock_threshold})
        return cleaned

    # --- status cache ---

    async def refresh_overdue(self) -> Dict[str, int]:
        """
        Rewrites the stored status caches from the derived values:
        open loans -> active/overdue, items -> active/low-stock/out-of-stock.
        """
        await self.load()
        now = self.now()

        to_overdue: List[str] = []
        to_active: List[str] = []
        for tx in self.view.transactions.values():
            if not engine.is_open_loan(tx):
                continue
            derived = engine.effective_status(tx, now)
            if derived == tx.status:
                continue
            (to_overdue if derived == TransactionStatus.OVERDUE else to_active).append(tx.id)

        stored_items = await self.gateway.list_items()
        stale = [
            (i.id, engine.derive_item_status(i, self.settings))
            for i in stored_items
            if i.status != engine.derive_item_status(i, self.settings)
        ]

        async with self.gateway.atomic():
            overdue_count = (
                await self.gateway.set_transaction_statuses(to_overdue, TransactionStatus.OVERDUE) if to_overdue else 0
            )
            active_count = (
                await self.gateway.set_transaction_statuses(to_active, TransactionStatus.ACTIVE) if to_active else 0
            )
            for item_id, status in stale:
                await self.gateway.update_item(item_id, {"status": status})

        for tx_id in to_overdue:
            self.view.transactions[tx_id] = self.view.transactions[tx_id].model_copy(
                update={"status": TransactionStatus.OVERDUE}
            )
        for tx_id in to_active:
            self.view.transactions[tx_id] = self.view.transactions[tx_id].model_copy(
                update={"status": TransactionStatus.ACTIVE}
            )

        result = {"overdue": overdue_count, "active": active_count, "items": len(stale)}
        log.info({"event": "status_cache_refreshed", **result})
        return result
