# path: school_inventory/stock/services/stock_mutation.py
from __future__ import annotations

from typing import Any, Iterable, Optional

from school_inventory.core.exceptions import ValidationError
from school_inventory.stock.models.enums import INCOMING_TYPES, TransactionType
from school_inventory.stock.services.availability import available_quantity, loaned_quantity


def _positive(quantity: int, *, field: str = "quantity") -> int:
    q = int(quantity)
    if q <= 0:
        raise ValidationError("Quantity must be greater than zero", field=field)
    return q


def apply_disposal(item: Any, quantity: int) -> int:
    """
    New item quantity after disposing `quantity` units.

    A disposal cannot take more than what is on hand.
    """
    q = _positive(quantity)
    on_hand = int(item.quantity or 0)
    if q > on_hand:
        raise ValidationError(
            f"Cannot dispose {q} units of '{item.name}': only {on_hand} in stock",
            field="quantity",
        )
    return on_hand - q


def reconcile_disposal_edit(item: Any, original_quantity: int, new_quantity: int) -> int:
    """
    Edit of an approved disposal: restore the old amount, validate, apply the new one.

    Returns the final item quantity. Nothing is returned half-way: the caller
    writes only the final value, so the restored intermediate state is never visible.
    """
    q = _positive(new_quantity)
    restored = int(item.quantity or 0) + int(original_quantity)
    if q > restored:
        raise ValidationError(
            f"Cannot dispose {q} units of '{item.name}': only {restored} in stock",
            field="quantity",
        )
    return restored - q


def check_outgoing(item: Any, quantity: int, transactions: Iterable[Any]) -> int:
    """
    Validates a loan/exit against the AVAILABLE quantity (total minus open loans).
    """
    q = _positive(quantity)
    available = available_quantity(item, transactions)
    if q > available:
        raise ValidationError(
            f"Requested {q} units of '{item.name}' but only {available} available",
            field="quantity",
        )
    return q


def check_return(item: Any, quantity: int, transactions: Iterable[Any]) -> int:
    """
    A return record cannot exceed the units owned nor the units out on loan.
    """
    q = _positive(quantity)
    owned = int(item.quantity or 0)
    if q > owned:
        raise ValidationError(
            f"Cannot return {q} units of '{item.name}': only {owned} owned",
            field="quantity",
        )
    loaned = loaned_quantity(item.id, transactions)
    if q > loaned:
        raise ValidationError(
            f"Cannot return {q} units of '{item.name}': only {loaned} on loan",
            field="quantity",
        )
    return q


def transaction_stock_delta(tx_type: Any, quantity: int) -> int:
    """
    Effect of a transaction on Item.quantity.

    loan/return -> 0 (ledger model), donation/entry -> +q, exit -> -q.
    """
    if tx_type in INCOMING_TYPES:
        return int(quantity)
    if tx_type == TransactionType.EXIT:
        return -int(quantity)
    return 0


def reverse_transaction_stock(item: Any, transaction: Any, transactions: Iterable[Any]) -> Optional[int]:
    """
    New item quantity after undoing a deleted transaction, or None if it had no stock effect.

    Undoing an entry must not leave fewer units than are out on loan.
    """
    delta = transaction_stock_delta(transaction.type, transaction.quantity)
    if delta == 0:
        return None
    new_quantity = int(item.quantity or 0) - delta
    loaned = loaned_quantity(item.id, transactions)
    if new_quantity < loaned or new_quantity < 0:
        raise ValidationError(
            f"Deleting this movement would leave '{item.name}' with {new_quantity} units "
            f"while {loaned} are on loan",
            field="quantity",
        )
    return new_quantity


def validate_quantity_edit(item: Any, new_quantity: int, transactions: Iterable[Any]) -> int:
    """Total owned cannot drop below what is currently lent out."""
    q = int(new_quantity)
    if q < 0:
        raise ValidationError("Quantity cannot be negative", field="quantity")
    loaned = loaned_quantity(item.id, transactions)
    if q < loaned:
        raise ValidationError(
            f"'{item.name}' has {loaned} units on loan; quantity cannot be set to {q}",
            field="quantity",
        )
    return q
