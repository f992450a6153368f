# path: school_inventory/core/exceptions.py
from __future__ import annotations

from typing import Optional


class InventoryError(Exception):
    """
    Base error of the inventory domain.

    Every error is scoped to the single user action that raised it:
    nothing here is fatal for the process.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(InventoryError):
    """Bad input or a broken stock rule. The action is aborted, nothing is written."""

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class StoreError(InventoryError):
    """The persistence store failed (network, constraint, timeout...)."""


class NotFoundError(InventoryError):
    """A referenced record does not exist."""
