"""
Expense Store

Owns the ordered list of expense records and the three operations that
change it: add, edit and delete.

DESIGN DECISION: Every mutation that changes the list is mirrored to local
storage immediately. Persistence is best-effort: a failed write is audited
and otherwise ignored, matching the permissive load policy (corrupt or
missing state loads as an empty list).

Edit and delete on an unknown id are silent no-ops. The list is left
exactly as it was; callers can tell nothing happened only by comparing.
"""

import json
import time
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

from src.audit import AuditLogger
from src.models.expense import Expense, ExpenseList, format_display_timestamp
from src.services.storage import (
    EXPENSES_KEY,
    KeyValueStorageInterface,
    StorageError,
)


class MonotonicIdGenerator:
    """
    Millisecond-timestamp ids that never repeat within a session.

    When two ids are requested within the same clock tick (or the clock
    goes backwards) the next id is the previous one plus one.
    """

    def __init__(
        self,
        last_id: int = 0,
        clock: Callable[[], float] = time.time,
    ):
        self._last_id = last_id
        self._clock = clock

    def next_id(self) -> int:
        candidate = int(self._clock() * 1000)
        self._last_id = max(candidate, self._last_id + 1)
        return self._last_id


def load_expenses(raw: Optional[str]) -> list[Expense]:
    """
    Decode the persisted expense array.

    Absent value → empty list. Raises ValueError if the value is not a
    JSON array of valid records; the whole array is rejected, never
    partially loaded.
    """
    if raw is None:
        return []

    # parse_float keeps amounts exact (0.1 stays Decimal("0.1"))
    data = json.loads(raw, parse_float=Decimal)
    if data is None:
        return []
    if not isinstance(data, list):
        raise ValueError(f"expected a JSON array, got {type(data).__name__}")

    return ExpenseList.validate_python(data)


def dump_expenses(expenses: list[Expense]) -> str:
    """Encode the expense list for storage."""
    return json.dumps(ExpenseList.dump_python(expenses, mode="json"))


class ExpenseStore:
    """
    The expense list and its mutations.

    Usage:
        store = ExpenseStore(storage, audit_logger)
        expense = store.add("Coffee", Decimal("3.50"), "Food")
        store.edit(expense.id, "Coffee", Decimal("4.00"), "Food")
        store.delete(expense.id)
    """

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        id_generator: Optional[MonotonicIdGenerator] = None,
        now: Callable[[], datetime] = datetime.now,
    ):
        self._storage = storage
        self._audit_logger = audit_logger or AuditLogger()
        self._now = now
        self._expenses: list[Expense] = self._load()

        # Never hand out an id that is already in the list
        highest = max((e.id for e in self._expenses), default=0)
        self._ids = id_generator or MonotonicIdGenerator(last_id=highest)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def _load(self) -> list[Expense]:
        try:
            raw = self._storage.get_item(EXPENSES_KEY)
            expenses = load_expenses(raw)
        except (StorageError, ValueError) as e:
            self._audit_logger.log_storage_load_failed(EXPENSES_KEY, str(e))
            return []

        self._audit_logger.log_storage_loaded(EXPENSES_KEY, len(expenses))
        return expenses

    def _persist(self) -> None:
        try:
            self._storage.set_item(EXPENSES_KEY, dump_expenses(self._expenses))
        except StorageError as e:
            self._audit_logger.log_storage_write_failed(EXPENSES_KEY, str(e))

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def expenses(self) -> tuple[Expense, ...]:
        """Snapshot of the list in insertion order."""
        return tuple(self._expenses)

    @property
    def count(self) -> int:
        return len(self._expenses)

    def get(self, expense_id: int) -> Optional[Expense]:
        for expense in self._expenses:
            if expense.id == expense_id:
                return expense
        return None

    def total(self) -> Decimal:
        """Sum of all amounts."""
        return sum((e.amount for e in self._expenses), Decimal("0"))

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add(
        self,
        description: str,
        amount: Decimal,
        category: str,
    ) -> Expense:
        """
        Append a new expense and persist the list.

        Input is expected to be validated by the caller.

        Returns:
            The newly created record

        Raises:
            ValidationError: If the values do not form a valid Expense;
                             the list is left unchanged
        """
        expense = Expense(
            id=self._ids.next_id(),
            description=description,
            amount=amount,
            category=category,
            date=format_display_timestamp(self._now()),
        )
        self._expenses.append(expense)
        self._persist()

        self._audit_logger.log_expense_added(
            expense.id, expense.description, expense.amount, expense.category
        )
        return expense

    def edit(
        self,
        expense_id: int,
        description: str,
        amount: Decimal,
        category: str,
    ) -> Optional[Expense]:
        """
        Replace description, amount and category of one expense.

        The id, date and position in the list are preserved.

        Returns:
            The updated record, or None if no expense has this id
        """
        for index, existing in enumerate(self._expenses):
            if existing.id == expense_id:
                break
        else:
            self._audit_logger.log_expense_not_found(expense_id, "edit")
            return None

        updated = Expense(
            id=existing.id,
            description=description,
            amount=amount,
            category=category,
            date=existing.date,
        )
        self._expenses[index] = updated
        self._persist()

        changes = {
            field: (str(getattr(existing, field)), str(getattr(updated, field)))
            for field in ("description", "amount", "category")
            if getattr(existing, field) != getattr(updated, field)
        }
        self._audit_logger.log_expense_edited(expense_id, changes)
        return updated

    def delete(self, expense_id: int) -> bool:
        """
        Remove one expense.

        Returns:
            True if an expense was removed, False if none had this id
        """
        remaining = [e for e in self._expenses if e.id != expense_id]
        if len(remaining) == len(self._expenses):
            self._audit_logger.log_expense_not_found(expense_id, "delete")
            return False

        removed = self.get(expense_id)
        self._expenses = remaining
        self._persist()

        self._audit_logger.log_expense_deleted(expense_id, removed.description)
        return True
