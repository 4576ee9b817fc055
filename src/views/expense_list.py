"""
Expense List View Model

Everything the expense list shows that is worth testing without a
browser: amount formatting, the total and when to show it, and the
single-row inline edit session.
"""

from decimal import Decimal
from typing import Iterable, Optional

from src.audit import AuditLogger
from src.models.expense import Expense, ExpenseDraft, ValidationResult
from src.stores import ExpenseStore
from src.validation import ExpenseInputValidator


EMPTY_STATE_MESSAGE = "No expenses added yet. Add your first expense above!"


def format_amount(amount: Decimal, currency_symbol: str = "$") -> str:
    """Two decimals, currency-prefixed: Decimal("3.5") -> "$3.50"."""
    return f"{currency_symbol}{amount:.2f}"


def compute_total(expenses: Iterable[Expense]) -> Decimal:
    return sum((e.amount for e in expenses), Decimal("0"))


def visible_total(
    expenses: Iterable[Expense],
    currency_symbol: str = "$",
) -> Optional[str]:
    """
    The formatted total, or None when it should not be shown.

    A total of zero (or less) is never displayed.
    """
    total = compute_total(expenses)
    if total <= 0:
        return None
    return format_amount(total, currency_symbol)


class EditSession:
    """
    Inline edit state for the expense list.

    At most one row is in edit mode. Starting an edit on another row
    replaces the current draft.
    """

    def __init__(
        self,
        validator: Optional[ExpenseInputValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._validator = validator or ExpenseInputValidator()
        self._audit_logger = audit_logger or AuditLogger()
        self.editing_id: Optional[int] = None
        self.draft = ExpenseDraft()
        self.last_result: Optional[ValidationResult] = None

    def is_editing(self, expense_id: int) -> bool:
        return self.editing_id == expense_id

    def begin(self, expense: Expense) -> None:
        """Enter edit mode for one row, pre-filled with its current values."""
        self.editing_id = expense.id
        self.draft = ExpenseDraft.from_expense(expense)
        self.last_result = None

    def update(
        self,
        description: Optional[str] = None,
        amount: Optional[str] = None,
        category: Optional[str] = None,
    ) -> None:
        self.draft = self.draft.model_copy(update={
            name: value
            for name, value in (
                ("description", description),
                ("amount", amount),
                ("category", category),
            )
            if value is not None
        })

    def cancel(self) -> None:
        """Leave edit mode without touching the store."""
        self.editing_id = None
        self.draft = ExpenseDraft()
        self.last_result = None

    def save(self, store: ExpenseStore) -> Optional[Expense]:
        """
        Commit the draft through store.edit() and leave edit mode.

        Invalid drafts stay in edit mode; the issues are in last_result.
        Returns the updated record, or None if nothing was saved.
        """
        if self.editing_id is None:
            return None

        result = self._validator.validate(self.draft)
        self.last_result = result
        if not result.is_valid:
            self._audit_logger.log_input_rejected(
                "edit_expense",
                [issue.model_dump() for issue in result.issues],
            )
            return None

        updated = store.edit(
            self.editing_id,
            result.description,
            result.amount,
            result.category,
        )
        self.cancel()
        return updated
