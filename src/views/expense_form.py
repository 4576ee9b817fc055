"""
Add-Expense Form

Holds the draft fields of the add form between reruns and turns a
submission into a store.add() call.
"""

from typing import Optional

from src.audit import AuditLogger
from src.models.expense import Expense, ExpenseDraft, ValidationResult
from src.stores import ExpenseStore
from src.validation import ExpenseInputValidator


class ExpenseForm:
    """Draft state and submit logic for the add-expense form."""

    def __init__(
        self,
        validator: Optional[ExpenseInputValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._validator = validator or ExpenseInputValidator()
        self._audit_logger = audit_logger or AuditLogger()
        self.draft = ExpenseDraft()
        self.last_result: Optional[ValidationResult] = None

    def update(
        self,
        description: Optional[str] = None,
        amount: Optional[str] = None,
        category: Optional[str] = None,
    ) -> None:
        """Record keystrokes. Fields left as None keep their draft value."""
        self.draft = self.draft.model_copy(update={
            name: value
            for name, value in (
                ("description", description),
                ("amount", amount),
                ("category", category),
            )
            if value is not None
        })

    def clear(self) -> None:
        self.draft = ExpenseDraft()

    def submit(self, store: ExpenseStore) -> Optional[Expense]:
        """
        Validate the draft and add it to the store.

        On success the draft is cleared and the new record returned.
        On failure the draft is kept, nothing reaches the store, and
        the issues are available in last_result.
        """
        result = self._validator.validate(self.draft)
        self.last_result = result

        if not result.is_valid:
            self._audit_logger.log_input_rejected(
                "add_expense",
                [issue.model_dump() for issue in result.issues],
            )
            return None

        expense = store.add(result.description, result.amount, result.category)
        self.clear()
        return expense
