"""
Expense Input Validation

DESIGN DECISION: Form input is validated explicitly before it reaches a store.

- Required fields must contain something other than whitespace
- The amount is parsed with Decimal, never coerced implicitly, so
  intermediate input such as "-", "1e", "abc" or "NaN" is rejected
  instead of silently becoming zero
- Negative amounts are rejected
- Amounts are whole cents below MAX_AMOUNT, like a step="0.01" number field

The stores themselves do not re-validate; anything that passes here
is handed over as-is.

IMPORTANT: Validation NEVER silently fixes issues (beyond trimming
surrounding whitespace). It reports them so the form can show them.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional

from src.models.expense import (
    AMOUNT_QUANTUM,
    MAX_AMOUNT,
    ExpenseDraft,
    ValidationIssue,
    ValidationResult,
)


def parse_amount(text: str) -> tuple[Optional[Decimal], Optional[ValidationIssue]]:
    """
    Parse amount text into a non-negative Decimal.

    Returns: (amount, None) on success, (None, issue) otherwise.
    """
    cleaned = text.strip()
    if not cleaned:
        return None, ValidationIssue(
            field="amount",
            issue_type="missing",
            message="Amount is required",
        )

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        return None, ValidationIssue(
            field="amount",
            issue_type="not_a_number",
            message=f"Amount must be a number (got {cleaned!r})",
        )

    if not amount.is_finite():
        return None, ValidationIssue(
            field="amount",
            issue_type="not_a_number",
            message="Amount must be a finite number",
        )

    if amount < 0:
        return None, ValidationIssue(
            field="amount",
            issue_type="negative",
            message="Amount cannot be negative",
        )

    if amount >= MAX_AMOUNT:
        return None, ValidationIssue(
            field="amount",
            issue_type="too_large",
            message=f"Amount must be less than {MAX_AMOUNT:,}",
        )

    if amount != amount.quantize(AMOUNT_QUANTUM):
        return None, ValidationIssue(
            field="amount",
            issue_type="too_precise",
            message="Amount can have at most two decimal places",
        )

    # Normalize -0 to 0
    return amount.copy_abs() if amount.is_zero() else amount, None


class ExpenseInputValidator:
    """Validates an expense draft and produces the cleaned values."""

    def validate(self, draft: ExpenseDraft) -> ValidationResult:
        issues = []

        description = draft.description.strip()
        if not description:
            issues.append(ValidationIssue(
                field="description",
                issue_type="missing",
                message="Description is required",
            ))

        amount, amount_issue = parse_amount(draft.amount)
        if amount_issue is not None:
            issues.append(amount_issue)

        category = draft.category.strip()
        if not category:
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Category is required",
            ))

        if issues:
            return ValidationResult(is_valid=False, issues=issues)

        return ValidationResult(
            is_valid=True,
            description=description,
            amount=amount,
            category=category,
        )

