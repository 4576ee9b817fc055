"""
Core Data Models for Expense Tracker

These models define the schemas for all data flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Be serializable for local storage and logging

DESIGN DECISION: Amounts are Decimal in memory (never use float for money)
but are written to storage as plain JSON numbers, so the persisted array keeps
the {id, description, amount, category, date} shape.

Amounts are limited to whole cents below MAX_AMOUNT. At most 14 significant
digits fit a float exactly, so the JSON number reads back as the same Decimal.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_serializer,
    field_validator,
)


# =============================================================================
# ENUMS
# =============================================================================

class Theme(str, Enum):
    """Presentation theme. Exactly two values; toggling alternates them."""
    DARK = "dark"
    LIGHT = "light"

    def toggled(self) -> "Theme":
        return Theme.LIGHT if self is Theme.DARK else Theme.DARK


# =============================================================================
# EXPENSE RECORD
# =============================================================================

AMOUNT_QUANTUM = Decimal("0.01")
MAX_AMOUNT = Decimal("1000000000000")


def format_display_timestamp(moment: datetime) -> str:
    """
    Format a timestamp the way it is shown next to an expense.

    Example: 3/7/2025, 9:05:02 PM
    """
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return (
        f"{moment.month}/{moment.day}/{moment.year}, "
        f"{hour}:{moment.minute:02d}:{moment.second:02d} {meridiem}"
    )


class Expense(BaseModel):
    """
    A single expense record.

    `id` is assigned once at creation and is the only identity key used
    for edit and delete. Records are immutable; an edit produces a new
    record carrying the same id and date.
    """
    model_config = ConfigDict(frozen=True)

    id: int = Field(
        ...,
        ge=0,
        description="Creation timestamp in milliseconds, unique within the session"
    )
    description: str = Field(
        ...,
        min_length=1,
        description="What the money was spent on"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        allow_inf_nan=False,
        description="Amount spent"
    )
    category: str = Field(
        ...,
        min_length=1,
        description="Free-text category"
    )
    date: str = Field(
        ...,
        description="Human-readable creation timestamp"
    )

    @field_validator("amount")
    @classmethod
    def check_amount_scale(cls, amount: Decimal) -> Decimal:
        if amount >= MAX_AMOUNT:
            raise ValueError(f"amount must be below {MAX_AMOUNT}")
        if amount != amount.quantize(AMOUNT_QUANTUM):
            raise ValueError("amount cannot have fractions of a cent")
        return amount

    @field_serializer("amount", when_used="json")
    def serialize_amount(self, amount: Decimal) -> float:
        return float(amount)


# Validates/serializes the whole persisted array in one go
ExpenseList = TypeAdapter(list[Expense])


# =============================================================================
# FORM DRAFTS AND VALIDATION
# =============================================================================

class ExpenseDraft(BaseModel):
    """
    Uncommitted form input.

    Fields hold the raw text as typed; nothing is coerced until
    the draft is validated.
    """
    description: str = ""
    amount: str = ""
    category: str = ""

    @classmethod
    def from_expense(cls, expense: Expense) -> "ExpenseDraft":
        """Pre-populate a draft from an existing record (edit mode)."""
        return cls(
            description=expense.description,
            amount=format(expense.amount, "f"),
            category=expense.category,
        )

    @property
    def is_blank(self) -> bool:
        return not (self.description or self.amount or self.category)


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'not_a_number', 'negative')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """
    Result of validating an expense draft.

    When valid, the cleaned values are ready to hand to the store.
    """

    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)

    # Cleaned values (only meaningful when is_valid)
    description: Optional[str] = None
    amount: Optional[Decimal] = None
    category: Optional[str] = None

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    def issues_for(self, field: str) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.field == field]
