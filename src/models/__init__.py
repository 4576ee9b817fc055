"""
Data Models Package

This package contains all Pydantic models used in the Expense Tracker.
All data flowing through the system must conform to these schemas.
"""

from src.models.expense import (
    Expense,
    ExpenseDraft,
    ExpenseList,
    Theme,
    ValidationIssue,
    ValidationResult,
    format_display_timestamp,
)
from src.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Expense models
    "Expense",
    "ExpenseDraft",
    "ExpenseList",
    "Theme",
    "ValidationIssue",
    "ValidationResult",
    "format_display_timestamp",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
