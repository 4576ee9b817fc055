"""
Audit Models for Expense Tracker

Every change to the expense list or the theme, and every storage
failure, is recorded as an audit event. This provides:
1. Traceability of all mutations
2. Debugging information when persisted state turns out to be corrupt
3. A record of failures the UI deliberately does not surface

DESIGN DECISION: Audit events are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Expense list
    EXPENSE_ADDED = "expense_added"
    EXPENSE_EDITED = "expense_edited"
    EXPENSE_DELETED = "expense_deleted"
    EXPENSE_NOT_FOUND = "expense_not_found"

    # Form input
    INPUT_REJECTED = "input_rejected"

    # Theme
    THEME_TOGGLED = "theme_toggled"

    # Persistence
    STORAGE_LOADED = "storage_loaded"
    STORAGE_LOAD_FAILED = "storage_load_failed"
    STORAGE_WRITE_FAILED = "storage_write_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'theme', 'storage')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID or key of the entity this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


DESCRIPTION_EXCERPT_LENGTH = 80


def excerpt(text: str, limit: int = DESCRIPTION_EXCERPT_LENGTH) -> str:
    """Shorten user-entered text for an event description."""
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added(expense_id, description, amount)
        event = AuditEventBuilder.theme_toggled("dark", "light")
    """

    @staticmethod
    def expense_added(
        expense_id: int,
        description: str,
        amount: Decimal,
        category: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=str(expense_id),
            description=f"Expense added: {excerpt(description)}",
            details={
                "amount": str(amount),
                "category": excerpt(category),
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_edited(
        expense_id: int,
        changes: dict[str, tuple[str, str]],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_EDITED,
            entity_type="expense",
            entity_id=str(expense_id),
            description=f"Expense edited ({len(changes)} field(s) changed)",
            details={
                field: {"old": old, "new": new}
                for field, (old, new) in changes.items()
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(expense_id: int, description: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_id=str(expense_id),
            description=f"Expense deleted: {excerpt(description)}",
            is_user_action=True,
        )

    @staticmethod
    def expense_not_found(expense_id: int, operation: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_NOT_FOUND,
            severity=AuditSeverity.DEBUG,
            entity_type="expense",
            entity_id=str(expense_id),
            description=f"No expense to {operation}; list left unchanged",
            details={"operation": operation},
            is_user_action=True,
        )

    @staticmethod
    def input_rejected(form: str, issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INPUT_REJECTED,
            severity=AuditSeverity.DEBUG,
            entity_type="form",
            entity_id=form,
            description=f"Form input rejected with {len(issues)} issue(s)",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def theme_toggled(previous: str, current: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.THEME_TOGGLED,
            entity_type="theme",
            entity_id=current,
            description=f"Theme switched from {previous} to {current}",
            is_user_action=True,
        )

    @staticmethod
    def storage_loaded(key: str, record_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_LOADED,
            severity=AuditSeverity.DEBUG,
            entity_type="storage",
            entity_id=key,
            description=f"Loaded {record_count} record(s) from {key}",
            details={"record_count": record_count},
        )

    @staticmethod
    def storage_load_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_LOAD_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="storage",
            entity_id=key,
            description=f"Could not load {key}; falling back to default",
            error_message=error_message,
        )

    @staticmethod
    def storage_write_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_WRITE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="storage",
            entity_id=key,
            description=f"Could not persist {key}",
            error_message=error_message,
        )
