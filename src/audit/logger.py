"""
Audit Logger

DESIGN DECISION: Every significant action in the system is logged.
This provides:
1. Traceability of every change to the expense list and the theme
2. Debugging capability when persisted state is corrupt
3. A place for failures the UI deliberately swallows

The audit logger:
- Is synchronous, like everything else in the app
- Never raises (a broken log line must not break a user action)
"""

import logging
from collections import deque
from typing import Any, Callable, Optional

import structlog

from src.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


MAX_RECENT_EVENTS = 200


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(log_level: str = "INFO") -> None:
    """
    Route structlog output through the stdlib root handler.

    structlog renders the JSON line; the stdlib handler only prints it.
    """
    logging.basicConfig(format="%(message)s", level=log_level)
    logging.getLogger().setLevel(log_level)


class AuditLogger:
    """
    Central audit logging service.

    Events are written to the structured local log at their own severity.
    Only the most recent events are kept in memory.
    """

    def __init__(self, logger_name: Optional[str] = None, max_events: int = MAX_RECENT_EVENTS):
        self._logger = structlog.get_logger(logger_name or "expense_tracker.audit")
        self._events: deque[AuditEvent] = deque(maxlen=max_events)

    @property
    def events(self) -> list[AuditEvent]:
        """Recent events logged during this session, oldest first."""
        return list(self._events)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the log line was written.
        """
        self._events.append(event)

        try:
            log_dict = event.to_log_dict()
            if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Log failure but don't raise
            logging.getLogger(__name__).error(
                "audit logging failed for %s: %s", event.event_id, e
            )
            return False

        return True

    def _record(self, build: Callable[..., AuditEvent], **kwargs: Any) -> bool:
        """Build an event and log it; a failing builder is reported, not raised."""
        try:
            event = build(**kwargs)
        except Exception as e:
            logging.getLogger(__name__).error(
                "audit event %s could not be built: %s", build.__name__, e
            )
            return False
        return self.log(event)

    def log_expense_added(self, expense_id, description, amount, category) -> None:
        self._record(
            AuditEventBuilder.expense_added,
            expense_id=expense_id,
            description=description,
            amount=amount,
            category=category,
        )

    def log_expense_edited(self, expense_id, changes) -> None:
        self._record(
            AuditEventBuilder.expense_edited,
            expense_id=expense_id,
            changes=changes,
        )

    def log_expense_deleted(self, expense_id, description) -> None:
        self._record(
            AuditEventBuilder.expense_deleted,
            expense_id=expense_id,
            description=description,
        )

    def log_expense_not_found(self, expense_id, operation) -> None:
        self._record(
            AuditEventBuilder.expense_not_found,
            expense_id=expense_id,
            operation=operation,
        )

    def log_input_rejected(self, form, issues) -> None:
        self._record(AuditEventBuilder.input_rejected, form=form, issues=issues)

    def log_theme_toggled(self, previous, current) -> None:
        self._record(AuditEventBuilder.theme_toggled, previous=previous, current=current)

    def log_storage_loaded(self, key, record_count) -> None:
        self._record(AuditEventBuilder.storage_loaded, key=key, record_count=record_count)

    def log_storage_load_failed(self, key, error_message) -> None:
        self._record(
            AuditEventBuilder.storage_load_failed,
            key=key,
            error_message=error_message,
        )

    def log_storage_write_failed(self, key, error_message) -> None:
        self._record(
            AuditEventBuilder.storage_write_failed,
            key=key,
            error_message=error_message,
        )
