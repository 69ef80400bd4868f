"""
Audit Logger

DESIGN DECISION: Every ledger mutation, store failure and report
request is logged.
This provides:
1. Complete traceability
2. Debugging capability
3. User can see history of their interactions

The audit logger:
- Is synchronous, like the store it sits next to
- Gracefully handles failures (doesn't crash the app if logging fails)
- Supports correlation IDs to trace related events
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from wealthgrows.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from wealthgrows.services.storage import AuditStorageInterface


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


def configure_logging(level: str = "INFO") -> None:
    """Route the JSON lines to stderr at `level`."""
    logging.basicConfig(format="%(message)s", level=level.upper())


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. The append-only audit store (for persistence and user visibility)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_transaction_saved(
        self,
        transaction_id: str,
        amount: str,
        category_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.transaction_saved(
            transaction_id=transaction_id,
            amount=amount,
            category_id=category_id,
            correlation_id=correlation_id,
        ))

    def log_transaction_deleted(
        self,
        transaction_id: str,
        existed: bool,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.transaction_deleted(
            transaction_id=transaction_id,
            existed=existed,
            correlation_id=correlation_id,
        ))

    def log_transaction_rejected(
        self,
        issues: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log input that failed validation."""
        self.log(AuditEventBuilder.transaction_rejected(
            issues=issues,
            correlation_id=correlation_id,
        ))

    def log_category_added(
        self,
        category_id: str,
        name: str,
        macro_category: str,
    ) -> None:
        self.log(AuditEventBuilder.category_added(
            category_id=category_id,
            name=name,
            macro_category=macro_category,
        ))

    def log_category_deleted(
        self,
        category_id: str,
        existed: bool,
    ) -> None:
        self.log(AuditEventBuilder.category_deleted(
            category_id=category_id,
            existed=existed,
        ))

    def log_categories_seeded(self, count: int) -> None:
        self.log(AuditEventBuilder.categories_seeded(count=count))

    def log_store_failure(
        self,
        kind: str,
        collection: Optional[str],
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a storage error (unavailable, corrupt or duplicate)."""
        self.log(AuditEventBuilder.store_failure(
            kind=kind,
            collection=collection,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_report_requested(
        self,
        request_id: UUID,
        report_type: str,
        period_label: str,
        sample_size: int,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.report_requested(
            request_id=request_id,
            report_type=report_type,
            period_label=period_label,
            sample_size=sample_size,
            correlation_id=correlation_id,
        ))

    def log_report_generated(
        self,
        request_id: UUID,
        length: int,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.report_generated(
            request_id=request_id,
            length=length,
            correlation_id=correlation_id,
        ))

    def log_report_failed(
        self,
        request_id: UUID,
        error_code: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.report_failed(
            request_id=request_id,
            error_code=error_code,
            error_message=error_message,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., a report request).
    Pass it through all subsequent operations.
    """
    return uuid4()
