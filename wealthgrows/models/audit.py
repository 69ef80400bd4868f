"""
Audit Models for WealthGrows

Every significant action in the system is logged for audit purposes.
This provides:
1. Complete traceability of ledger mutations
2. Debugging information when things go wrong
3. A history the user can inspect

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Ledger mutations
    TRANSACTION_SAVED = "transaction_saved"
    TRANSACTION_DELETED = "transaction_deleted"
    TRANSACTION_REJECTED = "transaction_rejected"
    CATEGORY_ADDED = "category_added"
    CATEGORY_DELETED = "category_deleted"
    CATEGORIES_SEEDED = "categories_seeded"

    # Storage
    STORE_UNAVAILABLE = "store_unavailable"
    STORE_CORRUPT = "store_corrupt"
    DUPLICATE_REJECTED = "duplicate_rejected"

    # Reports
    REPORT_REQUESTED = "report_requested"
    REPORT_GENERATED = "report_generated"
    REPORT_FAILED = "report_failed"


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
        default_factory=datetime.utcnow,
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
        description="Type of entity (e.g., 'transaction', 'category', 'report')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one report request)"
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

    # Error information (if applicable)
    error_code: Optional[str] = None
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
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_saved(transaction_id, "40.00", "food")
        event = AuditEventBuilder.store_failure("corrupt", "transactions", message)
    """

    @staticmethod
    def transaction_saved(
        transaction_id: str,
        amount: str,
        category_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_SAVED,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transaction saved: {category_id} {amount}",
            details={
                "amount": amount,
                "category_id": category_id,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_deleted(
        transaction_id: str,
        existed: bool,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=(
                "Transaction deleted" if existed
                else "Delete requested for unknown transaction (no-op)"
            ),
            details={"existed": existed},
            is_user_action=True,
        )

    @staticmethod
    def transaction_rejected(
        issues: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            correlation_id=correlation_id,
            description=f"Transaction rejected with {len(issues)} issues",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def category_added(
        category_id: str,
        name: str,
        macro_category: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_ADDED,
            entity_type="category",
            entity_id=category_id,
            description=f"Category added: {name}",
            details={"name": name, "macro_category": macro_category},
            is_user_action=True,
        )

    @staticmethod
    def category_deleted(
        category_id: str,
        existed: bool,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_DELETED,
            entity_type="category",
            entity_id=category_id,
            description=(
                "Category deleted" if existed
                else "Delete requested for unknown category (no-op)"
            ),
            details={"existed": existed},
            is_user_action=True,
        )

    @staticmethod
    def categories_seeded(count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORIES_SEEDED,
            entity_type="category",
            description=f"Seeded {count} default categories",
            details={"count": count},
        )

    @staticmethod
    def store_failure(
        kind: str,
        collection: Optional[str],
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        event_type = {
            "corrupt": AuditEventType.STORE_CORRUPT,
            "duplicate": AuditEventType.DUPLICATE_REJECTED,
        }.get(kind, AuditEventType.STORE_UNAVAILABLE)
        severity = (
            AuditSeverity.WARNING if kind == "duplicate"
            else AuditSeverity.CRITICAL if kind == "corrupt"
            else AuditSeverity.ERROR
        )
        return AuditEvent(
            event_type=event_type,
            severity=severity,
            entity_type="store",
            entity_id=collection,
            correlation_id=correlation_id,
            description=f"Store failure ({kind})",
            error_message=error_message,
            details={"collection": collection},
        )

    @staticmethod
    def report_requested(
        request_id: UUID,
        report_type: str,
        period_label: str,
        sample_size: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_REQUESTED,
            entity_type="report",
            entity_id=str(request_id),
            correlation_id=correlation_id,
            description=f"Report requested: {report_type} {period_label}",
            details={
                "report_type": report_type,
                "period_label": period_label,
                "sample_size": sample_size,
            },
            is_user_action=True,
        )

    @staticmethod
    def report_generated(
        request_id: UUID,
        length: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_GENERATED,
            entity_type="report",
            entity_id=str(request_id),
            correlation_id=correlation_id,
            description="Report generated",
            details={"length": length},
        )

    @staticmethod
    def report_failed(
        request_id: UUID,
        error_code: str,
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="report",
            entity_id=str(request_id),
            correlation_id=correlation_id,
            description=f"Report failed: {error_code}",
            error_code=error_code,
            error_message=error_message,
        )

