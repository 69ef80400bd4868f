"""
Data Models Package

This package contains all Pydantic models used in WealthGrows.
All data flowing through the system must conform to these schemas.
"""

from wealthgrows.models.ledger import (
    DEFAULT_CATEGORIES,
    MACRO_CATEGORY_LABELS,
    Category,
    MacroCategory,
    Transaction,
    TransactionType,
    ValidationIssue,
    new_entity_id,
    parse_ledger_date,
)
from wealthgrows.models.stats import (
    EXPENSE_MACRO_CATEGORIES,
    DashboardView,
    PeriodComparison,
    Stats,
    TrendDirection,
)
from wealthgrows.models.report import ReportRequest
from wealthgrows.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "DEFAULT_CATEGORIES",
    "MACRO_CATEGORY_LABELS",
    "Category",
    "MacroCategory",
    "Transaction",
    "TransactionType",
    "ValidationIssue",
    "new_entity_id",
    "parse_ledger_date",
    # Stats models
    "EXPENSE_MACRO_CATEGORIES",
    "DashboardView",
    "PeriodComparison",
    "Stats",
    "TrendDirection",
    # Report models
    "ReportRequest",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
