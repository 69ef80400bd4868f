"""
Main Orchestrator for WealthGrows

This module ties together all the components and defines the
end-to-end flows for:
1. Ledger (input → validate → save → recompute dashboard)
2. Report (period → stats → bounded payload → AI analyst)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing reaches the store without passing validation
- A store failure blocks the action entirely (no optimistic update)
- Every error kind gets its own user-facing message
- Every step is audited

Flows return (value, success, message). On failure value is None and
message says exactly what went wrong.
"""

from datetime import date, datetime
from pathlib import Path
from typing import Optional, TypeVar, Union
from uuid import UUID

from wealthgrows.agents import (
    MissingCredentialError,
    ReportAgent,
    ReportError,
    ReportServiceError,
)
from wealthgrows.audit import AuditLogger, configure_logging, create_correlation_id
from wealthgrows.config import ReportSettings, get_settings
from wealthgrows.models.ledger import (
    Category,
    MacroCategory,
    Transaction,
    TransactionType,
)
from wealthgrows.models.stats import DashboardView, Stats
from wealthgrows.queries import (
    calculate_monthly_stats,
    calculate_yearly_stats,
    get_available_years,
    get_previous_month_stats,
    month_label,
    period_comparison,
    transactions_for_month,
    transactions_for_year,
    year_label,
)
from wealthgrows.reports import build_report_request
from wealthgrows.services.storage import (
    DuplicateError,
    JsonFileLedgerStorage,
    JsonLinesAuditStorage,
    LedgerStorageInterface,
    StorageError,
    StoreCorrupt,
    StoreUnavailable,
)
from wealthgrows.validation import TransactionValidationError, TransactionValidator


T = TypeVar("T")
FlowResult = tuple[Optional[T], bool, str]


def user_message_for(error: Exception) -> str:
    """
    A specific, human-readable message per error kind.

    The UI shows this instead of a generic "something went wrong".
    """
    if isinstance(error, TransactionValidationError):
        return TransactionValidator.get_user_friendly_summary(error)
    if isinstance(error, DuplicateError):
        return "An entry with the same ID already exists. Nothing was changed."
    if isinstance(error, StoreCorrupt):
        return (
            "Your saved data could not be read because the file is damaged. "
            "It has NOT been overwritten; please restore it from a backup "
            "or move it aside before continuing."
        )
    if isinstance(error, StoreUnavailable):
        return (
            "Your data could not be read or written right now "
            "(storage unavailable). Nothing was changed; please try again."
        )
    if isinstance(error, MissingCredentialError):
        return (
            "The AI analyst is not available: no valid Gemini API key is "
            "configured. Set GEMINI_API_KEY and restart the app."
        )
    if isinstance(error, ReportServiceError):
        return f"The AI analyst could not be reached: {error}"
    return f"Unexpected error: {error}"


def _store_error_kind(error: StorageError) -> str:
    if isinstance(error, StoreCorrupt):
        return "corrupt"
    if isinstance(error, DuplicateError):
        return "duplicate"
    return "unavailable"


class LedgerFlow:
    """
    Orchestrates ledger reads and mutations for the UI.

    Every mutation returns the full updated collection, so the UI can
    replace its state wholesale and recompute the dashboard.
    """

    def __init__(
        self,
        store: LedgerStorageInterface,
        validator: Optional[TransactionValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._validator = validator or TransactionValidator()
        self._audit_logger = audit_logger

    def _fail(
        self,
        error: Exception,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[None, bool, str]:
        """Audit a failure and turn it into a flow result."""
        if self._audit_logger:
            if isinstance(error, StorageError):
                self._audit_logger.log_store_failure(
                    kind=_store_error_kind(error),
                    collection=error.collection,
                    error_message=str(error),
                    correlation_id=correlation_id,
                )
            elif isinstance(error, TransactionValidationError):
                self._audit_logger.log_transaction_rejected(
                    issues=[issue.message for issue in error.issues],
                    correlation_id=correlation_id,
                )
        return None, False, user_message_for(error)

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def get_transactions(self) -> FlowResult[list[Transaction]]:
        try:
            return self._store.list_transactions(), True, ""
        except StorageError as e:
            return self._fail(e)

    def save_transaction(
        self,
        transaction: Transaction,
        correlation_id: Optional[UUID] = None,
    ) -> FlowResult[list[Transaction]]:
        """Persist an already-built transaction."""
        try:
            updated = self._store.save_transaction(transaction)
        except StorageError as e:
            return self._fail(e, correlation_id)

        if self._audit_logger:
            self._audit_logger.log_transaction_saved(
                transaction_id=transaction.id,
                amount=str(transaction.amount),
                category_id=transaction.category_id,
                correlation_id=correlation_id,
            )
        return updated, True, "Saved"

    def record_transaction(
        self,
        category_id: str,
        amount: Union[str, int, float],
        date: object,
        note: str = "",
        display_name: Optional[str] = None,
    ) -> FlowResult[list[Transaction]]:
        """
        Validate raw input, snapshot the category and save.

        `amount` may be a keypad expression such as "30+12.5".
        """
        correlation_id = create_correlation_id()

        try:
            categories = self._store.list_categories()
        except StorageError as e:
            return self._fail(e, correlation_id)

        category = next((c for c in categories if c.id == category_id), None)

        try:
            transaction = self._validator.build_transaction(
                category,
                amount=amount,
                date=date,
                note=note,
                display_name=display_name,
            )
        except TransactionValidationError as e:
            return self._fail(e, correlation_id)

        return self.save_transaction(transaction, correlation_id=correlation_id)

    def delete_transaction(self, transaction_id: str) -> FlowResult[list[Transaction]]:
        """Delete by ID; an unknown ID is a successful no-op."""
        try:
            before = self._store.list_transactions()
            updated = self._store.delete_transaction(transaction_id)
        except StorageError as e:
            return self._fail(e)

        if self._audit_logger:
            self._audit_logger.log_transaction_deleted(
                transaction_id=transaction_id,
                existed=len(updated) != len(before),
            )
        return updated, True, "Deleted"

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    def get_categories(self) -> FlowResult[list[Category]]:
        try:
            return self._store.list_categories(), True, ""
        except StorageError as e:
            return self._fail(e)

    def add_category(self, category: Category) -> FlowResult[list[Category]]:
        try:
            updated = self._store.add_category(category)
        except StorageError as e:
            return self._fail(e)

        if self._audit_logger:
            self._audit_logger.log_category_added(
                category_id=category.id,
                name=category.name,
                macro_category=category.macro_category.value,
            )
        return updated, True, "Category added"

    def create_category(
        self,
        name: str,
        type: TransactionType,
        macro_category: MacroCategory,
        icon: str = "Wallet",
    ) -> FlowResult[list[Category]]:
        """Build a new category with a fresh ID and add it."""
        try:
            category = Category(
                name=name,
                icon=icon,
                type=type,
                macro_category=macro_category,
            )
        except ValueError as e:
            return None, False, f"This category could not be created: {e}"
        return self.add_category(category)

    def delete_category(self, category_id: str) -> FlowResult[list[Category]]:
        """Delete by ID. Transactions filed under it are left untouched."""
        try:
            before = self._store.list_categories()
            updated = self._store.delete_category(category_id)
        except StorageError as e:
            return self._fail(e)

        if self._audit_logger:
            self._audit_logger.log_category_deleted(
                category_id=category_id,
                existed=len(updated) != len(before),
            )
        return updated, True, "Category deleted"

    # -------------------------------------------------------------------------
    # Dashboard
    # -------------------------------------------------------------------------

    def dashboard(
        self,
        reference_date: Union[date, datetime],
        today: Optional[date] = None,
    ) -> FlowResult[DashboardView]:
        """Stats for the selected month and the month before, with trends."""
        transactions, ok, message = self.get_transactions()
        if not ok:
            return None, False, message

        stats = calculate_monthly_stats(transactions, reference_date)
        prev_stats = get_previous_month_stats(transactions, reference_date)
        view = DashboardView(
            period_label=month_label(reference_date.year, reference_date.month),
            stats=stats,
            prev_stats=prev_stats,
            comparison=period_comparison(stats, prev_stats),
            transactions=transactions_for_month(
                transactions, reference_date.year, reference_date.month
            ),
            available_years=get_available_years(transactions, today=today),
        )
        return view, True, ""


class ReportFlow:
    """
    Orchestrates the AI report flow.

    FLOW:
    1. Read the ledger (store errors stop here)
    2. Compute Stats for the period (and the previous month)
    3. Build a bounded, deterministic payload
    4. Hand it to the AI analyst

    The analyst NEVER sees the store; only the payload.
    """

    def __init__(
        self,
        store: LedgerStorageInterface,
        report_agent: Optional[ReportAgent] = None,
        audit_logger: Optional[AuditLogger] = None,
        report_settings: Optional[ReportSettings] = None,
    ):
        self._store = store
        self._report_settings = report_settings or get_settings().report
        self._report_agent = report_agent or ReportAgent(
            report_settings=self._report_settings
        )
        self._audit_logger = audit_logger

    async def generate_monthly_report(
        self,
        reference_date: Union[date, datetime],
        user_note: str = "",
    ) -> FlowResult[str]:
        try:
            transactions = self._store.list_transactions()
        except StorageError as e:
            return None, False, user_message_for(e)

        return await self._generate(
            report_type="monthly",
            period_label=month_label(reference_date.year, reference_date.month),
            stats=calculate_monthly_stats(transactions, reference_date),
            prev_stats=get_previous_month_stats(transactions, reference_date),
            transactions=transactions_for_month(
                transactions, reference_date.year, reference_date.month
            ),
            user_note=user_note,
        )

    async def generate_yearly_report(
        self,
        year: int,
        user_note: str = "",
    ) -> FlowResult[str]:
        try:
            transactions = self._store.list_transactions()
        except StorageError as e:
            return None, False, user_message_for(e)

        return await self._generate(
            report_type="yearly",
            period_label=year_label(year),
            stats=calculate_yearly_stats(transactions, year),
            prev_stats=None,
            transactions=transactions_for_year(transactions, year),
            user_note=user_note,
        )

    async def _generate(
        self,
        report_type: str,
        period_label: str,
        stats: Stats,
        prev_stats: Optional[Stats],
        transactions: list[Transaction],
        user_note: str,
    ) -> FlowResult[str]:
        correlation_id = create_correlation_id()

        request = build_report_request(
            report_type=report_type,
            period_label=period_label,
            stats=stats,
            prev_stats=prev_stats,
            transactions=transactions,
            sample_size=self._report_settings.sample_size,
            user_note=user_note,
        )

        if self._audit_logger:
            self._audit_logger.log_report_requested(
                request_id=request.request_id,
                report_type=report_type,
                period_label=period_label,
                sample_size=len(request.transaction_sample),
                correlation_id=correlation_id,
            )

        try:
            text = await self._report_agent.generate_report(request)
        except ReportError as e:
            if self._audit_logger:
                self._audit_logger.log_report_failed(
                    request_id=request.request_id,
                    error_code=type(e).__name__,
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            return None, False, user_message_for(e)

        if self._audit_logger:
            self._audit_logger.log_report_generated(
                request_id=request.request_id,
                length=len(text),
                correlation_id=correlation_id,
            )
        return text, True, ""


def create_app_components(
    data_dir: Optional[Path] = None,
) -> tuple[LedgerFlow, ReportFlow, LedgerStorageInterface]:
    """
    Factory function to create all application components.

    The store is opened once here and injected into both flows.

    Args:
        data_dir: Where the ledger lives; defaults to the configured directory.

    Returns:
        (ledger_flow, report_flow, store)
    """
    settings = get_settings()
    storage_settings = settings.storage
    configure_logging(settings.app.log_level)
    data_dir = Path(data_dir or storage_settings.data_dir).expanduser()

    if settings.app.audit_enabled:
        audit_logger = AuditLogger(
            JsonLinesAuditStorage(data_dir / storage_settings.audit_log_name)
        )
    else:
        audit_logger = AuditLogger()  # Local-only logging

    store = JsonFileLedgerStorage(
        data_dir=data_dir,
        settings=storage_settings,
        on_seed=audit_logger.log_categories_seeded,
    )

    ledger_flow = LedgerFlow(
        store=store,
        validator=TransactionValidator(settings.app),
        audit_logger=audit_logger,
    )
    report_flow = ReportFlow(
        store=store,
        audit_logger=audit_logger,
        report_settings=settings.report,
    )

    return ledger_flow, report_flow, store
