"""Pytest fixtures for testing"""

from datetime import datetime
from decimal import Decimal

import pytest

from wealthgrows.audit import AuditLogger
from wealthgrows.config import AppSettings, StorageSettings
from wealthgrows.models.ledger import (
    Category,
    MacroCategory,
    Transaction,
    TransactionType,
)
from wealthgrows.services.storage import InMemoryLedgerStorage, JsonLinesAuditStorage
from wealthgrows.validation import TransactionValidator


def make_transaction(
    amount: str,
    type: TransactionType = TransactionType.EXPENSE,
    macro: MacroCategory = MacroCategory.DAILY_FOOD,
    category_id: str = "food",
    category_name: str = "Food & Dining",
    date: datetime = datetime(2024, 1, 15, 12, 0),
    note: str = "",
    id: str = None,
) -> Transaction:
    """Build a transaction without going through a Category."""
    fields = dict(
        amount=Decimal(amount),
        type=type,
        category_id=category_id,
        category_name=category_name,
        macro_category=macro,
        date=date,
        note=note,
    )
    if id is not None:
        fields["id"] = id
    return Transaction(**fields)


def income(amount: str, date: datetime = datetime(2024, 1, 1, 9, 0), **kwargs) -> Transaction:
    return make_transaction(
        amount,
        type=TransactionType.INCOME,
        macro=MacroCategory.INCOME,
        category_id="salary",
        category_name="Salary",
        date=date,
        **kwargs,
    )


@pytest.fixture
def food_category() -> Category:
    return Category(
        id="food",
        name="Food & Dining",
        icon="Utensils",
        type=TransactionType.EXPENSE,
        macro_category=MacroCategory.DAILY_FOOD,
    )


@pytest.fixture
def salary_category() -> Category:
    return Category(
        id="salary",
        name="Salary",
        icon="Briefcase",
        type=TransactionType.INCOME,
        macro_category=MacroCategory.INCOME,
    )


@pytest.fixture
def app_settings() -> AppSettings:
    return AppSettings(max_transaction_amount=1_000_000.0, audit_enabled=True)


@pytest.fixture
def storage_settings() -> StorageSettings:
    """Single attempt, so failure tests don't wait on retries."""
    return StorageSettings(io_retry_attempts=1)


@pytest.fixture
def validator(app_settings) -> TransactionValidator:
    return TransactionValidator(app_settings)


@pytest.fixture
def store() -> InMemoryLedgerStorage:
    return InMemoryLedgerStorage()


@pytest.fixture
def audit_storage(tmp_path) -> JsonLinesAuditStorage:
    return JsonLinesAuditStorage(tmp_path / "audit.jsonl")


@pytest.fixture
def audit_logger(audit_storage) -> AuditLogger:
    return AuditLogger(audit_storage)


@pytest.fixture
def sample_ledger() -> list[Transaction]:
    """Two months of activity around the turn of the year."""
    return [
        income("3000", date=datetime(2024, 1, 1, 9, 0), id="jan-salary"),
        make_transaction("40", date=datetime(2024, 1, 15, 12, 0), id="jan-food"),
        make_transaction(
            "500",
            macro=MacroCategory.INVESTMENT,
            category_id="invest_product",
            category_name="Investments",
            date=datetime(2024, 1, 20, 10, 0),
            id="jan-invest",
        ),
        income("2500", date=datetime(2023, 12, 1, 9, 0), id="dec-salary"),
        make_transaction(
            "1200",
            macro=MacroCategory.SURVIVAL,
            category_id="rent",
            category_name="Rent",
            date=datetime(2023, 12, 3, 8, 0),
            id="dec-rent",
        ),
    ]
