"""
Statistics Models

Stats is DERIVED data: recomputed from transactions on every query
and never persisted. Nothing in here should hold state between calls.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from wealthgrows.models.ledger import MacroCategory, Transaction


# Macro categories that make up the expense breakdown, in display order.
# INCOME and TRANSFER are deliberately absent.
EXPENSE_MACRO_CATEGORIES: tuple[MacroCategory, ...] = (
    MacroCategory.SURVIVAL,
    MacroCategory.DAILY_FOOD,
    MacroCategory.ENJOYMENT,
    MacroCategory.NECESSARY,
    MacroCategory.INVESTMENT,
)

ZERO = Decimal("0")


def seeded_breakdown() -> dict[MacroCategory, Decimal]:
    """Fresh breakdown with every expense macro category at zero."""
    return {macro: ZERO for macro in EXPENSE_MACRO_CATEGORIES}


class Stats(BaseModel):
    """
    Summary of one period (a month or a year).

    `savings` treats investment as a savings vehicle, not as spend:
    savings = income - (expense - investment).
    """
    model_config = ConfigDict(frozen=True)

    total_income: Decimal = ZERO
    total_expense: Decimal = ZERO
    savings: Decimal = ZERO
    savings_rate: Decimal = ZERO
    investment_amount: Decimal = ZERO
    investment_rate: Decimal = ZERO

    category_breakdown: dict[MacroCategory, Decimal] = Field(
        default_factory=seeded_breakdown,
        description="Expense totals per macro category"
    )
    specific_category_breakdown: dict[str, Decimal] = Field(
        default_factory=dict,
        description="Expense totals per category ID (absent when zero)"
    )

    @property
    def consumption(self) -> Decimal:
        """Expenses that were actually consumed (investment excluded)."""
        return self.total_expense - self.investment_amount

    @property
    def has_expenses(self) -> bool:
        return self.total_expense > 0


class TrendDirection(str, Enum):
    """Direction of change against the previous period."""
    UP = "up"
    DOWN = "down"


class PeriodComparison(BaseModel):
    """
    Per-field trend between a period and the one before it.

    A trend is None when the values are equal or the previous
    period had nothing to compare against.
    """

    income: Optional[TrendDirection] = None
    expense: Optional[TrendDirection] = None
    savings: Optional[TrendDirection] = None
    categories: dict[MacroCategory, Optional[TrendDirection]] = Field(
        default_factory=dict
    )
    specific_categories: dict[str, Optional[TrendDirection]] = Field(
        default_factory=dict
    )


class DashboardView(BaseModel):
    """Everything the monthly dashboard renders for one selected month."""

    period_label: str
    stats: Stats
    prev_stats: Stats
    comparison: PeriodComparison
    transactions: list[Transaction] = Field(
        default_factory=list,
        description="Entries of the selected month, newest first"
    )
    available_years: list[int] = Field(default_factory=list)
