"""
Period Queries

Selects the transactions of a calendar month or year and hands them to
the aggregator. There is no aggregation logic here, only filtering.

Months are numbered 1-12 throughout, as in the datetime module.
"""

from collections.abc import Iterable, Sequence
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union

from wealthgrows.models.ledger import Transaction
from wealthgrows.models.stats import (
    EXPENSE_MACRO_CATEGORIES,
    PeriodComparison,
    Stats,
    TrendDirection,
)
from wealthgrows.queries.aggregator import calculate_stats


DateLike = Union[date, datetime]


def _check_month(month: int) -> None:
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")


def previous_month(year: int, month: int) -> tuple[int, int]:
    """
    The calendar month before (year, month).

    January rolls back to December of the previous year.
    """
    _check_month(month)
    if month == 1:
        return year - 1, 12
    return year, month - 1


def transactions_for_month(
    transactions: Iterable[Transaction],
    year: int,
    month: int,
) -> list[Transaction]:
    """Transactions dated within the given calendar month, order preserved."""
    _check_month(month)
    return [
        t for t in transactions
        if t.date.year == year and t.date.month == month
    ]


def transactions_for_year(
    transactions: Iterable[Transaction],
    year: int,
) -> list[Transaction]:
    """Transactions dated within the given calendar year, order preserved."""
    return [t for t in transactions if t.date.year == year]


def stats_for_month(
    transactions: Iterable[Transaction],
    year: int,
    month: int,
) -> Stats:
    return calculate_stats(transactions_for_month(transactions, year, month))


def calculate_monthly_stats(
    transactions: Iterable[Transaction],
    reference_date: DateLike,
) -> Stats:
    """Stats for the calendar month containing `reference_date`."""
    return stats_for_month(transactions, reference_date.year, reference_date.month)


def get_previous_month_stats(
    transactions: Iterable[Transaction],
    reference_date: DateLike,
) -> Stats:
    """Stats for the calendar month before the one containing `reference_date`."""
    year, month = previous_month(reference_date.year, reference_date.month)
    return stats_for_month(transactions, year, month)


def calculate_yearly_stats(
    transactions: Iterable[Transaction],
    year: int,
) -> Stats:
    return calculate_stats(transactions_for_year(transactions, year))


def get_available_years(
    transactions: Iterable[Transaction],
    today: Optional[date] = None,
) -> list[int]:
    """
    Years that have data, plus the current year, newest first.

    The current year is always present so the user can select it
    before recording anything.
    """
    years = {t.date.year for t in transactions}
    years.add((today or date.today()).year)
    return sorted(years, reverse=True)


def month_label(year: int, month: int) -> str:
    _check_month(month)
    return f"{year:04d}-{month:02d}"


def year_label(year: int) -> str:
    return f"{year:04d}"


# =============================================================================
# TRENDS
# =============================================================================

def trend(current: Decimal, previous: Optional[Decimal]) -> Optional[TrendDirection]:
    """
    Direction of change; None when unchanged or nothing to compare to.

    A previous value of zero counts as "nothing to compare to".
    """
    if not previous or current == previous:
        return None
    return TrendDirection.UP if current > previous else TrendDirection.DOWN


def period_comparison(current: Stats, previous: Stats) -> PeriodComparison:
    """Trend of every headline figure and breakdown entry against `previous`."""
    specific_ids: Sequence[str] = sorted(
        set(current.specific_category_breakdown) | set(previous.specific_category_breakdown)
    )
    return PeriodComparison(
        income=trend(current.total_income, previous.total_income),
        expense=trend(current.total_expense, previous.total_expense),
        savings=trend(current.savings, previous.savings),
        categories={
            macro: trend(
                current.category_breakdown.get(macro, Decimal("0")),
                previous.category_breakdown.get(macro),
            )
            for macro in EXPENSE_MACRO_CATEGORIES
        },
        specific_categories={
            category_id: trend(
                current.specific_category_breakdown.get(category_id, Decimal("0")),
                previous.specific_category_breakdown.get(category_id),
            )
            for category_id in specific_ids
        },
    )
