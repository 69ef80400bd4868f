"""Statistics and period queries package."""

from wealthgrows.queries.aggregator import calculate_stats
from wealthgrows.queries.periods import (
    calculate_monthly_stats,
    calculate_yearly_stats,
    get_available_years,
    get_previous_month_stats,
    month_label,
    period_comparison,
    previous_month,
    stats_for_month,
    transactions_for_month,
    transactions_for_year,
    trend,
    year_label,
)

__all__ = [
    "calculate_monthly_stats",
    "calculate_stats",
    "calculate_yearly_stats",
    "get_available_years",
    "get_previous_month_stats",
    "month_label",
    "period_comparison",
    "previous_month",
    "stats_for_month",
    "transactions_for_month",
    "transactions_for_year",
    "trend",
    "year_label",
]
