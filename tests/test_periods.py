"""Tests for period queries and trends."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from conftest import make_transaction

from wealthgrows.models.ledger import MacroCategory
from wealthgrows.models.stats import Stats, TrendDirection
from wealthgrows.queries import (
    calculate_monthly_stats,
    calculate_yearly_stats,
    get_available_years,
    get_previous_month_stats,
    month_label,
    period_comparison,
    previous_month,
    transactions_for_month,
    transactions_for_year,
    trend,
    year_label,
)


class TestPreviousMonth:
    """Tests for previous_month."""

    def test_january_rolls_back_to_december(self):
        assert previous_month(2024, 1) == (2023, 12)

    def test_mid_year(self):
        assert previous_month(2024, 7) == (2024, 6)

    @pytest.mark.parametrize("month", [0, 13, -1])
    def test_rejects_invalid_month(self, month):
        with pytest.raises(ValueError, match="between 1 and 12"):
            previous_month(2024, month)


class TestPeriodFilters:
    """Tests for month/year selection."""

    def test_transactions_for_month(self, sample_ledger):
        selected = transactions_for_month(sample_ledger, 2024, 1)
        assert [t.id for t in selected] == ["jan-salary", "jan-food", "jan-invest"]

    def test_transactions_for_year(self, sample_ledger):
        selected = transactions_for_year(sample_ledger, 2023)
        assert {t.id for t in selected} == {"dec-salary", "dec-rent"}

    def test_month_boundaries_are_inclusive(self):
        first = make_transaction("1", date=datetime(2024, 3, 1, 0, 0), id="first")
        last = make_transaction("1", date=datetime(2024, 3, 31, 23, 59, 59), id="last")
        outside = make_transaction("1", date=datetime(2024, 4, 1, 0, 0), id="outside")
        selected = transactions_for_month([first, last, outside], 2024, 3)
        assert [t.id for t in selected] == ["first", "last"]

    def test_monthly_stats(self, sample_ledger):
        stats = calculate_monthly_stats(sample_ledger, date(2024, 1, 31))
        assert stats.total_income == Decimal("3000")
        assert stats.total_expense == Decimal("540")
        assert stats.investment_amount == Decimal("500")

    def test_previous_month_stats_crosses_year(self, sample_ledger):
        """Test January's previous month is December of the year before."""
        stats = get_previous_month_stats(sample_ledger, datetime(2024, 1, 10))
        assert stats.total_income == Decimal("2500")
        assert stats.category_breakdown[MacroCategory.SURVIVAL] == Decimal("1200")

    def test_yearly_stats(self, sample_ledger):
        stats = calculate_yearly_stats(sample_ledger, 2023)
        assert stats.total_income == Decimal("2500")
        assert stats.total_expense == Decimal("1200")

    def test_empty_period(self, sample_ledger):
        stats = calculate_monthly_stats(sample_ledger, date(2022, 6, 1))
        assert stats == Stats()


class TestAvailableYears:
    """Tests for get_available_years."""

    def test_empty_ledger_has_current_year_once(self):
        assert get_available_years([], today=date(2025, 5, 1)) == [2025]

    def test_current_year_not_duplicated(self):
        ledger = [make_transaction("1", date=datetime(2025, 2, 1))]
        assert get_available_years(ledger, today=date(2025, 5, 1)) == [2025]

    def test_sorted_newest_first(self, sample_ledger):
        assert get_available_years(sample_ledger, today=date(2025, 1, 1)) == [
            2025, 2024, 2023
        ]

    def test_defaults_to_today(self):
        assert get_available_years([]) == [date.today().year]


class TestLabels:
    def test_month_label(self):
        assert month_label(2024, 1) == "2024-01"

    def test_year_label(self):
        assert year_label(2024) == "2024"


class TestTrends:
    """Tests for trend and period_comparison."""

    def test_up_and_down(self):
        assert trend(Decimal("10"), Decimal("5")) == TrendDirection.UP
        assert trend(Decimal("5"), Decimal("10")) == TrendDirection.DOWN

    def test_no_trend_when_equal(self):
        assert trend(Decimal("5"), Decimal("5")) is None

    def test_no_trend_without_previous(self):
        assert trend(Decimal("5"), None) is None
        assert trend(Decimal("5"), Decimal("0")) is None

    def test_period_comparison(self, sample_ledger):
        current = calculate_monthly_stats(sample_ledger, date(2024, 1, 1))
        previous = get_previous_month_stats(sample_ledger, date(2024, 1, 1))
        comparison = period_comparison(current, previous)

        assert comparison.income == TrendDirection.UP
        assert comparison.expense == TrendDirection.DOWN
        assert comparison.categories[MacroCategory.SURVIVAL] == TrendDirection.DOWN
        # Nothing to compare against last month
        assert comparison.categories[MacroCategory.DAILY_FOOD] is None
        assert comparison.specific_categories["rent"] == TrendDirection.DOWN
        assert comparison.specific_categories["food"] is None
