"""Tests for the deterministic report payload."""

import pytest
from datetime import datetime
from decimal import Decimal

from conftest import income, make_transaction

from wealthgrows.models.ledger import MacroCategory
from wealthgrows.queries import calculate_stats
from wealthgrows.reports import (
    build_report_request,
    format_amount,
    format_rate,
    format_stats,
    format_transaction_line,
    render_report_payload,
    select_transaction_sample,
)


@pytest.fixture
def january():
    return [
        income("100", id="pay"),
        make_transaction("40", note="groceries", date=datetime(2024, 1, 15), id="food"),
        make_transaction(
            "20",
            macro=MacroCategory.INVESTMENT,
            category_id="invest_product",
            category_name="Investments",
            date=datetime(2024, 1, 20),
            id="fund",
        ),
    ]


class TestFormatting:
    def test_format_amount(self):
        assert format_amount(Decimal("40")) == "40.00"
        assert format_amount(Decimal("1234567.5")) == "1234567.50"

    def test_format_rate(self):
        assert format_rate(Decimal("0.6")) == "60.0"
        assert format_rate(Decimal("0.12345")) == "12.3"
        assert format_rate(Decimal("0")) == "0.0"

    def test_transaction_line(self):
        tx = make_transaction("40", date=datetime(2024, 1, 15, 18, 30), note="lunch")
        assert format_transaction_line(tx) == "2024-01-15 - Food & Dining: 40.00 [lunch]"

    def test_transaction_line_without_note(self):
        tx = make_transaction("7.5", date=datetime(2024, 1, 2))
        assert format_transaction_line(tx) == "2024-01-02 - Food & Dining: 7.50 [no note]"

    def test_transaction_line_collapses_multiline_note(self):
        """Test that a note with line breaks stays on one line."""
        tx = make_transaction("12", date=datetime(2024, 1, 3), note="pizza\nwith  friends\r\n\tlate")
        line = format_transaction_line(tx)
        assert line == "2024-01-03 - Food & Dining: 12.00 [pizza with friends late]"
        assert "\n" not in line

    def test_transaction_line_whitespace_note(self):
        tx = make_transaction("12", date=datetime(2024, 1, 3), note="\n \n")
        assert format_transaction_line(tx).endswith("[no note]")

    def test_format_stats(self, january):
        figures = format_stats(calculate_stats(january))
        assert figures["total_income"] == "100.00"
        assert figures["total_expense"] == "60.00"
        assert figures["savings"] == "60.00"
        assert figures["savings_rate_pct"] == "60.0"
        assert figures["investment_rate_pct"] == "20.0"
        assert figures["category_breakdown"]["Eat & Drink"] == "40.00"


class TestTransactionSample:
    """Tests for select_transaction_sample."""

    def test_largest_first_and_capped(self):
        transactions = [
            make_transaction(str(amount), id=f"t{amount}") for amount in (5, 50, 20, 80, 1)
        ]
        sample = select_transaction_sample(transactions, 3)
        assert [t.id for t in sample] == ["t80", "t50", "t20"]

    def test_ties_keep_original_order(self):
        transactions = [make_transaction("10", id=name) for name in ("a", "b", "c")]
        sample = select_transaction_sample(transactions, 2)
        assert [t.id for t in sample] == ["a", "b"]

    def test_limit_larger_than_input(self):
        transactions = [make_transaction("10", id="only")]
        assert select_transaction_sample(transactions, 30) == transactions

    def test_zero_limit(self):
        assert select_transaction_sample([make_transaction("10")], 0) == []

    def test_negative_limit(self):
        with pytest.raises(ValueError):
            select_transaction_sample([], -1)


class TestRenderPayload:
    """Tests for the rendered prompt data."""

    def test_payload_content(self, january):
        request = build_report_request(
            report_type="monthly",
            period_label="2024-01",
            stats=calculate_stats(january),
            transactions=january,
            sample_size=30,
            user_note="  first month on a budget  ",
        )
        payload = render_report_payload(request)

        assert "Report period: 2024-01 (monthly)" in payload
        assert "User note: first month on a budget" in payload
        assert "Net savings: 60.00 (savings rate: 60.0%)" in payload
        assert "Investment: 20.00 (investment rate: 20.0%)" in payload
        assert "Transactions (largest 3):" in payload
        assert "2024-01-15 - Food & Dining: 40.00 [groceries]" in payload
        assert "Previous period" not in payload

    def test_previous_period_included(self, january):
        request = build_report_request(
            report_type="monthly",
            period_label="2024-01",
            stats=calculate_stats(january),
            prev_stats=calculate_stats([income("80")]),
            transactions=january,
            sample_size=30,
        )
        payload = render_report_payload(request)
        assert "Previous period: income 80.00, expense 0.00" in payload
        assert "User note: none" in payload

    def test_empty_period(self):
        request = build_report_request(
            report_type="yearly",
            period_label="2024",
            stats=calculate_stats([]),
            transactions=[],
            sample_size=30,
        )
        payload = render_report_payload(request)
        assert payload.endswith("Transactions (largest 0):\n(none)")

    def test_sample_bounded(self):
        transactions = [make_transaction(str(i + 1), id=f"t{i}") for i in range(100)]
        request = build_report_request(
            report_type="yearly",
            period_label="2024",
            stats=calculate_stats(transactions),
            transactions=transactions,
            sample_size=30,
        )
        assert len(request.transaction_sample) == 30
        assert request.transaction_sample[0].amount == Decimal("100.00")

    def test_payload_is_deterministic(self, january):
        """Test the same input renders byte-identical payloads."""
        def render():
            return render_report_payload(build_report_request(
                report_type="monthly",
                period_label="2024-01",
                stats=calculate_stats(january),
                transactions=january,
                sample_size=30,
            ))

        assert render() == render()
