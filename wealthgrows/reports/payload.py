"""
Report Payload Builder

DESIGN DECISION: The text sent to the LLM is built DETERMINISTICALLY.
Same ledger, same period, same note -> byte-identical payload.

The analyst only sees:
1. Period figures as plain numbers (two decimals, no currency symbols)
2. A bounded sample of transactions, largest amounts first

It never gets the whole ledger, so the payload size stays bounded no
matter how many entries the user has.
"""

import json
from collections.abc import Iterable
from decimal import Decimal
from typing import Optional

from wealthgrows.models.ledger import Transaction
from wealthgrows.models.report import ReportRequest
from wealthgrows.models.stats import Stats


NO_NOTE = "no note"


def format_amount(value: Decimal) -> str:
    """Two decimals, no grouping, no currency symbol."""
    return f"{value:.2f}"


def format_rate(value: Decimal) -> str:
    """A 0-1 rate as a percentage with one decimal."""
    return f"{value * 100:.1f}"


def select_transaction_sample(
    transactions: Iterable[Transaction],
    limit: int,
) -> list[Transaction]:
    """
    Top `limit` transactions by amount.

    The sort is stable, so equal amounts keep their original order.
    """
    if limit < 0:
        raise ValueError(f"Sample limit cannot be negative: {limit}")
    ranked = sorted(transactions, key=lambda t: t.amount, reverse=True)
    return ranked[:limit]


def format_stats(stats: Stats) -> dict:
    """Stats as plain numeric strings, ready for a prompt or a log line."""
    return {
        "total_income": format_amount(stats.total_income),
        "total_expense": format_amount(stats.total_expense),
        "savings": format_amount(stats.savings),
        "savings_rate_pct": format_rate(stats.savings_rate),
        "investment_amount": format_amount(stats.investment_amount),
        "investment_rate_pct": format_rate(stats.investment_rate),
        "category_breakdown": {
            macro.label: format_amount(amount)
            for macro, amount in stats.category_breakdown.items()
        },
    }


def _single_line(text: str) -> str:
    return " ".join(text.split())


def format_transaction_line(transaction: Transaction) -> str:
    # Free text is collapsed so each transaction stays on one payload line
    note = _single_line(transaction.note) or NO_NOTE
    return (
        f"{transaction.date.date().isoformat()} - {_single_line(transaction.category_name)}: "
        f"{format_amount(transaction.amount)} [{note}]"
    )


def build_report_request(
    report_type: str,
    period_label: str,
    stats: Stats,
    transactions: Iterable[Transaction],
    sample_size: int,
    prev_stats: Optional[Stats] = None,
    user_note: str = "",
) -> ReportRequest:
    """Assemble a ReportRequest with a bounded transaction sample."""
    return ReportRequest(
        report_type=report_type,
        period_label=period_label,
        stats=stats,
        prev_stats=prev_stats,
        transaction_sample=select_transaction_sample(transactions, sample_size),
        user_note=user_note.strip(),
    )


def render_report_payload(request: ReportRequest) -> str:
    """The data section of the prompt, one fact per line."""
    figures = format_stats(request.stats)
    lines = [
        f"Report period: {request.period_label} ({request.report_type})",
        f"User note: {request.user_note or 'none'}",
        f"Total income: {figures['total_income']}",
        f"Total expense: {figures['total_expense']}",
        f"Net savings: {figures['savings']} (savings rate: {figures['savings_rate_pct']}%)",
        f"Investment: {figures['investment_amount']} "
        f"(investment rate: {figures['investment_rate_pct']}%)",
        f"Spending structure: {json.dumps(figures['category_breakdown'], ensure_ascii=False)}",
    ]

    if request.prev_stats is not None:
        previous = format_stats(request.prev_stats)
        lines.append(
            f"Previous period: income {previous['total_income']}, "
            f"expense {previous['total_expense']}, "
            f"savings {previous['savings']} "
            f"(savings rate: {previous['savings_rate_pct']}%)"
        )
        lines.append(
            "Previous spending structure: "
            f"{json.dumps(previous['category_breakdown'], ensure_ascii=False)}"
        )

    lines.append(f"Transactions (largest {len(request.transaction_sample)}):")
    if request.transaction_sample:
        lines.extend(format_transaction_line(t) for t in request.transaction_sample)
    else:
        lines.append("(none)")

    return "\n".join(lines)
