"""Report payload package."""

from wealthgrows.reports.payload import (
    build_report_request,
    format_amount,
    format_rate,
    format_stats,
    format_transaction_line,
    render_report_payload,
    select_transaction_sample,
)

__all__ = [
    "build_report_request",
    "format_amount",
    "format_rate",
    "format_stats",
    "format_transaction_line",
    "render_report_payload",
    "select_transaction_sample",
]
