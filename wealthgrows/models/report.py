"""
Report Request Model

What the core hands to the external report generator. The
transaction sample is already bounded and ordered by the time a
request is built, so the payload is deterministic for a given ledger.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from wealthgrows.models.ledger import Transaction
from wealthgrows.models.stats import Stats


class ReportRequest(BaseModel):
    """Input for one financial review."""

    request_id: UUID = Field(
        default_factory=uuid4
    )
    created_at: datetime = Field(
        default_factory=datetime.utcnow
    )

    report_type: str = Field(
        ...,
        pattern="^(monthly|yearly)$",
        description="Kind of period being reviewed"
    )
    period_label: str = Field(
        ...,
        min_length=1,
        description="Period shown to the analyst, e.g. 2024-01 or 2024"
    )

    stats: Stats
    prev_stats: Optional[Stats] = Field(
        default=None,
        description="Previous period, for monthly comparisons"
    )

    transaction_sample: list[Transaction] = Field(
        default_factory=list,
        description="Bounded top-N sample, largest amounts first"
    )
    user_note: str = Field(
        default="",
        max_length=1000,
        description="Free-text context from the user"
    )
