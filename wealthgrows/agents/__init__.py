"""AI Agents package."""

from wealthgrows.agents.report_agent import (
    MissingCredentialError,
    ReportAgent,
    ReportError,
    ReportServiceError,
    SYSTEM_INSTRUCTION,
)

__all__ = [
    "MissingCredentialError",
    "ReportAgent",
    "ReportError",
    "ReportServiceError",
    "SYSTEM_INSTRUCTION",
]
