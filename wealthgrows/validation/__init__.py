"""Input validation package."""

from wealthgrows.validation.validator import (
    TransactionValidationError,
    TransactionValidator,
    evaluate_amount_expression,
)

__all__ = [
    "TransactionValidationError",
    "TransactionValidator",
    "evaluate_amount_expression",
]
