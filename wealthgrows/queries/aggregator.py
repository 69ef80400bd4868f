"""
Statistics Aggregator

DESIGN DECISION: Aggregation is a PURE fold over a transaction list.
The caller filters to a period first; this module never looks at dates.
No caching, no module state: the same input always gives the same Stats,
whatever order the transactions arrive in.
"""

from collections.abc import Iterable
from decimal import Decimal

from wealthgrows.models.ledger import MacroCategory, Transaction, TransactionType
from wealthgrows.models.stats import ZERO, Stats, seeded_breakdown


def calculate_stats(transactions: Iterable[Transaction]) -> Stats:
    """
    Fold transactions into a Stats summary.

    Rules:
    - INCOME adds to total_income only.
    - EXPENSE adds to total_expense, to its macro bucket (if it is one
      of the five expense macro categories), to its specific category,
      and to investment_amount when the macro category is INVESTMENT.
    - TRANSFER is record-keeping only and adds to nothing.

    An expense filed under a non-expense macro category (INCOME or
    TRANSFER) still counts toward total_expense, but toward no macro
    bucket.
    """
    total_income = ZERO
    total_expense = ZERO
    investment_amount = ZERO
    category_breakdown = seeded_breakdown()
    specific_breakdown: dict[str, Decimal] = {}

    for t in transactions:
        if t.type == TransactionType.INCOME:
            total_income += t.amount
        elif t.type == TransactionType.EXPENSE:
            total_expense += t.amount

            if t.macro_category in category_breakdown:
                category_breakdown[t.macro_category] += t.amount

            specific_breakdown[t.category_id] = (
                specific_breakdown.get(t.category_id, ZERO) + t.amount
            )

            if t.macro_category == MacroCategory.INVESTMENT:
                investment_amount += t.amount

    investment_rate = investment_amount / total_income if total_income > 0 else ZERO

    # Investment is a savings vehicle, not consumption
    consumption = total_expense - investment_amount
    savings = total_income - consumption
    savings_rate = savings / total_income if total_income > 0 else ZERO

    return Stats(
        total_income=total_income,
        total_expense=total_expense,
        savings=savings,
        savings_rate=savings_rate,
        investment_amount=investment_amount,
        investment_rate=investment_rate,
        category_breakdown=category_breakdown,
        specific_category_breakdown=specific_breakdown,
    )
