"""
Transaction Input Validation

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - INPUT VALIDATION:
- Amount parsing (plain numbers or keypad expressions like "12.5+3")
- Required field presence
- Date parsing

STAGE 2 - SEMANTIC VALIDATION:
- Amount must be strictly positive after rounding to cents
- Amount must be below the configured sanity limit

Only when both stages pass is a Transaction built. A rejected entry
never reaches the store, so nothing is ever partially written.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them so the user can correct the input.
"""

import ast
import operator
import re
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Union

from pydantic import ValidationError

from wealthgrows.config import AppSettings, get_settings
from wealthgrows.models.ledger import (
    TWO_PLACES,
    Category,
    Transaction,
    ValidationIssue,
    parse_ledger_date,
)


AmountInput = Union[str, Decimal, int, float]

# Characters a keypad expression may contain; everything else is dropped
_EXPRESSION_NOISE = re.compile(r"[^-()\d/*+.]")
_MAX_EXPRESSION_LENGTH = 100

_BINARY_OPERATORS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
}
_UNARY_OPERATORS = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}


class TransactionValidationError(ValueError):
    """
    User input cannot become a Transaction.

    Carries every issue found so the UI can show them all at once.
    """

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = issues
        summary = "; ".join(issue.message for issue in issues) or "Invalid transaction"
        super().__init__(summary)

    @property
    def fields(self) -> list[str]:
        return [issue.field for issue in self.issues]


def _evaluate_node(node: ast.AST) -> Decimal:
    if isinstance(node, ast.Expression):
        return _evaluate_node(node.body)
    if isinstance(node, ast.Constant) and type(node.value) in (int, float):
        return Decimal(str(node.value))
    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPERATORS:
        left = _evaluate_node(node.left)
        right = _evaluate_node(node.right)
        return _BINARY_OPERATORS[type(node.op)](left, right)
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPERATORS:
        return _UNARY_OPERATORS[type(node.op)](_evaluate_node(node.operand))
    raise ValueError(f"Unsupported element in amount: {type(node).__name__}")


def evaluate_amount_expression(expression: str) -> Decimal:
    """
    Evaluate a keypad amount such as "12.5+3*2" with Decimal arithmetic.

    Only numbers, + - * / and parentheses are allowed. Any other
    characters (currency symbols, spaces) are stripped first.

    Raises:
        ValueError: If the expression is empty, malformed or divides by zero
    """
    cleaned = _EXPRESSION_NOISE.sub("", expression)
    if not cleaned:
        raise ValueError("Amount is empty")
    if len(cleaned) > _MAX_EXPRESSION_LENGTH:
        raise ValueError("Amount expression is too long")
    try:
        tree = ast.parse(cleaned, mode="eval")
    except SyntaxError:
        raise ValueError(f"Amount is not a valid number or expression: {expression!r}")
    try:
        return _evaluate_node(tree)
    except ArithmeticError as e:
        raise ValueError(f"Amount could not be computed: {e}")


class TransactionValidator:
    """
    Turns raw user input into a validated Transaction.

    Stage 1: Input validation (parsing, required fields)
    Stage 2: Semantic validation (positivity, sanity limit)
    """

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or get_settings().app

    def _parse_amount(
        self,
        raw: Optional[AmountInput],
    ) -> tuple[Optional[Decimal], list[ValidationIssue]]:
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            return None, [ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
                suggested_fix="Enter an amount greater than zero",
            )]
        try:
            if isinstance(raw, str):
                value = evaluate_amount_expression(raw)
            elif isinstance(raw, bool):
                raise ValueError("Amount must be a number")
            else:
                value = Decimal(str(raw))
            if not value.is_finite():
                raise ValueError("Amount must be a finite number")
            return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP), []
        except (ValueError, InvalidOperation) as e:
            return None, [ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message=str(e) or "Amount is not a valid number",
                suggested_fix="Use digits and + - * / only",
            )]

    def _parse_date(
        self,
        raw: object,
    ) -> tuple[Optional[datetime], list[ValidationIssue]]:
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            return None, [ValidationIssue(
                field="date",
                issue_type="missing",
                message="Date is required",
            )]
        try:
            return parse_ledger_date(raw), []
        except ValueError as e:
            return None, [ValidationIssue(
                field="date",
                issue_type="invalid_format",
                message=str(e),
                suggested_fix="Use a date like 2024-01-31",
            )]

    def _validate_semantic(self, amount: Decimal) -> list[ValidationIssue]:
        issues = []
        if amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="not_positive",
                message=f"Amount must be greater than zero (got {amount})",
                suggested_fix="Record money going out as an expense, not a negative amount",
            ))
        elif amount > Decimal(str(self._settings.max_transaction_amount)):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="too_large",
                message=f"Amount ({amount:,.2f}) is above the allowed maximum",
                suggested_fix="Please verify this amount is correct",
            ))
        return issues

    def build_transaction(
        self,
        category: Optional[Category],
        amount: Optional[AmountInput],
        date: object,
        note: str = "",
        display_name: Optional[str] = None,
    ) -> Transaction:
        """
        Validate input and build a Transaction from `category`.

        The category's name and macro category are copied onto the
        transaction here; later category edits do not reach it.

        Raises:
            TransactionValidationError: With every issue found
        """
        issues: list[ValidationIssue] = []

        # Stage 1: input
        if category is None:
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Please choose a category",
            ))
        parsed_amount, amount_issues = self._parse_amount(amount)
        issues.extend(amount_issues)
        parsed_date, date_issues = self._parse_date(date)
        issues.extend(date_issues)

        # Stage 2: semantics, only on a parsed amount
        if parsed_amount is not None:
            issues.extend(self._validate_semantic(parsed_amount))

        if issues:
            raise TransactionValidationError(issues)

        try:
            return Transaction.from_category(
                category,
                amount=parsed_amount,
                date=parsed_date,
                note=note or "",
                display_name=display_name,
            )
        except ValidationError as e:
            raise TransactionValidationError([
                ValidationIssue(
                    field=".".join(str(part) for part in error["loc"]) or "transaction",
                    issue_type=error["type"],
                    message=error["msg"],
                )
                for error in e.errors()
            ]) from e

    @staticmethod
    def get_user_friendly_summary(error: TransactionValidationError) -> str:
        """One line per issue, with the suggested fix when there is one."""
        lines = ["This entry could not be saved:"]
        for issue in error.issues:
            lines.append(f"   • {issue.message}")
            if issue.suggested_fix:
                lines.append(f"     {issue.suggested_fix}")
        return "\n".join(lines)
