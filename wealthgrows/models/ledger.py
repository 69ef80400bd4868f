"""
Core Ledger Models for WealthGrows

These models define the strict schemas for everything the ledger persists.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Be serializable for storage and logging
4. Keep past records stable when categories change

DESIGN DECISION: A Transaction carries a frozen copy of its category's
name and macro grouping. We never join against the live category list,
so editing or deleting a category cannot rewrite history.
"""

from datetime import date as date_type
from datetime import datetime, time
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


TWO_PLACES = Decimal("0.01")


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a money movement."""
    EXPENSE = "EXPENSE"
    INCOME = "INCOME"
    TRANSFER = "TRANSFER"  # Record-keeping only, never counted in totals


class MacroCategory(str, Enum):
    """
    Small fixed taxonomy used for aggregate reporting.

    Orthogonal to the user-defined fine-grained categories: many
    categories map onto one macro category.
    """
    SURVIVAL = "survival"
    DAILY_FOOD = "daily_food"
    ENJOYMENT = "enjoyment"
    NECESSARY = "necessary"
    INVESTMENT = "investment"
    INCOME = "income"
    TRANSFER = "transfer"

    @property
    def label(self) -> str:
        """Human-readable name for dashboards and reports."""
        return MACRO_CATEGORY_LABELS[self]


MACRO_CATEGORY_LABELS = {
    MacroCategory.SURVIVAL: "Fixed Survival Cost",
    MacroCategory.DAILY_FOOD: "Eat & Drink",
    MacroCategory.ENJOYMENT: "Enjoyment",
    MacroCategory.NECESSARY: "Necessary",
    MacroCategory.INVESTMENT: "Investment",
    MacroCategory.INCOME: "Income",
    MacroCategory.TRANSFER: "Transfer",
}


def new_entity_id() -> str:
    """Fresh identifier for a ledger entity; never reused."""
    return uuid4().hex


def parse_ledger_date(value: object) -> datetime:
    """
    Coerce user or storage input into a naive local datetime.

    Accepts datetime, date, ISO 8601 strings and epoch milliseconds.
    Timezone-aware values are converted to local wall-clock time so
    that month/year grouping matches what the user saw when entering.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date_type):
        parsed = datetime.combine(value, time())
    elif isinstance(value, bool):
        raise ValueError("Unparseable date: boolean")
    elif isinstance(value, (int, float)):
        try:
            parsed = datetime.fromtimestamp(value / 1000)
        except (OverflowError, OSError, ValueError) as e:
            raise ValueError(f"Unparseable date: {value!r} ({e})")
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f"Unparseable date: {value!r}")
    else:
        raise ValueError(f"Unparseable date: {value!r}")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


# =============================================================================
# CATEGORY
# =============================================================================

class Category(BaseModel):
    """
    A user-defined or built-in classification.

    `type` says which kind of transaction the category applies to;
    `macro_category` decides where its expenses land in the breakdown.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        default_factory=new_entity_id,
        min_length=1,
        max_length=64,
        description="Unique category ID"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Display name"
    )
    icon: str = Field(
        default="Wallet",
        max_length=50,
        description="Key into the external icon registry"
    )
    type: TransactionType = Field(
        ...,
        description="Transaction type this category applies to"
    )
    macro_category: MacroCategory = Field(
        ...,
        description="Macro grouping used for aggregation"
    )


# =============================================================================
# TRANSACTION
# =============================================================================

class Transaction(BaseModel):
    """
    One money movement.

    CRITICAL: `category_name` and `macro_category` are snapshots taken
    at creation. Build transactions with `from_category` so the copy
    happens in one place.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        default_factory=new_entity_id,
        min_length=1,
        max_length=64,
        description="Unique transaction ID"
    )
    amount: Decimal = Field(
        ...,
        allow_inf_nan=False,
        description="Positive magnitude, two decimal places"
    )
    type: TransactionType
    category_id: str = Field(
        ...,
        min_length=1,
        description="Weak reference to the originating category"
    )
    category_name: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Display name frozen at creation"
    )
    macro_category: MacroCategory = Field(
        ...,
        description="Macro grouping frozen at creation"
    )
    note: str = Field(
        default="",
        max_length=500,
    )
    date: datetime = Field(
        ...,
        description="When the movement happened (naive local time)"
    )

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v: Decimal) -> Decimal:
        """Round to cents; anything not strictly positive is rejected."""
        try:
            rounded = v.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            raise ValueError(f"Amount is out of range: {v}")
        if rounded <= 0:
            raise ValueError(f"Amount must be greater than zero, got {v}")
        return rounded

    @field_validator('date', mode='before')
    @classmethod
    def validate_date(cls, v: object) -> datetime:
        return parse_ledger_date(v)

    @field_validator('note', mode='before')
    @classmethod
    def none_note_is_empty(cls, v: Optional[str]) -> str:
        return "" if v is None else v

    @classmethod
    def from_category(
        cls,
        category: Category,
        amount: Decimal,
        date: object,
        note: str = "",
        display_name: Optional[str] = None,
        transaction_id: Optional[str] = None,
    ) -> "Transaction":
        """
        Create a transaction, copying the category's snapshot fields.

        `display_name` lets the user label this one entry differently
        without renaming the category itself.
        """
        fields = dict(
            amount=amount,
            type=category.type,
            category_id=category.id,
            category_name=(display_name or "").strip() or category.name,
            macro_category=category.macro_category,
            note=note,
            date=date,
        )
        if transaction_id is not None:
            fields["id"] = transaction_id
        return cls(**fields)


# =============================================================================
# BUILT-IN CATEGORIES
# =============================================================================

def _expense(id: str, name: str, icon: str, macro: MacroCategory) -> Category:
    return Category(
        id=id, name=name, icon=icon,
        type=TransactionType.EXPENSE, macro_category=macro,
    )


def _income(id: str, name: str, icon: str) -> Category:
    return Category(
        id=id, name=name, icon=icon,
        type=TransactionType.INCOME, macro_category=MacroCategory.INCOME,
    )


# Seeded on first access to an empty category store
DEFAULT_CATEGORIES: tuple[Category, ...] = (
    _expense("food", "Food & Dining", "Utensils", MacroCategory.DAILY_FOOD),
    _expense("transport", "Transport", "Bus", MacroCategory.NECESSARY),
    _expense("shopping", "Shopping", "ShoppingBag", MacroCategory.ENJOYMENT),
    _expense("entertainment", "Entertainment", "Gamepad2", MacroCategory.ENJOYMENT),
    _expense("medical", "Medical", "Stethoscope", MacroCategory.SURVIVAL),
    _expense("learning", "Learning", "GraduationCap", MacroCategory.INVESTMENT),
    _expense("rent", "Rent", "Home", MacroCategory.SURVIVAL),
    _expense("invest_product", "Investments", "TrendingUp", MacroCategory.INVESTMENT),
    _income("salary", "Salary", "Briefcase"),
    _income("bonus", "Bonus", "Banknote"),
    _income("invest_return", "Investment Return", "TrendingUp"),
    _income("part_time", "Part-time", "Wallet"),
    Category(
        id="transfer",
        name="Transfer",
        icon="HeartHandshake",
        type=TransactionType.TRANSFER,
        macro_category=MacroCategory.TRANSFER,
    ),
)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found in user input."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'not_positive')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )
