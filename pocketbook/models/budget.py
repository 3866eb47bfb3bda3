"""
Master Record Models for Pocketbook

Master records are the live, user-editable entities: categories, budgets,
recurring expenses and income sources. They exist independently of any
month. Expense transactions live here too: they are created by the user
and are month-scoped through their date alone.

DESIGN DECISION: We use Pydantic v2 models for every entity and let the
storage layer map them to tables. `from_attributes` is enabled so rows
read back from the database validate straight into these models.
"""

from datetime import date as date_type, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class IncomeCategory(str, Enum):
    """Supported income categories."""
    SALARY = "salary"
    ALLOWANCE = "allowance"
    REFUND = "refund"
    OTHER = "other"


# =============================================================================
# CATEGORIES
# =============================================================================

class Category(BaseModel):
    """
    Category referenced by budgets and recurring expenses.

    Default categories are installed once and cannot be deleted.
    """
    model_config = ConfigDict(str_strip_whitespace=True, from_attributes=True)

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Category name"
    )
    color: Optional[str] = Field(
        default=None,
        description="Hex colour used when rendering the category"
    )
    icon: Optional[str] = None
    is_default: bool = False
    created_at: datetime = Field(default_factory=datetime.utcnow)


DEFAULT_CATEGORIES: tuple[tuple[str, str, str], ...] = (
    ("Housing", "🏠", "#3b82f6"),
    ("Utilities", "💡", "#10b981"),
    ("Insurance", "🛡️", "#8b5cf6"),
    ("Subscriptions", "📱", "#f59e0b"),
    ("Transportation", "🚗", "#ef4444"),
    ("Healthcare", "⚕️", "#ec4899"),
    ("Education", "📚", "#6366f1"),
    ("Other", "📦", "#6b7280"),
)


def default_categories() -> list[Category]:
    """Build a fresh copy of the seed category set."""
    return [
        Category(name=name, icon=icon, color=color, is_default=True)
        for name, icon, color in DEFAULT_CATEGORIES
    ]


# =============================================================================
# BUDGETS, RECURRING EXPENSES, INCOME
# =============================================================================

class Budget(BaseModel):
    """
    A monthly spending budget.

    Transactions with a matching budget_id count against it.
    """
    model_config = ConfigDict(str_strip_whitespace=True, from_attributes=True)

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Budget name"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        decimal_places=2,
        description="Amount available per month"
    )
    category_id: Optional[UUID] = None
    description: Optional[str] = None
    count_as_fixed_expense: bool = Field(
        default=False,
        description="Treat the whole budget as a fixed monthly cost"
    )
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.utcnow)
    modified_at: Optional[datetime] = None


class RecurringExpense(BaseModel):
    """A fixed cost that comes back every month on the same day."""
    model_config = ConfigDict(str_strip_whitespace=True, from_attributes=True)

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Expense name"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        decimal_places=2,
        description="Amount due each month"
    )
    day_of_month: int = Field(
        ...,
        ge=1,
        le=31,
        description="Day of the month the expense is due"
    )
    category_id: UUID = Field(
        ...,
        description="Category (required)"
    )
    description: Optional[str] = Field(
        default=None,
        max_length=500
    )
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.utcnow)
    modified_at: Optional[datetime] = None


class Income(BaseModel):
    """A recurring income source."""
    model_config = ConfigDict(str_strip_whitespace=True, from_attributes=True)

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(..., min_length=1, max_length=100)
    amount: Decimal = Field(..., ge=0, decimal_places=2)
    day_of_month: int = Field(default=1, ge=1, le=31)
    category: IncomeCategory = IncomeCategory.SALARY
    description: Optional[str] = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.utcnow)
    modified_at: Optional[datetime] = None


# =============================================================================
# TRANSACTIONS
# =============================================================================

class Expense(BaseModel):
    """
    A single spending transaction.

    budget_id None means a one-time expense; otherwise the transaction
    counts against that budget in the month of its date. Never snapshotted.
    """
    model_config = ConfigDict(str_strip_whitespace=True, from_attributes=True)

    id: UUID = Field(default_factory=uuid4)
    budget_id: Optional[UUID] = None
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    amount: Decimal = Field(..., decimal_places=2)
    date: date_type
    is_deleted: bool = False
    created_at: datetime = Field(default_factory=datetime.utcnow)
    modified_at: Optional[datetime] = None

    @property
    def is_one_time(self) -> bool:
        return self.budget_id is None
