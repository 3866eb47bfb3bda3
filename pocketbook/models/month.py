"""
Month-Scoped Models for Pocketbook

Everything that belongs to one calendar month:
1. MonthStatus - whether the month has been initialized
2. Snapshots - frozen copies of master records for the month
3. Ledger records - paid/received flags per (entity, month, year)
4. BankBalance - the balance entered for the month
5. MonthlyOverview - computed totals for a month

DESIGN DECISION: Snapshots are immutable once created. Later edits to
a master record do NOT flow into months that were already initialized;
the drift is resolved only by regenerating the month.
"""

from calendar import monthrange
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from pocketbook.models.budget import Budget, Income, IncomeCategory, RecurringExpense


# =============================================================================
# MONTH KEY
# =============================================================================

class MonthKey(BaseModel):
    """A validated (month, year) pair."""
    model_config = ConfigDict(frozen=True)

    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=1, le=9999)

    @classmethod
    def of(cls, month: int, year: int) -> "MonthKey":
        return cls(month=month, year=year)

    @classmethod
    def from_date(cls, value: date) -> "MonthKey":
        return cls(month=value.month, year=value.year)

    def previous(self) -> Optional["MonthKey"]:
        """
        The chronologically preceding month (January wraps to December).

        Returns None for January of year 1, which has no previous month.
        """
        if self.month == 1:
            if self.year == 1:
                return None
            return MonthKey(month=12, year=self.year - 1)
        return MonthKey(month=self.month - 1, year=self.year)

    def next(self) -> "MonthKey":
        if self.month == 12:
            return MonthKey(month=1, year=self.year + 1)
        return MonthKey(month=self.month + 1, year=self.year)

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, monthrange(self.year, self.month)[1])

    def __str__(self) -> str:
        return f"{self.month:02d}/{self.year}"


# =============================================================================
# MONTH STATUS
# =============================================================================

class MonthStatus(BaseModel):
    """
    Initialization state of one calendar month.

    At most one row exists per (month, year).
    """
    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(default_factory=uuid4)
    month: int = Field(..., ge=1, le=12)
    year: int
    is_initialized: bool = False
    initialized_at: Optional[datetime] = None
    last_regenerated_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


# =============================================================================
# SNAPSHOTS
# =============================================================================

class MonthlyBudgetSnapshot(BaseModel):
    """Budget as it was when the month was initialized."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(default_factory=uuid4)
    month: int = Field(..., ge=1, le=12)
    year: int
    original_budget_id: UUID = Field(
        ...,
        description="Live budget this snapshot was copied from"
    )
    name: str
    amount: Decimal
    category_id: Optional[UUID] = None
    description: Optional[str] = None
    count_as_fixed_expense: bool = False
    created_at: datetime = Field(default_factory=datetime.utcnow)
    modified_at: datetime = Field(default_factory=datetime.utcnow)

    @classmethod
    def from_budget(cls, budget: Budget, key: MonthKey) -> "MonthlyBudgetSnapshot":
        return cls(
            month=key.month,
            year=key.year,
            original_budget_id=budget.id,
            name=budget.name,
            amount=budget.amount,
            category_id=budget.category_id,
            description=budget.description,
            count_as_fixed_expense=budget.count_as_fixed_expense,
        )


class MonthlyRecurringExpenseSnapshot(BaseModel):
    """Recurring expense as it was when the month was initialized."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(default_factory=uuid4)
    month: int = Field(..., ge=1, le=12)
    year: int
    original_expense_id: UUID
    name: str
    amount: Decimal
    day_of_month: int
    category_id: Optional[UUID] = None
    description: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    modified_at: datetime = Field(default_factory=datetime.utcnow)

    @classmethod
    def from_expense(
        cls,
        expense: RecurringExpense,
        key: MonthKey,
    ) -> "MonthlyRecurringExpenseSnapshot":
        return cls(
            month=key.month,
            year=key.year,
            original_expense_id=expense.id,
            name=expense.name,
            amount=expense.amount,
            day_of_month=expense.day_of_month,
            category_id=expense.category_id,
            description=expense.description,
        )


class MonthlyIncomeSnapshot(BaseModel):
    """Income source as it was when the month was initialized."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(default_factory=uuid4)
    month: int = Field(..., ge=1, le=12)
    year: int
    original_income_id: UUID
    name: str
    amount: Decimal
    day_of_month: int
    category: IncomeCategory
    description: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    modified_at: datetime = Field(default_factory=datetime.utcnow)

    @classmethod
    def from_income(cls, income: Income, key: MonthKey) -> "MonthlyIncomeSnapshot":
        return cls(
            month=key.month,
            year=key.year,
            original_income_id=income.id,
            name=income.name,
            amount=income.amount,
            day_of_month=income.day_of_month,
            category=income.category,
            description=income.description,
        )


# =============================================================================
# LEDGER
# =============================================================================

class PaymentRecord(BaseModel):
    """
    Paid flag for one expense in one month.

    expense_id is the id of a recurring expense or of a one-time
    expense transaction. Unique per (expense_id, month, year).
    """
    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(default_factory=uuid4)
    expense_id: UUID
    month: int = Field(..., ge=1, le=12)
    year: int
    is_paid: bool = False
    paid_date: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    modified_at: Optional[datetime] = None


class IncomeRecord(BaseModel):
    """Received flag for one income source in one month."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(default_factory=uuid4)
    income_id: UUID
    month: int = Field(..., ge=1, le=12)
    year: int
    is_received: bool = False
    received_date: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    modified_at: Optional[datetime] = None


# =============================================================================
# BANK BALANCE
# =============================================================================

class BankBalance(BaseModel):
    """Bank balance entered for one month. Created at zero on first read."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(default_factory=uuid4)
    month: int = Field(..., ge=1, le=12)
    year: int
    current_balance: Decimal = Decimal("0")
    last_updated: datetime = Field(default_factory=datetime.utcnow)


# =============================================================================
# OVERVIEW
# =============================================================================

class BudgetLine(BaseModel):
    """One budget in the monthly overview."""

    budget_id: UUID
    name: str
    budget_amount: Decimal
    spent_amount: Decimal

    @property
    def remaining_amount(self) -> Decimal:
        return self.budget_amount - self.spent_amount

    @property
    def progress(self) -> float:
        if self.budget_amount <= 0:
            return 0.0
        return float(self.spent_amount / self.budget_amount)


class RecurringExpenseLine(BaseModel):
    expense_id: UUID
    name: str
    amount: Decimal
    day_of_month: int
    is_paid: bool


class OneTimeExpenseLine(BaseModel):
    expense_id: UUID
    name: str
    amount: Decimal
    expense_date: date
    is_paid: bool


class IncomeLine(BaseModel):
    income_id: UUID
    name: str
    amount: Decimal
    day_of_month: int
    is_received: bool


class MonthlyOverview(BaseModel):
    """
    Totals for one month.

    `from_snapshots` tells whether the lines come from the month's frozen
    snapshots (initialized month) or from the live master records.
    """

    month: int
    year: int
    from_snapshots: bool
    budgets: list[BudgetLine] = Field(default_factory=list)
    recurring_expenses: list[RecurringExpenseLine] = Field(default_factory=list)
    one_time_expenses: list[OneTimeExpenseLine] = Field(default_factory=list)
    incomes: list[IncomeLine] = Field(default_factory=list)
    bank_balance: Decimal = Decimal("0")

    @property
    def total_budget(self) -> Decimal:
        return sum((line.budget_amount for line in self.budgets), Decimal("0"))

    @property
    def total_budget_spent(self) -> Decimal:
        return sum((line.spent_amount for line in self.budgets), Decimal("0"))

    @property
    def total_recurring(self) -> Decimal:
        return sum((line.amount for line in self.recurring_expenses), Decimal("0"))

    @property
    def total_recurring_paid(self) -> Decimal:
        return sum(
            (line.amount for line in self.recurring_expenses if line.is_paid),
            Decimal("0"),
        )

    @property
    def total_one_time(self) -> Decimal:
        return sum((line.amount for line in self.one_time_expenses), Decimal("0"))

    @property
    def total_one_time_paid(self) -> Decimal:
        return sum(
            (line.amount for line in self.one_time_expenses if line.is_paid),
            Decimal("0"),
        )

    @property
    def grand_total(self) -> Decimal:
        return self.total_budget + self.total_recurring + self.total_one_time

    @property
    def grand_paid(self) -> Decimal:
        return self.total_budget_spent + self.total_recurring_paid + self.total_one_time_paid

    @property
    def grand_remaining(self) -> Decimal:
        return self.grand_total - self.grand_paid

    @property
    def total_income(self) -> Decimal:
        return sum((line.amount for line in self.incomes), Decimal("0"))

    @property
    def total_income_received(self) -> Decimal:
        return sum(
            (line.amount for line in self.incomes if line.is_received),
            Decimal("0"),
        )

    @property
    def remaining_after_payments(self) -> Decimal:
        """Bank balance minus everything still to be paid this month."""
        return self.bank_balance - self.grand_remaining

    @property
    def is_empty(self) -> bool:
        return not (self.budgets or self.recurring_expenses or self.one_time_expenses)
