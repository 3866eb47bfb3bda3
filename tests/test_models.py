"""
Tests for Pocketbook models

Test strategy:
1. Unit tests for the Pydantic models (this file)
2. Storage and service tests against a throwaway SQLite file
3. No shared state between tests (fresh database per test)
"""

import pytest
from datetime import date, datetime
from decimal import Decimal
from uuid import uuid4

from pocketbook.models.budget import (
    DEFAULT_CATEGORIES,
    Budget,
    Category,
    Expense,
    Income,
    IncomeCategory,
    RecurringExpense,
    default_categories,
)
from pocketbook.models.month import (
    BudgetLine,
    MonthKey,
    MonthlyBudgetSnapshot,
    MonthlyIncomeSnapshot,
    MonthlyOverview,
    MonthlyRecurringExpenseSnapshot,
    MonthStatus,
)


class TestMasterRecordModels:
    """Tests for master record Pydantic models."""

    def test_budget_creation(self):
        """Test Budget model creation."""
        budget = Budget(name="Groceries", amount=Decimal("400.00"))
        assert budget.name == "Groceries"
        assert budget.is_active is True
        assert budget.count_as_fixed_expense is False
        assert budget.modified_at is None

    def test_budget_strips_whitespace(self):
        """Test that whitespace is stripped from names."""
        budget = Budget(name="  Groceries  ", amount=Decimal("1"))
        assert budget.name == "Groceries"

    def test_budget_rejects_zero_amount(self):
        """Test that a budget needs a positive amount."""
        with pytest.raises(ValueError):
            Budget(name="Groceries", amount=Decimal("0"))

    def test_budget_rejects_fractional_cents(self):
        """Test that amounts are limited to two decimals."""
        with pytest.raises(ValueError):
            Budget(name="Groceries", amount=Decimal("10.005"))

    def test_recurring_expense_day_bounds(self):
        """Test that day_of_month must be 1-31."""
        with pytest.raises(ValueError):
            RecurringExpense(name="Rent", amount=Decimal("900"), day_of_month=32, category_id=uuid4())
        with pytest.raises(ValueError):
            RecurringExpense(name="Rent", amount=Decimal("900"), day_of_month=0, category_id=uuid4())

    def test_recurring_expense_requires_category(self):
        """Test that a recurring expense needs a category."""
        with pytest.raises(ValueError):
            RecurringExpense(name="Rent", amount=Decimal("900"), day_of_month=1)

    def test_income_defaults(self):
        """Test Income defaults."""
        income = Income(name="Salary", amount=Decimal("3000"))
        assert income.category == IncomeCategory.SALARY
        assert income.day_of_month == 1

    def test_expense_one_time(self):
        """Test that an expense without a budget is one-time."""
        one_time = Expense(name="Plumber", amount=Decimal("80"), date=date(2025, 3, 1))
        booked = Expense(name="Market", amount=Decimal("5"), date=date(2025, 3, 1), budget_id=uuid4())
        assert one_time.is_one_time is True
        assert booked.is_one_time is False

    def test_default_categories(self):
        """Test the seed category set."""
        categories = default_categories()
        assert [c.name for c in categories] == [name for name, _, _ in DEFAULT_CATEGORIES]
        assert all(c.is_default for c in categories)
        assert len({c.id for c in categories}) == len(categories)

    def test_category_name_length(self):
        """Test that category names are capped at 50 characters."""
        with pytest.raises(ValueError):
            Category(name="x" * 51)


class TestMonthKey:
    """Tests for the MonthKey helper."""

    def test_previous_wraps_year(self):
        """Test that January's previous month is December of the year before."""
        assert MonthKey.of(1, 2025).previous() == MonthKey.of(12, 2024)

    def test_previous_same_year(self):
        """Test previous month inside a year."""
        assert MonthKey.of(7, 2025).previous() == MonthKey.of(6, 2025)

    def test_first_month_has_no_previous(self):
        """Test that January of year 1 has no previous month."""
        assert MonthKey.of(1, 1).previous() is None
        assert MonthKey.of(2, 1).previous() == MonthKey.of(1, 1)

    def test_next_wraps_year(self):
        """Test that December's next month is January of the year after."""
        assert MonthKey.of(12, 2024).next() == MonthKey.of(1, 2025)

    def test_rejects_month_13(self):
        """Test that months outside 1-12 are rejected."""
        with pytest.raises(ValueError):
            MonthKey.of(13, 2025)
        with pytest.raises(ValueError):
            MonthKey.of(0, 2025)

    def test_day_bounds(self):
        """Test first and last day, including leap years."""
        assert MonthKey.of(2, 2024).last_day == date(2024, 2, 29)
        assert MonthKey.of(2, 2025).last_day == date(2025, 2, 28)
        assert MonthKey.of(4, 2025).first_day == date(2025, 4, 1)

    def test_from_date_and_str(self):
        """Test construction from a date and display format."""
        key = MonthKey.from_date(date(2025, 3, 17))
        assert str(key) == "03/2025"


class TestSnapshotModels:
    """Tests for snapshot construction."""

    def test_budget_snapshot_copies_fields(self):
        """Test that a budget snapshot copies the master fields."""
        budget = Budget(
            name="Groceries",
            amount=Decimal("400.00"),
            description="Food",
            count_as_fixed_expense=True,
            category_id=uuid4(),
        )
        snapshot = MonthlyBudgetSnapshot.from_budget(budget, MonthKey.of(3, 2025))

        assert snapshot.original_budget_id == budget.id
        assert snapshot.id != budget.id
        assert (snapshot.month, snapshot.year) == (3, 2025)
        assert snapshot.amount == Decimal("400.00")
        assert snapshot.category_id == budget.category_id
        assert snapshot.count_as_fixed_expense is True

    def test_snapshot_independent_of_master(self):
        """Test that changing the master afterwards doesn't change the snapshot."""
        expense = RecurringExpense(name="Rent", amount=Decimal("900"), day_of_month=1, category_id=uuid4())
        snapshot = MonthlyRecurringExpenseSnapshot.from_expense(expense, MonthKey.of(3, 2025))

        expense.amount = Decimal("1200")

        assert snapshot.amount == Decimal("900")

    def test_income_snapshot_keeps_category(self):
        """Test that income snapshots keep the income category."""
        income = Income(name="Refund", amount=Decimal("20"), category=IncomeCategory.REFUND)
        snapshot = MonthlyIncomeSnapshot.from_income(income, MonthKey.of(3, 2025))
        assert snapshot.category == IncomeCategory.REFUND
        assert snapshot.original_income_id == income.id

    def test_month_status_defaults(self):
        """Test that a new status row is not initialized."""
        status = MonthStatus(month=3, year=2025)
        assert status.is_initialized is False
        assert status.initialized_at is None
        assert isinstance(status.created_at, datetime)


class TestMonthlyOverviewModel:
    """Tests for overview arithmetic."""

    def test_budget_line_overspent(self):
        """Test a budget line that went over its amount."""
        line = BudgetLine(
            budget_id=uuid4(),
            name="Fun",
            budget_amount=Decimal("100"),
            spent_amount=Decimal("150"),
        )
        assert line.remaining_amount == Decimal("-50")
        assert line.progress == pytest.approx(1.5)

    def test_remaining_after_payments_without_lines(self):
        """Test that an empty month leaves the whole balance."""
        overview = MonthlyOverview(month=3, year=2025, from_snapshots=False, bank_balance=Decimal("250"))
        assert overview.is_empty
        assert overview.remaining_after_payments == Decimal("250")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
