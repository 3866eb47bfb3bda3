"""
Tests for the master-data services.
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest
from structlog.testing import capture_logs

from pocketbook.audit import AuditLogger
from pocketbook.models.budget import (
    DEFAULT_CATEGORIES,
    Budget,
    Category,
    Expense,
    Income,
    RecurringExpense,
)
from pocketbook.services import (
    BankBalanceService,
    BudgetService,
    IncomeService,
    NotFoundError,
    RecurringExpenseService,
    TransactionService,
)


class TestBudgetService:
    """Tests for BudgetService."""

    async def test_update_sets_modified_at(self, store):
        """Test that update stamps modified_at."""
        service = BudgetService(store)
        budget = await service.add_budget(Budget(name="Groceries", amount=Decimal("100")))
        assert budget.modified_at is None

        await service.update_budget(budget.model_copy(update={"name": "Food"}))

        loaded = await service.get_budget_by_id(budget.id)
        assert loaded.name == "Food"
        assert loaded.modified_at is not None

    async def test_update_unknown_raises(self, store):
        """Test that updating a missing budget raises NotFoundError."""
        service = BudgetService(store)
        with pytest.raises(NotFoundError):
            await service.update_budget(Budget(name="Ghost", amount=Decimal("1")))

    async def test_total_counts_active_only(self, master_data, store):
        """Test that inactive budgets are left out of the total."""
        assert await BudgetService(store).get_total_budget() == Decimal("550.00")

    async def test_delete(self, store):
        """Test deleting a budget."""
        service = BudgetService(store)
        budget = await service.add_budget(Budget(name="Groceries", amount=Decimal("100")))

        assert await service.delete_budget(budget.id) is True
        assert await service.get_budget_by_id(budget.id) is None


class TestRecurringExpenseService:
    """Tests for RecurringExpenseService and categories."""

    async def test_categories_seeded_on_first_use(self, store):
        """Test that the default categories appear on first access."""
        service = RecurringExpenseService(store)

        categories = await service.get_all_categories()

        assert len(categories) == len(DEFAULT_CATEGORIES)
        assert all(category.is_default for category in categories)

    async def test_seed_only_when_empty(self, store):
        """Test that seeding does nothing once any category exists."""
        await store.insert_category(Category(name="Mine"))
        service = RecurringExpenseService(store)

        assert await service.seed_default_categories() == 0
        assert [c.name for c in await service.get_all_categories()] == ["Mine"]

    async def test_seeding_can_be_disabled(self, store):
        """Test seed_default_categories=False."""
        service = RecurringExpenseService(store, seed_default_categories=False)
        assert await service.get_all_categories() == []

    async def test_seeding_logged(self, store):
        """Test that seeding emits a categories_seeded event."""
        with capture_logs() as logs:
            service = RecurringExpenseService(store, audit_logger=AuditLogger())
            await service.seed_default_categories()

        assert logs[0]["event_type"] == "categories_seeded"
        assert logs[0]["details"]["count"] == len(DEFAULT_CATEGORIES)

    async def test_default_category_cannot_be_deleted(self, store):
        """Test that default categories are protected."""
        service = RecurringExpenseService(store)
        default = (await service.get_all_categories())[0]

        assert await service.delete_category(default.id) is False
        assert await service.get_category_by_id(default.id) is not None

    async def test_category_in_use_cannot_be_deleted(self, store):
        """Test that a category used by a recurring expense is protected."""
        service = RecurringExpenseService(store)
        pets = await service.add_category(Category(name="Pets"))
        food = await service.add_expense(
            RecurringExpense(name="Cat food", amount=Decimal("25"), day_of_month=3, category_id=pets.id)
        )

        assert await service.delete_category(pets.id) is False

        await service.delete_expense(food.id)
        assert await service.delete_category(pets.id) is True

    async def test_delete_unknown_category(self, store):
        """Test that deleting an unknown category reports False."""
        assert await RecurringExpenseService(store).delete_category(uuid4()) is False

    async def test_total_monthly_expenses(self, master_data, store):
        """Test that inactive recurring expenses are left out."""
        service = RecurringExpenseService(store)
        assert await service.get_total_monthly_expenses() == Decimal("995.50")

    async def test_update_expense(self, master_data, store):
        """Test updating a recurring expense."""
        service = RecurringExpenseService(store)
        rent = master_data["recurring_expenses"][0]

        await service.update_expense(rent.model_copy(update={"amount": Decimal("1000.00")}))

        loaded = await service.get_expense_by_id(rent.id)
        assert loaded.amount == Decimal("1000.00")
        assert loaded.modified_at is not None


class TestIncomeService:
    """Tests for IncomeService."""

    async def test_total_monthly_income(self, store):
        """Test that only active incomes are summed."""
        service = IncomeService(store)
        await service.add_income(Income(name="Salary", amount=Decimal("3000")))
        await service.add_income(Income(name="Side job", amount=Decimal("250.50")))
        await service.add_income(Income(name="Old job", amount=Decimal("999"), is_active=False))

        assert await service.get_total_monthly_income() == Decimal("3250.50")
        assert len(await service.get_all_incomes(active_only=True)) == 2

    async def test_update_and_delete(self, store):
        """Test updating and deleting an income."""
        service = IncomeService(store)
        income = await service.add_income(Income(name="Salary", amount=Decimal("3000")))

        await service.update_income(income.model_copy(update={"day_of_month": 28}))
        assert (await service.get_income_by_id(income.id)).day_of_month == 28

        assert await service.delete_income(income.id) is True
        assert await service.get_income_by_id(income.id) is None


class TestTransactionService:
    """Tests for TransactionService."""

    async def test_budget_and_one_time_totals(self, store):
        """Test per-budget and one-time totals for a month."""
        service = TransactionService(store)
        budget_id = uuid4()
        await service.add_expense(
            Expense(name="Supermarket", amount=Decimal("60.10"), date=date(2025, 3, 4), budget_id=budget_id)
        )
        await service.add_expense(
            Expense(name="Market", amount=Decimal("14.90"), date=date(2025, 3, 18), budget_id=budget_id)
        )
        await service.add_expense(Expense(name="Plumber", amount=Decimal("120"), date=date(2025, 3, 9)))

        assert await service.get_total_for_budget(budget_id, 3, 2025) == Decimal("75.00")
        assert await service.get_total_one_time_expenses_for_month(3, 2025) == Decimal("120")
        assert len(await service.get_all_expenses_for_month(3, 2025)) == 3
        assert len(await service.get_expenses_for_budget(budget_id, 3, 2025)) == 2

    async def test_deleted_transaction_not_counted(self, store):
        """Test that soft-deleted transactions drop out of totals."""
        service = TransactionService(store)
        expense = await service.add_expense(
            Expense(name="Plumber", amount=Decimal("120"), date=date(2025, 3, 9))
        )

        assert await service.delete_expense(expense.id) is True
        assert await service.get_total_one_time_expenses_for_month(3, 2025) == Decimal("0")
        assert await service.get_one_time_expenses_for_month(3, 2025) == []

    async def test_update_expense(self, store):
        """Test updating a transaction."""
        service = TransactionService(store)
        expense = await service.add_expense(
            Expense(name="Plumber", amount=Decimal("120"), date=date(2025, 3, 9))
        )

        await service.update_expense(expense.model_copy(update={"amount": Decimal("95.00")}))

        loaded = await service.get_expense_by_id(expense.id)
        assert loaded.amount == Decimal("95.00")
        assert loaded.modified_at is not None


class TestBankBalanceService:
    """Tests for BankBalanceService."""

    async def test_get_creates_then_update(self, store):
        """Test that the balance starts at zero and can be updated."""
        service = BankBalanceService(store)

        assert (await service.get_bank_balance(3, 2025)).current_balance == Decimal("0")

        await service.update_bank_balance(3, 2025, Decimal("-12.34"))
        assert (await service.get_bank_balance(3, 2025)).current_balance == Decimal("-12.34")

    async def test_update_rejects_invalid_month(self, store):
        """Test that month 0 is rejected."""
        with pytest.raises(ValueError):
            await BankBalanceService(store).update_bank_balance(0, 2025, Decimal("1"))
