"""Shared fixtures: a fresh SQLite store per test and a small set of master records."""

from decimal import Decimal
from uuid import uuid4

import pytest

from pocketbook.models.budget import Budget, Income, IncomeCategory, RecurringExpense
from pocketbook.services.storage import SQLiteSnapshotStore


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "pocketbook.db")


@pytest.fixture
def store(db_path):
    store = SQLiteSnapshotStore(db_path)
    store.initialize()
    yield store
    store.close()


@pytest.fixture
def category_id():
    return uuid4()


@pytest.fixture
async def master_data(store, category_id):
    """
    Two active budgets, one inactive budget, two active recurring
    expenses, one inactive recurring expense and one active income.
    """
    groceries = await store.insert_budget(Budget(name="Groceries", amount=Decimal("400.00")))
    fun = await store.insert_budget(Budget(name="Fun", amount=Decimal("150.00")))
    await store.insert_budget(Budget(name="Old", amount=Decimal("99.00"), is_active=False))

    rent = await store.insert_recurring_expense(
        RecurringExpense(name="Rent", amount=Decimal("950.00"), day_of_month=1, category_id=category_id)
    )
    internet = await store.insert_recurring_expense(
        RecurringExpense(name="Internet", amount=Decimal("45.50"), day_of_month=15, category_id=category_id)
    )
    await store.insert_recurring_expense(
        RecurringExpense(
            name="Cancelled gym",
            amount=Decimal("30.00"),
            day_of_month=5,
            category_id=category_id,
            is_active=False,
        )
    )

    salary = await store.insert_income(
        Income(name="Salary", amount=Decimal("3200.00"), day_of_month=25, category=IncomeCategory.SALARY)
    )

    return {
        "budgets": [groceries, fun],
        "recurring_expenses": [rent, internet],
        "incomes": [salary],
    }
