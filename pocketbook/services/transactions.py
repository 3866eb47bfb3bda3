"""
Expense Transactions

Individual spendings. A transaction booked against a budget counts
towards that budget's spent amount; one without a budget is a one-time
expense and gets its own paid flag in the payment ledger.

Deletes are soft: the row is flagged and disappears from every query.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pocketbook.models.budget import Expense
from pocketbook.services.storage import SnapshotStoreInterface


class TransactionService:
    """Expense transactions per month."""

    def __init__(self, store: SnapshotStoreInterface):
        self._store = store

    async def add_expense(self, expense: Expense) -> Expense:
        return await self._store.insert_expense(expense)

    async def update_expense(self, expense: Expense) -> Expense:
        updated = expense.model_copy(update={"modified_at": datetime.utcnow()})
        return await self._store.update_expense(updated)

    async def delete_expense(self, expense_id: UUID) -> bool:
        return await self._store.soft_delete_expense(expense_id)

    async def get_expense_by_id(self, expense_id: UUID) -> Optional[Expense]:
        return await self._store.get_expense_by_id(expense_id)

    async def get_expenses_for_budget(self, budget_id: UUID, month: int, year: int) -> list[Expense]:
        return await self._store.get_expenses_for_month(month, year, budget_id=budget_id)

    async def get_all_expenses_for_month(self, month: int, year: int) -> list[Expense]:
        return await self._store.get_expenses_for_month(month, year)

    async def get_total_for_budget(self, budget_id: UUID, month: int, year: int) -> Decimal:
        expenses = await self.get_expenses_for_budget(budget_id, month, year)
        return sum((expense.amount for expense in expenses), Decimal("0"))

    async def get_one_time_expenses_for_month(self, month: int, year: int) -> list[Expense]:
        return await self._store.get_expenses_for_month(month, year, one_time_only=True)

    async def get_total_one_time_expenses_for_month(self, month: int, year: int) -> Decimal:
        expenses = await self.get_one_time_expenses_for_month(month, year)
        return sum((expense.amount for expense in expenses), Decimal("0"))
