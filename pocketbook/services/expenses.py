"""
Recurring Expenses and Categories

Recurring expenses are the fixed costs due every month (rent, insurance,
subscriptions). Each belongs to a category.

DESIGN DECISION: The default category set is installed on first use when
no category exists at all. Once the user has any category, nothing is
seeded again, so deleting categories is never undone behind their back.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pocketbook.audit import AuditLogger
from pocketbook.models.budget import Category, RecurringExpense, default_categories
from pocketbook.services.storage import SnapshotStoreInterface


class RecurringExpenseService:
    """CRUD for recurring expenses and their categories."""

    def __init__(
        self,
        store: SnapshotStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
        seed_default_categories: bool = True,
    ):
        self._store = store
        self._audit_logger = audit_logger
        self._seed_defaults = seed_default_categories
        self._categories_checked = False

    async def seed_default_categories(self) -> int:
        """
        Install the default categories if no category exists.

        Returns:
            Number of categories installed (0 if any category existed)
        """
        self._categories_checked = True

        if await self._store.count_categories() > 0:
            return 0

        categories = default_categories()
        for category in categories:
            await self._store.insert_category(category)

        if self._audit_logger:
            await self._audit_logger.log_categories_seeded(len(categories))

        return len(categories)

    async def _ensure_categories(self) -> None:
        if self._seed_defaults and not self._categories_checked:
            await self.seed_default_categories()

    # -------------------------------------------------------------------------
    # Recurring expenses
    # -------------------------------------------------------------------------

    async def get_all_expenses(self, active_only: bool = False) -> list[RecurringExpense]:
        await self._ensure_categories()
        return await self._store.get_all_recurring_expenses(active_only=active_only)

    async def get_expense_by_id(self, expense_id: UUID) -> Optional[RecurringExpense]:
        await self._ensure_categories()
        return await self._store.get_recurring_expense_by_id(expense_id)

    async def add_expense(self, expense: RecurringExpense) -> RecurringExpense:
        await self._ensure_categories()
        return await self._store.insert_recurring_expense(expense)

    async def update_expense(self, expense: RecurringExpense) -> RecurringExpense:
        await self._ensure_categories()
        updated = expense.model_copy(update={"modified_at": datetime.utcnow()})
        return await self._store.update_recurring_expense(updated)

    async def delete_expense(self, expense_id: UUID) -> bool:
        await self._ensure_categories()
        return await self._store.delete_recurring_expense(expense_id)

    async def get_total_monthly_expenses(self) -> Decimal:
        """Sum of all active recurring expenses."""
        expenses = await self.get_all_expenses(active_only=True)
        return sum((expense.amount for expense in expenses), Decimal("0"))

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    async def get_all_categories(self) -> list[Category]:
        await self._ensure_categories()
        return await self._store.get_all_categories()

    async def get_category_by_id(self, category_id: UUID) -> Optional[Category]:
        await self._ensure_categories()
        return await self._store.get_category_by_id(category_id)

    async def add_category(self, category: Category) -> Category:
        await self._ensure_categories()
        return await self._store.insert_category(category)

    async def delete_category(self, category_id: UUID) -> bool:
        """
        Delete a user-created category.

        Returns False without deleting if the category doesn't exist, is
        one of the defaults, or is still used by a recurring expense.
        """
        category = await self.get_category_by_id(category_id)
        if category is None or category.is_default:
            return False

        expenses = await self._store.get_all_recurring_expenses()
        if any(expense.category_id == category_id for expense in expenses):
            return False

        return await self._store.delete_category(category_id)
