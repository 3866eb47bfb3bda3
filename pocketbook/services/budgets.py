"""Budget master records."""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pocketbook.models.budget import Budget
from pocketbook.services.storage import SnapshotStoreInterface


class BudgetService:
    """
    CRUD for budgets.

    Edits here only affect months initialized afterwards; months that
    already have snapshots keep their frozen amounts until regenerated.
    """

    def __init__(self, store: SnapshotStoreInterface):
        self._store = store

    async def get_all_budgets(self, active_only: bool = False) -> list[Budget]:
        return await self._store.get_all_budgets(active_only=active_only)

    async def get_budget_by_id(self, budget_id: UUID) -> Optional[Budget]:
        return await self._store.get_budget_by_id(budget_id)

    async def add_budget(self, budget: Budget) -> Budget:
        return await self._store.insert_budget(budget)

    async def update_budget(self, budget: Budget) -> Budget:
        """
        Save changes to an existing budget.

        Raises:
            NotFoundError: If the budget doesn't exist
        """
        updated = budget.model_copy(update={"modified_at": datetime.utcnow()})
        return await self._store.update_budget(updated)

    async def delete_budget(self, budget_id: UUID) -> bool:
        return await self._store.delete_budget(budget_id)

    async def get_total_budget(self) -> Decimal:
        """Sum of all active budgets."""
        budgets = await self._store.get_all_budgets(active_only=True)
        return sum((budget.amount for budget in budgets), Decimal("0"))
