"""Income sources."""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pocketbook.models.budget import Income
from pocketbook.services.storage import SnapshotStoreInterface


class IncomeService:
    """CRUD for income sources."""

    def __init__(self, store: SnapshotStoreInterface):
        self._store = store

    async def add_income(self, income: Income) -> Income:
        return await self._store.insert_income(income)

    async def update_income(self, income: Income) -> Income:
        updated = income.model_copy(update={"modified_at": datetime.utcnow()})
        return await self._store.update_income(updated)

    async def delete_income(self, income_id: UUID) -> bool:
        return await self._store.delete_income(income_id)

    async def get_income_by_id(self, income_id: UUID) -> Optional[Income]:
        return await self._store.get_income_by_id(income_id)

    async def get_all_incomes(self, active_only: bool = False) -> list[Income]:
        return await self._store.get_all_incomes(active_only=active_only)

    async def get_total_monthly_income(self) -> Decimal:
        incomes = await self._store.get_all_incomes(active_only=True)
        return sum((income.amount for income in incomes), Decimal("0"))
