"""Bank balance per month."""

from decimal import Decimal

from pocketbook.models.month import BankBalance, MonthKey
from pocketbook.services.storage import SnapshotStoreInterface


class BankBalanceService:
    """
    Reads and writes the bank balance of a month.

    Reading a month that has no balance yet creates it at zero.
    """

    def __init__(self, store: SnapshotStoreInterface):
        self._store = store

    async def get_bank_balance(self, month: int, year: int) -> BankBalance:
        return await self._store.get_bank_balance(month, year)

    async def update_bank_balance(self, month: int, year: int, new_balance: Decimal) -> BankBalance:
        MonthKey.of(month, year)
        return await self._store.update_bank_balance(month, year, new_balance)
