"""
Month Lifecycle Manager

Freezes a month's master records into snapshots and prepares its ledger.

Flow for initialize_month:
1. Snapshot every active budget
2. Snapshot every active recurring expense and create its payment record
3. Snapshot every active income and create its income record
4. Carry the previous month's bank balance over (optional)
5. Mark the month initialized

DESIGN DECISION: The steps are NOT wrapped in one transaction. Each step
is an idempotent write keyed by (entity, month, year), and the month is
only marked initialized at the very end. If anything fails midway, the
month stays uninitialized and re-running initialization completes it
without duplicating rows.

Ledger rows are only created when missing, never reset. That is what
lets regenerate_month(preserve_user_data=True) keep paid/received flags.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pocketbook.audit import AuditLogger
from pocketbook.models.month import (
    MonthKey,
    MonthlyBudgetSnapshot,
    MonthlyIncomeSnapshot,
    MonthlyRecurringExpenseSnapshot,
    MonthStatus,
)
from pocketbook.services.storage import SnapshotStoreInterface, StorageError


class MonthLifecycleError(Exception):
    """Base exception for month lifecycle operations."""
    pass


class AlreadyInitializedError(MonthLifecycleError):
    """Raised when initializing a month that is already initialized."""

    def __init__(self, month: int, year: int):
        self.month = month
        self.year = year
        super().__init__(f"Month {month:02d}/{year} is already initialized")


class MonthLifecycleManager:
    """
    Initializes and regenerates months.

    Usage:
        manager = MonthLifecycleManager(store, audit_logger)
        if not await manager.is_month_initialized(3, 2025):
            await manager.initialize_month(3, 2025)
    """

    def __init__(
        self,
        store: SnapshotStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
        carry_over_balance: bool = True,
    ):
        self._store = store
        self._audit_logger = audit_logger
        self._carry_over_balance = carry_over_balance

    async def is_month_initialized(self, month: int, year: int) -> bool:
        status = await self._store.get_month_status(month, year)
        return status is not None and status.is_initialized

    async def get_month_status(self, month: int, year: int) -> Optional[MonthStatus]:
        return await self._store.get_month_status(month, year)

    async def initialize_month(
        self,
        month: int,
        year: int,
        copy_previous_balance: bool = True,
    ) -> MonthStatus:
        """
        Freeze the month's master records and prepare its ledger.

        Args:
            month: Month (1-12)
            year: Year
            copy_previous_balance: Copy the previous month's bank balance,
                if one was ever recorded

        Returns:
            The month's status, now initialized

        Raises:
            AlreadyInitializedError: If the month is already initialized
            StorageError: If a storage step fails (the month stays uninitialized)
        """
        key = MonthKey.of(month, year)

        if await self.is_month_initialized(month, year):
            if self._audit_logger:
                await self._audit_logger.log_month_initialization_rejected(month, year)
            raise AlreadyInitializedError(month, year)

        try:
            budgets = await self._store.get_all_budgets(active_only=True)
            for budget in budgets:
                await self._store.upsert_budget_snapshot(
                    MonthlyBudgetSnapshot.from_budget(budget, key)
                )

            payment_records_created = 0
            expenses = await self._store.get_all_recurring_expenses(active_only=True)
            for expense in expenses:
                await self._store.upsert_recurring_expense_snapshot(
                    MonthlyRecurringExpenseSnapshot.from_expense(expense, key)
                )
                if await self._store.ensure_payment_record(expense.id, month, year):
                    payment_records_created += 1

            income_records_created = 0
            incomes = await self._store.get_all_incomes(active_only=True)
            for income in incomes:
                await self._store.upsert_income_snapshot(
                    MonthlyIncomeSnapshot.from_income(income, key)
                )
                if await self._store.ensure_income_record(income.id, month, year):
                    income_records_created += 1

            if copy_previous_balance:
                await self._carry_over_previous_balance(key)

            status = await self._store.mark_month_initialized(month, year, datetime.utcnow())
        except StorageError as e:
            if self._audit_logger:
                await self._audit_logger.log_error(
                    error_type="month_initialization_failed",
                    error_message=str(e),
                    details={"month": month, "year": year},
                )
            raise

        if self._audit_logger:
            await self._audit_logger.log_month_initialized(
                month=month,
                year=year,
                budgets=len(budgets),
                recurring_expenses=len(expenses),
                incomes=len(incomes),
                payment_records_created=payment_records_created,
                income_records_created=income_records_created,
            )

        return status

    async def regenerate_month(
        self,
        month: int,
        year: int,
        preserve_user_data: bool = True,
    ) -> MonthStatus:
        """
        Rebuild the month's snapshots from the current master records.

        Expense transactions are never touched. With preserve_user_data,
        paid/received flags of entities that still exist are kept;
        otherwise the month's ledger is wiped and recreated unpaid.

        Raises:
            StorageError: If a storage step fails
        """
        MonthKey.of(month, year)

        try:
            await self._store.delete_budget_snapshots(month, year)
            await self._store.delete_recurring_expense_snapshots(month, year)
            await self._store.delete_income_snapshots(month, year)

            payment_records_removed = 0
            income_records_removed = 0
            if not preserve_user_data:
                payment_records_removed = await self._store.delete_payment_records_for_month(month, year)
                income_records_removed = await self._store.delete_income_records_for_month(month, year)

            await self._store.set_month_initialized_flag(month, year, False)
        except StorageError as e:
            if self._audit_logger:
                await self._audit_logger.log_error(
                    error_type="month_regeneration_failed",
                    error_message=str(e),
                    details={"month": month, "year": year},
                )
            raise

        await self.initialize_month(month, year, copy_previous_balance=self._carry_over_balance)
        status = await self._store.mark_month_regenerated(month, year, datetime.utcnow())

        if self._audit_logger:
            await self._audit_logger.log_month_regenerated(
                month=month,
                year=year,
                preserve_user_data=preserve_user_data,
                payment_records_removed=payment_records_removed,
                income_records_removed=income_records_removed,
            )

        return status

    async def get_previous_month_balance(self, month: int, year: int) -> Optional[Decimal]:
        """
        Bank balance recorded for the month before (month, year).

        Returns None when that month never had a balance, which is not
        the same as a recorded balance of zero.
        """
        previous = MonthKey.of(month, year).previous()
        if previous is None:
            return None
        balance = await self._store.find_bank_balance(previous.month, previous.year)
        if balance is None:
            return None
        return balance.current_balance

    async def _carry_over_previous_balance(self, key: MonthKey) -> None:
        previous_balance = await self.get_previous_month_balance(key.month, key.year)
        if previous_balance is None:
            return

        await self._store.update_bank_balance(key.month, key.year, previous_balance)

        if self._audit_logger:
            await self._audit_logger.log_balance_carried_over(
                key.month, key.year, str(previous_balance)
            )
