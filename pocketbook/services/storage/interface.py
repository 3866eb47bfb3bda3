"""
Abstract Storage Interface

DESIGN DECISION: One cohesive interface exposes every storage operation
the services need. Services depend on this class only, never on a
concrete backend, so there is nothing to downcast to.
This allows us to:
1. Use a throwaway SQLite file in tests
2. Swap the backend without touching the lifecycle logic
3. Keep the upsert semantics in one place

Month-scoped writes are keyed by their natural composite key
(entity id, month, year) and are idempotent: re-running a write with
the same key never creates a second row.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pocketbook.models.budget import (
    Budget,
    Category,
    Expense,
    Income,
    RecurringExpense,
)
from pocketbook.models.month import (
    BankBalance,
    IncomeRecord,
    MonthlyBudgetSnapshot,
    MonthlyIncomeSnapshot,
    MonthlyRecurringExpenseSnapshot,
    MonthStatus,
    PaymentRecord,
)


class SnapshotStoreInterface(ABC):
    """
    Abstract interface for Pocketbook storage.

    Any storage implementation must implement these methods.
    `initialize()` must be called once before any other method.
    """

    @abstractmethod
    def initialize(self) -> None:
        """
        Create the schema if needed.

        Safe to call more than once and from several threads; the schema
        is created exactly once.
        """
        pass

    @property
    @abstractmethod
    def is_initialized(self) -> bool:
        pass

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    @abstractmethod
    async def insert_category(self, category: Category) -> Category:
        pass

    @abstractmethod
    async def delete_category(self, category_id: UUID) -> bool:
        pass

    @abstractmethod
    async def get_category_by_id(self, category_id: UUID) -> Optional[Category]:
        pass

    @abstractmethod
    async def get_all_categories(self) -> list[Category]:
        """All categories ordered by name."""
        pass

    @abstractmethod
    async def count_categories(self) -> int:
        pass

    # -------------------------------------------------------------------------
    # Budgets
    # -------------------------------------------------------------------------

    @abstractmethod
    async def insert_budget(self, budget: Budget) -> Budget:
        """
        Insert a new budget.

        Raises:
            DuplicateError: If a budget with the same id exists
        """
        pass

    @abstractmethod
    async def update_budget(self, budget: Budget) -> Budget:
        """
        Overwrite an existing budget.

        Raises:
            NotFoundError: If the budget doesn't exist
        """
        pass

    @abstractmethod
    async def delete_budget(self, budget_id: UUID) -> bool:
        """Returns True if a row was removed."""
        pass

    @abstractmethod
    async def get_budget_by_id(self, budget_id: UUID) -> Optional[Budget]:
        pass

    @abstractmethod
    async def get_all_budgets(self, active_only: bool = False) -> list[Budget]:
        """Budgets ordered by name."""
        pass

    # -------------------------------------------------------------------------
    # Recurring expenses
    # -------------------------------------------------------------------------

    @abstractmethod
    async def insert_recurring_expense(self, expense: RecurringExpense) -> RecurringExpense:
        pass

    @abstractmethod
    async def update_recurring_expense(self, expense: RecurringExpense) -> RecurringExpense:
        pass

    @abstractmethod
    async def delete_recurring_expense(self, expense_id: UUID) -> bool:
        pass

    @abstractmethod
    async def get_recurring_expense_by_id(self, expense_id: UUID) -> Optional[RecurringExpense]:
        pass

    @abstractmethod
    async def get_all_recurring_expenses(self, active_only: bool = False) -> list[RecurringExpense]:
        """Recurring expenses ordered by day of month."""
        pass

    # -------------------------------------------------------------------------
    # Incomes
    # -------------------------------------------------------------------------

    @abstractmethod
    async def insert_income(self, income: Income) -> Income:
        pass

    @abstractmethod
    async def update_income(self, income: Income) -> Income:
        pass

    @abstractmethod
    async def delete_income(self, income_id: UUID) -> bool:
        pass

    @abstractmethod
    async def get_income_by_id(self, income_id: UUID) -> Optional[Income]:
        pass

    @abstractmethod
    async def get_all_incomes(self, active_only: bool = False) -> list[Income]:
        """Incomes ordered by day of month."""
        pass

    # -------------------------------------------------------------------------
    # Expense transactions
    # -------------------------------------------------------------------------

    @abstractmethod
    async def insert_expense(self, expense: Expense) -> Expense:
        pass

    @abstractmethod
    async def update_expense(self, expense: Expense) -> Expense:
        pass

    @abstractmethod
    async def soft_delete_expense(self, expense_id: UUID) -> bool:
        """
        Flag a transaction as deleted.

        Returns False if it doesn't exist or is already deleted.
        """
        pass

    @abstractmethod
    async def get_expense_by_id(self, expense_id: UUID) -> Optional[Expense]:
        """Soft-deleted transactions are not returned."""
        pass

    @abstractmethod
    async def get_expenses_for_month(
        self,
        month: int,
        year: int,
        budget_id: Optional[UUID] = None,
        one_time_only: bool = False,
    ) -> list[Expense]:
        """
        Transactions dated within the calendar month, newest first.

        Args:
            month: Month (1-12)
            year: Year
            budget_id: Only transactions booked against this budget
            one_time_only: Only transactions without a budget

        Returns:
            Non-deleted transactions matching the filters
        """
        pass

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    @abstractmethod
    async def upsert_budget_snapshot(
        self,
        snapshot: MonthlyBudgetSnapshot,
    ) -> MonthlyBudgetSnapshot:
        """
        Insert a budget snapshot, or refresh the one already stored for
        (original_budget_id, month, year).
        """
        pass

    @abstractmethod
    async def get_budget_snapshots(self, month: int, year: int) -> list[MonthlyBudgetSnapshot]:
        pass

    @abstractmethod
    async def delete_budget_snapshots(self, month: int, year: int) -> int:
        """Returns the number of rows removed."""
        pass

    @abstractmethod
    async def upsert_recurring_expense_snapshot(
        self,
        snapshot: MonthlyRecurringExpenseSnapshot,
    ) -> MonthlyRecurringExpenseSnapshot:
        pass

    @abstractmethod
    async def get_recurring_expense_snapshots(
        self,
        month: int,
        year: int,
    ) -> list[MonthlyRecurringExpenseSnapshot]:
        pass

    @abstractmethod
    async def delete_recurring_expense_snapshots(self, month: int, year: int) -> int:
        pass

    @abstractmethod
    async def upsert_income_snapshot(
        self,
        snapshot: MonthlyIncomeSnapshot,
    ) -> MonthlyIncomeSnapshot:
        pass

    @abstractmethod
    async def get_income_snapshots(self, month: int, year: int) -> list[MonthlyIncomeSnapshot]:
        pass

    @abstractmethod
    async def delete_income_snapshots(self, month: int, year: int) -> int:
        pass

    # -------------------------------------------------------------------------
    # Payment / receipt ledger
    # -------------------------------------------------------------------------

    @abstractmethod
    async def get_payment_record(
        self,
        expense_id: UUID,
        month: int,
        year: int,
    ) -> Optional[PaymentRecord]:
        pass

    @abstractmethod
    async def get_payment_records_for_month(self, month: int, year: int) -> list[PaymentRecord]:
        pass

    @abstractmethod
    async def upsert_payment_record(self, record: PaymentRecord) -> PaymentRecord:
        """
        Write the paid flag for (expense_id, month, year).

        An existing row keeps its id and created_at; is_paid and
        paid_date are overwritten.
        """
        pass

    @abstractmethod
    async def ensure_payment_record(self, expense_id: UUID, month: int, year: int) -> bool:
        """
        Create an unpaid record for the key unless one already exists.

        Never touches an existing row.

        Returns:
            True if a record was created
        """
        pass

    @abstractmethod
    async def delete_payment_records_for_month(self, month: int, year: int) -> int:
        pass

    @abstractmethod
    async def get_income_record(
        self,
        income_id: UUID,
        month: int,
        year: int,
    ) -> Optional[IncomeRecord]:
        pass

    @abstractmethod
    async def get_income_records_for_month(self, month: int, year: int) -> list[IncomeRecord]:
        pass

    @abstractmethod
    async def upsert_income_record(self, record: IncomeRecord) -> IncomeRecord:
        pass

    @abstractmethod
    async def ensure_income_record(self, income_id: UUID, month: int, year: int) -> bool:
        """Create a not-received record for the key unless one exists."""
        pass

    @abstractmethod
    async def delete_income_records_for_month(self, month: int, year: int) -> int:
        pass

    # -------------------------------------------------------------------------
    # Month status
    # -------------------------------------------------------------------------

    @abstractmethod
    async def get_month_status(self, month: int, year: int) -> Optional[MonthStatus]:
        pass

    @abstractmethod
    async def mark_month_initialized(
        self,
        month: int,
        year: int,
        initialized_at: datetime,
    ) -> MonthStatus:
        """
        Upsert the month's status with is_initialized=True.

        last_regenerated_at and created_at of an existing row are kept.
        """
        pass

    @abstractmethod
    async def set_month_initialized_flag(self, month: int, year: int, is_initialized: bool) -> bool:
        """
        Flip is_initialized on an existing status row.

        Returns False if the month has no status row.
        """
        pass

    @abstractmethod
    async def mark_month_regenerated(
        self,
        month: int,
        year: int,
        regenerated_at: datetime,
    ) -> MonthStatus:
        """Upsert last_regenerated_at for the month."""
        pass

    # -------------------------------------------------------------------------
    # Bank balance
    # -------------------------------------------------------------------------

    @abstractmethod
    async def get_bank_balance(self, month: int, year: int) -> BankBalance:
        """
        Get the month's bank balance, creating it at zero if absent.

        The row is persisted, so a second call returns the same row.
        """
        pass

    @abstractmethod
    async def find_bank_balance(self, month: int, year: int) -> Optional[BankBalance]:
        """Get the month's bank balance without creating it."""
        pass

    @abstractmethod
    async def update_bank_balance(self, month: int, year: int, new_balance: Decimal) -> BankBalance:
        pass

    # -------------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------------

    @abstractmethod
    async def clear_all_data(self) -> bool:
        """
        Delete every row of every table, master data included.

        Runs as a single transaction.
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageNotInitializedError(StorageError):
    """Storage used before initialize() was called."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
