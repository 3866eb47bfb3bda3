"""Services package."""

from pocketbook.services.bank_balance import BankBalanceService
from pocketbook.services.budgets import BudgetService
from pocketbook.services.expenses import RecurringExpenseService
from pocketbook.services.incomes import IncomeService
from pocketbook.services.ledger import PaymentLedger
from pocketbook.services.month_lifecycle import (
    AlreadyInitializedError,
    MonthLifecycleError,
    MonthLifecycleManager,
)
from pocketbook.services.overview import MonthlyOverviewService
from pocketbook.services.storage import (
    DuplicateError,
    NotFoundError,
    SnapshotStoreInterface,
    SQLiteSnapshotStore,
    StorageError,
    StorageNotInitializedError,
)
from pocketbook.services.transactions import TransactionService

__all__ = [
    # Month lifecycle
    "AlreadyInitializedError",
    "MonthLifecycleError",
    "MonthLifecycleManager",
    "PaymentLedger",
    # Master data
    "BankBalanceService",
    "BudgetService",
    "IncomeService",
    "RecurringExpenseService",
    "TransactionService",
    "MonthlyOverviewService",
    # Storage
    "DuplicateError",
    "NotFoundError",
    "SnapshotStoreInterface",
    "SQLiteSnapshotStore",
    "StorageError",
    "StorageNotInitializedError",
]
