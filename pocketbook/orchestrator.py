"""
Application Wiring for Pocketbook

This module ties together all the components:
1. Storage (created and initialized exactly once)
2. Month lifecycle and the payment ledger
3. Master-data services and the monthly overview

DESIGN DECISION: Every service receives the same store instance and the
same audit logger. The store is initialized here, before any service can
touch it, instead of lazily inside each storage call.
"""

from typing import NamedTuple, Optional

from pocketbook.audit import AuditLogger, configure_logging
from pocketbook.config import get_settings
from pocketbook.services import (
    BankBalanceService,
    BudgetService,
    IncomeService,
    MonthLifecycleManager,
    MonthlyOverviewService,
    PaymentLedger,
    RecurringExpenseService,
    SnapshotStoreInterface,
    SQLiteSnapshotStore,
    TransactionService,
)


class AppComponents(NamedTuple):
    store: SnapshotStoreInterface
    audit_logger: AuditLogger
    lifecycle: MonthLifecycleManager
    ledger: PaymentLedger
    budgets: BudgetService
    recurring_expenses: RecurringExpenseService
    incomes: IncomeService
    transactions: TransactionService
    bank_balance: BankBalanceService
    overview: MonthlyOverviewService


async def create_app_components(
    db_path: Optional[str] = None,
    store: Optional[SnapshotStoreInterface] = None,
    setup_logging: bool = False,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        db_path: SQLite file to use instead of the configured one
        store: Ready-made store (takes precedence over db_path)
        setup_logging: Configure structlog from the app settings

    Returns:
        AppComponents with every service wired to one initialized store
    """
    app_settings = get_settings().app

    if setup_logging:
        configure_logging(app_settings.effective_log_level)

    store = store or SQLiteSnapshotStore(db_path)
    store.initialize()

    audit_logger = AuditLogger()

    recurring_expenses = RecurringExpenseService(
        store,
        audit_logger=audit_logger,
        seed_default_categories=app_settings.seed_default_categories,
    )
    if app_settings.seed_default_categories:
        await recurring_expenses.seed_default_categories()

    return AppComponents(
        store=store,
        audit_logger=audit_logger,
        lifecycle=MonthLifecycleManager(
            store,
            audit_logger=audit_logger,
            carry_over_balance=app_settings.carry_over_balance,
        ),
        ledger=PaymentLedger(store, audit_logger=audit_logger),
        budgets=BudgetService(store),
        recurring_expenses=recurring_expenses,
        incomes=IncomeService(store),
        transactions=TransactionService(store),
        bank_balance=BankBalanceService(store),
        overview=MonthlyOverviewService(store),
    )


async def reset_app_data(components: AppComponents) -> None:
    """
    Wipe every table, then reinstall the default categories.

    Irreversible: master records, snapshots and the ledger are all gone.
    """
    await components.store.clear_all_data()
    await components.audit_logger.log_data_cleared()
    await components.recurring_expenses.seed_default_categories()
