"""
Data Models Package

This package contains all Pydantic models used in Pocketbook.
Master records live in `budget`, month-scoped records in `month`.
"""

from pocketbook.models.budget import (
    DEFAULT_CATEGORIES,
    Budget,
    Category,
    Expense,
    Income,
    IncomeCategory,
    RecurringExpense,
    default_categories,
)
from pocketbook.models.month import (
    BankBalance,
    BudgetLine,
    IncomeLine,
    IncomeRecord,
    MonthKey,
    MonthlyBudgetSnapshot,
    MonthlyIncomeSnapshot,
    MonthlyOverview,
    MonthlyRecurringExpenseSnapshot,
    MonthStatus,
    OneTimeExpenseLine,
    PaymentRecord,
    RecurringExpenseLine,
)
from pocketbook.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Master records
    "DEFAULT_CATEGORIES",
    "Budget",
    "Category",
    "Expense",
    "Income",
    "IncomeCategory",
    "RecurringExpense",
    "default_categories",
    # Month-scoped records
    "BankBalance",
    "BudgetLine",
    "IncomeLine",
    "IncomeRecord",
    "MonthKey",
    "MonthlyBudgetSnapshot",
    "MonthlyIncomeSnapshot",
    "MonthlyOverview",
    "MonthlyRecurringExpenseSnapshot",
    "MonthStatus",
    "OneTimeExpenseLine",
    "PaymentRecord",
    "RecurringExpenseLine",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
