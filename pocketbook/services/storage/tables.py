"""
SQLAlchemy table definitions for the SQLite backend.

One table per entity. Column names match the Pydantic model field names
exactly so rows validate straight into the models.
"""

from datetime import date as date_type, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum as SAEnum,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from pocketbook.models.budget import IncomeCategory


AMOUNT = Numeric(12, 2)


def _income_category_column() -> SAEnum:
    return SAEnum(
        IncomeCategory,
        native_enum=False,
        length=20,
        values_callable=lambda enum: [member.value for member in enum],
    )


class Base(DeclarativeBase):
    pass


# ============================================================================
# Master records
# ============================================================================


class CategoryRow(Base):
    __tablename__ = "categories"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    color: Mapped[Optional[str]] = mapped_column(String(20))
    icon: Mapped[Optional[str]] = mapped_column(String(20))
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class BudgetRow(Base):
    __tablename__ = "budgets"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    amount: Mapped[Decimal] = mapped_column(AMOUNT, nullable=False)
    category_id: Mapped[Optional[UUID]] = mapped_column(Uuid, index=True)
    description: Mapped[Optional[str]] = mapped_column(String(500))
    count_as_fixed_expense: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    modified_at: Mapped[Optional[datetime]] = mapped_column(DateTime)


class RecurringExpenseRow(Base):
    __tablename__ = "recurring_expenses"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    amount: Mapped[Decimal] = mapped_column(AMOUNT, nullable=False)
    day_of_month: Mapped[int] = mapped_column(Integer, nullable=False)
    category_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(String(500))
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    modified_at: Mapped[Optional[datetime]] = mapped_column(DateTime)


class IncomeRow(Base):
    __tablename__ = "incomes"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    amount: Mapped[Decimal] = mapped_column(AMOUNT, nullable=False)
    day_of_month: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    category: Mapped[IncomeCategory] = mapped_column(_income_category_column(), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(500))
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    modified_at: Mapped[Optional[datetime]] = mapped_column(DateTime)


class ExpenseRow(Base):
    """Expense transactions; budget_id NULL marks a one-time expense."""
    __tablename__ = "expenses"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    budget_id: Mapped[Optional[UUID]] = mapped_column(Uuid, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(500))
    amount: Mapped[Decimal] = mapped_column(AMOUNT, nullable=False)
    date: Mapped[date_type] = mapped_column(Date, nullable=False, index=True)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    modified_at: Mapped[Optional[datetime]] = mapped_column(DateTime)


# ============================================================================
# Month-scoped records
# ============================================================================


class MonthStatusRow(Base):
    __tablename__ = "month_status"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    is_initialized: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    initialized_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    last_regenerated_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    __table_args__ = (
        UniqueConstraint("month", "year", name="uq_month_status_month_year"),
    )


class MonthlyBudgetSnapshotRow(Base):
    __tablename__ = "monthly_budget_snapshots"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    original_budget_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    amount: Mapped[Decimal] = mapped_column(AMOUNT, nullable=False)
    category_id: Mapped[Optional[UUID]] = mapped_column(Uuid)
    description: Mapped[Optional[str]] = mapped_column(String(500))
    count_as_fixed_expense: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    modified_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    __table_args__ = (
        UniqueConstraint("original_budget_id", "month", "year", name="uq_budget_snapshot_key"),
        Index("ix_budget_snapshot_month_year", "month", "year"),
    )


class MonthlyRecurringExpenseSnapshotRow(Base):
    __tablename__ = "monthly_recurring_expense_snapshots"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    original_expense_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    amount: Mapped[Decimal] = mapped_column(AMOUNT, nullable=False)
    day_of_month: Mapped[int] = mapped_column(Integer, nullable=False)
    category_id: Mapped[Optional[UUID]] = mapped_column(Uuid)
    description: Mapped[Optional[str]] = mapped_column(String(500))
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    modified_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    __table_args__ = (
        UniqueConstraint("original_expense_id", "month", "year", name="uq_expense_snapshot_key"),
        Index("ix_expense_snapshot_month_year", "month", "year"),
    )


class MonthlyIncomeSnapshotRow(Base):
    __tablename__ = "monthly_income_snapshots"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    original_income_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    amount: Mapped[Decimal] = mapped_column(AMOUNT, nullable=False)
    day_of_month: Mapped[int] = mapped_column(Integer, nullable=False)
    category: Mapped[IncomeCategory] = mapped_column(_income_category_column(), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(500))
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    modified_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    __table_args__ = (
        UniqueConstraint("original_income_id", "month", "year", name="uq_income_snapshot_key"),
        Index("ix_income_snapshot_month_year", "month", "year"),
    )


class PaymentRecordRow(Base):
    __tablename__ = "payment_records"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    expense_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    is_paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    paid_date: Mapped[Optional[datetime]] = mapped_column(DateTime)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    modified_at: Mapped[Optional[datetime]] = mapped_column(DateTime)

    __table_args__ = (
        UniqueConstraint("expense_id", "month", "year", name="uq_payment_record_key"),
        Index("ix_payment_record_month_year", "month", "year"),
    )


class IncomeRecordRow(Base):
    __tablename__ = "income_records"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    income_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    is_received: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    received_date: Mapped[Optional[datetime]] = mapped_column(DateTime)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    modified_at: Mapped[Optional[datetime]] = mapped_column(DateTime)

    __table_args__ = (
        UniqueConstraint("income_id", "month", "year", name="uq_income_record_key"),
        Index("ix_income_record_month_year", "month", "year"),
    )


class BankBalanceRow(Base):
    __tablename__ = "bank_balances"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    current_balance: Mapped[Decimal] = mapped_column(AMOUNT, nullable=False, default=Decimal("0"))
    last_updated: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    __table_args__ = (
        UniqueConstraint("month", "year", name="uq_bank_balance_month_year"),
    )
