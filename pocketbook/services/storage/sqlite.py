"""
SQLite Storage Implementation

DESIGN DECISION: SQLite through the SQLAlchemy ORM is the storage backend because:
1. The data is personal and single-user (one local file is enough)
2. No server to install or keep running
3. Unique constraints give us real upserts (INSERT ... ON CONFLICT)
4. The file is trivially backed up or copied

TRADEOFFS:
- One writer at a time (fine for a personal ledger)
- Every call opens its own short transaction; multi-step flows such as
  month initialization rely on each step being idempotent instead of on
  one surrounding transaction

The implementation follows the abstract interface, so the lifecycle and
ledger services never see SQLAlchemy.
"""

import threading
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Iterator, Optional
from uuid import UUID, uuid4

import structlog
from sqlalchemy import create_engine, delete, func, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from pocketbook.config import get_settings
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
    MonthKey,
    MonthlyBudgetSnapshot,
    MonthlyIncomeSnapshot,
    MonthlyRecurringExpenseSnapshot,
    MonthStatus,
    PaymentRecord,
)
from pocketbook.services.storage.interface import (
    DuplicateError,
    NotFoundError,
    SnapshotStoreInterface,
    StorageError,
    StorageNotInitializedError,
)
from pocketbook.services.storage.tables import (
    BankBalanceRow,
    Base,
    BudgetRow,
    CategoryRow,
    ExpenseRow,
    IncomeRecordRow,
    IncomeRow,
    MonthlyBudgetSnapshotRow,
    MonthlyIncomeSnapshotRow,
    MonthlyRecurringExpenseSnapshotRow,
    MonthStatusRow,
    PaymentRecordRow,
    RecurringExpenseRow,
)


logger = structlog.get_logger(__name__)

IN_MEMORY = ":memory:"

# Deletion order for clear_all_data(); month-scoped tables first
ALL_TABLES = (
    PaymentRecordRow,
    IncomeRecordRow,
    MonthlyBudgetSnapshotRow,
    MonthlyRecurringExpenseSnapshotRow,
    MonthlyIncomeSnapshotRow,
    MonthStatusRow,
    BankBalanceRow,
    ExpenseRow,
    BudgetRow,
    RecurringExpenseRow,
    IncomeRow,
    CategoryRow,
)


class SQLiteSnapshotStore(SnapshotStoreInterface):
    """
    SQLite-backed storage for master records, snapshots and the ledger.

    Usage:
        store = SQLiteSnapshotStore("data/pocketbook.db")
        store.initialize()
        budgets = await store.get_all_budgets(active_only=True)
    """

    def __init__(self, db_path: Optional[str] = None, echo: Optional[bool] = None):
        settings = get_settings().storage
        self._db_path = db_path or settings.path
        self._echo = settings.echo if echo is None else echo

        self._lock = threading.Lock()
        self._initialized = False
        self._engine = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def db_path(self) -> str:
        return self._db_path

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        if self._initialized:
            return

        with self._lock:
            if self._initialized:
                return

            try:
                if self._db_path == IN_MEMORY:
                    # One shared connection, otherwise every session sees an empty database
                    engine = create_engine(
                        "sqlite://",
                        echo=self._echo,
                        connect_args={"check_same_thread": False},
                        poolclass=StaticPool,
                    )
                else:
                    Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
                    engine = create_engine(
                        f"sqlite:///{self._db_path}",
                        echo=self._echo,
                        connect_args={"check_same_thread": False},
                    )
                Base.metadata.create_all(engine)
            except (SQLAlchemyError, OSError) as e:
                raise StorageError(f"Failed to initialize database {self._db_path}: {e}") from e

            self._engine = engine
            self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)
            self._initialized = True

    def close(self) -> None:
        """Dispose of the engine. The store must be initialized again before reuse."""
        with self._lock:
            if self._engine is not None:
                self._engine.dispose()
            self._engine = None
            self._session_factory = None
            self._initialized = False

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        """
        Open a session in its own transaction.

        Commits on success, rolls back on error. SQLAlchemy errors are
        re-raised as StorageError subclasses naming the operation.
        """
        if not self._initialized or self._session_factory is None:
            raise StorageNotInitializedError(
                f"Cannot {operation}: storage is not initialized, call initialize() first"
            )

        try:
            with self._session_factory.begin() as session:
                yield session
        except IntegrityError as e:
            raise DuplicateError(f"Failed to {operation}: {e.orig}") from e
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to {operation}: {e}") from e

    @staticmethod
    def _month_filter(table, month: int, year: int) -> tuple:
        return (table.month == month, table.year == year)

    def _insert(self, operation: str, row_class, model):
        with self._session(operation) as session:
            session.add(row_class(**model.model_dump()))
        return model

    def _update(self, operation: str, row_class, model, label: str):
        with self._session(operation) as session:
            row = session.get(row_class, model.id)
            if row is None:
                raise NotFoundError(f"{label} not found: {model.id}")
            for field, value in model.model_dump(exclude={"id"}).items():
                setattr(row, field, value)
        return model

    def _delete(self, operation: str, row_class, entity_id: UUID) -> bool:
        with self._session(operation) as session:
            result = session.execute(
                delete(row_class).where(row_class.id == entity_id),
                execution_options={"synchronize_session": False},
            )
            return result.rowcount > 0

    def _get(self, operation: str, row_class, model_class, entity_id: UUID):
        with self._session(operation) as session:
            row = session.get(row_class, entity_id)
            return model_class.model_validate(row) if row is not None else None

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    async def insert_category(self, category: Category) -> Category:
        return self._insert("insert category", CategoryRow, category)

    async def delete_category(self, category_id: UUID) -> bool:
        return self._delete("delete category", CategoryRow, category_id)

    async def get_category_by_id(self, category_id: UUID) -> Optional[Category]:
        return self._get("get category", CategoryRow, Category, category_id)

    async def get_all_categories(self) -> list[Category]:
        with self._session("list categories") as session:
            rows = session.scalars(select(CategoryRow).order_by(CategoryRow.name))
            return [Category.model_validate(row) for row in rows]

    async def count_categories(self) -> int:
        with self._session("count categories") as session:
            return session.scalar(select(func.count()).select_from(CategoryRow)) or 0

    # -------------------------------------------------------------------------
    # Budgets
    # -------------------------------------------------------------------------

    async def insert_budget(self, budget: Budget) -> Budget:
        return self._insert("insert budget", BudgetRow, budget)

    async def update_budget(self, budget: Budget) -> Budget:
        return self._update("update budget", BudgetRow, budget, "Budget")

    async def delete_budget(self, budget_id: UUID) -> bool:
        return self._delete("delete budget", BudgetRow, budget_id)

    async def get_budget_by_id(self, budget_id: UUID) -> Optional[Budget]:
        return self._get("get budget", BudgetRow, Budget, budget_id)

    async def get_all_budgets(self, active_only: bool = False) -> list[Budget]:
        query = select(BudgetRow).order_by(BudgetRow.name)
        if active_only:
            query = query.where(BudgetRow.is_active.is_(True))

        with self._session("list budgets") as session:
            return [Budget.model_validate(row) for row in session.scalars(query)]

    # -------------------------------------------------------------------------
    # Recurring expenses
    # -------------------------------------------------------------------------

    async def insert_recurring_expense(self, expense: RecurringExpense) -> RecurringExpense:
        return self._insert("insert recurring expense", RecurringExpenseRow, expense)

    async def update_recurring_expense(self, expense: RecurringExpense) -> RecurringExpense:
        return self._update(
            "update recurring expense", RecurringExpenseRow, expense, "Recurring expense"
        )

    async def delete_recurring_expense(self, expense_id: UUID) -> bool:
        return self._delete("delete recurring expense", RecurringExpenseRow, expense_id)

    async def get_recurring_expense_by_id(self, expense_id: UUID) -> Optional[RecurringExpense]:
        return self._get(
            "get recurring expense", RecurringExpenseRow, RecurringExpense, expense_id
        )

    async def get_all_recurring_expenses(self, active_only: bool = False) -> list[RecurringExpense]:
        query = select(RecurringExpenseRow).order_by(
            RecurringExpenseRow.day_of_month, RecurringExpenseRow.name
        )
        if active_only:
            query = query.where(RecurringExpenseRow.is_active.is_(True))

        with self._session("list recurring expenses") as session:
            return [RecurringExpense.model_validate(row) for row in session.scalars(query)]

    # -------------------------------------------------------------------------
    # Incomes
    # -------------------------------------------------------------------------

    async def insert_income(self, income: Income) -> Income:
        return self._insert("insert income", IncomeRow, income)

    async def update_income(self, income: Income) -> Income:
        return self._update("update income", IncomeRow, income, "Income")

    async def delete_income(self, income_id: UUID) -> bool:
        return self._delete("delete income", IncomeRow, income_id)

    async def get_income_by_id(self, income_id: UUID) -> Optional[Income]:
        return self._get("get income", IncomeRow, Income, income_id)

    async def get_all_incomes(self, active_only: bool = False) -> list[Income]:
        query = select(IncomeRow).order_by(IncomeRow.day_of_month, IncomeRow.name)
        if active_only:
            query = query.where(IncomeRow.is_active.is_(True))

        with self._session("list incomes") as session:
            return [Income.model_validate(row) for row in session.scalars(query)]

    # -------------------------------------------------------------------------
    # Expense transactions
    # -------------------------------------------------------------------------

    async def insert_expense(self, expense: Expense) -> Expense:
        return self._insert("insert expense", ExpenseRow, expense)

    async def update_expense(self, expense: Expense) -> Expense:
        return self._update("update expense", ExpenseRow, expense, "Expense")

    async def soft_delete_expense(self, expense_id: UUID) -> bool:
        with self._session("delete expense") as session:
            row = session.get(ExpenseRow, expense_id)
            if row is None or row.is_deleted:
                return False
            row.is_deleted = True
            row.modified_at = datetime.utcnow()
            return True

    async def get_expense_by_id(self, expense_id: UUID) -> Optional[Expense]:
        with self._session("get expense") as session:
            row = session.get(ExpenseRow, expense_id)
            if row is None or row.is_deleted:
                return None
            return Expense.model_validate(row)

    async def get_expenses_for_month(
        self,
        month: int,
        year: int,
        budget_id: Optional[UUID] = None,
        one_time_only: bool = False,
    ) -> list[Expense]:
        key = MonthKey.of(month, year)
        query = (
            select(ExpenseRow)
            .where(
                ExpenseRow.is_deleted.is_(False),
                ExpenseRow.date >= key.first_day,
                ExpenseRow.date <= key.last_day,
            )
            .order_by(ExpenseRow.date.desc(), ExpenseRow.created_at.desc())
        )
        if budget_id is not None:
            query = query.where(ExpenseRow.budget_id == budget_id)
        if one_time_only:
            query = query.where(ExpenseRow.budget_id.is_(None))

        with self._session("list expenses") as session:
            return [Expense.model_validate(row) for row in session.scalars(query)]

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    def _upsert_snapshot(self, operation: str, row_class, snapshot, key_column: str):
        """
        Insert a snapshot, or refresh the copied fields of the one already
        stored under (key_column, month, year). The stored id is kept.
        """
        data = snapshot.model_dump()
        refreshed = {
            name: value
            for name, value in data.items()
            if name not in ("id", "created_at", key_column, "month", "year")
        }
        stmt = sqlite_insert(row_class).values(**data)
        stmt = stmt.on_conflict_do_update(
            index_elements=[key_column, "month", "year"],
            set_=refreshed,
        )

        with self._session(operation) as session:
            session.execute(stmt)
            row = session.scalars(
                select(row_class).where(
                    getattr(row_class, key_column) == data[key_column],
                    *self._month_filter(row_class, snapshot.month, snapshot.year),
                )
            ).one()
            return type(snapshot).model_validate(row)

    def _list_for_month(self, operation: str, row_class, model_class, month: int, year: int, order_by):
        query = select(row_class).where(*self._month_filter(row_class, month, year)).order_by(*order_by)
        with self._session(operation) as session:
            return [model_class.model_validate(row) for row in session.scalars(query)]

    def _delete_for_month(self, operation: str, row_class, month: int, year: int) -> int:
        with self._session(operation) as session:
            result = session.execute(
                delete(row_class).where(*self._month_filter(row_class, month, year)),
                execution_options={"synchronize_session": False},
            )
            return result.rowcount

    async def upsert_budget_snapshot(
        self,
        snapshot: MonthlyBudgetSnapshot,
    ) -> MonthlyBudgetSnapshot:
        return self._upsert_snapshot(
            "upsert budget snapshot", MonthlyBudgetSnapshotRow, snapshot, "original_budget_id"
        )

    async def get_budget_snapshots(self, month: int, year: int) -> list[MonthlyBudgetSnapshot]:
        return self._list_for_month(
            "list budget snapshots",
            MonthlyBudgetSnapshotRow,
            MonthlyBudgetSnapshot,
            month,
            year,
            (MonthlyBudgetSnapshotRow.name,),
        )

    async def delete_budget_snapshots(self, month: int, year: int) -> int:
        return self._delete_for_month("delete budget snapshots", MonthlyBudgetSnapshotRow, month, year)

    async def upsert_recurring_expense_snapshot(
        self,
        snapshot: MonthlyRecurringExpenseSnapshot,
    ) -> MonthlyRecurringExpenseSnapshot:
        return self._upsert_snapshot(
            "upsert recurring expense snapshot",
            MonthlyRecurringExpenseSnapshotRow,
            snapshot,
            "original_expense_id",
        )

    async def get_recurring_expense_snapshots(
        self,
        month: int,
        year: int,
    ) -> list[MonthlyRecurringExpenseSnapshot]:
        return self._list_for_month(
            "list recurring expense snapshots",
            MonthlyRecurringExpenseSnapshotRow,
            MonthlyRecurringExpenseSnapshot,
            month,
            year,
            (MonthlyRecurringExpenseSnapshotRow.day_of_month, MonthlyRecurringExpenseSnapshotRow.name),
        )

    async def delete_recurring_expense_snapshots(self, month: int, year: int) -> int:
        return self._delete_for_month(
            "delete recurring expense snapshots", MonthlyRecurringExpenseSnapshotRow, month, year
        )

    async def upsert_income_snapshot(
        self,
        snapshot: MonthlyIncomeSnapshot,
    ) -> MonthlyIncomeSnapshot:
        return self._upsert_snapshot(
            "upsert income snapshot", MonthlyIncomeSnapshotRow, snapshot, "original_income_id"
        )

    async def get_income_snapshots(self, month: int, year: int) -> list[MonthlyIncomeSnapshot]:
        return self._list_for_month(
            "list income snapshots",
            MonthlyIncomeSnapshotRow,
            MonthlyIncomeSnapshot,
            month,
            year,
            (MonthlyIncomeSnapshotRow.day_of_month, MonthlyIncomeSnapshotRow.name),
        )

    async def delete_income_snapshots(self, month: int, year: int) -> int:
        return self._delete_for_month("delete income snapshots", MonthlyIncomeSnapshotRow, month, year)

    # -------------------------------------------------------------------------
    # Payment / receipt ledger
    # -------------------------------------------------------------------------

    def _get_record(self, operation: str, row_class, model_class, key_column: str, entity_id: UUID, month: int, year: int):
        query = select(row_class).where(
            getattr(row_class, key_column) == entity_id,
            *self._month_filter(row_class, month, year),
        )
        with self._session(operation) as session:
            row = session.scalars(query).one_or_none()
            return model_class.model_validate(row) if row is not None else None

    def _upsert_record(self, operation: str, row_class, record, key_column: str, flag: str, flag_date: str):
        data = record.model_dump()
        stmt = sqlite_insert(row_class).values(**data)
        stmt = stmt.on_conflict_do_update(
            index_elements=[key_column, "month", "year"],
            set_={
                flag: stmt.excluded[flag],
                flag_date: stmt.excluded[flag_date],
                "modified_at": datetime.utcnow(),
            },
        )

        with self._session(operation) as session:
            session.execute(stmt)
            row = session.scalars(
                select(row_class).where(
                    getattr(row_class, key_column) == data[key_column],
                    *self._month_filter(row_class, record.month, record.year),
                )
            ).one()
            return type(record).model_validate(row)

    def _ensure_record(self, operation: str, row_class, key_column: str, entity_id: UUID, month: int, year: int) -> bool:
        MonthKey.of(month, year)
        stmt = (
            sqlite_insert(row_class)
            .values(
                id=uuid4(),
                month=month,
                year=year,
                created_at=datetime.utcnow(),
                **{key_column: entity_id},
            )
            .on_conflict_do_nothing(index_elements=[key_column, "month", "year"])
        )
        with self._session(operation) as session:
            result = session.execute(stmt)
            return result.rowcount > 0

    async def get_payment_record(
        self,
        expense_id: UUID,
        month: int,
        year: int,
    ) -> Optional[PaymentRecord]:
        return self._get_record(
            "get payment record", PaymentRecordRow, PaymentRecord, "expense_id", expense_id, month, year
        )

    async def get_payment_records_for_month(self, month: int, year: int) -> list[PaymentRecord]:
        return self._list_for_month(
            "list payment records",
            PaymentRecordRow,
            PaymentRecord,
            month,
            year,
            (PaymentRecordRow.created_at,),
        )

    async def upsert_payment_record(self, record: PaymentRecord) -> PaymentRecord:
        return self._upsert_record(
            "upsert payment record", PaymentRecordRow, record, "expense_id", "is_paid", "paid_date"
        )

    async def ensure_payment_record(self, expense_id: UUID, month: int, year: int) -> bool:
        return self._ensure_record(
            "create payment record", PaymentRecordRow, "expense_id", expense_id, month, year
        )

    async def delete_payment_records_for_month(self, month: int, year: int) -> int:
        return self._delete_for_month("delete payment records", PaymentRecordRow, month, year)

    async def get_income_record(
        self,
        income_id: UUID,
        month: int,
        year: int,
    ) -> Optional[IncomeRecord]:
        return self._get_record(
            "get income record", IncomeRecordRow, IncomeRecord, "income_id", income_id, month, year
        )

    async def get_income_records_for_month(self, month: int, year: int) -> list[IncomeRecord]:
        return self._list_for_month(
            "list income records",
            IncomeRecordRow,
            IncomeRecord,
            month,
            year,
            (IncomeRecordRow.created_at,),
        )

    async def upsert_income_record(self, record: IncomeRecord) -> IncomeRecord:
        return self._upsert_record(
            "upsert income record", IncomeRecordRow, record, "income_id", "is_received", "received_date"
        )

    async def ensure_income_record(self, income_id: UUID, month: int, year: int) -> bool:
        return self._ensure_record(
            "create income record", IncomeRecordRow, "income_id", income_id, month, year
        )

    async def delete_income_records_for_month(self, month: int, year: int) -> int:
        return self._delete_for_month("delete income records", IncomeRecordRow, month, year)

    # -------------------------------------------------------------------------
    # Month status
    # -------------------------------------------------------------------------

    def _read_month_status(self, session: Session, month: int, year: int) -> Optional[MonthStatusRow]:
        return session.scalars(
            select(MonthStatusRow).where(*self._month_filter(MonthStatusRow, month, year))
        ).one_or_none()

    async def get_month_status(self, month: int, year: int) -> Optional[MonthStatus]:
        with self._session("get month status") as session:
            row = self._read_month_status(session, month, year)
            return MonthStatus.model_validate(row) if row is not None else None

    async def mark_month_initialized(
        self,
        month: int,
        year: int,
        initialized_at: datetime,
    ) -> MonthStatus:
        status = MonthStatus(
            month=month,
            year=year,
            is_initialized=True,
            initialized_at=initialized_at,
        )
        stmt = sqlite_insert(MonthStatusRow).values(**status.model_dump())
        stmt = stmt.on_conflict_do_update(
            index_elements=["month", "year"],
            set_={"is_initialized": True, "initialized_at": initialized_at},
        )

        with self._session("mark month initialized") as session:
            session.execute(stmt)
            return MonthStatus.model_validate(self._read_month_status(session, month, year))

    async def set_month_initialized_flag(self, month: int, year: int, is_initialized: bool) -> bool:
        with self._session("update month status") as session:
            row = self._read_month_status(session, month, year)
            if row is None:
                return False
            row.is_initialized = is_initialized
            return True

    async def mark_month_regenerated(
        self,
        month: int,
        year: int,
        regenerated_at: datetime,
    ) -> MonthStatus:
        status = MonthStatus(month=month, year=year, last_regenerated_at=regenerated_at)
        stmt = sqlite_insert(MonthStatusRow).values(**status.model_dump())
        stmt = stmt.on_conflict_do_update(
            index_elements=["month", "year"],
            set_={"last_regenerated_at": regenerated_at},
        )

        with self._session("mark month regenerated") as session:
            session.execute(stmt)
            return MonthStatus.model_validate(self._read_month_status(session, month, year))

    # -------------------------------------------------------------------------
    # Bank balance
    # -------------------------------------------------------------------------

    async def get_bank_balance(self, month: int, year: int) -> BankBalance:
        MonthKey.of(month, year)
        stmt = (
            sqlite_insert(BankBalanceRow)
            .values(
                id=uuid4(),
                month=month,
                year=year,
                current_balance=Decimal("0"),
                last_updated=datetime.utcnow(),
            )
            .on_conflict_do_nothing(index_elements=["month", "year"])
        )

        try:
            with self._session("create bank balance") as session:
                session.execute(stmt)
        except StorageNotInitializedError:
            raise
        except StorageError as e:
            logger.warning("bank_balance_create_failed", month=month, year=year, error=str(e))

        balance = await self.find_bank_balance(month, year)
        if balance is None:
            return BankBalance(month=month, year=year)
        return balance

    async def find_bank_balance(self, month: int, year: int) -> Optional[BankBalance]:
        query = select(BankBalanceRow).where(*self._month_filter(BankBalanceRow, month, year))
        with self._session("get bank balance") as session:
            row = session.scalars(query).one_or_none()
            return BankBalance.model_validate(row) if row is not None else None

    async def update_bank_balance(self, month: int, year: int, new_balance: Decimal) -> BankBalance:
        balance = BankBalance(month=month, year=year, current_balance=new_balance)
        stmt = sqlite_insert(BankBalanceRow).values(**balance.model_dump())
        stmt = stmt.on_conflict_do_update(
            index_elements=["month", "year"],
            set_={
                "current_balance": stmt.excluded.current_balance,
                "last_updated": stmt.excluded.last_updated,
            },
        )

        with self._session("update bank balance") as session:
            session.execute(stmt)
            row = session.scalars(
                select(BankBalanceRow).where(*self._month_filter(BankBalanceRow, month, year))
            ).one()
            return BankBalance.model_validate(row)

    # -------------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------------

    async def clear_all_data(self) -> bool:
        with self._session("clear all data") as session:
            for table in ALL_TABLES:
                session.execute(delete(table), execution_options={"synchronize_session": False})
        return True
