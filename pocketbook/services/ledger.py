"""
Payment / Receipt Ledger

Tracks, per month, which recurring or one-time expenses have been paid
and which income sources have been received.

A flag that was never written reads as False. Writes are upserts on
(entity id, month, year), so toggling repeatedly never creates
duplicates. Months do not need to be initialized to be written to.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pocketbook.audit import AuditLogger
from pocketbook.models.month import IncomeRecord, MonthKey, PaymentRecord
from pocketbook.services.storage import SnapshotStoreInterface


class PaymentLedger:
    """Paid / received flags per month."""

    def __init__(
        self,
        store: SnapshotStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._audit_logger = audit_logger

    # -------------------------------------------------------------------------
    # Expenses
    # -------------------------------------------------------------------------

    async def mark_paid(self, expense_id: UUID, month: int, year: int) -> PaymentRecord:
        return await self._set_paid(expense_id, month, year, True)

    async def mark_unpaid(self, expense_id: UUID, month: int, year: int) -> PaymentRecord:
        return await self._set_paid(expense_id, month, year, False)

    async def is_paid(self, expense_id: UUID, month: int, year: int) -> bool:
        record = await self._store.get_payment_record(expense_id, month, year)
        return record is not None and record.is_paid

    async def get_payment_records_for_month(self, month: int, year: int) -> list[PaymentRecord]:
        return await self._store.get_payment_records_for_month(month, year)

    async def get_total_unpaid(self, month: int, year: int) -> Decimal:
        """Sum of the active recurring expenses not yet paid this month."""
        unpaid = await self._unpaid_recurring_expenses(month, year)
        return sum((expense.amount for expense in unpaid), Decimal("0"))

    async def get_unpaid_count(self, month: int, year: int) -> int:
        return len(await self._unpaid_recurring_expenses(month, year))

    async def _unpaid_recurring_expenses(self, month: int, year: int) -> list:
        """Uses the live master amounts, not the month's snapshot amounts."""
        MonthKey.of(month, year)
        expenses = await self._store.get_all_recurring_expenses(active_only=True)
        records = await self._store.get_payment_records_for_month(month, year)
        paid_ids = {record.expense_id for record in records if record.is_paid}
        return [expense for expense in expenses if expense.id not in paid_ids]

    async def _set_paid(self, expense_id: UUID, month: int, year: int, is_paid: bool) -> PaymentRecord:
        record = PaymentRecord(
            expense_id=expense_id,
            month=month,
            year=year,
            is_paid=is_paid,
            paid_date=datetime.utcnow() if is_paid else None,
        )
        saved = await self._store.upsert_payment_record(record)

        if self._audit_logger:
            await self._audit_logger.log_payment_status_updated(
                expense_id=expense_id,
                month=month,
                year=year,
                is_paid=is_paid,
            )

        return saved

    # -------------------------------------------------------------------------
    # Incomes
    # -------------------------------------------------------------------------

    async def mark_received(self, income_id: UUID, month: int, year: int) -> IncomeRecord:
        return await self._set_received(income_id, month, year, True)

    async def mark_not_received(self, income_id: UUID, month: int, year: int) -> IncomeRecord:
        return await self._set_received(income_id, month, year, False)

    async def is_received(self, income_id: UUID, month: int, year: int) -> bool:
        record = await self._store.get_income_record(income_id, month, year)
        return record is not None and record.is_received

    async def get_income_records_for_month(self, month: int, year: int) -> list[IncomeRecord]:
        return await self._store.get_income_records_for_month(month, year)

    async def _set_received(
        self,
        income_id: UUID,
        month: int,
        year: int,
        is_received: bool,
    ) -> IncomeRecord:
        record = IncomeRecord(
            income_id=income_id,
            month=month,
            year=year,
            is_received=is_received,
            received_date=datetime.utcnow() if is_received else None,
        )
        saved = await self._store.upsert_income_record(record)

        if self._audit_logger:
            await self._audit_logger.log_income_status_updated(
                income_id=income_id,
                month=month,
                year=year,
                is_received=is_received,
            )

        return saved
