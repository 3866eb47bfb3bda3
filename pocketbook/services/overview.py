"""
Monthly Overview

Computes everything a month's summary screen shows: what is budgeted,
what is spent, what is still to be paid, and what remains of the bank
balance after all outstanding payments.

DESIGN DECISION: An initialized month is read from its snapshots, so its
totals never move when master records are edited afterwards. A month
that was never initialized is previewed from the live active records.
"""

from decimal import Decimal

from pocketbook.models.month import (
    BudgetLine,
    IncomeLine,
    MonthKey,
    MonthlyOverview,
    OneTimeExpenseLine,
    RecurringExpenseLine,
)
from pocketbook.services.storage import SnapshotStoreInterface


class MonthlyOverviewService:
    """Builds MonthlyOverview objects from storage."""

    def __init__(self, store: SnapshotStoreInterface):
        self._store = store

    async def get_overview(self, month: int, year: int) -> MonthlyOverview:
        MonthKey.of(month, year)

        status = await self._store.get_month_status(month, year)
        from_snapshots = status is not None and status.is_initialized

        payment_records = await self._store.get_payment_records_for_month(month, year)
        paid_ids = {record.expense_id for record in payment_records if record.is_paid}
        income_records = await self._store.get_income_records_for_month(month, year)
        received_ids = {record.income_id for record in income_records if record.is_received}

        transactions = await self._store.get_expenses_for_month(month, year)
        spent_by_budget: dict = {}
        for transaction in transactions:
            if transaction.budget_id is not None:
                spent_by_budget[transaction.budget_id] = (
                    spent_by_budget.get(transaction.budget_id, Decimal("0")) + transaction.amount
                )

        if from_snapshots:
            budget_lines = [
                BudgetLine(
                    budget_id=snapshot.original_budget_id,
                    name=snapshot.name,
                    budget_amount=snapshot.amount,
                    spent_amount=spent_by_budget.get(snapshot.original_budget_id, Decimal("0")),
                )
                for snapshot in await self._store.get_budget_snapshots(month, year)
            ]
            recurring_lines = [
                RecurringExpenseLine(
                    expense_id=snapshot.original_expense_id,
                    name=snapshot.name,
                    amount=snapshot.amount,
                    day_of_month=snapshot.day_of_month,
                    is_paid=snapshot.original_expense_id in paid_ids,
                )
                for snapshot in await self._store.get_recurring_expense_snapshots(month, year)
            ]
            income_lines = [
                IncomeLine(
                    income_id=snapshot.original_income_id,
                    name=snapshot.name,
                    amount=snapshot.amount,
                    day_of_month=snapshot.day_of_month,
                    is_received=snapshot.original_income_id in received_ids,
                )
                for snapshot in await self._store.get_income_snapshots(month, year)
            ]
        else:
            budget_lines = [
                BudgetLine(
                    budget_id=budget.id,
                    name=budget.name,
                    budget_amount=budget.amount,
                    spent_amount=spent_by_budget.get(budget.id, Decimal("0")),
                )
                for budget in await self._store.get_all_budgets(active_only=True)
            ]
            recurring_lines = [
                RecurringExpenseLine(
                    expense_id=expense.id,
                    name=expense.name,
                    amount=expense.amount,
                    day_of_month=expense.day_of_month,
                    is_paid=expense.id in paid_ids,
                )
                for expense in await self._store.get_all_recurring_expenses(active_only=True)
            ]
            income_lines = [
                IncomeLine(
                    income_id=income.id,
                    name=income.name,
                    amount=income.amount,
                    day_of_month=income.day_of_month,
                    is_received=income.id in received_ids,
                )
                for income in await self._store.get_all_incomes(active_only=True)
            ]

        one_time_lines = [
            OneTimeExpenseLine(
                expense_id=transaction.id,
                name=transaction.name,
                amount=transaction.amount,
                expense_date=transaction.date,
                is_paid=transaction.id in paid_ids,
            )
            for transaction in transactions
            if transaction.budget_id is None
        ]

        balance = await self._store.get_bank_balance(month, year)

        return MonthlyOverview(
            month=month,
            year=year,
            from_snapshots=from_snapshots,
            budgets=budget_lines,
            recurring_expenses=recurring_lines,
            one_time_expenses=one_time_lines,
            incomes=income_lines,
            bank_balance=balance.current_balance,
        )
