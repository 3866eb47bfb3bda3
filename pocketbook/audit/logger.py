"""
Audit Logger

DESIGN DECISION: Every month lifecycle step and every ledger change is
logged as a structured event. This provides:
1. Traceability of initialization and regeneration
2. Debugging capability when a month's totals look wrong
3. A history of paid/received toggles

The audit logger:
- Is async so services can await it inline
- Never raises into the caller (a failed log line must not fail a payment)
- Writes through structlog, configured once by configure_logging()
"""

import logging
import sys
from typing import Optional
from uuid import UUID

import structlog

from pocketbook.models.audit import AuditEvent, AuditEventBuilder


def configure_logging(level: str = "INFO") -> None:
    """Configure stdlib logging and structlog for JSON output."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    Routes each event to the structlog level matching its severity.
    """

    def __init__(self, logger: Optional[structlog.stdlib.BoundLogger] = None):
        self._logger = logger or structlog.get_logger("pocketbook.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the log call itself failed.
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity.value in ("error", "critical"):
                self._logger.error("audit_event", **log_dict)
            elif event.severity.value == "warning":
                self._logger.warning("audit_event", **log_dict)
            elif event.severity.value == "debug":
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except (ValueError, TypeError, OSError) as e:
            print(f"WARNING: Failed to write audit event {event.event_id}: {e}", file=sys.stderr)
            return False

        return True

    async def log_month_initialized(
        self,
        month: int,
        year: int,
        budgets: int,
        recurring_expenses: int,
        incomes: int,
        payment_records_created: int,
        income_records_created: int,
    ) -> None:
        """Log a completed month initialization."""
        event = AuditEventBuilder.month_initialized(
            month=month,
            year=year,
            budgets=budgets,
            recurring_expenses=recurring_expenses,
            incomes=incomes,
            payment_records_created=payment_records_created,
            income_records_created=income_records_created,
        )
        await self.log(event)

    async def log_month_initialization_rejected(self, month: int, year: int) -> None:
        """Log an attempt to initialize a month twice."""
        await self.log(AuditEventBuilder.month_initialization_rejected(month, year))

    async def log_month_regenerated(
        self,
        month: int,
        year: int,
        preserve_user_data: bool,
        payment_records_removed: int,
        income_records_removed: int,
    ) -> None:
        event = AuditEventBuilder.month_regenerated(
            month=month,
            year=year,
            preserve_user_data=preserve_user_data,
            payment_records_removed=payment_records_removed,
            income_records_removed=income_records_removed,
        )
        await self.log(event)

    async def log_balance_carried_over(self, month: int, year: int, balance: str) -> None:
        await self.log(AuditEventBuilder.balance_carried_over(month, year, balance))

    async def log_payment_status_updated(
        self,
        expense_id: UUID,
        month: int,
        year: int,
        is_paid: bool,
    ) -> None:
        """Log a paid/unpaid toggle."""
        event = AuditEventBuilder.payment_status_updated(
            expense_id=expense_id,
            month=month,
            year=year,
            is_paid=is_paid,
        )
        await self.log(event)

    async def log_income_status_updated(
        self,
        income_id: UUID,
        month: int,
        year: int,
        is_received: bool,
    ) -> None:
        """Log a received/not-received toggle."""
        event = AuditEventBuilder.income_status_updated(
            income_id=income_id,
            month=month,
            year=year,
            is_received=is_received,
        )
        await self.log(event)

    async def log_categories_seeded(self, count: int) -> None:
        await self.log(AuditEventBuilder.categories_seeded(count))

    async def log_data_cleared(self) -> None:
        await self.log(AuditEventBuilder.data_cleared())

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
        )
        await self.log(event)
