"""
Audit Models for Pocketbook

Every month lifecycle step and every change to a paid/received flag
produces an audit event. This provides:
1. Traceability of when a month was frozen or regenerated
2. Debugging information when a month looks wrong
3. A record of which ledger flags were reset by a regeneration

DESIGN DECISION: Audit events are append-only log entries. They are
emitted through structlog and never feed back into business logic.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Month lifecycle
    MONTH_INITIALIZED = "month_initialized"
    MONTH_INITIALIZATION_REJECTED = "month_initialization_rejected"
    MONTH_REGENERATED = "month_regenerated"
    BALANCE_CARRIED_OVER = "balance_carried_over"

    # Ledger
    PAYMENT_STATUS_UPDATED = "payment_status_updated"
    INCOME_STATUS_UPDATED = "income_status_updated"

    # Data management
    CATEGORIES_SEEDED = "categories_seeded"
    DATA_CLEARED = "data_cleared"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Month-scoped events carry the month and year they relate to.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'month', 'recurring_expense', 'income')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )
    month: Optional[int] = Field(default=None, ge=1, le=12)
    year: Optional[int] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "month": self.month,
            "year": self.year,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.month_initialized(3, 2025, budgets=4, ...)
        event = AuditEventBuilder.payment_status_updated(expense_id, 3, 2025, True)
    """

    @staticmethod
    def month_initialized(
        month: int,
        year: int,
        budgets: int,
        recurring_expenses: int,
        incomes: int,
        payment_records_created: int,
        income_records_created: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MONTH_INITIALIZED,
            entity_type="month",
            month=month,
            year=year,
            description=f"Month {month:02d}/{year} initialized",
            details={
                "budget_snapshots": budgets,
                "recurring_expense_snapshots": recurring_expenses,
                "income_snapshots": incomes,
                "payment_records_created": payment_records_created,
                "income_records_created": income_records_created,
            },
        )

    @staticmethod
    def month_initialization_rejected(month: int, year: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MONTH_INITIALIZATION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="month",
            month=month,
            year=year,
            description=f"Month {month:02d}/{year} is already initialized",
        )

    @staticmethod
    def month_regenerated(
        month: int,
        year: int,
        preserve_user_data: bool,
        payment_records_removed: int,
        income_records_removed: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MONTH_REGENERATED,
            entity_type="month",
            month=month,
            year=year,
            description=f"Month {month:02d}/{year} regenerated",
            details={
                "preserve_user_data": preserve_user_data,
                "payment_records_removed": payment_records_removed,
                "income_records_removed": income_records_removed,
            },
            is_user_action=True,
        )

    @staticmethod
    def balance_carried_over(month: int, year: int, balance: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BALANCE_CARRIED_OVER,
            entity_type="month",
            month=month,
            year=year,
            description=f"Bank balance {balance} carried over into {month:02d}/{year}",
            details={"balance": balance},
        )

    @staticmethod
    def payment_status_updated(
        expense_id: UUID,
        month: int,
        year: int,
        is_paid: bool,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_STATUS_UPDATED,
            entity_type="expense",
            entity_id=expense_id,
            month=month,
            year=year,
            description="Expense marked as paid" if is_paid else "Expense marked as unpaid",
            details={"is_paid": is_paid},
            is_user_action=True,
        )

    @staticmethod
    def income_status_updated(
        income_id: UUID,
        month: int,
        year: int,
        is_received: bool,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INCOME_STATUS_UPDATED,
            entity_type="income",
            entity_id=income_id,
            month=month,
            year=year,
            description="Income marked as received" if is_received else "Income marked as not received",
            details={"is_received": is_received},
            is_user_action=True,
        )

    @staticmethod
    def categories_seeded(count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORIES_SEEDED,
            entity_type="category",
            description=f"Installed {count} default categories",
            details={"count": count},
        )

    @staticmethod
    def data_cleared() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_CLEARED,
            severity=AuditSeverity.WARNING,
            description="All application data cleared",
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
        )
