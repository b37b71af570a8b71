"""
Audit Models for SplitSave

Every calculation the engine runs for a household is recorded, so that a
disputed split can be traced back to the numbers it came from.

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Each step of building a monthly plan has its own event type.
    """
    # Income split
    SPLIT_COMPUTED = "split_computed"
    EVEN_SPLIT_FALLBACK = "even_split_fallback"
    ALLOWANCE_EXCEEDS_INCOME = "allowance_exceeds_income"

    # Contributions
    CONTRIBUTION_CALCULATED = "contribution_calculated"
    SUMMARY_COMPUTED = "summary_computed"

    # Safety pot
    SAFETY_POT_ASSESSED = "safety_pot_assessed"
    REALLOCATION_SUGGESTED = "reallocation_suggested"

    # Plan lifecycle
    PLAN_COMPLETED = "plan_completed"

    # Failures
    VALIDATION_FAILED = "validation_failed"
    CONFIGURATION_REJECTED = "configuration_rejected"
    STORAGE_ERROR = "storage_error"


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

    Every significant calculation creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
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

    # Which household and month the event is about
    partnership_id: Optional[str] = Field(
        default=None,
        description="Partnership the calculation ran for"
    )
    month: Optional[str] = Field(
        default=None,
        description="Month key (YYYY-MM) the calculation ran for"
    )

    # Correlation - all events of one plan share this
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., all events of one monthly plan)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    error_field: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "partnership_id": self.partnership_id,
            "month": self.month,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "error_field": self.error_field,
        }


def _money(value: Decimal) -> str:
    return f"{value:.2f}"


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.split_computed(partnership_id, month, ratio_a, ratio_b, cid)
        event = AuditEventBuilder.plan_completed(partnership_id, month, total, cid)
    """

    @staticmethod
    def split_computed(
        partnership_id: str,
        month: str,
        ratio_a: Decimal,
        ratio_b: Decimal,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SPLIT_COMPUTED,
            partnership_id=partnership_id,
            month=month,
            correlation_id=correlation_id,
            description=f"Income split computed: {ratio_a:.2%} / {ratio_b:.2%}",
            details={
                "ratio_a": str(ratio_a),
                "ratio_b": str(ratio_b),
            },
        )

    @staticmethod
    def even_split_fallback(
        partnership_id: str,
        month: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EVEN_SPLIT_FALLBACK,
            severity=AuditSeverity.WARNING,
            partnership_id=partnership_id,
            month=month,
            correlation_id=correlation_id,
            description="Neither partner has disposable income; splitting 50/50",
        )

    @staticmethod
    def allowance_exceeds_income(
        partnership_id: str,
        month: str,
        user_id: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ALLOWANCE_EXCEEDS_INCOME,
            severity=AuditSeverity.WARNING,
            partnership_id=partnership_id,
            month=month,
            correlation_id=correlation_id,
            description=f"Personal allowance exceeds income for {user_id}",
            details={"user_id": user_id},
        )

    @staticmethod
    def contribution_calculated(
        partnership_id: str,
        month: str,
        total: Decimal,
        share_a: Decimal,
        share_b: Decimal,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CONTRIBUTION_CALCULATED,
            partnership_id=partnership_id,
            month=month,
            correlation_id=correlation_id,
            description=f"Monthly contribution calculated: {_money(total)} total",
            details={
                "total": _money(total),
                "share_a": _money(share_a),
                "share_b": _money(share_b),
            },
        )

    @staticmethod
    def safety_pot_assessed(
        partnership_id: str,
        month: str,
        status: str,
        months_covered: Decimal,
        correlation_id: UUID,
    ) -> AuditEvent:
        severity = AuditSeverity.WARNING if status == "critical" else AuditSeverity.INFO
        return AuditEvent(
            event_type=AuditEventType.SAFETY_POT_ASSESSED,
            severity=severity,
            partnership_id=partnership_id,
            month=month,
            correlation_id=correlation_id,
            description=f"Safety pot assessed as {status} ({months_covered:.1f} months covered)",
            details={
                "status": status,
                "months_covered": str(months_covered),
            },
        )

    @staticmethod
    def reallocation_suggested(
        partnership_id: str,
        month: str,
        suggestions: list[dict],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REALLOCATION_SUGGESTED,
            partnership_id=partnership_id,
            month=month,
            correlation_id=correlation_id,
            description=f"{len(suggestions)} safety pot reallocation(s) suggested",
            details={"suggestions": suggestions},
        )

    @staticmethod
    def summary_computed(
        partnership_id: str,
        month: str,
        completion_rate: Decimal,
        streak_months: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUMMARY_COMPUTED,
            partnership_id=partnership_id,
            month=month,
            correlation_id=correlation_id,
            description=f"Contribution summary computed: {completion_rate}% complete",
            details={
                "completion_rate": str(completion_rate),
                "streak_months": streak_months,
            },
        )

    @staticmethod
    def plan_completed(
        partnership_id: str,
        month: str,
        total: Decimal,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PLAN_COMPLETED,
            partnership_id=partnership_id,
            month=month,
            correlation_id=correlation_id,
            description=f"Monthly plan completed for {month}",
            details={"total": _money(total)},
        )

    @staticmethod
    def validation_failed(
        error_message: str,
        field: Optional[str],
        partnership_id: Optional[str] = None,
        month: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            partnership_id=partnership_id,
            month=month,
            correlation_id=correlation_id,
            description="Input validation failed",
            error_code="VALIDATION_ERROR",
            error_message=error_message,
            error_field=field,
        )

    @staticmethod
    def configuration_rejected(
        error_message: str,
        field: Optional[str],
        partnership_id: Optional[str] = None,
        month: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CONFIGURATION_REJECTED,
            severity=AuditSeverity.ERROR,
            partnership_id=partnership_id,
            month=month,
            correlation_id=correlation_id,
            description="Policy configuration rejected",
            error_code="CONFIGURATION_ERROR",
            error_message=error_message,
            error_field=field,
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
        partnership_id: Optional[str] = None,
        month: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            partnership_id=partnership_id,
            month=month,
            correlation_id=correlation_id,
            description=f"Storage error during {operation}",
            error_code="STORAGE_ERROR",
            error_message=error_message,
            details={"operation": operation},
        )
