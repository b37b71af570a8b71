"""
Audit Logger

DESIGN DECISION: Every calculation that feeds a household's plan is logged.
This provides:
1. Traceability of every split and share back to its inputs
2. Debugging capability
3. A history partners can review when a share looks wrong

The audit logger:
- Is async so it fits the plan flow
- Gracefully handles storage failures (a lost audit row never breaks a plan)
- Supports correlation IDs to trace the events of one plan
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from splitsave.config import get_settings
from splitsave.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from splitsave.models.plan import (
    ContributionBreakdown,
    ContributionSummary,
    SafetyPotAssessment,
    SplitRatio,
)
from splitsave.services.storage import AuditStorageInterface


def configure_logging(log_level: Optional[str] = None) -> None:
    """
    Configure structlog for local JSON logging.

    Uses the configured log level unless one is given.
    """
    level = log_level or get_settings().app.log_level
    logging.basicConfig(format="%(message)s", level=getattr(logging, level))

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


configure_logging()


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for persistence), when configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("splitsave.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_split_computed(
        self,
        partnership_id: str,
        month: str,
        ratio: SplitRatio,
        user_ids: tuple[str, str],
        correlation_id: UUID,
    ) -> None:
        """Log the income split, plus a warning for each fallback it took."""
        await self.log(AuditEventBuilder.split_computed(
            partnership_id=partnership_id,
            month=month,
            ratio_a=ratio.ratio_a,
            ratio_b=ratio.ratio_b,
            correlation_id=correlation_id,
        ))

        if ratio.even_split_fallback:
            await self.log(AuditEventBuilder.even_split_fallback(
                partnership_id=partnership_id,
                month=month,
                correlation_id=correlation_id,
            ))

        flags = (ratio.allowance_exceeds_income_a, ratio.allowance_exceeds_income_b)
        for user_id, exceeds in zip(user_ids, flags):
            if exceeds:
                await self.log(AuditEventBuilder.allowance_exceeds_income(
                    partnership_id=partnership_id,
                    month=month,
                    user_id=user_id,
                    correlation_id=correlation_id,
                ))

    async def log_contribution_calculated(
        self,
        partnership_id: str,
        breakdown: ContributionBreakdown,
        correlation_id: UUID,
    ) -> None:
        """Log the month's contribution breakdown."""
        await self.log(AuditEventBuilder.contribution_calculated(
            partnership_id=partnership_id,
            month=breakdown.month,
            total=breakdown.total,
            share_a=breakdown.share_a,
            share_b=breakdown.share_b,
            correlation_id=correlation_id,
        ))

    async def log_safety_pot_assessed(
        self,
        partnership_id: str,
        month: str,
        assessment: SafetyPotAssessment,
        correlation_id: UUID,
    ) -> None:
        """Log the safety pot assessment and any reallocations it suggests."""
        await self.log(AuditEventBuilder.safety_pot_assessed(
            partnership_id=partnership_id,
            month=month,
            status=assessment.status.value,
            months_covered=assessment.months_covered,
            correlation_id=correlation_id,
        ))

        if assessment.reallocations:
            await self.log(AuditEventBuilder.reallocation_suggested(
                partnership_id=partnership_id,
                month=month,
                suggestions=[
                    {
                        "goal_id": str(s.goal_id),
                        "amount": str(s.amount),
                        "priority": s.priority.value,
                    }
                    for s in assessment.reallocations
                ],
                correlation_id=correlation_id,
            ))

    async def log_summary_computed(
        self,
        partnership_id: str,
        month: str,
        summary: ContributionSummary,
        correlation_id: UUID,
    ) -> None:
        """Log the contribution history summary."""
        await self.log(AuditEventBuilder.summary_computed(
            partnership_id=partnership_id,
            month=month,
            completion_rate=summary.completion_rate,
            streak_months=summary.streak_months,
            correlation_id=correlation_id,
        ))

    async def log_plan_completed(
        self,
        partnership_id: str,
        month: str,
        total,
        correlation_id: UUID,
    ) -> None:
        """Log plan completion."""
        await self.log(AuditEventBuilder.plan_completed(
            partnership_id=partnership_id,
            month=month,
            total=total,
            correlation_id=correlation_id,
        ))

    async def log_validation_failed(
        self,
        error_message: str,
        field: Optional[str],
        partnership_id: Optional[str] = None,
        month: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an input validation failure."""
        await self.log(AuditEventBuilder.validation_failed(
            error_message=error_message,
            field=field,
            partnership_id=partnership_id,
            month=month,
            correlation_id=correlation_id,
        ))

    async def log_configuration_rejected(
        self,
        error_message: str,
        field: Optional[str],
        partnership_id: Optional[str] = None,
        month: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a rejected policy configuration."""
        await self.log(AuditEventBuilder.configuration_rejected(
            error_message=error_message,
            field=field,
            partnership_id=partnership_id,
            month=month,
            correlation_id=correlation_id,
        ))

    async def log_storage_error(
        self,
        operation: str,
        error_message: str,
        partnership_id: Optional[str] = None,
        month: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a storage failure."""
        await self.log(AuditEventBuilder.storage_error(
            operation=operation,
            error_message=error_message,
            partnership_id=partnership_id,
            month=month,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a plan and pass it through every step.
    """
    return uuid4()
