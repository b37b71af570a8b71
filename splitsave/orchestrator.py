"""
Main Orchestrator for SplitSave

This module ties the engine components together and defines the
end-to-end flows for:
1. Monthly plan (snapshot -> split -> allocations -> safety pot -> shares -> summary)
2. Recording a partner's contribution (raw input -> validate -> save)

DESIGN DECISION: The orchestrator enforces the boundaries:
- One snapshot per plan, so every figure comes from the same data
- The engine stays pure; storage and audit live out here
- Every step is audited, and every failure is audited then re-raised
"""

from datetime import date
from typing import Any, Mapping, Optional
from uuid import UUID

from splitsave.audit import AuditLogger, create_correlation_id
from splitsave.engine import (
    BudgetAllocationEngine,
    ConfigurationError,
    ContributionCalculator,
    IncomeAllocator,
    SafetyPotEngine,
    ValidationError,
)
from splitsave.engine.months import validate_month_key
from splitsave.models.household import EarnerProfile, MonthlyContributionRecord
from splitsave.models.plan import BucketAllocation, MonthlyPlan
from splitsave.services.storage import (
    AuditStorageInterface,
    HouseholdDataSource,
    InMemoryHouseholdDataSource,
    StorageError,
)
from splitsave.validation import HouseholdInputValidator


class MonthlyPlanFlow:
    """
    Orchestrates building a household's plan for one month.

    Flow:
    1. Load → One household snapshot from the data source
    2. Split → Proportional split of disposable income
    3. Allocate → Each partner's buckets (baseline plus surplus)
    4. Safety pot → Burn rate, health and the monthly top-up it needs
    5. Contribute → Month total and each partner's share
    6. Summarise → Contribution history, streak and completion rate
    """

    def __init__(
        self,
        data_source: HouseholdDataSource,
        audit_logger: Optional[AuditLogger] = None,
        income_allocator: Optional[IncomeAllocator] = None,
        allocation_engine: Optional[BudgetAllocationEngine] = None,
        safety_pot_engine: Optional[SafetyPotEngine] = None,
        contribution_calculator: Optional[ContributionCalculator] = None,
        validator: Optional[HouseholdInputValidator] = None,
    ):
        self._data_source = data_source
        self._audit_logger = audit_logger
        self._income = income_allocator or IncomeAllocator()
        self._allocation = allocation_engine or BudgetAllocationEngine()
        self._safety_pot = safety_pot_engine or SafetyPotEngine()
        self._contributions = contribution_calculator or ContributionCalculator(
            income_allocator=self._income,
            allocation_engine=self._allocation,
        )
        self._validator = validator or HouseholdInputValidator()

    async def plan_month(
        self,
        partnership_id: str,
        month: str,
        as_of: Optional[date] = None,
        correlation_id: Optional[UUID] = None,
    ) -> MonthlyPlan:
        """
        Build the monthly plan for a partnership.

        Raises:
            ValidationError: Malformed month or inconsistent household data
            ConfigurationError: Policy settings out of range
            StorageError: The snapshot could not be loaded
        """
        correlation_id = correlation_id or create_correlation_id()
        as_of = as_of or date.today()
        context = {
            "partnership_id": partnership_id,
            "month": month,
            "correlation_id": correlation_id,
        }

        try:
            validate_month_key(month)
            snapshot = await self._data_source.load_snapshot(partnership_id, month)
            partnership = snapshot.partnership

            ratio = self._income.partnership_ratio(partnership)
            if self._audit_logger:
                await self._audit_logger.log_split_computed(
                    ratio=ratio,
                    user_ids=partnership.user_ids,
                    **context,
                )

            allocation_a = self.partner_allocation(partnership.partner_a)
            allocation_b = self.partner_allocation(partnership.partner_b)

            burn_rate = self._safety_pot.monthly_burn_rate(snapshot.expenses, month)
            assessment = self._safety_pot.assess(
                snapshot.safety_pot,
                burn_rate,
                goals=snapshot.goals,
            )
            if self._audit_logger:
                await self._audit_logger.log_safety_pot_assessed(
                    assessment=assessment,
                    **context,
                )

            breakdown = self._contributions.calculate_monthly_contribution(
                expenses=snapshot.expenses,
                goals=snapshot.goals,
                safety_pot_monthly_target=assessment.optimal_monthly_contribution,
                profile_a=partnership.partner_a,
                profile_b=partnership.partner_b,
                month=month,
                as_of=as_of,
            )
            if self._audit_logger:
                await self._audit_logger.log_contribution_calculated(
                    partnership_id=partnership_id,
                    breakdown=breakdown,
                    correlation_id=correlation_id,
                )

            summary = self._contributions.calculate_contribution_summary(
                records=snapshot.contribution_records,
                user_id=partnership.partner_a.user_id,
                partner_id=partnership.partner_b.user_id,
                as_of=as_of,
            )
            if self._audit_logger:
                await self._audit_logger.log_summary_computed(
                    summary=summary,
                    **context,
                )

        except ValidationError as e:
            if self._audit_logger:
                await self._audit_logger.log_validation_failed(
                    error_message=e.message,
                    field=e.field,
                    **context,
                )
            raise
        except ConfigurationError as e:
            if self._audit_logger:
                await self._audit_logger.log_configuration_rejected(
                    error_message=e.message,
                    field=e.field,
                    **context,
                )
            raise
        except StorageError as e:
            if self._audit_logger:
                await self._audit_logger.log_storage_error(
                    operation="load_snapshot",
                    error_message=str(e),
                    **context,
                )
            raise

        if self._audit_logger:
            await self._audit_logger.log_plan_completed(total=breakdown.total, **context)

        return MonthlyPlan(
            partnership_id=partnership_id,
            month=month,
            as_of=as_of,
            correlation_id=correlation_id,
            breakdown=breakdown,
            allocation_a=allocation_a,
            allocation_b=allocation_b,
            safety_pot=assessment,
            summary=summary,
        )

    def partner_allocation(self, profile: EarnerProfile) -> BucketAllocation:
        """
        Recommended buckets for one partner.

        The baseline percentages apply to disposable income from the
        contracted salary. Income above the contracted salary is split
        as surplus on top. Income below it raises ValidationError.
        """
        return self._allocation.recommended_allocation(
            profile.monthly_income,
            profile.contracted_salary,
            profile.personal_allowance,
        )

    async def record_contribution(
        self,
        raw: Mapping[str, Any],
        correlation_id: Optional[UUID] = None,
    ) -> MonthlyContributionRecord:
        """
        Validate and store one partner's contribution for a month.

        Raises:
            ValidationError: The record is malformed
            StorageError: The record could not be saved
        """
        correlation_id = correlation_id or create_correlation_id()

        try:
            record = self._validator.parse_record(raw)
            await self._data_source.save_contribution_record(record)
        except ValidationError as e:
            if self._audit_logger:
                await self._audit_logger.log_validation_failed(
                    error_message=e.message,
                    field=e.field,
                    correlation_id=correlation_id,
                )
            raise
        except StorageError as e:
            if self._audit_logger:
                await self._audit_logger.log_storage_error(
                    operation="save_contribution_record",
                    error_message=str(e),
                    month=record.month,
                    correlation_id=correlation_id,
                )
            raise

        return record


def create_app_components(
    data_source: Optional[HouseholdDataSource] = None,
    audit_storage: Optional[AuditStorageInterface] = None,
) -> MonthlyPlanFlow:
    """
    Factory function to create the plan flow with default engines.

    Args:
        data_source: Household data source.
                    Defaults to an empty in-memory source.
        audit_storage: Audit persistence.
                    If None, audit events are only logged locally.
    """
    return MonthlyPlanFlow(
        data_source=data_source or InMemoryHouseholdDataSource(),
        audit_logger=AuditLogger(audit_storage),
    )
