"""
Result Models for the Budget Engine

Everything the engine hands back to callers. These are plain value
objects: no handles, no callbacks. The API layer serialises them
straight to JSON.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from splitsave.models.household import (
    ContributionStatus,
    PaymentState,
    ReliabilityRating,
    SafetyPotStatus,
    SuggestionPriority,
)


# =============================================================================
# INCOME AND ALLOCATION
# =============================================================================

class SplitRatio(BaseModel):
    """
    Proportional split between two partners.

    ratio_a + ratio_b == 1 exactly. The flags let callers warn users
    without the engine refusing to compute.
    """
    model_config = ConfigDict(frozen=True)

    ratio_a: Decimal
    ratio_b: Decimal
    disposable_a: Decimal
    disposable_b: Decimal
    even_split_fallback: bool = Field(
        default=False,
        description="Neither partner had disposable income; 50/50 applied"
    )
    allowance_exceeds_income_a: bool = False
    allowance_exceeds_income_b: bool = False


class BucketAllocation(BaseModel):
    """How one partner's money is split across the budget buckets."""
    model_config = ConfigDict(frozen=True)

    shared_expenses: Decimal
    goal1: Decimal
    goal2: Decimal
    safety_pot: Decimal

    @property
    def total(self) -> Decimal:
        return self.shared_expenses + self.goal1 + self.goal2 + self.safety_pot

    @property
    def savings(self) -> Decimal:
        return self.goal1 + self.goal2


class SurplusAllocation(BaseModel):
    """Income above baseline salary, split into savings and safety."""
    model_config = ConfigDict(frozen=True)

    extra: Decimal
    goal1: Decimal
    goal2: Decimal
    safety_pot: Decimal


# =============================================================================
# GOALS
# =============================================================================

class GoalProgress(BaseModel):
    """Where a goal stands today."""
    model_config = ConfigDict(frozen=True)

    goal_id: UUID
    progress_percentage: Decimal
    is_completed: bool
    is_overdue: bool
    days_remaining: Optional[int] = Field(
        default=None,
        description="Days to deadline (negative when overdue); None without deadline"
    )
    months_remaining: int
    monthly_required: Decimal
    weekly_required: Decimal


class RedistributionPlan(BaseModel):
    """Excess from completed goals earmarked for an active goal."""
    model_config = ConfigDict(frozen=True)

    goal_id: UUID
    current_amount: Decimal
    target_amount: Decimal
    redistribution_amount: Decimal


# =============================================================================
# CONTRIBUTIONS
# =============================================================================

class ContributionBreakdown(BaseModel):
    """
    A month's total funding requirement and each partner's share.

    share_a + share_b == total exactly.
    """
    model_config = ConfigDict(frozen=True)

    month: str
    expenses_total: Decimal
    goals_total: Decimal
    safety_pot_total: Decimal
    total: Decimal
    share_a: Decimal
    share_b: Decimal
    ratio: SplitRatio


class MonthContributionStatus(BaseModel):
    """One month of contributions seen from one user's side."""
    model_config = ConfigDict(frozen=True)

    month: str
    user_expected: Decimal
    user_actual: Decimal
    partner_expected: Decimal
    partner_actual: Decimal
    user_status: ContributionStatus
    partner_status: ContributionStatus
    both_met: bool
    payment_state: PaymentState
    days_until_due: int
    is_overdue: bool

    @property
    def total_required(self) -> Decimal:
        return self.user_expected + self.partner_expected


class ContributionSummary(BaseModel):
    """Dashboard summary of a household's contribution history."""
    model_config = ConfigDict(frozen=True)

    current_month: MonthContributionStatus
    previous_months: list[MonthContributionStatus] = Field(default_factory=list)
    user_contributed: Decimal
    partner_contributed: Decimal
    total_contributed: Decimal
    completion_rate: Decimal = Field(
        ...,
        description="Percentage of months where both partners met their share"
    )
    streak_months: int = Field(..., ge=0)


class MonthOutcome(BaseModel):
    """Both partners' records for one month, reduced to an outcome."""
    model_config = ConfigDict(frozen=True)

    month: str
    partner_count: int
    expected_total: Decimal
    actual_total: Decimal
    both_met: bool


class ContributionTrends(BaseModel):
    """Long-run view of contribution history."""
    model_config = ConfigDict(frozen=True)

    months_tracked: int
    months_met: int
    months_missed: int
    average_monthly_contribution: Decimal
    consistency_score: Decimal = Field(
        ...,
        description="Percentage of months where the household paid at least close to what was expected"
    )
    contribution_growth_rate: Optional[Decimal] = Field(
        default=None,
        description="Last three months against the three before, as a percentage change"
    )
    best_month: Optional[str] = None
    worst_month: Optional[str] = None


class PartnerAccountability(BaseModel):
    """One partner's contribution record across the tracked months."""
    model_config = ConfigDict(frozen=True)

    user_id: str
    months_tracked: int = Field(..., ge=0)
    monthly_contributions: list[Decimal] = Field(
        default_factory=list,
        description="Amount paid per tracked month, newest first"
    )
    consistency_score: Decimal = Field(
        ...,
        description="Percentage of tracked months with any contribution"
    )
    average_contribution: Decimal
    last_contribution_at: Optional[datetime] = None
    reliability: ReliabilityRating


# =============================================================================
# SAFETY POT
# =============================================================================

class ReallocationSuggestion(BaseModel):
    """Move some safety pot surplus into a goal."""
    model_config = ConfigDict(frozen=True)

    goal_id: UUID
    goal_name: str
    amount: Decimal
    priority: SuggestionPriority
    reason: str
    projected_progress: Decimal = Field(
        ...,
        description="Goal progress percentage after the move"
    )


class SafetyPotAssessment(BaseModel):
    """Full picture of the emergency fund's health."""
    model_config = ConfigDict(frozen=True)

    current_amount: Decimal
    monthly_expenses: Decimal
    months_covered: Decimal
    status: SafetyPotStatus
    target_amount: Decimal = Field(
        ...,
        description="Minimum acceptable balance (min_months of expenses)"
    )
    strong_target_amount: Decimal
    surplus_above_target: Decimal
    health_score: int = Field(..., ge=0, le=100)
    optimal_monthly_contribution: Decimal
    needs_immediate_attention: bool
    message: str
    suggestions: list[str] = Field(default_factory=list)
    reallocations: list[ReallocationSuggestion] = Field(default_factory=list)


class SafetyPotReport(BaseModel):
    """Month-over-month safety pot report."""
    model_config = ConfigDict(frozen=True)

    summary: str
    changes: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


# =============================================================================
# END-TO-END PLAN
# =============================================================================

class MonthlyPlan(BaseModel):
    """Everything the dashboard needs for one partnership and month."""
    model_config = ConfigDict(frozen=True)

    partnership_id: str
    month: str
    as_of: date
    correlation_id: UUID
    breakdown: ContributionBreakdown
    allocation_a: BucketAllocation
    allocation_b: BucketAllocation
    safety_pot: SafetyPotAssessment
    summary: ContributionSummary


# =============================================================================
# BOUNDARY VALIDATION
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'invalid_value', 'allowance_exceeds_income')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = None


class ValidationResult(BaseModel):
    """
    Semantic review of a parsed household.

    Parsing already rejected malformed input, so issues here are
    warnings the user should see, not reasons to refuse a plan.
    """

    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "warning"]
