"""
Data Models Package

This package contains all Pydantic models used by SplitSave.
All data flowing into and out of the engine conforms to these schemas.
"""

from splitsave.models.household import (
    MONTH_KEY_PATTERN,
    ContributionStatus,
    EarnerProfile,
    Expense,
    ExpenseFrequency,
    Goal,
    MonthlyContributionRecord,
    Partnership,
    PaydayKind,
    PaydayRule,
    PaymentState,
    ReliabilityRating,
    SafetyPotState,
    SafetyPotStatus,
    SuggestionPriority,
)
from splitsave.models.plan import (
    BucketAllocation,
    ContributionBreakdown,
    ContributionSummary,
    ContributionTrends,
    GoalProgress,
    MonthContributionStatus,
    MonthlyPlan,
    MonthOutcome,
    PartnerAccountability,
    ReallocationSuggestion,
    RedistributionPlan,
    SafetyPotAssessment,
    SafetyPotReport,
    SplitRatio,
    SurplusAllocation,
    ValidationIssue,
    ValidationResult,
)
from splitsave.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Household models
    "MONTH_KEY_PATTERN",
    "ContributionStatus",
    "EarnerProfile",
    "Expense",
    "ExpenseFrequency",
    "Goal",
    "MonthlyContributionRecord",
    "Partnership",
    "PaydayKind",
    "PaydayRule",
    "PaymentState",
    "ReliabilityRating",
    "SafetyPotState",
    "SafetyPotStatus",
    "SuggestionPriority",
    # Result models
    "BucketAllocation",
    "ContributionBreakdown",
    "ContributionSummary",
    "ContributionTrends",
    "GoalProgress",
    "MonthContributionStatus",
    "MonthlyPlan",
    "MonthOutcome",
    "PartnerAccountability",
    "ReallocationSuggestion",
    "RedistributionPlan",
    "SafetyPotAssessment",
    "SafetyPotReport",
    "SplitRatio",
    "SurplusAllocation",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
