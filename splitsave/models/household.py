"""
Household Data Models for SplitSave

These models describe everything the engine reads about a household:
the two earners, their shared expenses and goals, the safety pot and
the monthly contribution records.

They are designed to:
1. Replace loosely-shaped records with required, typed fields
2. Reject negative money at construction time
3. Be immutable once built (a calculation runs over a fixed snapshot)

DESIGN DECISION: Money is always Decimal, never float.
Repeated summation of floats drifts; Decimal does not.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)


# Month key: "YYYY-MM"
MONTH_KEY_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ContributionStatus(str, Enum):
    """
    Actual-vs-target classification for a contribution.

    Derived from (actual, target) every time; never persisted.
    """
    UNDER = "under"
    CLOSE = "close"
    ON_TRACK = "on-track"
    OVER_ACHIEVED = "over-achieved"


class PaymentState(str, Enum):
    """Payment state of a month, looking at both partners together."""
    PENDING = "pending"
    PARTIAL = "partial"      # Exactly one partner has paid
    COMPLETE = "complete"    # Both partners have paid
    OVERDUE = "overdue"      # Neither paid and the month is over


class SafetyPotStatus(str, Enum):
    """Health of the emergency fund relative to monthly expenses."""
    CRITICAL = "critical"
    LOW = "low"
    ADEQUATE = "adequate"
    EXCESS = "excess"


class ExpenseFrequency(str, Enum):
    """How often an expense recurs. Used to derive the monthly burn rate."""
    ONE_OFF = "one_off"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class PaydayKind(str, Enum):
    """Supported payday schedules."""
    DAY_OF_MONTH = "day_of_month"
    LAST_FRIDAY = "last_friday"
    LAST_WORKING_DAY = "last_working_day"


class SuggestionPriority(str, Enum):
    """Priority tag on a reallocation suggestion."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ReliabilityRating(str, Enum):
    """How dependably one partner contributes, from their consistency score."""
    EXCELLENT = "excellent"  # >= 90%
    GOOD = "good"            # >= 75%
    FAIR = "fair"            # >= 50%
    POOR = "poor"


# =============================================================================
# EARNERS
# =============================================================================

class PaydayRule(BaseModel):
    """
    When an earner gets paid.

    A day-of-month rule needs a day (1-31). Days past the end of a short
    month fall back to the month's last day.
    """
    model_config = ConfigDict(frozen=True)

    kind: PaydayKind = Field(
        default=PaydayKind.DAY_OF_MONTH,
        description="Schedule type"
    )
    day: Optional[int] = Field(
        default=None,
        ge=1,
        le=31,
        description="Day of month (day_of_month rules only)"
    )

    @model_validator(mode="after")
    def validate_day(self) -> "PaydayRule":
        if self.kind == PaydayKind.DAY_OF_MONTH and self.day is None:
            raise ValueError("A day_of_month payday needs a day")
        if self.kind != PaydayKind.DAY_OF_MONTH and self.day is not None:
            raise ValueError(f"A {self.kind.value} payday does not take a day")
        return self


class EarnerProfile(BaseModel):
    """
    One partner's income profile.

    Personal allowance above income is allowed. It is flagged, and the
    disposable income used for ratio math is clamped at zero.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    user_id: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Owning user"
    )
    display_name: Optional[str] = Field(
        default=None,
        max_length=100,
    )
    monthly_income: Decimal = Field(
        ...,
        ge=0,
        description="Monthly take-home income"
    )
    personal_allowance: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Money kept back for personal spending"
    )
    payday: PaydayRule = Field(
        default_factory=lambda: PaydayRule(day=1),
        description="Pay schedule"
    )
    baseline_salary: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Contracted salary; defaults to monthly_income"
    )

    @property
    def allowance_exceeds_income(self) -> bool:
        return self.personal_allowance > self.monthly_income

    @property
    def contracted_salary(self) -> Decimal:
        if self.baseline_salary is None:
            return self.monthly_income
        return self.baseline_salary


class Partnership(BaseModel):
    """
    Two earners sharing a budget.

    CRITICAL: Both profiles must be present. Calculations over a
    half-formed partnership are undefined.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    partnership_id: str = Field(..., min_length=1)
    partner_a: EarnerProfile
    partner_b: EarnerProfile

    @model_validator(mode="after")
    def validate_distinct_partners(self) -> "Partnership":
        if self.partner_a.user_id == self.partner_b.user_id:
            raise ValueError("A partnership needs two different users")
        return self

    @property
    def user_ids(self) -> tuple[str, str]:
        return self.partner_a.user_id, self.partner_b.user_id

    def profile(self, user_id: str) -> Optional[EarnerProfile]:
        for partner in (self.partner_a, self.partner_b):
            if partner.user_id == user_id:
                return partner
        return None


# =============================================================================
# SPENDING, GOALS AND THE SAFETY POT
# =============================================================================

class Expense(BaseModel):
    """A shared expense. Append-only from the engine's point of view."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    expense_id: UUID = Field(default_factory=uuid4)
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Expense amount"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
    )
    occurred_at: datetime = Field(
        ...,
        description="When the expense happened"
    )
    owner_id: str = Field(
        ...,
        min_length=1,
        description="User who logged the expense"
    )
    frequency: ExpenseFrequency = Field(
        default=ExpenseFrequency.MONTHLY,
        description="How often the expense recurs"
    )
    description: Optional[str] = Field(
        default=None,
        max_length=500,
    )


class Goal(BaseModel):
    """
    A shared savings goal.

    The engine derives a monthly required contribution from this.
    It never changes current_amount; the ledger does that.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    goal_id: UUID = Field(default_factory=uuid4)
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
    )
    target_amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount to save"
    )
    current_amount: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Amount saved so far (may exceed target)"
    )
    deadline: Optional[date] = None
    priority: int = Field(
        default=3,
        ge=1,
        description="1 = highest priority"
    )

    @property
    def remaining_amount(self) -> Decimal:
        return max(Decimal("0"), self.target_amount - self.current_amount)

    @property
    def is_completed(self) -> bool:
        return self.current_amount >= self.target_amount


class SafetyPotState(BaseModel):
    """The shared emergency fund. One per partnership."""
    model_config = ConfigDict(frozen=True)

    current_amount: Decimal = Field(
        default=Decimal("0"),
        ge=0,
    )
    last_contribution_at: Optional[datetime] = None


class MonthlyContributionRecord(BaseModel):
    """
    What one partner was asked to pay in a month, and what they paid.

    The pair of records for a month is the unit the history tracker
    reasons about ("both paid").
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    month: str = Field(
        ...,
        pattern=MONTH_KEY_PATTERN,
        description="Month key (YYYY-MM)"
    )
    user_id: str = Field(..., min_length=1)
    expected_share: Decimal = Field(..., ge=0)
    actual_amount: Decimal = Field(default=Decimal("0"), ge=0)
    paid_at: Optional[datetime] = None
    notes: Optional[str] = Field(
        default=None,
        max_length=1000,
    )

    @property
    def met(self) -> bool:
        return self.actual_amount >= self.expected_share
