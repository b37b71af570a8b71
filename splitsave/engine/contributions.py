"""
Contribution Calculator

Works out what a household has to fund in a month and how much each
partner pays:

    total   = expenses in the month + goal requirements + safety pot target
    share_a = round(total x ratio_a)
    share_b = total - share_a

Giving the rounding remainder to partner B means the two shares always
add up to the total exactly, with no fractional-cent leakage.

It also builds the dashboard summary of past months, classifying each
partner's payment against their expected share.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from splitsave.config import ContributionSettings, get_settings
from splitsave.engine.allocation import BudgetAllocationEngine
from splitsave.engine.errors import ValidationError
from splitsave.engine.goals import GoalPlanner
from splitsave.engine.history import ContributionHistoryTracker
from splitsave.engine.income import IncomeAllocator
from splitsave.engine.money import ZERO, percentage, require_non_negative, round_money
from splitsave.engine.months import (
    days_until,
    last_day,
    month_key,
    occurs_in_month,
    validate_month_key,
)
from splitsave.models.household import (
    EarnerProfile,
    Expense,
    Goal,
    MonthlyContributionRecord,
    PaymentState,
)
from splitsave.models.plan import (
    ContributionBreakdown,
    ContributionSummary,
    MonthContributionStatus,
    MonthOutcome,
)


class ContributionCalculator:
    """Monthly funding requirement, partner shares and history summary."""

    def __init__(
        self,
        income_allocator: Optional[IncomeAllocator] = None,
        allocation_engine: Optional[BudgetAllocationEngine] = None,
        goal_planner: Optional[GoalPlanner] = None,
        history_tracker: Optional[ContributionHistoryTracker] = None,
        settings: Optional[ContributionSettings] = None,
    ):
        self._settings = settings or get_settings().contribution
        self._income = income_allocator or IncomeAllocator()
        self._allocation = allocation_engine or BudgetAllocationEngine()
        self._goals = goal_planner or GoalPlanner(self._settings)
        self._history = history_tracker or ContributionHistoryTracker(self._allocation)

    def expenses_total(self, expenses: list[Expense], month: str) -> Decimal:
        """Sum of expenses that occurred in the month."""
        validate_month_key(month)
        total = ZERO
        for expense in expenses:
            if occurs_in_month(expense.occurred_at, month):
                total += expense.amount
        return round_money(total)

    def calculate_monthly_contribution(
        self,
        expenses: list[Expense],
        goals: list[Goal],
        safety_pot_monthly_target,
        profile_a: Optional[EarnerProfile],
        profile_b: Optional[EarnerProfile],
        month: str,
        as_of: Optional[date] = None,
    ) -> ContributionBreakdown:
        """
        Total funding for the month and each partner's proportional share.

        Args:
            expenses: Household expenses (only those in `month` count)
            goals: Savings goals (completed goals are skipped)
            safety_pot_monthly_target: Monthly safety pot contribution
            profile_a: First partner
            profile_b: Second partner
            month: Month key (YYYY-MM)
            as_of: Date used for goal deadlines; defaults to today
        """
        validate_month_key(month)
        as_of = as_of or date.today()
        safety_pot = round_money(
            require_non_negative(safety_pot_monthly_target, "safety_pot_monthly_target")
        )

        ratio = self._income.split_ratio(profile_a, profile_b)

        expenses_total = self.expenses_total(expenses, month)
        goals_total = self._goals.monthly_goals_total(goals, as_of)
        total = expenses_total + goals_total + safety_pot

        share_a = round_money(total * ratio.ratio_a)

        return ContributionBreakdown(
            month=month,
            expenses_total=expenses_total,
            goals_total=goals_total,
            safety_pot_total=safety_pot,
            total=total,
            share_a=share_a,
            share_b=total - share_a,
            ratio=ratio,
        )

    def calculate_contribution_summary(
        self,
        records: list[MonthlyContributionRecord],
        user_id: str,
        partner_id: str,
        as_of: Optional[date] = None,
    ) -> ContributionSummary:
        """
        Summarise contribution history from one user's point of view.

        The newest month is the current month; the rest are previous
        months, newest first.
        """
        as_of = as_of or date.today()
        if user_id == partner_id:
            raise ValidationError("User and partner must be different", field="partner_id")

        for record in records:
            if record.user_id not in (user_id, partner_id):
                raise ValidationError(
                    f"Record for {record.month} belongs to {record.user_id}, "
                    "who is not part of this partnership",
                    field="records",
                )

        outcomes = self._history.group_by_month(records)
        by_key = {(r.month, r.user_id): r for r in records}

        statuses = [
            self._month_status(
                outcome,
                by_key.get((outcome.month, user_id)),
                by_key.get((outcome.month, partner_id)),
                as_of,
            )
            for outcome in outcomes
        ]

        if statuses:
            current, previous = statuses[0], statuses[1:]
        else:
            current, previous = self._empty_month(month_key(as_of), as_of), []

        user_contributed = sum(
            (r.actual_amount for r in records if r.user_id == user_id), ZERO
        )
        partner_contributed = sum(
            (r.actual_amount for r in records if r.user_id == partner_id), ZERO
        )
        met = sum(1 for outcome in outcomes if outcome.both_met)

        return ContributionSummary(
            current_month=current,
            previous_months=previous,
            user_contributed=user_contributed,
            partner_contributed=partner_contributed,
            total_contributed=user_contributed + partner_contributed,
            completion_rate=percentage(Decimal(met), Decimal(len(outcomes))),
            streak_months=self._history.streak_from_outcomes(outcomes),
        )

    def is_due_soon(self, status: MonthContributionStatus) -> bool:
        """Unpaid and due within the configured window."""
        return (
            status.payment_state != PaymentState.COMPLETE
            and 0 <= status.days_until_due <= self._settings.due_soon_days
        )

    def _month_status(
        self,
        outcome: MonthOutcome,
        user_record: Optional[MonthlyContributionRecord],
        partner_record: Optional[MonthlyContributionRecord],
        as_of: date,
    ) -> MonthContributionStatus:
        user_expected = user_record.expected_share if user_record else ZERO
        user_actual = user_record.actual_amount if user_record else ZERO
        partner_expected = partner_record.expected_share if partner_record else ZERO
        partner_actual = partner_record.actual_amount if partner_record else ZERO

        user_paid = user_record is not None and user_record.met
        partner_paid = partner_record is not None and partner_record.met
        days_left = days_until(last_day(outcome.month), as_of)
        state = self._payment_state(user_paid, partner_paid, days_left)

        return MonthContributionStatus(
            month=outcome.month,
            user_expected=user_expected,
            user_actual=user_actual,
            partner_expected=partner_expected,
            partner_actual=partner_actual,
            user_status=self._allocation.classify_contribution(user_actual, user_expected),
            partner_status=self._allocation.classify_contribution(
                partner_actual, partner_expected
            ),
            both_met=outcome.both_met,
            payment_state=state,
            days_until_due=days_left,
            is_overdue=state == PaymentState.OVERDUE,
        )

    def _empty_month(self, month: str, as_of: date) -> MonthContributionStatus:
        days_left = days_until(last_day(month), as_of)
        return MonthContributionStatus(
            month=month,
            user_expected=ZERO,
            user_actual=ZERO,
            partner_expected=ZERO,
            partner_actual=ZERO,
            user_status=self._allocation.classify_contribution(ZERO, ZERO),
            partner_status=self._allocation.classify_contribution(ZERO, ZERO),
            both_met=False,
            payment_state=PaymentState.PENDING,
            days_until_due=days_left,
            is_overdue=False,
        )

    @staticmethod
    def _payment_state(user_paid: bool, partner_paid: bool, days_left: int) -> PaymentState:
        if user_paid and partner_paid:
            return PaymentState.COMPLETE
        if user_paid or partner_paid:
            return PaymentState.PARTIAL
        if days_left < 0:
            return PaymentState.OVERDUE
        return PaymentState.PENDING
