"""
Goal Planner

Turns a savings goal into a monthly funding requirement by amortising
what is left over the months remaining:

    monthly_required = max(0, target - current) / max(1, months_to_deadline)

Goals without a deadline use a fixed planning horizon (12 months by
default). Goals past their deadline are still funded: whatever is left
is due in a single month.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from splitsave.config import ContributionSettings, get_settings
from splitsave.engine.money import HUNDRED, ZERO, round_money
from splitsave.engine.months import months_between
from splitsave.models.household import Goal
from splitsave.models.plan import GoalProgress, RedistributionPlan


DAYS_PER_WEEK = Decimal("7")


class GoalPlanner:
    """Monthly requirements, progress and redistribution for goals."""

    def __init__(self, settings: Optional[ContributionSettings] = None):
        self._settings = settings or get_settings().contribution

    def is_active(self, goal: Goal) -> bool:
        return not goal.is_completed

    def months_remaining(self, goal: Goal, as_of: date) -> int:
        if goal.deadline is None:
            return self._settings.goal_planning_horizon_months
        return max(1, months_between(as_of, goal.deadline))

    def monthly_required_contribution(self, goal: Goal, as_of: date) -> Decimal:
        """Remaining amount spread evenly over the months remaining."""
        if goal.remaining_amount == 0:
            return round_money(ZERO)
        return round_money(goal.remaining_amount / self.months_remaining(goal, as_of))

    def active_goals(self, goals: list[Goal]) -> list[Goal]:
        return [goal for goal in goals if self.is_active(goal)]

    def monthly_goals_total(self, goals: list[Goal], as_of: date) -> Decimal:
        total = round_money(ZERO)
        for goal in self.active_goals(goals):
            total += self.monthly_required_contribution(goal, as_of)
        return total

    def goal_progress(self, goal: Goal, as_of: date) -> GoalProgress:
        """
        Snapshot of a goal's progress.

        Progress is capped at 100% even when the goal is over-funded.
        """
        progress = min(HUNDRED, goal.current_amount / goal.target_amount * HUNDRED)
        months = self.months_remaining(goal, as_of)
        monthly = self.monthly_required_contribution(goal, as_of)

        days_remaining = None
        is_overdue = False
        weekly = round_money(ZERO)
        if goal.deadline is not None:
            days_remaining = (goal.deadline - as_of).days
            is_overdue = days_remaining < 0 and not goal.is_completed
            if days_remaining > 0:
                weekly = round_money(
                    goal.remaining_amount / (Decimal(days_remaining) / DAYS_PER_WEEK)
                )
            else:
                weekly = round_money(goal.remaining_amount)

        return GoalProgress(
            goal_id=goal.goal_id,
            progress_percentage=round_money(progress),
            is_completed=goal.is_completed,
            is_overdue=is_overdue,
            days_remaining=days_remaining,
            months_remaining=months,
            monthly_required=monthly,
            weekly_required=weekly,
        )

    def smart_redistribution(self, goals: list[Goal]) -> list[RedistributionPlan]:
        """
        Spread the excess of over-funded goals across active goals.

        Each active goal gets a share proportional to what it still
        needs, capped at that amount. Returns an empty plan when there
        is no excess or nothing left to fund.
        """
        completed = [goal for goal in goals if goal.is_completed]
        active = self.active_goals(goals)
        if not completed or not active:
            return []

        total_excess = sum(
            (goal.current_amount - goal.target_amount for goal in completed),
            ZERO,
        )
        if total_excess <= 0:
            return []

        total_remaining = sum((goal.remaining_amount for goal in active), ZERO)

        plans = []
        for goal in active:
            share = goal.remaining_amount / total_remaining * total_excess
            plans.append(RedistributionPlan(
                goal_id=goal.goal_id,
                current_amount=goal.current_amount,
                target_amount=goal.target_amount,
                redistribution_amount=round_money(min(share, goal.remaining_amount)),
            ))
        return plans
