"""
Budget Allocation Engine

The single home for the allocation percentages. The old UI repeated
70/12/8/10 and 48/32/20 inline in several components; every caller now
goes through here.

Baseline policy on one partner's disposable income D:

    Shared expenses   70%
    Goal 1            12%   (20% x 60%)
    Goal 2             8%   (20% x 40%)
    Safety pot        10%

Surplus (income above the contracted baseline salary) only ever goes to
savings and safety, never to shared expenses:

    Goal 1   48%   (80% x 60%)
    Goal 2   32%   (80% x 40%)
    Safety   20%

Rounded buckets always add back up to the amount being split: the
rounding remainder goes to one designated bucket.
"""

from typing import Optional

from splitsave.config import AllocationPolicySettings, get_settings
from splitsave.engine.errors import ConfigurationError, ValidationError
from splitsave.engine.money import ZERO, require_non_negative, round_money
from splitsave.models.household import ContributionStatus
from splitsave.models.plan import BucketAllocation, SurplusAllocation


class BudgetAllocationEngine:
    """Splits disposable income into budget buckets."""

    def __init__(self, policy: Optional[AllocationPolicySettings] = None):
        self._policy = policy or get_settings().allocation
        if self._policy.baseline_share_total != 1:
            raise ConfigurationError(
                "Baseline shares must add up to 100% "
                f"(got {self._policy.baseline_share_total * 100}%)",
                field="allocation",
            )

    @property
    def policy(self) -> AllocationPolicySettings:
        return self._policy

    def baseline_allocation(self, disposable_income) -> BucketAllocation:
        """
        Apply the baseline percentages to one partner's disposable income.

        Shared expenses absorb the rounding remainder.
        """
        income = require_non_negative(disposable_income, "disposable_income")

        goal1 = round_money(income * self._policy.goal1_share)
        goal2 = round_money(income * self._policy.goal2_share)
        safety_pot = round_money(income * self._policy.safety_pot_share)
        shared = round_money(income) - goal1 - goal2 - safety_pot

        return BucketAllocation(
            shared_expenses=shared,
            goal1=goal1,
            goal2=goal2,
            safety_pot=safety_pot,
        )

    def distribute_surplus(self, actual_salary, baseline_salary) -> SurplusAllocation:
        """
        Split income above the contracted baseline.

        A salary below baseline is rejected: baseline allocations are
        always sized from the contracted salary, never from less.
        The safety pot absorbs the rounding remainder.
        """
        actual = require_non_negative(actual_salary, "actual_salary")
        baseline = require_non_negative(baseline_salary, "baseline_salary")

        if actual < baseline:
            raise ValidationError(
                f"Actual salary ({actual}) is below baseline salary ({baseline}); "
                "surplus distribution needs actual >= baseline",
                field="actual_salary",
            )

        extra = round_money(actual - baseline)
        goal1 = round_money(extra * self._policy.surplus_goal1_share)
        goal2 = round_money(extra * self._policy.surplus_goal2_share)

        return SurplusAllocation(
            extra=extra,
            goal1=goal1,
            goal2=goal2,
            safety_pot=extra - goal1 - goal2,
        )

    def recommended_allocation(
        self,
        actual_salary,
        baseline_salary,
        personal_allowance=ZERO,
    ) -> BucketAllocation:
        """
        Baseline allocation of the contracted salary plus its surplus split.

        The baseline percentages apply to the contracted salary less the
        personal allowance. A salary below the contracted one raises
        ValidationError from distribute_surplus.
        """
        surplus = self.distribute_surplus(actual_salary, baseline_salary)
        contracted = require_non_negative(baseline_salary, "baseline_salary")
        allowance = require_non_negative(personal_allowance, "personal_allowance")
        baseline = self.baseline_allocation(max(ZERO, contracted - allowance))

        return BucketAllocation(
            shared_expenses=baseline.shared_expenses,
            goal1=baseline.goal1 + surplus.goal1,
            goal2=baseline.goal2 + surplus.goal2,
            safety_pot=baseline.safety_pot + surplus.safety_pot,
        )

    def classify_contribution(self, actual, target) -> ContributionStatus:
        """
        Classify an actual contribution against its target.

        over-achieved  actual >= 1.10 x target
        on-track       target <= actual < 1.10 x target
        close          0.90 x target <= actual < target
        under          anything lower

        A zero target cannot be under-met, so it is always on-track.
        """
        actual_amount = require_non_negative(actual, "actual")
        target_amount = require_non_negative(target, "target")

        if target_amount == 0:
            return ContributionStatus.ON_TRACK
        if actual_amount >= target_amount * self._policy.over_achieved_multiplier:
            return ContributionStatus.OVER_ACHIEVED
        if actual_amount >= target_amount:
            return ContributionStatus.ON_TRACK
        if actual_amount >= target_amount * self._policy.close_multiplier:
            return ContributionStatus.CLOSE
        return ContributionStatus.UNDER

    def bucket_statuses(
        self,
        actual: BucketAllocation,
        target: BucketAllocation,
    ) -> dict[str, ContributionStatus]:
        """Classify every bucket of an actual allocation against its target."""
        return {
            name: self.classify_contribution(getattr(actual, name), getattr(target, name))
            for name in ("shared_expenses", "goal1", "goal2", "safety_pot")
        }
