"""Tests for the income allocator and budget allocation engine."""

from decimal import Decimal

import pytest

from splitsave.config import AllocationPolicySettings
from splitsave.engine import (
    BudgetAllocationEngine,
    ConfigurationError,
    IncomeAllocator,
    ValidationError,
)
from splitsave.models.household import ContributionStatus, EarnerProfile
from splitsave.models.plan import BucketAllocation


def profile(user_id: str, income, allowance="0") -> EarnerProfile:
    return EarnerProfile(
        user_id=user_id,
        monthly_income=Decimal(str(income)),
        personal_allowance=Decimal(str(allowance)),
    )


class TestDisposableIncome:
    """Tests for disposable income."""

    def test_income_minus_allowance(self):
        """3000 income with a 500 allowance leaves 2500."""
        allocator = IncomeAllocator()
        assert allocator.disposable_income(profile("a", 3000, 500)) == Decimal("2500")

    def test_allowance_above_income_floors_at_zero(self):
        """Disposable income never goes negative."""
        allocator = IncomeAllocator()
        p = profile("a", 1000, 1500)
        assert allocator.disposable_income(p) == Decimal("0")
        assert allocator.raw_disposable_income(p) == Decimal("-500")
        assert p.allowance_exceeds_income


class TestSplitRatio:
    """Tests for the proportional split."""

    def test_proportional_split(self, alex, sam):
        """2500 vs 1500 disposable splits 62.5 / 37.5."""
        ratio = IncomeAllocator().split_ratio(alex, sam)
        assert ratio.ratio_a == Decimal("0.625")
        assert ratio.ratio_b == Decimal("0.375")
        assert not ratio.even_split_fallback

    def test_ratios_sum_to_one(self):
        """Ratios add up exactly, even for repeating decimals."""
        ratio = IncomeAllocator().split_ratio(profile("a", 1000), profile("b", 2000))
        assert ratio.ratio_a + ratio.ratio_b == 1

    def test_even_split_when_no_disposable_income(self):
        """Neither partner has disposable income: fall back to 50/50."""
        ratio = IncomeAllocator().split_ratio(
            profile("a", 500, 800),
            profile("b", 0),
        )
        assert ratio.ratio_a == Decimal("0.5")
        assert ratio.ratio_b == Decimal("0.5")
        assert ratio.even_split_fallback
        assert ratio.allowance_exceeds_income_a
        assert not ratio.allowance_exceeds_income_b

    def test_one_partner_without_disposable_income(self):
        """A partner with nothing left to share pays nothing."""
        ratio = IncomeAllocator().split_ratio(profile("a", 1000, 1200), profile("b", 2000))
        assert ratio.ratio_a == Decimal("0")
        assert ratio.ratio_b == Decimal("1")
        assert not ratio.even_split_fallback

    def test_missing_profile_rejected(self, alex):
        """A half-formed partnership is a validation error."""
        with pytest.raises(ValidationError) as exc:
            IncomeAllocator().split_ratio(alex, None)
        assert exc.value.field == "profile_b"

    def test_partnership_ratio(self, partnership):
        """Partnership ratio uses partner_a / partner_b."""
        ratio = IncomeAllocator().partnership_ratio(partnership)
        assert ratio.ratio_a == Decimal("0.625")


class TestBaselineAllocation:
    """Tests for the 70/12/8/10 baseline."""

    def test_baseline_on_2500(self):
        """2500 splits into 1750 / 300 / 200 / 250."""
        allocation = BudgetAllocationEngine().baseline_allocation(Decimal("2500"))
        assert allocation.shared_expenses == Decimal("1750.00")
        assert allocation.goal1 == Decimal("300.00")
        assert allocation.goal2 == Decimal("200.00")
        assert allocation.safety_pot == Decimal("250.00")
        assert allocation.savings == Decimal("500.00")

    def test_rounding_remainder_goes_to_shared_expenses(self):
        """Buckets always add back up to the rounded input."""
        allocation = BudgetAllocationEngine().baseline_allocation(Decimal("0.05"))
        assert allocation.goal1 == Decimal("0.01")
        assert allocation.goal2 == Decimal("0.00")
        assert allocation.safety_pot == Decimal("0.01")
        assert allocation.shared_expenses == Decimal("0.03")
        assert allocation.total == Decimal("0.05")

    @pytest.mark.parametrize("amount", ["0", "1", "333.33", "1234.57", "99999.99"])
    def test_buckets_sum_to_input(self, amount):
        """Sum invariant holds across awkward amounts."""
        allocation = BudgetAllocationEngine().baseline_allocation(Decimal(amount))
        assert allocation.total == Decimal(amount)

    def test_negative_income_rejected(self):
        """Negative disposable income is invalid input."""
        with pytest.raises(ValidationError):
            BudgetAllocationEngine().baseline_allocation(Decimal("-1"))

    def test_policy_must_sum_to_one(self):
        """Shares that don't add up to 100% are a configuration error."""
        policy = AllocationPolicySettings(shared_expenses_share=Decimal("0.50"))
        with pytest.raises(ConfigurationError):
            BudgetAllocationEngine(policy)


class TestSurplus:
    """Tests for surplus distribution above the baseline salary."""

    def test_surplus_split(self):
        """200 above baseline splits 96 / 64 / 40."""
        surplus = BudgetAllocationEngine().distribute_surplus(Decimal("3200"), Decimal("3000"))
        assert surplus.extra == Decimal("200.00")
        assert surplus.goal1 == Decimal("96.00")
        assert surplus.goal2 == Decimal("64.00")
        assert surplus.safety_pot == Decimal("40.00")

    def test_surplus_is_conserved(self):
        """goal1 + goal2 + safety_pot == extra exactly."""
        surplus = BudgetAllocationEngine().distribute_surplus(Decimal("3000.07"), Decimal("3000"))
        assert surplus.goal1 + surplus.goal2 + surplus.safety_pot == surplus.extra

    def test_no_surplus(self):
        """Salary at baseline has nothing extra."""
        surplus = BudgetAllocationEngine().distribute_surplus(Decimal("3000"), Decimal("3000"))
        assert surplus.extra == Decimal("0.00")
        assert surplus.safety_pot == Decimal("0.00")

    def test_salary_below_baseline_rejected(self):
        """Surplus needs actual >= baseline."""
        with pytest.raises(ValidationError) as exc:
            BudgetAllocationEngine().distribute_surplus(Decimal("2800"), Decimal("3000"))
        assert exc.value.field == "actual_salary"

    def test_recommended_allocation(self):
        """Baseline of the contracted salary plus the surplus on top."""
        allocation = BudgetAllocationEngine().recommended_allocation(
            Decimal("3200"), Decimal("2500")
        )
        assert allocation == BucketAllocation(
            shared_expenses=Decimal("1750.00"),
            goal1=Decimal("300.00") + Decimal("336.00"),
            goal2=Decimal("200.00") + Decimal("224.00"),
            safety_pot=Decimal("250.00") + Decimal("140.00"),
        )

    def test_recommended_allocation_less_allowance(self):
        """The baseline is sized from the contracted salary less the allowance."""
        allocation = BudgetAllocationEngine().recommended_allocation(
            Decimal("3200"), Decimal("3000"), Decimal("500")
        )
        assert allocation == BucketAllocation(
            shared_expenses=Decimal("1750.00"),
            goal1=Decimal("396.00"),
            goal2=Decimal("264.00"),
            safety_pot=Decimal("290.00"),
        )

    def test_recommended_allocation_below_baseline_rejected(self):
        """No baseline split is produced from a salary below contract."""
        with pytest.raises(ValidationError) as exc:
            BudgetAllocationEngine().recommended_allocation(
                Decimal("2800"), Decimal("3000"), Decimal("300")
            )
        assert exc.value.field == "actual_salary"


class TestClassifyContribution:
    """Tests for actual-vs-target classification."""

    @pytest.mark.parametrize(
        "actual,expected",
        [
            ("110", ContributionStatus.OVER_ACHIEVED),
            ("150", ContributionStatus.OVER_ACHIEVED),
            ("109.99", ContributionStatus.ON_TRACK),
            ("100", ContributionStatus.ON_TRACK),
            ("99.99", ContributionStatus.CLOSE),
            ("90", ContributionStatus.CLOSE),
            ("89.99", ContributionStatus.UNDER),
            ("0", ContributionStatus.UNDER),
        ],
    )
    def test_thresholds(self, actual, expected):
        """Status bands around a target of 100."""
        engine = BudgetAllocationEngine()
        assert engine.classify_contribution(Decimal(actual), Decimal("100")) == expected

    def test_zero_target_is_on_track(self):
        """Nothing expected cannot be under-met."""
        engine = BudgetAllocationEngine()
        assert engine.classify_contribution(Decimal("5"), Decimal("0")) == ContributionStatus.ON_TRACK

    def test_bucket_statuses(self):
        """Each bucket is classified independently."""
        engine = BudgetAllocationEngine()
        target = engine.baseline_allocation(Decimal("2500"))
        actual = BucketAllocation(
            shared_expenses=Decimal("1750"),
            goal1=Decimal("400"),
            goal2=Decimal("185"),
            safety_pot=Decimal("100"),
        )
        statuses = engine.bucket_statuses(actual, target)
        assert statuses == {
            "shared_expenses": ContributionStatus.ON_TRACK,
            "goal1": ContributionStatus.OVER_ACHIEVED,
            "goal2": ContributionStatus.CLOSE,
            "safety_pot": ContributionStatus.UNDER,
        }
