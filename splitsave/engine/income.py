"""
Income Allocator

Works out how much of each partner's income is actually available to the
household, and the proportional split that follows from it.

DESIGN DECISION: Disposable income is floored at zero for ratio math.
An allowance above income is a warning for the user, not an error, and
ratios never divide by a negative number. The raw (possibly negative)
value is still available for display.
"""

from decimal import Decimal
from typing import Optional

from splitsave.engine.errors import ValidationError
from splitsave.engine.money import ZERO
from splitsave.models.household import EarnerProfile, Partnership
from splitsave.models.plan import SplitRatio


EVEN_SPLIT = Decimal("0.5")


class IncomeAllocator:
    """Disposable income and proportional split between two earners."""

    def raw_disposable_income(self, profile: EarnerProfile) -> Decimal:
        """Income minus allowance, without the zero floor."""
        self._require_profile(profile, "profile")
        return profile.monthly_income - profile.personal_allowance

    def disposable_income(self, profile: EarnerProfile) -> Decimal:
        """max(0, monthly_income - personal_allowance)."""
        return max(ZERO, self.raw_disposable_income(profile))

    def split_ratio(
        self,
        profile_a: Optional[EarnerProfile],
        profile_b: Optional[EarnerProfile],
    ) -> SplitRatio:
        """
        Split in proportion to disposable income.

        ratio_b is always 1 - ratio_a, so the two add up exactly.
        When neither partner has disposable income the split is 50/50.
        """
        self._require_profile(profile_a, "profile_a")
        self._require_profile(profile_b, "profile_b")

        disposable_a = self.disposable_income(profile_a)
        disposable_b = self.disposable_income(profile_b)
        combined = disposable_a + disposable_b

        if combined == 0:
            ratio_a = EVEN_SPLIT
            fallback = True
        else:
            ratio_a = disposable_a / combined
            fallback = False

        return SplitRatio(
            ratio_a=ratio_a,
            ratio_b=1 - ratio_a,
            disposable_a=disposable_a,
            disposable_b=disposable_b,
            even_split_fallback=fallback,
            allowance_exceeds_income_a=profile_a.allowance_exceeds_income,
            allowance_exceeds_income_b=profile_b.allowance_exceeds_income,
        )

    def partnership_ratio(self, partnership: Partnership) -> SplitRatio:
        return self.split_ratio(partnership.partner_a, partnership.partner_b)

    @staticmethod
    def _require_profile(profile: Optional[EarnerProfile], field: str) -> None:
        if profile is None:
            raise ValidationError(
                "Both partner profiles are required to compute a split",
                field=field,
            )
        if not isinstance(profile, EarnerProfile):
            raise ValidationError(
                f"Expected an EarnerProfile, got {type(profile).__name__}",
                field=field,
            )
