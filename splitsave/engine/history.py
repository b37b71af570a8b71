"""
Contribution History Tracker

Aggregates monthly contribution records into completion rate, streaks,
trends and per-partner accountability.

The unit of reasoning is a month, not a record: a month counts as met
only when BOTH partners have a record for it and each paid at least
their expected share. A month with a single record is a missed month.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Optional

from splitsave.engine.allocation import BudgetAllocationEngine
from splitsave.engine.errors import ValidationError
from splitsave.engine.money import ZERO, percentage, round_money
from splitsave.models.household import (
    ContributionStatus,
    MonthlyContributionRecord,
    ReliabilityRating,
)
from splitsave.models.plan import ContributionTrends, MonthOutcome, PartnerAccountability


PARTNERS_PER_MONTH = 2

# Months compared on each side of the growth rate
GROWTH_WINDOW_MONTHS = 3

# Minimum consistency score for each rating, best first
RELIABILITY_BANDS = [
    (Decimal("90"), ReliabilityRating.EXCELLENT),
    (Decimal("75"), ReliabilityRating.GOOD),
    (Decimal("50"), ReliabilityRating.FAIR),
]


class ContributionHistoryTracker:
    """Completion rate, streaks and trends over monthly records."""

    def __init__(self, allocation_engine: Optional[BudgetAllocationEngine] = None):
        self._allocation = allocation_engine or BudgetAllocationEngine()

    def group_by_month(
        self,
        records: list[MonthlyContributionRecord],
    ) -> list[MonthOutcome]:
        """
        Reduce records to one outcome per month, newest month first.

        Raises ValidationError on a second record for the same partner
        in a month, or on a third partner.
        """
        by_month: dict[str, dict[str, MonthlyContributionRecord]] = defaultdict(dict)

        for record in records:
            partners = by_month[record.month]
            if record.user_id in partners:
                raise ValidationError(
                    f"Duplicate contribution record for {record.user_id} in {record.month}",
                    field="records",
                )
            partners[record.user_id] = record
            if len(partners) > PARTNERS_PER_MONTH:
                raise ValidationError(
                    f"More than {PARTNERS_PER_MONTH} partners recorded in {record.month}",
                    field="records",
                )

        outcomes = []
        for month in sorted(by_month, reverse=True):
            partners = list(by_month[month].values())
            outcomes.append(MonthOutcome(
                month=month,
                partner_count=len(partners),
                expected_total=sum((r.expected_share for r in partners), ZERO),
                actual_total=sum((r.actual_amount for r in partners), ZERO),
                both_met=(
                    len(partners) == PARTNERS_PER_MONTH
                    and all(r.met for r in partners)
                ),
            ))
        return outcomes

    def completion_rate(self, records: list[MonthlyContributionRecord]) -> Decimal:
        """Percentage of months in which both partners met their share."""
        outcomes = self.group_by_month(records)
        met = sum(1 for outcome in outcomes if outcome.both_met)
        return percentage(Decimal(met), Decimal(len(outcomes)))

    def streak_months(self, records: list[MonthlyContributionRecord]) -> int:
        """Consecutive met months counting back from the most recent one."""
        return self.streak_from_outcomes(self.group_by_month(records))

    @staticmethod
    def streak_from_outcomes(outcomes: list[MonthOutcome]) -> int:
        streak = 0
        for outcome in outcomes:
            if not outcome.both_met:
                break
            streak += 1
        return streak

    def trends(self, records: list[MonthlyContributionRecord]) -> ContributionTrends:
        """
        Long-run contribution trends.

        Best and worst months are ranked by actual / expected; months
        with nothing expected are left out of the ranking.

        The consistency score is the share of months in which the
        household paid at least close to what was expected. The growth
        rate compares the latest three tracked months with the three
        before them and is only reported once six months exist.
        """
        outcomes = self.group_by_month(records)
        if not outcomes:
            return ContributionTrends(
                months_tracked=0,
                months_met=0,
                months_missed=0,
                average_monthly_contribution=round_money(ZERO),
                consistency_score=percentage(ZERO, ZERO),
            )

        met = sum(1 for outcome in outcomes if outcome.both_met)
        total_actual = sum((outcome.actual_total for outcome in outcomes), ZERO)
        consistent = sum(
            1 for outcome in outcomes
            if self._allocation.classify_contribution(
                outcome.actual_total, outcome.expected_total
            ) != ContributionStatus.UNDER
        )

        ranked = [outcome for outcome in outcomes if outcome.expected_total > 0]
        best = worst = None
        if ranked:
            # Oldest first so ties go to the earlier month
            ranked.sort(key=lambda outcome: outcome.month)
            best = max(ranked, key=lambda o: o.actual_total / o.expected_total).month
            worst = min(ranked, key=lambda o: o.actual_total / o.expected_total).month

        return ContributionTrends(
            months_tracked=len(outcomes),
            months_met=met,
            months_missed=len(outcomes) - met,
            average_monthly_contribution=round_money(total_actual / len(outcomes)),
            consistency_score=percentage(Decimal(consistent), Decimal(len(outcomes))),
            contribution_growth_rate=self.growth_rate(outcomes),
            best_month=best,
            worst_month=worst,
        )

    @staticmethod
    def growth_rate(outcomes: list[MonthOutcome]) -> Optional[Decimal]:
        """
        Percentage change from the previous three months to the latest three.

        Expects outcomes newest first. None with fewer than six months,
        or when nothing was paid in the earlier window.
        """
        if len(outcomes) < GROWTH_WINDOW_MONTHS * 2:
            return None

        recent = sum((o.actual_total for o in outcomes[:GROWTH_WINDOW_MONTHS]), ZERO)
        previous = sum(
            (o.actual_total for o in outcomes[GROWTH_WINDOW_MONTHS:GROWTH_WINDOW_MONTHS * 2]),
            ZERO,
        )
        if previous == 0:
            return None
        return percentage(recent - previous, previous)

    def partner_accountability(
        self,
        records: list[MonthlyContributionRecord],
        user_id: str,
    ) -> PartnerAccountability:
        """
        How reliably one partner contributes.

        Every month the household has records for counts. A month with
        no record from this partner counts as a zero contribution.
        """
        outcomes = self.group_by_month(records)
        paid = {
            record.month: record.actual_amount
            for record in records
            if record.user_id == user_id
        }
        contributions = [paid.get(outcome.month, ZERO) for outcome in outcomes]

        months = len(contributions)
        consistency = percentage(
            Decimal(sum(1 for amount in contributions if amount > 0)),
            Decimal(months),
        )
        average = sum(contributions, ZERO) / months if months else ZERO

        paid_at = [
            record.paid_at for record in records
            if record.user_id == user_id and record.paid_at is not None
        ]

        return PartnerAccountability(
            user_id=user_id,
            months_tracked=months,
            monthly_contributions=contributions,
            consistency_score=consistency,
            average_contribution=round_money(average),
            last_contribution_at=max(paid_at) if paid_at else None,
            reliability=self.reliability_rating(consistency),
        )

    @staticmethod
    def reliability_rating(consistency_score: Decimal) -> ReliabilityRating:
        for floor, rating in RELIABILITY_BANDS:
            if consistency_score >= floor:
                return rating
        return ReliabilityRating.POOR
