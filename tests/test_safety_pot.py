"""Tests for the safety pot engine."""

from datetime import datetime
from decimal import Decimal

import pytest

from splitsave.config import SafetyPotSettings
from splitsave.engine import ConfigurationError, SafetyPotEngine, ValidationError
from splitsave.models.household import (
    Expense,
    ExpenseFrequency,
    Goal,
    SafetyPotState,
    SafetyPotStatus,
    SuggestionPriority,
)


@pytest.fixture
def engine() -> SafetyPotEngine:
    return SafetyPotEngine(SafetyPotSettings(), currency_symbol="£")


def expense(amount, frequency, month=3) -> Expense:
    return Expense(
        amount=Decimal(str(amount)),
        category="Bills",
        occurred_at=datetime(2024, month, 5),
        owner_id="alex",
        frequency=frequency,
    )


class TestSizing:
    """Tests for targets and burn rate."""

    def test_target_amount(self, engine):
        """Three months of 500 is 1500."""
        assert engine.target_amount(Decimal("500"), 3) == Decimal("1500.00")

    @pytest.mark.parametrize("months", [0, -1])
    def test_non_positive_coverage_rejected(self, engine, months):
        """Coverage months must be positive."""
        with pytest.raises(ConfigurationError):
            engine.target_amount(Decimal("500"), months)

    def test_negative_expenses_rejected(self, engine):
        """Negative expenses are invalid input, not configuration."""
        with pytest.raises(ValidationError):
            engine.target_amount(Decimal("-500"), 3)

    def test_burn_rate_uses_frequency(self, engine):
        """Weekly x 52/12, quarterly / 3, yearly / 12, one-off ignored."""
        expenses = [
            expense(100, ExpenseFrequency.MONTHLY),
            expense(30, ExpenseFrequency.WEEKLY),
            expense(300, ExpenseFrequency.QUARTERLY),
            expense(1200, ExpenseFrequency.YEARLY),
            expense(999, ExpenseFrequency.ONE_OFF),
        ]
        assert engine.monthly_burn_rate(expenses) == Decimal("430.00")

    def test_burn_rate_for_month(self, engine):
        """Only the month's expenses count when a month is given."""
        expenses = [
            expense(100, ExpenseFrequency.MONTHLY, month=3),
            expense(250, ExpenseFrequency.MONTHLY, month=4),
        ]
        assert engine.monthly_burn_rate(expenses, "2024-03") == Decimal("100.00")


class TestClassify:
    """Tests for safety pot health classification."""

    def test_low(self, engine):
        """Two months of cover is low."""
        assert engine.classify(Decimal("1000"), Decimal("500")) == SafetyPotStatus.LOW

    def test_adequate(self, engine):
        """Five months of cover is adequate."""
        assert engine.classify(Decimal("2500"), Decimal("500")) == SafetyPotStatus.ADEQUATE

    def test_critical(self, engine):
        """Less than one month is critical."""
        assert engine.classify(Decimal("499"), Decimal("500")) == SafetyPotStatus.CRITICAL

    def test_boundaries(self, engine):
        """Exactly min_months is adequate; exactly strong_months is excess."""
        assert engine.classify(Decimal("1500"), Decimal("500")) == SafetyPotStatus.ADEQUATE
        assert engine.classify(Decimal("3000"), Decimal("500")) == SafetyPotStatus.EXCESS
        assert engine.classify(Decimal("500"), Decimal("500")) == SafetyPotStatus.LOW

    def test_zero_expenses_is_critical(self, engine):
        """No expenses means zero months covered."""
        assert engine.months_covered(Decimal("1000"), Decimal("0")) == Decimal("0")
        assert engine.classify(Decimal("1000"), Decimal("0")) == SafetyPotStatus.CRITICAL

    def test_monotonic_in_current_amount(self, engine):
        """More money never makes the status worse."""
        order = [
            SafetyPotStatus.CRITICAL,
            SafetyPotStatus.LOW,
            SafetyPotStatus.ADEQUATE,
            SafetyPotStatus.EXCESS,
        ]
        ranks = [
            order.index(engine.classify(Decimal(amount), Decimal("500")))
            for amount in range(0, 4000, 50)
        ]
        assert ranks == sorted(ranks)

    def test_explicit_thresholds(self, engine):
        """Callers can pass their own thresholds."""
        assert engine.classify(
            Decimal("2000"), Decimal("500"), min_months=2, strong_months=4
        ) == SafetyPotStatus.EXCESS

    def test_strong_below_min_rejected(self, engine):
        """strong_months must not be below min_months."""
        with pytest.raises(ConfigurationError):
            engine.classify(Decimal("1000"), Decimal("500"), min_months=6, strong_months=3)

    def test_settings_reject_strong_below_min(self):
        """The settings object enforces the same rule."""
        with pytest.raises(ValueError):
            SafetyPotSettings(min_months=Decimal("6"), strong_months=Decimal("3"))


class TestContributionAndScore:
    """Tests for the optimal top-up and health score."""

    def test_optimal_monthly_contribution(self, engine):
        """1200 short over 12 months is 100 a month."""
        assert engine.optimal_monthly_contribution(
            Decimal("300"), Decimal("1500")
        ) == Decimal("100.00")

    def test_no_contribution_above_target(self, engine):
        """Nothing to add when the pot is already above target."""
        assert engine.optimal_monthly_contribution(
            Decimal("2000"), Decimal("1500")
        ) == Decimal("0.00")

    def test_zero_horizon_rejected(self, engine):
        """The horizon must be positive."""
        with pytest.raises(ConfigurationError):
            engine.optimal_monthly_contribution(Decimal("0"), Decimal("1500"), 0)

    def test_health_score(self, engine):
        """Score is coverage as a share of strong months, capped at 100."""
        assert engine.health_score(Decimal("3")) == 50
        assert engine.health_score(Decimal("0")) == 0
        assert engine.health_score(Decimal("9")) == 100


class TestReallocation:
    """Tests for moving excess into goals."""

    def test_priority_waterfall(self, engine):
        """Goals take surplus in priority order until it runs out."""
        first = Goal(name="Car", target_amount=Decimal("300"), priority=1)
        second = Goal(name="Holiday", target_amount=Decimal("500"), priority=2)
        third = Goal(name="Sofa", target_amount=Decimal("100"), priority=5)

        suggestions = engine.reallocation_suggestions(
            SafetyPotStatus.EXCESS, [third, second, first], Decimal("600")
        )
        assert [s.goal_name for s in suggestions] == ["Car", "Holiday"]
        assert [s.amount for s in suggestions] == [Decimal("300.00"), Decimal("300.00")]
        assert [s.priority for s in suggestions] == [
            SuggestionPriority.HIGH,
            SuggestionPriority.MEDIUM,
        ]
        assert suggestions[0].projected_progress == Decimal("100.00")
        assert suggestions[1].projected_progress == Decimal("60.00")

    def test_only_excess_reallocates(self, engine):
        """An adequate pot keeps its money."""
        goal = Goal(name="Car", target_amount=Decimal("300"))
        assert engine.reallocation_suggestions(
            SafetyPotStatus.ADEQUATE, [goal], Decimal("600")
        ) == []

    def test_completed_goals_skipped(self, engine):
        """Completed goals never receive surplus."""
        done = Goal(name="Done", target_amount=Decimal("100"), current_amount=Decimal("100"))
        assert engine.reallocation_suggestions(
            SafetyPotStatus.EXCESS, [done], Decimal("600")
        ) == []


class TestAssessment:
    """Tests for the full assessment and monthly report."""

    def test_excess_assessment(self, engine):
        """Eight months of cover: excess with a surplus to move."""
        goal = Goal(name="Car", target_amount=Decimal("5000"), priority=1)
        assessment = engine.assess(
            SafetyPotState(current_amount=Decimal("4000")),
            Decimal("500"),
            goals=[goal],
        )
        assert assessment.status == SafetyPotStatus.EXCESS
        assert assessment.months_covered == Decimal("8.00")
        assert assessment.target_amount == Decimal("1500.00")
        assert assessment.strong_target_amount == Decimal("3000.00")
        assert assessment.surplus_above_target == Decimal("1000.00")
        assert assessment.health_score == 100
        assert assessment.optimal_monthly_contribution == Decimal("0.00")
        assert not assessment.needs_immediate_attention
        assert len(assessment.reallocations) == 1
        assert assessment.reallocations[0].amount == Decimal("1000.00")
        assert "£1000.00" in assessment.message

    def test_critical_assessment(self, engine):
        """An empty pot needs immediate attention."""
        assessment = engine.assess(SafetyPotState(), Decimal("800"))
        assert assessment.status == SafetyPotStatus.CRITICAL
        assert assessment.needs_immediate_attention
        assert assessment.optimal_monthly_contribution == Decimal("200.00")
        assert assessment.reallocations == []
        assert assessment.suggestions

    def test_assessment_horizon_override(self, engine):
        """A six-month horizon doubles the twelve-month top-up."""
        assessment = engine.assess(SafetyPotState(), Decimal("800"), horizon_months=6)
        assert assessment.target_amount == Decimal("2400.00")
        assert assessment.optimal_monthly_contribution == Decimal("400.00")

    def test_assessment_rejects_zero_horizon(self, engine):
        """The per-call horizon is checked like the configured one."""
        with pytest.raises(ConfigurationError):
            engine.assess(SafetyPotState(), Decimal("800"), horizon_months=0)

    def test_monthly_report(self, engine):
        """Report change since last month and recommendations."""
        assessment = engine.assess(SafetyPotState(current_amount=Decimal("300")), Decimal("800"))
        report = engine.monthly_report(
            assessment,
            previous_amount=Decimal("200"),
            contributions=Decimal("150"),
            withdrawals=Decimal("50"),
        )
        assert report.summary == "Safety pot increased by £100.00 (50.0%) this month."
        assert report.changes == ["Added: £150.00", "Withdrew: £50.00"]
        assert report.recommendations[0].startswith("URGENT")
