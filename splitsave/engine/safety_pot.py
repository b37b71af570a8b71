"""
Safety Pot Engine

Sizes the shared emergency fund against the household's monthly burn
rate and classifies its health:

    months_covered = current / monthly_expenses   (0 when expenses are 0)

    critical   months_covered < 1
    low        1 <= months_covered < min_months
    adequate   min_months <= months_covered < strong_months
    excess     months_covered >= strong_months

DESIGN DECISION: min_months (3) and strong_months (6) are policy inputs.
Different screens of the old app disagreed on which one was "the"
target; here callers pass them explicitly or take the configured pair.

The engine computes targets and classifications only. It never holds
or moves money.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from splitsave.config import SafetyPotSettings, get_settings
from splitsave.engine.errors import ConfigurationError, ValidationError
from splitsave.engine.money import HUNDRED, ZERO, require_non_negative, round_money
from splitsave.engine.months import occurs_in_month
from splitsave.models.household import (
    Expense,
    ExpenseFrequency,
    Goal,
    SafetyPotState,
    SafetyPotStatus,
    SuggestionPriority,
)
from splitsave.models.plan import (
    ReallocationSuggestion,
    SafetyPotAssessment,
    SafetyPotReport,
)


# Monthly equivalent multiplier per expense frequency
MONTHLY_EQUIVALENT = {
    ExpenseFrequency.ONE_OFF: ZERO,
    ExpenseFrequency.WEEKLY: Decimal(52) / Decimal(12),
    ExpenseFrequency.MONTHLY: Decimal(1),
    ExpenseFrequency.QUARTERLY: Decimal(1) / Decimal(3),
    ExpenseFrequency.YEARLY: Decimal(1) / Decimal(12),
}


class SafetyPotEngine:
    """Emergency fund sizing, health classification and reallocation."""

    def __init__(
        self,
        settings: Optional[SafetyPotSettings] = None,
        currency_symbol: Optional[str] = None,
    ):
        self._settings = settings or get_settings().safety_pot
        self._currency = (
            currency_symbol if currency_symbol is not None
            else get_settings().app.currency_symbol
        )

    # -------------------------------------------------------------------------
    # Sizing
    # -------------------------------------------------------------------------

    def target_amount(self, monthly_expenses, coverage_months) -> Decimal:
        """monthly_expenses x coverage_months."""
        expenses = require_non_negative(monthly_expenses, "monthly_expenses")
        months = self._positive_policy(coverage_months, "coverage_months")
        return round_money(expenses * months)

    def monthly_burn_rate(
        self,
        expenses: list[Expense],
        month: Optional[str] = None,
    ) -> Decimal:
        """
        Monthly equivalent of recurring expenses.

        Weekly costs count 52/12 times, quarterly a third, yearly a
        twelfth. One-off expenses are not part of the burn rate.
        If a month is given, only expenses that occurred in it count.
        """
        total = ZERO
        for expense in expenses:
            if month is not None and not occurs_in_month(expense.occurred_at, month):
                continue
            total += expense.amount * MONTHLY_EQUIVALENT[expense.frequency]
        return round_money(total)

    # -------------------------------------------------------------------------
    # Classification
    # -------------------------------------------------------------------------

    def months_covered(self, current_amount, monthly_expenses) -> Decimal:
        current = require_non_negative(current_amount, "current_amount")
        expenses = require_non_negative(monthly_expenses, "monthly_expenses")
        if expenses == 0:
            return ZERO
        return current / expenses

    def classify(
        self,
        current_amount,
        monthly_expenses,
        min_months=None,
        strong_months=None,
    ) -> SafetyPotStatus:
        """Classify the pot by how many months of expenses it covers."""
        minimum, strong = self._thresholds(min_months, strong_months)
        covered = self.months_covered(current_amount, monthly_expenses)

        if covered < 1:
            return SafetyPotStatus.CRITICAL
        if covered < minimum:
            return SafetyPotStatus.LOW
        if covered < strong:
            return SafetyPotStatus.ADEQUATE
        return SafetyPotStatus.EXCESS

    def optimal_monthly_contribution(
        self,
        current_amount,
        target_amount,
        horizon_months=None,
    ) -> Decimal:
        """Monthly top-up that closes the gap to target within the horizon."""
        current = require_non_negative(current_amount, "current_amount")
        target = require_non_negative(target_amount, "target_amount")
        horizon = self._positive_policy(
            self._settings.horizon_months if horizon_months is None else horizon_months,
            "horizon_months",
        )
        return round_money(max(ZERO, (target - current) / horizon))

    def health_score(self, months_covered, strong_months=None) -> int:
        """0-100 score: coverage as a share of the strong threshold."""
        covered = require_non_negative(months_covered, "months_covered")
        strong = self._positive_policy(
            self._settings.strong_months if strong_months is None else strong_months,
            "strong_months",
        )
        score = (covered / strong * HUNDRED).quantize(Decimal(1), rounding=ROUND_HALF_UP)
        return int(min(HUNDRED, max(ZERO, score)))

    # -------------------------------------------------------------------------
    # Reallocation
    # -------------------------------------------------------------------------

    def reallocation_suggestions(
        self,
        status: SafetyPotStatus,
        goals: list[Goal],
        surplus_above_target,
    ) -> list[ReallocationSuggestion]:
        """
        Greedy, priority-ordered waterfall of surplus into unmet goals.

        Only an excess pot produces suggestions. Goals are visited by
        priority (1 first, input order on ties); each takes as much of
        the remaining surplus as it still needs.
        """
        surplus = require_non_negative(surplus_above_target, "surplus_above_target")
        if status != SafetyPotStatus.EXCESS or surplus == 0:
            return []

        unmet = sorted(
            (goal for goal in goals if not goal.is_completed),
            key=lambda goal: goal.priority,
        )
        if not unmet:
            return []

        top_priority = unmet[0].priority
        remaining = round_money(surplus)
        suggestions = []

        for goal in unmet:
            if remaining <= 0:
                break
            amount = round_money(min(remaining, goal.remaining_amount))
            if amount <= 0:
                continue

            projected = min(
                HUNDRED,
                (goal.current_amount + amount) / goal.target_amount * HUNDRED,
            )
            suggestions.append(ReallocationSuggestion(
                goal_id=goal.goal_id,
                goal_name=goal.name,
                amount=amount,
                priority=self._suggestion_priority(goal.priority - top_priority),
                reason=f"Safety pot surplus can move into '{goal.name}'",
                projected_progress=round_money(projected),
            ))
            remaining -= amount

        return suggestions

    # -------------------------------------------------------------------------
    # Assessment and reporting
    # -------------------------------------------------------------------------

    def assess(
        self,
        state: SafetyPotState,
        monthly_expenses,
        goals: Optional[list[Goal]] = None,
        min_months=None,
        strong_months=None,
        horizon_months=None,
    ) -> SafetyPotAssessment:
        """
        Everything the safety pot screen shows, in one pass.

        Thresholds and the top-up horizon default to the policy settings.
        """
        minimum, strong = self._thresholds(min_months, strong_months)
        expenses = require_non_negative(monthly_expenses, "monthly_expenses")
        current = state.current_amount

        covered = self.months_covered(current, expenses)
        status = self.classify(current, expenses, minimum, strong)
        target = self.target_amount(expenses, minimum)
        strong_target = self.target_amount(expenses, strong)
        surplus = max(ZERO, current - strong_target)

        return SafetyPotAssessment(
            current_amount=current,
            monthly_expenses=expenses,
            months_covered=round_money(covered),
            status=status,
            target_amount=target,
            strong_target_amount=strong_target,
            surplus_above_target=round_money(surplus),
            health_score=self.health_score(covered, strong),
            optimal_monthly_contribution=self.optimal_monthly_contribution(
                current, target, horizon_months
            ),
            needs_immediate_attention=status == SafetyPotStatus.CRITICAL,
            message=self._message(status, covered, minimum, strong, surplus),
            suggestions=self._suggestions(status, minimum),
            reallocations=self.reallocation_suggestions(status, goals or [], surplus),
        )

    def monthly_report(
        self,
        assessment: SafetyPotAssessment,
        previous_amount,
        contributions=ZERO,
        withdrawals=ZERO,
    ) -> SafetyPotReport:
        """Month-over-month change in the pot, with recommendations."""
        previous = require_non_negative(previous_amount, "previous_amount")
        added = require_non_negative(contributions, "contributions")
        withdrawn = require_non_negative(withdrawals, "withdrawals")

        change = assessment.current_amount - previous
        change_percent = change / previous * HUNDRED if previous > 0 else ZERO
        direction = "increased" if change >= 0 else "decreased"
        summary = (
            f"Safety pot {direction} by {self._currency}{abs(change):.2f} "
            f"({change_percent:.1f}%) this month."
        )

        changes = []
        if added > 0:
            changes.append(f"Added: {self._currency}{added:.2f}")
        if withdrawn > 0:
            changes.append(f"Withdrew: {self._currency}{withdrawn:.2f}")
        unexplained = change - (added - withdrawn)
        if unexplained != 0:
            changes.append(f"Other changes: {self._currency}{unexplained:.2f}")

        recommendations = list(assessment.suggestions)
        if assessment.status == SafetyPotStatus.CRITICAL:
            recommendations.insert(0, "URGENT: Add funds to the safety pot immediately")
        elif assessment.months_covered < 2:
            recommendations.insert(0, "Consider increasing monthly safety pot contributions")

        return SafetyPotReport(
            summary=summary,
            changes=changes,
            recommendations=recommendations,
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _thresholds(self, min_months, strong_months) -> tuple[Decimal, Decimal]:
        minimum = self._positive_policy(
            self._settings.min_months if min_months is None else min_months,
            "min_months",
        )
        strong = self._positive_policy(
            self._settings.strong_months if strong_months is None else strong_months,
            "strong_months",
        )
        if strong < minimum:
            raise ConfigurationError(
                f"strong_months ({strong}) cannot be below min_months ({minimum})",
                field="strong_months",
            )
        return minimum, strong

    @staticmethod
    def _positive_policy(value, field: str) -> Decimal:
        try:
            number = require_non_negative(value, field)
        except ValidationError as e:
            raise ConfigurationError(e.message, field=field)
        if number <= 0:
            raise ConfigurationError(f"{field} must be greater than zero", field=field)
        return number

    @staticmethod
    def _suggestion_priority(distance: int) -> SuggestionPriority:
        if distance == 0:
            return SuggestionPriority.HIGH
        if distance == 1:
            return SuggestionPriority.MEDIUM
        return SuggestionPriority.LOW

    def _message(
        self,
        status: SafetyPotStatus,
        covered: Decimal,
        minimum: Decimal,
        strong: Decimal,
        surplus: Decimal,
    ) -> str:
        if status == SafetyPotStatus.CRITICAL:
            return (
                "Your safety pot covers less than one month of expenses. "
                "Consider adding funds now."
            )
        if status == SafetyPotStatus.LOW:
            return (
                f"Your safety pot covers {covered:.1f} months. "
                f"Aim for {minimum:g} months of coverage."
            )
        if status == SafetyPotStatus.ADEQUATE:
            return (
                f"Your safety pot is well funded, covering {covered:.1f} months "
                "of expenses."
            )
        return (
            f"Your safety pot covers {covered:.1f} months, more than the "
            f"{strong:g} months needed. Consider moving "
            f"{self._currency}{surplus:.2f} to your savings goals."
        )

    @staticmethod
    def _suggestions(status: SafetyPotStatus, minimum: Decimal) -> list[str]:
        if status == SafetyPotStatus.CRITICAL:
            return [
                "Add funds to cover at least one month of expenses",
                "Review monthly expenses to reduce costs",
                "Consider a temporary contribution increase",
            ]
        if status == SafetyPotStatus.LOW:
            return [
                f"Keep building towards {minimum:g} months of coverage",
                "Set up automatic monthly contributions",
                "Review and reduce monthly expenses",
            ]
        if status == SafetyPotStatus.ADEQUATE:
            return [
                "Maintain the current funding level",
                "Monitor expenses for changes",
                "Consider goal-based savings",
            ]
        return [
            "Reallocate excess funds to savings goals",
            "Increase monthly savings contributions",
            "Consider early goal completion",
        ]
