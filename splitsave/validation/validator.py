"""
Two-Stage Household Input Validation

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - SCHEMA VALIDATION:
- Type checking
- Required field presence
- Non-negative money, month key format
- Raw mappings become typed, immutable models

STAGE 2 - SEMANTIC VALIDATION:
- Allowance above income
- Goals past their deadline
- Expenses dated in the future
- Duplicate contribution records

Stage 1 failures raise ValidationError: the engine cannot run on
malformed input. Stage 2 reports issues for the user to review; only
duplicate records are errors, because the history tracker would
reject them.

IMPORTANT: Validation NEVER silently fixes issues.
"""

from datetime import date
from typing import Any, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from splitsave.engine.errors import ValidationError
from splitsave.models.household import (
    EarnerProfile,
    Expense,
    Goal,
    MonthlyContributionRecord,
    Partnership,
    SafetyPotState,
)
from splitsave.models.plan import ValidationIssue, ValidationResult
from splitsave.services.storage import HouseholdSnapshot


ModelT = TypeVar("ModelT", bound=BaseModel)


class HouseholdInputValidator:
    """
    Validates raw household input through a two-stage pipeline.

    Stage 1: parse_* methods (schema)
    Stage 2: review (semantics over a parsed snapshot)
    """

    # =========================================================================
    # Stage 1: schema
    # =========================================================================

    def parse_profile(self, raw: Mapping[str, Any]) -> EarnerProfile:
        return self._parse(EarnerProfile, raw)

    def parse_partnership(self, raw: Mapping[str, Any]) -> Partnership:
        return self._parse(Partnership, raw)

    def parse_expense(self, raw: Mapping[str, Any]) -> Expense:
        return self._parse(Expense, raw)

    def parse_goal(self, raw: Mapping[str, Any]) -> Goal:
        return self._parse(Goal, raw)

    def parse_record(self, raw: Mapping[str, Any]) -> MonthlyContributionRecord:
        return self._parse(MonthlyContributionRecord, raw)

    def parse_safety_pot(self, raw: Mapping[str, Any]) -> SafetyPotState:
        return self._parse(SafetyPotState, raw)

    def parse_household(self, raw: Mapping[str, Any]) -> HouseholdSnapshot:
        """
        Parse a whole household payload.

        Expected keys: partnership (required), expenses, goals,
        safety_pot, contribution_records.
        """
        if "partnership" not in raw:
            raise ValidationError("partnership is required", field="partnership")

        return HouseholdSnapshot(
            partnership=self.parse_partnership(raw["partnership"]),
            expenses=[self.parse_expense(e) for e in raw.get("expenses", [])],
            goals=[self.parse_goal(g) for g in raw.get("goals", [])],
            safety_pot=self.parse_safety_pot(raw.get("safety_pot") or {}),
            contribution_records=[
                self.parse_record(r) for r in raw.get("contribution_records", [])
            ],
        )

    @staticmethod
    def _parse(model: Type[ModelT], raw: Mapping[str, Any]) -> ModelT:
        """Build a model, reporting the first offending field on failure."""
        if not isinstance(raw, Mapping):
            raise ValidationError(
                f"{model.__name__} input must be a mapping, got {type(raw).__name__}",
                field=model.__name__,
            )
        try:
            return model.model_validate(dict(raw))
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or model.__name__
            raise ValidationError(f"{field}: {first['msg']}", field=field) from e

    # =========================================================================
    # Stage 2: semantics
    # =========================================================================

    def review(
        self,
        snapshot: HouseholdSnapshot,
        as_of: Optional[date] = None,
    ) -> ValidationResult:
        """Review a parsed household for issues worth showing the user."""
        as_of = as_of or date.today()
        issues = []

        for profile in (snapshot.partnership.partner_a, snapshot.partnership.partner_b):
            if profile.allowance_exceeds_income:
                issues.append(ValidationIssue(
                    field="personal_allowance",
                    issue_type="allowance_exceeds_income",
                    message=(
                        f"Personal allowance for {profile.user_id} "
                        f"({profile.personal_allowance}) is above their income "
                        f"({profile.monthly_income})"
                    ),
                    severity="warning",
                    suggested_fix="Lower the allowance; disposable income counts as zero",
                ))

        for goal in snapshot.goals:
            if goal.deadline and goal.deadline < as_of and not goal.is_completed:
                issues.append(ValidationIssue(
                    field="deadline",
                    issue_type="deadline_passed",
                    message=f"Goal '{goal.name}' passed its deadline ({goal.deadline})",
                    severity="warning",
                    suggested_fix="Move the deadline; the remainder is due this month",
                ))

        for expense in snapshot.expenses:
            if expense.occurred_at.date() > as_of:
                issues.append(ValidationIssue(
                    field="occurred_at",
                    issue_type="future_date",
                    message=(
                        f"Expense '{expense.category}' is dated in the future "
                        f"({expense.occurred_at.date()})"
                    ),
                    severity="warning",
                    suggested_fix="Please verify the date is correct",
                ))

        seen = set()
        for record in snapshot.contribution_records:
            key = (record.month, record.user_id)
            if key in seen:
                issues.append(ValidationIssue(
                    field="contribution_records",
                    issue_type="duplicate",
                    message=f"Duplicate contribution record for {record.user_id} in {record.month}",
                    severity="error",
                    suggested_fix="Keep one record per partner per month",
                ))
            seen.add(key)

        return ValidationResult(
            is_valid=not any(issue.severity == "error" for issue in issues),
            issues=issues,
        )
