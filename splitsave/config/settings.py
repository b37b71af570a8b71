"""
Configuration Management for SplitSave

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: Every policy number lives here, not in the engine.
The old screens each hard-coded their own thresholds (3 vs 6 months of
safety pot, 70/30 splits of extra income). One settings object means one
canonical set of numbers, documented in one place.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AllocationPolicySettings(BaseSettings):
    """
    Budget allocation percentages.

    Baseline: 70% shared expenses, 20% savings (split 60/40 between
    goal 1 and goal 2), 10% safety pot.
    Surplus: 80% savings (same 60/40 split), 20% safety pot.
    """

    model_config = SettingsConfigDict(
        env_prefix="ALLOCATION_",
        extra="ignore"
    )

    shared_expenses_share: Decimal = Field(
        default=Decimal("0.70"),
        ge=0,
        le=1,
        description="Share of disposable income for shared expenses"
    )
    savings_share: Decimal = Field(
        default=Decimal("0.20"),
        ge=0,
        le=1,
        description="Share of disposable income for savings goals"
    )
    safety_pot_share: Decimal = Field(
        default=Decimal("0.10"),
        ge=0,
        le=1,
        description="Share of disposable income for the safety pot"
    )
    goal1_share_of_savings: Decimal = Field(
        default=Decimal("0.60"),
        ge=0,
        le=1,
        description="Part of savings going to goal 1 (rest goes to goal 2)"
    )
    surplus_savings_share: Decimal = Field(
        default=Decimal("0.80"),
        ge=0,
        le=1,
        description="Part of above-baseline income going to savings (rest to safety pot)"
    )

    # Contribution status thresholds
    over_achieved_multiplier: Decimal = Field(
        default=Decimal("1.10"),
        ge=1,
        description="actual >= target x this is over-achieved"
    )
    close_multiplier: Decimal = Field(
        default=Decimal("0.90"),
        gt=0,
        le=1,
        description="actual >= target x this (but below target) is close"
    )

    @property
    def goal1_share(self) -> Decimal:
        return self.savings_share * self.goal1_share_of_savings

    @property
    def goal2_share(self) -> Decimal:
        return self.savings_share * (1 - self.goal1_share_of_savings)

    @property
    def surplus_goal1_share(self) -> Decimal:
        return self.surplus_savings_share * self.goal1_share_of_savings

    @property
    def surplus_goal2_share(self) -> Decimal:
        return self.surplus_savings_share * (1 - self.goal1_share_of_savings)

    @property
    def surplus_safety_pot_share(self) -> Decimal:
        return 1 - self.surplus_savings_share

    @property
    def baseline_share_total(self) -> Decimal:
        return self.shared_expenses_share + self.savings_share + self.safety_pot_share


class SafetyPotSettings(BaseSettings):
    """Emergency fund policy."""

    model_config = SettingsConfigDict(
        env_prefix="SAFETY_POT_",
        extra="ignore"
    )

    min_months: Decimal = Field(
        default=Decimal("3"),
        gt=0,
        description="Minimum acceptable coverage in months of expenses"
    )
    strong_months: Decimal = Field(
        default=Decimal("6"),
        gt=0,
        description="Coverage at which the pot counts as excess"
    )
    horizon_months: int = Field(
        default=12,
        ge=1,
        description="Months over which to close a safety pot shortfall"
    )

    @model_validator(mode="after")
    def validate_thresholds(self) -> "SafetyPotSettings":
        if self.strong_months < self.min_months:
            raise ValueError("strong_months cannot be below min_months")
        return self


class ContributionSettings(BaseSettings):
    """Monthly contribution policy."""

    model_config = SettingsConfigDict(
        env_prefix="CONTRIBUTION_",
        extra="ignore"
    )

    goal_planning_horizon_months: int = Field(
        default=12,
        ge=1,
        description="Months to amortise a goal that has no deadline"
    )
    due_soon_days: int = Field(
        default=7,
        ge=0,
        description="How many days before month end a contribution counts as due soon"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for structured logs"
    )
    currency_symbol: str = Field(
        default="£",
        max_length=5,
        description="Symbol used in human-readable messages"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def allocation(self) -> AllocationPolicySettings:
        return AllocationPolicySettings()

    @property
    def safety_pot(self) -> SafetyPotSettings:
        return SafetyPotSettings()

    @property
    def contribution(self) -> ContributionSettings:
        return ContributionSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    {setting_name}_error entry for each failure.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("allocation", "safety_pot", "contribution", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
