"""Configuration package."""

from splitsave.config.settings import (
    AllocationPolicySettings,
    AppSettings,
    ContributionSettings,
    SafetyPotSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AllocationPolicySettings",
    "AppSettings",
    "ContributionSettings",
    "SafetyPotSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
