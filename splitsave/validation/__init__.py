"""Boundary validation package."""

from splitsave.validation.validator import HouseholdInputValidator

__all__ = ["HouseholdInputValidator"]
