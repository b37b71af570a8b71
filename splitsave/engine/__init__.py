"""
Budget Engine Package

Pure, synchronous calculations over a household snapshot:
income split, bucket allocation, goal requirements, contributions,
safety pot health, contribution history and paydays.
"""

from splitsave.engine.allocation import BudgetAllocationEngine
from splitsave.engine.contributions import ContributionCalculator
from splitsave.engine.errors import ConfigurationError, EngineError, ValidationError
from splitsave.engine.goals import GoalPlanner
from splitsave.engine.history import ContributionHistoryTracker
from splitsave.engine.income import IncomeAllocator
from splitsave.engine.payday import PaydayScheduler
from splitsave.engine.safety_pot import SafetyPotEngine

__all__ = [
    "BudgetAllocationEngine",
    "ConfigurationError",
    "ContributionCalculator",
    "ContributionHistoryTracker",
    "EngineError",
    "GoalPlanner",
    "IncomeAllocator",
    "PaydayScheduler",
    "SafetyPotEngine",
    "ValidationError",
]
