"""
Shared fixtures for SplitSave tests.

Test strategy:
1. Unit tests for each engine component (pure, no I/O)
2. Integration tests for the plan flow with in-memory storage
3. No network, no real databases
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from splitsave.models.household import (
    EarnerProfile,
    Expense,
    ExpenseFrequency,
    Goal,
    Partnership,
    SafetyPotState,
)


@pytest.fixture
def alex() -> EarnerProfile:
    return EarnerProfile(
        user_id="alex",
        display_name="Alex",
        monthly_income=Decimal("3000"),
        personal_allowance=Decimal("500"),
    )


@pytest.fixture
def sam() -> EarnerProfile:
    return EarnerProfile(
        user_id="sam",
        display_name="Sam",
        monthly_income=Decimal("2000"),
        personal_allowance=Decimal("500"),
    )


@pytest.fixture
def partnership(alex, sam) -> Partnership:
    return Partnership(partnership_id="home-1", partner_a=alex, partner_b=sam)


@pytest.fixture
def march_expenses() -> list[Expense]:
    return [
        Expense(
            amount=Decimal("1000"),
            category="Rent",
            occurred_at=datetime(2024, 3, 1, 9, 0),
            owner_id="alex",
        ),
        Expense(
            amount=Decimal("200.50"),
            category="Utilities",
            occurred_at=datetime(2024, 3, 12, 18, 30),
            owner_id="sam",
        ),
        Expense(
            amount=Decimal("75"),
            category="Groceries",
            occurred_at=datetime(2024, 2, 27, 12, 0),
            owner_id="sam",
            frequency=ExpenseFrequency.WEEKLY,
        ),
    ]


@pytest.fixture
def holiday_goal() -> Goal:
    return Goal(name="Holiday", target_amount=Decimal("1200"))


@pytest.fixture
def safety_pot() -> SafetyPotState:
    return SafetyPotState(current_amount=Decimal("2000"))


@pytest.fixture
def as_of() -> date:
    return date(2024, 3, 20)
