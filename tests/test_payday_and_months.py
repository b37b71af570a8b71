"""Tests for paydays, month arithmetic and money helpers."""

from datetime import date
from decimal import Decimal

import pytest

from splitsave.engine import PaydayScheduler, ValidationError
from splitsave.engine.money import percentage, round_money, to_decimal
from splitsave.engine.months import (
    last_day,
    month_name,
    months_between,
    next_month,
    previous_month,
    validate_month_key,
)
from splitsave.models.household import PaydayKind, PaydayRule


class TestPaydayScheduler:
    """Tests for resolving payday rules to dates."""

    def test_day_of_month_clamps_to_month_end(self):
        """The 31st in February 2024 is the 29th."""
        rule = PaydayRule(day=31)
        assert PaydayScheduler().payday_in_month(rule, 2024, 2) == date(2024, 2, 29)

    def test_last_friday(self):
        """March 2024 ends on a Sunday; last Friday is the 29th."""
        rule = PaydayRule(kind=PaydayKind.LAST_FRIDAY)
        assert PaydayScheduler().payday_in_month(rule, 2024, 3) == date(2024, 3, 29)

    def test_last_working_day_skips_weekend(self):
        """August 2024 ends on a Saturday; last working day is the 30th."""
        rule = PaydayRule(kind=PaydayKind.LAST_WORKING_DAY)
        scheduler = PaydayScheduler()
        assert scheduler.payday_in_month(rule, 2024, 8) == date(2024, 8, 30)
        assert scheduler.payday_in_month(rule, 2024, 6) == date(2024, 6, 28)
        assert scheduler.payday_in_month(rule, 2024, 7) == date(2024, 7, 31)

    def test_next_payday_today_counts(self):
        """Payday today is the next payday."""
        rule = PaydayRule(day=25)
        scheduler = PaydayScheduler()
        assert scheduler.next_payday(rule, date(2024, 1, 25)) == date(2024, 1, 25)
        assert scheduler.days_until_payday(rule, date(2024, 1, 25)) == 0
        assert scheduler.is_payday(rule, date(2024, 1, 25))

    def test_next_payday_rolls_to_next_month(self):
        """After this month's payday, next month's is next."""
        rule = PaydayRule(day=25)
        scheduler = PaydayScheduler()
        assert scheduler.next_payday(rule, date(2024, 12, 26)) == date(2025, 1, 25)
        assert scheduler.days_until_payday(rule, date(2024, 12, 26)) == 30

    def test_upcoming_paydays(self):
        """Consecutive paydays, each clamped to its month."""
        rule = PaydayRule(day=31)
        assert PaydayScheduler().upcoming_paydays(rule, date(2024, 1, 31)) == [
            date(2024, 1, 31),
            date(2024, 2, 29),
            date(2024, 3, 31),
        ]

    @pytest.mark.parametrize(
        "rule,expected",
        [
            (PaydayRule(day=1), "The 1st of each month"),
            (PaydayRule(day=22), "The 22nd of each month"),
            (PaydayRule(day=13), "The 13th of each month"),
            (PaydayRule(kind=PaydayKind.LAST_FRIDAY), "Last Friday of each month"),
        ],
    )
    def test_describe(self, rule, expected):
        """Human-readable payday rule."""
        assert PaydayScheduler().describe(rule) == expected

    def test_rule_needs_day(self):
        """A day-of-month rule without a day is invalid."""
        with pytest.raises(ValueError):
            PaydayRule(kind=PaydayKind.DAY_OF_MONTH)

    def test_last_friday_rule_takes_no_day(self):
        """Last-Friday rules don't take a day."""
        with pytest.raises(ValueError):
            PaydayRule(kind=PaydayKind.LAST_FRIDAY, day=5)


class TestMonths:
    """Tests for month key arithmetic."""

    def test_year_rollover(self):
        """December to January and back."""
        assert next_month("2024-12") == "2025-01"
        assert previous_month("2025-01") == "2024-12"

    @pytest.mark.parametrize("key", ["2024-13", "2024-1", "24-01", "", "2024/01"])
    def test_invalid_keys(self, key):
        """Malformed month keys are rejected."""
        with pytest.raises(ValidationError):
            validate_month_key(key)

    def test_months_between_ignores_day(self):
        """31 Jan to 1 Feb is one calendar month."""
        assert months_between(date(2024, 1, 31), date(2024, 2, 1)) == 1
        assert months_between(date(2024, 3, 1), date(2023, 12, 1)) == -3

    def test_last_day_leap_year(self):
        """February 2024 has 29 days."""
        assert last_day("2024-02") == date(2024, 2, 29)

    def test_month_name(self):
        """Readable month name."""
        assert month_name("2024-03") == "March 2024"


class TestMoney:
    """Tests for money helpers."""

    def test_round_half_up(self):
        """Half a cent rounds up."""
        assert round_money(Decimal("0.005")) == Decimal("0.01")
        assert round_money(Decimal("2.675")) == Decimal("2.68")

    def test_float_goes_through_str(self):
        """0.1 stays 0.1."""
        assert to_decimal(0.1) == Decimal("0.1")

    @pytest.mark.parametrize("value", [True, float("nan"), "abc", None])
    def test_invalid_numbers(self, value):
        """Booleans, NaN, junk strings and None are rejected."""
        with pytest.raises(ValidationError):
            to_decimal(value)

    def test_percentage_of_zero(self):
        """Percentage of nothing is zero."""
        assert percentage(Decimal("5"), Decimal("0")) == Decimal("0.00")
        assert percentage(Decimal("1"), Decimal("3")) == Decimal("33.33")
