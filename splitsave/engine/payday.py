"""
Payday Scheduler

Resolves an earner's payday rule to concrete dates. Contribution
reminders are timed off these.

Supported rules:
- A fixed day of the month (31st becomes the last day in short months)
- The last Friday of the month
- The last working day (Monday-Friday) of the month
"""

from datetime import date

from splitsave.engine.months import clamp_day, last_day, last_weekday, month_key, next_month, parse_month_key
from splitsave.models.household import PaydayKind, PaydayRule


FRIDAY = 4
SATURDAY = 5


class PaydayScheduler:
    """Concrete paydays for a payday rule."""

    def payday_in_month(self, rule: PaydayRule, year: int, month: int) -> date:
        if rule.kind == PaydayKind.LAST_FRIDAY:
            return last_weekday(year, month, FRIDAY)
        if rule.kind == PaydayKind.LAST_WORKING_DAY:
            current = last_day(f"{year:04d}-{month:02d}")
            while current.weekday() >= SATURDAY:
                current = current.replace(day=current.day - 1)
            return current
        return clamp_day(year, month, rule.day)

    def next_payday(self, rule: PaydayRule, as_of: date) -> date:
        """This month's payday if it is today or later, otherwise next month's."""
        this_month = self.payday_in_month(rule, as_of.year, as_of.month)
        if this_month >= as_of:
            return this_month
        year, month = parse_month_key(next_month(month_key(as_of)))
        return self.payday_in_month(rule, year, month)

    def days_until_payday(self, rule: PaydayRule, as_of: date) -> int:
        return (self.next_payday(rule, as_of) - as_of).days

    def is_payday(self, rule: PaydayRule, as_of: date) -> bool:
        return self.next_payday(rule, as_of) == as_of

    def upcoming_paydays(self, rule: PaydayRule, as_of: date, count: int = 3) -> list[date]:
        """The next `count` paydays, starting with the next one."""
        paydays = []
        current = self.next_payday(rule, as_of)
        while len(paydays) < count:
            paydays.append(current)
            year, month = parse_month_key(next_month(month_key(current)))
            current = self.payday_in_month(rule, year, month)
        return paydays

    def describe(self, rule: PaydayRule) -> str:
        if rule.kind == PaydayKind.LAST_FRIDAY:
            return "Last Friday of each month"
        if rule.kind == PaydayKind.LAST_WORKING_DAY:
            return "Last working day (Monday-Friday) of each month"
        return f"The {rule.day}{_ordinal_suffix(rule.day)} of each month"


def _ordinal_suffix(day: int) -> str:
    if 11 <= day <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
