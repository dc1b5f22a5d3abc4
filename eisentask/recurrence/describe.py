"""Human-readable recurrence descriptions (used for editor previews and task badges)."""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from eisentask.models.recurrence import (
    MAX_MONTH_DAY,
    MIN_MONTH_DAY,
    WEEKEND_DAYS,
    WORK_WEEK_DAYS,
    FlexibleRecurrence,
    InvalidRecurrenceSpec,
    LegacyRecurrence,
    RecurrencePattern,
    RecurrenceSpec,
    RecurrenceUnit,
)


WEEKDAY_LABELS: Tuple[str, ...] = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

_LEGACY_LABELS: Dict[RecurrencePattern, str] = {
    RecurrencePattern.DAILY: "Daily",
    RecurrencePattern.WEEKLY: "Weekly",
    RecurrencePattern.MONTHLY: "Monthly",
    RecurrencePattern.YEARLY: "Yearly",
}

_EVERY_UNIT_LABELS: Dict[RecurrenceUnit, str] = {
    RecurrenceUnit.DAY: "Daily",
    RecurrenceUnit.WEEK: "Weekly",
    RecurrenceUnit.MONTH: "Monthly",
    RecurrenceUnit.YEAR: "Yearly",
}

_EVERY_OTHER_UNIT_LABELS: Dict[RecurrenceUnit, str] = {
    RecurrenceUnit.DAY: "Every other day",
    RecurrenceUnit.WEEK: "Biweekly",
    RecurrenceUnit.MONTH: "Bimonthly",
    RecurrenceUnit.YEAR: "Biannual",
}

_UNIT_PLURALS: Dict[RecurrenceUnit, str] = {
    RecurrenceUnit.DAY: "days",
    RecurrenceUnit.WEEK: "weeks",
    RecurrenceUnit.MONTH: "months",
    RecurrenceUnit.YEAR: "years",
}


def ordinal_suffix(n: int) -> str:
    """English ordinal suffix: 1 -> st, 2 -> nd, 3 -> rd, 11-13 -> th."""
    if 11 <= n % 100 <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")


def ordinal(n: int) -> str:
    return f"{n}{ordinal_suffix(n)}"


def month_day_options() -> List[Tuple[int, str]]:
    """Choices for a day-of-month picker: (1, "1st") ... (31, "31st")."""
    return [(day, ordinal(day)) for day in range(MIN_MONTH_DAY, MAX_MONTH_DAY + 1)]


def _describe_week_days(week_days: Tuple[int, ...], interval: int) -> str:
    if week_days == WORK_WEEK_DAYS:
        return "Weekdays" if interval == 1 else f"Every {interval} weeks (weekdays)"
    if week_days == WEEKEND_DAYS:
        return "Weekends" if interval == 1 else f"Every {interval} weeks (weekends)"
    names = ", ".join(WEEKDAY_LABELS[day] for day in week_days)
    if interval == 1:
        return f"Every {names}"
    return f"Every {interval} weeks on {names}"


def describe_recurrence(spec: Optional[RecurrenceSpec]) -> str:
    """Render a recurrence for display.

    Args:
        spec: Recurrence to describe

    Returns:
        Display string, or "" when the task does not recur
    """
    if spec is None:
        return ""

    if isinstance(spec, LegacyRecurrence):
        return _LEGACY_LABELS[RecurrencePattern(spec.pattern)]

    if isinstance(spec, FlexibleRecurrence):
        unit = RecurrenceUnit(spec.unit)
        interval = spec.interval

        if unit == RecurrenceUnit.WEEK and spec.week_days:
            return _describe_week_days(tuple(sorted(spec.week_days)), interval)

        if unit == RecurrenceUnit.MONTH and spec.month_day is not None:
            day = ordinal(spec.month_day)
            if interval == 1:
                return f"{day} of each month"
            return f"{day} every {interval} months"

        if interval == 1:
            return _EVERY_UNIT_LABELS[unit]
        if interval == 2:
            return _EVERY_OTHER_UNIT_LABELS[unit]
        return f"Every {interval} {_UNIT_PLURALS[unit]}"

    raise InvalidRecurrenceSpec(f"Unsupported recurrence spec: {spec!r}")
