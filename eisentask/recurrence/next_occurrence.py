"""Next-occurrence calculation for recurring tasks.

Pure and deterministic: the only ambient input is "today", which is used as the
base date when a task has no deadline. Callers (and tests) can inject it.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Dict, Optional, Sequence, Union

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

from eisentask.models.recurrence import (
    FlexibleRecurrence,
    InvalidRecurrenceSpec,
    LegacyRecurrence,
    RecurrencePattern,
    RecurrenceSpec,
    RecurrenceUnit,
)


DATE_FORMAT = "%Y-%m-%d"

# relativedelta clamps the day to the target month's length (Jan 31 + 1 month = Feb 28/29)
_LEGACY_STEPS: Dict[RecurrencePattern, relativedelta] = {
    RecurrencePattern.DAILY: relativedelta(days=1),
    RecurrencePattern.WEEKLY: relativedelta(weeks=1),
    RecurrencePattern.MONTHLY: relativedelta(months=1),
    RecurrencePattern.YEARLY: relativedelta(years=1),
}


def parse_base_date(
    current_deadline: Union[str, date, None],
    *,
    today: Optional[date] = None,
) -> date:
    """Resolve the date the next occurrence is computed from.

    Args:
        current_deadline: Task deadline as an ISO date/datetime string or date, or None
        today: Clock override; defaults to the system date

    Returns:
        The deadline's calendar date, or today when there is no deadline
    """
    if current_deadline is None or (isinstance(current_deadline, str) and not current_deadline.strip()):
        return today or date.today()
    if isinstance(current_deadline, datetime):
        return current_deadline.date()
    if isinstance(current_deadline, date):
        return current_deadline
    return isoparse(current_deadline.strip()).date()


def sunday_based_weekday(day: date) -> int:
    # date.weekday(): Monday=0 ... Sunday=6
    return (day.weekday() + 1) % 7


def days_until_next_weekday(base: date, week_days: Sequence[int], interval: int) -> int:
    """Days from base to the next selected weekday.

    With interval 1 the next selected day later in the same week wins. Otherwise
    (or when no later day remains) jump to the first selected day of the week that
    starts ``interval`` weeks after the base week.
    """
    days = sorted(week_days)
    current = sunday_based_weekday(base)
    if interval == 1:
        for day in days:
            if day > current:
                return day - current
    return (7 - current + days[0]) + (interval - 1) * 7


def next_occurrence_date(base: date, spec: Optional[RecurrenceSpec]) -> date:
    """Compute the next occurrence strictly after ``base``."""
    if spec is None:
        raise InvalidRecurrenceSpec("Cannot compute the next deadline of a non-recurring task")

    if isinstance(spec, LegacyRecurrence):
        return base + _LEGACY_STEPS[RecurrencePattern(spec.pattern)]

    if isinstance(spec, FlexibleRecurrence):
        unit = RecurrenceUnit(spec.unit)
        interval = spec.interval
        if unit == RecurrenceUnit.DAY:
            return base + timedelta(days=interval)
        if unit == RecurrenceUnit.WEEK:
            if spec.week_days:
                return base + timedelta(days=days_until_next_weekday(base, spec.week_days, interval))
            return base + timedelta(weeks=interval)
        if unit == RecurrenceUnit.MONTH:
            if spec.month_day is not None:
                return base + relativedelta(months=interval, day=spec.month_day)
            return base + relativedelta(months=interval)
        if unit == RecurrenceUnit.YEAR:
            return base + relativedelta(years=interval)

    raise InvalidRecurrenceSpec(f"Unsupported recurrence spec: {spec!r}")


def compute_next_deadline(
    current_deadline: Union[str, date, None],
    spec: Optional[RecurrenceSpec],
    *,
    today: Optional[date] = None,
) -> str:
    """Compute the deadline of a recurring task's next occurrence.

    The recurrence is assumed to be validated already (see
    ``eisentask.recurrence.normalize.validate_recurrence``).

    Args:
        current_deadline: Deadline of the occurrence being completed, if any
        spec: Recurrence of the task
        today: Clock override used when there is no deadline

    Returns:
        Next deadline as a YYYY-MM-DD string

    Raises:
        InvalidRecurrenceSpec: If spec is None
    """
    if spec is None:
        raise InvalidRecurrenceSpec("Cannot compute the next deadline of a non-recurring task")
    base = parse_base_date(current_deadline, today=today)
    return next_occurrence_date(base, spec).strftime(DATE_FORMAT)
