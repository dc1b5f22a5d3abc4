"""Conversion between the recurrence editor's form state and recurrence specs.

These two functions are the only coupling between ``RecurrenceFormState`` and the
canonical recurrence spec; everything else works on ``RecurrenceSpec``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from eisentask.models.recurrence import (
    FlexibleRecurrence,
    InvalidRecurrenceSpec,
    LegacyRecurrence,
    RecurrenceFormPreset,
    RecurrenceFormState,
    RecurrencePattern,
    RecurrenceSpec,
    RecurrenceUnit,
)
from eisentask.recurrence.normalize import validate_recurrence


_PRESET_TO_PATTERN: Dict[RecurrenceFormPreset, RecurrencePattern] = {
    RecurrenceFormPreset.DAILY: RecurrencePattern.DAILY,
    RecurrenceFormPreset.WEEKLY: RecurrencePattern.WEEKLY,
    RecurrenceFormPreset.MONTHLY: RecurrencePattern.MONTHLY,
    RecurrenceFormPreset.YEARLY: RecurrencePattern.YEARLY,
}

_PATTERN_TO_PRESET: Dict[RecurrencePattern, RecurrenceFormPreset] = {
    pattern: preset for preset, pattern in _PRESET_TO_PATTERN.items()
}

_PATTERN_TO_UNIT: Dict[RecurrencePattern, RecurrenceUnit] = {
    RecurrencePattern.DAILY: RecurrenceUnit.DAY,
    RecurrencePattern.WEEKLY: RecurrenceUnit.WEEK,
    RecurrencePattern.MONTHLY: RecurrenceUnit.MONTH,
    RecurrencePattern.YEARLY: RecurrenceUnit.YEAR,
}

_UNIT_TO_PRESET: Dict[RecurrenceUnit, RecurrenceFormPreset] = {
    unit: _PATTERN_TO_PRESET[pattern] for pattern, unit in _PATTERN_TO_UNIT.items()
}


def default_recurrence_form() -> RecurrenceFormState:
    """Form state for a task without recurrence."""
    return RecurrenceFormState()


def build_recurrence(form: RecurrenceFormState) -> Optional[RecurrenceSpec]:
    """Build the spec a submitted form describes.

    - disabled form (or preset "none") -> None
    - named preset -> legacy pattern
    - custom -> flexible rule; weekdays only for weekly rules, a month day only for
      monthly rules with "specific day" switched on
    """
    if not form.enabled:
        return None

    preset = RecurrenceFormPreset(form.preset)
    if preset == RecurrenceFormPreset.NONE:
        return None
    if preset != RecurrenceFormPreset.CUSTOM:
        return LegacyRecurrence(pattern=_PRESET_TO_PATTERN[preset])

    unit = RecurrenceUnit(form.unit)
    raw: Dict[str, Any] = {"interval": form.interval, "unit": unit.value}
    if unit == RecurrenceUnit.WEEK and form.week_days:
        raw["weekDays"] = list(form.week_days)
    if unit == RecurrenceUnit.MONTH and form.use_specific_month_day and form.month_day is not None:
        raw["monthDay"] = form.month_day
    return validate_recurrence(raw)


def parse_recurrence_to_form(spec: Optional[RecurrenceSpec]) -> RecurrenceFormState:
    """Populate editor controls from a spec.

    A flexible rule that repeats every single unit with no weekday or month-day
    selection is shown as the matching named preset; it behaves identically.
    """
    if spec is None:
        return default_recurrence_form()

    if isinstance(spec, LegacyRecurrence):
        pattern = RecurrencePattern(spec.pattern)
        return RecurrenceFormState(
            enabled=True,
            preset=_PATTERN_TO_PRESET[pattern],
            interval=1,
            unit=_PATTERN_TO_UNIT[pattern],
        )

    if isinstance(spec, FlexibleRecurrence):
        unit = RecurrenceUnit(spec.unit)
        if spec.interval == 1 and not spec.week_days and spec.month_day is None:
            return RecurrenceFormState(
                enabled=True,
                preset=_UNIT_TO_PRESET[unit],
                interval=1,
                unit=unit,
            )
        return RecurrenceFormState(
            enabled=True,
            preset=RecurrenceFormPreset.CUSTOM,
            interval=spec.interval,
            unit=unit,
            week_days=list(spec.week_days or []),
            month_day=spec.month_day,
            use_specific_month_day=spec.month_day is not None,
        )

    raise InvalidRecurrenceSpec(f"Unsupported recurrence spec: {spec!r}")
