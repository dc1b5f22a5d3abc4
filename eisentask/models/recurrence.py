"""Recurrence models for eisentask.

Canonical internal representation for repeating tasks. A recurrence is either:
- a legacy fixed pattern (daily/weekly/monthly/yearly), kept so previously stored
  tasks keep working, or
- a flexible rule (every N days/weeks/months/years, optionally pinned to weekdays
  or to a day of the month).

A task that does not repeat carries ``None``.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


MIN_INTERVAL = 1
MAX_INTERVAL = 99
MIN_MONTH_DAY = 1
MAX_MONTH_DAY = 31

# Weekday numbering is Sunday-based: 0 = Sunday ... 6 = Saturday.
SUNDAY = 0
SATURDAY = 6
WORK_WEEK_DAYS: Tuple[int, ...] = (1, 2, 3, 4, 5)
WEEKEND_DAYS: Tuple[int, ...] = (0, 6)


class InvalidRecurrenceSpec(ValueError):
    """Raised when a recurrence cannot be used for the requested operation."""


class RecurrencePattern(str, Enum):
    """Legacy fixed patterns."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class RecurrenceUnit(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class RecurrenceFormPreset(str, Enum):
    """Choices offered by the recurrence editor."""

    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    CUSTOM = "custom"


class LegacyRecurrence(BaseModel):
    """One of the four original fixed patterns."""

    kind: Literal["legacy"] = "legacy"
    pattern: RecurrencePattern

    model_config = ConfigDict(frozen=True)


class FlexibleRecurrence(BaseModel):
    """Parameterized recurrence.

    Notes:
    - ``week_days`` only applies to weekly rules; without it the rule repeats on the
      base date's weekday.
    - ``month_day`` only applies to monthly rules; it is clamped to the length of the
      target month when the next date is computed.
    """

    kind: Literal["flexible"] = "flexible"
    interval: int = Field(1, ge=MIN_INTERVAL, le=MAX_INTERVAL, description="Every N units")
    unit: RecurrenceUnit
    week_days: Optional[Tuple[int, ...]] = Field(
        None, description="Weekly rules: selected weekdays (0 = Sunday)"
    )
    month_day: Optional[int] = Field(
        None, ge=MIN_MONTH_DAY, le=MAX_MONTH_DAY, description="Monthly rules: day of month"
    )

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_fields_for_other_units(cls, data):
        if not isinstance(data, dict):
            return data
        unit = data.get("unit")
        unit = getattr(unit, "value", unit)
        out = dict(data)
        if unit != RecurrenceUnit.WEEK.value:
            out.pop("week_days", None)
        if unit != RecurrenceUnit.MONTH.value:
            out.pop("month_day", None)
        return out

    @field_validator("week_days")
    @classmethod
    def _validate_week_days(cls, v):
        if v is None:
            return None
        for day in v:
            if day < SUNDAY or day > SATURDAY:
                raise ValueError("week_days must be between 0 (Sunday) and 6 (Saturday)")
        normalized = tuple(sorted(set(v)))
        return normalized or None


RecurrenceSpec = Annotated[
    Union[LegacyRecurrence, FlexibleRecurrence],
    Field(discriminator="kind"),
]


class RecurrenceFormState(BaseModel):
    """Flat, editable view of a recurrence used by the task editor.

    Never persisted; converted to and from the canonical spec by
    ``eisentask.recurrence.form``.
    """

    enabled: bool = False
    preset: RecurrenceFormPreset = RecurrenceFormPreset.NONE
    interval: int = Field(1, ge=MIN_INTERVAL, le=MAX_INTERVAL)
    unit: RecurrenceUnit = RecurrenceUnit.DAY
    week_days: List[int] = Field(default_factory=list)
    month_day: Optional[int] = Field(None, ge=MIN_MONTH_DAY, le=MAX_MONTH_DAY)
    use_specific_month_day: bool = False

    @field_validator("week_days")
    @classmethod
    def _validate_week_days(cls, v):
        # Deduplicate and keep the picker order stable
        return sorted({day for day in v if SUNDAY <= day <= SATURDAY})
