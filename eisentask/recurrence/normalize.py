"""Validation and serialization of raw recurrence values.

Raw recurrence values come from stored task rows, API request bodies and AI
responses. They are untrusted: anything malformed degrades to ``None`` (no
recurrence) instead of raising.

Wire format:
- legacy: one of the strings "daily", "weekly", "monthly", "yearly"
- flexible: {"interval": int, "unit": "day"|"week"|"month"|"year",
  "weekDays": [int, ...] (optional), "monthDay": int (optional)}
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Union

from eisentask.models.recurrence import (
    MAX_INTERVAL,
    MAX_MONTH_DAY,
    MIN_INTERVAL,
    MIN_MONTH_DAY,
    SATURDAY,
    SUNDAY,
    FlexibleRecurrence,
    LegacyRecurrence,
    RecurrencePattern,
    RecurrenceSpec,
    RecurrenceUnit,
)

logger = logging.getLogger(__name__)

RawRecurrence = Union[str, Dict[str, Any], None]


def _as_number(value: Any) -> Optional[float]:
    """Return value if it is a real number (bools and NaN are not)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def _as_integral(value: Any) -> Optional[int]:
    number = _as_number(value)
    if number is None:
        return None
    if isinstance(number, float):
        if not number.is_integer():
            return None
        return int(number)
    return number


def _clamp_interval(value: Union[int, float]) -> int:
    # Arbitrarily large ints must not go through float conversion
    if isinstance(value, float):
        if math.isinf(value):
            return MAX_INTERVAL
        value = math.floor(value)
    return max(MIN_INTERVAL, min(MAX_INTERVAL, value))


def _normalize_week_days(value: Any) -> Optional[List[int]]:
    if not isinstance(value, (list, tuple)):
        return None
    days = set()
    for item in value:
        day = _as_integral(item)
        if day is not None and SUNDAY <= day <= SATURDAY:
            days.add(day)
    return sorted(days) or None


def _normalize_month_day(value: Any) -> Optional[int]:
    day = _as_integral(value)
    if day is None or day < MIN_MONTH_DAY or day > MAX_MONTH_DAY:
        return None
    return day


def serialize_recurrence(spec: Optional[RecurrenceSpec]) -> RawRecurrence:
    """Convert a recurrence spec to its wire format."""
    if spec is None:
        return None
    if isinstance(spec, LegacyRecurrence):
        return RecurrencePattern(spec.pattern).value
    if isinstance(spec, FlexibleRecurrence):
        raw: Dict[str, Any] = {
            "interval": spec.interval,
            "unit": RecurrenceUnit(spec.unit).value,
        }
        if spec.week_days:
            raw["weekDays"] = list(spec.week_days)
        if spec.month_day is not None:
            raw["monthDay"] = spec.month_day
        return raw
    raise TypeError(f"Unsupported recurrence spec: {spec!r}")


def validate_recurrence(raw: Any) -> Optional[RecurrenceSpec]:
    """Validate and normalize an untrusted recurrence value.

    Rules:
    - None -> None
    - a string is accepted only if it is exactly one of the legacy pattern names
    - a mapping needs a numeric interval >= 1 (floored, clamped to [1, 99]) and a
      known unit; weekDays/monthDay are filtered and dropped when invalid or when
      they do not apply to the unit
    - a dumped legacy spec ({"kind": "legacy", "pattern": ...}) is checked like
      the bare pattern string
    - anything else -> None

    Never raises. Already-built specs are re-normalized, so the function is
    idempotent through ``serialize_recurrence``.

    Args:
        raw: Candidate recurrence (wire format or spec model)

    Returns:
        Normalized spec, or None when the input does not describe a recurrence
    """
    if raw is None:
        return None

    if isinstance(raw, (LegacyRecurrence, FlexibleRecurrence)):
        raw = serialize_recurrence(raw)

    if isinstance(raw, str):
        try:
            return LegacyRecurrence(pattern=RecurrencePattern(raw))
        except ValueError:
            logger.debug(f"Ignoring unknown recurrence pattern {raw!r}")
            return None

    if not isinstance(raw, Mapping):
        logger.debug(f"Ignoring recurrence of type {type(raw).__name__}")
        return None

    if raw.get("kind") == "legacy":
        # Dumped LegacyRecurrence: {"kind": "legacy", "pattern": ...}
        pattern = raw.get("pattern")
        return validate_recurrence(pattern) if isinstance(pattern, str) else None

    interval = _as_number(raw.get("interval"))
    if interval is None or interval < MIN_INTERVAL:
        logger.debug(f"Ignoring recurrence with invalid interval {raw.get('interval')!r}")
        return None

    unit_value = raw.get("unit")
    if not isinstance(unit_value, str):
        return None
    try:
        unit = RecurrenceUnit(unit_value)
    except ValueError:
        logger.debug(f"Ignoring recurrence with unknown unit {unit_value!r}")
        return None

    week_days = None
    if unit == RecurrenceUnit.WEEK:
        week_days = _normalize_week_days(raw.get("weekDays", raw.get("week_days")))

    month_day = None
    if unit == RecurrenceUnit.MONTH:
        month_day = _normalize_month_day(raw.get("monthDay", raw.get("month_day")))

    return FlexibleRecurrence(
        interval=_clamp_interval(interval),
        unit=unit,
        week_days=tuple(week_days) if week_days else None,
        month_day=month_day,
    )
