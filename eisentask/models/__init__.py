"""Data models for eisentask."""

from eisentask.models.task import Task, Quadrant, Complexity
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

__all__ = [
    "Task",
    "Quadrant",
    "Complexity",
    "FlexibleRecurrence",
    "InvalidRecurrenceSpec",
    "LegacyRecurrence",
    "RecurrenceFormPreset",
    "RecurrenceFormState",
    "RecurrencePattern",
    "RecurrenceSpec",
    "RecurrenceUnit",
]
