"""Task data model for eisentask."""

from datetime import date, datetime
from typing import Optional
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from eisentask.models.recurrence import RecurrenceSpec


class Quadrant(str, Enum):
    """Eisenhower matrix quadrant."""
    URGENT_IMPORTANT = "urgent-important"
    NOT_URGENT_IMPORTANT = "not-urgent-important"
    URGENT_NOT_IMPORTANT = "urgent-not-important"
    NOT_URGENT_NOT_IMPORTANT = "not-urgent-not-important"


class Complexity(str, Enum):
    """Task complexity enumeration."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Task(BaseModel):
    """Canonical Task model."""

    model_config = ConfigDict(use_enum_values=True)

    id: str = Field(..., description="Unique task identifier (UUID v4)")
    text: str = Field(..., description="Task text")
    description: Optional[str] = Field(None, description="Longer task description")
    quadrant: Quadrant = Field(..., description="Eisenhower quadrant the task is filed under")
    complexity: Complexity = Field(Complexity.MEDIUM, description="Task complexity")
    deadline: Optional[date] = Field(None, description="Deadline (date-only)")
    recurrence: Optional[RecurrenceSpec] = Field(
        None, description="Repeat rule; a new task is created on completion when set"
    )
    completed: bool = Field(False, description="Whether the task is completed")
    completed_at: Optional[datetime] = Field(None, description="Completion timestamp")
    created_at: datetime = Field(..., description="Task creation timestamp")
    updated_at: datetime = Field(..., description="Task last update timestamp")

    @field_validator("recurrence", mode="before")
    @classmethod
    def _validate_recurrence(cls, v):
        # Stored rows and API payloads carry the raw wire format
        from eisentask.recurrence.normalize import validate_recurrence
        return validate_recurrence(v)

    @field_serializer("recurrence")
    def _serialize_recurrence(self, v):
        from eisentask.recurrence.normalize import serialize_recurrence
        return serialize_recurrence(v)