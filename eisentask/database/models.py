"""SQLAlchemy database models for eisentask."""

from datetime import datetime
import uuid
from sqlalchemy import Column, String, Integer, Boolean, Date, DateTime, JSON

from typing import Union, TypeVar, Type
from eisentask.database.database import Base
from eisentask.models.task import Quadrant, Complexity

T = TypeVar('T')


def enum_to_value(enum_obj: Union[str, T]) -> str:
    """Convert enum to string value (handles both enum and string).

    Args:
        enum_obj: Enum instance or string value

    Returns:
        String value of the enum, or the string itself if already a string
    """
    if hasattr(enum_obj, 'value'):
        return enum_obj.value
    return str(enum_obj)


def value_to_enum(value: str, enum_class: Type[T], default: T) -> T:
    """Convert string to enum with fallback to default.

    Args:
        value: String value to convert
        enum_class: Enum class to convert to
        default: Default enum value if conversion fails

    Returns:
        Enum instance, or default if conversion fails
    """
    if not value:
        return default
    try:
        return enum_class(value.lower())
    except (ValueError, AttributeError):
        return default


class TaskDB(Base):
    """Database model for Task."""

    __tablename__ = "tasks"

    # Primary key
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    # Basic fields
    text = Column(String, nullable=False)
    description = Column(String, nullable=True)
    quadrant = Column(String, nullable=False, index=True, default=Quadrant.NOT_URGENT_NOT_IMPORTANT.value)
    complexity = Column(String, nullable=False, default=Complexity.MEDIUM.value)

    # Scheduling fields
    deadline = Column(Date, nullable=True)

    # Recurrence in wire format: legacy pattern string or flexible rule object
    recurrence = Column(JSON, nullable=True)

    # Completion
    completed = Column(Boolean, nullable=False, default=False, index=True)
    completed_at = Column(DateTime, nullable=True, index=True)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from eisentask.models.task import Task

        # Recurrence is re-validated by the Task model; malformed rows degrade to None
        return Task(
            id=self.id,
            text=self.text,
            description=self.description,
            quadrant=value_to_enum(self.quadrant, Quadrant, Quadrant.NOT_URGENT_NOT_IMPORTANT),
            complexity=value_to_enum(self.complexity, Complexity, Complexity.MEDIUM),
            deadline=self.deadline,
            recurrence=self.recurrence,
            completed=bool(self.completed),
            completed_at=self.completed_at,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_pydantic(cls, task):
        """Create database model from Pydantic model."""
        from eisentask.recurrence.normalize import serialize_recurrence

        return cls(
            id=task.id,
            text=task.text,
            description=task.description,
            quadrant=enum_to_value(task.quadrant),
            complexity=enum_to_value(task.complexity),
            deadline=task.deadline,
            recurrence=serialize_recurrence(task.recurrence),
            completed=task.completed,
            completed_at=task.completed_at,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


class NotificationEligibilityDB(Base):
    """Single-row counters deciding whether to offer push notifications."""

    __tablename__ = "notification_eligibility"

    id = Column(Integer, primary_key=True, default=1)
    sessions = Column(Integer, nullable=False, default=0)
    task_count = Column(Integer, nullable=False, default=0)
    completed_count = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self):
        from eisentask.engine.eligibility import NotificationEligibility

        return NotificationEligibility(
            sessions=self.sessions,
            task_count=self.task_count,
            completed_count=self.completed_count,
        )
