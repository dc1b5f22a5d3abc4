"""Task creation factory for eisentask.

This module centralizes task creation logic so tasks created from the API, from
sanitized AI responses and from completed recurring tasks get the same defaults.
"""

import uuid
from datetime import date, datetime
from typing import Any, Dict, Optional

from eisentask.models.task import Task, Quadrant, Complexity
from eisentask.models.constants import DEFAULT_COMPLEXITY


def create_task_defaults() -> Dict[str, Any]:
    """Get default task values as a dictionary."""
    return {
        "description": None,
        "complexity": DEFAULT_COMPLEXITY,
        "deadline": None,
        "recurrence": None,
        "completed": False,
        "completed_at": None,
    }


def create_task_base(
    text: str,
    quadrant: Quadrant,
    description: Optional[str] = None,
    complexity: Optional[Complexity] = None,
    deadline: Optional[date] = None,
    recurrence: Any = None,
    now: Optional[datetime] = None,
) -> Task:
    """Create an open task with defaults, allowing overrides.

    Args:
        text: Task text (required)
        quadrant: Eisenhower quadrant (required)
        description: Longer description; blank strings are stored as None
        complexity: Task complexity (defaults to constant)
        deadline: Deadline date
        recurrence: Recurrence spec or raw wire value (validated by the Task model)
        now: Timestamp for created_at/updated_at (defaults to utcnow)

    Returns:
        Task object with a fresh id and defaults applied
    """
    now = now or datetime.utcnow()
    defaults = create_task_defaults()

    if description is not None and not description.strip():
        description = None

    return Task(
        id=str(uuid.uuid4()),
        text=text.strip(),
        description=description.strip() if description else defaults["description"],
        quadrant=quadrant,
        complexity=complexity if complexity is not None else defaults["complexity"],
        deadline=deadline if deadline is not None else defaults["deadline"],
        recurrence=recurrence if recurrence is not None else defaults["recurrence"],
        completed=defaults["completed"],
        completed_at=defaults["completed_at"],
        created_at=now,
        updated_at=now,
    )
