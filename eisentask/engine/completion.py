"""Task completion workflow.

Completing a recurring task keeps the completed occurrence and creates the next
one with the deadline computed by the recurrence engine.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from dateutil.parser import isoparse

from eisentask.database.repository import TaskRepository
from eisentask.engine.recap import xp_for_task
from eisentask.models.task import Task
from eisentask.models.task_factory import create_task_base
from eisentask.recurrence.next_occurrence import compute_next_deadline

logger = logging.getLogger(__name__)


class TaskNotFound(LookupError):
    """Raised when a workflow targets a task that does not exist."""


@dataclass(frozen=True)
class CompletionResult:
    task: Task
    next_task: Optional[Task] = None
    xp_gained: int = 0


def spawn_next_occurrence(task: Task, *, now: datetime, today: Optional[date] = None) -> Task:
    """Build (not persist) the open task for the next occurrence of a recurring task."""
    next_deadline = compute_next_deadline(task.deadline, task.recurrence, today=today)
    return create_task_base(
        text=task.text,
        quadrant=task.quadrant,
        description=task.description,
        complexity=task.complexity,
        deadline=isoparse(next_deadline).date(),
        recurrence=task.recurrence,
        now=now,
    )


def toggle_complete(
    repo: TaskRepository,
    task_id: str,
    *,
    now: Optional[datetime] = None,
    today: Optional[date] = None,
) -> CompletionResult:
    """Flip a task between open and completed.

    Marking a recurring task complete also creates its next occurrence. Reopening
    a task never removes an occurrence created earlier.

    Args:
        repo: Task repository
        task_id: Task to toggle
        now: Completion timestamp override
        today: Clock override for tasks without a deadline

    Returns:
        CompletionResult with the updated task, the spawned task (if any) and
        the XP earned (0 when reopening)

    Raises:
        TaskNotFound: If the task does not exist
    """
    now = now or datetime.utcnow()
    task = repo.get(task_id)
    if task is None:
        raise TaskNotFound(f"Task {task_id} not found")

    if task.completed:
        reopened = repo.update(
            task.model_copy(update={"completed": False, "completed_at": None, "updated_at": now})
        )
        logger.debug(f"Reopened task {task_id}")
        return CompletionResult(task=reopened)

    completed = repo.update(
        task.model_copy(update={"completed": True, "completed_at": now, "updated_at": now})
    )

    next_task = None
    if task.recurrence is not None:
        next_task = repo.create(spawn_next_occurrence(task, now=now, today=today or now.date()))
        logger.info(f"Completed recurring task {task_id}; next occurrence {next_task.id} due {next_task.deadline}")

    return CompletionResult(task=completed, next_task=next_task, xp_gained=xp_for_task(completed))
