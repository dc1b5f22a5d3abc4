"""Yesterday recap: how many tasks were cleared the previous day and the XP earned."""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional

from eisentask.database.repository import TaskRepository
from eisentask.models.constants import XP_BY_COMPLEXITY
from eisentask.models.task import Complexity, Task


@dataclass(frozen=True)
class YesterdayStats:
    yesterday_count: int
    yesterday_xp: int


def xp_for_task(task: Task) -> int:
    """XP credited for completing a task, by complexity."""
    return XP_BY_COMPLEXITY[Complexity(task.complexity)]


def summarize_completed(tasks: Iterable[Task]) -> YesterdayStats:
    tasks = list(tasks)
    return YesterdayStats(
        yesterday_count=len(tasks),
        yesterday_xp=sum(xp_for_task(task) for task in tasks),
    )


def yesterday_stats(repo: TaskRepository, *, today: Optional[date] = None) -> YesterdayStats:
    """Completion stats for the calendar day before ``today``.

    Completion timestamps are stored in UTC, so "yesterday" is the previous UTC day
    unless the caller passes its own ``today``.
    """
    today = today or datetime.utcnow().date()
    start = datetime.combine(today - timedelta(days=1), time.min)
    end = datetime.combine(today, time.min)
    return summarize_completed(repo.get_completed_between(start, end))
