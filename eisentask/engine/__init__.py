"""Task workflows for eisentask."""

from eisentask.engine.quadrants import quadrant_from_flags, flags_from_quadrant, group_by_quadrant, non_empty_quadrants
from eisentask.engine.completion import toggle_complete, spawn_next_occurrence, CompletionResult, TaskNotFound
from eisentask.engine.ai_response import sanitize_parsed_task, sanitize_sorted_tasks, ParsedTask, SortedTask
from eisentask.engine.recap import yesterday_stats, YesterdayStats
from eisentask.engine.eligibility import NotificationEligibility

__all__ = [
    "quadrant_from_flags",
    "flags_from_quadrant",
    "group_by_quadrant",
    "non_empty_quadrants",
    "toggle_complete",
    "spawn_next_occurrence",
    "CompletionResult",
    "TaskNotFound",
    "sanitize_parsed_task",
    "sanitize_sorted_tasks",
    "ParsedTask",
    "SortedTask",
    "yesterday_stats",
    "YesterdayStats",
    "NotificationEligibility",
]
