"""Eisenhower quadrant helpers.

Maps urgent/important flags to quadrants and groups tasks for display. Within a
quadrant tasks are ordered by deadline urgency, deterministic for equal inputs.
"""

from datetime import date
from typing import Dict, List, Tuple

from eisentask.models.task import Quadrant, Task


QUADRANT_ORDER: Tuple[Quadrant, ...] = (
    Quadrant.URGENT_IMPORTANT,
    Quadrant.NOT_URGENT_IMPORTANT,
    Quadrant.URGENT_NOT_IMPORTANT,
    Quadrant.NOT_URGENT_NOT_IMPORTANT,
)


def quadrant_from_flags(is_urgent: bool, is_important: bool) -> Quadrant:
    """Quadrant for an urgent/important pair."""
    if is_urgent and is_important:
        return Quadrant.URGENT_IMPORTANT
    if is_important:
        return Quadrant.NOT_URGENT_IMPORTANT
    if is_urgent:
        return Quadrant.URGENT_NOT_IMPORTANT
    return Quadrant.NOT_URGENT_NOT_IMPORTANT


def flags_from_quadrant(quadrant: Quadrant) -> Tuple[bool, bool]:
    """(is_urgent, is_important) for a quadrant."""
    quadrant = Quadrant(quadrant)
    is_urgent = quadrant in (Quadrant.URGENT_IMPORTANT, Quadrant.URGENT_NOT_IMPORTANT)
    is_important = quadrant in (Quadrant.URGENT_IMPORTANT, Quadrant.NOT_URGENT_IMPORTANT)
    return is_urgent, is_important


def _deadline_sort_key(task: Task) -> tuple:
    """Tasks with deadlines first (earliest first), then the rest by creation time."""
    if task.deadline:
        return (0, task.deadline, task.created_at)
    return (1, date.max, task.created_at)


def group_by_quadrant(tasks: List[Task]) -> Dict[Quadrant, List[Task]]:
    """Group tasks into all four quadrants (empty quadrants included)."""
    groups: Dict[Quadrant, List[Task]] = {quadrant: [] for quadrant in QUADRANT_ORDER}
    for task in tasks:
        groups[Quadrant(task.quadrant)].append(task)
    for quadrant in groups:
        groups[quadrant].sort(key=_deadline_sort_key)
    return groups


def non_empty_quadrants(groups: Dict[Quadrant, List[Task]]) -> List[Quadrant]:
    return [quadrant for quadrant in QUADRANT_ORDER if groups.get(quadrant)]
