"""Constants for eisentask.

This module centralizes magic numbers and default values used throughout the application.
"""

from eisentask.models.task import Complexity, Quadrant


# Task defaults
DEFAULT_COMPLEXITY = Complexity.MEDIUM
DEFAULT_QUADRANT = Quadrant.NOT_URGENT_NOT_IMPORTANT

# XP credited for completing a task
XP_BY_COMPLEXITY = {
    Complexity.LOW: 5,
    Complexity.MEDIUM: 10,
    Complexity.HIGH: 20,
}

# Notification eligibility thresholds (any one is enough)
ELIGIBLE_MIN_TASKS_ADDED = 3
ELIGIBLE_MIN_TASKS_COMPLETED = 1
ELIGIBLE_MIN_SESSIONS = 2
