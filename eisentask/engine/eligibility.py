"""Notification eligibility.

Push notifications are only offered once the user has shown some engagement:
a few tasks added, one task completed, or a return visit.
"""

from pydantic import BaseModel, Field

from eisentask.models.constants import (
    ELIGIBLE_MIN_SESSIONS,
    ELIGIBLE_MIN_TASKS_ADDED,
    ELIGIBLE_MIN_TASKS_COMPLETED,
)


class NotificationEligibility(BaseModel):
    """Engagement counters. The record_* methods return updated copies."""

    sessions: int = Field(0, ge=0, description="Number of app sessions started")
    task_count: int = Field(0, ge=0, description="Number of tasks added")
    completed_count: int = Field(0, ge=0, description="Number of tasks completed")

    @property
    def is_eligible(self) -> bool:
        return (
            self.task_count >= ELIGIBLE_MIN_TASKS_ADDED
            or self.completed_count >= ELIGIBLE_MIN_TASKS_COMPLETED
            or self.sessions >= ELIGIBLE_MIN_SESSIONS
        )

    def record_session(self) -> "NotificationEligibility":
        return self.model_copy(update={"sessions": self.sessions + 1})

    def record_task_added(self) -> "NotificationEligibility":
        return self.model_copy(update={"task_count": self.task_count + 1})

    def record_task_completed(self) -> "NotificationEligibility":
        return self.model_copy(update={"completed_count": self.completed_count + 1})
