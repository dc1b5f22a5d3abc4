"""Repository layer for database operations."""

import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import desc

from eisentask.models.task import Task, Quadrant
from eisentask.database.models import TaskDB, NotificationEligibilityDB, enum_to_value
from eisentask.recurrence.normalize import serialize_recurrence

logger = logging.getLogger(__name__)


class TaskRepository:
    """Repository for Task database operations."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, task: Task) -> Task:
        """Create a new task."""
        try:
            task_db = TaskDB.from_pydantic(task)
            self.db.add(task_db)
            self.db.commit()
            self.db.refresh(task_db)
            logger.debug(f"Created task {task.id}: {task.text[:50]}")
            return task_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create task {task.id}: {type(e).__name__}: {str(e)}")
            raise

    def get(self, task_id: str) -> Optional[Task]:
        """Get task by ID."""
        task_db = self.db.query(TaskDB).filter(TaskDB.id == task_id).first()
        return task_db.to_pydantic() if task_db else None

    def get_all(self) -> List[Task]:
        """Get all tasks sorted by creation date (newest first)."""
        tasks_db = self.db.query(TaskDB).order_by(desc(TaskDB.created_at)).all()
        return [task_db.to_pydantic() for task_db in tasks_db]

    def get_by_quadrant(self, quadrant: Quadrant) -> List[Task]:
        """Get all tasks filed under a quadrant (newest first)."""
        tasks_db = self.db.query(TaskDB).filter(
            TaskDB.quadrant == enum_to_value(quadrant),
        ).order_by(desc(TaskDB.created_at)).all()
        return [task_db.to_pydantic() for task_db in tasks_db]

    def get_completed_between(self, start: datetime, end: datetime) -> List[Task]:
        """Completed tasks whose completion timestamp is in [start, end)."""
        tasks_db = self.db.query(TaskDB).filter(
            TaskDB.completed.is_(True),
            TaskDB.completed_at >= start,
            TaskDB.completed_at < end,
        ).all()
        return [task_db.to_pydantic() for task_db in tasks_db]

    def update(self, task: Task) -> Task:
        """Update an existing task."""
        task_db = self.db.query(TaskDB).filter(TaskDB.id == task.id).first()
        if not task_db:
            raise ValueError(f"Task {task.id} not found")

        task_db.text = task.text
        task_db.description = task.description
        task_db.quadrant = enum_to_value(task.quadrant)
        task_db.complexity = enum_to_value(task.complexity)
        task_db.deadline = task.deadline
        task_db.recurrence = serialize_recurrence(task.recurrence)
        task_db.completed = task.completed
        task_db.completed_at = task.completed_at
        task_db.updated_at = task.updated_at

        try:
            self.db.commit()
            self.db.refresh(task_db)
            logger.debug(f"Updated task {task.id}: {task.text[:50]}")
            return task_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update task {task.id}: {type(e).__name__}: {str(e)}")
            raise

    def delete(self, task_id: str) -> bool:
        """Permanently delete a task by ID."""
        task_db = self.db.query(TaskDB).filter(TaskDB.id == task_id).first()
        if not task_db:
            return False

        try:
            self.db.delete(task_db)
            self.db.commit()
            logger.debug(f"Deleted task {task_id}")
            return True
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete task {task_id}: {type(e).__name__}: {str(e)}")
            raise


class EligibilityRepository:
    """Repository for the notification eligibility counters (single row)."""

    ROW_ID = 1

    def __init__(self, db: Session):
        self.db = db

    def get(self):
        """Return stored counters, or zeroed counters if nothing was recorded yet."""
        row = self.db.query(NotificationEligibilityDB).filter(
            NotificationEligibilityDB.id == self.ROW_ID,
        ).first()
        if row is None:
            from eisentask.engine.eligibility import NotificationEligibility
            return NotificationEligibility()
        return row.to_pydantic()

    def save(self, eligibility):
        """Persist counters, creating the row on first use."""
        row = self.db.query(NotificationEligibilityDB).filter(
            NotificationEligibilityDB.id == self.ROW_ID,
        ).first()
        if row is None:
            row = NotificationEligibilityDB(id=self.ROW_ID)
            self.db.add(row)
        row.sessions = eligibility.sessions
        row.task_count = eligibility.task_count
        row.completed_count = eligibility.completed_count
        row.updated_at = datetime.utcnow()
        try:
            self.db.commit()
            self.db.refresh(row)
            return row.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to save notification eligibility: {type(e).__name__}: {str(e)}")
            raise
