"""FastAPI web application for eisentask."""

import logging
from contextlib import asynccontextmanager
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from eisentask.database.database import get_db, init_db
from eisentask.database.repository import EligibilityRepository, TaskRepository
from eisentask.engine.ai_response import parse_json_payload, sanitize_parsed_task, sanitize_sorted_tasks
from eisentask.engine.completion import TaskNotFound, toggle_complete
from eisentask.engine.quadrants import group_by_quadrant, non_empty_quadrants
from eisentask.engine.recap import yesterday_stats
from eisentask.models.recurrence import RecurrenceFormState
from eisentask.models.task import Complexity, Quadrant, Task
from eisentask.models.task_factory import create_task_base
from eisentask.recurrence.describe import describe_recurrence
from eisentask.recurrence.form import build_recurrence, parse_recurrence_to_form
from eisentask.recurrence.next_occurrence import compute_next_deadline
from eisentask.recurrence.normalize import serialize_recurrence, validate_recurrence

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


# Initialize FastAPI app
app = FastAPI(
    title="eisentask API",
    description="Eisenhower-matrix task manager with recurring tasks",
    version=VERSION,
    lifespan=lifespan,
)


# Request models
class TaskCreateRequest(BaseModel):
    """Request body for task creation. Recurrence uses the raw wire format."""
    text: str
    description: Optional[str] = None
    quadrant: Quadrant = Quadrant.NOT_URGENT_NOT_IMPORTANT
    complexity: Optional[Complexity] = None
    deadline: Optional[date] = None
    recurrence: Any = None


class TaskUpdateRequest(BaseModel):
    """Partial update; only fields present in the body are applied."""
    text: Optional[str] = None
    description: Optional[str] = None
    quadrant: Optional[Quadrant] = None
    complexity: Optional[Complexity] = None
    deadline: Optional[date] = None
    recurrence: Any = None


class RecurrencePreviewRequest(BaseModel):
    form: RecurrenceFormState
    deadline: Optional[date] = Field(None, description="Deadline the next occurrence is computed from")


class RecurrenceValidateRequest(BaseModel):
    recurrence: Any = None


class ParseTaskSanitizeRequest(BaseModel):
    input: str = Field(..., description="The user's original free-text input")
    response: Any = Field(None, description="AI response: JSON text or decoded object")


class SortTasksSanitizeRequest(BaseModel):
    response: Any = Field(None, description="AI response: JSON text or decoded list")


# Response models
class TaskResponse(BaseModel):
    task: Task


class TaskListResponse(BaseModel):
    tasks: List[Task]
    count: int
    quadrants: Dict[str, List[Task]] = Field(default_factory=dict, description="Tasks grouped by quadrant")
    non_empty_quadrants: List[str] = Field(default_factory=list)


class ToggleCompleteResponse(BaseModel):
    task: Task
    next_task: Optional[Task] = None
    xp_gained: int = 0


class RecurrencePreviewResponse(BaseModel):
    recurrence: Any = None
    description: str
    next_deadline: Optional[str] = None


class RecurrenceValidateResponse(BaseModel):
    recurrence: Any = None
    description: str
    form: RecurrenceFormState


class ParsedTaskResponse(BaseModel):
    title: str
    description: Optional[str]
    deadline: Optional[date]
    quadrant: Quadrant
    recurrence: Any = None
    complexity: Complexity


class SortedTaskResponse(BaseModel):
    text: str
    quadrant: Quadrant
    complexity: Complexity
    recurrence: Any = None


class YesterdayStatsResponse(BaseModel):
    yesterday_count: int
    yesterday_xp: int


class EligibilityResponse(BaseModel):
    sessions: int
    task_count: int
    completed_count: int
    is_eligible: bool


def _eligibility_response(eligibility) -> EligibilityResponse:
    return EligibilityResponse(
        sessions=eligibility.sessions,
        task_count=eligibility.task_count,
        completed_count=eligibility.completed_count,
        is_eligible=eligibility.is_eligible,
    )


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": VERSION}


@app.get("/api/tasks", response_model=TaskListResponse)
def list_tasks(db: Session = Depends(get_db)):
    """List all tasks, also grouped by quadrant."""
    tasks = TaskRepository(db).get_all()
    groups = group_by_quadrant(tasks)
    return TaskListResponse(
        tasks=tasks,
        count=len(tasks),
        quadrants={quadrant.value: grouped for quadrant, grouped in groups.items()},
        non_empty_quadrants=[quadrant.value for quadrant in non_empty_quadrants(groups)],
    )


@app.post("/api/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(request: TaskCreateRequest, db: Session = Depends(get_db)):
    """Create a task."""
    if not request.text.strip():
        raise HTTPException(status_code=400, detail="Task text cannot be empty")

    task = create_task_base(
        text=request.text,
        quadrant=request.quadrant,
        description=request.description,
        complexity=request.complexity,
        deadline=request.deadline,
        recurrence=validate_recurrence(request.recurrence),
    )
    try:
        created = TaskRepository(db).create(task)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to create task: {str(e)}")
    return TaskResponse(task=created)


@app.get("/api/tasks/{task_id}", response_model=TaskResponse)
def get_task(task_id: str, db: Session = Depends(get_db)):
    task = TaskRepository(db).get(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    return TaskResponse(task=task)


@app.put("/api/tasks/{task_id}", response_model=TaskResponse)
def update_task(task_id: str, request: TaskUpdateRequest, db: Session = Depends(get_db)):
    """Update a task. Sending `"recurrence": null` turns recurrence off."""
    repo = TaskRepository(db)
    task = repo.get(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")

    updates: Dict[str, Any] = {}
    for field in request.model_fields_set:
        updates[field] = getattr(request, field)

    if "text" in updates:
        text = (updates["text"] or "").strip()
        if not text:
            raise HTTPException(status_code=400, detail="Task text cannot be empty")
        updates["text"] = text
    if "description" in updates:
        updates["description"] = (updates["description"] or "").strip() or None
    if "recurrence" in updates:
        updates["recurrence"] = validate_recurrence(updates["recurrence"])
    if "quadrant" in updates and updates["quadrant"] is None:
        del updates["quadrant"]
    if "complexity" in updates and updates["complexity"] is None:
        del updates["complexity"]

    updates["updated_at"] = datetime.utcnow()
    updated = task.model_copy(update=updates)
    try:
        saved = repo.update(updated)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update task: {str(e)}")
    return TaskResponse(task=saved)


@app.delete("/api/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: str, db: Session = Depends(get_db)):
    if not TaskRepository(db).delete(task_id):
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.post("/api/tasks/{task_id}/toggle-complete", response_model=ToggleCompleteResponse)
def toggle_task_complete(task_id: str, db: Session = Depends(get_db)):
    """Complete or reopen a task; completing a recurring task creates its next occurrence."""
    try:
        result = toggle_complete(TaskRepository(db), task_id)
    except TaskNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return ToggleCompleteResponse(task=result.task, next_task=result.next_task, xp_gained=result.xp_gained)


@app.post("/api/recurrence/preview", response_model=RecurrencePreviewResponse)
def preview_recurrence(request: RecurrencePreviewRequest):
    """Spec, description and next deadline for an editor form."""
    spec = build_recurrence(request.form)
    next_deadline = None
    if spec is not None:
        next_deadline = compute_next_deadline(request.deadline, spec)
    return RecurrencePreviewResponse(
        recurrence=serialize_recurrence(spec),
        description=describe_recurrence(spec),
        next_deadline=next_deadline,
    )


@app.post("/api/recurrence/validate", response_model=RecurrenceValidateResponse)
def validate_recurrence_endpoint(request: RecurrenceValidateRequest):
    """Normalize a raw recurrence value; invalid input yields no recurrence."""
    spec = validate_recurrence(request.recurrence)
    return RecurrenceValidateResponse(
        recurrence=serialize_recurrence(spec),
        description=describe_recurrence(spec),
        form=parse_recurrence_to_form(spec),
    )


@app.post("/api/ai/parse-task/sanitize", response_model=ParsedTaskResponse)
def sanitize_parse_task(request: ParseTaskSanitizeRequest):
    """Sanitize an AI parse-task response before it is used to create a task."""
    payload = request.response
    if isinstance(payload, str):
        payload = parse_json_payload(payload)
    parsed = sanitize_parsed_task(payload, fallback_text=request.input)
    return ParsedTaskResponse(
        title=parsed.title,
        description=parsed.description,
        deadline=parsed.deadline,
        quadrant=parsed.quadrant,
        recurrence=serialize_recurrence(parsed.recurrence),
        complexity=parsed.complexity,
    )


@app.post("/api/ai/sort-tasks/sanitize", response_model=List[SortedTaskResponse])
def sanitize_sort_tasks(request: SortTasksSanitizeRequest):
    """Sanitize an AI sort-tasks response."""
    payload = request.response
    if isinstance(payload, str):
        payload = parse_json_payload(payload)
    return [
        SortedTaskResponse(
            text=item.text,
            quadrant=item.quadrant,
            complexity=item.complexity,
            recurrence=serialize_recurrence(item.recurrence),
        )
        for item in sanitize_sorted_tasks(payload)
    ]


@app.get("/api/stats/yesterday", response_model=YesterdayStatsResponse)
def get_yesterday_stats(db: Session = Depends(get_db)):
    stats = yesterday_stats(TaskRepository(db))
    return YesterdayStatsResponse(yesterday_count=stats.yesterday_count, yesterday_xp=stats.yesterday_xp)


@app.get("/api/notifications/eligibility", response_model=EligibilityResponse)
def get_notification_eligibility(db: Session = Depends(get_db)):
    return _eligibility_response(EligibilityRepository(db).get())


@app.post("/api/notifications/eligibility/{event}", response_model=EligibilityResponse)
def record_notification_event(event: str, db: Session = Depends(get_db)):
    """Record an engagement event: session, task-added or task-completed."""
    repo = EligibilityRepository(db)
    current = repo.get()
    if event == "session":
        updated = current.record_session()
    elif event == "task-added":
        updated = current.record_task_added()
    elif event == "task-completed":
        updated = current.record_task_completed()
    else:
        raise HTTPException(status_code=404, detail=f"Unknown eligibility event {event!r}")
    try:
        saved = repo.save(updated)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to record event: {str(e)}")
    return _eligibility_response(saved)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
