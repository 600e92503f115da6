"""API router for periodic tasks and their completions."""

from datetime import datetime
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from choretrack.config import get_settings
from choretrack.database import get_db
from choretrack.models.task import Task
from choretrack.schemas.completion import CompletionResponse
from choretrack.schemas.task import TaskCreate, TaskResponse, TaskUpdate
from choretrack.services.completion_service import CompletionService, TaskAlreadyCompletedError
from choretrack.services.task_service import TaskService
from choretrack.services.time_manager import get_current_time
from choretrack.utils.format_utils import already_completed_message
from choretrack.utils.period_utils import Frequency, PeriodEngineError

router = APIRouter()
logger = logging.getLogger("choretrack.tasks")


def _not_found(task_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Task with id {task_id} not found",
    )


def _task_response(db: Session, task: Task, now: datetime | None = None) -> TaskResponse:
    """Serialize a task together with its current-period status."""
    try:
        status_fields = CompletionService.get_status(db, task, now)
    except PeriodEngineError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    return TaskResponse.model_validate(task).model_copy(update=status_fields)


@router.post("/", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task: TaskCreate,
    db: Session = Depends(get_db),
) -> TaskResponse:
    """Create a new task."""
    try:
        created_task = TaskService.create_task(db, task)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    logger.info("HTTP create: task_id=%s", created_task.id)
    return _task_response(db, created_task)


@router.get("/", response_model=list[TaskResponse])
def get_tasks(
    active_only: bool = Query(False, description="Only active tasks"),
    area_id: int | None = Query(None, description="Only tasks of this area"),
    frequency: Frequency | None = Query(None, description="Only tasks of this frequency"),
    db: Session = Depends(get_db),
) -> list[TaskResponse]:
    """Get tasks with their current-period status."""
    tasks = TaskService.get_all_tasks(db, active_only=active_only, area_id=area_id, frequency=frequency)
    now = get_current_time()
    locale = get_settings().locale
    keys, completions = CompletionService.current_completions(db, tasks, now)
    return [
        TaskResponse.model_validate(task).model_copy(
            update=CompletionService.describe_status(
                task, keys[task.id], completions.get(task.id), now, locale
            )
        )
        for task in tasks
    ]


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: int,
    db: Session = Depends(get_db),
) -> TaskResponse:
    """Get a specific task by ID."""
    task = TaskService.get_task(db, task_id)
    if not task:
        raise _not_found(task_id)
    return _task_response(db, task)


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: int,
    task_update: TaskUpdate,
    db: Session = Depends(get_db),
) -> TaskResponse:
    """Update a task."""
    try:
        updated_task = TaskService.update_task(db, task_id, task_update)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    if not updated_task:
        raise _not_found(task_id)
    logger.info("HTTP update: task_id=%s", updated_task.id)
    return _task_response(db, updated_task)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: int,
    db: Session = Depends(get_db),
) -> None:
    """Delete a task and its completion history."""
    success = TaskService.delete_task(db, task_id)
    if not success:
        raise _not_found(task_id)
    logger.info("HTTP delete: task_id=%s", task_id)


@router.post("/{task_id}/complete", response_model=CompletionResponse, status_code=status.HTTP_201_CREATED)
def complete_task(
    task_id: int,
    db: Session = Depends(get_db),
) -> CompletionResponse:
    """Mark a task done for its current period."""
    try:
        completion = CompletionService.complete_task(db, task_id, get_current_time())
    except TaskAlreadyCompletedError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "code": "already_completed",
                "message": already_completed_message(exc.task.frequency, get_settings().locale),
                "period": exc.period,
            },
        ) from exc
    except PeriodEngineError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    if not completion:
        raise _not_found(task_id)
    logger.info("HTTP complete: task_id=%s period=%s", task_id, completion.period)
    return CompletionResponse.model_validate(completion)


@router.delete("/{task_id}/complete", response_model=TaskResponse)
def uncomplete_task(
    task_id: int,
    db: Session = Depends(get_db),
) -> TaskResponse:
    """Undo the completion of the current period."""
    now = get_current_time()
    try:
        task = CompletionService.uncomplete_task(db, task_id, now)
    except PeriodEngineError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    if not task:
        raise _not_found(task_id)
    logger.info("HTTP uncomplete: task_id=%s", task_id)
    return _task_response(db, task, now)


@router.get("/{task_id}/completions", response_model=list[CompletionResponse])
def get_task_completions(
    task_id: int,
    db: Session = Depends(get_db),
) -> list[CompletionResponse]:
    """Completion history of a task, newest first."""
    if not TaskService.get_task(db, task_id):
        raise _not_found(task_id)
    completions = CompletionService.list_completions(db, task_id)
    return [CompletionResponse.model_validate(completion) for completion in completions]
