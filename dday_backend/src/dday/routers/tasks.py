from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from ..clock import get_today
from ..repositories import ListQuery, Repository, get_repository, normalize_sort
from ..schemas import TaskCreate, TaskOut, TaskUpdate
from ..utils import pagination_envelope

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/tasks",
    tags=["tasks"],
)


class PaginationEnvelope(BaseModel):
    """
    Envelope for paginated list responses.
    """
    items: List[TaskOut] = Field(..., description="List of tasks")
    total: int = Field(..., description="Total number of items matching the query")
    limit: int = Field(..., description="Limit applied to the query")
    offset: int = Field(..., description="Offset applied to the query")


def _get_repo(repo: Repository = Depends(get_repository)) -> Repository:
    """
    Dependency wrapper for repository to keep signatures clean.
    """
    return repo


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")


# PUBLIC_INTERFACE
@router.post(
    "/",
    response_model=TaskOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    description="Create a new D-Day task and return the created resource.",
    responses={
        201: {"description": "Task created successfully"},
        422: {"description": "Validation error"},
    },
)
def create_task(
    payload: TaskCreate,
    repo: Repository = Depends(_get_repo),
    today: date = Depends(get_today),
) -> TaskOut:
    """
    Create a new task.
    """
    created = repo.create(payload)
    logger.info("Created task %s with D-Day %s", created["id"], created["target_date"])
    return TaskOut.from_entity(created, today)


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=PaginationEnvelope,
    summary="List Tasks",
    description=(
        "List tasks with optional filters and pagination.\n\n"
        "Query parameters:\n"
        "- limit: max number of items to return (0..1000)\n"
        "- offset: number of items to skip (>=0)\n"
        "- completed: filter by completion status\n"
        "- q: search query for title/description (substring match)\n"
        "- sort: dday (default), created_at, -created_at, updated_at, -updated_at\n"
        "- order: asc or desc (if provided, it overrides the direction in sort)\n\n"
        "The dday order lists open tasks before completed ones, each group by "
        "ascending day offset, so overdue tasks come first."
    ),
    responses={
        200: {"description": "List retrieved successfully"},
        400: {"description": "Invalid query parameters"},
    },
)
def list_tasks(
    limit: int = Query(50, ge=0, le=1000, description="Maximum number of items to return"),
    offset: int = Query(0, ge=0, description="Number of items to skip"),
    completed: Optional[bool] = Query(None, description="Filter by completion status"),
    q: Optional[str] = Query(None, description="Search text for title/description"),
    sort: Optional[str] = Query(
        "dday",
        description="Sort by: dday, created_at, -created_at, updated_at, -updated_at",
    ),
    order: Optional[str] = Query(
        None, description="Override sort direction: 'asc' or 'desc' (ignored for dday)"
    ),
    repo: Repository = Depends(_get_repo),
    today: date = Depends(get_today),
) -> PaginationEnvelope:
    """
    List tasks with pagination and filters.
    """
    field, reverse = normalize_sort(sort)
    if order:
        ord_norm = order.strip().lower()
        if ord_norm not in {"asc", "desc"}:
            raise HTTPException(status_code=400, detail="order must be 'asc' or 'desc'")
        if field != "dday":
            reverse = ord_norm == "desc"
    normalized_sort = f"-{field}" if reverse else field

    query = ListQuery(
        limit=limit,
        offset=offset,
        completed=completed,
        search=q.strip() if q else None,
        sort=normalized_sort,
        today=today,
    )
    items, total = repo.list(query)
    envelope = pagination_envelope(
        items=[TaskOut.from_entity(it, today) for it in items],
        total=total,
        limit=limit,
        offset=offset,
    )
    return PaginationEnvelope(**envelope)


# PUBLIC_INTERFACE
@router.get(
    "/{task_id}",
    response_model=TaskOut,
    summary="Get Task",
    description="Get a single task by ID.",
    responses={
        200: {"description": "Task found"},
        404: {"description": "Task not found"},
    },
)
def get_task(task_id: str, repo: Repository = Depends(_get_repo), today: date = Depends(get_today)) -> TaskOut:
    """
    Retrieve a single task by its ID.
    """
    item = repo.get(task_id)
    if not item:
        raise _not_found()
    return TaskOut.from_entity(item, today)


# PUBLIC_INTERFACE
@router.put(
    "/{task_id}",
    response_model=TaskOut,
    summary="Replace Task",
    description=(
        "Replace an existing task. Omitted fields take their create-schema defaults, "
        "except notification_time, which keeps its stored value when omitted."
    ),
    responses={
        200: {"description": "Task updated"},
        404: {"description": "Task not found"},
    },
)
def put_task(
    task_id: str,
    payload: TaskCreate,
    repo: Repository = Depends(_get_repo),
    today: date = Depends(get_today),
) -> TaskOut:
    """
    Full update (replace) semantics implemented via the partial-update capable repository by
    mapping TaskCreate into TaskUpdate fields.
    """
    update = TaskUpdate(
        title=payload.title,
        description=payload.description,
        target_date=payload.target_date,
        notification_time=payload.notification_time,
        notify_offsets=payload.notify_offsets,
        completed=payload.completed,
    )
    updated = repo.update(task_id, update)
    if not updated:
        raise _not_found()
    logger.info("Replaced task %s", task_id)
    return TaskOut.from_entity(updated, today)


# PUBLIC_INTERFACE
@router.patch(
    "/{task_id}",
    response_model=TaskOut,
    summary="Update Task",
    description="Partially update fields of a task.",
    responses={
        200: {"description": "Task updated"},
        404: {"description": "Task not found"},
    },
)
def patch_task(
    task_id: str,
    payload: TaskUpdate,
    repo: Repository = Depends(_get_repo),
    today: date = Depends(get_today),
) -> TaskOut:
    """
    Partial update of a task.
    """
    updated = repo.update(task_id, payload)
    if not updated:
        raise _not_found()
    logger.info("Updated task %s (%s)", task_id, ", ".join(sorted(payload.model_fields_set)))
    return TaskOut.from_entity(updated, today)


# PUBLIC_INTERFACE
@router.post(
    "/{task_id}/toggle",
    response_model=TaskOut,
    summary="Toggle Task Completion",
    description="Flip the completion flag of a task (complete / undo).",
    responses={
        200: {"description": "Task toggled"},
        404: {"description": "Task not found"},
    },
)
def toggle_task(task_id: str, repo: Repository = Depends(_get_repo), today: date = Depends(get_today)) -> TaskOut:
    existing = repo.get(task_id)
    if not existing:
        raise _not_found()
    updated = repo.update(task_id, TaskUpdate(completed=not existing["completed"]))
    if not updated:
        raise _not_found()
    logger.info("Task %s marked %s", task_id, "completed" if updated["completed"] else "open")
    return TaskOut.from_entity(updated, today)


# PUBLIC_INTERFACE
@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Task",
    description="Delete a task by ID.",
    responses={
        204: {"description": "Task deleted"},
        404: {"description": "Task not found"},
    },
)
def delete_task(task_id: str, repo: Repository = Depends(_get_repo)) -> None:
    """
    Delete a task. Returns 204 on success, 404 if not found.
    """
    if not repo.delete(task_id):
        raise _not_found()
    logger.info("Deleted task %s", task_id)
    return None
