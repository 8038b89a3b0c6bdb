from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from functools import lru_cache
from threading import RLock
from typing import Iterable, List, Optional, Tuple

from .models import TaskEntity
from .ordering import sort_tasks
from .schemas import TaskCreate, TaskUpdate
from .settings import get_settings

logger = logging.getLogger(__name__)

SORT_FIELDS = {"dday", "created_at", "updated_at"}


@dataclass(frozen=True)
class ListQuery:
    """
    Query parameters for listing tasks.
    """
    limit: int = 50
    offset: int = 0
    completed: Optional[bool] = None
    search: Optional[str] = None
    sort: str = "dday"  # allowed: dday, created_at, -created_at, updated_at, -updated_at
    today: Optional[date] = None  # required for the 'dday' sort


def normalize_sort(sort: Optional[str]) -> Tuple[str, bool]:
    """
    Split a sort expression into (field, reverse). Unknown fields fall back to
    'dday'. The urgency order has no descending variant.
    """
    s = (sort or "dday").strip().lower()
    reverse = s.startswith("-")
    field = s[1:] if reverse else s
    if field not in SORT_FIELDS:
        return "dday", False
    if field == "dday":
        return field, False
    return field, reverse


def _matches(task: TaskEntity, search: str) -> bool:
    s = search.lower()
    title_ok = s in (task["title"] or "").lower()
    desc_ok = s in (task["description"] or "").lower() if task["description"] else False
    return title_ok or desc_ok


def filter_sort_page(items: Iterable[TaskEntity], q: ListQuery) -> Tuple[List[TaskEntity], int]:
    """
    Apply filtering, sorting and pagination of a ListQuery to a task snapshot.
    Returns the page and the number of tasks matching the filters.
    """
    selected = list(items)
    if q.completed is not None:
        selected = [t for t in selected if t["completed"] == q.completed]
    if q.search:
        selected = [t for t in selected if _matches(t, q.search)]
    total = len(selected)

    field, reverse = normalize_sort(q.sort)
    if field == "dday":
        # Insertion order first so equal urgency keeps creation order
        selected.sort(key=lambda t: t["created_at"])
        if q.today is None:
            # The caller supplies today from clock.get_today; storage never reads the clock
            raise ValueError("ListQuery.today is required for the dday sort")
        ordered = sort_tasks(selected, q.today)
    else:
        ordered = sorted(selected, key=lambda t: t[field], reverse=reverse)

    start = max(q.offset, 0)
    end = start + max(q.limit, 0)
    return ordered[start:end], total


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for task storage backends."""

    @abstractmethod
    def create(self, data: TaskCreate) -> TaskEntity:
        """Create and return a new TaskEntity."""

    @abstractmethod
    def get(self, task_id: str) -> Optional[TaskEntity]:
        """Return a TaskEntity by id, or None if not found."""

    @abstractmethod
    def update(self, task_id: str, data: TaskUpdate) -> Optional[TaskEntity]:
        """Update fields of an existing TaskEntity. Return updated entity or None if not found."""

    @abstractmethod
    def delete(self, task_id: str) -> bool:
        """Delete a TaskEntity by id. Return True if deleted, False if not found."""

    @abstractmethod
    def all(self) -> List[TaskEntity]:
        """Return a snapshot of every stored task."""

    def list(self, query: Optional[ListQuery] = None) -> Tuple[List[TaskEntity], int]:
        """
        Return a slice of TaskEntities and total count matching filters.
        - Supports limit/offset
        - Filter by completed
        - Substring search across title and description (case-insensitive)
        - Sorting by urgency (dday) or created_at/updated_at (asc/desc)
        """
        return filter_sort_page(self.all(), query or ListQuery())


def _new_id() -> str:
    return str(uuid.uuid4())


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing and default runtime.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: dict[str, TaskEntity] = {}

    def _now(self) -> datetime:
        return datetime.now()

    def create(self, data: TaskCreate) -> TaskEntity:
        now = self._now()
        entity: TaskEntity = {
            "id": _new_id(),
            "title": data.title,
            "description": data.description,
            "target_date": data.target_date,
            "notification_time": data.notification_time or get_settings().default_notification_time,
            "notify_offsets": list(data.notify_offsets),
            "completed": data.completed,
            "created_at": now,
            "updated_at": now,
        }
        with self._lock:
            self._items[entity["id"]] = entity
        return _copy(entity)

    def get(self, task_id: str) -> Optional[TaskEntity]:
        with self._lock:
            item = self._items.get(task_id)
            return None if item is None else _copy(item)

    def update(self, task_id: str, data: TaskUpdate) -> Optional[TaskEntity]:
        with self._lock:
            existing = self._items.get(task_id)
            if existing is None:
                return None

            updated = _copy(existing)
            if data.title is not None:
                updated["title"] = data.title
            if "description" in data.model_fields_set:
                # Respect explicit nulling of description
                updated["description"] = data.description
            if data.target_date is not None:
                updated["target_date"] = data.target_date
            if data.notification_time is not None:
                updated["notification_time"] = data.notification_time
            if data.notify_offsets is not None:
                updated["notify_offsets"] = list(data.notify_offsets)
            if data.completed is not None:
                updated["completed"] = data.completed
            updated["updated_at"] = self._now()

            self._items[task_id] = updated
            return _copy(updated)

    def delete(self, task_id: str) -> bool:
        with self._lock:
            return self._items.pop(task_id, None) is not None

    def all(self) -> List[TaskEntity]:
        with self._lock:
            # Return copies to avoid external mutation
            return [_copy(t) for t in self._items.values()]


def _copy(task: TaskEntity) -> TaskEntity:
    c = task.copy()
    c["notify_offsets"] = list(task["notify_offsets"])
    return c


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_repository() -> Repository:
    """
    Return the configured repository, created once per process.
    - memory: InMemoryRepository
    - sqlite: SQLiteRepository
    """
    settings = get_settings()
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteRepository

        logger.info("Using sqlite task storage at %s", settings.sqlite_db_path)
        return SQLiteRepository(settings.sqlite_db_path)
    logger.info("Using in-memory task storage")
    return InMemoryRepository()
