"""
Notification trigger evaluation.

A task carries a set of notify offsets, e.g. {0, 1, 3}: "notify me on D-Day,
the day before and three days before". The evaluator answers, for a single
calendar day, whether that day is one of them.

Known limitation: each offset fires on exactly one calendar day, the day the
live offset equals it. If nothing evaluates the task on that day (for example
the application was not running) the notification is missed and is never
fired later. Deduplicating repeated evaluations within a day and delivering
the notification are the caller's responsibility.
"""
from __future__ import annotations

import logging
from datetime import time
from typing import Iterable, List, Mapping, TypeVar

from .dates import DateInput, day_offset
from .errors import InvalidNotifyOffset
from .urgency import dday_label

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Mapping)


# PUBLIC_INTERFACE
def validate_notify_offsets(offsets: Iterable[int]) -> List[int]:
    """
    Validate notify offsets at the point a task is built or updated.

    Returns the distinct offsets in ascending order.

    Raises:
        InvalidNotifyOffset: if any entry is negative or not an integer.
    """
    cleaned = set()
    for value in offsets:
        # bool is an int subclass but never a meaningful offset
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidNotifyOffset(f"Notify offset must be an integer, got {value!r}")
        if value < 0:
            raise InvalidNotifyOffset(f"Notify offset must be >= 0, got {value}")
        cleaned.add(value)
    return sorted(cleaned)


# PUBLIC_INTERFACE
def should_notify_today(task: Mapping, today: DateInput) -> bool:
    """
    Return True if today is one of the task's notification days.

    The live offset must be one of the task's notify offsets and must not be
    negative. Offsets are compared as a set, so duplicates and ordering in
    task["notify_offsets"] do not matter.
    """
    offset = day_offset(task["target_date"], today)
    return offset >= 0 and offset in set(task["notify_offsets"])


# PUBLIC_INTERFACE
def notify_days_display(task: Mapping) -> List[str]:
    """Notify offsets ascending, rendered as 'D-Day' for 0 and 'D-n' otherwise."""
    return [dday_label(n) for n in sorted(set(task["notify_offsets"]))]


# PUBLIC_INTERFACE
def tasks_to_notify(tasks: Iterable[T], today: DateInput) -> List[T]:
    """
    Select the open tasks whose notification fires today.

    Completed tasks are skipped. The result is ordered by notification time
    (earliest first), ties keeping their input order.
    """
    snapshot = list(tasks)
    due = [t for t in snapshot if not t["completed"] and should_notify_today(t, today)]
    due.sort(key=lambda t: t.get("notification_time") or time.min)
    logger.debug("Evaluated %d tasks for %s: %d due", len(snapshot), today, len(due))
    return due
