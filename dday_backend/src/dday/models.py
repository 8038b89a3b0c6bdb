from __future__ import annotations

from datetime import date, datetime, time
from typing import List, Optional, TypedDict


# PUBLIC_INTERFACE
class TaskEntity(TypedDict):
    """
    A lightweight domain model representing a D-Day task for the storage
    backends and the engine functions.

    Fields:
    - id: Unique identifier (UUID4 string) assigned by the repository
    - title: Short title (1..200 chars, trimmed on input via schemas)
    - description: Optional detailed description
    - target_date: The task's D-Day as a calendar date
    - notification_time: Time of day the reminder should be shown
    - notify_offsets: Distinct, non-negative day offsets, ascending
    - completed: Boolean completion flag
    - created_at: Local creation timestamp
    - updated_at: Local last update timestamp
    """

    id: str
    title: str
    description: Optional[str]
    target_date: date
    notification_time: time
    notify_offsets: List[int]
    completed: bool
    created_at: datetime
    updated_at: datetime
