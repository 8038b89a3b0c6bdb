from __future__ import annotations

from datetime import date, datetime, time
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_serializer, field_validator

from .dates import DateInput, day_offset, to_calendar_date
from .models import TaskEntity
from .notifications import notify_days_display, validate_notify_offsets
from .urgency import UrgencyTier, color_tier, dday_label, tier_color

DEFAULT_NOTIFY_OFFSETS = [1, 3]


def _validate_title(v: str) -> str:
    s = v.strip()
    if not (1 <= len(s) <= 200):
        raise ValueError("title length must be between 1 and 200 characters")
    return s


def _truncate_time(v: time) -> time:
    # Only hour and minute are meaningful for a reminder
    return v.replace(second=0, microsecond=0, tzinfo=None)


# PUBLIC_INTERFACE
class TaskCreate(BaseModel):
    """
    Schema for creating a new D-Day task.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Submit thesis",
                "description": "Final PDF to the graduate office",
                "target_date": "2025-02-01",
                "notification_time": "09:00",
                "notify_offsets": [0, 1, 3],
                "completed": False,
            }
        }
    )

    title: str = Field(..., description="Short title for the task", min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, description="Optional detailed description")
    target_date: date = Field(
        ...,
        description="The task's D-Day. Accepts an ISO8601 date; a datetime keeps only its date part",
    )
    notification_time: Optional[time] = Field(
        default=None,
        description="Time of day (HH:MM) for reminders. Defaults to DEFAULT_NOTIFICATION_TIME",
    )
    notify_offsets: List[StrictInt] = Field(
        default_factory=lambda: list(DEFAULT_NOTIFY_OFFSETS),
        description="Days before the D-Day to remind on; 0 means on the D-Day itself",
    )
    completed: bool = Field(default=False, description="Completion status flag")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """
        Strip whitespace and enforce 1..200 length.
        """
        return _validate_title(v)

    @field_validator("target_date", mode="before")
    @classmethod
    def parse_target_date(cls, v: DateInput) -> date:
        """
        Normalize target_date from str/date/datetime to a calendar date.
        """
        return to_calendar_date(v)

    @field_validator("notification_time")
    @classmethod
    def truncate_notification_time(cls, v: Optional[time]) -> Optional[time]:
        return None if v is None else _truncate_time(v)

    @field_validator("notify_offsets")
    @classmethod
    def check_notify_offsets(cls, v: List[int]) -> List[int]:
        """
        Reject negative offsets; store the distinct offsets ascending.
        """
        return validate_notify_offsets(v)


# PUBLIC_INTERFACE
class TaskUpdate(BaseModel):
    """
    Schema for updating an existing task.
    All fields are optional; only provided fields will be updated.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Submit thesis (final)",
                "target_date": "2025-02-03",
                "notify_offsets": [0, 7],
                "completed": True,
            }
        }
    )

    title: Optional[str] = Field(default=None, description="Short title for the task", min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, description="Optional detailed description")
    target_date: Optional[date] = Field(default=None, description="The task's D-Day as an ISO8601 date")
    notification_time: Optional[time] = Field(default=None, description="Time of day (HH:MM) for reminders")
    notify_offsets: Optional[List[StrictInt]] = Field(
        default=None, description="Days before the D-Day to remind on"
    )
    completed: Optional[bool] = Field(default=None, description="Completion status flag")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        """
        If title is provided, strip whitespace and enforce 1..200 length.
        """
        return None if v is None else _validate_title(v)

    @field_validator("target_date", mode="before")
    @classmethod
    def parse_target_date(cls, v: Optional[DateInput]) -> Optional[date]:
        if v is None:
            return None
        return to_calendar_date(v)

    @field_validator("notification_time")
    @classmethod
    def truncate_notification_time(cls, v: Optional[time]) -> Optional[time]:
        return None if v is None else _truncate_time(v)

    @field_validator("notify_offsets")
    @classmethod
    def check_notify_offsets(cls, v: Optional[List[int]]) -> Optional[List[int]]:
        return None if v is None else validate_notify_offsets(v)


# PUBLIC_INTERFACE
class DDayView(BaseModel):
    """
    Presentation of a task's D-Day relative to the request's "today".
    """

    offset: int = Field(..., description="Signed days until the D-Day (negative once it has passed)")
    label: str = Field(..., description="'D-Day', 'D-n' before the day, 'D+n' after it")
    tier: UrgencyTier = Field(..., description="Urgency tier derived from the offset")
    color: str = Field(..., description="Hex color of the urgency tier")
    notify_days: List[str] = Field(..., description="Notify offsets rendered as labels, ascending")

    @classmethod
    def for_task(cls, task: TaskEntity, today: date) -> "DDayView":
        offset = day_offset(task["target_date"], today)
        tier = color_tier(offset)
        return cls(
            offset=offset,
            label=dday_label(offset),
            tier=tier,
            color=tier_color(tier),
            notify_days=notify_days_display(task),
        )


# PUBLIC_INTERFACE
class TaskOut(BaseModel):
    """
    Schema returned by the API for a task.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "0b5e6a1c-3f0d-4a8e-9d57-1f1c3c1d2e4f",
                "title": "Submit thesis",
                "description": "Final PDF to the graduate office",
                "target_date": "2025-02-01",
                "notification_time": "09:00",
                "notify_offsets": [0, 1, 3],
                "completed": False,
                "created_at": "2025-01-25T10:15:30.123456",
                "updated_at": "2025-01-26T09:00:00.000001",
                "dday": {
                    "offset": 3,
                    "label": "D-3",
                    "tier": "imminent",
                    "color": "#e67e22",
                    "notify_days": ["D-Day", "D-1", "D-3"],
                },
            }
        }
    )

    id: str = Field(..., description="Unique identifier of the task")
    title: str = Field(..., description="Short title for the task")
    description: Optional[str] = Field(default=None, description="Optional detailed description")
    target_date: date = Field(..., description="The task's D-Day")
    notification_time: time = Field(..., description="Time of day for reminders")
    notify_offsets: List[int] = Field(..., description="Days before the D-Day to remind on")
    completed: bool = Field(..., description="Completion status flag")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
    dday: DDayView = Field(..., description="D-Day view computed for today")

    @field_serializer("notification_time")
    def serialize_notification_time(self, v: time) -> str:
        return v.strftime("%H:%M")

    @classmethod
    def from_entity(cls, task: TaskEntity, today: date) -> "TaskOut":
        """Build the API view of a stored task for the given day."""
        return cls(**task, dday=DDayView.for_task(task, today))
