from __future__ import annotations

import logging
from datetime import date, time
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field, field_serializer

from ..clock import get_today
from ..dates import day_offset, to_calendar_date
from ..notifications import tasks_to_notify
from ..repositories import Repository, get_repository
from ..urgency import dday_label

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/notifications",
    tags=["notifications"],
)


class DueNotification(BaseModel):
    """
    A reminder that should be delivered on the evaluated day.
    """
    task_id: str = Field(..., description="Identifier of the task to remind about")
    title: str = Field(..., description="Task title")
    target_date: date = Field(..., description="The task's D-Day")
    notification_time: time = Field(..., description="Time of day the reminder should be shown")
    offset: int = Field(..., description="Days left until the D-Day on the evaluated day")
    label: str = Field(..., description="D-Day label for the evaluated day, e.g. 'D-3'")

    @field_serializer("notification_time")
    def serialize_notification_time(self, v: time) -> str:
        return v.strftime("%H:%M")


class DueNotifications(BaseModel):
    on: date = Field(..., description="The evaluated day")
    items: List[DueNotification] = Field(..., description="Reminders due on that day, by time of day")


# PUBLIC_INTERFACE
@router.get(
    "/due",
    response_model=DueNotifications,
    summary="Due Notifications",
    description=(
        "List the reminders that fire on a given day (default: today). A reminder fires "
        "only on the exact day whose offset to the D-Day is one of the task's notify "
        "offsets; days that were never queried are not caught up later. Callers are "
        "expected to poll once per day and deduplicate deliveries themselves."
    ),
    responses={
        200: {"description": "Reminders evaluated"},
        422: {"description": "Invalid date"},
    },
)
def due_notifications(
    on: Optional[str] = Query(None, description="Day to evaluate as YYYY-MM-DD"),
    repo: Repository = Depends(get_repository),
    today: date = Depends(get_today),
) -> DueNotifications:
    """
    Evaluate every stored task against the requested day.
    """
    day = to_calendar_date(on) if on else today
    due = tasks_to_notify(repo.all(), day)
    logger.info("%d reminder(s) due on %s", len(due), day)
    items = []
    for task in due:
        offset = day_offset(task["target_date"], day)
        items.append(
            DueNotification(
                task_id=task["id"],
                title=task["title"],
                target_date=task["target_date"],
                notification_time=task["notification_time"],
                offset=offset,
                label=dday_label(offset),
            )
        )
    return DueNotifications(on=day, items=items)
