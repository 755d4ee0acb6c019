from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, field_validator

from dayplain_push.models.base import CamelModel


class TaskPriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class TaskStatus(str, Enum):
    BACKLOG = "Backlog"
    PLANNED = "Planned"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"


class Task(CamelModel):
    """Minimal task descriptor submitted by the frontend."""

    id: str
    title: str
    priority: TaskPriority
    status: TaskStatus
    due_date: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("due_date", mode="before")
    @classmethod
    def blank_due_date(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class CheckTasksRequest(BaseModel):
    # Validated item by item in the route; invalid items are skipped
    tasks: list[Any]


class CheckTasksResponse(BaseModel):
    sent: int
