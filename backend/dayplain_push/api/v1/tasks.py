import logging
from typing import Any, Iterable

from fastapi import APIRouter
from pydantic import ValidationError

from dayplain_push.api.deps import SchedulerDep
from dayplain_push.schemas import CheckTasksRequest, CheckTasksResponse, Task

logger = logging.getLogger(__name__)

router = APIRouter()


def parse_tasks(items: Iterable[Any]) -> list[Task]:
    """Validate submitted tasks individually, skipping the ones that don't parse."""
    tasks = []
    for index, item in enumerate(items):
        try:
            tasks.append(Task.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping invalid task at index {index}: {e.error_count()} error(s)")
    return tasks


@router.post("/check-tasks", response_model=CheckTasksResponse)
def check_tasks(payload: CheckTasksRequest, scheduler: SchedulerDep) -> CheckTasksResponse:
    """
    Receive the frontend's task list and send reminders for tasks coming due.

    Deduplication happens here, so the frontend may resubmit freely.
    """
    tasks = parse_tasks(payload.tasks)
    sent = scheduler.check_tasks(tasks)
    if sent:
        logger.info(f"Task check: {sent} reminder(s) sent for {len(tasks)} task(s)")
    return CheckTasksResponse(sent=sent)
