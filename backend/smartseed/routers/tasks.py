"""Task router: QR-driven daily checklist for field workers.

Endpoints:
    GET    /api/tasks                   Default task catalog
    GET    /api/tasks/bed/{identifier}  Today's checklist (bed id or QR code)
    POST   /api/tasks/complete          Mark a task done today (upsert)
    DELETE /api/tasks/complete          Unmark today's completion
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from smartseed.database import get_db
from smartseed.schemas.nursery import BedOut
from smartseed.schemas.task import (
    BedTaskOut,
    BedTasksResponse,
    CompletionOut,
    TaskCatalogResponse,
    TaskCompleteRequest,
    TaskCompleteResponse,
    TaskStatus,
    TaskUncompleteRequest,
    TaskUncompleteResponse,
)
from smartseed.services import tasks as task_service

router = APIRouter()


@router.get("", response_model=TaskCatalogResponse)
async def list_tasks(db: AsyncSession = Depends(get_db)):
    tasks = await task_service.list_default_tasks(db)
    return TaskCatalogResponse(tasks=[BedTaskOut.model_validate(t) for t in tasks])


@router.get("/bed/{identifier}", response_model=BedTasksResponse)
async def get_bed_tasks(identifier: str, db: AsyncSession = Depends(get_db)):
    checklist = await task_service.get_bed_tasks(identifier, db)

    tasks = []
    for item in checklist["tasks"]:
        status_out = TaskStatus.model_validate(item["task"])
        if item["completion"] is not None:
            status_out.is_completed = True
            status_out.completion_data = CompletionOut.model_validate(item["completion"])
        tasks.append(status_out)

    return BedTasksResponse(
        bed=BedOut.model_validate(checklist["bed"]),
        tasks=tasks,
        all_completed=checklist["all_completed"],
    )


@router.post("/complete", response_model=TaskCompleteResponse)
async def complete_task(body: TaskCompleteRequest, db: AsyncSession = Depends(get_db)):
    completion = await task_service.complete_task(body, db)
    return TaskCompleteResponse(completion=CompletionOut.model_validate(completion))


@router.delete("/complete", response_model=TaskUncompleteResponse)
async def uncomplete_task(body: TaskUncompleteRequest, db: AsyncSession = Depends(get_db)):
    await task_service.uncomplete_task(body.bed_id, body.task_id, db)
    return TaskUncompleteResponse()
