"""Daily bed-task checklist.

Per (bed, task, calendar day) a task is either incomplete (no row) or
complete (exactly one DailyTaskCompletion row). Completing again the
same day overwrites the row in place; un-completing deletes only
today's row, so earlier days stay as history. A new day starts with
every task incomplete because the date is part of the key.
"""

import logging
from datetime import datetime

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from smartseed.middleware.exceptions import NotFoundError
from smartseed.models.nursery import Bed
from smartseed.models.task import BedTask, DailyTaskCompletion
from smartseed.schemas.task import TaskCompleteRequest
from smartseed.utils.db_compat import dialect_insert
from smartseed.utils.numbering import utc_today

logger = logging.getLogger("smartseed.tasks")


async def list_default_tasks(db: AsyncSession) -> list[BedTask]:
    result = await db.execute(
        select(BedTask)
        .where(BedTask.is_default == True)  # noqa: E712
        .order_by(BedTask.display_order, BedTask.task_name)
    )
    return list(result.scalars().all())


async def find_bed(identifier: str, db: AsyncSession) -> Bed:
    """Look a bed up by primary key or by the QR code printed on its tag."""
    result = await db.execute(
        select(Bed)
        .where(or_(Bed.id == identifier, Bed.qr_code == identifier))
        .options(selectinload(Bed.location), selectinload(Bed.person_in_charge))
    )
    bed = result.scalars().first()
    if not bed:
        raise NotFoundError("Bed", identifier)
    return bed


async def get_bed_tasks(identifier: str, db: AsyncSession) -> dict:
    """Return today's checklist for a bed.

    Returns:
        {
            "bed": Bed,
            "tasks": [{"task": BedTask, "completion": DailyTaskCompletion | None}, ...],
            "all_completed": bool,
        }

    ``all_completed`` is true iff every default task has a row dated
    today (vacuously true for an empty catalog).
    """
    bed = await find_bed(identifier, db)
    tasks = await list_default_tasks(db)

    result = await db.execute(
        select(DailyTaskCompletion)
        .where(
            DailyTaskCompletion.bed_id == bed.id,
            DailyTaskCompletion.completion_date == utc_today(),
        )
        .execution_options(populate_existing=True)
    )
    completions = {c.task_id: c for c in result.scalars().all()}

    checklist = [
        {"task": task, "completion": completions.get(task.id)}
        for task in tasks
    ]
    return {
        "bed": bed,
        "tasks": checklist,
        "all_completed": all(item["completion"] is not None for item in checklist),
    }


async def complete_task(body: TaskCompleteRequest, db: AsyncSession) -> DailyTaskCompletion:
    """Mark a task done for today (insert, or overwrite today's row).

    A single INSERT … ON CONFLICT (bed_id, task_id, completion_date)
    DO UPDATE, so concurrent calls merge instead of duplicating.
    """
    bed = await db.get(Bed, body.bed_id)
    if not bed:
        raise NotFoundError("Bed", body.bed_id)
    task = await db.get(BedTask, body.task_id)
    if not task:
        raise NotFoundError("Task", body.task_id)

    now = datetime.utcnow()
    today = now.date()
    fields = {
        "completed_by": body.completed_by,
        "completion_time": now,
        "photo_url": body.photo_url,
        "notes": body.notes,
        "gps_latitude": body.gps_latitude,
        "gps_longitude": body.gps_longitude,
    }

    stmt = dialect_insert(db, DailyTaskCompletion).values(
        bed_id=body.bed_id,
        task_id=body.task_id,
        completion_date=today,
        **fields,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["bed_id", "task_id", "completion_date"],
        set_=fields,
    )
    await db.execute(stmt)

    completion = (
        await db.execute(
            select(DailyTaskCompletion)
            .where(
                DailyTaskCompletion.bed_id == body.bed_id,
                DailyTaskCompletion.task_id == body.task_id,
                DailyTaskCompletion.completion_date == today,
            )
            .execution_options(populate_existing=True)
        )
    ).scalar_one()

    logger.info(
        "Task %s completed on bed %s by %s", task.task_name, bed.bed_name, body.completed_by,
    )
    return completion


async def uncomplete_task(bed_id: str, task_id: str, db: AsyncSession) -> None:
    """Delete today's completion row; a no-op when there is none."""
    result = await db.execute(
        delete(DailyTaskCompletion).where(
            DailyTaskCompletion.bed_id == bed_id,
            DailyTaskCompletion.task_id == task_id,
            DailyTaskCompletion.completion_date == utc_today(),
        )
    )
    if result.rowcount:
        logger.info("Task %s unmarked on bed %s", task_id, bed_id)
