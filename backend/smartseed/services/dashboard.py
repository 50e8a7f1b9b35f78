"""Dashboard statistics.

Five independent read-only queries, recomputed on every call (no cache).
The database returns raw counts and sums; dates, labels, rounding and
gap filling are done here so the same code runs on PostgreSQL and SQLite.
"""

from collections import defaultdict
from datetime import date, datetime, timedelta

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from smartseed.models.nursery import Batch, BatchBedAssignment, Bed
from smartseed.models.task import BedTask, DailyTaskCompletion
from smartseed.models.user import User, UserRole
from smartseed.utils.numbering import utc_today

GROWTH_DAYS = 30
TASK_DAYS = 7
CAPACITY_TOP_N = 10

CATEGORY_COLORS = {
    "Forestry": "#22c55e",
    "Fruit Tree": "#f97316",
    "Ornamental": "#a855f7",
}
DEFAULT_COLOR = "#6366f1"


def _short_date(d: date) -> str:
    return f"{d:%b} {d.day}"


async def plant_growth(db: AsyncSession, today: date) -> list[dict]:
    """Cumulative wildlings received over the last 30 days.

    Days without intake repeat the previous cumulative value; the running
    total starts at zero on the first day of the window.
    """
    start = today - timedelta(days=GROWTH_DAYS - 1)
    result = await db.execute(
        select(Batch.date_received, Batch.wildlings_count).where(
            Batch.date_received >= datetime.combine(start, datetime.min.time())
        )
    )
    per_day: dict[date, int] = defaultdict(int)
    for received, count in result.all():
        per_day[received.date()] += count or 0

    series = []
    running = 0
    for offset in range(GROWTH_DAYS):
        day = start + timedelta(days=offset)
        running += per_day.get(day, 0)
        series.append({"date": _short_date(day), "plants": running})
    return series


async def species_distribution(db: AsyncSession) -> list[dict]:
    """Assigned plant quantity per bed category, largest first."""
    total = func.coalesce(func.sum(BatchBedAssignment.quantity_assigned), 0)
    result = await db.execute(
        select(Bed.species_category, total.label("value"))
        .outerjoin(BatchBedAssignment, BatchBedAssignment.bed_id == Bed.id)
        .group_by(Bed.species_category)
        .order_by(total.desc())
    )
    return [
        {
            "name": name,
            "value": int(value),
            "color": CATEGORY_COLORS.get(name, DEFAULT_COLOR),
        }
        for name, value in result.all()
    ]


async def bed_capacity(db: AsyncSession) -> list[dict]:
    """Top beds by occupancy percentage. Zero-capacity beds count as 0%."""
    result = await db.execute(
        select(Bed.bed_name, Bed.current_occupancy, Bed.capacity)
        .where(Bed.capacity.is_not(None))
    )
    rows = []
    for name, current, capacity in result.all():
        current = current or 0
        percentage = round(current / capacity * 100, 2) if capacity else 0.0
        rows.append({
            "bed": name,
            "current": current,
            "capacity": capacity,
            "percentage": percentage,
        })
    rows.sort(key=lambda r: r["percentage"], reverse=True)
    return rows[:CAPACITY_TOP_N]


async def task_completion(db: AsyncSession, today: date) -> list[dict]:
    """Completed vs pending task count for each of the last 7 days.

    Expected per day is every bed times every default task, whatever the
    bed actually needs; pending is expected minus completed.
    """
    start = today - timedelta(days=TASK_DAYS - 1)

    bed_count = await db.scalar(select(func.count(Bed.id))) or 0
    task_count = await db.scalar(
        select(func.count(BedTask.id)).where(BedTask.is_default == True)  # noqa: E712
    ) or 0
    expected = bed_count * task_count

    result = await db.execute(
        select(DailyTaskCompletion.completion_date, func.count(DailyTaskCompletion.id))
        .where(DailyTaskCompletion.completion_date >= start)
        .group_by(DailyTaskCompletion.completion_date)
    )
    completed_by_day = {day: count for day, count in result.all()}

    series = []
    for offset in range(TASK_DAYS):
        day = start + timedelta(days=offset)
        completed = completed_by_day.get(day, 0)
        series.append({
            "day": f"{day:%a}",
            "completed": completed,
            "pending": expected - completed,
        })
    return series


async def summary_counts(db: AsyncSession) -> dict:
    total_batches = await db.scalar(select(func.count(Batch.id))) or 0
    total_plants = await db.scalar(
        select(func.coalesce(func.sum(Batch.wildlings_count), 0))
    ) or 0
    plants_in_beds = await db.scalar(
        select(func.coalesce(func.sum(Bed.current_occupancy), 0))
    ) or 0
    active_workers = await db.scalar(
        select(func.count(User.id)).where(
            User.role == UserRole.FIELD_WORKER,
            User.is_active == True,  # noqa: E712
        )
    ) or 0
    return {
        "total_batches": int(total_batches),
        "total_plants": int(total_plants),
        "plants_in_beds": int(plants_in_beds),
        "active_workers": int(active_workers),
    }


async def get_dashboard_stats(db: AsyncSession, today: date | None = None) -> dict:
    today = today or utc_today()
    return {
        "growth": await plant_growth(db, today),
        "species": await species_distribution(db),
        "capacity": await bed_capacity(db),
        "tasks": await task_completion(db, today),
        "summary": await summary_counts(db),
    }
