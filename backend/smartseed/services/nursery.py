"""Nursery inventory: locations, wildling batches and beds."""

import logging
import uuid
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from smartseed.middleware.exceptions import NotFoundError, ValidationError
from smartseed.models.nursery import SPECIES_CATEGORIES, Batch, Bed, Location
from smartseed.models.task import BedTask, DailyTaskCompletion
from smartseed.schemas.nursery import BatchCreate, BedCreate, LocationCreate
from smartseed.utils.numbering import add_with_code, utc_today

logger = logging.getLogger("smartseed.nursery")


# ── Locations ────────────────────────────────────────────────

async def list_locations(db: AsyncSession) -> list[Location]:
    result = await db.execute(select(Location).order_by(Location.location_name))
    return list(result.scalars().all())


async def create_location(body: LocationCreate, db: AsyncSession) -> Location:
    existing = await db.scalar(
        select(Location.id).where(Location.location_name == body.location_name)
    )
    if existing:
        raise ValidationError("Location name already exists")

    location = Location(location_name=body.location_name, description=body.description)
    db.add(location)
    await db.flush()
    logger.info("Created location %s", location.location_name)
    return location


# ── Batches ──────────────────────────────────────────────────

async def list_batches(db: AsyncSession) -> list[Batch]:
    result = await db.execute(select(Batch).order_by(Batch.date_received.desc()))
    return list(result.scalars().all())


async def create_batch(body: BatchCreate, db: AsyncSession) -> Batch:
    """Record a wildling intake with a generated BATCH-YYYYMMDD-NNN code."""
    batch = Batch(
        source_location=body.source_location,
        wildlings_count=body.wildlings_count,
        date_received=datetime.utcnow(),
        status="received",
        notes=body.notes,
        person_in_charge=body.person_in_charge,
        photo_url=body.photo_url,
    )
    await add_with_code(db, batch, "batch")
    logger.info(
        "Received %s: %d wildlings from %s",
        batch.batch_code, batch.wildlings_count, batch.source_location,
    )
    return batch


# ── Beds ─────────────────────────────────────────────────────

def _bed_query():
    return select(Bed).options(
        selectinload(Bed.location),
        selectinload(Bed.person_in_charge),
    )


async def list_beds(
    db: AsyncSession,
    assigned_to: str | None = None,
    qr_code: str | None = None,
) -> list[tuple[Bed, bool]]:
    """Beds with a flag telling whether today's checklist is done.

    A bed counts as done when its completions dated today match the
    number of default tasks.
    """
    stmt = _bed_query()
    if assigned_to:
        stmt = stmt.where(Bed.in_charge == assigned_to)
    if qr_code:
        stmt = stmt.where(Bed.qr_code == qr_code)
    beds = list((await db.execute(stmt.order_by(Bed.created_at, Bed.bed_name))).scalars().all())

    task_count = await db.scalar(
        select(func.count(BedTask.id)).where(BedTask.is_default == True)  # noqa: E712
    ) or 0
    result = await db.execute(
        select(DailyTaskCompletion.bed_id, func.count(DailyTaskCompletion.id))
        .where(DailyTaskCompletion.completion_date == utc_today())
        .group_by(DailyTaskCompletion.bed_id)
    )
    done_today = dict(result.all())

    return [(bed, done_today.get(bed.id, 0) == task_count) for bed in beds]


def _new_qr_code() -> str:
    return f"BED-{uuid.uuid4().hex[:10].upper()}"


async def create_bed(body: BedCreate, db: AsyncSession) -> Bed:
    """Create a bed; a QR code is generated when none is given.

    Raises:
        ValidationError on an unknown category or a duplicate name in the location.
        NotFoundError if the location does not exist.
    """
    if body.species_category not in SPECIES_CATEGORIES:
        raise ValidationError("Invalid species category")

    if not await db.get(Location, body.location_id):
        raise NotFoundError("Location", body.location_id)

    duplicate = await db.scalar(
        select(Bed.id).where(
            Bed.location_id == body.location_id,
            Bed.bed_name == body.bed_name,
        )
    )
    if duplicate:
        raise ValidationError("A bed with this name already exists in this location")

    bed = Bed(
        bed_name=body.bed_name,
        location_id=body.location_id,
        species_category=body.species_category,
        qr_code=body.qr_code or _new_qr_code(),
        in_charge=body.in_charge,
        capacity=body.capacity,
        current_occupancy=0,
        notes=body.notes,
    )
    db.add(bed)
    await db.flush()
    logger.info("Created bed %s (%s)", bed.bed_name, bed.qr_code)

    return (
        await db.execute(
            _bed_query().where(Bed.id == bed.id).execution_options(populate_existing=True)
        )
    ).scalar_one()


async def get_bed(bed_id: str, db: AsyncSession) -> Bed:
    bed = (await db.execute(_bed_query().where(Bed.id == bed_id))).scalar_one_or_none()
    if not bed:
        raise NotFoundError("Bed", bed_id)
    return bed
