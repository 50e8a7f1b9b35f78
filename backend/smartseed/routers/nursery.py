"""Nursery inventory routes: locations, wildling batches, beds.

Endpoints:
    GET    /api/locations          All locations by name
    POST   /api/locations          Create (400 on duplicate name)
    GET    /api/batches            Batches, newest first
    POST   /api/batches            Record an intake (generates batch_code)
    GET    /api/beds               Beds (?assignedTo=<user id>&qrCode=<code>)
    POST   /api/beds               Create a bed (QR code generated when omitted)
    GET    /api/beds/{id}/qr       SVG QR tag pointing at the bed's checklist
"""

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from smartseed.database import get_db
from smartseed.schemas.nursery import (
    BatchCreate,
    BatchListResponse,
    BatchOut,
    BatchResponse,
    BedCreate,
    BedListItem,
    BedListResponse,
    BedOut,
    BedResponse,
    LocationCreate,
    LocationListResponse,
    LocationOut,
    LocationResponse,
)
from smartseed.services import nursery
from smartseed.utils.qr import svg_bytes, task_url

locations_router = APIRouter()
batches_router = APIRouter()
beds_router = APIRouter()


# ── Locations ────────────────────────────────────────────────

@locations_router.get("", response_model=LocationListResponse)
async def list_locations(db: AsyncSession = Depends(get_db)):
    locations = await nursery.list_locations(db)
    return LocationListResponse(locations=[LocationOut.model_validate(loc) for loc in locations])


@locations_router.post("", response_model=LocationResponse, status_code=status.HTTP_201_CREATED)
async def create_location(body: LocationCreate, db: AsyncSession = Depends(get_db)):
    location = await nursery.create_location(body, db)
    return LocationResponse(location=LocationOut.model_validate(location))


# ── Batches ──────────────────────────────────────────────────

@batches_router.get("", response_model=BatchListResponse)
async def list_batches(db: AsyncSession = Depends(get_db)):
    batches = await nursery.list_batches(db)
    return BatchListResponse(batches=[BatchOut.model_validate(b) for b in batches])


@batches_router.post("", response_model=BatchResponse, status_code=status.HTTP_201_CREATED)
async def create_batch(body: BatchCreate, db: AsyncSession = Depends(get_db)):
    batch = await nursery.create_batch(body, db)
    return BatchResponse(batch=BatchOut.model_validate(batch))


# ── Beds ─────────────────────────────────────────────────────

@beds_router.get("", response_model=BedListResponse)
async def list_beds(
    assigned_to: str | None = Query(None, alias="assignedTo"),
    qr_code: str | None = Query(None, alias="qrCode"),
    db: AsyncSession = Depends(get_db),
):
    rows = await nursery.list_beds(db, assigned_to=assigned_to, qr_code=qr_code)
    return BedListResponse(beds=[
        BedListItem(
            **BedOut.model_validate(bed).model_dump(),
            tasks_completed_today=done,
        )
        for bed, done in rows
    ])


@beds_router.post("", response_model=BedResponse, status_code=status.HTTP_201_CREATED)
async def create_bed(body: BedCreate, db: AsyncSession = Depends(get_db)):
    bed = await nursery.create_bed(body, db)
    return BedResponse(bed=BedOut.model_validate(bed))


@beds_router.get("/{bed_id}/qr")
async def bed_qr(bed_id: str, request: Request, db: AsyncSession = Depends(get_db)):
    """Printable SVG tag. Scanning it opens the bed's task checklist."""
    bed = await nursery.get_bed(bed_id, db)
    url = task_url(str(request.base_url), bed.qr_code)
    return Response(content=svg_bytes(url), media_type="image/svg+xml")
