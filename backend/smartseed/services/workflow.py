"""Seedling request workflow.

    submit → review (approve | reject) → release(s) → monitoring visit(s)
                                                      └→ blacklist

Every function runs inside the caller's session, so a request's writes
(beneficiary + request + species, or visit + site + blacklist) commit
or roll back together with the HTTP request (see ``database.get_db``).

Deliberately unrestricted, matching current field practice:
  - a decided request can be reviewed again; the new decision wins
  - releases are not capped at the requested total
  - the blacklist follows the ``blacklisted`` flag alone, whatever ``result`` says
"""

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from smartseed.config import settings
from smartseed.middleware.exceptions import NotFoundError, PreconditionError, ValidationError
from smartseed.models.beneficiary import Beneficiary, BlacklistEntry
from smartseed.models.monitoring import MonitoringSite, MonitoringVisit, RESULT_PLANTED, SmsMessage
from smartseed.models.seedling_request import (
    REQUEST_APPROVED,
    REQUEST_PENDING,
    REQUEST_REJECTED,
    Release,
    RequestSpecies,
    SeedlingRequest,
)
from smartseed.schemas.monitoring import SmsCreate, VisitCreate, VisitUpdate
from smartseed.schemas.seedling_request import ReleaseCreate, ReviewRequest, SeedlingRequestCreate
from smartseed.utils.db_compat import dialect_insert
from smartseed.utils.numbering import add_with_code

logger = logging.getLogger("smartseed.workflow")

# Columns a visit PATCH may write. Anything else in the body is ignored.
VISIT_UPDATABLE_FIELDS = frozenset({
    "attempted_messages",
    "beneficiary_confirmed",
    "visit_date",
    "result",
    "notes",
    "blacklisted",
})


def _request_query():
    return select(SeedlingRequest).options(
        selectinload(SeedlingRequest.beneficiary),
        selectinload(SeedlingRequest.species),
    )


def _visit_query():
    return select(MonitoringVisit).options(
        selectinload(MonitoringVisit.site)
        .selectinload(MonitoringSite.request)
        .selectinload(SeedlingRequest.beneficiary)
    )


# ── Requests ─────────────────────────────────────────────────

async def submit_request(body: SeedlingRequestCreate, db: AsyncSession) -> SeedlingRequest:
    """Create beneficiary, pending request and its species rows.

    A new Beneficiary row is written on every submission.
    """
    beneficiary = Beneficiary(
        full_name=body.beneficiary.full_name,
        address=body.beneficiary.address,
        contact_number=body.beneficiary.contact_number,
        email=body.beneficiary.email,
    )
    db.add(beneficiary)
    await db.flush()

    species = body.species or []
    request = SeedlingRequest(
        beneficiary_id=beneficiary.id,
        planting_site_address=body.planting_site_address,
        hectarage=body.hectarage,
        total_quantity=sum(sp.quantity for sp in species),
        status=REQUEST_PENDING,
        submitted_by=body.submitted_by,
        species=[
            RequestSpecies(species_name=sp.species_name, quantity=sp.quantity)
            for sp in species
        ],
    )
    await add_with_code(db, request, "request")
    request.beneficiary = beneficiary

    logger.info(
        "Submitted %s for %s (%d seedlings, %d species)",
        request.request_code, beneficiary.full_name,
        request.total_quantity, len(species),
    )
    return request


async def list_requests(db: AsyncSession) -> list[SeedlingRequest]:
    result = await db.execute(
        _request_query().order_by(SeedlingRequest.date_submitted.desc())
    )
    return list(result.scalars().all())


async def get_request(request_id: str, db: AsyncSession) -> SeedlingRequest:
    result = await db.execute(
        _request_query().where(SeedlingRequest.id == request_id)
    )
    request = result.scalar_one_or_none()
    if not request:
        raise NotFoundError("Request", request_id)
    return request


async def review_request(
    request_id: str,
    body: ReviewRequest,
    db: AsyncSession,
) -> SeedlingRequest:
    """Approve or reject a request.

    Approving also sets ``scheduled_release_date`` (cleared when omitted);
    rejecting leaves it untouched.
    """
    request = await get_request(request_id, db)

    if request.status != REQUEST_PENDING:
        logger.warning(
            "Request %s re-reviewed: %s overwritten by %s",
            request.request_code, request.status, body.action,
        )

    if body.action == "approve":
        request.status = REQUEST_APPROVED
        request.review_notes = body.review_notes
        request.scheduled_release_date = body.scheduled_release_date
    else:
        request.status = REQUEST_REJECTED
        request.review_notes = body.review_notes

    await db.flush()
    logger.info("Request %s %s", request.request_code, request.status)
    return request


# ── Releases ─────────────────────────────────────────────────

async def create_release(body: ReleaseCreate, db: AsyncSession) -> Release:
    """Record a release for an approved request.

    Raises:
        NotFoundError if the request does not exist.
        PreconditionError if its status is not exactly 'approved'.
    """
    request = (
        await db.execute(
            select(SeedlingRequest)
            .where(SeedlingRequest.id == body.request_id)
            .options(selectinload(SeedlingRequest.beneficiary))
        )
    ).scalar_one_or_none()
    if not request:
        raise NotFoundError("Request", body.request_id)
    if request.status != REQUEST_APPROVED:
        raise PreconditionError("Request must be approved before releasing")

    release = Release(
        request=request,
        released_by=body.released_by,
        quantity_released=body.quantity_released,
        notes=body.notes,
        release_date=body.release_date or datetime.utcnow(),
    )
    db.add(release)
    await db.flush()

    logger.info(
        "Released %d seedlings for %s", release.quantity_released, request.request_code,
    )
    return release


async def list_releases(db: AsyncSession) -> list[Release]:
    result = await db.execute(
        select(Release)
        .options(
            selectinload(Release.request).selectinload(SeedlingRequest.beneficiary),
            selectinload(Release.releaser),
        )
        .order_by(Release.release_date.desc())
    )
    return list(result.scalars().all())


# ── Monitoring ───────────────────────────────────────────────

async def _get_or_create_site(request: SeedlingRequest, db: AsyncSession) -> MonitoringSite:
    site = (
        await db.execute(
            select(MonitoringSite).where(MonitoringSite.request_id == request.id)
        )
    ).scalar_one_or_none()
    if site:
        return site

    site = MonitoringSite(request_id=request.id)
    db.add(site)
    await db.flush()
    logger.info("Created monitoring site for %s", request.request_code)
    return site


async def schedule_visit(body: VisitCreate, db: AsyncSession) -> MonitoringVisit:
    """Schedule a visit, creating the request's monitoring site on first use."""
    request = (
        await db.execute(
            select(SeedlingRequest).where(SeedlingRequest.id == body.request_id)
        )
    ).scalar_one_or_none()
    if not request:
        raise NotFoundError("Request", body.request_id)

    site = await _get_or_create_site(request, db)

    visit = MonitoringVisit(
        site_id=site.id,
        scheduled_date=body.scheduled_date,
        attempted_messages=0,
        beneficiary_confirmed=False,
        blacklisted=False,
    )
    db.add(visit)
    await db.flush()

    logger.info("Scheduled visit for %s on %s", request.request_code, body.scheduled_date)
    return await get_visit(visit.id, db)


async def get_visit(visit_id: str, db: AsyncSession) -> MonitoringVisit:
    visit = (
        await db.execute(
            _visit_query()
            .where(MonitoringVisit.id == visit_id)
            .execution_options(populate_existing=True)
        )
    ).scalar_one_or_none()
    if not visit:
        raise NotFoundError("Visit", visit_id)
    return visit


async def list_visits(db: AsyncSession) -> list[MonitoringVisit]:
    result = await db.execute(
        _visit_query().order_by(
            MonitoringVisit.scheduled_date.desc(),
            MonitoringVisit.created_at.desc(),
        )
    )
    return list(result.scalars().all())


async def record_visit(
    visit_id: str,
    body: VisitUpdate,
    db: AsyncSession,
) -> MonitoringVisit:
    """Merge the provided fields into the visit, then apply side effects.

    - ``result == planted_successful`` with both GPS values → site coordinates
    - ``blacklisted`` truthy → blacklist the site's beneficiary (no-op if already listed)

    Raises:
        ValidationError if none of the updatable fields is present.
        NotFoundError if the visit does not exist.
    """
    provided = body.model_dump(exclude_unset=True)
    updates = {k: v for k, v in provided.items() if k in VISIT_UPDATABLE_FIELDS}
    if not updates:
        raise ValidationError("No updates provided")

    visit = await get_visit(visit_id, db)
    for field, value in updates.items():
        setattr(visit, field, value)

    site = visit.site
    if (
        body.result == RESULT_PLANTED
        and body.gps_latitude is not None
        and body.gps_longitude is not None
    ):
        site.gps_latitude = body.gps_latitude
        site.gps_longitude = body.gps_longitude
        logger.info("Geotagged site %s", site.id)

    if body.blacklisted:
        await _blacklist_beneficiary(site.request.beneficiary_id, body.notes, db)

    await db.flush()
    logger.info("Recorded visit %s: %s", visit.id, ", ".join(sorted(updates)))
    return visit


async def _blacklist_beneficiary(
    beneficiary_id: str | None,
    notes: str | None,
    db: AsyncSession,
) -> None:
    if not beneficiary_id:
        return
    stmt = (
        dialect_insert(db, BlacklistEntry)
        .values(
            beneficiary_id=beneficiary_id,
            reason=notes or settings.default_blacklist_reason,
            active=True,
        )
        .on_conflict_do_nothing(index_elements=["beneficiary_id"])
    )
    await db.execute(stmt)
    logger.info("Blacklisted beneficiary %s", beneficiary_id)


async def list_sites(db: AsyncSession) -> list[MonitoringSite]:
    """Geotagged sites only."""
    result = await db.execute(
        select(MonitoringSite)
        .where(
            MonitoringSite.gps_latitude.is_not(None),
            MonitoringSite.gps_longitude.is_not(None),
        )
        .options(
            selectinload(MonitoringSite.request).selectinload(SeedlingRequest.beneficiary)
        )
        .order_by(MonitoringSite.created_at.desc())
    )
    return list(result.scalars().all())


# ── SMS ──────────────────────────────────────────────────────

async def send_sms(body: SmsCreate, db: AsyncSession) -> SmsMessage:
    """Log an outgoing reminder. No carrier is contacted; status is always 'sent'."""
    sms = SmsMessage(
        to_number=body.to_number,
        message_text=body.message_text,
        status="sent",
        attempt=body.attempt or 1,
    )
    db.add(sms)
    await db.flush()
    logger.info("SMS to %s logged (attempt %d)", sms.to_number, sms.attempt)
    return sms
