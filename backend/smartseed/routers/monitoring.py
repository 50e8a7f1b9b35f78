"""Monitoring router: post-release site visits and SMS reminders.

Endpoints:
    GET    /api/monitoring/visits         List visits
    POST   /api/monitoring/visits         Schedule a visit (site created on first use)
    PATCH  /api/monitoring/visits/{id}    Record visit outcome (partial update)
    GET    /api/monitoring/sites          Geotagged sites only
    POST   /api/sms                       Log a simulated SMS
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from smartseed.database import get_db
from smartseed.schemas.monitoring import (
    SiteListResponse,
    SiteOut,
    SmsCreate,
    SmsOut,
    SmsResponse,
    VisitCreate,
    VisitListResponse,
    VisitOut,
    VisitResponse,
    VisitUpdate,
)
from smartseed.services import workflow

router = APIRouter()
sms_router = APIRouter()


@router.get("/visits", response_model=VisitListResponse)
async def list_visits(db: AsyncSession = Depends(get_db)):
    visits = await workflow.list_visits(db)
    return VisitListResponse(visits=[VisitOut.model_validate(v) for v in visits])


@router.post("/visits", response_model=VisitResponse, status_code=status.HTTP_201_CREATED)
async def schedule_visit(body: VisitCreate, db: AsyncSession = Depends(get_db)):
    visit = await workflow.schedule_visit(body, db)
    return VisitResponse(visit=VisitOut.model_validate(visit))


@router.patch("/visits/{visit_id}", response_model=VisitResponse)
async def record_visit(
    visit_id: str,
    body: VisitUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Merge only the fields present in the body.

    A successful planting with GPS geotags the site; ``blacklisted: true``
    adds the beneficiary to the blacklist.
    """
    visit = await workflow.record_visit(visit_id, body, db)
    return VisitResponse(visit=VisitOut.model_validate(visit))


@router.get("/sites", response_model=SiteListResponse)
async def list_sites(db: AsyncSession = Depends(get_db)):
    sites = await workflow.list_sites(db)
    return SiteListResponse(sites=[SiteOut.model_validate(s) for s in sites])


@sms_router.post("", response_model=SmsResponse)
async def send_sms(body: SmsCreate, db: AsyncSession = Depends(get_db)):
    sms = await workflow.send_sms(body, db)
    return SmsResponse(sms=SmsOut.model_validate(sms))
