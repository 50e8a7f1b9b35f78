"""Seedling request router: intake and review.

Endpoints:
    GET    /api/seedling-requests         List requests (newest first) with species
    POST   /api/seedling-requests         Submit a request (creates the beneficiary)
    GET    /api/seedling-requests/{id}    Single request
    PATCH  /api/seedling-requests/{id}    Approve or reject
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from smartseed.database import get_db
from smartseed.schemas.seedling_request import (
    ReviewRequest,
    SeedlingRequestCreate,
    SeedlingRequestListResponse,
    SeedlingRequestOut,
    SeedlingRequestResponse,
)
from smartseed.services import workflow

router = APIRouter()


@router.get("", response_model=SeedlingRequestListResponse)
async def list_requests(db: AsyncSession = Depends(get_db)):
    requests = await workflow.list_requests(db)
    return SeedlingRequestListResponse(
        requests=[SeedlingRequestOut.model_validate(r) for r in requests],
    )


@router.post("", response_model=SeedlingRequestResponse, status_code=status.HTTP_201_CREATED)
async def submit_request(
    body: SeedlingRequestCreate,
    db: AsyncSession = Depends(get_db),
):
    """Submit a new request. ``total_quantity`` is the sum of the species quantities."""
    request = await workflow.submit_request(body, db)
    return SeedlingRequestResponse(request=SeedlingRequestOut.model_validate(request))


@router.get("/{request_id}", response_model=SeedlingRequestResponse)
async def get_request(request_id: str, db: AsyncSession = Depends(get_db)):
    request = await workflow.get_request(request_id, db)
    return SeedlingRequestResponse(request=SeedlingRequestOut.model_validate(request))


@router.patch("/{request_id}", response_model=SeedlingRequestResponse)
async def review_request(
    request_id: str,
    body: ReviewRequest,
    db: AsyncSession = Depends(get_db),
):
    request = await workflow.review_request(request_id, body, db)
    return SeedlingRequestResponse(request=SeedlingRequestOut.model_validate(request))
