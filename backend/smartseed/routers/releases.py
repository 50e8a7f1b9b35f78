"""Release router: distribution of approved requests.

Endpoints:
    GET    /api/releases     List releases (newest first)
    POST   /api/releases     Record a release (request must be approved)
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from smartseed.database import get_db
from smartseed.schemas.seedling_request import (
    ReleaseCreate,
    ReleaseListResponse,
    ReleaseOut,
    ReleaseResponse,
)
from smartseed.services import workflow

router = APIRouter()


@router.get("", response_model=ReleaseListResponse)
async def list_releases(db: AsyncSession = Depends(get_db)):
    releases = await workflow.list_releases(db)
    return ReleaseListResponse(releases=[ReleaseOut.model_validate(r) for r in releases])


@router.post("", response_model=ReleaseResponse, status_code=status.HTTP_201_CREATED)
async def create_release(body: ReleaseCreate, db: AsyncSession = Depends(get_db)):
    release = await workflow.create_release(body, db)
    return ReleaseResponse(release=ReleaseOut.model_validate(release))
