"""Dashboard router.

Endpoints:
    GET    /api/dashboard/stats    Chart data + summary counts
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from smartseed.database import get_db
from smartseed.schemas.dashboard import DashboardStats
from smartseed.services.dashboard import get_dashboard_stats

router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
async def dashboard_stats(db: AsyncSession = Depends(get_db)):
    stats = await get_dashboard_stats(db)
    return DashboardStats(**stats)
