"""Chart-ready shapes returned by GET /dashboard/stats."""

from pydantic import BaseModel


class GrowthPoint(BaseModel):
    date: str        # "Jun 1"
    plants: int      # cumulative wildlings received


class SpeciesSlice(BaseModel):
    name: str
    value: int
    color: str


class BedCapacity(BaseModel):
    bed: str
    current: int
    capacity: int
    percentage: float


class TaskDay(BaseModel):
    day: str         # "Mon"
    completed: int
    pending: int


class DashboardSummary(BaseModel):
    total_batches: int
    total_plants: int
    plants_in_beds: int
    active_workers: int


class DashboardStats(BaseModel):
    success: bool = True
    growth: list[GrowthPoint]
    species: list[SpeciesSlice]
    capacity: list[BedCapacity]
    tasks: list[TaskDay]
    summary: DashboardSummary
