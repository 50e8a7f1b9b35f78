"""All ORM models; importing this package registers every table on Base.metadata."""

# ── People ───────────────────────────────────────────────────
from smartseed.models.user import User, UserRole
from smartseed.models.beneficiary import Beneficiary, BlacklistEntry

# ── Request workflow ─────────────────────────────────────────
from smartseed.models.seedling_request import SeedlingRequest, RequestSpecies, Release
from smartseed.models.monitoring import MonitoringSite, MonitoringVisit, SmsMessage

# ── Nursery inventory ────────────────────────────────────────
from smartseed.models.nursery import Location, Batch, Bed, BatchBedAssignment
from smartseed.models.task import BedTask, DailyTaskCompletion

__all__ = [
    "User", "UserRole", "Beneficiary", "BlacklistEntry",
    "SeedlingRequest", "RequestSpecies", "Release",
    "MonitoringSite", "MonitoringVisit", "SmsMessage",
    "Location", "Batch", "Bed", "BatchBedAssignment",
    "BedTask", "DailyTaskCompletion",
]
