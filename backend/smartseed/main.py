import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from smartseed.config import settings
from smartseed.database import Base, engine
import smartseed.models  # noqa: F401  (registers every table on Base)
from smartseed.middleware.exceptions import register_exception_handlers
from smartseed.routers import auth, dashboard, health, monitoring, nursery, qr, releases, seedling_requests, tasks

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("smartseed")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Optionally create missing tables on startup; dispose the pool on shutdown."""
    if settings.auto_create_tables:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")
    logger.info("SmartSeed started (%s)", settings.environment)
    try:
        yield
    finally:
        await engine.dispose()
        logger.info("SmartSeed stopped")


app = FastAPI(
    title="SmartSeed",
    description="Seedling nursery: request review, bed tasks and monitoring",
    version="0.1.0",
    lifespan=lifespan,
)

# ── Exception Handlers ───────────────────────────────────────
register_exception_handlers(app)

# ── Middleware ───────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ──────────────────────────────────────────────────
app.include_router(health.router)
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(auth.users_router, prefix="/api/users", tags=["users"])

# Request workflow
app.include_router(seedling_requests.router, prefix="/api/seedling-requests", tags=["seedling-requests"])
app.include_router(releases.router, prefix="/api/releases", tags=["releases"])
app.include_router(monitoring.router, prefix="/api/monitoring", tags=["monitoring"])
app.include_router(monitoring.sms_router, prefix="/api/sms", tags=["sms"])

# Nursery
app.include_router(nursery.locations_router, prefix="/api/locations", tags=["locations"])
app.include_router(nursery.batches_router, prefix="/api/batches", tags=["batches"])
app.include_router(nursery.beds_router, prefix="/api/beds", tags=["beds"])
app.include_router(tasks.router, prefix="/api/tasks", tags=["tasks"])
app.include_router(qr.router, prefix="/api/qr", tags=["qr"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["dashboard"])
