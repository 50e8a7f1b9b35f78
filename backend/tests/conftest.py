"""Pytest configuration and fixtures for SmartSeed tests.

Every test gets its own in-memory SQLite database. The app's ``get_db``
is overridden with a session per request that commits or rolls back
exactly like the real dependency, so multi-step writes are exercised
with their production transaction boundaries.
"""

import os

# Must be set before smartseed.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from datetime import datetime
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from smartseed.auth.password import hash_password
from smartseed.database import Base, get_db
from smartseed.main import app
from smartseed.models import (
    Batch, BatchBedAssignment, Bed, BedTask, Location, User, UserRole,
)


def pytest_configure(config):
    config.addinivalue_line("markers", "api: HTTP endpoint tests")
    config.addinivalue_line("markers", "unit: service / helper tests without HTTP")


# ── Test Database Setup ──────────────────────────────────────────

@pytest_asyncio.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging data and asserting on it."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with ``get_db`` bound to the test database."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ── Test Data Fixtures ───────────────────────────────────────────

@pytest_asyncio.fixture
async def field_worker(db_session: AsyncSession) -> User:
    user = User(
        email="juan@smartseed.ph",
        name="Juan Dela Cruz",
        password_hash=hash_password("seedling123"),
        role=UserRole.FIELD_WORKER,
        is_active=True,
    )
    db_session.add(user)
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> User:
    user = User(
        email="admin@smartseed.ph",
        name="Ana Admin",
        password_hash=hash_password("admin123"),
        role=UserRole.ADMIN,
        is_active=True,
    )
    db_session.add(user)
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def default_tasks(db_session: AsyncSession) -> list[BedTask]:
    tasks = [
        BedTask(task_name="Water Plants", task_description="Water evenly", is_default=True, display_order=1),
        BedTask(task_name="Inspect for Pests", task_description="Check leaves", is_default=True, display_order=2),
        BedTask(task_name="Record Observations", task_description=None, is_default=True, display_order=3),
    ]
    db_session.add_all(tasks)
    await db_session.commit()
    return tasks


@pytest_asyncio.fixture
async def location(db_session: AsyncSession) -> Location:
    loc = Location(location_name="Greenhouse A", description="Main nursery")
    db_session.add(loc)
    await db_session.commit()
    return loc


@pytest_asyncio.fixture
async def bed(db_session: AsyncSession, location: Location, field_worker: User) -> Bed:
    b = Bed(
        bed_name="A1",
        location_id=location.id,
        species_category="Forestry",
        qr_code="BED-A1-QR2024",
        in_charge=field_worker.id,
        capacity=200,
        current_occupancy=150,
    )
    db_session.add(b)
    await db_session.commit()
    return b


@pytest_asyncio.fixture
async def batch(db_session: AsyncSession) -> Batch:
    b = Batch(
        batch_code="BATCH-20240601-001",
        source_location="Mt. Makiling",
        wildlings_count=300,
        date_received=datetime.utcnow(),
        status="received",
    )
    db_session.add(b)
    await db_session.commit()
    return b


@pytest_asyncio.fixture
async def assignment(db_session: AsyncSession, batch: Batch, bed: Bed) -> BatchBedAssignment:
    a = BatchBedAssignment(batch_id=batch.id, bed_id=bed.id, quantity_assigned=150)
    db_session.add(a)
    await db_session.commit()
    return a


# ── Request helpers ──────────────────────────────────────────────

REQUEST_PAYLOAD = {
    "beneficiary": {
        "full_name": "Maria Santos",
        "address": "Brgy. San Isidro, Laguna",
        "contact_number": "09171234567",
        "email": "maria@example.com",
    },
    "planting_site_address": "Lot 4, Brgy. San Isidro",
    "hectarage": 1.5,
    "species": [
        {"species_name": "Narra", "quantity": 100},
        {"species_name": "Mahogany", "quantity": 50},
    ],
}


@pytest.fixture
def request_payload() -> dict:
    return {
        **REQUEST_PAYLOAD,
        "beneficiary": dict(REQUEST_PAYLOAD["beneficiary"]),
        "species": [dict(s) for s in REQUEST_PAYLOAD["species"]],
    }


@pytest_asyncio.fixture
async def pending_request(client: AsyncClient, request_payload: dict) -> dict:
    response = await client.post("/api/seedling-requests", json=request_payload)
    assert response.status_code == 201
    return response.json()["request"]


@pytest_asyncio.fixture
async def approved_request(client: AsyncClient, pending_request: dict) -> dict:
    response = await client.patch(
        f"/api/seedling-requests/{pending_request['id']}",
        json={"action": "approve", "scheduled_release_date": "2024-06-01"},
    )
    assert response.status_code == 200
    return response.json()["request"]
