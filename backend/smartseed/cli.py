"""Management CLI.

Usage:
    python -m smartseed.cli init-db                                 # Create all tables
    python -m smartseed.cli seed-tasks                              # Insert the default bed tasks
    python -m smartseed.cli create-user <email> <name> <role> <pw>  # Add a user
    python -m smartseed.cli list-users                              # Show all users
    python -m smartseed.cli check-data                              # Row counts per table

Uses the sync DSN (``DATABASE_URL_SYNC``), like Alembic.
"""

import sys

from sqlalchemy import create_engine, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from smartseed.auth.password import hash_password
from smartseed.config import settings
from smartseed.database import Base
from smartseed.models import (
    Batch, BatchBedAssignment, Bed, BedTask, Beneficiary, DailyTaskCompletion,
    Location, MonitoringVisit, Release, SeedlingRequest, User, UserRole,
)

DEFAULT_TASKS = [
    ("Check Soil Moisture", "Test soil moisture by hand and note dry patches"),
    ("Inspect for Pests", "Look for insects, leaf damage or disease on seedlings"),
    ("Water Plants", "Water the bed evenly, avoiding waterlogging"),
    ("Check Temperature", "Check shade netting and temperature around the bed"),
    ("Record Observations", "Note growth, losses and anything unusual"),
]

COUNTED_TABLES = [
    ("Users", User),
    ("Beneficiaries", Beneficiary),
    ("Seedling requests", SeedlingRequest),
    ("Releases", Release),
    ("Monitoring visits", MonitoringVisit),
    ("Locations", Location),
    ("Batches", Batch),
    ("Beds", Bed),
    ("Assignments", BatchBedAssignment),
    ("Bed tasks", BedTask),
    ("Task completions", DailyTaskCompletion),
]


def get_engine() -> Engine:
    return create_engine(settings.database_url_sync)


def init_db(engine: Engine) -> None:
    Base.metadata.create_all(engine)
    print(f"Created {len(Base.metadata.tables)} tables.")


def seed_tasks(engine: Engine) -> int:
    """Insert the default task catalog if it is empty. Returns rows added."""
    with Session(engine) as session:
        if session.scalar(select(func.count(BedTask.id))):
            print("Task catalog already populated.")
            return 0
        for order, (name, description) in enumerate(DEFAULT_TASKS, start=1):
            session.add(BedTask(
                task_name=name,
                task_description=description,
                is_default=True,
                display_order=order,
            ))
        session.commit()
    print(f"Seeded {len(DEFAULT_TASKS)} default tasks.")
    return len(DEFAULT_TASKS)


def create_user(engine: Engine, email: str, name: str, role: str, password: str) -> User:
    try:
        user_role = UserRole(role)
    except ValueError:
        raise SystemExit(
            f"Unknown role '{role}'. Choose from: {', '.join(r.value for r in UserRole)}"
        )

    with Session(engine, expire_on_commit=False) as session:
        if session.scalar(select(User.id).where(User.email == email)):
            raise SystemExit(f"User {email} already exists.")
        user = User(
            email=email,
            name=name,
            role=user_role,
            password_hash=hash_password(password),
            is_active=True,
        )
        session.add(user)
        session.commit()
    print(f"Created {user_role.value} {email}")
    return user


def list_users(engine: Engine) -> None:
    with Session(engine) as session:
        users = session.scalars(select(User).order_by(User.name)).all()
        for u in users:
            state = "" if u.is_active else "  (disabled)"
            print(f"  {u.name:<30} {u.email:<35} {u.role.value}{state}")
    print(f"\n{len(users)} user(s)")


def check_data(engine: Engine) -> dict[str, int]:
    counts = {}
    with Session(engine) as session:
        for label, model in COUNTED_TABLES:
            counts[label] = session.scalar(select(func.count(model.id))) or 0
    for label, count in counts.items():
        print(f"  {label:<20} {count}")
    return counts


def main(argv: list[str]) -> None:
    cmd = argv[1] if len(argv) > 1 else ""
    if cmd == "init-db":
        init_db(get_engine())
    elif cmd == "seed-tasks":
        seed_tasks(get_engine())
    elif cmd == "create-user" and len(argv) == 6:
        create_user(get_engine(), *argv[2:6])
    elif cmd == "list-users":
        list_users(get_engine())
    elif cmd == "check-data":
        check_data(get_engine())
    else:
        print(
            "Usage: python -m smartseed.cli "
            "[init-db|seed-tasks|create-user <email> <name> <role> <password>|list-users|check-data]"
        )


if __name__ == "__main__":
    main(sys.argv)
