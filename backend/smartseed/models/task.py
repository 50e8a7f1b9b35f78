"""Daily bed-care tasks.

BedTask is a fixed catalog; rows flagged ``is_default`` apply to every
bed. DailyTaskCompletion holds at most one row per (bed, task, day),
enforced by ``uq_task_completion_per_day``: completing again the same
day updates the row, un-completing deletes it.
"""

import uuid
from datetime import date, datetime

from sqlalchemy import (
    Boolean, Date, DateTime, Float, ForeignKey, Integer, String, Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from smartseed.database import Base


class BedTask(Base):
    __tablename__ = "bed_tasks"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    task_name: Mapped[str] = mapped_column(String(255), nullable=False)
    task_description: Mapped[str | None] = mapped_column(Text)
    is_default: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    display_order: Mapped[int] = mapped_column(Integer, default=0)


class DailyTaskCompletion(Base):
    __tablename__ = "daily_task_completions"
    __table_args__ = (
        UniqueConstraint(
            "bed_id", "task_id", "completion_date",
            name="uq_task_completion_per_day",
        ),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    bed_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("beds.id"), nullable=False, index=True
    )
    task_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("bed_tasks.id"), nullable=False
    )
    completed_by: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False
    )
    completion_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    completion_time: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # ── Evidence ─────────────────────────────────────────────
    photo_url: Mapped[str | None] = mapped_column(Text)
    notes: Mapped[str | None] = mapped_column(Text)
    gps_latitude: Mapped[float | None] = mapped_column(Float)
    gps_longitude: Mapped[float | None] = mapped_column(Float)

    task = relationship("BedTask")
