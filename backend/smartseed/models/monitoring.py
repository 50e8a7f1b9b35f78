"""Post-release monitoring: one site per request, many visits per site.

The site is created lazily when the first visit is scheduled. Its GPS
coordinates stay empty until a visit reports a successful planting.
"""

import uuid
from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from smartseed.database import Base

RESULT_PLANTED = "planted_successful"
RESULT_NOT_PLANTED = "not_planted"


class MonitoringSite(Base):
    __tablename__ = "monitoring_sites"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    request_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("seedling_requests.id"), unique=True, nullable=False
    )
    gps_latitude: Mapped[float | None] = mapped_column(Float)
    gps_longitude: Mapped[float | None] = mapped_column(Float)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    request = relationship("SeedlingRequest", back_populates="site")
    visits = relationship("MonitoringVisit", back_populates="site")


class MonitoringVisit(Base):
    __tablename__ = "monitoring_visits"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    site_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("monitoring_sites.id"), nullable=False, index=True
    )
    scheduled_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    # ── Beneficiary contact ──────────────────────────────────
    # SMS reminders sent so far
    attempted_messages: Mapped[int] = mapped_column(Integer, default=0)
    beneficiary_confirmed: Mapped[bool] = mapped_column(Boolean, default=False)

    # ── Outcome (set when the visit is recorded) ─────────────
    visit_date: Mapped[date | None] = mapped_column(Date)
    # planted_successful | not_planted | ...
    result: Mapped[str | None] = mapped_column(String(50))
    notes: Mapped[str | None] = mapped_column(Text)
    blacklisted: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    site = relationship("MonitoringSite", back_populates="visits")


class SmsMessage(Base):
    """Outgoing SMS log. Sending is simulated; every row is stored as 'sent'."""

    __tablename__ = "sms_messages"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    to_number: Mapped[str] = mapped_column(String(30), nullable=False)
    message_text: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="sent")
    attempt: Mapped[int] = mapped_column(Integer, default=1)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
