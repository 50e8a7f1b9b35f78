"""SeedlingRequest: a beneficiary's application for seedlings.

Lifecycle:  pending → approved | rejected

The review handler may be called again on a decided request and simply
overwrites the status. ``total_quantity`` is the sum of the species
quantities at submission time and is never recomputed.
"""

import uuid
from datetime import date, datetime

from sqlalchemy import Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from smartseed.database import Base

REQUEST_PENDING = "pending"
REQUEST_APPROVED = "approved"
REQUEST_REJECTED = "rejected"


class SeedlingRequest(Base):
    __tablename__ = "seedling_requests"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    # REQ-YYYYMMDD-NNN
    request_code: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False, index=True
    )
    beneficiary_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("beneficiaries.id"), nullable=False, index=True
    )

    # ── Planting site ────────────────────────────────────────
    planting_site_address: Mapped[str] = mapped_column(Text, nullable=False)
    hectarage: Mapped[float] = mapped_column(Float, nullable=False)
    total_quantity: Mapped[int] = mapped_column(Integer, default=0)

    # ── Review ───────────────────────────────────────────────
    # pending | approved | rejected
    status: Mapped[str] = mapped_column(String(20), default=REQUEST_PENDING, index=True)
    scheduled_release_date: Mapped[date | None] = mapped_column(Date)
    review_notes: Mapped[str | None] = mapped_column(Text)

    submitted_by: Mapped[str | None] = mapped_column(String(255))
    date_submitted: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    beneficiary = relationship("Beneficiary", back_populates="requests")
    species = relationship(
        "RequestSpecies", back_populates="request",
        cascade="all, delete-orphan",
    )
    releases = relationship("Release", back_populates="request")
    site = relationship("MonitoringSite", back_populates="request", uselist=False)


class RequestSpecies(Base):
    __tablename__ = "request_species"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    request_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("seedling_requests.id"), nullable=False, index=True
    )
    species_name: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)

    request = relationship("SeedlingRequest", back_populates="species")


class Release(Base):
    """Append-only record of seedlings handed over for an approved request.

    Nothing caps the released quantity against ``total_quantity``; a
    request may receive any number of releases.
    """

    __tablename__ = "releases"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    request_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("seedling_requests.id"), nullable=False, index=True
    )
    released_by: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("users.id")
    )
    quantity_released: Mapped[int] = mapped_column(Integer, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)
    release_date: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    request = relationship("SeedlingRequest", back_populates="releases")
    releaser = relationship("User")
