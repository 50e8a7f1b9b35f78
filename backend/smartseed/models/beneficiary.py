"""Beneficiary: a person or group receiving seedlings.

A new row is written for every request submission; there is no
lookup of an existing beneficiary by name or contact details.
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from smartseed.database import Base


class Beneficiary(Base):
    __tablename__ = "beneficiaries"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str | None] = mapped_column(Text)
    contact_number: Mapped[str | None] = mapped_column(String(30))
    email: Mapped[str | None] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    requests = relationship("SeedlingRequest", back_populates="beneficiary")


class BlacklistEntry(Base):
    """One row per beneficiary; inserting twice is a no-op (ON CONFLICT DO NOTHING)."""

    __tablename__ = "blacklist"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    beneficiary_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("beneficiaries.id"), unique=True, nullable=False
    )
    reason: Mapped[str | None] = mapped_column(Text)
    active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
