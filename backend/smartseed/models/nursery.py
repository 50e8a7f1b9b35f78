"""Nursery inventory: locations, wildling batches, beds and assignments.

A Batch is one intake of wildlings collected from the field. Plants from
a batch are placed into one or more Beds (BatchBedAssignment). Bed
occupancy is maintained by nursery staff; the task tracker only reads it.
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    DateTime, ForeignKey, Integer, String, Text, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from smartseed.database import Base

SPECIES_CATEGORIES = ("Fruit Tree", "Forestry", "Ornamental")


class Location(Base):
    __tablename__ = "locations"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    location_name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    beds = relationship("Bed", back_populates="location")


class Batch(Base):
    __tablename__ = "batches"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    # BATCH-YYYYMMDD-NNN
    batch_code: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False, index=True
    )
    source_location: Mapped[str] = mapped_column(String(255), nullable=False)
    wildlings_count: Mapped[int] = mapped_column(Integer, nullable=False)
    date_received: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, index=True
    )
    # received | potted | ready | distributed
    status: Mapped[str] = mapped_column(String(30), default="received")
    notes: Mapped[str | None] = mapped_column(Text)
    person_in_charge: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("users.id")
    )
    photo_url: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    assignments = relationship("BatchBedAssignment", back_populates="batch")


class Bed(Base):
    __tablename__ = "beds"
    __table_args__ = (
        UniqueConstraint("location_id", "bed_name", name="uq_beds_location_name"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    bed_name: Mapped[str] = mapped_column(String(100), nullable=False)
    location_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("locations.id"), nullable=False, index=True
    )
    # Fruit Tree | Forestry | Ornamental
    species_category: Mapped[str] = mapped_column(String(50), nullable=False)
    # Printed on the bed's tag; scanned by field workers
    qr_code: Mapped[str] = mapped_column(
        String(100), unique=True, nullable=False, index=True
    )
    in_charge: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("users.id"), index=True
    )
    capacity: Mapped[int | None] = mapped_column(Integer)
    current_occupancy: Mapped[int] = mapped_column(Integer, default=0)
    notes: Mapped[str | None] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    location = relationship("Location", back_populates="beds")
    person_in_charge = relationship("User")
    assignments = relationship("BatchBedAssignment", back_populates="bed")


class BatchBedAssignment(Base):
    __tablename__ = "batch_bed_assignments"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    batch_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("batches.id"), nullable=False, index=True
    )
    bed_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("beds.id"), nullable=False, index=True
    )
    quantity_assigned: Mapped[int] = mapped_column(Integer, default=0)
    assigned_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    batch = relationship("Batch", back_populates="assignments")
    bed = relationship("Bed", back_populates="assignments")
