"""Pydantic schemas for locations, batches and beds."""

from datetime import datetime

from pydantic import BaseModel, Field, model_validator


# ── Locations ────────────────────────────────────────────────

class LocationCreate(BaseModel):
    location_name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None


class LocationOut(BaseModel):
    id: str
    location_name: str
    description: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class LocationResponse(BaseModel):
    success: bool = True
    location: LocationOut
    message: str = "Location created successfully"


class LocationListResponse(BaseModel):
    success: bool = True
    locations: list[LocationOut]


# ── Batches ──────────────────────────────────────────────────

class BatchCreate(BaseModel):
    source_location: str = Field(..., min_length=1, max_length=255)
    wildlings_count: int = Field(..., gt=0)
    notes: str | None = None
    person_in_charge: str | None = None
    photo_url: str | None = None


class BatchOut(BaseModel):
    id: str
    batch_code: str
    source_location: str
    wildlings_count: int
    date_received: datetime
    status: str
    notes: str | None
    person_in_charge: str | None
    photo_url: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class BatchResponse(BaseModel):
    success: bool = True
    batch: BatchOut
    message: str = "Batch created successfully"


class BatchListResponse(BaseModel):
    success: bool = True
    batches: list[BatchOut]


# ── Beds ─────────────────────────────────────────────────────

class BedCreate(BaseModel):
    bed_name: str = Field(..., min_length=1, max_length=100)
    location_id: str = Field(..., min_length=1)
    # Fruit Tree | Forestry | Ornamental (checked in the service)
    species_category: str = Field(..., min_length=1)
    in_charge: str | None = None
    capacity: int | None = Field(None, ge=0)
    notes: str | None = None
    # Generated when omitted
    qr_code: str | None = Field(None, max_length=100)


class BedOut(BaseModel):
    id: str
    bed_name: str
    location_id: str
    location_name: str | None = None
    species_category: str
    qr_code: str
    in_charge: str | None
    person_in_charge_name: str | None = None
    capacity: int | None
    current_occupancy: int
    occupancy_percentage: float | None = None
    notes: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @model_validator(mode="before")
    @classmethod
    def _extract_relations(cls, data):
        if not hasattr(data, "__dict__"):
            return data
        location = data.__dict__.get("location")
        if location is not None:
            data.__dict__["location_name"] = location.location_name
        person = data.__dict__.get("person_in_charge")
        if person is not None:
            data.__dict__["person_in_charge_name"] = person.name
        if getattr(data, "capacity", None):
            data.__dict__["occupancy_percentage"] = round(
                (data.current_occupancy or 0) / data.capacity * 100, 2
            )
        return data


class BedListItem(BedOut):
    tasks_completed_today: bool = False


class BedResponse(BaseModel):
    success: bool = True
    bed: BedOut
    message: str = "Bed created successfully"


class BedListResponse(BaseModel):
    success: bool = True
    beds: list[BedListItem]


# ── QR tags ──────────────────────────────────────────────────
# camelCase to match the bed-tag printing page

class QRGenerateRequest(BaseModel):
    qrCode: str = Field(..., min_length=1)
    bedName: str | None = None


class QRGenerateResponse(BaseModel):
    success: bool = True
    qrCodeImage: str
    targetUrl: str
    qrCode: str
