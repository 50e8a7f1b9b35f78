"""Pydantic schemas for the seedling request workflow (requests and releases)."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field, model_validator


# ── Submission ───────────────────────────────────────────────

class BeneficiaryIn(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=255)
    address: str | None = None
    contact_number: str | None = Field(None, max_length=30)
    email: str | None = Field(None, max_length=255)


class SpeciesIn(BaseModel):
    species_name: str = Field(..., min_length=1, max_length=255)
    quantity: int = Field(..., ge=0)


class SeedlingRequestCreate(BaseModel):
    """Payload for POST /seedling-requests.

    ``total_quantity`` is derived from ``species`` and cannot be sent.
    """
    beneficiary: BeneficiaryIn
    planting_site_address: str = Field(..., min_length=1)
    hectarage: float = Field(..., gt=0)
    species: list[SpeciesIn] | None = None
    submitted_by: str | None = None


# ── Review ───────────────────────────────────────────────────

class ReviewRequest(BaseModel):
    """Payload for PATCH /seedling-requests/{id}.

    ``scheduled_release_date`` is only applied when approving.
    """
    action: Literal["approve", "reject"]
    review_notes: str | None = None
    scheduled_release_date: date | None = None


# ── Response ─────────────────────────────────────────────────

class SpeciesOut(BaseModel):
    species_name: str
    quantity: int

    model_config = {"from_attributes": True}


class SeedlingRequestOut(BaseModel):
    id: str
    request_code: str
    beneficiary_id: str
    beneficiary_name: str | None = None
    contact_number: str | None = None
    email: str | None = None
    address: str | None = None
    planting_site_address: str
    hectarage: float
    total_quantity: int
    status: str
    scheduled_release_date: date | None
    review_notes: str | None
    submitted_by: str | None
    date_submitted: datetime
    updated_at: datetime
    species: list[SpeciesOut] = []

    model_config = {"from_attributes": True}

    @model_validator(mode="before")
    @classmethod
    def _extract_beneficiary(cls, data):
        beneficiary = data.__dict__.get("beneficiary") if hasattr(data, "__dict__") else None
        if beneficiary is not None:
            data.__dict__["beneficiary_name"] = beneficiary.full_name
            data.__dict__["contact_number"] = beneficiary.contact_number
            data.__dict__["email"] = beneficiary.email
            data.__dict__["address"] = beneficiary.address
        return data


class SeedlingRequestResponse(BaseModel):
    success: bool = True
    request: SeedlingRequestOut


class SeedlingRequestListResponse(BaseModel):
    success: bool = True
    requests: list[SeedlingRequestOut]


# ── Releases ─────────────────────────────────────────────────

class ReleaseCreate(BaseModel):
    request_id: str
    quantity_released: int = Field(..., gt=0)
    released_by: str | None = None
    notes: str | None = None
    # Defaults to now
    release_date: datetime | None = None


class ReleaseOut(BaseModel):
    id: str
    request_id: str
    request_code: str | None = None
    beneficiary_name: str | None = None
    released_by: str | None
    released_by_name: str | None = None
    quantity_released: int
    notes: str | None
    release_date: datetime
    created_at: datetime

    model_config = {"from_attributes": True}

    @model_validator(mode="before")
    @classmethod
    def _extract_relations(cls, data):
        request = data.__dict__.get("request") if hasattr(data, "__dict__") else None
        if request is not None:
            data.__dict__["request_code"] = request.request_code
            beneficiary = request.__dict__.get("beneficiary")
            if beneficiary is not None:
                data.__dict__["beneficiary_name"] = beneficiary.full_name
        releaser = data.__dict__.get("releaser") if hasattr(data, "__dict__") else None
        if releaser is not None:
            data.__dict__["released_by_name"] = releaser.name
        return data


class ReleaseResponse(BaseModel):
    success: bool = True
    release: ReleaseOut


class ReleaseListResponse(BaseModel):
    success: bool = True
    releases: list[ReleaseOut]
