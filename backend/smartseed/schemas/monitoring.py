"""Pydantic schemas for monitoring sites, visits and the SMS log."""

from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator, model_validator


def _site_context(data, site) -> None:
    """Copy request/beneficiary details reachable from a loaded site onto ``data``."""
    request = site.__dict__.get("request")
    if request is None:
        return
    data.__dict__["request_code"] = request.request_code
    data.__dict__["planting_site_address"] = request.planting_site_address
    beneficiary = request.__dict__.get("beneficiary")
    if beneficiary is not None:
        data.__dict__["beneficiary_name"] = beneficiary.full_name
        data.__dict__["contact_number"] = beneficiary.contact_number


# ── Visits ───────────────────────────────────────────────────

class VisitCreate(BaseModel):
    request_id: str
    scheduled_date: date


class VisitUpdate(BaseModel):
    """Partial update for PATCH /monitoring/visits/{id}.

    Only fields present in the body are written. The GPS pair is not a
    visit column: it is copied onto the site when ``result`` is
    ``planted_successful``.
    """
    attempted_messages: int | None = Field(None, ge=0)
    beneficiary_confirmed: bool | None = None
    visit_date: date | None = None
    result: str | None = Field(None, max_length=50)
    notes: str | None = None
    blacklisted: bool | None = None

    gps_latitude: float | None = Field(None, ge=-90, le=90)
    gps_longitude: float | None = Field(None, ge=-180, le=180)

    @field_validator("visit_date", mode="before")
    @classmethod
    def _date_part(cls, value):
        # Clients send full ISO timestamps ("2024-07-02T08:30:00.000Z"); keep the day.
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str) and "T" in value:
            return value.split("T", 1)[0]
        return value

    @field_validator("attempted_messages", "beneficiary_confirmed", "blacklisted")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class VisitOut(BaseModel):
    id: str
    site_id: str
    request_id: str | None = None
    request_code: str | None = None
    planting_site_address: str | None = None
    beneficiary_name: str | None = None
    contact_number: str | None = None
    scheduled_date: date
    attempted_messages: int
    beneficiary_confirmed: bool
    visit_date: date | None
    result: str | None
    notes: str | None
    blacklisted: bool
    created_at: datetime

    model_config = {"from_attributes": True}

    @model_validator(mode="before")
    @classmethod
    def _extract_site(cls, data):
        site = data.__dict__.get("site") if hasattr(data, "__dict__") else None
        if site is not None:
            data.__dict__["request_id"] = site.request_id
            _site_context(data, site)
        return data


class VisitResponse(BaseModel):
    success: bool = True
    visit: VisitOut


class VisitListResponse(BaseModel):
    success: bool = True
    visits: list[VisitOut]


# ── Sites ────────────────────────────────────────────────────

class SiteOut(BaseModel):
    id: str
    request_id: str
    request_code: str | None = None
    planting_site_address: str | None = None
    beneficiary_name: str | None = None
    gps_latitude: float | None
    gps_longitude: float | None
    created_at: datetime

    model_config = {"from_attributes": True}

    @model_validator(mode="before")
    @classmethod
    def _extract_request(cls, data):
        if hasattr(data, "__dict__"):
            _site_context(data, data)
        return data


class SiteListResponse(BaseModel):
    success: bool = True
    sites: list[SiteOut]


# ── SMS ──────────────────────────────────────────────────────

class SmsCreate(BaseModel):
    to_number: str = Field(..., min_length=1, max_length=30)
    message_text: str = Field(..., min_length=1)
    attempt: int | None = Field(None, ge=1)


class SmsOut(BaseModel):
    id: str
    to_number: str
    message_text: str
    status: str
    attempt: int
    created_at: datetime

    model_config = {"from_attributes": True}


class SmsResponse(BaseModel):
    success: bool = True
    sms: SmsOut
