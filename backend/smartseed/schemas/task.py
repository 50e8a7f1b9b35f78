"""Pydantic schemas for the bed task checklist."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from smartseed.schemas.nursery import BedOut


class BedTaskOut(BaseModel):
    id: str
    task_name: str
    task_description: str | None
    is_default: bool
    display_order: int

    model_config = {"from_attributes": True}


class CompletionOut(BaseModel):
    id: str
    bed_id: str
    task_id: str
    completed_by: str
    completion_date: date
    completion_time: datetime
    photo_url: str | None
    notes: str | None
    gps_latitude: float | None
    gps_longitude: float | None

    model_config = {"from_attributes": True}


class TaskStatus(BedTaskOut):
    is_completed: bool = False
    completion_data: CompletionOut | None = None


class BedTasksResponse(BaseModel):
    """GET /tasks/bed/{identifier}: the checklist for today."""
    success: bool = True
    bed: BedOut
    tasks: list[TaskStatus]
    all_completed: bool


class TaskCatalogResponse(BaseModel):
    success: bool = True
    tasks: list[BedTaskOut]


class TaskCompleteRequest(BaseModel):
    bed_id: str = Field(..., min_length=1)
    task_id: str = Field(..., min_length=1)
    completed_by: str = Field(..., min_length=1)
    photo_url: str | None = None
    notes: str | None = None
    gps_latitude: float | None = Field(None, ge=-90, le=90)
    gps_longitude: float | None = Field(None, ge=-180, le=180)


class TaskUncompleteRequest(BaseModel):
    bed_id: str = Field(..., min_length=1)
    task_id: str = Field(..., min_length=1)


class TaskCompleteResponse(BaseModel):
    success: bool = True
    completion: CompletionOut
    message: str = "Task marked as completed"


class TaskUncompleteResponse(BaseModel):
    success: bool = True
    message: str = "Task unmarked"
