"""Dispatch schedule and stop schemas"""
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from woodyard.models.schedule import ScheduleStatus, StopStatus


class CustomerSummary(BaseModel):
    id: int
    name: str
    phone: str | None = None
    full_address: str = ""
    model_config = {"from_attributes": True}


class DriverSummary(BaseModel):
    id: int
    name: str
    model_config = {"from_attributes": True}


class StopCreate(BaseModel):
    customer_id: int
    driver_id: int | None = None
    items: str | None = None
    notes: str | None = None
    position: int | None = Field(None, ge=1, description="1-based insert position; appended when omitted")


class StopUpdate(BaseModel):
    customer_id: int | None = None
    driver_id: int | None = None
    items: str | None = None
    notes: str | None = None
    status: StopStatus | None = None


class StopStatusUpdate(BaseModel):
    status: StopStatus


class ReorderStopsRequest(BaseModel):
    stop_ids: list[int] = Field(..., min_length=1)


class StopResponse(BaseModel):
    id: int
    schedule_id: int
    customer_id: int
    driver_id: int | None
    sequence_number: int
    items: str | None
    price: Decimal
    notes: str | None
    status: StopStatus
    is_recurring: bool = False
    customer: CustomerSummary | None = None
    driver: DriverSummary | None = None

    model_config = {"from_attributes": True}


class ScheduleCreate(BaseModel):
    schedule_date: date = Field(default_factory=date.today)
    notes: str | None = None
    stops: list[StopCreate] = Field(default_factory=list)


class ScheduleUpdate(BaseModel):
    schedule_date: date | None = None
    status: ScheduleStatus | None = None
    notes: str | None = None


class ScheduleResponse(BaseModel):
    id: int
    schedule_number: str
    schedule_date: date
    status: ScheduleStatus
    notes: str | None
    created_at: datetime | None = None
    total_price: Decimal = Decimal("0")
    stop_count: int = 0

    model_config = {"from_attributes": True}


class ScheduleDetailResponse(ScheduleResponse):
    stops: list[StopResponse] = Field(default_factory=list)


class PreviewStop(BaseModel):
    driver_id: str | None = None
    items: str | None = None


class PreviewRequest(BaseModel):
    """Unsaved form state; schedule_date is raw text so a half-typed date still previews."""
    schedule_date: str = ""
    stops: list[PreviewStop] = Field(default_factory=list)


class PreviewStopResult(BaseModel):
    sequence_number: int
    price: Decimal


class PreviewResponse(BaseModel):
    schedule_number: str
    stops: list[PreviewStopResult]
    total: Decimal


class DriverCapacity(BaseModel):
    driver_id: int | None
    driver_name: str
    stop_count: int
    pallet_equivalents: float
    max_pallet_equivalents: float
    percentage: int
    remaining: float
    over_capacity: bool
    estimated_minutes: int


class RecurringSyncResponse(BaseModel):
    schedule: ScheduleResponse | None = None
    created_schedule: bool
    added_stops: int
