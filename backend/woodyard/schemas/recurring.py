"""Recurring order schemas"""
from datetime import date
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from woodyard.services.recurrence import normalize_frequency

Frequency = Literal["daily", "weekly", "bi-weekly", "monthly"]


def _normalize(v):
    if v is None:
        return None
    return normalize_frequency(str(v))


class RecurringOrderBase(BaseModel):
    customer_id: int
    items: str | None = None
    frequency: Frequency
    preferred_day: str | None = Field(None, max_length=32)
    preferred_time: str | None = Field(None, max_length=16)
    start_date: date | None = None
    end_date: date | None = None
    active: bool = True

    @field_validator("frequency", mode="before")
    @classmethod
    def frequency_alias(cls, v):
        return _normalize(v)

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class RecurringOrderCreate(RecurringOrderBase):
    pass


class RecurringOrderUpdate(BaseModel):
    items: str | None = None
    frequency: Frequency | None = None
    preferred_day: str | None = Field(None, max_length=32)
    preferred_time: str | None = Field(None, max_length=16)
    start_date: date | None = None
    end_date: date | None = None
    active: bool | None = None

    @field_validator("frequency", mode="before")
    @classmethod
    def frequency_alias(cls, v):
        return _normalize(v)


class RecurringOrderResponse(RecurringOrderBase):
    id: int

    model_config = {"from_attributes": True}


class OccurrencesResponse(BaseModel):
    recurring_order_id: int
    dates: list[date]
