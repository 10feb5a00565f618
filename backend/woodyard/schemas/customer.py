"""Customer schemas"""
from typing import Literal

from pydantic import BaseModel, Field

CustomerType = Literal["RETAIL", "WHOLESALE"]


class CustomerBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    type: CustomerType = "RETAIL"
    phone: str | None = Field(None, max_length=32)
    email: str | None = Field(None, max_length=128)
    address: str | None = None
    street_address: str | None = Field(None, max_length=256)
    city: str | None = Field(None, max_length=128)
    state: str | None = Field(None, max_length=64)
    zip_code: str | None = Field(None, max_length=16)
    notes: str | None = None


class CustomerCreate(CustomerBase):
    pass


class CustomerUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=128)
    type: CustomerType | None = None
    phone: str | None = Field(None, max_length=32)
    email: str | None = Field(None, max_length=128)
    address: str | None = None
    street_address: str | None = Field(None, max_length=256)
    city: str | None = Field(None, max_length=128)
    state: str | None = Field(None, max_length=64)
    zip_code: str | None = Field(None, max_length=16)
    notes: str | None = None


class CustomerResponse(CustomerBase):
    id: int
    full_address: str = ""

    model_config = {"from_attributes": True}


class CustomerSearchHit(BaseModel):
    customer: CustomerResponse
    score: float
