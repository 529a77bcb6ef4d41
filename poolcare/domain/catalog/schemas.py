"""Catalog schemas - service types and service tasks"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import SERVICE_FREQUENCIES


def _name(v):
    if not v or not v.strip():
        raise ValueError("Name is required")
    return v.strip()


def _duration(v):
    if v is not None and v <= 0:
        raise ValueError("Duration must be greater than zero")
    return v


def _price(v):
    if v is not None and v < 0:
        raise ValueError("Price cannot be negative")
    return v


def _frequency(v):
    if v is not None and v not in SERVICE_FREQUENCIES:
        raise ValueError(f"Frequency must be one of: {', '.join(SERVICE_FREQUENCIES)}")
    return v


class ServiceTaskCreate(BaseModel):
    name: str
    description: Optional[str] = None
    duration_minutes: int
    price: float

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _name(v)

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, v):
        return _duration(v)

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        return _price(v)


class ServiceTaskUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    duration_minutes: Optional[int] = None
    price: Optional[float] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _name(v) if v is not None else v

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, v):
        return _duration(v)

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        return _price(v)


class ServiceTypeCreate(ServiceTaskCreate):
    frequency: str

    @field_validator("frequency")
    @classmethod
    def validate_frequency(cls, v):
        return _frequency(v)


class ServiceTypeUpdate(ServiceTaskUpdate):
    frequency: Optional[str] = None

    @field_validator("frequency")
    @classmethod
    def validate_frequency(cls, v):
        return _frequency(v)


class ServiceTaskResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    duration_minutes: int
    price: float
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ServiceTypeResponse(ServiceTaskResponse):
    frequency: str
