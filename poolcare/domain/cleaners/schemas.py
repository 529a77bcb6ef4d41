"""Cleaner domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

from ...shared.validators import validate_br_phone, validate_email, validate_hhmm

SERVICE_AREAS = ("Zona Sul", "Zona Norte", "Zona Leste", "Zona Oeste", "Centro")
WEEKDAYS = ("domingo", "segunda", "terca", "quarta", "quinta", "sexta", "sabado")
MIN_PASSWORD_LENGTH = 8


def _check_areas(v: Optional[list[str]]) -> Optional[list[str]]:
    if v is None:
        return v
    unknown = [a for a in v if a not in SERVICE_AREAS]
    if unknown:
        raise ValueError(f"Unknown service area(s): {', '.join(unknown)}")
    return list(dict.fromkeys(v))


def _check_days(v: Optional[list[str]]) -> Optional[list[str]]:
    if v is None:
        return v
    days = [d.strip().lower() for d in v]
    unknown = [d for d in days if d not in WEEKDAYS]
    if unknown:
        raise ValueError(f"Unknown day(s): {', '.join(unknown)}")
    # Keep week order regardless of input order
    return [d for d in WEEKDAYS if d in days]


def _check_password(password: Optional[str], confirm_password: Optional[str]) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if password != confirm_password:
        raise ValueError("Passwords do not match")


class CleanerFields(BaseModel):
    """Fields shared by create and update"""

    personal_phone: Optional[str] = None
    company_phone: Optional[str] = None
    available_days: Optional[list[str]] = None
    work_start_time: Optional[str] = None
    work_end_time: Optional[str] = None
    service_areas: Optional[list[str]] = None
    has_vehicle: Optional[bool] = None
    vehicle_type: Optional[str] = None
    address: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    employee_code: Optional[str] = None
    hire_date: Optional[date] = None

    @field_validator("personal_phone", "company_phone", "emergency_contact_phone")
    @classmethod
    def validate_phone(cls, v):
        if v:
            return validate_br_phone(v)
        return None

    @field_validator("work_start_time", "work_end_time")
    @classmethod
    def validate_work_time(cls, v):
        return validate_hhmm(v)

    @field_validator("service_areas")
    @classmethod
    def validate_areas(cls, v):
        return _check_areas(v)

    @field_validator("available_days")
    @classmethod
    def validate_days(cls, v):
        return _check_days(v)


class CleanerCreate(CleanerFields):
    """Schema for registering a cleaner"""

    name: str
    email: str
    password: str
    confirm_password: str
    active: bool = True

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Name is required")
        return v.strip()

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        if not v or not v.strip():
            raise ValueError("Email is required")
        return validate_email(v)

    @model_validator(mode="after")
    def validate_password(self):
        _check_password(self.password, self.confirm_password)
        return self


class CleanerUpdate(CleanerFields):
    """Partial update. Password is only changed when supplied."""

    name: Optional[str] = None
    email: Optional[str] = None
    active: Optional[bool] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        if v:
            return validate_email(v)
        return None

    @model_validator(mode="after")
    def validate_password(self):
        if self.password:
            _check_password(self.password, self.confirm_password)
        return self


class CleanerResponse(BaseModel):
    id: str
    name: str
    email: str
    personal_phone: Optional[str] = None
    company_phone: Optional[str] = None
    active: bool
    role: str
    available_days: list[str] = []
    work_start_time: Optional[str] = None
    work_end_time: Optional[str] = None
    service_areas: list[str] = []
    has_vehicle: bool = False
    vehicle_type: Optional[str] = None
    address: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    employee_code: Optional[str] = None
    hire_date: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
