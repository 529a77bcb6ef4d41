"""Client domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import (
    format_postal_code,
    validate_br_phone,
    validate_email,
    validate_postal_code,
)


def _postal_code(v: Optional[str]) -> Optional[str]:
    if not v:
        return None
    if not validate_postal_code(v):
        raise ValueError("Postal code must have 8 digits")
    return format_postal_code(v)


def _required(v: Optional[str], label: str) -> str:
    if v is None or not v.strip():
        raise ValueError(f"{label} is required")
    return v.strip()


class ServiceLocationCreate(BaseModel):
    """Address and pool details for a location"""

    street: Optional[str] = None
    street_number: Optional[str] = None
    complement: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address_validated: Optional[bool] = None
    is_primary: Optional[bool] = None
    reference_point: Optional[str] = None
    access_instructions: Optional[str] = None
    pool_type: Optional[str] = None
    pool_size: Optional[str] = None
    products_used: Optional[str] = None
    equipment: Optional[str] = None
    preferred_time: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("postal_code")
    @classmethod
    def validate_postal_code(cls, v):
        return _postal_code(v)


class ServiceLocationUpdate(ServiceLocationCreate):
    """Partial location update. ``id`` is only read when nested in a client update."""

    id: Optional[str] = None


class ServiceLocationResponse(BaseModel):
    id: str
    client_id: str
    street: Optional[str] = None
    street_number: Optional[str] = None
    complement: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address_validated: bool = False
    is_primary: bool = False
    reference_point: Optional[str] = None
    access_instructions: Optional[str] = None
    pool_type: Optional[str] = None
    pool_size: Optional[str] = None
    products_used: Optional[str] = None
    equipment: Optional[str] = None
    preferred_time: Optional[str] = None
    notes: Optional[str] = None
    address_line: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ClientCreate(BaseModel):
    """Schema for creating a new client"""

    name: str
    email: str
    phone: str
    cleaning_frequency: Optional[str] = None
    referral_source: Optional[str] = None
    active: bool = True
    service_location: Optional[ServiceLocationCreate] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _required(v, "Name")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return validate_email(_required(v, "Email"))

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return validate_br_phone(_required(v, "Phone"))


class ClientUpdate(BaseModel):
    """Schema for updating an existing client"""

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    cleaning_frequency: Optional[str] = None
    referral_source: Optional[str] = None
    active: Optional[bool] = None
    service_location: Optional[ServiceLocationUpdate] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if v is not None:
            return _required(v, "Name")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        if v is not None:
            return validate_email(_required(v, "Email"))
        return v

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        if v is not None:
            return validate_br_phone(_required(v, "Phone"))
        return v


class ClientResponse(BaseModel):
    """Schema for client response"""

    id: str
    name: str
    email: str
    phone: str
    cleaning_frequency: Optional[str] = None
    referral_source: Optional[str] = None
    active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    service_locations: list[ServiceLocationResponse] = []

    class Config:
        from_attributes = True
