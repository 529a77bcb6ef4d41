"""Appointment domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import APPOINTMENT_STATUSES, SERVICE_FREQUENCIES, Appointment
from ...shared.timeutils import to_naive_utc

STATUS_LABELS = {
    "scheduled": "Scheduled",
    "in_progress": "In progress",
    "completed": "Completed",
    "cancelled": "Cancelled",
}

DATE_RANGES = ("all", "today", "week", "lastWeek", "custom")

ADDRESS_NOT_AVAILABLE = "Address not available"


def validate_status(v: str) -> str:
    if v not in APPOINTMENT_STATUSES:
        raise ValueError(f"Status must be one of: {', '.join(APPOINTMENT_STATUSES)}")
    return v


class AppointmentCreate(BaseModel):
    """Schema for creating an appointment

    Past dates and overlapping schedules are accepted.
    """

    client_id: str
    cleaner_id: str
    service_location_id: Optional[str] = None
    service_type_id: Optional[str] = None
    service_task_ids: list[str] = []
    scheduled_at: datetime
    status: str = "scheduled"
    description: str = ""
    additional_notes: Optional[str] = None
    frequency: Optional[str] = None

    @field_validator("client_id", "cleaner_id")
    @classmethod
    def validate_reference(cls, v):
        if not v or not v.strip():
            raise ValueError("Field is required")
        return v.strip()

    @field_validator("scheduled_at")
    @classmethod
    def normalize_scheduled_at(cls, v):
        return to_naive_utc(v)

    @field_validator("status")
    @classmethod
    def check_status(cls, v):
        return validate_status(v)

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, v):
        return v or ""

    @field_validator("frequency")
    @classmethod
    def check_frequency(cls, v):
        if v and v not in SERVICE_FREQUENCIES:
            raise ValueError(f"Frequency must be one of: {', '.join(SERVICE_FREQUENCIES)}")
        return v or None


class AppointmentUpdate(AppointmentCreate):
    """Full replace of the editable fields (PUT)"""


class StatusUpdate(BaseModel):
    status: str

    @field_validator("status")
    @classmethod
    def check_status(cls, v):
        return validate_status(v)


class ClientSummary(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None

    class Config:
        from_attributes = True


class CleanerSummary(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    personal_phone: Optional[str] = None
    company_phone: Optional[str] = None

    class Config:
        from_attributes = True


class LocationSummary(BaseModel):
    id: str
    street: Optional[str] = None
    street_number: Optional[str] = None
    complement: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    reference_point: Optional[str] = None
    access_instructions: Optional[str] = None

    class Config:
        from_attributes = True


class CatalogSummary(BaseModel):
    id: str
    name: str
    duration_minutes: int
    price: float

    class Config:
        from_attributes = True


class MapMarker(BaseModel):
    """A point on the map for one appointment"""

    appointment_id: str
    latitude: float
    longitude: float
    title: str
    address: str
    cleaner_name: Optional[str] = None


def address_line(appointment: Appointment) -> str:
    location = appointment.service_location
    if location is None:
        return ADDRESS_NOT_AVAILABLE
    return location.address_line or ADDRESS_NOT_AVAILABLE


def build_marker(appointment: Appointment) -> Optional[MapMarker]:
    """Marker for the appointment's location, None when it was never geocoded"""
    location = appointment.service_location
    if location is None or not location.has_coordinates:
        return None
    return MapMarker(
        appointment_id=appointment.id,
        latitude=location.latitude,
        longitude=location.longitude,
        title=appointment.client.name if appointment.client else "",
        address=address_line(appointment),
        cleaner_name=appointment.cleaner.name if appointment.cleaner else None,
    )


class AppointmentResponse(BaseModel):
    """Appointment with everything the list and detail views display"""

    id: str
    client_id: str
    cleaner_id: str
    service_location_id: str
    service_type_id: Optional[str] = None
    scheduled_at: datetime
    status: str
    status_label: str
    description: str = ""
    additional_notes: Optional[str] = None
    frequency: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    client: Optional[ClientSummary] = None
    cleaner: Optional[CleanerSummary] = None
    service_location: Optional[LocationSummary] = None
    service_type: Optional[CatalogSummary] = None
    tasks: list[CatalogSummary] = []
    address_line: str = ADDRESS_NOT_AVAILABLE
    marker: Optional[MapMarker] = None

    @classmethod
    def from_appointment(cls, appointment: Appointment) -> "AppointmentResponse":
        return cls(
            id=appointment.id,
            client_id=appointment.client_id,
            cleaner_id=appointment.cleaner_id,
            service_location_id=appointment.service_location_id,
            service_type_id=appointment.service_type_id,
            scheduled_at=appointment.scheduled_at,
            status=appointment.status,
            status_label=STATUS_LABELS.get(appointment.status, appointment.status),
            description=appointment.description or "",
            additional_notes=appointment.additional_notes,
            frequency=appointment.frequency,
            started_at=appointment.started_at,
            completed_at=appointment.completed_at,
            created_at=appointment.created_at,
            updated_at=appointment.updated_at,
            client=ClientSummary.model_validate(appointment.client) if appointment.client else None,
            cleaner=CleanerSummary.model_validate(appointment.cleaner) if appointment.cleaner else None,
            service_location=(
                LocationSummary.model_validate(appointment.service_location)
                if appointment.service_location
                else None
            ),
            service_type=(
                CatalogSummary.model_validate(appointment.service_type) if appointment.service_type else None
            ),
            tasks=[CatalogSummary.model_validate(t) for t in appointment.tasks],
            address_line=address_line(appointment),
            marker=build_marker(appointment),
        )
