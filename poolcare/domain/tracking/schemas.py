"""Tracking schemas - live map and completed-job history"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from ..appointments.schemas import MapMarker


class LiveAppointment(BaseModel):
    id: str
    cleaner_id: str
    cleaner_name: Optional[str] = None
    cleaner_phone: Optional[str] = None
    client_id: str
    client_name: Optional[str] = None
    address_line: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    scheduled_at: datetime
    started_at: Optional[datetime] = None
    elapsed_minutes: int = 0


class LiveResponse(BaseModel):
    """Snapshot of in-progress jobs. Clients poll it every refresh_interval_seconds."""

    appointments: list[LiveAppointment]
    markers: list[MapMarker]
    refresh_interval_seconds: int
    generated_at: datetime


class CleanerOption(BaseModel):
    id: str
    name: str

    class Config:
        from_attributes = True


class HistoryItem(BaseModel):
    id: str
    cleaner_id: str
    cleaner_name: Optional[str] = None
    client_id: str
    client_name: Optional[str] = None
    address_line: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    service_type: Optional[str] = None
    scheduled_at: datetime
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    duration_minutes: int = 0
    marker: Optional[MapMarker] = None


class MarkerIcon(BaseModel):
    url: str
    size: list[int]
    anchor: list[int]


class MapConfig(BaseModel):
    tile_url: str
    attribution: str
    center: dict
    zoom: int
    detail_zoom: int
    marker_icon: MarkerIcon
