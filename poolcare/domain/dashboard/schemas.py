"""Dashboard schemas"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel


class DashboardMetrics(BaseModel):
    scheduled: int = 0
    in_progress: int = 0
    completed: int = 0
    total: int = 0


class DashboardAppointment(BaseModel):
    id: str
    time: str  # HH:MM, local
    scheduled_at: datetime
    status: str
    status_label: str
    client_name: Optional[str] = None
    address_line: str
    cleaner_id: str
    cleaner_name: Optional[str] = None
    cleaner_email: Optional[str] = None
    cleaner_phone: Optional[str] = None


class CurrentJob(BaseModel):
    id: str
    client_name: Optional[str] = None
    address_line: str
    started_at: Optional[datetime] = None


class DashboardCleaner(BaseModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    current_appointment: Optional[CurrentJob] = None


class DashboardResponse(BaseModel):
    day: date
    date_label: str
    metrics: DashboardMetrics
    appointments: list[DashboardAppointment]
    cleaners: list[DashboardCleaner]
