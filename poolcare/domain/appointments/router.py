"""Appointment router - FastAPI endpoints for appointments"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import CurrentUser, get_current_user, require_management
from ...database import get_db
from .schemas import AppointmentCreate, AppointmentResponse, AppointmentUpdate, StatusUpdate
from .service import AppointmentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["Appointments"])


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db)


@router.get("", response_model=list[AppointmentResponse])
async def get_appointments(
    date_range: str = Query("all", description="all, today, week, lastWeek or custom"),
    custom_start: Optional[date] = Query(None),
    custom_end: Optional[date] = Query(None),
    cleaner_id: Optional[str] = Query(None),
    client_id: Optional[str] = Query(None),
    status: Optional[str] = Query("all"),
    search: Optional[str] = Query(None),
    current_user: CurrentUser = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    """
    List appointments ordered by scheduled time.

    Day and week ranges are computed in the business timezone, weeks start
    on Sunday. Cleaners only receive their own appointments.
    """
    appointments = service.get_appointments(
        current_user,
        date_range=date_range,
        custom_start=custom_start,
        custom_end=custom_end,
        cleaner_id=cleaner_id,
        client_id=client_id,
        status=status,
        search=search,
    )
    return [AppointmentResponse.from_appointment(a) for a in appointments]


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment = service.get_appointment(appointment_id, current_user)
    return AppointmentResponse.from_appointment(appointment)


@router.post("", response_model=AppointmentResponse, status_code=201)
async def create_appointment(
    data: AppointmentCreate,
    current_user: CurrentUser = Depends(require_management),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Create an appointment. Defaults to the client's primary location."""
    appointment = service.create_appointment(data)
    return AppointmentResponse.from_appointment(appointment)


@router.put("/{appointment_id}", response_model=AppointmentResponse)
async def replace_appointment(
    appointment_id: str,
    data: AppointmentUpdate,
    current_user: CurrentUser = Depends(require_management),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment = service.replace_appointment(appointment_id, data, current_user)
    return AppointmentResponse.from_appointment(appointment)


@router.patch("/{appointment_id}/status", response_model=AppointmentResponse)
async def change_status(
    appointment_id: str,
    data: StatusUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Change status. Any transition is allowed."""
    appointment = service.change_status(appointment_id, data.status, current_user)
    return AppointmentResponse.from_appointment(appointment)


@router.delete("/{appointment_id}")
async def delete_appointment(
    appointment_id: str,
    confirm: bool = Query(False),
    current_user: CurrentUser = Depends(require_management),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Delete an appointment (requires confirm=true)"""
    return service.delete_appointment(appointment_id, confirm, current_user)


__all__ = ["router"]
