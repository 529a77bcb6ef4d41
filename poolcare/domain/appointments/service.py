"""Appointment service - Filters, validation of references and the status workflow"""

import logging
from datetime import date, datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...auth import CurrentUser
from ...models import Appointment, Cleaner, Client, ServiceLocation, ServiceType
from ...shared.deletion import require_confirmation
from ...shared.timeutils import local_date_range, local_day_bounds, local_week_bounds, utcnow
from ..catalog.repository import CatalogRepository
from .repository import AppointmentRepository
from .schemas import DATE_RANGES, AppointmentCreate, AppointmentUpdate

logger = logging.getLogger(__name__)


def resolve_date_range(
    date_range: str,
    custom_start: Optional[date] = None,
    custom_end: Optional[date] = None,
    now: Optional[datetime] = None,
) -> tuple[Optional[datetime], Optional[datetime]]:
    """
    Turn a named range into inclusive naive-UTC bounds on scheduled_at.

    "custom" without both ends means no date filter at all.
    """
    if date_range not in DATE_RANGES:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid date range. Use one of: {', '.join(DATE_RANGES)}",
        )

    if date_range == "today":
        return local_day_bounds(now)
    if date_range == "week":
        return local_week_bounds(now)
    if date_range == "lastWeek":
        return local_week_bounds(now, weeks_ago=1)
    if date_range == "custom" and custom_start and custom_end:
        return local_date_range(custom_start, custom_end)
    return None, None


def apply_status(appointment: Appointment, status: str, now: Optional[datetime] = None) -> None:
    """
    Set the status, stamping execution times on the way.

    Any transition is allowed. Timestamps are only filled when missing and
    never cleared, so moving back to scheduled keeps the history. Callers
    skip this when the status does not change.
    """
    now = now or utcnow()
    appointment.status = status

    if status == "in_progress" and appointment.started_at is None:
        appointment.started_at = now
    elif status == "completed":
        if appointment.started_at is None:
            appointment.started_at = now
        appointment.completed_at = now


class AppointmentService:
    """Service layer for appointment business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository()
        self.catalog = CatalogRepository()

    def get_appointments(
        self,
        user: CurrentUser,
        date_range: str = "all",
        custom_start: Optional[date] = None,
        custom_end: Optional[date] = None,
        cleaner_id: Optional[str] = None,
        client_id: Optional[str] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[Appointment]:
        start, end = resolve_date_range(date_range, custom_start, custom_end)

        # Cleaners only ever see their own schedule
        if not user.can_manage:
            cleaner_id = user.id

        return self.repo.get_appointments(
            self.db,
            start=start,
            end=end,
            cleaner_id=cleaner_id or None,
            client_id=client_id or None,
            status=None if status in (None, "", "all") else status,
            search=search or None,
        )

    def get_appointment(self, appointment_id: str, user: CurrentUser) -> Appointment:
        appointment = self.repo.get_appointment_by_id(self.db, appointment_id)
        if not appointment or (not user.can_manage and appointment.cleaner_id != user.id):
            raise HTTPException(status_code=404, detail="Appointment not found")
        return appointment

    def _resolve_references(self, data: AppointmentCreate) -> tuple[dict, list]:
        """Check every referenced row exists; unknown references are a 400"""
        client = self.db.query(Client).filter(Client.id == data.client_id).first()
        if not client:
            raise HTTPException(status_code=400, detail="Client not found")

        if not self.db.query(Cleaner.id).filter(Cleaner.id == data.cleaner_id).first():
            raise HTTPException(status_code=400, detail="Cleaner not found")

        if data.service_location_id:
            location = (
                self.db.query(ServiceLocation)
                .filter(ServiceLocation.id == data.service_location_id)
                .first()
            )
            if not location:
                raise HTTPException(status_code=400, detail="Service location not found")
            if location.client_id != client.id:
                raise HTTPException(status_code=400, detail="Service location does not belong to this client")
        else:
            location = client.primary_location
            if not location:
                raise HTTPException(
                    status_code=400,
                    detail="Client has no primary service location. Select a location.",
                )

        if data.service_type_id and not self.catalog.get_item(self.db, ServiceType, data.service_type_id):
            raise HTTPException(status_code=400, detail="Service type not found")

        task_ids = list(dict.fromkeys(data.service_task_ids))
        tasks = self.catalog.get_tasks_by_ids(self.db, task_ids)
        if len(tasks) != len(task_ids):
            raise HTTPException(status_code=400, detail="Service task not found")

        fields = {
            "client_id": client.id,
            "cleaner_id": data.cleaner_id,
            "service_location_id": location.id,
            "service_type_id": data.service_type_id or None,
            "scheduled_at": data.scheduled_at,
            "description": data.description,
            "additional_notes": data.additional_notes,
            "frequency": data.frequency,
        }
        return fields, tasks

    def create_appointment(self, data: AppointmentCreate) -> Appointment:
        """Create an appointment. Past dates and overlaps are accepted."""
        fields, tasks = self._resolve_references(data)

        appointment = Appointment(**fields)
        apply_status(appointment, data.status)
        appointment = self.repo.add_appointment(self.db, appointment, tasks)
        logger.info(f"✅ Appointment created: {appointment.id} ({appointment.status}) at {appointment.scheduled_at}")
        return self.repo.get_appointment_by_id(self.db, appointment.id)

    def replace_appointment(self, appointment_id: str, data: AppointmentUpdate, user: CurrentUser) -> Appointment:
        """Full replace of the editable fields"""
        appointment = self.get_appointment(appointment_id, user)
        fields, tasks = self._resolve_references(data)

        if data.status != appointment.status:
            apply_status(appointment, data.status)

        self.repo.update_appointment(self.db, appointment, tasks=tasks, **fields)
        logger.info(f"✅ Appointment updated: {appointment_id}")
        return self.repo.get_appointment_by_id(self.db, appointment_id)

    def change_status(self, appointment_id: str, status: str, user: CurrentUser) -> Appointment:
        """Move an appointment to any status. Cleaners can only move their own."""
        appointment = self.repo.get_appointment_by_id(self.db, appointment_id)
        if not appointment:
            raise HTTPException(status_code=404, detail="Appointment not found")

        if not user.can_manage and appointment.cleaner_id != user.id:
            logger.warning(f"⚠️ {user.email} tried to change appointment {appointment_id} of another cleaner")
            raise HTTPException(status_code=403, detail="You can only update your own appointments")

        previous = appointment.status
        if status == previous:
            return appointment

        apply_status(appointment, status)
        self.db.commit()
        logger.info(f"🔄 Appointment {appointment_id}: {previous} -> {status}")
        return self.repo.get_appointment_by_id(self.db, appointment_id)

    def delete_appointment(self, appointment_id: str, confirm: bool, user: CurrentUser) -> dict:
        appointment = self.get_appointment(appointment_id, user)
        require_confirmation(confirm, "appointment")

        self.repo.delete_appointment(self.db, appointment)
        logger.info(f"🗑️ Appointment deleted: {appointment_id}")
        return {"message": "Appointment deleted"}
