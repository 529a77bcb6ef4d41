"""Tracking repository - in-progress and completed appointment queries"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appointment, Cleaner
from ..appointments.repository import AppointmentRepository


class TrackingRepository:

    @staticmethod
    def get_in_progress(db: Session, cleaner_id: Optional[str] = None) -> list[Appointment]:
        query = AppointmentRepository.base_query(db).filter(Appointment.status == "in_progress")
        if cleaner_id:
            query = query.filter(Appointment.cleaner_id == cleaner_id)
        return query.order_by(Appointment.started_at.asc()).all()

    @staticmethod
    def get_completed(
        db: Session,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        cleaner_id: Optional[str] = None,
        client_id: Optional[str] = None,
    ) -> list[Appointment]:
        """Completed appointments, most recently finished first"""
        query = AppointmentRepository.base_query(db).filter(Appointment.status == "completed")

        if start is not None:
            query = query.filter(Appointment.completed_at >= start)
        if end is not None:
            query = query.filter(Appointment.completed_at <= end)
        if cleaner_id:
            query = query.filter(Appointment.cleaner_id == cleaner_id)
        if client_id:
            query = query.filter(Appointment.client_id == client_id)

        return query.order_by(Appointment.completed_at.desc()).all()

    @staticmethod
    def get_active_cleaners(db: Session) -> list[Cleaner]:
        return db.query(Cleaner).filter(Cleaner.active.is_(True)).order_by(Cleaner.name.asc()).all()
