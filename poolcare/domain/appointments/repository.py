"""Appointment repository - Database operations for appointments"""

from datetime import datetime
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.orm import Query, Session, joinedload, selectinload

from ...models import Appointment, Client, ServiceLocation
from ...shared.search import LIKE_ESCAPE, contains_pattern


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def base_query(db: Session) -> Query:
        """Appointments with everything the views display eagerly loaded"""
        return db.query(Appointment).options(
            joinedload(Appointment.client),
            joinedload(Appointment.cleaner),
            joinedload(Appointment.service_location),
            joinedload(Appointment.service_type),
            selectinload(Appointment.tasks),
        )

    @staticmethod
    def get_appointments(
        db: Session,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        cleaner_id: Optional[str] = None,
        client_id: Optional[str] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[Appointment]:
        """Filtered appointments ordered by schedule. Bounds are inclusive."""
        query = AppointmentRepository.base_query(db)

        if start is not None:
            query = query.filter(Appointment.scheduled_at >= start)
        if end is not None:
            query = query.filter(Appointment.scheduled_at <= end)
        if cleaner_id:
            query = query.filter(Appointment.cleaner_id == cleaner_id)
        if client_id:
            query = query.filter(Appointment.client_id == client_id)
        if status:
            query = query.filter(Appointment.status == status)

        if search:
            pattern = contains_pattern(search)
            matching_clients = select(Client.id).where(Client.name.ilike(pattern, escape=LIKE_ESCAPE))
            matching_locations = select(ServiceLocation.id).where(
                or_(
                    ServiceLocation.street.ilike(pattern, escape=LIKE_ESCAPE),
                    ServiceLocation.neighborhood.ilike(pattern, escape=LIKE_ESCAPE),
                    ServiceLocation.city.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )
            query = query.filter(
                or_(
                    Appointment.client_id.in_(matching_clients),
                    Appointment.service_location_id.in_(matching_locations),
                )
            )

        return query.order_by(Appointment.scheduled_at.asc()).all()

    @staticmethod
    def get_appointment_by_id(db: Session, appointment_id: str) -> Optional[Appointment]:
        return (
            AppointmentRepository.base_query(db)
            .filter(Appointment.id == appointment_id)
            .first()
        )

    @staticmethod
    def add_appointment(db: Session, appointment: Appointment, tasks: list) -> Appointment:
        appointment.tasks = tasks
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def update_appointment(db: Session, appointment: Appointment, tasks: Optional[list] = None, **updates) -> Appointment:
        for key, value in updates.items():
            if hasattr(appointment, key):
                setattr(appointment, key, value)
        if tasks is not None:
            appointment.tasks = tasks

        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def delete_appointment(db: Session, appointment: Appointment) -> None:
        db.delete(appointment)
        db.commit()
