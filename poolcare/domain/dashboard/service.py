"""Dashboard service - today's numbers and who is working where"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appointment, Cleaner
from ...shared.timeutils import local_day_bounds, to_local, utcnow
from ..appointments.repository import AppointmentRepository
from ..appointments.schemas import STATUS_LABELS, address_line
from .schemas import (
    CurrentJob,
    DashboardAppointment,
    DashboardCleaner,
    DashboardMetrics,
    DashboardResponse,
)

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = ("segunda-feira", "terça-feira", "quarta-feira", "quinta-feira", "sexta-feira", "sábado", "domingo")
MONTH_NAMES = (
    "janeiro", "fevereiro", "março", "abril", "maio", "junho",
    "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
)


def format_date_label(local_now: datetime) -> str:
    """e.g. 'segunda-feira, 05 de maio'"""
    weekday = WEEKDAY_NAMES[local_now.weekday()]
    month = MONTH_NAMES[local_now.month - 1]
    return f"{weekday}, {local_now.day:02d} de {month}"


def count_statuses(appointments: list[Appointment]) -> DashboardMetrics:
    metrics = DashboardMetrics(total=len(appointments))
    for appointment in appointments:
        if appointment.status == "scheduled":
            metrics.scheduled += 1
        elif appointment.status == "in_progress":
            metrics.in_progress += 1
        elif appointment.status == "completed":
            metrics.completed += 1
    return metrics


def _cleaner_phone(cleaner: Optional[Cleaner]) -> Optional[str]:
    if cleaner is None:
        return None
    return cleaner.company_phone or cleaner.personal_phone


class DashboardService:

    def __init__(self, db: Session):
        self.db = db
        self.appointments = AppointmentRepository()

    def get_dashboard(self, now: Optional[datetime] = None) -> DashboardResponse:
        """Only appointments scheduled for today (business timezone) are counted"""
        now = now or utcnow()
        start, end = local_day_bounds(now)
        today = self.appointments.get_appointments(self.db, start=start, end=end)

        rows = [
            DashboardAppointment(
                id=a.id,
                time=to_local(a.scheduled_at).strftime("%H:%M"),
                scheduled_at=a.scheduled_at,
                status=a.status,
                status_label=STATUS_LABELS.get(a.status, a.status),
                client_name=a.client.name if a.client else None,
                address_line=address_line(a),
                cleaner_id=a.cleaner_id,
                cleaner_name=a.cleaner.name if a.cleaner else None,
                cleaner_email=a.cleaner.email if a.cleaner else None,
                cleaner_phone=_cleaner_phone(a.cleaner),
            )
            for a in today
        ]

        current_by_cleaner: dict[str, Appointment] = {}
        for appointment in today:
            if appointment.status == "in_progress":
                current_by_cleaner.setdefault(appointment.cleaner_id, appointment)

        cleaners = self.db.query(Cleaner).filter(Cleaner.active.is_(True)).order_by(Cleaner.name.asc()).all()
        cleaner_rows = []
        for cleaner in cleaners:
            current = current_by_cleaner.get(cleaner.id)
            cleaner_rows.append(
                DashboardCleaner(
                    id=cleaner.id,
                    name=cleaner.name,
                    email=cleaner.email,
                    phone=_cleaner_phone(cleaner),
                    current_appointment=CurrentJob(
                        id=current.id,
                        client_name=current.client.name if current.client else None,
                        address_line=address_line(current),
                        started_at=current.started_at,
                    )
                    if current
                    else None,
                )
            )

        local_now = to_local(now)
        return DashboardResponse(
            day=local_now.date(),
            date_label=format_date_label(local_now),
            metrics=count_statuses(today),
            appointments=rows,
            cleaners=cleaner_rows,
        )
