"""Tracking service - live positions of in-progress jobs and job history"""

import logging
from datetime import date, datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...config import (
    LIVE_REFRESH_SECONDS,
    MAP_ATTRIBUTION,
    MAP_DEFAULT_LAT,
    MAP_DEFAULT_LNG,
    MAP_DEFAULT_ZOOM,
    MAP_DETAIL_ZOOM,
    MAP_MARKER_ICON_URL,
    MAP_TILE_URL,
)
from ...models import Appointment, Cleaner
from ...shared.timeutils import local_date_range, minutes_between, utcnow
from ..appointments.schemas import address_line, build_marker
from .repository import TrackingRepository
from .schemas import HistoryItem, LiveAppointment, LiveResponse, MapConfig, MarkerIcon

logger = logging.getLogger(__name__)


def _live_item(appointment: Appointment, now: datetime) -> LiveAppointment:
    location = appointment.service_location
    cleaner = appointment.cleaner
    return LiveAppointment(
        id=appointment.id,
        cleaner_id=appointment.cleaner_id,
        cleaner_name=cleaner.name if cleaner else None,
        cleaner_phone=(cleaner.company_phone or cleaner.personal_phone) if cleaner else None,
        client_id=appointment.client_id,
        client_name=appointment.client.name if appointment.client else None,
        address_line=address_line(appointment),
        latitude=location.latitude if location else None,
        longitude=location.longitude if location else None,
        scheduled_at=appointment.scheduled_at,
        started_at=appointment.started_at,
        elapsed_minutes=minutes_between(appointment.started_at, now),
    )


def _history_item(appointment: Appointment) -> HistoryItem:
    location = appointment.service_location
    return HistoryItem(
        id=appointment.id,
        cleaner_id=appointment.cleaner_id,
        cleaner_name=appointment.cleaner.name if appointment.cleaner else None,
        client_id=appointment.client_id,
        client_name=appointment.client.name if appointment.client else None,
        address_line=address_line(appointment),
        latitude=location.latitude if location else None,
        longitude=location.longitude if location else None,
        service_type=appointment.service_type.name if appointment.service_type else None,
        scheduled_at=appointment.scheduled_at,
        started_at=appointment.started_at,
        completed_at=appointment.completed_at,
        duration_minutes=minutes_between(appointment.started_at, appointment.completed_at),
        marker=build_marker(appointment),
    )


class TrackingService:
    """Service layer for the live map and history views"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = TrackingRepository()

    def get_live(self, cleaner_id: Optional[str] = None, now: Optional[datetime] = None) -> LiveResponse:
        """
        In-progress appointments with elapsed time.

        Only geocoded locations get a marker; the rest still appear in the list.
        """
        now = now or utcnow()
        appointments = self.repo.get_in_progress(self.db, cleaner_id=cleaner_id or None)

        markers = [m for m in (build_marker(a) for a in appointments) if m is not None]
        if len(markers) < len(appointments):
            logger.debug(f"{len(appointments) - len(markers)} live appointment(s) without coordinates")

        return LiveResponse(
            appointments=[_live_item(a, now) for a in appointments],
            markers=markers,
            refresh_interval_seconds=LIVE_REFRESH_SECONDS,
            generated_at=now,
        )

    def get_cleaner_options(self) -> list[Cleaner]:
        return self.repo.get_active_cleaners(self.db)

    def get_history(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        cleaner_id: Optional[str] = None,
        client_id: Optional[str] = None,
    ) -> list[HistoryItem]:
        """Completed appointments; date filters cover whole local days, inclusive"""
        start, end = local_date_range(start_date, end_date)
        appointments = self.repo.get_completed(
            self.db,
            start=start,
            end=end,
            cleaner_id=cleaner_id or None,
            client_id=client_id or None,
        )
        return [_history_item(a) for a in appointments]


def get_map_config() -> MapConfig:
    """Tile source and defaults for map widgets"""
    return MapConfig(
        tile_url=MAP_TILE_URL,
        attribution=MAP_ATTRIBUTION,
        center={"lat": MAP_DEFAULT_LAT, "lng": MAP_DEFAULT_LNG},
        zoom=MAP_DEFAULT_ZOOM,
        detail_zoom=MAP_DETAIL_ZOOM,
        marker_icon=MarkerIcon(url=MAP_MARKER_ICON_URL, size=[25, 41], anchor=[12, 41]),
    )
