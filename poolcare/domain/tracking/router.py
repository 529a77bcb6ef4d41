"""Tracking router - live location, history and map configuration"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import CurrentUser, get_current_user, require_management
from ...database import get_db
from .schemas import CleanerOption, HistoryItem, LiveResponse, MapConfig
from .service import TrackingService, get_map_config

router = APIRouter(tags=["Tracking"])


def get_tracking_service(db: Session = Depends(get_db)) -> TrackingService:
    """Dependency injection for TrackingService"""
    return TrackingService(db)


@router.get("/live", response_model=LiveResponse)
async def get_live(
    cleaner_id: Optional[str] = Query(None),
    current_user: CurrentUser = Depends(require_management),
    service: TrackingService = Depends(get_tracking_service),
):
    """In-progress appointments and their map markers"""
    return service.get_live(cleaner_id=cleaner_id)


@router.get("/live/cleaners", response_model=list[CleanerOption])
async def get_live_cleaners(
    current_user: CurrentUser = Depends(require_management),
    service: TrackingService = Depends(get_tracking_service),
):
    """Active cleaners for the live view filter"""
    return service.get_cleaner_options()


@router.get("/history", response_model=list[HistoryItem])
async def get_history(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    cleaner_id: Optional[str] = Query(None),
    client_id: Optional[str] = Query(None),
    current_user: CurrentUser = Depends(require_management),
    service: TrackingService = Depends(get_tracking_service),
):
    """Completed appointments, most recent first, with durations"""
    return service.get_history(
        start_date=start_date,
        end_date=end_date,
        cleaner_id=cleaner_id,
        client_id=client_id,
    )


@router.get("/map/config", response_model=MapConfig)
async def map_config(current_user: CurrentUser = Depends(get_current_user)):
    return get_map_config()


__all__ = ["router"]
