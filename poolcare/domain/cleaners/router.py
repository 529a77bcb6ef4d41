"""Cleaner router - FastAPI endpoints for cleaner records"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import CurrentUser, require_management
from ...database import get_db
from .schemas import SERVICE_AREAS, WEEKDAYS, CleanerCreate, CleanerResponse, CleanerUpdate
from .service import CleanerService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cleaners", tags=["Cleaners"])


def get_cleaner_service(db: Session = Depends(get_db)) -> CleanerService:
    """Dependency injection for CleanerService"""
    return CleanerService(db)


@router.get("", response_model=list[CleanerResponse])
async def get_cleaners(
    active: Optional[bool] = Query(None),
    current_user: CurrentUser = Depends(require_management),
    service: CleanerService = Depends(get_cleaner_service),
):
    """Get cleaners ordered by name"""
    return service.get_cleaners(active=active)


@router.get("/options")
async def get_cleaner_options(current_user: CurrentUser = Depends(require_management)):
    """Allowed values for the availability fields"""
    return {"service_areas": list(SERVICE_AREAS), "available_days": list(WEEKDAYS)}


@router.get("/{cleaner_id}", response_model=CleanerResponse)
async def get_cleaner(
    cleaner_id: str,
    current_user: CurrentUser = Depends(require_management),
    service: CleanerService = Depends(get_cleaner_service),
):
    return service.get_cleaner(cleaner_id)


@router.post("", response_model=CleanerResponse, status_code=201)
async def create_cleaner(
    data: CleanerCreate,
    current_user: CurrentUser = Depends(require_management),
    service: CleanerService = Depends(get_cleaner_service),
):
    """Register a cleaner (password and confirm_password must match)"""
    return service.create_cleaner(data)


@router.patch("/{cleaner_id}", response_model=CleanerResponse)
async def update_cleaner(
    cleaner_id: str,
    data: CleanerUpdate,
    current_user: CurrentUser = Depends(require_management),
    service: CleanerService = Depends(get_cleaner_service),
):
    """Update a cleaner. Send active=false to deactivate."""
    return service.update_cleaner(cleaner_id, data)


__all__ = ["router"]
