"""Client router - FastAPI endpoints for clients and service locations"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import CurrentUser, require_management
from ...database import get_db
from ..appointments.schemas import AppointmentResponse
from .schemas import (
    ClientCreate,
    ClientResponse,
    ClientUpdate,
    ServiceLocationCreate,
    ServiceLocationResponse,
    ServiceLocationUpdate,
)
from .service import ClientService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clients", tags=["Clients"])
locations_router = APIRouter(prefix="/locations", tags=["Clients"])


def get_client_service(db: Session = Depends(get_db)) -> ClientService:
    """Dependency injection for ClientService"""
    return ClientService(db)


# ============================================================================
# CORE CRUD OPERATIONS
# ============================================================================


@router.get("", response_model=list[ClientResponse])
async def get_clients(
    active: Optional[bool] = Query(None),
    search: Optional[str] = Query(None),
    current_user: CurrentUser = Depends(require_management),
    service: ClientService = Depends(get_client_service),
):
    """Get clients ordered by name, with their service locations"""
    return service.get_clients(active=active, search=search)


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: str,
    current_user: CurrentUser = Depends(require_management),
    service: ClientService = Depends(get_client_service),
):
    return service.get_client(client_id)


@router.post("", response_model=ClientResponse, status_code=201)
async def create_client(
    data: ClientCreate,
    current_user: CurrentUser = Depends(require_management),
    service: ClientService = Depends(get_client_service),
):
    """Create a new client. A supplied service location becomes the primary one."""
    return service.create_client(data)


@router.patch("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: str,
    data: ClientUpdate,
    current_user: CurrentUser = Depends(require_management),
    service: ClientService = Depends(get_client_service),
):
    """Update a client"""
    return service.update_client(client_id, data)


@router.delete("/{client_id}")
async def delete_client(
    client_id: str,
    confirm: bool = Query(False),
    current_user: CurrentUser = Depends(require_management),
    service: ClientService = Depends(get_client_service),
):
    """Delete a client and its service locations (requires confirm=true)"""
    return service.delete_client(client_id, confirm)


@router.get("/{client_id}/appointments", response_model=list[AppointmentResponse])
async def get_client_appointments(
    client_id: str,
    current_user: CurrentUser = Depends(require_management),
    service: ClientService = Depends(get_client_service),
):
    """Appointment history of a client, newest first"""
    appointments = service.get_client_appointments(client_id)
    return [AppointmentResponse.from_appointment(a) for a in appointments]


# ============================================================================
# SERVICE LOCATIONS
# ============================================================================


@router.get("/{client_id}/locations", response_model=list[ServiceLocationResponse])
async def get_locations(
    client_id: str,
    current_user: CurrentUser = Depends(require_management),
    service: ClientService = Depends(get_client_service),
):
    return service.get_locations(client_id)


@router.post("/{client_id}/locations", response_model=ServiceLocationResponse, status_code=201)
async def add_location(
    client_id: str,
    data: ServiceLocationCreate,
    current_user: CurrentUser = Depends(require_management),
    service: ClientService = Depends(get_client_service),
):
    """Add a service location; is_primary=true demotes the other locations"""
    return service.add_location(client_id, data)


@locations_router.patch("/{location_id}", response_model=ServiceLocationResponse)
async def update_location(
    location_id: str,
    data: ServiceLocationUpdate,
    current_user: CurrentUser = Depends(require_management),
    service: ClientService = Depends(get_client_service),
):
    return service.update_location(location_id, data)


@locations_router.delete("/{location_id}")
async def delete_location(
    location_id: str,
    confirm: bool = Query(False),
    current_user: CurrentUser = Depends(require_management),
    service: ClientService = Depends(get_client_service),
):
    return service.delete_location(location_id, confirm)


__all__ = ["router", "locations_router"]
