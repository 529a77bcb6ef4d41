"""Client service - Business logic for clients and service locations"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Appointment, Client, ServiceLocation
from ...shared.deletion import require_confirmation
from .repository import ClientRepository
from .schemas import ClientCreate, ClientUpdate, ServiceLocationCreate, ServiceLocationUpdate

logger = logging.getLogger(__name__)


def _location_fields(data: ServiceLocationCreate) -> dict:
    fields = data.model_dump(exclude_unset=True, exclude={"id"})
    # Coordinates from the geocoder mark the address as validated unless told otherwise
    if "address_validated" not in fields and data.latitude is not None and data.longitude is not None:
        fields["address_validated"] = True
    return {k: v for k, v in fields.items() if v is not None}


class ClientService:
    """Service layer for client business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ClientRepository()

    def get_clients(self, active: Optional[bool] = None, search: Optional[str] = None) -> list[Client]:
        return self.repo.get_clients(self.db, active=active, search=search)

    def get_client(self, client_id: str) -> Client:
        """Get a specific client"""
        client = self.repo.get_client_by_id(self.db, client_id)
        if not client:
            raise HTTPException(status_code=404, detail="Client not found")
        return client

    def create_client(self, data: ClientCreate) -> Client:
        """Create a client, with its primary service location when provided"""
        logger.info(f"📥 Creating client {data.name}")

        client_data = data.model_dump(exclude={"service_location"})
        location_data = _location_fields(data.service_location) if data.service_location else None

        client = self.repo.create_client(self.db, location_data=location_data, **client_data)
        logger.info(f"✅ Client created: {client.id}")
        return client

    def update_client(self, client_id: str, data: ClientUpdate) -> Client:
        """Update a client; a nested location is updated by id or inserted"""
        client = self.get_client(client_id)

        if data.service_location is not None:
            self._upsert_location(client, data.service_location)

        updates = data.model_dump(exclude_unset=True, exclude={"service_location"})
        return self.repo.update_client(self.db, client, **updates)

    def _upsert_location(self, client: Client, data: ServiceLocationUpdate) -> ServiceLocation:
        if data.id:
            location = self.repo.get_location_by_id(self.db, data.id)
            if not location or location.client_id != client.id:
                raise HTTPException(status_code=404, detail="Service location not found")
            return self._apply_location_update(location, data)

        create = ServiceLocationCreate(**data.model_dump(exclude_unset=True, exclude={"id"}))
        return self.add_location(client.id, create)

    def delete_client(self, client_id: str, confirm: bool) -> dict:
        """Delete a client together with its service locations"""
        client = self.get_client(client_id)
        require_confirmation(confirm, "client")

        appointment_count = self.repo.count_appointments(self.db, client.id)
        if appointment_count:
            logger.warning(f"⚠️ Refusing to delete client {client.id} with {appointment_count} appointment(s)")
            raise HTTPException(
                status_code=409,
                detail="Client has appointments and cannot be deleted",
            )

        self.repo.delete_client(self.db, client)
        logger.info(f"🗑️ Client deleted: {client_id}")
        return {"message": "Client deleted"}

    def get_client_appointments(self, client_id: str) -> list[Appointment]:
        client = self.get_client(client_id)
        return self.repo.get_client_appointments(self.db, client.id)

    # ------------------------------------------------------------------
    # Service locations
    # ------------------------------------------------------------------

    def get_locations(self, client_id: str) -> list[ServiceLocation]:
        client = self.get_client(client_id)
        return self.repo.get_locations(self.db, client.id)

    def get_location(self, location_id: str) -> ServiceLocation:
        location = self.repo.get_location_by_id(self.db, location_id)
        if not location:
            raise HTTPException(status_code=404, detail="Service location not found")
        return location

    def add_location(self, client_id: str, data: ServiceLocationCreate) -> ServiceLocation:
        """Add a location. The first location of a client is always primary."""
        client = self.get_client(client_id)
        fields = _location_fields(data)

        if not client.service_locations:
            fields["is_primary"] = True

        if fields.get("is_primary"):
            self.repo.clear_primary(self.db, client.id)

        location = self.repo.create_location(self.db, client.id, **fields)
        logger.info(f"✅ Service location {location.id} added to client {client.id}")
        return location

    def update_location(self, location_id: str, data: ServiceLocationUpdate) -> ServiceLocation:
        location = self.get_location(location_id)
        return self._apply_location_update(location, data)

    def _apply_location_update(self, location: ServiceLocation, data: ServiceLocationUpdate) -> ServiceLocation:
        updates = _location_fields(data)
        if updates.get("is_primary"):
            self.repo.clear_primary(self.db, location.client_id, keep_id=location.id)
        return self.repo.update_location(self.db, location, **updates)

    def delete_location(self, location_id: str, confirm: bool) -> dict:
        location = self.get_location(location_id)
        require_confirmation(confirm, "service location")

        if self.repo.count_location_appointments(self.db, location.id):
            raise HTTPException(
                status_code=409,
                detail="Service location is used by appointments and cannot be deleted",
            )

        self.repo.delete_location(self.db, location)
        logger.info(f"🗑️ Service location deleted: {location_id}")
        return {"message": "Service location deleted"}
