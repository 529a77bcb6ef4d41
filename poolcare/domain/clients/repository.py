"""Client repository - Database operations for clients and service locations"""

from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, selectinload

from ...models import Appointment, Client, ServiceLocation
from ...shared.search import LIKE_ESCAPE, contains_pattern


class ClientRepository:
    """Repository for client database operations"""

    @staticmethod
    def get_clients(db: Session, active: Optional[bool] = None, search: Optional[str] = None) -> list[Client]:
        """Get clients ordered by name"""
        query = db.query(Client).options(selectinload(Client.service_locations))

        if active is not None:
            query = query.filter(Client.active == active)

        if search:
            pattern = contains_pattern(search)
            query = query.filter(
                or_(
                    Client.name.ilike(pattern, escape=LIKE_ESCAPE),
                    Client.email.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )

        return query.order_by(Client.name.asc()).all()

    @staticmethod
    def get_client_by_id(db: Session, client_id: str) -> Optional[Client]:
        return db.query(Client).filter(Client.id == client_id).first()

    @staticmethod
    def create_client(db: Session, location_data: Optional[dict] = None, **client_data) -> Client:
        """Create a client, and its primary location when one is given"""
        client = Client(**client_data)
        db.add(client)

        if location_data is not None:
            location_data["is_primary"] = True
            client.service_locations.append(ServiceLocation(**location_data))

        db.commit()
        db.refresh(client)
        return client

    @staticmethod
    def update_client(db: Session, client: Client, **updates) -> Client:
        """Update a client with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(client, key):
                setattr(client, key, value)

        db.commit()
        db.refresh(client)
        return client

    @staticmethod
    def delete_client(db: Session, client: Client) -> None:
        """Delete a client (locations go with it)"""
        db.delete(client)
        db.commit()

    @staticmethod
    def count_appointments(db: Session, client_id: str) -> int:
        return (
            db.query(func.count(Appointment.id))
            .filter(Appointment.client_id == client_id)
            .scalar()
        )

    @staticmethod
    def get_client_appointments(db: Session, client_id: str) -> list[Appointment]:
        """Client appointments, most recent schedule first"""
        return (
            db.query(Appointment)
            .filter(Appointment.client_id == client_id)
            .order_by(Appointment.scheduled_at.desc())
            .all()
        )

    # Service location methods
    @staticmethod
    def get_location_by_id(db: Session, location_id: str) -> Optional[ServiceLocation]:
        return db.query(ServiceLocation).filter(ServiceLocation.id == location_id).first()

    @staticmethod
    def get_locations(db: Session, client_id: str) -> list[ServiceLocation]:
        return (
            db.query(ServiceLocation)
            .filter(ServiceLocation.client_id == client_id)
            .order_by(ServiceLocation.is_primary.desc(), ServiceLocation.created_at.asc())
            .all()
        )

    @staticmethod
    def clear_primary(db: Session, client_id: str, keep_id: Optional[str] = None) -> None:
        """Demote every primary location of a client except ``keep_id`` (no commit)"""
        query = db.query(ServiceLocation).filter(
            ServiceLocation.client_id == client_id, ServiceLocation.is_primary.is_(True)
        )
        if keep_id:
            query = query.filter(ServiceLocation.id != keep_id)
        query.update({ServiceLocation.is_primary: False}, synchronize_session="fetch")

    @staticmethod
    def create_location(db: Session, client_id: str, **location_data) -> ServiceLocation:
        location = ServiceLocation(client_id=client_id, **location_data)
        db.add(location)
        db.commit()
        db.refresh(location)
        return location

    @staticmethod
    def update_location(db: Session, location: ServiceLocation, **updates) -> ServiceLocation:
        for key, value in updates.items():
            if value is not None and hasattr(location, key):
                setattr(location, key, value)

        db.commit()
        db.refresh(location)
        return location

    @staticmethod
    def count_location_appointments(db: Session, location_id: str) -> int:
        return (
            db.query(func.count(Appointment.id))
            .filter(Appointment.service_location_id == location_id)
            .scalar()
        )

    @staticmethod
    def delete_location(db: Session, location: ServiceLocation) -> None:
        db.delete(location)
        db.commit()
