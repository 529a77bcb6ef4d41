import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_id():
    """Generate a UUID string primary key"""
    return str(uuid.uuid4())


APPOINTMENT_STATUSES = ("scheduled", "in_progress", "completed", "cancelled")
SERVICE_FREQUENCIES = ("weekly", "bi_weekly", "monthly", "one_time")
USER_ROLES = ("admin", "manager", "cleaner")


class DashboardUser(Base):
    """Back-office account (admins and managers)"""

    __tablename__ = "dashboard_users"

    id = Column(String(36), primary_key=True, default=generate_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    role = Column(String(20), default="manager", nullable=False)  # admin, manager, cleaner
    password_hash = Column(String(255), nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class Client(Base):
    __tablename__ = "clients"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False, index=True)
    email = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)
    cleaning_frequency = Column(String(50), nullable=True)
    referral_source = Column(String(100), nullable=True)  # how the client heard about us
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    service_locations = relationship(
        "ServiceLocation",
        back_populates="client",
        cascade="all, delete-orphan",
        order_by="ServiceLocation.created_at",
    )
    appointments = relationship("Appointment", back_populates="client")

    @property
    def primary_location(self):
        for location in self.service_locations:
            if location.is_primary:
                return location
        return None


class ServiceLocation(Base):
    """A client address with the pool details the cleaner needs on site"""

    __tablename__ = "service_locations"

    id = Column(String(36), primary_key=True, default=generate_id)
    client_id = Column(String(36), ForeignKey("clients.id"), nullable=False, index=True)

    # Address
    street = Column(String(255), nullable=True)
    street_number = Column(String(20), nullable=True)
    complement = Column(String(255), nullable=True)
    neighborhood = Column(String(255), nullable=True)
    city = Column(String(255), nullable=True)
    state = Column(String(100), nullable=True)
    postal_code = Column(String(9), nullable=True)  # CEP, NNNNN-NNN
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    address_validated = Column(Boolean, default=False, nullable=False)
    is_primary = Column(Boolean, default=False, nullable=False)

    # Access and pool details
    reference_point = Column(String(255), nullable=True)
    access_instructions = Column(Text, nullable=True)
    pool_type = Column(String(100), nullable=True)
    pool_size = Column(String(100), nullable=True)
    products_used = Column(Text, nullable=True)
    equipment = Column(Text, nullable=True)
    preferred_time = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    client = relationship("Client", back_populates="service_locations")
    appointments = relationship("Appointment", back_populates="service_location")

    @property
    def address_line(self) -> str:
        """street, number - neighborhood, city"""
        head = ", ".join(p for p in (self.street, self.street_number) if p)
        tail = ", ".join(p for p in (self.neighborhood, self.city) if p)
        if head and tail:
            return f"{head} - {tail}"
        return head or tail

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class Cleaner(Base):
    __tablename__ = "cleaners"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    personal_phone = Column(String(20), nullable=True)
    company_phone = Column(String(20), nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    password_hash = Column(String(255), nullable=True)
    role = Column(String(20), default="cleaner", nullable=False)

    # Availability
    available_days = Column(JSON, default=list, nullable=False)  # ["segunda", "quarta", ...]
    work_start_time = Column(String(5), nullable=True)  # HH:MM
    work_end_time = Column(String(5), nullable=True)
    service_areas = Column(JSON, default=list, nullable=False)

    has_vehicle = Column(Boolean, default=False, nullable=False)
    vehicle_type = Column(String(100), nullable=True)
    address = Column(String(500), nullable=True)
    emergency_contact_name = Column(String(255), nullable=True)
    emergency_contact_phone = Column(String(20), nullable=True)
    employee_code = Column(String(50), nullable=True)
    hire_date = Column(Date, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    appointments = relationship("Appointment", back_populates="cleaner")


class ServiceType(Base):
    __tablename__ = "service_types"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    duration_minutes = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)
    frequency = Column(String(20), nullable=False)  # weekly, bi_weekly, monthly, one_time
    created_at = Column(DateTime, server_default=func.now())


class ServiceTask(Base):
    __tablename__ = "service_tasks"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    duration_minutes = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)
    created_at = Column(DateTime, server_default=func.now())


appointment_service_tasks = Table(
    "appointment_service_tasks",
    Base.metadata,
    Column("appointment_id", String(36), ForeignKey("appointments.id", ondelete="CASCADE"), primary_key=True),
    Column("service_task_id", String(36), ForeignKey("service_tasks.id", ondelete="CASCADE"), primary_key=True),
)


class Appointment(Base):
    """A visit linking client, cleaner and location.

    Status moves freely between scheduled, in_progress, completed and
    cancelled; there is no overlap or double-booking check.
    """

    __tablename__ = "appointments"

    id = Column(String(36), primary_key=True, default=generate_id)
    client_id = Column(String(36), ForeignKey("clients.id"), nullable=False, index=True)
    cleaner_id = Column(String(36), ForeignKey("cleaners.id"), nullable=False, index=True)
    service_location_id = Column(String(36), ForeignKey("service_locations.id"), nullable=False)
    service_type_id = Column(String(36), ForeignKey("service_types.id"), nullable=True)

    scheduled_at = Column(DateTime, nullable=False, index=True)  # naive UTC
    status = Column(String(20), default="scheduled", nullable=False, index=True)
    description = Column(Text, default="", nullable=False)
    additional_notes = Column(Text, nullable=True)
    frequency = Column(String(20), nullable=True)

    # Execution timestamps, stamped on status changes
    started_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True, index=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    client = relationship("Client", back_populates="appointments")
    cleaner = relationship("Cleaner", back_populates="appointments")
    service_location = relationship("ServiceLocation", back_populates="appointments")
    service_type = relationship("ServiceType")
    tasks = relationship("ServiceTask", secondary=appointment_service_tasks, order_by="ServiceTask.name")
