"""
Shared test fixtures.

Provides: in-memory SQLite database per test, a TestClient, record factories
and bearer headers for an admin and a cleaner.
"""

import os

# Must be set before poolcare.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"

from datetime import timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from poolcare import rate_limiter  # noqa: E402
from poolcare.auth import create_access_token, hash_password  # noqa: E402
from poolcare.database import Base, SessionLocal, engine  # noqa: E402
from poolcare.main import app  # noqa: E402
from poolcare.models import (  # noqa: E402
    Appointment,
    Cleaner,
    Client,
    DashboardUser,
    ServiceLocation,
    ServiceTask,
    ServiceType,
)
from poolcare.shared.timeutils import utcnow  # noqa: E402

PASSWORD = "segredo123"


@pytest.fixture(autouse=True)
def reset_rate_limits():
    rate_limiter.memory_cache.clear()
    yield
    rate_limiter.memory_cache.clear()


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    app.dependency_overrides.clear()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_admin(db):
    def _make(email="admin@poolcare.com", role="admin", active=True):
        user = DashboardUser(
            email=email,
            name="Admin",
            role=role,
            password_hash=hash_password(PASSWORD),
            active=active,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_cleaner(db):
    counter = {"n": 0}

    def _make(name=None, email=None, active=True, **fields):
        counter["n"] += 1
        cleaner = Cleaner(
            name=name or f"Cleaner {counter['n']}",
            email=email or f"cleaner{counter['n']}@poolcare.com",
            personal_phone="11987654321",
            password_hash=hash_password(PASSWORD),
            active=active,
            **fields,
        )
        db.add(cleaner)
        db.commit()
        db.refresh(cleaner)
        return cleaner

    return _make


@pytest.fixture
def make_client(db):
    def _make(name="Maria Souza", latitude=-23.6, longitude=-46.66, with_location=True, **location_fields):
        client = Client(name=name, email="maria@example.com", phone="11912345678")
        if with_location:
            fields = {
                "street": "Avenida Ibirapuera",
                "street_number": "1000",
                "neighborhood": "Moema",
                "city": "São Paulo",
                "state": "São Paulo",
                "postal_code": "04029-000",
                "latitude": latitude,
                "longitude": longitude,
                "is_primary": True,
            }
            fields.update(location_fields)
            client.service_locations.append(ServiceLocation(**fields))
        db.add(client)
        db.commit()
        db.refresh(client)
        return client

    return _make


@pytest.fixture
def make_appointment(db):
    def _make(client, cleaner, scheduled_at=None, status="scheduled", **fields):
        appointment = Appointment(
            client_id=client.id,
            cleaner_id=cleaner.id,
            service_location_id=client.service_locations[0].id,
            scheduled_at=scheduled_at or utcnow(),
            status=status,
            **fields,
        )
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment

    return _make


@pytest.fixture
def make_catalog(db):
    def _make():
        service_type = ServiceType(name="Limpeza semanal", duration_minutes=60, price=180.0, frequency="weekly")
        task = ServiceTask(name="Aspiração", duration_minutes=20, price=0.0)
        db.add_all([service_type, task])
        db.commit()
        db.refresh(service_type)
        db.refresh(task)
        return service_type, task

    return _make


def bearer(principal, expires_delta=None):
    return {"Authorization": f"Bearer {create_access_token(principal, expires_delta)}"}


@pytest.fixture
def admin(make_admin):
    return make_admin()


@pytest.fixture
def admin_headers(admin):
    return bearer(admin)


@pytest.fixture
def cleaner(make_cleaner):
    return make_cleaner(name="Ana Lima", email="ana@poolcare.com")


@pytest.fixture
def cleaner_headers(cleaner):
    return bearer(cleaner)


@pytest.fixture
def expired_headers(admin):
    return bearer(admin, expires_delta=timedelta(minutes=-5))


@pytest.fixture
def headers_for():
    """Bearer headers for any principal: headers_for(cleaner)"""
    return bearer
