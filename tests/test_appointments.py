from datetime import datetime, timedelta

import pytest
from fastapi import HTTPException

from poolcare.domain.appointments.service import apply_status, resolve_date_range
from poolcare.models import Appointment
from poolcare.shared.timeutils import utcnow


@pytest.fixture
def customer(make_client):
    return make_client()


def appointment_payload(customer, cleaner, **overrides):
    payload = {
        "client_id": customer.id,
        "cleaner_id": cleaner.id,
        "scheduled_at": "2024-05-10T10:00:00-03:00",
        "description": "Limpeza completa",
    }
    payload.update(overrides)
    return payload


def ids(response):
    return [a["id"] for a in response.json()]


# ==========================================
# Create / replace / delete
# ==========================================


def test_create_defaults_to_primary_location(client, admin_headers, customer, cleaner, make_catalog):
    service_type, task = make_catalog()
    payload = appointment_payload(
        customer, cleaner, service_type_id=service_type.id, service_task_ids=[task.id, task.id]
    )

    response = client.post("/appointments", json=payload, headers=admin_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["service_location_id"] == customer.service_locations[0].id
    assert data["scheduled_at"] == "2024-05-10T13:00:00"
    assert data["status"] == "scheduled"
    assert data["status_label"] == "Scheduled"
    assert data["client"]["name"] == "Maria Souza"
    assert data["cleaner"]["name"] == "Ana Lima"
    assert data["service_type"]["name"] == "Limpeza semanal"
    assert [t["name"] for t in data["tasks"]] == ["Aspiração"]
    assert data["address_line"] == "Avenida Ibirapuera, 1000 - Moema, São Paulo"
    assert data["marker"]["latitude"] == -23.6
    assert data["marker"]["title"] == "Maria Souza"


def test_past_dates_and_overlaps_are_accepted(client, admin_headers, customer, cleaner):
    payload = appointment_payload(customer, cleaner, scheduled_at="2020-01-01T09:00:00")

    assert client.post("/appointments", json=payload, headers=admin_headers).status_code == 201
    assert client.post("/appointments", json=payload, headers=admin_headers).status_code == 201


def test_create_without_primary_location(client, admin_headers, make_client, cleaner):
    customer = make_client(with_location=False)

    response = client.post("/appointments", json=appointment_payload(customer, cleaner), headers=admin_headers)
    assert response.status_code == 400


def test_create_with_unknown_references(client, admin_headers, customer, cleaner):
    for field, value in (
        ("client_id", "missing"),
        ("cleaner_id", "missing"),
        ("service_location_id", "missing"),
        ("service_type_id", "missing"),
        ("service_task_ids", ["missing"]),
    ):
        payload = appointment_payload(customer, cleaner, **{field: value})
        response = client.post("/appointments", json=payload, headers=admin_headers)
        assert response.status_code == 400, field


def test_create_rejects_location_of_another_client(client, admin_headers, customer, make_client, cleaner):
    other = make_client(name="Joao Pereira", street="Rua Outra")
    payload = appointment_payload(customer, cleaner, service_location_id=other.service_locations[0].id)

    response = client.post("/appointments", json=payload, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Service location does not belong to this client"


def test_create_validation(client, admin_headers, customer, cleaner):
    bad_status = appointment_payload(customer, cleaner, status="done")
    assert client.post("/appointments", json=bad_status, headers=admin_headers).status_code == 422

    no_date = appointment_payload(customer, cleaner)
    del no_date["scheduled_at"]
    assert client.post("/appointments", json=no_date, headers=admin_headers).status_code == 422


def test_create_completed_stamps_times(client, admin_headers, customer, cleaner):
    payload = appointment_payload(customer, cleaner, status="completed")

    data = client.post("/appointments", json=payload, headers=admin_headers).json()
    assert data["started_at"] is not None
    assert data["completed_at"] is not None


def test_replace_appointment(
    client, admin_headers, db, customer, cleaner, make_cleaner, make_appointment, make_catalog
):
    _, task = make_catalog()
    other = make_cleaner(name="Bruno Reis")
    appointment = make_appointment(customer, cleaner, additional_notes="Cachorro bravo")
    appointment.tasks = [task]
    db.commit()

    payload = appointment_payload(customer, other, scheduled_at="2024-06-01T08:00:00", service_task_ids=[])
    response = client.put(f"/appointments/{appointment.id}", json=payload, headers=admin_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["cleaner"]["name"] == "Bruno Reis"
    assert data["scheduled_at"] == "2024-06-01T08:00:00"
    assert data["additional_notes"] is None
    assert data["tasks"] == []


def test_delete_requires_confirmation(client, admin_headers, customer, cleaner, make_appointment, db):
    appointment = make_appointment(customer, cleaner)

    assert client.delete(f"/appointments/{appointment.id}", headers=admin_headers).status_code == 400
    response = client.delete(f"/appointments/{appointment.id}", params={"confirm": True}, headers=admin_headers)
    assert response.status_code == 200

    db.expire_all()
    assert db.query(Appointment).count() == 0
    assert client.get(f"/appointments/{appointment.id}", headers=admin_headers).status_code == 404


# ==========================================
# Listing and filters
# ==========================================


def test_list_is_ordered_by_schedule(client, admin_headers, customer, cleaner, make_appointment):
    late = make_appointment(customer, cleaner, scheduled_at=datetime(2024, 5, 10, 18, 0))
    early = make_appointment(customer, cleaner, scheduled_at=datetime(2024, 5, 10, 11, 0))

    assert ids(client.get("/appointments", headers=admin_headers)) == [early.id, late.id]


def test_today_and_week_ranges(client, admin_headers, customer, cleaner, make_appointment):
    now = utcnow()
    today = make_appointment(customer, cleaner, scheduled_at=now)
    last_week = make_appointment(customer, cleaner, scheduled_at=now - timedelta(days=7))
    make_appointment(customer, cleaner, scheduled_at=now - timedelta(days=30))

    assert ids(client.get("/appointments", params={"date_range": "today"}, headers=admin_headers)) == [today.id]
    assert ids(client.get("/appointments", params={"date_range": "week"}, headers=admin_headers)) == [today.id]
    assert ids(client.get("/appointments", params={"date_range": "lastWeek"}, headers=admin_headers)) == [
        last_week.id
    ]
    assert len(client.get("/appointments", headers=admin_headers).json()) == 3


def test_custom_range_uses_local_days(client, admin_headers, customer, cleaner, make_appointment):
    morning = make_appointment(customer, cleaner, scheduled_at=datetime(2024, 5, 10, 13, 0))
    # 23:00 local on the 10th
    late_evening = make_appointment(customer, cleaner, scheduled_at=datetime(2024, 5, 11, 2, 0))
    make_appointment(customer, cleaner, scheduled_at=datetime(2024, 5, 11, 13, 0))

    params = {"date_range": "custom", "custom_start": "2024-05-10", "custom_end": "2024-05-10"}
    assert ids(client.get("/appointments", params=params, headers=admin_headers)) == [morning.id, late_evening.id]

    # Custom without both ends does not filter
    params = {"date_range": "custom", "custom_start": "2024-05-10"}
    assert len(client.get("/appointments", params=params, headers=admin_headers).json()) == 3


def test_invalid_date_range(client, admin_headers):
    response = client.get("/appointments", params={"date_range": "month"}, headers=admin_headers)
    assert response.status_code == 400


def test_status_cleaner_and_client_filters(
    client, admin_headers, customer, make_client, cleaner, make_cleaner, make_appointment
):
    other_cleaner = make_cleaner()
    other_client = make_client(name="Pedro Alves")
    done = make_appointment(customer, cleaner, status="completed")
    theirs = make_appointment(other_client, other_cleaner)

    by_status = client.get("/appointments", params={"status": "completed"}, headers=admin_headers)
    assert ids(by_status) == [done.id]
    assert len(client.get("/appointments", params={"status": "all"}, headers=admin_headers).json()) == 2

    by_cleaner = client.get("/appointments", params={"cleaner_id": other_cleaner.id}, headers=admin_headers)
    assert ids(by_cleaner) == [theirs.id]

    by_client = client.get("/appointments", params={"client_id": customer.id}, headers=admin_headers)
    assert ids(by_client) == [done.id]


def test_search_by_client_name_and_address(client, admin_headers, make_client, cleaner, make_appointment):
    moema = make_appointment(make_client(name="Maria Souza"), cleaner)
    pinheiros = make_appointment(
        make_client(name="Pedro Alves", neighborhood="Pinheiros", street="Rua dos Pinheiros"), cleaner
    )

    assert ids(client.get("/appointments", params={"search": "pedro"}, headers=admin_headers)) == [pinheiros.id]
    assert ids(client.get("/appointments", params={"search": "MOEMA"}, headers=admin_headers)) == [moema.id]
    assert client.get("/appointments", params={"search": "Recife"}, headers=admin_headers).json() == []


def test_search_wildcards_match_literally(client, admin_headers, make_client, cleaner, make_appointment):
    make_appointment(make_client(name="Maria Souza"), cleaner)
    underscored = make_appointment(make_client(name="Condominio_Sol"), cleaner)

    assert ids(client.get("/appointments", params={"search": "_"}, headers=admin_headers)) == [underscored.id]
    assert client.get("/appointments", params={"search": "%"}, headers=admin_headers).json() == []


def test_missing_coordinates_means_no_marker(client, admin_headers, make_client, cleaner, make_appointment):
    appointment = make_appointment(make_client(latitude=None, longitude=None), cleaner)

    data = client.get(f"/appointments/{appointment.id}", headers=admin_headers).json()
    assert data["marker"] is None
    assert data["address_line"] == "Avenida Ibirapuera, 1000 - Moema, São Paulo"


# ==========================================
# Status workflow and cleaner access
# ==========================================


def test_status_transitions_stamp_times(client, admin_headers, customer, cleaner, make_appointment):
    appointment = make_appointment(customer, cleaner)
    url = f"/appointments/{appointment.id}/status"

    started = client.patch(url, json={"status": "in_progress"}, headers=admin_headers).json()
    assert started["status_label"] == "In progress"
    assert started["started_at"] is not None
    assert started["completed_at"] is None

    completed = client.patch(url, json={"status": "completed"}, headers=admin_headers).json()
    assert completed["started_at"] == started["started_at"]
    assert completed["completed_at"] is not None

    # Any transition is allowed and history is kept
    reopened = client.patch(url, json={"status": "scheduled"}, headers=admin_headers).json()
    assert reopened["status"] == "scheduled"
    assert reopened["completed_at"] == completed["completed_at"]


def test_repeated_status_keeps_completion_time(client, admin_headers, customer, cleaner, make_appointment):
    appointment = make_appointment(
        customer,
        cleaner,
        status="completed",
        started_at=datetime(2024, 5, 10, 13, 0),
        completed_at=datetime(2024, 5, 10, 15, 0),
    )

    response = client.patch(
        f"/appointments/{appointment.id}/status", json={"status": "completed"}, headers=admin_headers
    )

    assert response.status_code == 200
    assert response.json()["started_at"] == "2024-05-10T13:00:00"
    assert response.json()["completed_at"] == "2024-05-10T15:00:00"


def test_invalid_status_change(client, admin_headers, customer, cleaner, make_appointment):
    appointment = make_appointment(customer, cleaner)
    response = client.patch(f"/appointments/{appointment.id}/status", json={"status": "paused"}, headers=admin_headers)
    assert response.status_code == 422


def test_cleaner_sees_only_own_appointments(
    client, cleaner_headers, customer, cleaner, make_cleaner, make_appointment
):
    other = make_cleaner()
    mine = make_appointment(customer, cleaner)
    theirs = make_appointment(customer, other)

    listed = client.get("/appointments", params={"cleaner_id": other.id}, headers=cleaner_headers)
    assert ids(listed) == [mine.id]

    assert client.get(f"/appointments/{theirs.id}", headers=cleaner_headers).status_code == 404


def test_cleaner_changes_own_status_only(client, cleaner_headers, customer, cleaner, make_cleaner, make_appointment):
    other = make_cleaner()
    mine = make_appointment(customer, cleaner)
    theirs = make_appointment(customer, other)

    response = client.patch(f"/appointments/{mine.id}/status", json={"status": "in_progress"}, headers=cleaner_headers)
    assert response.status_code == 200

    response = client.patch(
        f"/appointments/{theirs.id}/status", json={"status": "in_progress"}, headers=cleaner_headers
    )
    assert response.status_code == 403
    assert response.json()["detail"] == "You can only update your own appointments"


def test_cleaner_cannot_create_or_delete(client, cleaner_headers, customer, cleaner, make_appointment):
    appointment = make_appointment(customer, cleaner)

    payload = appointment_payload(customer, cleaner)
    assert client.post("/appointments", json=payload, headers=cleaner_headers).status_code == 403
    response = client.delete(f"/appointments/{appointment.id}", params={"confirm": True}, headers=cleaner_headers)
    assert response.status_code == 403


# ==========================================
# Helpers
# ==========================================


def test_resolve_date_range_all():
    assert resolve_date_range("all") == (None, None)

    with pytest.raises(HTTPException) as exc:
        resolve_date_range("yesterday")
    assert exc.value.status_code == 400


def test_apply_status_completed_without_start():
    now = datetime(2024, 5, 10, 15, 0)
    appointment = Appointment(status="scheduled")

    apply_status(appointment, "completed", now=now)
    assert appointment.started_at == now
    assert appointment.completed_at == now

    apply_status(appointment, "in_progress", now=now + timedelta(hours=1))
    assert appointment.started_at == now
