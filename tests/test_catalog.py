from poolcare.models import Appointment, ServiceTask


def test_service_type_crud(client, admin_headers):
    created = client.post(
        "/service-types",
        json={"name": "Manutenção mensal", "duration_minutes": 90, "price": 250, "frequency": "monthly"},
        headers=admin_headers,
    )
    assert created.status_code == 201
    type_id = created.json()["id"]

    client.post(
        "/service-types",
        json={"name": "Limpeza avulsa", "duration_minutes": 120, "price": 300, "frequency": "one_time"},
        headers=admin_headers,
    )

    names = [t["name"] for t in client.get("/service-types", headers=admin_headers).json()]
    assert names == ["Limpeza avulsa", "Manutenção mensal"]

    updated = client.patch(f"/service-types/{type_id}", json={"price": 275.5}, headers=admin_headers)
    assert updated.json()["price"] == 275.5
    assert updated.json()["frequency"] == "monthly"

    assert client.delete(f"/service-types/{type_id}", headers=admin_headers).status_code == 400
    assert client.delete(f"/service-types/{type_id}", params={"confirm": True}, headers=admin_headers).status_code == 200
    assert client.get(f"/service-types/{type_id}", headers=admin_headers).status_code == 404


def test_catalog_validation(client, admin_headers):
    zero_duration = {"name": "X", "duration_minutes": 0, "price": 10, "frequency": "weekly"}
    assert client.post("/service-types", json=zero_duration, headers=admin_headers).status_code == 422

    negative_price = {"name": "X", "duration_minutes": 10, "price": -1}
    assert client.post("/service-tasks", json=negative_price, headers=admin_headers).status_code == 422

    bad_frequency = {"name": "X", "duration_minutes": 10, "price": 1, "frequency": "daily"}
    assert client.post("/service-types", json=bad_frequency, headers=admin_headers).status_code == 422


def test_service_type_in_use_cannot_be_deleted(client, admin_headers, make_catalog, make_client, cleaner, make_appointment):
    service_type, _ = make_catalog()
    make_appointment(make_client(), cleaner, service_type_id=service_type.id)

    response = client.delete(f"/service-types/{service_type.id}", params={"confirm": True}, headers=admin_headers)
    assert response.status_code == 409


def test_deleting_task_unlinks_it_from_appointments(
    client, admin_headers, db, make_catalog, make_client, cleaner, make_appointment
):
    _, task = make_catalog()
    appointment = make_appointment(make_client(), cleaner)
    appointment.tasks = [task]
    db.commit()

    response = client.delete(f"/service-tasks/{task.id}", params={"confirm": True}, headers=admin_headers)
    assert response.status_code == 200

    db.expire_all()
    assert db.query(ServiceTask).count() == 0
    assert db.query(Appointment).filter(Appointment.id == appointment.id).one().tasks == []


def test_cleaners_read_catalog_but_cannot_change_it(client, cleaner_headers, make_catalog):
    make_catalog()

    assert client.get("/service-tasks", headers=cleaner_headers).status_code == 200
    assert client.get("/service-types", headers=cleaner_headers).status_code == 200
    response = client.post(
        "/service-tasks", json={"name": "Escovação", "duration_minutes": 15, "price": 0}, headers=cleaner_headers
    )
    assert response.status_code == 403
