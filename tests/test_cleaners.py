from poolcare.auth import verify_password
from poolcare.models import Cleaner

CLEANER_PAYLOAD = {
    "name": "João Silva",
    "email": "joao@poolcare.com",
    "personal_phone": "(11) 98888-7777",
    "company_phone": "",
    "password": "piscina2024",
    "confirm_password": "piscina2024",
    "available_days": ["sexta", "segunda", "quarta"],
    "work_start_time": "08:00",
    "work_end_time": "",
    "service_areas": ["Zona Sul", "Centro"],
    "has_vehicle": True,
    "vehicle_type": "Moto",
}


def test_create_cleaner(client, admin_headers, db):
    response = client.post("/cleaners", json=CLEANER_PAYLOAD, headers=admin_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["personal_phone"] == "11988887777"
    assert data["company_phone"] is None
    assert data["work_start_time"] == "08:00"
    assert data["work_end_time"] is None
    assert data["available_days"] == ["segunda", "quarta", "sexta"]
    assert data["role"] == "cleaner"
    assert "password_hash" not in data

    stored = db.query(Cleaner).filter(Cleaner.id == data["id"]).one()
    assert verify_password("piscina2024", stored.password_hash)


def test_duplicate_email_conflicts(client, admin_headers, cleaner):
    payload = {**CLEANER_PAYLOAD, "email": cleaner.email.upper()}
    response = client.post("/cleaners", json=payload, headers=admin_headers)

    assert response.status_code == 409
    assert response.json()["detail"] == "Email already registered"


def test_password_rules(client, admin_headers):
    short = {**CLEANER_PAYLOAD, "password": "curta", "confirm_password": "curta"}
    assert client.post("/cleaners", json=short, headers=admin_headers).status_code == 422

    mismatch = {**CLEANER_PAYLOAD, "confirm_password": "outra-senha"}
    assert client.post("/cleaners", json=mismatch, headers=admin_headers).status_code == 422

    missing = {k: v for k, v in CLEANER_PAYLOAD.items() if k != "password"}
    assert client.post("/cleaners", json=missing, headers=admin_headers).status_code == 422


def test_availability_values_are_checked(client, admin_headers):
    bad_area = {**CLEANER_PAYLOAD, "service_areas": ["Zona Rural"]}
    assert client.post("/cleaners", json=bad_area, headers=admin_headers).status_code == 422

    bad_day = {**CLEANER_PAYLOAD, "available_days": ["monday"]}
    assert client.post("/cleaners", json=bad_day, headers=admin_headers).status_code == 422

    bad_time = {**CLEANER_PAYLOAD, "work_start_time": "8h"}
    assert client.post("/cleaners", json=bad_time, headers=admin_headers).status_code == 422


def test_availability_options(client, admin_headers, cleaner_headers):
    options = client.get("/cleaners/options", headers=admin_headers).json()

    assert options["service_areas"][0] == "Zona Sul"
    assert "Centro" in options["service_areas"]
    assert options["available_days"][0] == "domingo"
    assert len(options["available_days"]) == 7
    assert client.get("/cleaners/options", headers=cleaner_headers).status_code == 403


def test_emergency_phone_only_validated_when_given(client, admin_headers):
    payload = {**CLEANER_PAYLOAD, "emergency_contact_name": "Rosa", "emergency_contact_phone": ""}
    assert client.post("/cleaners", json=payload, headers=admin_headers).status_code == 201

    payload = {**CLEANER_PAYLOAD, "email": "outro@poolcare.com", "emergency_contact_phone": "123"}
    assert client.post("/cleaners", json=payload, headers=admin_headers).status_code == 422


def test_list_and_filter_cleaners(client, admin_headers, make_cleaner):
    make_cleaner(name="Zeca")
    make_cleaner(name="Bia", active=False)
    make_cleaner(name="Caio")

    names = [c["name"] for c in client.get("/cleaners", headers=admin_headers).json()]
    assert names == ["Bia", "Caio", "Zeca"]

    active = client.get("/cleaners", params={"active": True}, headers=admin_headers).json()
    assert [c["name"] for c in active] == ["Caio", "Zeca"]


def test_update_without_password_keeps_it(client, admin_headers, cleaner, db):
    original_hash = cleaner.password_hash

    response = client.patch(
        f"/cleaners/{cleaner.id}",
        json={"vehicle_type": "Carro", "active": False, "work_end_time": "18:00"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["active"] is False
    assert response.json()["work_end_time"] == "18:00"

    db.expire_all()
    assert db.query(Cleaner).filter(Cleaner.id == cleaner.id).one().password_hash == original_hash


def test_update_password(client, admin_headers, cleaner, db):
    response = client.patch(
        f"/cleaners/{cleaner.id}",
        json={"password": "nova-senha-123", "confirm_password": "nova-senha-123"},
        headers=admin_headers,
    )
    assert response.status_code == 200

    db.expire_all()
    stored = db.query(Cleaner).filter(Cleaner.id == cleaner.id).one()
    assert verify_password("nova-senha-123", stored.password_hash)


def test_update_to_taken_email(client, admin_headers, make_cleaner):
    first = make_cleaner()
    second = make_cleaner()

    response = client.patch(f"/cleaners/{second.id}", json={"email": first.email}, headers=admin_headers)
    assert response.status_code == 409


def test_missing_cleaner(client, admin_headers):
    assert client.get("/cleaners/nope", headers=admin_headers).status_code == 404


def test_cleaner_cannot_manage_cleaners(client, cleaner_headers):
    assert client.get("/cleaners", headers=cleaner_headers).status_code == 403
