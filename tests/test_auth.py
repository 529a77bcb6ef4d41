from datetime import datetime

from poolcare.auth import hash_password, verify_password
from poolcare.config import LOGIN_RPM
from poolcare.rate_limiter import check_rate_limit

from conftest import PASSWORD


def test_password_hashing():
    hashed = hash_password("segredo123")
    assert hashed != "segredo123"
    assert verify_password("segredo123", hashed)
    assert not verify_password("errado", hashed)
    assert not verify_password("segredo123", None)


def test_login_dashboard_user(client, admin):
    response = client.post("/auth/login", json={"email": "ADMIN@poolcare.com", "password": PASSWORD})

    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["kind"] == "dashboard"
    assert data["role"] == "admin"

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "admin@poolcare.com"


def test_login_cleaner(client, cleaner):
    response = client.post("/auth/login", json={"email": cleaner.email, "password": PASSWORD})

    assert response.status_code == 200
    assert response.json()["kind"] == "cleaner"
    assert response.json()["role"] == "cleaner"


def test_login_wrong_password(client, admin):
    response = client.post("/auth/login", json={"email": admin.email, "password": "wrong-password"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"


def test_login_inactive_cleaner(client, make_cleaner):
    inactive = make_cleaner(active=False)
    response = client.post("/auth/login", json={"email": inactive.email, "password": PASSWORD})
    assert response.status_code == 403


def test_login_is_rate_limited(client, admin):
    for _ in range(LOGIN_RPM):
        client.post("/auth/login", json={"email": admin.email, "password": "wrong-password"})

    response = client.post("/auth/login", json={"email": admin.email, "password": PASSWORD})
    assert response.status_code == 429
    assert "Retry-After" in response.headers


def test_missing_token_is_rejected(client, db):
    response = client.get("/auth/me")
    assert response.status_code in (401, 403)


def test_invalid_token(client, db):
    response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_expired_token(client, expired_headers):
    response = client.get("/auth/me", headers=expired_headers)
    assert response.status_code == 401
    assert response.headers.get("X-Token-Expired") == "true"


def test_token_of_deactivated_principal(client, db, cleaner, cleaner_headers):
    cleaner.active = False
    db.commit()

    response = client.get("/auth/me", headers=cleaner_headers)
    assert response.status_code == 403


def test_memory_rate_limit_window():
    key = f"test:{datetime.now().timestamp()}"
    assert check_rate_limit(key, limit=2, window_seconds=60)[0]
    assert check_rate_limit(key, limit=2, window_seconds=60)[0]
    allowed, count, ttl = check_rate_limit(key, limit=2, window_seconds=60)
    assert not allowed
    assert count == 2
    assert 0 < ttl <= 60
