import pytest

from aqua.core.roles import UserRole
PASSWORD = "secret123"


@pytest.mark.asyncio
async def test_login_returns_token_and_user(client, make_user):
    user = await make_user(UserRole.ServiceManager, email="desk@example.com")

    res = await client.post("/api/auth/login", json={"email": "desk@example.com", "password": PASSWORD})
    assert res.status_code == 200

    data = res.json()
    assert data["token_type"] == "bearer"
    assert data["access_token"]
    assert data["user"]["id"] == str(user.id)
    assert data["user"]["role"] == "service_manager"


@pytest.mark.asyncio
async def test_login_wrong_password(client, make_user):
    await make_user(UserRole.Admin, email="boss@example.com")
    res = await client.post("/api/auth/login", json={"email": "boss@example.com", "password": "nope"})
    assert res.status_code == 401


@pytest.mark.asyncio
async def test_inactive_user_cannot_login(client, make_user):
    await make_user(UserRole.Technician, email="gone@example.com", is_active=False)
    res = await client.post("/api/auth/login", json={"email": "gone@example.com", "password": PASSWORD})
    assert res.status_code == 401


@pytest.mark.asyncio
async def test_signup_creates_customer(client):
    payload = {
        "full_name": "Rita Flow",
        "email": "rita@example.com",
        "password": "pipes4life",
        "address": "4 Canal Street",
        "business_name": "Flow Bakery",
    }
    res = await client.post("/api/auth/signup", json=payload)
    assert res.status_code == 201
    body = res.json()
    assert body["user"]["role"] == "customer"

    headers = {"Authorization": f"Bearer {body['access_token']}"}
    me = await client.get("/api/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["email"] == "rita@example.com"

    # the customer record exists, so an empty scoped list (not an error) comes back
    services = await client.get("/api/services/", headers=headers)
    assert services.status_code == 200
    assert services.json() == []


@pytest.mark.asyncio
async def test_signup_duplicate_email(client, make_user):
    await make_user(UserRole.Customer, email="taken@example.com")
    res = await client.post(
        "/api/auth/signup",
        json={"full_name": "X", "email": "taken@example.com", "password": "whatever1"},
    )
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_me_requires_token(client):
    res = await client.get("/api/auth/me")
    assert res.status_code == 401

    res = await client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})
    assert res.status_code == 401
