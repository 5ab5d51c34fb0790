import pytest
from httpx import AsyncClient
from jose import jwt

from astrosocial.core.config import settings
from astrosocial.core.security import create_access_token

SIGNUP = {
    "username": "hubble",
    "email": "hubble@example.com",
    "password": "Telescope1",
    "firstname": "Edwin",
    "lastname": "Hubble",
}


@pytest.mark.asyncio
async def test_signup(client: AsyncClient):
    response = await client.post("/api/v1/auth/signup", json=SIGNUP)

    assert response.status_code == 201
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["username"] == "hubble"
    assert "password" not in body["user"]

    payload = jwt.decode(body["access_token"], settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    assert payload["sub"] == str(body["user"]["id"])
    assert payload["scopes"] == ["user"]


@pytest.mark.asyncio
async def test_signup_conflicts(client: AsyncClient, make_user):
    await make_user("hubble", email="edwin@example.com")

    same_username = await client.post("/api/v1/auth/signup", json={**SIGNUP, "username": "HUBBLE"})
    same_email = await client.post(
        "/api/v1/auth/signup",
        json={**SIGNUP, "username": "lemaitre", "email": "Edwin@example.com"}
    )

    assert same_username.status_code == 409
    assert same_username.json()["error_code"] == "USERNAME_TAKEN"
    assert same_email.status_code == 409
    assert same_email.json()["error_code"] == "EMAIL_ALREADY_REGISTERED"


@pytest.mark.asyncio
@pytest.mark.parametrize("override", [
    {"password": "short1"},
    {"password": "nodigitshere"},
    {"username": "no spaces"},
    {"email": "not-an-email"},
])
async def test_signup_validation(client: AsyncClient, override):
    response = await client.post("/api/v1/auth/signup", json={**SIGNUP, **override})

    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.parametrize("identifier", ["kepler", "kepler@example.com", "Kepler"])
async def test_login(client: AsyncClient, make_user, identifier):
    user = await make_user("kepler")

    response = await client.post(
        "/api/v1/auth/login",
        data={"username": identifier, "password": "Password123"}
    )

    assert response.status_code == 200
    assert response.json()["user"]["id"] == user.id

    me = await client.get(
        f"/api/v1/user/{user.id}",
        headers={"Authorization": f"Bearer {response.json()['access_token']}"}
    )
    assert me.status_code == 200


@pytest.mark.asyncio
async def test_admin_login_gets_admin_scope(client: AsyncClient, make_user):
    await make_user("root", is_admin=True)

    response = await client.post("/api/v1/auth/login", data={"username": "root", "password": "Password123"})

    payload = jwt.decode(response.json()["access_token"], settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    assert payload["scopes"] == ["user", "admin"]


@pytest.mark.asyncio
async def test_login_failures(client: AsyncClient, make_user):
    await make_user("kepler")
    await make_user("dormant", is_active=False)

    wrong_password = await client.post("/api/v1/auth/login", data={"username": "kepler", "password": "nope"})
    unknown_user = await client.post("/api/v1/auth/login", data={"username": "ghost", "password": "Password123"})
    inactive = await client.post("/api/v1/auth/login", data={"username": "dormant", "password": "Password123"})

    assert wrong_password.status_code == 401
    assert wrong_password.json()["error_code"] == "INVALID_CREDENTIALS"
    assert unknown_user.status_code == 401
    assert inactive.status_code == 403


@pytest.mark.asyncio
async def test_token_for_deleted_user_is_rejected(client: AsyncClient, make_user):
    token = create_access_token(12345, ["user"])

    response = await client.get("/api/v1/user/12345", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["error_code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_token_signed_with_other_key_is_rejected(client: AsyncClient, make_user):
    user = await make_user("kepler")
    forged = jwt.encode({"sub": str(user.id), "type": "access", "scopes": ["user"]}, "other-key", algorithm="HS256")

    response = await client.get(f"/api/v1/user/{user.id}", headers={"Authorization": f"Bearer {forged}"})

    assert response.status_code == 401
