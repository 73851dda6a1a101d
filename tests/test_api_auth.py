"""
API tests for registration, login and the current account.
"""

from datetime import timedelta

from vetmarket.models import UserRole
from vetmarket.utils.datetime_utils import get_current_utc

from conftest import TEST_PASSWORD


class TestRegister:
    async def test_register_with_display_role(self, client):
        response = await client.post(
            "/api/auth/register",
            json={
                "email": "Dr.New@Example.com",
                "password": "secret123",
                "role": "Mobile Vet Provider",
                "name": "Dr. New",
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "User registered successfully"
        assert body["data"]["token"]
        user = body["data"]["user"]
        assert user["email"] == "dr.new@example.com"
        assert user["role"] == "MVSProvider"
        assert user["isVerified"] is False
        assert "passwordHash" not in user

    async def test_missing_fields(self, client):
        response = await client.post("/api/auth/register", json={"email": "a@example.com"})

        assert response.status_code == 400
        assert response.json()["message"] == "Please provide email, password and role"

    async def test_short_password(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"email": "a@example.com", "password": "123", "role": "Pet Owner"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Validation failed"
        assert "password" in body["error"]["details"]["validation_errors"]

    async def test_unknown_role(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"email": "a@example.com", "password": "secret123", "role": "Groomer"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid role: Groomer"

    async def test_admin_cannot_self_register(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"email": "a@example.com", "password": "secret123", "role": "Admin"},
        )
        assert response.status_code == 400

    async def test_duplicate_email(self, client, pet_owner):
        response = await client.post(
            "/api/auth/register",
            json={"email": pet_owner.email.upper(), "password": "secret123", "role": "Pet Owner"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "User already exists"


class TestLogin:
    async def test_login(self, client, provider):
        response = await client.post(
            "/api/auth/login", json={"email": provider.email, "password": TEST_PASSWORD}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["user"]["id"] == str(provider.id)

        me = await client.get(
            "/api/auth/me", headers={"Authorization": f"Bearer {data['token']}"}
        )
        assert me.json()["data"]["email"] == provider.email

    async def test_wrong_password(self, client, provider):
        response = await client.post(
            "/api/auth/login", json={"email": provider.email, "password": "nope-nope"}
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"

    async def test_banned_user_cannot_login(self, client, async_session, user_factory):
        user = await user_factory.create(async_session, is_banned=True, ban_reason="Spam")

        response = await client.post(
            "/api/auth/login", json={"email": user.email, "password": TEST_PASSWORD}
        )

        assert response.status_code == 403
        assert response.json()["message"] == "Account is banned"


class TestProtect:
    async def test_me(self, client, pet_owner, auth_headers):
        response = await client.get("/api/auth/me", headers=auth_headers(pet_owner))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["role"] == "PetOwner"
        assert data["name"] == "Pat Owner"

    async def test_no_token(self, client):
        response = await client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json()["message"] == "Not authorized, no token"

    async def test_garbage_token(self, client):
        response = await client.get("/api/auth/me", headers={"Authorization": "Bearer abc"})
        assert response.status_code == 401

    async def test_expired_token(self, client, pet_owner, auth_headers):
        headers = auth_headers(
            pet_owner, expires_minutes=1, now=get_current_utc() - timedelta(hours=2)
        )
        response = await client.get("/api/auth/me", headers=headers)
        assert response.status_code == 401

    async def test_banned_user_rejected(self, client, async_session, user_factory, auth_headers):
        user = await user_factory.create(async_session, is_banned=True)

        response = await client.get("/api/auth/me", headers=auth_headers(user))
        assert response.status_code == 403

    async def test_idle_session_rejected(self, client, async_session, user_factory, auth_headers):
        user = await user_factory.create(
            async_session,
            session_timeout_minutes=30,
            last_activity=get_current_utc() - timedelta(minutes=45),
        )

        response = await client.get("/api/auth/me", headers=auth_headers(user))

        assert response.status_code == 401
        assert response.json()["message"] == "Session expired due to inactivity"

    async def test_role_gate(self, client, pet_owner, auth_headers):
        response = await client.get("/api/admin/users", headers=auth_headers(pet_owner))

        assert response.status_code == 403
        body = response.json()
        assert body["error"]["details"]["required_roles"] == [UserRole.ADMIN.value]
