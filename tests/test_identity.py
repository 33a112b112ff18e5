"""
Tests for registration, login, bearer tokens and profile updates.
"""
import pytest

from app.core.exceptions import Forbidden, Unauthorized
from app.core.security import create_access_token
from app.models import User, UserRole
from app.services.identity import authorize, coerce_role
from tests.conftest import PASSWORD, auth, login, register


class TestRoleRules:

    @pytest.mark.parametrize(
        "requested, expected",
        [
            ("student", UserRole.STUDENT),
            ("faculty", UserRole.FACULTY),
            ("staff", UserRole.STUDENT),
            ("admin", UserRole.STUDENT),
            (None, UserRole.STUDENT),
            ("Faculty", UserRole.STUDENT),
            (7, UserRole.STUDENT),
            (True, UserRole.STUDENT),
            ({"role": "faculty"}, UserRole.STUDENT),
        ],
    )
    def test_coerce_role(self, requested, expected):
        assert coerce_role(requested) == expected

    def test_authorize_without_user(self):
        with pytest.raises(Unauthorized):
            authorize(None, [UserRole.STAFF])

    def test_authorize_wrong_role(self):
        user = User(id=1, name="S", email="s@x", role=UserRole.STUDENT)
        with pytest.raises(Forbidden):
            authorize(user, [UserRole.STAFF, UserRole.ADMIN])

    def test_authorize_allowed_role(self):
        user = User(id=1, name="A", email="a@x", role=UserRole.ADMIN)
        assert authorize(user, [UserRole.STAFF, UserRole.ADMIN]) is user


class TestRegister:

    async def test_register_student(self, client):
        data = await register(client, "new@campus.edu", "student", name="New")

        assert data["email"] == "new@campus.edu"
        assert data["role"] == "student"
        assert "password" not in data
        assert "password_hash" not in data

    async def test_register_faculty_keeps_role(self, client):
        data = await register(client, "prof@campus.edu", "faculty")
        assert data["role"] == "faculty"

    async def test_admin_request_is_stored_as_student(self, client):
        data = await register(client, "sneaky@campus.edu", "admin")
        assert data["role"] == "student"

    @pytest.mark.parametrize("role", [7, True, {}, ["faculty"]])
    async def test_non_string_role_is_stored_as_student(self, client, role):
        response = await client.post(
            "/api/auth/register",
            json={"name": "Odd", "email": "odd@campus.edu", "password": PASSWORD, "role": role},
        )

        assert response.status_code == 201
        assert response.json()["data"]["role"] == "student"

    async def test_duplicate_email_conflicts(self, client):
        await register(client, "dup@campus.edu")

        response = await client.post(
            "/api/auth/register",
            json={"name": "Again", "email": "dup@campus.edu", "password": "other"},
        )

        assert response.status_code == 409
        assert response.json() == {"success": False, "error": "Email already in use"}

    @pytest.mark.parametrize(
        "body",
        [
            {"email": "a@campus.edu", "password": "x"},
            {"name": "A", "password": "x"},
            {"name": "A", "email": "a@campus.edu"},
            {"name": "", "email": "a@campus.edu", "password": "x"},
        ],
    )
    async def test_missing_fields(self, client, body):
        response = await client.post("/api/auth/register", json=body)

        assert response.status_code == 400
        assert response.json()["success"] is False


class TestLogin:

    async def test_login_returns_token_and_user(self, client):
        await register(client, "me@campus.edu", "faculty", name="Me")

        response = await client.post(
            "/api/auth/login", json={"email": "me@campus.edu", "password": PASSWORD}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["token"]
        assert data["user"]["role"] == "faculty"
        assert data["user"]["name"] == "Me"

    async def test_unknown_email_and_wrong_password_fail_identically(self, client):
        await register(client, "me@campus.edu")

        wrong_password = await client.post(
            "/api/auth/login", json={"email": "me@campus.edu", "password": "nope"}
        )
        unknown_email = await client.post(
            "/api/auth/login", json={"email": "ghost@campus.edu", "password": "nope"}
        )

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json()
        assert wrong_password.json()["error"] == "Invalid credentials"

    async def test_missing_credentials(self, client):
        response = await client.post("/api/auth/login", json={"email": "me@campus.edu"})
        assert response.status_code == 400


class TestBearerToken:

    async def test_me_requires_token(self, client):
        response = await client.get("/api/auth/me")
        assert response.status_code == 401

    async def test_garbage_token(self, client):
        response = await client.get("/api/auth/me", headers=auth("not-a-jwt"))
        assert response.status_code == 401

    async def test_token_signed_with_other_secret(self, client, settings):
        user = await register(client, "me@campus.edu")
        forged = create_access_token(
            {"id": user["id"], "role": "admin"},
            settings.model_copy(update={"jwt_secret": "someone-else"}),
        )

        response = await client.get("/api/auth/me", headers=auth(forged))

        assert response.status_code == 401

    async def test_expired_token(self, client, settings):
        user = await register(client, "me@campus.edu")
        expired = create_access_token(
            {"id": user["id"], "role": "student"},
            settings.model_copy(update={"token_expire_minutes": -1}),
        )

        response = await client.get("/api/auth/me", headers=auth(expired))

        assert response.status_code == 401

    async def test_me_reads_current_row(self, client, student_token):
        response = await client.get("/api/auth/me", headers=auth(student_token))

        assert response.status_code == 200
        assert response.json()["data"]["email"] == "student@campus.edu"


class TestProfile:

    async def test_update_profile(self, client, student_token):
        response = await client.put(
            "/api/auth/me",
            headers=auth(student_token),
            json={"name": "Samantha", "email": "sam@campus.edu", "phone": "555-0101"},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Samantha"
        assert data["phone"] == "555-0101"

        # The old token still resolves to the same user
        me = await client.get("/api/auth/me", headers=auth(student_token))
        assert me.json()["data"]["email"] == "sam@campus.edu"
        assert await login(client, "sam@campus.edu")

    async def test_email_owned_by_someone_else(self, client, student_token, faculty_token):
        response = await client.put(
            "/api/auth/me",
            headers=auth(student_token),
            json={"name": "Sam", "email": "faculty@campus.edu"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Email already in use"

    async def test_name_required(self, client, student_token):
        response = await client.put(
            "/api/auth/me",
            headers=auth(student_token),
            json={"name": "", "email": "student@campus.edu"},
        )
        assert response.status_code == 400
