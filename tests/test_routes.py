"""
HTTP surface tests — status codes and response shapes.
"""

import pytest
from fastapi.testclient import TestClient

from auth.engine import CredentialEngine
from auth.errors import ConfigurationError, StorageError
from auth.validation import (
    INVALID_CHARACTERS,
    INVALID_EMAIL,
    NAME_REQUIRED,
    PASSWORD_TOO_SHORT,
)

ANA = {"name": "Ana", "email": "ana@example.com", "password": "longenough1"}


class TestRegisterRoute:
    def test_register_success(self, client):
        resp = client.post("/register", json=ANA)
        assert resp.status_code == 201
        body = resp.json()
        assert body["message"] == "User registered successfully"
        assert "password" not in body and "password_hash" not in body

    def test_validation_errors_listed_per_field(self, client):
        resp = client.post(
            "/register",
            json={"name": "", "email": "not-an-email", "password": "short1"},
        )
        assert resp.status_code == 400
        assert resp.json()["fields"] == {
            "name": [NAME_REQUIRED],
            "email": [INVALID_EMAIL],
            "password": [PASSWORD_TOO_SHORT],
        }
        assert "short1" not in resp.text

    def test_duplicate_email_conflict(self, client):
        assert client.post("/register", json=ANA).status_code == 201
        resp = client.post("/register", json={**ANA, "name": "Ana Two"})
        assert resp.status_code == 409
        assert resp.json() == {"error": "Email already registered"}

    def test_non_object_body_is_client_error(self, client):
        resp = client.post("/register", json=["not", "an", "object"])
        assert resp.status_code == 400

    def test_storage_failure_is_generic(self, client, monkeypatch):
        async def boom(self, session, data):
            raise StorageError()

        monkeypatch.setattr(CredentialEngine, "register", boom)
        resp = client.post("/register", json=ANA)
        assert resp.status_code == 500
        assert resp.json() == {"error": "Something went wrong"}

    def test_unencodable_password_is_field_error(self, client):
        body = '{"name": "Ana", "email": "ana@example.com", "password": "\\ud800longenough"}'
        resp = client.post(
            "/register", content=body, headers={"Content-Type": "application/json"}
        )
        assert resp.status_code == 400
        assert resp.json()["fields"] == {"password": [INVALID_CHARACTERS]}


class TestLoginRoute:
    def test_login_success(self, client):
        client.post("/register", json=ANA)
        resp = client.post("/login", json={"email": ANA["email"], "password": ANA["password"]})
        assert resp.status_code == 200
        assert resp.json() == {"message": "Login successful"}

    def test_wrong_password_and_unknown_email_are_indistinguishable(self, client):
        client.post("/register", json=ANA)
        wrong = client.post("/login", json={"email": ANA["email"], "password": "wrong-password"})
        unknown = client.post("/login", json={"email": "nobody@example.com", "password": "x"})
        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json() == unknown.json()

    def test_unencodable_credentials_get_the_uniform_401(self, client):
        client.post("/register", json=ANA)
        expected = client.post(
            "/login", json={"email": "nobody@example.com", "password": "x"}
        ).json()
        for body in (
            '{"email": "nobody@example.com", "password": "\\ud800x"}',
            '{"email": "ana@example.com", "password": "\\ud800x"}',
            '{"email": "an\\ud800a@example.com", "password": "longenough1"}',
        ):
            resp = client.post(
                "/login", content=body, headers={"Content-Type": "application/json"}
            )
            assert resp.status_code == 401
            assert resp.json() == expected

    def test_missing_password_is_client_error_without_echo(self, client):
        resp = client.post("/login", json={"email": "secret-holder@example.com"})
        assert resp.status_code == 400
        assert "password" in resp.json()["fields"]


class TestUserRoutes:
    def test_list_users_omits_hash(self, client):
        client.post("/register", json=ANA)
        client.post("/register", json={**ANA, "name": "Bea", "email": "bea@example.com"})
        resp = client.get("/users")
        assert resp.status_code == 200
        users = resp.json()
        assert [u["name"] for u in users] == ["Ana", "Bea"]
        for user in users:
            assert set(user) == {"id", "name", "email"}
            assert "$argon2" not in str(user)

    def test_get_user_by_id(self, client):
        user_id = client.post("/register", json=ANA).json()["id"]
        resp = client.get(f"/users/{user_id}")
        assert resp.status_code == 200
        assert resp.json() == {"id": user_id, "name": "Ana", "email": "ana@example.com"}

    def test_get_missing_user_is_not_found(self, client):
        resp = client.get("/users/00000000-0000-4000-8000-000000000000")
        assert resp.status_code == 404
        assert resp.json() == {"error": "User not found"}

    def test_process_time_header(self, client):
        assert "X-Process-Time" in client.get("/users").headers


class TestStartup:
    def test_bad_hashing_parameters_abort_startup(self, settings):
        from main import create_app

        bad = settings.model_copy(update={"argon2_memory_cost": 1, "argon2_parallelism": 4})
        with pytest.raises(ConfigurationError):
            with TestClient(create_app(bad)):
                pass

    def test_unreachable_store_aborts_startup(self, settings, tmp_path):
        from main import create_app

        missing = tmp_path / "no-such-dir" / "credentials.db"
        bad = settings.model_copy(update={"database_url": f"sqlite+aiosqlite:///{missing}"})
        with pytest.raises(ConfigurationError):
            with TestClient(create_app(bad)):
                pass
