# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
API integration tests for authentication endpoints
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.core.security import create_access_token, create_user_token
from app.models.user import User
from tests.factories import TEST_PASSWORD, make_user


@pytest.mark.api
class TestAuthAPI:
    """Test auth endpoints"""

    def test_register(self, test_client: TestClient):
        response = test_client.post(
            "/api/auth/register",
            json={
                "username": "newbie",
                "email": "newbie@example.com",
                "password": "secret1",
                "firstName": "New",
            },
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["token"]
        assert data["user"]["username"] == "newbie"
        assert data["user"]["firstName"] == "New"
        assert "passwordHash" not in data["user"]
        assert "password_hash" not in data["user"]

    def test_register_conflict(self, test_client: TestClient, test_user: User):
        response = test_client.post(
            "/api/auth/register",
            json={
                "username": "testuser",
                "email": "another@example.com",
                "password": "secret1",
            },
        )

        assert response.status_code == 409

    @pytest.mark.parametrize(
        "body",
        [
            {"username": "ab", "email": "a@example.com", "password": "secret1"},
            {"username": "bad name", "email": "a@example.com", "password": "secret1"},
            {"username": "valid", "email": "not-an-email", "password": "secret1"},
            {"username": "valid", "email": "a@example.com", "password": "short"},
        ],
    )
    def test_register_validation(self, test_client: TestClient, body: dict):
        response = test_client.post("/api/auth/register", json=body)

        assert response.status_code == 400

    def test_login(self, test_client: TestClient, test_user: User):
        response = test_client.post(
            "/api/auth/login",
            json={"email": "test@example.com", "password": TEST_PASSWORD},
        )

        assert response.status_code == 200
        token = response.json()["data"]["token"]
        verify = test_client.post(
            "/api/auth/verify", headers={"Authorization": f"Bearer {token}"}
        )
        assert verify.json()["data"]["id"] == test_user.id

    def test_login_wrong_password(self, test_client: TestClient, test_user: User):
        response = test_client.post(
            "/api/auth/login",
            json={"email": "test@example.com", "password": "wrong-password"},
        )

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid email or password"

    def test_login_deactivated(self, test_client: TestClient, test_db: Session):
        make_user(test_db, "sleepy", "sleepy@example.com", is_active=False)

        response = test_client.post(
            "/api/auth/login",
            json={"email": "sleepy@example.com", "password": TEST_PASSWORD},
        )

        assert response.status_code == 401
        assert "deactivated" in response.json()["error"]

    def test_verify_with_invalid_token(self, test_client: TestClient):
        response = test_client.post(
            "/api/auth/verify", headers={"Authorization": "Bearer not-a-token"}
        )

        assert response.status_code == 401
        assert response.json()["error"] == "Access denied. Invalid token."
        assert response.headers["www-authenticate"] == "Bearer"

    def test_verify_with_expired_token(self, test_client: TestClient, test_user: User):
        token = create_access_token({"sub": str(test_user.id)}, expires_delta=-1)

        response = test_client.post(
            "/api/auth/verify", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401
        assert response.json()["error"] == "Access denied. Token expired."

    def test_non_bearer_header_is_missing_token(self, test_client: TestClient):
        response = test_client.get(
            "/api/tasks", headers={"Authorization": "Basic dXNlcjpwYXNz"}
        )

        assert response.status_code == 401
        assert response.json()["error"] == "Access denied. No token provided."

    def test_refresh_accepts_expired_token(
        self, test_client: TestClient, test_user: User
    ):
        expired = create_access_token({"sub": str(test_user.id)}, expires_delta=-1)

        response = test_client.post(
            "/api/auth/refresh", headers={"Authorization": f"Bearer {expired}"}
        )

        assert response.status_code == 200
        fresh = response.json()["data"]["token"]
        verify = test_client.post(
            "/api/auth/verify", headers={"Authorization": f"Bearer {fresh}"}
        )
        assert verify.status_code == 200

    def test_refresh_rejects_deactivated_user(
        self, test_client: TestClient, test_db: Session
    ):
        user = make_user(test_db, "sleepy", "sleepy@example.com", is_active=False)

        response = test_client.post(
            "/api/auth/refresh",
            headers={"Authorization": f"Bearer {create_user_token(user)}"},
        )

        assert response.status_code == 401


@pytest.mark.api
class TestAppSurface:
    def test_health(self, test_client: TestClient):
        response = test_client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_request_id_header(self, test_client: TestClient):
        response = test_client.get("/api/health")

        assert len(response.headers["X-Request-ID"]) == 8

    def test_unknown_route_uses_error_envelope(self, test_client: TestClient):
        response = test_client.get("/api/nope")

        assert response.status_code == 404
        assert response.json()["success"] is False
