"""
Tests for API endpoints.

Routes run against the real services with the repository dependency
overridden by a mock, so no database is needed.

Author: ProjectPulse Team
Version: 1.0.0
"""

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from pulse.api.auth import create_access_token
from pulse.api.dependencies import get_repository
from pulse.api.main import app
from pulse.config import settings
from pulse.tracking import hash_password


def bearer(user_id: str, role: str) -> dict:
    token = create_access_token(user_id, role=role, email=f"{user_id}@projectpulse.com")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(mock_repository):
    app.dependency_overrides[get_repository] = lambda: mock_repository
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


class TestHealthEndpoints:
    """Probes answer without a database."""

    def test_liveness(self, client):
        response = client.get("/health/live")
        assert response.status_code == 200
        assert response.json() == {"status": "alive"}

    def test_health_reports_missing_database(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "degraded"
        assert body["dependencies"][0]["name"] == "postgresql"

    def test_readiness_without_database(self, client):
        response = client.get("/health/ready")
        assert response.status_code == 503
        assert response.json()["ready"] is False

    def test_correlation_id_header(self, client):
        response = client.get("/health/live", headers={"X-Correlation-ID": "abc-123"})
        assert response.headers["x-correlation-id"] == "abc-123"


class TestAuthEndpoints:
    """Login, logout and the current user."""

    def test_login_sets_token_and_cookie(self, client, mock_repository, users):
        admin = users["admin-1"]
        admin.password_hash = hash_password("Admin@123")
        mock_repository.get_user_by_email.return_value = admin

        response = client.post(
            "/api/v1/auth/login",
            json={"email": "admin-1@projectpulse.com", "password": "Admin@123"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["user"]["role"] == "admin"
        assert body["token"]
        assert settings.auth_cookie_name in response.cookies

    def test_login_rejects_bad_password(self, client, mock_repository, users):
        admin = users["admin-1"]
        admin.password_hash = hash_password("Admin@123")
        mock_repository.get_user_by_email.return_value = admin

        response = client.post(
            "/api/v1/auth/login",
            json={"email": "admin-1@projectpulse.com", "password": "wrong"},
        )

        assert response.status_code == 401
        assert response.json() == {"detail": "Invalid credentials"}

    def test_me_with_bearer_token(self, client, mock_repository, users):
        mock_repository.get_user.return_value = users["emp-1"]

        response = client.get("/api/v1/auth/me", headers=bearer("emp-1", "employee"))

        assert response.status_code == 200
        assert response.json()["name"] == "John Developer"
        assert "password_hash" not in response.json()

    def test_me_with_cookie(self, client, mock_repository, users):
        mock_repository.get_user.return_value = users["client-1"]
        token = create_access_token("client-1", role="client")
        client.cookies.set(settings.auth_cookie_name, token)

        response = client.get("/api/v1/auth/me")

        assert response.status_code == 200
        assert response.json()["role"] == "client"

    def test_me_requires_authentication(self, client):
        assert client.get("/api/v1/auth/me").status_code == 401

    def test_invalid_token(self, client):
        response = client.get(
            "/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert response.status_code == 401

    def test_logout(self, client):
        response = client.post("/api/v1/auth/logout")
        assert response.status_code == 200
        assert response.json() == {"message": "Logged out successfully"}


class TestProjectEndpoints:
    """Project routes map service errors onto status codes."""

    def test_get_project(self, client):
        response = client.get("/api/v1/projects/proj-1", headers=bearer("emp-1", "employee"))

        assert response.status_code == 200
        body = response.json()
        assert body["health_score"] == 69
        assert body["client"]["name"] == "Client Representative"

    def test_get_project_forbidden(self, client):
        response = client.get("/api/v1/projects/proj-1", headers=bearer("client-2", "client"))

        assert response.status_code == 403
        assert response.json() == {"detail": "Forbidden"}

    def test_get_project_not_found(self, client, mock_repository):
        mock_repository.get_project.return_value = None

        response = client.get("/api/v1/projects/missing", headers=bearer("admin-1", "admin"))

        assert response.status_code == 404

    def test_health_breakdown(self, client):
        response = client.get(
            "/api/v1/projects/proj-1/health", headers=bearer("admin-1", "admin")
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "At Risk"
        assert len(body["components"]) == 4

    def test_create_requires_admin(self, client):
        response = client.post(
            "/api/v1/projects",
            json={},
            headers=bearer("emp-1", "employee"),
        )
        assert response.status_code == 403

    def test_create_rejects_inverted_dates(self, client):
        response = client.post(
            "/api/v1/projects",
            json={
                "name": "Data Platform",
                "description": "Warehouse migration",
                "client_id": "client-1",
                "employee_ids": ["emp-1"],
                "start_date": "2025-06-01T00:00:00Z",
                "end_date": "2025-05-01T00:00:00Z",
            },
            headers=bearer("admin-1", "admin"),
        )
        assert response.status_code == 422

    def test_create_with_naive_end_date(self, client):
        response = client.post(
            "/api/v1/projects",
            json={
                "name": "Data Platform",
                "description": "Warehouse migration",
                "client_id": "client-1",
                "employee_ids": ["emp-1"],
                "start_date": "2025-06-01T00:00:00Z",
                "end_date": "2025-07-01T00:00:00",
            },
            headers=bearer("admin-1", "admin"),
        )

        assert response.status_code == 201
        assert response.json()["end_date"].startswith("2025-07-01T00:00:00")

    def test_create_rejects_inverted_mixed_timezone_dates(self, client):
        response = client.post(
            "/api/v1/projects",
            json={
                "name": "Data Platform",
                "description": "Warehouse migration",
                "client_id": "client-1",
                "employee_ids": ["emp-1"],
                "start_date": "2025-06-01T00:00:00",
                "end_date": "2025-05-01T00:00:00+02:00",
            },
            headers=bearer("admin-1", "admin"),
        )
        assert response.status_code == 422

    def test_delete(self, client, mock_repository):
        mock_repository.delete_project.return_value = True

        response = client.delete("/api/v1/projects/proj-1", headers=bearer("admin-1", "admin"))

        assert response.status_code == 200
        assert response.json() == {"message": "Project deleted successfully"}


class TestCheckInEndpoints:
    """Check-in submission."""

    payload = {
        "project_id": "proj-1",
        "progress_summary": "Payments integrated",
        "confidence_level": 4,
        "completion_percentage": 40,
    }

    def test_submit(self, client):
        response = client.post(
            "/api/v1/checkins", json=self.payload, headers=bearer("emp-1", "employee")
        )

        assert response.status_code == 201
        assert response.json()["confidence_level"] == 4

    def test_clients_cannot_submit(self, client):
        response = client.post(
            "/api/v1/checkins", json=self.payload, headers=bearer("client-1", "client")
        )
        assert response.status_code == 403

    def test_confidence_out_of_range(self, client):
        payload = dict(self.payload, confidence_level=6)
        response = client.post(
            "/api/v1/checkins", json=payload, headers=bearer("emp-1", "employee")
        )
        assert response.status_code == 422

    def test_duplicate_week(self, client, mock_repository):
        mock_repository.find_check_in.return_value = SimpleNamespace(id="existing")

        response = client.post(
            "/api/v1/checkins", json=self.payload, headers=bearer("emp-1", "employee")
        )

        assert response.status_code == 400
        assert response.json() == {"detail": "Check-in already submitted for this week"}


class TestRiskEndpoints:
    """Risk reporting and listing."""

    def test_invalid_severity(self, client):
        response = client.post(
            "/api/v1/risks",
            json={
                "project_id": "proj-1",
                "title": "Vendor delay",
                "severity": "Catastrophic",
                "mitigation_plan": "Escalate",
            },
            headers=bearer("emp-1", "employee"),
        )
        assert response.status_code == 422

    def test_list_by_status(self, client, mock_repository):
        mock_repository.list_risks.return_value = []

        response = client.get(
            "/api/v1/risks?status=Open", headers=bearer("emp-1", "employee")
        )

        assert response.status_code == 200
        mock_repository.list_risks.assert_awaited_once_with(
            project_ids=None, status="Open", employee_id="emp-1"
        )


class TestUserAndActivityEndpoints:
    """Admin directory and activity trail."""

    def test_users_admin_only(self, client):
        response = client.get("/api/v1/users", headers=bearer("emp-1", "employee"))
        assert response.status_code == 403

    def test_users_by_role(self, client, mock_repository, users):
        mock_repository.list_users.return_value = [users["emp-1"], users["emp-2"]]

        response = client.get("/api/v1/users?role=employee", headers=bearer("admin-1", "admin"))

        assert response.status_code == 200
        assert [u["id"] for u in response.json()] == ["emp-1", "emp-2"]
        mock_repository.list_users.assert_awaited_once_with("employee")

    def test_activities_require_project(self, client):
        response = client.get("/api/v1/activities", headers=bearer("admin-1", "admin"))
        assert response.status_code == 422

    def test_activities(self, client):
        response = client.get(
            "/api/v1/activities?project_id=proj-1", headers=bearer("client-1", "client")
        )
        assert response.status_code == 200
        assert response.json() == []
