"""
Test suite for venues, bearer authentication and health endpoints.

Tests cover:
- Token validation
- Venue creation, slug uniqueness and membership checks
- Dashboard counts and its all-or-nothing failure
- Failed writes leave stored rows unchanged
- Health and metrics endpoints
"""

import uuid
from datetime import timedelta

from sqlalchemy import func
from sqlalchemy.exc import OperationalError


def _db_down(*args, **kwargs):
    raise OperationalError("COMMIT", {}, Exception("server closed the connection unexpectedly"))


class TestAuthentication:
    """Tests for bearer token handling"""

    def test_missing_token(self, client):
        """Test protected routes require a token"""
        response = client.get("/api/v1/venues")
        assert response.status_code == 401

    def test_expired_token(self, client, token_factory, headers_for):
        """Test expired tokens are rejected"""
        token = token_factory(uuid.uuid4(), expires_in=timedelta(minutes=-5))
        response = client.get("/api/v1/venues", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_wrong_audience(self, client, token_factory, headers_for):
        """Test tokens for another audience are rejected"""
        token = token_factory(uuid.uuid4(), audience="anon")
        response = client.get("/api/v1/venues", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_wrong_secret(self, client, token_factory, headers_for):
        """Test tokens signed with another secret are rejected"""
        token = token_factory(uuid.uuid4(), secret="not-the-secret")
        response = client.get("/api/v1/venues", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_non_uuid_subject(self, client, token_factory, headers_for):
        """Test a subject that is not a user id is rejected"""
        response = client.get("/api/v1/venues", headers=headers_for("service-account"))
        assert response.status_code == 401


class TestVenueCreation:
    """Tests for creating venues"""

    def test_create_venue(self, client, owner_id, venue):
        """Test the creator becomes owner"""
        assert venue["slug"] == "blue-room"
        assert venue["owner_id"] == str(owner_id)
        assert venue["capacity"] == 400

    def test_create_seeds_roles_and_templates(self, client, owner_headers, venue):
        """Test system roles and default onboarding templates exist after creation"""
        roles = client.get(f"/api/v1/venues/{venue['id']}/roles", headers=owner_headers).json()
        names = {r["role_name"] for r in roles}
        assert {"Venue Owner", "Venue Manager", "Staff Member", "Viewer"} <= names
        assert all(r["is_system_role"] for r in roles)

        templates = client.get(
            f"/api/v1/venues/{venue['id']}/onboarding-templates", headers=owner_headers
        ).json()
        assert len(templates) == 5
        assert templates[0]["is_default"] is True

    def test_duplicate_slug(self, client, owner_headers, venue):
        """Test a taken slug is a conflict"""
        response = client.post(
            "/api/v1/venues",
            json={"name": "Another Room", "slug": "blue-room"},
            headers=owner_headers,
        )
        assert response.status_code == 409

    def test_invalid_slug(self, client, owner_headers):
        """Test slugs must be lowercase words joined by hyphens"""
        response = client.post(
            "/api/v1/venues",
            json={"name": "Bad", "slug": "Bad Slug!"},
            headers=owner_headers,
        )
        assert response.status_code == 422


class TestVenueAccess:
    """Tests for reading and updating venues"""

    def test_list_only_accessible(self, client, owner_headers, outsider_headers, venue):
        """Test callers only see venues they belong to"""
        assert [v["id"] for v in client.get("/api/v1/venues", headers=owner_headers).json()] == [venue["id"]]
        assert client.get("/api/v1/venues", headers=outsider_headers).json() == []

    def test_outsider_forbidden(self, client, outsider_headers, venue):
        """Test non-members get 403"""
        response = client.get(f"/api/v1/venues/{venue['id']}", headers=outsider_headers)
        assert response.status_code == 403

    def test_unknown_venue(self, client, owner_headers):
        """Test an unknown venue is 404"""
        response = client.get(f"/api/v1/venues/{uuid.uuid4()}", headers=owner_headers)
        assert response.status_code == 404
        assert "not found" in response.json()["detail"].lower()

    def test_update_venue(self, client, owner_headers, venue):
        """Test owners can edit venue details"""
        response = client.patch(
            f"/api/v1/venues/{venue['id']}",
            json={"capacity": 450, "description": "Live music"},
            headers=owner_headers,
        )
        assert response.status_code == 200
        assert response.json()["capacity"] == 450
        assert response.json()["name"] == "The Blue Room"


class TestDashboard:
    """Tests for the venue dashboard"""

    def test_empty_dashboard(self, client, owner_headers, venue):
        """Test a new venue has zero counts for every status"""
        response = client.get(f"/api/v1/venues/{venue['id']}/dashboard", headers=owner_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["staff_total"] == 0
        assert data["pending_applications"] == 0
        assert set(data["applications_by_status"]) == {
            "pending", "reviewed", "shortlisted", "approved", "rejected", "withdrawn"
        }

    def test_dashboard_counts(self, client, owner_headers, venue, sample_staff_data, sample_shift_data):
        """Test staff and shift counts"""
        base = f"/api/v1/venues/{venue['id']}"
        client.post(f"{base}/staff", json=sample_staff_data, headers=owner_headers)
        client.post(
            f"{base}/staff",
            json=dict(sample_staff_data, email="b@example.com", status="inactive"),
            headers=owner_headers,
        )
        client.post(f"{base}/shifts", json=dict(sample_shift_data, shift_date="2999-01-01"), headers=owner_headers)

        data = client.get(f"{base}/dashboard", headers=owner_headers).json()
        assert data["staff_total"] == 2
        assert data["staff_active"] == 1
        assert data["upcoming_shifts"] == 1
        assert data["open_shifts"] == 1

    def test_dashboard_fails_whole(self, client, owner_headers, venue, sample_staff_data, monkeypatch):
        """Test one failing count fails the whole dashboard"""
        base = f"/api/v1/venues/{venue['id']}"
        client.post(f"{base}/staff", json=sample_staff_data, headers=owner_headers)

        class FlakyFunc:
            calls = 0

            def count(self, column):
                FlakyFunc.calls += 1
                if FlakyFunc.calls == 3:
                    _db_down()
                return func.count(column)

        monkeypatch.setattr("app.api.endpoints.venues.func", FlakyFunc())
        response = client.get(f"{base}/dashboard", headers=owner_headers)
        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to load dashboard data"}
        assert FlakyFunc.calls == 3


class TestWriteFailures:
    """Tests for database failures during writes"""

    def test_venue_update_failure_keeps_row(self, client, owner_headers, venue, db_session, monkeypatch):
        """Test a failed commit returns 500 and the venue keeps its values"""
        url = f"/api/v1/venues/{venue['id']}"
        with monkeypatch.context() as m:
            m.setattr(db_session, "commit", _db_down)
            response = client.patch(url, json={"capacity": 900, "name": "Renamed"}, headers=owner_headers)
        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to update venue"

        data = client.get(url, headers=owner_headers).json()
        assert data["capacity"] == 400
        assert data["name"] == "The Blue Room"

    def test_staff_update_failure_keeps_row(
        self, client, owner_headers, venue, sample_staff_data, db_session, monkeypatch
    ):
        """Test a failed staff update leaves the stored staff member unchanged"""
        base = f"/api/v1/venues/{venue['id']}/staff"
        staff = client.post(base, json=sample_staff_data, headers=owner_headers).json()
        with monkeypatch.context() as m:
            m.setattr(db_session, "commit", _db_down)
            response = client.patch(f"{base}/{staff['id']}", json={"hourly_rate": 99.0}, headers=owner_headers)
        assert response.status_code == 500

        data = client.get(f"{base}/{staff['id']}", headers=owner_headers).json()
        assert data["hourly_rate"] == 18.5
        assert len(client.get(base, headers=owner_headers).json()) == 1


class TestHealth:
    """Tests for health and metrics endpoints"""

    def test_health(self, client):
        """Test the basic health check"""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_detailed_health_broker_down(self, client, monkeypatch):
        """Test an unreachable broker marks the service unhealthy"""
        class DownConnection:
            def __init__(self, *args, **kwargs):
                pass

            def __enter__(self):
                raise ConnectionRefusedError("broker down")

            def __exit__(self, *exc):
                return False

        monkeypatch.setattr("app.api.endpoints.health.Connection", DownConnection)
        response = client.get("/health/detailed")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "unhealthy"
        assert data["checks"]["database"]["status"] == "healthy"
        assert data["checks"]["broker"]["status"] == "unhealthy"

    def test_metrics(self, client, venue):
        """Test metrics count venues"""
        response = client.get("/metrics")
        assert response.status_code == 200
        assert response.json()["metrics"]["total_venues"] == 1

    def test_root(self, client):
        """Test the root endpoint"""
        assert client.get("/").json()["status"] == "healthy"
