"""
Test suite for staff endpoints.

Tests cover:
- Staff CRUD scoped to a venue
- Search, filters and sorting on the list endpoint
"""

import uuid

import pytest


@pytest.fixture
def staff_url(venue):
    return f"/api/v1/venues/{venue['id']}/staff"


@pytest.fixture
def roster(client, owner_headers, staff_url):
    """Three staff members across two departments"""
    people = [
        {"name": "Avery Kim", "email": "avery@example.com", "role": "Bartender", "department": "Bar",
         "hourly_rate": 19.0, "performance_rating": 4.8},
        {"name": "blake Ortiz", "email": "blake@example.com", "role": "Barback", "department": "Bar",
         "employment_type": "part_time", "hourly_rate": 15.0, "performance_rating": 3.1},
        {"name": "Casey Moore", "email": "casey@example.com", "role": "Guard", "department": "Security",
         "status": "on_leave", "hourly_rate": 22.0},
    ]
    created = []
    for person in people:
        response = client.post(staff_url, json=person, headers=owner_headers)
        assert response.status_code == 201, response.text
        created.append(response.json())
    return created


class TestStaffCRUD:
    """Tests for creating, reading, updating and deleting staff"""

    def test_create_staff(self, client, owner_headers, staff_url, venue, sample_staff_data):
        """Test creating a staff member with defaults"""
        response = client.post(staff_url, json=sample_staff_data, headers=owner_headers)
        assert response.status_code == 201
        data = response.json()
        assert data["venue_id"] == venue["id"]
        assert data["status"] == "active"
        assert data["employment_type"] == "part_time"
        assert data["is_available"] is True

    def test_create_invalid_email(self, client, owner_headers, staff_url, sample_staff_data):
        """Test email addresses are validated"""
        response = client.post(staff_url, json=dict(sample_staff_data, email="not-an-email"), headers=owner_headers)
        assert response.status_code == 422

    def test_rating_out_of_range(self, client, owner_headers, staff_url, sample_staff_data):
        """Test performance ratings stay between 0 and 5"""
        response = client.post(
            staff_url, json=dict(sample_staff_data, performance_rating=5.5), headers=owner_headers
        )
        assert response.status_code == 422

    def test_get_and_update(self, client, owner_headers, staff_url, sample_staff_data):
        """Test partial updates leave other fields untouched"""
        staff_id = client.post(staff_url, json=sample_staff_data, headers=owner_headers).json()["id"]

        response = client.patch(
            f"{staff_url}/{staff_id}", json={"status": "inactive", "hourly_rate": 21.0}, headers=owner_headers
        )
        assert response.status_code == 200
        assert response.json()["status"] == "inactive"

        fetched = client.get(f"{staff_url}/{staff_id}", headers=owner_headers).json()
        assert fetched["hourly_rate"] == 21.0
        assert fetched["name"] == "Jordan Reyes"

    def test_delete(self, client, owner_headers, staff_url, sample_staff_data):
        """Test deleting a staff member"""
        staff_id = client.post(staff_url, json=sample_staff_data, headers=owner_headers).json()["id"]
        assert client.delete(f"{staff_url}/{staff_id}", headers=owner_headers).status_code == 204
        response = client.get(f"{staff_url}/{staff_id}", headers=owner_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Staff member not found"

    def test_unknown_staff(self, client, owner_headers, staff_url):
        """Test unknown ids are 404 for update and delete"""
        missing = uuid.uuid4()
        assert client.patch(f"{staff_url}/{missing}", json={"notes": "x"}, headers=owner_headers).status_code == 404
        assert client.delete(f"{staff_url}/{missing}", headers=owner_headers).status_code == 404

    def test_other_venue_staff_hidden(self, client, owner_headers, staff_url, sample_staff_data):
        """Test staff are scoped to their venue"""
        staff_id = client.post(staff_url, json=sample_staff_data, headers=owner_headers).json()["id"]
        other = client.post(
            "/api/v1/venues", json={"name": "Annex", "slug": "annex"}, headers=owner_headers
        ).json()
        response = client.get(f"/api/v1/venues/{other['id']}/staff/{staff_id}", headers=owner_headers)
        assert response.status_code == 404

    def test_outsider_forbidden(self, client, outsider_headers, staff_url):
        """Test non-members cannot list staff"""
        assert client.get(staff_url, headers=outsider_headers).status_code == 403


class TestStaffList:
    """Tests for listing staff"""

    def test_default_sort_by_name(self, client, owner_headers, staff_url, roster):
        """Test names sort case-insensitively"""
        names = [s["name"] for s in client.get(staff_url, headers=owner_headers).json()]
        assert names == ["Avery Kim", "blake Ortiz", "Casey Moore"]

    def test_search(self, client, owner_headers, staff_url, roster):
        """Test search matches role and email"""
        names = [s["name"] for s in client.get(staff_url, params={"search": "BARB"}, headers=owner_headers).json()]
        assert names == ["blake Ortiz"]
        names = [s["name"] for s in client.get(
            staff_url, params={"search": "casey@"}, headers=owner_headers
        ).json()]
        assert names == ["Casey Moore"]

    def test_department_and_status(self, client, owner_headers, staff_url, roster):
        """Test membership filters combine"""
        response = client.get(
            staff_url, params={"department": ["Bar", "Security"], "status": "on_leave"}, headers=owner_headers
        )
        assert [s["name"] for s in response.json()] == ["Casey Moore"]

    def test_employment_type(self, client, owner_headers, staff_url, roster):
        """Test filtering by employment type"""
        response = client.get(staff_url, params={"employment_type": "part_time"}, headers=owner_headers)
        assert [s["name"] for s in response.json()] == ["blake Ortiz"]

    def test_rating_range_drops_unrated(self, client, owner_headers, staff_url, roster):
        """Test rating bounds are inclusive and skip unrated staff"""
        response = client.get(staff_url, params={"min_rating": 3.1}, headers=owner_headers)
        assert [s["name"] for s in response.json()] == ["Avery Kim", "blake Ortiz"]
        response = client.get(staff_url, params={"max_rating": 4}, headers=owner_headers)
        assert [s["name"] for s in response.json()] == ["blake Ortiz"]

    def test_sort_by_rate_desc(self, client, owner_headers, staff_url, roster):
        """Test descending numeric sort"""
        response = client.get(
            staff_url, params={"sort_by": "hourly_rate", "sort_order": "desc"}, headers=owner_headers
        )
        assert [s["hourly_rate"] for s in response.json()] == [22.0, 19.0, 15.0]

    def test_invalid_sort_field(self, client, owner_headers, staff_url):
        """Test unknown sort fields are rejected"""
        response = client.get(staff_url, params={"sort_by": "password"}, headers=owner_headers)
        assert response.status_code == 400

    def test_pagination(self, client, owner_headers, staff_url, roster):
        """Test skip and limit apply after sorting"""
        response = client.get(staff_url, params={"skip": 1, "limit": 1}, headers=owner_headers)
        assert [s["name"] for s in response.json()] == ["blake Ortiz"]
