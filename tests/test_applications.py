"""
Test suite for application review endpoints.

Tests cover:
- Review filters on the list endpoint
- Reviewing a single application
- Bulk status updates
- Running screening on demand
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from app.models.job_application import JobApplication


@pytest.fixture
def apps_url(venue):
    return f"/api/v1/venues/{venue['id']}/applications"


@pytest.fixture
def postings(client, owner_headers, venue, sample_job_data):
    jobs_url = f"/api/v1/venues/{venue['id']}/jobs"
    security = client.post(jobs_url, json=dict(sample_job_data, status="published"), headers=owner_headers).json()
    bar = client.post(
        jobs_url,
        json=dict(sample_job_data, title="Barback", department="Bar", required_certifications=[],
                  age_requirement=None, experience_level="entry", status="published"),
        headers=owner_headers,
    ).json()
    return {"security": security, "bar": bar}


def _apply(client, posting, **fields):
    payload = {"applicant_name": "Applicant", "applicant_email": "applicant@example.com"}
    payload.update(fields)
    response = client.post(f"/api/v1/jobs/{posting['id']}/applications", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["application_id"]


@pytest.fixture
def applications(client, postings):
    return {
        "ana": _apply(
            client, postings["security"], applicant_name="Ana Diaz", applicant_email="ana@example.com",
            resume_url="https://files.example.com/ana.pdf", cover_letter="Ten years on doors.",
            form_responses={"guard_card": "GC-77", "date_of_birth": "1988-03-02", "experience_years": "10",
                            "previous_employers": "Club One\nArena Two"},
        ),
        "ben": _apply(
            client, postings["bar"], applicant_name="Ben Cho", applicant_email="ben@example.com",
            applicant_phone="555-0199", cover_letter="Fast and friendly.",
        ),
        "cal": _apply(client, postings["security"], applicant_name="Cal Park", applicant_email="cal@example.com"),
    }


class TestApplicationList:
    """Tests for listing applications"""

    def _names(self, response):
        assert response.status_code == 200, response.text
        return sorted(a["applicant_name"] for a in response.json())

    def test_lists_all(self, client, owner_headers, apps_url, applications):
        """Test every application is listed pending"""
        data = client.get(apps_url, headers=owner_headers).json()
        assert len(data) == 3
        assert {a["status"] for a in data} == {"pending"}

    def test_department(self, client, owner_headers, apps_url, applications):
        """Test department is read from the posting"""
        response = client.get(apps_url, params={"department": "Bar"}, headers=owner_headers)
        assert self._names(response) == ["Ben Cho"]

    def test_job_posting(self, client, owner_headers, apps_url, applications, postings):
        """Test filtering by posting"""
        response = client.get(apps_url, params={"job_posting_id": postings["security"]["id"]}, headers=owner_headers)
        assert self._names(response) == ["Ana Diaz", "Cal Park"]

    def test_document_flags(self, client, owner_headers, apps_url, applications):
        """Test resume and cover letter flags"""
        response = client.get(apps_url, params={"has_resume": True}, headers=owner_headers)
        assert self._names(response) == ["Ana Diaz"]
        response = client.get(apps_url, params={"has_cover_letter": True}, headers=owner_headers)
        assert self._names(response) == ["Ana Diaz", "Ben Cho"]

    def test_search_phone(self, client, owner_headers, apps_url, applications):
        """Test search covers phone numbers"""
        response = client.get(apps_url, params={"search": "0199"}, headers=owner_headers)
        assert self._names(response) == ["Ben Cho"]

    def test_min_rating_drops_unrated(self, client, owner_headers, apps_url, applications):
        """Test unrated applications are dropped by min_rating"""
        client.patch(f"{apps_url}/{applications['ana']}", json={"rating": 4}, headers=owner_headers)
        client.patch(f"{apps_url}/{applications['ben']}", json={"rating": 2}, headers=owner_headers)
        response = client.get(apps_url, params={"min_rating": 3}, headers=owner_headers)
        assert self._names(response) == ["Ana Diaz"]

    def test_date_range(self, client, owner_headers, apps_url, applications, db_session):
        """Test the week window excludes older applications"""
        old = db_session.get(JobApplication, uuid.UUID(applications["cal"]))
        old.applied_at = datetime.now(timezone.utc) - timedelta(days=20)
        db_session.commit()

        response = client.get(apps_url, params={"date_range": "week"}, headers=owner_headers)
        assert self._names(response) == ["Ana Diaz", "Ben Cho"]
        response = client.get(apps_url, params={"date_range": "month"}, headers=owner_headers)
        assert len(response.json()) == 3

    def test_status_and_sort(self, client, owner_headers, apps_url, applications):
        """Test status filter with name sort"""
        client.patch(f"{apps_url}/{applications['cal']}", json={"status": "rejected"}, headers=owner_headers)
        response = client.get(
            apps_url,
            params={"status": "pending", "sort_by": "applicant_name", "sort_order": "asc"},
            headers=owner_headers,
        )
        assert [a["applicant_name"] for a in response.json()] == ["Ana Diaz", "Ben Cho"]

    def test_invalid_date_range(self, client, owner_headers, apps_url):
        """Test unknown windows are a validation error"""
        assert client.get(apps_url, params={"date_range": "year"}, headers=owner_headers).status_code == 422

    def test_invalid_sort(self, client, owner_headers, apps_url):
        """Test unknown sort fields are rejected"""
        assert client.get(apps_url, params={"sort_by": "form_responses"}, headers=owner_headers).status_code == 400


class TestReview:
    """Tests for reviewing one application"""

    def test_review_stamps_reviewer(self, client, owner_id, owner_headers, apps_url, applications):
        """Test a review records who reviewed and when"""
        response = client.patch(
            f"{apps_url}/{applications['ana']}",
            json={"status": "shortlisted", "rating": 5, "feedback": "Strong"},
            headers=owner_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "shortlisted"
        assert data["rating"] == 5
        assert data["reviewed_by"] == str(owner_id)
        assert data["reviewed_at"] is not None

    def test_rating_bounds(self, client, owner_headers, apps_url, applications):
        """Test ratings are 1 to 5"""
        response = client.patch(f"{apps_url}/{applications['ana']}", json={"rating": 6}, headers=owner_headers)
        assert response.status_code == 422

    def test_unknown_application(self, client, owner_headers, apps_url):
        """Test unknown ids are 404"""
        assert client.get(f"{apps_url}/{uuid.uuid4()}", headers=owner_headers).status_code == 404


class TestBulkStatus:
    """Tests for bulk status changes"""

    def test_bulk_update(self, client, owner_headers, apps_url, applications):
        """Test several applications change together"""
        ids = [applications["ana"], applications["ben"]]
        response = client.post(
            f"{apps_url}/bulk-status",
            json={"application_ids": ids, "status": "reviewed", "feedback": "Batch reviewed"},
            headers=owner_headers,
        )
        assert response.status_code == 200
        assert response.json() == {"updated": 2, "status": "reviewed"}

        statuses = {a["id"]: a["status"] for a in client.get(apps_url, headers=owner_headers).json()}
        assert statuses[applications["ana"]] == "reviewed"
        assert statuses[applications["cal"]] == "pending"

    def test_bulk_all_or_nothing(self, client, owner_headers, apps_url, applications):
        """Test an unknown id leaves every application unchanged"""
        response = client.post(
            f"{apps_url}/bulk-status",
            json={"application_ids": [applications["ana"], str(uuid.uuid4())], "status": "approved"},
            headers=owner_headers,
        )
        assert response.status_code == 404
        assert response.json()["detail"] == "One or more applications not found"
        data = client.get(f"{apps_url}/{applications['ana']}", headers=owner_headers).json()
        assert data["status"] == "pending"

    def test_bulk_requires_ids(self, client, owner_headers, apps_url):
        """Test an empty id list is rejected"""
        response = client.post(
            f"{apps_url}/bulk-status", json={"application_ids": [], "status": "reviewed"}, headers=owner_headers
        )
        assert response.status_code == 422


class TestScreeningRun:
    """Tests for on-demand screening"""

    def test_screen_all(self, client, owner_headers, apps_url, applications):
        """Test results are returned and stored"""
        response = client.post(f"{apps_url}/screen", headers=owner_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["screened"] == 3
        assert data["passed"] == 1

        by_id = {r["application_id"]: r for r in data["results"]}
        assert by_id[applications["ana"]]["passed"] is True
        assert "Missing resume" in by_id[applications["ben"]]["issues"]
        assert "Missing certifications: Guard Card" in by_id[applications["cal"]]["issues"]

        stored = client.get(f"{apps_url}/{applications['cal']}", headers=owner_headers).json()
        assert stored["screening_passed"] is False
        assert stored["screened_at"] is not None
        assert stored["status"] == "pending"

    def test_screen_filtered(self, client, owner_headers, apps_url, applications, postings):
        """Test only the filtered applications are screened"""
        response = client.post(
            f"{apps_url}/screen", params={"job_posting_id": postings["bar"]["id"]}, headers=owner_headers
        )
        assert response.json()["screened"] == 1
