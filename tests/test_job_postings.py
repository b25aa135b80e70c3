"""
Test suite for job postings and the public job board.

Tests cover:
- Venue-scoped posting CRUD and salary validation
- Listing filters and sorting
- Public board visibility, view counting and applying
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest


@pytest.fixture
def jobs_url(venue):
    return f"/api/v1/venues/{venue['id']}/jobs"


@pytest.fixture
def published_job(client, owner_headers, jobs_url, sample_job_data):
    response = client.post(jobs_url, json=dict(sample_job_data, status="published"), headers=owner_headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestJobPostingCRUD:
    """Tests for managing a venue's postings"""

    def test_create_defaults_to_draft(self, client, owner_id, owner_headers, jobs_url, sample_job_data):
        """Test new postings start as drafts with zero counters"""
        response = client.post(jobs_url, json=sample_job_data, headers=owner_headers)
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "draft"
        assert data["applications_count"] == 0
        assert data["views_count"] == 0
        assert data["created_by"] == str(owner_id)
        assert data["required_certifications"] == ["Guard Card"]

    def test_create_salary_range_validated(self, client, owner_headers, jobs_url, sample_job_data):
        """Test salary_min above salary_max is rejected on create"""
        response = client.post(
            jobs_url, json=dict(sample_job_data, salary_min=30.0, salary_max=20.0), headers=owner_headers
        )
        assert response.status_code == 422

    def test_update_salary_range_validated(self, client, owner_headers, jobs_url, published_job):
        """Test a patch cannot invert the stored salary range"""
        response = client.patch(
            f"{jobs_url}/{published_job['id']}", json={"salary_min": 40.0}, headers=owner_headers
        )
        assert response.status_code == 400

    def test_update(self, client, owner_headers, jobs_url, published_job):
        """Test partial updates"""
        response = client.patch(
            f"{jobs_url}/{published_job['id']}",
            json={"status": "closed", "urgent": True},
            headers=owner_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "closed"
        assert data["urgent"] is True
        assert data["title"] == "Security Lead"

    def test_delete(self, client, owner_headers, jobs_url, published_job):
        """Test deleting a posting"""
        url = f"{jobs_url}/{published_job['id']}"
        assert client.delete(url, headers=owner_headers).status_code == 204
        assert client.get(url, headers=owner_headers).status_code == 404
        assert client.delete(url, headers=owner_headers).status_code == 404

    def test_outsider_forbidden(self, client, outsider_headers, jobs_url, sample_job_data):
        """Test non-members cannot create postings"""
        response = client.post(jobs_url, json=sample_job_data, headers=outsider_headers)
        assert response.status_code == 403


class TestJobPostingList:
    """Tests for listing a venue's postings"""

    @pytest.fixture
    def postings(self, client, owner_headers, jobs_url, sample_job_data):
        client.post(jobs_url, json=dict(sample_job_data, status="published"), headers=owner_headers)
        client.post(
            jobs_url,
            json=dict(sample_job_data, title="Barback", department="Bar", salary_min=14.0, salary_max=16.0,
                      experience_level="entry"),
            headers=owner_headers,
        )
        client.post(
            jobs_url,
            json=dict(sample_job_data, title="Audio Tech", department="Technical", salary_min=30.0,
                      salary_max=40.0, status="published"),
            headers=owner_headers,
        )

    def test_status_filter(self, client, owner_headers, jobs_url, postings):
        """Test listing drafts only"""
        titles = [p["title"] for p in client.get(jobs_url, params={"status": "draft"}, headers=owner_headers).json()]
        assert titles == ["Barback"]

    def test_salary_range(self, client, owner_headers, jobs_url, postings):
        """Test salary bounds apply to salary_min"""
        response = client.get(jobs_url, params={"min_salary": 20, "max_salary": 25}, headers=owner_headers)
        assert [p["title"] for p in response.json()] == ["Security Lead"]

    def test_sort_by_title(self, client, owner_headers, jobs_url, postings):
        """Test ascending title sort"""
        response = client.get(jobs_url, params={"sort_by": "title", "sort_order": "asc"}, headers=owner_headers)
        assert [p["title"] for p in response.json()] == ["Audio Tech", "Barback", "Security Lead"]

    def test_search(self, client, owner_headers, jobs_url, postings):
        """Test search covers department"""
        response = client.get(jobs_url, params={"search": "technical"}, headers=owner_headers)
        assert [p["title"] for p in response.json()] == ["Audio Tech"]

    def test_invalid_sort(self, client, owner_headers, jobs_url):
        """Test unknown sort fields are rejected"""
        assert client.get(jobs_url, params={"sort_by": "salary"}, headers=owner_headers).status_code == 400


class TestPublicJobBoard:
    """Tests for the unauthenticated job board"""

    def test_only_published_unexpired(self, client, owner_headers, jobs_url, sample_job_data, published_job):
        """Test drafts and expired postings stay off the board"""
        client.post(jobs_url, json=dict(sample_job_data, title="Draft Role"), headers=owner_headers)
        expired = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()
        client.post(
            jobs_url,
            json=dict(sample_job_data, title="Old Role", status="published", expires_at=expired),
            headers=owner_headers,
        )
        future = (datetime.now(timezone.utc) + timedelta(days=30)).isoformat()
        client.post(
            jobs_url,
            json=dict(sample_job_data, title="Open Role", status="published", expires_at=future),
            headers=owner_headers,
        )

        response = client.get("/api/v1/jobs")
        assert response.status_code == 200
        assert sorted(p["title"] for p in response.json()) == ["Open Role", "Security Lead"]

    def test_public_view_hides_internals(self, client, published_job):
        """Test the public view omits counters and screening settings"""
        data = client.get(f"/api/v1/jobs/{published_job['id']}").json()
        assert "views_count" not in data
        assert "age_requirement" not in data
        assert data["title"] == "Security Lead"

    def test_views_counted(self, client, owner_headers, jobs_url, published_job):
        """Test each public fetch counts a view"""
        client.get(f"/api/v1/jobs/{published_job['id']}")
        client.get(f"/api/v1/jobs/{published_job['id']}")
        data = client.get(f"{jobs_url}/{published_job['id']}", headers=owner_headers).json()
        assert data["views_count"] == 2

    def test_draft_not_public(self, client, owner_headers, jobs_url, sample_job_data):
        """Test a draft is 404 on the board"""
        draft = client.post(jobs_url, json=sample_job_data, headers=owner_headers).json()
        assert client.get(f"/api/v1/jobs/{draft['id']}").status_code == 404
        response = client.post(
            f"/api/v1/jobs/{draft['id']}/applications",
            json={"applicant_name": "Sam Lee", "applicant_email": "sam@example.com"},
        )
        assert response.status_code == 404

    def test_unknown_job(self, client):
        """Test an unknown id is 404"""
        assert client.get(f"/api/v1/jobs/{uuid.uuid4()}").status_code == 404


class TestApply:
    """Tests for submitting applications"""

    def test_apply_queues_screening(self, client, owner_headers, jobs_url, published_job, queued_tasks):
        """Test applying stores a pending application and queues screening"""
        response = client.post(
            f"/api/v1/jobs/{published_job['id']}/applications",
            json={
                "applicant_name": "Sam Lee",
                "applicant_email": "sam@example.com",
                "form_responses": {"guard_card": "GC-1"},
                "resume_url": "https://files.example.com/sam.pdf",
            },
        )
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["message"] == "Application submitted successfully"

        assert queued_tasks == [
            ("app.tasks.application_tasks.screen_application_task", (data["application_id"],), {})
        ]

        posting = client.get(f"{jobs_url}/{published_job['id']}", headers=owner_headers).json()
        assert posting["applications_count"] == 1

    def test_apply_invalid_email(self, client, published_job, queued_tasks):
        """Test applicant email is validated"""
        response = client.post(
            f"/api/v1/jobs/{published_job['id']}/applications",
            json={"applicant_name": "Sam Lee", "applicant_email": "sam"},
        )
        assert response.status_code == 422
        assert queued_tasks == []

    def test_apply_when_broker_down(self, client, published_job, monkeypatch):
        """Test the application is kept when screening cannot be queued"""
        monkeypatch.setattr("app.api.endpoints.job_postings.queue_task_safely", lambda *a, **k: False)
        response = client.post(
            f"/api/v1/jobs/{published_job['id']}/applications",
            json={"applicant_name": "Sam Lee", "applicant_email": "sam@example.com"},
        )
        assert response.status_code == 201
