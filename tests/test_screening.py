"""
Test suite for rule-based application screening.

Tests cover:
- Each screening rule
- Posting-independent rules when no posting is given
- The Celery screening task storing its result
"""

import uuid
from datetime import date
from types import SimpleNamespace

import pytest

from app.models.job_application import ApplicationStatus, JobApplication
from app.models.job_posting import ExperienceLevel, JobPosting, JobPostingStatus
from app.models.venue import Venue
from app.services.screening import calculate_age, certification_key, red_flags, screen_application
from app.tasks import application_tasks

TODAY = date(2026, 10, 19)


def make_application(**overrides):
    values = {
        "id": uuid.uuid4(),
        "resume_url": "https://files.example.com/cv.pdf",
        "cover_letter": "I have worked doors for years.",
        "form_responses": {
            "guard_card": "GC-4411",
            "date_of_birth": "1990-05-01",
            "experience_years": "8",
            "previous_employers": "Club One\nArena Two",
        },
    }
    values.update(overrides)
    return SimpleNamespace(**values)


def make_posting(**overrides):
    values = {
        "required_certifications": ["Guard Card"],
        "age_requirement": 21,
        "experience_level": ExperienceLevel.SENIOR,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


class TestScreeningRules:
    """Tests for individual screening rules"""

    def test_clean_application_passes(self):
        """Test an application meeting every rule passes"""
        result = screen_application(make_application(), make_posting(), today=TODAY)
        assert result.passed is True
        assert result.issues == []
        assert result.recommendations == []

    def test_missing_documents(self):
        """Test missing resume and cover letter are both reported in order"""
        application = make_application(resume_url=None, cover_letter="")
        result = screen_application(application, make_posting(), today=TODAY)
        assert result.passed is False
        assert result.issues[:2] == ["Missing resume", "Missing cover letter"]
        assert "Request resume from applicant" in result.recommendations

    def test_missing_certification(self):
        """Test a required certification without a response is flagged"""
        application = make_application(form_responses={"date_of_birth": "1990-05-01"})
        result = screen_application(application, make_posting(), today=TODAY)
        assert "Missing certifications: Guard Card" in result.issues

    def test_underage(self):
        """Test the age requirement uses the birthday"""
        responses = dict(make_application().form_responses, date_of_birth="2005-10-20")
        result = screen_application(make_application(form_responses=responses), make_posting(), today=TODAY)
        assert "Age requirement not met (20 < 21)" in result.issues
        assert "Reject due to age requirement" in result.recommendations

    def test_unparseable_birth_date_skipped(self):
        """Test an unreadable date of birth skips the age rule"""
        responses = dict(make_application().form_responses, date_of_birth="sometime in the 90s")
        result = screen_application(make_application(form_responses=responses), make_posting(), today=TODAY)
        assert result.passed is True

    def test_senior_experience(self):
        """Test senior postings need enough years of experience"""
        responses = dict(make_application().form_responses, experience_years="2")
        result = screen_application(make_application(form_responses=responses), make_posting(), today=TODAY)
        assert "Insufficient experience for senior position" in result.issues

    def test_experience_ignored_for_entry_level(self):
        """Test the experience rule only applies to senior postings"""
        responses = dict(make_application().form_responses, experience_years="1")
        posting = make_posting(experience_level=ExperienceLevel.ENTRY)
        result = screen_application(make_application(form_responses=responses), posting, today=TODAY)
        assert result.passed is True

    def test_no_posting_skips_posting_rules(self):
        """Test only document and red-flag rules run without a posting"""
        application = make_application(form_responses={})
        result = screen_application(application, None, today=TODAY)
        assert result.passed is True

    def test_red_flags(self):
        """Test disclosed background, failed drug test and thin history"""
        flags = red_flags({
            "previous_employers": "Only Job",
            "criminal_background": "yes",
            "drug_test_result": "positive",
        })
        assert flags == ["Limited work history", "Criminal background disclosed", "Failed drug test"]

    def test_certification_key(self):
        """Test certification names map to response keys"""
        assert certification_key("Alcohol  Server\tPermit") == "alcohol_server_permit"

    @pytest.mark.parametrize("birth, expected", [
        (date(2000, 10, 19), 26),
        (date(2000, 10, 20), 25),
        (date(2000, 2, 29), 26),
    ])
    def test_calculate_age(self, birth, expected):
        """Test age counts completed years"""
        assert calculate_age(birth, TODAY) == expected


class TestScreeningTask:
    """Tests for the background screening task"""

    def _seed(self, db_session):
        owner = uuid.uuid4()
        venue = Venue(name="Hall", slug="hall", owner_id=owner)
        db_session.add(venue)
        db_session.flush()
        posting = JobPosting(
            venue_id=venue.id,
            title="Door Staff",
            description="Check IDs at the door on event nights.",
            department="Security",
            position="Door Staff",
            status=JobPostingStatus.PUBLISHED,
            required_certifications=["Guard Card"],
            created_by=owner,
        )
        db_session.add(posting)
        db_session.flush()
        application = JobApplication(
            venue_id=venue.id,
            job_posting_id=posting.id,
            applicant_name="Sam Lee",
            applicant_email="sam@example.com",
            status=ApplicationStatus.PENDING,
            form_responses={},
        )
        db_session.add(application)
        db_session.commit()
        return application.id

    def test_task_stores_result(self, db_session, monkeypatch):
        """Test the task screens and saves issues on the application"""
        application_id = self._seed(db_session)
        monkeypatch.setattr(application_tasks, "SessionLocal", lambda: db_session)

        result = application_tasks.screen_application_task(str(application_id))

        assert result["passed"] is False
        stored = db_session.query(JobApplication).filter(JobApplication.id == application_id).first()
        assert stored.screening_passed is False
        assert "Missing resume" in stored.screening_issues
        assert "Missing certifications: Guard Card" in stored.screening_issues
        assert stored.screened_at is not None
        assert stored.status == ApplicationStatus.PENDING

    def test_task_unknown_application(self, db_session, monkeypatch):
        """Test a missing application is reported, not raised"""
        monkeypatch.setattr(application_tasks, "SessionLocal", lambda: db_session)
        result = application_tasks.screen_application_task(str(uuid.uuid4()))
        assert result["status"] == "error"
