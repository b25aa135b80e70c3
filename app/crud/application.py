"""
CRUD operations for JobApplication model.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.models.job_application import JobApplication, ApplicationStatus
from app.models.job_posting import JobPosting
from app.schemas.application import ApplicationSubmit, ApplicationReviewUpdate
from app.services.screening import ScreeningResult

logger = logging.getLogger(__name__)


def get_by_id(db: Session, venue_id: UUID, application_id: UUID) -> Optional[JobApplication]:
    return (
        db.query(JobApplication)
        .filter(JobApplication.id == application_id, JobApplication.venue_id == venue_id)
        .first()
    )


def get_all(db: Session, venue_id: UUID) -> List[JobApplication]:
    """All applications for a venue with their postings loaded (for department filtering)."""
    return (
        db.query(JobApplication)
        .options(joinedload(JobApplication.job_posting))
        .filter(JobApplication.venue_id == venue_id)
        .order_by(JobApplication.applied_at.desc())
        .all()
    )


def submit(db: Session, posting: JobPosting, data: ApplicationSubmit) -> JobApplication:
    """
    Store an application against a posting and bump the posting's counter.

    Returns:
        Created JobApplication in PENDING status
    """
    application = JobApplication(
        venue_id=posting.venue_id,
        job_posting_id=posting.id,
        applicant_name=data.applicant_name,
        applicant_email=str(data.applicant_email),
        applicant_phone=data.applicant_phone,
        form_responses=data.form_responses,
        resume_url=str(data.resume_url) if data.resume_url else None,
        cover_letter=data.cover_letter,
        status=ApplicationStatus.PENDING,
    )
    try:
        db.add(application)
        posting.applications_count = JobPosting.applications_count + 1
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(application)
    return application


def review(
    db: Session,
    application: JobApplication,
    data: ApplicationReviewUpdate,
    reviewer_id: UUID,
) -> JobApplication:
    """Apply a reviewer's status/rating/feedback and stamp reviewer and time."""
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(application, field, value)
    application.reviewed_by = reviewer_id
    application.reviewed_at = datetime.now(timezone.utc)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(application)
    return application


def bulk_update_status(
    db: Session,
    venue_id: UUID,
    application_ids: Sequence[UUID],
    status: ApplicationStatus,
    reviewer_id: UUID,
    feedback: Optional[str] = None,
) -> Optional[int]:
    """
    Set the same status on many applications, all or nothing.

    Returns:
        Number updated, or None if any id is not an application of this
        venue (nothing is changed in that case)
    """
    wanted = set(application_ids)
    applications = (
        db.query(JobApplication)
        .filter(JobApplication.venue_id == venue_id, JobApplication.id.in_(wanted))
        .all()
    )
    if len(applications) != len(wanted):
        return None

    now = datetime.now(timezone.utc)
    try:
        for application in applications:
            application.status = status
            application.reviewed_by = reviewer_id
            application.reviewed_at = now
            if feedback is not None:
                application.feedback = feedback
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return len(applications)


def save_screening(db: Session, application: JobApplication, result: ScreeningResult, commit: bool = True) -> None:
    application.screening_passed = result.passed
    application.screening_issues = list(result.issues)
    application.screening_recommendations = list(result.recommendations)
    application.screened_at = datetime.now(timezone.utc)
    if commit:
        try:
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
