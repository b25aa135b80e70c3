"""
CRUD operations for JobPosting model.

Implements the Repository pattern for venue-scoped postings and the public
job board reads.
"""

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.models.job_posting import JobPosting, JobPostingStatus
from app.schemas.job_posting import JobPostingCreate, JobPostingUpdate


def get_by_id(db: Session, venue_id: UUID, job_id: UUID) -> Optional[JobPosting]:
    return (
        db.query(JobPosting)
        .filter(JobPosting.id == job_id, JobPosting.venue_id == venue_id)
        .first()
    )


def get_all(db: Session, venue_id: UUID) -> List[JobPosting]:
    return (
        db.query(JobPosting)
        .filter(JobPosting.venue_id == venue_id)
        .order_by(JobPosting.created_at.desc())
        .all()
    )


def create(db: Session, venue_id: UUID, job_data: JobPostingCreate, created_by: UUID) -> JobPosting:
    """
    Create a new job posting.

    Args:
        db: Database session
        venue_id: Owning venue
        job_data: Validated posting data
        created_by: Auth user id of the creator

    Returns:
        Created JobPosting
    """
    posting = JobPosting(venue_id=venue_id, created_by=created_by, **job_data.model_dump())
    try:
        db.add(posting)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(posting)
    return posting


def update(db: Session, posting: JobPosting, job_data: JobPostingUpdate) -> JobPosting:
    for field, value in job_data.model_dump(exclude_unset=True).items():
        setattr(posting, field, value)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(posting)
    return posting


def delete(db: Session, venue_id: UUID, job_id: UUID) -> bool:
    """
    Delete a posting and its applications.

    Returns:
        True if deleted, False if not found
    """
    posting = get_by_id(db, venue_id, job_id)
    if not posting:
        return False
    try:
        db.delete(posting)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return True


def _public_filter(query, now: datetime):
    return query.filter(
        JobPosting.status == JobPostingStatus.PUBLISHED,
        or_(JobPosting.expires_at.is_(None), JobPosting.expires_at > now),
    )


def get_public(db: Session) -> List[JobPosting]:
    """Published postings that have not expired, newest first."""
    now = datetime.now(timezone.utc)
    return _public_filter(db.query(JobPosting), now).order_by(JobPosting.created_at.desc()).all()


def get_public_by_id(db: Session, job_id: UUID) -> Optional[JobPosting]:
    now = datetime.now(timezone.utc)
    return _public_filter(db.query(JobPosting).filter(JobPosting.id == job_id), now).first()


def increment_views(db: Session, posting: JobPosting) -> JobPosting:
    posting.views_count = JobPosting.views_count + 1
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(posting)
    return posting
