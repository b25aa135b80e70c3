"""
API endpoints for job postings.

Two routers: venue-scoped management of postings, and the public job board
where applicants browse published postings and apply without an account.
"""

import logging
from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.celery_utils import queue_task_safely
from app.core.config import settings
from app.core.database import get_db
from app.core.deps import get_current_user, require_permission
from app.core.security import CurrentUser
from app.crud import application as application_crud
from app.crud import job_posting as job_crud
from app.models.job_posting import JobPostingStatus, ExperienceLevel
from app.models.staff import EmploymentType
from app.models.venue import Venue
from app.schemas.application import ApplicationSubmit, ApplicationSubmitResponse
from app.schemas.job_posting import (
    JobPostingCreate, JobPostingUpdate, JobPostingResponse, PublicJobPostingResponse
)
from app.services.listing import RecordQuery, apply_query, paginate
from app.services.permissions import PermissionName
from app.tasks import application_tasks

router = APIRouter(prefix="/venues/{venue_id}/jobs", tags=["Job Postings"])
public_router = APIRouter(prefix="/jobs", tags=["Job Board"])
logger = logging.getLogger(__name__)

JOB_SEARCH_FIELDS = ("title", "description", "department", "position", "location")
JOB_SORT_FIELDS = {
    "title", "department", "created_at", "expires_at", "salary_min", "salary_max",
    "applications_count", "views_count",
}


def _job_query(
    search: Optional[str],
    department: Optional[List[str]],
    employment_type: Optional[List[EmploymentType]],
    experience_level: Optional[List[ExperienceLevel]],
    min_salary: Optional[float],
    max_salary: Optional[float],
    sort_by: str,
    sort_order: str,
    status: Optional[List[JobPostingStatus]] = None,
) -> RecordQuery:
    if sort_by not in JOB_SORT_FIELDS:
        raise HTTPException(status_code=400, detail=f"Cannot sort job postings by '{sort_by}'")
    return RecordQuery(
        search=search,
        search_fields=JOB_SEARCH_FIELDS,
        memberships={
            "status": status or [],
            "department": department or [],
            "employment_type": employment_type or [],
            "experience_level": experience_level or [],
        },
        numeric_ranges={"salary_min": (min_salary, max_salary)},
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.get("", response_model=List[JobPostingResponse])
def list_job_postings(
    search: Optional[str] = None,
    status: Optional[List[JobPostingStatus]] = Query(None),
    department: Optional[List[str]] = Query(None),
    employment_type: Optional[List[EmploymentType]] = Query(None),
    experience_level: Optional[List[ExperienceLevel]] = Query(None),
    min_salary: Optional[float] = Query(None, ge=0),
    max_salary: Optional[float] = Query(None, ge=0),
    sort_by: str = "created_at",
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1),
    venue: Venue = Depends(require_permission(PermissionName.STAFF_VIEW)),
    db: Session = Depends(get_db),
):
    """List the venue's postings in any status. Salary bounds apply to salary_min."""
    query = _job_query(
        search, department, employment_type, experience_level,
        min_salary, max_salary, sort_by, sort_order, status=status,
    )
    postings = apply_query(job_crud.get_all(db, venue.id), query)
    return paginate(postings, skip, min(limit, settings.MAX_PAGE_SIZE))


@router.post("", status_code=201, response_model=JobPostingResponse)
def create_job_posting(
    job_data: JobPostingCreate,
    venue: Venue = Depends(require_permission(PermissionName.STAFF_CREATE)),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        posting = job_crud.create(db, venue.id, job_data, created_by=user.id)
    except SQLAlchemyError as e:
        logger.error(f"Error creating job posting at venue {venue.id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create job posting")
    logger.info(f"Created job posting {posting.id} ({posting.status.value}) at venue {venue.id}")
    return posting


@router.get("/{job_id}", response_model=JobPostingResponse)
def get_job_posting(
    job_id: UUID,
    venue: Venue = Depends(require_permission(PermissionName.STAFF_VIEW)),
    db: Session = Depends(get_db),
):
    posting = job_crud.get_by_id(db, venue.id, job_id)
    if not posting:
        raise HTTPException(status_code=404, detail="Job posting not found")
    return posting


@router.patch("/{job_id}", response_model=JobPostingResponse)
def update_job_posting(
    job_id: UUID,
    job_data: JobPostingUpdate,
    venue: Venue = Depends(require_permission(PermissionName.STAFF_EDIT)),
    db: Session = Depends(get_db),
):
    posting = job_crud.get_by_id(db, venue.id, job_id)
    if not posting:
        raise HTTPException(status_code=404, detail="Job posting not found")

    changes = job_data.model_dump(exclude_unset=True)
    salary_min = changes.get("salary_min", posting.salary_min)
    salary_max = changes.get("salary_max", posting.salary_max)
    if salary_min is not None and salary_max is not None and salary_min > salary_max:
        raise HTTPException(status_code=400, detail="salary_min cannot be greater than salary_max")

    try:
        return job_crud.update(db, posting, job_data)
    except SQLAlchemyError as e:
        logger.error(f"Error updating job posting {job_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update job posting")


@router.delete("/{job_id}", status_code=204)
def delete_job_posting(
    job_id: UUID,
    venue: Venue = Depends(require_permission(PermissionName.STAFF_DELETE)),
    db: Session = Depends(get_db),
):
    """Delete a posting together with its applications."""
    try:
        deleted = job_crud.delete(db, venue.id, job_id)
    except SQLAlchemyError as e:
        logger.error(f"Error deleting job posting {job_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete job posting")
    if not deleted:
        raise HTTPException(status_code=404, detail="Job posting not found")
    logger.info(f"Deleted job posting {job_id} from venue {venue.id}")
    return None


@public_router.get("", response_model=List[PublicJobPostingResponse])
def list_public_jobs(
    search: Optional[str] = None,
    department: Optional[List[str]] = Query(None),
    employment_type: Optional[List[EmploymentType]] = Query(None),
    experience_level: Optional[List[ExperienceLevel]] = Query(None),
    min_salary: Optional[float] = Query(None, ge=0),
    max_salary: Optional[float] = Query(None, ge=0),
    sort_by: str = "created_at",
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1),
    db: Session = Depends(get_db),
):
    """Published, unexpired postings across all venues. No token required."""
    query = _job_query(
        search, department, employment_type, experience_level,
        min_salary, max_salary, sort_by, sort_order,
    )
    postings = apply_query(job_crud.get_public(db), query)
    return paginate(postings, skip, min(limit, settings.MAX_PAGE_SIZE))


@public_router.get("/{job_id}", response_model=PublicJobPostingResponse)
def get_public_job(job_id: UUID, db: Session = Depends(get_db)):
    """A published posting. Each fetch counts as a view."""
    posting = job_crud.get_public_by_id(db, job_id)
    if not posting:
        raise HTTPException(status_code=404, detail="Job posting not found")
    try:
        return job_crud.increment_views(db, posting)
    except SQLAlchemyError as e:
        # a missed view count should not hide the posting
        logger.warning(f"Failed to count view for job posting {job_id}: {e}")
        db.refresh(posting)
        return posting


@public_router.post("/{job_id}/applications", status_code=201, response_model=ApplicationSubmitResponse)
def apply_to_job(
    job_id: UUID,
    application_data: ApplicationSubmit,
    db: Session = Depends(get_db),
):
    """
    Submit an application to a published posting.

    The application is stored as PENDING and screening is queued to the
    Celery worker. Screening results appear on the application once the
    worker has run.

    Raises:
        HTTPException 404: Posting does not exist, is not published or has expired
    """
    posting = job_crud.get_public_by_id(db, job_id)
    if not posting:
        raise HTTPException(status_code=404, detail="Job posting not found")

    try:
        application = application_crud.submit(db, posting, application_data)
    except SQLAlchemyError as e:
        logger.error(f"Error storing application for job posting {job_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to submit application")

    queued = queue_task_safely(application_tasks.screen_application_task, str(application.id))
    if not queued:
        logger.warning(f"Application {application.id} stored but screening was not queued")

    logger.info(f"Received application {application.id} for job posting {job_id}")
    return ApplicationSubmitResponse(
        application_id=application.id,
        status=application.status,
        message="Application submitted successfully",
    )
