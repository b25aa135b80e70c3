"""
API endpoints for reviewing job applications.

Listing runs every filter in memory over the venue's applications (see
app.services.listing.filter_applications), then paginates.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.deps import get_current_user, require_permission
from app.core.security import CurrentUser
from app.crud import application as application_crud
from app.models.job_application import ApplicationStatus
from app.models.venue import Venue
from app.schemas.application import (
    ApplicationResponse,
    ApplicationReviewUpdate,
    BulkStatusResult,
    BulkStatusUpdate,
    DateRangeFilter,
    ScreeningResultResponse,
    ScreeningRunResponse,
)
from app.services.listing import filter_applications, paginate
from app.services.permissions import PermissionName
from app.services.screening import screen_application

router = APIRouter(prefix="/venues/{venue_id}/applications", tags=["Applications"])
logger = logging.getLogger(__name__)

APPLICATION_SORT_FIELDS = {"applied_at", "applicant_name", "applicant_email", "rating", "status", "reviewed_at"}


@router.get("", response_model=List[ApplicationResponse])
def list_applications(
    status: Optional[List[ApplicationStatus]] = Query(None),
    department: Optional[str] = None,
    job_posting_id: Optional[UUID] = None,
    date_range: DateRangeFilter = DateRangeFilter.ALL,
    has_resume: bool = False,
    has_cover_letter: bool = False,
    min_rating: Optional[int] = Query(None, ge=1, le=5),
    search: Optional[str] = None,
    sort_by: str = "applied_at",
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1),
    venue: Venue = Depends(require_permission(PermissionName.STAFF_VIEW)),
    db: Session = Depends(get_db),
):
    """
    List applications with the review filters.

    Args:
        status: Keep only these statuses (repeat the parameter for several)
        department: Department of the posting applied to
        date_range: today, week, month or all, measured back from now
        has_resume / has_cover_letter: Keep only applications that include one
        min_rating: Keep only rated applications at or above this rating
        search: Substring of applicant name, email or phone
    """
    if sort_by not in APPLICATION_SORT_FIELDS:
        raise HTTPException(status_code=400, detail=f"Cannot sort applications by '{sort_by}'")

    applications = filter_applications(
        application_crud.get_all(db, venue.id),
        now=datetime.now(timezone.utc),
        status=status,
        department=department,
        job_posting_id=job_posting_id,
        date_range=date_range.value,
        has_resume=has_resume,
        has_cover_letter=has_cover_letter,
        min_rating=min_rating,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return paginate(applications, skip, min(limit, settings.MAX_PAGE_SIZE))


@router.post("/bulk-status", response_model=BulkStatusResult)
def bulk_update_status(
    update: BulkStatusUpdate,
    venue: Venue = Depends(require_permission(PermissionName.STAFF_EDIT)),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Set one status on many applications.

    All or nothing: if any id is not an application of this venue, nothing
    is changed and 404 is returned.
    """
    try:
        updated = application_crud.bulk_update_status(
            db, venue.id, update.application_ids, update.status,
            reviewer_id=user.id, feedback=update.feedback,
        )
    except SQLAlchemyError as e:
        logger.error(f"Bulk status update failed at venue {venue.id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update applications")

    if updated is None:
        raise HTTPException(status_code=404, detail="One or more applications not found")

    logger.info(f"Set {updated} applications to {update.status.value} at venue {venue.id}")
    return BulkStatusResult(updated=updated, status=update.status)


@router.post("/screen", response_model=ScreeningRunResponse)
def run_screening(
    status: Optional[List[ApplicationStatus]] = Query(None),
    job_posting_id: Optional[UUID] = None,
    date_range: DateRangeFilter = DateRangeFilter.ALL,
    venue: Venue = Depends(require_permission(PermissionName.STAFF_EDIT)),
    db: Session = Depends(get_db),
):
    """
    Screen the filtered applications now and store each result.

    Unlike submission-time screening this runs in the request, so the
    reviewer sees results immediately.
    """
    applications = filter_applications(
        application_crud.get_all(db, venue.id),
        now=datetime.now(timezone.utc),
        status=status,
        job_posting_id=job_posting_id,
        date_range=date_range.value,
    )

    results = []
    try:
        for application in applications:
            result = screen_application(application, application.job_posting)
            application_crud.save_screening(db, application, result, commit=False)
            results.append(result)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Screening run failed at venue {venue.id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to save screening results")

    passed = sum(1 for r in results if r.passed)
    logger.info(f"Screened {len(results)} applications at venue {venue.id}: {passed} passed")
    return ScreeningRunResponse(
        screened=len(results),
        passed=passed,
        results=[
            ScreeningResultResponse(
                application_id=r.application_id,
                passed=r.passed,
                issues=r.issues,
                recommendations=r.recommendations,
            )
            for r in results
        ],
    )


@router.get("/{application_id}", response_model=ApplicationResponse)
def get_application(
    application_id: UUID,
    venue: Venue = Depends(require_permission(PermissionName.STAFF_VIEW)),
    db: Session = Depends(get_db),
):
    application = application_crud.get_by_id(db, venue.id, application_id)
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")
    return application


@router.patch("/{application_id}", response_model=ApplicationResponse)
def review_application(
    application_id: UUID,
    review: ApplicationReviewUpdate,
    venue: Venue = Depends(require_permission(PermissionName.STAFF_EDIT)),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update status, rating or feedback. Records the reviewer and review time."""
    application = application_crud.get_by_id(db, venue.id, application_id)
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")
    try:
        return application_crud.review(db, application, review, reviewer_id=user.id)
    except SQLAlchemyError as e:
        logger.error(f"Error reviewing application {application_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update application")
