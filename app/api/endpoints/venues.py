"""
API endpoints for venues, the tenant boundary.

Creating a venue makes the caller its owner and seeds the venue's roles and
default onboarding templates.
"""

import logging
from datetime import date
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_current_user, get_venue, require_permission
from app.core.security import CurrentUser
from app.crud import venue as venue_crud
from app.models.job_application import JobApplication, ApplicationStatus
from app.models.job_posting import JobPosting, JobPostingStatus
from app.models.shift import VenueShift, ShiftStatus, ShiftSwap, ShiftRequest, RequestStatus
from app.models.staff import StaffMember, StaffStatus
from app.models.venue import Venue
from app.schemas.venue import VenueCreate, VenueUpdate, VenueResponse, VenueDashboard
from app.services import permissions as permission_service
from app.services.permissions import PermissionName

router = APIRouter(prefix="/venues", tags=["Venues"])
logger = logging.getLogger(__name__)


@router.post("", status_code=201, response_model=VenueResponse)
def create_venue(
    venue_data: VenueCreate,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    """
    Create a venue owned by the caller.

    Raises:
        HTTPException 409: Slug already taken
    """
    if venue_crud.get_by_slug(db, venue_data.slug):
        raise HTTPException(status_code=409, detail=f"Venue slug '{venue_data.slug}' is already taken")

    try:
        return venue_crud.create(db, venue_data, owner_id=user.id)
    except IntegrityError:
        # lost a race on the slug
        raise HTTPException(status_code=409, detail=f"Venue slug '{venue_data.slug}' is already taken")
    except SQLAlchemyError as e:
        logger.error(f"Error creating venue {venue_data.slug}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create venue")


@router.get("", response_model=List[VenueResponse])
def list_venues(
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    """Venues the caller owns or holds an active role at."""
    venue_ids = permission_service.accessible_venue_ids(db, user.id)
    return venue_crud.get_multi_by_ids(db, venue_ids)


@router.get("/{venue_id}", response_model=VenueResponse)
def get_venue_detail(venue: Venue = Depends(get_venue)):
    return venue


@router.patch("/{venue_id}", response_model=VenueResponse)
def update_venue(
    venue_data: VenueUpdate,
    venue: Venue = Depends(require_permission(PermissionName.SETTINGS_EDIT_BASIC)),
    db: Session = Depends(get_db),
):
    try:
        return venue_crud.update(db, venue, venue_data)
    except SQLAlchemyError as e:
        logger.error(f"Error updating venue {venue.id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update venue")


@router.get("/{venue_id}/dashboard", response_model=VenueDashboard)
def get_dashboard(
    venue: Venue = Depends(require_permission(PermissionName.ANALYTICS_VIEW)),
    db: Session = Depends(get_db),
):
    """
    Headline counts for the venue dashboard.

    All counts or none: a failure in any one of them fails the request.
    """
    today = date.today()
    try:
        staff_total = db.query(func.count(StaffMember.id)).filter(
            StaffMember.venue_id == venue.id
        ).scalar()
        staff_active = db.query(func.count(StaffMember.id)).filter(
            StaffMember.venue_id == venue.id, StaffMember.status == StaffStatus.ACTIVE
        ).scalar()
        open_job_postings = db.query(func.count(JobPosting.id)).filter(
            JobPosting.venue_id == venue.id, JobPosting.status == JobPostingStatus.PUBLISHED
        ).scalar()
        status_rows = (
            db.query(JobApplication.status, func.count(JobApplication.id))
            .filter(JobApplication.venue_id == venue.id)
            .group_by(JobApplication.status)
            .all()
        )
        upcoming_shifts = db.query(func.count(VenueShift.id)).filter(
            VenueShift.venue_id == venue.id,
            VenueShift.shift_date >= today,
            VenueShift.shift_status != ShiftStatus.CANCELLED,
        ).scalar()
        open_shifts = db.query(func.count(VenueShift.id)).filter(
            VenueShift.venue_id == venue.id,
            VenueShift.shift_date >= today,
            VenueShift.shift_status == ShiftStatus.OPEN,
        ).scalar()
        pending_swaps = db.query(func.count(ShiftSwap.id)).filter(
            ShiftSwap.venue_id == venue.id, ShiftSwap.request_status == RequestStatus.PENDING
        ).scalar()
        pending_requests = db.query(func.count(ShiftRequest.id)).filter(
            ShiftRequest.venue_id == venue.id, ShiftRequest.request_status == RequestStatus.PENDING
        ).scalar()
    except SQLAlchemyError as e:
        logger.error(f"Failed to load dashboard for venue {venue.id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to load dashboard data")

    applications_by_status = {s.value: 0 for s in ApplicationStatus}
    for app_status, count in status_rows:
        applications_by_status[ApplicationStatus(app_status).value] = count

    return VenueDashboard(
        venue_id=venue.id,
        staff_total=staff_total or 0,
        staff_active=staff_active or 0,
        open_job_postings=open_job_postings or 0,
        pending_applications=applications_by_status[ApplicationStatus.PENDING.value],
        upcoming_shifts=upcoming_shifts or 0,
        open_shifts=open_shifts or 0,
        pending_swaps=pending_swaps or 0,
        pending_requests=pending_requests or 0,
        applications_by_status=applications_by_status,
    )
